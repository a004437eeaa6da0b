"""Core geometric types for drawn features and the drawing boundary.

This module defines the geometry values that flow through fencedraw:
- Position: A (longitude, latitude) pair
- PointGeometry: A single position
- LineStringGeometry: An ordered sequence of positions
- PolygonGeometry: An outer ring followed by optional holes
- UnsupportedGeometry: Any other GeoJSON geometry, carried but not processed

Coordinates always follow the GeoJSON convention of longitude first.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar

from shapely.geometry import LineString as ShapelyLineString
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from fencedraw.exceptions import InvalidGeometryError, UnsupportedGeometryError

Position = tuple[float, float]
Ring = tuple[Position, ...]


class GeometryType(str, Enum):
    """GeoJSON geometry type names handled by the engine."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"


def _position(value: Any, geometry_type: str) -> Position:
    try:
        lon, lat = float(value[0]), float(value[1])
    except (TypeError, IndexError, ValueError) as e:
        raise InvalidGeometryError(geometry_type, f"bad position {value!r}") from e
    return (lon, lat)


@dataclass(frozen=True, slots=True)
class PointGeometry:
    """A single position.

    Attributes:
        coordinates: (longitude, latitude)
    """

    GEOMETRY_TYPE: ClassVar[GeometryType] = GeometryType.POINT

    coordinates: Position

    @property
    def type(self) -> str:
        return self.GEOMETRY_TYPE.value

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a GeoJSON geometry dictionary."""
        return {"type": self.type, "coordinates": list(self.coordinates)}

    def to_shapely(self) -> ShapelyPoint:
        return ShapelyPoint(self.coordinates)


@dataclass(frozen=True, slots=True)
class LineStringGeometry:
    """An ordered sequence of positions.

    Attributes:
        coordinates: Vertices in drawing order
    """

    GEOMETRY_TYPE: ClassVar[GeometryType] = GeometryType.LINE_STRING

    coordinates: tuple[Position, ...]

    @property
    def type(self) -> str:
        return self.GEOMETRY_TYPE.value

    @property
    def start(self) -> Position:
        return self.coordinates[0]

    @property
    def end(self) -> Position:
        return self.coordinates[-1]

    def with_endpoints(self, start: Position, end: Position) -> "LineStringGeometry":
        """Return a copy with the first and last vertices replaced.

        Interior vertices and their order are kept.
        """
        if len(self.coordinates) < 2:
            return self
        inner = self.coordinates[1:-1]
        return replace(self, coordinates=(start, *inner, end))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a GeoJSON geometry dictionary."""
        return {"type": self.type, "coordinates": [list(c) for c in self.coordinates]}

    def to_shapely(self) -> ShapelyLineString:
        return ShapelyLineString(self.coordinates)


@dataclass(frozen=True, slots=True)
class PolygonGeometry:
    """A polygon made of closed rings.

    The first ring is the outer boundary, subsequent rings are holes.
    Each ring repeats its first position as its last one.

    Attributes:
        rings: Closed rings, outer ring first
    """

    GEOMETRY_TYPE: ClassVar[GeometryType] = GeometryType.POLYGON

    rings: tuple[Ring, ...]

    @property
    def type(self) -> str:
        return self.GEOMETRY_TYPE.value

    @property
    def outer_ring(self) -> Ring:
        return self.rings[0] if self.rings else ()

    @property
    def holes(self) -> tuple[Ring, ...]:
        return self.rings[1:]

    @classmethod
    def from_shapely(cls, polygon: ShapelyPolygon) -> "PolygonGeometry":
        """Build from a shapely polygon, keeping its ring orientation."""
        rings = [polygon.exterior, *polygon.interiors]
        return cls(
            rings=tuple(tuple((float(x), float(y)) for x, y, *_ in ring.coords) for ring in rings)
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a GeoJSON geometry dictionary."""
        return {
            "type": self.type,
            "coordinates": [[list(c) for c in ring] for ring in self.rings],
        }

    def to_shapely(self) -> ShapelyPolygon:
        if not self.rings:
            return ShapelyPolygon()
        return ShapelyPolygon(self.rings[0], self.rings[1:])


@dataclass(frozen=True, slots=True)
class UnsupportedGeometry:
    """A geometry type the engine does not process (MultiPoint, ...).

    Kept so that feature collections round-trip; every operation excludes it.
    """

    geometry_type: str
    coordinates: Any = None

    @property
    def type(self) -> str:
        return self.geometry_type

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.geometry_type, "coordinates": self.coordinates}

    def to_shapely(self) -> Any:
        raise UnsupportedGeometryError(self.geometry_type)


Geometry = PointGeometry | LineStringGeometry | PolygonGeometry | UnsupportedGeometry


def geometry_from_dict(data: dict[str, Any]) -> Geometry:
    """Deserialize a GeoJSON geometry dictionary.

    Args:
        data: Dictionary with ``type`` and ``coordinates`` members

    Returns:
        The matching geometry instance. Unknown types become
        UnsupportedGeometry rather than failing.

    Raises:
        InvalidGeometryError: If a supported type has malformed coordinates
    """
    geometry_type = data.get("type")
    coordinates = data.get("coordinates")

    if not isinstance(geometry_type, str):
        raise InvalidGeometryError(str(geometry_type), "missing geometry type")

    if geometry_type == GeometryType.POINT.value:
        return PointGeometry(_position(coordinates, geometry_type))

    if geometry_type == GeometryType.LINE_STRING.value:
        if not isinstance(coordinates, list) or len(coordinates) < 2:
            raise InvalidGeometryError(geometry_type, "needs at least 2 positions")
        return LineStringGeometry(tuple(_position(c, geometry_type) for c in coordinates))

    if geometry_type == GeometryType.POLYGON.value:
        if not isinstance(coordinates, list) or not coordinates:
            raise InvalidGeometryError(geometry_type, "needs at least one ring")
        rings: list[Ring] = []
        for raw_ring in coordinates:
            if not isinstance(raw_ring, list) or len(raw_ring) < 4:
                raise InvalidGeometryError(geometry_type, "rings need at least 4 positions")
            ring = tuple(_position(c, geometry_type) for c in raw_ring)
            if ring[0] != ring[-1]:
                raise InvalidGeometryError(geometry_type, "ring is not closed")
            rings.append(ring)
        return PolygonGeometry(tuple(rings))

    return UnsupportedGeometry(geometry_type, coordinates)

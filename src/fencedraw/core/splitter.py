"""Partition of the boundary into sub-polygons along cutting lines.

Workflow:
1. Keep LineString features as cutting lines
2. Extend each line so that its endpoints reach the boundary
3. Intersect each line with the boundary rings
4. Order the intersections along the line, pair them up and slice the line
   between each pair into a cut segment
5. Insert the intersections into the boundary rings, merge the rings with
   the cut segments and polygonize the result
6. Keep faces lying (almost) entirely inside the boundary

Any failure that affects a single line or a single face is logged and that
item is skipped. If face assembly fails as a whole, the boundary is returned
unchanged.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from shapely.errors import GEOSException
from shapely.geometry import LineString as ShapelyLineString
from shapely.ops import polygonize, unary_union

from fencedraw.config.settings import (
    DEFAULT_BOUNDARY_EPSILON_KM,
    DEFAULT_MAX_EXTENSION_KM,
    DEFAULT_MIN_OVERLAP_PERCENT,
    DEFAULT_NO_SPLIT_AREA_TOLERANCE,
    ExtensionConfig,
    SplitConfig,
)
from fencedraw.core.extender import BoundaryEdges, boundary_edges, ensure_line_reaches_boundary
from fencedraw.core.geometry import cumulative_lengths, geodesic_area, polyline_crossings
from fencedraw.domain import (
    Feature,
    LineStringGeometry,
    PolygonGeometry,
    Position,
    SubPolygon,
    UnsupportedGeometry,
)

logger = logging.getLogger(__name__)

# Two intersections closer than this (in degrees, along the line) are the
# same point reached through two adjacent segments.
_DUPLICATE_TOLERANCE = 1e-12


@dataclass(frozen=True, slots=True)
class BoundaryHit:
    """Intersection of a cutting line with a boundary ring.

    Attributes:
        position: Intersection point
        along: Planar distance from the line's first vertex
        ring: Index of the ring in the boundary
        edge: Index of the ring segment that was crossed
        edge_u: Parameter along that ring segment
    """

    position: Position
    along: float
    ring: int
    edge: int
    edge_u: float


def find_boundary_hits(line: tuple[Position, ...], edges: BoundaryEdges) -> list[BoundaryHit]:
    """Intersect a line with every boundary ring.

    Returns:
        Hits ordered by distance along the line, without duplicates
    """
    lengths = cumulative_lengths(line)
    hits: list[BoundaryHit] = []
    for ring_index, ring in enumerate(edges):
        for crossing in polyline_crossings(line, ring):
            i = crossing.line_segment
            along = lengths[i] + crossing.line_t * (lengths[i + 1] - lengths[i])
            hits.append(
                BoundaryHit(crossing.position, along, ring_index, crossing.other_segment, crossing.other_u)
            )

    hits.sort(key=lambda h: h.along)

    unique: list[BoundaryHit] = []
    for hit in hits:
        if unique and (
            hit.position == unique[-1].position
            or abs(hit.along - unique[-1].along) <= _DUPLICATE_TOLERANCE
        ):
            continue
        unique.append(hit)
    return unique


def slice_line(
    line: tuple[Position, ...], start: BoundaryHit, end: BoundaryHit
) -> tuple[Position, ...]:
    """Cut the part of a line between two hits.

    The result starts and ends exactly on the hit positions and keeps the
    line's vertices in between.
    """
    lengths = cumulative_lengths(line)
    coords: list[Position] = [start.position]
    for vertex, along in zip(line, lengths):
        if start.along < along < end.along and vertex != coords[-1]:
            coords.append(vertex)
    if end.position != coords[-1]:
        coords.append(end.position)
    return tuple(coords)


def cut_segments(line: tuple[Position, ...], hits: list[BoundaryHit]) -> list[tuple[Position, ...]]:
    """Slice a line between consecutive pairs of hits (1st-2nd, 3rd-4th, ...).

    An unpaired trailing hit is ignored.
    """
    segments: list[tuple[Position, ...]] = []
    for i in range(0, len(hits) - 1, 2):
        segment = slice_line(line, hits[i], hits[i + 1])
        if len(segment) > 1:
            segments.append(segment)
    return segments


def node_rings(edges: BoundaryEdges, hits: Iterable[BoundaryHit]) -> list[tuple[Position, ...]]:
    """Insert hit positions into the rings they lie on.

    Cut segments end exactly on these positions, so the merged linework is
    connected where the cuts meet the boundary.
    """
    by_edge: dict[tuple[int, int], list[BoundaryHit]] = defaultdict(list)
    for hit in hits:
        by_edge[(hit.ring, hit.edge)].append(hit)

    noded: list[tuple[Position, ...]] = []
    for ring_index, ring in enumerate(edges):
        coords: list[Position] = [ring[0]]
        for k in range(len(ring) - 1):
            for hit in sorted(by_edge.get((ring_index, k), []), key=lambda h: h.edge_u):
                if hit.position != coords[-1] and hit.position != ring[k + 1]:
                    coords.append(hit.position)
            if ring[k + 1] != coords[-1]:
                coords.append(ring[k + 1])
        noded.append(tuple(coords))
    return noded


def split(
    boundary: PolygonGeometry,
    cutting_features: Iterable[Feature],
    epsilon_km: float = DEFAULT_BOUNDARY_EPSILON_KM,
    max_extension_km: float = DEFAULT_MAX_EXTENSION_KM,
    min_overlap_percent: float = DEFAULT_MIN_OVERLAP_PERCENT,
    no_split_area_tolerance: float = DEFAULT_NO_SPLIT_AREA_TOLERANCE,
) -> list[SubPolygon]:
    """Split the boundary into sub-polygons along cutting lines.

    Args:
        boundary: Polygon to partition
        cutting_features: Drawn features; only LineStrings cut
        epsilon_km: Endpoint-on-boundary tolerance for line extension
        max_extension_km: Maximum line extension
        min_overlap_percent: Faces must overlap the boundary by more than this
        no_split_area_tolerance: Relative area difference used to detect a
            cut that did not split anything

    Returns:
        Sub-polygons in face assembly order, or ``[boundary]`` when the
        lines do not split it
    """
    whole = [SubPolygon(polygon=boundary, overlap_percent=100.0)]

    lines: list[LineStringGeometry] = []
    for feature in cutting_features:
        if isinstance(feature.geometry, LineStringGeometry):
            lines.append(feature.geometry)
        elif isinstance(feature.geometry, UnsupportedGeometry):
            logger.warning(
                "Ignoring feature %s with unsupported geometry %s", feature.id, feature.geometry.type
            )

    if not lines:
        logger.info("No linestrings found to cut the boundary")
        return whole

    edges = boundary_edges(boundary)
    segments: list[tuple[Position, ...]] = []
    used_hits: list[BoundaryHit] = []

    for index, line in enumerate(lines):
        try:
            extended = ensure_line_reaches_boundary(line, edges, epsilon_km, max_extension_km)
            hits = find_boundary_hits(extended.coordinates, edges)
            if len(hits) < 2:
                logger.debug("Line %d crosses the boundary %d time(s), skipped", index, len(hits))
                continue
            line_segments = cut_segments(extended.coordinates, hits)
        except Exception as e:
            logger.warning("Error slicing line %d: %s", index, e)
            continue
        segments.extend(line_segments)
        used_hits.extend(hits)

    if not segments:
        logger.info("No valid cutting segments found")
        return whole

    boundary_shape = boundary.to_shapely()

    try:
        linework = [ShapelyLineString(ring) for ring in node_rings(edges, used_hits)]
        linework.extend(ShapelyLineString(segment) for segment in segments)
        faces = list(polygonize(unary_union(linework)))
    except (GEOSException, ValueError) as e:
        logger.error("Error during polygonize: %s", e)
        return whole

    if not faces:
        logger.info("Polygonize returned no polygons")
        return whole

    result: list[SubPolygon] = []
    for face_index, face in enumerate(faces):
        try:
            if face.area <= 0:
                continue
            overlap = face.intersection(boundary_shape).area / face.area * 100.0
            if overlap > min_overlap_percent:
                result.append(SubPolygon(PolygonGeometry.from_shapely(face), overlap))
        except (GEOSException, ValueError) as e:
            logger.warning("Error measuring face %d: %s", face_index, e)

    if not result:
        logger.info("No valid sub-polygons found within boundary")
        return whole

    if len(result) == 1:
        boundary_area = geodesic_area(boundary_shape)
        single_area = geodesic_area(result[0].polygon.to_shapely())
        if abs(single_area - boundary_area) < boundary_area * no_split_area_tolerance:
            logger.warning(
                "The cutting operation did not create distinct sub-polygons "
                "(areas are nearly identical)"
            )

    logger.info("Found %d sub-polygons after cutting", len(result))
    return result


class SubpolygonSplitter:
    """Splits boundaries using configured tolerances.

    Example:
        splitter = SubpolygonSplitter(settings.split, settings.extension)
        parts = splitter.split(boundary, features)
    """

    def __init__(
        self,
        config: SplitConfig | None = None,
        extension: ExtensionConfig | None = None,
    ) -> None:
        self.config = config or SplitConfig()
        self.extension = extension or ExtensionConfig()

    def split(self, boundary: PolygonGeometry, cutting_features: Iterable[Feature]) -> list[SubPolygon]:
        return split(
            boundary,
            cutting_features,
            epsilon_km=self.extension.boundary_epsilon_km,
            max_extension_km=self.extension.max_extension_km,
            min_overlap_percent=self.config.min_overlap_percent,
            no_split_area_tolerance=self.config.no_split_area_tolerance,
        )

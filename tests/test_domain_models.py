"""Tests for domain models to verify they work correctly."""

import pytest

from fencedraw.domain import (
    EditPhase,
    Feature,
    GeometryType,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    SubPolygon,
    UnsupportedGeometry,
    ValidationResult,
    geometry_from_dict,
    make_feature,
)
from fencedraw.exceptions import InvalidGeometryError, UnsupportedGeometryError

SQUARE = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0))


class TestPointGeometry:
    """Tests for PointGeometry class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        point = PointGeometry((-61.7, 16.1))
        assert point.coordinates == (-61.7, 16.1)
        assert point.type == "Point"

    def test_point_to_dict(self) -> None:
        """Test point serialization."""
        point = PointGeometry((1.5, 2.5))
        assert point.to_dict() == {"type": "Point", "coordinates": [1.5, 2.5]}

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        point = PointGeometry((1.0, 2.0))
        with pytest.raises(AttributeError):
            point.coordinates = (3.0, 4.0)  # type: ignore


class TestLineStringGeometry:
    """Tests for LineStringGeometry class."""

    def test_start_and_end(self) -> None:
        """Test endpoint accessors."""
        line = LineStringGeometry(((0.0, 0.0), (1.0, 1.0), (2.0, 0.0)))
        assert line.start == (0.0, 0.0)
        assert line.end == (2.0, 0.0)

    def test_with_endpoints_keeps_interior(self) -> None:
        """Test that replacing endpoints keeps interior vertices in order."""
        line = LineStringGeometry(((0.0, 0.0), (1.0, 1.0), (2.0, 0.0)))
        moved = line.with_endpoints((-1.0, 0.0), (3.0, 0.0))

        assert moved.coordinates == ((-1.0, 0.0), (1.0, 1.0), (3.0, 0.0))
        assert line.coordinates[0] == (0.0, 0.0)

    def test_to_shapely(self) -> None:
        """Test conversion to a shapely LineString."""
        line = LineStringGeometry(((0.0, 0.0), (3.0, 4.0)))
        assert line.to_shapely().length == pytest.approx(5.0)


class TestPolygonGeometry:
    """Tests for PolygonGeometry class."""

    def test_outer_ring_and_holes(self) -> None:
        """Test ring accessors."""
        hole = ((0.4, 0.4), (0.6, 0.4), (0.6, 0.6), (0.4, 0.4))
        polygon = PolygonGeometry((SQUARE, hole))
        assert polygon.outer_ring == SQUARE
        assert polygon.holes == (hole,)

    def test_shapely_conversion(self) -> None:
        """Test conversion to and from shapely keeps the rings."""
        polygon = PolygonGeometry((SQUARE,))
        shape = polygon.to_shapely()
        assert shape.area == pytest.approx(1.0)

        restored = PolygonGeometry.from_shapely(shape)
        assert restored.outer_ring == SQUARE

    def test_empty_polygon(self) -> None:
        """Test a polygon without rings."""
        polygon = PolygonGeometry(())
        assert polygon.outer_ring == ()
        assert polygon.to_shapely().is_empty


class TestGeometryFromDict:
    """Tests for geometry_from_dict."""

    def test_point(self) -> None:
        """Test deserializing a point."""
        geometry = geometry_from_dict({"type": "Point", "coordinates": [1, 2]})
        assert geometry == PointGeometry((1.0, 2.0))

    def test_line_string(self) -> None:
        """Test deserializing a line."""
        geometry = geometry_from_dict({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
        assert isinstance(geometry, LineStringGeometry)
        assert geometry.type == GeometryType.LINE_STRING.value

    def test_polygon(self) -> None:
        """Test deserializing a polygon."""
        data = {"type": "Polygon", "coordinates": [[list(c) for c in SQUARE]]}
        geometry = geometry_from_dict(data)
        assert geometry == PolygonGeometry((SQUARE,))

    def test_unknown_type_is_carried(self) -> None:
        """Test that unknown types are kept as UnsupportedGeometry."""
        data = {"type": "MultiPoint", "coordinates": [[0, 0], [1, 1]]}
        geometry = geometry_from_dict(data)
        assert isinstance(geometry, UnsupportedGeometry)
        assert geometry.type == "MultiPoint"
        assert geometry.to_dict() == data

    def test_unsupported_has_no_shape(self) -> None:
        """Test that UnsupportedGeometry cannot be converted to shapely."""
        geometry = UnsupportedGeometry("MultiPolygon", [])
        with pytest.raises(UnsupportedGeometryError):
            geometry.to_shapely()

    def test_short_line_rejected(self) -> None:
        """Test that a line needs two positions."""
        with pytest.raises(InvalidGeometryError, match="at least 2"):
            geometry_from_dict({"type": "LineString", "coordinates": [[0, 0]]})

    def test_open_ring_rejected(self) -> None:
        """Test that polygon rings must be closed."""
        ring = [[0, 0], [1, 0], [1, 1], [0, 1]]
        with pytest.raises(InvalidGeometryError, match="not closed"):
            geometry_from_dict({"type": "Polygon", "coordinates": [ring + [[0, 0.5]]]})

    def test_bad_position_rejected(self) -> None:
        """Test that positions must be numeric pairs."""
        with pytest.raises(InvalidGeometryError, match="bad position"):
            geometry_from_dict({"type": "Point", "coordinates": ["a"]})

    def test_missing_type_rejected(self) -> None:
        """Test that a geometry type is required."""
        with pytest.raises(InvalidGeometryError):
            geometry_from_dict({"coordinates": [0, 0]})


class TestFeature:
    """Tests for Feature class."""

    def test_property_accessors(self) -> None:
        """Test the store properties read by the engine."""
        feature = Feature(
            id="a",
            geometry=PointGeometry((0.0, 0.0)),
            properties={"mode": "point", "isDraggable": True, "existing": True},
        )
        assert feature.mode == "point"
        assert feature.is_draggable
        assert feature.is_existing
        assert not feature.is_overlay

    def test_render_mode_is_overlay(self) -> None:
        """Test that render-mode features are overlays."""
        feature = make_feature(PointGeometry((0.0, 0.0)), mode="render")
        assert feature.is_overlay

    def test_terraformer_marker_is_overlay(self) -> None:
        """Test that store-internal shapes are overlays."""
        feature = Feature("t", PointGeometry((0.0, 0.0)), {"mode": "circle", "_terraformer": True})
        assert feature.is_overlay

    def test_make_feature_tags(self) -> None:
        """Test that make_feature sets mode and draggability."""
        feature = make_feature(
            PointGeometry((0.0, 0.0)),
            mode="polygon",
            draggable=False,
            feature_id="f1",
            properties={"name": "x"},
        )
        assert feature.id == "f1"
        assert feature.properties == {"name": "x", "mode": "polygon", "isDraggable": False}

    def test_make_feature_generates_id(self) -> None:
        """Test that features get distinct generated ids."""
        a = make_feature(PointGeometry((0.0, 0.0)))
        b = make_feature(PointGeometry((0.0, 0.0)))
        assert a.id != b.id

    def test_copy_is_deep(self) -> None:
        """Test that a copy does not share the property map."""
        feature = Feature("a", PointGeometry((0.0, 0.0)), {"tags": ["x"]})
        copied = feature.copy()
        copied.properties["tags"].append("y")
        assert feature.properties["tags"] == ["x"]

    def test_with_geometry(self) -> None:
        """Test replacing the geometry keeps id and properties."""
        feature = Feature("a", PointGeometry((0.0, 0.0)), {"mode": "point"})
        moved = feature.with_geometry(PointGeometry((1.0, 1.0)))
        assert moved.id == "a"
        assert moved.properties == {"mode": "point"}
        assert feature.geometry == PointGeometry((0.0, 0.0))

    def test_feature_serialization(self) -> None:
        """Test feature serialization and deserialization."""
        f1 = Feature("a", LineStringGeometry(((0.0, 0.0), (1.0, 1.0))), {"mode": "linestring"})
        f2 = Feature.from_dict(f1.to_dict())
        assert f2 == f1

    def test_from_dict_without_id(self) -> None:
        """Test that a missing id is generated."""
        feature = Feature.from_dict({"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}})
        assert feature.id
        assert feature.properties == {}


class TestEditPhase:
    """Tests for EditPhase mapping."""

    @pytest.mark.parametrize("update_type", ["finish", "commit"])
    def test_committing_update_types(self, update_type: str) -> None:
        """Test update types that end a gesture."""
        assert EditPhase.from_update_type(update_type) is EditPhase.COMMITTING

    @pytest.mark.parametrize("update_type", ["provisional", None, ""])
    def test_drafting_update_types(self, update_type: str | None) -> None:
        """Test every other update type is a draft."""
        assert EditPhase.from_update_type(update_type) is EditPhase.DRAFTING


class TestResults:
    """Tests for engine result types."""

    def test_validation_result(self) -> None:
        """Test valid and invalid results."""
        assert ValidationResult.ok().to_dict() == {"valid": True}
        failed = ValidationResult.fail("outside")
        assert not failed.valid
        assert failed.to_dict() == {"valid": False, "reason": "outside"}

    def test_subpolygon_feature_dict(self) -> None:
        """Test sub-polygon serialization as a feature."""
        part = SubPolygon(PolygonGeometry((SQUARE,)), overlap_percent=99.123456)
        data = part.to_feature_dict(3)
        assert data["id"] == "subpolygon-3"
        assert data["geometry"]["type"] == "Polygon"
        assert data["properties"] == {"overlap_percent": 99.1235}

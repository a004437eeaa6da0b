"""Integration tests for the drawing session over an in-memory store."""

import pytest

from fencedraw.config import FencedrawSettings, SnapConfig
from fencedraw.core import DrawingSession
from fencedraw.core.validator import REASON_POINT_OUTSIDE
from fencedraw.domain import LineStringGeometry, PointGeometry, PolygonGeometry, make_feature
from fencedraw.store import FeatureHistory, InMemoryFeatureStore

RING = ((0.0, 0.0), (0.1, 0.0), (0.1, 0.1), (0.0, 0.1), (0.0, 0.0))
BOUNDARY = PolygonGeometry((RING,))


def linear_projector(position):
    """One pixel per ten-thousandth of a degree."""
    return (position[0] * 10000.0, -position[1] * 10000.0)


def make_session(**snap_options) -> DrawingSession:
    settings = FencedrawSettings(snap=SnapConfig(**snap_options))
    return DrawingSession(InMemoryFeatureStore(), linear_projector, settings, boundary=BOUNDARY)


def drawn_point(feature_id: str, x: float, y: float):
    return make_feature(PointGeometry((x, y)), mode="point", feature_id=feature_id)


class TestOptions:
    """Tests for option setters and observers."""

    def test_observer_called_once_per_change(self) -> None:
        """Test observers see each actual change with old and new values."""
        session = make_session()
        calls = []
        session.subscribe(lambda option, old, new: calls.append((option, old, new)))

        session.set_snap_to_boundary(True)
        session.set_snap_to_boundary(True)
        session.toggle_snap_to_features()

        assert calls == [
            ("snap_to_boundary", False, True),
            ("snap_to_features", False, True),
        ]

    def test_unsubscribe(self) -> None:
        """Test an unsubscribed observer is no longer called."""
        session = make_session()
        calls = []
        unsubscribe = session.subscribe(lambda *args: calls.append(args))
        unsubscribe()
        session.toggle_boundary_visibility()
        assert calls == []

    def test_boundary_overlay(self) -> None:
        """Test showing the boundary keeps a render-only copy in the store."""
        session = make_session()
        session.set_show_boundary(True)

        overlay = session.store.get_feature(session.boundary_feature_id)
        assert overlay is not None
        assert overlay.is_overlay
        assert overlay.geometry == BOUNDARY
        assert session.drawn_features() == []

        session.toggle_boundary_visibility()
        assert session.store.get_feature(session.boundary_feature_id) is None

    def test_update_boundary(self) -> None:
        """Test replacing the boundary refreshes the overlay and notifies."""
        session = make_session()
        session.set_show_boundary(True)
        calls = []
        session.subscribe(lambda option, old, new: calls.append(option))

        smaller = PolygonGeometry((((0.0, 0.0), (0.05, 0.0), (0.05, 0.05), (0.0, 0.0)),))
        session.update_boundary(smaller)

        assert session.boundary == smaller
        assert session.store.get_feature(session.boundary_feature_id).geometry == smaller
        assert calls == ["boundary"]

    def test_clear_boundary(self) -> None:
        """Test removing the boundary removes the overlay."""
        session = make_session()
        session.set_show_boundary(True)
        session.update_boundary(None)
        assert session.store.get_feature(session.boundary_feature_id) is None
        assert session.validate(drawn_point("a", 5.0, 5.0)).valid


class TestSnapping:
    """Tests for session snapping."""

    def test_disabled_by_default(self) -> None:
        """Test nothing snaps until a snap option is switched on."""
        session = make_session()
        assert not session.snapping_enabled
        assert session.snap((0.05, 0.001)) is None
        assert session.nearest_snap_point is None

    def test_snap_to_boundary(self) -> None:
        """Test the cursor snaps onto the boundary edge."""
        session = make_session(snap_to_boundary=True)
        snapped = session.snap((0.05, 0.001))
        assert snapped == pytest.approx((0.05, 0.0))
        assert session.nearest_snap_point == snapped
        assert session.session_logger.stats.snaps == 1

    def test_overlay_is_not_a_feature_target(self) -> None:
        """Test the visible boundary copy does not attract the cursor."""
        session = make_session(snap_to_features=True)
        session.set_show_boundary(True)
        assert session.snap((0.05, 0.001)) is None

    def test_snap_to_drawn_line(self) -> None:
        """Test drawn lines are snap targets."""
        session = make_session(snap_to_features=True)
        line = make_feature(LineStringGeometry(((0.0, 0.05), (0.1, 0.05))), mode="linestring")
        session.add_features([line], FeatureHistory())
        assert session.snap((0.03, 0.051)) == pytest.approx((0.03, 0.05))


class TestValidation:
    """Tests for session validation."""

    def test_drafting(self) -> None:
        """Test drafts are checked against the boundary."""
        session = make_session()
        result = session.validate(drawn_point("a", 0.2, 0.05))
        assert not result.valid
        assert result.reason == REASON_POINT_OUTSIDE
        assert session.session_logger.stats.rejections == 1

    def test_commit_update_types(self) -> None:
        """Test finished gestures are only checked for structure."""
        session = make_session()
        assert session.validate(drawn_point("a", 0.2, 0.05), "finish").valid
        assert session.validate(drawn_point("a", 0.2, 0.05), "commit").valid

    def test_existing_features(self) -> None:
        """Test loaded features are exempt from the boundary."""
        session = make_session()
        history = FeatureHistory()
        session.load_existing([drawn_point("old", 5.0, 5.0)], history)

        stored = session.store.get_feature("old")
        assert stored.is_existing
        assert session.validate(stored).valid
        assert history.versions("old") == 1


class TestOnFinish:
    """Tests for end-of-gesture handling."""

    def test_drag_outside_is_reverted(self) -> None:
        """Test a drag leaving the boundary restores the previous state."""
        session = make_session()
        history = FeatureHistory()
        session.add_features([drawn_point("a", 0.05, 0.05)], history)

        session.store.replace_feature(drawn_point("a", 0.5, 0.5))
        outcome = session.on_finish("a", "dragFeature", "select", history)

        assert outcome.reverted
        assert outcome.reason == REASON_POINT_OUTSIDE
        restored = session.store.get_feature("a")
        assert restored.geometry == PointGeometry((0.05, 0.05))
        assert restored.is_draggable
        assert restored.mode == "point"
        assert history.versions("a") == 1
        assert session.session_logger.stats.reverts == 1

    def test_drag_without_history_removes_feature(self) -> None:
        """Test a rejected drag with no recorded state removes the feature."""
        session = make_session()
        session.store.add_features([drawn_point("a", 0.5, 0.5)])

        outcome = session.on_finish("a", "dragCoordinate", "select", FeatureHistory())

        assert outcome.reverted
        assert session.store.get_feature("a") is None
        assert outcome.features == []

    def test_valid_drag_is_recorded(self) -> None:
        """Test an accepted drag becomes a new history version."""
        session = make_session()
        history = FeatureHistory()
        session.add_features([drawn_point("a", 0.05, 0.05)], history)

        session.store.replace_feature(drawn_point("a", 0.06, 0.06))
        outcome = session.on_finish("a", "dragFeature", "select", history)

        assert not outcome.reverted
        assert history.versions("a") == 2
        assert history.latest("a").geometry == PointGeometry((0.06, 0.06))

    def test_other_actions_not_validated(self) -> None:
        """Test only drags in select mode are validated."""
        session = make_session()
        history = FeatureHistory()
        session.store.add_features([drawn_point("a", 0.5, 0.5)])

        outcome = session.on_finish("a", "draw", "point", history)
        assert not outcome.reverted
        assert session.store.get_feature("a") is not None

        outcome = session.on_finish("a", "dragFeature", "polygon", history)
        assert not outcome.reverted

    def test_unchanged_features_not_rerecorded(self) -> None:
        """Test finishing twice does not duplicate history entries."""
        session = make_session()
        history = FeatureHistory()
        session.add_features([drawn_point("a", 0.05, 0.05)], history)

        session.on_finish("a", "draw", "point", history)
        session.on_finish("a", "draw", "point", history)
        assert history.versions("a") == 1

    def test_overlay_never_recorded(self) -> None:
        """Test the boundary overlay stays out of history."""
        session = make_session()
        session.set_show_boundary(True)
        history = FeatureHistory()
        session.on_finish("x", "draw", "point", history)
        assert session.boundary_feature_id not in history


class TestSubpolygons:
    """Tests for session splitting."""

    def test_split_drawn_lines(self) -> None:
        """Test the drawn lines split the session boundary."""
        session = make_session()
        session.set_show_boundary(True)
        line = make_feature(LineStringGeometry(((0.05, 0.0), (0.05, 0.1))), mode="linestring")
        session.add_features([line], FeatureHistory())

        parts = session.subpolygons()
        assert len(parts) == 2
        assert session.session_logger.stats.splits == 1
        assert session.session_logger.stats.subpolygons == 2

    def test_explicit_inputs(self) -> None:
        """Test a boundary and features can be passed explicitly."""
        session = DrawingSession(InMemoryFeatureStore(), linear_projector)
        line = make_feature(LineStringGeometry(((0.05, 0.0), (0.05, 0.1))), mode="linestring")
        assert len(session.subpolygons(BOUNDARY, [line])) == 2

    def test_no_boundary(self) -> None:
        """Test nothing is split without a boundary."""
        session = DrawingSession(InMemoryFeatureStore(), linear_projector)
        assert session.subpolygons() == []

    def test_no_lines(self) -> None:
        """Test the boundary comes back whole without lines."""
        session = make_session()
        parts = session.subpolygons()
        assert [p.polygon for p in parts] == [BOUNDARY]

"""Unit tests for the feature store adapter and edit history."""

from fencedraw.domain import PointGeometry, ValidationResult, make_feature
from fencedraw.store import FeatureHistory, FeatureStore, InMemoryFeatureStore


def point(feature_id: str, x: float = 0.5, y: float = 0.5, mode: str = "point"):
    return make_feature(PointGeometry((x, y)), mode=mode, feature_id=feature_id)


class TestInMemoryFeatureStore:
    """Tests for InMemoryFeatureStore."""

    def test_implements_port(self) -> None:
        """Test the adapter satisfies the FeatureStore protocol."""
        assert isinstance(InMemoryFeatureStore(), FeatureStore)

    def test_add_and_get(self) -> None:
        """Test added features can be read back."""
        store = InMemoryFeatureStore()
        results = store.add_features([point("a"), point("b")])

        assert [r.valid for r in results] == [True, True]
        assert len(store) == 2
        assert "a" in store
        assert store.get_feature("a").geometry == PointGeometry((0.5, 0.5))
        assert [f.id for f in store.get_snapshot()] == ["a", "b"]

    def test_duplicate_rejected(self) -> None:
        """Test adding an existing id is rejected."""
        store = InMemoryFeatureStore()
        store.add_features([point("a")])
        results = store.add_features([point("a", 0.1, 0.1)])

        assert not results[0].valid
        assert results[0].reason == "Feature already exists"
        assert store.get_feature("a").geometry == PointGeometry((0.5, 0.5))

    def test_validation_callable(self) -> None:
        """Test the validation callable screens drawn features."""
        store = InMemoryFeatureStore(validation=lambda f: ValidationResult.fail("no"))
        results = store.add_features([point("a")])

        assert not results[0].valid
        assert results[0].reason == "no"
        assert "a" not in store

    def test_overlay_bypasses_validation(self) -> None:
        """Test render-only overlays are always accepted."""
        store = InMemoryFeatureStore(validation=lambda f: ValidationResult.fail("no"))
        results = store.add_features([point("overlay", mode="render")])
        assert results[0].valid

    def test_snapshot_is_a_copy(self) -> None:
        """Test mutating a snapshot does not change the store."""
        store = InMemoryFeatureStore()
        store.add_features([point("a")])
        snapshot = store.get_snapshot()
        snapshot[0].properties["mode"] = "changed"

        assert store.get_feature("a").mode == "point"

    def test_remove(self) -> None:
        """Test removal, including unknown ids."""
        store = InMemoryFeatureStore()
        store.add_features([point("a")])
        store.remove_features(["a", "unknown"])

        assert len(store) == 0
        assert store.get_feature("a") is None

    def test_replace(self) -> None:
        """Test a feature can be overwritten in place."""
        store = InMemoryFeatureStore()
        store.add_features([point("a")])
        store.replace_feature(point("a", 0.9, 0.9))
        assert store.get_feature("a").geometry == PointGeometry((0.9, 0.9))


class TestFeatureHistory:
    """Tests for FeatureHistory."""

    def test_versions(self) -> None:
        """Test versions start at 1 and grow with every record."""
        history = FeatureHistory()
        assert history.record(point("a")) == 1
        assert history.record(point("a", 0.2, 0.2)) == 2
        assert history.versions("a") == 2
        assert history.versions("b") == 0
        assert "a" in history
        assert len(history) == 1

    def test_latest_and_get(self) -> None:
        """Test reading back recorded states."""
        history = FeatureHistory()
        history.record(point("a"))
        history.record(point("a", 0.2, 0.2))

        assert history.latest("a").geometry == PointGeometry((0.2, 0.2))
        assert history.get("a", 1).geometry == PointGeometry((0.5, 0.5))
        assert history.get("a", 3) is None
        assert history.get("a", 0) is None
        assert history.latest("missing") is None

    def test_records_are_copies(self) -> None:
        """Test later changes to a feature do not rewrite history."""
        history = FeatureHistory()
        feature = point("a")
        history.record(feature)
        feature.properties["mode"] = "changed"

        latest = history.latest("a")
        latest.properties["mode"] = "also changed"
        assert history.latest("a").mode == "point"

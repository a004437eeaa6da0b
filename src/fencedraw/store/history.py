"""Versioned feature history owned by the caller.

When a drag leaves the boundary the session restores the feature as it was
before the drag. Instead of keeping a hidden cache, the session is handed
this history and records the accepted state of every drawn feature in it.
"""

from fencedraw.domain import Feature


class FeatureHistory:
    """Accepted feature states, versioned per feature identifier.

    Versions start at 1 and increase with every record.

    Example:
        history = FeatureHistory()
        version = history.record(feature)
        previous = history.latest(feature.id)
    """

    def __init__(self) -> None:
        self._versions: dict[str, list[Feature]] = {}

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._versions

    def __len__(self) -> int:
        return len(self._versions)

    def record(self, feature: Feature) -> int:
        """Store a copy of the feature and return its version number."""
        versions = self._versions.setdefault(feature.id, [])
        versions.append(feature.copy())
        return len(versions)

    def latest(self, feature_id: str) -> Feature | None:
        """Most recently recorded state, or None if never recorded."""
        versions = self._versions.get(feature_id)
        return versions[-1].copy() if versions else None

    def get(self, feature_id: str, version: int) -> Feature | None:
        """Recorded state at a given version, or None if out of range."""
        versions = self._versions.get(feature_id, [])
        if 1 <= version <= len(versions):
            return versions[version - 1].copy()
        return None

    def versions(self, feature_id: str) -> int:
        """Number of recorded versions for a feature."""
        return len(self._versions.get(feature_id, []))

"""Port between the drawing session and the feature store.

The geometry engine never holds a live store handle. The session layer talks
to whatever store the host provides through this protocol and passes plain
snapshots to the engine.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from fencedraw.domain import Feature


@dataclass(frozen=True, slots=True)
class StoreValidation:
    """Per-feature result of adding features to a store.

    Attributes:
        id: Feature identifier
        valid: Whether the feature was accepted
        reason: Rejection reason
    """

    id: str
    valid: bool
    reason: str | None = None


@runtime_checkable
class FeatureStore(Protocol):
    """Feature store operations the session relies on."""

    def get_snapshot(self) -> list[Feature]:
        """Return copies of every feature currently held."""
        ...

    def get_feature(self, feature_id: str) -> Feature | None:
        """Return a copy of one feature, or None if unknown."""
        ...

    def add_features(self, features: Iterable[Feature]) -> list[StoreValidation]:
        """Add features, returning one validation entry per feature."""
        ...

    def remove_features(self, feature_ids: Iterable[str]) -> None:
        """Remove features by identifier."""
        ...

"""Feature store port, adapters and edit history.

Key classes:
- FeatureStore: Protocol the session uses to read and modify features
- StoreValidation: Per-feature result of adding features
- InMemoryFeatureStore: Dictionary-backed store adapter
- FeatureHistory: Caller-owned versioned history used to revert edits
"""

from fencedraw.store.history import FeatureHistory
from fencedraw.store.memory import InMemoryFeatureStore
from fencedraw.store.ports import FeatureStore, StoreValidation

__all__ = [
    "FeatureHistory",
    "FeatureStore",
    "InMemoryFeatureStore",
    "StoreValidation",
]

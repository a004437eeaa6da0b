"""In-memory feature store adapter."""

import logging
from collections.abc import Callable, Iterable

from fencedraw.domain import Feature, ValidationResult
from fencedraw.store.ports import StoreValidation

logger = logging.getLogger(__name__)

FeatureValidation = Callable[[Feature], ValidationResult]


class InMemoryFeatureStore:
    """Feature store keeping features in insertion order.

    Added features can be screened by a validation callable, the way a
    drawing mode validates what is added to it. Every read returns copies,
    so callers only ever see snapshots.

    Example:
        store = InMemoryFeatureStore()
        results = store.add_features([feature])
        snapshot = store.get_snapshot()
    """

    def __init__(self, validation: FeatureValidation | None = None) -> None:
        self._features: dict[str, Feature] = {}
        self.validation = validation

    def __len__(self) -> int:
        return len(self._features)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._features

    def get_snapshot(self) -> list[Feature]:
        return [feature.copy() for feature in self._features.values()]

    def get_feature(self, feature_id: str) -> Feature | None:
        feature = self._features.get(feature_id)
        return feature.copy() if feature is not None else None

    def add_features(self, features: Iterable[Feature]) -> list[StoreValidation]:
        results: list[StoreValidation] = []
        for feature in features:
            if feature.id in self._features:
                results.append(StoreValidation(feature.id, False, "Feature already exists"))
                continue
            if self.validation is not None and not feature.is_overlay:
                outcome = self.validation(feature)
                if not outcome.valid:
                    results.append(StoreValidation(feature.id, False, outcome.reason))
                    continue
            self._features[feature.id] = feature.copy()
            results.append(StoreValidation(feature.id, True))
        return results

    def remove_features(self, feature_ids: Iterable[str]) -> None:
        for feature_id in feature_ids:
            if self._features.pop(feature_id, None) is None:
                logger.debug("Feature %s not in store, nothing to remove", feature_id)

    def replace_feature(self, feature: Feature) -> None:
        """Overwrite a stored feature in place, as an edit gesture would."""
        self._features[feature.id] = feature.copy()

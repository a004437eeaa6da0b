"""Drawing session orchestration.

This module wires the geometry engine to a feature store:

- Option changes (boundary visibility, snapping flags, boundary) go through
  plain setters and are announced to registered observers
- A render-only copy of the boundary is kept in the store while it is shown
- Validation and snapping queries run against store snapshots
- Drags that leave the boundary are reverted from a caller-owned history
- Sub-polygons are computed on demand from the drawn lines

Key components:
- DrawingSession: Session orchestrator
- FinishOutcome: Result of handling the end of an edit gesture
"""

import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import structlog

from fencedraw.config import FencedrawSettings
from fencedraw.core.snap import Projector, find_snap_point
from fencedraw.core.splitter import SubpolygonSplitter
from fencedraw.core.validator import validate
from fencedraw.domain import (
    EditPhase,
    Feature,
    LineStringGeometry,
    PolygonGeometry,
    Position,
    SubPolygon,
    ValidationResult,
    make_feature,
)
from fencedraw.store import FeatureHistory, FeatureStore, StoreValidation
from fencedraw.utils import SessionLogger

OptionObserver = Callable[[str, object, object], None]

# Store actions that move an existing feature in select mode.
DRAG_ACTIONS = frozenset({"dragFeature", "dragCoordinate", "dragCoordinateResize"})
SELECT_MODE = "select"
BOUNDARY_NAME = "Drawing Boundary"


@dataclass
class FinishOutcome:
    """Result of handling the end of an edit gesture.

    Attributes:
        feature_id: Feature the gesture acted on
        reverted: True if the feature was rolled back (or removed)
        reason: Validation failure reason when reverted
        features: Drawn features after handling, overlays excluded
    """

    feature_id: str
    reverted: bool = False
    reason: str | None = None
    features: list[Feature] = field(default_factory=list)


class DrawingSession:
    """Orchestrates validation, snapping and splitting over a feature store.

    The session owns no geometry: it reads snapshots from the store port and
    hands them to the pure engine functions. Edit history is owned by the
    caller and passed in where reverting may be needed.

    Example:
        store = InMemoryFeatureStore()
        session = DrawingSession(store, projector, boundary=boundary)
        session.subscribe(lambda name, old, new: print(name, old, new))
        session.set_snap_to_boundary(True)
        position = session.snap((-61.7, 16.1))
    """

    def __init__(
        self,
        store: FeatureStore,
        projector: Projector,
        settings: FencedrawSettings | None = None,
        boundary: PolygonGeometry | None = None,
        session_logger: SessionLogger | None = None,
    ) -> None:
        self.store = store
        self.projector = projector
        self.settings = settings or FencedrawSettings()
        self.session_logger = session_logger or SessionLogger()
        self.logger = structlog.get_logger("fencedraw.session")
        self.splitter = SubpolygonSplitter(self.settings.split, self.settings.extension)
        self.boundary_feature_id = str(uuid.uuid4())
        self.nearest_snap_point: Position | None = None

        self._observers: list[OptionObserver] = []
        self._boundary = boundary
        self._show_boundary = self.settings.display.show_boundary
        self._snap_to_boundary = self.settings.snap.snap_to_boundary
        self._snap_to_features = self.settings.snap.snap_to_features

        self._sync_boundary_overlay()

    # Options

    @property
    def boundary(self) -> PolygonGeometry | None:
        return self._boundary

    @property
    def show_boundary(self) -> bool:
        return self._show_boundary

    @property
    def snap_to_boundary(self) -> bool:
        return self._snap_to_boundary

    @property
    def snap_to_features(self) -> bool:
        return self._snap_to_features

    @property
    def snapping_enabled(self) -> bool:
        return self._snap_to_boundary or self._snap_to_features

    def subscribe(self, observer: OptionObserver) -> Callable[[], None]:
        """Register an observer called as ``observer(option, old, new)``.

        Observers are called once per actual change, in registration order.

        Returns:
            A function that unregisters the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, option: str, old: object, new: object) -> None:
        self.session_logger.log_option_change(option, old, new)
        for observer in list(self._observers):
            observer(option, old, new)

    def _set_flag(self, option: str, value: bool) -> bool:
        attribute = f"_{option}"
        old = getattr(self, attribute)
        if old == value:
            return False
        setattr(self, attribute, value)
        self._notify(option, old, value)
        return True

    def set_show_boundary(self, value: bool) -> None:
        if self._set_flag("show_boundary", value):
            self._sync_boundary_overlay()

    def set_snap_to_boundary(self, value: bool) -> None:
        self._set_flag("snap_to_boundary", value)

    def set_snap_to_features(self, value: bool) -> None:
        self._set_flag("snap_to_features", value)

    def toggle_boundary_visibility(self) -> None:
        self.set_show_boundary(not self._show_boundary)

    def toggle_snap_to_boundary(self) -> None:
        self.set_snap_to_boundary(not self._snap_to_boundary)

    def toggle_snap_to_features(self) -> None:
        self.set_snap_to_features(not self._snap_to_features)

    def update_boundary(self, boundary: PolygonGeometry | None, redraw_visible: bool = True) -> None:
        """Replace the boundary and refresh its overlay.

        Args:
            boundary: New boundary, or None to lift the constraint
            redraw_visible: Re-add the overlay if the boundary is shown
        """
        old = self._boundary
        self._boundary = boundary
        self.store.remove_features([self.boundary_feature_id])
        if redraw_visible:
            self._sync_boundary_overlay()
        if old != boundary:
            self._notify("boundary", old, boundary)

    def _sync_boundary_overlay(self) -> None:
        self.store.remove_features([self.boundary_feature_id])
        if not (self._show_boundary and self._boundary is not None):
            return
        overlay = make_feature(
            self._boundary,
            mode="render",
            draggable=False,
            feature_id=self.boundary_feature_id,
            properties={"name": BOUNDARY_NAME},
        )
        self.store.add_features([overlay])

    # Features

    def drawn_features(self) -> list[Feature]:
        """Store snapshot without render-only overlays."""
        return [feature for feature in self.store.get_snapshot() if not feature.is_overlay]

    def add_features(
        self, features: Iterable[Feature], history: FeatureHistory
    ) -> list[StoreValidation]:
        """Add features to the store and record the accepted ones."""
        features = list(features)
        results = self.store.add_features(features)
        accepted = {result.id for result in results if result.valid}
        for feature in features:
            if feature.id in accepted:
                history.record(feature)
        return results

    def load_existing(
        self, features: Iterable[Feature], history: FeatureHistory
    ) -> list[StoreValidation]:
        """Add features loaded from outside, flagged ``existing``.

        Existing features are exempt from boundary validation.
        """
        flagged = []
        for feature in features:
            marked = feature.copy()
            marked.properties["existing"] = True
            flagged.append(marked)
        return self.add_features(flagged, history)

    # Engine queries

    def validate(self, feature: Feature, update_type: str | None = None) -> ValidationResult:
        """Validate a feature against the current boundary.

        Args:
            feature: Candidate feature
            update_type: Store update type; "finish" and "commit" commit
        """
        phase = EditPhase.from_update_type(update_type)
        result = validate(feature, phase, self._boundary)
        self.session_logger.log_validation(feature.id, phase.value, result.valid, result.reason)
        return result

    def snap(self, cursor: Position) -> Position | None:
        """Snap the cursor and remember the result for display."""
        if not self.snapping_enabled:
            self.nearest_snap_point = None
            return None

        features = self.drawn_features() if self._snap_to_features else []
        snapped = find_snap_point(
            cursor,
            self._boundary,
            features,
            self.projector,
            threshold_pixels=self.settings.snap.threshold_pixels,
            snap_to_boundary=self._snap_to_boundary,
            snap_to_features=self._snap_to_features,
        )
        self.nearest_snap_point = snapped
        self.session_logger.log_snap(cursor, snapped)
        return snapped

    def subpolygons(
        self,
        boundary: PolygonGeometry | None = None,
        features: Iterable[Feature] | None = None,
    ) -> list[SubPolygon]:
        """Split the boundary with the drawn lines.

        Args:
            boundary: Boundary to split instead of the session's
            features: Features to cut with instead of the drawn ones

        Returns:
            Sub-polygons, or an empty list when there is no boundary at all
        """
        target = boundary if boundary is not None else self._boundary
        if target is None:
            self.logger.error("No boundary polygon available for subpolygon extraction")
            return []

        cutting = list(features) if features is not None else self.drawn_features()
        line_count = sum(1 for f in cutting if isinstance(f.geometry, LineStringGeometry))

        start_time = time.time()
        result = self.splitter.split(target, cutting)
        duration_ms = (time.time() - start_time) * 1000
        self.session_logger.log_split(line_count, len(result), duration_ms)
        return result

    # Gestures

    def on_finish(
        self,
        feature_id: str,
        action: str,
        mode: str,
        history: FeatureHistory,
    ) -> FinishOutcome:
        """Handle the end of an edit gesture.

        Drags in select mode are validated against the boundary; a rejected
        drag is reverted to the latest state in ``history`` (or the feature is
        removed if it has none). Afterwards every drawn feature whose state
        changed is recorded in ``history``.

        Args:
            feature_id: Feature the gesture acted on
            action: Store action name (e.g. "dragFeature")
            mode: Drawing mode the gesture happened in
            history: Caller-owned feature history

        Returns:
            FinishOutcome describing what was done
        """
        outcome = FinishOutcome(feature_id=feature_id)

        if action in DRAG_ACTIONS and mode == SELECT_MODE:
            feature = self.store.get_feature(feature_id)
            if feature is not None:
                result = self.validate(feature)
                if not result.valid:
                    outcome.reverted = True
                    outcome.reason = result.reason
                    self._revert(feature, history)

        features = self.drawn_features()
        for feature in features:
            if history.latest(feature.id) != feature:
                history.record(feature)
        outcome.features = features
        return outcome

    def _revert(self, feature: Feature, history: FeatureHistory) -> None:
        previous = history.latest(feature.id)
        self.store.remove_features([feature.id])

        if previous is None:
            self.session_logger.log_revert(feature.id, None)
            return

        restored = make_feature(
            previous.geometry,
            mode=feature.mode or "polygon",
            draggable=True,
            feature_id=feature.id,
            properties=previous.properties,
        )
        results = self.store.add_features([restored])
        if results and not results[0].valid:
            self.logger.error("Reverting feature failed", feature=feature.id, reason=results[0].reason)
            return
        self.session_logger.log_revert(feature.id, history.versions(feature.id))

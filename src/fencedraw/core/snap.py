"""Pointer snapping to boundary and feature edges.

Candidate lines come from the boundary's outer ring and from every drawn
feature that is not a render-only overlay. For each candidate the nearest
point to the cursor is found in geographic space, then both positions are
projected to the screen and compared in pixels. The closest candidate wins
if it lies within the pixel threshold.
"""

import logging
import math
from collections.abc import Callable, Iterable

from fencedraw.config.settings import DEFAULT_SNAP_THRESHOLD_PX, SnapConfig
from fencedraw.core.geometry import nearest_point_on_line
from fencedraw.domain import (
    Feature,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    Position,
    SnapCandidate,
)

logger = logging.getLogger(__name__)

Projector = Callable[[Position], tuple[float, float]]


def feature_to_lines(feature: Feature) -> list[tuple[Position, ...]]:
    """Convert a feature to the lines it can be snapped to.

    LineStrings give themselves, polygons one line per ring, points nothing.
    """
    geometry = feature.geometry
    if isinstance(geometry, PointGeometry):
        return []
    if isinstance(geometry, LineStringGeometry):
        return [geometry.coordinates]
    if isinstance(geometry, PolygonGeometry):
        return list(geometry.rings)
    logger.debug("Feature %s has unsupported geometry %s, not snappable", feature.id, geometry.type)
    return []


def build_candidate_lines(
    boundary: PolygonGeometry | None,
    features: Iterable[Feature],
    snap_to_boundary: bool = True,
    snap_to_features: bool = True,
) -> list[tuple[Position, ...]]:
    """Collect every line the cursor may snap to.

    Args:
        boundary: Drawing boundary (only its outer ring is used)
        features: Store snapshot
        snap_to_boundary: Include the boundary ring
        snap_to_features: Include drawn features (overlays are always skipped)

    Returns:
        Candidate lines, boundary first
    """
    lines: list[tuple[Position, ...]] = []
    if snap_to_boundary and boundary is not None and boundary.outer_ring:
        lines.append(boundary.outer_ring)
    if snap_to_features:
        for feature in features:
            if feature.is_overlay:
                continue
            lines.extend(feature_to_lines(feature))
    return lines


def _pixel_distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def nearest_candidate(
    cursor: Position,
    lines: Iterable[tuple[Position, ...]],
    projector: Projector,
) -> SnapCandidate | None:
    """Find the candidate point closest to the cursor on screen.

    Returns:
        The best candidate regardless of threshold, or None without lines
    """
    best: SnapCandidate | None = None
    cursor_px: tuple[float, float] | None = None

    for line in lines:
        if not line:
            continue
        position, location, _ = nearest_point_on_line(cursor, line)
        if cursor_px is None:
            cursor_px = projector(cursor)
        distance = _pixel_distance(cursor_px, projector(position))
        if best is None or distance < best.pixel_distance:
            best = SnapCandidate(position=position, location=location, pixel_distance=distance)

    return best


def find_snap_point(
    cursor: Position,
    boundary: PolygonGeometry | None,
    features: Iterable[Feature],
    projector: Projector,
    threshold_pixels: float = DEFAULT_SNAP_THRESHOLD_PX,
    snap_to_boundary: bool = True,
    snap_to_features: bool = True,
) -> Position | None:
    """Find the position the cursor should snap to.

    Args:
        cursor: Cursor position (longitude, latitude)
        boundary: Drawing boundary, if any
        features: Store snapshot of drawn features
        projector: Geographic to screen pixel projection
        threshold_pixels: Maximum snapping distance on screen
        snap_to_boundary: Whether the boundary edge is a candidate
        snap_to_features: Whether drawn features are candidates

    Returns:
        The snap position, or None when nothing is close enough
    """
    if not snap_to_boundary and not snap_to_features:
        return None

    lines = build_candidate_lines(boundary, features, snap_to_boundary, snap_to_features)
    if not lines:
        return None

    best = nearest_candidate(cursor, lines, projector)
    if best is not None and best.pixel_distance <= threshold_pixels:
        return best.position
    return None


class SnapEngine:
    """Snapping bound to a projector and snap configuration.

    Example:
        engine = SnapEngine(projector, SnapConfig(snap_to_boundary=True))
        position = engine.find_snap_point(cursor, boundary, features)
    """

    def __init__(self, projector: Projector, config: SnapConfig | None = None) -> None:
        self.projector = projector
        self.config = config or SnapConfig(snap_to_boundary=True, snap_to_features=True)

    def find_snap_point(
        self,
        cursor: Position,
        boundary: PolygonGeometry | None,
        features: Iterable[Feature],
    ) -> Position | None:
        return find_snap_point(
            cursor,
            boundary,
            features,
            self.projector,
            threshold_pixels=self.config.threshold_pixels,
            snap_to_boundary=self.config.snap_to_boundary,
            snap_to_features=self.config.snap_to_features,
        )

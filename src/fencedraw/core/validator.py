"""Boundary and structural validation of drawn features.

The validator answers one question: is a candidate geometry acceptable given
the current boundary and the phase of the edit gesture?

- While DRAFTING, every vertex must stay inside the outer ring of the
  boundary. Holes are not checked.
- When COMMITTING, only structure is checked: lines and polygon rings must
  not intersect themselves.

Features loaded from outside (``existing``) and drafts made without a
boundary are always valid.
"""

import logging

from shapely.geometry import LinearRing
from shapely.geometry import LineString as ShapelyLineString

from fencedraw.core.geometry import point_in_ring
from fencedraw.domain import (
    EditPhase,
    Feature,
    Geometry,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    ValidationResult,
)

logger = logging.getLogger(__name__)

REASON_SELF_INTERSECTING = "Feature intersects itself"
REASON_POINT_OUTSIDE = "Point must be inside the boundary polygon"
REASON_LINE_OUTSIDE = "All points of the line must be inside the boundary polygon"
REASON_POLYGON_OUTSIDE = "All points of the polygon must be inside the boundary polygon"


def is_self_intersecting(geometry: Geometry) -> bool:
    """Check whether a line or any polygon ring crosses itself.

    Points and unsupported geometries never self-intersect.
    """
    if isinstance(geometry, LineStringGeometry):
        if len(geometry.coordinates) < 3:
            return False
        return not ShapelyLineString(geometry.coordinates).is_simple

    if isinstance(geometry, PolygonGeometry):
        for ring in geometry.rings:
            if len(ring) < 4:
                continue
            if not LinearRing(ring).is_simple:
                return True
        return False

    return False


def validate(
    feature: Feature,
    phase: EditPhase,
    boundary: PolygonGeometry | None,
) -> ValidationResult:
    """Validate a feature against the boundary for the given edit phase.

    Args:
        feature: Candidate feature
        phase: Edit phase of the gesture that produced it
        boundary: Drawing boundary, or None when drawing is unconstrained

    Returns:
        ValidationResult with a reason when the feature is rejected
    """
    geometry = feature.geometry

    if phase is EditPhase.COMMITTING:
        if is_self_intersecting(geometry):
            logger.warning("Validation failed: %s (feature=%s)", REASON_SELF_INTERSECTING, feature.id)
            return ValidationResult.fail(REASON_SELF_INTERSECTING)
        return ValidationResult.ok()

    if boundary is None or feature.is_existing:
        return ValidationResult.ok()

    outer = boundary.outer_ring

    if isinstance(geometry, PointGeometry):
        valid = point_in_ring(geometry.coordinates, outer)
        reason = REASON_POINT_OUTSIDE
    elif isinstance(geometry, LineStringGeometry):
        valid = all(point_in_ring(c, outer) for c in geometry.coordinates)
        reason = REASON_LINE_OUTSIDE
    elif isinstance(geometry, PolygonGeometry):
        valid = all(point_in_ring(c, outer) for c in geometry.outer_ring)
        reason = REASON_POLYGON_OUTSIDE
    else:
        logger.debug("Skipping boundary check for unsupported geometry %s", geometry.type)
        return ValidationResult.ok()

    if valid:
        return ValidationResult.ok()

    logger.warning("Validation failed: %s (feature=%s)", reason, feature.id)
    return ValidationResult.fail(reason)


class GeometryValidator:
    """Validates features against a fixed boundary.

    Example:
        validator = GeometryValidator(boundary)
        result = validator.validate(feature, EditPhase.DRAFTING)
    """

    def __init__(self, boundary: PolygonGeometry | None = None) -> None:
        self.boundary = boundary

    def validate(self, feature: Feature, phase: EditPhase) -> ValidationResult:
        return validate(feature, phase, self.boundary)

"""Core processing algorithms for fencedraw.

This module contains the core algorithms for:

- Geometry operations (point-in-ring, intersections, nearest points,
  geodesic bearings and distances)
- Validation of drawn features against the boundary
- Snapping of pointer positions to boundary and feature edges
- Extension of cutting lines to the boundary
- Splitting of the boundary into sub-polygons

The four engine entry points are pure functions:
- validate: Is a feature acceptable for the current boundary and edit phase
- find_snap_point: Nearest edge position within a pixel threshold
- ensure_line_reaches_boundary: Extend a line's endpoints onto the boundary
- split: Partition the boundary along cutting lines

Key classes:
- GeometryValidator, SnapEngine, LineExtender, SubpolygonSplitter:
  Configured wrappers around the entry points
- WebMercatorProjector: Default geographic to pixel projection
- DrawingSession: Orchestrates the engine over a feature store
"""

from fencedraw.core.extender import (
    LineExtender,
    boundary_edges,
    ensure_line_reaches_boundary,
)
from fencedraw.core.projection import WebMercatorProjector
from fencedraw.core.session import DrawingSession, FinishOutcome
from fencedraw.core.snap import SnapEngine, build_candidate_lines, find_snap_point
from fencedraw.core.splitter import SubpolygonSplitter, split
from fencedraw.core.validator import GeometryValidator, validate

__all__ = [
    # Session
    "DrawingSession",
    "FinishOutcome",
    # Engine classes
    "GeometryValidator",
    "LineExtender",
    "SnapEngine",
    "SubpolygonSplitter",
    "WebMercatorProjector",
    # Engine functions
    "boundary_edges",
    "build_candidate_lines",
    "ensure_line_reaches_boundary",
    "find_snap_point",
    "split",
    "validate",
]

"""Geometric operations for validation, snapping and splitting.

This module provides the mathematical utilities shared by the engine:
- Point-in-ring testing (ray casting algorithm)
- Segment and polyline intersection with segment parameters
- Nearest point on a segment or polyline, with location along the line
- Geodesic distance, bearing and destination on the WGS84 ellipsoid

Planar functions work directly on (longitude, latitude) pairs. Geodesic
functions use pyproj and return kilometres and degrees.

All functions are pure and stateless.
"""

import math
from dataclasses import dataclass

from pyproj import Geod
from shapely.geometry.base import BaseGeometry

from fencedraw.domain import Position

_GEOD = Geod(ellps="WGS84")

# Parametric slack when deciding whether an intersection falls on a segment.
# Points computed as intersections land a few ULPs off the segment they were
# computed from; without the slack they would be missed on re-intersection.
PARAM_TOLERANCE = 1e-9

# Squared length under which a segment is treated as a single point.
_DEGENERATE_SQ = 1e-24


@dataclass(frozen=True, slots=True)
class Crossing:
    """Intersection between a polyline and another polyline.

    Attributes:
        position: Intersection point
        line_segment: Index of the segment of the first polyline
        line_t: Parameter along that segment (0 at its start, 1 at its end)
        other_segment: Index of the segment of the second polyline
        other_u: Parameter along that segment
    """

    position: Position
    line_segment: int
    line_t: float
    other_segment: int
    other_u: float


def point_on_segment(point: Position, seg_start: Position, seg_end: Position) -> bool:
    """Check whether a point lies on a segment (within floating point noise)."""
    _, _, distance = nearest_point_on_segment(point, seg_start, seg_end)
    scale = max(1.0, abs(point[0]), abs(point[1]))
    return distance <= 1e-12 * scale


def point_in_ring(point: Position, ring: tuple[Position, ...]) -> bool:
    """Determine if a point is inside a closed ring using ray casting.

    Casts a horizontal ray from the point to the right and counts crossings
    with ring edges. Odd count means inside. Points lying on an edge count
    as inside.

    Args:
        point: The point to test
        ring: Ring positions (closed or open)

    Returns:
        True if the point is inside or on the ring, False otherwise

    Examples:
        >>> square = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0), (0.0, 0.0)]
        >>> point_in_ring((1.0, 1.0), square)
        True
        >>> point_in_ring((3.0, 3.0), square)
        False
    """
    n = len(ring)
    if n < 3:
        return False

    x, y = point
    inside = False
    j = n - 1

    for i in range(n):
        xi, yi = ring[i]
        xj, yj = ring[j]

        if point_on_segment(point, ring[j], ring[i]):
            return True

        # Check if ray from point intersects edge (j, i)
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def segment_intersection(
    p1: Position,
    p2: Position,
    p3: Position,
    p4: Position,
    tolerance: float = PARAM_TOLERANCE,
) -> tuple[Position, float, float] | None:
    """Find the intersection point of two segments.

    Uses parametric line equations. Parallel and collinear segments have no
    single intersection point and return None.

    Args:
        p1: First endpoint of segment 1
        p2: Second endpoint of segment 1
        p3: First endpoint of segment 2
        p4: Second endpoint of segment 2
        tolerance: Slack on the segment parameters

    Returns:
        (point, t, u) where t and u are the parameters along segment 1 and 2
        (clamped to [0, 1]), or None if the segments do not meet

    Examples:
        >>> point, t, u = segment_intersection((0, 0), (2, 2), (0, 2), (2, 0))
        >>> point
        (1.0, 1.0)
    """
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)

    # Parallel or coincident
    if abs(denom) < 1e-20:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if -tolerance <= t <= 1 + tolerance and -tolerance <= u <= 1 + tolerance:
        t = min(1.0, max(0.0, t))
        u = min(1.0, max(0.0, u))
        # Interpolate along the second segment so that the point sits exactly
        # on the edge it was computed against; edge endpoints are returned
        # verbatim.
        if u == 0.0:
            return (float(x3), float(y3)), t, u
        if u == 1.0:
            return (float(x4), float(y4)), t, u
        x = x3 + u * (x4 - x3)
        y = y3 + u * (y4 - y3)
        return (float(x), float(y)), t, u

    return None


def polyline_crossings(
    line: tuple[Position, ...], other: tuple[Position, ...]
) -> list[Crossing]:
    """Find every intersection between two polylines.

    Args:
        line: First polyline
        other: Second polyline (typically a boundary ring)

    Returns:
        Crossings in segment order of the first polyline. A crossing through
        a shared vertex is reported once per segment pair that touches it.
    """
    crossings: list[Crossing] = []
    for i in range(len(line) - 1):
        a, b = line[i], line[i + 1]
        for k in range(len(other) - 1):
            hit = segment_intersection(a, b, other[k], other[k + 1])
            if hit is None:
                continue
            position, t, u = hit
            crossings.append(Crossing(position, i, t, k, u))
    return crossings


def nearest_point_on_segment(
    point: Position, seg_start: Position, seg_end: Position
) -> tuple[Position, float, float]:
    """Find the closest point on a segment to a given point.

    Projects the point onto the infinite line, then clamps to the segment.

    Args:
        point: The point to project
        seg_start: Start point of segment
        seg_end: End point of segment

    Returns:
        (nearest_point, t, distance) with t the clamped segment parameter and
        distance the planar Euclidean distance
    """
    dx = seg_end[0] - seg_start[0]
    dy = seg_end[1] - seg_start[1]

    segment_length_sq = dx * dx + dy * dy
    if segment_length_sq < _DEGENERATE_SQ:
        distance = math.hypot(point[0] - seg_start[0], point[1] - seg_start[1])
        return seg_start, 0.0, distance

    # t = dot(point - start, end - start) / ||end - start||^2
    t = ((point[0] - seg_start[0]) * dx + (point[1] - seg_start[1]) * dy) / segment_length_sq
    t = max(0.0, min(1.0, t))

    nearest = (seg_start[0] + t * dx, seg_start[1] + t * dy)
    distance = math.hypot(point[0] - nearest[0], point[1] - nearest[1])

    return nearest, t, distance


def cumulative_lengths(line: tuple[Position, ...]) -> list[float]:
    """Planar length from the first vertex to each vertex."""
    lengths = [0.0]
    for i in range(1, len(line)):
        a, b = line[i - 1], line[i]
        lengths.append(lengths[-1] + math.hypot(b[0] - a[0], b[1] - a[1]))
    return lengths


def nearest_point_on_line(
    point: Position, line: tuple[Position, ...]
) -> tuple[Position, float, float]:
    """Find the closest point on a polyline to a given point.

    Checks every segment and keeps the globally nearest point.

    Args:
        point: The point to find the nearest point to
        line: Polyline vertices

    Returns:
        (nearest_point, location, distance) where location is the normalized
        distance along the line (0 at the first vertex, 1 at the last) and
        distance is planar

    Raises:
        ValueError: If the line has no vertices
    """
    if not line:
        raise ValueError("Line must have at least 1 point")

    if len(line) == 1:
        only = line[0]
        return only, 0.0, math.hypot(point[0] - only[0], point[1] - only[1])

    lengths = cumulative_lengths(line)
    total = lengths[-1]

    best_point = line[0]
    best_along = 0.0
    min_distance = math.inf

    for i in range(len(line) - 1):
        nearest, t, distance = nearest_point_on_segment(point, line[i], line[i + 1])
        if distance < min_distance:
            min_distance = distance
            best_point = nearest
            best_along = lengths[i] + t * (lengths[i + 1] - lengths[i])

    location = best_along / total if total > 0 else 0.0
    return best_point, location, min_distance


def geodesic_distance_km(a: Position, b: Position) -> float:
    """Geodesic distance between two positions in kilometres."""
    _, _, meters = _GEOD.inv(a[0], a[1], b[0], b[1])
    return meters / 1000.0


def bearing(origin: Position, target: Position) -> float:
    """Initial geodesic bearing from origin to target, degrees clockwise from north."""
    azimuth, _, _ = _GEOD.inv(origin[0], origin[1], target[0], target[1])
    return azimuth


def outward_bearing(opposite: Position, endpoint: Position) -> float:
    """Bearing at ``endpoint`` continuing the geodesic that runs from ``opposite``.

    Raises:
        ValueError: If the two positions coincide
    """
    if opposite == endpoint:
        raise ValueError("Cannot calculate bearing of zero-length line")
    _, back_azimuth, _ = _GEOD.inv(opposite[0], opposite[1], endpoint[0], endpoint[1])
    return (back_azimuth + 180.0) % 360.0


def destination(origin: Position, distance_km: float, bearing_deg: float) -> Position:
    """Position reached by travelling ``distance_km`` along ``bearing_deg``."""
    lon, lat, _ = _GEOD.fwd(origin[0], origin[1], bearing_deg, distance_km * 1000.0)
    return (float(lon), float(lat))


def point_to_line_distance_km(point: Position, line: tuple[Position, ...]) -> float:
    """Geodesic distance from a point to the nearest point of a polyline."""
    nearest, _, _ = nearest_point_on_line(point, line)
    return geodesic_distance_km(point, nearest)


def geodesic_area(geometry: BaseGeometry) -> float:
    """Unsigned geodesic area of a shapely geometry in square metres."""
    area, _ = _GEOD.geometry_area_perimeter(geometry)
    return abs(area)

"""Extension of cutting lines to the boundary edge.

A user rarely ends a cutting line exactly on the boundary. Each endpoint that
is not within a small geodesic distance of a boundary edge is pushed outward,
along the direction the line was heading, until it meets the boundary.
"""

import logging

from fencedraw.config.settings import DEFAULT_BOUNDARY_EPSILON_KM, DEFAULT_MAX_EXTENSION_KM
from fencedraw.core.geometry import (
    destination,
    geodesic_distance_km,
    outward_bearing,
    point_to_line_distance_km,
    polyline_crossings,
)
from fencedraw.domain import LineStringGeometry, PolygonGeometry, Position

logger = logging.getLogger(__name__)

BoundaryEdges = list[tuple[Position, ...]]


def boundary_edges(boundary: PolygonGeometry) -> BoundaryEdges:
    """Decompose a polygon into one closed line per ring, outer ring first."""
    return [ring for ring in boundary.rings if len(ring) >= 2]


def is_on_boundary(
    point: Position,
    edges: BoundaryEdges,
    epsilon_km: float = DEFAULT_BOUNDARY_EPSILON_KM,
) -> bool:
    """Check whether a point lies within ``epsilon_km`` of any boundary edge."""
    return any(point_to_line_distance_km(point, edge) <= epsilon_km for edge in edges)


def extend_point_to_boundary(
    point: Position,
    bearing_deg: float,
    edges: BoundaryEdges,
    max_distance_km: float = DEFAULT_MAX_EXTENSION_KM,
) -> Position | None:
    """Cast a ray from a point and return the first boundary hit.

    Args:
        point: Ray origin
        bearing_deg: Ray direction, degrees clockwise from north
        edges: Boundary edge lines
        max_distance_km: Ray length

    Returns:
        The intersection closest to ``point``, or None if the ray misses
    """
    far = destination(point, max_distance_km, bearing_deg)
    ray = (point, far)

    closest: Position | None = None
    min_distance = float("inf")
    for edge in edges:
        for crossing in polyline_crossings(ray, edge):
            distance = geodesic_distance_km(point, crossing.position)
            if distance < min_distance:
                min_distance = distance
                closest = crossing.position

    return closest


def ensure_line_reaches_boundary(
    line: LineStringGeometry,
    edges: BoundaryEdges,
    epsilon_km: float = DEFAULT_BOUNDARY_EPSILON_KM,
    max_extension_km: float = DEFAULT_MAX_EXTENSION_KM,
) -> LineStringGeometry:
    """Move endpoints that stop short of the boundary onto it.

    Only the first and last vertices can change. An endpoint whose ray does
    not meet the boundary within ``max_extension_km`` is left where it is.

    Args:
        line: Cutting line
        edges: Boundary edge lines (see boundary_edges)
        epsilon_km: Distance under which an endpoint already touches the boundary
        max_extension_km: Maximum extension length

    Returns:
        The extended line (the same object when nothing moved)
    """
    coords = line.coordinates
    if len(coords) < 2 or not edges:
        return line

    start, end = coords[0], coords[-1]
    if start == end:
        logger.debug("Line endpoints coincide, no direction to extend along")
        return line

    new_start, new_end = start, end

    if not is_on_boundary(start, edges, epsilon_km):
        hit = extend_point_to_boundary(start, outward_bearing(end, start), edges, max_extension_km)
        if hit is not None:
            new_start = hit
        else:
            logger.debug("Start point %s does not reach the boundary", start)

    if not is_on_boundary(end, edges, epsilon_km):
        hit = extend_point_to_boundary(end, outward_bearing(start, end), edges, max_extension_km)
        if hit is not None:
            new_end = hit
        else:
            logger.debug("End point %s does not reach the boundary", end)

    if (new_start, new_end) == (start, end):
        return line
    return line.with_endpoints(new_start, new_end)


class LineExtender:
    """Extends cutting lines against one boundary.

    Example:
        extender = LineExtender(boundary)
        extended = extender.extend(line)
    """

    def __init__(
        self,
        boundary: PolygonGeometry,
        epsilon_km: float = DEFAULT_BOUNDARY_EPSILON_KM,
        max_extension_km: float = DEFAULT_MAX_EXTENSION_KM,
    ) -> None:
        self.edges = boundary_edges(boundary)
        self.epsilon_km = epsilon_km
        self.max_extension_km = max_extension_km

    def extend(self, line: LineStringGeometry) -> LineStringGeometry:
        return ensure_line_reaches_boundary(
            line, self.edges, self.epsilon_km, self.max_extension_km
        )

"""Fencedraw - Boundary-constrained drawing geometry.

Fencedraw keeps user-drawn map features inside a designated boundary polygon.
It validates candidate geometries against the boundary, snaps pointer
positions to nearby edges and splits the boundary into sub-polygons along
user-drawn cutting lines.

Example:
    $ fencedraw split boundary.geojson lines.geojson -o parts.geojson

This writes one polygon per region the cutting lines carve out of the
boundary.
"""

__version__ = "0.1.0"
__author__ = "Fencedraw contributors"

__all__ = ["__author__", "__version__"]

"""GeoJSON I/O layer for fencedraw.

This module handles reading and writing GeoJSON. It provides a clean
abstraction layer between JSON documents and the domain models.

Key responsibilities:
- Load boundary polygons from geometries, features or collections
- Load feature collections, optionally flagging them as pre-existing
- Write features and sub-polygons as FeatureCollections

Key functions:
- read_boundary: Load a boundary polygon
- read_features: Load features
- feature_collection: Build a FeatureCollection dictionary
- write_feature_collection: Serialize (and optionally save) a collection
"""

from fencedraw.io.reader import read_boundary, read_features
from fencedraw.io.writer import feature_collection, write_feature_collection

__all__ = [
    "feature_collection",
    "read_boundary",
    "read_features",
    "write_feature_collection",
]

"""Domain models for fencedraw.

This module contains the core domain models representing geometries, drawn
features, edit phases and engine results. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable to and from GeoJSON dictionaries
- Independent of the map surface and feature store implementation

Key classes:
- PointGeometry, LineStringGeometry, PolygonGeometry: Supported geometries
- UnsupportedGeometry: Any other geometry type, carried but not processed
- Feature: A geometry with its store property map
- EditPhase: Drafting or committing
- ValidationResult: Outcome of boundary/self-intersection validation
- SnapCandidate: Nearest point on a snap candidate line
- SubPolygon: A face of the split boundary
"""

from fencedraw.domain.feature import (
    RENDER_MODE,
    EditPhase,
    Feature,
    make_feature,
)
from fencedraw.domain.geometry import (
    Geometry,
    GeometryType,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    Position,
    Ring,
    UnsupportedGeometry,
    geometry_from_dict,
)
from fencedraw.domain.results import SnapCandidate, SubPolygon, ValidationResult

__all__: list[str] = [
    # Enums
    "EditPhase",
    "GeometryType",
    # Geometry types
    "Geometry",
    "LineStringGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "Position",
    "Ring",
    "UnsupportedGeometry",
    "geometry_from_dict",
    # Features
    "RENDER_MODE",
    "Feature",
    "make_feature",
    # Results
    "SnapCandidate",
    "SubPolygon",
    "ValidationResult",
]

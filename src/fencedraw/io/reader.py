"""GeoJSON reader for boundaries and feature collections.

Sources can be paths or raw JSON text, so that features serialized by a
host application can be loaded the same way as files on disk.
"""

import json
from pathlib import Path
from typing import Any

from fencedraw.domain import Feature, PolygonGeometry, geometry_from_dict
from fencedraw.exceptions import (
    BoundaryLoadError,
    FeatureLoadError,
    InvalidGeometryError,
)


def _describe(source: Path | str) -> str:
    if isinstance(source, Path):
        return str(source)
    text = source.strip()
    return "<json>" if text.startswith(("{", "[")) else text


def _load_json(source: Path | str) -> Any:
    """Parse JSON from a path or from JSON text.

    Raises:
        FileNotFoundError: If a path is given and does not exist
        ValueError: If the content is not valid JSON
    """
    if isinstance(source, str) and source.lstrip().startswith(("{", "[")):
        return json.loads(source)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def read_boundary(source: Path | str) -> PolygonGeometry:
    """Load a boundary polygon.

    Accepts a Polygon geometry, a Feature with a Polygon geometry, or a
    FeatureCollection (its first Polygon feature is used).

    Args:
        source: Path to a GeoJSON file, or GeoJSON text

    Returns:
        Boundary polygon

    Raises:
        BoundaryLoadError: If the source cannot be read or holds no polygon
    """
    name = _describe(source)
    try:
        data = _load_json(source)
    except (OSError, ValueError) as e:
        raise BoundaryLoadError(name, str(e)) from e

    if not isinstance(data, dict):
        raise BoundaryLoadError(name, "expected a GeoJSON object")

    candidates: list[Any]
    kind = data.get("type")
    if kind == "FeatureCollection":
        raw_features = data.get("features")
        if not isinstance(raw_features, list):
            raise BoundaryLoadError(name, "'features' must be a list")
        candidates = [f.get("geometry") if isinstance(f, dict) else None for f in raw_features]
    elif kind == "Feature":
        candidates = [data.get("geometry")]
    else:
        candidates = [data]

    for geometry in candidates:
        if not isinstance(geometry, dict) or geometry.get("type") != "Polygon":
            continue
        try:
            polygon = geometry_from_dict(geometry)
        except InvalidGeometryError as e:
            raise BoundaryLoadError(name, e.reason) from e
        if isinstance(polygon, PolygonGeometry):
            return polygon

    raise BoundaryLoadError(name, "no Polygon geometry found")


def read_features(source: Path | str, mark_existing: bool = False) -> list[Feature]:
    """Load features from a FeatureCollection (or a single Feature).

    Args:
        source: Path to a GeoJSON file, or GeoJSON text
        mark_existing: Flag every feature as loaded rather than drawn

    Returns:
        Features in collection order; missing ids are generated

    Raises:
        FeatureLoadError: If the source cannot be read or is malformed
    """
    name = _describe(source)
    try:
        data = _load_json(source)
    except (OSError, ValueError) as e:
        raise FeatureLoadError(name, str(e)) from e

    if not isinstance(data, dict):
        raise FeatureLoadError(name, "expected a GeoJSON object")

    if data.get("type") == "FeatureCollection":
        raw_features = data.get("features")
        if not isinstance(raw_features, list):
            raise FeatureLoadError(name, "'features' must be a list")
    elif data.get("type") == "Feature":
        raw_features = [data]
    else:
        raise FeatureLoadError(name, f"unsupported GeoJSON type {data.get('type')!r}")

    features: list[Feature] = []
    for index, raw in enumerate(raw_features):
        if not isinstance(raw, dict) or not isinstance(raw.get("geometry"), dict):
            raise FeatureLoadError(name, f"feature {index} has no geometry")
        try:
            feature = Feature.from_dict(raw)
        except InvalidGeometryError as e:
            raise FeatureLoadError(name, f"feature {index}: {e}") from e
        if mark_existing:
            feature.properties["existing"] = True
        features.append(feature)

    return features

"""GeoJSON writer for features and sub-polygons."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from fencedraw.domain import Feature, SubPolygon


def feature_collection(items: Iterable[Feature | SubPolygon]) -> dict[str, Any]:
    """Build a GeoJSON FeatureCollection.

    Sub-polygons become features carrying their ``overlap_percent``.
    """
    features: list[dict[str, Any]] = []
    for index, item in enumerate(items):
        if isinstance(item, SubPolygon):
            features.append(item.to_feature_dict(index))
        else:
            features.append(item.to_dict())
    return {"type": "FeatureCollection", "features": features}


def write_feature_collection(
    items: Iterable[Feature | SubPolygon],
    path: Path | None = None,
    indent: int | None = 2,
) -> str:
    """Serialize items as a FeatureCollection.

    Args:
        items: Features or sub-polygons
        path: File to write; nothing is written when None
        indent: JSON indentation

    Returns:
        The serialized JSON text
    """
    text = json.dumps(feature_collection(items), indent=indent)
    if path is not None:
        path.write_text(text + "\n", encoding="utf-8")
    return text

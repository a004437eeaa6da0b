"""Drawn feature representation and edit phases.

A feature is a tagged geometry plus the property map the feature store
attaches to it. The engine reads three properties:

- ``mode``: drawing mode that produced the feature (``"render"`` marks a
  render-only overlay such as the visible copy of the boundary)
- ``isDraggable``: whether the feature can be dragged in select mode
- ``existing``: the feature was loaded rather than drawn and is exempt from
  boundary validation
"""

import copy
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from fencedraw.domain.geometry import Geometry, geometry_from_dict

RENDER_MODE = "render"
# Marker the store sets on intermediate shapes it builds for its own use.
TERRAFORMER_MARKER = "_terraformer"


class EditPhase(Enum):
    """Phase of an edit gesture.

    DRAFTING updates arrive frequently while the gesture is in progress.
    COMMITTING is the end of the gesture; the result must be structurally
    valid.
    """

    DRAFTING = "drafting"
    COMMITTING = "committing"

    @classmethod
    def from_update_type(cls, update_type: str | None) -> "EditPhase":
        """Map a store update type ("provisional", "finish", ...) to a phase."""
        if update_type in ("finish", "commit"):
            return cls.COMMITTING
        return cls.DRAFTING


@dataclass
class Feature:
    """A drawn (or loaded) feature.

    Attributes:
        id: Store identifier
        geometry: Feature geometry
        properties: Property map as held by the store
    """

    id: str
    geometry: Geometry
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def mode(self) -> str | None:
        mode = self.properties.get("mode")
        return mode if isinstance(mode, str) else None

    @property
    def is_draggable(self) -> bool:
        return bool(self.properties.get("isDraggable", False))

    @property
    def is_existing(self) -> bool:
        """True for features loaded from outside rather than drawn."""
        return bool(self.properties.get("existing", False))

    @property
    def is_overlay(self) -> bool:
        """True for render-only features that must never be snapped or split."""
        return self.mode == RENDER_MODE or bool(self.properties.get(TERRAFORMER_MARKER))

    def with_geometry(self, geometry: Geometry) -> "Feature":
        """Return a copy carrying a different geometry."""
        return replace(self, geometry=geometry, properties=dict(self.properties))

    def copy(self) -> "Feature":
        """Deep copy, safe to keep while the original keeps changing."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a GeoJSON Feature dictionary."""
        return {
            "id": self.id,
            "type": "Feature",
            "geometry": self.geometry.to_dict(),
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Feature":
        """Deserialize from a GeoJSON Feature dictionary.

        Features without an id get a random one.

        Args:
            data: GeoJSON Feature dictionary

        Returns:
            Feature instance
        """
        feature_id = data.get("id")
        properties = data.get("properties") or {}
        return cls(
            id=str(feature_id) if feature_id is not None else str(uuid.uuid4()),
            geometry=geometry_from_dict(data["geometry"]),
            properties=dict(properties),
        )


def make_feature(
    geometry: Geometry,
    mode: str = RENDER_MODE,
    draggable: bool = True,
    feature_id: str | None = None,
    properties: dict[str, Any] | None = None,
) -> Feature:
    """Build a feature with the standard ``mode``/``isDraggable`` tags."""
    props = dict(properties or {})
    props["mode"] = mode
    props["isDraggable"] = draggable
    return Feature(
        id=feature_id or str(uuid.uuid4()),
        geometry=geometry,
        properties=props,
    )

"""Result types returned by the geometry engine."""

from dataclasses import dataclass
from typing import Any

from fencedraw.domain.geometry import PolygonGeometry, Position


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a feature.

    Attributes:
        valid: Whether the geometry is acceptable
        reason: Human-readable reason when it is not
    """

    valid: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True, slots=True)
class SnapCandidate:
    """Nearest point of one candidate line to the cursor.

    Attributes:
        position: Geographic position on the candidate line
        location: Normalized distance along the line (0 at start, 1 at end)
        pixel_distance: Screen distance from the cursor
    """

    position: Position
    location: float
    pixel_distance: float


@dataclass(frozen=True, slots=True)
class SubPolygon:
    """A face of the split boundary.

    Attributes:
        polygon: Face geometry
        overlap_percent: Share of the face's area lying inside the boundary
    """

    polygon: PolygonGeometry
    overlap_percent: float = 100.0

    def to_feature_dict(self, index: int) -> dict[str, Any]:
        """Serialize as a GeoJSON Feature carrying the overlap percentage."""
        return {
            "type": "Feature",
            "id": f"subpolygon-{index}",
            "geometry": self.polygon.to_dict(),
            "properties": {"overlap_percent": round(self.overlap_percent, 4)},
        }

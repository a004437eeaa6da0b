"""Configuration settings for Fencedraw."""

from pathlib import Path

from pydantic import BaseModel, Field

# Defaults for the four engine entry points. Every one of them can be
# overridden per call or through the settings models below.
DEFAULT_SNAP_THRESHOLD_PX = 50.0
DEFAULT_BOUNDARY_EPSILON_KM = 0.01
DEFAULT_MAX_EXTENSION_KM = 100.0
DEFAULT_MIN_OVERLAP_PERCENT = 90.0
DEFAULT_NO_SPLIT_AREA_TOLERANCE = 0.01
DEFAULT_TILE_SIZE = 512


class SnapConfig(BaseModel):
    """Configuration for pointer snapping."""

    threshold_pixels: float = Field(
        default=DEFAULT_SNAP_THRESHOLD_PX,
        gt=0.0,
        le=500.0,
        description="Maximum screen distance (pixels) between cursor and snap target",
    )
    snap_to_boundary: bool = Field(
        default=False,
        description="Snap to the edge of the boundary polygon",
    )
    snap_to_features: bool = Field(
        default=False,
        description="Snap to the edges of already-drawn features",
    )


class ExtensionConfig(BaseModel):
    """Configuration for extending cutting lines to the boundary.

    Distances are geodesic kilometres on the WGS84 ellipsoid.
    """

    boundary_epsilon_km: float = Field(
        default=DEFAULT_BOUNDARY_EPSILON_KM,
        gt=0.0,
        le=1.0,
        description="Endpoints closer than this to a boundary edge count as touching it",
    )
    max_extension_km: float = Field(
        default=DEFAULT_MAX_EXTENSION_KM,
        gt=0.0,
        le=10000.0,
        description="Length of the ray cast from an endpoint to look for the boundary",
    )


class SplitConfig(BaseModel):
    """Configuration for splitting the boundary into sub-polygons."""

    min_overlap_percent: float = Field(
        default=DEFAULT_MIN_OVERLAP_PERCENT,
        ge=0.0,
        lt=100.0,
        description="Faces must overlap the boundary by more than this percentage",
    )
    no_split_area_tolerance: float = Field(
        default=DEFAULT_NO_SPLIT_AREA_TOLERANCE,
        ge=0.0,
        le=0.5,
        description="Relative area difference under which a single face counts as 'not split'",
    )


class DisplayConfig(BaseModel):
    """Configuration for the boundary overlay and pixel projection."""

    show_boundary: bool = Field(
        default=False,
        description="Keep a render-only copy of the boundary in the feature store",
    )
    tile_size: int = Field(
        default=DEFAULT_TILE_SIZE,
        ge=64,
        le=4096,
        description="Web Mercator tile size in pixels used by the default projector",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class FencedrawSettings(BaseModel):
    """Main application settings."""

    snap: SnapConfig = Field(default_factory=SnapConfig)
    extension: ExtensionConfig = Field(default_factory=ExtensionConfig)
    split: SplitConfig = Field(default_factory=SplitConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> FencedrawSettings:
    """Get default application settings."""
    return FencedrawSettings()

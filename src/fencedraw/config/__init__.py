"""Configuration management for fencedraw.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- SnapConfig: Pointer snapping settings
- ExtensionConfig: Cutting line extension settings
- SplitConfig: Sub-polygon filtering settings
- DisplayConfig: Boundary overlay and projection settings
- LoggingConfig: Logging settings
- FencedrawSettings: Main application settings
"""

from fencedraw.config.settings import (
    DEFAULT_BOUNDARY_EPSILON_KM,
    DEFAULT_MAX_EXTENSION_KM,
    DEFAULT_MIN_OVERLAP_PERCENT,
    DEFAULT_NO_SPLIT_AREA_TOLERANCE,
    DEFAULT_SNAP_THRESHOLD_PX,
    DEFAULT_TILE_SIZE,
    DisplayConfig,
    ExtensionConfig,
    FencedrawSettings,
    LoggingConfig,
    SnapConfig,
    SplitConfig,
    get_default_settings,
)

__all__ = [
    "DEFAULT_BOUNDARY_EPSILON_KM",
    "DEFAULT_MAX_EXTENSION_KM",
    "DEFAULT_MIN_OVERLAP_PERCENT",
    "DEFAULT_NO_SPLIT_AREA_TOLERANCE",
    "DEFAULT_SNAP_THRESHOLD_PX",
    "DEFAULT_TILE_SIZE",
    "DisplayConfig",
    "ExtensionConfig",
    "FencedrawSettings",
    "LoggingConfig",
    "SnapConfig",
    "SplitConfig",
    "get_default_settings",
]

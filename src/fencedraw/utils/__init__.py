"""Utility functions for fencedraw.

This module provides utility functions including:

- Logging setup and configuration
- Session event logging and statistics
"""

from fencedraw.utils.logging import (
    SessionLogger,
    SessionStats,
    configure_logging,
)

__all__ = [
    "SessionLogger",
    "SessionStats",
    "configure_logging",
]

"""Command-line interface for fencedraw.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Validate features against a boundary
- Snap a position to boundary or feature edges
- Extend cutting lines onto the boundary
- Split the boundary into sub-polygons
"""

from fencedraw.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]

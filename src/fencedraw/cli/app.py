"""CLI application entry point for fencedraw.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from fencedraw import __version__
from fencedraw.cli.output import (
    console,
    print_boundary_info,
    print_error,
    print_header,
    print_snap_result,
    print_step,
    print_subpolygon_table,
    print_validation_table,
    print_written,
)
from fencedraw.config import (
    DEFAULT_SNAP_THRESHOLD_PX,
    FencedrawSettings,
    LoggingConfig,
    SnapConfig,
)
from fencedraw.core import (
    DrawingSession,
    WebMercatorProjector,
    boundary_edges,
    ensure_line_reaches_boundary,
)
from fencedraw.core.geometry import geodesic_area
from fencedraw.domain import Feature, LineStringGeometry, PolygonGeometry
from fencedraw.exceptions import FencedrawError
from fencedraw.io import read_boundary, read_features, write_feature_collection
from fencedraw.store import InMemoryFeatureStore
from fencedraw.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="fencedraw",
    help="Validate, snap and split drawn features against a boundary polygon.",
    add_completion=False,
    no_args_is_help=True,
)

DEFAULT_ZOOM = 12.0


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Fencedraw[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Fencedraw keeps drawn features inside a boundary polygon."""
    logging_config = LoggingConfig(log_file=log_file, log_level=log_level)
    configure_logging(
        log_file=logging_config.log_file,
        console_level=logging_config.log_level,
        file_level=logging_config.file_log_level,
    )


def _load_boundary(path: Path, quiet: bool) -> PolygonGeometry:
    boundary = read_boundary(path)
    if not quiet:
        print_step("Loading boundary")
        print_boundary_info(str(path), len(boundary.rings), len(boundary.outer_ring))
    return boundary


@app.command()
def validate(
    boundary_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON file holding the boundary polygon", show_default=False),
    ],
    features_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON FeatureCollection to validate", show_default=False),
    ],
    commit: Annotated[
        bool,
        typer.Option(
            "--commit",
            help="Validate as finished gestures (self-intersection only)",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Check that every feature stays inside the boundary.

    Exits with code 1 if any feature is rejected.
    """
    try:
        if not quiet:
            print_header(__version__)
        boundary = _load_boundary(boundary_file, quiet)
        features = read_features(features_file)
    except FencedrawError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    session = DrawingSession(
        InMemoryFeatureStore(),
        WebMercatorProjector(DEFAULT_ZOOM),
        boundary=boundary,
    )
    update_type = "commit" if commit else None
    rows = [(feature, session.validate(feature, update_type)) for feature in features]

    if not quiet:
        print_step(f"Validating {len(rows)} features")
        print_validation_table(rows)

    rejected = sum(1 for _, result in rows if not result.valid)
    if rejected:
        if not quiet:
            console.print(f"\n[bold red]{rejected} of {len(rows)} features rejected[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def snap(
    boundary_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON file holding the boundary polygon", show_default=False),
    ],
    lon: Annotated[float, typer.Option("--lon", help="Cursor longitude", show_default=False)],
    lat: Annotated[float, typer.Option("--lat", help="Cursor latitude", show_default=False)],
    features_file: Annotated[
        Path | None,
        typer.Option("--features", "-f", help="GeoJSON FeatureCollection of drawn features"),
    ] = None,
    zoom: Annotated[
        float,
        typer.Option("--zoom", "-z", help="Map zoom level used to measure pixels", min=0.0, max=24.0),
    ] = DEFAULT_ZOOM,
    threshold: Annotated[
        float,
        typer.Option("--threshold", "-t", help="Snap threshold in pixels", min=1.0, max=500.0),
    ] = DEFAULT_SNAP_THRESHOLD_PX,
    no_boundary_snap: Annotated[
        bool,
        typer.Option("--no-boundary-snap", help="Do not snap to the boundary"),
    ] = False,
    no_feature_snap: Annotated[
        bool,
        typer.Option("--no-feature-snap", help="Do not snap to drawn features"),
    ] = False,
) -> None:
    """Snap a cursor position to the nearest boundary or feature edge."""
    try:
        boundary = read_boundary(boundary_file)
        features = read_features(features_file) if features_file is not None else []
    except FencedrawError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    settings = FencedrawSettings(
        snap=SnapConfig(
            threshold_pixels=threshold,
            snap_to_boundary=not no_boundary_snap,
            snap_to_features=not no_feature_snap,
        )
    )
    session = DrawingSession(
        InMemoryFeatureStore(),
        WebMercatorProjector(zoom, settings.display.tile_size),
        settings=settings,
        boundary=boundary,
    )
    store_results = session.store.add_features(features)
    for result in store_results:
        if not result.valid:
            console.print(f"  Skipped feature {result.id}: {result.reason}")

    cursor = (lon, lat)
    snapped = session.snap(cursor)
    print_snap_result(cursor, snapped, threshold)
    if snapped is None:
        raise typer.Exit(code=2)


@app.command()
def extend(
    boundary_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON file holding the boundary polygon", show_default=False),
    ],
    features_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON FeatureCollection of cutting lines", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write extended lines to this file"),
    ] = None,
) -> None:
    """Extend cutting lines whose endpoints stop short of the boundary."""
    try:
        boundary = read_boundary(boundary_file)
        features = read_features(features_file)
    except FencedrawError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    settings = FencedrawSettings()
    edges = boundary_edges(boundary)
    extended: list[Feature] = []
    for feature in features:
        if not isinstance(feature.geometry, LineStringGeometry):
            continue
        line = ensure_line_reaches_boundary(
            feature.geometry,
            edges,
            epsilon_km=settings.extension.boundary_epsilon_km,
            max_extension_km=settings.extension.max_extension_km,
        )
        # Stdout carries only the GeoJSON when no output file is given
        if output is not None:
            moved = line != feature.geometry
            console.print(f"  {feature.id}: {'extended' if moved else 'unchanged'}")
        extended.append(feature.with_geometry(line))

    text = write_feature_collection(extended, output)
    if output is None:
        console.print_json(text)
    else:
        print_written(str(output), len(extended))


@app.command("split")
def split_command(
    boundary_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON file holding the boundary polygon", show_default=False),
    ],
    features_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON FeatureCollection of cutting lines", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write sub-polygons to this file"),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Split the boundary into sub-polygons along the cutting lines."""
    try:
        if not quiet:
            print_header(__version__)
        boundary = _load_boundary(boundary_file, quiet)
        features = read_features(features_file)
    except FencedrawError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    session = DrawingSession(
        InMemoryFeatureStore(),
        WebMercatorProjector(DEFAULT_ZOOM),
        boundary=boundary,
    )
    parts = session.subpolygons(features=features)

    if not quiet:
        print_step(f"Split into {len(parts)} sub-polygon{'s' if len(parts) != 1 else ''}")
        areas = [geodesic_area(part.polygon.to_shapely()) / 1e6 for part in parts]
        print_subpolygon_table(parts, areas)

    text = write_feature_collection(parts, output)
    if output is not None:
        if not quiet:
            print_written(str(output), len(parts))
    elif quiet:
        console.print_json(text)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()

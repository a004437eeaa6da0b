"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from fencedraw.domain import Feature, Position, SubPolygon, ValidationResult

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Fencedraw[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_boundary_info(source: str, ring_count: int, vertex_count: int) -> None:
    """Print boundary information.

    Args:
        source: Where the boundary was loaded from
        ring_count: Number of rings (outer ring plus holes)
        vertex_count: Number of outer ring vertices
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(source)
    console.print(line)
    holes = ring_count - 1
    console.print(f"  {vertex_count} vertices {SYM_DOT} {holes} hole{'s' if holes != 1 else ''}")


def print_validation_table(rows: list[tuple[Feature, ValidationResult]]) -> None:
    """Print one line per validated feature."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Feature")
    table.add_column("Type")
    table.add_column("Result")
    table.add_column("Reason")
    for feature, result in rows:
        status = f"[green]{SYM_OK}[/green]" if result.valid else f"[red]{SYM_ERR}[/red]"
        table.add_row(feature.id, feature.geometry.type, status, result.reason or "")
    console.print(table)


def print_snap_result(cursor: Position, snapped: Position | None, threshold: float) -> None:
    """Print the outcome of a snap query."""
    if snapped is None:
        console.print(f"  No snap target within {threshold:g} px of {cursor[0]:.6f}, {cursor[1]:.6f}")
        return
    console.print(f"  [green]{SYM_OK}[/green] Snapped to {snapped[0]:.9f}, {snapped[1]:.9f}")


def print_subpolygon_table(subpolygons: list[SubPolygon], areas_km2: list[float]) -> None:
    """Print one line per sub-polygon with its area and boundary overlap."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Vertices", justify="right")
    table.add_column("Area (km²)", justify="right")
    table.add_column("Overlap", justify="right")
    for index, (part, area) in enumerate(zip(subpolygons, areas_km2)):
        table.add_row(
            str(index),
            str(len(part.polygon.outer_ring)),
            f"{area:,.3f}",
            f"{part.overlap_percent:.1f}%",
        )
    console.print(table)


def print_written(path: str, count: int) -> None:
    """Print where output was written.

    Args:
        path: Output path
        count: Number of features written
    """
    line = Text(f"\n{SYM_OK} ", style="bold green")
    line.append(f"{count} feature{'s' if count != 1 else ''} written to ", style="default")
    line.append(path, style="bold")
    console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")

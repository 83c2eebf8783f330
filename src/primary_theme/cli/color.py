"""Color conversion command."""

from __future__ import annotations

import typer

from primary_theme.core.color import to_oklch


def oklch_command(
    color: str = typer.Argument(..., help="Hex color such as '#1e90ff' or '1e90ff80'"),
) -> None:
    """Print the OKLCH form of a hex color."""
    try:
        typer.echo(to_oklch(color))
    except ValueError as e:
        typer.echo(f"Invalid color {color!r}: {e}", err=True)
        raise typer.Exit(code=1)

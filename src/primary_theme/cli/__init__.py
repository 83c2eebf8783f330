"""
primary-theme CLI package.

- build.py: build and check commands
- color.py: hex to OKLCH conversion
- common.py: shared helpers (logging, inputs, diagnostics table)
"""

from __future__ import annotations

import platform

import typer

from primary_theme._version import get_version

from .build import build_command, check_command
from .color import oklch_command

__version__ = get_version()


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"primary-theme {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


app = typer.Typer(
    help="""primary-theme - design tokens to CSS custom properties

Commands:
  • build: compile token exports into theme.css and theme-tokens.css
  • check: compile and report diagnostics without writing
  • oklch: convert a hex color to oklch()
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """primary-theme main callback for global options."""


app.command(name="build")(build_command)
app.command(name="check")(check_command)
app.command(name="oklch")(oklch_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = ["__version__", "app", "main", "version_callback"]

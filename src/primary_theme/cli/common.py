"""Shared CLI helpers: logging, input loading, option merging and diagnostics output."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from primary_theme.core.diagnostics import Diagnostic, DiagnosticKind, Diagnostics, Severity
from primary_theme.core.errors import ParseError
from primary_theme.core.ir import CompileOptions, Mode, TokenDocument, parse_document
from primary_theme.core.manifest import ThemeConfig

console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "dim",
}


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr; ``--verbose`` shows resolution traces."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


def split_input(argument: str) -> tuple[Path, Mode | None]:
    """
    Split an input argument into a path and an optional mode tag.

    ``tokens.json:dark`` tags explicitly; otherwise a mode word among the
    dot-separated parts of the file stem is used (``tokens.dark.json``).
    """
    head, sep, tail = argument.rpartition(":")
    if sep and head and (mode := Mode.parse(tail)) is not None:
        return Path(head), mode
    path = Path(argument)
    for part in reversed(path.stem.split(".")):
        if (mode := Mode.parse(part)) is not None:
            return path, mode
    return path, None


def load_inputs(arguments: list[str], diagnostics: Diagnostics) -> list[TokenDocument]:
    """
    Read and parse input files.

    A missing file is fatal; a file that is not a usable document is
    reported as a parse-error diagnostic and skipped.
    """
    documents: list[TokenDocument] = []
    for argument in arguments:
        path, mode = split_input(argument)
        if not path.is_file():
            typer.echo(f"Input file not found: {path}", err=True)
            raise typer.Exit(code=1)
        try:
            documents.append(
                parse_document(path.read_text(encoding="utf-8"), mode=mode, source=path.name)
            )
        except ParseError as e:
            diagnostics.add(DiagnosticKind.PARSE_ERROR, str(e), document=path.name)
    return documents


def build_options(config: ThemeConfig, overrides: dict[str, Any]) -> CompileOptions:
    """Merge config-file options with CLI flags (flags win; ``None`` means unset)."""
    merged = dict(config.options)
    merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return CompileOptions.model_validate(merged)
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            typer.echo(f"Invalid option {location}: {error['msg']}", err=True)
        raise typer.Exit(code=1)


def render_diagnostics(diagnostics: list[Diagnostic], *, show_info: bool = False) -> None:
    """Print diagnostics as a rich table (nothing when there are none)."""
    rows = [d for d in diagnostics if show_info or d.severity != Severity.INFO]
    if not rows:
        console.print("[green]No diagnostics[/green]")
        return

    table = Table(title="Diagnostics")
    table.add_column("Severity")
    table.add_column("Kind", style="cyan")
    table.add_column("Token")
    table.add_column("Message")
    for diagnostic in rows:
        style = _SEVERITY_STYLES[diagnostic.severity]
        table.add_row(
            f"[{style}]{diagnostic.severity}[/{style}]",
            str(diagnostic.kind),
            escape(diagnostic.token or diagnostic.document or "-"),
            escape(diagnostic.message),
        )
    console.print(table)

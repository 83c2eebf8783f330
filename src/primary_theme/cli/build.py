"""
Build CLI commands.

Commands:
- build: Compile token exports and write the theme files
- check: Compile without writing and report diagnostics
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from primary_theme.core.compiler import CompileResult, compile_theme
from primary_theme.core.diagnostics import Diagnostic, Diagnostics, Severity
from primary_theme.core.errors import ConfigError, UnresolvedReferenceError
from primary_theme.core.ir import ThemeMode
from primary_theme.core.manifest import ThemeConfig, find_config

from .common import (
    build_options,
    configure_logging,
    console,
    load_inputs,
    render_diagnostics,
    split_input,
)

DEFAULT_OUT_DIR = "dist"

PRIMITIVES_CSS = "theme.css"
TOKENS_CSS = "theme-tokens.css"
PRIMITIVES_JSON = "primitives.json"
TOKENS_JSON = "tokens.json"
THEME_JSON = "theme.json"


def _load_config(config_path: Path | None) -> ThemeConfig:
    try:
        return find_config(config_path)
    except ConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=1)


def _input_arguments(files: list[str] | None, config: ThemeConfig) -> list[str]:
    if files:
        return files
    arguments = []
    for argument in config.build.inputs:
        path, mode = split_input(argument)
        resolved = str(config.resolve(str(path)))
        arguments.append(f"{resolved}:{mode}" if mode else resolved)
    return arguments


def _compile(
    files: list[str] | None,
    config: ThemeConfig,
    overrides: dict[str, Any],
) -> tuple[CompileResult, list[Diagnostic]]:
    """Load inputs and compile; returns the result and all diagnostics."""
    options = build_options(config, overrides)
    load_diagnostics = Diagnostics()
    documents = load_inputs(_input_arguments(files, config), load_diagnostics)
    try:
        result = compile_theme(documents, options)
    except UnresolvedReferenceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    return result, list(load_diagnostics) + result.diagnostics


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_outputs(result: CompileResult, out_dir: Path) -> list[Path]:
    """Write every generated file into ``out_dir``; returns the written paths."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = [out_dir / PRIMITIVES_CSS, out_dir / TOKENS_CSS]
    written[0].write_text(result.primitives_css, encoding="utf-8")
    written[1].write_text(result.tokens_css, encoding="utf-8")

    mirrors = ((PRIMITIVES_JSON, result.primitives_json), (TOKENS_JSON, result.tokens_json))
    for name, data in mirrors:
        _write_json(out_dir / name, data)
        written.append(out_dir / name)

    if result.theme_json is not None:
        _write_json(out_dir / THEME_JSON, result.theme_json)
        written.append(out_dir / THEME_JSON)
    return written


def build_command(
    files: list[str] = typer.Argument(
        None,
        help="Token export files (JSON); append ':dark', ':mobile' etc. to tag a mode",
    ),
    out: Path = typer.Option(None, "--out", "-o", help="Output directory (default: dist)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to primary-theme.toml"),
    theme_mode: ThemeMode = typer.Option(None, "--theme-mode", help="light, dark or both"),
    typo_responsive: bool = typer.Option(
        None, "--typo-responsive/--typo-fixed", help="Fluid or fixed font sizes"
    ),
    spacing_responsive: bool = typer.Option(
        None, "--spacing-responsive/--spacing-fixed", help="Fluid or fixed spacing"
    ),
    synthesize: bool = typer.Option(
        None, "--synthesize/--no-synthesize", help="Synthesize primitives for unmatched sizes"
    ),
    custom_colors: Path = typer.Option(
        None, "--custom-colors", help="File of '--name: value;' declarations"
    ),
    primary_color: str = typer.Option(
        None, "--primary-color", help="Project color family behind --primary"
    ),
    theme_json: bool = typer.Option(
        None, "--theme-json/--no-theme-json", help="Also write theme.json"
    ),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 when any error diagnostic exists"),
    verbose: bool = typer.Option(False, "--verbose", help="Log resolution details"),
) -> None:
    """
    Compile token exports into theme.css, theme-tokens.css and their JSON mirrors.

    Examples:
        primary-theme build primitives.json semantic.json
        primary-theme build tokens.json tokens.dark.json --out build/
        primary-theme build mobile.json:mobile desktop.json:desktop --typo-fixed
    """
    configure_logging(verbose)
    config = _load_config(config_path)

    custom_text = None
    if custom_colors is not None:
        if not custom_colors.is_file():
            typer.echo(f"Custom colors file not found: {custom_colors}", err=True)
            raise typer.Exit(code=1)
        custom_text = custom_colors.read_text(encoding="utf-8")

    overrides = {
        "theme_mode": theme_mode,
        "typo_responsive": typo_responsive,
        "spacing_responsive": spacing_responsive,
        "synthesize_project_primitives": synthesize,
        "custom_colors_text": custom_text,
        "primary_color": primary_color,
        "include_theme_json": theme_json,
    }
    result, diagnostics = _compile(files, config, overrides)

    if out is None:
        out = config.resolve(config.build.out) if config.build.out else Path(DEFAULT_OUT_DIR)
    written = write_outputs(result, out)

    render_diagnostics(diagnostics)
    for path in written:
        console.print(f"  [green]wrote[/green] {path}")
    console.print(f"Primary color: [cyan]{result.primary}[/cyan]")

    if strict and any(d.severity == Severity.ERROR for d in diagnostics):
        typer.echo("Build finished with errors (--strict)", err=True)
        raise typer.Exit(code=1)


def check_command(
    files: list[str] = typer.Argument(None, help="Token export files (JSON)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to primary-theme.toml"),
    show_info: bool = typer.Option(False, "--info", help="Include informational diagnostics"),
    verbose: bool = typer.Option(False, "--verbose", help="Log resolution details"),
) -> None:
    """
    Compile without writing anything and report diagnostics.

    Exits with code 1 when any error diagnostic is found.
    """
    configure_logging(verbose)
    config = _load_config(config_path)
    result, diagnostics = _compile(files, config, {})

    render_diagnostics(diagnostics, show_info=show_info)
    console.print(f"{len(result.primitives)} primitives, {len(result.tokens)} tokens")
    if any(d.severity == Severity.ERROR for d in diagnostics):
        raise typer.Exit(code=1)

"""
Project configuration file (``primary-theme.toml``).

Example::

    [theme]
    theme_mode = "both"
    primary_color = "ocean"
    typo_responsive = true
    custom_colors_file = "custom.css"

    [build]
    inputs = ["tokens/primitives.json", "tokens/semantic.dark.json:dark"]
    out = "dist"

Keys of ``[theme]`` map to CompileOptions fields; kebab-case and camelCase
spellings are accepted.
"""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import ConfigError, ErrorContext
from .ir.options import CompileOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "primary-theme.toml"

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class BuildConfig:
    """Inputs and output directory for ``primary-theme build``."""

    inputs: list[str] = field(default_factory=list)
    out: str | None = None


@dataclass
class ThemeConfig:
    """Parsed configuration file."""

    path: Path | None = None
    options: dict[str, Any] = field(default_factory=dict)
    build: BuildConfig = field(default_factory=BuildConfig)

    def resolve(self, relative: str) -> Path:
        """Resolve a path from the file relative to the file's directory."""
        base = self.path.parent if self.path else Path.cwd()
        candidate = Path(relative)
        return candidate if candidate.is_absolute() else base / candidate


def _option_key(key: str) -> str:
    return _CAMEL_RE.sub("_", key).replace("-", "_").lower()


def load_config(path: Path) -> ThemeConfig:
    """
    Load and validate a configuration file.

    Args:
        path: Path to the TOML file

    Returns:
        ThemeConfig whose ``options`` validate as CompileOptions

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or
            contains unknown or invalid option values
    """
    context = ErrorContext(document=str(path))
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read config: {e}", context) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML: {e}", context) from e

    config = ThemeConfig(path=path)
    theme_data = data.get("theme", {})
    build_data = data.get("build", {})
    if not isinstance(theme_data, dict) or not isinstance(build_data, dict):
        raise ConfigError("[theme] and [build] must be tables", context)

    options = {_option_key(key): value for key, value in theme_data.items()}
    custom_file = options.pop("custom_colors_file", None)
    if custom_file is not None:
        custom_path = config.resolve(str(custom_file))
        try:
            options["custom_colors_text"] = custom_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read custom colors file {custom_path}: {e}", context) from e

    try:
        CompileOptions.model_validate(options)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        where = f"[theme] {location}" if location else "[theme]"
        raise ConfigError(f"{where}: {first['msg']}", context) from e
    config.options = options

    inputs = build_data.get("inputs", [])
    if not isinstance(inputs, list) or not all(isinstance(i, str) for i in inputs):
        raise ConfigError("[build] inputs must be a list of paths", context)
    config.build = BuildConfig(inputs=list(inputs), out=build_data.get("out"))

    logger.debug(f"Loaded {path}: {sorted(options)}")
    return config


def find_config(explicit: Path | None = None, cwd: Path | None = None) -> ThemeConfig:
    """
    Locate and load the configuration file.

    An explicit path must exist; otherwise ``primary-theme.toml`` in the
    working directory is used when present, and an empty config when not.
    """
    if explicit is not None:
        if not explicit.exists():
            raise ConfigError(f"config file not found: {explicit}")
        return load_config(explicit)
    candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
    if candidate.exists():
        return load_config(candidate)
    return ThemeConfig()

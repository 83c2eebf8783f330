"""
primary-theme - design-token compiler.

Turns design-tool variable exports into two CSS custom-property sheets
(primitives and semantic tokens), their JSON mirrors and a WordPress
theme.json.
"""

from primary_theme._version import get_version
from primary_theme.core.color import to_oklch
from primary_theme.core.compiler import CompileResult, compile_theme
from primary_theme.core.errors import ConfigError, ParseError, ThemeError, UnresolvedReferenceError
from primary_theme.core.fluid import fluid
from primary_theme.core.ir import CompileOptions, ThemeMode, parse_document

__version__ = get_version()

__all__ = [
    "__version__",
    "compile_theme",
    "CompileOptions",
    "CompileResult",
    "ThemeMode",
    "parse_document",
    "to_oklch",
    "fluid",
    # Errors
    "ThemeError",
    "ParseError",
    "UnresolvedReferenceError",
    "ConfigError",
]

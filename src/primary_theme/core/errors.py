"""
Error types for theme compilation.

Fatal conditions are raised as exceptions. Everything that only affects a
single document or token is reported as a Diagnostic (see diagnostics.py)
and the run continues.
"""

from dataclasses import dataclass
from typing import Optional


class ThemeError(Exception):
    """Base exception for all primary-theme errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class ParseError(ThemeError):
    """
    Raised when a token document cannot be read.

    Examples:
    - Invalid JSON
    - Missing or malformed ``variables`` list
    - Unknown document-level mode tag

    Individual variables that fail validation do not raise; they are
    listed on the document and reported as diagnostics.
    """

    pass


class UnresolvedReferenceError(ThemeError):
    """
    Raised when emitted CSS references a custom property that no sheet declares.

    Synthesis guarantees every reference has a target, so this only fires
    on an internal-consistency violation.
    """

    def __init__(self, missing: list[str], sheet: str):
        self.missing = sorted(set(missing))
        self.sheet = sheet
        super().__init__(f"{sheet} references undeclared properties: {', '.join(self.missing)}")


class ConfigError(ThemeError):
    """Raised when a configuration file cannot be loaded or validated."""

    pass


@dataclass
class ErrorContext:
    """
    Where an error occurred.

    Attributes:
        document: Name of the source document (file name or label)
        variable: Optional variable name inside the document
    """

    document: str
    variable: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "tokens.json (color/gray/900)"
        """
        if self.variable:
            return f"{self.document} ({self.variable})"
        return self.document

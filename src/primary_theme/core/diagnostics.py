"""
Non-fatal findings collected during one compilation run.

A run never aborts on malformed input; each problem becomes a Diagnostic
attached to the result so callers can surface it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    """How serious a diagnostic is."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class DiagnosticKind(StrEnum):
    """Diagnostic categories reported to callers."""

    PARSE_ERROR = "parse-error"
    MISSING_MODE_VARIANT = "missing-mode-variant"
    MIXED_AXIS_MODES = "mixed-axis-modes"
    UNRESOLVED_TOKEN = "unresolved-token"
    INVALID_CUSTOM_VARIABLE = "invalid-custom-variable"
    TOKEN_SHADOWS_PRIMITIVE = "token-shadows-primitive"
    MISSING_PRIMARY_COLOR = "missing-primary-color"
    REDUNDANT_TOKEN = "redundant-token"
    REDUNDANT_TOKEN_NUMERIC = "redundant-token-numeric"
    CONFLICTING_PRIMITIVE = "conflicting-primitive"
    INVALID_THEME_JSON = "invalid-theme-json"


_DEFAULT_SEVERITY: dict[DiagnosticKind, Severity] = {
    DiagnosticKind.PARSE_ERROR: Severity.ERROR,
    DiagnosticKind.REDUNDANT_TOKEN: Severity.INFO,
    DiagnosticKind.REDUNDANT_TOKEN_NUMERIC: Severity.INFO,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single finding about a document or token."""

    kind: DiagnosticKind
    message: str
    severity: Severity = Severity.WARNING
    token: str | None = None
    document: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"type": str(self.kind), "severity": str(self.severity), "message": self.message}
        if self.token:
            data["token"] = self.token
        if self.document:
            data["document"] = self.document
        return data


@dataclass
class Diagnostics:
    """Ordered collection of diagnostics for one run."""

    items: list[Diagnostic] = field(default_factory=list)

    def add(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        token: str | None = None,
        document: str | None = None,
    ) -> Diagnostic:
        severity = _DEFAULT_SEVERITY.get(kind, Severity.WARNING)
        diagnostic = Diagnostic(
            kind=kind, message=message, severity=severity, token=token, document=document
        )
        self.items.append(diagnostic)
        if severity == Severity.ERROR:
            logger.error(message)
        elif severity == Severity.WARNING:
            logger.warning(message)
        else:
            logger.info(message)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

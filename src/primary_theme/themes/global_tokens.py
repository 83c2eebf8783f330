"""
Built-in semantic layer.

Global color tokens, fluid spacing and type scales, and form control tokens.
A project token or primitive of the same name always takes precedence.
Every endpoint goes through the namespace so each reference has a target.
"""

from __future__ import annotations

import logging

from primary_theme.core.defaults import PLACEHOLDER_NAME, add_placeholder_palette
from primary_theme.core.diagnostics import DiagnosticKind, Diagnostics
from primary_theme.core.fluid import endpoint_for, fluid_value
from primary_theme.core.ingest import sanitize
from primary_theme.core.ir.model import (
    Category,
    FluidGroup,
    LightDark,
    Literal,
    Ref,
    Section,
    Sequence,
    Token,
    TokenSet,
    Value,
)
from primary_theme.core.ir.options import CompileOptions
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.core.palette import project_families

logger = logging.getLogger(__name__)

# (slug, min px, max px); min == max is a static size
SPACING_TOKENS: tuple[tuple[str, int, int], ...] = (
    ("xs", 4, 4),
    ("s", 8, 16),
    ("m", 16, 32),
    ("l", 24, 48),
    ("xl", 32, 80),
)

TEXT_TOKENS: tuple[tuple[str, int, int], ...] = (
    ("xs", 12, 14),
    ("s", 14, 16),
    ("m", 16, 18),
    ("l", 18, 20),
    ("xl", 20, 24),
    ("2xl", 24, 28),
    ("3xl", 28, 32),
    ("4xl", 32, 36),
    ("5xl", 36, 40),
)

FORM_RADIUS_CANDIDATES: tuple[str, ...] = (
    "--radius-m",
    "--radius-16",
    "--radius-8",
    "--radius-0",
    "--radius-full",
)


def _gray(step: int) -> Ref:
    return Ref(f"--color-gray-{step}")


def _pair(light: Value, dark: Value) -> LightDark:
    return LightDark(light, dark)


def _status(light: str, dark: str) -> LightDark:
    return LightDark(Literal(light), Literal(dark))


def color_tokens(primary: str) -> list[tuple[str, Value]]:
    """Global color tokens in emission order."""
    white = Ref("--color-white")
    return [
        ("--primary", Ref(f"--color-{primary}-500")),
        ("--on-primary", white),
        ("--surface", _pair(white, _gray(900))),
        ("--on-surface", _pair(_gray(900), white)),
        ("--surface-secondary", _pair(_gray(50), _gray(800))),
        ("--on-surface-secondary", _pair(_gray(600), _gray(400))),
        ("--border-light", _pair(_gray(200), _gray(700))),
        ("--border-medium", _pair(_gray(300), _gray(600))),
        ("--error", _status("oklch(50.54% 0.19 27.52)", "oklch(60.54% 0.19 27.52)")),
        ("--on-error", Literal("oklch(100% 0 0)")),
        ("--success", _status("oklch(45.5% 0.15 142)", "oklch(55.5% 0.15 142)")),
        ("--on-success", Literal("oklch(100% 0 0)")),
        ("--warning", _status("oklch(70.5% 0.15 85)", "oklch(80.5% 0.15 85)")),
        ("--on-warning", Literal("oklch(20% 0 0)")),
        ("--info", _status("oklch(51.33% 0.18 256.37)", "oklch(61.33% 0.18 256.37)")),
        ("--on-info", Literal("oklch(100% 0 0)")),
    ]


def choose_primary(
    namespace: PrimitiveNamespace,
    options: CompileOptions,
    diagnostics: Diagnostics,
) -> str:
    """
    Pick the project color family behind ``--primary``.

    The configured family wins when its 500 step exists; otherwise the first
    project family (alphabetically) with a 500 step is used, then the
    placeholder palette, which is added on demand.
    """
    families = project_families(namespace)
    if options.primary_color:
        wanted = sanitize(options.primary_color)
        wanted = wanted.removeprefix("color-")
        if f"--color-{wanted}-500" in namespace:
            return wanted
        diagnostics.add(
            DiagnosticKind.MISSING_PRIMARY_COLOR,
            f"Primary color {options.primary_color!r} has no --color-{wanted}-500; "
            "falling back to the first project color",
        )
    for family, steps in families.items():
        if 500 in steps:
            return family
    add_placeholder_palette(namespace)
    return PLACEHOLDER_NAME


class GlobalTokenBuilder:
    """Adds the built-in semantic layer to a token set."""

    def __init__(
        self,
        namespace: PrimitiveNamespace,
        tokens: TokenSet,
        options: CompileOptions,
    ):
        self.namespace = namespace
        self.tokens = tokens
        self.options = options

    def _taken(self, name: str) -> bool:
        return name in self.tokens or name in self.namespace

    def _add(
        self, name: str, value: Value, category: Category, section: Section, rank: int
    ) -> None:
        if self._taken(name):
            logger.debug(f"Project definition of {name} replaces the built-in one")
            return
        self.tokens.add(
            Token(name=name, value=value, category=category, section=section, rank=rank)
        )

    def add_colors(self, primary: str) -> None:
        for rank, (name, value) in enumerate(color_tokens(primary)):
            self._add(name, value, Category.COLOR, Section.GLOBAL_TOKENS, rank)

    def _scale(
        self,
        rows: tuple[tuple[str, int, int], ...],
        category: Category,
        section: Section,
        group: FluidGroup,
    ) -> None:
        for rank, (slug, low, high) in enumerate(rows):
            value = fluid_value(
                low,
                high,
                category=category,
                namespace=self.namespace,
                min_viewport_px=self.options.min_viewport_px,
                max_viewport_px=self.options.max_viewport_px,
                synthesize=True,
                group=group,
            )
            self._add(category.css_name(slug), value, category, section, rank)

    def add_spacing(self) -> None:
        if self.tokens.has_category(Category.SPACING):
            return
        self._scale(SPACING_TOKENS, Category.SPACING, Section.SPACING, FluidGroup.SPACING)

    def add_typography(self) -> None:
        if self.tokens.has_category(Category.TEXT):
            return
        self._scale(TEXT_TOKENS, Category.TEXT, Section.TYPOGRAPHY, FluidGroup.TYPOGRAPHY)

    def _form_radius(self) -> Value:
        for name in FORM_RADIUS_CANDIDATES:
            if self._taken(name):
                return Ref(name)
        return Literal("0")

    def add_forms(self) -> None:
        spacing = Sequence(
            (
                endpoint_for(12, Category.SPACING, self.namespace, synthesize=True),
                endpoint_for(16, Category.SPACING, self.namespace, synthesize=True),
            )
        )
        rows: list[tuple[str, Value]] = [
            ("--form-control-background", _pair(_gray(200), _gray(700))),
            ("--on-form-control", _pair(_gray(900), _gray(100))),
            ("--form-control-spacing", spacing),
            ("--form-control-border-width", Literal("1px")),
            ("--form-control-border-color", _gray(400)),
            ("--form-control-border-radius", self._form_radius()),
            ("--checkables-border-color", _gray(400)),
            ("--checkable-size", Literal("1.25em")),
        ]
        for rank, (name, value) in enumerate(rows):
            self._add(name, value, Category.OTHER, Section.FORMS, rank)


def add_global_tokens(
    namespace: PrimitiveNamespace,
    tokens: TokenSet,
    options: CompileOptions,
    primary: str,
) -> None:
    """Add every built-in semantic token not already defined by the project."""
    builder = GlobalTokenBuilder(namespace, tokens, options)
    builder.add_colors(primary)
    builder.add_spacing()
    builder.add_typography()
    builder.add_forms()

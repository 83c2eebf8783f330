"""
Built-in primitives.

Baseline values are always offered to the namespace after imports, so
first-writer-wins keeps any value a document already supplied. Category
fallbacks are only used when the documents supplied nothing of that kind.
"""

from __future__ import annotations

from .ir.model import Category, Literal, Primitive, PrimitiveOrigin, Section
from .namespace import PrimitiveNamespace
from .units import px_to_rem

# (slug, px)
BREAKPOINTS: tuple[tuple[str, int], ...] = (
    ("md", 768),
    ("lg", 1024),
    ("xl", 1280),
    ("xxl", 1536),
)

BASE_COLORS: tuple[tuple[str, str], ...] = (
    ("white", "oklch(1 0 0)"),
    ("black", "oklch(0 0 0)"),
)

GRAY_RAMP: tuple[tuple[str, str], ...] = (
    ("50", "oklch(0.97 0 0)"),
    ("100", "oklch(0.922 0 0)"),
    ("200", "oklch(0.87 0 0)"),
    ("300", "oklch(0.708 0 0)"),
    ("400", "oklch(0.556 0 0)"),
    ("500", "oklch(0.439 0 0)"),
    ("600", "oklch(0.371 0 0)"),
    ("700", "oklch(0.269 0 0)"),
    ("800", "oklch(0.205 0 0)"),
    ("900", "oklch(0.145 0 0)"),
)

FONT_FAMILIES: tuple[tuple[str, str], ...] = (
    ("base", "system-ui, sans-serif"),
    ("mono", "ui-monospace, monospace"),
)

FONT_WEIGHTS: tuple[tuple[str, str], ...] = (
    ("light", "300"),
    ("regular", "400"),
    ("semibold", "600"),
    ("bold", "700"),
    ("extrabold", "800"),
    ("black", "900"),
)

Z_LEVELS: tuple[tuple[str, str], ...] = (
    ("under-page", "-1"),
    ("above-page", "1"),
    ("header", "1000"),
    ("above-header", "2000"),
    ("above-all", "3000"),
)

TRANSITION_DURATION = "250ms"

SPACING_SCALE_PX: tuple[int, ...] = (0, 2, 4, 8, 12, 16, 24, 32, 48, 64, 80)
TEXT_SCALE_PX: tuple[int, ...] = (12, 14, 16, 18, 20, 24, 28, 30, 32, 36, 40, 48)
# (slug, px); 9999 renders as a px keyword value
RADIUS_SCALE: tuple[tuple[str, int], ...] = (
    ("none", 0),
    ("4", 4),
    ("8", 8),
    ("12", 12),
    ("16", 16),
    ("24", 24),
    ("full", 9999),
)

# Project palette used when the documents define no project color family
PLACEHOLDER_NAME = "raspberry"
PLACEHOLDER_PALETTE: tuple[tuple[str, str], ...] = (
    ("100", "oklch(98% 0.03 352)"),
    ("200", "oklch(94.5% 0.12 352)"),
    ("300", "oklch(84.5% 0.2 352)"),
    ("400", "oklch(72.8281% 0.1971 352.001)"),
    ("500", "oklch(64.5% 0.2 352)"),
    ("600", "oklch(54.5% 0.2 352)"),
    ("700", "oklch(44.5% 0.2 352)"),
)

# Values at or above this radius are "fully rounded"
RADIUS_FULL_PX = 9999

# Color families that belong to the global (non-project) palette
GLOBAL_COLOR_FAMILIES = frozenset({"white", "black", "gray", "grey", "transparent", "current"})


def dimension_literal(category: Category, px: float) -> Literal:
    """Normalize a px size for ``category``: rem, unitless 0, or the full-radius keyword."""
    if category == Category.RADIUS and px >= RADIUS_FULL_PX:
        return Literal(f"{RADIUS_FULL_PX}px", px=float(RADIUS_FULL_PX))
    return Literal(px_to_rem(px), px=px)


def _add(
    namespace: PrimitiveNamespace,
    category: Category,
    slug: str,
    value: Literal,
    section: Section,
    rank: int = 0,
) -> None:
    namespace.add(
        Primitive(
            name=category.css_name(slug),
            value=value,
            category=category,
            section=section,
            origin=PrimitiveOrigin.DEFAULT,
            px=value.px,
            rank=rank,
        )
    )


def add_baseline(namespace: PrimitiveNamespace) -> None:
    """Offer the always-present primitives (breakpoints, base colors, fonts ...)."""
    for rank, (slug, px) in enumerate(BREAKPOINTS):
        value = Literal(px_to_rem(px), px=px)
        _add(namespace, Category.BREAKPOINT, slug, value, Section.BREAKPOINTS, rank)
    for slug, value in BASE_COLORS:
        _add(namespace, Category.COLOR, slug, Literal(value), Section.GLOBAL_COLORS)
    for step, value in GRAY_RAMP:
        _add(namespace, Category.COLOR, f"gray-{step}", Literal(value), Section.GLOBAL_COLORS)
    for slug, value in FONT_FAMILIES:
        _add(namespace, Category.FONT, slug, Literal(value), Section.TYPOGRAPHY)
    for slug, value in FONT_WEIGHTS:
        _add(namespace, Category.FONT, f"weight-{slug}", Literal(value), Section.TYPOGRAPHY)
    _add(namespace, Category.TRANSITION, "duration", Literal(TRANSITION_DURATION), Section.OTHERS)
    for slug, value in Z_LEVELS:
        _add(namespace, Category.Z, slug, Literal(value), Section.OTHERS)


def add_category_fallbacks(namespace: PrimitiveNamespace, supplied: set[Category]) -> None:
    """Add default scales for dimension categories the documents did not supply."""
    if Category.SPACING not in supplied:
        for px in SPACING_SCALE_PX:
            value = dimension_literal(Category.SPACING, px)
            _add(namespace, Category.SPACING, str(px), value, Section.SPACING)
    if Category.TEXT not in supplied:
        for px in TEXT_SCALE_PX:
            value = dimension_literal(Category.TEXT, px)
            _add(namespace, Category.TEXT, str(px), value, Section.TYPOGRAPHY)
    if Category.RADIUS not in supplied:
        for slug, px in RADIUS_SCALE:
            value = dimension_literal(Category.RADIUS, px)
            _add(namespace, Category.RADIUS, slug, value, Section.RADIUS)


def add_placeholder_palette(namespace: PrimitiveNamespace) -> None:
    for step, value in PLACEHOLDER_PALETTE:
        slug = f"{PLACEHOLDER_NAME}-{step}"
        _add(namespace, Category.COLOR, slug, Literal(value), Section.PROJECT_COLORS)

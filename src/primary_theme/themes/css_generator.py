"""
CSS generator for primary-theme.

Renders the primitive namespace and the token set as two ``:root`` sheets
plus their JSON mirrors. This is the only place that produces CSS text;
option-driven collapsing (fixed sizes, single theme mode) is applied to the
structured values before rendering.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from primary_theme.core.errors import UnresolvedReferenceError
from primary_theme.core.ir.model import (
    CURATED_SECTIONS,
    SECTION_ORDER,
    Category,
    Fluid,
    FluidGroup,
    LightDark,
    Literal,
    Primitive,
    Section,
    Sequence,
    Token,
    TokenSet,
    Value,
)
from primary_theme.core.ir.options import CompileOptions, ThemeMode
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.core.units import format_number, numeric_sort_key

INDENT = "  "

# JSON mirror group and $type per category
JSON_GROUPS: dict[Category, str] = {
    Category.COLOR: "color",
    Category.SPACING: "spacing",
    Category.RADIUS: "rounded",
    Category.TEXT: "fontSize",
    Category.LINE_HEIGHT: "lineHeight",
    Category.FONT: "font",
    Category.Z: "zIndex",
    Category.TRANSITION: "duration",
    Category.BREAKPOINT: "breakpoint",
    Category.OTHER: "other",
}

_JSON_TYPES: dict[Category, str] = {
    Category.COLOR: "color",
    Category.SPACING: "dimension",
    Category.RADIUS: "dimension",
    Category.TEXT: "dimension",
    Category.LINE_HEIGHT: "dimension",
    Category.Z: "number",
    Category.TRANSITION: "duration",
    Category.BREAKPOINT: "dimension",
    Category.OTHER: "string",
}

_VAR_RE = re.compile(r"var\(\s*(--[A-Za-z0-9_-]+)")
_DECL_RE = re.compile(r"^\s*(--[A-Za-z0-9_-]+)\s*:", re.MULTILINE)


# =============================================================================
# Value collapsing
# =============================================================================


def collapse(value: Value, options: CompileOptions) -> Value:
    """
    Apply responsive and theme-mode options to a structured value.

    Fixed typography/spacing keeps a clamp's minimum argument; a single
    theme mode keeps one side of ``light-dark()``.
    """
    if isinstance(value, Fluid):
        if value.group == FluidGroup.TYPOGRAPHY and not options.typo_responsive:
            return value.min
        if value.group == FluidGroup.SPACING and not options.spacing_responsive:
            return value.min
        return value
    if isinstance(value, LightDark):
        if options.theme_mode == ThemeMode.LIGHT:
            return collapse(value.light, options)
        if options.theme_mode == ThemeMode.DARK:
            return collapse(value.dark, options)
        return LightDark(collapse(value.light, options), collapse(value.dark, options))
    if isinstance(value, Sequence):
        return Sequence(tuple(collapse(part, options) for part in value.parts))
    return value


# =============================================================================
# Ordering
# =============================================================================


def _ordered(entries: Iterable[Primitive | Token], section: Section) -> list[Any]:
    if section in CURATED_SECTIONS:
        return sorted(entries, key=lambda e: (e.rank, numeric_sort_key(e.name)))
    return sorted(entries, key=lambda e: numeric_sort_key(e.name))


def _grouped(entries: Iterable[Primitive | Token]) -> list[tuple[Section, list[Any]]]:
    """Entries per section, in section order, empty sections omitted."""
    items = list(entries)
    grouped = []
    for section in SECTION_ORDER:
        members = [e for e in items if e.section == section]
        if members:
            grouped.append((section, _ordered(members, section)))
    return grouped


# =============================================================================
# CSS
# =============================================================================


def _header(title: str, options: CompileOptions, primary: str | None) -> list[str]:
    lines = ["/* ----------------------------------", f" * {title}"]
    lines.extend(f" * {line}" for line in options.describe(primary))
    lines.append(" * Generated by primary-theme - do not edit")
    lines.append(" * ----------------------------------")
    lines.append(" */")
    return lines


def _px_comment(primitive: Primitive, options: CompileOptions) -> str:
    if not options.emit_px_comments or primitive.px is None:
        return ""
    value = primitive.value
    if not isinstance(value, Literal) or not value.text.endswith("rem"):
        return ""
    return f" /* {format_number(primitive.px)}px */"


def _section_lines(
    sections: list[tuple[Section, list[Any]]],
    render: Any,
) -> list[str]:
    lines: list[str] = []
    for index, (section, members) in enumerate(sections):
        if index:
            lines.append("")
        lines.append(f"{INDENT}/* {section} */")
        for entry in members:
            lines.append(render(entry))
    return lines


def generate_primitives_css(
    namespace: PrimitiveNamespace,
    options: CompileOptions,
    primary: str | None = None,
) -> str:
    """
    Generate the primitives sheet (``theme.css``).

    Args:
        namespace: Primitives to emit
        options: Compilation options (px comments, header)
        primary: Resolved primary color family, shown in the header

    Returns:
        CSS text with a single ``:root`` block
    """
    lines = _header("Theme primitives", options, primary)
    lines.append(":root {")

    def render(primitive: Primitive) -> str:
        css = primitive.value.css()
        return f"{INDENT}{primitive.name}: {css};{_px_comment(primitive, options)}"

    lines.extend(_section_lines(_grouped(namespace), render))
    lines.append("}")
    lines.append("")
    return "\n".join(lines)


def _color_scheme_lines(options: CompileOptions) -> list[str]:
    if options.theme_mode != ThemeMode.BOTH:
        return [f"{INDENT}color-scheme: {options.theme_mode};"]
    lines = [f"{INDENT}color-scheme: light dark;"]
    for mode in ("light", "dark"):
        lines.append("")
        lines.append(f'{INDENT}&[data-theme="{mode}"] {{')
        lines.append(f"{INDENT * 2}color-scheme: {mode};")
        lines.append(f"{INDENT}}}")
    return lines


def generate_tokens_css(
    tokens: TokenSet,
    options: CompileOptions,
    primary: str | None = None,
) -> str:
    """Generate the tokens sheet (``theme-tokens.css``)."""
    lines = _header("Theme tokens", options, primary)
    lines.append(":root {")
    lines.extend(_color_scheme_lines(options))

    def render(token: Token) -> str:
        return f"{INDENT}{token.name}: {collapse(token.value, options).css()};"

    sections = _section_lines(_grouped(tokens), render)
    if sections:
        lines.append("")
        lines.extend(sections)
    lines.append("}")
    lines.append("")
    return "\n".join(lines)


# =============================================================================
# JSON mirror
# =============================================================================


def _json_type(category: Category, slug: str) -> str:
    if category == Category.FONT:
        return "fontWeight" if slug.startswith("weight-") else "fontFamily"
    return _JSON_TYPES[category]


def _token_slug(token: Token) -> str:
    prefix = f"--{token.category.prefix}-" if token.category.prefix else "--"
    if token.name.startswith(prefix):
        return token.name[len(prefix) :]
    return token.name[2:]


def primitives_to_json(namespace: PrimitiveNamespace) -> dict[str, dict[str, dict[str, str]]]:
    """Group primitives by category as ``{group: {slug: {$type, value}}}``."""
    result: dict[str, dict[str, dict[str, str]]] = {}
    for primitive in sorted(namespace, key=lambda p: numeric_sort_key(p.name)):
        group = result.setdefault(JSON_GROUPS[primitive.category], {})
        group[primitive.slug] = {
            "$type": _json_type(primitive.category, primitive.slug),
            "value": primitive.value.css(),
        }
    return result


def tokens_to_json(
    tokens: TokenSet, options: CompileOptions
) -> dict[str, dict[str, dict[str, Any]]]:
    """Group tokens by category; values reflect the collapsed CSS."""
    result: dict[str, dict[str, dict[str, Any]]] = {}
    for token in sorted(tokens, key=lambda t: numeric_sort_key(t.name)):
        slug = _token_slug(token)
        entry: dict[str, Any] = {
            "$type": _json_type(token.category, slug),
            "value": collapse(token.value, options).css(),
        }
        if token.per_mode:
            entry["modes"] = {str(mode): side.css() for mode, side in token.per_mode.items()}
        result.setdefault(JSON_GROUPS[token.category], {})[slug] = entry
    return result


# =============================================================================
# Reference checking
# =============================================================================


def declared_names(css: str) -> set[str]:
    return set(_DECL_RE.findall(css))


def referenced_names(css: str) -> set[str]:
    return set(_VAR_RE.findall(css))


def check_references(primitives_css: str, tokens_css: str) -> None:
    """
    Verify that every ``var()`` has a declaration.

    The primitives sheet must be self-contained; the tokens sheet may use
    anything either sheet declares.

    Raises:
        UnresolvedReferenceError: On the first sheet with a dangling reference
    """
    primitive_names = declared_names(primitives_css)
    missing = referenced_names(primitives_css) - primitive_names
    if missing:
        raise UnresolvedReferenceError(sorted(missing), "theme.css")
    missing = referenced_names(tokens_css) - primitive_names - declared_names(tokens_css)
    if missing:
        raise UnresolvedReferenceError(sorted(missing), "theme-tokens.css")

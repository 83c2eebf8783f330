"""
Custom declaration parsing.

Users can paste ``--name: value;`` lines (custom colors, overrides of
generated tokens). Each line is validated, then its value is parsed into the
structured value model so option-driven rewrites never touch text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .ir.model import (
    Category,
    Endpoint,
    Fluid,
    FluidGroup,
    LightDark,
    Literal,
    Ref,
    Value,
)
from .units import value_to_px

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"^var\(\s*(--[A-Za-z0-9_-]+)\s*\)$")
_NAME_RE = re.compile(r"^--[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class Declaration:
    """One parsed ``--name: value;`` line."""

    name: str
    value: Value
    line: int

    @property
    def is_color(self) -> bool:
        return self.name.startswith("--color-")


@dataclass(frozen=True)
class InvalidDeclaration:
    line: int
    text: str
    reason: str


def validate_line(text: str) -> str | None:
    """Return why a declaration line is invalid, or None if it is acceptable."""
    if not text.startswith("--"):
        return "must start with '--'"
    if ":" not in text:
        return "missing ':'"
    if not text.endswith(";"):
        return "must end with ';'"
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return "unbalanced parentheses"
    if depth != 0:
        return "unbalanced parentheses"
    name = text.split(":", 1)[0].strip()
    if not _NAME_RE.match(name):
        return f"invalid property name {name!r}"
    if not text.split(":", 1)[1].rstrip(";").strip():
        return "empty value"
    return None


def split_arguments(text: str) -> list[str]:
    """Split on commas that are not nested inside parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


def _function_args(text: str, name: str) -> list[str] | None:
    """Arguments of ``name(...)`` when it spans the whole text."""
    prefix = f"{name}("
    if not (text.lower().startswith(prefix) and text.endswith(")")):
        return None
    inner = text[len(prefix) : -1]
    # The opening paren must close at the very end
    depth = 0
    for char in inner:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return None
    return split_arguments(inner)


def group_for_name(name: str) -> FluidGroup | None:
    if name.startswith(("--text-", "--line-height-")):
        return FluidGroup.TYPOGRAPHY
    if name.startswith("--spacing-"):
        return FluidGroup.SPACING
    return None


def category_for_name(name: str) -> Category:
    """Best-effort category of a custom property from its name prefix."""
    body = name[2:]
    for category in (
        Category.LINE_HEIGHT,
        Category.COLOR,
        Category.SPACING,
        Category.RADIUS,
        Category.TEXT,
        Category.FONT,
        Category.Z,
        Category.TRANSITION,
    ):
        if body.startswith(f"{category.value}-"):
            return category
    return Category.OTHER


def parse_endpoint(text: str) -> Endpoint:
    text = text.strip()
    match = _VAR_RE.match(text)
    if match:
        return Ref(match.group(1))
    return Literal(text, px=value_to_px(text))


def parse_value(text: str, group: FluidGroup | None = None) -> Value:
    """
    Parse a CSS value into the structured model.

    ``clamp(a, b, c)`` becomes Fluid, ``light-dark(a, b)`` becomes LightDark,
    a lone ``var(--x)`` becomes Ref and anything else a Literal.
    """
    text = text.strip()
    args = _function_args(text, "clamp")
    if args is not None and len(args) == 3:
        low, middle, high = args
        return Fluid(min=parse_endpoint(low), middle=middle, max=parse_endpoint(high), group=group)
    args = _function_args(text, "light-dark")
    if args is not None and len(args) == 2:
        return LightDark(parse_value(args[0], group), parse_value(args[1], group))
    return parse_endpoint(text)


def parse_declarations(text: str) -> tuple[list[Declaration], list[InvalidDeclaration]]:
    """
    Parse a block of custom declarations.

    Blank lines and ``/* ... */`` comment lines are ignored. A later
    declaration of the same name replaces an earlier one.

    Returns:
        (valid declarations in first-seen order, invalid lines)
    """
    declarations: dict[str, Declaration] = {}
    invalid: list[InvalidDeclaration] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or (line.startswith("/*") and line.endswith("*/")):
            continue
        reason = validate_line(line)
        if reason is not None:
            invalid.append(InvalidDeclaration(line=number, text=line, reason=reason))
            continue
        name, _, value = line[:-1].partition(":")
        name = name.strip()
        declarations[name] = Declaration(
            name=name, value=parse_value(value, group_for_name(name)), line=number
        )
    logger.debug(f"Parsed {len(declarations)} custom declarations, {len(invalid)} invalid")
    return list(declarations.values()), invalid

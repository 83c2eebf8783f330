"""
Structured primitive and token model.

Everything the compiler emits is held here as values (literals, references,
fluid ranges, light/dark pairs) until the CSS generator renders it. Option
driven rewrites such as "fixed spacing" or "light only" operate on these
values, never on emitted text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from .documents import Axis, Mode

# =============================================================================
# Categories and sections
# =============================================================================


class Category(StrEnum):
    """Primitive families; the value doubles as the CSS name prefix."""

    COLOR = "color"
    SPACING = "spacing"
    RADIUS = "radius"
    TEXT = "text"
    LINE_HEIGHT = "line-height"
    FONT = "font"
    Z = "z"
    TRANSITION = "transition"
    BREAKPOINT = "breakpoint"
    OTHER = "other"

    @property
    def prefix(self) -> str:
        if self in (Category.BREAKPOINT, Category.OTHER):
            return ""
        return self.value

    @property
    def is_dimension(self) -> bool:
        """Categories whose values are px lengths normalized to rem."""
        return self in (Category.SPACING, Category.RADIUS, Category.TEXT, Category.LINE_HEIGHT)

    def css_name(self, slug: str) -> str:
        if self.prefix:
            return f"--{self.prefix}-{slug}"
        return f"--{slug}"


class Section(StrEnum):
    """Emission sections; declaration order is the output order."""

    BREAKPOINTS = "Breakpoints"
    GLOBAL_COLORS = "Global colors"
    PROJECT_COLORS = "Project colors"
    GLOBAL_TOKENS = "Global tokens"
    PROJECT_TOKENS = "Project tokens"
    SPACING = "Spacing"
    TYPOGRAPHY = "Typography"
    RADIUS = "Radius"
    FORMS = "Forms"
    OTHERS = "Others"
    SYNTHESIZED = "Synthesized primitives"
    CUSTOM = "Custom variables"


SECTION_ORDER: tuple[Section, ...] = tuple(Section)

# Sections that keep their definition order instead of numeric sorting
CURATED_SECTIONS: frozenset[Section] = frozenset(
    {Section.BREAKPOINTS, Section.GLOBAL_TOKENS, Section.FORMS}
)


class PrimitiveOrigin(StrEnum):
    """Where a primitive came from."""

    IMPORTED = "imported"
    SYNTHESIZED = "synthesized"
    DEFAULT = "default"
    CUSTOM = "custom"
    ALIAS = "alias"


class FluidGroup(StrEnum):
    """Responsive switch that controls a fluid value."""

    TYPOGRAPHY = "typography"
    SPACING = "spacing"


def fluid_group_for(category: Category) -> FluidGroup | None:
    if category in (Category.TEXT, Category.LINE_HEIGHT):
        return FluidGroup.TYPOGRAPHY
    if category == Category.SPACING:
        return FluidGroup.SPACING
    return None


# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class Literal:
    """A literal CSS value; ``px`` is set for lengths."""

    text: str
    px: float | None = None

    def css(self) -> str:
        return self.text

    def refs(self) -> Iterator[str]:
        return iter(())


@dataclass(frozen=True)
class Ref:
    """A ``var(--name)`` reference."""

    name: str

    def css(self) -> str:
        return f"var({self.name})"

    def refs(self) -> Iterator[str]:
        yield self.name


Endpoint = Literal | Ref


@dataclass(frozen=True)
class Fluid:
    """A ``clamp(min, middle, max)`` range on the viewport axis."""

    min: Endpoint
    middle: str
    max: Endpoint
    group: FluidGroup | None = None

    def css(self) -> str:
        return f"clamp({self.min.css()}, {self.middle}, {self.max.css()})"

    def refs(self) -> Iterator[str]:
        yield from self.min.refs()
        yield from self.max.refs()


@dataclass(frozen=True)
class LightDark:
    """A ``light-dark(light, dark)`` pair on the appearance axis."""

    light: Value
    dark: Value

    def css(self) -> str:
        return f"light-dark({self.light.css()}, {self.dark.css()})"

    def refs(self) -> Iterator[str]:
        yield from self.light.refs()
        yield from self.dark.refs()


@dataclass(frozen=True)
class Sequence:
    """Space-separated values, e.g. a two-sided padding shorthand."""

    parts: tuple[Value, ...]

    def css(self) -> str:
        return " ".join(part.css() for part in self.parts)

    def refs(self) -> Iterator[str]:
        for part in self.parts:
            yield from part.refs()


Value = Literal | Ref | Fluid | LightDark | Sequence


# =============================================================================
# Entities
# =============================================================================


@dataclass(frozen=True)
class Primitive:
    """A leaf custom property. Immutable once published."""

    name: str
    value: Endpoint
    category: Category
    section: Section
    origin: PrimitiveOrigin = PrimitiveOrigin.IMPORTED
    px: float | None = None
    rank: int = 0

    @property
    def slug(self) -> str:
        prefix = f"--{self.category.prefix}-" if self.category.prefix else "--"
        if self.name.startswith(prefix):
            return self.name[len(prefix) :]
        return self.name[2:]


@dataclass
class Token:
    """A semantic custom property whose value may vary by mode."""

    name: str
    value: Value
    category: Category
    section: Section
    axis: Axis | None = None
    per_mode: dict[Mode, Endpoint] = field(default_factory=dict)
    document: str | None = None
    mirrored: bool = False
    rank: int = 0


class TokenSet:
    """Ordered token collection keyed by CSS name."""

    def __init__(self) -> None:
        self._tokens: dict[str, Token] = {}

    def add(self, token: Token) -> bool:
        """Insert unless a token of that name exists; returns whether inserted."""
        if token.name in self._tokens:
            return False
        self._tokens[token.name] = token
        return True

    def replace(self, token: Token) -> None:
        self._tokens[token.name] = token

    def remove(self, name: str) -> Token | None:
        return self._tokens.pop(name, None)

    def get(self, name: str) -> Token | None:
        return self._tokens.get(name)

    def has_category(self, category: Category) -> bool:
        return any(t.category == category for t in self._tokens.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tokens

    def __iter__(self) -> Iterator[Token]:
        return iter(list(self._tokens.values()))

    def __len__(self) -> int:
        return len(self._tokens)

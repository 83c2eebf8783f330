"""
Ingestion: raw export variables to normalized entries.

Export tools spell category prefixes many ways (``FontSize``, ``font.fontSize``,
``Font-Size``, ``leading`` ...). Every spelling is resolved once, here, against
an explicit ordered alias table. Downstream code only sees NormalizedEntry.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .ir.documents import (
    AXIS_MODES,
    Axis,
    ColorRGBA,
    Mode,
    RawVariable,
    ResolvedValue,
    TokenDocument,
    VariableKind,
)
from .ir.model import Category

logger = logging.getLogger(__name__)

# =============================================================================
# Alias table
# =============================================================================

# (alias, category, slug prefix). Consulted in order; longer spellings of a
# category come before shorter ones so "font-size" wins over "font".
CATEGORY_ALIASES: tuple[tuple[str, Category, str], ...] = (
    ("line-height", Category.LINE_HEIGHT, ""),
    ("lineheight", Category.LINE_HEIGHT, ""),
    ("leading", Category.LINE_HEIGHT, ""),
    ("font-fontsize", Category.TEXT, ""),
    ("typography-size", Category.TEXT, ""),
    ("font-size", Category.TEXT, ""),
    ("fontsize", Category.TEXT, ""),
    ("text-size", Category.TEXT, ""),
    ("textsize", Category.TEXT, ""),
    ("text", Category.TEXT, ""),
    ("spacings", Category.SPACING, ""),
    ("spacing", Category.SPACING, ""),
    ("space", Category.SPACING, ""),
    ("gap", Category.SPACING, ""),
    ("border-radius", Category.RADIUS, ""),
    ("radius", Category.RADIUS, ""),
    ("radii", Category.RADIUS, ""),
    ("rounded", Category.RADIUS, ""),
    ("colors", Category.COLOR, ""),
    ("colour", Category.COLOR, ""),
    ("color", Category.COLOR, ""),
    ("z-index", Category.Z, ""),
    ("zindex", Category.Z, ""),
    ("z", Category.Z, ""),
    ("transitions", Category.TRANSITION, ""),
    ("transition", Category.TRANSITION, ""),
    ("duration", Category.TRANSITION, ""),
    ("font-weight", Category.FONT, "weight"),
    ("font-family", Category.FONT, ""),
    ("font", Category.FONT, ""),
    ("breakpoints", Category.BREAKPOINT, ""),
    ("breakpoint", Category.BREAKPOINT, ""),
)

_ALIAS_LOOKUP: dict[str, tuple[Category, str]] = {
    alias: (category, prefix) for alias, category, prefix in CATEGORY_ALIASES
}
_COMPACT_LOOKUP: dict[str, tuple[Category, str]] = {
    alias.replace("-", ""): (category, prefix) for alias, category, prefix in CATEGORY_ALIASES
}
_PREFIX_ORDER = sorted(CATEGORY_ALIASES, key=lambda row: len(row[0]), reverse=True)

# Leading path segments that only group variables
_GROUP_WORDS = frozenset({"typography", "tokens", "primitives", "semantic", "global", "theme"})

_NUMERIC_CATEGORIES = frozenset(
    {
        Category.SPACING,
        Category.RADIUS,
        Category.TEXT,
        Category.LINE_HEIGHT,
        Category.Z,
        Category.TRANSITION,
        Category.BREAKPOINT,
    }
)


def normalize_segment(segment: str) -> str:
    """Lower-case a path segment and turn ``_``, spaces and dots into dashes."""
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", segment.strip())
    text = re.sub(r"[\s_.]+", "-", text.strip().lower())
    return re.sub(r"-+", "-", text).strip("-")


def sanitize(text: str) -> str:
    """Make a CSS-identifier-safe slug."""
    slug = re.sub(r"[^a-z0-9-]+", "-", text.lower())
    return re.sub(r"-+", "-", slug).strip("-")


def _compact(segment: str) -> str:
    """Alias key form: dashes dropped for camelCase spellings like ``FontSize``."""
    return segment.replace("-", "")


def _match_alias(segment: str) -> tuple[Category, str] | None:
    if segment in _ALIAS_LOOKUP:
        return _ALIAS_LOOKUP[segment]
    return _COMPACT_LOOKUP.get(_compact(segment))


def _strip_repeated_prefix(slug: str, category: Category) -> str:
    """``FontSize/text-16`` carries the category twice; keep ``16``."""
    candidates = [alias for alias, cat, _ in _PREFIX_ORDER if cat == category]
    for alias in candidates:
        if slug.startswith(f"{alias}-"):
            return slug[len(alias) + 1 :]
    return slug


def classify(path: str, kind: VariableKind | None = None) -> tuple[Category, str]:
    """
    Resolve a slash-delimited variable path to ``(category, slug)``.

    Examples:
        ``color/gray/900`` -> (COLOR, ``gray-900``)
        ``FontSize/text-16`` -> (TEXT, ``16``)
        ``Leading/24`` -> (LINE_HEIGHT, ``24``)
    """
    segments = [normalize_segment(s) for s in path.split("/") if s.strip()]
    segments = [s for s in segments if s]
    while len(segments) > 1 and segments[0] in _GROUP_WORDS:
        segments = segments[1:]
    if not segments:
        return Category.OTHER, sanitize(path) or "unnamed"

    matched: tuple[Category, str] | None = None
    rest: list[str] = []
    if len(segments) > 2:
        matched = _match_alias(f"{segments[0]}-{segments[1]}")
        rest = segments[2:]
    if matched is None and len(segments) > 1:
        matched = _match_alias(segments[0])
        rest = segments[1:]
    if matched is None:
        head = segments[0]
        for alias, category, prefix in _PREFIX_ORDER:
            for form in (alias, _compact(alias)):
                if head.startswith(f"{form}-"):
                    matched = (category, prefix)
                    rest = [head[len(form) + 1 :], *segments[1:]]
                    break
            if matched:
                break

    if matched is not None:
        category, slug_prefix = matched
        # A color named "text-primary" is a color, not a font size
        if kind == VariableKind.COLOR and category != Category.COLOR:
            matched = None
        elif kind == VariableKind.STRING and category in _NUMERIC_CATEGORIES:
            matched = None

    if matched is None:
        slug = sanitize("-".join(segments))
        if kind == VariableKind.COLOR:
            return Category.COLOR, _strip_repeated_prefix(slug, Category.COLOR)
        return Category.OTHER, slug

    category, slug_prefix = matched
    slug = _strip_repeated_prefix(sanitize("-".join(rest)), category)
    if slug_prefix:
        slug = f"{slug_prefix}-{slug}" if slug and slug != slug_prefix else slug_prefix
    if not slug:
        slug = category.value
    return category, slug


# =============================================================================
# Normalized entries
# =============================================================================


@dataclass
class NormalizedEntry:
    """One variable after category and mode resolution."""

    category: Category
    slug: str
    path: str
    kind: VariableKind
    values: dict[Mode | None, ResolvedValue]
    semantic: bool
    document: str
    variable_id: str | None = None

    @property
    def primitive_name(self) -> str:
        return self.category.css_name(self.slug)

    @property
    def token_name(self) -> str:
        """Semantic colors drop the ``color`` prefix: ``--primary``, not ``--color-primary``."""
        if self.category in (Category.COLOR, Category.OTHER):
            return f"--{self.slug}"
        return self.category.css_name(self.slug)

    @property
    def css_name(self) -> str:
        return self.token_name if self.semantic else self.primitive_name

    @property
    def modes(self) -> list[Mode]:
        return [m for m in self.values if m is not None]

    def first_value(self) -> ResolvedValue:
        return next(iter(self.values.values()))


def _resolve_mode(
    key: str,
    index: int,
    variable: RawVariable,
    document: TokenDocument,
) -> Mode | None:
    keys = list(variable.mode_values)
    named = document.modes.get(key)
    if named is not None and (mode := Mode.parse(named)) is not None:
        return mode
    if (mode := Mode.parse(key)) is not None:
        return mode
    if len(keys) == 1:
        return document.mode
    if len(keys) == 2:
        axis = Axis.APPEARANCE if variable.kind == VariableKind.COLOR else Axis.VIEWPORT
        return AXIS_MODES[axis][index]
    return None


def normalize_variable(variable: RawVariable, document: TokenDocument) -> NormalizedEntry:
    kind = variable.kind or VariableKind.STRING
    category, slug = classify(variable.name, kind)
    values: dict[Mode | None, ResolvedValue] = {}
    for index, (key, value) in enumerate(variable.mode_values.items()):
        mode = _resolve_mode(key, index, variable, document)
        values.setdefault(mode, value)
    moded = [m for m in values if m is not None]
    return NormalizedEntry(
        category=category,
        slug=slug,
        path=variable.name,
        kind=kind,
        values=values,
        semantic=variable.is_semantic or len(moded) > 1,
        document=document.source,
        variable_id=variable.id,
    )


@dataclass
class Ingestion:
    """All normalized entries of a run plus lookup indexes for alias following."""

    entries: list[NormalizedEntry] = field(default_factory=list)
    by_id: dict[str, NormalizedEntry] = field(default_factory=dict)
    by_path: dict[str, NormalizedEntry] = field(default_factory=dict)

    @property
    def primitives(self) -> list[NormalizedEntry]:
        return [e for e in self.entries if not e.semantic]

    @property
    def semantics(self) -> list[NormalizedEntry]:
        return [e for e in self.entries if e.semantic]

    def alias_target(self, value: ResolvedValue) -> NormalizedEntry | None:
        if value.variable_id is not None and value.variable_id in self.by_id:
            return self.by_id[value.variable_id]
        if value.alias_name is not None:
            return self.by_path.get(sanitize(value.alias_name.replace("/", "-")))
        return None

    def alias_name(self, value: ResolvedValue, kind: VariableKind) -> str | None:
        """CSS name an aliased value points at, whether or not it was exported."""
        target = self.alias_target(value)
        if target is not None:
            return target.css_name
        if value.alias_name:
            category, slug = classify(value.alias_name, kind)
            return category.css_name(slug)
        return None

    def follow(self, value: ResolvedValue) -> ColorRGBA | float | str | None:
        """Follow alias chains to a raw value; None on a dead end or a cycle."""
        seen: set[int] = set()
        current: ResolvedValue | None = value
        while current is not None:
            if current.raw_value is not None:
                return current.raw_value
            target = self.alias_target(current)
            if target is None or id(target) in seen:
                return None
            seen.add(id(target))
            current = target.first_value()
        return None


def ingest(documents: list[TokenDocument]) -> Ingestion:
    """Normalize every variable of every document, in document order."""
    result = Ingestion()
    for document in documents:
        for variable in document.variables:
            entry = normalize_variable(variable, document)
            result.entries.append(entry)
            if entry.variable_id:
                result.by_id.setdefault(entry.variable_id, entry)
            result.by_path.setdefault(sanitize(variable.name.replace("/", "-")), entry)
            logger.debug(
                f"{document.source}: {variable.name} -> {entry.category} {entry.slug!r} "
                f"({'semantic' if entry.semantic else 'primitive'})"
            )
    _merge_split_modes(result)
    return result


def _merge_split_modes(ingestion: Ingestion) -> None:
    """
    Promote a path exported once per mode, across documents, to a semantic token.

    Per-mode documents in the primitive shape yield one single-mode entry per
    document. When those entries carry different modes and different values
    they are all marked semantic, so the modes merge into one token.
    """
    split: dict[str, list[NormalizedEntry]] = {}
    for entry in ingestion.entries:
        if not entry.semantic and len(entry.modes) == 1:
            split.setdefault(entry.primitive_name, []).append(entry)
    for name, entries in split.items():
        modes = {entry.modes[0] for entry in entries}
        values = [entry.values[entry.modes[0]] for entry in entries]
        if len(modes) < 2 or all(value == values[0] for value in values[1:]):
            continue
        for entry in entries:
            entry.semantic = True
        logger.info(f"{name}: merging {len(entries)} per-mode exports into one token")

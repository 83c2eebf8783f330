"""
Primitive extraction.

Turns the non-semantic entries of every document into canonical primitives:
colors become OKLCH literals, sizes become rem, aliases stay ``var()``
references. Missing alias targets are synthesized once.
"""

from __future__ import annotations

import logging

from .color import to_oklch
from .defaults import GLOBAL_COLOR_FAMILIES, dimension_literal
from .diagnostics import DiagnosticKind, Diagnostics
from .ingest import Ingestion, NormalizedEntry, classify
from .ir.documents import ColorRGBA, ResolvedValue, VariableKind
from .ir.model import Category, Endpoint, Literal, Primitive, PrimitiveOrigin, Ref, Section
from .namespace import PrimitiveNamespace
from .units import format_number, px_to_rem, value_to_px

logger = logging.getLogger(__name__)

# Line heights at or below this are unitless ratios, not px
LINE_HEIGHT_RATIO_MAX = 4


def section_for(category: Category, slug: str) -> Section:
    """Emission section of a primitive."""
    if category == Category.COLOR:
        family = slug.split("-", 1)[0]
        if family in GLOBAL_COLOR_FAMILIES:
            return Section.GLOBAL_COLORS
        return Section.PROJECT_COLORS
    if category == Category.SPACING:
        return Section.SPACING
    if category in (Category.TEXT, Category.LINE_HEIGHT, Category.FONT):
        return Section.TYPOGRAPHY
    if category == Category.RADIUS:
        return Section.RADIUS
    if category == Category.BREAKPOINT:
        return Section.BREAKPOINTS
    return Section.OTHERS


def literal_for(category: Category, raw: ColorRGBA | float | str) -> Literal | None:
    """
    Normalize a raw export value for ``category``.

    Returns None when the value cannot belong to the category (e.g. a
    number under a color path).
    """
    if isinstance(raw, ColorRGBA):
        return Literal(to_oklch(raw))
    if category == Category.COLOR:
        return Literal(raw) if isinstance(raw, str) else None
    if isinstance(raw, str):
        px = value_to_px(raw) if category.is_dimension else None
        if px is not None:
            return dimension_literal(category, px)
        return Literal(raw.strip())
    if category == Category.LINE_HEIGHT and raw <= LINE_HEIGHT_RATIO_MAX:
        return Literal(format_number(raw))
    if category.is_dimension:
        return dimension_literal(category, raw)
    if category == Category.TRANSITION:
        return Literal(f"{format_number(raw)}ms")
    if category in (Category.Z, Category.FONT):
        return Literal(format_number(raw))
    return Literal(px_to_rem(raw), px=raw)


def _synthesize_target(
    namespace: PrimitiveNamespace,
    name: str,
    kind: VariableKind,
    raw: ColorRGBA | float | str,
    alias_path: str | None,
) -> Primitive | None:
    """Create the primitive an alias points at when it was never exported."""
    existing = namespace.get(name)
    if existing is not None:
        return existing
    category = classify(alias_path, kind)[0] if alias_path is not None else Category.OTHER
    literal = literal_for(category, raw)
    if literal is None:
        return None
    primitive = Primitive(
        name=name,
        value=literal,
        category=category,
        section=Section.SYNTHESIZED,
        origin=PrimitiveOrigin.SYNTHESIZED,
        px=literal.px,
    )
    namespace.add(primitive)
    logger.debug(f"Synthesized alias target {name}: {literal.text}")
    return primitive


def resolve_alias(
    value: ResolvedValue,
    entry: NormalizedEntry,
    ingestion: Ingestion,
    namespace: PrimitiveNamespace,
    *,
    allow_tokens: bool = False,
    synthesize: bool = True,
) -> Endpoint | None:
    """
    Resolve the alias carried by ``value``, one of ``entry``'s mode values.

    The alias target is referenced when it is (or becomes) a primitive;
    with ``allow_tokens`` a reference to a semantic token is kept as well.
    An alias whose target was never exported gets the target synthesized
    (unless ``synthesize`` is off); otherwise the raw value is inlined.
    """
    target_name = ingestion.alias_name(value, entry.kind)
    raw = ingestion.follow(value)
    if target_name is None:
        return None
    target = ingestion.alias_target(value)
    if target is not None and target is not entry:
        if not target.semantic and raw is not None:
            return Ref(target_name)
        if target.semantic and allow_tokens:
            return Ref(target_name)
    if target_name in namespace:
        return Ref(target_name)
    if raw is None:
        return None
    if target is None and synthesize:
        synthesized = _synthesize_target(namespace, target_name, entry.kind, raw, value.alias_name)
        if synthesized is not None:
            return Ref(synthesized.name)
    return literal_for(entry.category, raw)


def extract_primitives(
    ingestion: Ingestion,
    namespace: PrimitiveNamespace,
    diagnostics: Diagnostics,
) -> set[Category]:
    """
    Publish every non-semantic entry as a primitive.

    Returns:
        Categories for which the documents supplied at least one primitive
    """
    supplied: set[Category] = set()
    imported = 0
    for entry in ingestion.primitives:
        value = entry.first_value()
        endpoint: Endpoint | None
        if value.alias_name is not None or value.variable_id is not None:
            endpoint = resolve_alias(value, entry, ingestion, namespace)
        else:
            endpoint = literal_for(entry.category, value.raw_value)  # type: ignore[arg-type]

        if endpoint is None:
            diagnostics.add(
                DiagnosticKind.UNRESOLVED_TOKEN,
                f"{entry.path}: no usable value; dropped",
                token=entry.primitive_name,
                document=entry.document,
            )
            continue

        px = endpoint.px if isinstance(endpoint, Literal) else None
        primitive = Primitive(
            name=entry.primitive_name,
            value=endpoint,
            category=entry.category,
            section=section_for(entry.category, entry.slug),
            origin=PrimitiveOrigin.IMPORTED,
            px=px,
        )
        if namespace.add(primitive):
            supplied.add(entry.category)
            imported += 1
            continue
        existing = namespace.get(primitive.name)
        if (
            existing is not None
            and existing.origin == PrimitiveOrigin.IMPORTED
            and existing.value != primitive.value
        ):
            diagnostics.add(
                DiagnosticKind.CONFLICTING_PRIMITIVE,
                f"{entry.path}: {primitive.value.css()} ignored; "
                f"{existing.name} is already {existing.value.css()}",
                token=primitive.name,
                document=entry.document,
            )
    logger.info(f"Extracted {imported} primitives from documents")
    return supplied

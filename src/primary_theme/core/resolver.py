"""
Mode-aware token resolver.

Groups same-named semantic variables across documents, resolves each mode
to a primitive reference (or literal), then either collapses the token
into a primitive alias or keeps it as a fluid / light-dark token.

Resolution order per token:
1. Group values by mode; tokens mixing appearance and viewport modes are dropped
2. Resolve each mode value (alias first, raw value otherwise)
3. Mirror a single known-mode value to the missing side
4. Collapse identical sides, keep the rest as tokens
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .defaults import dimension_literal
from .diagnostics import DiagnosticKind, Diagnostics
from .fluid import fluid_value, mirrored_value
from .ingest import Ingestion, NormalizedEntry
from .ir.documents import AXIS_MODES, Axis, Mode, ResolvedValue
from .ir.model import (
    Category,
    Endpoint,
    LightDark,
    Literal,
    Primitive,
    PrimitiveOrigin,
    Ref,
    Section,
    Token,
    TokenSet,
    Value,
    fluid_group_for,
)
from .ir.options import CompileOptions
from .namespace import PrimitiveNamespace
from .primitives import LINE_HEIGHT_RATIO_MAX, literal_for, resolve_alias, section_for
from .units import value_to_px

logger = logging.getLogger(__name__)


def token_section(category: Category) -> Section:
    if category == Category.SPACING:
        return Section.SPACING
    if category in (Category.TEXT, Category.LINE_HEIGHT, Category.FONT):
        return Section.TYPOGRAPHY
    return Section.PROJECT_TOKENS


@dataclass
class TokenGroup:
    """All values exported under one token name, across documents."""

    name: str
    category: Category
    values: dict[Mode | None, tuple[ResolvedValue, NormalizedEntry]] = field(
        default_factory=dict
    )

    @property
    def documents(self) -> list[str]:
        return sorted({entry.document for _, entry in self.values.values()})

    @property
    def moded(self) -> dict[Mode, tuple[ResolvedValue, NormalizedEntry]]:
        return {m: v for m, v in self.values.items() if m is not None}

    def axis(self) -> Axis | None:
        axes = {mode.axis for mode in self.moded}
        return axes.pop() if len(axes) == 1 else None


def group_tokens(ingestion: Ingestion) -> dict[str, TokenGroup]:
    """Merge semantic entries by token name; the first value per mode wins."""
    groups: dict[str, TokenGroup] = {}
    for entry in ingestion.semantics:
        group = groups.setdefault(entry.token_name, TokenGroup(entry.token_name, entry.category))
        for mode, value in entry.values.items():
            group.values.setdefault(mode, (value, entry))
    return groups


class TokenResolver:
    """Resolves token groups into the token set for one run."""

    def __init__(
        self,
        ingestion: Ingestion,
        namespace: PrimitiveNamespace,
        tokens: TokenSet,
        diagnostics: Diagnostics,
        options: CompileOptions,
    ):
        self.ingestion = ingestion
        self.namespace = namespace
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.options = options

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def endpoint(self, value: ResolvedValue, entry: NormalizedEntry) -> Endpoint | None:
        """Resolve one mode value to a reference or a literal."""
        if value.alias_name is not None or value.variable_id is not None:
            resolved = resolve_alias(
                value,
                entry,
                self.ingestion,
                self.namespace,
                allow_tokens=True,
                synthesize=self.options.synthesize_project_primitives,
            )
            if resolved is not None:
                return resolved
        raw = value.raw_value
        if raw is None:
            return None
        category = entry.category
        if category.is_dimension:
            px = value_to_px(raw)
            if category == Category.LINE_HEIGHT and px is not None and px <= LINE_HEIGHT_RATIO_MAX:
                px = None
            if px is not None:
                match = self.namespace.find_by_px(category, px)
                if match is not None:
                    return Ref(match.name)
                if self.options.synthesize_project_primitives:
                    return Ref(self.namespace.synthesize(category, px).name)
                return dimension_literal(category, px)
        literal = literal_for(category, raw)
        if literal is not None and category == Category.COLOR:
            match = self.namespace.find_by_value(literal.text, Category.COLOR)
            if match is not None:
                return Ref(match.name)
        return literal

    def px_of(self, endpoint: Endpoint) -> float | None:
        if isinstance(endpoint, Literal):
            return endpoint.px
        return self.namespace.px_of(endpoint.name)

    # -------------------------------------------------------------------------
    # Publishing
    # -------------------------------------------------------------------------

    def publish_alias(self, group: TokenGroup, endpoint: Endpoint) -> None:
        """Register a collapsed token as a primitive (or keep a token-to-token alias)."""
        if isinstance(endpoint, Ref) and endpoint.name not in self.namespace:
            # Aliases of other tokens stay in the tokens sheet
            self.tokens.add(
                Token(
                    name=group.name,
                    value=endpoint,
                    category=group.category,
                    section=token_section(group.category),
                    document=", ".join(group.documents),
                )
            )
            return
        if group.name in self.namespace:
            logger.debug(f"{group.name} already published; collapsed token not re-added")
            return
        slug = group.name[2:]
        self.namespace.add(
            Primitive(
                name=group.name,
                value=endpoint,
                category=group.category,
                section=section_for(group.category, slug),
                origin=PrimitiveOrigin.ALIAS,
                px=endpoint.px if isinstance(endpoint, Literal) else None,
            )
        )

    def _unshadow(self, group: TokenGroup, endpoints: dict[Mode, Endpoint]) -> dict[Mode, Endpoint]:
        """Inline endpoints that would reference the primitive this token shadows."""
        if group.name not in self.namespace:
            return endpoints
        self.diagnostics.add(
            DiagnosticKind.TOKEN_SHADOWS_PRIMITIVE,
            f"Token {group.name} has the same name as a primitive; the token overrides it",
            token=group.name,
        )
        shadowed = self.namespace.resolve(group.name)
        fixed: dict[Mode, Endpoint] = {}
        for mode, endpoint in endpoints.items():
            if isinstance(endpoint, Ref) and endpoint.name == group.name and shadowed is not None:
                fixed[mode] = shadowed.value
            else:
                fixed[mode] = endpoint
        return fixed

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    def resolve_all(self, groups: dict[str, TokenGroup]) -> None:
        # Axis each category uses, learned from tokens that carry both sides
        category_axes: dict[Category, Axis] = {}
        for group in groups.values():
            axis = group.axis()
            if axis is not None and len(group.moded) > 1:
                category_axes.setdefault(group.category, axis)

        for group in groups.values():
            self.resolve_group(group, category_axes.get(group.category))
        logger.info(f"Resolved {len(groups)} token groups into {len(self.tokens)} tokens")

    def resolve_group(self, group: TokenGroup, sibling_axis: Axis | None = None) -> None:
        moded = group.moded
        axes = {mode.axis for mode in moded}
        if len(axes) > 1:
            modes = ", ".join(sorted(str(m) for m in moded))
            self.diagnostics.add(
                DiagnosticKind.MIXED_AXIS_MODES,
                f"Token {group.name} mixes appearance and viewport modes ({modes}); dropped",
                token=group.name,
            )
            return

        endpoints: dict[Mode | None, Endpoint] = {}
        sources = moded if moded else group.values
        for mode, (value, entry) in sources.items():
            endpoint = self.endpoint(value, entry)
            if endpoint is not None:
                endpoints[mode] = endpoint
        if not endpoints:
            self.diagnostics.add(
                DiagnosticKind.UNRESOLVED_TOKEN,
                f"Token {group.name} has no resolvable value in any mode; dropped",
                token=group.name,
            )
            return

        axis = axes.pop() if axes else sibling_axis
        if axis is None:
            # Degenerate single-value token
            self.publish_alias(group, next(iter(endpoints.values())))
            return

        first, second = AXIS_MODES[axis]
        if len(endpoints) == 1:
            present_mode, endpoint = next(iter(endpoints.items()))
            if present_mode is None:
                message = (
                    f"Token {group.name} has no {first}/{second} values; using its value for both"
                )
            else:
                missing = second if present_mode == first else first
                message = (
                    f"Token {group.name} has no {missing} value; "
                    f"using the {present_mode} value for both"
                )
            self.diagnostics.add(DiagnosticKind.MISSING_MODE_VARIANT, message, token=group.name)
            sides = self._unshadow(group, {first: endpoint, second: endpoint})
            self._keep(group, axis, sides, mirrored=True)
            return

        low, high = endpoints[first], endpoints[second]
        if low == high:
            self.diagnostics.add(
                DiagnosticKind.REDUNDANT_TOKEN,
                f"Token {group.name} resolves to {low.css()} in every mode; collapsed",
                token=group.name,
            )
            self.publish_alias(group, low)
            return

        low_px, high_px = self.px_of(low), self.px_of(high)
        if (
            group.category.is_dimension
            and low_px is not None
            and high_px is not None
            and abs(low_px - high_px) < 1e-9
        ):
            self.diagnostics.add(
                DiagnosticKind.REDUNDANT_TOKEN_NUMERIC,
                f"Token {group.name} has the same size ({low_px:g}px) in every mode; collapsed",
                token=group.name,
            )
            self.publish_alias(group, dimension_literal(group.category, low_px))
            return

        sides = self._unshadow(group, {first: low, second: high})
        self._keep(group, axis, sides)

    def _keep(
        self,
        group: TokenGroup,
        axis: Axis,
        sides: dict[Mode, Endpoint],
        *,
        mirrored: bool = False,
    ) -> None:
        first, second = AXIS_MODES[axis]
        low, high = sides[first], sides[second]
        value: Value
        if axis == Axis.APPEARANCE:
            value = LightDark(low, high)
        else:
            low_px, high_px = self.px_of(low), self.px_of(high)
            group_name = fluid_group_for(group.category)
            if mirrored and low_px is not None:
                value = mirrored_value(low, low_px, group_name)
            elif mirrored or low_px is None or high_px is None:
                logger.warning(
                    f"Token {group.name}: cannot interpolate non-length values; using {first} value"
                )
                value = low
            else:
                value = fluid_value(
                    low_px,
                    high_px,
                    min_viewport_px=self.options.min_viewport_px,
                    max_viewport_px=self.options.max_viewport_px,
                    group=group_name,
                    min_endpoint=low,
                    max_endpoint=high,
                )
        token = Token(
            name=group.name,
            value=value,
            category=group.category,
            section=token_section(group.category),
            axis=axis,
            per_mode=dict(sides),
            document=", ".join(group.documents),
            mirrored=mirrored,
        )
        self.tokens.replace(token)
        logger.debug(f"Token {token.name}: {value.css()}")


def resolve_tokens(
    ingestion: Ingestion,
    namespace: PrimitiveNamespace,
    tokens: TokenSet,
    diagnostics: Diagnostics,
    options: CompileOptions,
) -> None:
    """Resolve every semantic entry of ``ingestion`` into ``tokens``."""
    resolver = TokenResolver(ingestion, namespace, tokens, diagnostics, options)
    resolver.resolve_all(group_tokens(ingestion))

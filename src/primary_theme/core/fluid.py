"""
Fluid interpolation engine.

Linear interpolation of a size between two viewport widths, rendered as
``clamp(min, <intercept>rem + <slope>vw, max)``. Endpoints reference an
existing primitive when one matches, otherwise they are rem literals.

The canonical window is 360px to 1280px.
"""

from __future__ import annotations

from .ir.model import Category, Endpoint, Fluid, FluidGroup, Literal, Ref, fluid_group_for
from .namespace import PrimitiveNamespace
from .units import ROOT_FONT_SIZE_PX, format_number, px_to_rem

MIN_VIEWPORT_PX = 360
MAX_VIEWPORT_PX = 1280

# Decimal places of the preferred term
INTERCEPT_PLACES = 3
SLOPE_PLACES = 4


def slope_and_intercept(
    min_px: float,
    max_px: float,
    min_viewport_px: float = MIN_VIEWPORT_PX,
    max_viewport_px: float = MAX_VIEWPORT_PX,
) -> tuple[float, float]:
    """Return ``(slope in vw, intercept in px)`` of the line through both endpoints."""
    if max_viewport_px <= min_viewport_px:
        raise ValueError("max_viewport_px must be greater than min_viewport_px")
    slope = (max_px - min_px) * 100 / (max_viewport_px - min_viewport_px)
    intercept = min_px - slope * min_viewport_px / 100
    return slope, intercept


def preferred_term(
    min_px: float,
    max_px: float,
    min_viewport_px: float = MIN_VIEWPORT_PX,
    max_viewport_px: float = MAX_VIEWPORT_PX,
) -> str:
    """The middle ``clamp()`` argument, e.g. ``0.304rem + 0.8696vw``."""
    slope, intercept = slope_and_intercept(min_px, max_px, min_viewport_px, max_viewport_px)
    rem = format_number(intercept / ROOT_FONT_SIZE_PX, INTERCEPT_PLACES)
    vw = format_number(abs(slope), SLOPE_PLACES)
    sign = "-" if slope < 0 and vw != "0" else "+"
    return f"{rem}rem {sign} {vw}vw"


def endpoint_for(
    px: float,
    category: Category | None,
    namespace: PrimitiveNamespace | None,
    *,
    synthesize: bool = False,
) -> Endpoint:
    """
    Reference the primitive matching ``px`` or fall back to a rem literal.

    With ``synthesize`` a missing canonical primitive is created instead
    of falling back.
    """
    if namespace is not None and category is not None:
        match = namespace.find_by_px(category, px)
        if match is not None:
            return Ref(match.name)
        if synthesize:
            return Ref(namespace.synthesize(category, px).name)
    return Literal(px_to_rem(px), px=px)


def fluid_value(
    min_px: float,
    max_px: float,
    *,
    category: Category | None = None,
    namespace: PrimitiveNamespace | None = None,
    min_viewport_px: float = MIN_VIEWPORT_PX,
    max_viewport_px: float = MAX_VIEWPORT_PX,
    synthesize: bool = False,
    group: FluidGroup | None = None,
    min_endpoint: Endpoint | None = None,
    max_endpoint: Endpoint | None = None,
) -> Fluid | Endpoint:
    """
    Structured form of :func:`fluid`.

    Equal endpoints give the single endpoint, never a clamp. Bounds are
    ordered smallest first so a shrinking value still clamps correctly.
    """
    low = min_endpoint or endpoint_for(min_px, category, namespace, synthesize=synthesize)
    high = max_endpoint or endpoint_for(max_px, category, namespace, synthesize=synthesize)
    if min_px == max_px:
        return low
    if min_px > max_px:
        low, high = high, low
    if group is None and category is not None:
        group = fluid_group_for(category)
    return Fluid(
        min=low,
        middle=preferred_term(min_px, max_px, min_viewport_px, max_viewport_px),
        max=high,
        group=group,
    )


def mirrored_value(endpoint: Endpoint, px: float | None, group: FluidGroup | None) -> Fluid:
    """A clamp whose two endpoints are the same value (one viewport side was missing)."""
    middle = f"{format_number((px or 0) / ROOT_FONT_SIZE_PX, INTERCEPT_PLACES)}rem + 0vw"
    return Fluid(min=endpoint, middle=middle, max=endpoint, group=group)


def fluid(
    min_value: float,
    max_value: float,
    min_viewport_px: float = MIN_VIEWPORT_PX,
    max_viewport_px: float = MAX_VIEWPORT_PX,
    *,
    namespace: PrimitiveNamespace | None = None,
    category: Category | None = None,
) -> str:
    """
    Fluid CSS value between two px sizes.

    Args:
        min_value: Size in px at ``min_viewport_px``.
        max_value: Size in px at ``max_viewport_px``.
        min_viewport_px: Viewport width where interpolation starts.
        max_viewport_px: Viewport width where interpolation ends.
        namespace: Primitives to reference for matching endpoints.
        category: Primitive family searched in ``namespace``.

    Returns:
        ``clamp(...)`` text, or a single rem value when both sizes are equal.

    Examples:
        >>> fluid(16, 32)
        'clamp(1rem, 0.609rem + 1.7391vw, 2rem)'
        >>> fluid(16, 16)
        '1rem'
    """
    value = fluid_value(
        min_value,
        max_value,
        category=category,
        namespace=namespace,
        min_viewport_px=min_viewport_px,
        max_viewport_px=max_viewport_px,
    )
    return value.css()

"""
sRGB to OKLCH conversion.

Pure-Python implementation of the OKLab transform (Björn Ottosson's
matrices). No external color libraries required.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from .ir.documents import ColorRGBA, parse_hex
from .units import format_number

# Components are rendered to this many decimal places
_PLACES = 4


class Oklch(NamedTuple):
    """An OKLCH color; lightness as a 0-1 fraction, hue in degrees."""

    L: float
    C: float
    H: float
    alpha: float = 1.0


def _linearize(channel: float) -> float:
    """Undo the sRGB transfer function."""
    if channel <= 0.04045:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def rgb_to_oklch(color: ColorRGBA) -> Oklch:
    """Convert an sRGB color to OKLCH components.

    Args:
        color: Validated sRGB color.

    Returns:
        Oklch tuple with hue normalized to [0, 360).
    """
    r = _linearize(color.r)
    g = _linearize(color.g)
    b = _linearize(color.b)

    l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b  # noqa: E741
    m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_ = math.cbrt(l)
    m_ = math.cbrt(m)
    s_ = math.cbrt(s)

    L = 0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_
    a = 1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_
    bb = 0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_

    C = math.sqrt(a * a + bb * bb)
    H = math.degrees(math.atan2(bb, a)) % 360.0
    return Oklch(L, C, H, color.a)


def oklch_to_css(L: float, C: float, H: float, alpha: float = 1.0) -> str:
    """Format OKLCH components as a CSS string.

    Each component is rendered to at most four decimals with trailing zeros
    trimmed. Achromatic colors (chroma rounding to zero) get hue 0 so white
    reads ``oklch(1 0 0)`` rather than carrying float noise in the hue.
    """
    L_fmt = format_number(L, _PLACES)
    C_fmt = format_number(C, _PLACES)
    H_fmt = "0" if C_fmt == "0" else format_number(H % 360.0, _PLACES)
    if H_fmt == "360":
        H_fmt = "0"
    if alpha != 1.0:
        return f"oklch({L_fmt} {C_fmt} {H_fmt} / {format_number(alpha, _PLACES)})"
    return f"oklch({L_fmt} {C_fmt} {H_fmt})"


def to_oklch(rgba: ColorRGBA | Mapping[str, Any] | str) -> str:
    """Convert an sRGB color to a CSS ``oklch()`` string.

    Args:
        rgba: A ColorRGBA, a mapping with ``r``, ``g``, ``b`` and optional
            ``a`` in [0, 1], or a hex string.

    Returns:
        CSS string such as ``oklch(0.628 0.2577 29.2339)``.

    Raises:
        pydantic.ValidationError: If a component is outside [0, 1].
        ValueError: If a string is not a hex color.
    """
    if isinstance(rgba, str):
        color = parse_hex(rgba)
    elif isinstance(rgba, ColorRGBA):
        color = rgba
    else:
        color = ColorRGBA.model_validate(dict(rgba))
    return oklch_to_css(*rgb_to_oklch(color))


# =============================================================================
# Parsing
# =============================================================================

_OKLCH_RE = re.compile(
    r"^oklch\(\s*([\d.]+)(%?)\s+([\d.]+)\s+([\d.]+)(?:deg)?\s*(?:/\s*([\d.]+)(%?))?\s*\)$",
    re.IGNORECASE,
)


def parse_oklch(text: str) -> Oklch | None:
    """Read ``oklch(L C H [/ A])`` with L as a fraction or a percentage.

    Returns None when the text is not a plain oklch() literal.
    """
    match = _OKLCH_RE.match(text.strip())
    if not match:
        return None
    lightness, l_pct, chroma, hue, alpha, a_pct = match.groups()
    L = float(lightness) / 100 if l_pct else float(lightness)
    A = 1.0
    if alpha is not None:
        A = float(alpha) / 100 if a_pct else float(alpha)
    return Oklch(L, float(chroma), float(hue), A)

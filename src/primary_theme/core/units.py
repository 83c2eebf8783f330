"""
Unit normalization and numeric-aware ordering.

All sizes arrive from design exports as pixel numbers and leave as rem
strings based on the 16px browser default.
"""

from __future__ import annotations

import math
import re

ROOT_FONT_SIZE_PX = 16

# Named size variants, smallest first
_TSHIRT_ORDER: tuple[str, ...] = (
    "3xs",
    "2xs",
    "xs",
    "s",
    "sm",
    "m",
    "md",
    "base",
    "l",
    "lg",
    "xl",
    "2xl",
    "3xl",
    "4xl",
    "5xl",
    "6xl",
)
_TSHIRT_RANK = {name: index for index, name in enumerate(_TSHIRT_ORDER)}

_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")


def format_number(value: float, places: int = 4) -> str:
    """Render a number with at most ``places`` decimals and no trailing zeros."""
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def px_to_rem(px: float, places: int = 4) -> str:
    """Convert a pixel value to a rem string; zero stays unitless."""
    if px == 0:
        return "0"
    return f"{format_number(px / ROOT_FONT_SIZE_PX, places)}rem"


def rem_to_px(rem: float) -> float:
    return rem * ROOT_FONT_SIZE_PX


def value_to_px(value: object) -> float | None:
    """
    Read a pixel quantity from a number or a CSS length string.

    Accepts plain numbers (taken as px), ``<n>px`` and ``<n>rem``. Returns
    None for anything else, including ``var()`` references.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        if text.endswith("rem"):
            return rem_to_px(float(text[:-3]))
        if text.endswith("px"):
            return float(text[:-2])
        if _NUMBER_RE.match(text):
            return float(text)
    except ValueError:
        return None
    return None


def is_number_text(text: str) -> bool:
    return bool(_NUMBER_RE.match(text.strip()))


def numeric_sort_key(name: str) -> tuple[str, int, float, str]:
    """
    Sort key that orders ``--spacing-8`` before ``--spacing-16``.

    Names are split into a family base and a final segment. Within a family
    ``none`` sorts first, then numeric suffixes by value, then named sizes
    (xs, s, m, ...), then any other suffix alphabetically, and ``full`` last.
    """
    stripped = name.lstrip("-").lower()
    base, sep, last = stripped.rpartition("-")
    if not sep:
        return (stripped, 3, 0.0, "")
    if last == "none":
        return (base, 0, 0.0, "")
    if _NUMBER_RE.match(last):
        return (base, 1, float(last), "")
    if last in _TSHIRT_RANK:
        return (base, 2, float(_TSHIRT_RANK[last]), "")
    if last == "full":
        return (base, 4, 0.0, "")
    return (base, 3, 0.0, last)


def sort_numeric(names: list[str]) -> list[str]:
    return sorted(names, key=numeric_sort_key)

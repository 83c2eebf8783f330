"""
Project palette completion.

Each project color family should offer the 100/300/500/700 steps the
semantic layer relies on. Missing steps are interpolated in OKLCH between
the nearest existing steps, or extrapolated with a reference lightness
scale when only one side exists.
"""

from __future__ import annotations

import logging
import re

from .color import Oklch, oklch_to_css, parse_oklch
from .defaults import GLOBAL_COLOR_FAMILIES
from .ir.model import Category, Literal, Primitive, PrimitiveOrigin, Section
from .namespace import PrimitiveNamespace

logger = logging.getLogger(__name__)

REQUIRED_STEPS: tuple[int, ...] = (100, 300, 500, 700)

# Reference lightness (fraction) per step, used for extrapolation
REFERENCE_LIGHTNESS: dict[int, float] = {100: 0.98, 300: 0.84, 500: 0.64, 700: 0.44}

STATUS_FAMILIES = frozenset({"error", "success", "warning", "info"})

_STEP_RE = re.compile(r"^--color-(?P<family>[a-z0-9-]+?)-(?P<step>\d+)$")


def project_families(namespace: PrimitiveNamespace) -> dict[str, dict[int, Primitive]]:
    """Project color families and their numeric steps, sorted by family name."""
    families: dict[str, dict[int, Primitive]] = {}
    for primitive in namespace.of_category(Category.COLOR):
        match = _STEP_RE.match(primitive.name)
        if not match:
            continue
        family = match.group("family")
        if family in GLOBAL_COLOR_FAMILIES or family in STATUS_FAMILIES:
            continue
        families.setdefault(family, {})[int(match.group("step"))] = primitive
    return dict(sorted(families.items()))


def _components(namespace: PrimitiveNamespace, primitive: Primitive) -> Oklch | None:
    target = namespace.resolve(primitive.name)
    if target is None or not isinstance(target.value, Literal):
        return None
    return parse_oklch(target.value.text)


def _mix_hue(h1: float, h2: float, t: float) -> float:
    delta = ((h2 - h1 + 180) % 360) - 180
    return (h1 + delta * t) % 360


def interpolate(low: Oklch, high: Oklch, t: float) -> Oklch:
    """Linear OKLCH interpolation along the shortest hue arc."""
    return Oklch(
        low.L + (high.L - low.L) * t,
        low.C + (high.C - low.C) * t,
        _mix_hue(low.H, high.H, t),
        low.alpha + (high.alpha - low.alpha) * t,
    )


def fill_missing_steps(namespace: PrimitiveNamespace) -> list[str]:
    """
    Synthesize missing required steps of every project family.

    Returns:
        Names of the synthesized primitives
    """
    created: list[str] = []
    for family, steps in project_families(namespace).items():
        known = {
            step: components
            for step, primitive in steps.items()
            if (components := _components(namespace, primitive)) is not None
        }
        if not known:
            continue
        for step in REQUIRED_STEPS:
            if step in steps:
                continue
            lower = max((s for s in known if s < step), default=None)
            upper = min((s for s in known if s > step), default=None)
            if lower is not None and upper is not None:
                t = (step - lower) / (upper - lower)
                color = interpolate(known[lower], known[upper], t)
            else:
                nearest = lower if lower is not None else upper
                assert nearest is not None
                base = known[nearest]
                color = Oklch(REFERENCE_LIGHTNESS[step], base.C, base.H, base.alpha)
            name = f"--color-{family}-{step}"
            namespace.add(
                Primitive(
                    name=name,
                    value=Literal(oklch_to_css(*color)),
                    category=Category.COLOR,
                    section=Section.SYNTHESIZED,
                    origin=PrimitiveOrigin.SYNTHESIZED,
                )
            )
            created.append(name)
            logger.debug(f"Filled missing palette step {name}")
    return created

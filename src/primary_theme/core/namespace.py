"""
Primitive namespace for one compilation run.

Primitives are keyed by CSS name. Insertion is first-writer-wins, so
imported values are never overwritten by defaults added later.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .ir.model import (
    SECTION_ORDER,
    Category,
    Literal,
    Primitive,
    PrimitiveOrigin,
    Ref,
    Section,
)
from .units import px_to_rem

logger = logging.getLogger(__name__)

# Endpoint matching tolerance in px
PX_TOLERANCE = 0.5


class PrimitiveNamespace:
    """Mutable primitive registry scoped to a single run."""

    def __init__(self) -> None:
        self._primitives: dict[str, Primitive] = {}

    def add(self, primitive: Primitive) -> bool:
        """
        Insert a primitive unless one with the same name exists.

        Returns:
            True if inserted, False if an earlier writer already owns the name
        """
        if primitive.name in self._primitives:
            logger.debug(f"Keeping existing {primitive.name}; ignoring {primitive.origin} value")
            return False
        self._primitives[primitive.name] = primitive
        return True

    def synthesize(
        self,
        category: Category,
        px: float,
        *,
        section: Section = Section.SYNTHESIZED,
    ) -> Primitive:
        """
        Return the canonical ``--<category>-<round(px)>`` primitive, creating it if needed.

        Idempotent: a second call with the same rounded size returns the
        primitive created by the first.
        """
        name = category.css_name(str(round(px)))
        existing = self._primitives.get(name)
        if existing is not None:
            return existing
        primitive = Primitive(
            name=name,
            value=Literal(px_to_rem(px), px=px),
            category=category,
            section=section,
            origin=PrimitiveOrigin.SYNTHESIZED,
            px=px,
        )
        self._primitives[name] = primitive
        logger.debug(f"Synthesized {name}: {primitive.value.css()}")
        return primitive

    def get(self, name: str) -> Primitive | None:
        return self._primitives.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._primitives

    def __iter__(self) -> Iterator[Primitive]:
        return iter(list(self._primitives.values()))

    def __len__(self) -> int:
        return len(self._primitives)

    def of_category(self, category: Category) -> list[Primitive]:
        return [p for p in self._primitives.values() if p.category == category]

    def resolve(self, name: str) -> Primitive | None:
        """Follow ``var()`` aliases to the primitive holding a literal."""
        seen: set[str] = set()
        current = self._primitives.get(name)
        while current is not None and isinstance(current.value, Ref):
            if current.name in seen:
                return None
            seen.add(current.name)
            current = self._primitives.get(current.value.name)
        return current

    def px_of(self, name: str) -> float | None:
        target = self.resolve(name)
        return target.px if target is not None else None

    def find_by_px(
        self, category: Category, px: float, tolerance: float = PX_TOLERANCE
    ) -> Primitive | None:
        """
        Find a primitive of ``category`` whose size matches ``px``.

        The canonical name ``--<prefix>-<round(px)>`` wins when it exists;
        otherwise the closest literal within ``tolerance`` is returned.
        """
        canonical = self._primitives.get(category.css_name(str(round(px))))
        if canonical is not None:
            return canonical
        best: Primitive | None = None
        best_delta = tolerance
        for primitive in self._primitives.values():
            if primitive.category != category or primitive.px is None:
                continue
            if not isinstance(primitive.value, Literal):
                continue
            delta = abs(primitive.px - px)
            if delta <= best_delta:
                if best is None or delta < best_delta:
                    best, best_delta = primitive, delta
        return best

    def find_by_value(self, text: str, category: Category | None = None) -> Primitive | None:
        """Find the first primitive whose literal value equals ``text``."""
        for primitive in self._primitives.values():
            if category is not None and primitive.category != category:
                continue
            if isinstance(primitive.value, Literal) and primitive.value.text == text:
                return primitive
        return None

    def by_section(self) -> dict[Section, list[Primitive]]:
        """Group primitives by section in emission order; empty sections omitted."""
        grouped: dict[Section, list[Primitive]] = {}
        for section in SECTION_ORDER:
            members = [p for p in self._primitives.values() if p.section == section]
            if members:
                grouped[section] = members
        return grouped

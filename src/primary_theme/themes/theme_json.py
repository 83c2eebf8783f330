"""
WordPress ``theme.json`` projection.

Palette, spacing and font-size presets point at the generated custom
properties (``var(--...)``); block styles use ``var:preset|<kind>|<slug>``
indirection. No literal design values are copied into the file.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from primary_theme.core.ir.model import Category, Section, TokenSet
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.core.units import numeric_sort_key

logger = logging.getLogger(__name__)

THEME_JSON_SCHEMA = "https://schemas.wp.org/wp/6.7/theme.json"
THEME_JSON_VERSION = 3
SPACING_UNITS = ["px", "rem", "%", "vh", "vw"]

# Palette entries every theme should expose, by custom property
DEFAULT_PALETTE: tuple[tuple[str, str], ...] = (
    ("primary", "--primary"),
    ("on-primary", "--on-primary"),
    ("surface", "--surface"),
    ("on-surface", "--on-surface"),
    ("white", "--color-white"),
    ("black", "--color-black"),
)

_VAR_RE = re.compile(r"var\((--[A-Za-z0-9_-]+)\)")
_PRESET_RE = re.compile(r"var:preset\|([a-z-]+)\|([a-z0-9-]+)")


def _title(slug: str) -> str:
    return " ".join(part.capitalize() for part in slug.split("-"))


def _entry(slug: str, key: str, name: str) -> dict[str, str]:
    return {"name": _title(slug), "slug": slug, key: f"var({name})"}


class ThemeJsonBuilder:
    """Builds a theme.json document from one run's primitives and tokens."""

    def __init__(self, namespace: PrimitiveNamespace, tokens: TokenSet):
        self.namespace = namespace
        self.tokens = tokens

    def _declared(self, name: str) -> bool:
        return name in self.namespace or name in self.tokens

    def palette(self) -> list[dict[str, str]]:
        entries: list[dict[str, str]] = []
        seen: set[str] = set()

        def push(slug: str, name: str) -> None:
            if slug not in seen:
                entries.append(_entry(slug, "color", name))
                seen.add(slug)

        colors = self.namespace.of_category(Category.COLOR)
        for primitive in sorted(colors, key=lambda p: numeric_sort_key(p.name)):
            push(primitive.slug, primitive.name)
        for token in self.tokens:
            if token.category == Category.COLOR and token.section in (
                Section.GLOBAL_TOKENS,
                Section.PROJECT_TOKENS,
            ):
                push(token.name[2:], token.name)
        for slug, name in DEFAULT_PALETTE:
            if self._declared(name):
                push(slug, name)
        return entries

    def _sizes(self, category: Category) -> list[dict[str, str]]:
        """Token sizes first, then primitive sizes, keyed by property name."""
        sizes: list[dict[str, str]] = []
        seen: set[str] = set()
        names = [t.name for t in self.tokens if t.category == category]
        names += [p.name for p in self.namespace.of_category(category)]
        for name in names:
            slug = name[2:]
            if slug in seen:
                continue
            seen.add(slug)
            sizes.append(_entry(slug, "size", name))
        return sorted(sizes, key=lambda s: numeric_sort_key(s["slug"]))

    def font_families(self) -> list[dict[str, str]]:
        families = []
        for primitive in self.namespace.of_category(Category.FONT):
            if primitive.slug.startswith("weight-"):
                continue
            families.append(
                {
                    "name": _title(primitive.slug),
                    "slug": primitive.slug,
                    "fontFamily": f"var({primitive.name})",
                }
            )
        return families

    def layout(self) -> dict[str, str]:
        return {
            "contentSize": "var(--md)" if "--md" in self.namespace else "48rem",
            "wideSize": "var(--xl)" if "--xl" in self.namespace else "80rem",
        }

    def styles(self, preset_slugs: dict[str, set[str]]) -> dict[str, Any]:
        def preset(kind: str, slug: str) -> str | None:
            return f"var:preset|{kind}|{slug}" if slug in preset_slugs.get(kind, set()) else None

        def prune(tree: dict[str, Any]) -> dict[str, Any]:
            pruned: dict[str, Any] = {}
            for key, value in tree.items():
                if isinstance(value, dict):
                    value = prune(value)
                    if not value:
                        continue
                if value is None:
                    continue
                pruned[key] = value
            return pruned

        def weight(name: str, fallback: str) -> str:
            return f"var({name})" if name in self.namespace else fallback

        font_weight = weight("--font-weight-regular", "400")
        bold = weight("--font-weight-semibold", "600")
        styles = {
            "color": {
                "background": preset("color", "surface"),
                "text": preset("color", "on-surface"),
            },
            "spacing": {
                "blockGap": preset("spacing", "spacing-16"),
                "padding": {
                    "left": preset("spacing", "spacing-16"),
                    "right": preset("spacing", "spacing-16"),
                },
            },
            "typography": {
                "fontFamily": preset("font-family", "base"),
                "fontSize": preset("font-size", "text-16"),
                "fontWeight": font_weight,
                "lineHeight": "1.2",
            },
            "elements": {
                "heading": {
                    "color": {"text": preset("color", "primary")},
                    "typography": {"fontWeight": bold},
                },
                "link": {
                    "color": {"text": preset("color", "primary")},
                    "typography": {"textDecoration": "underline"},
                },
            },
            "blocks": {
                "core/button": {
                    "color": {
                        "background": preset("color", "primary"),
                        "text": preset("color", "on-primary"),
                    },
                    "typography": {"fontWeight": bold},
                },
            },
        }
        return prune(styles)

    def build(self) -> dict[str, Any]:
        palette = self.palette()
        spacing = self._sizes(Category.SPACING)
        font_sizes = self._sizes(Category.TEXT)
        families = self.font_families()
        preset_slugs = {
            "color": {e["slug"] for e in palette},
            "spacing": {e["slug"] for e in spacing},
            "font-size": {e["slug"] for e in font_sizes},
            "font-family": {e["slug"] for e in families},
        }
        return {
            "$schema": THEME_JSON_SCHEMA,
            "version": THEME_JSON_VERSION,
            "settings": {
                "appearanceTools": True,
                "color": {
                    "defaultDuotone": False,
                    "defaultGradients": False,
                    "defaultPalette": False,
                    "palette": palette,
                },
                "spacing": {
                    "defaultSpacingSizes": False,
                    "spacingSizes": spacing,
                    "units": list(SPACING_UNITS),
                },
                "typography": {
                    "defaultFontSizes": False,
                    "fluid": False,
                    "fontSizes": font_sizes,
                    "fontFamilies": families,
                },
                "layout": self.layout(),
            },
            "styles": self.styles(preset_slugs),
        }


def build_theme_json(namespace: PrimitiveNamespace, tokens: TokenSet) -> dict[str, Any]:
    """Project one run's primitives and tokens into a theme.json document."""
    return ThemeJsonBuilder(namespace, tokens).build()


def validate_theme_json(theme: dict[str, Any], declared: set[str]) -> list[str]:
    """
    List problems in a generated theme.json.

    Args:
        theme: theme.json document
        declared: Custom property names declared by the CSS sheets

    Returns:
        Warning messages (empty when the document is consistent)
    """
    warnings: list[str] = []
    settings = theme.get("settings", {})
    if not isinstance(settings.get("color", {}).get("palette"), list):
        warnings.append("Missing settings.color.palette")
    if not isinstance(settings.get("spacing", {}).get("spacingSizes"), list):
        warnings.append("Missing settings.spacing.spacingSizes")
    if not isinstance(settings.get("typography", {}).get("fontSizes"), list):
        warnings.append("Missing settings.typography.fontSizes")

    text = json.dumps(theme)
    for name in sorted(set(_VAR_RE.findall(text))):
        if name not in declared:
            warnings.append(f"Reference to var({name}) has no declaration")

    def slugs(group: str, key: str) -> set[str]:
        return {e.get("slug") for e in settings.get(group, {}).get(key, [])}

    presets = {
        "color": slugs("color", "palette"),
        "spacing": slugs("spacing", "spacingSizes"),
        "font-size": slugs("typography", "fontSizes"),
        "font-family": slugs("typography", "fontFamilies"),
    }
    for kind, slug in sorted(set(_PRESET_RE.findall(text))):
        if slug not in presets.get(kind, set()):
            warnings.append(f"Preset var:preset|{kind}|{slug} is not defined")

    for warning in warnings:
        logger.debug(f"theme.json: {warning}")
    return warnings

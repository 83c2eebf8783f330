"""Tests for the theme.json projection."""

from __future__ import annotations

import pytest

from primary_theme.core.defaults import (
    add_baseline,
    add_category_fallbacks,
    add_placeholder_palette,
)
from primary_theme.core.ir import CompileOptions, TokenSet
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.themes.global_tokens import add_global_tokens
from primary_theme.themes.theme_json import (
    THEME_JSON_SCHEMA,
    build_theme_json,
    validate_theme_json,
)


@pytest.fixture
def theme() -> tuple[dict, set[str]]:
    namespace = PrimitiveNamespace()
    add_baseline(namespace)
    add_category_fallbacks(namespace, set())
    add_placeholder_palette(namespace)
    tokens = TokenSet()
    add_global_tokens(namespace, tokens, CompileOptions(), "raspberry")
    declared = {p.name for p in namespace} | {t.name for t in tokens}
    return build_theme_json(namespace, tokens), declared


class TestBuildThemeJson:
    def test_document_header(self, theme: tuple[dict, set[str]]) -> None:
        document, _ = theme
        assert document["$schema"] == THEME_JSON_SCHEMA
        assert document["version"] == 3
        assert document["settings"]["color"]["defaultPalette"] is False

    def test_palette_references_custom_properties(self, theme: tuple[dict, set[str]]) -> None:
        document, _ = theme
        palette = {entry["slug"]: entry for entry in document["settings"]["color"]["palette"]}
        assert palette["gray-50"] == {
            "name": "Gray 50",
            "slug": "gray-50",
            "color": "var(--color-gray-50)",
        }
        assert palette["primary"]["color"] == "var(--primary)"
        assert palette["on-primary"]["name"] == "On Primary"
        assert "raspberry-500" in palette

    def test_no_literal_values(self, theme: tuple[dict, set[str]]) -> None:
        document, _ = theme
        settings = document["settings"]
        for entry in settings["color"]["palette"]:
            assert entry["color"].startswith("var(--")
        for entry in settings["spacing"]["spacingSizes"]:
            assert entry["size"].startswith("var(--")
        for entry in settings["typography"]["fontSizes"]:
            assert entry["size"].startswith("var(--")

    def test_size_presets(self, theme: tuple[dict, set[str]]) -> None:
        document, _ = theme
        spacing = [e["slug"] for e in document["settings"]["spacing"]["spacingSizes"]]
        assert "spacing-m" in spacing
        assert spacing.index("spacing-8") < spacing.index("spacing-16")
        font_sizes = {e["slug"]: e for e in document["settings"]["typography"]["fontSizes"]}
        assert font_sizes["text-m"]["size"] == "var(--text-m)"
        families = [e["slug"] for e in document["settings"]["typography"]["fontFamilies"]]
        assert families == ["base", "mono"]

    def test_layout_uses_breakpoints(self, theme: tuple[dict, set[str]]) -> None:
        document, _ = theme
        assert document["settings"]["layout"] == {
            "contentSize": "var(--md)",
            "wideSize": "var(--xl)",
        }

    def test_styles_use_presets(self, theme: tuple[dict, set[str]]) -> None:
        document, _ = theme
        styles = document["styles"]
        assert styles["color"]["background"] == "var:preset|color|surface"
        assert styles["typography"]["fontSize"] == "var:preset|font-size|text-16"
        assert styles["typography"]["fontWeight"] == "var(--font-weight-regular)"
        button = styles["blocks"]["core/button"]
        assert button["color"]["text"] == "var:preset|color|on-primary"

    def test_generated_document_validates(self, theme: tuple[dict, set[str]]) -> None:
        document, declared = theme
        assert validate_theme_json(document, declared) == []

    def test_empty_run_prunes_missing_presets(self) -> None:
        document = build_theme_json(PrimitiveNamespace(), TokenSet())
        assert document["settings"]["layout"] == {"contentSize": "48rem", "wideSize": "80rem"}
        assert document["styles"] == {
            "typography": {"fontWeight": "400", "lineHeight": "1.2"},
            "elements": {
                "heading": {"typography": {"fontWeight": "600"}},
                "link": {"typography": {"textDecoration": "underline"}},
            },
            "blocks": {"core/button": {"typography": {"fontWeight": "600"}}},
        }


class TestValidateThemeJson:
    def test_missing_settings(self) -> None:
        warnings = validate_theme_json({"settings": {}}, set())
        assert warnings == [
            "Missing settings.color.palette",
            "Missing settings.spacing.spacingSizes",
            "Missing settings.typography.fontSizes",
        ]

    def test_undeclared_reference(self) -> None:
        document = {
            "settings": {
                "color": {"palette": [{"slug": "x", "color": "var(--nope)"}]},
                "spacing": {"spacingSizes": []},
                "typography": {"fontSizes": []},
            }
        }
        assert validate_theme_json(document, set()) == [
            "Reference to var(--nope) has no declaration"
        ]

    def test_undefined_preset(self) -> None:
        document = {
            "settings": {
                "color": {"palette": []},
                "spacing": {"spacingSizes": []},
                "typography": {"fontSizes": []},
            },
            "styles": {"color": {"text": "var:preset|color|ghost"}},
        }
        assert validate_theme_json(document, set()) == [
            "Preset var:preset|color|ghost is not defined"
        ]

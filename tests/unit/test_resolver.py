"""Tests for mode-aware token resolution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from primary_theme.core.defaults import add_baseline, add_category_fallbacks
from primary_theme.core.diagnostics import DiagnosticKind, Diagnostics
from primary_theme.core.ingest import ingest
from primary_theme.core.ir import (
    Axis,
    CompileOptions,
    Fluid,
    LightDark,
    Literal,
    Mode,
    PrimitiveOrigin,
    Ref,
    Section,
    TokenSet,
    parse_document,
)
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.core.primitives import extract_primitives
from primary_theme.core.resolver import resolve_tokens


def _resolve(
    *payloads: dict[str, Any], **options: Any
) -> tuple[PrimitiveNamespace, TokenSet, Diagnostics]:
    ingestion = ingest([parse_document(payload) for payload in payloads])
    namespace = PrimitiveNamespace()
    tokens = TokenSet()
    diagnostics = Diagnostics()
    supplied = extract_primitives(ingestion, namespace, diagnostics)
    add_baseline(namespace)
    add_category_fallbacks(namespace, supplied)
    resolve_tokens(ingestion, namespace, tokens, diagnostics, CompileOptions(**options))
    return namespace, tokens, diagnostics


def _semantic(name: str, kind: str, values: dict[str, Any]) -> dict[str, Any]:
    return {"variables": [{"name": name, "type": kind, "resolvedValuesByMode": values}]}


# ---------------------------------------------------------------------------
# Appearance axis
# ---------------------------------------------------------------------------


class TestAppearanceTokens:
    def test_light_dark_pair(self, load_fixture: Callable[[str], dict[str, Any]]) -> None:
        _, tokens, _ = _resolve(load_fixture("primitives.json"), load_fixture("semantic.json"))
        token = tokens.get("--surface-brand")
        assert token is not None
        assert token.value == LightDark(Ref("--color-white"), Ref("--color-black"))
        assert token.axis == Axis.APPEARANCE
        assert token.section == Section.PROJECT_TOKENS
        assert token.per_mode == {
            Mode.LIGHT: Ref("--color-white"),
            Mode.DARK: Ref("--color-black"),
        }

    def test_identical_modes_collapse_to_primitive(
        self, load_fixture: Callable[[str], dict[str, Any]]
    ) -> None:
        namespace, tokens, diagnostics = _resolve(
            load_fixture("primitives.json"), load_fixture("semantic.json")
        )
        assert "--text-accent" not in tokens
        alias = namespace.get("--text-accent")
        assert alias is not None
        assert alias.value == Ref("--color-ocean-500")
        assert alias.origin == PrimitiveOrigin.ALIAS
        assert diagnostics.of_kind(DiagnosticKind.REDUNDANT_TOKEN)

    def test_raw_color_matching_primitive_is_referenced(self) -> None:
        _, tokens, _ = _resolve(
            _semantic(
                "surface/raised",
                "COLOR",
                {"light": {"resolvedValue": "#ffffff"}, "dark": {"resolvedValue": "#000000"}},
            )
        )
        assert tokens.get("--surface-raised").value.css() == (
            "light-dark(var(--color-white), var(--color-black))"
        )


# ---------------------------------------------------------------------------
# Viewport axis
# ---------------------------------------------------------------------------


class TestViewportTokens:
    def test_fluid_between_primitives(self, load_fixture: Callable[[str], dict[str, Any]]) -> None:
        _, tokens, _ = _resolve(load_fixture("viewport.json"))
        token = tokens.get("--text-heading")
        assert isinstance(token.value, Fluid)
        assert token.value.css() == "clamp(var(--text-24), 1.109rem + 1.7391vw, var(--text-40))"
        assert token.section == Section.TYPOGRAPHY

    def test_equal_sizes_collapse(self, load_fixture: Callable[[str], dict[str, Any]]) -> None:
        namespace, tokens, _ = _resolve(load_fixture("viewport.json"))
        assert "--spacing-section" not in tokens
        assert namespace.get("--spacing-section").value == Ref("--spacing-32")

    def test_numerically_equal_sizes_collapse(self) -> None:
        payload = {
            "variables": [
                {"name": "Spacing/m", "type": "FLOAT", "valuesByMode": {"1:0": 16}},
                {"name": "Spacing/16", "type": "FLOAT", "valuesByMode": {"1:0": 16}},
                {
                    "name": "Spacing/card",
                    "type": "FLOAT",
                    "resolvedValuesByMode": {
                        "mobile": {"resolvedValue": 16, "aliasName": "Spacing/m"},
                        "desktop": {"resolvedValue": 16},
                    },
                },
            ]
        }
        namespace, tokens, diagnostics = _resolve(payload)
        assert "--spacing-card" not in tokens
        assert namespace.get("--spacing-card").value == Literal("1rem", px=16)
        assert diagnostics.of_kind(DiagnosticKind.REDUNDANT_TOKEN_NUMERIC)

    def test_without_synthesis_endpoints_are_literals(self) -> None:
        _, tokens, _ = _resolve(
            {"variables": [{"name": "Spacing/4", "type": "FLOAT", "valuesByMode": {"1:0": 4}}]},
            _semantic("Spacing/gutter", "FLOAT", {"mobile": 20, "desktop": 28}),
            synthesize_project_primitives=False,
        )
        assert tokens.get("--spacing-gutter").value.css() == (
            "clamp(1.25rem, 1.054rem + 0.8696vw, 1.75rem)"
        )


# ---------------------------------------------------------------------------
# Degenerate and invalid tokens
# ---------------------------------------------------------------------------


class TestMissingModes:
    def test_single_mobile_value_is_mirrored(self) -> None:
        _, tokens, diagnostics = _resolve(_semantic("FontSize/body", "FLOAT", {"mobile": 16}))
        token = tokens.get("--text-body")
        assert token.mirrored
        assert token.value.css() == "clamp(var(--text-16), 1rem + 0vw, var(--text-16))"
        [diagnostic] = diagnostics.of_kind(DiagnosticKind.MISSING_MODE_VARIANT)
        assert diagnostic.token == "--text-body"

    def test_single_dark_color_is_mirrored(self) -> None:
        _, tokens, _ = _resolve(_semantic("surface/inverse", "COLOR", {"dark": "#000000"}))
        assert tokens.get("--surface-inverse").value.css() == (
            "light-dark(var(--color-black), var(--color-black))"
        )

    def test_modeless_value_uses_sibling_axis(self) -> None:
        payload = {
            "variables": [
                {
                    "name": "FontSize/lead",
                    "type": "FLOAT",
                    "resolvedValuesByMode": {"mobile": 18, "desktop": 24},
                },
                {"name": "FontSize/caption", "type": "FLOAT", "resolvedValuesByMode": {"x": 12}},
            ]
        }
        _, tokens, diagnostics = _resolve(payload)
        assert tokens.get("--text-caption").value.css() == (
            "clamp(var(--text-12), 0.75rem + 0vw, var(--text-12))"
        )
        assert diagnostics.of_kind(DiagnosticKind.MISSING_MODE_VARIANT)

    def test_modeless_value_without_axis_becomes_alias(self) -> None:
        namespace, tokens, _ = _resolve(_semantic("Radius/card", "FLOAT", {"x": 8}))
        assert "--radius-card" not in tokens
        assert namespace.get("--radius-card").value == Ref("--radius-8")


class TestInvalidTokens:
    def test_mixed_axes_are_dropped(self) -> None:
        _, tokens, diagnostics = _resolve(
            _semantic("Spacing/odd", "FLOAT", {"light": 4, "mobile": 8})
        )
        assert "--spacing-odd" not in tokens
        assert diagnostics.of_kind(DiagnosticKind.MIXED_AXIS_MODES)

    def test_unresolvable_alias_is_dropped(self) -> None:
        _, tokens, diagnostics = _resolve(
            _semantic(
                "surface/ghost",
                "COLOR",
                {"light": {"aliasName": "color/nowhere"}, "dark": {"aliasName": "color/nowhere"}},
            )
        )
        assert "--surface-ghost" not in tokens
        assert diagnostics.of_kind(DiagnosticKind.UNRESOLVED_TOKEN)

    def test_token_shadowing_primitive_inlines_value(self) -> None:
        payload = {
            "variables": [
                {"name": "Spacing/m", "type": "FLOAT", "valuesByMode": {"1:0": 16}},
                {
                    "name": "Spacing/m",
                    "type": "FLOAT",
                    "resolvedValuesByMode": {"mobile": 16, "desktop": 32},
                },
            ]
        }
        _, tokens, diagnostics = _resolve(payload)
        assert tokens.get("--spacing-m").value.css() == (
            "clamp(1rem, 0.609rem + 1.7391vw, var(--spacing-32))"
        )
        assert diagnostics.of_kind(DiagnosticKind.TOKEN_SHADOWS_PRIMITIVE)

"""Tests for the built-in semantic layer."""

from __future__ import annotations

from primary_theme.core.defaults import PLACEHOLDER_NAME, add_baseline, add_category_fallbacks
from primary_theme.core.diagnostics import DiagnosticKind, Diagnostics
from primary_theme.core.ir import (
    Category,
    CompileOptions,
    LightDark,
    Literal,
    Primitive,
    PrimitiveOrigin,
    Ref,
    Section,
    Token,
    TokenSet,
)
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.themes.global_tokens import add_global_tokens, choose_primary, color_tokens


def _color(name: str) -> Primitive:
    return Primitive(
        name=name,
        value=Literal("oklch(0.5 0.1 200)"),
        category=Category.COLOR,
        section=Section.PROJECT_COLORS,
    )


def _defaults(supplied: set[Category] | None = None) -> PrimitiveNamespace:
    namespace = PrimitiveNamespace()
    add_baseline(namespace)
    add_category_fallbacks(namespace, supplied or set())
    return namespace


# ---------------------------------------------------------------------------
# Primary color
# ---------------------------------------------------------------------------


class TestChoosePrimary:
    def test_configured_family(self) -> None:
        namespace = _defaults()
        namespace.add(_color("--color-ocean-500"))
        namespace.add(_color("--color-brand-500"))
        diagnostics = Diagnostics()
        primary = choose_primary(namespace, CompileOptions(primary_color="Brand"), diagnostics)
        assert primary == "brand"
        assert len(diagnostics) == 0

    def test_configured_family_with_color_prefix(self) -> None:
        namespace = _defaults()
        namespace.add(_color("--color-brand-500"))
        options = CompileOptions(primary_color="color-brand")
        assert choose_primary(namespace, options, Diagnostics()) == "brand"

    def test_unknown_family_falls_back(self) -> None:
        namespace = _defaults()
        namespace.add(_color("--color-ocean-500"))
        namespace.add(_color("--color-brand-500"))
        diagnostics = Diagnostics()
        primary = choose_primary(namespace, CompileOptions(primary_color="lime"), diagnostics)
        assert primary == "brand"
        [diagnostic] = diagnostics.of_kind(DiagnosticKind.MISSING_PRIMARY_COLOR)
        assert "--color-lime-500" in diagnostic.message

    def test_gray_is_never_primary(self) -> None:
        namespace = _defaults()
        primary = choose_primary(namespace, CompileOptions(), Diagnostics())
        assert primary == PLACEHOLDER_NAME
        placeholder = namespace.get("--color-raspberry-500")
        assert placeholder is not None
        assert placeholder.section == Section.PROJECT_COLORS
        assert placeholder.origin == PrimitiveOrigin.DEFAULT

    def test_family_without_500_step_is_skipped(self) -> None:
        namespace = _defaults()
        namespace.add(_color("--color-sea-300"))
        assert choose_primary(namespace, CompileOptions(), Diagnostics()) == PLACEHOLDER_NAME


# ---------------------------------------------------------------------------
# Global tokens
# ---------------------------------------------------------------------------


class TestGlobalTokens:
    def test_colors_reference_primary(self) -> None:
        rows = dict(color_tokens("ocean"))
        assert rows["--primary"] == Ref("--color-ocean-500")
        assert rows["--surface"] == LightDark(Ref("--color-white"), Ref("--color-gray-900"))
        assert rows["--on-error"] == Literal("oklch(100% 0 0)")

    def test_default_layer(self) -> None:
        namespace = _defaults()
        tokens = TokenSet()
        add_global_tokens(namespace, tokens, CompileOptions(), "ocean")
        assert tokens.get("--primary").section == Section.GLOBAL_TOKENS
        assert tokens.get("--spacing-s").value.css() == (
            "clamp(var(--spacing-8), 0.304rem + 0.8696vw, var(--spacing-16))"
        )
        assert tokens.get("--spacing-xs").value == Ref("--spacing-4")
        assert tokens.get("--text-m").section == Section.TYPOGRAPHY
        assert tokens.get("--form-control-spacing").value.css() == (
            "var(--spacing-12) var(--spacing-16)"
        )
        assert tokens.get("--form-control-border-radius").value == Ref("--radius-16")

    def test_ranks_keep_definition_order(self) -> None:
        tokens = TokenSet()
        add_global_tokens(_defaults(), tokens, CompileOptions(), "ocean")
        ranks = [t.rank for t in tokens if t.section == Section.GLOBAL_TOKENS]
        assert ranks == sorted(ranks)
        assert tokens.get("--primary").rank == 0

    def test_project_token_takes_precedence(self) -> None:
        tokens = TokenSet()
        tokens.add(
            Token(
                name="--primary",
                value=Ref("--color-brand-500"),
                category=Category.COLOR,
                section=Section.PROJECT_TOKENS,
            )
        )
        add_global_tokens(_defaults(), tokens, CompileOptions(), "ocean")
        assert tokens.get("--primary").value == Ref("--color-brand-500")
        assert tokens.get("--primary").section == Section.PROJECT_TOKENS

    def test_project_spacing_replaces_scale(self) -> None:
        tokens = TokenSet()
        tokens.add(
            Token(
                name="--spacing-gutter",
                value=Ref("--spacing-16"),
                category=Category.SPACING,
                section=Section.SPACING,
            )
        )
        add_global_tokens(_defaults(), tokens, CompileOptions(), "ocean")
        assert "--spacing-m" not in tokens
        assert "--text-m" in tokens

    def test_missing_endpoints_are_synthesized(self) -> None:
        namespace = PrimitiveNamespace()
        namespace.add(
            Primitive(
                name="--spacing-10",
                value=Literal("0.625rem", px=10),
                category=Category.SPACING,
                section=Section.SPACING,
                px=10,
            )
        )
        tokens = TokenSet()
        add_global_tokens(namespace, tokens, CompileOptions(), "ocean")
        synthesized = namespace.get("--spacing-80")
        assert synthesized is not None
        assert synthesized.section == Section.SYNTHESIZED
        assert tokens.get("--spacing-xl").value.css() == (
            "clamp(var(--spacing-32), 0.826rem + 5.2174vw, var(--spacing-80))"
        )

    def test_form_radius_without_radius_primitives(self) -> None:
        tokens = TokenSet()
        add_global_tokens(_defaults({Category.RADIUS}), tokens, CompileOptions(), "ocean")
        assert tokens.get("--form-control-border-radius").value == Literal("0")

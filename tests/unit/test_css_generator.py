"""Tests for the CSS sheets and JSON mirrors."""

from __future__ import annotations

import pytest

from primary_theme.core.errors import UnresolvedReferenceError
from primary_theme.core.ir import (
    Axis,
    Category,
    CompileOptions,
    Fluid,
    FluidGroup,
    LightDark,
    Literal,
    Mode,
    Primitive,
    Ref,
    Section,
    Sequence,
    Token,
    TokenSet,
)
from primary_theme.core.namespace import PrimitiveNamespace
from primary_theme.themes.css_generator import (
    check_references,
    collapse,
    declared_names,
    generate_primitives_css,
    generate_tokens_css,
    primitives_to_json,
    referenced_names,
    tokens_to_json,
)


def _spacing(px: int) -> Primitive:
    return Primitive(
        name=f"--spacing-{px}",
        value=Literal(f"{px / 16:g}rem", px=px),
        category=Category.SPACING,
        section=Section.SPACING,
        px=px,
    )


@pytest.fixture
def namespace() -> PrimitiveNamespace:
    namespace = PrimitiveNamespace()
    namespace.add(_spacing(16))
    namespace.add(_spacing(8))
    namespace.add(
        Primitive(
            name="--color-white",
            value=Literal("oklch(1 0 0)"),
            category=Category.COLOR,
            section=Section.GLOBAL_COLORS,
        )
    )
    namespace.add(
        Primitive(
            name="--font-weight-bold",
            value=Literal("700"),
            category=Category.FONT,
            section=Section.TYPOGRAPHY,
        )
    )
    return namespace


@pytest.fixture
def tokens() -> TokenSet:
    tokens = TokenSet()
    tokens.add(
        Token(
            name="--surface",
            value=LightDark(Ref("--color-white"), Ref("--color-black")),
            category=Category.COLOR,
            section=Section.GLOBAL_TOKENS,
            axis=Axis.APPEARANCE,
            per_mode={Mode.LIGHT: Ref("--color-white"), Mode.DARK: Ref("--color-black")},
        )
    )
    tokens.add(
        Token(
            name="--spacing-m",
            value=Fluid(
                Ref("--spacing-8"), "0.304rem + 0.8696vw", Ref("--spacing-16"), FluidGroup.SPACING
            ),
            category=Category.SPACING,
            section=Section.SPACING,
        )
    )
    return tokens


# ---------------------------------------------------------------------------
# Collapsing
# ---------------------------------------------------------------------------


class TestCollapse:
    def test_fixed_typography_keeps_minimum(self) -> None:
        value = Fluid(Ref("--text-16"), "1rem + 1vw", Ref("--text-20"), FluidGroup.TYPOGRAPHY)
        options = CompileOptions(typo_responsive=False)
        assert collapse(value, options) == Ref("--text-16")

    def test_spacing_is_independent_of_typography(self) -> None:
        value = Fluid(Ref("--spacing-8"), "1rem + 1vw", Ref("--spacing-16"), FluidGroup.SPACING)
        assert collapse(value, CompileOptions(typo_responsive=False)) == value
        assert collapse(value, CompileOptions(spacing_responsive=False)) == Ref("--spacing-8")

    def test_single_theme_mode_picks_side(self) -> None:
        value = LightDark(Ref("--color-white"), Ref("--color-black"))
        assert collapse(value, CompileOptions(theme_mode="light")) == Ref("--color-white")
        assert collapse(value, CompileOptions(theme_mode="dark")) == Ref("--color-black")
        assert collapse(value, CompileOptions()) == value

    def test_sequence_parts_collapse(self) -> None:
        fluid = Fluid(Ref("--spacing-8"), "1rem + 1vw", Ref("--spacing-16"), FluidGroup.SPACING)
        value = Sequence((fluid, Literal("0")))
        collapsed = collapse(value, CompileOptions(spacing_responsive=False))
        assert collapsed.css() == "var(--spacing-8) 0"


# ---------------------------------------------------------------------------
# Primitives sheet
# ---------------------------------------------------------------------------


class TestPrimitivesCss:
    def test_header_describes_options(self, namespace: PrimitiveNamespace) -> None:
        css = generate_primitives_css(namespace, CompileOptions(), primary="ocean")
        lines = css.splitlines()
        assert lines[0] == "/* ----------------------------------"
        assert lines[1] == " * Theme primitives"
        assert " * Primary color: ocean" in lines
        assert " * Theme mode: both" in lines
        assert " * Typography: fluid" in lines

    def test_sections_in_order(self, namespace: PrimitiveNamespace) -> None:
        css = generate_primitives_css(namespace, CompileOptions())
        assert css.index("/* Global colors */") < css.index("/* Spacing */")
        assert css.index("/* Spacing */") < css.index("/* Typography */")
        assert "/* Radius */" not in css

    def test_numeric_ordering_and_px_comments(self, namespace: PrimitiveNamespace) -> None:
        css = generate_primitives_css(namespace, CompileOptions())
        assert "  --spacing-16: 1rem; /* 16px */" in css
        assert css.index("--spacing-8:") < css.index("--spacing-16:")

    def test_px_comments_can_be_disabled(self, namespace: PrimitiveNamespace) -> None:
        css = generate_primitives_css(namespace, CompileOptions(emit_px_comments=False))
        assert "  --spacing-16: 1rem;" in css
        assert "/* 16px */" not in css

    def test_single_root_block(self, namespace: PrimitiveNamespace) -> None:
        css = generate_primitives_css(namespace, CompileOptions())
        assert css.count(":root {") == 1
        assert css.endswith("}\n")


# ---------------------------------------------------------------------------
# Tokens sheet
# ---------------------------------------------------------------------------


class TestTokensCss:
    def test_color_scheme_for_both_modes(self, tokens: TokenSet) -> None:
        css = generate_tokens_css(tokens, CompileOptions())
        assert "  color-scheme: light dark;" in css
        assert '  &[data-theme="light"] {' in css
        assert '  &[data-theme="dark"] {' in css
        assert "    color-scheme: dark;" in css

    def test_color_scheme_for_single_mode(self, tokens: TokenSet) -> None:
        css = generate_tokens_css(tokens, CompileOptions(theme_mode="light"))
        assert "  color-scheme: light;" in css
        assert "data-theme" not in css
        assert "  --surface: var(--color-white);" in css

    def test_values_follow_options(self, tokens: TokenSet) -> None:
        fluid = generate_tokens_css(tokens, CompileOptions())
        assert (
            "  --spacing-m: clamp(var(--spacing-8), 0.304rem + 0.8696vw, var(--spacing-16));"
            in fluid
        )
        fixed = generate_tokens_css(tokens, CompileOptions(spacing_responsive=False))
        assert "  --spacing-m: var(--spacing-8);" in fixed

    def test_empty_token_set(self) -> None:
        css = generate_tokens_css(TokenSet(), CompileOptions(theme_mode="dark"))
        assert css.splitlines()[-2:] == ["  color-scheme: dark;", "}"]


# ---------------------------------------------------------------------------
# JSON mirrors
# ---------------------------------------------------------------------------


class TestJsonMirrors:
    def test_primitives_grouped_by_category(self, namespace: PrimitiveNamespace) -> None:
        data = primitives_to_json(namespace)
        assert data["spacing"]["16"] == {"$type": "dimension", "value": "1rem"}
        assert data["color"]["white"] == {"$type": "color", "value": "oklch(1 0 0)"}
        assert data["font"]["weight-bold"]["$type"] == "fontWeight"
        assert list(data["spacing"]) == ["8", "16"]

    def test_tokens_carry_modes(self, tokens: TokenSet) -> None:
        data = tokens_to_json(tokens, CompileOptions(theme_mode="dark"))
        surface = data["color"]["surface"]
        assert surface["value"] == "var(--color-black)"
        assert surface["modes"] == {"light": "var(--color-white)", "dark": "var(--color-black)"}
        assert data["spacing"]["m"]["$type"] == "dimension"
        assert "modes" not in data["spacing"]["m"]


# ---------------------------------------------------------------------------
# Reference checking
# ---------------------------------------------------------------------------


class TestCheckReferences:
    def test_names(self) -> None:
        css = ":root {\n  --a: 1px;\n  --b: var(--a);\n  --c: calc(var( --d) + 1px);\n}"
        assert declared_names(css) == {"--a", "--b", "--c"}
        assert referenced_names(css) == {"--a", "--d"}

    def test_consistent_sheets_pass(self) -> None:
        check_references(":root {\n  --a: 1px;\n}", ":root {\n  --b: var(--a);\n}")

    def test_primitives_sheet_must_be_self_contained(self) -> None:
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            check_references(":root {\n  --a: var(--b);\n}", ":root {\n  --b: 1px;\n}")
        assert exc_info.value.sheet == "theme.css"
        assert exc_info.value.missing == ["--b"]

    def test_tokens_sheet_dangling_reference(self) -> None:
        with pytest.raises(UnresolvedReferenceError, match="theme-tokens.css"):
            check_references(":root {\n  --a: 1px;\n}", ":root {\n  --b: var(--zzz);\n}")

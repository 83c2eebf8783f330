"""
Per-call compilation options.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class ThemeMode(StrEnum):
    """Which appearance(s) the emitted sheets support."""

    LIGHT = "light"
    DARK = "dark"
    BOTH = "both"


def _alias(snake: str, camel: str) -> AliasChoices:
    return AliasChoices(snake, camel)


class CompileOptions(BaseModel):
    """
    Options for one compilation run.

    Both snake_case and the camelCase spellings used by UI callers are
    accepted (``themeMode``, ``typoResponsive`` ...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    theme_mode: ThemeMode = Field(
        default=ThemeMode.BOTH, validation_alias=_alias("theme_mode", "themeMode")
    )
    typo_responsive: bool = Field(
        default=True, validation_alias=_alias("typo_responsive", "typoResponsive")
    )
    spacing_responsive: bool = Field(
        default=True, validation_alias=_alias("spacing_responsive", "spacingResponsive")
    )
    synthesize_project_primitives: bool = Field(
        default=True,
        validation_alias=_alias("synthesize_project_primitives", "synthesizeProjectPrimitives"),
    )
    custom_colors_text: str = Field(
        default="", validation_alias=_alias("custom_colors_text", "customColorsText")
    )
    primary_color: str | None = Field(
        default=None, validation_alias=_alias("primary_color", "primaryColor")
    )
    fill_missing_variants: bool = Field(
        default=True, validation_alias=_alias("fill_missing_variants", "fillMissingVariants")
    )
    min_viewport_px: float = Field(
        default=360, gt=0, validation_alias=_alias("min_viewport_px", "minViewportPx")
    )
    max_viewport_px: float = Field(
        default=1280, gt=0, validation_alias=_alias("max_viewport_px", "maxViewportPx")
    )
    emit_px_comments: bool = Field(
        default=True, validation_alias=_alias("emit_px_comments", "emitPxComments")
    )
    include_theme_json: bool = Field(
        default=True, validation_alias=_alias("include_theme_json", "includeThemeJson")
    )

    @model_validator(mode="after")
    def _check_window(self) -> CompileOptions:
        if self.max_viewport_px <= self.min_viewport_px:
            raise ValueError("max_viewport_px must be greater than min_viewport_px")
        return self

    def describe(self, primary: str | None = None) -> list[str]:
        """Human-readable configuration lines for sheet headers."""
        return [
            f"Primary color: {primary or self.primary_color or 'auto'}",
            f"Theme mode: {self.theme_mode}",
            f"Typography: {'fluid' if self.typo_responsive else 'fixed'}",
            f"Spacing: {'fluid' if self.spacing_responsive else 'fixed'}",
        ]

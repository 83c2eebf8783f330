"""
Intermediate representation for primary-theme.

Input documents (pydantic models), the structured primitive/token model and
compilation options.
"""

from .documents import (
    AXIS_MODES,
    Axis,
    ColorRGBA,
    Mode,
    RawVariable,
    ResolvedValue,
    TokenDocument,
    VariableKind,
    parse_document,
    parse_hex,
)
from .model import (
    CURATED_SECTIONS,
    SECTION_ORDER,
    Category,
    Endpoint,
    Fluid,
    FluidGroup,
    LightDark,
    Literal,
    Primitive,
    PrimitiveOrigin,
    Ref,
    Section,
    Sequence,
    Token,
    TokenSet,
    Value,
    fluid_group_for,
)
from .options import CompileOptions, ThemeMode

__all__ = [
    # Documents
    "AXIS_MODES",
    "Axis",
    "ColorRGBA",
    "Mode",
    "RawVariable",
    "ResolvedValue",
    "TokenDocument",
    "VariableKind",
    "parse_document",
    "parse_hex",
    # Model
    "CURATED_SECTIONS",
    "SECTION_ORDER",
    "Category",
    "Endpoint",
    "Fluid",
    "FluidGroup",
    "LightDark",
    "Literal",
    "Primitive",
    "PrimitiveOrigin",
    "Ref",
    "Section",
    "Sequence",
    "Token",
    "TokenSet",
    "Value",
    "fluid_group_for",
    # Options
    "CompileOptions",
    "ThemeMode",
]

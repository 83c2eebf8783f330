"""
Input IR for design-token exports.

Two export shapes are accepted, both as ``{"variables": [...]}`` documents:

- primitive exports, where each variable carries ``valuesByMode``
- semantic exports, where each variable carries ``resolvedValuesByMode``
  (resolved value plus optional ``aliasName``) and the document may map
  export mode ids to mode names under ``modes``

Models are frozen once read.
"""

from __future__ import annotations

import json
import re
from enum import StrEnum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..errors import ErrorContext, ParseError

# =============================================================================
# Enums
# =============================================================================


class Axis(StrEnum):
    """Semantic axis a mode belongs to."""

    APPEARANCE = "appearance"
    VIEWPORT = "viewport"


class Mode(StrEnum):
    """Mode identifiers on the appearance and viewport axes."""

    LIGHT = "light"
    DARK = "dark"
    MOBILE = "mobile"
    DESKTOP = "desktop"

    @property
    def axis(self) -> Axis:
        if self in (Mode.LIGHT, Mode.DARK):
            return Axis.APPEARANCE
        return Axis.VIEWPORT

    @classmethod
    def parse(cls, name: object) -> Mode | None:
        """Case-insensitive lookup; returns None for unknown names."""
        if isinstance(name, Mode):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


# Sides of each axis in (min, max) / (light, dark) order
AXIS_MODES: dict[Axis, tuple[Mode, Mode]] = {
    Axis.APPEARANCE: (Mode.LIGHT, Mode.DARK),
    Axis.VIEWPORT: (Mode.MOBILE, Mode.DESKTOP),
}


class VariableKind(StrEnum):
    """Variable type as exported."""

    COLOR = "COLOR"
    NUMBER = "NUMBER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


# =============================================================================
# Values
# =============================================================================

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class ColorRGBA(BaseModel):
    """sRGB color with components in [0, 1]."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    r: float = Field(ge=0.0, le=1.0)
    g: float = Field(ge=0.0, le=1.0)
    b: float = Field(ge=0.0, le=1.0)
    a: float = Field(default=1.0, ge=0.0, le=1.0)


def parse_hex(text: str) -> ColorRGBA:
    """
    Parse ``#rgb``, ``#rgba``, ``#rrggbb`` or ``#rrggbbaa`` into a ColorRGBA.

    Raises:
        ValueError: If the string is not a hex color.
    """
    match = _HEX_RE.match(text.strip())
    if not match:
        raise ValueError(f"Not a hex color: {text!r}")
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    channels = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
    if len(channels) == 3:
        channels.append(1.0)
    r, g, b, a = channels
    return ColorRGBA(r=r, g=g, b=b, a=a)


def is_hex_color(text: str) -> bool:
    """True for ``#rgb``, ``#rgba``, ``#rrggbb`` and ``#rrggbbaa`` strings."""
    stripped = text.strip()
    return stripped.startswith("#") and bool(_HEX_RE.match(stripped))


def _coerce_raw(value: Any) -> Any:
    if isinstance(value, dict) and "hex" in value:
        color = parse_hex(str(value["hex"]))
        if "alpha" in value:
            color = color.model_copy(update={"a": float(value["alpha"])})
            ColorRGBA.model_validate(color.model_dump())
        return color
    if isinstance(value, str) and is_hex_color(value):
        return parse_hex(value)
    return value


class ResolvedValue(BaseModel):
    """One mode's value: a raw value, an alias, or both."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    raw_value: ColorRGBA | float | str | None = Field(
        default=None,
        validation_alias=AliasChoices("raw_value", "resolvedValue", "rawValue", "value"),
    )
    alias_name: str | None = Field(
        default=None, validation_alias=AliasChoices("alias_name", "aliasName")
    )
    variable_id: str | None = Field(
        default=None, validation_alias=AliasChoices("variable_id", "variableId", "alias", "id")
    )

    @field_validator("raw_value", mode="before")
    @classmethod
    def _raw_value_shapes(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("boolean values are not supported")
        return _coerce_raw(value)

    @model_validator(mode="after")
    def _has_value(self) -> ResolvedValue:
        if self.raw_value is None and self.alias_name is None and self.variable_id is None:
            raise ValueError("a mode value needs a raw value or an alias")
        return self

    @property
    def is_color(self) -> bool:
        return isinstance(self.raw_value, ColorRGBA)

    @property
    def number(self) -> float | None:
        if isinstance(self.raw_value, (int, float)):
            return float(self.raw_value)
        return None


_VALUE_KEYS = {
    "raw_value",
    "resolvedValue",
    "rawValue",
    "value",
    "alias_name",
    "aliasName",
    "variable_id",
    "variableId",
    "alias",
}


# Mode value maps, in the order mode_values prefers them
_MODE_VALUE_KEYS = (
    "resolved_values_by_mode",
    "resolvedValuesByMode",
    "values_by_mode",
    "valuesByMode",
)


def _coerce_mode_entry(entry: Any) -> Any:
    """Wrap a bare export value into the ResolvedValue shape."""
    if isinstance(entry, ResolvedValue):
        return entry
    if isinstance(entry, dict):
        if entry.get("type") == "VARIABLE_ALIAS" and "id" in entry:
            return {"variableId": entry["id"]}
        if _VALUE_KEYS & entry.keys():
            return entry
    return {"resolvedValue": entry}


class RawVariable(BaseModel):
    """A design-token variable as exported."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    kind: VariableKind | None = Field(
        default=None, validation_alias=AliasChoices("kind", "type", "resolvedType")
    )
    values_by_mode: dict[str, ResolvedValue] | None = Field(
        default=None, validation_alias=AliasChoices("values_by_mode", "valuesByMode")
    )
    resolved_values_by_mode: dict[str, ResolvedValue] | None = Field(
        default=None,
        validation_alias=AliasChoices("resolved_values_by_mode", "resolvedValuesByMode"),
    )
    id: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            upper = value.strip().upper()
            return "NUMBER" if upper == "FLOAT" else upper
        return value

    @field_validator("values_by_mode", "resolved_values_by_mode", mode="before")
    @classmethod
    def _wrap_entries(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): _coerce_mode_entry(v) for k, v in value.items()}
        return value

    @model_validator(mode="before")
    @classmethod
    def _infer_kind(cls, data: Any) -> Any:
        """Take the type from the first mode value when the export omits it."""
        if not isinstance(data, dict):
            return data
        if any(data.get(key) is not None for key in ("kind", "type", "resolvedType")):
            return data
        for key in _MODE_VALUE_KEYS:
            values = data.get(key)
            if isinstance(values, dict) and values:
                break
        else:
            return data
        try:
            first = ResolvedValue.model_validate(_coerce_mode_entry(next(iter(values.values()))))
        except ValidationError:
            # Left to field validation, which reports the bad value
            return data
        if first.is_color:
            kind = VariableKind.COLOR
        elif first.number is not None:
            kind = VariableKind.NUMBER
        else:
            kind = VariableKind.STRING
        return {**data, "kind": kind}

    @model_validator(mode="after")
    def _check_values(self) -> RawVariable:
        if not self.values_by_mode and not self.resolved_values_by_mode:
            raise ValueError("variable has no valuesByMode or resolvedValuesByMode")
        return self

    @property
    def is_semantic(self) -> bool:
        """Semantic exports carry resolved values (and usually aliases)."""
        return bool(self.resolved_values_by_mode)

    @property
    def mode_values(self) -> dict[str, ResolvedValue]:
        return self.resolved_values_by_mode or self.values_by_mode or {}


# =============================================================================
# Documents
# =============================================================================


class TokenDocument(BaseModel):
    """One parsed export document."""

    model_config = ConfigDict(frozen=True)

    source: str = "<document>"
    variables: list[RawVariable] = Field(default_factory=list)
    modes: dict[str, str] = Field(default_factory=dict)
    mode: Mode | None = None
    rejected: list[str] = Field(
        default_factory=list, description="Variables dropped during validation"
    )


def _normalize_modes(raw: Any) -> dict[str, str]:
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items()}
    if isinstance(raw, list):
        modes: dict[str, str] = {}
        for item in raw:
            if isinstance(item, dict) and "modeId" in item and "name" in item:
                modes[str(item["modeId"])] = str(item["name"])
        return modes
    return {}


def parse_document(
    data: str | bytes | dict[str, Any],
    *,
    mode: Mode | str | None = None,
    source: str = "<document>",
) -> TokenDocument:
    """
    Parse one export document.

    Invalid variables are dropped and listed in ``rejected``; the document
    itself only fails when its overall structure is unusable.

    Args:
        data: JSON text or an already-decoded dict.
        mode: Optional document-level mode tag.
        source: Name used in error messages.

    Returns:
        Parsed TokenDocument.

    Raises:
        ParseError: If the JSON is invalid or ``variables`` is missing.
    """
    context = ErrorContext(document=source)
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid JSON: {e}", context) from e
    if not isinstance(data, dict):
        raise ParseError("document must be a JSON object", context)
    raw_variables = data.get("variables")
    if not isinstance(raw_variables, list):
        raise ParseError("document has no 'variables' list", context)

    doc_mode: Mode | None = None
    mode_tag = mode if mode is not None else data.get("mode")
    if mode_tag is not None:
        doc_mode = Mode.parse(mode_tag)
        if doc_mode is None:
            raise ParseError(f"unknown mode {mode_tag!r}", context)

    variables: list[RawVariable] = []
    rejected: list[str] = []
    for index, raw in enumerate(raw_variables):
        label = (raw.get("name") if isinstance(raw, dict) else None) or f"#{index}"
        try:
            variables.append(RawVariable.model_validate(raw))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            detail = f"{location}: {first['msg']}" if location else first["msg"]
            rejected.append(f"{label}: {detail}")

    return TokenDocument(
        source=source,
        variables=variables,
        modes=_normalize_modes(data.get("modes")),
        mode=doc_mode,
        rejected=rejected,
    )

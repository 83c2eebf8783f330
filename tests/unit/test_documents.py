"""Tests for the input IR and document parsing."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from primary_theme.core.errors import ParseError
from primary_theme.core.ir import ColorRGBA, Mode, RawVariable, VariableKind, parse_document


class TestParseDocument:
    def test_parses_json_text(self, load_fixture: Callable[[str], dict[str, Any]]) -> None:
        document = parse_document(json.dumps(load_fixture("primitives.json")), source="p.json")
        assert document.source == "p.json"
        assert len(document.variables) == 7
        assert document.rejected == []

    def test_modes_map(self, load_fixture: Callable[[str], dict[str, Any]]) -> None:
        document = parse_document(load_fixture("semantic.json"))
        assert document.modes == {"2:0": "Light", "2:1": "Dark"}

    def test_document_mode_tag(self) -> None:
        document = parse_document({"variables": []}, mode="Dark")
        assert document.mode == Mode.DARK

    def test_invalid_json(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_document("{not json", source="bad.json")
        assert "bad.json" in str(exc_info.value)

    def test_missing_variables(self) -> None:
        with pytest.raises(ParseError):
            parse_document({"collections": []})

    def test_variables_not_a_list(self, load_fixture: Callable[[str], dict[str, Any]]) -> None:
        with pytest.raises(ParseError):
            parse_document(load_fixture("broken.json"))

    def test_unknown_mode_tag(self) -> None:
        with pytest.raises(ParseError):
            parse_document({"variables": []}, mode="sepia")

    def test_invalid_variable_is_rejected_not_fatal(self) -> None:
        document = parse_document(
            {
                "variables": [
                    {"name": "", "valuesByMode": {"1:0": 4}},
                    {"name": "flag", "type": "BOOLEAN", "valuesByMode": {"1:0": True}},
                    {"name": "Spacing/4", "type": "FLOAT", "valuesByMode": {"1:0": 4}},
                ]
            }
        )
        assert [v.name for v in document.variables] == ["Spacing/4"]
        assert len(document.rejected) == 2
        assert document.rejected[0].startswith("#0")
        assert document.rejected[1].startswith("flag")


class TestRawVariable:
    def test_float_normalized_to_number(self) -> None:
        variable = RawVariable.model_validate(
            {"name": "Spacing/8", "type": "FLOAT", "valuesByMode": {"1:0": 8}}
        )
        assert variable.kind == VariableKind.NUMBER

    def test_kind_inferred_from_values(self) -> None:
        variable = RawVariable.model_validate({"name": "x", "valuesByMode": {"1:0": "#ffffff"}})
        assert variable.kind == VariableKind.COLOR
        assert isinstance(variable.mode_values["1:0"].raw_value, ColorRGBA)

    def test_kind_inferred_from_resolved_number(self) -> None:
        variable = RawVariable.model_validate(
            {"name": "gap", "resolvedValuesByMode": {"1:0": {"resolvedValue": 8}}}
        )
        assert variable.kind == VariableKind.NUMBER

    def test_untyped_bad_value_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            RawVariable.model_validate({"name": "flag", "valuesByMode": {"1:0": True}})

    def test_variable_alias_entry(self) -> None:
        variable = RawVariable.model_validate(
            {
                "name": "color/brand",
                "type": "COLOR",
                "valuesByMode": {"1:0": {"type": "VARIABLE_ALIAS", "id": "VariableID:1:1"}},
            }
        )
        assert variable.mode_values["1:0"].variable_id == "VariableID:1:1"
        assert variable.is_semantic is False

    def test_resolved_values_are_semantic(self) -> None:
        variable = RawVariable.model_validate(
            {
                "name": "surface",
                "type": "COLOR",
                "resolvedValuesByMode": {
                    "1:0": {
                        "resolvedValue": {"r": 1, "g": 1, "b": 1, "a": 1},
                        "aliasName": "color/white",
                    }
                },
            }
        )
        assert variable.is_semantic is True
        assert variable.mode_values["1:0"].alias_name == "color/white"

    def test_hex_object_with_alpha(self) -> None:
        variable = RawVariable.model_validate(
            {"name": "overlay", "valuesByMode": {"1:0": {"hex": "#000000", "alpha": 0.5}}}
        )
        color = variable.mode_values["1:0"].raw_value
        assert isinstance(color, ColorRGBA)
        assert color.a == 0.5

    def test_no_values_is_invalid(self) -> None:
        with pytest.raises(ValueError):
            RawVariable.model_validate({"name": "empty"})

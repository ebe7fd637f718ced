"""Unit tests for the field descriptor parser (cleango.codegen.core.parser).

Tests cover:
- Valid descriptors, whitespace tolerance and aliases
- Malformed pairs and their 1-based positions
- Unsupported types with suggestions
- Reserved and duplicate names
- Serialize / re-parse stability
"""

from __future__ import annotations

import pytest

from cleango.codegen.core.parser import (
    FieldSpecException,
    ParseErrorKind,
    parse_fields,
    serialize_fields,
)
from cleango.codegen.core.schema import FieldList


# ---------------------------------------------------------------------------
# Valid descriptors
# ---------------------------------------------------------------------------

class TestParseValid:
    def test_fields_in_declaration_order(self):
        result = parse_fields("name:string,price:float64,email:string")

        assert result.success
        assert [f.name for f in result.fields] == ["Name", "Price", "Email"]
        assert [f.type for f in result.fields] == ["string", "float64", "string"]

    def test_whitespace_around_tokens(self):
        result = parse_fields(" name : string ,  age:int ")
        assert [(f.name, f.type) for f in result.fields] == [("Name", "string"), ("Age", "int")]

    def test_alias_resolves_to_canonical_type(self):
        result = parse_fields("starts_at:timestamp")
        assert result.fields[0].name == "StartsAt"
        assert result.fields[0].type == "time.Time"

    def test_opaque_alias(self):
        result = parse_fields("payload:opaque")

        assert result.success
        assert result.fields[0].name == "Payload"
        assert result.fields[0].type == "interface{}"

    def test_empty_descriptor_yields_no_fields(self):
        assert parse_fields("").fields == []
        assert parse_fields(None).fields == []
        assert parse_fields("   ").success

    def test_parsed_fields_are_user_fields(self):
        fields = parse_fields("name:string").fields
        assert not fields[0].system
        assert fields[0].tag == ""


# ---------------------------------------------------------------------------
# Malformed descriptors
# ---------------------------------------------------------------------------

class TestParseInvalid:
    def test_missing_colon_reports_first_position(self):
        result = parse_fields("name,price:float64")

        assert not result.success
        assert result.fields == []
        assert result.error.kind == ParseErrorKind.INVALID_DECLARATION
        assert result.error.position == 1
        assert result.error.token == "name"

    def test_position_counts_pairs(self):
        result = parse_fields("name:string,price:float64,:int")
        assert result.error.position == 3
        assert "empty" in result.error.message

    def test_missing_type(self):
        result = parse_fields("name:")
        assert result.error.kind == ParseErrorKind.INVALID_DECLARATION
        assert "no type" in result.error.message

    def test_trailing_comma_is_an_empty_pair(self):
        result = parse_fields("name:string,")
        assert result.error.position == 2

    def test_invalid_identifier(self):
        result = parse_fields("1name:string")
        assert result.error.kind == ParseErrorKind.INVALID_DECLARATION

    def test_unsupported_type_with_suggestions(self):
        result = parse_fields("name:String")

        assert result.error.kind == ParseErrorKind.UNSUPPORTED_TYPE
        assert result.error.position == 1
        assert result.error.suggestions[0] == "string"
        assert "did you mean" in str(result.error)

    @pytest.mark.parametrize("name", ["id", "ID", "created_at", "UpdatedAt", "deleted_at"])
    def test_reserved_names(self, name):
        result = parse_fields(f"{name}:string")
        assert result.error.kind == ParseErrorKind.INVALID_DECLARATION
        assert "managed automatically" in result.error.message

    def test_duplicate_after_case_normalisation(self):
        result = parse_fields("user_name:string,userName:string")
        assert result.error.position == 2
        assert "duplicate" in result.error.message

    @pytest.mark.parametrize("name", ["i_d", "I_d", "updated_A_t", "Created_AT"])
    def test_reserved_after_normalisation(self, name):
        result = parse_fields(f"title:string,{name}:string")

        assert result.error.kind == ParseErrorKind.INVALID_DECLARATION
        assert result.error.position == 2
        assert "managed automatically" in result.error.message

    def test_duplicate_column(self):
        result = parse_fields("ab:string,a_b:int")

        assert result.error.position == 2
        assert "column 'ab'" in result.error.message

    def test_raise_for_error(self):
        with pytest.raises(FieldSpecException) as exc_info:
            parse_fields("name").raise_for_error()
        assert exc_info.value.error.position == 1


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestSerialize:
    def test_reparse_is_stable(self):
        first = parse_fields("name:string,price:float64,starts_at:timestamp,tags:any")
        text = serialize_fields(first.fields)
        second = parse_fields(text)

        assert second.success
        assert second.fields == first.fields
        assert serialize_fields(second.fields) == text

    def test_system_fields_are_skipped(self):
        fields = parse_fields("name:string").fields
        full = FieldList.build(fields, timestamps=True, soft_delete=True)

        assert serialize_fields(list(full)) == "Name:string"

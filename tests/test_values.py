"""Typed value codec: coercion rules at the file and editor boundaries."""

import datetime

import pytest

from structdesk.domain import values as codec
from structdesk.domain.models import FieldType


class TestBooleanCoercion:
    """Only the exact literal "true" is true."""

    @pytest.mark.parametrize("text,expected", [
        ("true", True),
        ("false", False),
        ("True", False),
        ("1", False),
        ("", False),
        ("yes", False),
    ])
    def test_coerce(self, text, expected):
        assert codec.coerce_bool(text) is expected
        assert codec.bool_for_editor(text) is expected

    def test_csv_text_is_canonical(self):
        assert codec.to_csv_text("", FieldType.BOOLEAN) == "false"
        assert codec.to_csv_text("TRUE", FieldType.BOOLEAN) == "false"
        assert codec.to_csv_text("true", FieldType.BOOLEAN) == "true"

    def test_cell_is_native_bool(self):
        assert codec.to_cell("true", FieldType.BOOLEAN) is True
        assert codec.to_cell("nope", FieldType.BOOLEAN) is False


class TestNumber:

    def test_parse_is_strict(self):
        assert codec.parse_number("42") == 42.0
        assert codec.parse_number("-1.5e3") == -1500.0
        assert codec.parse_number(" 42") is None
        assert codec.parse_number("1_000") is None
        assert codec.parse_number("") is None
        assert codec.parse_number("abc") is None

    def test_format_drops_trailing_zero(self):
        assert codec.format_number(3.0) == "3"
        assert codec.format_number(2.5) == "2.5"
        assert codec.format_number(-0.0) == "0"

    def test_unparsable_number_falls_back_to_text_cell(self):
        assert codec.to_cell("12.5", FieldType.NUMBER) == 12.5
        assert codec.to_cell("n/a", FieldType.NUMBER) == "n/a"
        assert codec.to_cell("inf", FieldType.NUMBER) == "inf"

    def test_csv_text_is_verbatim(self):
        assert codec.to_csv_text("007", FieldType.NUMBER) == "007"
        assert codec.to_csv_text("n/a", FieldType.NUMBER) == "n/a"

    def test_editor_shows_zero_for_garbage(self):
        assert codec.number_for_editor("oops") == 0.0
        assert codec.number_for_editor("4.25") == 4.25
        assert codec.text_from_editor(FieldType.NUMBER, 5.0) == "5"


class TestCellStringify:

    def test_native_values(self):
        assert codec.stringify_cell(None) == ""
        assert codec.stringify_cell(True) == "true"
        assert codec.stringify_cell(False) == "false"
        assert codec.stringify_cell(7) == "7"
        assert codec.stringify_cell(7.0) == "7"
        assert codec.stringify_cell("  kept  ") == "  kept  "

    def test_datetimes(self):
        assert codec.stringify_cell(datetime.datetime(2024, 3, 1)) == "2024-03-01"
        assert codec.stringify_cell(datetime.datetime(2024, 3, 1, 9, 30)) == "2024-03-01T09:30:00"
        assert codec.stringify_cell(datetime.date(2024, 3, 1)) == "2024-03-01"

    def test_field_value_carries_declared_type(self):
        fv = codec.field_value_from_cell(12.0, FieldType.TEXT)
        assert fv.value == "12"
        assert fv.field_type == FieldType.TEXT

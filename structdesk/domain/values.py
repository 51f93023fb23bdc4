"""
Typed Value Codec.

Stored values are always canonical text (FieldValue.value). The tagged forms
below exist only while crossing a read/write boundary (typed spreadsheet cells,
CSV text, editor widgets) and are never persisted.

Rules:
  - Text/Date: pass-through text. Date is free text, no calendar validation.
  - Number: 64-bit float. When the text does not parse (or is not finite) a
    typed destination receives the raw text instead.
  - Boolean: canonical "true"/"false". Only the exact literal "true" is true;
    everything else (including "True", "1", "") reads as false.
"""
from __future__ import annotations

import datetime
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from .models import FieldType, FieldValue

logger = logging.getLogger(__name__)

TRUE_TEXT = "true"
FALSE_TEXT = "false"


@dataclass(frozen=True)
class TextValue:
    text: str


@dataclass(frozen=True)
class NumberValue:
    number: float


@dataclass(frozen=True)
class BoolValue:
    flag: bool


@dataclass(frozen=True)
class DateValue:
    text: str


TypedValue = Union[TextValue, NumberValue, BoolValue, DateValue]
CellValue = Union[str, float, bool]


# --- Primitive parse/format ---

def parse_number(text: str) -> Optional[float]:
    """Parse a float the strict way: no surrounding whitespace, no digit separators."""
    s = str(text or "")
    if not s or s != s.strip() or "_" in s:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def format_number(number: float) -> str:
    """Canonical text for a float: integral values without a trailing '.0'."""
    x = float(number)
    if math.isfinite(x) and x.is_integer() and abs(x) < 1e16:
        return str(int(x))
    return repr(x)


def parse_bool(text: str) -> Optional[bool]:
    if text == TRUE_TEXT:
        return True
    if text == FALSE_TEXT:
        return False
    return None


def coerce_bool(text: str) -> bool:
    """Unparsable input is false, never an error."""
    return parse_bool(text) is True


def format_bool(flag: bool) -> str:
    return TRUE_TEXT if flag else FALSE_TEXT


# --- Tagged union at the boundary ---

def decode(text: str, field_type: FieldType) -> TypedValue:
    """Lift canonical text into its tagged form under `field_type`."""
    text = "" if text is None else str(text)
    if field_type == FieldType.NUMBER:
        number = parse_number(text)
        if number is None or not math.isfinite(number):
            logger.debug(f"Number coercion miss, keeping text: {text!r}")
            return TextValue(text)
        return NumberValue(number)
    if field_type == FieldType.BOOLEAN:
        flag = parse_bool(text)
        if flag is None:
            logger.debug(f"Boolean coercion miss, using false: {text!r}")
            flag = False
        return BoolValue(flag)
    if field_type == FieldType.DATE:
        return DateValue(text)
    return TextValue(text)


def encode(typed: TypedValue) -> str:
    """Collapse a tagged value back to canonical text."""
    if isinstance(typed, NumberValue):
        return format_number(typed.number)
    if isinstance(typed, BoolValue):
        return format_bool(typed.flag)
    return typed.text


def to_cell(text: str, field_type: FieldType) -> CellValue:
    """Value to write into a typed spreadsheet cell."""
    typed = decode(text, field_type)
    if isinstance(typed, NumberValue):
        return typed.number
    if isinstance(typed, BoolValue):
        return typed.flag
    return typed.text


def to_csv_text(text: str, field_type: FieldType) -> str:
    """Value to write into a CSV cell. Booleans are written coerced; everything else verbatim."""
    if field_type == FieldType.BOOLEAN:
        return encode(decode(text, field_type))
    return "" if text is None else str(text)


def stringify_cell(raw: Any) -> str:
    """Canonical text for a native spreadsheet cell value."""
    if raw is None:
        return ""
    # bool before int: bool is an int subclass
    if isinstance(raw, bool):
        return format_bool(raw)
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float):
        return format_number(raw)
    if isinstance(raw, datetime.datetime):
        if raw.time() == datetime.time(0, 0):
            return raw.date().isoformat()
        return raw.isoformat()
    if isinstance(raw, (datetime.date, datetime.time)):
        return raw.isoformat()
    if isinstance(raw, datetime.timedelta):
        return str(raw)
    return str(raw)


def field_value_from_cell(raw: Any, field_type: FieldType) -> FieldValue:
    """Import boundary: stringify immediately, then tag with the declared type."""
    return FieldValue(stringify_cell(raw), field_type)


# --- Editor helpers (records table) ---

def number_for_editor(text: str) -> float:
    """Numeric editor value; unparsable text shows as 0."""
    number = parse_number(text)
    if number is None or not math.isfinite(number):
        return 0.0
    return number


def bool_for_editor(text: str) -> bool:
    return text == TRUE_TEXT


def text_from_editor(field_type: FieldType, editor_value: Any) -> str:
    """Canonical text for a value coming back from a typed editor widget."""
    if field_type == FieldType.NUMBER and isinstance(editor_value, (int, float)) and not isinstance(editor_value, bool):
        return format_number(float(editor_value))
    if field_type == FieldType.BOOLEAN and isinstance(editor_value, bool):
        return format_bool(editor_value)
    return "" if editor_value is None else str(editor_value)

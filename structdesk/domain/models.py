from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class FieldType(str, Enum):
    TEXT = "Text"
    NUMBER = "Number"
    DATE = "Date"
    BOOLEAN = "Boolean"

    @classmethod
    def parse(cls, raw: Any) -> "FieldType":
        """Resolve a persisted type name. Missing means Text; unknown names are an error."""
        if raw is None or raw == "":
            return cls.TEXT
        for member in cls:
            if member.value == raw:
                return member
        raise ValueError(f"unknown field type {raw!r}")


def _require_dict(raw: Any, what: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise TypeError(f"{what} must be an object, got {type(raw).__name__}")
    return raw


def _require_list(raw: Any, what: str) -> List[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TypeError(f"{what} must be an array, got {type(raw).__name__}")
    return raw


# --- Schema Models ---

@dataclass
class Field:
    name: str = ""
    field_type: FieldType = FieldType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "field_type": self.field_type.value}

    @classmethod
    def from_dict(cls, raw: Any) -> "Field":
        d = _require_dict(raw, "field")
        return cls(name=str(d.get("name") or ""), field_type=FieldType.parse(d.get("field_type")))


@dataclass
class Structure:
    """A user-defined record schema: an ordered list of typed fields."""
    name: str = ""
    fields: List[Field] = field(default_factory=list)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def copy(self) -> "Structure":
        return Structure(name=self.name, fields=[Field(f.name, f.field_type) for f in self.fields])

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "fields": [f.to_dict() for f in self.fields]}

    @classmethod
    def from_dict(cls, raw: Any) -> "Structure":
        d = _require_dict(raw, "structure")
        return cls(
            name=str(d.get("name") or ""),
            fields=[Field.from_dict(f) for f in _require_list(d.get("fields"), "fields")],
        )


@dataclass
class SubCategory:
    name: str = ""
    structures: List[Structure] = field(default_factory=list)

    def find(self, structure_name: str) -> Optional[int]:
        for idx, s in enumerate(self.structures):
            if s.name == structure_name:
                return idx
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "structures": [s.to_dict() for s in self.structures]}

    @classmethod
    def from_dict(cls, raw: Any) -> "SubCategory":
        d = _require_dict(raw, "subcategory")
        return cls(
            name=str(d.get("name") or ""),
            structures=[Structure.from_dict(s) for s in _require_list(d.get("structures"), "structures")],
        )


@dataclass
class Category:
    name: str = ""
    subcategories: List[SubCategory] = field(default_factory=list)

    def find_subcategory(self, name: str) -> Optional[SubCategory]:
        for sub in self.subcategories:
            if sub.name == name:
                return sub
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "subcategories": [s.to_dict() for s in self.subcategories]}

    @classmethod
    def from_dict(cls, raw: Any) -> "Category":
        d = _require_dict(raw, "category")
        return cls(
            name=str(d.get("name") or ""),
            subcategories=[SubCategory.from_dict(s) for s in _require_list(d.get("subcategories"), "subcategories")],
        )


def catalog_to_json(categories: List[Category]) -> List[Dict[str, Any]]:
    return [c.to_dict() for c in categories]


def catalog_from_json(raw: Any) -> List[Category]:
    return [Category.from_dict(c) for c in _require_list(raw, "catalog")]


# --- Record Models ---

@dataclass
class FieldValue:
    """A stored cell. `value` is always the canonical text form."""
    value: str = ""
    field_type: FieldType = FieldType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "field_type": self.field_type.value}

    @classmethod
    def from_dict(cls, raw: Any) -> "FieldValue":
        d = _require_dict(raw, "field value")
        value = d.get("value")
        return cls(value="" if value is None else str(value), field_type=FieldType.parse(d.get("field_type")))


Row = Dict[str, FieldValue]


def empty_row(structure: Structure) -> Row:
    """One empty value per currently-defined field."""
    return {f.name: FieldValue("", f.field_type) for f in structure.fields}


def copy_rows(rows: List[Row]) -> List[Row]:
    return [{k: FieldValue(v.value, v.field_type) for k, v in row.items()} for row in rows]


@dataclass
class RecordDocument:
    # Legacy top-level field; never read by the application, kept for file compatibility.
    structure_name: str = ""
    data: Dict[str, List[Row]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "structure_name": self.structure_name,
            "data": {
                name: [{k: fv.to_dict() for k, fv in row.items()} for row in rows]
                for name, rows in self.data.items()
            },
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "RecordDocument":
        d = _require_dict(raw, "records document")
        data: Dict[str, List[Row]] = {}
        for name, rows in _require_dict(d.get("data") or {}, "data").items():
            parsed: List[Row] = []
            for row in _require_list(rows, f"rows of {name}"):
                parsed.append({str(k): FieldValue.from_dict(v) for k, v in _require_dict(row, "row").items()})
            data[str(name)] = parsed
        return cls(structure_name=str(d.get("structure_name") or ""), data=data)

import pytest

from structdesk.domain.models import (
    FieldType,
    RecordDocument,
    catalog_from_json,
    catalog_to_json,
)


CATALOG_JSON = [
    {
        "name": "Finance",
        "subcategories": [
            {
                "name": "Billing",
                "structures": [
                    {"name": "Invoice", "fields": [
                        {"name": "Id", "field_type": "Number"},
                        {"name": "Note"},
                    ]},
                ],
            },
        ],
    },
]


def test_catalog_parses_and_defaults_missing_type_to_text():
    categories = catalog_from_json(CATALOG_JSON)
    invoice = categories[0].subcategories[0].structures[0]
    assert invoice.field_names == ["Id", "Note"]
    assert invoice.get_field("Id").field_type == FieldType.NUMBER
    assert invoice.get_field("Note").field_type == FieldType.TEXT


def test_catalog_serializes_explicit_types():
    out = catalog_to_json(catalog_from_json(CATALOG_JSON))
    fields = out[0]["subcategories"][0]["structures"][0]["fields"]
    assert fields[1] == {"name": "Note", "field_type": "Text"}


def test_unknown_field_type_is_rejected():
    bad = [{"name": "C", "subcategories": [{"name": "S", "structures": [
        {"name": "X", "fields": [{"name": "f", "field_type": "Currency"}]},
    ]}]}]
    with pytest.raises(ValueError):
        catalog_from_json(bad)


def test_catalog_must_be_a_list():
    with pytest.raises(TypeError):
        catalog_from_json({"name": "Finance"})


def test_record_document_round_trip_keeps_legacy_field():
    raw = {
        "structure_name": "legacy",
        "data": {"Invoice": [{"Id": {"value": "1", "field_type": "Number"}}]},
    }
    doc = RecordDocument.from_dict(raw)
    assert doc.data["Invoice"][0]["Id"].value == "1"
    assert doc.to_dict() == raw


def test_record_document_without_data_is_empty():
    doc = RecordDocument.from_dict({"structure_name": ""})
    assert doc.data == {}

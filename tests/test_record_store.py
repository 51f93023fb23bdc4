"""Record store: positional row edits, write skipping and corrupt-document recovery."""

import json

from structdesk.domain.models import Category, Field, FieldType, Structure, SubCategory
from structdesk.services.catalog_service import CatalogService
from structdesk.services.record_store import RecordStore


def _store(tmp_path, documents):
    catalog = CatalogService(str(tmp_path), documents)
    catalog.categories = [Category("Finance", [SubCategory("Billing", [
        Structure("Invoice", [Field("Id", FieldType.NUMBER), Field("Paid", FieldType.BOOLEAN)]),
    ])])]
    store = RecordStore(catalog, str(tmp_path), documents)
    store.load()
    return catalog, store


class TestLoad:

    def test_missing_document_is_created_empty(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        on_disk = json.loads((tmp_path / "erp_data.json").read_text(encoding="utf-8"))
        assert on_disk == {"structure_name": "", "data": {}}
        assert store.document.data == {}

    def test_corrupt_document_is_set_aside_and_reset(self, tmp_path, documents):
        path = tmp_path / "erp_data.json"
        path.write_text("[[[", encoding="utf-8")
        _catalog, store = _store(tmp_path, documents)
        assert (tmp_path / "erp_data.json.corrupt").read_text(encoding="utf-8") == "[[["
        assert json.loads(path.read_text(encoding="utf-8"))["data"] == {}
        assert store.get_rows("Invoice") is None


class TestRows:

    def test_insert_uses_current_fields(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        assert store.insert_row("Invoice") == 0
        row = store.get_rows("Invoice")[0]
        assert {k: (v.value, v.field_type) for k, v in row.items()} == {
            "Id": ("", FieldType.NUMBER),
            "Paid": ("", FieldType.BOOLEAN),
        }

    def test_insert_unknown_structure(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        assert store.insert_row("Nope") is None

    def test_update_takes_type_from_live_field(self, tmp_path, documents):
        catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        store.insert_row("Invoice")
        catalog.find_structure("Invoice").fields[0].field_type = FieldType.TEXT
        assert store.update_cell("Invoice", 0, "Id", "A-1")
        assert store.get_rows("Invoice")[0]["Id"].field_type == FieldType.TEXT

    def test_update_fills_missing_keys_and_keeps_stale_ones(self, tmp_path, documents):
        catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        store.insert_row("Invoice")
        structure = catalog.find_structure("Invoice")
        structure.fields.append(Field("Due", FieldType.DATE))
        structure.fields.pop(0)  # Id
        store.update_cell("Invoice", 0, "Due", "2024-05-01")
        row = store.get_rows("Invoice")[0]
        assert set(row) == {"Id", "Paid", "Due"}
        assert row["Due"].value == "2024-05-01"

    def test_update_rejects_bad_targets(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        assert not store.update_cell("Invoice", 0, "Id", "1")
        store.insert_row("Invoice")
        assert not store.update_cell("Invoice", 0, "Nope", "1")
        assert not store.update_cell("Nope", 0, "Id", "1")

    def test_remove_shifts_later_rows(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        for i in range(3):
            store.insert_row("Invoice")
            store.update_cell("Invoice", i, "Id", str(i + 1))
        assert store.remove_row("Invoice", 1)
        assert [r["Id"].value for r in store.get_rows("Invoice")] == ["1", "3"]
        assert not store.remove_row("Invoice", 5)

    def test_removing_last_row_leaves_empty_list(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        store.insert_row("Invoice")
        store.remove_row("Invoice", 0)
        assert store.get_rows("Invoice") == []
        on_disk = json.loads((tmp_path / "erp_data.json").read_text(encoding="utf-8"))
        assert on_disk["data"]["Invoice"] == []


class TestWrites:

    def test_identical_update_writes_once(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        store.insert_row("Invoice")
        before = documents.count(store.path)
        assert store.update_cell("Invoice", 0, "Id", "7") is True
        assert store.update_cell("Invoice", 0, "Id", "7") is False
        assert documents.count(store.path) == before + 1

    def test_register_empty_twice_writes_once(self, tmp_path, documents):
        _catalog, store = _store(tmp_path, documents)
        before = documents.count(store.path)
        assert store.register_empty("Invoice")
        assert not store.register_empty("Invoice")
        assert documents.count(store.path) == before + 1

    def test_rows_survive_reload(self, tmp_path, documents):
        catalog, store = _store(tmp_path, documents)
        store.register_empty("Invoice")
        store.insert_row("Invoice")
        store.update_cell("Invoice", 0, "Paid", "true")

        again = RecordStore(catalog, str(tmp_path), documents)
        again.load()
        fv = again.get_rows("Invoice")[0]["Paid"]
        assert (fv.value, fv.field_type) == ("true", FieldType.BOOLEAN)

"""Lookup layer hydration and the structure editor session."""

import pytest

from structdesk.domain.models import FieldType
from structdesk.errors import EditorError
from structdesk.services.lookup import EditorMode, EditorState


class TestHydration:

    def test_sidecar_hydrates_on_first_selection(self, core, tmp_path):
        (tmp_path / "Invoice.csv").write_text("Id,Paid\n5,true\n6,\n", encoding="utf-8")
        rows = core.lookup.select("Invoice")
        assert [(r["Id"].value, r["Paid"].value) for r in rows] == [("5", "true"), ("6", "")]
        assert rows[0]["Paid"].field_type == FieldType.BOOLEAN

    def test_missing_sidecar_registers_and_persists_empty(self, core, documents):
        before = documents.count(core.store.path)
        assert core.lookup.select("Invoice") == []
        assert core.store.get_rows("Invoice") == []
        assert documents.count(core.store.path) == before + 1

    def test_known_entry_is_not_reloaded(self, core, tmp_path):
        core.lookup.select("Invoice")
        (tmp_path / "Invoice.csv").write_text("Id,Paid\n5,true\n", encoding="utf-8")
        assert core.lookup.select("Invoice") == []

    def test_unknown_structure(self, core):
        assert core.lookup.select("Nope") is None


class TestEditorSession:

    def test_new_structure_registers_empty_rows(self, core):
        editor = core.editor
        editor.open_new("Finance", "Billing")
        editor.set_name("Receipt")
        editor.add_field("Amount", FieldType.NUMBER)
        outcome = editor.save()
        assert outcome.is_new and outcome.catalog_saved
        assert editor.state == EditorState.CLOSED
        assert core.catalog.find_structure("Receipt").field_names == ["Amount"]
        assert core.store.get_rows("Receipt") == []

    def test_existing_structure_edits_a_copy(self, core):
        editor = core.editor
        assert editor.open_existing("Finance", "Billing", "Invoice")
        assert editor.mode == EditorMode.EXISTING
        editor.set_field_type(0, FieldType.TEXT)
        assert core.catalog.find_structure("Invoice").fields[0].field_type == FieldType.NUMBER
        outcome = editor.save()
        assert not outcome.is_new
        assert core.catalog.find_structure("Invoice").fields[0].field_type == FieldType.TEXT
        assert core.store.get_rows("Invoice") is None

    def test_renaming_replaces_the_original_entry(self, core):
        editor = core.editor
        editor.open_existing("Finance", "Billing", "Invoice")
        editor.set_name("Bill")
        editor.save()
        names = [s.name for s in core.catalog.categories[0].subcategories[0].structures]
        assert names == ["Bill"]

    def test_open_existing_unknown(self, core):
        assert not core.editor.open_existing("Finance", "Billing", "Nope")
        assert not core.editor.is_open

    @pytest.mark.parametrize("category,subcategory,name,message", [
        ("Finance", "Billing", "", "Structure name is required"),
        ("", "Billing", "X", "No category or subcategory selected"),
        ("Nowhere", "Billing", "X", "Category not found: Nowhere"),
        ("Finance", "Nowhere", "X", "SubCategory not found: Nowhere"),
    ])
    def test_save_validation(self, core, category, subcategory, name, message):
        editor = core.editor
        editor.open_new(category, subcategory)
        editor.set_name(name)
        with pytest.raises(EditorError) as exc:
            editor.save()
        assert str(exc.value) == message
        assert editor.is_open

    def test_recreating_a_deleted_name_resets_rows(self, core):
        core.select_structure("Invoice")
        core.add_row("Invoice")
        core.remove_structure("Invoice")
        assert len(core.store.get_rows("Invoice")) == 1

        editor = core.editor
        editor.open_new("Finance", "Billing")
        editor.set_name("Invoice")
        assert editor.save().is_new
        assert core.store.get_rows("Invoice") == []

    def test_cancel_discards_draft(self, core):
        editor = core.editor
        editor.open_existing("Finance", "Billing", "Invoice")
        editor.remove_field(0)
        editor.cancel()
        assert core.catalog.find_structure("Invoice").field_names == ["Id", "Paid"]
        assert editor.state == EditorState.CLOSED

    def test_new_structure_cannot_reuse_a_taken_name(self, core):
        editor = core.editor
        editor.open_new("Finance", "Billing")
        editor.set_name("Customer")
        with pytest.raises(EditorError) as exc:
            editor.save()
        assert str(exc.value) == "Structure name already exists: Customer"
        assert editor.is_open
        names = [s.name for s in core.catalog.categories[0].subcategories[0].structures]
        assert names == ["Invoice"]

    def test_rename_onto_another_structure_is_rejected(self, core):
        editor = core.editor
        editor.open_existing("Finance", "Billing", "Invoice")
        editor.set_name("Customer")
        with pytest.raises(EditorError):
            editor.save()
        editor.set_name("Invoice")
        assert not editor.save().is_new

"""CoreService facade: operation results, selection and catalog persistence."""

import json

from structdesk.services.core import CoreService


def _catalog_on_disk(tmp_path):
    return json.loads((tmp_path / "custom_structures.json").read_text(encoding="utf-8"))


def test_select_structure_reports_row_count(core):
    result = core.select_structure("Invoice")
    assert result.ok
    assert result.message == "Invoice: 0 rows"
    assert core.current_structure().name == "Invoice"
    assert core.current_rows() == []


def test_select_unknown_clears_selection(core):
    core.select_structure("Invoice")
    result = core.select_structure("Nope")
    assert not result.ok
    assert core.selected_structure is None
    assert core.current_rows() == []
    assert core.last_result is result


def test_add_row_backs_up_to_sidecar(core, tmp_path):
    core.select_structure("Customer")
    assert core.add_row("Customer").ok
    assert (tmp_path / "Customer.csv").read_text(encoding="utf-8").splitlines() == ["Name,Since,Credit", ",,"]


def test_edit_and_delete_rows(core):
    core.select_structure("Invoice")
    core.add_row("Invoice")
    assert core.edit_cell("Invoice", 0, "Id", "1").message == "Saved"
    assert core.edit_cell("Invoice", 0, "Id", "1").message == ""
    assert not core.edit_cell("Nope", 0, "Id", "1").ok
    assert core.delete_row("Invoice", 0).ok
    assert not core.delete_row("Invoice", 0).ok


def test_save_backup_needs_selection(core, tmp_path):
    assert not core.save_backup().ok
    core.select_structure("Invoice")
    assert core.save_backup().ok
    assert (tmp_path / "Invoice.csv").exists()


def test_catalog_operations_persist_immediately(core, tmp_path):
    core.add_category()
    assert _catalog_on_disk(tmp_path)[-1]["name"] == "New Category"
    core.add_subcategory(2)
    core.rename_subcategory(2, 0, "Misc")
    assert _catalog_on_disk(tmp_path)[2]["subcategories"][0]["name"] == "Misc"
    assert not core.rename_category(9, "x").ok
    core.remove_category(2)
    assert len(_catalog_on_disk(tmp_path)) == 2


def test_remove_structure_keeps_rows_and_clears_selection(core, tmp_path):
    core.select_structure("Invoice")
    core.add_row("Invoice")
    assert core.remove_structure("Invoice").ok
    assert core.selected_structure is None
    assert core.store.get_rows("Invoice") is not None
    assert (tmp_path / "Invoice.csv").exists()


def test_rename_structure_does_not_move_rows(core):
    core.select_structure("Invoice")
    core.add_row("Invoice")
    assert core.rename_structure("Invoice", "Bill").ok
    assert core.store.get_rows("Bill") is None
    assert len(core.store.get_rows("Invoice")) == 1


def test_structure_editor_round_trip(core):
    assert core.open_structure_editor("Finance", "Billing").ok
    core.editor.set_name("Receipt")
    result = core.save_structure()
    assert result.ok
    assert result.message == "Structure Receipt saved"

    assert not core.open_structure_editor("Finance", "Nowhere").ok
    assert not core.open_structure_editor("Finance", "Billing", "Nope").ok


def test_save_structure_reports_validation_error(core):
    core.open_structure_editor("Finance", "Billing")
    result = core.save_structure()
    assert not result.ok
    assert result.message == "Structure name is required"


def test_restart_reloads_both_documents(core, tmp_path, documents):
    core.select_structure("Invoice")
    core.add_row("Invoice")
    core.edit_cell("Invoice", 0, "Paid", "true")

    again = CoreService(data_dir=str(tmp_path), documents=documents)
    again.start()
    assert again.catalog.find_structure("Customer") is not None
    assert again.store.get_rows("Invoice")[0]["Paid"].value == "true"


def test_edit_cell_reports_missing_row_or_field(core):
    result = core.edit_cell("Invoice", 0, "Id", "1")
    assert not result.ok
    assert result.message == "No row 1 in Invoice"

    core.select_structure("Invoice")
    core.add_row("Invoice")
    assert core.edit_cell("Invoice", 3, "Id", "1").message == "No row 4 in Invoice"
    assert core.edit_cell("Invoice", 0, "Nope", "1").message == "Unknown field: Nope"
    assert core.edit_cell("Invoice", 0, "Id", "1").ok

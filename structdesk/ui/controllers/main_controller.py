from __future__ import annotations
from typing import Optional
from PySide6 import QtCore

from ...services.core import CoreService, OperationResult
from ..file_picker import QtFilePicker


class MainController(QtCore.QObject):
    """
    Forwards UI events to the CoreService and re-emits its state as signals.
    Holds no data of its own; the core is the single source of truth.
    """
    catalog_changed = QtCore.Signal()
    rows_changed = QtCore.Signal()
    selection_changed = QtCore.Signal(str)  # structure name, "" when cleared
    status_changed = QtCore.Signal(bool, str)  # ok, message

    def __init__(self, core: CoreService, picker: Optional[QtFilePicker] = None):
        super().__init__()
        self.core = core
        if picker is not None:
            self.core.picker = picker

    def start(self) -> None:
        self.core.start()
        self.catalog_changed.emit()

    def _report(self, result: OperationResult) -> OperationResult:
        if result.message or not result.ok:
            self.status_changed.emit(result.ok, result.message)
        return result

    # --- Records ---

    def select_structure(self, name: str) -> None:
        result = self._report(self.core.select_structure(name))
        self.selection_changed.emit(name if result.ok else "")
        self.rows_changed.emit()

    def edit_cell(self, row_idx: int, field_name: str, value: str) -> None:
        name = self.core.selected_structure
        if not name:
            return
        result = self._report(self.core.edit_cell(name, row_idx, field_name, value))
        if result.ok:
            self.rows_changed.emit()

    def add_row(self) -> None:
        name = self.core.selected_structure
        if not name:
            return
        self._report(self.core.add_row(name))
        self.rows_changed.emit()

    def delete_row(self, row_idx: int) -> None:
        name = self.core.selected_structure
        if not name:
            return
        self._report(self.core.delete_row(name, row_idx))
        self.rows_changed.emit()

    def save_backup(self) -> None:
        if self.core.selected_structure:
            self._report(self.core.save_backup())

    def export_selected(self) -> None:
        name = self.core.selected_structure
        if name:
            self._report(self.core.export(name))

    def import_selected(self) -> None:
        name = self.core.selected_structure
        if not name:
            return
        self._report(self.core.import_structure(name))
        self.rows_changed.emit()

    # --- Catalog ---

    def _catalog_op(self, result: OperationResult) -> None:
        self._report(result)
        self.catalog_changed.emit()

    def add_category(self) -> None:
        self._catalog_op(self.core.add_category())

    def rename_category(self, index: int, name: str) -> None:
        self._catalog_op(self.core.rename_category(index, name))

    def remove_category(self, index: int) -> None:
        self._catalog_op(self.core.remove_category(index))

    def add_subcategory(self, category_index: int) -> None:
        self._catalog_op(self.core.add_subcategory(category_index))

    def rename_subcategory(self, category_index: int, index: int, name: str) -> None:
        self._catalog_op(self.core.rename_subcategory(category_index, index, name))

    def remove_subcategory(self, category_index: int, index: int) -> None:
        self._catalog_op(self.core.remove_subcategory(category_index, index))

    def remove_structure(self, name: str) -> None:
        was_selected = self.core.selected_structure == name
        self._catalog_op(self.core.remove_structure(name))
        if was_selected:
            self.selection_changed.emit("")
            self.rows_changed.emit()

    def save_catalog(self) -> None:
        self._report(self.core.save_catalog())

    def open_structure_editor(self, category_name: str, subcategory_name: str,
                              structure_name: Optional[str] = None) -> bool:
        return self._report(self.core.open_structure_editor(category_name, subcategory_name, structure_name)).ok

    def save_structure(self) -> OperationResult:
        result = self._report(self.core.save_structure())
        if result.ok:
            self.catalog_changed.emit()
            # Field list may have changed under the open table
            self.rows_changed.emit()
        return result

    def cancel_structure_edit(self) -> None:
        self.core.cancel_structure_edit()

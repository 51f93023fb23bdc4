from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..domain.models import Category, Row, Structure
from ..errors import EditorError, StructDeskError
from .catalog_service import CatalogService
from .exchange import ExchangeEngine, FilePicker
from .lookup import LookupLayer, StructureEditorSession
from .record_store import RecordStore
from .repositories.document_repository import DocumentRepository
from .repositories.table_file_repository import TableFileRepository

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    ok: bool
    message: str = ""


class CoreService:
    """
    Facade over catalog, record store, exchange engine and lookup layer.

    Constructed once and handed to the UI. Every UI-facing call returns an
    OperationResult and records it as `last_result`; nothing here raises.
    """

    def __init__(
        self,
        data_dir: Optional[str] = None,
        picker: Optional[FilePicker] = None,
        documents: Optional[DocumentRepository] = None,
        tables: Optional[TableFileRepository] = None,
    ) -> None:
        documents = documents or DocumentRepository()
        self.catalog = CatalogService(data_dir, documents)
        self.store = RecordStore(self.catalog, data_dir, documents)
        self.exchange = ExchangeEngine(self.catalog, self.store, picker, data_dir, tables)
        self.lookup = LookupLayer(self.catalog, self.store, self.exchange)
        self.editor = StructureEditorSession(self.catalog, self.store)

        self.selected_structure: Optional[str] = None
        self.last_result = OperationResult(True, "")

    def start(self) -> None:
        """Load both documents. Either may fall back to empty independently."""
        self.catalog.load()
        self.store.load()

    @property
    def picker(self) -> Optional[FilePicker]:
        return self.exchange.picker

    @picker.setter
    def picker(self, picker: Optional[FilePicker]) -> None:
        self.exchange.picker = picker

    # --- Core -> UI ---

    def catalog_tree(self) -> List[Category]:
        return self.catalog.categories

    def current_structure(self) -> Optional[Structure]:
        if self.selected_structure is None:
            return None
        return self.catalog.find_structure(self.selected_structure)

    def current_rows(self) -> List[Row]:
        if self.current_structure() is None:
            return []
        return self.store.get_rows(self.selected_structure) or []

    def _ok(self, message: str = "") -> OperationResult:
        self.last_result = OperationResult(True, message)
        return self.last_result

    def _fail(self, message: str) -> OperationResult:
        logger.error(message)
        self.last_result = OperationResult(False, message)
        return self.last_result

    # --- UI -> Core: records ---

    def select_structure(self, name: str) -> OperationResult:
        rows = self.lookup.select(name)
        if rows is None:
            self.selected_structure = None
            return self._fail(f"Unknown structure: {name}")
        self.selected_structure = name
        return self._ok(f"{name}: {len(rows)} rows")

    def edit_cell(self, structure_name: str, row_idx: int, field_name: str, value: str) -> OperationResult:
        structure = self.catalog.find_structure(structure_name)
        if structure is None:
            return self._fail(f"Unknown structure: {structure_name}")
        rows = self.store.get_rows(structure_name)
        if rows is None or not 0 <= row_idx < len(rows):
            return self._fail(f"No row {row_idx + 1} in {structure_name}")
        if structure.get_field(field_name) is None:
            return self._fail(f"Unknown field: {field_name}")
        changed = self.store.update_cell(structure_name, row_idx, field_name, value)
        return self._ok("Saved" if changed else "")

    def add_row(self, structure_name: str) -> OperationResult:
        idx = self.store.insert_row(structure_name)
        if idx is None:
            return self._fail(f"Unknown structure: {structure_name}")
        self.exchange.backup_to_sidecar(structure_name)
        return self._ok(f"Row {idx + 1} added")

    def delete_row(self, structure_name: str, row_idx: int) -> OperationResult:
        if not self.store.remove_row(structure_name, row_idx):
            return self._fail(f"No row {row_idx + 1} in {structure_name}")
        return self._ok(f"Row {row_idx + 1} deleted")

    def save_backup(self, structure_name: Optional[str] = None) -> OperationResult:
        name = structure_name or self.selected_structure
        if not name:
            return self._fail("No structure selected")
        if not self.exchange.backup_to_sidecar(name):
            return self._fail(f"CSV backup of {name} failed")
        return self._ok(f"CSV backup of {name} saved")

    # --- UI -> Core: exchange ---

    def export(self, structure_name: str) -> OperationResult:
        structure = self.catalog.find_structure(structure_name)
        if structure is None:
            return self._fail(f"Unknown structure: {structure_name}")
        try:
            path = self.exchange.export(structure)
        except StructDeskError as e:
            return self._fail(f"Export failed: {e}")
        if path is None:
            return self._ok("")
        return self._ok(f"Exported to {path}")

    def import_structure(self, structure_name: str) -> OperationResult:
        structure = self.catalog.find_structure(structure_name)
        if structure is None:
            return self._fail(f"Unknown structure: {structure_name}")
        try:
            count = self.exchange.import_(structure)
        except StructDeskError as e:
            return self._fail(f"Import failed: {e}")
        if count is None:
            return self._ok("")
        return self._ok(f"Imported {count} rows")

    # --- UI -> Core: schema ---

    def open_structure_editor(self, category_name: str, subcategory_name: str,
                              structure_name: Optional[str] = None) -> OperationResult:
        if self.catalog.find_subcategory(category_name, subcategory_name) is None:
            return self._fail(f"SubCategory not found: {subcategory_name}")
        if structure_name is None:
            self.editor.open_new(category_name, subcategory_name)
        elif not self.editor.open_existing(category_name, subcategory_name, structure_name):
            return self._fail(f"Unknown structure: {structure_name}")
        return self._ok("")

    def save_structure(self) -> OperationResult:
        try:
            outcome = self.editor.save()
        except EditorError as e:
            return self._fail(str(e))
        if not outcome.catalog_saved:
            return self._fail(f"Structure {outcome.structure.name} kept in memory, catalog save failed")
        return self._ok(f"Structure {outcome.structure.name} saved")

    def cancel_structure_edit(self) -> OperationResult:
        self.editor.cancel()
        return self._ok("")

    def save_catalog(self) -> OperationResult:
        if not self.catalog.save():
            return self._fail("Failed to save structures")
        return self._ok("Structures saved")

    def add_category(self) -> OperationResult:
        self.catalog.add_category()
        return self.save_catalog()

    def rename_category(self, index: int, name: str) -> OperationResult:
        if not self.catalog.rename_category(index, name):
            return self._fail(f"No category at {index}")
        return self.save_catalog()

    def remove_category(self, index: int) -> OperationResult:
        if self.catalog.remove_category(index) is None:
            return self._fail(f"No category at {index}")
        return self.save_catalog()

    def add_subcategory(self, category_index: int) -> OperationResult:
        if self.catalog.add_subcategory(category_index) is None:
            return self._fail(f"No category at {category_index}")
        return self.save_catalog()

    def rename_subcategory(self, category_index: int, index: int, name: str) -> OperationResult:
        if not self.catalog.rename_subcategory(category_index, index, name):
            return self._fail(f"No subcategory at {category_index}/{index}")
        return self.save_catalog()

    def remove_subcategory(self, category_index: int, index: int) -> OperationResult:
        if self.catalog.remove_subcategory(category_index, index) is None:
            return self._fail(f"No subcategory at {category_index}/{index}")
        return self.save_catalog()

    def rename_structure(self, old_name: str, new_name: str) -> OperationResult:
        if not self.catalog.rename_structure(old_name, new_name):
            return self._fail(f"Unknown structure: {old_name}")
        if self.selected_structure == old_name:
            self.selected_structure = None
        return self.save_catalog()

    def remove_structure(self, name: str) -> OperationResult:
        if self.catalog.remove_structure(name) is None:
            return self._fail(f"Unknown structure: {name}")
        if self.selected_structure == name:
            self.selected_structure = None
        return self.save_catalog()

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional, Protocol, Sequence

from .. import config
from ..domain import values as codec
from ..domain.models import Row, Structure
from ..errors import StorageIOError, StructDeskError
from ..project_paths import sidecar_path
from .catalog_service import CatalogService
from .record_store import RecordStore
from .repositories.table_file_repository import TableFileRepository

logger = logging.getLogger(__name__)


class FilePicker(Protocol):
    """
    File-picker collaborator. Both calls block until the user decides;
    None means the prompt was cancelled.
    """

    def pick_open_path(self, filters: Sequence[config.FileFilter]) -> Optional[str]: ...

    def pick_save_path(self, filters: Sequence[config.FileFilter], default_name: str) -> Optional[str]: ...


def is_csv_path(path: str) -> bool:
    return os.path.splitext(path)[1].lower() == ".csv"


class ExchangeEngine:
    """
    Structure-aware import/export between the record store and CSV/XLSX files.

    Contract for every table file: row 0 is the header (field names in
    declaration order) and is skipped on read; columns bind to fields by
    position, never by header text. Short rows pad with "", extra columns are
    ignored.
    """

    def __init__(
        self,
        catalog: CatalogService,
        store: RecordStore,
        picker: Optional[FilePicker] = None,
        data_dir: Optional[str] = None,
        tables: Optional[TableFileRepository] = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._data_dir = data_dir
        self._tables = tables or TableFileRepository()
        self.picker = picker

    # --- Interactive export/import ---

    def export(self, structure: Structure) -> Optional[str]:
        """Ask for a destination and write header + rows. Returns the path, or None if cancelled."""
        if self.picker is None:
            return None
        path = self.picker.pick_save_path(config.EXCHANGE_FILTERS, f"{structure.name}.xlsx")
        if not path:
            logger.info(f"Export of {structure.name!r} cancelled")
            return None
        self.write_table(path, structure)
        logger.info(f"Exported {structure.name!r} to {path}")
        return path

    def import_(self, structure: Structure) -> Optional[int]:
        """
        Ask for a source, replace the structure's rows with its contents and
        back them up to the sidecar. Returns the row count, or None if cancelled.
        """
        if self.picker is None:
            return None
        path = self.picker.pick_open_path(config.EXCHANGE_FILTERS)
        if not path:
            logger.info(f"Import into {structure.name!r} cancelled")
            return None
        rows = self.read_table(path, structure)
        self._store.commit_rows(structure.name, rows)
        self.save_as_csv(structure)
        logger.info(f"Imported {len(rows)} rows into {structure.name!r} from {path}")
        return len(rows)

    # --- Table files (dispatch by suffix) ---

    def write_table(self, path: str, structure: Structure) -> None:
        header = structure.field_names
        rows = self._store.get_rows(structure.name) or []
        if is_csv_path(path):
            self._tables.write_csv(path, header, self._csv_records(structure, rows))
        else:
            self._tables.write_xlsx(path, header, self._cell_records(structure, rows))

    def read_table(self, path: str, structure: Structure) -> List[Row]:
        try:
            if is_csv_path(path):
                records: List[List[Any]] = self._tables.read_csv(path)
            else:
                records = self._tables.read_xlsx(path)
        except FileNotFoundError as e:
            raise StorageIOError(path, "File not found", e) from e
        return [self._row_from_cells(cells, structure) for cells in records[1:]]

    # --- Sidecar ---

    def save_as_csv(self, structure: Structure) -> str:
        path = sidecar_path(structure.name, self._data_dir)
        rows = self._store.get_rows(structure.name) or []
        self._tables.write_csv(path, structure.field_names, self._csv_records(structure, rows))
        logger.info(f"CSV backup written: {path}")
        return path

    def load_from_csv(self, structure: Structure) -> int:
        """Replace the structure's rows with its sidecar contents. Raises when the sidecar is absent or unreadable."""
        path = sidecar_path(structure.name, self._data_dir)
        records = self._tables.read_csv(path)
        rows = [self._row_from_cells(cells, structure) for cells in records[1:]]
        self._store.commit_rows(structure.name, rows)
        return len(rows)

    def backup_to_sidecar(self, name: str) -> bool:
        """Best-effort sidecar write for a known structure with stored rows; failures are logged."""
        structure = self._catalog.find_structure(name)
        if structure is None or self._store.get_rows(name) is None:
            return False
        try:
            self.save_as_csv(structure)
        except StructDeskError as e:
            logger.error(f"CSV backup of {name!r} failed: {e}")
            return False
        return True

    # --- Row <-> cells ---

    @staticmethod
    def _csv_records(structure: Structure, rows: List[Row]) -> List[List[str]]:
        out: List[List[str]] = []
        for row in rows:
            record = []
            for f in structure.fields:
                fv = row.get(f.name)
                record.append(codec.to_csv_text(fv.value, f.field_type) if fv is not None else "")
            out.append(record)
        return out

    @staticmethod
    def _cell_records(structure: Structure, rows: List[Row]) -> List[List[Any]]:
        out: List[List[Any]] = []
        for row in rows:
            record: List[Any] = []
            for f in structure.fields:
                fv = row.get(f.name)
                # Missing key: leave the cell empty
                record.append(codec.to_cell(fv.value, f.field_type) if fv is not None else None)
            out.append(record)
        return out

    @staticmethod
    def _row_from_cells(cells: Sequence[Any], structure: Structure) -> Row:
        row: Row = {}
        for idx, f in enumerate(structure.fields):
            raw = cells[idx] if idx < len(cells) else None
            row[f.name] = codec.field_value_from_cell(raw, f.field_type)
        return row

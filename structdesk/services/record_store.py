from __future__ import annotations

import logging
from typing import List, Optional

from ..domain.models import FieldValue, RecordDocument, Row, copy_rows, empty_row
from ..errors import DocumentParseError, StorageIOError
from ..project_paths import records_path
from .catalog_service import CatalogService
from .repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Structure name -> ordered rows, persisted as one JSON document.

    Every mutation goes through commit_rows(), which compares the new row list
    with the stored one and skips the disk write when nothing changed.
    Field types always come from the catalog's current definition.
    """

    def __init__(self, catalog: CatalogService, data_dir: Optional[str] = None,
                 documents: Optional[DocumentRepository] = None) -> None:
        self._catalog = catalog
        self._path = records_path(data_dir)
        self._documents = documents or DocumentRepository()
        self.document = RecordDocument()

    @property
    def path(self) -> str:
        return self._path

    # --- Persistence ---

    def load(self) -> RecordDocument:
        """Restore the document; absence or corruption falls back to empty and re-persists it."""
        try:
            self.document = RecordDocument.from_dict(self._documents.read(self._path))
            return self.document
        except FileNotFoundError:
            logger.warning(f"No records document at {self._path}, creating an empty one")
        except (DocumentParseError, StorageIOError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse ERP data, starting empty: {e}")
            aside = self._documents.set_aside(self._path)
            if aside:
                logger.warning(f"Unreadable records document kept as {aside}")
        self.document = RecordDocument()
        self.persist()
        return self.document

    def persist(self) -> bool:
        """Rewrite the whole document. Failure is logged, in-memory rows stay as they are."""
        try:
            self._documents.write(self._path, self.document.to_dict())
        except StorageIOError as e:
            logger.error(f"Failed to save ERP data: {e}")
            return False
        return True

    # --- Queries ---

    def get_rows(self, name: str) -> Optional[List[Row]]:
        """Rows for a structure; [] means no data yet, None means no entry at all."""
        return self.document.data.get(name)

    # --- Mutations ---

    def commit_rows(self, name: str, rows: List[Row]) -> bool:
        """Replace a structure's rows and persist, unless they equal what is stored."""
        if self.document.data.get(name) == rows:
            logger.debug(f"Rows of {name!r} unchanged, skipping write")
            return False
        self.document.data[name] = rows
        self.persist()
        return True

    def register_empty(self, name: str) -> bool:
        return self.commit_rows(name, [])

    def insert_row(self, name: str) -> Optional[int]:
        """Append a row with one empty value per current field; returns its index."""
        structure = self._catalog.find_structure(name)
        if structure is None:
            logger.warning(f"Cannot add a row, unknown structure {name!r}")
            return None
        rows = copy_rows(self.document.data.get(name) or [])
        rows.append(empty_row(structure))
        self.commit_rows(name, rows)
        return len(rows) - 1

    def update_cell(self, name: str, row_idx: int, field_name: str, value: str) -> bool:
        """
        Set one cell, tagged with the field's live type. Missing keys for other
        current fields are filled with empty values; stale keys are kept.
        Returns True when something was written.
        """
        structure = self._catalog.find_structure(name)
        if structure is None:
            logger.warning(f"Cannot edit, unknown structure {name!r}")
            return False
        field = structure.get_field(field_name)
        if field is None:
            logger.warning(f"Cannot edit, {name!r} has no field {field_name!r}")
            return False
        stored = self.document.data.get(name)
        if stored is None or not 0 <= row_idx < len(stored):
            logger.warning(f"Cannot edit, {name!r} has no row {row_idx}")
            return False

        rows = copy_rows(stored)
        row = rows[row_idx]
        for f in structure.fields:
            if f.name not in row:
                row[f.name] = FieldValue("", f.field_type)
        row[field.name] = FieldValue("" if value is None else str(value), field.field_type)
        return self.commit_rows(name, rows)

    def remove_row(self, name: str, row_idx: int) -> bool:
        stored = self.document.data.get(name)
        if stored is None or not 0 <= row_idx < len(stored):
            return False
        rows = copy_rows(stored)
        rows.pop(row_idx)
        return self.commit_rows(name, rows)

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..domain.models import Field, FieldType, Row, Structure
from ..errors import EditorError, StructDeskError
from .catalog_service import CatalogService
from .exchange import ExchangeEngine
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class LookupLayer:
    """
    Resolves structure names and hydrates rows on first selection.

    A structure without a record-store entry is loaded from its CSV sidecar;
    when there is none (or it cannot be read) an empty list is registered and
    persisted right away, so later selections are plain map lookups.
    """

    def __init__(self, catalog: CatalogService, store: RecordStore, exchange: ExchangeEngine) -> None:
        self._catalog = catalog
        self._store = store
        self._exchange = exchange

    def resolve(self, name: str) -> Optional[Structure]:
        return self._catalog.find_structure(name)

    def select(self, name: str) -> Optional[List[Row]]:
        """Rows for the selected structure, hydrating if needed. None for an unknown structure."""
        structure = self.resolve(name)
        if structure is None:
            logger.warning(f"Unknown structure selected: {name!r}")
            return None
        rows = self._store.get_rows(name)
        if rows is not None:
            return rows
        return self.hydrate(structure)

    def hydrate(self, structure: Structure) -> List[Row]:
        try:
            count = self._exchange.load_from_csv(structure)
            logger.info(f"Loaded {count} rows for {structure.name!r} from its CSV sidecar")
        except FileNotFoundError:
            logger.info(f"No CSV sidecar for {structure.name!r}, starting with no rows")
            self._store.register_empty(structure.name)
        except StructDeskError as e:
            logger.warning(f"CSV sidecar for {structure.name!r} unreadable, starting with no rows: {e}")
            self._store.register_empty(structure.name)
        return self._store.get_rows(structure.name) or []


class EditorState(Enum):
    CLOSED = "closed"
    EDITING = "editing"


class EditorMode(Enum):
    NEW = "new"
    EXISTING = "existing"


@dataclass
class EditorOutcome:
    structure: Structure
    is_new: bool
    catalog_saved: bool


class StructureEditorSession:
    """
    Closed -> Editing(new|existing) -> Saved/Cancelled -> Closed.

    Save upserts the draft into its target subcategory and persists the
    catalog; only a brand-new structure gets its record-store entry
    (re)initialized to an empty list.
    """

    def __init__(self, catalog: CatalogService, store: RecordStore) -> None:
        self._catalog = catalog
        self._store = store
        self.state = EditorState.CLOSED
        self.mode: Optional[EditorMode] = None
        self.draft = Structure()
        self.category_name: Optional[str] = None
        self.subcategory_name: Optional[str] = None
        self.original_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.state == EditorState.EDITING

    def open_new(self, category_name: str, subcategory_name: str) -> None:
        self._open(EditorMode.NEW, category_name, subcategory_name, Structure())

    def open_existing(self, category_name: str, subcategory_name: str, structure_name: str) -> bool:
        subcategory = self._catalog.find_subcategory(category_name, subcategory_name)
        idx = subcategory.find(structure_name) if subcategory is not None else None
        if idx is None:
            return False
        self._open(EditorMode.EXISTING, category_name, subcategory_name, subcategory.structures[idx].copy())
        self.original_name = structure_name
        return True

    def _open(self, mode: EditorMode, category_name: str, subcategory_name: str, draft: Structure) -> None:
        self.state = EditorState.EDITING
        self.mode = mode
        self.draft = draft
        self.category_name = category_name
        self.subcategory_name = subcategory_name
        self.original_name = None

    # --- Draft edits ---

    def set_name(self, name: str) -> None:
        self.draft.name = name

    def add_field(self, name: str = "", field_type: FieldType = FieldType.TEXT) -> Field:
        f = Field(name=name, field_type=field_type)
        self.draft.fields.append(f)
        return f

    def rename_field(self, index: int, name: str) -> bool:
        if not 0 <= index < len(self.draft.fields):
            return False
        self.draft.fields[index].name = name
        return True

    def set_field_type(self, index: int, field_type: FieldType) -> bool:
        if not 0 <= index < len(self.draft.fields):
            return False
        self.draft.fields[index].field_type = field_type
        return True

    def remove_field(self, index: int) -> bool:
        if not 0 <= index < len(self.draft.fields):
            return False
        self.draft.fields.pop(index)
        return True

    # --- Transitions ---

    def save(self) -> EditorOutcome:
        if not self.is_open:
            raise EditorError("Structure editor is not open")
        name = self.draft.name
        if not name:
            raise EditorError("Structure name is required")
        if not self.category_name or not self.subcategory_name:
            raise EditorError("No category or subcategory selected")
        if self._catalog.find_category(self.category_name) is None:
            raise EditorError(f"Category not found: {self.category_name}")
        if self._catalog.find_subcategory(self.category_name, self.subcategory_name) is None:
            raise EditorError(f"SubCategory not found: {self.subcategory_name}")

        if name != self.original_name and self._catalog.find_structure(name) is not None:
            raise EditorError(f"Structure name already exists: {name}")

        is_new = self.mode == EditorMode.NEW
        self._catalog.upsert_structure(
            self.category_name, self.subcategory_name, self.draft, replace_name=self.original_name
        )
        if is_new:
            self._store.register_empty(name)
        catalog_saved = self._catalog.save()
        saved = self.draft.copy()
        logger.info(f"Structure {name!r} saved ({'new' if is_new else 'updated'})")
        self._close()
        return EditorOutcome(structure=saved, is_new=is_new, catalog_saved=catalog_saved)

    def cancel(self) -> None:
        self._close()

    def _close(self) -> None:
        self.state = EditorState.CLOSED
        self.mode = None
        self.draft = Structure()
        self.category_name = None
        self.subcategory_name = None
        self.original_name = None

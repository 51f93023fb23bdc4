from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from .. import config
from ..domain.models import Category, Structure, SubCategory, catalog_from_json, catalog_to_json
from ..errors import DocumentParseError, StorageIOError
from ..project_paths import catalog_path
from .repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Schema Catalog: Category -> SubCategory -> Structure -> Field.

    Mutations are direct and positional; only structure-name uniqueness is
    assumed, never enforced. Editing a structure's fields never touches rows
    already stored for it.
    """

    def __init__(self, data_dir: Optional[str] = None, documents: Optional[DocumentRepository] = None) -> None:
        self._path = catalog_path(data_dir)
        self._documents = documents or DocumentRepository()
        self.categories: List[Category] = []

    @property
    def path(self) -> str:
        return self._path

    # --- Persistence ---

    def load(self) -> List[Category]:
        """Restore the catalog; any failure leaves an empty catalog and the file untouched."""
        try:
            self.categories = catalog_from_json(self._documents.read(self._path))
        except FileNotFoundError:
            logger.warning(f"No catalog at {self._path}, starting empty")
            self.categories = []
        except (DocumentParseError, StorageIOError, TypeError, ValueError) as e:
            # Left as-is on disk; the next successful save overwrites it
            logger.error(f"Catalog unreadable, starting empty: {e}")
            self.categories = []
        return self.categories

    def save(self) -> bool:
        """Persist the whole catalog. Failure is logged only."""
        try:
            self._documents.write(self._path, catalog_to_json(self.categories))
        except StorageIOError as e:
            logger.error(f"Failed to save structures: {e}")
            return False
        logger.info(f"Structures saved to {self._path}")
        return True

    # --- Lookup ---

    def iter_structures(self) -> Iterator[Tuple[Category, SubCategory, Structure]]:
        """Depth-first, declaration order."""
        for category in self.categories:
            for subcategory in category.subcategories:
                for structure in subcategory.structures:
                    yield category, subcategory, structure

    def find_structure(self, name: str) -> Optional[Structure]:
        """First Category -> SubCategory -> Structure match, or None."""
        for _category, _subcategory, structure in self.iter_structures():
            if structure.name == name:
                return structure
        return None

    def find_category(self, name: str) -> Optional[Category]:
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def find_subcategory(self, category_name: str, subcategory_name: str) -> Optional[SubCategory]:
        category = self.find_category(category_name)
        if category is None:
            return None
        return category.find_subcategory(subcategory_name)

    # --- Categories ---

    def add_category(self, name: str = config.NEW_CATEGORY_NAME) -> Category:
        category = Category(name=name)
        self.categories.append(category)
        return category

    def rename_category(self, index: int, name: str) -> bool:
        if not 0 <= index < len(self.categories):
            return False
        self.categories[index].name = name
        return True

    def remove_category(self, index: int) -> Optional[Category]:
        if not 0 <= index < len(self.categories):
            return None
        return self.categories.pop(index)

    # --- SubCategories ---

    def add_subcategory(self, category_index: int, name: str = config.NEW_SUBCATEGORY_NAME) -> Optional[SubCategory]:
        if not 0 <= category_index < len(self.categories):
            return None
        subcategory = SubCategory(name=name)
        self.categories[category_index].subcategories.append(subcategory)
        return subcategory

    def rename_subcategory(self, category_index: int, index: int, name: str) -> bool:
        subs = self._subcategories(category_index)
        if subs is None or not 0 <= index < len(subs):
            return False
        subs[index].name = name
        return True

    def remove_subcategory(self, category_index: int, index: int) -> Optional[SubCategory]:
        subs = self._subcategories(category_index)
        if subs is None or not 0 <= index < len(subs):
            return None
        return subs.pop(index)

    def _subcategories(self, category_index: int) -> Optional[List[SubCategory]]:
        if not 0 <= category_index < len(self.categories):
            return None
        return self.categories[category_index].subcategories

    # --- Structures ---

    def upsert_structure(self, category_name: str, subcategory_name: str, structure: Structure,
                         replace_name: Optional[str] = None) -> bool:
        """
        Store `structure` in the named subcategory: replace the entry called
        `replace_name` (defaults to the structure's own name) in place, or
        append. Returns False when the target subcategory does not exist.
        """
        subcategory = self.find_subcategory(category_name, subcategory_name)
        if subcategory is None:
            return False
        idx = subcategory.find(replace_name if replace_name is not None else structure.name)
        if idx is None:
            subcategory.structures.append(structure.copy())
        else:
            subcategory.structures[idx] = structure.copy()
        return True

    def rename_structure(self, old_name: str, new_name: str) -> bool:
        """Rename in the catalog only; stored rows and the sidecar keep the old name."""
        structure = self.find_structure(old_name)
        if structure is None:
            return False
        structure.name = new_name
        return True

    def remove_structure(self, name: str) -> Optional[Structure]:
        """Remove the first match. Stored rows and the sidecar are left in place."""
        for _category, subcategory, structure in self.iter_structures():
            if structure.name == name:
                subcategory.structures.remove(structure)
                return structure
        return None

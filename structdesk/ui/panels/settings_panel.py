from __future__ import annotations
from typing import Optional, Tuple

from PySide6 import QtCore, QtWidgets

from ..controllers.main_controller import MainController
from ..dialogs.structure_editor import StructureEditorDialog
from ..state import ViewState

KIND_ROLE = QtCore.Qt.UserRole + 1
INDEX_ROLE = QtCore.Qt.UserRole + 2  # (category_idx, subcategory_idx or -1)
NAME_ROLE = QtCore.Qt.UserRole + 3


class SettingsPanel(QtWidgets.QWidget):
    """
    Catalog management: categories and subcategories are renamed in place
    (double-click), structures are created and edited through the editor dialog.
    Every change is written to the catalog file immediately.
    """

    def __init__(self, state: ViewState, controller: MainController, parent=None) -> None:
        super().__init__(parent)
        self.state = state
        self.controller = controller
        self._rebuilding = False

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        title = QtWidgets.QLabel("Settings")
        font = title.font()
        font.setPointSize(font.pointSize() + 4)
        font.setBold(True)
        title.setFont(font)
        root.addWidget(title)

        hint = QtWidgets.QLabel("Double-click a category or subcategory to rename it.")
        hint.setStyleSheet("color: gray;")
        root.addWidget(hint)

        self.tree = QtWidgets.QTreeWidget()
        self.tree.setHeaderHidden(True)
        self.tree.setColumnCount(1)
        root.addWidget(self.tree, 1)

        grid = QtWidgets.QGridLayout()
        self.btn_new_category = QtWidgets.QPushButton("➕ New Category")
        self.btn_new_subcategory = QtWidgets.QPushButton("➕ New SubCategory")
        self.btn_new_structure = QtWidgets.QPushButton("➕ New Structure")
        self.btn_edit_structure = QtWidgets.QPushButton("✏ Edit Structure")
        self.btn_delete = QtWidgets.QPushButton("🗑 Delete")
        self.btn_save = QtWidgets.QPushButton("💾 Save")
        grid.addWidget(self.btn_new_category, 0, 0)
        grid.addWidget(self.btn_new_subcategory, 0, 1)
        grid.addWidget(self.btn_new_structure, 0, 2)
        grid.addWidget(self.btn_edit_structure, 1, 0)
        grid.addWidget(self.btn_delete, 1, 1)
        grid.addWidget(self.btn_save, 1, 2)
        root.addLayout(grid)

        self.btn_new_category.clicked.connect(self.controller.add_category)
        self.btn_new_subcategory.clicked.connect(self._on_new_subcategory)
        self.btn_new_structure.clicked.connect(self._on_new_structure)
        self.btn_edit_structure.clicked.connect(self._on_edit_structure)
        self.btn_delete.clicked.connect(self._on_delete)
        self.btn_save.clicked.connect(self.controller.save_catalog)
        self.tree.itemChanged.connect(self._on_item_renamed)
        self.tree.currentItemChanged.connect(lambda *_: self._update_buttons())
        self.tree.itemDoubleClicked.connect(self._on_double_clicked)
        # Renames arrive from inside itemChanged; rebuild once that returns
        self.controller.catalog_changed.connect(lambda: QtCore.QTimer.singleShot(0, self.rebuild))

        self._update_buttons()

    def rebuild(self) -> None:
        current = self._selection_key()
        self._rebuilding = True
        try:
            self.tree.clear()
            for ci, category in enumerate(self.controller.core.catalog_tree()):
                cat_item = self._make_item(category.name, "category", (ci, -1), editable=True)
                self.tree.addTopLevelItem(cat_item)
                for si, sub in enumerate(category.subcategories):
                    sub_item = self._make_item(sub.name, "subcategory", (ci, si), editable=True)
                    cat_item.addChild(sub_item)
                    for structure in sub.structures:
                        label = f"{structure.name}  ({len(structure.fields)} fields)"
                        s_item = self._make_item(label, "structure", (ci, si), editable=False)
                        s_item.setData(0, NAME_ROLE, structure.name)
                        sub_item.addChild(s_item)
                        if current == ("structure", (ci, si), structure.name):
                            self.tree.setCurrentItem(s_item)
                    if current == ("subcategory", (ci, si), None):
                        self.tree.setCurrentItem(sub_item)
                if current == ("category", (ci, -1), None):
                    self.tree.setCurrentItem(cat_item)
            self.tree.expandAll()
        finally:
            self._rebuilding = False
        self._update_buttons()

    @staticmethod
    def _make_item(text: str, kind: str, index: Tuple[int, int], editable: bool) -> QtWidgets.QTreeWidgetItem:
        item = QtWidgets.QTreeWidgetItem([text])
        item.setData(0, KIND_ROLE, kind)
        item.setData(0, INDEX_ROLE, index)
        if editable:
            item.setFlags(item.flags() | QtCore.Qt.ItemIsEditable)
        return item

    def _selection_key(self) -> Optional[Tuple[str, Tuple[int, int], Optional[str]]]:
        item = self.tree.currentItem()
        if item is None:
            return None
        kind = item.data(0, KIND_ROLE)
        name = item.data(0, NAME_ROLE) if kind == "structure" else None
        return kind, tuple(item.data(0, INDEX_ROLE)), name

    def _current(self) -> Tuple[Optional[str], int, int, Optional[str]]:
        item = self.tree.currentItem()
        if item is None:
            return None, -1, -1, None
        ci, si = item.data(0, INDEX_ROLE)
        return item.data(0, KIND_ROLE), int(ci), int(si), item.data(0, NAME_ROLE)

    def _names_for(self, ci: int, si: int) -> Tuple[str, str]:
        category = self.controller.core.catalog_tree()[ci]
        return category.name, category.subcategories[si].name

    def _update_buttons(self) -> None:
        kind, _ci, _si, _name = self._current()
        self.btn_new_subcategory.setEnabled(kind is not None)
        self.btn_new_structure.setEnabled(kind in ("subcategory", "structure"))
        self.btn_edit_structure.setEnabled(kind == "structure")
        self.btn_delete.setEnabled(kind is not None)

    def _on_new_subcategory(self) -> None:
        kind, ci, _si, _name = self._current()
        if kind is not None:
            self.controller.add_subcategory(ci)

    def _on_new_structure(self) -> None:
        kind, ci, si, _name = self._current()
        if kind not in ("subcategory", "structure"):
            return
        category_name, subcategory_name = self._names_for(ci, si)
        if self.controller.open_structure_editor(category_name, subcategory_name):
            self._run_editor()

    def _on_edit_structure(self) -> None:
        kind, ci, si, name = self._current()
        if kind != "structure":
            return
        category_name, subcategory_name = self._names_for(ci, si)
        if self.controller.open_structure_editor(category_name, subcategory_name, name):
            self._run_editor()

    def _on_double_clicked(self, item: QtWidgets.QTreeWidgetItem, _column: int) -> None:
        if item.data(0, KIND_ROLE) == "structure":
            self._on_edit_structure()

    def _on_delete(self) -> None:
        kind, ci, si, name = self._current()
        if kind is None:
            return
        label = name if kind == "structure" else self.tree.currentItem().text(0)
        answer = QtWidgets.QMessageBox.question(self, "Delete", f"Delete {kind} '{label}'?")
        if answer != QtWidgets.QMessageBox.Yes:
            return
        if kind == "category":
            self.controller.remove_category(ci)
        elif kind == "subcategory":
            self.controller.remove_subcategory(ci, si)
        else:
            self.controller.remove_structure(name)

    def _on_item_renamed(self, item: QtWidgets.QTreeWidgetItem, _column: int) -> None:
        if self._rebuilding:
            return
        ci, si = item.data(0, INDEX_ROLE)
        kind = item.data(0, KIND_ROLE)
        text = item.text(0)
        if kind == "category":
            self.controller.rename_category(int(ci), text)
        elif kind == "subcategory":
            self.controller.rename_subcategory(int(ci), int(si), text)

    def _run_editor(self) -> None:
        self.state.flags.show_structure_editor = True
        try:
            StructureEditorDialog(self.controller, self).exec()
        finally:
            self.state.flags.show_structure_editor = False

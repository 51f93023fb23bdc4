from __future__ import annotations

from PySide6 import QtCore, QtWidgets

from ... import config
from ..controllers.main_controller import MainController
from ..state import ViewState

KIND_ROLE = QtCore.Qt.UserRole + 1
NAME_ROLE = QtCore.Qt.UserRole + 2
PARENT_ROLE = QtCore.Qt.UserRole + 3


class SidebarPanel(QtWidgets.QWidget):
    """Category -> SubCategory -> Structure tree plus the settings toggle."""

    settings_toggled = QtCore.Signal()

    def __init__(self, state: ViewState, controller: MainController, parent=None) -> None:
        super().__init__(parent)
        self.state = state
        self.controller = controller
        self._rebuilding = False

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        title = QtWidgets.QLabel("Structures")
        font = title.font()
        font.setBold(True)
        title.setFont(font)
        root.addWidget(title)

        self.tree = QtWidgets.QTreeWidget()
        self.tree.setHeaderHidden(True)
        self.tree.setColumnCount(1)
        root.addWidget(self.tree, 1)

        self.btn_settings = QtWidgets.QPushButton("⚙ Settings")
        self.btn_settings.setCheckable(True)
        root.addWidget(self.btn_settings)

        self.setMaximumWidth(config.SIDEBAR_MAX_WIDTH)

        self.tree.itemClicked.connect(self._on_item_clicked)
        self.tree.itemExpanded.connect(lambda item: self._on_expand_changed(item, True))
        self.tree.itemCollapsed.connect(lambda item: self._on_expand_changed(item, False))
        self.btn_settings.clicked.connect(self.settings_toggled.emit)
        self.controller.catalog_changed.connect(self.rebuild)
        self.controller.selection_changed.connect(self._highlight)

    def rebuild(self) -> None:
        self._rebuilding = True
        try:
            self.tree.clear()
            selected = self.controller.core.selected_structure
            for category in self.controller.core.catalog_tree():
                cat_item = QtWidgets.QTreeWidgetItem([category.name])
                cat_item.setData(0, KIND_ROLE, "category")
                cat_item.setData(0, NAME_ROLE, category.name)
                self.tree.addTopLevelItem(cat_item)
                for sub in category.subcategories:
                    sub_item = QtWidgets.QTreeWidgetItem([sub.name])
                    sub_item.setData(0, KIND_ROLE, "subcategory")
                    sub_item.setData(0, NAME_ROLE, sub.name)
                    sub_item.setData(0, PARENT_ROLE, category.name)
                    cat_item.addChild(sub_item)
                    for structure in sub.structures:
                        s_item = QtWidgets.QTreeWidgetItem([structure.name])
                        s_item.setData(0, KIND_ROLE, "structure")
                        s_item.setData(0, NAME_ROLE, structure.name)
                        sub_item.addChild(s_item)
                        if structure.name == selected:
                            self.tree.setCurrentItem(s_item)
                    sub_item.setExpanded(self.state.is_subcategory_expanded(category.name, sub.name))
                cat_item.setExpanded(self.state.is_category_expanded(category.name))
        finally:
            self._rebuilding = False

    def _on_item_clicked(self, item: QtWidgets.QTreeWidgetItem, _column: int) -> None:
        if item.data(0, KIND_ROLE) != "structure":
            return
        self.controller.select_structure(str(item.data(0, NAME_ROLE)))

    def _on_expand_changed(self, item: QtWidgets.QTreeWidgetItem, expanded: bool) -> None:
        if self._rebuilding:
            return
        kind = item.data(0, KIND_ROLE)
        name = str(item.data(0, NAME_ROLE))
        if kind == "category":
            self.state.set_category_expanded(name, expanded)
        elif kind == "subcategory":
            self.state.set_subcategory_expanded(str(item.data(0, PARENT_ROLE)), name, expanded)

    def _highlight(self, name: str) -> None:
        if not name:
            self.tree.clearSelection()
            return
        for item in self.tree.findItems(name, QtCore.Qt.MatchExactly | QtCore.Qt.MatchRecursive):
            if item.data(0, KIND_ROLE) == "structure":
                self.tree.setCurrentItem(item)
                return

from __future__ import annotations
from typing import List

from PySide6 import QtCore, QtWidgets

from ...domain import values as codec
from ...domain.models import Field, FieldType
from ..controllers.main_controller import MainController
from ..delegates import FIELD_TYPE_ROLE, RAW_VALUE_ROLE, RecordCellDelegate


class RecordsPanel(QtWidgets.QWidget):
    """Rows of the selected structure with export/import/new-row actions."""

    def __init__(self, controller: MainController, parent=None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._fields: List[Field] = []
        self._populating = False

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        bar = QtWidgets.QHBoxLayout()
        self.lbl_title = QtWidgets.QLabel("")
        font = self.lbl_title.font()
        font.setPointSize(font.pointSize() + 4)
        font.setBold(True)
        self.lbl_title.setFont(font)
        self.btn_export = QtWidgets.QPushButton("📥 Export")
        self.btn_import = QtWidgets.QPushButton("📤 Import")
        self.btn_add_row = QtWidgets.QPushButton("➕ New Row")
        bar.addWidget(self.lbl_title, 1)
        bar.addWidget(self.btn_export)
        bar.addWidget(self.btn_import)
        bar.addWidget(self.btn_add_row)
        root.addLayout(bar)

        self.stack = QtWidgets.QStackedWidget()
        self.placeholder = QtWidgets.QLabel("Select a structure from the menu on the left")
        self.placeholder.setAlignment(QtCore.Qt.AlignCenter)
        self.table = QtWidgets.QTableWidget()
        self.table.setAlternatingRowColors(True)
        self.table.setItemDelegate(RecordCellDelegate(self.table))
        self.table.horizontalHeader().setStretchLastSection(False)
        self.stack.addWidget(self.placeholder)
        self.stack.addWidget(self.table)
        root.addWidget(self.stack, 1)

        self.btn_export.clicked.connect(self.controller.export_selected)
        self.btn_import.clicked.connect(self.controller.import_selected)
        self.btn_add_row.clicked.connect(self.controller.add_row)
        self.table.itemChanged.connect(self._on_item_changed)
        # Deferred: the change that triggered a refresh may still be on the stack
        self.controller.rows_changed.connect(lambda: QtCore.QTimer.singleShot(0, self.refresh))

        self.refresh()

    def refresh(self) -> None:
        core = self.controller.core
        structure = core.current_structure()
        has_structure = structure is not None
        for btn in (self.btn_export, self.btn_import, self.btn_add_row):
            btn.setEnabled(has_structure)
        if not has_structure:
            self.lbl_title.setText("")
            self._fields = []
            self.stack.setCurrentWidget(self.placeholder)
            return

        self.lbl_title.setText(structure.name)
        self._fields = list(structure.fields)
        rows = core.current_rows()

        self._populating = True
        try:
            self.table.clear()
            self.table.setColumnCount(len(self._fields) + 1)
            self.table.setRowCount(len(rows))
            self.table.setHorizontalHeaderLabels([f.name for f in self._fields] + [""])
            for r, row in enumerate(rows):
                for c, field in enumerate(self._fields):
                    fv = row.get(field.name)
                    self.table.setItem(r, c, self._make_item(field, fv.value if fv is not None else ""))
                btn = QtWidgets.QPushButton("🗑")
                btn.clicked.connect(lambda _checked=False, idx=r: self.controller.delete_row(idx))
                self.table.setCellWidget(r, len(self._fields), btn)
            self.table.resizeColumnsToContents()
        finally:
            self._populating = False
        self.stack.setCurrentWidget(self.table)

    @staticmethod
    def _make_item(field: Field, raw: str) -> QtWidgets.QTableWidgetItem:
        item = QtWidgets.QTableWidgetItem()
        item.setData(FIELD_TYPE_ROLE, field.field_type.value)
        item.setData(RAW_VALUE_ROLE, raw)
        if field.field_type == FieldType.BOOLEAN:
            item.setFlags((item.flags() | QtCore.Qt.ItemIsUserCheckable) & ~QtCore.Qt.ItemIsEditable)
            item.setCheckState(QtCore.Qt.Checked if codec.bool_for_editor(raw) else QtCore.Qt.Unchecked)
        elif field.field_type == FieldType.NUMBER:
            item.setText(codec.format_number(codec.number_for_editor(raw)))
        else:
            item.setText(raw)
        return item

    def _on_item_changed(self, item: QtWidgets.QTableWidgetItem) -> None:
        if self._populating:
            return
        col = item.column()
        if not 0 <= col < len(self._fields):
            return
        field = self._fields[col]
        if field.field_type == FieldType.BOOLEAN:
            value = codec.format_bool(item.checkState() == QtCore.Qt.Checked)
        else:
            value = item.text()
        if value == item.data(RAW_VALUE_ROLE):
            return
        self.controller.edit_cell(item.row(), field.name, value)

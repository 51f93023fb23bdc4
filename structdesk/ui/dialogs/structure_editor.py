from __future__ import annotations

from typing import Optional

from PySide6 import QtCore, QtWidgets

from ...domain.models import FieldType
from ...services.lookup import EditorMode
from ..controllers.main_controller import MainController


class StructureEditorDialog(QtWidgets.QDialog):
    """Modal editor for one structure draft.

    The draft lives in the core's editor session; this dialog only mirrors it.
    Save goes through the controller so the sidebar and records view refresh.
    A failed save keeps the dialog open with the message shown inline.
    """

    def __init__(self, controller: MainController, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.session = controller.core.editor
        self._closing = False

        new = self.session.mode == EditorMode.NEW
        self.setWindowTitle("New Structure" if new else "Edit Structure")
        self.setModal(True)
        self.setMinimumWidth(460)

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        where = QtWidgets.QLabel(f"{self.session.category_name} / {self.session.subcategory_name}")
        where.setStyleSheet("color: gray;")
        root.addWidget(where)

        form = QtWidgets.QFormLayout()
        self.edit_name = QtWidgets.QLineEdit(self.session.draft.name)
        self.edit_name.textChanged.connect(self.session.set_name)
        form.addRow("Structure name:", self.edit_name)
        root.addLayout(form)

        fields_box = QtWidgets.QGroupBox("Fields")
        self.fields_layout = QtWidgets.QVBoxLayout(fields_box)
        self.fields_layout.setSpacing(4)
        root.addWidget(fields_box, 1)

        self.btn_add_field = QtWidgets.QPushButton("➕ Add Field")
        self.btn_add_field.clicked.connect(self._on_add_field)
        root.addWidget(self.btn_add_field, 0, QtCore.Qt.AlignLeft)

        self.lbl_error = QtWidgets.QLabel("")
        self.lbl_error.setStyleSheet("color: #c0392b;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setVisible(False)
        root.addWidget(self.lbl_error)

        btn_row = QtWidgets.QHBoxLayout()
        btn_row.addStretch(1)
        self.btn_save = QtWidgets.QPushButton("Save")
        self.btn_cancel = QtWidgets.QPushButton("Cancel")
        self.btn_save.setDefault(True)
        btn_row.addWidget(self.btn_save)
        btn_row.addWidget(self.btn_cancel)
        root.addLayout(btn_row)

        self.btn_save.clicked.connect(self._on_save)
        self.btn_cancel.clicked.connect(self.reject)

        self._rebuild_fields()

    def _rebuild_fields(self) -> None:
        while self.fields_layout.count():
            item = self.fields_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.deleteLater()
        if not self.session.draft.fields:
            hint = QtWidgets.QLabel("No fields yet")
            hint.setStyleSheet("color: gray;")
            self.fields_layout.addWidget(hint)
            return
        for idx, field in enumerate(self.session.draft.fields):
            row = QtWidgets.QWidget()
            hl = QtWidgets.QHBoxLayout(row)
            hl.setContentsMargins(0, 0, 0, 0)
            name_edit = QtWidgets.QLineEdit(field.name)
            name_edit.setPlaceholderText("Field name")
            name_edit.textChanged.connect(lambda text, i=idx: self.session.rename_field(i, text))
            type_combo = QtWidgets.QComboBox()
            for ft in FieldType:
                type_combo.addItem(ft.value, ft)
            type_combo.setCurrentIndex(type_combo.findData(field.field_type))
            type_combo.currentIndexChanged.connect(
                lambda _pos, i=idx, combo=type_combo: self.session.set_field_type(i, combo.currentData())
            )
            btn_del = QtWidgets.QPushButton("🗑")
            btn_del.clicked.connect(lambda _checked=False, i=idx: self._on_remove_field(i))
            hl.addWidget(name_edit, 1)
            hl.addWidget(type_combo)
            hl.addWidget(btn_del)
            self.fields_layout.addWidget(row)

    def _on_add_field(self) -> None:
        self.session.add_field()
        self._rebuild_fields()

    def _on_remove_field(self, index: int) -> None:
        if self.session.remove_field(index):
            self._rebuild_fields()

    def _on_save(self) -> None:
        result = self.controller.save_structure()
        # Catalog write failures close the session too; the status bar reports them
        if result.ok or not self.session.is_open:
            self._closing = True
            self.accept()
            return
        self.lbl_error.setText(result.message)
        self.lbl_error.setVisible(True)

    def reject(self) -> None:
        if not self._closing and self.session.is_open:
            self.controller.cancel_structure_edit()
        super().reject()

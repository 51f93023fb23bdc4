from __future__ import annotations

from PySide6 import QtCore, QtWidgets

from .. import config
from ..domain import values as codec
from ..domain.models import FieldType

FIELD_TYPE_ROLE = QtCore.Qt.UserRole + 1
RAW_VALUE_ROLE = QtCore.Qt.UserRole + 2


class RecordCellDelegate(QtWidgets.QStyledItemDelegate):
    """Numeric spin box for Number cells; plain line edit for Text and Date."""

    def createEditor(self, parent: QtWidgets.QWidget, option: QtWidgets.QStyleOptionViewItem, index: QtCore.QModelIndex) -> QtWidgets.QWidget:  # noqa: N802
        if index.data(FIELD_TYPE_ROLE) == FieldType.NUMBER.value:
            spin = QtWidgets.QDoubleSpinBox(parent)
            spin.setRange(config.NUMBER_EDITOR_MIN, config.NUMBER_EDITOR_MAX)
            spin.setDecimals(config.NUMBER_EDITOR_DECIMALS)
            spin.setFrame(False)
            return spin
        return super().createEditor(parent, option, index)

    def setEditorData(self, editor: QtWidgets.QWidget, index: QtCore.QModelIndex) -> None:  # noqa: N802
        if isinstance(editor, QtWidgets.QDoubleSpinBox):
            editor.setValue(codec.number_for_editor(str(index.data(RAW_VALUE_ROLE) or "")))
            return
        super().setEditorData(editor, index)

    def setModelData(self, editor: QtWidgets.QWidget, model: QtCore.QAbstractItemModel, index: QtCore.QModelIndex) -> None:  # noqa: N802
        if isinstance(editor, QtWidgets.QDoubleSpinBox):
            editor.interpretText()
            # Unchanged spin value: keep whatever text is stored, parsable or not
            if codec.format_number(float(editor.value())) == index.data(QtCore.Qt.DisplayRole):
                return
            model.setData(index, codec.text_from_editor(FieldType.NUMBER, float(editor.value())), QtCore.Qt.EditRole)
            return
        super().setModelData(editor, model, index)

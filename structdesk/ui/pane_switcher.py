from __future__ import annotations
from typing import Dict
from PySide6 import QtWidgets


class PaneSwitcher:
    """
    Switches a QStackedWidget between named panes (records view, settings view).

    Usage:
        switcher = PaneSwitcher(stack)
        switcher.register("records", records_panel)
        switcher.switch_to("records")
    """

    def __init__(self, stack: QtWidgets.QStackedWidget) -> None:
        self._stack = stack
        self._panes: Dict[str, QtWidgets.QWidget] = {}

    def register(self, name: str, widget: QtWidgets.QWidget) -> None:
        if self._stack.indexOf(widget) < 0:
            self._stack.addWidget(widget)
        self._panes[name] = widget

    def switch_to(self, name: str) -> bool:
        widget = self._panes.get(name)
        if widget is None:
            return False
        self._stack.setCurrentWidget(widget)
        return True

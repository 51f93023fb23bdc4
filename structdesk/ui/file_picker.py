from __future__ import annotations

import os
from typing import Optional, Sequence

from PySide6 import QtWidgets

from .. import config
from ..services.exchange import FilePicker


def qt_filter_string(filters: Sequence[config.FileFilter]) -> str:
    """[("Excel Files", ["xlsx"])] -> "Excel Files (*.xlsx)" joined with ';;'."""
    parts = []
    for label, extensions in filters:
        patterns = " ".join(f"*.{ext}" for ext in extensions)
        parts.append(f"{label} ({patterns})")
    return ";;".join(parts)


class QtFilePicker(FilePicker):
    """Modal QFileDialog prompts; an empty selection is reported as None."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, start_dir: str = "") -> None:
        self._parent = parent
        self._start_dir = start_dir

    def pick_open_path(self, filters: Sequence[config.FileFilter]) -> Optional[str]:
        path, _selected = QtWidgets.QFileDialog.getOpenFileName(
            self._parent, "Import", self._start_dir, qt_filter_string(filters)
        )
        return self._remember(path)

    def pick_save_path(self, filters: Sequence[config.FileFilter], default_name: str) -> Optional[str]:
        start = os.path.join(self._start_dir, default_name) if self._start_dir else default_name
        path, _selected = QtWidgets.QFileDialog.getSaveFileName(
            self._parent, "Export", start, qt_filter_string(filters)
        )
        return self._remember(path)

    def _remember(self, path: str) -> Optional[str]:
        path = (path or "").strip()
        if not path:
            return None
        self._start_dir = os.path.dirname(path)
        return path

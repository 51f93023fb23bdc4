from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from .. import config
from ..services.core import CoreService
from .controllers.main_controller import MainController
from .file_picker import QtFilePicker
from .pane_switcher import PaneSwitcher
from .panels.records_panel import RecordsPanel
from .panels.settings_panel import SettingsPanel
from .panels.sidebar_panel import SidebarPanel
from .state import ViewState


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, core: CoreService) -> None:
        super().__init__()
        self.setWindowTitle(config.WINDOW_TITLE)
        self.resize(config.WINDOW_WIDTH, config.WINDOW_HEIGHT)

        self.state = ViewState()
        self.controller = MainController(core, QtFilePicker(self))

        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self) -> None:
        self.sidebar = SidebarPanel(self.state, self.controller)
        self.records = RecordsPanel(self.controller)
        self.settings = SettingsPanel(self.state, self.controller)

        self.stack = QtWidgets.QStackedWidget()
        self.pane_switcher = PaneSwitcher(self.stack)
        self.pane_switcher.register("records", self.records)
        self.pane_switcher.register("settings", self.settings)
        self.pane_switcher.switch_to("records")

        self.splitter = QtWidgets.QSplitter(QtCore.Qt.Horizontal)
        self.splitter.addWidget(self.sidebar)
        self.splitter.addWidget(self.stack)
        self.splitter.setStretchFactor(0, 0)
        self.splitter.setStretchFactor(1, 1)

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.addWidget(self.splitter)
        self.setCentralWidget(central)

        self.status_label = QtWidgets.QLabel("")
        self.statusBar().addWidget(self.status_label, 1)

        self.save_shortcut = QtGui.QShortcut(QtGui.QKeySequence.Save, self)

    def _connect_signals(self) -> None:
        self.sidebar.settings_toggled.connect(self._toggle_settings)
        self.controller.selection_changed.connect(self._on_selection_changed)
        self.controller.status_changed.connect(self._on_status)
        self.save_shortcut.activated.connect(self.controller.save_backup)

    def start(self) -> None:
        self.controller.start()

    def _toggle_settings(self) -> None:
        flags = self.state.flags
        flags.show_settings_panel = not flags.show_settings_panel
        self.sidebar.btn_settings.setChecked(flags.show_settings_panel)
        self.pane_switcher.switch_to("settings" if flags.show_settings_panel else "records")

    def _on_selection_changed(self, name: str) -> None:
        # Picking a structure always brings the records view back
        if name and self.state.flags.show_settings_panel:
            self._toggle_settings()

    def _on_status(self, ok: bool, message: str) -> None:
        self.state.status_text = message
        self.status_label.setStyleSheet("" if ok else "color: #c0392b;")
        self.status_label.setText(message)

from __future__ import annotations

import logging
import sys

from . import config

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%H:%M:%S'
)


def run_qt() -> int:
    from PySide6 import QtWidgets  # type: ignore
    from .services.core import CoreService
    from .ui.main_window import MainWindow

    app = QtWidgets.QApplication(sys.argv)

    win = MainWindow(CoreService())
    win.start()
    win.show()

    rc = app.exec()
    return int(rc)


def main() -> int:
    try:
        import PySide6  # noqa: F401
    except Exception as exc:
        raise RuntimeError("PySide6 is required to run StructDesk.") from exc
    return run_qt()


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from PySide6.QtCore import QtMsgType, qInstallMessageHandler
from PySide6.QtWidgets import QApplication, QMessageBox

from intake.bootstrap.startup import initialize_database
from intake.config import LOG_DIR, settings
from intake.container import build_container
from intake.ui.main_window import MainWindow


def _setup_logging() -> Path:
    log_path = LOG_DIR / "intake.log"
    handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)
    return log_path


def _install_exception_hook(log_path: Path) -> None:
    def _handle_exception(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).error("Unhandled exception", exc_info=(exc_type, exc, tb))
        if QApplication.instance() is not None:
            QMessageBox.critical(
                None,
                "Error",
                f"An unexpected error occurred.\nLog: {log_path}",
            )
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _handle_exception


def _install_qt_message_handler() -> None:
    def _handle_qt_message(msg_type: QtMsgType, _context, message: str) -> None:
        logger = logging.getLogger("qt")
        if msg_type in (QtMsgType.QtCriticalMsg, QtMsgType.QtFatalMsg):
            logger.error("Qt: %s", message)
        elif msg_type == QtMsgType.QtWarningMsg:
            logger.warning("Qt: %s", message)
        else:
            logger.info("Qt: %s", message)

    qInstallMessageHandler(_handle_qt_message)


def main() -> int:
    log_path = _setup_logging()
    _install_exception_hook(log_path)
    _install_qt_message_handler()
    app = QApplication(sys.argv)
    app.setApplicationName("Patient intake")

    container = build_container(settings)
    if not initialize_database(container.engine):
        return 1

    window = MainWindow(container=container)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import logging

from PySide6.QtWidgets import QLabel, QMessageBox, QWidget

STATUS_LEVELS = ("success", "warning", "error", "info")


def _refresh_status_style(label: QLabel) -> None:
    style = label.style()
    style.unpolish(label)
    style.polish(label)
    label.update()


def set_status(label: QLabel, message: str, level: str = "info") -> None:
    if not message:
        clear_status(label)
        return
    normalized_level = level if level in STATUS_LEVELS else "info"
    label.setText(message)
    label.setObjectName("statusLabel")
    label.setProperty("statusLevel", normalized_level)
    label.setWordWrap(True)
    _refresh_status_style(label)


def clear_status(label: QLabel) -> None:
    label.clear()
    label.setObjectName("statusLabel")
    label.setProperty("statusLevel", "")
    _refresh_status_style(label)


def show_message(parent: QWidget | None, title: str, message: str, level: str = "info") -> None:
    logger = logging.getLogger(__name__)
    if level == "error":
        logger.error("%s: %s", title, message)
    elif level == "warning":
        logger.warning("%s: %s", title, message)
    else:
        logger.info("%s: %s", title, message)
    icon_map = {
        "success": QMessageBox.Icon.Information,
        "warning": QMessageBox.Icon.Warning,
        "error": QMessageBox.Icon.Critical,
        "info": QMessageBox.Icon.Information,
    }
    box = QMessageBox(parent)
    box.setWindowTitle(title)
    box.setText(message)
    box.setIcon(icon_map.get(level, QMessageBox.Icon.Information))
    box.exec()


def show_error(parent: QWidget | None, message: str, title: str = "Error") -> None:
    show_message(parent, title, message, level="error")


def show_warning(parent: QWidget | None, message: str, title: str = "Warning") -> None:
    show_message(parent, title, message, level="warning")


def show_info(parent: QWidget | None, message: str, title: str = "Information") -> None:
    show_message(parent, title, message, level="info")


def confirm(parent: QWidget | None, title: str, message: str) -> bool:
    answer = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        QMessageBox.StandardButton.No,
    )
    return answer == QMessageBox.StandardButton.Yes

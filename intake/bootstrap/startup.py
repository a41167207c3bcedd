from __future__ import annotations

import logging

from PySide6.QtWidgets import QMessageBox
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from intake.infrastructure.db.models_sqlalchemy import Base


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def initialize_database(engine: Engine) -> bool:
    try:
        create_schema(engine)
    except SQLAlchemyError as exc:
        logging.getLogger(__name__).exception("Database initialization failed")
        QMessageBox.critical(
            None,
            "Error",
            f"The database could not be opened. Please check the database connection.\n{exc}",
        )
        return False
    return True

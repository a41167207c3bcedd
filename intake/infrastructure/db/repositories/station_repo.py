from __future__ import annotations

import logging
from typing import cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from intake.application.dto.station_dto import StationRecord
from intake.application.errors import StorageError, StorageOperation
from intake.infrastructure.db.models_sqlalchemy import Station
from intake.infrastructure.db.session import SessionFactory


class StationRepository:
    """Read-only access to the ``station`` table."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    def find_all(self) -> list[StationRecord]:
        stmt = select(Station).order_by(Station.name, Station.room_number)
        try:
            with self.session_factory() as session:
                return [
                    StationRecord(
                        room_number=cast(int, row.room_number),
                        name=cast(str, row.name),
                        max_beds=cast(int, row.max_beds or 0),
                    )
                    for row in session.execute(stmt).scalars()
                ]
        except SQLAlchemyError as exc:
            logging.getLogger(__name__).exception("Loading stations failed")
            raise StorageError(StorageOperation.LOAD_STATIONS) from exc

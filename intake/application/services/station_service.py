from __future__ import annotations

import logging
import threading

from intake.application.dto.station_dto import StationRecord
from intake.infrastructure.db.repositories.station_repo import StationRepository


class StationService:
    """Session-wide station catalog, loaded on first use.

    The cache is filled from background tasks, so access goes through a lock.
    ``refresh()`` drops it; the next read reloads from the repository.
    """

    def __init__(self, station_repo: StationRepository) -> None:
        self.station_repo = station_repo
        self._lock = threading.Lock()
        self._stations: list[StationRecord] | None = None

    def _load(self) -> list[StationRecord]:
        with self._lock:
            if self._stations is None:
                self._stations = self.station_repo.find_all()
                logging.getLogger(__name__).info("Loaded %d stations", len(self._stations))
            return self._stations

    def refresh(self) -> None:
        with self._lock:
            self._stations = None

    def list_stations(self) -> list[StationRecord]:
        return list(self._load())

    def selectable_stations(self) -> list[StationRecord]:
        return [station for station in self._load() if not station.is_test]

    def get_station_map(self) -> dict[int, str]:
        return {station.id: station.name for station in self._load()}

    def known_station_ids(self) -> set[int]:
        return {station.id for station in self._load()}

    def station_name(self, station_id: int | None) -> str:
        if station_id is None:
            return ""
        return self.get_station_map().get(station_id, "")

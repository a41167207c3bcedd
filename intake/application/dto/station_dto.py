from __future__ import annotations

from pydantic import BaseModel, ConfigDict

TEST_STATION_NAME = "test"


class StationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    room_number: int
    name: str
    max_beds: int = 0

    @property
    def id(self) -> int:
        return self.room_number

    @property
    def is_test(self) -> bool:
        return self.name.strip().lower() == TEST_STATION_NAME

    def __str__(self) -> str:
        return self.name

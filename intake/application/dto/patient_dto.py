from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class PatientRecord(BaseModel):
    """One intake record; ``id == 0`` means not yet persisted."""

    id: int = 0
    first_name: str | None = None
    last_name: str | None = None
    birth_date: date | None = None
    svnr: str | None = None
    phone: str | None = None
    address: str | None = None
    reason: str | None = None
    station_id: int | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id > 0

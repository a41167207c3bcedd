from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from intake.application.services.patient_service import PatientService
from intake.application.services.station_service import StationService
from intake.config import Settings, settings
from intake.infrastructure.db.engine import get_engine
from intake.infrastructure.db.repositories.patient_repo import PatientRepository
from intake.infrastructure.db.repositories.station_repo import StationRepository
from intake.infrastructure.db.session import SessionFactory, make_session_factory


@dataclass
class Container:
    engine: Engine
    session_factory: SessionFactory
    patient_repo: PatientRepository
    station_repo: StationRepository

    station_service: StationService
    patient_service: PatientService


def build_container(config: Settings = settings, engine: Engine | None = None) -> Container:
    engine = engine or get_engine(config)
    session_factory = make_session_factory(engine)
    patient_repo = PatientRepository(session_factory)
    station_repo = StationRepository(session_factory)

    station_service = StationService(station_repo)
    patient_service = PatientService(patient_repo=patient_repo, station_service=station_service)

    return Container(
        engine=engine,
        session_factory=session_factory,
        patient_repo=patient_repo,
        station_repo=station_repo,
        station_service=station_service,
        patient_service=patient_service,
    )

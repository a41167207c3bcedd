from __future__ import annotations

from sqlalchemy import Column, Date, ForeignKey, Integer, MetaData, String, Text
from sqlalchemy.orm import DeclarativeBase

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=naming_convention)


class Base(DeclarativeBase):
    metadata = metadata


class Station(Base):
    __tablename__ = "station"

    # The room number doubles as the station identity.
    room_number = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    max_beds = Column(Integer, nullable=False, default=0)


class Patient(Base):
    __tablename__ = "patient"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String)
    last_name = Column(String)
    birth_date = Column(Date)
    svnr = Column(String(10))
    phone = Column(String)
    address = Column(Text)
    reason = Column(Text)
    station_id = Column(Integer, ForeignKey("station.room_number"), nullable=True)

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import NullPool

from intake.config import Settings, settings


def _unicode_lower(value: object) -> object:
    if value is None:
        return None
    return str(value).lower()


def _set_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
    finally:
        cursor.close()
    # SQLite's built-in lower() only folds ASCII letters.
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def build_database_url(database_url: str, username: str | None = None, password: str | None = None) -> URL:
    url = make_url(database_url)
    if username:
        url = url.set(username=username, password=password)
    return url


def create_db_engine(
    database_url: str,
    *,
    username: str | None = None,
    password: str | None = None,
    echo: bool = False,
) -> Engine:
    url = build_database_url(database_url, username, password)
    is_sqlite = url.get_backend_name() == "sqlite"
    # NullPool: each session checks out a fresh connection and closes it on release.
    engine = create_engine(
        url,
        echo=echo,
        future=True,
        poolclass=NullPool,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )
    if is_sqlite:
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def get_engine(config: Settings = settings) -> Engine:
    return create_db_engine(
        config.database_url,
        username=config.database_user,
        password=config.database_password,
        echo=config.echo_sql,
    )

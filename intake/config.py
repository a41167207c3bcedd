import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "patient-intake"
APP_AUTHOR = "patient-intake"


def _env_optional(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _resolve_data_dir() -> Path:
    env_dir = os.getenv("INTAKE_DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path(user_data_dir(APP_NAME, APP_AUTHOR))


DATA_DIR = _resolve_data_dir()
LOG_DIR = DATA_DIR / "logs"
DB_FILE = Path(os.getenv("INTAKE_DB_FILE") or (DATA_DIR / "intake.db"))

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOG_DIR.mkdir(parents=True, exist_ok=True)
DB_FILE.parent.mkdir(parents=True, exist_ok=True)


def default_database_url() -> str:
    # SQLite URL uses forward slashes; as_posix() keeps it cross-platform.
    return f"sqlite:///{DB_FILE.as_posix()}"


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", default_database_url())
    database_user: str | None = _env_optional("INTAKE_DB_USER")
    database_password: str | None = _env_optional("INTAKE_DB_PASSWORD")
    echo_sql: bool = os.getenv("SQL_ECHO", "0") == "1"


settings = Settings()

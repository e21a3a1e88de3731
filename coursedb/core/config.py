"""
Configuration helpers for coursedb.

Exposes a Settings object that reads environment variables (data directory,
document file names, logging knobs) so that stores and services do not fetch
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    users_file: str
    courses_file: str
    log_level: str
    log_json: bool

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_file

    @property
    def courses_path(self) -> Path:
        return self.data_dir / self.courses_file


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("COURSEDB_ENV") or "dev").lower(),
        data_dir=Path(os.getenv("COURSEDB_DATA_DIR") or "data"),
        users_file=os.getenv("COURSEDB_USERS_FILE") or "users.json",
        courses_file=os.getenv("COURSEDB_COURSES_FILE") or "courses.json",
        log_level=(os.getenv("COURSEDB_LOG_LEVEL") or "INFO").upper(),
        log_json=_bool(os.getenv("COURSEDB_LOG_JSON"), False),
    )

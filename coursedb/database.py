"""Factory wiring one UserStore and one CourseStore from Settings."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from coursedb.core.config import Settings, get_settings
from coursedb.core.logging import configure_logging
from coursedb.repositories.course_store import CourseStore
from coursedb.repositories.user_store import UserStore


@dataclass
class Database:
    users: UserStore
    courses: CourseStore

    def reload(self) -> None:
        """Re-read both documents (users first, courses reference them)."""
        self.users.load()
        self.courses.load()


def open_database(settings: Settings | None = None, *, data_dir: Path | str | None = None) -> Database:
    """Build the stores for one logical database; ``data_dir`` overrides the configured folder."""
    settings = settings or get_settings()
    configure_logging(settings)
    if data_dir is not None:
        base = Path(data_dir)
        users_path, courses_path = base / settings.users_file, base / settings.courses_file
    else:
        users_path, courses_path = settings.users_path, settings.courses_path
    users = UserStore(users_path)
    return Database(users=users, courses=CourseStore(courses_path, users))

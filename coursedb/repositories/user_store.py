"""In-memory user map backed by the users JSON document."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional, TypeVar

from coursedb.core.errors import RecordDecodeError
from coursedb.core.logging import get_logger
from coursedb.domain.users import Instructor, Student, User
from coursedb.repositories import json_storage
from coursedb.repositories.codec import user_from_record, user_to_record

logger = get_logger(__name__)

U = TypeVar("U", bound=User)


class UserStore:
    """Owns ``user_id -> User``; every mutation rewrites the whole document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._users: dict[int, User] = {}
        self._lock = threading.RLock()
        self.load()

    # -------------------------- load / save --------------------------
    def load(self) -> None:
        """Replace in-memory state with the persisted document.

        A record that cannot be decoded is logged and skipped; the rest still load.
        """
        with self._lock:
            records = json_storage.load_records(self.path)
            users: dict[int, User] = {}
            for index, record in enumerate(records):
                try:
                    user = user_from_record(record)
                except RecordDecodeError as exc:
                    logger.warning("user_record_skipped", path=str(self.path), index=index, error=str(exc))
                    continue
                users[user.user_id] = user
            self._users = users
            logger.debug("users_loaded", path=str(self.path), count=len(users))

    def _persist(self) -> None:
        json_storage.save_records(self.path, [user_to_record(user) for user in self._users.values()])

    # -------------------------- lookups --------------------------
    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def _typed(self, user_id: int, kind: type[U]) -> Optional[U]:
        user = self.get_by_id(user_id)
        return user if isinstance(user, kind) else None

    def get_student_by_id(self, user_id: int) -> Optional[Student]:
        return self._typed(user_id, Student)

    def get_instructor_by_id(self, user_id: int) -> Optional[Instructor]:
        return self._typed(user_id, Instructor)

    def get_by_email(self, email: str) -> Optional[User]:
        target = (email or "").strip().lower()
        with self._lock:
            for user in self._users.values():
                if user.email.lower() == target:
                    return user
        return None

    def exists_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def get_all(self) -> tuple[User, ...]:
        with self._lock:
            return tuple(self._users.values())

    def next_user_id(self) -> int:
        with self._lock:
            return max(self._users, default=0) + 1

    # -------------------------- mutations --------------------------
    def save_or_update(self, user: User) -> User:
        with self._lock:
            self._users[user.user_id] = user
            self._persist()
            return user

    def _update(self, user_id: int, kind: type[U], mutate: Callable[[U], bool]) -> tuple[Optional[U], bool]:
        with self._lock:
            user = self._typed(user_id, kind)
            if user is None:
                return None, False
            changed = bool(mutate(user))
            if changed:
                self._persist()
            return user, changed

    def update_student(self, student_id: int, mutate: Callable[[Student], bool]) -> tuple[Optional[Student], bool]:
        """Apply ``mutate`` to the student under the store lock; persist if it reports a change.

        Returns ``(student, changed)``; ``(None, False)`` when no student has that id.
        """
        return self._update(student_id, Student, mutate)

    def update_instructor(self, instructor_id: int, mutate: Callable[[Instructor], bool]) -> tuple[Optional[Instructor], bool]:
        return self._update(instructor_id, Instructor, mutate)

"""User aggregates: Student, Instructor and Admin."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from coursedb.core.security import hash_password

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.com")


class Role(str, Enum):
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        """Case-insensitive lookup; raises ValueError for unknown roles."""
        if not isinstance(value, str):
            raise ValueError(f"Unknown role: {value!r}")
        normalized = value.strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None


@dataclass
class QuizAttempt:
    lesson_id: str
    timestamp: int
    score: int
    correct_count: int
    total_questions: int


@dataclass
class Certificate:
    certificate_id: str
    student_id: int
    course_id: str
    issue_date: str


def _require_text(name: str, value: str | None) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValueError(f"{name} cannot be empty.")
    return text


def _unique(values) -> list:
    seen = set()
    out = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


@dataclass
class User:
    """Common identity fields; ``role`` is fixed by the concrete class."""

    ROLE: ClassVar[Role]

    user_id: int
    username: str
    email: str
    password_hash: str

    def __post_init__(self) -> None:
        if isinstance(self.user_id, bool) or not isinstance(self.user_id, int) or self.user_id <= 0:
            raise ValueError("userId must be a positive integer.")
        self.username = _require_text("username", self.username)
        email = _require_text("email", self.email)
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValueError(f"Invalid email format: {email!r}")
        self.email = email
        self.password_hash = self.password_hash or ""

    def __setattr__(self, name: str, value) -> None:
        if name == "user_id" and "user_id" in self.__dict__:
            raise AttributeError("user_id is immutable")
        super().__setattr__(name, value)

    @property
    def role(self) -> Role:
        return self.ROLE

    @classmethod
    def with_password(cls, user_id: int, username: str, email: str, password: str, **extra):
        """Build a user from a plain-text password, hashing it on construction."""
        return cls(user_id, username, email, hash_password(_require_text("password", password)), **extra)


@dataclass
class Student(User):
    ROLE: ClassVar[Role] = Role.STUDENT

    enrolled_course_ids: list[str] = field(default_factory=list)
    completed_lesson_ids: list[str] = field(default_factory=list)
    quiz_attempts: dict[str, list[QuizAttempt]] = field(default_factory=dict)
    certificates: list[Certificate] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.enrolled_course_ids = _unique(self.enrolled_course_ids)
        self.completed_lesson_ids = _unique(self.completed_lesson_ids)

    def is_enrolled(self, course_id: str) -> bool:
        return course_id in self.enrolled_course_ids

    def enroll_in_course(self, course_id: str) -> bool:
        if self.is_enrolled(course_id):
            return False
        self.enrolled_course_ids.append(course_id)
        return True

    def drop_course(self, course_id: str) -> bool:
        if not self.is_enrolled(course_id):
            return False
        self.enrolled_course_ids.remove(course_id)
        return True

    def has_completed_lesson(self, lesson_id: str) -> bool:
        return lesson_id in self.completed_lesson_ids

    def mark_lesson_completed(self, lesson_id: str) -> bool:
        if self.has_completed_lesson(lesson_id):
            return False
        self.completed_lesson_ids.append(lesson_id)
        return True

    def add_quiz_attempt(self, attempt: QuizAttempt) -> None:
        self.quiz_attempts.setdefault(attempt.lesson_id, []).append(attempt)

    def attempts_for(self, lesson_id: str) -> list[QuizAttempt]:
        return list(self.quiz_attempts.get(lesson_id, []))

    def has_passed_lesson(self, lesson_id: str, passing_percentage: int) -> bool:
        return any(attempt.score >= passing_percentage for attempt in self.attempts_for(lesson_id))

    def add_certificate(self, certificate: Certificate) -> None:
        self.certificates.append(certificate)

    def certificate_for(self, course_id: str) -> Optional[Certificate]:
        for certificate in self.certificates:
            if certificate.course_id == course_id:
                return certificate
        return None


@dataclass
class Instructor(User):
    ROLE: ClassVar[Role] = Role.INSTRUCTOR

    # Advisory back-reference: Course.instructor_id decides ownership.
    created_courses: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.created_courses = _unique(self.created_courses)

    def add_created_course(self, course_id: int) -> bool:
        if course_id in self.created_courses:
            return False
        self.created_courses.append(course_id)
        return True

    def remove_created_course(self, course_id: int) -> bool:
        if course_id not in self.created_courses:
            return False
        self.created_courses.remove(course_id)
        return True


@dataclass
class Admin(User):
    ROLE: ClassVar[Role] = Role.ADMIN


USER_TYPES: dict[Role, type[User]] = {
    Role.STUDENT: Student,
    Role.INSTRUCTOR: Instructor,
    Role.ADMIN: Admin,
}

"""Best-effort maintenance of the course ids denormalized onto users.

Every function here reports what happened instead of raising: a malformed id
or a missing user leaves the back-reference stale and the caller's primary
operation goes ahead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from coursedb.core.logging import get_logger
from coursedb.domain.identifiers import parse_int_id
from coursedb.repositories.user_store import UserStore

logger = get_logger(__name__)

MALFORMED_ID = "malformed_id"
USER_NOT_FOUND = "user_not_found"
UNCHANGED = "unchanged"


@dataclass(frozen=True)
class BackrefOutcome:
    """Result of one secondary (user-side) update."""

    applied: bool
    reason: Optional[str] = None


APPLIED = BackrefOutcome(True)


def _outcome(action: str, user, changed: bool, **context) -> BackrefOutcome:
    if user is None:
        return _skipped(action, USER_NOT_FOUND, **context)
    if not changed:
        return BackrefOutcome(False, UNCHANGED)
    return APPLIED


def _skipped(action: str, reason: str, **context) -> BackrefOutcome:
    logger.info("backref_skipped", action=action, reason=reason, **context)
    return BackrefOutcome(False, reason)


def link_instructor_course(users: UserStore, instructor_id: str, course_id: str) -> BackrefOutcome:
    """Append the numeric course id to the instructor's created-course list."""
    user_id = parse_int_id(instructor_id)
    numeric_course = parse_int_id(course_id)
    if user_id is None or numeric_course is None:
        return _skipped("link_instructor", MALFORMED_ID, instructor_id=instructor_id, course_id=course_id)
    user, changed = users.update_instructor(user_id, lambda inst: inst.add_created_course(numeric_course))
    return _outcome("link_instructor", user, changed, instructor_id=instructor_id, course_id=course_id)


def unlink_instructor_course(users: UserStore, instructor_id: str, course_id: str) -> BackrefOutcome:
    user_id = parse_int_id(instructor_id)
    numeric_course = parse_int_id(course_id)
    if user_id is None or numeric_course is None:
        return _skipped("unlink_instructor", MALFORMED_ID, instructor_id=instructor_id, course_id=course_id)
    user, changed = users.update_instructor(user_id, lambda inst: inst.remove_created_course(numeric_course))
    return _outcome("unlink_instructor", user, changed, instructor_id=instructor_id, course_id=course_id)


def link_student_course(users: UserStore, student_id: str, course_id: str) -> BackrefOutcome:
    """Add the (string) course id to the student's enrolled list."""
    user_id = parse_int_id(student_id)
    if user_id is None:
        return _skipped("link_student", MALFORMED_ID, student_id=student_id, course_id=course_id)
    user, changed = users.update_student(user_id, lambda student: student.enroll_in_course(course_id))
    return _outcome("link_student", user, changed, student_id=student_id, course_id=course_id)


def unlink_student_course(users: UserStore, student_id: str, course_id: str) -> BackrefOutcome:
    user_id = parse_int_id(student_id)
    if user_id is None:
        return _skipped("unlink_student", MALFORMED_ID, student_id=student_id, course_id=course_id)
    user, changed = users.update_student(user_id, lambda student: student.drop_course(course_id))
    return _outcome("unlink_student", user, changed, student_id=student_id, course_id=course_id)

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from coursedb.core.errors import StudentNotFoundError  # noqa: E402
from coursedb.database import Database  # noqa: E402
from coursedb.domain.courses import Question, Quiz  # noqa: E402
from coursedb.domain.users import Instructor, QuizAttempt, Student  # noqa: E402
from coursedb.repositories.course_store import CourseStore  # noqa: E402
from coursedb.repositories.user_store import UserStore  # noqa: E402
from coursedb.services.progress_service import AttemptLimitReached, ProgressService  # noqa: E402


@pytest.fixture()
def setup(tmp_path):
    users = UserStore(tmp_path / "users.json")
    users.save_or_update(Instructor(1, "ivo", "ivo@example.com", "h"))
    users.save_or_update(Student(2, "ana", "ana@example.com", "h"))
    db = Database(users=users, courses=CourseStore(tmp_path / "courses.json", users))
    course = db.courses.create_course("1", "Python", "Intro")
    quiz = Quiz([Question("1+1?", ["1", "2"], 1)], passing_percentage=75, max_attempts=2)
    graded = db.courses.add_lesson("1", course.course_id, "Sums", "1+1", quiz=quiz)
    reading = db.courses.add_lesson("1", course.course_id, "Reading", "text")
    db.courses.enroll_student_in_course(course.course_id, "2")
    return ProgressService(db), course, graded, reading


def test_attempts_are_persisted_and_limited(setup):
    service, _, graded, _ = setup
    service.record_quiz_attempt(2, QuizAttempt(graded.lesson_id, 1, 50, 0, 1))
    service.record_quiz_attempt(2, QuizAttempt(graded.lesson_id, 2, 100, 1, 1))
    with pytest.raises(AttemptLimitReached):
        service.record_quiz_attempt(2, QuizAttempt(graded.lesson_id, 3, 100, 1, 1))

    reloaded = UserStore(service.db.users.path).get_student_by_id(2)
    assert [a.score for a in reloaded.attempts_for(graded.lesson_id)] == [50, 100]


def test_passing_uses_lesson_quiz_threshold(setup):
    service, _, graded, _ = setup
    service.record_quiz_attempt(2, QuizAttempt(graded.lesson_id, 1, 70, 0, 1))
    assert service.has_passed_lesson(2, graded.lesson_id) is False
    service.record_quiz_attempt(2, QuizAttempt(graded.lesson_id, 2, 75, 1, 1))
    assert service.has_passed_lesson(2, graded.lesson_id) is True


def test_unknown_student_raises(setup):
    service, _, graded, _ = setup
    with pytest.raises(StudentNotFoundError):
        service.record_quiz_attempt(1, QuizAttempt(graded.lesson_id, 1, 70, 0, 1))
    with pytest.raises(StudentNotFoundError):
        service.mark_lesson_completed(99, graded.lesson_id)
    with pytest.raises(StudentNotFoundError):
        service.has_passed_lesson(99, graded.lesson_id)


def test_course_completion_requires_every_lesson(setup):
    service, course, graded, reading = setup
    assert service.mark_lesson_completed(2, graded.lesson_id) is True
    assert service.mark_lesson_completed(2, graded.lesson_id) is False
    student = service.db.users.get_student_by_id(2)
    assert service.is_course_completed(student, course) is False

    service.mark_lesson_completed(2, reading.lesson_id)
    assert service.is_course_completed(service.db.users.get_student_by_id(2), course) is True

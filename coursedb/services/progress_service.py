"""Student progress: quiz attempts, completed lessons and course completion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from coursedb.core.errors import CourseDBError, StudentNotFoundError
from coursedb.domain.courses import DEFAULT_PASSING_PERCENTAGE, Course, Quiz
from coursedb.domain.users import QuizAttempt, Student
from coursedb.database import Database


class AttemptLimitReached(CourseDBError):
    def __init__(self, student_id: int, lesson_id: str, max_attempts: int):
        super().__init__(f"Student {student_id} used all {max_attempts} attempts for lesson {lesson_id}")
        self.student_id = student_id
        self.lesson_id = lesson_id
        self.max_attempts = max_attempts


@dataclass
class ProgressService:
    db: Database

    def _quiz_for(self, lesson_id: str) -> Optional[Quiz]:
        found = self.db.courses.find_lesson(lesson_id)
        if found is None:
            return None
        return found[1].quiz

    def _require_student(self, student_id: int) -> Student:
        student = self.db.users.get_student_by_id(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def record_quiz_attempt(self, student_id: int, attempt: QuizAttempt) -> Student:
        """Store an already scored attempt, honouring the quiz's max_attempts."""
        quiz = self._quiz_for(attempt.lesson_id)

        def _append(student: Student) -> bool:
            if quiz is not None and quiz.max_attempts > 0:
                if len(student.attempts_for(attempt.lesson_id)) >= quiz.max_attempts:
                    raise AttemptLimitReached(student_id, attempt.lesson_id, quiz.max_attempts)
            student.add_quiz_attempt(attempt)
            return True

        student, _ = self.db.users.update_student(student_id, _append)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def mark_lesson_completed(self, student_id: int, lesson_id: str) -> bool:
        student, changed = self.db.users.update_student(
            student_id, lambda s: s.mark_lesson_completed(lesson_id)
        )
        if student is None:
            raise StudentNotFoundError(student_id)
        return changed

    def has_passed_lesson(self, student_id: int, lesson_id: str) -> bool:
        student = self._require_student(student_id)
        quiz = self._quiz_for(lesson_id)
        passing = quiz.passing_percentage if quiz is not None else DEFAULT_PASSING_PERCENTAGE
        return student.has_passed_lesson(lesson_id, passing)

    @staticmethod
    def is_course_completed(student: Student, course: Course) -> bool:
        return all(student.has_completed_lesson(lesson.lesson_id) for lesson in course.lessons)

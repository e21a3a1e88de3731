"""Course aggregate: Course embeds its Lessons, which may embed a Quiz."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from coursedb.core.errors import StatusTransitionError

DEFAULT_PASSING_PERCENTAGE = 60


class CourseStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass
class Question:
    question_text: str
    options: list[str] = field(default_factory=list)
    correct_option_index: int = 0


@dataclass
class Quiz:
    questions: list[Question] = field(default_factory=list)
    passing_percentage: int = DEFAULT_PASSING_PERCENTAGE
    max_attempts: int = 0  # 0 = unlimited

    @property
    def total_questions(self) -> int:
        return len(self.questions)


@dataclass
class Lesson:
    lesson_id: str
    title: str
    content: str = ""
    resources: list[str] = field(default_factory=list)
    quiz: Optional[Quiz] = None


@dataclass
class Course:
    """A course and its denormalized list of enrolled student ids (strings)."""

    course_id: str
    title: str
    description: str
    instructor_id: str
    status: CourseStatus = CourseStatus.PENDING
    lessons: list[Lesson] = field(default_factory=list)
    students: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        students: list[str] = []
        for student_id in self.students:
            if student_id not in seen:
                seen.add(student_id)
                students.append(student_id)
        self.students = students

    def is_owned_by(self, instructor_id: str) -> bool:
        return self.instructor_id == instructor_id

    # -------------------------- enrollment --------------------------
    def is_student_enrolled(self, student_id: str) -> bool:
        return student_id in self.students

    def enroll_student(self, student_id: str) -> bool:
        if self.is_student_enrolled(student_id):
            return False
        self.students.append(student_id)
        return True

    def remove_student(self, student_id: str) -> bool:
        if not self.is_student_enrolled(student_id):
            return False
        self.students.remove(student_id)
        return True

    # -------------------------- lessons --------------------------
    def find_lesson(self, lesson_id: str) -> Optional[Lesson]:
        for lesson in self.lessons:
            if lesson.lesson_id == lesson_id:
                return lesson
        return None

    def add_lesson(self, lesson: Lesson) -> None:
        self.lessons.append(lesson)

    def remove_lesson(self, lesson_id: str) -> bool:
        before = len(self.lessons)
        self.lessons = [lesson for lesson in self.lessons if lesson.lesson_id != lesson_id]
        return len(self.lessons) != before

    # -------------------------- status --------------------------
    def approve(self) -> None:
        self._transition(CourseStatus.APPROVED)

    def reject(self) -> None:
        self._transition(CourseStatus.REJECTED)

    def _transition(self, target: CourseStatus) -> None:
        if self.status is not CourseStatus.PENDING:
            raise StatusTransitionError(
                f"Course {self.course_id} is {self.status.value}; only PENDING courses can become {target.value}"
            )
        self.status = target

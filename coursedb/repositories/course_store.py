"""
Course map backed by the courses JSON document.

Course ids and lesson ids are strings; users are keyed by integers. The compound
operations (create, delete, enroll, unenroll) also update the back-references
kept on Instructor and Student records through ``backrefs``. Those user-side
updates are best-effort and take the user-store lock separately, so a reader
may briefly observe one side updated and not the other.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from coursedb.core.errors import AuthorizationDenied, CourseNotFoundError, LessonNotFoundError, RecordDecodeError
from coursedb.core.logging import get_logger
from coursedb.domain.courses import Course, CourseStatus, Lesson, Quiz
from coursedb.domain.identifiers import next_counter, parse_int_id
from coursedb.domain.users import Student
from coursedb.repositories import backrefs, json_storage
from coursedb.repositories.backrefs import BackrefOutcome
from coursedb.repositories.codec import course_from_record, course_to_record
from coursedb.repositories.user_store import UserStore

logger = get_logger(__name__)


@dataclass
class DeleteCourseResult:
    course: Course
    instructor: BackrefOutcome
    students: dict[str, BackrefOutcome] = field(default_factory=dict)


class CourseStore:
    """Owns ``course_id -> Course`` and allocates course/lesson ids."""

    def __init__(self, path: Path | str, users: UserStore) -> None:
        self.path = Path(path)
        self.users = users
        self._courses: dict[str, Course] = {}
        self._next_course = 1
        self._next_lesson = 1
        self._lock = threading.RLock()
        self.load()

    # -------------------------- load / save --------------------------
    def load(self) -> None:
        """Reload every course and re-derive both id counters."""
        with self._lock:
            records = json_storage.load_records(self.path)
            courses: dict[str, Course] = {}
            for index, record in enumerate(records):
                try:
                    course = course_from_record(record)
                except RecordDecodeError as exc:
                    logger.warning("course_record_skipped", path=str(self.path), index=index, error=str(exc))
                    continue
                courses[course.course_id] = course
            self._courses = courses
            self._next_course = next_counter(courses)
            self._next_lesson = next_counter(
                lesson.lesson_id for course in courses.values() for lesson in course.lessons
            )
            logger.debug(
                "courses_loaded",
                path=str(self.path),
                count=len(courses),
                next_course=self._next_course,
                next_lesson=self._next_lesson,
            )

    def _persist(self) -> None:
        json_storage.save_records(self.path, [course_to_record(course) for course in self._courses.values()])

    # -------------------------- id allocation --------------------------
    def next_course_id(self) -> str:
        with self._lock:
            value = self._next_course
            self._next_course += 1
            return str(value)

    def next_lesson_id(self) -> str:
        with self._lock:
            value = self._next_lesson
            self._next_lesson += 1
            return str(value)

    # -------------------------- lookups --------------------------
    def get_course(self, course_id: str) -> Optional[Course]:
        with self._lock:
            return self._courses.get(course_id)

    def get_all_courses(self) -> list[Course]:
        with self._lock:
            return list(self._courses.values())

    def get_visible_courses(self) -> list[Course]:
        """Courses students may browse (approved ones)."""
        with self._lock:
            return [course for course in self._courses.values() if course.status is CourseStatus.APPROVED]

    def _require_course(self, course_id: str) -> Course:
        course = self._courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(course_id)
        return course

    def _require_owned(self, instructor_id: str, course_id: str, action: str) -> Course:
        course = self._require_course(course_id)
        if not course.is_owned_by(instructor_id):
            raise AuthorizationDenied(instructor_id, course_id, action)
        return course

    def save_or_update_course(self, course: Course) -> Course:
        """Upsert a whole course; id counters move past any numeric ids it carries."""
        with self._lock:
            self._courses[course.course_id] = course
            self._next_course = max(self._next_course, next_counter([course.course_id]))
            self._next_lesson = max(self._next_lesson, next_counter(lesson.lesson_id for lesson in course.lessons))
            self._persist()
            return course

    # -------------------------- courses --------------------------
    def create_course(self, instructor_id: str, title: str, description: str) -> Course:
        with self._lock:
            course = Course(self.next_course_id(), title, description, instructor_id)
            self._courses[course.course_id] = course
            backrefs.link_instructor_course(self.users, instructor_id, course.course_id)
            self._persist()
            logger.info("course_created", course_id=course.course_id, instructor_id=instructor_id)
            return course

    def edit_course(self, instructor_id: str, course_id: str, new_title: str, new_description: str) -> Course:
        with self._lock:
            course = self._require_owned(instructor_id, course_id, "edit")
            course.title = new_title
            course.description = new_description
            self._persist()
            return course

    def delete_course(self, course_id: str) -> Optional[DeleteCourseResult]:
        """Remove a course and unlink it from its instructor and students.

        Returns None when the course does not exist.
        """
        with self._lock:
            course = self._courses.pop(course_id, None)
            if course is None:
                return None
            result = DeleteCourseResult(
                course=course,
                instructor=backrefs.unlink_instructor_course(self.users, course.instructor_id, course_id),
            )
            for student_id in course.students:
                result.students[student_id] = backrefs.unlink_student_course(self.users, student_id, course_id)
            self._persist()
            logger.info("course_deleted", course_id=course_id, students=len(course.students))
            return result

    def approve_course(self, course_id: str) -> Course:
        with self._lock:
            course = self._require_course(course_id)
            course.approve()
            self._persist()
            return course

    def reject_course(self, course_id: str) -> Course:
        with self._lock:
            course = self._require_course(course_id)
            course.reject()
            self._persist()
            return course

    # -------------------------- enrollment --------------------------
    def enroll_student_in_course(self, course_id: str, student_id: str) -> BackrefOutcome:
        with self._lock:
            course = self._require_course(course_id)
            if not course.enroll_student(student_id):
                return BackrefOutcome(False, backrefs.UNCHANGED)
            outcome = backrefs.link_student_course(self.users, student_id, course_id)
            self._persist()
            return outcome

    def unenroll_student_from_course(self, course_id: str, student_id: str) -> Optional[BackrefOutcome]:
        """Remove a student from a course; a missing course is ignored (returns None)."""
        with self._lock:
            course = self._courses.get(course_id)
            if course is None:
                return None
            course.remove_student(student_id)
            outcome = backrefs.unlink_student_course(self.users, student_id, course_id)
            self._persist()
            return outcome

    def get_enrolled_student_ids(self, course_id: str) -> list[str]:
        with self._lock:
            course = self._courses.get(course_id)
            return list(course.students) if course else []

    def get_enrolled_students_for_course(self, course_id: str) -> list[Student]:
        students = []
        for student_id in self.get_enrolled_student_ids(course_id):
            user_id = parse_int_id(student_id)
            if user_id is None:
                continue
            student = self.users.get_student_by_id(user_id)
            if student is not None:
                students.append(student)
        return students

    # -------------------------- lessons --------------------------
    def add_lesson(
        self,
        instructor_id: str,
        course_id: str,
        title: str,
        content: str,
        resources: Optional[list[str]] = None,
        quiz: Optional[Quiz] = None,
    ) -> Lesson:
        with self._lock:
            course = self._require_owned(instructor_id, course_id, "add lessons to")
            lesson = Lesson(self.next_lesson_id(), title, content, list(resources or []), quiz)
            course.add_lesson(lesson)
            self._persist()
            return lesson

    def edit_lesson(self, instructor_id: str, course_id: str, lesson_id: str, new_title: str, new_content: str) -> Lesson:
        with self._lock:
            course = self._require_owned(instructor_id, course_id, "edit lessons of")
            lesson = course.find_lesson(lesson_id)
            if lesson is None:
                raise LessonNotFoundError(course_id, lesson_id)
            lesson.title = new_title
            lesson.content = new_content
            self._persist()
            return lesson

    def set_lesson_quiz(self, instructor_id: str, course_id: str, lesson_id: str, quiz: Optional[Quiz]) -> Lesson:
        with self._lock:
            course = self._require_owned(instructor_id, course_id, "edit lessons of")
            lesson = course.find_lesson(lesson_id)
            if lesson is None:
                raise LessonNotFoundError(course_id, lesson_id)
            lesson.quiz = quiz
            self._persist()
            return lesson

    def delete_lesson(self, instructor_id: str, course_id: str, lesson_id: str) -> bool:
        with self._lock:
            course = self._require_owned(instructor_id, course_id, "delete lessons of")
            removed = course.remove_lesson(lesson_id)
            self._persist()
            return removed

    def find_lesson(self, lesson_id: str) -> Optional[tuple[Course, Lesson]]:
        """Locate a lesson across all courses."""
        with self._lock:
            for course in self._courses.values():
                lesson = course.find_lesson(lesson_id)
                if lesson is not None:
                    return course, lesson
        return None

"""Error taxonomy raised by the stores and services."""

from __future__ import annotations


class CourseDBError(Exception):
    """Base class for coursedb exceptions."""


class NotFoundError(CourseDBError):
    """A required record is absent."""


class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: str):
        super().__init__(f"Course not found: {course_id}")
        self.course_id = course_id


class LessonNotFoundError(NotFoundError):
    def __init__(self, course_id: str, lesson_id: str):
        super().__init__(f"Lesson {lesson_id} not found in course {course_id}")
        self.course_id = course_id
        self.lesson_id = lesson_id


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: int | str):
        super().__init__(f"Student not found: {student_id}")
        self.student_id = student_id


class AuthorizationDenied(CourseDBError):
    """Raised when an instructor acts on a course they do not own."""

    def __init__(self, instructor_id: str, course_id: str, action: str):
        super().__init__(f"Instructor {instructor_id!r} may not {action} course {course_id}")
        self.instructor_id = instructor_id
        self.course_id = course_id
        self.action = action


class PersistenceError(CourseDBError):
    """The backing document cannot be read or written."""


class RecordDecodeError(CourseDBError):
    """One persisted record could not be turned into a domain object."""


class StatusTransitionError(CourseDBError):
    pass

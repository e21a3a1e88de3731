"""Domain objects (users, courses) and identifier helpers."""

from .courses import Course, CourseStatus, Lesson, Question, Quiz
from .identifiers import next_counter, parse_int_id
from .users import Admin, Certificate, Instructor, QuizAttempt, Role, Student, User

__all__ = [
    "Admin",
    "Certificate",
    "Course",
    "CourseStatus",
    "Instructor",
    "Lesson",
    "Question",
    "Quiz",
    "QuizAttempt",
    "Role",
    "Student",
    "User",
    "next_counter",
    "parse_int_id",
]

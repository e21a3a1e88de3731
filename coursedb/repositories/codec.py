"""Conversion between persisted records (camelCase dicts) and domain objects.

Decoders raise RecordDecodeError for a record that cannot be used; optional
fields fall back to their defaults.
"""
from __future__ import annotations

from typing import Any

from coursedb.core.errors import RecordDecodeError
from coursedb.domain.courses import DEFAULT_PASSING_PERCENTAGE, Course, CourseStatus, Lesson, Question, Quiz
from coursedb.domain.users import USER_TYPES, Certificate, Instructor, QuizAttempt, Role, Student, User


def _list(values: Any, field_name: str) -> list:
    if values is None:
        return []
    if not isinstance(values, list):
        raise RecordDecodeError(f"{field_name} must be a list, got {type(values).__name__}")
    return values


def _str_list(values: Any, field_name: str) -> list[str]:
    return [str(value) for value in _list(values, field_name)]


def _int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise RecordDecodeError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise RecordDecodeError(f"expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise RecordDecodeError(f"expected an integer, got {value!r}") from None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


# -------------------------- users --------------------------
def user_to_record(user: User) -> dict:
    record: dict[str, Any] = {
        "userId": user.user_id,
        "username": user.username,
        "email": user.email,
        "passwordHash": user.password_hash,
        "role": user.role.value,
    }
    if user.role is Role.STUDENT:
        record["enrolledCourseIds"] = list(user.enrolled_course_ids)
        record["completedLessonIds"] = list(user.completed_lesson_ids)
        record["certificates"] = [
            {
                "certificateId": cert.certificate_id,
                "studentId": cert.student_id,
                "courseId": cert.course_id,
                "issueDate": cert.issue_date,
            }
            for cert in user.certificates
        ]
        record["quizAttempts"] = [
            {
                "lessonId": lesson_id,
                "timestamp": attempt.timestamp,
                "score": attempt.score,
                "correctCount": attempt.correct_count,
                "totalQuestions": attempt.total_questions,
            }
            for lesson_id, attempts in user.quiz_attempts.items()
            for attempt in attempts
        ]
    elif user.role is Role.INSTRUCTOR:
        record["createdCourses"] = list(user.created_courses)
    return record


def user_from_record(data: Any) -> User:
    if not isinstance(data, dict):
        raise RecordDecodeError(f"user record must be an object, got {type(data).__name__}")
    try:
        role = Role.parse(data.get("role"))
    except ValueError as exc:
        raise RecordDecodeError(str(exc)) from exc
    if "userId" not in data:
        raise RecordDecodeError("user record has no userId")
    user_id = _int(data.get("userId"))
    # older documents stored the hash under "password"
    password_hash = _text(data.get("passwordHash", data.get("password")))
    base = (user_id, _text(data.get("username")), _text(data.get("email")), password_hash)
    try:
        if role is Role.STUDENT:
            student = Student(
                *base,
                enrolled_course_ids=_str_list(data.get("enrolledCourseIds"), "enrolledCourseIds"),
                completed_lesson_ids=_str_list(data.get("completedLessonIds"), "completedLessonIds"),
                certificates=[
                    _certificate_from_record(item) for item in _list(data.get("certificates"), "certificates")
                ],
            )
            for item in _list(data.get("quizAttempts"), "quizAttempts"):
                student.add_quiz_attempt(_attempt_from_record(item))
            return student
        if role is Role.INSTRUCTOR:
            created = [_int(value) for value in _list(data.get("createdCourses"), "createdCourses")]
            return Instructor(*base, created_courses=created)
        return USER_TYPES[role](*base)
    except ValueError as exc:
        raise RecordDecodeError(str(exc)) from exc


def _certificate_from_record(data: Any) -> Certificate:
    if not isinstance(data, dict):
        raise RecordDecodeError("certificate must be an object")
    return Certificate(
        certificate_id=_text(data.get("certificateId")),
        student_id=_int(data.get("studentId")),
        course_id=_text(data.get("courseId")),
        issue_date=_text(data.get("issueDate")),
    )


def _attempt_from_record(data: Any) -> QuizAttempt:
    if not isinstance(data, dict) or not data.get("lessonId"):
        raise RecordDecodeError("quiz attempt must be an object with a lessonId")
    return QuizAttempt(
        lesson_id=_text(data.get("lessonId")),
        timestamp=_int(data.get("timestamp")),
        score=_int(data.get("score")),
        correct_count=_int(data.get("correctCount")),
        total_questions=_int(data.get("totalQuestions")),
    )


# -------------------------- courses --------------------------
def course_to_record(course: Course) -> dict:
    return {
        "courseId": course.course_id,
        "title": course.title,
        "description": course.description,
        "instructorId": course.instructor_id,
        "status": course.status.value,
        "students": list(course.students),
        "lessons": [_lesson_to_record(lesson) for lesson in course.lessons],
    }


def _lesson_to_record(lesson: Lesson) -> dict:
    record: dict[str, Any] = {
        "lessonId": lesson.lesson_id,
        "title": lesson.title,
        "content": lesson.content,
        "resources": list(lesson.resources),
    }
    if lesson.quiz is not None:
        record["quiz"] = {
            "passingPercentage": lesson.quiz.passing_percentage,
            "maxAttempts": lesson.quiz.max_attempts,
            "questions": [
                {
                    "questionText": question.question_text,
                    "options": list(question.options),
                    "correctOptionIndex": question.correct_option_index,
                }
                for question in lesson.quiz.questions
            ],
        }
    return record


def course_from_record(data: Any) -> Course:
    if not isinstance(data, dict):
        raise RecordDecodeError(f"course record must be an object, got {type(data).__name__}")
    course_id = _text(data.get("courseId"))
    if not course_id:
        raise RecordDecodeError("course record has no courseId")
    raw_status = _text(data.get("status")).strip().upper() or CourseStatus.PENDING.value
    try:
        status = CourseStatus(raw_status)
    except ValueError:
        raise RecordDecodeError(f"unknown course status: {raw_status!r}") from None
    return Course(
        course_id=course_id,
        title=_text(data.get("title")),
        description=_text(data.get("description")),
        instructor_id=_text(data.get("instructorId")),
        status=status,
        lessons=[_lesson_from_record(item) for item in _list(data.get("lessons"), "lessons")],
        students=_str_list(data.get("students"), "students"),
    )


def _lesson_from_record(data: Any) -> Lesson:
    if not isinstance(data, dict):
        raise RecordDecodeError("lesson must be an object")
    quiz_data = data.get("quiz")
    return Lesson(
        lesson_id=_text(data.get("lessonId")),
        title=_text(data.get("title")),
        content=_text(data.get("content")),
        resources=_str_list(data.get("resources"), "resources"),
        quiz=_quiz_from_record(quiz_data) if quiz_data is not None else None,
    )


def _quiz_from_record(data: Any) -> Quiz:
    if not isinstance(data, dict):
        raise RecordDecodeError("quiz must be an object")
    questions = []
    for item in _list(data.get("questions"), "questions"):
        if not isinstance(item, dict) or "questionText" not in item:
            raise RecordDecodeError("question must be an object with questionText")
        questions.append(
            Question(
                question_text=_text(item.get("questionText")),
                options=_str_list(item.get("options"), "options"),
                correct_option_index=_int(item.get("correctOptionIndex")),
            )
        )
    return Quiz(
        questions=questions,
        passing_percentage=_int(data.get("passingPercentage"), DEFAULT_PASSING_PERCENTAGE),
        max_attempts=_int(data.get("maxAttempts"), 0),
    )

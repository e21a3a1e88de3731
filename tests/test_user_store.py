"""
UserStore against temporary JSON documents.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from coursedb.core.errors import PersistenceError  # noqa: E402
from coursedb.domain.users import Admin, Certificate, Instructor, QuizAttempt, Student  # noqa: E402
from coursedb.repositories.user_store import UserStore  # noqa: E402


def _write(path: Path, records) -> Path:
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_missing_document_is_created_empty(tmp_path):
    path = tmp_path / "nested" / "users.json"
    store = UserStore(path)
    assert store.get_all() == ()
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_unknown_role_is_skipped_without_aborting_load(tmp_path):
    path = _write(
        tmp_path / "users.json",
        [
            {"userId": 1, "username": "ghost", "email": "ghost@example.com", "passwordHash": "h", "role": "GUEST"},
            {"userId": 2, "username": "ana", "email": "ana@example.com", "passwordHash": "h", "role": "STUDENT"},
            {"userId": "abc", "username": "bad", "email": "bad@example.com", "role": "STUDENT"},
            {"userId": 3, "username": "bad", "email": "bad-email", "role": "ADMIN"},
            {"userId": 4, "username": "ivo", "email": "ivo@example.com", "passwordHash": "h", "role": "instructor",
             "createdCourses": [10, 11]},
        ],
    )
    store = UserStore(path)
    assert store.get_by_id(1) is None
    assert store.get_by_id(3) is None
    assert isinstance(store.get_by_id(2), Student)
    instructor = store.get_instructor_by_id(4)
    assert instructor is not None
    assert instructor.created_courses == [10, 11]


def _valid_student(user_id: int) -> dict:
    return {"userId": user_id, "username": "ana", "email": "ana@example.com", "passwordHash": "h", "role": "STUDENT"}


@pytest.mark.parametrize(
    "bad_record",
    [
        {"userId": 1, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": 5},
        {"userId": 1, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": "INSTRUCTOR",
         "createdCourses": 7},
        {"userId": 1, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": "STUDENT",
         "certificates": 3},
        {"userId": 1, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": "STUDENT",
         "quizAttempts": "L1"},
        {"userId": 1, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": "STUDENT",
         "enrolledCourseIds": {"10": True}},
        {"userId": 1.9, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": "STUDENT"},
        {"userId": 1, "username": "x", "email": "x@example.com", "passwordHash": "h", "role": "INSTRUCTOR",
         "createdCourses": [10.5]},
    ],
)
def test_wrongly_typed_fields_skip_only_that_record(tmp_path, bad_record):
    path = _write(tmp_path / "users.json", [bad_record, _valid_student(2)])
    store = UserStore(path)
    assert store.get_by_id(1) is None
    assert isinstance(store.get_by_id(2), Student)


def test_whole_number_float_ids_are_accepted(tmp_path):
    record = _valid_student(2)
    record["userId"] = 2.0
    store = UserStore(_write(tmp_path / "users.json", [record]))
    assert store.get_student_by_id(2) is not None


def test_typed_lookups_return_none_for_other_roles(tmp_path):
    store = UserStore(tmp_path / "users.json")
    store.save_or_update(Student(1, "ana", "ana@example.com", "h"))
    store.save_or_update(Instructor(2, "ivo", "ivo@example.com", "h"))
    assert store.get_student_by_id(2) is None
    assert store.get_instructor_by_id(1) is None
    assert store.get_student_by_id(99) is None
    assert store.get_student_by_id(1).username == "ana"


def test_save_or_update_rewrites_document(tmp_path):
    path = tmp_path / "users.json"
    store = UserStore(path)
    student = Student(
        7,
        "ana",
        "ana@example.com",
        "h",
        enrolled_course_ids=["1"],
        completed_lesson_ids=["3"],
        certificates=[Certificate("cert-1", 7, "1", "2024-05-01")],
    )
    student.add_quiz_attempt(QuizAttempt("3", 1700000000000, 80, 4, 5))
    store.save_or_update(student)
    store.save_or_update(Admin(8, "root", "root@example.com", "h"))

    records = json.loads(path.read_text(encoding="utf-8"))
    by_id = {record["userId"]: record for record in records}
    assert by_id[7]["role"] == "STUDENT"
    assert by_id[7]["enrolledCourseIds"] == ["1"]
    assert by_id[7]["quizAttempts"][0]["correctCount"] == 4
    assert by_id[8] == {
        "userId": 8,
        "username": "root",
        "email": "root@example.com",
        "passwordHash": "h",
        "role": "ADMIN",
    }

    reloaded = UserStore(path)
    assert reloaded.get_student_by_id(7) == student


def test_upsert_replaces_existing_record(tmp_path):
    store = UserStore(tmp_path / "users.json")
    store.save_or_update(Student(1, "ana", "ana@example.com", "h"))
    store.save_or_update(Student(1, "ana maria", "ana@example.com", "h"))
    assert len(store.get_all()) == 1
    assert store.get_by_id(1).username == "ana maria"


def test_exists_email_is_case_insensitive(tmp_path):
    store = UserStore(tmp_path / "users.json")
    store.save_or_update(Student(1, "ana", "Ana@Example.com", "h"))
    assert store.exists_email("ana@example.COM") is True
    assert store.exists_email("bob@example.com") is False
    assert store.get_by_email("ANA@EXAMPLE.COM").user_id == 1


def test_update_student_persists_only_on_change(tmp_path):
    path = tmp_path / "users.json"
    store = UserStore(path)
    store.save_or_update(Student(1, "ana", "ana@example.com", "h"))

    student, changed = store.update_student(1, lambda s: s.enroll_in_course("5"))
    assert changed is True
    assert UserStore(path).get_student_by_id(1).enrolled_course_ids == ["5"]

    _, changed = store.update_student(1, lambda s: s.enroll_in_course("5"))
    assert changed is False
    assert store.update_student(42, lambda s: True) == (None, False)
    assert store.update_instructor(1, lambda s: True) == (None, False)


def test_legacy_password_field_is_read(tmp_path):
    path = _write(
        tmp_path / "users.json",
        [{"userId": 4, "username": "old", "email": "old@example.com", "password": "abc", "role": "ADMIN"}],
    )
    assert UserStore(path).get_by_id(4).password_hash == "abc"


def test_next_user_id(tmp_path):
    store = UserStore(tmp_path / "users.json")
    assert store.next_user_id() == 1
    store.save_or_update(Admin(9, "root", "root@example.com", "h"))
    assert store.next_user_id() == 10


def test_corrupt_document_raises_persistence_error(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        UserStore(path)
    path.write_text('{"users": []}', encoding="utf-8")
    with pytest.raises(PersistenceError):
        UserStore(path)

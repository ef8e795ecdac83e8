from __future__ import annotations

import logging

import pytest

from course_api.repositories.base import StorageError
from course_api.repositories.json_storage import JsonRecordStore
from course_api.services.contact_service import ContactService
from course_api.services.enrollment_service import EnrollmentService
from course_api.services.errors import EnrollmentConflictError, ValidationError, require_fields


@pytest.fixture()
def json_store(tmp_path):
    return JsonRecordStore(tmp_path)


def test_enroll_then_check(json_store):
    svc = EnrollmentService(json_store)
    created = svc.enroll("a@x.com", "Ann", "Intro")

    assert svc.check_enrollment("Intro", "a@x.com") == (True, created)
    assert svc.check_enrollment("Intro", "b@x.com") == (False, None)


def test_enroll_twice_is_a_conflict(json_store):
    svc = EnrollmentService(json_store)
    svc.enroll("a@x.com", "Ann", "Intro")

    with pytest.raises(EnrollmentConflictError) as excinfo:
        svc.enroll("a@x.com", "Ann", "Intro")

    assert excinfo.value.status_code == 409
    assert excinfo.value.message == "User already enrolled in this course"
    assert len(svc.list_enrollments()) == 1


@pytest.mark.parametrize(
    "email,name,course",
    [
        (None, "Ann", "Intro"),
        ("a@x.com", "", "Intro"),
        ("a@x.com", "Ann", "   "),
        ("a@x.com", 42, "Intro"),
    ],
)
def test_enroll_requires_every_field(json_store, email, name, course):
    svc = EnrollmentService(json_store)
    with pytest.raises(ValidationError) as excinfo:
        svc.enroll(email, name, course)
    assert excinfo.value.status_code == 400
    assert json_store.list_enrollments() == []


def test_enroll_stores_values_verbatim(json_store):
    svc = EnrollmentService(json_store)
    created = svc.enroll("a@x.com", "Ann", "Intro ")

    assert created.course_title == "Intro "
    assert svc.check_enrollment("Intro ", "a@x.com") == (True, created)
    assert svc.check_enrollment("Intro", "a@x.com") == (False, None)


def test_require_fields_accepts_a_field_named_message():
    assert require_fields("All fields are required", message="Hello", subject="Hi") == {
        "message": "Hello",
        "subject": "Hi",
    }
    with pytest.raises(ValidationError) as excinfo:
        require_fields("All fields are required", message="  ")
    assert excinfo.value.message == "All fields are required"


def test_storage_errors_are_not_reported_as_conflicts(json_store, monkeypatch):
    svc = EnrollmentService(json_store)

    def fail(*args, **kwargs):
        raise StorageError("disk full")

    monkeypatch.setattr(json_store, "insert_enrollment", fail)
    with pytest.raises(StorageError):
        svc.enroll("a@x.com", "Ann", "Intro")


def test_contact_submit_persists_and_logs(json_store, caplog):
    svc = ContactService(json_store)
    with caplog.at_level(logging.INFO, logger="course_api.services.contact_service"):
        first = svc.submit("Ann", "a@x.com", "Question", "When does it start?")
        second = svc.submit("Ann", "a@x.com", "Question", "When does it start?")

    assert first.id != second.id
    assert [s.id for s in svc.list_submissions()] == [second.id, first.id]
    assert "a@x.com" in caplog.text


def test_contact_submit_requires_every_field(json_store):
    svc = ContactService(json_store)
    with pytest.raises(ValidationError) as excinfo:
        svc.submit("Ann", "a@x.com", "Question", "")
    assert excinfo.value.message == "All fields are required"
    assert svc.list_submissions() == []


def test_contact_submit_stores_message_field(json_store):
    svc = ContactService(json_store)
    created = svc.submit("Ann", "a@x.com", "Question", "When does it start?")

    assert created.message == "When does it start?"
    assert created.subject == "Question"

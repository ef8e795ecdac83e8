"""Enrollment use cases: enroll once per course, lookups and statistics."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from course_api.domain.records import Enrollment, EnrollmentStats
from course_api.repositories.base import DuplicateEnrollment, RecordStore
from course_api.services.errors import EnrollmentConflictError, require_fields

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Email, name, and course title are required"


class EnrollmentService:
    """Enforces one enrollment per (course, email) on top of a RecordStore."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list_enrollments(self) -> list[Enrollment]:
        return self.store.list_enrollments()

    def check_enrollment(self, course_title: str, email: str) -> Tuple[bool, Optional[Enrollment]]:
        record = self.store.find_enrollment(course_title, email)
        return record is not None, record

    def enroll(self, email: object, name: object, course_title: object) -> Enrollment:
        fields = require_fields(MISSING_FIELDS_MESSAGE, email=email, name=name, course_title=course_title)
        try:
            record = self.store.insert_enrollment(fields["email"], fields["name"], fields["course_title"])
        except DuplicateEnrollment as exc:
            raise EnrollmentConflictError() from exc
        logger.info("Enrolled %s in %r (id=%s)", record.email, record.course_title, record.id)
        return record

    def stats(self) -> EnrollmentStats:
        return self.store.enrollment_stats()

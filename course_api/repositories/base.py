"""Store contract shared by the JSON and SQL backends."""
from __future__ import annotations

from typing import Optional, Protocol

from course_api.domain.records import ContactSubmission, Enrollment, EnrollmentStats


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""


class DuplicateEnrollment(Exception):
    """Raised when (email, course_title) is already enrolled."""

    def __init__(self, email: str, course_title: str):
        super().__init__(f"{email} already enrolled in {course_title!r}")
        self.email = email
        self.course_title = course_title


class RecordStore(Protocol):
    def initialize(self) -> None:
        """Load or open persisted state. Safe to call repeatedly."""
        ...

    def close(self) -> None: ...

    def list_enrollments(self) -> list[Enrollment]: ...

    def find_enrollment(self, course_title: str, email: str) -> Optional[Enrollment]: ...

    def insert_enrollment(self, email: str, name: str, course_title: str) -> Enrollment:
        """Persist a new enrollment or raise DuplicateEnrollment."""
        ...

    def enrollment_stats(self) -> EnrollmentStats: ...

    def list_contact_submissions(self) -> list[ContactSubmission]: ...

    def insert_contact_submission(self, name: str, email: str, subject: str, message: str) -> ContactSubmission: ...

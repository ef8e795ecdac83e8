"""
File-backed record store.

Enrollments and contact submissions live in two independent JSON documents:

    enrollments.json  {"enrollments": [...]}
    contact.json      {"contactSubmissions": [...]}

Both are loaded into memory once and fully rewritten on every mutation. Writes
go to a temporary file in the same directory which is then renamed over the
document, so an interrupted write never leaves a truncated file behind. All
mutations happen under one lock, which also makes the duplicate check and the
insert a single step.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from course_api.domain.records import (
    ContactSubmission,
    Enrollment,
    EnrollmentStats,
    format_timestamp,
    rank_courses,
    sort_newest_first,
    utcnow,
)
from course_api.repositories.base import DuplicateEnrollment, StorageError

logger = logging.getLogger(__name__)

ENROLLMENTS_FILE = "enrollments.json"
CONTACT_FILE = "contact.json"
ENROLLMENTS_KEY = "enrollments"
CONTACT_KEY = "contactSubmissions"


def _read_collection(path: Path, key: str) -> list[dict]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: expected an object with a {key!r} array")
    return list(data.get(key) or [])


def _atomic_write(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class JsonRecordStore:
    """RecordStore kept in memory and written through to two JSON documents."""

    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.data_dir = Path(data_dir)
        self.enrollments_path = self.data_dir / ENROLLMENTS_FILE
        self.contact_path = self.data_dir / CONTACT_FILE
        self._enrollments: list[Enrollment] = []
        self._submissions: list[ContactSubmission] = []
        self._next_id = 1
        self._initialized = False
        self._lock = threading.RLock()

    # -------------------------- lifecycle --------------------------
    def _load(self, path: Path, key: str, factory) -> list:
        try:
            return [factory(item) for item in _read_collection(path, key)]
        except (OSError, ValueError, KeyError, TypeError, AttributeError):
            logger.exception("Could not load %s; starting with an empty %r collection", path, key)
        # unreadable documents are kept aside for manual recovery
        quarantine = path.with_name(f"{path.name}.corrupt")
        try:
            os.replace(path, quarantine)
            logger.warning("Moved unreadable %s to %s", path.name, quarantine.name)
        except OSError as exc:
            logger.error("Could not move %s aside: %s", path, exc)
        return []

    def initialize(self) -> None:
        with self._lock:
            if self._initialized:
                return
            # each document recovers on its own so one bad file never discards the other
            enrollments = self._load(self.enrollments_path, ENROLLMENTS_KEY, Enrollment.from_dict)
            submissions = self._load(self.contact_path, CONTACT_KEY, ContactSubmission.from_dict)
            self._enrollments = enrollments
            self._submissions = submissions
            # legacy documents carry millisecond-timestamp ids
            self._next_id = max((r.id for r in [*enrollments, *submissions]), default=0) + 1
            self._initialized = True
            logger.info(
                "JSON store ready at %s (%d enrollments, %d contact submissions)",
                self.data_dir,
                len(enrollments),
                len(submissions),
            )

    def close(self) -> None:
        return None

    def _allocate_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def _save(self, path: Path, key: str, records: list) -> None:
        try:
            _atomic_write(path, {key: [r.to_dict() for r in records]})
        except OSError as exc:
            logger.error("Error saving %s: %s", path, exc)
            raise StorageError(f"Could not write {path.name}") from exc

    # -------------------------- enrollments --------------------------
    def list_enrollments(self) -> list[Enrollment]:
        self.initialize()
        with self._lock:
            return sort_newest_first(self._enrollments, "enrolled_at")

    def find_enrollment(self, course_title: str, email: str) -> Optional[Enrollment]:
        self.initialize()
        with self._lock:
            for record in self._enrollments:
                if record.course_title == course_title and record.email == email:
                    return record
            return None

    def insert_enrollment(self, email: str, name: str, course_title: str) -> Enrollment:
        self.initialize()
        with self._lock:
            if self.find_enrollment(course_title, email) is not None:
                raise DuplicateEnrollment(email, course_title)
            record = Enrollment(
                id=self._allocate_id(),
                email=email,
                name=name,
                course_title=course_title,
                enrolled_at=format_timestamp(utcnow()),
            )
            updated = [*self._enrollments, record]
            self._save(self.enrollments_path, ENROLLMENTS_KEY, updated)
            self._enrollments = updated
            return record

    def enrollment_stats(self) -> EnrollmentStats:
        self.initialize()
        with self._lock:
            records = list(self._enrollments)
        counts: dict[str, int] = {}
        for record in records:
            counts[record.course_title] = counts.get(record.course_title, 0) + 1
        return EnrollmentStats(
            total_enrollments=len(records),
            unique_users=len({r.email for r in records}),
            enrollments_by_course=rank_courses(counts),
        )

    # -------------------------- contact submissions --------------------------
    def list_contact_submissions(self) -> list[ContactSubmission]:
        self.initialize()
        with self._lock:
            return sort_newest_first(self._submissions, "submitted_at")

    def insert_contact_submission(self, name: str, email: str, subject: str, message: str) -> ContactSubmission:
        self.initialize()
        with self._lock:
            record = ContactSubmission(
                id=self._allocate_id(),
                name=name,
                email=email,
                subject=subject,
                message=message,
                submitted_at=format_timestamp(utcnow()),
            )
            updated = [*self._submissions, record]
            self._save(self.contact_path, CONTACT_KEY, updated)
            self._submissions = updated
            return record

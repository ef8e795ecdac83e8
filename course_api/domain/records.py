"""Record types shared by every storage backend."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Iterable, TypeVar


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Serialize as ISO-8601 in UTC with millisecond precision: 2024-05-01T12:00:00.123Z.
    Naive datetimes (SQLite drops tzinfo) are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str):
            raise ValueError(f"not a timestamp: {value!r}")
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _checked_timestamp(value: str) -> str:
    """Reject unparseable timestamps at load time; the stored text is kept as is."""
    parse_timestamp(value)
    return value


@dataclass(frozen=True)
class Enrollment:
    id: int
    email: str
    name: str
    course_title: str
    enrolled_at: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Enrollment":
        return cls(
            id=int(data["id"]),
            email=data["email"],
            name=data["name"],
            course_title=data["course_title"],
            enrolled_at=_checked_timestamp(data["enrolled_at"]),
        )


@dataclass(frozen=True)
class ContactSubmission:
    id: int
    name: str
    email: str
    subject: str
    message: str
    submitted_at: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ContactSubmission":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            email=data["email"],
            subject=data["subject"],
            message=data["message"],
            submitted_at=_checked_timestamp(data["submitted_at"]),
        )


@dataclass(frozen=True)
class CourseCount:
    course_title: str
    enrollments: int


@dataclass(frozen=True)
class EnrollmentStats:
    total_enrollments: int
    unique_users: int
    enrollments_by_course: list[CourseCount] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalEnrollments": self.total_enrollments,
            "uniqueUsers": self.unique_users,
            "enrollmentsByCourse": [
                {"course_title": c.course_title, "enrollments": c.enrollments}
                for c in self.enrollments_by_course
            ],
        }


R = TypeVar("R")


def sort_newest_first(records: Iterable[R], timestamp_field: str) -> list[R]:
    """Order records by the given timestamp field, most recent first; ties by id descending."""
    return sorted(
        records,
        key=lambda r: (parse_timestamp(getattr(r, timestamp_field)), getattr(r, "id")),
        reverse=True,
    )


def rank_courses(counts: dict[str, int]) -> list[CourseCount]:
    """Per-course counts, highest first; equal counts ordered by course title."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [CourseCount(course_title=title, enrollments=n) for title, n in ordered]

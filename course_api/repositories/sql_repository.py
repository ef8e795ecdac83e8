"""Record store backed by SQLAlchemy (SQLite by default)."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from course_api.db.models import ContactSubmissionRow, EnrollmentRow
from course_api.db.session import Base, build_engine, build_sessionmaker, session_scope
from course_api.domain.records import (
    ContactSubmission,
    Enrollment,
    EnrollmentStats,
    format_timestamp,
    parse_timestamp,
    rank_courses,
    utcnow,
)
from course_api.repositories.base import DuplicateEnrollment, StorageError

logger = logging.getLogger(__name__)


def _to_enrollment(row: EnrollmentRow) -> Enrollment:
    return Enrollment(
        id=row.id,
        email=row.email,
        name=row.name,
        course_title=row.course_title,
        enrolled_at=format_timestamp(row.enrolled_at),
    )


def _to_submission(row: ContactSubmissionRow) -> ContactSubmission:
    return ContactSubmission(
        id=row.id,
        name=row.name,
        email=row.email,
        subject=row.subject,
        message=row.message,
        submitted_at=format_timestamp(row.submitted_at),
    )


class SQLRecordStore:
    """RecordStore whose uniqueness rule is enforced by the database itself."""

    def __init__(self, database_url: str | None = None, *, engine: Engine | None = None) -> None:
        if engine is None:
            engine = build_engine(database_url or "")
        self.engine = engine
        self._sessions = build_sessionmaker(engine)
        self._initialized = False
        self._init_lock = threading.Lock()

    # -------------------------- lifecycle --------------------------
    def initialize(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            try:
                Base.metadata.create_all(bind=self.engine)
            except SQLAlchemyError as exc:
                logger.error("Could not create tables on %s: %s", self.engine.url, exc)
                raise StorageError("Database unavailable") from exc
            self._initialized = True
            logger.info("SQL store ready at %s", self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.engine.dispose()

    # -------------------------- enrollments --------------------------
    def list_enrollments(self) -> list[Enrollment]:
        self.initialize()
        stmt = select(EnrollmentRow).order_by(EnrollmentRow.enrolled_at.desc(), EnrollmentRow.id.desc())
        try:
            with session_scope(self._sessions) as session:
                return [_to_enrollment(row) for row in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageError("Could not list enrollments") from exc

    def find_enrollment(self, course_title: str, email: str) -> Optional[Enrollment]:
        self.initialize()
        stmt = select(EnrollmentRow).where(
            EnrollmentRow.course_title == course_title,
            EnrollmentRow.email == email,
        )
        try:
            with session_scope(self._sessions) as session:
                row = session.execute(stmt).scalar_one_or_none()
                return _to_enrollment(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError("Could not look up enrollment") from exc

    def insert_enrollment(self, email: str, name: str, course_title: str) -> Enrollment:
        self.initialize()
        row = EnrollmentRow(email=email, name=name, course_title=course_title, enrolled_at=utcnow())
        try:
            with session_scope(self._sessions) as session:
                session.add(row)
                try:
                    session.commit()
                except IntegrityError as exc:
                    session.rollback()
                    raise DuplicateEnrollment(email, course_title) from exc
                session.refresh(row)
                return _to_enrollment(row)
        except SQLAlchemyError as exc:
            logger.error("Error saving enrollment: %s", exc)
            raise StorageError("Could not save enrollment") from exc

    def enrollment_stats(self) -> EnrollmentStats:
        self.initialize()
        totals = select(func.count(EnrollmentRow.id), func.count(func.distinct(EnrollmentRow.email)))
        by_course = select(EnrollmentRow.course_title, func.count(EnrollmentRow.id)).group_by(
            EnrollmentRow.course_title
        )
        try:
            with session_scope(self._sessions) as session:
                total, unique_users = session.execute(totals).one()
                counts = {title: int(n) for title, n in session.execute(by_course).all()}
        except SQLAlchemyError as exc:
            raise StorageError("Could not compute enrollment stats") from exc
        return EnrollmentStats(
            total_enrollments=int(total or 0),
            unique_users=int(unique_users or 0),
            enrollments_by_course=rank_courses(counts),
        )

    # -------------------------- contact submissions --------------------------
    def list_contact_submissions(self) -> list[ContactSubmission]:
        self.initialize()
        stmt = select(ContactSubmissionRow).order_by(
            ContactSubmissionRow.submitted_at.desc(), ContactSubmissionRow.id.desc()
        )
        try:
            with session_scope(self._sessions) as session:
                return [_to_submission(row) for row in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageError("Could not list contact submissions") from exc

    def insert_contact_submission(self, name: str, email: str, subject: str, message: str) -> ContactSubmission:
        self.initialize()
        row = ContactSubmissionRow(name=name, email=email, subject=subject, message=message, submitted_at=utcnow())
        try:
            with session_scope(self._sessions) as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return _to_submission(row)
        except SQLAlchemyError as exc:
            logger.error("Error saving contact submission: %s", exc)
            raise StorageError("Could not save contact submission") from exc

    # -------------------------- migration --------------------------
    def import_enrollment(self, record: Enrollment) -> bool:
        """Copy an existing record verbatim (id and timestamp kept). Returns False if already present."""
        self.initialize()
        row = EnrollmentRow(
            id=record.id,
            email=record.email,
            name=record.name,
            course_title=record.course_title,
            enrolled_at=parse_timestamp(record.enrolled_at),
        )
        try:
            with session_scope(self._sessions) as session:
                session.add(row)
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    return False
                return True
        except SQLAlchemyError as exc:
            raise StorageError("Could not import enrollment") from exc

    def import_contact_submission(self, record: ContactSubmission) -> bool:
        self.initialize()
        try:
            with session_scope(self._sessions) as session:
                if session.get(ContactSubmissionRow, record.id) is not None:
                    return False
                session.add(
                    ContactSubmissionRow(
                        id=record.id,
                        name=record.name,
                        email=record.email,
                        subject=record.subject,
                        message=record.message,
                        submitted_at=parse_timestamp(record.submitted_at),
                    )
                )
                session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StorageError("Could not import contact submission") from exc

"""SQLAlchemy models mirroring the JSON documents."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from .session import Base


class EnrollmentRow(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("email", "course_title", name="uq_enrollments_email_course"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    course_title = Column(String(255), nullable=False, index=True)
    enrolled_at = Column(DateTime(timezone=True), nullable=False, index=True)


class ContactSubmissionRow(Base):
    __tablename__ = "contact_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False, index=True)

"""Contact form submissions: validated, logged and persisted."""

from __future__ import annotations

import logging

from course_api.domain.records import ContactSubmission
from course_api.repositories.base import RecordStore
from course_api.services.errors import require_fields

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def submit(self, name: object, email: object, subject: object, message: object) -> ContactSubmission:
        fields = require_fields("All fields are required", name=name, email=email, subject=subject, message=message)
        logger.info("Contact form submission from %s <%s>: %s", fields["name"], fields["email"], fields["subject"])
        return self.store.insert_contact_submission(
            fields["name"], fields["email"], fields["subject"], fields["message"]
        )

    def list_submissions(self) -> list[ContactSubmission]:
        return self.store.list_contact_submissions()

"""Service-level errors mapped to HTTP responses by the routers."""
from __future__ import annotations


class ServiceError(Exception):
    def __init__(self, message: str, code: str = "invalid", status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ValidationError(ServiceError):
    """Raised when a required field is missing or blank."""

    def __init__(self, message: str):
        super().__init__(message, "invalid", 400)


class EnrollmentConflictError(ServiceError):
    """Raised when the user is already enrolled in the course."""

    def __init__(self, message: str = "User already enrolled in this course"):
        super().__init__(message, "conflict", 409)


def require_fields(message: str, /, **fields: object) -> dict[str, str]:
    """Return the fields unchanged, or raise ValidationError if any is missing or blank."""
    checked: dict[str, str] = {}
    for key, value in fields.items():
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(message)
        checked[key] = value
    return checked

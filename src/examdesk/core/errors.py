"""Domain exceptions for examdesk.

Every exception carries the HTTP status it maps to; the web layer renders
all of them as ``{"error": message}``.
"""

from __future__ import annotations


class ExamDeskError(Exception):
    """Base exception for all examdesk errors."""

    http_status: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ExamDeskError):
    """Raised when input is well-formed but violates a business rule."""

    http_status = 400


class NotFoundError(ExamDeskError):
    """Raised when a referenced row does not exist."""

    http_status = 404

    def __init__(self, entity: str, entity_id: int | str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(ExamDeskError):
    """Raised when a unique value is already taken."""

    http_status = 409


class AuthenticationError(ExamDeskError):
    """Raised when login credentials do not match."""

    http_status = 401


class ReportServiceError(ExamDeskError):
    """Raised when the external report service fails or times out."""

    http_status = 502

    def __init__(self, message: str, timed_out: bool = False):
        self.timed_out = timed_out
        if timed_out:
            self.http_status = 504
        super().__init__(message)

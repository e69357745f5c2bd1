"""
Domain errors raised by services. The HTTP layer (main.py) translates them into
responses; services never build HTTP responses themselves.
"""
from __future__ import annotations


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_payload(self) -> dict:
        payload: dict = {"detail": self.message}
        if self.field:
            payload["errors"] = {self.field: [self.message]}
        return payload


class NotFoundError(DomainError):
    """Referenced record, element, language or tenant does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """A uniqueness rule or a state transition was violated."""

    status_code = 422


class ValidationError(DomainError):
    """Malformed input rejected before touching the store."""

    status_code = 422

"""Typed domain errors raised at the point of detection.

The HTTP layer maps each kind to a status code; nothing here knows about HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Base class for recoverable, caller-facing errors."""

    def __init__(self, message: str, errors: list[FieldError] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class NotFoundError(DomainError):
    """A referenced record does not exist."""


class ConflictError(DomainError):
    """A uniqueness rule would be violated."""


class InvalidStateError(DomainError):
    """The record exists but its state forbids the operation."""


class ValidationFailedError(DomainError):
    """Structural input problems, reported per field."""

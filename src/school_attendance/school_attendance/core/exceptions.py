from __future__ import annotations

from datetime import date


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DayOffError(ValidationError):
    """Raised when attendance is mutated on a weekend or a declared holiday."""

    def __init__(self, day: date, reason: str, message: str):
        super().__init__(message)
        self.day = day
        self.reason = reason


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class SnapshotError(DomainError):
    """Raised when the local snapshot cannot be read or decoded."""


class SyncError(DomainError):
    """Raised inside the sync package when the remote cannot be reached."""


class PayloadError(SyncError):
    """Raised when a row from a document cannot be decoded."""

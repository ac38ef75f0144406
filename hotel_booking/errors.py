"""
Error taxonomy for reservation admission and lifecycle operations.

Every business rejection surfaces to the caller as one of these types so the
surrounding layer (HTTP controllers, workers) can translate it into its own
response format. Nothing in this package swallows them.

    ValidationError      -> malformed or semantically invalid input
    NotFoundError        -> referenced room or reservation does not exist
    AuthorizationError   -> caller lacks the role, ownership or hotel scope
    ConflictError        -> date range taken, or a concurrent write won the race
    StorageError         -> repository / transport failure
    DeadlineExceededError -> caller deadline elapsed; nothing was committed

Only reads are safe to retry after a StorageError. A write must be re-issued
as a fresh operation so availability is checked again.
"""

from __future__ import annotations

from typing import Any, Optional


class BookingError(Exception):
    """Base class for all errors raised by hotel_booking."""

    def __init__(self, message: str, detail: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(BookingError):
    pass


class NotFoundError(BookingError):
    pass


class AuthorizationError(BookingError):
    pass


class ConflictError(BookingError):
    pass


class StorageError(BookingError):
    pass


class DeadlineExceededError(BookingError):
    pass

"""Caller-supplied deadline tracking for reservation operations."""

from __future__ import annotations

import time
from typing import Optional

from hotel_booking.errors import DeadlineExceededError


class Deadline:
    """
    Absolute deadline measured on the monotonic clock.

    A Deadline built from ``None`` (or a non-positive timeout) never expires.
    The lifecycle manager calls ``check()`` between repository calls, and the
    SQL unit of work turns ``remaining_ms()`` into a ``statement_timeout`` so a
    blocked query is cancelled by the database instead of hanging.

    Example:
        >>> deadline = Deadline(timeout=2.5)
        >>> deadline.check("load_room")
    """

    def __init__(self, timeout: Optional[float] = None):
        if timeout is not None and timeout > 0:
            self._expires_at: Optional[float] = time.monotonic() + timeout
        else:
            self._expires_at = None

    @property
    def unbounded(self) -> bool:
        return self._expires_at is None

    def remaining(self) -> Optional[float]:
        """Seconds left, ``None`` when unbounded, never negative."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def remaining_ms(self) -> Optional[int]:
        remaining = self.remaining()
        if remaining is None:
            return None
        # statement_timeout=0 means "no limit" in PostgreSQL
        return max(1, int(remaining * 1000))

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, step: str) -> None:
        """
        Raise if the deadline has passed.

        Raises:
            DeadlineExceededError: when no time is left before ``step``
        """
        if self.expired():
            raise DeadlineExceededError(
                f"Operation deadline exceeded before {step}", {"step": step}
            )

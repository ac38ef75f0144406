"""Calendar date helpers shared by pricing and the lifecycle manager."""

from __future__ import annotations

import math
from datetime import date, datetime

from hotel_booking.errors import ValidationError

SECONDS_PER_DAY = 86400


def nights_between(check_in: date, check_out: date) -> int:
    """
    Number of nights in a stay, rounded up to whole calendar days.

    Plain ``date`` values always give an exact day count. When both ends are
    ``datetime`` values a partial day counts as a full night.

    Example:
        >>> nights_between(date(2024, 3, 1), date(2024, 3, 3))
        2
    """
    if isinstance(check_in, datetime) and isinstance(check_out, datetime):
        return math.ceil((check_out - check_in).total_seconds() / SECONDS_PER_DAY)
    return (check_out - check_in).days


def validate_stay_dates(check_in: date, check_out: date, today: date) -> None:
    """
    Reject a stay whose dates are out of order or start in the past.

    Raises:
        ValidationError: check_out is not after check_in, or check_in < today
    """
    if check_in < today:
        raise ValidationError(
            "Check-in date cannot be in the past",
            {"check_in_date": check_in.isoformat(), "today": today.isoformat()},
        )
    if check_out <= check_in:
        raise ValidationError(
            "check_out_date must be after check_in_date",
            {"check_in_date": check_in.isoformat(), "check_out_date": check_out.isoformat()},
        )


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Half-open overlap: ``[a_start, a_end)`` intersects ``[b_start, b_end)``."""
    return a_start < b_end and a_end > b_start

"""Availability checker: is a room free for a date range?"""

from __future__ import annotations

from datetime import date
from typing import Optional

import structlog

from hotel_booking.metrics import availability_checks
from hotel_booking.repositories.base import ReservationRepository

logger = structlog.get_logger(__name__)


def is_room_available(
    repository: ReservationRepository,
    room_id: int,
    check_in: date,
    check_out: date,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    """
    Check that no pending or confirmed reservation overlaps the range.

    Back-to-back stays do not conflict: a stay ending on day X leaves the room
    free for one starting on day X. The result is advisory unless the caller
    holds the room lock of its session (see ReservationService).

    Args:
        repository: Reservation repository (usually an open BookingSession).
        room_id: Room to check.
        check_in: Requested check-in date; callers ensure check_out > check_in.
        check_out: Requested check-out date.
        exclude_reservation_id: Reservation being edited, ignored in the scan.

    Returns:
        bool: True when the room is free. Storage failures propagate as StorageError.
    """
    overlapping = repository.count_overlapping(
        room_id, check_in, check_out, exclude_reservation_id
    )
    available = overlapping == 0

    availability_checks.labels(result="available" if available else "unavailable").inc()
    logger.debug(
        "availability_checked",
        room_id=room_id,
        check_in=check_in.isoformat(),
        check_out=check_out.isoformat(),
        overlapping=overlapping,
    )
    return available

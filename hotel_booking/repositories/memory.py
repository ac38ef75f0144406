"""
In-process unit of work.

Keeps rooms and reservations in dictionaries and serializes every session
behind one process-wide lock. That makes check-then-write atomic for a single
process only; multi-process deployments must use SqlUnitOfWork.

Writes are staged on a copy of the reservation table and swapped in when the
session block exits cleanly, so a failed or timed-out operation leaves no
partial state. Inserts and updates enforce the same no-overlap rule as the
database exclusion constraint.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator, Optional

from hotel_booking.errors import ConflictError, DeadlineExceededError, NotFoundError
from hotel_booking.schemas.reservations import NewReservation, ReservationRecord, RoomSnapshot
from hotel_booking.utils.dates import ranges_overlap
from hotel_booking.utils.datetime import utc_now
from hotel_booking.utils.deadline import Deadline


def _sort_key(reservation: ReservationRecord) -> tuple[date, int]:
    return (reservation.check_in_date, reservation.id)


class InMemoryBookingSession:
    """Session over a staged copy of the reservation table."""

    def __init__(
        self,
        rooms: dict[int, RoomSnapshot],
        reservations: dict[int, ReservationRecord],
        ids: Iterator[int],
    ):
        self.rooms = rooms
        self.reservations = reservations
        self._ids = ids

    def _assert_no_overlap(self, candidate: ReservationRecord) -> None:
        if not candidate.is_active:
            return
        for other in self.reservations.values():
            if (
                other.id != candidate.id
                and other.room_id == candidate.room_id
                and other.is_active
                and ranges_overlap(
                    other.check_in_date,
                    other.check_out_date,
                    candidate.check_in_date,
                    candidate.check_out_date,
                )
            ):
                raise ConflictError("Room is not available for the selected dates")

    def _sorted(self, reservations: Iterator[ReservationRecord]) -> list[ReservationRecord]:
        return [r.model_copy() for r in sorted(reservations, key=_sort_key)]

    def get_room_with_type(self, room_id: int, for_update: bool = False) -> Optional[RoomSnapshot]:
        # The session already holds the store lock, so for_update needs no extra work
        return self.rooms.get(room_id)

    def count_overlapping(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        return sum(
            1
            for r in self.reservations.values()
            if r.room_id == room_id
            and r.is_active
            and r.id != exclude_reservation_id
            and ranges_overlap(r.check_in_date, r.check_out_date, check_in, check_out)
        )

    def insert(self, reservation: NewReservation) -> ReservationRecord:
        if reservation.room_id not in self.rooms:
            raise NotFoundError("Room not found")

        now = utc_now()
        record = ReservationRecord(
            id=next(self._ids), created_at=now, updated_at=now, **reservation.model_dump()
        )
        self._assert_no_overlap(record)
        self.reservations[record.id] = record
        return record.model_copy()

    def update(self, reservation_id: int, data: dict[str, Any]) -> Optional[ReservationRecord]:
        existing = self.reservations.get(reservation_id)
        if existing is None:
            return None
        if "room_id" in data and data["room_id"] not in self.rooms:
            raise NotFoundError("Room not found")

        updated = ReservationRecord(
            **{**existing.model_dump(), **data, "updated_at": utc_now()}
        )
        self._assert_no_overlap(updated)
        self.reservations[reservation_id] = updated
        return updated.model_copy()

    def find_by_id(
        self, reservation_id: int, for_update: bool = False
    ) -> Optional[ReservationRecord]:
        found = self.reservations.get(reservation_id)
        return found.model_copy() if found else None

    def find_by_customer(
        self, customer_id: int, hotel_id: Optional[int] = None
    ) -> list[ReservationRecord]:
        return self._sorted(
            r
            for r in self.reservations.values()
            if r.customer_id == customer_id
            and (hotel_id is None or self.rooms[r.room_id].hotel_id == hotel_id)
        )

    def find_by_room(self, room_id: int) -> list[ReservationRecord]:
        return self._sorted(r for r in self.reservations.values() if r.room_id == room_id)

    def find_by_hotel(self, hotel_id: int) -> list[ReservationRecord]:
        return self._sorted(
            r for r in self.reservations.values() if self.rooms[r.room_id].hotel_id == hotel_id
        )

    def find_all(self) -> list[ReservationRecord]:
        return self._sorted(iter(self.reservations.values()))


class InMemoryUnitOfWork:
    """
    Thread-safe in-memory store for rooms and reservations.

    Example:
        >>> uow = InMemoryUnitOfWork()
        >>> uow.add_room(RoomSnapshot(room_id=101, hotel_id=1, room_type_id=1,
        ...                           capacity=2, base_price=Decimal("100.00")))
        >>> with uow.begin() as session:
        ...     session.count_overlapping(101, date(2024, 3, 1), date(2024, 3, 3))
        0
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rooms: dict[int, RoomSnapshot] = {}
        self._reservations: dict[int, ReservationRecord] = {}
        # Like a database sequence, ids consumed by rolled-back inserts are not reused
        self._ids = itertools.count(1)

    def add_room(self, room: RoomSnapshot) -> None:
        with self._lock:
            self._rooms[room.room_id] = room

    @contextmanager
    def begin(self, deadline: Optional[Deadline] = None) -> Iterator[InMemoryBookingSession]:
        remaining = deadline.remaining() if deadline is not None else None
        acquired = self._lock.acquire(timeout=-1 if remaining is None else remaining)
        if not acquired:
            raise DeadlineExceededError("Operation deadline exceeded waiting for the booking store")
        try:
            session = InMemoryBookingSession(self._rooms, dict(self._reservations), self._ids)
            yield session
            self._reservations = session.reservations
        finally:
            self._lock.release()

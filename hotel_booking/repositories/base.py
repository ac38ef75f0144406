"""
Collaborator contracts consumed by the reservation services.

The services never touch a database handle directly: they open a session on
a UnitOfWork and talk to it through these protocols. Everything done inside
one ``begin()`` block commits together or not at all.
"""

from __future__ import annotations

from datetime import date
from typing import Any, ContextManager, Optional, Protocol

from hotel_booking.schemas.reservations import NewReservation, ReservationRecord, RoomSnapshot
from hotel_booking.utils.deadline import Deadline


class RoomLookup(Protocol):
    def get_room_with_type(self, room_id: int, for_update: bool = False) -> Optional[RoomSnapshot]:
        """
        Return the room joined with its room type, or None if it does not exist.

        With ``for_update`` the room is locked against concurrent writers
        until the session ends.
        """
        ...


class ReservationRepository(Protocol):
    def count_overlapping(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[int] = None,
    ) -> int: ...

    def insert(self, reservation: NewReservation) -> ReservationRecord:
        """Persist a new reservation; raises ConflictError if it overlaps an active one."""
        ...

    def update(self, reservation_id: int, data: dict[str, Any]) -> Optional[ReservationRecord]: ...

    def find_by_id(
        self, reservation_id: int, for_update: bool = False
    ) -> Optional[ReservationRecord]: ...

    def find_by_customer(
        self, customer_id: int, hotel_id: Optional[int] = None
    ) -> list[ReservationRecord]: ...

    def find_by_room(self, room_id: int) -> list[ReservationRecord]: ...

    def find_by_hotel(self, hotel_id: int) -> list[ReservationRecord]: ...

    def find_all(self) -> list[ReservationRecord]: ...


class BookingSession(RoomLookup, ReservationRepository, Protocol):
    """Room lookup and reservation repository bound to one transaction."""


class UnitOfWork(Protocol):
    def begin(self, deadline: Optional[Deadline] = None) -> ContextManager[BookingSession]:
        """
        Open a transactional session.

        Leaving the block normally commits; any exception rolls back every
        write made through the session and propagates.
        """
        ...

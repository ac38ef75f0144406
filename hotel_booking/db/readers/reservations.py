from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection
from sqlalchemy.sql import Select

from hotel_booking.models.reservations import Reservation
from hotel_booking.models.rooms import Room
from hotel_booking.schemas.reservations import ACTIVE_STATUSES, ReservationRecord

_ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_STATUSES]


def _ordered(stmt: Select) -> Select:
    return stmt.order_by(Reservation.check_in_date, Reservation.id)


def _to_records(conn: Connection, stmt: Select) -> list[ReservationRecord]:
    return [ReservationRecord(**row) for row in conn.execute(_ordered(stmt)).mappings()]


def count_overlapping(
    conn: Connection,
    room_id: int,
    check_in: date,
    check_out: date,
    exclude_reservation_id: Optional[int] = None,
) -> int:
    """
    Count pending/confirmed reservations on a room that overlap a date range.

    Overlap is half-open: existing.check_in < check_out AND existing.check_out > check_in.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room to scan.
        check_in (date): Requested check-in date.
        check_out (date): Requested check-out date.
        exclude_reservation_id (Optional[int]): Reservation being edited, ignored in the scan.

    Returns:
        int: Number of conflicting reservations.
    """
    stmt = (
        select(func.count())
        .select_from(Reservation)
        .where(Reservation.room_id == room_id)
        .where(Reservation.status.in_(_ACTIVE_STATUS_VALUES))
        .where(Reservation.check_in_date < check_out)
        .where(Reservation.check_out_date > check_in)
    )
    if exclude_reservation_id is not None:
        stmt = stmt.where(Reservation.id != exclude_reservation_id)

    return int(conn.execute(stmt).scalar_one())


def find_reservation_by_id(
    conn: Connection, reservation_id: int, for_update: bool = False
) -> Optional[ReservationRecord]:
    """
    Fetch a single reservation.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation ID.
        for_update (bool): Lock the row until the transaction ends.

    Returns:
        Optional[ReservationRecord]: The reservation or None if not found.
    """
    stmt = select(Reservation.__table__).where(Reservation.id == reservation_id)
    if for_update:
        stmt = stmt.with_for_update()
    row = conn.execute(stmt).mappings().fetchone()
    return ReservationRecord(**row) if row else None


def find_reservations_by_customer(
    conn: Connection, customer_id: int, hotel_id: Optional[int] = None
) -> list[ReservationRecord]:
    """
    List a customer's reservations, optionally restricted to one hotel.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        customer_id (int): Owner of the reservations.
        hotel_id (Optional[int]): Only rooms of this hotel when given.
    """
    stmt = select(Reservation.__table__).where(Reservation.customer_id == customer_id)
    if hotel_id is not None:
        stmt = stmt.join(Room, Room.id == Reservation.room_id).where(Room.hotel_id == hotel_id)
    return _to_records(conn, stmt)


def find_reservations_by_room(conn: Connection, room_id: int) -> list[ReservationRecord]:
    """List every reservation (any status) for a room."""
    return _to_records(conn, select(Reservation.__table__).where(Reservation.room_id == room_id))


def find_reservations_by_hotel(conn: Connection, hotel_id: int) -> list[ReservationRecord]:
    """List every reservation whose room belongs to a hotel (joins through rooms)."""
    stmt = (
        select(Reservation.__table__)
        .join(Room, Room.id == Reservation.room_id)
        .where(Room.hotel_id == hotel_id)
    )
    return _to_records(conn, stmt)


def find_all_reservations(conn: Connection) -> list[ReservationRecord]:
    return _to_records(conn, select(Reservation.__table__))

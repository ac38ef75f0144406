"""
PostgreSQL-backed unit of work.

Concurrency guarantees for a single room come from three layers, all inside
one ``engine.begin()`` transaction:

1. Writers lock the room row with SELECT ... FOR UPDATE before checking
   availability, so check-then-write is serialized across processes.
2. The no_room_overlap exclusion constraint rejects any overlapping
   pending/confirmed interval that slips past the check (SQLSTATE 23P01).
3. statement_timeout is set from the caller's deadline, so a statement
   blocked on a lock is cancelled by the server (SQLSTATE 57014).

Database errors are translated into the hotel_booking.errors taxonomy here,
and logged once.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from hotel_booking.db.readers.reservations import (
    count_overlapping,
    find_all_reservations,
    find_reservation_by_id,
    find_reservations_by_customer,
    find_reservations_by_hotel,
    find_reservations_by_room,
)
from hotel_booking.db.readers.rooms import get_room_with_type
from hotel_booking.db.writers.reservations import insert_reservation, update_reservation
from hotel_booking.errors import (
    BookingError,
    ConflictError,
    DeadlineExceededError,
    NotFoundError,
    StorageError,
)
from hotel_booking.schemas.reservations import NewReservation, ReservationRecord, RoomSnapshot
from hotel_booking.utils.deadline import Deadline

logger = structlog.get_logger(__name__)

EXCLUSION_VIOLATION = "23P01"
FOREIGN_KEY_VIOLATION = "23503"
SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"
QUERY_CANCELED = "57014"


def _sqlstate(exc: DBAPIError) -> Optional[str]:
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    orig = exc.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_db_error(exc: SQLAlchemyError) -> BookingError:
    """
    Map a SQLAlchemy/DBAPI error onto the booking error taxonomy.

    Args:
        exc: Error raised while talking to PostgreSQL.

    Returns:
        BookingError: ConflictError, DeadlineExceededError, NotFoundError or StorageError.
    """
    sqlstate = _sqlstate(exc) if isinstance(exc, DBAPIError) else None

    if sqlstate == EXCLUSION_VIOLATION:
        logger.warning("reservation_overlap_rejected_by_constraint")
        return ConflictError("Room is not available for the selected dates")
    if sqlstate in (SERIALIZATION_FAILURE, DEADLOCK_DETECTED):
        logger.warning("reservation_write_lost_race", sqlstate=sqlstate)
        return ConflictError("Reservation was modified concurrently, retry the operation")
    if sqlstate == QUERY_CANCELED:
        logger.warning("reservation_statement_timeout")
        return DeadlineExceededError("Operation deadline exceeded while waiting on the database")
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return NotFoundError("Room not found")

    logger.error("reservation_storage_error", sqlstate=sqlstate, error=str(exc))
    return StorageError("Reservation storage is unavailable", {"sqlstate": sqlstate})


class SqlBookingSession:
    """Room lookup and reservation repository bound to one open transaction."""

    def __init__(self, conn: Connection):
        self.conn = conn

    def get_room_with_type(self, room_id: int, for_update: bool = False) -> Optional[RoomSnapshot]:
        return get_room_with_type(self.conn, room_id, for_update=for_update)

    def count_overlapping(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        return count_overlapping(self.conn, room_id, check_in, check_out, exclude_reservation_id)

    def insert(self, reservation: NewReservation) -> ReservationRecord:
        return insert_reservation(self.conn, reservation)

    def update(self, reservation_id: int, data: dict[str, Any]) -> Optional[ReservationRecord]:
        return update_reservation(self.conn, reservation_id, data)

    def find_by_id(
        self, reservation_id: int, for_update: bool = False
    ) -> Optional[ReservationRecord]:
        return find_reservation_by_id(self.conn, reservation_id, for_update=for_update)

    def find_by_customer(
        self, customer_id: int, hotel_id: Optional[int] = None
    ) -> list[ReservationRecord]:
        return find_reservations_by_customer(self.conn, customer_id, hotel_id=hotel_id)

    def find_by_room(self, room_id: int) -> list[ReservationRecord]:
        return find_reservations_by_room(self.conn, room_id)

    def find_by_hotel(self, hotel_id: int) -> list[ReservationRecord]:
        return find_reservations_by_hotel(self.conn, hotel_id)

    def find_all(self) -> list[ReservationRecord]:
        return find_all_reservations(self.conn)


class SqlUnitOfWork:
    """
    Opens one database transaction per reservation operation.

    Example:
        >>> from hotel_booking.db.engine import engine
        >>> uow = SqlUnitOfWork(engine)
        >>> with uow.begin(Deadline(5)) as session:
        ...     session.find_by_id(42)
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def begin(self, deadline: Optional[Deadline] = None) -> Iterator[SqlBookingSession]:
        try:
            with self.engine.begin() as conn:
                timeout_ms = deadline.remaining_ms() if deadline is not None else None
                if timeout_ms is not None:
                    conn.execute(
                        text("SELECT set_config('statement_timeout', :timeout, true)"),
                        {"timeout": str(timeout_ms)},
                    )
                yield SqlBookingSession(conn)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc

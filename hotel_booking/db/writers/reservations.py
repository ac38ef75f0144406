from typing import Any, Optional

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from hotel_booking.models.reservations import Reservation
from hotel_booking.schemas.reservations import NewReservation, ReservationRecord
from hotel_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

UPDATABLE_COLUMNS = frozenset(
    {
        "room_id",
        "check_in_date",
        "check_out_date",
        "number_of_guests",
        "total_price",
        "status",
    }
)


def insert_reservation(conn: Connection, reservation: NewReservation) -> ReservationRecord:
    """
    Insert a reservation and return it with its assigned id.

    The no_room_overlap constraint is checked at statement time, so an
    overlapping insert raises IntegrityError here rather than at commit.

    Args:
        conn (Connection): SQLAlchemy DB connection (within transaction).
        reservation (NewReservation): Validated, priced reservation.

    Returns:
        ReservationRecord: The stored row.
    """
    now = utc_now()
    values = reservation.model_dump(mode="python")
    values["status"] = reservation.status.value
    values["created_at"] = now
    values["updated_at"] = now

    stmt = insert(Reservation).values(**values).returning(*Reservation.__table__.c)
    row = conn.execute(stmt).mappings().one()

    logger.debug("reservation_row_inserted", reservation_id=row["id"], room_id=row["room_id"])
    return ReservationRecord(**row)


def update_reservation(
    conn: Connection, reservation_id: int, data: dict[str, Any]
) -> Optional[ReservationRecord]:
    """
    Update reservation fields for an existing reservation.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation ID.
        data (dict): Fields to update; keys outside UPDATABLE_COLUMNS are rejected.

    Returns:
        Optional[ReservationRecord]: The updated row, or None if it does not exist.
    """
    unknown = set(data) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update reservation columns: {sorted(unknown)}")

    values = dict(data)
    if "status" in values and hasattr(values["status"], "value"):
        values["status"] = values["status"].value
    values["updated_at"] = utc_now()

    stmt = (
        update(Reservation)
        .where(Reservation.id == reservation_id)
        .values(**values)
        .returning(*Reservation.__table__.c)
    )
    row = conn.execute(stmt).mappings().fetchone()
    return ReservationRecord(**row) if row else None

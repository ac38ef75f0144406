# models/reservations.py

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    event,
    text,
)
from sqlalchemy.sql import func

from hotel_booking.config import SCHEMA
from hotel_booking.models.base import Base

NO_ROOM_OVERLAP_CONSTRAINT = "no_room_overlap"


class Reservation(Base):
    """
    ORM model for room reservations.

    A reservation holds its room for the half-open interval
    [check_in_date, check_out_date) while its status is pending or confirmed.
    The no_room_overlap exclusion constraint (btree_gist) guarantees that no
    two such intervals on one room intersect, so a stay ending on day X and
    one starting on day X can coexist. Cancelled rows are kept for history.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_reservations_dates_ordered"),
        CheckConstraint("number_of_guests > 0", name="ck_reservations_guests_positive"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="ck_reservations_status"
        ),
        Index("idx_reservations_dates", "check_in_date", "check_out_date"),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, nullable=False, index=True)  # Owned by the users service
    room_id = Column(
        Integer, ForeignKey(f"{SCHEMA}.rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    number_of_guests = Column(Integer, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, server_default=text("'pending'"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


# Also applied by the alembic migration; this covers metadata.create_all()
event.listen(
    Reservation.__table__,
    "after_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist"),
)
event.listen(
    Reservation.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE {SCHEMA}.reservations ADD CONSTRAINT {NO_ROOM_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist (room_id WITH =, daterange(check_in_date, check_out_date, '[)') WITH &&) "
        "WHERE (status IN ('pending', 'confirmed'))"
    ),
)

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from hotel_booking.config import SCHEMA
from hotel_booking.models.base import Base


class Room(Base):
    """
    ORM model for physical rooms.

    Reservations lock the room row (SELECT ... FOR UPDATE) for the duration
    of their check-and-write transaction.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("hotel_id", "room_number", name="uq_rooms_hotel_room_number"),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    hotel_id = Column(
        Integer,
        ForeignKey(f"{SCHEMA}.hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_type_id = Column(Integer, ForeignKey(f"{SCHEMA}.room_types.id"), nullable=False)
    room_number = Column(String(10), nullable=False)
    floor = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

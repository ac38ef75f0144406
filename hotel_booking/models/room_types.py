from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from hotel_booking.config import SCHEMA
from hotel_booking.models.base import Base


class RoomType(Base):
    """
    ORM model for room types.

    base_price is the nightly price used to compute reservation totals and
    capacity bounds the number of guests a reservation may hold.
    """

    __tablename__ = "room_types"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_room_types_capacity_positive"),
        CheckConstraint("base_price >= 0", name="ck_room_types_base_price_non_negative"),
        {"schema": SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

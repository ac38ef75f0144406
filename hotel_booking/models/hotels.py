from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from hotel_booking.config import SCHEMA
from hotel_booking.models.base import Base


class Hotel(Base):
    """
    ORM model for hotels. Managed by the hotel CRUD layer; this package only
    joins through it to scope staff access.
    """

    __tablename__ = "hotels"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

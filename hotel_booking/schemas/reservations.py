from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    CUSTOMER = "Customer"
    STAFF = "Staff"
    ADMIN = "Admin"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# Statuses that hold a room; only these take part in overlap checks
ACTIVE_STATUSES: tuple[ReservationStatus, ...] = (
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
)


class ActiveUser(BaseModel):
    """
    Identity of the caller, as produced by the authentication layer.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int = Field(..., description="Authenticated user ID")
    role: UserRole = Field(..., description="Customer, Staff or Admin")
    hotel_id: Optional[int] = Field(None, description="Hotel the staff member is assigned to")


class RoomSnapshot(BaseModel):
    """
    Immutable view of a room joined with its room type, fetched per operation.
    """

    model_config = ConfigDict(frozen=True)

    room_id: int
    hotel_id: int
    room_type_id: int
    capacity: int = Field(..., gt=0)
    base_price: Decimal = Field(..., description="Nightly base price of the room type")


class ReservationCreatePayload(BaseModel):
    """
    Schema for creating a reservation. Date ordering is checked by the service.
    """

    room_id: int = Field(..., ge=1, description="Room to book")
    check_in_date: date = Field(..., description="First night of the stay")
    check_out_date: date = Field(..., description="Departure date (not a night)")
    number_of_guests: int = Field(..., ge=1, description="Guests staying in the room")


class ReservationUpdatePayload(BaseModel):
    """
    Schema for editing a pending reservation. All fields are optional; only
    fields explicitly set are applied.
    """

    room_id: Optional[int] = Field(None, ge=1)
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: Optional[int] = Field(None, ge=1)


class ReservationRecord(BaseModel):
    """
    A reservation as stored, returned by every lifecycle operation.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    room_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    total_price: Decimal
    status: ReservationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class NewReservation(BaseModel):
    """
    Fields of a reservation about to be inserted; the store assigns ``id``.
    """

    customer_id: int
    room_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    total_price: Decimal
    status: ReservationStatus = ReservationStatus.PENDING

"""
Shared fixtures for unit tests: an in-memory booking store with two hotels,
a service pinned to a fixed "today", and one caller per role.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hotel_booking.repositories.memory import InMemoryUnitOfWork
from hotel_booking.schemas.reservations import ActiveUser, RoomSnapshot, UserRole
from hotel_booking.services.reservations import ReservationService

TODAY = date(2024, 2, 1)

ROOM_101 = RoomSnapshot(
    room_id=101, hotel_id=1, room_type_id=1, capacity=2, base_price=Decimal("100.00")
)
ROOM_102 = RoomSnapshot(
    room_id=102, hotel_id=1, room_type_id=2, capacity=4, base_price=Decimal("149.99")
)
ROOM_201 = RoomSnapshot(
    room_id=201, hotel_id=2, room_type_id=3, capacity=2, base_price=Decimal("80.00")
)


@pytest.fixture
def store() -> InMemoryUnitOfWork:
    """In-memory unit of work seeded with rooms 101, 102 (hotel 1) and 201 (hotel 2)."""
    uow = InMemoryUnitOfWork()
    for room in (ROOM_101, ROOM_102, ROOM_201):
        uow.add_room(room)
    return uow


@pytest.fixture
def service(store: InMemoryUnitOfWork) -> ReservationService:
    return ReservationService(store, today=lambda: TODAY, default_timeout=None)


@pytest.fixture
def customer() -> ActiveUser:
    return ActiveUser(user_id=7, role=UserRole.CUSTOMER)


@pytest.fixture
def other_customer() -> ActiveUser:
    return ActiveUser(user_id=8, role=UserRole.CUSTOMER)


@pytest.fixture
def staff() -> ActiveUser:
    """Staff member of hotel 1."""
    return ActiveUser(user_id=50, role=UserRole.STAFF, hotel_id=1)


@pytest.fixture
def foreign_staff() -> ActiveUser:
    """Staff member of hotel 2."""
    return ActiveUser(user_id=51, role=UserRole.STAFF, hotel_id=2)


@pytest.fixture
def admin() -> ActiveUser:
    return ActiveUser(user_id=1, role=UserRole.ADMIN)

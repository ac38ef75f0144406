"""
Shared fixtures for PostgreSQL integration tests.

Requires DATABASE_URL pointing at a database with migrations applied
(``alembic upgrade head``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Generator

import pytest
from sqlalchemy import text

from hotel_booking.config import DATABASE_URL
from hotel_booking.repositories.sql import SqlUnitOfWork
from hotel_booking.services.reservations import ReservationService

# Without a database the integration suite is not collected
collect_ignore_glob = [] if DATABASE_URL else ["*.py"]


@dataclass(frozen=True)
class SeededHotel:
    hotel_id: int
    room_id: int
    large_room_id: int


def _seed_hotel(name: str) -> SeededHotel:
    from hotel_booking.db.engine import engine

    with engine.begin() as conn:
        hotel_id = conn.execute(
            text("INSERT INTO booking.hotels (name) VALUES (:name) RETURNING id"),
            {"name": name},
        ).scalar_one()
        double_id = conn.execute(
            text(
                """
                INSERT INTO booking.room_types (name, base_price, capacity)
                VALUES ('Double', 100.00, 2)
                RETURNING id
                """
            )
        ).scalar_one()
        family_id = conn.execute(
            text(
                """
                INSERT INTO booking.room_types (name, base_price, capacity)
                VALUES ('Family', 149.99, 4)
                RETURNING id
                """
            )
        ).scalar_one()
        room_id = conn.execute(
            text(
                """
                INSERT INTO booking.rooms (hotel_id, room_type_id, room_number, floor)
                VALUES (:hotel_id, :room_type_id, '101', 1)
                RETURNING id
                """
            ),
            {"hotel_id": hotel_id, "room_type_id": double_id},
        ).scalar_one()
        large_room_id = conn.execute(
            text(
                """
                INSERT INTO booking.rooms (hotel_id, room_type_id, room_number, floor)
                VALUES (:hotel_id, :room_type_id, '102', 1)
                RETURNING id
                """
            ),
            {"hotel_id": hotel_id, "room_type_id": family_id},
        ).scalar_one()
    return SeededHotel(hotel_id=hotel_id, room_id=room_id, large_room_id=large_room_id)


def _delete_hotel(seeded: SeededHotel) -> None:
    from hotel_booking.db.engine import engine

    with engine.begin() as conn:
        # rooms and reservations cascade from the hotel
        room_type_ids = conn.execute(
            text("SELECT DISTINCT room_type_id FROM booking.rooms WHERE hotel_id = :hotel_id"),
            {"hotel_id": seeded.hotel_id},
        ).scalars().all()
        conn.execute(
            text("DELETE FROM booking.hotels WHERE id = :hotel_id"),
            {"hotel_id": seeded.hotel_id},
        )
        conn.execute(
            text("DELETE FROM booking.room_types WHERE id = ANY(:ids)"),
            {"ids": list(room_type_ids)},
        )


@pytest.fixture
def hotel() -> Generator[SeededHotel, None, None]:
    """
    Create a hotel with a double room (100.00, 2 guests) and a family room
    (149.99, 4 guests). Everything is deleted after the test.
    """
    seeded = _seed_hotel("Integration Test Hotel")
    yield seeded
    _delete_hotel(seeded)


@pytest.fixture
def other_hotel() -> Generator[SeededHotel, None, None]:
    seeded = _seed_hotel("Integration Test Hotel (other)")
    yield seeded
    _delete_hotel(seeded)


@pytest.fixture
def sql_service() -> ReservationService:
    """ReservationService on PostgreSQL, pinned to 2024-02-01 as today."""
    from hotel_booking.db.engine import engine

    return ReservationService(
        SqlUnitOfWork(engine), today=lambda: date(2024, 2, 1), default_timeout=10
    )

"""Integration tests for reservation readers and writers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hotel_booking.db.engine import engine
from hotel_booking.db.readers.reservations import (
    count_overlapping,
    find_reservation_by_id,
    find_reservations_by_customer,
    find_reservations_by_hotel,
    find_reservations_by_room,
)
from hotel_booking.db.readers.rooms import get_room_with_type
from hotel_booking.db.writers.reservations import insert_reservation, update_reservation
from hotel_booking.schemas.reservations import NewReservation, ReservationStatus

CUSTOMER_ID = 424242


def _new(room_id: int, check_in: date, check_out: date, **overrides: object) -> NewReservation:
    fields: dict[str, object] = {
        "customer_id": CUSTOMER_ID,
        "room_id": room_id,
        "check_in_date": check_in,
        "check_out_date": check_out,
        "number_of_guests": 2,
        "total_price": Decimal("200.00"),
    }
    fields.update(overrides)
    return NewReservation(**fields)  # type: ignore[arg-type]


@pytest.mark.integration
def test_get_room_with_type(hotel) -> None:
    """Test that room lookup joins the room type's capacity and rate."""
    with engine.begin() as conn:
        room = get_room_with_type(conn, hotel.room_id)
        locked = get_room_with_type(conn, hotel.room_id, for_update=True)
        missing = get_room_with_type(conn, -1)

    assert room is not None
    assert room.hotel_id == hotel.hotel_id
    assert room.capacity == 2
    assert room.base_price == Decimal("100.00")
    assert locked == room
    assert missing is None


@pytest.mark.integration
def test_insert_and_find_reservation(hotel) -> None:
    """Test that inserted rows round-trip with id, status and timestamps."""
    with engine.begin() as conn:
        created = insert_reservation(conn, _new(hotel.room_id, date(2024, 3, 1), date(2024, 3, 3)))

    with engine.begin() as conn:
        found = find_reservation_by_id(conn, created.id)

    assert found == created
    assert created.status == ReservationStatus.PENDING
    assert created.total_price == Decimal("200.00")
    assert created.created_at is not None


@pytest.mark.integration
def test_update_reservation(hotel) -> None:
    """Test that updates apply whitelisted columns and refresh updated_at."""
    with engine.begin() as conn:
        created = insert_reservation(conn, _new(hotel.room_id, date(2024, 3, 1), date(2024, 3, 3)))
        updated = update_reservation(
            conn,
            created.id,
            {"check_out_date": date(2024, 3, 4), "total_price": Decimal("300.00")},
        )
        cancelled = update_reservation(conn, created.id, {"status": ReservationStatus.CANCELLED})
        missing = update_reservation(conn, -1, {"number_of_guests": 1})

    assert updated is not None and updated.check_out_date == date(2024, 3, 4)
    assert updated.total_price == Decimal("300.00")
    assert cancelled is not None and cancelled.status == ReservationStatus.CANCELLED
    assert missing is None


@pytest.mark.integration
def test_update_rejects_unknown_columns(hotel) -> None:
    with engine.begin() as conn:
        created = insert_reservation(conn, _new(hotel.room_id, date(2024, 3, 1), date(2024, 3, 3)))
        with pytest.raises(ValueError):
            update_reservation(conn, created.id, {"customer_id": 1})


@pytest.mark.integration
def test_count_overlapping(hotel) -> None:
    """Test half-open overlap, status filter and self-exclusion in SQL."""
    with engine.begin() as conn:
        first = insert_reservation(conn, _new(hotel.room_id, date(2024, 3, 1), date(2024, 3, 3)))
        insert_reservation(
            conn,
            _new(
                hotel.room_id,
                date(2024, 3, 1),
                date(2024, 3, 3),
                status=ReservationStatus.CANCELLED,
            ),
        )

        assert count_overlapping(conn, hotel.room_id, date(2024, 3, 2), date(2024, 3, 4)) == 1
        assert count_overlapping(conn, hotel.room_id, date(2024, 3, 3), date(2024, 3, 5)) == 0
        assert count_overlapping(conn, hotel.room_id, date(2024, 2, 27), date(2024, 3, 1)) == 0
        assert (
            count_overlapping(conn, hotel.room_id, date(2024, 3, 2), date(2024, 3, 4), first.id)
            == 0
        )


@pytest.mark.integration
def test_finders_filter_and_order(hotel, other_hotel) -> None:
    """Test customer, room and hotel finders order by check-in then id."""
    with engine.begin() as conn:
        late = insert_reservation(conn, _new(hotel.room_id, date(2024, 4, 1), date(2024, 4, 2)))
        early = insert_reservation(conn, _new(hotel.room_id, date(2024, 3, 1), date(2024, 3, 2)))
        family = insert_reservation(
            conn, _new(hotel.large_room_id, date(2024, 3, 1), date(2024, 3, 2))
        )
        elsewhere = insert_reservation(
            conn, _new(other_hotel.room_id, date(2024, 3, 5), date(2024, 3, 6))
        )

    with engine.begin() as conn:
        assert find_reservations_by_room(conn, hotel.room_id) == [early, late]
        assert find_reservations_by_hotel(conn, hotel.hotel_id) == [early, family, late]
        assert find_reservations_by_hotel(conn, other_hotel.hotel_id) == [elsewhere]
        assert find_reservations_by_customer(conn, CUSTOMER_ID, hotel_id=other_hotel.hotel_id) == [
            elsewhere
        ]
        mine = find_reservations_by_customer(conn, CUSTOMER_ID)

    assert [r.id for r in mine if r.id in {early.id, family.id, late.id, elsewhere.id}] == [
        early.id,
        family.id,
        elsewhere.id,
        late.id,
    ]

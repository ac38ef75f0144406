"""Unit tests for the availability checker."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest
from prometheus_client import REGISTRY

from hotel_booking.errors import StorageError
from hotel_booking.repositories.memory import InMemoryUnitOfWork
from hotel_booking.schemas.reservations import NewReservation, ReservationStatus
from hotel_booking.services.availability import is_room_available


def _book(
    store: InMemoryUnitOfWork,
    check_in: date,
    check_out: date,
    status: ReservationStatus = ReservationStatus.PENDING,
    room_id: int = 101,
) -> int:
    with store.begin() as session:
        record = session.insert(
            NewReservation(
                customer_id=7,
                room_id=room_id,
                check_in_date=check_in,
                check_out_date=check_out,
                number_of_guests=1,
                total_price=Decimal("100.00"),
                status=status,
            )
        )
    return record.id


def _checks(result: str) -> float:
    return REGISTRY.get_sample_value("booking_availability_checks_total", {"result": result}) or 0.0


@pytest.mark.unit
def test_empty_room_is_available(store: InMemoryUnitOfWork) -> None:
    """Test that a room with no reservations is free."""
    with store.begin() as session:
        assert is_room_available(session, 101, date(2024, 3, 1), date(2024, 3, 3)) is True


@pytest.mark.unit
def test_overlapping_range_is_unavailable(store: InMemoryUnitOfWork) -> None:
    """Test that any intersection with an active reservation blocks the room."""
    _book(store, date(2024, 3, 1), date(2024, 3, 5))

    with store.begin() as session:
        assert is_room_available(session, 101, date(2024, 3, 4), date(2024, 3, 6)) is False
        assert is_room_available(session, 101, date(2024, 2, 28), date(2024, 3, 2)) is False
        assert is_room_available(session, 101, date(2024, 3, 2), date(2024, 3, 3)) is False
        assert is_room_available(session, 101, date(2024, 2, 1), date(2024, 4, 1)) is False


@pytest.mark.unit
def test_back_to_back_stays_do_not_conflict(store: InMemoryUnitOfWork) -> None:
    """Test that check-out day X leaves the room free for check-in day X."""
    _book(store, date(2024, 3, 1), date(2024, 3, 3))

    with store.begin() as session:
        assert is_room_available(session, 101, date(2024, 3, 3), date(2024, 3, 5)) is True
        assert is_room_available(session, 101, date(2024, 2, 27), date(2024, 3, 1)) is True


@pytest.mark.unit
def test_confirmed_reservations_block_and_cancelled_do_not(store: InMemoryUnitOfWork) -> None:
    """Test that only pending and confirmed reservations hold dates."""
    _book(store, date(2024, 3, 1), date(2024, 3, 3), status=ReservationStatus.CANCELLED)

    with store.begin() as session:
        assert is_room_available(session, 101, date(2024, 3, 1), date(2024, 3, 3)) is True

    _book(store, date(2024, 3, 1), date(2024, 3, 3), status=ReservationStatus.CONFIRMED)

    with store.begin() as session:
        assert is_room_available(session, 101, date(2024, 3, 1), date(2024, 3, 3)) is False


@pytest.mark.unit
def test_other_rooms_are_ignored(store: InMemoryUnitOfWork) -> None:
    """Test that reservations on another room do not affect the result."""
    _book(store, date(2024, 3, 1), date(2024, 3, 3), room_id=102)

    with store.begin() as session:
        assert is_room_available(session, 101, date(2024, 3, 1), date(2024, 3, 3)) is True


@pytest.mark.unit
def test_excluded_reservation_is_skipped(store: InMemoryUnitOfWork) -> None:
    """Test that a reservation being edited does not conflict with itself."""
    reservation_id = _book(store, date(2024, 3, 1), date(2024, 3, 5))

    with store.begin() as session:
        assert (
            is_room_available(
                session,
                101,
                date(2024, 3, 2),
                date(2024, 3, 6),
                exclude_reservation_id=reservation_id,
            )
            is True
        )


@pytest.mark.unit
def test_check_is_idempotent(store: InMemoryUnitOfWork) -> None:
    """Test that repeating a check without writes gives the same answer."""
    _book(store, date(2024, 3, 1), date(2024, 3, 3))

    with store.begin() as session:
        first = is_room_available(session, 101, date(2024, 3, 2), date(2024, 3, 4))
        second = is_room_available(session, 101, date(2024, 3, 2), date(2024, 3, 4))

    assert first is second is False


@pytest.mark.unit
def test_check_records_metric() -> None:
    """Test that each check increments the availability counter by result."""
    repository = Mock()
    repository.count_overlapping.side_effect = [0, 2]
    available_before = _checks("available")
    unavailable_before = _checks("unavailable")

    is_room_available(repository, 101, date(2024, 3, 1), date(2024, 3, 2))
    is_room_available(repository, 101, date(2024, 3, 1), date(2024, 3, 2))

    assert _checks("available") == available_before + 1
    assert _checks("unavailable") == unavailable_before + 1
    repository.count_overlapping.assert_called_with(
        101, date(2024, 3, 1), date(2024, 3, 2), None
    )


@pytest.mark.unit
def test_repository_errors_propagate() -> None:
    """Test that a storage failure is not reported as 'unavailable'."""
    repository = Mock()
    repository.count_overlapping.side_effect = StorageError("down")

    with pytest.raises(StorageError):
        is_room_available(repository, 101, date(2024, 3, 1), date(2024, 3, 2))

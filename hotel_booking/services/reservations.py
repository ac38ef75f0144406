"""
Reservation lifecycle manager.

Orchestrates admission control for reservations: date validation, room and
capacity lookup, availability, pricing and the status machine

    pending -> confirmed
    pending -> cancelled

Confirmed and cancelled reservations are terminal here: edits and
cancellation are rejected. Cancelling keeps the row with status cancelled.

Every write runs in one unit-of-work session that first locks the target
room, so two overlapping creates for the same room can never both succeed.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterator, Optional

import structlog

from hotel_booking.config import BOOKING_OPERATION_TIMEOUT_SECONDS
from hotel_booking.errors import (
    AuthorizationError,
    BookingError,
    ConflictError,
    DeadlineExceededError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from hotel_booking.metrics import reservation_operation_duration, reservation_operations
from hotel_booking.repositories.base import BookingSession, UnitOfWork
from hotel_booking.schemas.reservations import (
    ActiveUser,
    NewReservation,
    ReservationCreatePayload,
    ReservationRecord,
    ReservationStatus,
    ReservationUpdatePayload,
    RoomSnapshot,
    UserRole,
)
from hotel_booking.services.availability import is_room_available
from hotel_booking.services.pricing import calculate_total_price
from hotel_booking.utils.dates import validate_stay_dates
from hotel_booking.utils.deadline import Deadline

logger = structlog.get_logger(__name__)

_OUTCOMES: dict[type[BookingError], str] = {
    ValidationError: "validation",
    NotFoundError: "not_found",
    AuthorizationError: "forbidden",
    ConflictError: "conflict",
    StorageError: "storage",
    DeadlineExceededError: "deadline",
}

# Fields whose change requires re-running admission control
_ADMISSION_FIELDS = frozenset({"room_id", "check_in_date", "check_out_date", "number_of_guests"})


@contextmanager
def _track(operation: str, user: Optional[ActiveUser] = None) -> Iterator[None]:
    """Record duration and outcome of a write, and log business rejections."""
    context: dict[str, object] = {"operation": operation}
    if user is not None:
        context.update(user_id=user.user_id, role=user.role.value)

    with structlog.contextvars.bound_contextvars(**context):
        with reservation_operation_duration.labels(operation=operation).time():
            try:
                yield
            except BookingError as exc:
                outcome = _OUTCOMES.get(type(exc), "error")
                reservation_operations.labels(operation=operation, outcome=outcome).inc()
                if isinstance(exc, DeadlineExceededError):
                    logger.warning("reservation_deadline_exceeded", reason=exc.message)
                elif not isinstance(exc, StorageError):
                    # Storage errors are logged where they are translated
                    logger.info(
                        "reservation_rejected",
                        outcome=outcome,
                        reason=exc.message,
                        detail=exc.detail,
                    )
                raise
    reservation_operations.labels(operation=operation, outcome="success").inc()


def _require_customer(user: ActiveUser) -> None:
    if user.role != UserRole.CUSTOMER:
        raise AuthorizationError("Only customers can create reservations")


def _require_staff_hotel(user: ActiveUser) -> int:
    if user.role != UserRole.STAFF:
        raise AuthorizationError("Only hotel staff can perform this action")
    if user.hotel_id is None:
        raise AuthorizationError("Staff member is not assigned to a hotel")
    return user.hotel_id


def _check_capacity(room: RoomSnapshot, number_of_guests: int) -> None:
    if number_of_guests > room.capacity:
        raise ValidationError(
            "Number of guests exceeds room capacity",
            {"number_of_guests": number_of_guests, "capacity": room.capacity},
        )


def _require_editable(reservation: ReservationRecord, action: str) -> None:
    if reservation.status == ReservationStatus.CONFIRMED:
        raise AuthorizationError(f"Reservation is confirmed, can't be {action}")
    if reservation.status == ReservationStatus.CANCELLED:
        raise AuthorizationError(f"Reservation is cancelled, can't be {action}")


class ReservationService:
    """
    Entry point for the CRUD layer: create, read, update, cancel and confirm
    reservations on behalf of an authenticated caller.

    Access rules:
        Customer: creates reservations; sees, edits and cancels only their own.
        Staff: sees, edits and cancels reservations for rooms of their hotel.
        Admin: sees, edits and cancels any reservation; cannot create.

    Args:
        uow: Unit of work providing transactional booking sessions.
        today: Clock for "check-in not in the past" (injectable for tests).
        default_timeout: Deadline in seconds applied when a call passes none;
            None or 0 disables it.

    Example:
        >>> service = ReservationService(SqlUnitOfWork(engine))
        >>> service.create_reservation(payload, user)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        today: Callable[[], date] = date.today,
        default_timeout: Optional[float] = BOOKING_OPERATION_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.today = today
        self.default_timeout = default_timeout

    def _deadline(self, timeout: Optional[float]) -> Deadline:
        return Deadline(self.default_timeout if timeout is None else timeout)

    @staticmethod
    def _load_room(session: BookingSession, room_id: int, lock: bool = False) -> RoomSnapshot:
        room = session.get_room_with_type(room_id, for_update=lock)
        if room is None:
            raise NotFoundError("Room not found", {"room_id": room_id})
        return room

    @staticmethod
    def _load_reservation(
        session: BookingSession, reservation_id: int, lock: bool = False
    ) -> ReservationRecord:
        reservation = session.find_by_id(reservation_id, for_update=lock)
        if reservation is None:
            raise NotFoundError("Reservation not found", {"reservation_id": reservation_id})
        return reservation

    @staticmethod
    def _authorize_access(
        session: BookingSession, reservation: ReservationRecord, user: ActiveUser
    ) -> None:
        """Raise AuthorizationError unless the caller may act on this reservation."""
        if user.role == UserRole.ADMIN:
            return
        if user.role == UserRole.CUSTOMER:
            if reservation.customer_id != user.user_id:
                raise AuthorizationError("You can only access your own reservations")
            return

        hotel_id = _require_staff_hotel(user)
        room = session.get_room_with_type(reservation.room_id)
        if room is None or room.hotel_id != hotel_id:
            raise AuthorizationError("You are not allowed to see other hotels info!")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_reservation(
        self,
        payload: ReservationCreatePayload,
        user: ActiveUser,
        timeout: Optional[float] = None,
    ) -> ReservationRecord:
        """
        Admit a new reservation in status pending for the calling customer.

        Raises:
            AuthorizationError: caller is not a customer
            ValidationError: bad dates, or guests exceed room capacity
            NotFoundError: room does not exist
            ConflictError: room already booked for an overlapping range
        """
        with _track("create", user):
            _require_customer(user)
            validate_stay_dates(payload.check_in_date, payload.check_out_date, self.today())

            deadline = self._deadline(timeout)
            with self.uow.begin(deadline) as session:
                room = self._load_room(session, payload.room_id, lock=True)
                _check_capacity(room, payload.number_of_guests)

                deadline.check("availability_check")
                if not is_room_available(
                    session, room.room_id, payload.check_in_date, payload.check_out_date
                ):
                    raise ConflictError(
                        "Room is not available for the selected dates",
                        {"room_id": room.room_id},
                    )

                total_price = calculate_total_price(
                    room.base_price, payload.check_in_date, payload.check_out_date
                )

                deadline.check("insert")
                reservation = session.insert(
                    NewReservation(
                        customer_id=user.user_id,
                        room_id=room.room_id,
                        check_in_date=payload.check_in_date,
                        check_out_date=payload.check_out_date,
                        number_of_guests=payload.number_of_guests,
                        total_price=total_price,
                        status=ReservationStatus.PENDING,
                    )
                )

        logger.info(
            "reservation_created",
            reservation_id=reservation.id,
            room_id=reservation.room_id,
            customer_id=reservation.customer_id,
            total_price=str(reservation.total_price),
        )
        return reservation

    def update_reservation(
        self,
        reservation_id: int,
        payload: ReservationUpdatePayload,
        user: ActiveUser,
        timeout: Optional[float] = None,
    ) -> ReservationRecord:
        """
        Apply a partial edit to a pending reservation.

        When the room, dates or guest count change, the merged reservation goes
        through admission control again (its own interval excluded from the
        availability scan) and the price is recomputed.

        Raises:
            NotFoundError: reservation (or new room) does not exist
            AuthorizationError: caller out of scope, or reservation not pending
            ValidationError: bad dates or capacity exceeded
            ConflictError: new range overlaps another reservation
        """
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        with _track("update", user):
            deadline = self._deadline(timeout)
            with self.uow.begin(deadline) as session:
                existing = self._load_reservation(session, reservation_id, lock=True)
                self._authorize_access(session, existing, user)
                _require_editable(existing, "updated")

                if not _ADMISSION_FIELDS.intersection(changes):
                    return existing

                merged = existing.model_copy(update=changes)
                validate_stay_dates(merged.check_in_date, merged.check_out_date, self.today())

                deadline.check("load_room")
                room = self._load_room(session, merged.room_id, lock=True)
                if user.role == UserRole.STAFF and room.hotel_id != user.hotel_id:
                    raise AuthorizationError("You are not allowed to see other hotels info!")
                _check_capacity(room, merged.number_of_guests)

                deadline.check("availability_check")
                if not is_room_available(
                    session,
                    room.room_id,
                    merged.check_in_date,
                    merged.check_out_date,
                    exclude_reservation_id=existing.id,
                ):
                    raise ConflictError(
                        "Room is not available for the selected dates",
                        {"room_id": room.room_id},
                    )

                changes["total_price"] = calculate_total_price(
                    room.base_price, merged.check_in_date, merged.check_out_date
                )

                deadline.check("update")
                updated = session.update(existing.id, changes)
                if updated is None:
                    raise NotFoundError("Reservation not found", {"reservation_id": reservation_id})

        logger.info(
            "reservation_updated",
            reservation_id=updated.id,
            room_id=updated.room_id,
            total_price=str(updated.total_price),
        )
        return updated

    def cancel_reservation(
        self, reservation_id: int, user: ActiveUser, timeout: Optional[float] = None
    ) -> ReservationRecord:
        """
        Move a pending reservation to cancelled, freeing its dates.

        The row is kept for history; it no longer takes part in availability.

        Raises:
            NotFoundError: reservation does not exist
            AuthorizationError: caller out of scope, or reservation not pending
        """
        with _track("cancel", user):
            deadline = self._deadline(timeout)
            with self.uow.begin(deadline) as session:
                existing = self._load_reservation(session, reservation_id, lock=True)
                self._authorize_access(session, existing, user)
                _require_editable(existing, "cancelled")

                deadline.check("update")
                cancelled = session.update(existing.id, {"status": ReservationStatus.CANCELLED})
                if cancelled is None:
                    raise NotFoundError("Reservation not found", {"reservation_id": reservation_id})

        logger.info("reservation_cancelled", reservation_id=cancelled.id, room_id=cancelled.room_id)
        return cancelled

    def confirm_reservation(
        self, reservation_id: int, timeout: Optional[float] = None
    ) -> ReservationRecord:
        """
        Move a pending reservation to confirmed.

        Called by the payment integration once a payment has succeeded, not
        by end users, so no caller identity is checked.

        Raises:
            NotFoundError: reservation does not exist
            AuthorizationError: reservation is not pending
        """
        with _track("confirm"):
            deadline = self._deadline(timeout)
            with self.uow.begin(deadline) as session:
                existing = self._load_reservation(session, reservation_id, lock=True)
                if existing.status != ReservationStatus.PENDING:
                    raise AuthorizationError(
                        "Only pending reservations can be confirmed",
                        {"status": existing.status.value},
                    )

                deadline.check("update")
                confirmed = session.update(existing.id, {"status": ReservationStatus.CONFIRMED})
                if confirmed is None:
                    raise NotFoundError("Reservation not found", {"reservation_id": reservation_id})

        logger.info("reservation_confirmed", reservation_id=confirmed.id)
        return confirmed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_reservation(
        self, reservation_id: int, user: ActiveUser, timeout: Optional[float] = None
    ) -> ReservationRecord:
        """
        Raises:
            NotFoundError: reservation does not exist
            AuthorizationError: reservation belongs to another customer or hotel
        """
        with self.uow.begin(self._deadline(timeout)) as session:
            reservation = self._load_reservation(session, reservation_id)
            self._authorize_access(session, reservation, user)
        return reservation

    def list_reservations(
        self, user: ActiveUser, timeout: Optional[float] = None
    ) -> list[ReservationRecord]:
        """
        Reservations in the caller's scope: own for customers, own hotel for
        staff, everything for admins.
        """
        with self.uow.begin(self._deadline(timeout)) as session:
            if user.role == UserRole.CUSTOMER:
                return session.find_by_customer(user.user_id)
            if user.role == UserRole.ADMIN:
                return session.find_all()
            return session.find_by_hotel(_require_staff_hotel(user))

    def list_reservations_for_room(
        self, room_id: int, user: ActiveUser, timeout: Optional[float] = None
    ) -> list[ReservationRecord]:
        """
        All reservations of one room, for staff of its hotel and admins.

        Raises:
            AuthorizationError: caller is a customer, or staff of another hotel
            NotFoundError: room does not exist
        """
        if user.role == UserRole.CUSTOMER:
            raise AuthorizationError("Only hotel staff can perform this action")

        with self.uow.begin(self._deadline(timeout)) as session:
            room = self._load_room(session, room_id)
            if user.role == UserRole.STAFF and room.hotel_id != _require_staff_hotel(user):
                raise AuthorizationError("You are not allowed to see other hotels info!")
            return session.find_by_room(room_id)

    def list_reservations_for_customer(
        self, customer_id: int, user: ActiveUser, timeout: Optional[float] = None
    ) -> list[ReservationRecord]:
        """
        Reservations of one customer.

        Customers may only ask for themselves; staff get that customer's
        reservations at their own hotel only.

        Raises:
            AuthorizationError: a customer asked for someone else
        """
        if user.role == UserRole.CUSTOMER and user.user_id != customer_id:
            raise AuthorizationError("You can only view your own reservations")

        with self.uow.begin(self._deadline(timeout)) as session:
            if user.role == UserRole.STAFF:
                return session.find_by_customer(customer_id, hotel_id=_require_staff_hotel(user))
            return session.find_by_customer(customer_id)

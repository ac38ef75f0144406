import argparse
import logging
from datetime import date

from hotel_booking.errors import BookingError
from hotel_booking.logging_config import setup_logging
from hotel_booking.repositories.sql import SqlUnitOfWork
from hotel_booking.services.availability import is_room_available
from hotel_booking.services.pricing import calculate_total_price
from hotel_booking.utils.dates import validate_stay_dates
from hotel_booking.utils.deadline import Deadline

setup_logging()
logger = logging.getLogger(__name__)


def quote_stay(room_id: int, check_in: date, check_out: date, timeout: float) -> None:
    """
    Print availability and total price for one room and date range.

    Read-only: nothing is reserved, so the answer is advisory.
    """
    # Engine import requires DATABASE_URL
    from hotel_booking.db.engine import engine

    validate_stay_dates(check_in, check_out, date.today())

    with SqlUnitOfWork(engine).begin(Deadline(timeout)) as session:
        room = session.get_room_with_type(room_id)
        if room is None:
            print(f"Room {room_id} not found")
            return
        available = is_room_available(session, room_id, check_in, check_out)

    total = calculate_total_price(room.base_price, check_in, check_out)
    print(
        f"Room {room_id} (hotel {room.hotel_id}, capacity {room.capacity}) "
        f"{check_in.isoformat()} -> {check_out.isoformat()}: "
        f"{'available' if available else 'NOT available'}, total {total}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Quote a stay for one room.")
    parser.add_argument("room_id", type=int)
    parser.add_argument("check_in", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("check_out", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("--timeout", type=float, default=5.0, help="Seconds, 0 for none")
    args = parser.parse_args()

    try:
        quote_stay(args.room_id, args.check_in, args.check_out, args.timeout)
    except BookingError:
        logger.exception("Quote failed for room_id=%s", args.room_id)
        raise


if __name__ == "__main__":
    main()

"""Pricing calculator for reservation totals."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from hotel_booking.errors import ValidationError
from hotel_booking.utils.dates import nights_between

CENTS = Decimal("0.01")

Rate = Union[Decimal, int, str]


def calculate_total_price(nightly_rate: Rate, check_in: date, check_out: date) -> Decimal:
    """
    Total price of a stay: nightly rate times number of nights.

    Rounded to two decimal places with ROUND_HALF_UP (half away from zero),
    the same rule everywhere a price is produced. Floats are not accepted as
    rates; pass a Decimal or its string form.

    Args:
        nightly_rate: Room type base price per night.
        check_in: First night of the stay.
        check_out: Departure date.

    Returns:
        Decimal: Total with exactly two fraction digits.

    Raises:
        ValidationError: the stay has no nights or the rate is negative.

    Example:
        >>> calculate_total_price(Decimal("100.00"), date(2024, 3, 1), date(2024, 3, 3))
        Decimal('200.00')
    """
    if isinstance(nightly_rate, float):
        raise TypeError("nightly_rate must be a Decimal, int or str, not float")

    nights = nights_between(check_in, check_out)
    if nights <= 0:
        raise ValidationError(
            "check_out_date must be after check_in_date",
            {"check_in_date": check_in.isoformat(), "check_out_date": check_out.isoformat()},
        )

    rate = nightly_rate if isinstance(nightly_rate, Decimal) else Decimal(nightly_rate)
    if rate < 0:
        raise ValidationError("Nightly rate cannot be negative", {"nightly_rate": str(rate)})

    return (rate * nights).quantize(CENTS, rounding=ROUND_HALF_UP)

"""Room details booking form: stay dates and guest count."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .common import FormErrors, parse_date, parse_int, validate_stay_dates

GUESTS_REQUIRED = "Please enter the number of guests"
GUESTS_TOO_FEW = "Number of guests must be at least 1"
PAYMENT_METHOD_REQUIRED = "Payment method is required"
PAYMENT_METHOD_INVALID = "Invalid payment method token format"

PAYMENT_METHOD_PATTERN = re.compile(r"^pm_[a-zA-Z0-9_]+$")


@dataclass(frozen=True)
class StaySelection:
    """Parsed booking form values, kept to refill the form on error."""

    check_in: Optional[date]
    check_out: Optional[date]
    guests: Optional[int]
    raw_guests: str = ""


def parse_stay(
    check_in_date: Optional[str],
    check_out_date: Optional[str],
    guests: Optional[str],
) -> StaySelection:
    return StaySelection(
        check_in=parse_date(check_in_date),
        check_out=parse_date(check_out_date),
        guests=parse_int(guests),
        raw_guests=(guests or "").strip(),
    )


def validate_guests(raw: Optional[str], capacity: int) -> Optional[str]:
    """Check the guest count against the room's capacity.

    Returns:
        An error message, or None when the count is acceptable.
    """
    text = (raw or "").strip()
    if not text:
        return GUESTS_REQUIRED
    guests = parse_int(text)
    if guests is None or guests < 1:
        return GUESTS_TOO_FEW
    if guests > capacity:
        return f"Maximum capacity is {capacity} guests"
    return None


def validate_stay(selection: StaySelection, capacity: int, today: date) -> FormErrors:
    errors = validate_stay_dates(selection.check_in, selection.check_out, today)
    guests_error = validate_guests(selection.raw_guests, capacity)
    if guests_error:
        errors["guests"] = guests_error
    return errors


def validate_payment_method(payment_method_id: Optional[str]) -> Optional[str]:
    """Check the PaymentMethod id filled in by the card element."""
    value = (payment_method_id or "").strip()
    if not value:
        return PAYMENT_METHOD_REQUIRED
    if not PAYMENT_METHOD_PATTERN.match(value):
        return PAYMENT_METHOD_INVALID
    return None

"""Booking summary shown before payment."""

from dataclasses import dataclass
from datetime import date

from hotel_shared.models.room import Room
from hotel_shared.utils.dates import nights_between
from hotel_shared.utils.formatting import format_long_date, format_money, night_label


def estimate_total(price_per_night: float, nights: int) -> float:
    """Client-side estimate; the backend computes the amount actually charged."""
    return round(price_per_night * nights, 2)


@dataclass(frozen=True)
class BookingSummary:
    room: Room
    check_in: date
    check_out: date
    guests: int
    nights: int
    nights_label: str
    nightly_rate: str
    total: float
    total_label: str
    check_in_label: str
    check_out_label: str


def build_booking_summary(room: Room, check_in: date, check_out: date, guests: int) -> BookingSummary:
    nights = nights_between(check_in, check_out)
    total = estimate_total(room.price_per_night, nights)
    return BookingSummary(
        room=room,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        nights=nights,
        nights_label=night_label(nights),
        nightly_rate=format_money(room.price_per_night),
        total=total,
        total_label=format_money(total),
        check_in_label=format_long_date(check_in),
        check_out_label=format_long_date(check_out),
    )

"""Display formatting shared by views and templates."""

from datetime import date, datetime


def format_money(amount: float | int | None) -> str:
    """Format an amount as dollars with two decimals, e.g. $1,250.00."""
    return f"${(amount or 0):,.2f}"


def format_price(amount: float | int | None) -> str:
    """Format a nightly price as shown on room cards, e.g. $250 or $99.5."""
    value = amount or 0
    if float(value).is_integer():
        return f"${int(value)}"
    return f"${value}"


def night_label(nights: int) -> str:
    """Return "1 Night" or "N Nights"."""
    return f"{nights} Night{'s' if nights != 1 else ''}"


def format_reservation_number(reservation_id: str) -> str:
    """Short reservation reference: first three characters and last five."""
    return f"{reservation_id[:3].upper()} - {reservation_id[-5:]}"


def format_short_date(value: date | None) -> str:
    """Format as "Mon, Jan 5"."""
    if value is None:
        return ""
    return f"{value.strftime('%a, %b')} {value.day}"


def format_long_date(value: date | None) -> str:
    """Format as "Monday, January 5, 2026"."""
    if value is None:
        return ""
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"


def format_datetime(value: datetime | None) -> str:
    """Format as "Jan 5, 2026 14:30"."""
    if value is None:
        return ""
    return f"{value.strftime('%b')} {value.day}, {value.year} {value.strftime('%H:%M')}"


def title_case(value: str | None) -> str:
    """Turn an enum value like CHECKED_IN into "Checked In"."""
    if not value:
        return ""
    return value.replace("_", " ").title()

"""Shared field rules and form value parsing.

HTML forms submit strings; these helpers turn them into typed values
without raising, so validators can report a message per field instead.
"""

import re
from datetime import date
from typing import Optional

from pydantic.alias_generators import to_snake

from hotel_shared.models.errors import ApiError
from hotel_shared.utils.dates import parse_iso_date

FormErrors = dict[str, str]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Profile phone numbers: optional country code, up to three groups
PROFILE_PHONE_PATTERN = re.compile(
    r"^[+]?[(]?[0-9]{1,4}[)]?[-\s.]?[(]?[0-9]{1,4}[)]?[-\s.]?[0-9]{1,9}$"
)

CHECK_IN_REQUIRED = "Check-in date is required"
CHECK_IN_IN_PAST = "Check-in date cannot be in the past"
CHECK_OUT_REQUIRED = "Check-out date is required"
CHECK_OUT_NOT_AFTER_CHECK_IN = "Check-out date must be after check-in date"


def clean(value: Optional[str]) -> str:
    """Strip a submitted value; missing fields become an empty string."""
    return (value or "").strip()


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value) is not None


def parse_int(value: Optional[str | int]) -> Optional[int]:
    if isinstance(value, int):
        return value
    text = clean(value)
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_float(value: Optional[str | float]) -> Optional[float]:
    if isinstance(value, (int, float)):
        return float(value)
    text = clean(value)
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_date(value: Optional[str | date]) -> Optional[date]:
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def parse_checkbox(value: Optional[str]) -> bool:
    """HTML checkboxes submit "on" (or a custom value) only when ticked."""
    return clean(value).lower() in ("on", "true", "1", "yes")


def split_list(value: Optional[str]) -> list[str]:
    """Split a newline or comma separated field, dropping blanks and duplicates."""
    items: list[str] = []
    for part in re.split(r"[\n,]", value or ""):
        item = part.strip()
        if item and item not in items:
            items.append(item)
    return items


def validate_stay_dates(
    check_in: Optional[date],
    check_out: Optional[date],
    today: date,
) -> FormErrors:
    """Check-in is required and not in the past; check-out must follow it."""
    errors: FormErrors = {}
    if check_in is None:
        errors["check_in_date"] = CHECK_IN_REQUIRED
    elif check_in < today:
        errors["check_in_date"] = CHECK_IN_IN_PAST

    if check_out is None:
        errors["check_out_date"] = CHECK_OUT_REQUIRED
    elif check_in is not None and check_out <= check_in:
        errors["check_out_date"] = CHECK_OUT_NOT_AFTER_CHECK_IN
    return errors


def backend_field_errors(exc: ApiError) -> FormErrors:
    """Field errors from a backend validation response (`data.errors`).

    The backend keys them by camelCase property name; forms use snake_case.
    """
    data = exc.data if isinstance(exc.data, dict) else {}
    errors = data.get("errors")
    if not isinstance(errors, dict):
        return {}
    return {to_snake(str(field)): str(message) for field, message in errors.items() if message}

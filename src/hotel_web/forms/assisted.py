"""Manager-assisted booking forms: immediate card charge and payment link."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from hotel_shared.models.admin import PaymentLinkBookingRequest, TokenBookingRequest
from hotel_shared.models.room import Room

from .booking import validate_payment_method
from .common import (
    CHECK_IN_IN_PAST,
    CHECK_IN_REQUIRED,
    CHECK_OUT_NOT_AFTER_CHECK_IN,
    CHECK_OUT_REQUIRED,
    FormErrors,
    clean,
    is_valid_email,
    parse_date,
    parse_int,
)

FORM_INVALID_MESSAGE = "Please correct the errors in the form"
TOKEN_BOOKING_FAILED = "Failed to create booking. Please check all fields and try again."
LINK_BOOKING_FAILED = "Failed to create booking. Please try again."

MAX_GUESTS = 10
MAX_NAME_LENGTH = 100
MAX_SPECIAL_REQUESTS = 500
MAX_YEARS_AHEAD = 2

_NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+$")
_PHONE_PATTERN = re.compile(r"^[+]?[0-9\s()-]{7,20}$")


@dataclass
class AssistedBookingForm:
    """Values submitted by either assisted booking form."""

    customer_email: str = ""
    customer_first_name: str = ""
    customer_last_name: str = ""
    customer_phone_number: str = ""
    room_id: str = ""
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: int = 1
    special_requests: str = ""
    payment_method_id: str = ""


def parse_assisted_form(form: Any) -> AssistedBookingForm:
    guests = parse_int(form.get("number_of_guests"))
    return AssistedBookingForm(
        customer_email=clean(form.get("customer_email")),
        customer_first_name=clean(form.get("customer_first_name")),
        customer_last_name=clean(form.get("customer_last_name")),
        customer_phone_number=clean(form.get("customer_phone_number")),
        room_id=clean(form.get("room_id")),
        check_in_date=parse_date(form.get("check_in_date")),
        check_out_date=parse_date(form.get("check_out_date")),
        number_of_guests=guests if guests is not None else 0,
        special_requests=form.get("special_requests") or "",
        payment_method_id=clean(form.get("payment_method_id")),
    )


def _years_after(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def _validate_common(
    data: AssistedBookingForm, room: Optional[Room], today: date
) -> FormErrors:
    errors: FormErrors = {}

    if not data.customer_email:
        errors["customer_email"] = "Email is required"
    elif not is_valid_email(data.customer_email):
        errors["customer_email"] = "Invalid email format"

    if not data.customer_first_name:
        errors["customer_first_name"] = "First name is required"
    if not data.customer_last_name:
        errors["customer_last_name"] = "Last name is required"

    if not data.room_id:
        errors["room_id"] = "Please select a room"

    if data.check_in_date is None:
        errors["check_in_date"] = CHECK_IN_REQUIRED
    elif data.check_in_date < today:
        errors["check_in_date"] = CHECK_IN_IN_PAST

    if data.check_out_date is None:
        errors["check_out_date"] = CHECK_OUT_REQUIRED
    elif data.check_in_date is not None and data.check_out_date <= data.check_in_date:
        errors["check_out_date"] = CHECK_OUT_NOT_AFTER_CHECK_IN

    if data.number_of_guests < 1 or data.number_of_guests > MAX_GUESTS:
        errors["number_of_guests"] = "Number of guests must be between 1 and 10"
    if room is not None and data.number_of_guests > room.capacity:
        errors["number_of_guests"] = (
            f"Number of guests cannot exceed room capacity ({room.capacity})"
        )

    return errors


def validate_token_booking(
    data: AssistedBookingForm, room: Optional[Room], today: date
) -> FormErrors:
    """Validate the immediate-charge form, which also carries a card token."""
    errors = _validate_common(data, room, today)

    for field, label in (("customer_first_name", "First"), ("customer_last_name", "Last")):
        value = getattr(data, field)
        if not value or field in errors:
            continue
        if not _NAME_PATTERN.match(value):
            errors[field] = "Name can only contain letters, spaces, hyphens, and apostrophes"
        elif len(value) > MAX_NAME_LENGTH:
            errors[field] = f"{label} name cannot exceed {MAX_NAME_LENGTH} characters"

    if data.customer_phone_number and not _PHONE_PATTERN.match(data.customer_phone_number):
        errors["customer_phone_number"] = "Invalid phone number format"

    if (
        "check_in_date" not in errors
        and data.check_in_date is not None
        and data.check_in_date > _years_after(today, MAX_YEARS_AHEAD)
    ):
        errors["check_in_date"] = "Check-in date cannot be more than 2 years in the future"

    if len(data.special_requests) > MAX_SPECIAL_REQUESTS:
        errors["special_requests"] = "Special requests cannot exceed 500 characters"

    payment_error = validate_payment_method(data.payment_method_id)
    if payment_error:
        errors["payment_method_id"] = payment_error

    return errors


def validate_payment_link_booking(
    data: AssistedBookingForm, room: Optional[Room], today: date
) -> FormErrors:
    """Validate the payment-link form; no card is taken up front."""
    errors = _validate_common(data, room, today)
    if (
        "check_out_date" not in errors
        and data.check_out_date is not None
        and data.check_out_date < today
    ):
        errors["check_out_date"] = "Check-out date cannot be in the past"
    return errors


def token_booking_request(data: AssistedBookingForm) -> TokenBookingRequest:
    return TokenBookingRequest(
        customer_email=data.customer_email,
        customer_first_name=data.customer_first_name,
        customer_last_name=data.customer_last_name,
        customer_phone_number=data.customer_phone_number or None,
        room_id=data.room_id,
        check_in_date=data.check_in_date,
        check_out_date=data.check_out_date,
        number_of_guests=data.number_of_guests,
        special_requests=data.special_requests or None,
        payment_method_id=data.payment_method_id,
    )


def payment_link_request(data: AssistedBookingForm) -> PaymentLinkBookingRequest:
    return PaymentLinkBookingRequest(
        customer_email=data.customer_email,
        customer_first_name=data.customer_first_name,
        customer_last_name=data.customer_last_name,
        customer_phone_number=data.customer_phone_number or None,
        room_id=data.room_id,
        check_in_date=data.check_in_date,
        check_out_date=data.check_out_date,
        number_of_guests=data.number_of_guests,
        special_requests=data.special_requests or None,
    )

"""Admin user creation form."""

import re
from typing import Iterable, Optional

from hotel_shared.models.auth import CreateUserRequest
from hotel_shared.models.enums import Role
from hotel_shared.models.errors import ApiError, resolve_error_message

from .common import FormErrors, clean, is_valid_email

FORM_INVALID_MESSAGE = "Please fix the errors in the form"
CREATE_FAILED_MESSAGE = "Failed to create user. Please try again."
EMAIL_ALREADY_REGISTERED = "This email address is already registered"
EMAIL_DUPLICATE = "A user with this email already exists"

_NAME_PATTERN = re.compile(r"^[a-zA-Z\s-]+$")
_PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$")
MIN_PHONE_DIGITS = 10


def _validate_name(value: str, label: str) -> Optional[str]:
    if not value.strip():
        return f"{label} name is required"
    if len(value.strip()) < 2:
        return f"{label} name must be at least 2 characters"
    if not _NAME_PATTERN.match(value):
        return "Only letters, spaces, and hyphens are allowed"
    return None


def validate_new_user(
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    phone_number: Optional[str],
    roles: Iterable[str],
) -> FormErrors:
    errors: FormErrors = {}

    for field, value, label in (
        ("first_name", first_name or "", "First"),
        ("last_name", last_name or "", "Last"),
    ):
        message = _validate_name(value, label)
        if message:
            errors[field] = message

    email_value = clean(email)
    if not email_value:
        errors["email"] = "Email is required"
    elif not is_valid_email(email_value):
        errors["email"] = "Please enter a valid email address"

    if not clean(password):
        errors["password"] = "Password is required"
    elif len(password or "") < 8:
        errors["password"] = "Password must be at least 8 characters"

    phone = clean(phone_number)
    if phone:
        if not _PHONE_PATTERN.match(phone):
            errors["phone_number"] = "Please enter a valid phone number"
        elif len(re.sub(r"\D", "", phone)) < MIN_PHONE_DIGITS:
            errors["phone_number"] = "Phone number must be at least 10 digits"

    roles = list(roles)
    if not roles or any(r not in {role.value for role in Role} for r in roles):
        errors["roles"] = "Please select a role"

    return errors


def create_user_request(
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    phone_number: Optional[str],
    roles: Iterable[str],
    enabled: bool = True,
) -> CreateUserRequest:
    return CreateUserRequest(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=clean(email),
        password=password,
        phone_number=clean(phone_number) or None,
        roles=[Role(r) for r in roles],
        enabled=enabled,
    )


def create_user_error(exc: ApiError) -> tuple[str, FormErrors]:
    """Map a failed create_user call to a notification and field errors.

    Backend duplicate-email errors are attached to the email field.
    """
    message = resolve_error_message(exc, CREATE_FAILED_MESSAGE)
    lowered = message.lower()
    if "email" in lowered and "already" in lowered:
        return EMAIL_ALREADY_REGISTERED, {"email": EMAIL_ALREADY_REGISTERED}
    if "duplicate" in lowered:
        return EMAIL_DUPLICATE, {"email": EMAIL_DUPLICATE}
    return message, {}

"""Login, registration and profile forms."""

from typing import Optional

from hotel_shared.models.auth import LoginRequest, RegisterRequest, UpdateProfileRequest

from .common import PROFILE_PHONE_PATTERN, FormErrors, clean

MIN_PASSWORD_LENGTH = 8
MAX_NAME_LENGTH = 50
MAX_PHONE_LENGTH = 20

LOGIN_FAILED_MESSAGE = "Failed to login. Please check your credentials."
REGISTER_FAILED_MESSAGE = "Failed to register. Please try again."
PASSWORD_TOO_SHORT = "Password must be at least 8 characters long"


def validate_login(email: Optional[str], password: Optional[str]) -> FormErrors:
    errors: FormErrors = {}
    if not clean(email):
        errors["email"] = "Email is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_register(
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> FormErrors:
    errors: FormErrors = {}
    if not clean(first_name):
        errors["first_name"] = "First name is required"
    if not clean(last_name):
        errors["last_name"] = "Last name is required"
    if not clean(email):
        errors["email"] = "Email is required"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = PASSWORD_TOO_SHORT
    return errors


def _validate_profile_name(value: str, label: str) -> Optional[str]:
    if not value:
        return f"{label} is required"
    if len(value) > MAX_NAME_LENGTH:
        return f"{label} must be between 1 and {MAX_NAME_LENGTH} characters"
    return None


def validate_profile(
    first_name: Optional[str],
    last_name: Optional[str],
    phone_number: Optional[str],
) -> FormErrors:
    """Validate the profile edit form.

    Names are required; the phone number is optional but, when given, must
    look like a phone number and fit in 20 characters.
    """
    errors: FormErrors = {}
    for field, value, label in (
        ("first_name", clean(first_name), "First name"),
        ("last_name", clean(last_name), "Last name"),
    ):
        message = _validate_profile_name(value, label)
        if message:
            errors[field] = message

    phone = clean(phone_number)
    if phone:
        if not PROFILE_PHONE_PATTERN.match(phone):
            errors["phone_number"] = "Phone number format is invalid"
        elif len(phone) > MAX_PHONE_LENGTH:
            errors["phone_number"] = f"Phone number must not exceed {MAX_PHONE_LENGTH} characters"
    return errors


def login_request(email: str, password: str) -> LoginRequest:
    return LoginRequest(email=clean(email), password=password)


def register_request(
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    phone_number: Optional[str] = None,
) -> RegisterRequest:
    return RegisterRequest(
        first_name=clean(first_name),
        last_name=clean(last_name),
        email=clean(email),
        password=password,
        phone_number=clean(phone_number) or None,
    )


def profile_request(
    first_name: str,
    last_name: str,
    phone_number: Optional[str],
    avatar: Optional[str] = None,
) -> UpdateProfileRequest:
    return UpdateProfileRequest(
        first_name=clean(first_name),
        last_name=clean(last_name),
        phone_number=clean(phone_number) or None,
        avatar=clean(avatar) or None,
    )

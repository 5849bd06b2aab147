"""Guest preferences form."""

from enum import Enum
from typing import Any

from hotel_shared.models.enums import BedType, FloorLevel, RoomType, RoomView, ThemeMode
from hotel_shared.models.preferences import UpdatePreferencesRequest

from .common import FormErrors, clean, parse_checkbox, split_list

INVALID_OPTION = "Please choose a valid option"

SELECT_FIELDS: dict[str, type[Enum]] = {
    "preferred_bed_type": BedType,
    "preferred_floor_level": FloorLevel,
    "preferred_room_view": RoomView,
    "preferred_room_type": RoomType,
    "theme_mode": ThemeMode,
}

CHECKBOX_FIELDS = (
    "email_notifications_enabled",
    "sms_notifications_enabled",
    "booking_confirmation_emails",
    "promotional_emails",
    "booking_reminder_emails",
    "prefer_quiet_room",
    "wheelchair_accessible",
    "hearing_accessible",
    "visual_accessible",
)

TEXT_FIELDS = (
    "preferred_check_in_time",
    "preferred_check_out_time",
    "other_accessibility_needs",
    "default_special_requests",
    "preferred_language",
    "preferred_currency",
    "preferred_date_format",
    "preferred_time_format",
)


def validate_preferences(form: Any) -> FormErrors:
    """Selects must hold one of their known values; blank means no preference."""
    errors: FormErrors = {}
    for name, enum_type in SELECT_FIELDS.items():
        value = clean(form.get(name))
        if value and value not in {member.value for member in enum_type}:
            errors[name] = INVALID_OPTION
    return errors


def preferences_request(form: Any) -> UpdatePreferencesRequest:
    """Build the full update from a validated form.

    Unticked checkboxes are absent from the submission and are sent as False.
    """
    values: dict[str, Any] = {}
    for name in SELECT_FIELDS:
        values[name] = clean(form.get(name)) or None
    for name in CHECKBOX_FIELDS:
        values[name] = parse_checkbox(form.get(name))
    for name in TEXT_FIELDS:
        values[name] = clean(form.get(name)) or None
    values["dietary_restrictions"] = split_list(form.get("dietary_restrictions"))
    values["allergies"] = split_list(form.get("allergies"))
    return UpdatePreferencesRequest(**values)

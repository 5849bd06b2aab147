"""Guest preference models."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import ApiModel


class UserPreferences(ApiModel):
    """Stored preferences; the backend fills defaults for new accounts."""

    id: Optional[str] = None
    user_id: Optional[str] = None

    # Notifications
    email_notifications_enabled: bool = True
    sms_notifications_enabled: bool = False
    booking_confirmation_emails: bool = True
    promotional_emails: bool = False
    booking_reminder_emails: bool = True

    # Room preferences
    preferred_bed_type: Optional[str] = None
    preferred_floor_level: Optional[str] = None
    preferred_room_view: Optional[str] = None
    preferred_room_type: Optional[str] = None
    prefer_quiet_room: bool = False
    preferred_check_in_time: Optional[str] = None
    preferred_check_out_time: Optional[str] = None

    # Accessibility
    wheelchair_accessible: bool = False
    hearing_accessible: bool = False
    visual_accessible: bool = False
    other_accessibility_needs: Optional[str] = None

    # Dietary
    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    default_special_requests: Optional[str] = None

    # Display
    preferred_language: str = "en"
    preferred_currency: str = "USD"
    preferred_date_format: str = "MM/DD/YYYY"
    preferred_time_format: str = "12h"
    theme_mode: str = "light"

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdatePreferencesRequest(ApiModel):
    """Any subset of UserPreferences fields."""

    email_notifications_enabled: Optional[bool] = None
    sms_notifications_enabled: Optional[bool] = None
    booking_confirmation_emails: Optional[bool] = None
    promotional_emails: Optional[bool] = None
    booking_reminder_emails: Optional[bool] = None
    preferred_bed_type: Optional[str] = None
    preferred_floor_level: Optional[str] = None
    preferred_room_view: Optional[str] = None
    preferred_room_type: Optional[str] = None
    prefer_quiet_room: Optional[bool] = None
    preferred_check_in_time: Optional[str] = None
    preferred_check_out_time: Optional[str] = None
    wheelchair_accessible: Optional[bool] = None
    hearing_accessible: Optional[bool] = None
    visual_accessible: Optional[bool] = None
    other_accessibility_needs: Optional[str] = None
    dietary_restrictions: Optional[list[str]] = None
    allergies: Optional[list[str]] = None
    default_special_requests: Optional[str] = None
    preferred_language: Optional[str] = None
    preferred_currency: Optional[str] = None
    preferred_date_format: Optional[str] = None
    preferred_time_format: Optional[str] = None
    theme_mode: Optional[str] = None

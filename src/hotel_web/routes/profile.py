"""Profile page: account details and stay preferences."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST

from hotel_shared.endpoints import auth as auth_endpoints
from hotel_shared.endpoints import preferences as preference_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.auth import User
from hotel_shared.models.enums import Severity
from hotel_shared.models.errors import ApiError, resolve_error_message
from hotel_shared.models.preferences import UserPreferences
from hotel_shared.services.session_store import Session
from hotel_web.components.notifications import notify
from hotel_web.dependencies import get_api, get_session
from hotel_web.forms.auth import profile_request, validate_profile
from hotel_web.forms.common import FormErrors, backend_field_errors
from hotel_web.forms.preferences import SELECT_FIELDS, preferences_request, validate_preferences
from hotel_web.security import require_user
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])

PROFILE_UPDATED = "Profile updated successfully!"
PROFILE_FORM_INVALID = "Please fix the errors in the form"
PROFILE_UPDATE_FAILED = "Failed to update profile. Please try again."
PREFERENCES_UPDATED = "Preferences updated successfully!"
PREFERENCES_UPDATE_FAILED = "Failed to update preferences"
PREFERENCES_RESET = "Preferences reset to defaults"
PREFERENCES_RESET_FAILED = "Failed to reset preferences"
PREFERENCES_DELETED = "Preferences deleted"
PREFERENCES_DELETE_FAILED = "Failed to delete preferences"
PREFERENCES_LOAD_FAILED = "Failed to load preferences"


def _redirect(anchor: str = "") -> RedirectResponse:
    return RedirectResponse(f"/profile{anchor}", status_code=HTTP_303_SEE_OTHER)


async def _render_profile(
    request: Request,
    api: ApiSession,
    user: User,
    *,
    profile_values: Optional[dict[str, Any]] = None,
    profile_errors: Optional[FormErrors] = None,
    profile_error: Optional[str] = None,
    preference_errors: Optional[FormErrors] = None,
    status_code: int = 200,
) -> HTMLResponse:
    preferences: Optional[UserPreferences] = None
    preferences_error = None
    try:
        preferences = await api.query(preference_endpoints.get_my_preferences)
    except ApiError as e:
        logger.warning("Preferences failed to load for user %s: %s", user.id, e.message)
        preferences_error = PREFERENCES_LOAD_FAILED

    return await render(
        request,
        "profile.html",
        {
            "user": user,
            "values": profile_values
            or {
                "first_name": user.first_name,
                "last_name": user.last_name,
                "phone_number": user.phone_number or "",
                "avatar": user.avatar or "",
            },
            "errors": profile_errors or {},
            "error": profile_error,
            "preferences": preferences or UserPreferences(),
            "preferences_error": preferences_error,
            "preference_errors": preference_errors or {},
            "select_options": {
                name: [member.value for member in enum_type]
                for name, enum_type in SELECT_FIELDS.items()
            },
        },
        api=api,
        status_code=status_code,
    )


@router.get("/profile", summary="Profile and preferences", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    try:
        user = await api.query(auth_endpoints.get_current_user)
    except ApiError as e:
        if e.is_unauthorized:
            raise
        logger.warning("Profile refresh failed for user %s: %s", user.id, e.message)
    return await _render_profile(request, api, user)


@router.post(
    "/profile",
    summary="Update profile",
    description="Validation errors reported by the backend are shown on their fields.",
    response_class=HTMLResponse,
)
async def profile_submit(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    phone_number: str = Form(""),
    avatar: str = Form(""),
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    values = {
        "first_name": first_name,
        "last_name": last_name,
        "phone_number": phone_number,
        "avatar": avatar,
    }
    errors = validate_profile(first_name, last_name, phone_number)
    if errors:
        return await _render_profile(
            request,
            api,
            user,
            profile_values=values,
            profile_errors=errors,
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        updated: User = await api.mutate(
            auth_endpoints.update_profile,
            profile_request(first_name, last_name, phone_number, avatar),
        )
    except ApiError as e:
        logger.warning("Profile update failed for user %s: %s", user.id, e.message)
        field_errors = backend_field_errors(e)
        message = (
            PROFILE_FORM_INVALID if field_errors else resolve_error_message(e, PROFILE_UPDATE_FAILED)
        )
        return await _render_profile(
            request,
            api,
            user,
            profile_values=values,
            profile_errors=field_errors,
            profile_error=message,
            status_code=HTTP_400_BAD_REQUEST,
        )

    session.auth.user = updated
    notify(session, PROFILE_UPDATED, Severity.SUCCESS)
    return _redirect()


@router.post("/profile/preferences", summary="Update preferences", response_class=HTMLResponse)
async def preferences_submit(
    request: Request,
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    form = await request.form()
    errors = validate_preferences(form)
    if errors:
        return await _render_profile(
            request, api, user, preference_errors=errors, status_code=HTTP_400_BAD_REQUEST
        )

    try:
        await api.mutate(preference_endpoints.update_my_preferences, preferences_request(form))
    except ApiError as e:
        logger.warning("Preferences update failed for user %s: %s", user.id, e.message)
        notify(session, resolve_error_message(e, PREFERENCES_UPDATE_FAILED), Severity.ERROR)
    else:
        notify(session, PREFERENCES_UPDATED, Severity.SUCCESS)
    return _redirect("#preferences")


@router.post("/profile/preferences/reset", summary="Reset preferences to defaults")
async def preferences_reset(
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    try:
        await api.mutate(preference_endpoints.reset_my_preferences)
    except ApiError as e:
        logger.warning("Preferences reset failed for user %s: %s", user.id, e.message)
        notify(session, resolve_error_message(e, PREFERENCES_RESET_FAILED), Severity.ERROR)
    else:
        notify(session, PREFERENCES_RESET, Severity.SUCCESS)
    return _redirect("#preferences")


@router.post("/profile/preferences/delete", summary="Delete stored preferences")
async def preferences_delete(
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    try:
        await api.mutate(preference_endpoints.delete_my_preferences)
    except ApiError as e:
        logger.warning("Preferences delete failed for user %s: %s", user.id, e.message)
        notify(session, resolve_error_message(e, PREFERENCES_DELETE_FAILED), Severity.ERROR)
    else:
        notify(session, PREFERENCES_DELETED, Severity.SUCCESS)
    return _redirect("#preferences")

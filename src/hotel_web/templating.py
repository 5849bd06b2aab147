"""Jinja2 environment and the page render helper.

Every page gets the signed-in user, the queued flash notifications and the
theme from the user's preferences in its context.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from hotel_shared.endpoints import preferences as preference_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.enums import ThemeMode
from hotel_shared.models.errors import ApiError
from hotel_shared.services.session_store import Session
from hotel_shared.utils.formatting import (
    format_datetime,
    format_long_date,
    format_money,
    format_price,
    format_reservation_number,
    format_short_date,
    night_label,
    title_case,
)
from hotel_web.components.notifications import AUTO_HIDE_MS, pop_notifications

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters.update(
    money=format_money,
    price=format_price,
    short_date=format_short_date,
    long_date=format_long_date,
    datetime=format_datetime,
    reservation_number=format_reservation_number,
    nights=night_label,
    title=title_case,
)
templates.env.globals["auto_hide_ms"] = AUTO_HIDE_MS


async def resolve_theme(api: Optional[ApiSession], session: Optional[Session]) -> str:
    """Theme from the user's preferences; light for guests or when unavailable."""
    if api is None or session is None or not session.is_authenticated:
        return ThemeMode.LIGHT.value
    try:
        preferences = await api.query(preference_endpoints.get_my_preferences)
    except ApiError as e:
        logger.warning("Could not load preferences for theme: %s", e.message)
        return ThemeMode.LIGHT.value
    if preferences is not None and preferences.theme_mode == ThemeMode.DARK.value:
        return ThemeMode.DARK.value
    return ThemeMode.LIGHT.value


async def render(
    request: Request,
    name: str,
    context: Optional[dict[str, Any]] = None,
    *,
    api: Optional[ApiSession] = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render a page template.

    Args:
        request: Current request; its session supplies user and notifications.
        name: Template path under templates/.
        context: Page-specific values.
        api: Backend access used to look up the theme.
        status_code: HTTP status of the response.
    """
    session: Optional[Session] = getattr(request.state, "session", None)
    page: dict[str, Any] = {
        "current_user": session.current_user if session else None,
        "notifications": pop_notifications(session) if session else [],
        "theme": await resolve_theme(api, session),
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)

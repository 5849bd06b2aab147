"""FastAPI exception handlers for the web pages.

- LoginRequired: 303 redirect to /login with the requested path as return_to
- RoleRequired: 303 redirect to /unauthorized
- ApiError: error page with the backend's message and status; a 401 also
  signs the session out, since its token is no longer accepted
- HTTP 404: not-found page
- Anything else: logged with its traceback, generic 500 page

Usage:
    from hotel_web.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_303_SEE_OTHER,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from hotel_shared.models.errors import ApiError, resolve_error_message
from hotel_shared.services.session_store import Session

from .security import UNAUTHORIZED_PATH, LoginRequired, RoleRequired, login_url
from .templating import render

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
API_ERROR_FALLBACK = "Something went wrong while contacting the server. Please try again."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


def _session(request: Request) -> Optional[Session]:
    return getattr(request.state, "session", None)


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    """Send anonymous visitors to the login page, remembering where they were going."""
    session = _session(request)
    if session is not None:
        session.return_to = exc.return_to
    return RedirectResponse(login_url(exc.return_to), status_code=HTTP_303_SEE_OTHER)


async def role_required_handler(request: Request, exc: RoleRequired) -> RedirectResponse:
    logger.info("Denied %s: %s", request.url.path, exc)
    return RedirectResponse(UNAUTHORIZED_PATH, status_code=HTTP_303_SEE_OTHER)


async def api_error_handler(request: Request, exc: ApiError) -> HTMLResponse:
    """Render a backend failure that no page handled itself.

    Args:
        request: The incoming request
        exc: The ApiError raised by the backend client

    Returns:
        Error page carrying the backend status (502 when no response came back).
    """
    session = _session(request)
    message = resolve_error_message(exc, API_ERROR_FALLBACK)

    if exc.is_unauthorized and session is not None:
        session.logout()
        message = SESSION_EXPIRED_MESSAGE

    logger.warning("Backend error on %s: %s (status %s)", request.url.path, exc.message, exc.status_code)
    status_code = exc.status_code or HTTP_502_BAD_GATEWAY
    if exc.status_code == HTTP_404_NOT_FOUND:
        return await render(request, "not_found.html", {"message": message}, status_code=status_code)
    return await render(
        request,
        "error.html",
        {"message": message, "status_code": status_code},
        status_code=status_code,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == HTTP_404_NOT_FOUND:
        return await render(request, "not_found.html", status_code=HTTP_404_NOT_FOUND)
    return await render(
        request,
        "error.html",
        {"message": exc.detail, "status_code": exc.status_code},
        status_code=exc.status_code,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    """Handle unexpected exceptions with a generic error page.

    The actual error is logged; the page never shows internal details.
    """
    logger.exception("Unhandled exception: %s", exc)
    return await render(
        request,
        "error.html",
        {"message": GENERIC_ERROR_MESSAGE, "status_code": HTTP_500_INTERNAL_SERVER_ERROR},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(LoginRequired, login_required_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RoleRequired, role_required_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

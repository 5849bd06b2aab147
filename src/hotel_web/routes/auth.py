"""Login, registration, logout and OAuth2 sign-in pages.

Credentials live only in the server-side session: a successful login or
OAuth2 callback calls Session.set_credentials, logout clears them. A failed
login leaves whatever the session held untouched.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from hotel_shared.endpoints import auth as auth_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.auth import AuthResponse, User
from hotel_shared.models.enums import Severity
from hotel_shared.models.errors import ApiError, resolve_error_message
from hotel_shared.services.session_store import Session
from hotel_web.components.notifications import notify
from hotel_web.dependencies import get_api, get_session
from hotel_web.forms.auth import (
    LOGIN_FAILED_MESSAGE,
    REGISTER_FAILED_MESSAGE,
    login_request,
    register_request,
    validate_login,
    validate_register,
)
from hotel_web.security import post_login_redirect, safe_return_to
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

OAUTH2_PROVIDERS = ("google", "facebook")
OAUTH2_FAILED_MESSAGE = "Failed to process authentication. Please try again."
OAUTH2_INCOMPLETE_MESSAGE = "OAuth2 authentication was not completed."


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=HTTP_303_SEE_OTHER)


def _complete_login(session: Session, user: User, token: str, return_to: Optional[str]) -> RedirectResponse:
    """Store credentials and send the user where post-login routing says."""
    session.set_credentials(user, token)
    target = post_login_redirect(user, return_to or session.return_to)
    session.return_to = None
    return _redirect(target)


@router.get("/login", summary="Login page", response_class=HTMLResponse)
async def login_page(
    request: Request,
    return_to: Optional[str] = None,
    session: Session = Depends(get_session),
) -> Response:
    if session.current_user is not None:
        return _redirect(post_login_redirect(session.current_user, return_to))
    if safe_return_to(return_to):
        session.return_to = return_to
    return await render(
        request,
        "login.html",
        {
            "errors": {},
            "email": "",
            "return_to": safe_return_to(return_to) or "",
            "providers": OAUTH2_PROVIDERS,
        },
    )


@router.post(
    "/login",
    summary="Sign in with email and password",
    description="""
On success the session stores the returned token and user, then staff are
sent to /admin/dashboard and guests to their return path (or /).
On failure the form is shown again with the backend message.
""",
    response_class=HTMLResponse,
)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    return_to: str = Form(""),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    context = {"email": email, "return_to": return_to, "providers": OAUTH2_PROVIDERS}

    errors = validate_login(email, password)
    if errors:
        return await render(
            request, "login.html", {**context, "errors": errors}, status_code=HTTP_400_BAD_REQUEST
        )

    try:
        result: AuthResponse = await api.mutate(auth_endpoints.login, login_request(email, password))
    except ApiError as e:
        logger.info("Login failed for %s: %s", email, e.message)
        return await render(
            request,
            "login.html",
            {**context, "errors": {}, "error": resolve_error_message(e, LOGIN_FAILED_MESSAGE)},
            status_code=HTTP_400_BAD_REQUEST,
        )

    return _complete_login(session, result.user, result.token, safe_return_to(return_to))


@router.get("/register", summary="Registration page", response_class=HTMLResponse)
async def register_page(request: Request) -> HTMLResponse:
    return await render(request, "register.html", {"errors": {}, "values": {}})


@router.post("/register", summary="Create a guest account", response_class=HTMLResponse)
async def register_submit(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    phone_number: str = Form(""),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    values = {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "phone_number": phone_number,
    }
    errors = validate_register(first_name, last_name, email, password)
    if errors:
        return await render(
            request,
            "register.html",
            {"errors": errors, "values": values},
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        result: AuthResponse = await api.mutate(
            auth_endpoints.register,
            register_request(first_name, last_name, email, password, phone_number),
        )
    except ApiError as e:
        logger.info("Registration failed for %s: %s", email, e.message)
        return await render(
            request,
            "register.html",
            {
                "errors": {},
                "values": values,
                "error": resolve_error_message(e, REGISTER_FAILED_MESSAGE),
            },
            status_code=HTTP_400_BAD_REQUEST,
        )

    return _complete_login(session, result.user, result.token, None)


@router.post("/logout", summary="Sign out")
async def logout(session: Session = Depends(get_session)) -> RedirectResponse:
    session.logout()
    session.booking_context = None
    session.return_to = None
    return _redirect("/")


@router.get(
    "/login/oauth2/{provider}",
    summary="Start OAuth2 sign-in",
    description="Redirects to the backend's authorization URL for the provider.",
)
async def oauth2_login(
    provider: str,
    return_to: Optional[str] = None,
    session: Session = Depends(get_session),
) -> RedirectResponse:
    if provider not in OAUTH2_PROVIDERS:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"Unknown provider {provider}")
    if safe_return_to(return_to):
        session.return_to = return_to
    return _redirect(auth_endpoints.oauth2_authorize_url(provider))


@router.get(
    "/oauth2/callback",
    summary="Finish OAuth2 sign-in",
    description="""
The backend redirects here with either `token` or `error`.
A token is exchanged for the user via GET /auth/me before it is stored.
""",
)
async def oauth2_callback(
    token: Optional[str] = None,
    error: Optional[str] = None,
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    if error:
        notify(session, f"Authentication failed: {error}", Severity.ERROR)
        return _redirect("/login")

    if not token:
        notify(session, OAUTH2_INCOMPLETE_MESSAGE, Severity.ERROR)
        return _redirect("/login")

    try:
        user: User = await api.query(auth_endpoints.get_current_user, token=token, force=True)
    except ApiError as e:
        logger.warning("OAuth2 user lookup failed: %s", e.message)
        notify(session, OAUTH2_FAILED_MESSAGE, Severity.ERROR)
        return _redirect("/login")

    return _complete_login(session, user, token, None)

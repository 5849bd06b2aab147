"""Resolves the browser session from its cookie for every request.

The session is exposed as request.state.session. A browser without a valid
cookie gets a fresh anonymous session and the cookie is (re)issued.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hotel_shared.config import get_settings
from hotel_shared.services.session_store import get_session_store


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Attach the server-side Session to each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = get_settings()
        store = get_session_store()

        cookie_value = request.cookies.get(settings.session_cookie_name)
        if cookie_value is None or store.get(cookie_value) is None:
            store.purge_expired()
        session = store.get_or_create(cookie_value)
        request.state.session = session

        response = await call_next(request)

        if cookie_value != session.id:
            response.set_cookie(
                settings.session_cookie_name,
                session.id,
                max_age=settings.session_ttl_seconds,
                httponly=True,
                samesite="lax",
                secure=settings.public_base_url.startswith("https://"),
            )
        return response

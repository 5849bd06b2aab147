"""Request tracing for page loads.

Every request gets an X-Correlation-ID (taken from the caller or generated).
The id is forwarded on backend calls made while rendering the page, so one
page load can be followed through the REST backend's logs as well. Each
request is logged once with its browser session, status and duration.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hotel_shared.config import get_settings
from hotel_shared.services.api_client import CORRELATION_ID_HEADER
from hotel_shared.utils.logging import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

# Static assets are not worth a log line each
UNLOGGED_PREFIXES = ("/static/", "/ping")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation id and logs its outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            if not request.url.path.startswith(UNLOGGED_PREFIXES):
                logger.info(
                    "%s %s -> %d in %.1f ms (session %s)",
                    request.method,
                    request.url.path,
                    response.status_code,
                    (time.perf_counter() - started) * 1000,
                    _session_label(request),
                )
            return response
        finally:
            clear_correlation_id()


def _session_label(request: Request) -> str:
    """Short id of the browser session, as Session.short_id renders it."""
    cookie = request.cookies.get(get_settings().session_cookie_name)
    return cookie[:8] if cookie else "new"

"""HTTP client for the hotel REST backend.

Wraps one httpx.AsyncClient per process. Every call carries the app version
header and the current correlation id; authenticated calls also carry the
bearer token. Non-2xx responses and transport failures raise ApiError with
the parsed error body attached.
"""

import logging
import time
from functools import lru_cache
from typing import Any, Optional

import httpx

from ..config import get_settings
from ..models.errors import ApiError
from ..utils.logging import get_correlation_id, log_api_call

logger = logging.getLogger(__name__)

APP_VERSION_HEADER = "x-app-version"
CORRELATION_ID_HEADER = "X-Correlation-ID"


class ApiClient:
    """Async client for the backend API.

    Usage:
        client = get_api_client()
        rooms = await client.request("GET", "/rooms", params={"type": "SUITE"})
    """

    def __init__(
        self,
        base_url: str,
        *,
        app_version: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend base URL including the /api prefix.
            app_version: Value sent as x-app-version on every call.
            timeout: Per-request timeout in seconds.
            transport: Optional transport override (tests use httpx.MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self._app_version = app_version
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def _headers(self, token: Optional[str]) -> dict[str, str]:
        headers = {APP_VERSION_HEADER: self._app_version}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[CORRELATION_ID_HEADER] = correlation_id
        return headers

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def request(
        self,
        method: str,
        url: str,
        *,
        token: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Send a request to the backend.

        Args:
            method: HTTP method.
            url: Path relative to the API base URL, e.g. "/rooms/42".
            token: Bearer token, omitted when None.
            params: Query parameters; None values are dropped.
            json: JSON request body.

        Returns:
            Parsed JSON body, the raw text for non-JSON bodies, or None when empty.

        Raises:
            ApiError: On a non-2xx response or a transport failure.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        start = time.perf_counter()

        try:
            response = await self._client.request(
                method,
                url,
                params=query or None,
                json=json,
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            duration_ms = (time.perf_counter() - start) * 1000
            log_api_call(logger, method, url, duration_ms=duration_ms, error=str(e) or type(e).__name__)
            raise ApiError(f"Network error: {e}") from e

        duration_ms = (time.perf_counter() - start) * 1000
        data = self._parse_body(response)

        if response.is_error:
            message = None
            if isinstance(data, dict):
                message = data.get("message") or data.get("error")
            log_api_call(
                logger,
                method,
                url,
                status_code=response.status_code,
                duration_ms=duration_ms,
                error=message or response.reason_phrase,
            )
            raise ApiError(
                message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                data=data,
            )

        log_api_call(
            logger, method, url, status_code=response.status_code, duration_ms=duration_ms
        )
        return data

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()


@lru_cache(maxsize=1)
def get_api_client() -> ApiClient:
    """Get the shared ApiClient instance (singleton pattern).

    Returns:
        ApiClient: Client configured from settings.
    """
    settings = get_settings()
    return ApiClient(
        settings.api_url,
        app_version=settings.app_version,
        timeout=settings.api_timeout_seconds,
    )


async def close_api_client() -> None:
    """Close and forget the shared client, if one was created."""
    if get_api_client.cache_info().currsize:
        await get_api_client().aclose()
    get_api_client.cache_clear()

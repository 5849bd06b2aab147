"""Unit tests for ApiClient.

All backend traffic goes through httpx.MockTransport; no network access.
"""

import httpx
import pytest

from hotel_shared.models.errors import ApiError
from hotel_shared.services.api_client import (
    APP_VERSION_HEADER,
    CORRELATION_ID_HEADER,
    ApiClient,
)
from hotel_shared.utils.logging import clear_correlation_id, set_correlation_id


def make_client(handler) -> ApiClient:
    return ApiClient(
        "http://backend.test/api/",
        app_version="1.0.1",
        transport=httpx.MockTransport(handler),
    )


class TestRequestHeaders:
    """Headers sent with every backend call."""

    @pytest.mark.asyncio
    async def test_sends_app_version_and_bearer_token(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        client = make_client(handler)
        await client.request("GET", "/rooms", token="tok-1")

        assert seen[0].headers[APP_VERSION_HEADER] == "1.0.1"
        assert seen[0].headers["Authorization"] == "Bearer tok-1"
        assert seen[0].url == "http://backend.test/api/rooms"

    @pytest.mark.asyncio
    async def test_omits_authorization_without_token(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        await make_client(handler).request("GET", "/rooms")

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_forwards_correlation_id(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        set_correlation_id("corr-42")
        try:
            await make_client(handler).request("GET", "/auth/me")
        finally:
            clear_correlation_id()

        assert seen[0].headers[CORRELATION_ID_HEADER] == "corr-42"

    @pytest.mark.asyncio
    async def test_drops_none_query_params(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        await make_client(handler).request(
            "GET", "/rooms", params={"type": "SUITE", "minPrice": None}
        )

        assert dict(seen[0].url.params) == {"type": "SUITE"}


class TestResponses:
    """Parsing of successful and failed responses."""

    @pytest.mark.asyncio
    async def test_returns_parsed_json(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": "room-1"}))

        assert await client.request("GET", "/rooms/room-1") == {"id": "room-1"}

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        client = make_client(lambda request: httpx.Response(204))

        assert await client.request("DELETE", "/rooms/room-1") is None

    @pytest.mark.asyncio
    async def test_error_uses_backend_message(self):
        client = make_client(
            lambda request: httpx.Response(400, json={"message": "Room is not available"})
        )

        with pytest.raises(ApiError) as exc_info:
            await client.request("POST", "/reservations", json={})

        assert exc_info.value.message == "Room is not available"
        assert exc_info.value.status_code == 400
        assert exc_info.value.data == {"message": "Room is not available"}

    @pytest.mark.asyncio
    async def test_error_falls_back_to_error_field(self):
        client = make_client(lambda request: httpx.Response(410, json={"error": "Link expired"}))

        with pytest.raises(ApiError) as exc_info:
            await client.request("GET", "/reservations/payment-link/abc")

        assert exc_info.value.message == "Link expired"
        assert exc_info.value.data_field("error") == "Link expired"

    @pytest.mark.asyncio
    async def test_error_without_message_reports_status(self):
        client = make_client(lambda request: httpx.Response(503, text="upstream down"))

        with pytest.raises(ApiError) as exc_info:
            await client.request("GET", "/rooms")

        assert exc_info.value.message == "Request failed with status 503"
        assert exc_info.value.data == "upstream down"

    @pytest.mark.asyncio
    async def test_unauthorized_flag(self):
        client = make_client(lambda request: httpx.Response(401, json={"message": "Expired"}))

        with pytest.raises(ApiError) as exc_info:
            await client.request("GET", "/auth/me", token="old")

        assert exc_info.value.is_unauthorized

    @pytest.mark.asyncio
    async def test_transport_failure_raises_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as exc_info:
            await make_client(handler).request("GET", "/rooms")

        assert exc_info.value.message.startswith("Network error")
        assert exc_info.value.status_code is None

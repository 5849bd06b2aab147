"""Unit tests for ApiSession: caching, tokens and mutation invalidation."""

import asyncio
import json

import pytest

from conftest import reservation_payload, room_payload
from hotel_shared.endpoints import reservations as reservation_endpoints
from hotel_shared.endpoints import rooms as room_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.auth import AuthState, User
from hotel_shared.models.errors import ApiError
from hotel_shared.models.room import RoomQueryParams
from hotel_shared.services.query_cache import QueryCache


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def anonymous_api(api_client, cache) -> ApiSession:
    return ApiSession(api_client, None, cache)


@pytest.fixture
def signed_in_api(api_client, cache) -> ApiSession:
    auth = AuthState(
        user=User(id="guest-1", email="guest@example.com"),
        token="tok-guest",
        is_authenticated=True,
    )
    return ApiSession(api_client, auth, cache)


class TestQueries:
    """Cached reads."""

    @pytest.mark.asyncio
    async def test_second_query_is_served_from_cache(self, backend, anonymous_api):
        backend.add("GET", "/rooms", [room_payload()])

        first = await anonymous_api.query(room_endpoints.get_rooms)
        second = await anonymous_api.query(room_endpoints.get_rooms)

        assert first[0].name == "Ocean Suite 101"
        assert second == first
        assert len(backend.calls("GET", "/rooms")) == 1

    @pytest.mark.asyncio
    async def test_force_refetches(self, backend, anonymous_api):
        backend.add("GET", "/rooms", [room_payload()])

        await anonymous_api.query(room_endpoints.get_rooms)
        await anonymous_api.query(room_endpoints.get_rooms, force=True)

        assert len(backend.calls("GET", "/rooms")) == 2

    @pytest.mark.asyncio
    async def test_different_args_are_cached_separately(self, backend, anonymous_api):
        backend.add("GET", "/rooms", [room_payload()])

        await anonymous_api.query(room_endpoints.get_rooms)
        await anonymous_api.query(room_endpoints.get_rooms, RoomQueryParams(type="SUITE"))

        calls = backend.calls("GET", "/rooms")
        assert len(calls) == 2
        assert calls[1].url.params["type"] == "SUITE"

    @pytest.mark.asyncio
    async def test_keep_unused_for_zero_always_refetches(self, backend, signed_in_api):
        backend.add("GET", "/reservations/my-reservations", [reservation_payload()])

        await signed_in_api.query(reservation_endpoints.get_user_reservations)
        await signed_in_api.query(reservation_endpoints.get_user_reservations)

        assert len(backend.calls("GET", "/reservations/my-reservations")) == 2

    @pytest.mark.asyncio
    async def test_concurrent_identical_queries_issue_one_request(self, backend, anonymous_api):
        backend.add("GET", "/rooms", [room_payload()])

        results = await asyncio.gather(
            anonymous_api.query(room_endpoints.get_rooms),
            anonymous_api.query(room_endpoints.get_rooms),
        )

        assert results[0] == results[1]
        assert len(backend.calls("GET", "/rooms")) == 1

    @pytest.mark.asyncio
    async def test_failed_query_is_not_cached(self, backend, anonymous_api):
        backend.add("GET", "/rooms", {"message": "down"}, status=500)

        with pytest.raises(ApiError):
            await anonymous_api.query(room_endpoints.get_rooms)

        backend.add("GET", "/rooms", [room_payload()])
        rooms = await anonymous_api.query(room_endpoints.get_rooms)

        assert len(rooms) == 1

    @pytest.mark.asyncio
    async def test_malformed_response_is_an_api_error(self, backend, anonymous_api, cache):
        backend.add("GET", "/rooms", [{"name": "Missing id"}])

        with pytest.raises(ApiError) as excinfo:
            await anonymous_api.query(room_endpoints.get_rooms)

        assert excinfo.value.status_code == 502
        assert excinfo.value.message == "Unexpected response from getRooms"
        assert cache.get(room_endpoints.get_rooms.cache_key(None)) is None


class TestTokens:
    """Bearer token selection."""

    @pytest.mark.asyncio
    async def test_session_token_is_sent(self, backend, signed_in_api):
        backend.add("GET", "/reservations/res-1", reservation_payload("res-1"))

        await signed_in_api.query(reservation_endpoints.get_reservation_by_id, "res-1")

        request = backend.calls("GET", "/reservations/res-1")[0]
        assert request.headers["Authorization"] == "Bearer tok-guest"

    @pytest.mark.asyncio
    async def test_public_endpoint_never_sends_token(self, backend, signed_in_api):
        backend.add("GET", "/reservations/payment-link/link-1", reservation_payload())

        await signed_in_api.query(reservation_endpoints.get_reservation_by_payment_link, "link-1")

        request = backend.calls("GET", "/reservations/payment-link/link-1")[0]
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_explicit_token_overrides_session(self, backend, anonymous_api):
        from hotel_shared.endpoints import auth as auth_endpoints

        backend.add("GET", "/auth/me", {"id": "u1", "email": "u1@example.com"})

        await anonymous_api.query(auth_endpoints.get_current_user, token="oauth-token", force=True)

        assert backend.calls("GET", "/auth/me")[0].headers["Authorization"] == "Bearer oauth-token"


class TestMutations:
    """Writes and the cache entries they drop."""

    @pytest.mark.asyncio
    async def test_mutation_invalidates_provided_tags(self, backend, signed_in_api):
        backend.add("GET", "/rooms", [room_payload()])
        backend.add("DELETE", "/rooms/room-1", None)

        await signed_in_api.query(room_endpoints.get_rooms)
        await signed_in_api.mutate(room_endpoints.delete_room, "room-1")
        await signed_in_api.query(room_endpoints.get_rooms)

        assert len(backend.calls("GET", "/rooms")) == 2

    @pytest.mark.asyncio
    async def test_cancel_drops_that_reservation_only(self, backend, signed_in_api):
        backend.add("GET", "/reservations/res-1", reservation_payload("res-1"))
        backend.add("GET", "/reservations/res-2", reservation_payload("res-2"))
        backend.add(
            "POST", "/reservations/res-1/cancel", reservation_payload("res-1", "CANCELLED")
        )

        await signed_in_api.query(reservation_endpoints.get_reservation_by_id, "res-1")
        await signed_in_api.query(reservation_endpoints.get_reservation_by_id, "res-2")
        await signed_in_api.mutate(reservation_endpoints.cancel_reservation, "res-1")
        await signed_in_api.query(reservation_endpoints.get_reservation_by_id, "res-1")
        await signed_in_api.query(reservation_endpoints.get_reservation_by_id, "res-2")

        assert len(backend.calls("GET", "/reservations/res-1")) == 2
        assert len(backend.calls("GET", "/reservations/res-2")) == 1

    @pytest.mark.asyncio
    async def test_failed_mutation_keeps_cache(self, backend, signed_in_api):
        backend.add("GET", "/rooms", [room_payload()])
        backend.add("DELETE", "/rooms/room-1", {"message": "Room has reservations"}, status=409)

        await signed_in_api.query(room_endpoints.get_rooms)
        with pytest.raises(ApiError):
            await signed_in_api.mutate(room_endpoints.delete_room, "room-1")
        await signed_in_api.query(room_endpoints.get_rooms)

        assert len(backend.calls("GET", "/rooms")) == 1

    @pytest.mark.asyncio
    async def test_request_body_is_camel_case(self, backend, signed_in_api):
        from datetime import date

        from hotel_shared.models.reservation import CreateReservationRequest

        backend.add("POST", "/reservations", reservation_payload("res-9", "PENDING"))

        await signed_in_api.mutate(
            reservation_endpoints.create_reservation,
            CreateReservationRequest(
                room_id="room-1",
                check_in_date=date(2030, 5, 1),
                check_out_date=date(2030, 5, 4),
                number_of_guests=2,
            ),
        )

        body = json.loads(backend.calls("POST", "/reservations")[0].content)
        assert body == {
            "roomId": "room-1",
            "checkInDate": "2030-05-01",
            "checkOutDate": "2030-05-04",
            "numberOfGuests": 2,
        }

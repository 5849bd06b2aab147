"""Pytest configuration and fixtures for the hotel web frontend tests.

This module provides reusable fixtures for testing:
- A fake REST backend served through httpx.MockTransport
- Sample backend payloads (users, rooms, reservations, payments)
- A TestClient wired to the fake backend and a stubbed Stripe service
- Signing a browser session in without going through the login form
"""

import os
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Generator, Optional, Union
from unittest.mock import MagicMock

import httpx
import pytest

# === Environment Setup ===

# Set environment variables for testing before importing the app
os.environ.setdefault("API_URL", "http://backend.test/api")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_123")
os.environ.setdefault("PUBLIC_BASE_URL", "http://testserver")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")

# Fake credentials for moto; never touch a real account from unit tests
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from hotel_shared.config import BUILD_VERSION, get_settings  # noqa: E402
from hotel_shared.models.auth import User  # noqa: E402
from hotel_shared.services.api_client import ApiClient  # noqa: E402
from hotel_shared.services.session_store import Session, get_session_store  # noqa: E402
from hotel_shared.services.stripe_service import StripeService  # noqa: E402
from hotel_web.dependencies import get_client, get_stripe, reset_services  # noqa: E402

TEST_API_URL = "http://backend.test/api"
TEST_PUBLISHABLE_KEY = "pk_test_123"
TEST_TOKEN = "token-abc123"


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached services before and after each test.

    Settings, the session store and the Stripe/SSM singletons are rebuilt
    from the environment, so one test's sessions never leak into another.
    """
    reset_services()
    yield
    reset_services()


# === Fake Backend ===

Handler = Callable[[httpx.Request], Union[httpx.Response, Any]]


class FakeBackend:
    """In-memory stand-in for the hotel REST backend.

    Routes are keyed by method and path (without the /api prefix). A route
    holds either a fixed (status, body) pair or a callable receiving the
    httpx.Request. Unknown routes answer 404 with a JSON message.

    Usage:
        backend.add("GET", "/rooms", [room_payload()])
        backend.add("POST", "/auth/login", {"message": "Bad credentials"}, status=401)
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Union[tuple[int, Any], Handler]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, *, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        """Requests received for a method and path, oldest first."""
        return [
            r
            for r in self.requests
            if r.method == method.upper() and r.url.path.removeprefix("/api") == path
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {path}"})
        if callable(route):
            result = route(request)
            if isinstance(result, httpx.Response):
                return result
            return httpx.Response(200, json=result)
        status, body = route
        return httpx.Response(status, json=body)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api_client(backend: FakeBackend) -> ApiClient:
    """ApiClient whose requests are answered by the fake backend."""
    return ApiClient(
        TEST_API_URL,
        app_version=BUILD_VERSION,
        transport=httpx.MockTransport(backend.handler),
    )


@pytest.fixture
def stripe_stub() -> MagicMock:
    """StripeService stand-in; tests set confirm_card_payment results as needed."""
    stub = MagicMock(spec=StripeService)
    stub.publishable_key = TEST_PUBLISHABLE_KEY
    return stub


@pytest.fixture
def app(api_client: ApiClient, stripe_stub: MagicMock) -> Generator[Any, None, None]:
    from hotel_web.main import app as web_app

    web_app.dependency_overrides[get_client] = lambda: api_client
    web_app.dependency_overrides[get_stripe] = lambda: stripe_stub
    yield web_app
    web_app.dependency_overrides.clear()


@pytest.fixture
def client(app: Any) -> Any:
    from fastapi.testclient import TestClient

    return TestClient(app)


# === Session Helpers ===


def sign_in(client: Any, user: dict[str, Any], token: str = TEST_TOKEN) -> Session:
    """Authenticate the TestClient's browser session directly in the store."""
    session = get_session_store().create()
    session.set_credentials(User.model_validate(user), token)
    cookie_name = get_settings().session_cookie_name
    client.cookies.delete(cookie_name)
    client.cookies.set(cookie_name, session.id)
    return session


def session_for(client: Any) -> Optional[Session]:
    """Server-side session behind the TestClient's cookie."""
    return get_session_store().get(client.cookies.get(get_settings().session_cookie_name))


# === Sample Payloads ===
# Payloads are camelCase, exactly as the backend serialises them.


def future_date(days: int) -> date:
    """A date `days` after today, so past-date validation never trips."""
    return date.today() + timedelta(days=days)


def user_payload(
    user_id: str = "user-1",
    roles: Optional[list[str]] = None,
    **overrides: Any,
) -> dict[str, Any]:
    payload = {
        "id": user_id,
        "firstName": "Jane",
        "lastName": "Guest",
        "email": f"{user_id}@example.com",
        "phoneNumber": "555-0100",
        "roles": roles or ["GUEST"],
        "enabled": True,
    }
    payload.update(overrides)
    return payload


def room_payload(room_id: str = "room-1", **overrides: Any) -> dict[str, Any]:
    payload = {
        "id": room_id,
        "name": "Ocean Suite 101",
        "type": "SUITE",
        "description": "Sea view suite",
        "pricePerNight": 250.0,
        "capacity": 3,
        "amenities": ["Wifi", "Minibar"],
        "imageUrl": "",
        "additionalImages": [],
        "totalRooms": 2,
        "availableRooms": 2,
        "available": True,
        "floorNumber": 4,
        "size": 450,
    }
    payload.update(overrides)
    return payload


def reservation_payload(
    reservation_id: str = "res-12345678",
    status: str = "CONFIRMED",
    check_in: Optional[date] = None,
    check_out: Optional[date] = None,
    **overrides: Any,
) -> dict[str, Any]:
    check_in = check_in or future_date(30)
    check_out = check_out or check_in + timedelta(days=3)
    payload = {
        "id": reservation_id,
        "user": user_payload(),
        "room": room_payload(),
        "checkInDate": check_in.isoformat(),
        "checkOutDate": check_out.isoformat(),
        "numberOfGuests": 2,
        "totalAmount": 750.0,
        "status": status,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    payload.update(overrides)
    return payload


def transaction_payload(
    payment_id: str = "pay-1",
    amount: float = 750.0,
    status: str = "SUCCEEDED",
    **overrides: Any,
) -> dict[str, Any]:
    payload = {
        "id": payment_id,
        "reservation": reservation_payload(),
        "amount": amount,
        "currency": "usd",
        "status": status,
        "paymentMethod": "card",
        "stripePaymentIntentId": "pi_123",
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def guest_user() -> dict[str, Any]:
    return user_payload("guest-1", ["GUEST"], firstName="Gina", lastName="Guest")


@pytest.fixture
def manager_user() -> dict[str, Any]:
    return user_payload("manager-1", ["MANAGER"], firstName="Mona", lastName="Manager")


@pytest.fixture
def admin_user() -> dict[str, Any]:
    return user_payload("admin-1", ["ADMIN"], firstName="Ada", lastName="Admin")

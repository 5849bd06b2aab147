"""Unit tests for Session and SessionStore."""

import base64
import json
import time

import pytest

from hotel_shared.models.auth import User
from hotel_shared.services.query_cache import ROOM, Tag
from hotel_shared.services.session_store import Session, SessionStore
from hotel_shared.utils.jwt import decode_jwt_payload, is_token_expired


def make_jwt(claims: dict) -> str:
    """Unsigned token with the given claims; only the payload is ever read."""

    def part(data: dict) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    return f"{part({'alg': 'HS256'})}.{part(claims)}.signature"


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def user() -> User:
    return User(id="guest-1", email="guest@example.com", first_name="Gina")


class TestJwtClaims:
    def test_decodes_payload(self):
        token = make_jwt({"sub": "guest-1", "exp": 4102444800})

        assert decode_jwt_payload(token) == {"sub": "guest-1", "exp": 4102444800}

    def test_malformed_token_decodes_to_none(self):
        assert decode_jwt_payload("not-a-jwt") is None
        assert decode_jwt_payload(None) is None

    def test_past_exp_is_expired(self):
        assert is_token_expired(make_jwt({"exp": int(time.time()) - 60}))

    def test_token_without_exp_is_live(self):
        assert not is_token_expired(make_jwt({"sub": "guest-1"}))
        assert not is_token_expired("opaque-token")


class TestSessionCredentials:
    """set_credentials, logout and hydrate."""

    def test_set_credentials_authenticates(self, user):
        session = Session(id="s1")

        session.set_credentials(user, "tok")

        assert session.is_authenticated
        assert session.current_user == user
        assert session.token == "tok"
        assert session.auth.authenticated_at is not None

    def test_logout_clears_credentials_cache_and_pending_payment(self, user):
        session = Session(id="s1")
        session.set_credentials(user, "tok")
        session.cache.put("getRooms(null)", [], [Tag(ROOM)], keep_for=60)
        session.pending_payment = {"reservation_id": "res-1"}

        session.logout()

        assert not session.is_authenticated
        assert session.current_user is None
        assert session.token is None
        assert len(session.cache) == 0
        assert session.pending_payment is None

    def test_hydrate_logs_out_expired_token(self, user):
        session = Session(id="s1")
        session.set_credentials(user, make_jwt({"exp": int(time.time()) - 1}))

        session.hydrate()

        assert not session.is_authenticated

    def test_hydrate_keeps_live_token(self, user):
        session = Session(id="s1")
        session.set_credentials(user, make_jwt({"exp": int(time.time()) + 3600}))

        session.hydrate()

        assert session.is_authenticated

    def test_hydrate_logs_out_incomplete_state(self, user):
        session = Session(id="s1")
        session.set_credentials(user, "tok")
        session.auth.token = None

        session.hydrate()

        assert not session.is_authenticated


class TestSessionStore:
    """Cookie value to session resolution."""

    def test_unknown_cookie_creates_new_session(self):
        store = SessionStore(ttl_seconds=600)

        session = store.get_or_create("forged-value")

        assert session.id != "forged-value"
        assert store.get(session.id) is session
        assert len(store) == 1

    def test_known_cookie_returns_same_session(self):
        store = SessionStore(ttl_seconds=600)
        session = store.create()

        assert store.get_or_create(session.id) is session

    def test_idle_session_expires(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=600, clock=clock)
        session = store.create()

        clock.now = 601

        assert store.get(session.id) is None
        assert len(store) == 0

    def test_activity_extends_session(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=600, clock=clock)
        session = store.create()

        clock.now = 500
        store.get_or_create(session.id)
        clock.now = 1000

        assert store.get(session.id) is session

    def test_purge_expired_counts_removed(self):
        clock = FakeClock()
        store = SessionStore(ttl_seconds=600, clock=clock)
        store.create()
        store.create()
        clock.now = 700
        fresh = store.create()

        assert store.purge_expired() == 2
        assert store.get(fresh.id) is fresh

    def test_get_or_create_hydrates(self, user):
        store = SessionStore(ttl_seconds=600)
        session = store.create()
        session.set_credentials(user, make_jwt({"exp": int(time.time()) - 5}))

        resolved = store.get_or_create(session.id)

        assert resolved is session
        assert not resolved.is_authenticated

    def test_delete(self):
        store = SessionStore(ttl_seconds=600)
        session = store.create()

        store.delete(session.id)

        assert store.get(session.id) is None

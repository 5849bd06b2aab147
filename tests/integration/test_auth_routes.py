"""Route tests for login, logout and page access control."""

import json

import pytest

from conftest import TEST_TOKEN, session_for, sign_in, transaction_payload, user_payload

pytestmark = pytest.mark.integration


def login(client, email="gina@example.com", password="secret123", return_to=""):
    return client.post(
        "/login",
        data={"email": email, "password": password, "return_to": return_to},
        follow_redirects=False,
    )


class TestLogin:
    def test_missing_fields_rerender_form(self, client, backend):
        response = login(client, email="", password="")

        assert response.status_code == 400
        assert backend.calls("POST", "/auth/login") == []

    def test_backend_rejection_shows_message(self, client, backend):
        backend.add("POST", "/auth/login", {"message": "Invalid email or password"}, status=401)

        response = login(client)

        assert response.status_code == 400
        assert "Invalid email or password" in response.text
        assert not session_for(client).is_authenticated

    def test_rejection_without_message_uses_fallback(self, client, backend):
        backend.add("POST", "/auth/login", None, status=500)

        response = login(client)

        assert response.status_code == 400
        assert "Failed to login. Please check your credentials." in response.text

    def test_guest_returns_to_origin(self, client, backend):
        backend.add("POST", "/auth/login", {"token": TEST_TOKEN, "user": user_payload("guest-1")})

        response = login(client, return_to="/reservations")

        assert response.status_code == 303
        assert response.headers["location"] == "/reservations"
        session = session_for(client)
        assert session.is_authenticated
        assert session.current_user.id == "guest-1"
        assert session.auth.token == TEST_TOKEN

    def test_credentials_are_sent_as_json(self, client, backend):
        backend.add("POST", "/auth/login", {"token": TEST_TOKEN, "user": user_payload()})

        login(client)

        (request,) = backend.calls("POST", "/auth/login")
        assert json.loads(request.content) == {"email": "gina@example.com", "password": "secret123"}

    def test_staff_go_to_dashboard(self, client, backend):
        backend.add(
            "POST",
            "/auth/login",
            {"token": TEST_TOKEN, "user": user_payload("manager-1", roles=["MANAGER"])},
        )

        response = login(client, return_to="/reservations")

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/dashboard"

    def test_offsite_return_path_is_ignored(self, client, backend):
        backend.add("POST", "/auth/login", {"token": TEST_TOKEN, "user": user_payload()})

        response = login(client, return_to="https://evil.test/")

        assert response.headers["location"] == "/"

    def test_signing_in_again_drops_cached_results(self, client, backend, guest_user):
        session = sign_in(client, guest_user)
        session.pending_payment = {"reservation_id": "res-1"}
        backend.add("GET", "/payments/history", [transaction_payload("pay-guest-1")])
        client.get("/payments")
        backend.add("POST", "/auth/login", {"token": "tok-other", "user": user_payload("guest-2")})

        login(client)
        client.get("/payments")

        assert len(backend.calls("GET", "/payments/history")) == 2
        assert session.current_user.id == "guest-2"
        assert session.pending_payment is None


def test_logout_clears_credentials(client, guest_user):
    session = sign_in(client, guest_user)

    response = client.post("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert not session.is_authenticated


class TestAccessControl:
    def test_anonymous_visitor_is_sent_to_login(self, client):
        response = client.get("/reservations", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login?return_to=%2Freservations"

    def test_guest_cannot_open_admin_pages(self, client, guest_user):
        sign_in(client, guest_user)

        response = client.get("/admin/dashboard", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/unauthorized"

    def test_manager_cannot_manage_users(self, client, manager_user):
        sign_in(client, manager_user)

        response = client.get("/admin/users", follow_redirects=False)

        assert response.headers["location"] == "/unauthorized"

    def test_signed_in_user_skips_login_page(self, client, guest_user):
        sign_in(client, guest_user)

        response = client.get("/login", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_expired_token_signs_out(self, client, backend, guest_user):
        session = sign_in(client, guest_user)
        backend.add("GET", "/rooms/room-1", {"message": "Token expired"}, status=401)

        response = client.get("/rooms/room-1")

        assert response.status_code == 401
        assert not session.is_authenticated


class TestOAuth2Callback:
    def test_user_without_last_name_is_signed_in(self, client, backend):
        backend.add("GET", "/auth/me", user_payload("guest-9", firstName="Gina", lastName=None))

        response = client.get("/oauth2/callback?token=tok-google", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        session = session_for(client)
        assert session.current_user.full_name == "Gina"
        assert session.auth.token == "tok-google"

    def test_unreadable_user_fails_sign_in(self, client, backend):
        backend.add("GET", "/auth/me", {"email": "nobody@example.com"})

        response = client.get("/oauth2/callback?token=tok-google", follow_redirects=False)

        assert response.headers["location"] == "/login"
        session = session_for(client)
        assert not session.is_authenticated
        assert [n.message for n in session.notifications] == [
            "Failed to process authentication. Please try again."
        ]

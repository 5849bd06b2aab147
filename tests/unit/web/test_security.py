"""Unit tests for return-path handling and post-login routing."""

import pytest

from conftest import user_payload
from hotel_shared.models.auth import User
from hotel_web.security import ADMIN_HOME, login_url, post_login_redirect, safe_return_to


class TestSafeReturnTo:
    @pytest.mark.parametrize("value", ["/reservations", "/rooms/room-1?check_in_date=2030-06-20"])
    def test_accepts_local_paths(self, value):
        assert safe_return_to(value) == value

    @pytest.mark.parametrize("value", [None, "", "https://evil.test/", "//evil.test/x", "rooms"])
    def test_rejects_everything_else(self, value):
        assert safe_return_to(value) is None


class TestLoginUrl:
    def test_encodes_return_path(self):
        assert login_url("/reservations") == "/login?return_to=%2Freservations"

    def test_drops_unsafe_return_path(self):
        assert login_url("https://evil.test/") == "/login"
        assert login_url() == "/login"


class TestPostLoginRedirect:
    @pytest.mark.parametrize("role", ["ADMIN", "MANAGER"])
    def test_staff_land_on_dashboard(self, role):
        user = User.model_validate(user_payload(roles=[role]))

        assert post_login_redirect(user, "/reservations") == ADMIN_HOME

    def test_guest_returns_to_origin(self):
        user = User.model_validate(user_payload(roles=["GUEST"]))

        assert post_login_redirect(user, "/reservations") == "/reservations"
        assert post_login_redirect(user, "//evil.test") == "/"
        assert post_login_redirect(user) == "/"

"""Route tests for the public pages."""

import logging

import pytest

from conftest import room_payload, session_for, sign_in

pytestmark = pytest.mark.integration


def test_ping(client):
    response = client.get("/ping")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "hotel-web"
    assert "X-Correlation-ID" in response.headers


def test_correlation_id_is_echoed(client):
    response = client.get("/ping", headers={"X-Correlation-ID": "corr-123"})

    assert response.headers["X-Correlation-ID"] == "corr-123"


def test_page_requests_are_logged_with_session(client, caplog, guest_user):
    session = sign_in(client, guest_user)

    with caplog.at_level(logging.INFO, logger="hotel_web.middleware.correlation"):
        client.get("/about")

    (record,) = [r for r in caplog.records if r.name == "hotel_web.middleware.correlation"]
    assert record.getMessage().startswith("GET /about -> 200 in ")
    assert record.getMessage().endswith(f"(session {session.short_id})")


def test_home_lists_rooms(client, backend):
    backend.add("GET", "/rooms", [room_payload("room-1"), room_payload("room-2", name="Garden Deluxe 7")])

    response = client.get("/")

    assert response.status_code == 200
    assert "Ocean Suite 101" in response.text
    assert "Garden Deluxe 7" in response.text
    assert "$250" in response.text


def test_home_shows_load_error(client, backend):
    backend.add("GET", "/rooms", {"message": "database down"}, status=500)

    response = client.get("/")

    assert response.status_code == 200
    assert "Failed to load rooms. Please try again later." in response.text


def test_rooms_with_null_fields_render(client, backend):
    backend.add(
        "GET",
        "/rooms",
        [room_payload("room-1", imageUrl=None, description=None, amenities=None, name="Plain Twin 3")],
    )

    response = client.get("/rooms")

    assert response.status_code == 200
    assert "Plain Twin 3" in response.text


def test_unreadable_rooms_show_load_error(client, backend):
    backend.add("GET", "/rooms", [{"name": "Missing id"}])

    response = client.get("/")

    assert response.status_code == 200
    assert "Failed to load rooms. Please try again later." in response.text


def test_first_visit_issues_session_cookie(client, backend):
    backend.add("GET", "/rooms", [])

    client.get("/")

    session = session_for(client)
    assert session is not None
    assert not session.is_authenticated


def test_about_page(client):
    assert client.get("/about").status_code == 200


def test_unknown_page_is_not_found(client):
    response = client.get("/no-such-page")

    assert response.status_code == 404


def test_unauthorized_page_is_forbidden(client):
    assert client.get("/unauthorized").status_code == 403


def test_room_details_not_found(client):
    response = client.get("/rooms/missing")

    assert response.status_code == 404


def test_room_list_is_cached_per_session(client, backend):
    backend.add("GET", "/rooms", [room_payload()])

    client.get("/")
    client.get("/")

    assert len(backend.calls("GET", "/rooms")) == 1

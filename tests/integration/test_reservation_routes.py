"""Route tests for the guest reservation pages."""

import pytest

from conftest import reservation_payload, session_for, sign_in

pytestmark = pytest.mark.integration


def messages(client):
    return [(n.message, n.severity) for n in session_for(client).notifications]


def test_reservation_list_uses_my_reservations(client, backend, guest_user):
    sign_in(client, guest_user)
    backend.add("GET", "/reservations/my-reservations", [reservation_payload()])

    response = client.get("/reservations")

    assert response.status_code == 200
    assert len(backend.calls("GET", "/reservations/my-reservations")) == 1


def test_quick_cancel_success(client, backend, guest_user):
    sign_in(client, guest_user)
    backend.add("POST", "/reservations/res-1/cancel", reservation_payload("res-1", "CANCELLED"))

    response = client.post("/reservations/res-1/quick-cancel", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/reservations"
    assert messages(client) == [("Reservation cancelled successfully!", "success")]


def test_quick_cancel_failure_flashes_backend_message(client, backend, guest_user):
    sign_in(client, guest_user)
    backend.add(
        "POST",
        "/reservations/res-1/cancel",
        {"message": "Reservation cannot be cancelled"},
        status=400,
    )

    client.post("/reservations/res-1/quick-cancel", follow_redirects=False)

    assert messages(client) == [("Reservation cannot be cancelled", "error")]


def test_cancel_refetches_reservation_list(client, backend, guest_user):
    sign_in(client, guest_user)
    backend.add("GET", "/reservations/my-reservations", [reservation_payload("res-1")])
    backend.add("POST", "/reservations/res-1/cancel", reservation_payload("res-1", "CANCELLED"))

    client.get("/reservations")
    client.post("/reservations/res-1/quick-cancel", follow_redirects=False)
    client.get("/reservations")

    assert len(backend.calls("GET", "/reservations/my-reservations")) == 2

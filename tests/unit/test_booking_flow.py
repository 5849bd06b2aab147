"""Unit tests for BookingFlow.

The backend is the conftest FakeBackend; Stripe is a MagicMock standing in
for StripeService.

Test categories:
- Guest booking: step order and where a failure stops the sequence
- Paying an existing reservation (resume payment, payment links)
- Finishing a 3-D Secure redirect
"""

from datetime import date
from unittest.mock import MagicMock

import pytest

from conftest import reservation_payload, transaction_payload
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.auth import AuthState, User
from hotel_shared.models.errors import PaymentProcessorError
from hotel_shared.models.reservation import CreateReservationRequest, Reservation
from hotel_shared.services.booking_flow import (
    CONFIRMATION_FAILED_MESSAGE,
    INTENT_FAILED_MESSAGE,
    PUBLIC_CONFIRMATION_FAILED_MESSAGE,
    PAYMENT_NOT_COMPLETED_MESSAGE,
    RESERVATION_FAILED_MESSAGE,
    BookingFlow,
    build_return_url,
)
from hotel_shared.services.query_cache import QueryCache
from hotel_shared.services.stripe_service import CardConfirmation, StripeService

RETURN_URL = "http://testserver/payments/return"
INTENT = {"clientSecret": "pi_1_secret_abc", "paymentIntentId": "pi_1"}


@pytest.fixture
def api(api_client) -> ApiSession:
    auth = AuthState(
        user=User(id="guest-1", email="guest@example.com"),
        token="tok-guest",
        is_authenticated=True,
    )
    return ApiSession(api_client, auth, QueryCache())


@pytest.fixture
def stripe_mock() -> MagicMock:
    mock = MagicMock(spec=StripeService)
    mock.confirm_card_payment.return_value = CardConfirmation(
        status="succeeded", payment_intent_id="pi_1"
    )
    return mock


@pytest.fixture
def flow(api, stripe_mock) -> BookingFlow:
    return BookingFlow(api, stripe_mock)


@pytest.fixture
def booking_request() -> CreateReservationRequest:
    return CreateReservationRequest(
        room_id="room-1",
        check_in_date=date(2030, 5, 1),
        check_out_date=date(2030, 5, 4),
        number_of_guests=2,
    )


@pytest.fixture
def happy_backend(backend):
    backend.add("POST", "/reservations", reservation_payload("res-1", "PENDING"))
    backend.add("POST", "/payments/create-intent", INTENT)
    backend.add("POST", "/payments/confirm", transaction_payload())
    return backend


def paths(backend) -> list[str]:
    return [f"{r.method} {r.url.path.removeprefix('/api')}" for r in backend.requests]


class TestBook:
    """Reservation, PaymentIntent, card confirmation, backend confirmation."""

    @pytest.mark.asyncio
    async def test_success_runs_steps_in_order(self, flow, happy_backend, stripe_mock, booking_request):
        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert outcome.succeeded
        assert outcome.reservation.id == "res-1"
        assert outcome.transaction.id == "pay-1"
        assert paths(happy_backend) == [
            "POST /reservations",
            "POST /payments/create-intent",
            "POST /payments/confirm",
        ]
        stripe_mock.confirm_card_payment.assert_called_once_with(
            payment_intent_id="pi_1",
            client_secret="pi_1_secret_abc",
            payment_method_id="pm_card_visa",
            return_url=f"{RETURN_URL}?reservation_id=res-1",
        )

    @pytest.mark.asyncio
    async def test_reservation_failure_shows_backend_message(self, flow, backend, stripe_mock, booking_request):
        backend.add("POST", "/reservations", {"message": "Room is fully booked"}, status=409)

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert not outcome.succeeded
        assert outcome.error == "Room is fully booked"
        assert outcome.reservation is None
        assert paths(backend) == ["POST /reservations"]
        stripe_mock.confirm_card_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_reservation_failure_without_message_uses_fallback(self, flow, backend, booking_request):
        backend.add("POST", "/reservations", {}, status=500)

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert outcome.error == RESERVATION_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_intent_failure_keeps_reservation(self, flow, backend, stripe_mock, booking_request):
        backend.add("POST", "/reservations", reservation_payload("res-1", "PENDING"))
        backend.add("POST", "/payments/create-intent", {}, status=500)

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert not outcome.succeeded
        assert outcome.error == INTENT_FAILED_MESSAGE
        assert outcome.reservation.id == "res-1"
        stripe_mock.confirm_card_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_card_decline_stops_before_confirmation(self, flow, happy_backend, stripe_mock, booking_request):
        stripe_mock.confirm_card_payment.side_effect = PaymentProcessorError(
            "Your card was declined. Please try a different card.", "card_declined"
        )

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert outcome.error == "Your card was declined. Please try a different card."
        assert outcome.reservation.id == "res-1"
        assert happy_backend.calls("POST", "/payments/confirm") == []

    @pytest.mark.asyncio
    async def test_authentication_redirect_is_returned(self, flow, happy_backend, stripe_mock, booking_request):
        stripe_mock.confirm_card_payment.return_value = CardConfirmation(
            status="requires_action",
            payment_intent_id="pi_1",
            redirect_url="https://hooks.stripe.com/3ds/abc",
        )

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert outcome.requires_redirect
        assert outcome.redirect_url == "https://hooks.stripe.com/3ds/abc"
        assert not outcome.succeeded
        assert happy_backend.calls("POST", "/payments/confirm") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["canceled", "requires_capture", "requires_payment_method"])
    async def test_unsuccessful_card_status_is_not_confirmed(
        self, flow, happy_backend, stripe_mock, booking_request, status
    ):
        stripe_mock.confirm_card_payment.return_value = CardConfirmation(
            status=status, payment_intent_id="pi_1"
        )

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert not outcome.succeeded
        assert outcome.error == PAYMENT_NOT_COMPLETED_MESSAGE
        assert outcome.reservation.id == "res-1"
        assert paths(happy_backend) == ["POST /reservations", "POST /payments/create-intent"]

    @pytest.mark.asyncio
    async def test_confirmation_failure_message(self, flow, backend, booking_request):
        backend.add("POST", "/reservations", reservation_payload("res-1", "PENDING"))
        backend.add("POST", "/payments/create-intent", INTENT)
        backend.add("POST", "/payments/confirm", {"message": "Intent mismatch"}, status=400)

        outcome = await flow.book(booking_request, "pm_card_visa", RETURN_URL)

        assert outcome.error == CONFIRMATION_FAILED_MESSAGE


class TestPayExisting:
    """Paying for a reservation that already exists."""

    @pytest.mark.asyncio
    async def test_only_pending_reservations_are_payable(self, flow, backend, stripe_mock):
        reservation = Reservation.model_validate(reservation_payload("res-1", "CONFIRMED"))

        outcome = await flow.pay_existing(reservation, "pm_card_visa", RETURN_URL)

        assert outcome.error == "This reservation is already confirmed. Payment is not required."
        assert backend.requests == []
        stripe_mock.confirm_card_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_public_payment_uses_public_intent_without_token(self, flow, backend, stripe_mock):
        backend.add("POST", "/payments/create-intent-public", INTENT)
        backend.add("POST", "/payments/confirm", transaction_payload())
        reservation = Reservation.model_validate(reservation_payload("res-1", "PENDING"))

        outcome = await flow.pay_existing(reservation, "pm_card_visa", RETURN_URL, public=True)

        assert outcome.succeeded
        intent_request = backend.calls("POST", "/payments/create-intent-public")[0]
        assert "Authorization" not in intent_request.headers
        assert stripe_mock.confirm_card_payment.call_args.kwargs["return_url"] == (
            f"{RETURN_URL}?reservation_id=res-1&public=1"
        )

    @pytest.mark.asyncio
    async def test_public_confirmation_failure_message(self, flow, backend):
        backend.add("POST", "/payments/create-intent-public", INTENT)
        backend.add("POST", "/payments/confirm", {}, status=500)
        reservation = Reservation.model_validate(reservation_payload("res-1", "PENDING"))

        outcome = await flow.pay_existing(reservation, "pm_card_visa", RETURN_URL, public=True)

        assert outcome.error == PUBLIC_CONFIRMATION_FAILED_MESSAGE


class TestCompleteRedirect:
    """Returning from 3-D Secure."""

    @pytest.mark.asyncio
    async def test_succeeded_intent_is_confirmed(self, flow, backend, stripe_mock):
        backend.add("POST", "/payments/confirm", transaction_payload())
        stripe_mock.retrieve_payment_intent_status.return_value = CardConfirmation(
            status="succeeded", payment_intent_id="pi_1"
        )
        reservation = Reservation.model_validate(reservation_payload("res-1", "PENDING"))

        outcome = await flow.complete_redirect(reservation, "pi_1", client_secret="secret")

        assert outcome.succeeded
        stripe_mock.retrieve_payment_intent_status.assert_called_once_with("pi_1", "secret")

    @pytest.mark.asyncio
    async def test_unfinished_authentication_fails(self, flow, backend, stripe_mock):
        stripe_mock.retrieve_payment_intent_status.return_value = CardConfirmation(
            status="requires_action",
            payment_intent_id="pi_1",
            redirect_url="https://hooks.stripe.com/3ds/abc",
        )
        reservation = Reservation.model_validate(reservation_payload("res-1", "PENDING"))

        outcome = await flow.complete_redirect(reservation, "pi_1")

        assert not outcome.succeeded
        assert outcome.error == "Card authentication was not completed. Please try again."
        assert backend.requests == []


class TestBuildReturnUrl:
    def test_adds_reservation_id(self):
        assert build_return_url(RETURN_URL, "res-1") == f"{RETURN_URL}?reservation_id=res-1"

    def test_public_flag(self):
        assert build_return_url(RETURN_URL, "res-1", public=True) == (
            f"{RETURN_URL}?reservation_id=res-1&public=1"
        )

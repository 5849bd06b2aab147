"""Booking and payment orchestration.

A guest booking runs four backend/Stripe steps in a fixed order:

1. create_reservation: the backend records a PENDING reservation
2. create_payment_intent: the backend opens a Stripe PaymentIntent for the total
3. confirm the card with Stripe using the intent's client secret
4. confirm_payment: the backend verifies the charge and confirms the reservation

A failing step stops the sequence and its message is reported. Nothing is
retried or rolled back; an unpaid reservation stays PENDING until the
backend expires it, and the guest can resume payment from the reservation list.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..endpoints import payments as payment_endpoints
from ..endpoints import reservations as reservation_endpoints
from ..endpoints.base import ApiSession
from ..models.errors import ApiError, PaymentProcessorError, resolve_error_message
from ..models.payment import (
    ConfirmPaymentRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    Transaction,
)
from ..models.reservation import CreateReservationRequest, Reservation
from ..utils.logging import log_payment_operation
from .stripe_service import CardConfirmation, StripeService

logger = logging.getLogger(__name__)

RESERVATION_FAILED_MESSAGE = "Failed to create reservation. Please try again."
INTENT_FAILED_MESSAGE = "Failed to initialize payment. Please try again."
CONFIRMATION_FAILED_MESSAGE = "Payment succeeded but confirmation failed. Please contact support."
PUBLIC_CONFIRMATION_FAILED_MESSAGE = (
    "Payment was processed but confirmation failed. Please contact support."
)
NOT_PAYABLE_MESSAGE = "This reservation is already {status}. Payment is not required."
PAYMENT_NOT_COMPLETED_MESSAGE = "Payment could not be processed. Please try again."


@dataclass
class PaymentOutcome:
    """Result of a booking or payment attempt.

    Attributes:
        succeeded: The backend confirmed the payment.
        reservation: The reservation paid for, once one exists.
        transaction: Payment recorded by the backend on success.
        redirect_url: 3-D Secure page the guest must visit to finish.
        error: Guest-facing message when the attempt failed.
    """

    succeeded: bool
    reservation: Optional[Reservation] = None
    transaction: Optional[Transaction] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def requires_redirect(self) -> bool:
        return self.redirect_url is not None


def build_return_url(base_url: str, reservation_id: str, *, public: bool = False) -> str:
    """Return URL for Stripe redirects, tagged with the reservation being paid."""
    url = httpx.URL(base_url).copy_add_param("reservation_id", reservation_id)
    if public:
        url = url.copy_add_param("public", "1")
    return str(url)


class BookingFlow:
    """Sequences reservation, PaymentIntent, Stripe and confirmation calls.

    Usage:
        flow = BookingFlow(api, get_stripe_service())
        outcome = await flow.book(request, "pm_card_visa", return_url)
        if outcome.requires_redirect:
            ...  # send the guest to outcome.redirect_url
    """

    def __init__(self, api: ApiSession, stripe: StripeService) -> None:
        self._api = api
        self._stripe = stripe

    async def book(
        self,
        request: CreateReservationRequest,
        payment_method_id: str,
        return_url: str,
    ) -> PaymentOutcome:
        """Create a reservation and pay for it.

        Args:
            request: Reservation to create.
            payment_method_id: Card PaymentMethod to charge.
            return_url: Base URL Stripe returns to after 3-D Secure.

        Returns:
            PaymentOutcome describing how far the sequence got.
        """
        try:
            reservation = await self._api.mutate(reservation_endpoints.create_reservation, request)
        except ApiError as e:
            message = resolve_error_message(e, RESERVATION_FAILED_MESSAGE)
            log_payment_operation(logger, "create_reservation", room_id=request.room_id, error=message)
            return PaymentOutcome(succeeded=False, error=message)

        log_payment_operation(
            logger,
            "create_reservation",
            reservation_id=reservation.id,
            amount=reservation.total_amount,
            status=reservation.status.value,
        )
        return await self._pay(reservation, payment_method_id, return_url, public=False)

    async def pay_existing(
        self,
        reservation: Reservation,
        payment_method_id: str,
        return_url: str,
        *,
        public: bool = False,
    ) -> PaymentOutcome:
        """Pay for a reservation that already exists (resume payment, payment link).

        Only PENDING reservations can be paid.

        Args:
            reservation: Reservation to pay for.
            payment_method_id: Card PaymentMethod to charge.
            return_url: Base URL Stripe returns to after 3-D Secure.
            public: Use the unauthenticated PaymentIntent endpoint.
        """
        if not reservation.is_pending:
            return PaymentOutcome(
                succeeded=False,
                reservation=reservation,
                error=NOT_PAYABLE_MESSAGE.format(status=reservation.status.value.lower()),
            )
        return await self._pay(reservation, payment_method_id, return_url, public=public)

    async def _pay(
        self,
        reservation: Reservation,
        payment_method_id: str,
        return_url: str,
        *,
        public: bool,
    ) -> PaymentOutcome:
        intent_endpoint = (
            payment_endpoints.create_payment_intent_public
            if public
            else payment_endpoints.create_payment_intent
        )
        try:
            intent: PaymentIntentResponse = await self._api.mutate(
                intent_endpoint,
                CreatePaymentIntentRequest(
                    reservation_id=reservation.id, amount=reservation.total_amount
                ),
            )
        except ApiError as e:
            message = resolve_error_message(e, INTENT_FAILED_MESSAGE)
            log_payment_operation(
                logger, "create_payment_intent", reservation_id=reservation.id, error=message
            )
            return PaymentOutcome(succeeded=False, reservation=reservation, error=message)

        log_payment_operation(
            logger,
            "create_payment_intent",
            reservation_id=reservation.id,
            payment_intent_id=intent.payment_intent_id,
            amount=reservation.total_amount,
        )

        try:
            confirmation: CardConfirmation = await asyncio.to_thread(
                self._stripe.confirm_card_payment,
                payment_intent_id=intent.payment_intent_id,
                client_secret=intent.client_secret,
                payment_method_id=payment_method_id,
                return_url=build_return_url(return_url, reservation.id, public=public),
            )
        except PaymentProcessorError as e:
            log_payment_operation(
                logger,
                "confirm_card",
                reservation_id=reservation.id,
                payment_intent_id=intent.payment_intent_id,
                error=e.message,
                stripe_error_code=e.stripe_error_code,
            )
            return PaymentOutcome(succeeded=False, reservation=reservation, error=e.message)

        log_payment_operation(
            logger,
            "confirm_card",
            reservation_id=reservation.id,
            payment_intent_id=confirmation.payment_intent_id,
            status=confirmation.status,
        )

        if confirmation.requires_redirect:
            return PaymentOutcome(
                succeeded=False,
                reservation=reservation,
                redirect_url=confirmation.redirect_url,
            )

        if not confirmation.succeeded:
            return PaymentOutcome(
                succeeded=False, reservation=reservation, error=PAYMENT_NOT_COMPLETED_MESSAGE
            )

        return await self._confirm(
            reservation, intent.payment_intent_id, public=public
        )

    async def _confirm(
        self,
        reservation: Reservation,
        payment_intent_id: str,
        *,
        public: bool,
    ) -> PaymentOutcome:
        try:
            transaction = await self._api.mutate(
                payment_endpoints.confirm_payment,
                ConfirmPaymentRequest(
                    payment_intent_id=payment_intent_id, reservation_id=reservation.id
                ),
            )
        except ApiError as e:
            message = (
                PUBLIC_CONFIRMATION_FAILED_MESSAGE if public else CONFIRMATION_FAILED_MESSAGE
            )
            log_payment_operation(
                logger,
                "confirm_payment",
                reservation_id=reservation.id,
                payment_intent_id=payment_intent_id,
                error=e.message,
            )
            return PaymentOutcome(succeeded=False, reservation=reservation, error=message)

        log_payment_operation(
            logger,
            "confirm_payment",
            reservation_id=reservation.id,
            payment_intent_id=payment_intent_id,
            status=transaction.status.value if transaction else None,
        )
        return PaymentOutcome(succeeded=True, reservation=reservation, transaction=transaction)

    async def complete_redirect(
        self,
        reservation: Reservation,
        payment_intent_id: str,
        *,
        client_secret: Optional[str] = None,
        public: bool = False,
    ) -> PaymentOutcome:
        """Finish a payment after the guest returns from 3-D Secure.

        Args:
            reservation: Reservation named in the return URL.
            payment_intent_id: PaymentIntent Stripe appended to the return URL.
            client_secret: Intent client secret Stripe appended to the return URL.
            public: The payment started from a payment link.
        """
        try:
            confirmation = await asyncio.to_thread(
                self._stripe.retrieve_payment_intent_status, payment_intent_id, client_secret
            )
        except PaymentProcessorError as e:
            log_payment_operation(
                logger,
                "complete_redirect",
                reservation_id=reservation.id,
                payment_intent_id=payment_intent_id,
                error=e.message,
            )
            return PaymentOutcome(succeeded=False, reservation=reservation, error=e.message)

        if not confirmation.succeeded:
            message = "Card authentication was not completed. Please try again."
            log_payment_operation(
                logger,
                "complete_redirect",
                reservation_id=reservation.id,
                payment_intent_id=payment_intent_id,
                status=confirmation.status,
                error=message,
            )
            return PaymentOutcome(succeeded=False, reservation=reservation, error=message)

        return await self._confirm(reservation, payment_intent_id, public=public)

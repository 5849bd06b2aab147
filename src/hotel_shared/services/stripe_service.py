"""Stripe card confirmation for reservation payments.

The backend creates PaymentIntents and hands back their client secret; the
frontend completes them with the publishable key, exactly as Stripe.js would
in a browser. Uses the v8+ StripeClient pattern.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, NoReturn, Optional

import stripe
from stripe import StripeClient

from ..config import Settings, get_settings
from ..models.errors import (
    STRIPE_ERROR_MESSAGES,
    PaymentProcessorError,
    get_user_friendly_stripe_message,
)
from .ssm_service import SSMService, SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
PROCESSING = "processing"
REQUIRES_ACTION = "requires_action"
REQUIRES_PAYMENT_METHOD = "requires_payment_method"

CONFIGURATION_ERROR_MESSAGE = "Payment service is unavailable. Please try again later."


@dataclass
class CardConfirmation:
    """Result of confirming a PaymentIntent.

    Attributes:
        status: Stripe PaymentIntent status after confirmation.
        payment_intent_id: The confirmed PaymentIntent.
        redirect_url: 3-D Secure page to send the guest to, when required.
    """

    status: str
    payment_intent_id: str
    redirect_url: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status in (SUCCEEDED, PROCESSING)

    @property
    def requires_redirect(self) -> bool:
        return self.status == REQUIRES_ACTION and self.redirect_url is not None


def _field(obj: Any, name: str) -> Any:
    """Read a field from a StripeObject (or dict), None when absent."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


class StripeService:
    """Completes PaymentIntents created by the backend.

    Usage:
        result = get_stripe_service().confirm_card_payment(
            payment_intent_id="pi_123",
            client_secret="pi_123_secret_abc",
            payment_method_id="pm_card_visa",
            return_url="https://hotel.example.com/payments/return",
        )
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        ssm: Optional[SSMService] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._ssm = ssm
        self._client: Optional[StripeClient] = None

    @property
    def publishable_key(self) -> str:
        """Publishable key from settings, else from SSM.

        Raises:
            PaymentProcessorError: If no key is configured.
        """
        if self._settings.stripe_publishable_key:
            return self._settings.stripe_publishable_key

        ssm = self._ssm or get_ssm_service()
        try:
            return ssm.get_parameter(self._settings.stripe_publishable_key_parameter)
        except SSMServiceError as e:
            logger.error("Stripe publishable key unavailable: %s", e)
            raise PaymentProcessorError(CONFIGURATION_ERROR_MESSAGE) from e

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization)."""
        if self._client is None:
            self._client = StripeClient(self.publishable_key)
            logger.info("Stripe client initialized for environment: %s", self._settings.environment)
        return self._client

    def _raise_for_stripe_error(self, e: stripe.StripeError, operation: str) -> NoReturn:
        error_code = getattr(e, "code", None)
        decline_code = getattr(e, "decline_code", None)
        logger.error("Stripe %s failed: %s (code: %s)", operation, str(e), error_code)
        # A decline code such as insufficient_funds is more specific than card_declined
        code = decline_code if decline_code in STRIPE_ERROR_MESSAGES else error_code
        raise PaymentProcessorError(
            get_user_friendly_stripe_message(code),
            stripe_error_code=error_code,
        ) from e

    def _to_confirmation(self, intent: Any) -> CardConfirmation:
        status = _field(intent, "status") or ""
        payment_intent_id = _field(intent, "id") or ""

        if status == REQUIRES_PAYMENT_METHOD:
            last_error = _field(intent, "last_payment_error")
            code = _field(last_error, "decline_code") or _field(last_error, "code")
            raise PaymentProcessorError(get_user_friendly_stripe_message(code), stripe_error_code=code)

        redirect_url = None
        if status == REQUIRES_ACTION:
            next_action = _field(intent, "next_action")
            redirect_url = _field(_field(next_action, "redirect_to_url"), "url")
            if not redirect_url:
                raise PaymentProcessorError(
                    get_user_friendly_stripe_message("authentication_required"),
                    stripe_error_code="authentication_required",
                )

        return CardConfirmation(
            status=status,
            payment_intent_id=payment_intent_id,
            redirect_url=redirect_url,
        )

    def confirm_card_payment(
        self,
        *,
        payment_intent_id: str,
        client_secret: str,
        payment_method_id: str,
        return_url: str,
    ) -> CardConfirmation:
        """Confirm a PaymentIntent with a card PaymentMethod.

        Args:
            payment_intent_id: PaymentIntent created by the backend.
            client_secret: The intent's client secret.
            payment_method_id: Card PaymentMethod (pm_...).
            return_url: Where Stripe sends the guest after 3-D Secure.

        Returns:
            CardConfirmation; `requires_redirect` means the guest must visit
            `redirect_url` before the payment completes.

        Raises:
            PaymentProcessorError: If the card is declined or Stripe fails.
        """
        client = self._get_client()
        logger.info("Confirming PaymentIntent %s", payment_intent_id)

        try:
            intent = client.payment_intents.confirm(
                payment_intent_id,
                params={
                    "client_secret": client_secret,
                    "payment_method": payment_method_id,
                    "return_url": return_url,
                },
            )
        except stripe.StripeError as e:
            self._raise_for_stripe_error(e, "card confirmation")

        confirmation = self._to_confirmation(intent)
        logger.info(
            "PaymentIntent %s confirmed with status %s",
            confirmation.payment_intent_id,
            confirmation.status,
        )
        return confirmation

    def retrieve_payment_intent_status(
        self, payment_intent_id: str, client_secret: Optional[str] = None
    ) -> CardConfirmation:
        """Read a PaymentIntent's status after the guest returns from 3-D Secure.

        Raises:
            PaymentProcessorError: If authentication failed or Stripe fails.
        """
        client = self._get_client()
        params = {"client_secret": client_secret} if client_secret else None

        try:
            intent = client.payment_intents.retrieve(payment_intent_id, params=params)
        except stripe.StripeError as e:
            self._raise_for_stripe_error(e, "PaymentIntent retrieval")

        return self._to_confirmation(intent)


@lru_cache(maxsize=1)
def get_stripe_service() -> StripeService:
    """Get the shared StripeService instance (singleton pattern)."""
    return StripeService()


def reset_stripe_service() -> None:
    get_stripe_service.cache_clear()

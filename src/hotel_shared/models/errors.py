"""Error types raised by the backend client and the payment integration.

The backend reports failures as JSON bodies carrying a `message` (and
sometimes an `error`) field. Screens show that text directly, falling back
to a generic string per operation when it is missing.
"""

from typing import Any, Optional


class ApiError(Exception):
    """Raised when a backend REST call fails.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        data: Parsed error payload (dict for JSON bodies, str otherwise).
        message: Best available description of the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    def data_field(self, key: str) -> Optional[str]:
        """Read a non-empty string field from the error payload."""
        if isinstance(self.data, dict):
            value = self.data.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None


class PaymentProcessorError(Exception):
    """Raised when Stripe rejects or cannot process a card confirmation."""

    def __init__(self, message: str, stripe_error_code: Optional[str] = None) -> None:
        """Initialize with message and optional Stripe error code.

        Args:
            message: Guest-readable error message.
            stripe_error_code: Stripe-specific error code if available.
        """
        super().__init__(message)
        self.message = message
        self.stripe_error_code = stripe_error_code


def resolve_error_message(
    exc: BaseException,
    fallback: str,
    *,
    keys: tuple[str, ...] = ("message",),
) -> str:
    """Pick the message to show for a failed operation.

    For backend errors the payload fields named in `keys` are consulted in
    order; HTTP and transport failures without such a field use `fallback`.
    Other exceptions (e.g. PaymentProcessorError) contribute their own message.

    Args:
        exc: The exception raised by the failed call.
        fallback: Operation-specific generic text.
        keys: Payload fields to consult, in order.

    Returns:
        Message suitable for an inline alert.
    """
    if isinstance(exc, ApiError):
        for key in keys:
            value = exc.data_field(key)
            if value:
                return value
        return fallback

    message = getattr(exc, "message", None) or str(exc)
    return message or fallback


# Stripe error code to guest-facing message mapping
STRIPE_ERROR_MESSAGES: dict[str, str] = {
    # Card errors - guest can fix
    "card_declined": "Your card was declined. Please try a different card.",
    "expired_card": "Your card has expired. Please use a different card.",
    "insufficient_funds": "Your card has insufficient funds. Please try a different card.",
    "incorrect_cvc": "The security code (CVC) is incorrect. Please check and try again.",
    "incorrect_number": "The card number is incorrect. Please check and try again.",
    "invalid_cvc": "The security code (CVC) is invalid. Please check and try again.",
    "invalid_expiry_month": "The expiration month is invalid. Please check and try again.",
    "invalid_expiry_year": "The expiration year is invalid. Please check and try again.",
    "invalid_number": "The card number is invalid. Please check and try again.",
    "card_velocity_exceeded": "Too many card transactions. Please wait and try again later.",
    "authentication_required": "Your bank requires additional authentication. Please try again.",
    "payment_intent_authentication_failure": "Card authentication failed. Please try a different card.",
    "payment_intent_unexpected_state": "This payment has already been processed.",
    # Processing errors
    "processing_error": "A processing error occurred. Please try again.",
    "rate_limit": "Too many requests. Please wait a moment and try again.",
    # Generic fallback
    "generic_decline": "Your card was declined. Please try a different card.",
}


def get_user_friendly_stripe_message(
    stripe_error_code: Optional[str],
    default_message: str = "Payment could not be processed. Please try again.",
) -> str:
    """Get a guest-facing message for a Stripe error code.

    Args:
        stripe_error_code: The Stripe error code (e.g., 'card_declined').
        default_message: Message to use if error code is unknown.

    Returns:
        Guest-facing error message.
    """
    if stripe_error_code and stripe_error_code in STRIPE_ERROR_MESSAGES:
        return STRIPE_ERROR_MESSAGES[stripe_error_code]
    return default_message

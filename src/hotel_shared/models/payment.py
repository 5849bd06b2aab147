"""Payment models: transactions and PaymentIntent exchange bodies."""

from datetime import datetime
from typing import Optional

from .base import ApiModel
from .enums import PaymentStatus
from .reservation import Reservation


class Transaction(ApiModel):
    """A payment recorded by the backend."""

    id: str
    reservation: Optional[Reservation] = None
    amount: float = 0
    currency: str = "usd"
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    stripe_payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreatePaymentIntentRequest(ApiModel):
    reservation_id: str
    amount: float


class PaymentIntentResponse(ApiModel):
    client_secret: str
    payment_intent_id: str


class ConfirmPaymentRequest(ApiModel):
    payment_intent_id: str
    reservation_id: str


class RefundRequest(ApiModel):
    payment_id: str
    amount: Optional[float] = None

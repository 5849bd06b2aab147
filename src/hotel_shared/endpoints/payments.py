"""Payment endpoints: PaymentIntents, confirmation, history and refunds."""

from ..models.payment import PaymentIntentResponse, RefundRequest, Transaction
from ..services.query_cache import LIST, PAYMENT, RESERVATION, Tag
from .base import Mutation, Query, Request, arg_tag

create_payment_intent = Mutation(
    name="createPaymentIntent",
    build=lambda body: Request("POST", "/payments/create-intent", body=body),
    response=PaymentIntentResponse,
)

# Used by the payment-link page, where the payer has no account session
create_payment_intent_public = Mutation(
    name="createPaymentIntentPublic",
    build=lambda body: Request("POST", "/payments/create-intent-public", body=body),
    response=PaymentIntentResponse,
    public=True,
)

confirm_payment = Mutation(
    name="confirmPayment",
    build=lambda body: Request("POST", "/payments/confirm", body=body),
    response=Transaction,
    invalidates=[Tag(PAYMENT), Tag(RESERVATION, LIST)],
)

get_payment_history = Query(
    name="getPaymentHistory",
    build=lambda _: Request("GET", "/payments/history"),
    response=list[Transaction],
    provides=[Tag(PAYMENT)],
)

get_all_payments = Query(
    name="getAllPayments",
    build=lambda _: Request("GET", "/payments/all"),
    response=list[Transaction],
    provides=[Tag(PAYMENT)],
)

get_payment_by_id = Query(
    name="getPaymentById",
    build=lambda payment_id: Request("GET", f"/payments/{payment_id}"),
    response=Transaction,
    provides=arg_tag(PAYMENT),
)


def _refund_request(refund: RefundRequest) -> Request:
    body = {} if refund.amount is None else {"amount": refund.amount}
    return Request("POST", f"/payments/{refund.payment_id}/refund", body=body)


# Omitting the amount refunds the full payment
process_refund = Mutation(
    name="processRefund",
    build=_refund_request,
    response=Transaction,
    invalidates=[Tag(PAYMENT)],
)

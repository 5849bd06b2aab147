"""Checkout and payment pages.

Three pages take a card, all through BookingFlow:
- /booking pays for the stay stored in the session's booking context
- /resume-payment/{id} pays for an existing PENDING reservation
- /payment/{token} is the public payment link sent by staff

The browser's card element turns the card into a PaymentMethod id
(payment_method_id); the server does everything else. When Stripe asks for
3-D Secure the guest is redirected away and comes back to /payments/return,
where the payment is finished from the state saved in the session.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.status import (
    HTTP_303_SEE_OTHER,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_410_GONE,
    HTTP_502_BAD_GATEWAY,
)

from hotel_shared.config import get_settings
from hotel_shared.endpoints import reservations as reservation_endpoints
from hotel_shared.endpoints import rooms as room_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.endpoints.reservations import RESERVATION_LIST
from hotel_shared.models.auth import User
from hotel_shared.models.enums import Severity
from hotel_shared.models.errors import ApiError, PaymentProcessorError, resolve_error_message
from hotel_shared.models.reservation import CreateReservationRequest, Reservation
from hotel_shared.models.room import Room
from hotel_shared.services.booking_flow import NOT_PAYABLE_MESSAGE, BookingFlow, PaymentOutcome
from hotel_shared.services.query_cache import RESERVATION, Tag
from hotel_shared.services.session_store import Session
from hotel_shared.services.stripe_service import StripeService
from hotel_shared.utils.dates import as_aware, parse_iso_date, utc_now
from hotel_web.components.booking import build_booking_summary
from hotel_web.components.countdown import Countdown, CountdownState
from hotel_web.components.notifications import notify
from hotel_web.components.pending_banner import build_pending_banner
from hotel_web.dependencies import get_api, get_booking_flow, get_session, get_stripe
from hotel_web.forms.booking import validate_payment_method
from hotel_web.security import require_user
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["booking"])

RESERVATION_NOT_FOUND = "Reservation not found. Please check your reservations and try again."
PAYMENT_COMPLETED = "Payment completed successfully! Your reservation is now confirmed."
RESERVATION_EXPIRED = "This reservation has expired. Please make a new booking."
INVALID_PAYMENT_LINK = "Invalid payment link"
PAYMENT_LINK_NOT_FOUND = "This payment link is invalid or has expired."
PAYMENT_LINK_GONE = "This payment link has expired. Please contact the hotel."
PAYMENT_LINK_LOAD_FAILED = "Failed to load payment information. Please try again."
PAYMENT_LINK_EXPIRED = (
    "This payment link has expired. Please contact the hotel to create a new reservation."
)
PAYMENT_RETURN_FAILED = "Payment could not be completed. Please try again."


def _return_url() -> str:
    return f"{get_settings().public_base_url.rstrip('/')}/payments/return"


def _publishable_key(stripe: StripeService) -> tuple[Optional[str], Optional[str]]:
    """Publishable key for the card element, or the message to show instead."""
    try:
        return stripe.publishable_key, None
    except PaymentProcessorError as e:
        return None, e.message


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=HTTP_303_SEE_OTHER)


def _start_3ds(
    session: Session,
    outcome: PaymentOutcome,
    *,
    public: bool = False,
    token: Optional[str] = None,
) -> RedirectResponse:
    """Remember the payment in progress and send the guest to 3-D Secure."""
    reservation = outcome.reservation
    session.pending_payment = {
        "reservation_id": reservation.id,
        "reservation": reservation.model_dump(mode="json", by_alias=True),
        "public": public,
        "token": token,
    }
    logger.info("Reservation %s requires card authentication", reservation.id)
    return _redirect(outcome.redirect_url)


def _payment_success_url(reservation: Reservation) -> str:
    return f"/payment-success?reservation_id={reservation.id}&amount={reservation.total_amount:.2f}"


# Booking checkout


async def _booking_context(
    session: Session, api: ApiSession, stripe: StripeService
) -> Optional[dict[str, Any]]:
    context = session.booking_context
    if not context:
        return None

    room: Room = await api.query(room_endpoints.get_room_by_id, context["room_id"])
    summary = build_booking_summary(
        room,
        parse_iso_date(context["check_in_date"]),
        parse_iso_date(context["check_out_date"]),
        context.get("guests") or 1,
    )
    stripe_key, stripe_error = _publishable_key(stripe)
    return {
        "summary": summary,
        "special_requests": context.get("special_requests") or "",
        "stripe_key": stripe_key,
        "error": stripe_error,
        "errors": {},
    }


@router.get(
    "/booking",
    summary="Booking checkout",
    description="Summary of the stay chosen on the room page, with the card form.",
    response_class=HTMLResponse,
)
async def booking_page(
    request: Request,
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
) -> Response:
    context = await _booking_context(session, api, stripe)
    if context is None:
        return _redirect("/rooms")
    return await render(request, "booking.html", context, api=api)


@router.post(
    "/booking",
    summary="Book and pay",
    description="""
Creates the reservation, opens a PaymentIntent, confirms the card and has the
backend confirm the payment, in that order. The first failing step stops the
sequence. A reservation created before a payment failure stays PENDING and
the guest is sent to resume its payment.
""",
    response_class=HTMLResponse,
)
async def booking_submit(
    request: Request,
    payment_method_id: str = Form(""),
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
    flow: BookingFlow = Depends(get_booking_flow),
) -> Response:
    context = await _booking_context(session, api, stripe)
    if context is None:
        return _redirect("/rooms")

    payment_error = validate_payment_method(payment_method_id)
    if payment_error:
        return await render(
            request,
            "booking.html",
            {**context, "errors": {"payment_method_id": payment_error}},
            api=api,
            status_code=HTTP_400_BAD_REQUEST,
        )

    summary = context["summary"]
    outcome = await flow.book(
        CreateReservationRequest(
            room_id=summary.room.id,
            check_in_date=summary.check_in,
            check_out_date=summary.check_out,
            number_of_guests=summary.guests,
            special_requests=context["special_requests"] or None,
        ),
        payment_method_id.strip(),
        _return_url(),
    )

    if outcome.succeeded:
        session.booking_context = None
        notify(session, PAYMENT_COMPLETED, Severity.SUCCESS)
        return _redirect("/reservations")

    if outcome.requires_redirect:
        session.booking_context = None
        return _start_3ds(session, outcome)

    if outcome.reservation is not None:
        # The reservation exists and stays PENDING; paying again must not book twice
        session.booking_context = None
        notify(session, outcome.error, Severity.ERROR)
        return _redirect(f"/resume-payment/{outcome.reservation.id}")

    return await render(
        request,
        "booking.html",
        {**context, "error": outcome.error},
        api=api,
        status_code=HTTP_400_BAD_REQUEST,
    )


# Resume payment


def _countdown(api: ApiSession, reservation: Reservation) -> Optional[CountdownState]:
    """Countdown state; on expiry the cached reservation and list are dropped."""
    if reservation.expires_at is None or not reservation.is_pending:
        return None
    countdown = Countdown(
        reservation.expires_at,
        on_expired=lambda: api.invalidate([Tag(RESERVATION, reservation.id), RESERVATION_LIST]),
    )
    return countdown.tick()


async def _resume_context(
    api: ApiSession, stripe: StripeService, reservation_id: str
) -> dict[str, Any]:
    try:
        reservation: Reservation = await api.query(
            reservation_endpoints.get_reservation_by_id, reservation_id, force=True
        )
    except ApiError as e:
        logger.warning("Resume payment lookup failed for %s: %s", reservation_id, e.message)
        return {"reservation": None, "error": RESERVATION_NOT_FOUND, "errors": {}}

    countdown = _countdown(api, reservation)
    context: dict[str, Any] = {
        "reservation": reservation,
        "countdown": countdown,
        "errors": {},
        "error": None,
        "info": None,
        "stripe_key": None,
    }
    if not reservation.is_pending:
        context["info"] = NOT_PAYABLE_MESSAGE.format(status=reservation.status.value.lower())
    elif countdown is not None and countdown.is_expired:
        context["error"] = RESERVATION_EXPIRED
    else:
        context["stripe_key"], context["error"] = _publishable_key(stripe)

    try:
        others = await api.query(reservation_endpoints.get_user_reservations)
        context["banner"] = build_pending_banner(others, exclude_id=reservation_id)
    except ApiError as e:
        logger.warning("Pending reservations lookup failed: %s", e.message)
        context["banner"] = None
    return context


@router.get(
    "/resume-payment/{reservation_id}",
    summary="Resume payment",
    description="Card form for a PENDING reservation, with its expiry countdown.",
    response_class=HTMLResponse,
)
async def resume_payment_page(
    request: Request,
    reservation_id: str,
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
) -> HTMLResponse:
    context = await _resume_context(api, stripe, reservation_id)
    status_code = HTTP_404_NOT_FOUND if context["reservation"] is None else 200
    return await render(request, "resume_payment.html", context, api=api, status_code=status_code)


@router.post(
    "/resume-payment/{reservation_id}",
    summary="Pay for a PENDING reservation",
    response_class=HTMLResponse,
)
async def resume_payment_submit(
    request: Request,
    reservation_id: str,
    payment_method_id: str = Form(""),
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
    flow: BookingFlow = Depends(get_booking_flow),
) -> Response:
    context = await _resume_context(api, stripe, reservation_id)
    reservation: Optional[Reservation] = context["reservation"]
    if reservation is None or not context["stripe_key"]:
        status_code = HTTP_404_NOT_FOUND if reservation is None else HTTP_400_BAD_REQUEST
        return await render(request, "resume_payment.html", context, api=api, status_code=status_code)

    payment_error = validate_payment_method(payment_method_id)
    if payment_error:
        return await render(
            request,
            "resume_payment.html",
            {**context, "errors": {"payment_method_id": payment_error}},
            api=api,
            status_code=HTTP_400_BAD_REQUEST,
        )

    outcome = await flow.pay_existing(reservation, payment_method_id.strip(), _return_url())
    if outcome.succeeded:
        notify(session, PAYMENT_COMPLETED, Severity.SUCCESS)
        return _redirect("/reservations")
    if outcome.requires_redirect:
        return _start_3ds(session, outcome)

    return await render(
        request,
        "resume_payment.html",
        {**context, "error": outcome.error},
        api=api,
        status_code=HTTP_400_BAD_REQUEST,
    )


# Public payment link


async def _payment_link_context(
    api: ApiSession, stripe: StripeService, token: str
) -> tuple[dict[str, Any], int]:
    context: dict[str, Any] = {
        "token": token,
        "reservation": None,
        "error": None,
        "info": None,
        "errors": {},
        "stripe_key": None,
    }
    if not token.strip():
        context["error"] = INVALID_PAYMENT_LINK
        return context, HTTP_400_BAD_REQUEST

    try:
        reservation: Reservation = await api.query(
            reservation_endpoints.get_reservation_by_payment_link, token
        )
    except ApiError as e:
        logger.warning("Payment link lookup failed: %s", e.message)
        if e.status_code == HTTP_404_NOT_FOUND:
            context["error"] = PAYMENT_LINK_NOT_FOUND
        elif e.status_code == HTTP_410_GONE:
            context["error"] = PAYMENT_LINK_GONE
        else:
            context["error"] = resolve_error_message(e, PAYMENT_LINK_LOAD_FAILED, keys=("error",))
        return context, e.status_code or HTTP_502_BAD_GATEWAY

    context["reservation"] = reservation
    if not reservation.is_pending:
        context["info"] = NOT_PAYABLE_MESSAGE.format(status=reservation.status.value.lower())
    elif reservation.expires_at is not None and as_aware(reservation.expires_at) <= utc_now():
        context["error"] = PAYMENT_LINK_EXPIRED
    else:
        context["stripe_key"], context["error"] = _publishable_key(stripe)
    return context, 200


@router.get(
    "/payment/{token}",
    summary="Public payment link",
    description="Lets a customer pay for a reservation created by staff, without an account.",
    response_class=HTMLResponse,
)
async def payment_link_page(
    request: Request,
    token: str,
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
) -> HTMLResponse:
    context, status_code = await _payment_link_context(api, stripe, token)
    return await render(request, "payment_link.html", context, api=api, status_code=status_code)


@router.post("/payment/{token}", summary="Pay through a payment link", response_class=HTMLResponse)
async def payment_link_submit(
    request: Request,
    token: str,
    payment_method_id: str = Form(""),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
    flow: BookingFlow = Depends(get_booking_flow),
) -> Response:
    context, status_code = await _payment_link_context(api, stripe, token)
    reservation: Optional[Reservation] = context["reservation"]
    if reservation is None or not context["stripe_key"]:
        return await render(
            request,
            "payment_link.html",
            context,
            api=api,
            status_code=status_code if status_code != 200 else HTTP_400_BAD_REQUEST,
        )

    payment_error = validate_payment_method(payment_method_id)
    if payment_error:
        return await render(
            request,
            "payment_link.html",
            {**context, "errors": {"payment_method_id": payment_error}},
            api=api,
            status_code=HTTP_400_BAD_REQUEST,
        )

    outcome = await flow.pay_existing(
        reservation, payment_method_id.strip(), _return_url(), public=True
    )
    if outcome.succeeded:
        return _redirect(_payment_success_url(reservation))
    if outcome.requires_redirect:
        return _start_3ds(session, outcome, public=True, token=token)

    return await render(
        request,
        "payment_link.html",
        {**context, "error": outcome.error},
        api=api,
        status_code=HTTP_400_BAD_REQUEST,
    )


@router.get("/payment-success", summary="Payment confirmation page", response_class=HTMLResponse)
async def payment_success_page(
    request: Request,
    reservation_id: Optional[str] = None,
    amount: Optional[float] = None,
) -> HTMLResponse:
    return await render(
        request,
        "payment_success.html",
        {"reservation_id": reservation_id, "amount": amount},
    )


# 3-D Secure return


@router.get(
    "/payments/return",
    summary="Finish a payment after 3-D Secure",
    description="""
Stripe sends the guest back here with `payment_intent` (and its client
secret) appended. The reservation comes from the payment saved in the
session before the redirect.
""",
)
async def payment_return(
    reservation_id: str = "",
    public: bool = False,
    payment_intent: Optional[str] = None,
    payment_intent_client_secret: Optional[str] = None,
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
    flow: BookingFlow = Depends(get_booking_flow),
) -> RedirectResponse:
    pending = session.pending_payment
    session.pending_payment = None

    token: Optional[str] = None
    reservation: Optional[Reservation] = None
    if pending and pending.get("reservation_id") == reservation_id:
        reservation = Reservation.model_validate(pending["reservation"])
        public = bool(pending.get("public"))
        token = pending.get("token")
    elif not public and session.is_authenticated and reservation_id:
        try:
            reservation = await api.query(
                reservation_endpoints.get_reservation_by_id, reservation_id, force=True
            )
        except ApiError as e:
            logger.warning("3-D Secure return lookup failed for %s: %s", reservation_id, e.message)

    if reservation is None or not payment_intent:
        notify(session, PAYMENT_RETURN_FAILED, Severity.ERROR)
        return _redirect("/")

    outcome = await flow.complete_redirect(
        reservation,
        payment_intent,
        client_secret=payment_intent_client_secret,
        public=public,
    )

    if outcome.succeeded:
        if public:
            return _redirect(_payment_success_url(reservation))
        notify(session, PAYMENT_COMPLETED, Severity.SUCCESS)
        return _redirect("/reservations")

    notify(session, outcome.error or PAYMENT_RETURN_FAILED, Severity.ERROR)
    if public and token:
        return _redirect(f"/payment/{token}")
    return _redirect(f"/resume-payment/{reservation.id}")

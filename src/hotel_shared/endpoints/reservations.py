"""Reservation endpoints: booking, lookup and cancellation."""

from ..models.reservation import (
    CancellationResponse,
    RefundCalculation,
    Reservation,
)
from ..services.query_cache import LIST, RESERVATION, ROOM, Tag
from .base import Mutation, Query, Request, arg_tag, list_tags

RESERVATION_LIST = Tag(RESERVATION, LIST)


def _changed(result, arg) -> list[Tag]:
    """Tags dropped when one reservation changes."""
    reservation_id = getattr(arg, "id", arg)
    return [Tag(RESERVATION, str(reservation_id)), RESERVATION_LIST, Tag(ROOM)]


get_reservations = Query(
    name="getReservations",
    build=lambda params: Request("GET", "/reservations", params=params),
    response=list[Reservation],
    provides=[Tag(RESERVATION)],
)

get_reservation_by_id = Query(
    name="getReservationById",
    build=lambda reservation_id: Request("GET", f"/reservations/{reservation_id}"),
    response=Reservation,
    provides=arg_tag(RESERVATION),
)

# Never served from cache: the list must reflect expiries and payments immediately
get_user_reservations = Query(
    name="getUserReservations",
    build=lambda _: Request("GET", "/reservations/my-reservations"),
    response=list[Reservation],
    provides=list_tags(RESERVATION),
    keep_unused_for=0,
)

create_reservation = Mutation(
    name="createReservation",
    build=lambda body: Request("POST", "/reservations", body=body),
    response=Reservation,
    invalidates=[RESERVATION_LIST, Tag(ROOM)],
)

update_reservation = Mutation(
    name="updateReservation",
    build=lambda update: Request("PUT", f"/reservations/{update.id}", body=update),
    response=Reservation,
    invalidates=_changed,
)

cancel_reservation = Mutation(
    name="cancelReservation",
    build=lambda reservation_id: Request("POST", f"/reservations/{reservation_id}/cancel"),
    response=Reservation,
    invalidates=_changed,
)

get_cancellation_preview = Query(
    name="getCancellationPreview",
    build=lambda reservation_id: Request(
        "GET", f"/reservations/{reservation_id}/cancellation-preview"
    ),
    response=RefundCalculation,
    keep_unused_for=0,
)


def _cancel_with_refund_request(arg: dict) -> Request:
    return Request(
        "POST",
        f"/reservations/{arg['id']}/cancel-with-refund",
        body=arg["request"],
    )


cancel_with_refund = Mutation(
    name="cancelWithRefund",
    build=_cancel_with_refund_request,
    response=CancellationResponse,
    invalidates=lambda result, arg: _changed(result, arg["id"]),
)

get_reservation_by_payment_link = Query(
    name="getReservationByPaymentLink",
    build=lambda token: Request("GET", f"/reservations/payment-link/{token}"),
    response=Reservation,
    public=True,
    keep_unused_for=0,
)

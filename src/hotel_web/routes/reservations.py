"""Guest reservation pages: list, details, manage and cancellation.

Cancellation runs in three steps on /reservations/{id}/cancel:
preview (the backend's refund calculation), confirm (reason and policy
acknowledged) and success (the refund breakdown, then back to the list).
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST, HTTP_502_BAD_GATEWAY

from hotel_shared.config import CANCELLATION_REDIRECT_SECONDS
from hotel_shared.endpoints import reservations as reservation_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.endpoints.reservations import RESERVATION_LIST
from hotel_shared.models.auth import User
from hotel_shared.models.enums import Severity
from hotel_shared.models.errors import ApiError, resolve_error_message
from hotel_shared.models.reservation import CancellationRequest, CancellationResponse, Reservation
from hotel_shared.services.query_cache import RESERVATION, Tag
from hotel_shared.services.session_store import Session
from hotel_shared.utils.dates import utc_now
from hotel_web.components.cancellation import (
    CANCEL_FAILED,
    CancellationStep,
    build_cancellation_summary,
    build_refund_preview,
    validate_cancellation,
)
from hotel_web.components.countdown import Countdown
from hotel_web.components.notifications import notify
from hotel_web.components.pending_banner import build_pending_banner
from hotel_web.components.reservations import (
    build_manage_view,
    categorize_reservations,
    reservation_row,
)
from hotel_web.dependencies import get_api, get_session
from hotel_web.forms.common import parse_checkbox
from hotel_web.security import require_user
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reservations"])

RESERVATIONS_LOAD_FAILED = "Failed to load reservations. Please try again later."
DETAILS_LOAD_FAILED = "Failed to load reservation details."
MANAGE_LOAD_FAILED = "Failed to load reservation details. Please try again."
PREVIEW_LOAD_FAILED = "Failed to load cancellation details. Please try again."
QUICK_CANCEL_SUCCESS = "Reservation cancelled successfully!"
QUICK_CANCEL_FAILED = "Failed to cancel reservation."
CANCELLATION_SUCCESS = "Your reservation has been cancelled successfully."

TABS = ("upcoming", "past")


@router.get(
    "/reservations",
    summary="My reservations",
    description="Upcoming and past tabs, with a banner for unpaid reservations.",
    response_class=HTMLResponse,
)
async def reservations_page(
    request: Request,
    tab: str = "upcoming",
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    tab = tab if tab in TABS else TABS[0]
    now = utc_now()
    context: dict[str, Any] = {"tab": tab, "error": None, "groups": None, "rows": [], "banner": None}
    try:
        reservations = await api.query(reservation_endpoints.get_user_reservations)
    except ApiError as e:
        logger.warning("Reservation list failed for user %s: %s", user.id, e.message)
        context["error"] = RESERVATIONS_LOAD_FAILED
        return await render(request, "reservations.html", context, api=api)

    groups = categorize_reservations(reservations, now)
    past = tab == "past"
    context.update(
        groups=groups,
        rows=[reservation_row(r, past=past) for r in (groups.past if past else groups.upcoming)],
        banner=build_pending_banner(reservations, now),
    )
    return await render(request, "reservations.html", context, api=api)


@router.post(
    "/reservations/{reservation_id}/quick-cancel",
    summary="Cancel from the reservation list",
)
async def quick_cancel(
    reservation_id: str,
    user: User = Depends(require_user()),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    try:
        await api.mutate(reservation_endpoints.cancel_reservation, reservation_id)
    except ApiError as e:
        logger.warning("Quick cancel of %s failed: %s", reservation_id, e.message)
        notify(session, resolve_error_message(e, QUICK_CANCEL_FAILED), Severity.ERROR)
    else:
        notify(session, QUICK_CANCEL_SUCCESS, Severity.SUCCESS)
    return RedirectResponse("/reservations", status_code=HTTP_303_SEE_OTHER)


async def _load_reservation(api: ApiSession, reservation_id: str) -> Reservation:
    return await api.query(reservation_endpoints.get_reservation_by_id, reservation_id)


@router.get(
    "/reservations/{reservation_id}",
    summary="Reservation details",
    response_class=HTMLResponse,
)
async def reservation_details_page(
    request: Request,
    reservation_id: str,
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    try:
        reservation = await _load_reservation(api, reservation_id)
    except ApiError as e:
        logger.warning("Reservation %s failed to load: %s", reservation_id, e.message)
        return await render(
            request,
            "reservation_details.html",
            {"reservation": None, "error": DETAILS_LOAD_FAILED},
            api=api,
            status_code=e.status_code or HTTP_502_BAD_GATEWAY,
        )

    countdown = None
    if reservation.is_pending and reservation.expires_at is not None:
        countdown = Countdown(
            reservation.expires_at,
            on_expired=lambda: api.invalidate([Tag(RESERVATION, reservation_id), RESERVATION_LIST]),
        ).tick()

    return await render(
        request,
        "reservation_details.html",
        {"reservation": reservation, "row": reservation_row(reservation), "countdown": countdown},
        api=api,
    )


@router.get(
    "/reservations/{reservation_id}/manage",
    summary="Manage reservation",
    description="Modification and cancellation deadlines, late fee and hotel contact.",
    response_class=HTMLResponse,
)
async def reservation_manage_page(
    request: Request,
    reservation_id: str,
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    try:
        reservation = await _load_reservation(api, reservation_id)
    except ApiError as e:
        logger.warning("Reservation %s failed to load: %s", reservation_id, e.message)
        return await render(
            request,
            "reservation_manage.html",
            {"reservation": None, "error": MANAGE_LOAD_FAILED},
            api=api,
            status_code=e.status_code or HTTP_502_BAD_GATEWAY,
        )

    return await render(
        request,
        "reservation_manage.html",
        {
            "reservation": reservation,
            "row": reservation_row(reservation),
            "manage": build_manage_view(reservation),
        },
        api=api,
    )


# Cancellation with refund


async def _render_preview(
    request: Request,
    api: ApiSession,
    reservation_id: str,
    *,
    error: Optional[str] = None,
    reason: str = "",
    acknowledged: bool = False,
    status_code: int = 200,
) -> HTMLResponse:
    """Preview step: the backend's refund calculation for this reservation."""
    try:
        reservation = await _load_reservation(api, reservation_id)
        calculation = await api.query(reservation_endpoints.get_cancellation_preview, reservation_id)
    except ApiError as e:
        logger.warning("Cancellation preview for %s failed: %s", reservation_id, e.message)
        return await render(
            request,
            "cancel.html",
            {"step": CancellationStep.PREVIEW.value, "reservation": None, "error": PREVIEW_LOAD_FAILED},
            api=api,
            status_code=e.status_code or HTTP_502_BAD_GATEWAY,
        )

    return await render(
        request,
        "cancel.html",
        {
            "step": CancellationStep.PREVIEW.value,
            "reservation": reservation,
            "preview": build_refund_preview(calculation),
            "reason": reason,
            "acknowledged": acknowledged,
            "error": error,
        },
        api=api,
        status_code=status_code,
    )


@router.get(
    "/reservations/{reservation_id}/cancel",
    summary="Cancellation preview",
    response_class=HTMLResponse,
)
async def cancel_preview_page(
    request: Request,
    reservation_id: str,
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    return await _render_preview(request, api, reservation_id)


@router.post(
    "/reservations/{reservation_id}/cancel/next",
    summary="Continue to cancellation confirmation",
    description="Requires a non-blank reason and the policy acknowledgement.",
    response_class=HTMLResponse,
)
async def cancel_next(
    request: Request,
    reservation_id: str,
    reason: str = Form(""),
    acknowledge_policy: Optional[str] = Form(None),
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    acknowledged = parse_checkbox(acknowledge_policy)
    error = validate_cancellation(reason, acknowledged)
    if error:
        return await _render_preview(
            request,
            api,
            reservation_id,
            error=error,
            reason=reason,
            acknowledged=acknowledged,
            status_code=HTTP_400_BAD_REQUEST,
        )

    reservation = await _load_reservation(api, reservation_id)
    return await render(
        request,
        "cancel.html",
        {"step": CancellationStep.CONFIRM.value, "reservation": reservation, "reason": reason.strip()},
        api=api,
    )


@router.post(
    "/reservations/{reservation_id}/cancel/confirm",
    summary="Cancel with refund",
    description="""
Cancels through the backend, which applies the refund policy. On success the
breakdown is shown and the page returns to /reservations after a few seconds.
""",
    response_class=HTMLResponse,
)
async def cancel_confirm(
    request: Request,
    reservation_id: str,
    reason: str = Form(""),
    acknowledge_policy: Optional[str] = Form(None),
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> Response:
    acknowledged = parse_checkbox(acknowledge_policy)
    error = validate_cancellation(reason, acknowledged)
    if error:
        return await _render_preview(
            request,
            api,
            reservation_id,
            error=error,
            reason=reason,
            acknowledged=acknowledged,
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        response: CancellationResponse = await api.mutate(
            reservation_endpoints.cancel_with_refund,
            {
                "id": reservation_id,
                "request": CancellationRequest(reason=reason.strip(), acknowledge_policy=True),
            },
        )
    except ApiError as e:
        logger.warning("Cancellation of %s failed: %s", reservation_id, e.message)
        return await _render_preview(
            request,
            api,
            reservation_id,
            error=resolve_error_message(e, CANCEL_FAILED),
            reason=reason,
            acknowledged=acknowledged,
            status_code=HTTP_400_BAD_REQUEST,
        )

    logger.info("Reservation %s cancelled, refund %s", reservation_id, response.refund_amount)
    return await render(
        request,
        "cancel.html",
        {
            "step": CancellationStep.SUCCESS.value,
            "summary": build_cancellation_summary(response),
            "message": CANCELLATION_SUCCESS,
            "redirect_seconds": CANCELLATION_REDIRECT_SECONDS,
        },
        api=api,
    )

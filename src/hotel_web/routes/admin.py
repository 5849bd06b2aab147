"""Staff console pages.

Every page here needs ADMIN or MANAGER, except user management which is
ADMIN only. Failed backend calls are shown as alerts on the page; a failed
action is flashed and the page is shown again.

Pages:
- /admin/dashboard: overview cards, today's check-ins/outs, recent bookings
- /admin/users: search, create, enable/disable, delete
- /admin/rooms: statistics, per-room status, create, edit, delete
- /admin/reservations: search, status filter, date range, status and date edits
- /admin/assisted-booking: book for a customer and charge their card now
- /admin/assisted-booking-link: book for a customer and email a payment link
- /admin/transactions: all payments, full or partial refunds
"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST

from hotel_shared.endpoints import admin as admin_endpoints
from hotel_shared.endpoints import payments as payment_endpoints
from hotel_shared.endpoints import reservations as reservation_endpoints
from hotel_shared.endpoints import rooms as room_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.admin import ManagerBookingResponse, PaymentLinkBookingResponse
from hotel_shared.models.auth import User
from hotel_shared.models.enums import ReservationStatus, Role, RoomType, Severity
from hotel_shared.models.errors import ApiError, PaymentProcessorError, resolve_error_message
from hotel_shared.models.payment import RefundRequest, Transaction
from hotel_shared.models.reservation import DateRange, UpdateReservationRequest
from hotel_shared.models.room import Room
from hotel_shared.services.session_store import Session
from hotel_shared.services.stripe_service import StripeService
from hotel_web.components.admin import (
    ALL_STATUSES,
    dashboard_cards,
    filter_admin_reservations,
    is_self,
    search_users,
)
from hotel_web.components.notifications import notify
from hotel_web.components.reservations import reservation_row
from hotel_web.components.rooms import occupied_counts, room_number, room_status
from hotel_web.dependencies import get_api, get_session, get_stripe
from hotel_web.forms import assisted as assisted_forms
from hotel_web.forms import rooms as room_forms
from hotel_web.forms import users as user_forms
from hotel_web.forms.common import CHECK_OUT_NOT_AFTER_CHECK_IN, parse_date, parse_float
from hotel_web.security import ADMIN_HOME, ADMIN_ONLY, STAFF_ROLES, require_user
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

require_staff = require_user(STAFF_ROLES)
require_admin = require_user(ADMIN_ONLY)

DASHBOARD_LOAD_FAILED = "Failed to load dashboard data"
RECENT_LOAD_FAILED = "Failed to load recent reservations"
PULSE_LOAD_FAILED = "Failed to load today's events"

USERS_LOAD_FAILED = "Failed to load users. Please try again later."
USER_CREATED = "User created successfully"
USER_STATUS_FAILED = "Failed to update user status. Please try again."
USER_DELETED = "User deleted successfully"
USER_DELETE_FAILED = "Failed to delete user. Please try again."
CANNOT_DISABLE_SELF = "You cannot disable your own account"
CANNOT_DELETE_SELF = "You cannot delete your own account"

ROOMS_LOAD_FAILED = "Failed to load rooms. Please try again later."
ROOM_ADDED = "Room added successfully!"
ROOM_UPDATED = "Room updated successfully!"
ROOM_SAVE_FAILED = "Failed to save room"
ROOM_CREATE_FAILED = "Failed to create room. Please try again."
ROOM_DELETED = "Room deleted successfully"
ROOM_DELETE_FAILED = "Failed to delete room. Please try again."

RESERVATIONS_LOAD_FAILED = "Failed to load reservations. Please try again later."
STATUS_UPDATED = "Reservation status updated"
STATUS_UPDATE_FAILED = "Failed to update reservation status"
INVALID_STATUS = "Please choose a valid status"
DATES_UPDATED = "Reservation dates updated"
DATES_UPDATE_FAILED = "Failed to update reservation dates"
DATES_REQUIRED = "Check-in and check-out dates are required"

PAYMENTS_LOAD_FAILED = "Failed to load transactions. Please try again later."
REFUND_PROCESSED = "Refund processed successfully"
REFUND_FAILED = "Failed to process refund"
REFUND_AMOUNT_INVALID = "Refund amount must be greater than $0"
REFUND_AMOUNT_TOO_HIGH = "Refund amount cannot exceed the payment amount"
PAYMENT_NOT_FOUND = "Payment not found"


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=HTTP_303_SEE_OTHER)


@router.get("", summary="Admin home", include_in_schema=False)
async def admin_root(user: User = Depends(require_staff)) -> RedirectResponse:
    return _redirect(ADMIN_HOME)


# Dashboard


@router.get(
    "/dashboard",
    summary="Admin dashboard",
    description="Overview cards, today's check-ins and check-outs, and recent reservations.",
    response_class=HTMLResponse,
)
async def dashboard_page(
    request: Request,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    context: dict[str, Any] = {"cards": [], "pulse": [], "recent": [], "errors": {}}

    try:
        overview = await api.query(admin_endpoints.get_dashboard_overview)
        reservations = await api.query(admin_endpoints.get_all_reservations_admin)
        context["cards"] = dashboard_cards(overview, reservations)
    except ApiError as e:
        logger.warning("Dashboard overview failed: %s", e.message)
        context["errors"]["overview"] = DASHBOARD_LOAD_FAILED

    try:
        context["pulse"] = await api.query(admin_endpoints.get_todays_pulse)
    except ApiError as e:
        logger.warning("Today's pulse failed: %s", e.message)
        context["errors"]["pulse"] = PULSE_LOAD_FAILED

    try:
        context["recent"] = await api.query(admin_endpoints.get_recent_reservations)
    except ApiError as e:
        logger.warning("Recent reservations failed: %s", e.message)
        context["errors"]["recent"] = RECENT_LOAD_FAILED

    return await render(request, "admin/dashboard.html", context, api=api)


# Users (ADMIN only)


async def _render_users(
    request: Request,
    api: ApiSession,
    current: User,
    *,
    q: Optional[str] = None,
    values: Optional[dict[str, Any]] = None,
    errors: Optional[dict[str, str]] = None,
    error: Optional[str] = None,
    status_code: int = 200,
) -> HTMLResponse:
    rows: list[dict[str, Any]] = []
    load_error = None
    try:
        users = search_users(await api.query(admin_endpoints.get_all_users), q)
        rows = [{"user": u, "is_self": is_self(u, current)} for u in users]
    except ApiError as e:
        logger.warning("User list failed: %s", e.message)
        load_error = USERS_LOAD_FAILED

    return await render(
        request,
        "admin/users.html",
        {
            "rows": rows,
            "q": q or "",
            "load_error": load_error,
            "roles": [role.value for role in Role],
            "values": values or {"roles": [Role.GUEST.value]},
            "errors": errors or {},
            "error": error,
        },
        api=api,
        status_code=status_code,
    )


@router.get("/users", summary="User management", response_class=HTMLResponse)
async def users_page(
    request: Request,
    q: Optional[str] = None,
    user: User = Depends(require_admin),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    return await _render_users(request, api, user, q=q)


@router.post("/users", summary="Create user", response_class=HTMLResponse)
async def create_user(
    request: Request,
    user: User = Depends(require_admin),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    form = await request.form()
    roles = [str(r) for r in form.getlist("roles")]
    values = {
        "first_name": form.get("first_name") or "",
        "last_name": form.get("last_name") or "",
        "email": form.get("email") or "",
        "phone_number": form.get("phone_number") or "",
        "roles": roles,
    }
    password = form.get("password") or ""

    errors = user_forms.validate_new_user(
        values["first_name"],
        values["last_name"],
        values["email"],
        password,
        values["phone_number"],
        roles,
    )
    if errors:
        return await _render_users(
            request,
            api,
            user,
            values=values,
            errors=errors,
            error=user_forms.FORM_INVALID_MESSAGE,
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        created = await api.mutate(
            admin_endpoints.create_user,
            user_forms.create_user_request(
                values["first_name"],
                values["last_name"],
                values["email"],
                password,
                values["phone_number"],
                roles,
            ),
        )
    except ApiError as e:
        message, field_errors = user_forms.create_user_error(e)
        logger.warning("User creation failed: %s", e.message)
        return await _render_users(
            request,
            api,
            user,
            values=values,
            errors=field_errors,
            error=message,
            status_code=HTTP_400_BAD_REQUEST,
        )

    logger.info("User %s created by %s", created.id, user.id)
    notify(session, USER_CREATED, Severity.SUCCESS)
    return _redirect("/admin/users")


@router.post("/users/{user_id}/status", summary="Enable or disable a user")
async def update_user_status(
    user_id: str,
    enabled: str = Form(...),
    user: User = Depends(require_admin),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    enable = enabled.lower() == "true"
    if not enable and user_id == user.id:
        notify(session, CANNOT_DISABLE_SELF, Severity.WARNING)
        return _redirect("/admin/users")

    try:
        await api.mutate(admin_endpoints.update_user_status, {"id": user_id, "enabled": enable})
    except ApiError as e:
        logger.warning("Status change for user %s failed: %s", user_id, e.message)
        notify(session, resolve_error_message(e, USER_STATUS_FAILED), Severity.ERROR)
    else:
        notify(session, f"User {'enabled' if enable else 'disabled'} successfully", Severity.SUCCESS)
    return _redirect("/admin/users")


@router.post("/users/{user_id}/delete", summary="Delete a user")
async def delete_user(
    user_id: str,
    user: User = Depends(require_admin),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    if user_id == user.id:
        notify(session, CANNOT_DELETE_SELF, Severity.WARNING)
        return _redirect("/admin/users")

    try:
        await api.mutate(admin_endpoints.delete_user, user_id)
    except ApiError as e:
        logger.warning("Deleting user %s failed: %s", user_id, e.message)
        notify(session, resolve_error_message(e, USER_DELETE_FAILED), Severity.ERROR)
    else:
        notify(session, USER_DELETED, Severity.SUCCESS)
    return _redirect("/admin/users")


# Rooms


async def _render_rooms(
    request: Request,
    api: ApiSession,
    *,
    values: Optional[dict[str, Any]] = None,
    errors: Optional[dict[str, str]] = None,
    error: Optional[str] = None,
    status_code: int = 200,
) -> HTMLResponse:
    rows: list[dict[str, Any]] = []
    statistics = None
    load_error = None
    try:
        rooms = await api.query(admin_endpoints.get_all_rooms_admin)
        reservations = await api.query(admin_endpoints.get_all_reservations_admin)
        statistics = await api.query(admin_endpoints.get_room_statistics)
        occupied = occupied_counts(reservations)
        rows = [
            {"room": room, "number": room_number(room.name), "status": room_status(room, occupied)}
            for room in rooms
        ]
    except ApiError as e:
        logger.warning("Room management data failed: %s", e.message)
        load_error = ROOMS_LOAD_FAILED

    return await render(
        request,
        "admin/rooms.html",
        {
            "rows": rows,
            "statistics": statistics,
            "load_error": load_error,
            "room_types": [t.value for t in RoomType],
            "values": values or {"type": RoomType.STANDARD.value, "available": True},
            "errors": errors or {},
            "error": error,
        },
        api=api,
        status_code=status_code,
    )


@router.get("/rooms", summary="Room management", response_class=HTMLResponse)
async def rooms_page(
    request: Request,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    return await _render_rooms(request, api)


@router.post("/rooms", summary="Create room", response_class=HTMLResponse)
async def create_room(
    request: Request,
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    form = await request.form()
    data = room_forms.parse_room_form(form)
    values = dict(form)
    values["available"] = data.available

    errors = room_forms.validate_room(data)
    if errors:
        return await _render_rooms(
            request,
            api,
            values=values,
            errors=errors,
            error=room_forms.FORM_INVALID_MESSAGE,
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        room: Room = await api.mutate(room_endpoints.create_room, room_forms.create_room_request(data))
    except ApiError as e:
        logger.warning("Room creation failed: %s", e.message)
        return await _render_rooms(
            request,
            api,
            values=values,
            error=resolve_error_message(e, ROOM_CREATE_FAILED),
            status_code=HTTP_400_BAD_REQUEST,
        )

    logger.info("Room %s created by %s", room.id, user.id)
    notify(session, ROOM_ADDED, Severity.SUCCESS)
    return _redirect("/admin/rooms")


def _room_values(room: Room) -> dict[str, Any]:
    return {
        "name": room.name,
        "type": room.type.value,
        "description": room.description,
        "price_per_night": f"{room.price_per_night:g}",
        "capacity": room.capacity,
        "floor_number": room.floor_number,
        "size": room.size,
        "total_rooms": room.total_rooms,
        "image_url": room.image_url,
        "amenities": "\n".join(room.amenities),
        "additional_images": "\n".join(room.additional_images),
        "available": room.available,
    }


@router.get("/rooms/{room_id}/edit", summary="Edit room", response_class=HTMLResponse)
async def edit_room_page(
    request: Request,
    room_id: str,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    room: Room = await api.query(room_endpoints.get_room_by_id, room_id)
    return await render(
        request,
        "admin/room_edit.html",
        {
            "room": room,
            "values": _room_values(room),
            "room_types": [t.value for t in RoomType],
            "errors": {},
        },
        api=api,
    )


@router.post(
    "/rooms/{room_id}/edit",
    summary="Save room changes",
    description="Only changed fields are sent; an unchanged form is rejected without a backend call.",
    response_class=HTMLResponse,
)
async def edit_room_submit(
    request: Request,
    room_id: str,
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    room: Room = await api.query(room_endpoints.get_room_by_id, room_id)
    form = await request.form()
    data = room_forms.parse_room_form(form)
    values = dict(form)
    values["available"] = data.available

    async def form_error(message: str, errors: Optional[dict[str, str]] = None) -> HTMLResponse:
        return await render(
            request,
            "admin/room_edit.html",
            {
                "room": room,
                "values": values,
                "room_types": [t.value for t in RoomType],
                "errors": errors or {},
                "error": message,
            },
            api=api,
            status_code=HTTP_400_BAD_REQUEST,
        )

    errors = room_forms.validate_room(data)
    if errors:
        return await form_error(room_forms.FORM_INVALID_MESSAGE, errors)

    changes = room_forms.diff_room_changes(room, data)
    if not changes:
        return await form_error(room_forms.NO_CHANGES_MESSAGE)

    try:
        await api.mutate(room_endpoints.update_room, room_forms.update_room_request(room_id, changes))
    except ApiError as e:
        logger.warning("Room %s update failed: %s", room_id, e.message)
        return await form_error(resolve_error_message(e, ROOM_SAVE_FAILED))

    logger.info("Room %s updated by %s: %s", room_id, user.id, sorted(changes))
    notify(session, ROOM_UPDATED, Severity.SUCCESS)
    return _redirect("/admin/rooms")


@router.post("/rooms/{room_id}/delete", summary="Delete room")
async def delete_room(
    room_id: str,
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    try:
        await api.mutate(room_endpoints.delete_room, room_id)
    except ApiError as e:
        logger.warning("Room %s delete failed: %s", room_id, e.message)
        notify(session, resolve_error_message(e, ROOM_DELETE_FAILED), Severity.ERROR)
    else:
        notify(session, ROOM_DELETED, Severity.SUCCESS)
    return _redirect("/admin/rooms")


# Reservations


@router.get(
    "/reservations",
    summary="Reservation management",
    description="""
Search by guest, room or id and filter by status. Supplying both
`start_date` and `end_date` limits the list to that range.
Newest bookings are listed first.
""",
    response_class=HTMLResponse,
)
async def reservations_page(
    request: Request,
    q: Optional[str] = None,
    status: str = ALL_STATUSES,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    if status != ALL_STATUSES and status not in {s.value for s in ReservationStatus}:
        status = ALL_STATUSES
    start = parse_date(start_date)
    end = parse_date(end_date)

    rows = []
    error = None
    try:
        if start and end:
            reservations = await api.query(
                admin_endpoints.get_reservations_by_date_range,
                DateRange(start_date=start, end_date=end),
            )
        else:
            reservations = await api.query(admin_endpoints.get_all_reservations_admin)
        rows = [reservation_row(r) for r in filter_admin_reservations(reservations, q, status)]
    except ApiError as e:
        logger.warning("Admin reservation list failed: %s", e.message)
        error = RESERVATIONS_LOAD_FAILED

    return await render(
        request,
        "admin/reservations.html",
        {
            "rows": rows,
            "error": error,
            "filters": {
                "q": q or "",
                "status": status,
                "start_date": start.isoformat() if start else "",
                "end_date": end.isoformat() if end else "",
            },
            "statuses": [ALL_STATUSES, *(s.value for s in ReservationStatus)],
        },
        api=api,
    )


@router.post("/reservations/{reservation_id}/status", summary="Change reservation status")
async def update_reservation_status(
    reservation_id: str,
    status: str = Form(""),
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    if status not in {s.value for s in ReservationStatus}:
        notify(session, INVALID_STATUS, Severity.ERROR)
        return _redirect("/admin/reservations")

    try:
        await api.mutate(
            admin_endpoints.update_reservation_status, {"id": reservation_id, "status": status}
        )
    except ApiError as e:
        logger.warning("Status change for reservation %s failed: %s", reservation_id, e.message)
        notify(session, resolve_error_message(e, STATUS_UPDATE_FAILED), Severity.ERROR)
    else:
        notify(session, STATUS_UPDATED, Severity.SUCCESS)
    return _redirect("/admin/reservations")


@router.post("/reservations/{reservation_id}/dates", summary="Change reservation dates")
async def update_reservation_dates(
    reservation_id: str,
    check_in_date: str = Form(""),
    check_out_date: str = Form(""),
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    check_in = parse_date(check_in_date)
    check_out = parse_date(check_out_date)
    if check_in is None or check_out is None:
        notify(session, DATES_REQUIRED, Severity.ERROR)
        return _redirect("/admin/reservations")
    if check_out <= check_in:
        notify(session, CHECK_OUT_NOT_AFTER_CHECK_IN, Severity.ERROR)
        return _redirect("/admin/reservations")

    try:
        await api.mutate(
            reservation_endpoints.update_reservation,
            UpdateReservationRequest(
                id=reservation_id, check_in_date=check_in, check_out_date=check_out
            ),
        )
    except ApiError as e:
        logger.warning("Date change for reservation %s failed: %s", reservation_id, e.message)
        notify(session, resolve_error_message(e, DATES_UPDATE_FAILED), Severity.ERROR)
    else:
        notify(session, DATES_UPDATED, Severity.SUCCESS)
    return _redirect("/admin/reservations")


# Assisted booking


async def _render_assisted(
    request: Request,
    api: ApiSession,
    template: str,
    *,
    stripe: Optional[StripeService] = None,
    form: Optional[assisted_forms.AssistedBookingForm] = None,
    errors: Optional[dict[str, str]] = None,
    error: Optional[str] = None,
    result: Optional[PaymentLinkBookingResponse] = None,
    status_code: int = 200,
) -> HTMLResponse:
    rooms: list[Room] = []
    load_error = None
    try:
        rooms = await api.query(room_endpoints.get_rooms)
    except ApiError as e:
        logger.warning("Room list for assisted booking failed: %s", e.message)
        load_error = ROOMS_LOAD_FAILED

    stripe_key = None
    if stripe is not None:
        try:
            stripe_key = stripe.publishable_key
        except PaymentProcessorError as e:
            load_error = load_error or e.message

    return await render(
        request,
        template,
        {
            "rooms": rooms,
            "form": form or assisted_forms.AssistedBookingForm(),
            "errors": errors or {},
            "error": error,
            "load_error": load_error,
            "result": result,
            "stripe_key": stripe_key,
            "min_date": date.today().isoformat(),
        },
        api=api,
        status_code=status_code,
    )


async def _find_room(api: ApiSession, room_id: str) -> Optional[Room]:
    if not room_id:
        return None
    try:
        return await api.query(room_endpoints.get_room_by_id, room_id)
    except ApiError as e:
        logger.warning("Room %s lookup failed: %s", room_id, e.message)
        return None


@router.get(
    "/assisted-booking",
    summary="Assisted booking with card",
    response_class=HTMLResponse,
)
async def assisted_booking_page(
    request: Request,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
) -> HTMLResponse:
    return await _render_assisted(request, api, "admin/assisted_booking.html", stripe=stripe)


@router.post(
    "/assisted-booking",
    summary="Book for a customer and charge their card",
    description="""
The customer's card is tokenized in the browser; the backend creates the
reservation and charges the PaymentMethod in one call.
""",
    response_class=HTMLResponse,
)
async def assisted_booking_submit(
    request: Request,
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
) -> Response:
    data = assisted_forms.parse_assisted_form(await request.form())
    room = await _find_room(api, data.room_id)
    errors = assisted_forms.validate_token_booking(data, room, date.today())
    if errors:
        return await _render_assisted(
            request,
            api,
            "admin/assisted_booking.html",
            stripe=stripe,
            form=data,
            errors=errors,
            error=assisted_forms.FORM_INVALID_MESSAGE,
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        booking: ManagerBookingResponse = await api.mutate(
            admin_endpoints.create_assisted_booking_token,
            assisted_forms.token_booking_request(data),
        )
    except ApiError as e:
        logger.warning("Assisted booking failed for %s: %s", data.customer_email, e.message)
        return await _render_assisted(
            request,
            api,
            "admin/assisted_booking.html",
            stripe=stripe,
            form=data,
            error=resolve_error_message(e, assisted_forms.TOKEN_BOOKING_FAILED),
            status_code=HTTP_400_BAD_REQUEST,
        )

    logger.info(
        "Assisted booking %s created by %s, charge %s",
        booking.reservation.id,
        user.id,
        booking.payment.id,
    )
    notify(
        session,
        f"Booking created successfully! Reservation ID: {booking.reservation.id}. "
        f"Payment of ${booking.payment.amount:.2f} processed.",
        Severity.SUCCESS,
    )
    return _redirect("/admin/assisted-booking")


@router.get(
    "/assisted-booking-link",
    summary="Assisted booking with payment link",
    response_class=HTMLResponse,
)
async def assisted_booking_link_page(
    request: Request,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    return await _render_assisted(request, api, "admin/assisted_booking_link.html")


@router.post(
    "/assisted-booking-link",
    summary="Book for a customer and send a payment link",
    description="Creates a PENDING reservation; the backend emails the customer a link to pay.",
    response_class=HTMLResponse,
)
async def assisted_booking_link_submit(
    request: Request,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    data = assisted_forms.parse_assisted_form(await request.form())
    room = await _find_room(api, data.room_id)
    errors = assisted_forms.validate_payment_link_booking(data, room, date.today())
    if errors:
        return await _render_assisted(
            request,
            api,
            "admin/assisted_booking_link.html",
            form=data,
            errors=errors,
            error=assisted_forms.FORM_INVALID_MESSAGE,
            status_code=HTTP_400_BAD_REQUEST,
        )

    try:
        result: PaymentLinkBookingResponse = await api.mutate(
            admin_endpoints.create_reservation_with_payment_link,
            assisted_forms.payment_link_request(data),
        )
    except ApiError as e:
        logger.warning("Payment link booking failed for %s: %s", data.customer_email, e.message)
        return await _render_assisted(
            request,
            api,
            "admin/assisted_booking_link.html",
            form=data,
            error=resolve_error_message(e, assisted_forms.LINK_BOOKING_FAILED),
            status_code=HTTP_400_BAD_REQUEST,
        )

    logger.info("Payment link booking %s created by %s", result.reservation.id, user.id)
    return await _render_assisted(
        request, api, "admin/assisted_booking_link.html", result=result
    )


# Transactions


@router.get(
    "/transactions",
    summary="All transactions",
    response_class=HTMLResponse,
)
async def transactions_page(
    request: Request,
    user: User = Depends(require_staff),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    transactions: list[Transaction] = []
    error = None
    try:
        transactions = await api.query(payment_endpoints.get_all_payments)
    except ApiError as e:
        logger.warning("Transaction list failed: %s", e.message)
        error = PAYMENTS_LOAD_FAILED

    transactions = sorted(
        transactions, key=lambda t: t.created_at.timestamp() if t.created_at else 0, reverse=True
    )
    return await render(
        request,
        "admin/transactions.html",
        {"transactions": transactions, "error": error},
        api=api,
    )


@router.post(
    "/transactions/{payment_id}/refund",
    summary="Refund a payment",
    description="Leave the amount blank to refund the full payment.",
)
async def refund_payment(
    payment_id: str,
    amount: str = Form(""),
    user: User = Depends(require_staff),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> RedirectResponse:
    refund_amount: Optional[float] = None
    if amount.strip():
        refund_amount = parse_float(amount)
        if refund_amount is None or refund_amount <= 0:
            notify(session, REFUND_AMOUNT_INVALID, Severity.ERROR)
            return _redirect("/admin/transactions")

        try:
            payment: Transaction = await api.query(payment_endpoints.get_payment_by_id, payment_id)
        except ApiError as e:
            logger.warning("Payment %s lookup failed: %s", payment_id, e.message)
            notify(session, resolve_error_message(e, PAYMENT_NOT_FOUND), Severity.ERROR)
            return _redirect("/admin/transactions")
        if refund_amount > payment.amount:
            notify(session, REFUND_AMOUNT_TOO_HIGH, Severity.ERROR)
            return _redirect("/admin/transactions")

    try:
        await api.mutate(
            payment_endpoints.process_refund,
            RefundRequest(payment_id=payment_id, amount=refund_amount),
        )
    except ApiError as e:
        logger.warning("Refund of payment %s failed: %s", payment_id, e.message)
        notify(session, resolve_error_message(e, REFUND_FAILED), Severity.ERROR)
    else:
        logger.info("Payment %s refunded by %s (amount %s)", payment_id, user.id, refund_amount or "full")
        notify(session, REFUND_PROCESSED, Severity.SUCCESS)
    return _redirect("/admin/transactions")

"""Room search and room details pages.

The details page carries the booking form. Submitting it stores the chosen
stay in the session's booking context; anonymous visitors are sent to log in
first and land on /booking afterwards.
"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST

from hotel_shared.endpoints import rooms as room_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.enums import RoomType
from hotel_shared.models.errors import ApiError
from hotel_shared.models.room import AvailableRoomsQuery, Room
from hotel_shared.services.session_store import Session
from hotel_web.components.booking import build_booking_summary
from hotel_web.components.rooms import filter_rooms, parse_room_type, room_card, room_cards
from hotel_web.dependencies import get_api, get_session
from hotel_web.forms.booking import StaySelection, parse_stay, validate_stay
from hotel_web.forms.common import FormErrors, parse_int, validate_stay_dates
from hotel_web.security import login_url
from hotel_web.templating import render

from .home import NO_ROOMS_MESSAGE, ROOMS_LOAD_FAILED

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rooms"])

NO_MATCHING_ROOMS_MESSAGE = "No available rooms found matching your search criteria."
BOOKING_PATH = "/booking"


@router.get(
    "/rooms",
    summary="Room search",
    description="""
Filter rooms by type or name. When both stay dates are given the backend's
availability search is used instead of the full room list.
""",
    response_class=HTMLResponse,
)
async def rooms_page(
    request: Request,
    type: Optional[str] = None,
    name: Optional[str] = None,
    check_in_date: Optional[str] = None,
    check_out_date: Optional[str] = None,
    guests: Optional[str] = None,
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    room_type = parse_room_type(type)
    stay = parse_stay(check_in_date, check_out_date, guests)
    searching = bool(room_type or name or stay.check_in or stay.check_out)

    errors: FormErrors = {}
    if stay.check_in and stay.check_out:
        errors = validate_stay_dates(stay.check_in, stay.check_out, date.today())

    error = None
    cards = []
    try:
        if stay.check_in and stay.check_out and not errors:
            rooms = await api.query(
                room_endpoints.get_available_rooms,
                AvailableRoomsQuery(
                    start_date=stay.check_in,
                    end_date=stay.check_out,
                    guests=max(stay.guests or 1, 1),
                ),
            )
        else:
            rooms = await api.query(room_endpoints.get_rooms)
        cards = room_cards(filter_rooms(rooms, room_type=room_type, room_name=name))
    except ApiError as e:
        logger.warning("Room search failed: %s", e.message)
        error = ROOMS_LOAD_FAILED

    return await render(
        request,
        "rooms.html",
        {
            "cards": cards,
            "room_types": list(RoomType),
            "search": {
                "type": room_type.value if room_type else "",
                "name": name or "",
                "check_in_date": check_in_date or "",
                "check_out_date": check_out_date or "",
                "guests": guests or "",
            },
            "errors": errors,
            "error": error,
            "empty_message": NO_MATCHING_ROOMS_MESSAGE if searching else NO_ROOMS_MESSAGE,
        },
        api=api,
    )


def _details_context(room: Room, stay: StaySelection, special_requests: str) -> dict[str, Any]:
    summary = None
    if stay.check_in and stay.check_out and stay.check_out > stay.check_in:
        summary = build_booking_summary(room, stay.check_in, stay.check_out, stay.guests or 1)
    return {
        "room": room,
        "card": room_card(room),
        "summary": summary,
        "values": {
            "check_in_date": stay.check_in.isoformat() if stay.check_in else "",
            "check_out_date": stay.check_out.isoformat() if stay.check_out else "",
            "guests": stay.raw_guests or "1",
            "special_requests": special_requests,
        },
        "min_date": date.today().isoformat(),
    }


@router.get("/rooms/{room_id}", summary="Room details", response_class=HTMLResponse)
async def room_details_page(
    request: Request,
    room_id: str,
    check_in_date: Optional[str] = None,
    check_out_date: Optional[str] = None,
    guests: Optional[str] = None,
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    room: Room = await api.query(room_endpoints.get_room_by_id, room_id)

    special_requests = ""
    context = session.booking_context
    if context and context.get("room_id") == room_id and not check_in_date:
        check_in_date = context.get("check_in_date")
        check_out_date = context.get("check_out_date")
        guests = str(context.get("guests") or "")
        special_requests = context.get("special_requests") or ""

    stay = parse_stay(check_in_date, check_out_date, guests)
    return await render(
        request,
        "room_details.html",
        {**_details_context(room, stay, special_requests), "errors": {}},
        api=api,
    )


@router.post(
    "/rooms/{room_id}/book",
    summary="Start a booking",
    description="""
Validates the stay and stores it as the session's booking context, then
continues to /booking. Anonymous visitors log in first.
""",
    response_class=HTMLResponse,
)
async def book_room(
    request: Request,
    room_id: str,
    check_in_date: str = Form(""),
    check_out_date: str = Form(""),
    guests: str = Form(""),
    special_requests: str = Form(""),
    session: Session = Depends(get_session),
    api: ApiSession = Depends(get_api),
) -> Response:
    room: Room = await api.query(room_endpoints.get_room_by_id, room_id)
    stay = parse_stay(check_in_date, check_out_date, guests)

    errors = validate_stay(stay, room.capacity, date.today())
    if errors:
        return await render(
            request,
            "room_details.html",
            {**_details_context(room, stay, special_requests), "errors": errors},
            api=api,
            status_code=HTTP_400_BAD_REQUEST,
        )

    session.booking_context = {
        "room_id": room.id,
        "check_in_date": stay.check_in.isoformat(),
        "check_out_date": stay.check_out.isoformat(),
        "guests": parse_int(stay.raw_guests),
        "special_requests": special_requests.strip(),
    }

    if not session.is_authenticated:
        session.return_to = BOOKING_PATH
        return RedirectResponse(login_url(BOOKING_PATH), status_code=HTTP_303_SEE_OTHER)
    return RedirectResponse(BOOKING_PATH, status_code=HTTP_303_SEE_OTHER)

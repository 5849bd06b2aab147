"""Landing, about and unauthorized pages."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from starlette.status import HTTP_403_FORBIDDEN

from hotel_shared.endpoints import rooms as room_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.enums import RoomType
from hotel_shared.models.errors import ApiError
from hotel_web.components.rooms import filter_rooms, parse_room_type, room_cards
from hotel_web.dependencies import get_api
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

ROOMS_LOAD_FAILED = "Failed to load rooms. Please try again later."
NO_ROOMS_MESSAGE = "No available rooms found."


@router.get(
    "/",
    summary="Home page",
    description="Room showcase with a room type (category) filter.",
    response_class=HTMLResponse,
)
async def home_page(
    request: Request,
    type: Optional[str] = None,
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    room_type = parse_room_type(type)
    error = None
    cards = []
    try:
        rooms = await api.query(room_endpoints.get_rooms)
        cards = room_cards(filter_rooms(rooms, room_type=room_type))
    except ApiError as e:
        logger.warning("Home page rooms failed: %s", e.message)
        error = ROOMS_LOAD_FAILED

    return await render(
        request,
        "home.html",
        {
            "cards": cards,
            "room_types": list(RoomType),
            "selected_type": room_type.value if room_type else "",
            "error": error,
            "empty_message": NO_ROOMS_MESSAGE,
        },
        api=api,
    )


@router.get("/about", summary="About page", response_class=HTMLResponse)
async def about_page(request: Request, api: ApiSession = Depends(get_api)) -> HTMLResponse:
    return await render(request, "about.html", api=api)


@router.get(
    "/unauthorized",
    summary="Access denied page",
    description="Shown when a signed-in user lacks the role a page requires.",
    response_class=HTMLResponse,
)
async def unauthorized_page(request: Request, api: ApiSession = Depends(get_api)) -> HTMLResponse:
    return await render(request, "unauthorized.html", api=api, status_code=HTTP_403_FORBIDDEN)

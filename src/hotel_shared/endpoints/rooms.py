"""Room endpoints: browsing, availability and admin CRUD."""

from typing import Optional

from ..models.room import AvailabilityQuery, Room, RoomAvailability, RoomQueryParams
from ..services.query_cache import ROOM, Tag
from .base import Mutation, Query, Request, arg_tag


def _params(model: Optional[RoomQueryParams | AvailabilityQuery]) -> Optional[dict]:
    return model.to_payload() if model is not None else None


get_rooms = Query(
    name="getRooms",
    build=lambda params: Request("GET", "/rooms", params=_params(params)),
    response=list[Room],
    provides=[Tag(ROOM)],
)

get_room_by_id = Query(
    name="getRoomById",
    build=lambda room_id: Request("GET", f"/rooms/{room_id}"),
    response=Room,
    provides=arg_tag(ROOM),
)

get_available_rooms = Query(
    name="getAvailableRooms",
    build=lambda q: Request(
        "GET",
        "/rooms/available",
        params={
            "checkInDate": q.start_date.isoformat(),
            "checkOutDate": q.end_date.isoformat(),
            "guests": q.guests,
        },
    ),
    response=list[Room],
    provides=[Tag(ROOM)],
)

get_rooms_with_availability = Query(
    name="getRoomsWithAvailability",
    build=lambda q: Request("GET", "/rooms/with-availability", params=_params(q)),
    response=list[RoomAvailability],
    provides=[Tag(ROOM)],
)

create_room = Mutation(
    name="createRoom",
    build=lambda body: Request("POST", "/rooms", body=body),
    response=Room,
    invalidates=[Tag(ROOM)],
)

update_room = Mutation(
    name="updateRoom",
    build=lambda update: Request("PUT", f"/rooms/{update.id}", body=update),
    response=Room,
    invalidates=arg_tag(ROOM, Tag(ROOM)),
)

delete_room = Mutation(
    name="deleteRoom",
    build=lambda room_id: Request("DELETE", f"/rooms/{room_id}"),
    invalidates=[Tag(ROOM)],
)

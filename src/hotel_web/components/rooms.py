"""Room presentation: cards, filtering and admin room status."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from hotel_shared.models.enums import ReservationStatus, RoomType
from hotel_shared.models.reservation import Reservation
from hotel_shared.models.room import Room
from hotel_shared.utils.formatting import format_price

_IMAGE_PARAMS = "?w=800&h=480&fit=crop&q=90"

TYPE_IMAGES: dict[RoomType, str] = {
    RoomType.PRESIDENTIAL: f"https://images.unsplash.com/photo-1631049307264-da0ec9d70304{_IMAGE_PARAMS}",
    RoomType.SUITE: f"https://images.unsplash.com/photo-1611892440504-42a792e24d32{_IMAGE_PARAMS}",
    RoomType.DELUXE: f"https://images.unsplash.com/photo-1590490360182-c33d57733427{_IMAGE_PARAMS}",
    RoomType.STANDARD: f"https://images.unsplash.com/photo-1522771739844-6a9f6d5f14af{_IMAGE_PARAMS}",
}

# Checked in order; the first keyword found in the room name wins
NAME_KEYWORD_TYPES: tuple[tuple[str, RoomType], ...] = (
    ("presidential", RoomType.PRESIDENTIAL),
    ("alpine", RoomType.STANDARD),
    ("lodge", RoomType.STANDARD),
    ("mountain", RoomType.STANDARD),
    ("urban", RoomType.DELUXE),
    ("loft", RoomType.DELUXE),
    ("city", RoomType.DELUXE),
    ("garden", RoomType.SUITE),
    ("terrace", RoomType.SUITE),
    ("poolside", RoomType.SUITE),
    ("penthouse", RoomType.PRESIDENTIAL),
    ("skyline", RoomType.PRESIDENTIAL),
    ("downtown", RoomType.PRESIDENTIAL),
)

GUEST_FAVORITE = "Guest favorite"
NEW = "New"

MAINTENANCE = "Maintenance"
OCCUPIED = "Occupied"
AVAILABLE = "Available"

_OCCUPYING = (ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN)
_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class RoomCard:
    """View data for one room in a grid."""

    id: str
    name: str
    type: RoomType
    description: str
    image_url: str
    price_label: str
    capacity: int
    rating: str
    badge: str
    amenities: tuple[str, ...]


def fallback_image(room_type: RoomType, name: Optional[str]) -> str:
    """Stock image for a room without its own image, chosen by name then type."""
    if name:
        lowered = name.lower()
        for keyword, keyword_type in NAME_KEYWORD_TYPES:
            if keyword in lowered:
                return TYPE_IMAGES[keyword_type]
    return TYPE_IMAGES.get(room_type, TYPE_IMAGES[RoomType.STANDARD])


def _string_hash(value: str) -> int:
    """32-bit signed string hash (h = 31 * h + c), stable across processes."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h - (1 << 32) if h >= (1 << 31) else h


def room_rating(room_id: str) -> str:
    """Display rating between 4.00 and 4.90, fixed per room id."""
    seed = abs(_string_hash(room_id)) % 10
    return f"{4.0 + seed * 0.1:.2f}"


def room_badge(room_type: RoomType) -> str:
    return NEW if room_type == RoomType.SUITE else GUEST_FAVORITE


def room_card(room: Room) -> RoomCard:
    image = room.image_url if room.image_url and room.image_url.strip() else None
    return RoomCard(
        id=room.id,
        name=room.name,
        type=room.type,
        description=room.description,
        image_url=image or fallback_image(room.type, room.name),
        price_label=format_price(room.price_per_night),
        capacity=room.capacity,
        rating=room_rating(room.id),
        badge=room_badge(room.type),
        amenities=tuple(room.amenities),
    )


def room_cards(rooms: Iterable[Room]) -> list[RoomCard]:
    """One card per room, in input order."""
    return [room_card(room) for room in rooms]


def filter_rooms(
    rooms: Iterable[Room],
    room_type: Optional[RoomType | str] = None,
    room_name: Optional[str] = None,
) -> list[Room]:
    """Apply the room search filters.

    A name search (case-insensitive substring) takes precedence over the
    type filter. Rooms explicitly marked unavailable are always dropped.
    """
    result = list(rooms)
    if room_name:
        needle = room_name.lower()
        result = [r for r in result if needle in r.name.lower()]
    elif room_type:
        wanted = RoomType(room_type)
        result = [r for r in result if r.type == wanted]
    return [r for r in result if r.available is not False]


def occupied_counts(reservations: Iterable[Reservation]) -> dict[str, int]:
    """Count CONFIRMED and CHECKED_IN reservations per room id."""
    counts: dict[str, int] = {}
    for reservation in reservations:
        if reservation.status in _OCCUPYING:
            counts[reservation.room.id] = counts.get(reservation.room.id, 0) + 1
    return counts


def room_status(room: Room, occupied: dict[str, int]) -> str:
    """Admin status label for a room."""
    if not room.available:
        return MAINTENANCE
    if (room.total_rooms or 1) - occupied.get(room.id, 0) <= 0:
        return OCCUPIED
    return AVAILABLE


def room_number(name: Optional[str]) -> str:
    """First run of digits in the room name, or "N/A"."""
    match = _DIGITS.search(name or "")
    return match.group(0) if match else "N/A"


def parse_room_type(value: Optional[str]) -> Optional[RoomType]:
    """Room type from a query string; unknown values mean no filter."""
    if not value:
        return None
    try:
        return RoomType(value.upper())
    except ValueError:
        return None

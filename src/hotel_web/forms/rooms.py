"""Admin room create and edit forms."""

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from hotel_shared.models.enums import RoomType
from hotel_shared.models.room import CreateRoomRequest, Room, UpdateRoomRequest

from .common import FormErrors, clean, parse_checkbox, parse_float, parse_int, split_list

MAX_PRICE = 1_000_000
FORM_INVALID_MESSAGE = "Please fix all validation errors before submitting"
NO_CHANGES_MESSAGE = "No changes detected"
PRICE_NOT_POSITIVE = "Price must be a positive number"

# Numbers closer than this are considered unchanged
_NUMBER_TOLERANCE = 0.01


@dataclass
class RoomFormData:
    """Values submitted by the room create/edit forms."""

    name: str = ""
    type: RoomType = RoomType.STANDARD
    description: str = ""
    price_input: str = ""
    capacity: int = 0
    floor_number: int = 0
    size: int = 0
    total_rooms: int = 0
    image_url: str = ""
    amenities: list[str] = field(default_factory=list)
    additional_images: list[str] = field(default_factory=list)
    available: bool = True

    @property
    def price(self) -> Optional[int]:
        """Nightly price rounded to whole dollars, None when not a positive number."""
        value = parse_float(self.price_input)
        if value is None or value <= 0:
            return None
        return round(value)


def parse_room_form(form: Any) -> RoomFormData:
    """Build RoomFormData from a submitted form mapping.

    Unparseable numbers become 0 so range checks report them.
    """
    try:
        room_type = RoomType(clean(form.get("type")) or RoomType.STANDARD.value)
    except ValueError:
        room_type = RoomType.STANDARD
    return RoomFormData(
        name=form.get("name") or "",
        type=room_type,
        description=form.get("description") or "",
        price_input=clean(form.get("price_per_night")),
        capacity=parse_int(form.get("capacity")) or 0,
        floor_number=parse_int(form.get("floor_number")) or 0,
        size=parse_int(form.get("size")) or 0,
        total_rooms=parse_int(form.get("total_rooms")) or 0,
        image_url=clean(form.get("image_url")),
        amenities=split_list(form.get("amenities")),
        additional_images=split_list(form.get("additional_images")),
        available=parse_checkbox(form.get("available")),
    )


def is_valid_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return bool(url.scheme) and bool(url.host)


def validate_price(price_input: str) -> Optional[str]:
    if not price_input:
        return "Price per night is required"
    value = parse_float(price_input)
    if value is None or value < 0:
        return PRICE_NOT_POSITIVE
    if value == 0:
        return "Price must be greater than $0"
    if value > MAX_PRICE:
        return "Price cannot exceed $1,000,000 per night"
    return None


def _range_error(value: int, low: int, high: int, too_low: str, too_high: str) -> Optional[str]:
    if value < low:
        return too_low
    if value > high:
        return too_high
    return None


def validate_room(data: RoomFormData) -> FormErrors:
    """Validate the create-room form; an empty result means it can be submitted."""
    errors: FormErrors = {}

    if not data.name.strip():
        errors["name"] = "Room name is required"
    elif len(data.name) > 200:
        errors["name"] = "Room name must be between 1 and 200 characters"

    price_error = validate_price(data.price_input)
    if price_error:
        errors["price_per_night"] = price_error

    if len(data.description) > 2000:
        errors["description"] = "Description must not exceed 2000 characters"

    checks = (
        ("capacity", data.capacity, 1, 20,
         "Capacity must be at least 1 guest", "Capacity cannot exceed 20 guests"),
        ("floor_number", data.floor_number, 1, 200,
         "Floor number must be at least 1", "Floor number cannot exceed 200"),
        ("size", data.size, 0, 10_000,
         "Size cannot be negative", "Size cannot exceed 10,000 sq ft"),
        ("total_rooms", data.total_rooms, 1, 1000,
         "Total rooms must be at least 1", "Total rooms cannot exceed 1000"),
    )
    for name, value, low, high, too_low, too_high in checks:
        message = _range_error(value, low, high, too_low, too_high)
        if message:
            errors[name] = message

    if data.image_url and not is_valid_url(data.image_url):
        errors["image_url"] = "Please enter a valid URL (e.g., https://example.com/image.jpg)"

    return errors


def create_room_request(data: RoomFormData) -> CreateRoomRequest:
    """Request body for a validated create-room form."""
    return CreateRoomRequest(
        name=data.name.strip(),
        type=data.type,
        description=data.description,
        price_per_night=data.price or 0,
        capacity=data.capacity,
        amenities=data.amenities,
        image_url=data.image_url,
        additional_images=data.additional_images,
        total_rooms=data.total_rooms,
        available_rooms=data.total_rooms,
        available=data.available,
        floor_number=data.floor_number,
        size=data.size,
    )


def _has_changed(new: Any, old: Any) -> bool:
    if new is None:
        return False
    if isinstance(new, (int, float)) and not isinstance(new, bool) and isinstance(old, (int, float)):
        return abs(new - old) > _NUMBER_TOLERANCE
    return new != old


def diff_room_changes(room: Room, data: RoomFormData) -> dict[str, Any]:
    """Fields of the edit form that differ from the stored room.

    Lists compare by value and numbers within a cent are treated as equal,
    so resubmitting an untouched form yields an empty dict.
    """
    candidates: dict[str, tuple[Any, Any]] = {
        "name": (data.name, room.name),
        "type": (data.type, room.type),
        "description": (data.description, room.description),
        "price_per_night": (data.price, room.price_per_night),
        "capacity": (data.capacity, room.capacity),
        "amenities": (data.amenities, room.amenities),
        "image_url": (data.image_url, room.image_url),
        "additional_images": (data.additional_images, room.additional_images),
        "available": (data.available, room.available),
        "floor_number": (data.floor_number, room.floor_number),
        "size": (data.size, room.size),
        "total_rooms": (data.total_rooms, room.total_rooms),
    }
    return {name: new for name, (new, old) in candidates.items() if _has_changed(new, old)}


def update_room_request(room_id: str, changes: dict[str, Any]) -> UpdateRoomRequest:
    return UpdateRoomRequest(id=room_id, **changes)

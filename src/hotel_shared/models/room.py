"""Room models and room query parameters."""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from .base import ApiModel
from .enums import AvailabilityStatus, RoomType


class Room(ApiModel):
    """A bookable room type as listed by /rooms."""

    id: str
    name: str = ""
    type: RoomType = RoomType.STANDARD
    description: str = ""
    price_per_night: float = Field(default=0, description="Nightly price in dollars")
    capacity: int = 1
    amenities: list[str] = Field(default_factory=list)
    image_url: str = ""
    additional_images: list[str] = Field(default_factory=list)
    total_rooms: int = 1
    available_rooms: int = 0
    available: bool = True
    floor_number: int = 1
    size: int = 0
    bed_type: Optional[str] = None
    view_type: Optional[str] = None
    wheelchair_accessible: Optional[bool] = None
    hearing_accessible: Optional[bool] = None
    visual_accessible: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoomAvailability(ApiModel):
    """Room with occupancy for a date range (/rooms/with-availability)."""

    room: Room
    available: bool = True
    occupied_count: int = 0
    total_rooms: int = 0
    available_count: int = 0
    status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    availability_message: str = ""
    availability_icon: str = ""


class RoomQueryParams(ApiModel):
    type: Optional[RoomType] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    capacity: Optional[int] = None
    available: Optional[bool] = None


class AvailableRoomsQuery(ApiModel):
    """Arguments of /rooms/available.

    The backend names the parameters checkInDate/checkOutDate.
    """

    start_date: date
    end_date: date
    guests: int = 1


class AvailabilityQuery(ApiModel):
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    guests: Optional[int] = None


class CreateRoomRequest(ApiModel):
    name: str
    type: RoomType = RoomType.STANDARD
    description: str = ""
    price_per_night: int
    capacity: int = 1
    amenities: list[str] = Field(default_factory=list)
    image_url: str = ""
    additional_images: list[str] = Field(default_factory=list)
    total_rooms: int = 1
    available_rooms: Optional[int] = None
    available: bool = True
    floor_number: int = 1
    size: int = 0


class UpdateRoomRequest(ApiModel):
    """Partial room update; only changed fields are sent."""

    id: str = Field(exclude=True)
    name: Optional[str] = None
    type: Optional[RoomType] = None
    description: Optional[str] = None
    price_per_night: Optional[int] = None
    capacity: Optional[int] = None
    amenities: Optional[list[str]] = None
    image_url: Optional[str] = None
    additional_images: Optional[list[str]] = None
    total_rooms: Optional[int] = None
    available: Optional[bool] = None
    floor_number: Optional[int] = None
    size: Optional[int] = None

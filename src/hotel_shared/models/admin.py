"""Admin console models: statistics, dashboard feeds and assisted bookings."""

from datetime import date
from typing import Optional

from pydantic import Field

from .base import ApiModel
from .reservation import Reservation


class RoomStatistics(ApiModel):
    total_rooms: int = 0
    available_rooms: int = 0
    occupied_rooms: int = 0
    occupancy_rate: float = 0
    rooms_by_type: dict[str, int] = Field(default_factory=dict)


class ReservationStatistics(ApiModel):
    total_reservations: int = 0
    reservations_by_status: dict[str, int] = Field(default_factory=dict)
    total_revenue: float = 0


class DashboardOverview(ApiModel):
    total_rooms: int = 0
    available_rooms: int = 0
    occupancy_rate: float = 0
    active_reservations: int = 0
    total_users: int = 0
    monthly_revenue: float = 0


class TodaysPulseEvent(ApiModel):
    """A check-in or check-out happening today."""

    id: str
    type: str
    guest_name: str = ""
    room_number: str = ""
    room_type: str = ""
    status: str = ""
    time: str = ""
    event_date: Optional[date] = Field(default=None, alias="date")
    additional_status: Optional[str] = None

    @property
    def label(self) -> str:
        return "Check-out" if self.type == "CHECK_OUT" else "Check-in"


class RecentReservation(ApiModel):
    id: str
    user_name: str = ""
    user_avatar: str = ""
    room_name: str = ""
    room_type: str = ""
    nights: int = 0
    status: str = ""


class TokenBookingRequest(ApiModel):
    """Assisted booking charged immediately with a Stripe PaymentMethod token."""

    customer_email: str
    customer_first_name: str
    customer_last_name: str
    customer_phone_number: Optional[str] = None
    room_id: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    special_requests: Optional[str] = None
    payment_method_id: str


class ChargeSummary(ApiModel):
    id: str = ""
    amount: float = 0
    status: str = ""
    card_brand: str = ""
    card_last4: str = ""


class ManagerBookingResponse(ApiModel):
    reservation: Reservation
    payment: ChargeSummary
    customer_id: str = ""
    message: str = ""


class PaymentLinkBookingRequest(ApiModel):
    """Assisted booking paid later by the customer through a link."""

    customer_email: str
    customer_first_name: str
    customer_last_name: str
    customer_phone_number: Optional[str] = None
    room_id: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    special_requests: Optional[str] = None


class PaymentLinkBookingResponse(ApiModel):
    reservation: Reservation
    payment_link: str
    message: str = ""

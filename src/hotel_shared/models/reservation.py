"""Reservation and cancellation models."""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from .auth import User
from .base import ApiModel
from .enums import ReservationStatus
from .room import Room


class Reservation(ApiModel):
    """A booking linking a user, a room, a date range and a status."""

    id: str
    user: Optional[User] = None
    room: Room
    check_in_date: date
    check_in_time: Optional[str] = None
    check_out_date: date
    check_out_time: Optional[str] = None
    number_of_guests: int = 1
    total_amount: float = 0
    status: ReservationStatus
    payment_id: Optional[str] = None
    payment_intent_id: Optional[str] = None
    payment_link_token: Optional[str] = None
    special_requests: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = Field(
        default=None, description="When an unpaid PENDING reservation lapses"
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReservationStatus.PENDING


class CreateReservationRequest(ApiModel):
    room_id: str
    check_in_date: date
    check_in_time: Optional[str] = None
    check_out_date: date
    check_out_time: Optional[str] = None
    number_of_guests: int
    special_requests: Optional[str] = None


class UpdateReservationRequest(ApiModel):
    id: str = Field(exclude=True)
    room_id: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: Optional[int] = None
    special_requests: Optional[str] = None


class DateRange(ApiModel):
    start_date: date
    end_date: date


class CancellationRequest(ApiModel):
    reason: str
    acknowledge_policy: bool


class RefundCalculation(ApiModel):
    """Server-computed refund preview for a cancellation."""

    original_amount: float = 0
    refund_amount: float = 0
    cancellation_fee: float = 0
    refund_percentage: int = 0
    days_until_check_in: int = 0
    policy_description: str = ""
    is_full_refund: bool = False
    is_no_refund: bool = False
    explanation: str = ""


class CancellationResponse(ApiModel):
    """Outcome of /reservations/{id}/cancel-with-refund."""

    reservation_id: str
    status: str = ""
    original_amount: float = 0
    refund_amount: float = 0
    cancellation_fee: float = 0
    refund_percentage: int = 0
    days_before_check_in: int = 0
    refund_status: str = ""
    estimated_refund_time: str = ""
    cancelled_at: Optional[datetime] = None
    message: str = ""

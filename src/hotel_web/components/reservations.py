"""Reservation list and detail presentation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from hotel_shared.models.enums import ReservationStatus
from hotel_shared.models.reservation import Reservation
from hotel_shared.utils.dates import change_deadline, checkout_datetime, nights_between, utc_now
from hotel_shared.utils.formatting import format_money, format_reservation_number, night_label

STATUS_LABELS: dict[ReservationStatus, str] = {
    ReservationStatus.CONFIRMED: "Confirmed",
    ReservationStatus.PENDING: "Pending",
    ReservationStatus.CHECKED_IN: "Checked In",
    ReservationStatus.CHECKED_OUT: "Completed",
    ReservationStatus.CANCELLED: "Cancelled",
}

PAID = "Paid"
PAYMENT_DUE = "Payment Due"

LATE_CHANGE_FEE = 150
HOTEL_PHONE = "(555) 123-4567"
HOTEL_EMAIL = "support@hotelluxe.com"

_PAST_STATUSES = (ReservationStatus.CANCELLED, ReservationStatus.CHECKED_OUT)
_PAID_STATUSES = (
    ReservationStatus.CONFIRMED,
    ReservationStatus.CHECKED_IN,
    ReservationStatus.CHECKED_OUT,
)


def status_badge(status: ReservationStatus | str) -> str:
    return STATUS_LABELS.get(ReservationStatus(status), str(status))


def payment_chip(status: ReservationStatus | str) -> Optional[str]:
    """"Paid", "Payment Due", or None for cancelled reservations."""
    status = ReservationStatus(status)
    if status in _PAID_STATUSES:
        return PAID
    if status == ReservationStatus.PENDING:
        return PAYMENT_DUE
    return None


def is_past(reservation: Reservation, now: datetime) -> bool:
    if reservation.status in _PAST_STATUSES:
        return True
    return checkout_datetime(reservation.check_out_date, reservation.check_out_time) < now


@dataclass(frozen=True)
class ReservationGroups:
    upcoming: list[Reservation]
    past: list[Reservation]

    @property
    def upcoming_label(self) -> str:
        return f"Upcoming ({len(self.upcoming)})"

    @property
    def past_label(self) -> str:
        return f"Past ({len(self.past)})"


def categorize_reservations(
    reservations: Iterable[Reservation], now: Optional[datetime] = None
) -> ReservationGroups:
    """Split reservations into upcoming and past tabs.

    Cancelled and checked-out stays, and stays whose checkout moment has
    passed, are past. Upcoming is ordered by check-in ascending, past by
    check-out descending.
    """
    moment = now or utc_now()
    upcoming: list[Reservation] = []
    past: list[Reservation] = []
    for reservation in reservations:
        (past if is_past(reservation, moment) else upcoming).append(reservation)

    upcoming.sort(key=lambda r: r.check_in_date)
    past.sort(key=lambda r: r.check_out_date, reverse=True)
    return ReservationGroups(upcoming=upcoming, past=past)


@dataclass(frozen=True)
class ReservationRow:
    """One reservation card in the guest's list."""

    reservation: Reservation
    number: str
    status_label: str
    payment_label: Optional[str]
    nights_label: str
    total_label: str
    can_pay: bool
    can_cancel: bool


def reservation_row(reservation: Reservation, *, past: bool = False) -> ReservationRow:
    nights = nights_between(reservation.check_in_date, reservation.check_out_date)
    status = reservation.status
    return ReservationRow(
        reservation=reservation,
        number=format_reservation_number(reservation.id),
        status_label=status_badge(status),
        payment_label=payment_chip(status),
        nights_label=night_label(nights),
        total_label=format_money(reservation.total_amount),
        can_pay=not past and status == ReservationStatus.PENDING,
        can_cancel=not past and status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED),
    )


@dataclass(frozen=True)
class ManageView:
    """Deadlines and fees shown on the manage-reservation page."""

    modification_deadline: datetime
    cancellation_deadline: datetime
    can_modify_free: bool
    can_cancel_free: bool
    late_fee: str
    hotel_phone: str = HOTEL_PHONE
    hotel_email: str = HOTEL_EMAIL


def build_manage_view(reservation: Reservation, now: Optional[datetime] = None) -> ManageView:
    moment = now or utc_now()
    deadline = change_deadline(reservation.check_in_date)
    return ManageView(
        modification_deadline=deadline,
        cancellation_deadline=deadline,
        can_modify_free=moment < deadline,
        can_cancel_free=moment < deadline,
        late_fee=format_money(LATE_CHANGE_FEE),
    )

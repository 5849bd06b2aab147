"""Admin console views: dashboard cards and table filters."""

from dataclasses import dataclass
from typing import Iterable, Optional

from hotel_shared.models.admin import DashboardOverview
from hotel_shared.models.auth import User
from hotel_shared.models.enums import ReservationStatus
from hotel_shared.models.reservation import Reservation
from hotel_shared.utils.formatting import format_money

ALL_STATUSES = "ALL"


@dataclass(frozen=True)
class StatCard:
    title: str
    value: str


def dashboard_cards(overview: DashboardOverview, reservations: Iterable[Reservation]) -> list[StatCard]:
    """Daily stat cards; check-ins count reservations currently CHECKED_IN."""
    check_ins = sum(1 for r in reservations if r.status == ReservationStatus.CHECKED_IN)
    return [
        StatCard("Occupancy", f"{overview.occupancy_rate:.0f}%"),
        StatCard("Check-Ins", str(check_ins)),
        StatCard("Active Reservations", str(overview.active_reservations)),
        StatCard("Total Users", str(overview.total_users)),
        StatCard("Monthly Revenue", format_money(overview.monthly_revenue)),
    ]


def search_users(users: Iterable[User], term: Optional[str]) -> list[User]:
    """Case-insensitive match on first name, last name, email or phone."""
    users = list(users)
    if not term:
        return users
    needle = term.lower()
    return [
        u
        for u in users
        if needle in u.first_name.lower()
        or needle in u.last_name.lower()
        or needle in u.email.lower()
        or (u.phone_number is not None and needle in u.phone_number.lower())
    ]


def _created(reservation: Reservation) -> float:
    return reservation.created_at.timestamp() if reservation.created_at else float("-inf")


def filter_admin_reservations(
    reservations: Iterable[Reservation],
    term: Optional[str] = None,
    status: Optional[str] = ALL_STATUSES,
) -> list[Reservation]:
    """Search by guest, room or id; filter by status; newest first."""
    needle = (term or "").lower()

    def matches(r: Reservation) -> bool:
        if not needle:
            return True
        fields = [r.room.name, r.id]
        if r.user is not None:
            fields += [r.user.first_name, r.user.last_name, r.user.email]
        return any(needle in (value or "").lower() for value in fields)

    wanted = None if not status or status == ALL_STATUSES else ReservationStatus(status)
    result = [r for r in reservations if matches(r) and (wanted is None or r.status == wanted)]
    result.sort(key=_created, reverse=True)
    return result


def is_self(user: User, current: Optional[User]) -> bool:
    return current is not None and user.id == current.id

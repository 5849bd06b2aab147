"""Banner reminding the guest of unpaid reservations about to expire."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from hotel_shared.models.enums import ReservationStatus
from hotel_shared.models.reservation import Reservation
from hotel_shared.utils.dates import as_aware, utc_now


@dataclass(frozen=True)
class PendingBanner:
    count: int
    most_urgent: Reservation
    seconds_left: int

    @property
    def time_left(self) -> str:
        """Remaining time as m:ss."""
        return f"{self.seconds_left // 60}:{self.seconds_left % 60:02d}"

    @property
    def title(self) -> str:
        return f"You have {self.count} pending reservation{'s' if self.count > 1 else ''}"

    @property
    def message(self) -> str:
        if self.count == 1:
            return f"Reservation for {self.most_urgent.room.name} will expire in"
        return "Your oldest reservation expires in"


def build_pending_banner(
    reservations: Iterable[Reservation],
    now: Optional[datetime] = None,
    exclude_id: Optional[str] = None,
) -> Optional[PendingBanner]:
    """Summarise PENDING reservations that have not expired yet.

    Returns:
        None when there is nothing to pay for, otherwise the count and the
        reservation that expires first.
    """
    moment = as_aware(now) if now is not None else utc_now()
    active = [
        r
        for r in reservations
        if r.status == ReservationStatus.PENDING
        and r.expires_at is not None
        and as_aware(r.expires_at) > moment
        and r.id != exclude_id
    ]
    if not active:
        return None

    most_urgent = min(active, key=lambda r: as_aware(r.expires_at))
    seconds_left = max(0, int((as_aware(most_urgent.expires_at) - moment).total_seconds()))
    return PendingBanner(count=len(active), most_urgent=most_urgent, seconds_left=seconds_left)

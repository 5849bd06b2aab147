"""Countdown to the expiry of an unpaid reservation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from hotel_shared.utils.dates import as_aware, utc_now

EXPIRED = "Expired"


@dataclass(frozen=True)
class CountdownState:
    label: str
    is_expired: bool
    seconds_left: int = 0

    @property
    def chip_label(self) -> str:
        return "Reservation Expired" if self.is_expired else f"Time left: {self.label}"


def format_time_left(seconds: int) -> str:
    """Render as "Xm Ys"; minutes wrap at the hour, matching the browser timer."""
    minutes = (seconds % 3600) // 60
    return f"{minutes}m {seconds % 60}s"


class Countdown:
    """Ticks towards expires_at and reports expiry exactly once.

    Usage:
        countdown = Countdown(reservation.expires_at, on_expired=refresh)
        state = countdown.tick()
    """

    def __init__(
        self,
        expires_at: datetime,
        on_expired: Optional[Callable[[], None]] = None,
    ) -> None:
        self.expires_at = as_aware(expires_at)
        self._on_expired = on_expired
        self._fired = False

    def tick(self, now: Optional[datetime] = None) -> CountdownState:
        """Evaluate the countdown at `now` (default: current time)."""
        moment = as_aware(now) if now is not None else utc_now()
        remaining = (self.expires_at - moment).total_seconds()

        if remaining <= 0:
            if not self._fired:
                self._fired = True
                if self._on_expired is not None:
                    self._on_expired()
            return CountdownState(label=EXPIRED, is_expired=True)

        seconds = int(remaining)
        return CountdownState(label=format_time_left(seconds), is_expired=False, seconds_left=seconds)

    @property
    def has_fired(self) -> bool:
        return self._fired

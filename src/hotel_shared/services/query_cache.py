"""Tag-invalidated cache for backend query results.

Each cached entry records the tags it provides. Mutations invalidate tags:
a general tag (no id) drops every entry providing a tag of that type, a
specific tag drops only entries providing exactly that (type, id).

Concurrent identical queries share one in-flight asyncio task, so only one
network request is issued per key at a time.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

logger = logging.getLogger(__name__)

# Tag types
ROOM = "Room"
RESERVATION = "Reservation"
USER = "User"
PAYMENT = "Payment"
ADMIN = "Admin"
PREFERENCES = "Preferences"

TAG_TYPES = (ROOM, RESERVATION, USER, PAYMENT, ADMIN, PREFERENCES)

# Id used by list queries so item mutations can target "the list"
LIST = "LIST"


@dataclass(frozen=True)
class Tag:
    """Cache label: a type and an optional id."""

    type: str
    id: Optional[str] = None

    def matches(self, provided: "Tag") -> bool:
        """Whether invalidating this tag should drop an entry providing `provided`."""
        if self.type != provided.type:
            return False
        return self.id is None or self.id == provided.id


@dataclass
class CacheEntry:
    value: Any
    tags: frozenset[Tag]
    expires_at: float


class QueryCache:
    """Per-session query result cache."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty cache.

        Args:
            clock: Monotonic time source in seconds; injectable for tests.
        """
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, "asyncio.Task[Any]"] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key if it has not expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self.clock():
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, value: Any, tags: Iterable[Tag], keep_for: float) -> None:
        """Store a result for keep_for seconds. keep_for=0 stores nothing."""
        if keep_for <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = CacheEntry(
            value=value,
            tags=frozenset(tags),
            expires_at=self.clock() + keep_for,
        )

    def invalidate(self, tags: Iterable[Tag]) -> int:
        """Drop every entry providing a tag matched by any of `tags`.

        Returns:
            Number of entries dropped.
        """
        tags = list(tags)
        if not tags:
            return 0

        stale = [
            key
            for key, entry in self._entries.items()
            if any(tag.matches(provided) for tag in tags for provided in entry.tags)
        ]
        for key in stale:
            del self._entries[key]

        if stale:
            logger.debug("Invalidated %d cached queries for %s", len(stale), tags)
        return len(stale)

    async def run(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Run fetch for key, joining an identical fetch already in flight."""
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(fetch())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("Joining in-flight query %s", key)
        # Shielded so one cancelled caller does not cancel the fetch for the others
        return await asyncio.shield(task)

    def _forget(self, key: str, task: "asyncio.Task[Any]") -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

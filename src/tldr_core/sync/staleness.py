from __future__ import annotations

from datetime import datetime, timedelta

from tldr_core.schemas import utc_now
from tldr_core.storage import ContentStore


class StalenessMonitor:
    def __init__(self, *, store: ContentStore, freshness_window: timedelta) -> None:
        if freshness_window <= timedelta(0):
            raise ValueError("freshness_window must be > 0")
        self.store = store
        self.freshness_window = freshness_window

    def age(self, now: datetime | None = None) -> timedelta:
        """Time since the last refresh; raises StoreUnavailableError if never cached."""
        return (now or utc_now()) - self.store.last_modified()

    def is_stale(self, now: datetime | None = None) -> bool:
        # Exactly one window old still counts as fresh.
        return self.age(now) > self.freshness_window

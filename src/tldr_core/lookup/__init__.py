"""Page lookup policy."""

from .orchestrator import (
    REFRESH_NOTICE,
    STALE_ADVISORY,
    LookupOrchestrator,
    PageResolver,
    Refresher,
)

__all__ = [
    "REFRESH_NOTICE",
    "STALE_ADVISORY",
    "LookupOrchestrator",
    "PageResolver",
    "Refresher",
]

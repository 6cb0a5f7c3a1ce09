"""Cache refresh and freshness checks."""

from .staleness import StalenessMonitor
from .synchronizer import IndexRebuilder, Synchronizer

__all__ = ["IndexRebuilder", "StalenessMonitor", "Synchronizer"]

"""Storage layer for the on-disk page cache and its index."""

from .index import INDEX_FILENAME, PageIndex
from .store import ContentStore

__all__ = ["INDEX_FILENAME", "ContentStore", "PageIndex"]

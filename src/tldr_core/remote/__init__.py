"""Remote page archive download."""

from .fetcher import ARCHIVE_FILENAME, ArchiveFetcher, PageArchiveSource

__all__ = ["ARCHIVE_FILENAME", "ArchiveFetcher", "PageArchiveSource"]

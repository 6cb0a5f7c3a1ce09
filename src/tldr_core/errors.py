"""Domain errors surfaced by the cache and lookup layer.

Every error carries a process exit ``code`` so the CLI can map it directly.
"""

from __future__ import annotations


class TldrError(Exception):
    code = 1


class StoreUnavailableError(TldrError):
    code = 4

    def __init__(self, root: object) -> None:
        super().__init__(
            f"Local cache not found at {root}\nPlease run tldr update"
        )
        self.root = root


class EmptyCacheError(TldrError):
    code = 2

    def __init__(self) -> None:
        super().__init__("Local cache is empty\nPlease run tldr update")


class MissingPageError(TldrError):
    code = 3

    def __init__(self, repository: str) -> None:
        super().__init__(
            "Page not found.\n"
            "If you want to contribute it, feel free to send a pull request to: "
            f"{repository}"
        )
        self.repository = repository


class RefreshError(TldrError):
    code = 5


class StoreReadError(RefreshError):
    """A page exists in the index but could not be read from disk."""


class PageFormatError(TldrError):
    def __init__(self, source: object, reason: str) -> None:
        super().__init__(f"invalid page {source}: {reason}")
        self.source = source

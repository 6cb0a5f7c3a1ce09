"""tldr page cache: configuration, schemas and domain errors."""

from .config import AppConfig, load_config
from .errors import (
    EmptyCacheError,
    MissingPageError,
    PageFormatError,
    RefreshError,
    StoreReadError,
    StoreUnavailableError,
    TldrError,
)
from .schemas import PageLocation, Platform, RenderOptions

__all__ = [
    "AppConfig",
    "EmptyCacheError",
    "MissingPageError",
    "PageFormatError",
    "PageLocation",
    "Platform",
    "RefreshError",
    "RenderOptions",
    "StoreReadError",
    "StoreUnavailableError",
    "TldrError",
    "load_config",
]

from __future__ import annotations

import logging
import sys

from tldr_core.schemas import Platform

logger = logging.getLogger(__name__)

_EXACT_PLATFORMS = {
    "darwin": Platform.OSX,
    "linux": Platform.LINUX,
    "win32": Platform.WINDOWS,
    "cygwin": Platform.WINDOWS,
    "android": Platform.ANDROID,
}
_PREFIX_PLATFORMS = (
    ("sunos", Platform.SUNOS),
    ("freebsd", Platform.FREEBSD),
    ("openbsd", Platform.OPENBSD),
    ("netbsd", Platform.NETBSD),
)


def detect_platform(system: str | None = None) -> Platform:
    name = (system if system is not None else sys.platform).strip().lower()
    if name in _EXACT_PLATFORMS:
        return _EXACT_PLATFORMS[name]
    for prefix, platform in _PREFIX_PLATFORMS:
        if name.startswith(prefix):
            return platform
    logger.info("unsupported platform=%s; using common pages", name)
    return Platform.COMMON


def preferred_platform(
    configured: Platform | str | None = None,
    *,
    system: str | None = None,
) -> Platform:
    if configured:
        try:
            return Platform(str(configured).strip().lower())
        except ValueError:
            logger.warning("unknown configured platform=%s; detecting", configured)
    return detect_platform(system)

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Protocol

from tldr_core.errors import EmptyCacheError, MissingPageError
from tldr_core.schemas import DEFAULT_LANGUAGE, PageLocation, Platform
from tldr_core.storage import ContentStore
from tldr_core.sync import StalenessMonitor

logger = logging.getLogger(__name__)

STALE_ADVISORY = 'Cache is out of date. You should run "tldr update"'
REFRESH_NOTICE = "Page not found. Updating cache..."


class PageResolver(Protocol):
    def find_page(
        self, name: str, platform: Platform | str, language: str = DEFAULT_LANGUAGE
    ) -> PageLocation | None: ...

    def commands_for(self, platform: Platform | str) -> list[str]: ...

    def commands(self) -> list[str]: ...


class Refresher(Protocol):
    async def refresh(self) -> None: ...


class LookupOrchestrator:
    def __init__(
        self,
        *,
        store: ContentStore,
        resolver: PageResolver,
        refresher: Refresher,
        staleness: StalenessMonitor,
        pages_repository: str,
        platform: Platform = Platform.COMMON,
        language: str = DEFAULT_LANGUAGE,
        notify: Callable[[str], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.refresher = refresher
        self.staleness = staleness
        self.pages_repository = pages_repository
        self.platform = platform
        self.language = language
        self.notify = notify
        self.rng = rng or random.Random()

    async def resolve_best_page(
        self,
        name: str,
        platform: Platform | str | None = None,
        language: str | None = None,
    ) -> str:
        """Return page text, refreshing the cache at most once on a miss."""
        target_platform = Platform(platform) if platform else self.platform
        target_language = language or self.language

        content = await self._lookup(name, target_platform, target_language)
        if content is None:
            self._emit(REFRESH_NOTICE)
            logger.info("lookup miss name=%s; refreshing cache", name)
            await self.refresher.refresh()
            content = await self._lookup(name, target_platform, target_language)

        if content is None:
            logger.info("lookup miss after refresh name=%s", name)
            raise MissingPageError(self.pages_repository)

        await self.check_stale()
        return content

    async def list_pages(self, platform: Platform | str | None = None) -> list[str]:
        target_platform = Platform(platform) if platform else self.platform
        pages = await asyncio.to_thread(self.resolver.commands_for, target_platform)
        return await self._checked_listing(pages)

    async def list_all_pages(self) -> list[str]:
        pages = await asyncio.to_thread(self.resolver.commands)
        return await self._checked_listing(pages)

    async def random_page(self, platform: Platform | str | None = None) -> str:
        target_platform = Platform(platform) if platform else self.platform
        pages = await asyncio.to_thread(self.resolver.commands_for, target_platform)
        if not pages:
            raise EmptyCacheError()
        page = self.rng.choice(pages)
        logger.info("random page=%s candidates=%d", page, len(pages))
        return page

    async def check_stale(self) -> bool:
        stale = await asyncio.to_thread(self.staleness.is_stale)
        if stale:
            logger.warning("cache stale root=%s", self.store.root)
            self._emit(STALE_ADVISORY)
        return stale

    async def _checked_listing(self, pages: list[str]) -> list[str]:
        # Listing never refreshes; an empty cache must be updated explicitly.
        if not pages:
            raise EmptyCacheError()
        await self.check_stale()
        return pages

    async def _lookup(self, name: str, platform: Platform, language: str) -> str | None:
        location = await asyncio.to_thread(
            self.resolver.find_page, name, platform, language
        )
        if location is None:
            return None
        return await asyncio.to_thread(self.store.read, location)

    def _emit(self, message: str) -> None:
        if self.notify is not None:
            self.notify(message)

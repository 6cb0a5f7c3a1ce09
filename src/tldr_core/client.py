from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

import requests

from tldr_cli.pages.language import preferred_language
from tldr_cli.pages.platform import preferred_platform
from tldr_cli.pages.render import render_page
from tldr_core.config import AppConfig
from tldr_core.errors import PageFormatError
from tldr_core.lookup import LookupOrchestrator
from tldr_core.remote import ArchiveFetcher, PageArchiveSource
from tldr_core.schemas import Platform, RenderOptions
from tldr_core.storage import ContentStore, PageIndex
from tldr_core.sync import StalenessMonitor, Synchronizer

logger = logging.getLogger(__name__)


class TldrClient:
    """Operations the command line drives: lookup, listing, update and clear."""

    def __init__(
        self,
        *,
        store: ContentStore,
        index: PageIndex,
        synchronizer: Synchronizer,
        orchestrator: LookupOrchestrator,
        rng: random.Random | None = None,
        color: bool = True,
    ) -> None:
        self.store = store
        self.index = index
        self.synchronizer = synchronizer
        self.orchestrator = orchestrator
        self.rng = rng or random.Random()
        self.color = color

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        platform: Platform | str | None = None,
        language: str | None = None,
        source: PageArchiveSource | None = None,
        session: requests.Session | None = None,
        notify: Callable[[str], None] | None = None,
        rng: random.Random | None = None,
        color: bool = True,
    ) -> TldrClient:
        store = ContentStore(config.cache.store_root)
        index = PageIndex(store)
        if source is None:
            source = ArchiveFetcher(
                archive_url=config.remote.archive_url,
                session=session,
                timeout_seconds=config.remote.timeout_seconds,
            )
        synchronizer = Synchronizer(
            store=store,
            index=index,
            source=source,
            staging_namespace=config.cache.staging_namespace,
        )
        staleness = StalenessMonitor(
            store=store,
            freshness_window=timedelta(days=config.cache.freshness_days),
        )
        rng = rng or random.Random()
        orchestrator = LookupOrchestrator(
            store=store,
            resolver=index,
            refresher=synchronizer,
            staleness=staleness,
            pages_repository=config.remote.pages_repository,
            platform=preferred_platform(platform or config.pages.platform),
            language=preferred_language(language or config.pages.language),
            notify=notify,
            rng=rng,
        )
        return cls(
            store=store,
            index=index,
            synchronizer=synchronizer,
            orchestrator=orchestrator,
            rng=rng,
            color=color,
        )

    async def lookup(self, name: str, options: RenderOptions | None = None) -> str:
        options = options or RenderOptions()
        content = await self.orchestrator.resolve_best_page(name)
        return self._render(content, options, source=name)

    async def list_for_platform(self, platform: Platform | str | None = None) -> list[str]:
        return await self.orchestrator.list_pages(platform)

    async def list_all(self) -> list[str]:
        return await self.orchestrator.list_all_pages()

    async def random_page(self, options: RenderOptions | None = None) -> str:
        options = options or RenderOptions()
        name = await self.orchestrator.random_page()
        content = await self.orchestrator.resolve_best_page(name)
        return self._render(content, options, source=name)

    async def random_example(self) -> str:
        return await self.random_page(RenderOptions(random_example=True))

    def render_file(self, path: str | Path, options: RenderOptions | None = None) -> str:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PageFormatError(path, "not valid UTF-8") from exc
        return self._render(content, options or RenderOptions(), source=path)

    async def update_cache(self) -> None:
        await self.synchronizer.refresh()

    async def clear_cache(self) -> None:
        await asyncio.to_thread(self.store.clear)
        self.index.invalidate()

    def _render(self, content: str, options: RenderOptions, *, source: object) -> str:
        try:
            return render_page(content, options, rng=self.rng, color=self.color)
        except ValueError as exc:
            raise PageFormatError(source, str(exc)) from exc

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
import uuid
from collections.abc import Awaitable
from pathlib import Path
from typing import Protocol

from tldr_core.errors import RefreshError
from tldr_core.remote import PageArchiveSource
from tldr_core.storage import ContentStore

logger = logging.getLogger(__name__)


class IndexRebuilder(Protocol):
    def rebuild_index(self) -> int:
        """Rescan the store and persist a fresh index."""


class Synchronizer:
    """Refreshes the store from the remote archive via a throwaway staging dir.

    The live store is only touched by ``ContentStore.staged_replace``; a failed
    download or extraction leaves the previous snapshot readable.
    """

    def __init__(
        self,
        *,
        store: ContentStore,
        index: IndexRebuilder,
        source: PageArchiveSource,
        staging_namespace: str = "tldr",
        temp_root: str | Path | None = None,
    ) -> None:
        self.store = store
        self.index = index
        self.source = source
        self.staging_namespace = staging_namespace
        self.temp_root = Path(temp_root) if temp_root is not None else None

    def new_staging_dir(self) -> Path:
        base = self.temp_root or Path(tempfile.gettempdir())
        return base / self.staging_namespace / uuid.uuid4().hex

    async def refresh(self) -> None:
        staging = self.new_staging_dir()
        logger.info("refresh start staging=%s store=%s", staging, self.store.root)

        try:
            await _gather_all(
                asyncio.to_thread(staging.mkdir, parents=True, exist_ok=True),
                asyncio.to_thread(self.store.ensure_root),
            )
            await asyncio.to_thread(self.source.download, staging)
            await asyncio.to_thread(self.store.staged_replace, staging)
        except Exception as exc:
            await asyncio.to_thread(_discard_staging, staging)
            if isinstance(exc, RefreshError):
                raise
            raise RefreshError(f"cache refresh failed: {exc}") from exc

        try:
            _, commands = await _gather_all(
                asyncio.to_thread(shutil.rmtree, staging),
                asyncio.to_thread(self.index.rebuild_index),
            )
        except RefreshError:
            raise
        except Exception as exc:
            raise RefreshError(f"cache refresh failed after copy: {exc}") from exc

        logger.info("refresh done store=%s commands=%s", self.store.root, commands)


async def _gather_all(*aws: Awaitable[object]) -> list[object]:
    """Await every operation, then raise the first failure if any."""
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


def _discard_staging(staging: Path) -> None:
    try:
        shutil.rmtree(staging)
    except FileNotFoundError:
        return
    except OSError:
        logger.warning("failed to remove staging dir=%s", staging, exc_info=True)

from __future__ import annotations

import logging
import os
import shutil
import uuid
from datetime import UTC, datetime
from pathlib import Path

from tldr_core.errors import RefreshError, StoreReadError, StoreUnavailableError
from tldr_core.schemas import PageLocation

logger = logging.getLogger(__name__)


class ContentStore:
    """Directory-backed page cache.

    The root is replaced as a whole on refresh, never file by file.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def exists(self) -> bool:
        return self.root.is_dir()

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def read(self, location: PageLocation) -> str | None:
        path = self.root / location.folder / location.filename
        try:
            text = path.read_text(encoding="utf-8")
        except (FileNotFoundError, NotADirectoryError):
            logger.info("content_store miss path=%s", location.relative_path)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(f"failed to read page {path}: {exc}") from exc

        logger.info("content_store hit path=%s", location.relative_path)
        return text

    def write_text(self, relative_path: str, text: str) -> Path:
        target = self.root / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, target)
        finally:
            tmp_path.unlink(missing_ok=True)
        return target

    def last_modified(self) -> datetime:
        try:
            stat = self.root.stat()
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise StoreUnavailableError(self.root) from exc
        except OSError as exc:
            raise StoreReadError(f"failed to stat cache {self.root}: {exc}") from exc
        return datetime.fromtimestamp(stat.st_mtime, tz=UTC)

    def clear(self) -> None:
        try:
            shutil.rmtree(self.root)
        except FileNotFoundError:
            logger.info("content_store clear root=%s reason=absent", self.root)
            return
        except OSError as exc:
            raise RefreshError(f"failed to clear cache {self.root}: {exc}") from exc
        logger.info("content_store clear root=%s", self.root)

    def staged_replace(self, staging_root: str | Path) -> None:
        """Swap the tree at ``staging_root`` in as the new store root.

        The staged tree is first copied next to the root, so the only
        mutation of the live path is a pair of directory renames.
        """
        staging_root = Path(staging_root)
        if not staging_root.is_dir():
            raise FileNotFoundError(f"staging directory not found: {staging_root}")

        self.root.parent.mkdir(parents=True, exist_ok=True)
        token = uuid.uuid4().hex
        incoming = self.root.with_name(f".{self.root.name}.incoming-{token}")
        previous = self.root.with_name(f".{self.root.name}.previous-{token}")

        try:
            shutil.copytree(staging_root, incoming)
        except OSError:
            shutil.rmtree(incoming, ignore_errors=True)
            raise

        had_previous = self.root.exists()
        if had_previous:
            os.replace(self.root, previous)
        try:
            os.replace(incoming, self.root)
        except OSError:
            if had_previous:
                os.replace(previous, self.root)
            shutil.rmtree(incoming, ignore_errors=True)
            raise

        # Refresh the root mtime so staleness is measured from this swap.
        os.utime(self.root)
        if had_previous:
            shutil.rmtree(previous, ignore_errors=True)
        logger.info("content_store replaced root=%s staging=%s", self.root, staging_root)

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Protocol

import requests

from tldr_core.errors import RefreshError

logger = logging.getLogger(__name__)

ARCHIVE_FILENAME = "tldr.zip"
_CHUNK_SIZE = 64 * 1024


class PageArchiveSource(Protocol):
    def download(self, destination: Path) -> None:
        """Populate ``destination`` with the extracted page tree."""


class ArchiveFetcher:
    """Downloads the published page archive and unpacks it into a directory."""

    def __init__(
        self,
        *,
        archive_url: str,
        session: requests.Session | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        if not archive_url.strip():
            raise ValueError("archive_url is empty.")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")

        self.archive_url = archive_url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.setdefault(
            "User-Agent",
            "tldr-mirror/0.1.0 (+https://github.com/tldr-pages/tldr)",
        )

    def download(self, destination: Path) -> None:
        destination = Path(destination)
        archive_path = destination / ARCHIVE_FILENAME
        try:
            self._fetch_archive(archive_path)
            members = _extract_archive(archive_path, destination)
        except requests.RequestException as exc:
            raise RefreshError(f"failed to download {self.archive_url}: {exc}") from exc
        except zipfile.BadZipFile as exc:
            raise RefreshError(f"downloaded archive is not a valid zip: {exc}") from exc
        except OSError as exc:
            raise RefreshError(f"failed to unpack archive into {destination}: {exc}") from exc
        finally:
            archive_path.unlink(missing_ok=True)

        logger.info(
            "archive_fetcher extracted url=%s members=%d destination=%s",
            self.archive_url,
            members,
            destination,
        )

    def _fetch_archive(self, archive_path: Path) -> None:
        with self.session.get(
            self.archive_url,
            stream=True,
            timeout=self.timeout_seconds,
        ) as response:
            response.raise_for_status()
            with archive_path.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)


def _extract_archive(archive_path: Path, destination: Path) -> int:
    root = destination.resolve()
    with zipfile.ZipFile(archive_path) as archive:
        members = archive.infolist()
        for member in members:
            target = (root / member.filename).resolve()
            if target != root and root not in target.parents:
                raise RefreshError(f"archive member escapes destination: {member.filename}")
        archive.extractall(root)
    return len(members)

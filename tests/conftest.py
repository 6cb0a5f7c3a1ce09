from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest

TAR_LINUX = """# tar

> Archiving utility.
> More information: <https://www.gnu.org/software/tar>.

- [c]reate an archive and write it to a [f]ile:

`tar cf {{path/to/target.tar}} {{path/to/file1 path/to/file2 ...}}`

- E[x]tract a (compressed) archive [f]ile into the current directory:

`tar xf {{path/to/source.tar[.gz|.bz2|.xz]}}`
"""

TAR_COMMON = """# tar

> Generic archiving utility.

- List the contents of a tar file:

`tar tvf {{path/to/source.tar}}`
"""


def write_page(
    root: Path,
    *,
    name: str,
    platform: str = "common",
    folder: str = "pages",
    text: str | None = None,
) -> Path:
    path = root / folder / platform / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text if text is not None else f"# {name}\n\n> {folder}/{platform}\n", encoding="utf-8")
    return path


class FakeSource:
    """Archive source that writes a fixed page tree into the destination."""

    def __init__(
        self,
        pages: Mapping[str, str] | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.pages = dict(pages or {})
        self.error = error
        self.destinations: list[Path] = []

    def download(self, destination: Path) -> None:
        self.destinations.append(destination)
        for relative_path, text in self.pages.items():
            target = destination / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        if self.error is not None:
            raise self.error


@pytest.fixture()
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "home" / "cache"


@pytest.fixture()
def staging_root(tmp_path: Path) -> Path:
    return tmp_path / "tmp"

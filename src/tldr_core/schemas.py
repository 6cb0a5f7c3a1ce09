from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_LANGUAGE = "en"
PAGES_FOLDER = "pages"


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class DTOBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Platform(StrEnum):
    LINUX = "linux"
    OSX = "osx"
    WINDOWS = "windows"
    SUNOS = "sunos"
    ANDROID = "android"
    FREEBSD = "freebsd"
    NETBSD = "netbsd"
    OPENBSD = "openbsd"
    COMMON = "common"


def language_folder(language: str) -> str:
    """``en`` pages live in ``pages``; every other language in ``pages.<lang>``."""
    if language == DEFAULT_LANGUAGE:
        return PAGES_FOLDER
    return f"{PAGES_FOLDER}.{language}"


def folder_language(folder: str) -> str | None:
    if folder == PAGES_FOLDER:
        return DEFAULT_LANGUAGE
    prefix = f"{PAGES_FOLDER}."
    if folder.startswith(prefix) and len(folder) > len(prefix):
        return folder[len(prefix) :]
    return None


class PageVariant(DTOBase):
    platform: Platform
    language: str


class IndexEntry(DTOBase):
    name: str
    variants: list[PageVariant] = Field(default_factory=list)

    @property
    def platforms(self) -> set[Platform]:
        return {variant.platform for variant in self.variants}


class PageLocation(DTOBase):
    model_config = ConfigDict(extra="forbid", frozen=True)

    folder: str
    filename: str
    platform: Platform
    language: str

    @classmethod
    def for_variant(cls, name: str, variant: PageVariant) -> PageLocation:
        return cls(
            folder=f"{language_folder(variant.language)}/{variant.platform.value}",
            filename=f"{name}.md",
            platform=variant.platform,
            language=variant.language,
        )

    @property
    def relative_path(self) -> str:
        return f"{self.folder}/{self.filename}"


class RenderOptions(DTOBase):
    """How a page is turned into terminal output.

    ``markdown`` prints the raw page text; ``random_example`` keeps a single
    randomly chosen example. The two are mutually exclusive.
    """

    markdown: bool = False
    random_example: bool = False

    @model_validator(mode="after")
    def validate_exclusive(self) -> RenderOptions:
        if self.markdown and self.random_example:
            raise ValueError("markdown and random_example cannot both be enabled")
        return self


class PageExample(DTOBase):
    description: str
    command: str


class ParsedPage(DTOBase):
    title: str
    description: list[str] = Field(default_factory=list)
    examples: list[PageExample] = Field(default_factory=list)

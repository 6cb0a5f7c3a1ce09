from __future__ import annotations

import json
import logging
from collections import defaultdict
from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

from tldr_cli.pages.language import language_candidates
from tldr_core.errors import StoreReadError
from tldr_core.schemas import (
    DEFAULT_LANGUAGE,
    IndexEntry,
    PageLocation,
    PageVariant,
    Platform,
    folder_language,
)

from .store import ContentStore

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"
_ENTRIES_ADAPTER = TypeAdapter(list[IndexEntry])


class PageIndex:
    """Maps command names to the platform/language variants present in the store."""

    def __init__(self, store: ContentStore) -> None:
        self.store = store
        self._entries: dict[str, IndexEntry] | None = None

    def find_page(
        self,
        name: str,
        platform: Platform | str,
        language: str = DEFAULT_LANGUAGE,
    ) -> PageLocation | None:
        entry = self._load().get(name)
        if entry is None or not entry.variants:
            return None

        variant = _best_variant(
            entry.variants,
            platform=Platform(platform),
            languages=language_candidates(language),
        )
        if variant is None:
            return None
        return PageLocation.for_variant(name, variant)

    def commands_for(self, platform: Platform | str) -> list[str]:
        target = Platform(platform)
        wanted = {target, Platform.COMMON}
        return sorted(
            name
            for name, entry in self._load().items()
            if entry.platforms & wanted
        )

    def commands(self) -> list[str]:
        return sorted(self._load())

    def rebuild_index(self) -> int:
        entries = self._scan()
        payload = _ENTRIES_ADAPTER.dump_python(
            sorted(entries.values(), key=lambda entry: entry.name),
            mode="json",
        )
        if self.store.exists():
            self.store.write_text(
                INDEX_FILENAME,
                json.dumps(payload, ensure_ascii=False, indent=1),
            )
        self._entries = entries
        logger.info("page_index rebuilt commands=%d", len(entries))
        return len(entries)

    def invalidate(self) -> None:
        self._entries = None

    def _load(self) -> dict[str, IndexEntry]:
        if self._entries is not None:
            return self._entries

        index_path = self.store.root / INDEX_FILENAME
        try:
            raw = index_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("page_index missing path=%s; scanning store", index_path)
            self._entries = self._scan()
            return self._entries
        except UnicodeDecodeError:
            logger.warning("page_index undecodable path=%s; scanning store", index_path)
            self._entries = self._scan()
            return self._entries
        except OSError as exc:
            raise StoreReadError(f"failed to read index {index_path}: {exc}") from exc

        try:
            loaded = _ENTRIES_ADAPTER.validate_json(raw)
        except ValidationError:
            logger.warning("page_index corrupt path=%s; scanning store", index_path)
            self._entries = self._scan()
            return self._entries

        self._entries = {entry.name: entry for entry in loaded}
        return self._entries

    def _scan(self) -> dict[str, IndexEntry]:
        if not self.store.exists():
            return {}

        variants: defaultdict[str, list[PageVariant]] = defaultdict(list)
        for language_dir in sorted(self.store.root.iterdir()):
            if not language_dir.is_dir():
                continue
            language = folder_language(language_dir.name)
            if language is None:
                continue
            for platform_dir in sorted(language_dir.iterdir()):
                platform = _parse_platform(platform_dir.name)
                if platform is None or not platform_dir.is_dir():
                    continue
                for page_path in sorted(platform_dir.glob("*.md")):
                    variants[page_path.stem].append(
                        PageVariant(platform=platform, language=language)
                    )

        return {
            name: IndexEntry(name=name, variants=found)
            for name, found in variants.items()
        }


def _parse_platform(value: str) -> Platform | None:
    try:
        return Platform(value)
    except ValueError:
        return None


def _best_variant(
    variants: Iterable[PageVariant],
    *,
    platform: Platform,
    languages: list[str],
) -> PageVariant | None:
    available = {(variant.platform, variant.language) for variant in variants}
    if not available:
        return None

    for language in languages:
        if (platform, language) in available:
            return PageVariant(platform=platform, language=language)
        if (Platform.COMMON, language) in available:
            return PageVariant(platform=Platform.COMMON, language=language)
        in_language = sorted(
            candidate for candidate, lang in available if lang == language
        )
        if in_language:
            return PageVariant(platform=in_language[0], language=language)

    # Nothing in a preferred language: English first, then alphabetical.
    other_languages = sorted(
        {lang for _, lang in available},
        key=lambda lang: (lang != DEFAULT_LANGUAGE, lang),
    )
    language = other_languages[0]
    platforms = sorted(
        (candidate for candidate, lang in available if lang == language),
        key=lambda candidate: (
            candidate != platform,
            candidate != Platform.COMMON,
            candidate.value,
        ),
    )
    return PageVariant(platform=platforms[0], language=language)

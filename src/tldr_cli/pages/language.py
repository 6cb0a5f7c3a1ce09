from __future__ import annotations

import os
from collections.abc import Mapping

from tldr_core.schemas import DEFAULT_LANGUAGE

_NEUTRAL_LOCALES = frozenset({"", "c", "posix"})


def normalize_language(value: str | None) -> str:
    """Strip encoding and modifier from a locale string: ``pt_BR.UTF-8`` -> ``pt_BR``."""
    raw = (value or "").strip()
    code = raw.split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    if code.lower() in _NEUTRAL_LOCALES:
        return DEFAULT_LANGUAGE
    return code


def preferred_language(
    configured: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> str:
    if configured and configured.strip():
        return normalize_language(configured)
    env = os.environ if environ is None else environ
    return normalize_language(env.get("LANG"))


def language_candidates(language: str | None) -> list[str]:
    code = normalize_language(language)
    candidates = [code]
    base = code.split("_", 1)[0]
    if base and base not in candidates:
        candidates.append(base)
    return candidates

"""Page helpers: platform/language detection, parsing and terminal rendering."""

from .language import language_candidates, normalize_language, preferred_language
from .parser import parse_page
from .platform import detect_platform, preferred_platform
from .render import format_page, render_page

__all__ = [
    "detect_platform",
    "format_page",
    "language_candidates",
    "normalize_language",
    "parse_page",
    "preferred_language",
    "preferred_platform",
    "render_page",
]

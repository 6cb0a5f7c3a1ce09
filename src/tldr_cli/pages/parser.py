from __future__ import annotations

import re

from tldr_core.schemas import PageExample, ParsedPage

_TITLE_PREFIX = "# "
_DESCRIPTION_PREFIX = ">"
_EXAMPLE_PREFIX = "- "
_CODE_PATTERN = re.compile(r"^`(?P<code>.*)`$")
_LINK_PATTERN = re.compile(r"<(?P<url>https?://[^>]+)>")


def parse_page(markdown: str) -> ParsedPage:
    title = ""
    description: list[str] = []
    examples: list[PageExample] = []
    pending_description: str | None = None

    for raw_line in markdown.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(_TITLE_PREFIX) and not title:
            title = line[len(_TITLE_PREFIX) :].strip()
            continue

        if line.startswith(_DESCRIPTION_PREFIX):
            text = _LINK_PATTERN.sub(r"\g<url>", line[len(_DESCRIPTION_PREFIX) :].strip())
            if text:
                description.append(text)
            continue

        if line.startswith(_EXAMPLE_PREFIX):
            pending_description = line[len(_EXAMPLE_PREFIX) :].strip()
            continue

        code_match = _CODE_PATTERN.match(line)
        if code_match and pending_description is not None:
            examples.append(
                PageExample(
                    description=pending_description,
                    command=code_match.group("code"),
                )
            )
            pending_description = None

    if not title:
        raise ValueError("page has no '# title' line")
    return ParsedPage(title=title, description=description, examples=examples)

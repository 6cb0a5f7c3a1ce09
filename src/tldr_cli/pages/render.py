from __future__ import annotations

import random
import re

import typer

from tldr_core.schemas import ParsedPage, RenderOptions

from .parser import parse_page

_PLACEHOLDER_PATTERN = re.compile(r"\{\{(?P<value>.*?)\}\}")
_INDENT = "  "


def render_page(
    content: str,
    options: RenderOptions | None = None,
    *,
    rng: random.Random | None = None,
    color: bool = True,
) -> str:
    options = options or RenderOptions()
    if options.markdown:
        return content

    page = parse_page(content)
    if options.random_example and page.examples:
        chooser = rng or random.Random()
        page = page.model_copy(update={"examples": [chooser.choice(page.examples)]})
    return format_page(page, color=color)


def format_page(page: ParsedPage, *, color: bool = True) -> str:
    def _style(text: str, **styles: object) -> str:
        return typer.style(text, **styles) if color else text  # type: ignore[arg-type]

    lines = ["", f"{_INDENT}{_style(page.title, bold=True)}", ""]
    for text in page.description:
        lines.append(f"{_INDENT}{text}")
    if page.description:
        lines.append("")

    for example in page.examples:
        lines.append(f"{_INDENT}{_style('- ' + example.description, fg='green')}")
        lines.append("")
        command = _PLACEHOLDER_PATTERN.sub(
            lambda match: _style(match.group("value"), underline=True),
            example.command,
        )
        lines.append(f"{_INDENT * 2}{command}")
        lines.append("")

    return "\n".join(lines)

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import typer

from tldr_core import RenderOptions, TldrError, load_config
from tldr_core.client import TldrClient
from tldr_core.schemas import Platform

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

T = TypeVar("T")

app = typer.Typer(help="Simplified, community-driven man pages from a local cache")


@dataclass(slots=True)
class _CliState:
    config_path: Path | None = None
    platform: str | None = None
    language: str | None = None


def _notify(message: str) -> None:
    typer.echo(message, err=True)


def _client(ctx: typer.Context) -> TldrClient:
    state: _CliState = ctx.obj or _CliState()
    try:
        config = load_config(state.config_path)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    return TldrClient.from_config(
        config,
        platform=state.platform,
        language=state.language,
        notify=_notify,
    )


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except TldrError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=exc.code) from exc


def _render_options(*, markdown: bool, random_example: bool = False) -> RenderOptions:
    try:
        return RenderOptions(markdown=markdown, random_example=random_example)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _echo_pages(pages: list[str], *, single_column: bool) -> None:
    delimiter = "\n" if single_column else ", "
    typer.echo(delimiter.join(pages))


@app.callback()
def main_options(
    ctx: typer.Context,
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file path (JSON or YAML). Defaults to ~/.tldrrc when present.",
        dir_okay=False,
    ),
    platform: str | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Override the operating system platform: "
        + ", ".join(item.value for item in Platform),
    ),
    language: str | None = typer.Option(
        None,
        "--language",
        "-L",
        help="Override the page language (e.g. es, pt_BR).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable info logging."),
) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.INFO)
    if platform is not None:
        try:
            Platform(platform.strip().lower())
        except ValueError as exc:
            typer.echo(f"unsupported platform: {platform}", err=True)
            raise typer.Exit(code=1) from exc
    ctx.obj = _CliState(config_path=config_path, platform=platform, language=language)


@app.command("page")
def show_page(
    ctx: typer.Context,
    command: list[str] = typer.Argument(..., help="Command to show, e.g. 'git commit'."),
    markdown: bool = typer.Option(False, "--markdown", "-m", help="Print raw markdown."),
) -> None:
    """Show the best matching page for a command."""
    options = _render_options(markdown=markdown)
    client = _client(ctx)
    typer.echo(_run(client.lookup("-".join(command), options)))


@app.command("list")
def list_pages(
    ctx: typer.Context,
    single_column: bool = typer.Option(
        False, "--single-column", "-1", help="One page name per line."
    ),
) -> None:
    """List pages available for the current platform."""
    client = _client(ctx)
    _echo_pages(_run(client.list_for_platform()), single_column=single_column)


@app.command("list-all")
def list_all_pages(
    ctx: typer.Context,
    single_column: bool = typer.Option(
        False, "--single-column", "-1", help="One page name per line."
    ),
) -> None:
    """List every cached page across platforms."""
    client = _client(ctx)
    _echo_pages(_run(client.list_all()), single_column=single_column)


@app.command("random")
def random_page(
    ctx: typer.Context,
    markdown: bool = typer.Option(False, "--markdown", "-m", help="Print raw markdown."),
) -> None:
    """Show a random page for the current platform."""
    options = _render_options(markdown=markdown)
    client = _client(ctx)
    typer.echo(_run(client.random_page(options)))


@app.command("random-example")
def random_example(ctx: typer.Context) -> None:
    """Show a single random example from a random page."""
    client = _client(ctx)
    typer.echo(_run(client.random_example()))


@app.command("render")
def render_file(
    ctx: typer.Context,
    path: Path = typer.Argument(
        ...,
        help="Local page file to render.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    markdown: bool = typer.Option(False, "--markdown", "-m", help="Print raw markdown."),
) -> None:
    """Render a local markdown page."""
    options = _render_options(markdown=markdown)
    client = _client(ctx)
    try:
        output = client.render_file(path, options)
    except TldrError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=exc.code) from exc
    typer.echo(output)


@app.command("update")
def update_cache(ctx: typer.Context) -> None:
    """Download a fresh copy of all pages and rebuild the index."""
    client = _client(ctx)
    typer.echo("Updating...", err=True)
    _run(client.update_cache())
    typer.echo("Done")


@app.command("clear-cache")
def clear_cache(ctx: typer.Context) -> None:
    """Remove the local page cache."""
    client = _client(ctx)
    _run(client.clear_cache())
    typer.echo("Done")


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()

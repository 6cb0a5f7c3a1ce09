from __future__ import annotations

import json
import tempfile
from pathlib import Path

from conftest import TAR_COMMON, TAR_LINUX, write_page
from typer.testing import CliRunner

import tldr_core.client as client_module
from tldr_cli.cli import app


def _write_config(path: Path, cache_dir: Path) -> Path:
    path.write_text(
        json.dumps(
            {
                "cache": {"directory": str(cache_dir), "freshness_days": 30},
                "remote": {"pages_repository": "https://example.com/tldr-pages"},
            }
        ),
        encoding="utf-8",
    )
    return path


def _fake_download(pages: dict[str, str], calls: list[Path]):
    def _download(self, destination: Path) -> None:
        calls.append(destination)
        for relative_path, text in pages.items():
            target = destination / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")

    return _download


def _setup(monkeypatch, tmp_path, pages: dict[str, str]) -> tuple[Path, list[Path]]:
    calls: list[Path] = []
    monkeypatch.setattr(client_module.ArchiveFetcher, "download", _fake_download(pages, calls))
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "tmp"))
    (tmp_path / "tmp").mkdir()
    config_path = _write_config(tmp_path / "config.json", tmp_path / "home")
    return config_path, calls


def test_page_refreshes_empty_cache_then_renders(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(
        monkeypatch,
        tmp_path,
        {"pages/linux/tar.md": TAR_LINUX, "pages/common/tar.md": TAR_COMMON},
    )

    result = CliRunner().invoke(
        app,
        ["--config", str(config_path), "--platform", "linux", "page", "tar", "--markdown"],
    )

    assert result.exit_code == 0, result.output
    assert "Page not found. Updating cache..." in result.output
    assert "Archiving utility." in result.output
    assert len(calls) == 1
    assert (tmp_path / "home" / "cache" / "pages" / "linux" / "tar.md").exists()


def test_page_falls_back_to_common_platform(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(monkeypatch, tmp_path, {})
    write_page(tmp_path / "home" / "cache", name="tar", platform="common", text=TAR_COMMON)

    result = CliRunner().invoke(
        app,
        ["--config", str(config_path), "--platform", "osx", "page", "tar"],
    )

    assert result.exit_code == 0, result.output
    assert "Generic archiving utility." in result.output
    assert calls == []


def test_multi_word_command_is_joined(monkeypatch, tmp_path) -> None:
    config_path, _ = _setup(monkeypatch, tmp_path, {})
    write_page(tmp_path / "home" / "cache", name="git-commit", text="# git commit\n")

    result = CliRunner().invoke(
        app, ["--config", str(config_path), "page", "git", "commit", "-m"]
    )

    assert result.exit_code == 0, result.output
    assert "# git commit" in result.output


def test_missing_page_exits_with_code_3(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(monkeypatch, tmp_path, {"pages/common/ls.md": "# ls\n"})

    result = CliRunner().invoke(app, ["--config", str(config_path), "page", "nope"])

    assert result.exit_code == 3
    assert "https://example.com/tldr-pages" in result.output
    assert len(calls) == 1


def test_list_on_empty_cache_exits_with_code_2(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(monkeypatch, tmp_path, {"pages/common/ls.md": "# ls\n"})

    result = CliRunner().invoke(app, ["--config", str(config_path), "list-all"])

    assert result.exit_code == 2
    assert "Local cache is empty" in result.output
    assert calls == []


def test_update_then_list(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(
        monkeypatch,
        tmp_path,
        {"pages/common/ls.md": "# ls\n", "pages/linux/apt.md": "# apt\n", "pages/osx/brew.md": "# brew\n"},
    )
    runner = CliRunner()

    update = runner.invoke(app, ["--config", str(config_path), "update"])
    listing = runner.invoke(
        app, ["--config", str(config_path), "--platform", "linux", "list", "--single-column"]
    )
    listing_all = runner.invoke(app, ["--config", str(config_path), "list-all"])

    assert update.exit_code == 0, update.output
    assert "Done" in update.output
    assert len(calls) == 1
    assert listing.exit_code == 0, listing.output
    assert "apt\nls" in listing.output
    assert "brew" not in listing.output
    assert "apt, brew, ls" in listing_all.output


def test_clear_cache_is_idempotent(monkeypatch, tmp_path) -> None:
    config_path, _ = _setup(monkeypatch, tmp_path, {})
    write_page(tmp_path / "home" / "cache", name="ls")
    runner = CliRunner()

    first = runner.invoke(app, ["--config", str(config_path), "clear-cache"])
    second = runner.invoke(app, ["--config", str(config_path), "clear-cache"])

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert not (tmp_path / "home" / "cache").exists()


def test_random_example_on_empty_cache(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(monkeypatch, tmp_path, {})

    result = CliRunner().invoke(app, ["--config", str(config_path), "random-example"])

    assert result.exit_code == 2
    assert calls == []


def test_render_local_file(tmp_path) -> None:
    page_path = tmp_path / "tar.md"
    page_path.write_text(TAR_LINUX, encoding="utf-8")
    config_path = _write_config(tmp_path / "config.json", tmp_path / "home")

    result = CliRunner().invoke(app, ["--config", str(config_path), "render", str(page_path)])

    assert result.exit_code == 0, result.output
    assert "path/to/target.tar" in result.output


def test_unknown_platform_is_rejected(tmp_path) -> None:
    config_path = _write_config(tmp_path / "config.json", tmp_path / "home")

    result = CliRunner().invoke(
        app, ["--config", str(config_path), "--platform", "beos", "list"]
    )

    assert result.exit_code == 1
    assert "unsupported platform" in result.output


def test_cached_page_without_title_exits_with_code_1(monkeypatch, tmp_path) -> None:
    config_path, calls = _setup(monkeypatch, tmp_path, {})
    write_page(tmp_path / "home" / "cache", name="foo", text="- an example:\n\n`foo`\n")
    runner = CliRunner()

    page = runner.invoke(app, ["--config", str(config_path), "page", "foo"])
    example = runner.invoke(app, ["--config", str(config_path), "random-example"])

    for result in (page, example):
        assert result.exit_code == 1
        assert "invalid page foo" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
    assert calls == []


def test_render_local_file_without_title_exits_with_code_1(tmp_path) -> None:
    page_path = tmp_path / "broken.md"
    page_path.write_text("just text\n", encoding="utf-8")
    config_path = _write_config(tmp_path / "config.json", tmp_path / "home")

    result = CliRunner().invoke(app, ["--config", str(config_path), "render", str(page_path)])

    assert result.exit_code == 1
    assert "invalid page" in result.output

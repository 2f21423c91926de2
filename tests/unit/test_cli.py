"""CLI tests using a local directory of notes."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from notelens.config import reload_settings
from notelens.main import _to_rich, app

runner = CliRunner()


@pytest.fixture
def notes_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("NOTELENS_DEBOUNCE_MS", "5")
    reload_settings()
    (tmp_path / "hello.md").write_text("Hello world", encoding="utf-8")
    (tmp_path / "other.md").write_text("Nothing to see", encoding="utf-8")
    return tmp_path


def test_search_previews_matching_note(notes_dir: Path) -> None:
    result = runner.invoke(app, ["search", "world", "--demo", str(notes_dir)])

    assert result.exit_code == 0, result.output
    assert "hello.md" in result.output
    assert "other.md" not in result.output
    assert "Hello world" in result.output


def test_search_without_matches(notes_dir: Path) -> None:
    result = runner.invoke(app, ["search", "zebra", "--demo", str(notes_dir)])

    assert result.exit_code == 0, result.output
    assert "No matching notes." in result.output


def test_search_select_option(notes_dir: Path) -> None:
    result = runner.invoke(app, ["search", "--demo", str(notes_dir), "--select", "1"])

    assert result.exit_code == 0, result.output
    assert "Nothing to see" in result.output


def test_search_rejects_missing_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["search", "x", "--demo", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "Not a directory" in result.output


def test_config_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTELENS_SEARCH_LIMIT", "12")
    reload_settings()

    result = runner.invoke(app, ["config", "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["search_limit"] == 12
    assert "debounce_ms" in data


def test_to_rich_styles_marked_spans() -> None:
    text = _to_rich("Hello <mark>world</mark> and <mark class=\"hit\">more</mark>")

    assert text.plain == "Hello world and more"
    assert len(text.spans) == 2

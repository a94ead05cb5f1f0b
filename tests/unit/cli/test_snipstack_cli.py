"""End-to-end tests for the snipstack CLI (offline)."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from snipstack.cli.main import app
from snipstack.store.connection import Database
from snipstack.store.migrations import run_migrations
from snipstack.store.repository import SnippetRepository

runner = CliRunner()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "snippets.db"


def _run(db_path: Path, *args: str, **kwargs):
    return runner.invoke(app, ["--db", str(db_path), "--offline", *args], **kwargs)


def _stored(db_path: Path):
    conn = Database(db_path).connect()
    try:
        run_migrations(conn)
        return SnippetRepository(conn).load()
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("snipstack ")


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "snipstack" in result.output


# ---------------------------------------------------------------------------
# capture
# ---------------------------------------------------------------------------


def test_capture_code(db_path: Path) -> None:
    result = _run(db_path, "capture", "def foo():\n    return 1", "--app", "VS Code")
    assert result.exit_code == 0, result.output
    assert "Captured code (code, python)" in result.output
    [snippet] = _stored(db_path)
    assert snippet.source == "VS Code"


def test_capture_duplicate_is_noop(db_path: Path) -> None:
    _run(db_path, "capture", "buy milk and eggs")
    result = _run(db_path, "capture", "buy milk and eggs")
    assert result.exit_code == 0
    assert "Already captured" in result.output
    assert len(_stored(db_path)) == 1


def test_capture_empty_exits_1(db_path: Path) -> None:
    result = _run(db_path, "capture", "   ")
    assert result.exit_code == 1
    assert "Nothing to capture" in result.output


def test_capture_from_stdin(db_path: Path) -> None:
    result = _run(db_path, "capture", "--stdin", input="https://react.dev/learn")
    assert result.exit_code == 0, result.output
    assert "Captured link" in result.output


def test_missing_api_key_falls_back_to_local_rules(db_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    result = runner.invoke(app, ["--db", str(db_path), "capture", "#ff8800"])
    assert result.exit_code == 0, result.output
    assert "API key not found" in result.output
    assert "Captured color" in result.output


# ---------------------------------------------------------------------------
# list / search / show
# ---------------------------------------------------------------------------


def test_list_empty(db_path: Path) -> None:
    result = _run(db_path, "list")
    assert result.exit_code == 0
    assert "No snippets yet" in result.output


def test_list_bad_view_exits_1(db_path: Path) -> None:
    result = _run(db_path, "list", "--view", "recent")
    assert result.exit_code == 1
    assert "Unknown view" in result.output


def test_demo_then_list(db_path: Path) -> None:
    result = _run(db_path, "demo")
    assert result.exit_code == 0, result.output
    assert "Added 6 demo snippets" in result.output
    again = _run(db_path, "demo")
    assert "already in the collection" in again.output
    assert len(_stored(db_path)) == 6


def test_search_type_and_text(db_path: Path) -> None:
    _run(db_path, "demo")
    result = _run(db_path, "search", "/type code")
    assert result.exit_code == 0, result.output
    assert "Results (" in result.output

    result = _run(db_path, "search", "groceries avocados")
    assert "Results (1)" in result.output


def test_search_no_match(db_path: Path) -> None:
    _run(db_path, "demo")
    result = _run(db_path, "search", "zebra xylophone")
    assert result.exit_code == 0
    assert "No matching snippets" in result.output


def test_search_date_prints_label(db_path: Path) -> None:
    _run(db_path, "demo")
    result = _run(db_path, "search", "/date May 2, 2025")
    assert result.exit_code == 0, result.output
    assert "Date:" in result.output


def test_show_by_prefix(db_path: Path) -> None:
    _run(db_path, "capture", "remember the milk")
    [snippet] = _stored(db_path)
    result = _run(db_path, "show", snippet.id[:8])
    assert result.exit_code == 0
    assert "remember the milk" in result.output


def test_show_unknown_id_exits_1(db_path: Path) -> None:
    result = _run(db_path, "show", "deadbeef")
    assert result.exit_code == 1
    assert "No snippet matches" in result.output


# ---------------------------------------------------------------------------
# note / fav / delete / clear
# ---------------------------------------------------------------------------


def test_note_add_and_remove(db_path: Path) -> None:
    _run(db_path, "capture", "a snippet worth annotating")
    [snippet] = _stored(db_path)

    result = _run(db_path, "note", "add", snippet.id, "check later")
    assert result.exit_code == 0, result.output
    assert _stored(db_path)[0].notes == ["check later"]

    bad = _run(db_path, "note", "remove", snippet.id, "3")
    assert bad.exit_code == 1
    assert "Note 3 does not exist" in bad.output

    result = _run(db_path, "note", "remove", snippet.id, "1")
    assert result.exit_code == 0
    assert _stored(db_path)[0].notes == []


def test_fav_toggles(db_path: Path) -> None:
    _run(db_path, "capture", "favourite me please")
    [snippet] = _stored(db_path)

    result = _run(db_path, "fav", snippet.id)
    assert "added to favourites" in result.output
    assert _stored(db_path)[0].is_favorite

    listed = _run(db_path, "list", "--view", "favorites")
    assert listed.exit_code == 0

    result = _run(db_path, "fav", snippet.id)
    assert "removed from favourites" in result.output


def test_delete(db_path: Path) -> None:
    _run(db_path, "capture", "short lived text")
    [snippet] = _stored(db_path)
    result = _run(db_path, "delete", snippet.id)
    assert result.exit_code == 0
    assert _stored(db_path) == []


def test_clear_cancelled_then_confirmed(db_path: Path) -> None:
    _run(db_path, "demo")
    cancelled = _run(db_path, "clear", input="n\n")
    assert "Cancelled" in cancelled.output
    assert len(_stored(db_path)) == 6

    result = _run(db_path, "clear", "--yes")
    assert result.exit_code == 0
    assert "Deleted 6 snippets" in result.output
    assert _stored(db_path) == []


# ---------------------------------------------------------------------------
# classify / resolve-date
# ---------------------------------------------------------------------------


def test_classify_dry_run_does_not_store(db_path: Path) -> None:
    result = _run(db_path, "classify", "jo@example.org")
    assert result.exit_code == 0
    assert "email" in result.output
    assert not db_path.exists()


def test_resolve_date(db_path: Path) -> None:
    result = _run(db_path, "resolve-date", "last", "night")
    assert result.exit_code == 0
    assert "Last night" in result.output
    assert "phrase-table" in result.output


def test_resolve_date_unresolved_exits_1(db_path: Path) -> None:
    result = _run(db_path, "resolve-date", "xyzzy", "plugh")
    assert result.exit_code == 1
    assert "Could not resolve" in result.output

"""Tests for the single-key snippet store."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from snipstack.store.connection import Database
from snipstack.store.migrations import MIGRATIONS, run_migrations
from snipstack.store.models import CodeSnippet, TextSnippet
from snipstack.store.repository import SNIPPETS_KEY, SnippetRepository, StorageError


def _text(id="t1", content="hello"):
    return TextSnippet(
        id=id, content=content, source="Notes", timestamp=datetime(2024, 5, 1, 9), tags=["note", "text"]
    )


# ------------------------------------------------------------------
# Schema
# ------------------------------------------------------------------


def test_migrations_idempotent(tmp_db):
    run_migrations(tmp_db)
    versions = [r[0] for r in tmp_db.execute("SELECT version FROM schema_version")]
    assert versions == [v for v, _ in MIGRATIONS]


def test_memory_database():
    with Database(":memory:") as conn:
        run_migrations(conn)
        assert conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0] == 0


# ------------------------------------------------------------------
# load / save
# ------------------------------------------------------------------


def test_load_empty(repo):
    assert repo.load() == []


def test_save_then_load_preserves_order_and_variants(repo):
    code = CodeSnippet(
        id="c1", content="x = 1", source="VS Code", timestamp=datetime(2024, 5, 1, 10), tags=["code", "python"], path="a.py"
    )
    repo.save([_text(), code])
    loaded = repo.load()
    assert [s.id for s in loaded] == ["t1", "c1"]
    assert isinstance(loaded[1], CodeSnippet)
    assert loaded[1].path == "a.py"


def test_save_overwrites_whole_collection(repo, tmp_db):
    repo.save([_text("a"), _text("b", "other")])
    repo.save([_text("b", "other")])
    assert [s.id for s in repo.load()] == ["b"]
    rows = tmp_db.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0]
    assert rows == 1


def test_load_skips_bad_records(repo):
    repo.put_blob(SNIPPETS_KEY, '[{"type": "nope"}, {"id": "x"}]')
    assert repo.load() == []


def test_load_invalid_json_raises(repo):
    repo.put_blob(SNIPPETS_KEY, "{not json")
    with pytest.raises(StorageError):
        repo.load()


@pytest.mark.parametrize("blob", ["null", '{"id": "x"}', "42"])
def test_load_non_list_json_raises(repo, blob):
    repo.put_blob(SNIPPETS_KEY, blob)
    with pytest.raises(StorageError, match="JSON list"):
        repo.load()


def test_write_failure_raises_storage_error():
    conn = MagicMock()
    conn.execute.side_effect = sqlite3.OperationalError("database or disk is full")
    repo = SnippetRepository(conn)
    with pytest.raises(StorageError) as info:
        repo.save([_text()])
    assert info.value.capacity is True


def test_write_failure_other_error_not_capacity():
    conn = MagicMock()
    conn.execute.side_effect = sqlite3.OperationalError("attempt to write a readonly database")
    with pytest.raises(StorageError) as info:
        SnippetRepository(conn).put_blob("k", "v")
    assert info.value.capacity is False

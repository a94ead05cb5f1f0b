"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import datetime

import pytest
from loguru import logger

from snipstack.classify.classifier import ContentClassifier
from snipstack.collection import SnippetCollection
from snipstack.store.connection import Database
from snipstack.store.migrations import run_migrations
from snipstack.store.repository import SnippetRepository

FIXED_NOW = datetime(2024, 5, 2, 10, 30)


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with migrations applied, closed after test."""
    db = Database(tmp_path / "snipstack.db")
    conn = db.connect()
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def repo(tmp_db):
    return SnippetRepository(tmp_db)


@pytest.fixture
def offline_classifier():
    """Classifier with no remote stage."""
    return ContentClassifier(remote=None)


@pytest.fixture
def clock():
    """Settable clock; ``clock.now`` is returned on each call."""

    class _Clock:
        def __init__(self) -> None:
            self.now = FIXED_NOW

        def __call__(self) -> datetime:
            return self.now

    return _Clock()


@pytest.fixture
def collection(repo, offline_classifier, clock):
    return SnippetCollection(repo, offline_classifier, now=clock)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.snipstack and SNIPSTACK_* settings."""
    monkeypatch.setattr("snipstack.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    for var in ("SNIPSTACK_MODEL", "SNIPSTACK_DB", "SNIPSTACK_LLM_ENABLED"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _drop_log_sinks():
    """CLI runs bind loguru to the runner's temporary stderr; unbind after each test."""
    yield
    logger.remove()

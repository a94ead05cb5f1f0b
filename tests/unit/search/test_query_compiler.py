"""Tests for search-bar compilation into FilterSpec."""

from __future__ import annotations

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from snipstack.classify.remote import RemoteClassifier
from snipstack.dates.resolver import DateResolver
from snipstack.llm.client import RemoteError
from snipstack.search.query import FilterSpec, QueryCompiler
from snipstack.search.terms import significant_terms

NOW = datetime(2024, 5, 2, 10, 30)


@pytest.fixture
def compiler():
    return QueryCompiler(DateResolver(now=lambda: NOW))


# ------------------------------------------------------------------
# Terms
# ------------------------------------------------------------------


def test_significant_terms():
    assert significant_terms("The Machine-learning notes, for ML!") == ["machine", "learning", "notes"]


def test_significant_terms_dedupes():
    assert significant_terms("notes notes NOTES") == ["notes"]


# ------------------------------------------------------------------
# Free text and identity
# ------------------------------------------------------------------


@pytest.mark.parametrize("raw", ["", "   "])
def test_empty_input_is_identity(compiler, raw):
    spec = compiler.compile(raw, FilterSpec(content_type="code", command="type"))
    assert spec == FilterSpec()
    assert spec.is_identity


def test_bare_text(compiler):
    spec = compiler.compile("Machine learning notes")
    assert spec.free_text == "machine learning notes"
    assert spec.free_text_terms == ("machine", "learning", "notes")
    assert spec.command is None


def test_text_replaces_previous_command(compiler):
    previous = compiler.compile("/type code")
    spec = compiler.compile("hello world", previous)
    assert spec.content_type is None
    assert spec.free_text == "hello world"


def test_unknown_command_is_free_text(compiler):
    spec = compiler.compile("/folder recipes")
    assert spec.free_text == "/folder recipes"
    assert spec.command is None


# ------------------------------------------------------------------
# /date
# ------------------------------------------------------------------


def test_date_resolved(compiler):
    spec = compiler.compile("/date last night")
    assert spec.command == "date"
    assert spec.date_range.start == date(2024, 5, 1)
    assert spec.date_range.end == date(2024, 5, 2)
    assert spec.date_text is None


def test_date_unresolved_keeps_text(compiler):
    spec = compiler.compile("/date xyzzy plugh")
    assert spec.date_range is None
    assert spec.date_text == "xyzzy plugh"


def test_same_command_refines(compiler):
    first = compiler.compile("/date yesterday")
    second = compiler.compile("/date yesterday evening", first)
    assert second.date_range.start_time is not None


def test_switching_command_resets(compiler):
    dated = compiler.compile("/date yesterday")
    spec = compiler.compile("/type link", dated)
    assert spec.date_range is None
    assert spec.content_type == "link"


# ------------------------------------------------------------------
# /type
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, content_type, language",
    [
        ("/type website", "link", None),
        ("/type url", "link", None),
        ("/type script", "code", None),
        ("/type note", "text", None),
        ("/type hex", "color", None),
        ("/type python", "code", "python"),
        ("/type js code", "code", "javascript"),
    ],
)
def test_type_keywords(compiler, raw, content_type, language):
    spec = compiler.compile(raw)
    assert (spec.content_type, spec.language) == (content_type, language)


def test_type_falls_back_to_remote():
    remote = MagicMock(spec=RemoteClassifier)
    remote.infer_type.return_value = ("code", "rust")
    compiler = QueryCompiler(DateResolver(now=lambda: NOW), remote=remote)
    spec = compiler.compile("/type crab language things")
    assert (spec.content_type, spec.language) == ("code", "rust")
    remote.infer_type.assert_called_once_with("crab language things")


def test_type_keyword_hit_skips_remote():
    remote = MagicMock(spec=RemoteClassifier)
    QueryCompiler(DateResolver(now=lambda: NOW), remote=remote).compile("/type links")
    remote.infer_type.assert_not_called()


def test_type_total_miss_is_free_text():
    remote = MagicMock(spec=RemoteClassifier)
    remote.infer_type.side_effect = RemoteError("offline")
    spec = QueryCompiler(DateResolver(now=lambda: NOW), remote=remote).compile("/type banana bread")
    assert spec.content_type is None
    assert spec.free_text == "banana bread"


# ------------------------------------------------------------------
# /app /fav /smart /newest /oldest
# ------------------------------------------------------------------


def test_app(compiler):
    assert compiler.compile("/app Visual Studio").source_app == "Visual Studio"


def test_fav_clears_other_constraints(compiler):
    typed = compiler.compile("/type code")
    spec = compiler.compile("/fav", typed)
    assert spec.favorites_only
    assert spec.content_type is None


def test_smart_is_free_text(compiler):
    spec = compiler.compile("/smart that regex from last week")
    assert spec.command == "smart"
    assert spec.free_text == "that regex from last week"
    assert spec.date_range is None


def test_sort_keeps_previous_constraints(compiler):
    typed = compiler.compile("/type code")
    spec = compiler.compile("/oldest", typed)
    assert spec.sort_order == "oldest"
    assert spec.content_type == "code"
    assert compiler.compile("/newest").sort_order == "newest"

"""Tests for FilterSpec evaluation and ordering."""

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from snipstack.dates.models import DateRange
from snipstack.search import engine
from snipstack.search.query import FilterSpec
from snipstack.search.terms import significant_terms
from snipstack.store.models import PrimaryType, SourceApp, make_snippet


def _snip(
    content, primary=PrimaryType.TEXT, *, ts=datetime(2024, 5, 1, 12, 0), tags=None, source="Clipboard", **extra
):
    return make_snippet(
        primary,
        id=f"id-{abs(hash((content, ts))) % 10_000}",
        content=content,
        source=source,
        timestamp=ts,
        tags=tags or [primary.value],
        **extra,
    )


def _text(phrase):
    return FilterSpec(free_text=phrase.lower(), free_text_terms=tuple(significant_terms(phrase)))


def test_identity_keeps_everything():
    snippets = [_snip("one"), _snip("two", PrimaryType.CODE)]
    assert len(engine.apply(snippets, FilterSpec())) == 2


# ------------------------------------------------------------------
# Type
# ------------------------------------------------------------------


def test_type_code_matches_code_looking_text():
    snippet = _snip("function f() { return 1; }")
    assert engine.matches(snippet, FilterSpec(content_type="code"))


def test_type_link_matches_text_with_url():
    snippet = _snip("read later www.example.com/post")
    assert engine.matches(snippet, FilterSpec(content_type="url"))


def test_type_text_excludes_code_and_link_only():
    assert engine.matches(_snip("hi", PrimaryType.MESSAGE, contact="Alex"), FilterSpec(content_type="text"))
    assert engine.matches(_snip("Ship it.", PrimaryType.QUOTE), FilterSpec(content_type="text"))
    assert not engine.matches(_snip("x = 1", PrimaryType.CODE), FilterSpec(content_type="text"))


def test_type_color_matches_literal():
    assert engine.matches(_snip("#ff0000"), FilterSpec(content_type="color"))
    assert not engine.matches(_snip("reddish tones"), FilterSpec(content_type="color"))


def test_language_filter_uses_detector():
    snippet = _snip("anything", PrimaryType.CODE)
    spec = FilterSpec(content_type="code", language="js")
    assert engine.matches(snippet, spec, detect_language=lambda _t: "javascript")
    assert not engine.matches(snippet, spec, detect_language=lambda _t: "python")
    assert not engine.matches(snippet, spec, detect_language=lambda _t: None)


# ------------------------------------------------------------------
# App, view, favourites
# ------------------------------------------------------------------


def test_app_substring_case_insensitive():
    snippet = _snip("x", source="Visual Studio Code", source_app=SourceApp("Visual Studio Code"))
    assert engine.matches(snippet, FilterSpec(source_app="studio"))
    assert not engine.matches(snippet, FilterSpec(source_app="slack"))


def test_favorites_view_and_flag():
    fav = _snip("fav")
    fav.is_favorite = True
    plain = _snip("plain")
    assert engine.apply([fav, plain], FilterSpec(), view="favorites") == [fav]
    assert engine.apply([fav, plain], FilterSpec(favorites_only=True)) == [fav]


# ------------------------------------------------------------------
# Dates
# ------------------------------------------------------------------


def test_overnight_range():
    rng = DateRange.create(date(2024, 5, 1), None, time(22), time(4))
    spec = FilterSpec(date_range=rng)
    assert engine.matches(_snip("a", ts=datetime(2024, 5, 1, 23, 0)), spec)
    assert engine.matches(_snip("b", ts=datetime(2024, 5, 2, 3, 59)), spec)
    assert not engine.matches(_snip("c", ts=datetime(2024, 5, 1, 21, 0)), spec)
    assert not engine.matches(_snip("d", ts=datetime(2024, 5, 2, 5, 0)), spec)


def test_unresolved_date_text_matches_display_timestamp():
    snippet = _snip("x", ts=datetime(2025, 5, 2, 14, 34))
    assert engine.matches(snippet, FilterSpec(date_text="May 2"))
    assert not engine.matches(snippet, FilterSpec(date_text="June"))


# ------------------------------------------------------------------
# Free text
# ------------------------------------------------------------------


def test_fractional_term_match():
    snippet = _snip("learning notes about ML")
    assert engine.matches(snippet, _text("machine learning notes"))
    assert not engine.matches(snippet, _text("machine cooking recipes"))


def test_phrase_matches_notes_and_tags():
    snippet = _snip("plain body", tags=["recipe", "text"], notes=["from grandma"])
    assert engine.matches(snippet, _text("grandma"))
    assert engine.matches(snippet, _text("recipe"))


def test_stop_words_only_query_needs_phrase_hit():
    spec = FilterSpec(free_text="of the", free_text_terms=())
    assert engine.matches(_snip("top of the morning"), spec)
    assert not engine.matches(_snip("morning"), spec)


# ------------------------------------------------------------------
# Sorting
# ------------------------------------------------------------------


def test_sort_is_stable_and_respects_override():
    early = _snip("early", ts=datetime(2024, 5, 1, 8, 0))
    tie_a = _snip("tie a", ts=datetime(2024, 5, 1, 9, 0))
    tie_b = _snip("tie b", ts=datetime(2024, 5, 1, 9, 0))
    snippets = [early, tie_a, tie_b]

    assert engine.apply(snippets, FilterSpec(), sort_order="oldest") == [early, tie_a, tie_b]
    assert engine.apply(snippets, FilterSpec()) == [tie_a, tie_b, early]
    assert engine.apply(snippets, FilterSpec(sort_order="oldest"), sort_order="newest")[0] is early


@pytest.mark.parametrize("view, order", [("recent", "newest"), ("all", "sideways")])
def test_bad_view_or_order_raises(view, order):
    with pytest.raises(ValueError):
        engine.apply([], FilterSpec(), view=view, sort_order=order)

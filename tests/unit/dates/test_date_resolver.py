"""Tests for the date resolver chain."""

from __future__ import annotations

from datetime import date, datetime, time
from unittest.mock import MagicMock, patch

import pytest

from snipstack.dates.models import DateRange
from snipstack.dates.remote import RemoteDateResolver
from snipstack.dates.resolver import DateResolver
from snipstack.llm.client import RemoteError
from snipstack.patterns.time_windows import END_OF_DAY

# Thursday
NOW = datetime(2024, 5, 2, 10, 30)


@pytest.fixture
def resolver():
    return DateResolver(now=lambda: NOW)


# ------------------------------------------------------------------
# DateRange
# ------------------------------------------------------------------


def test_create_forces_next_day_for_overnight():
    rng = DateRange.create(date(2024, 5, 1), date(2024, 5, 1), time(22), time(4))
    assert rng.end == date(2024, 5, 2)
    assert rng.is_overnight


def test_create_orders_dates():
    rng = DateRange.create(date(2024, 5, 3), date(2024, 5, 1))
    assert (rng.start, rng.end) == (date(2024, 5, 1), date(2024, 5, 3))


def test_whole_day_bounds_inclusive():
    rng = DateRange.create(date(2024, 5, 1))
    assert rng.contains(datetime(2024, 5, 1, 0, 0))
    assert rng.contains(datetime(2024, 5, 1, 23, 59, 59, 999000))
    assert not rng.contains(datetime(2024, 5, 2, 0, 0))


def test_same_day_window():
    rng = DateRange.create(date(2024, 5, 1), None, time(18), END_OF_DAY)
    assert rng.contains(datetime(2024, 5, 1, 20, 0))
    assert not rng.contains(datetime(2024, 5, 1, 17, 59))


def test_describe():
    rng = DateRange.create(date(2024, 5, 1), None, time(22), time(4))
    assert rng.describe() == "May 1, 2024 22:00 – May 2, 2024 04:00"


# ------------------------------------------------------------------
# Phrase table
# ------------------------------------------------------------------


def test_last_night_wraps_midnight(resolver):
    result = resolver.resolve("last night")
    assert result.resolved
    assert result.strategy == "phrase-table"
    rng = result.range
    assert (rng.start, rng.start_time) == (date(2024, 5, 1), time(22))
    assert (rng.end, rng.end_time) == (date(2024, 5, 2), time(4))
    assert rng.contains(datetime(2024, 5, 2, 1, 30))
    assert not rng.contains(datetime(2024, 5, 1, 20, 0))


@pytest.mark.parametrize(
    "phrase, start, end, start_time, end_time",
    [
        ("yesterday evening", date(2024, 5, 1), date(2024, 5, 1), time(18), END_OF_DAY),
        ("This Morning", date(2024, 5, 2), date(2024, 5, 2), time(5), time(12)),
        ("tonight", date(2024, 5, 2), date(2024, 5, 3), time(22), time(4)),
        ("today", date(2024, 5, 2), date(2024, 5, 2), None, None),
        ("yesterday", date(2024, 5, 1), date(2024, 5, 1), None, None),
        ("monday afternoon", date(2024, 4, 29), date(2024, 4, 29), time(12), time(18)),
        ("thursday", date(2024, 5, 2), date(2024, 5, 2), None, None),
        ("last thursday", date(2024, 4, 25), date(2024, 4, 25), None, None),
        ("this week", date(2024, 4, 29), date(2024, 5, 2), None, None),
        ("last week", date(2024, 4, 22), date(2024, 4, 28), None, None),
        ("this month", date(2024, 5, 1), date(2024, 5, 2), None, None),
        ("last month", date(2024, 4, 1), date(2024, 4, 30), None, None),
        ("last 7 days", date(2024, 4, 26), date(2024, 5, 2), None, None),
        ("noon", date(2024, 5, 2), date(2024, 5, 2), time(12), time(13)),
    ],
)
def test_phrase_table(resolver, phrase, start, end, start_time, end_time):
    result = resolver.resolve(phrase)
    assert result.strategy == "phrase-table"
    assert result.range == DateRange(start, end, start_time, end_time)


def test_label_is_human_readable(resolver):
    assert resolver.resolve("last night").label.startswith("Last night (May 1, 2024 22:00")


# ------------------------------------------------------------------
# General parser
# ------------------------------------------------------------------


def test_parser_range_from_several_dates(resolver):
    result = resolver.resolve("April 30 and May 1")
    assert result.strategy == "parser"
    assert (result.range.start, result.range.end) == (date(2024, 4, 30), date(2024, 5, 1))
    assert not result.range.has_times


@pytest.mark.parametrize(
    "phrase, start, end",
    [
        ("March 3, 2024 and March 5, 2024", date(2024, 3, 3), date(2024, 3, 5)),
        ("April 30, 2024 to May 1, 2024", date(2024, 4, 30), date(2024, 5, 1)),
        ("January 9, 2024 until January 2, 2024", date(2024, 1, 2), date(2024, 1, 9)),
    ],
)
def test_parser_range_across_conjunction(resolver, phrase, start, end):
    result = resolver.resolve(phrase)
    assert result.strategy == "parser"
    assert (result.range.start, result.range.end) == (start, end)


def test_parser_splits_on_conjunction_when_whole_phrase_misses(resolver):
    hits = {
        "april 30": [("april 30", datetime(2024, 4, 30))],
        "may 1": [("may 1", datetime(2024, 5, 1))],
    }
    searched = []

    def fake_search(text, **_kwargs):
        searched.append(text)
        return hits.get(text)

    with patch("snipstack.dates.resolver.search_dates", side_effect=fake_search):
        result = resolver.resolve("April 30 and May 1")
    assert searched[:3] == ["april 30 and may 1", "april 30", "may 1"]
    assert result.strategy == "parser"
    assert (result.range.start, result.range.end) == (date(2024, 4, 30), date(2024, 5, 1))


def test_parser_month_is_whole_month(resolver):
    result = resolver.resolve("March 2024")
    assert result.strategy == "parser"
    assert (result.range.start, result.range.end) == (date(2024, 3, 1), date(2024, 3, 31))


def test_parser_failure_is_not_fatal(resolver):
    with patch("snipstack.dates.resolver.search_dates", side_effect=ValueError("boom")):
        result = resolver.resolve("the 3rd of never")
    assert not result.resolved


# ------------------------------------------------------------------
# Remote stage
# ------------------------------------------------------------------


def _remote(result=None, error=None):
    remote = MagicMock(spec=RemoteDateResolver)
    if error is not None:
        remote.resolve.side_effect = error
    else:
        remote.resolve.return_value = result
    return remote


def test_remote_only_in_relaxed_mode():
    answer = (DateRange.create(date(2024, 4, 1)), "April Fools")
    remote = _remote(answer)
    resolver = DateResolver(remote=remote, now=lambda: NOW)

    assert not resolver.resolve("xyzzy plugh").resolved
    remote.resolve.assert_not_called()

    result = resolver.resolve("xyzzy plugh", relaxed=True)
    assert result.resolved
    assert result.strategy == "remote"
    assert result.label == "April Fools"
    remote.resolve.assert_called_once_with("xyzzy plugh", NOW)


def test_remote_failure_leaves_phrase_unresolved():
    resolver = DateResolver(remote=_remote(error=RemoteError("down")), now=lambda: NOW)
    result = resolver.resolve("xyzzy plugh", relaxed=True)
    assert not result.resolved
    assert result.label == "xyzzy plugh"
    assert result.range is None


def test_empty_phrase_unresolved(resolver):
    assert not resolver.resolve("   ").resolved


# ------------------------------------------------------------------
# RemoteDateResolver
# ------------------------------------------------------------------


def test_remote_resolver_parses_reply_and_wraps():
    reply = {"from": "2024-05-01", "to": "2024-05-01", "fromTime": "22:00", "toTime": "04:00", "display": "Last night"}
    with patch("snipstack.dates.remote.llm_client.complete_json", return_value=reply) as call:
        rng, label = RemoteDateResolver("openai/gpt-4o-mini").resolve("late yesterday", NOW)
    assert rng == DateRange(date(2024, 5, 1), date(2024, 5, 2), time(22), time(4))
    assert label == "Last night"
    prompt = call.call_args.args[1][0]["content"]
    assert "2024-05-02" in prompt
    assert "night 22:00-04:00 (next day)" in prompt


def test_remote_resolver_24h_end():
    reply = {"from": "2024-05-01", "to": "2024-05-01", "fromTime": "18:00", "toTime": "24:00"}
    with patch("snipstack.dates.remote.llm_client.complete_json", return_value=reply):
        rng, label = RemoteDateResolver("openai/gpt-4o-mini").resolve("after work", NOW)
    assert rng.end_time == END_OF_DAY
    assert label == "after work"


def test_remote_resolver_bad_date_raises():
    with patch("snipstack.dates.remote.llm_client.complete_json", return_value={"from": "soon"}):
        with pytest.raises(RemoteError):
            RemoteDateResolver("openai/gpt-4o-mini").resolve("soon", NOW)

"""Date resolver — turn a natural-language phrase into a DateRange.

Chain, in order, stopping at the first strategy that answers:

  1. explicit phrase table (relative day + named time-of-day window, and
     bare relative spans such as "last week")
  2. dateparser.search_dates over the whole phrase, then over its pieces
     when a range conjunction ("and", "to", "until" ...) joins two dates
  3. remote resolver, only in relaxed ("smart search") mode

When every strategy misses, the phrase comes back unresolved and the caller
treats it as text.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from typing import Any

from dateparser.date import DateDataParser
from dateparser.search import search_dates
from loguru import logger

from snipstack.config import SnipstackConfig
from snipstack.dates.models import DateRange, DateResolution
from snipstack.dates.remote import RemoteDateResolver
from snipstack.patterns.time_windows import TIME_WINDOWS, TimeWindow, find_time_window

Clock = Callable[[], datetime]
Found = tuple[DateRange, str]

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_RELATIVE_DAYS = {"today": 0, "this": 0, "yesterday": -1, "tomorrow": 1}

_WINDOW_ALT = "|".join(TIME_WINDOWS)
_DAY_WINDOW_RE = re.compile(
    rf"^(?:(?P<rel>today|yesterday|tomorrow|this)|(?P<last>last\s+)?(?P<weekday>{'|'.join(_WEEKDAYS)}))"
    rf"(?:\s+(?:at\s+|in\s+the\s+)?(?P<window>{_WINDOW_ALT}))?$"
)
_BARE_WINDOW_RE = re.compile(rf"^(?P<window>{_WINDOW_ALT})$")
_SPAN_RE = re.compile(r"^(?P<which>this|last|past|previous)\s+(?P<unit>week|month|year)$")
_LAST_N_DAYS_RE = re.compile(r"^(?:last|past|previous)\s+(?P<n>\d{1,3})\s+days?$")
# Spaces around "-" and "&" keep ISO dates ("2024-05-01") in one piece.
_RANGE_SPLIT_RE = re.compile(r"\s+(?:and|to|through|thru|until|till)\s+|\s+[-–&]\s+")
_SPECIAL = {
    "tonight": (0, "night"),
    "last night": (-1, "night"),
}


def _normalise(phrase: str) -> str:
    return " ".join(phrase.lower().replace(",", " ").split())


def _label(phrase: str, rng: DateRange) -> str:
    return f"{phrase[:1].upper()}{phrase[1:]} ({rng.describe()})"


def _windowed(day: date, window: TimeWindow | None) -> DateRange:
    if window is None:
        return DateRange.create(day)
    return DateRange.create(day, day, window.start, window.end)


class DateResolver:
    """Prioritised chain of date strategies.

    Args:
        remote: Remote resolver used in relaxed mode; None disables that stage.
        now: Clock callable. Injected so tests resolve relative phrases
            against a fixed instant.
        prefer_past: Resolve ambiguous phrases ("friday") to the most recent
            past occurrence rather than the next one.
    """

    def __init__(
        self,
        remote: RemoteDateResolver | None = None,
        now: Clock = datetime.now,
        prefer_past: bool = True,
    ) -> None:
        self._remote = remote
        self._now = now
        self._prefer_past = prefer_past
        # (name, strategy, relaxed_only)
        self.strategies: list[tuple[str, Callable[[str, datetime], Found | None], bool]] = [
            ("phrase-table", self._by_phrase_table, False),
            ("parser", self._by_parser, False),
            ("remote", self._by_remote, True),
        ]

    @classmethod
    def from_config(
        cls, cfg: SnipstackConfig, *, offline: bool = False, now: Clock = datetime.now
    ) -> DateResolver:
        remote = None
        if cfg.llm.enabled and not offline:
            remote = RemoteDateResolver(
                model=cfg.llm.model, timeout=cfg.llm.timeout, num_retries=cfg.llm.num_retries
            )
        return cls(remote=remote, now=now, prefer_past=cfg.dates.prefer_past)

    def resolve(self, phrase: str, *, relaxed: bool = False) -> DateResolution:
        """Resolve *phrase* to a date range.

        Never raises. ``resolved`` is False when no strategy produced a range.
        """
        cleaned = _normalise(phrase)
        if not cleaned:
            return DateResolution(resolved=False, label=phrase.strip())

        now = self._now()
        for name, strategy, relaxed_only in self.strategies:
            if relaxed_only and not relaxed:
                continue
            found = strategy(cleaned, now)
            if found is not None:
                rng, label = found
                logger.debug("Resolved {!r} by {} to {}", phrase, name, rng.describe())
                return DateResolution(resolved=True, label=label, range=rng, strategy=name)

        logger.debug("Date phrase {!r} unresolved", phrase)
        return DateResolution(resolved=False, label=phrase.strip())

    # ------------------------------------------------------------------
    # Strategy 1: phrase table
    # ------------------------------------------------------------------

    def _by_phrase_table(self, phrase: str, now: datetime) -> Found | None:
        today = now.date()

        if phrase in _SPECIAL:
            offset, window_name = _SPECIAL[phrase]
            rng = _windowed(today + timedelta(days=offset), TIME_WINDOWS[window_name])
            return rng, _label(phrase, rng)

        match = _BARE_WINDOW_RE.match(phrase)
        if match:
            rng = _windowed(today, TIME_WINDOWS[match.group("window")])
            return rng, _label(phrase, rng)

        match = _DAY_WINDOW_RE.match(phrase)
        if match:
            window = TIME_WINDOWS[match.group("window")] if match.group("window") else None
            rel = match.group("rel")
            if rel == "this" and window is None:
                return None
            if rel is not None:
                day = today + timedelta(days=_RELATIVE_DAYS[rel])
            else:
                day = self._weekday(today, match.group("weekday"), strictly_past=bool(match.group("last")))
            rng = _windowed(day, window)
            return rng, _label(phrase, rng)

        match = _SPAN_RE.match(phrase)
        if match:
            rng = self._span(today, match.group("which"), match.group("unit"))
            return rng, _label(phrase, rng)

        match = _LAST_N_DAYS_RE.match(phrase)
        if match:
            n = max(int(match.group("n")), 1)
            rng = DateRange.create(today - timedelta(days=n - 1), today)
            return rng, _label(phrase, rng)

        return None

    def _weekday(self, today: date, name: str, *, strictly_past: bool) -> date:
        target = _WEEKDAYS.index(name)
        if strictly_past or self._prefer_past:
            back = (today.weekday() - target) % 7
            if strictly_past and back == 0:
                back = 7
            return today - timedelta(days=back)
        return today + timedelta(days=(target - today.weekday()) % 7)

    @staticmethod
    def _span(today: date, which: str, unit: str) -> DateRange:
        current = which == "this"
        if unit == "week":
            monday = today - timedelta(days=today.weekday())
            if current:
                return DateRange.create(monday, today)
            start = monday - timedelta(days=7)
            return DateRange.create(start, start + timedelta(days=6))
        if unit == "month":
            if current:
                return DateRange.create(today.replace(day=1), today)
            last_day = today.replace(day=1) - timedelta(days=1)
            return DateRange.create(last_day.replace(day=1), last_day)
        if current:
            return DateRange.create(date(today.year, 1, 1), today)
        return DateRange.create(date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))

    # ------------------------------------------------------------------
    # Strategy 2: general parser
    # ------------------------------------------------------------------

    def _parser_settings(self, now: datetime) -> dict[str, Any]:
        return {
            "RELATIVE_BASE": now.replace(tzinfo=None),
            "PREFER_DATES_FROM": "past" if self._prefer_past else "current_period",
            "RETURN_TIME_AS_PERIOD": True,
        }

    def _by_parser(self, phrase: str, now: datetime) -> Found | None:
        settings = self._parser_settings(now)
        found = self._search(phrase, settings)
        if len(found) < 2:
            pieces = [p for p in _RANGE_SPLIT_RE.split(phrase) if p.strip()]
            if len(pieces) > 1:
                from_pieces = [hit for piece in pieces for hit in self._search(piece, settings)]
                if len(from_pieces) > 1:
                    found = from_pieces
        if not found:
            return None

        window = find_time_window(phrase)
        if len(found) > 1:
            days = sorted(dt.date() for _, dt in found)
            rng = DateRange.create(
                days[0],
                days[-1],
                window.start if window else None,
                window.end if window else None,
            )
            return rng, _label(phrase, rng)

        matched, moment = found[0]
        period = self._period(matched, settings)
        rng = self._range_for(moment, period, window)
        return rng, _label(phrase, rng)

    @staticmethod
    def _search(text: str, settings: dict[str, Any]) -> list[tuple[str, datetime]]:
        try:
            return search_dates(text, languages=["en"], settings=settings) or []
        except Exception as exc:
            logger.debug("dateparser failed on {!r}: {}", text, exc)
            return []

    @staticmethod
    def _period(text: str, settings: dict[str, Any]) -> str | None:
        try:
            data = DateDataParser(languages=["en"], settings=settings).get_date_data(text)
        except Exception as exc:
            logger.debug("dateparser period lookup failed on {!r}: {}", text, exc)
            return None
        return data.period

    @staticmethod
    def _range_for(moment: datetime, period: str | None, window: TimeWindow | None) -> DateRange:
        day = moment.date()
        if window is not None:
            return _windowed(day, window)
        if period == "time":
            return DateRange.create(
                day, day, time(moment.hour), time(moment.hour, 59, 59, 999999)
            )
        if period == "week":
            monday = day - timedelta(days=day.weekday())
            return DateRange.create(monday, monday + timedelta(days=6))
        if period == "month":
            last = calendar.monthrange(day.year, day.month)[1]
            return DateRange.create(day.replace(day=1), day.replace(day=last))
        if period == "year":
            return DateRange.create(date(day.year, 1, 1), date(day.year, 12, 31))
        return DateRange.create(day)

    # ------------------------------------------------------------------
    # Strategy 3: remote
    # ------------------------------------------------------------------

    def _by_remote(self, phrase: str, now: datetime) -> Found | None:
        if self._remote is None:
            return None
        try:
            return self._remote.resolve(phrase, now)
        except Exception as exc:
            logger.warning("Remote date resolver unavailable: {}", exc)
            return None

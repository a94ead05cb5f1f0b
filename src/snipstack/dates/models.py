"""Canonical date-range representation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from snipstack.patterns.time_windows import END_OF_DAY


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range with optional time-of-day bounds.

    Without times the range covers whole days. When ``start_time`` is later
    than ``end_time`` the window wraps past midnight and ``end`` is the day
    after ``start``. Build instances through :meth:`create` to get that
    canonical form.
    """

    start: date
    end: date
    start_time: time | None = None
    end_time: time | None = None

    @classmethod
    def create(
        cls,
        start: date,
        end: date | None = None,
        start_time: time | None = None,
        end_time: time | None = None,
    ) -> DateRange:
        end = end or start
        if end < start:
            start, end = end, start
        if start_time is not None and end_time is None:
            end_time = END_OF_DAY
        if end_time is not None and start_time is None:
            start_time = time(0, 0)
        if start_time is not None and end_time is not None and start_time > end_time:
            end = start + timedelta(days=1)
        return cls(start, end, start_time, end_time)

    @property
    def has_times(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def is_overnight(self) -> bool:
        return self.has_times and self.start_time > self.end_time  # type: ignore[operator]

    def day_bounds(self) -> tuple[datetime, datetime]:
        """Return ``(start 00:00:00, end 23:59:59.999999)``."""
        return datetime.combine(self.start, time(0, 0)), datetime.combine(self.end, END_OF_DAY)

    def contains(self, ts: datetime) -> bool:
        """Return True if *ts* falls inside this range.

        Overnight: on ``start`` at or after ``start_time``, or on ``end`` at or
        before ``end_time``. Other timed ranges: a day inside the range and a
        time inside the window. Untimed: inclusive whole days.
        """
        if not self.has_times:
            lo, hi = self.day_bounds()
            return lo <= ts <= hi
        t = ts.time()
        if self.is_overnight:
            return (ts.date() == self.start and t >= self.start_time) or (
                ts.date() == self.end and t <= self.end_time
            )
        return self.start <= ts.date() <= self.end and self.start_time <= t <= self.end_time

    def describe(self) -> str:
        """Human-readable form, e.g. ``May 1, 2024 22:00 – May 2, 2024 04:00``."""

        def _d(d: date) -> str:
            return f"{d.strftime('%b')} {d.day}, {d.year}"

        def _t(t: time) -> str:
            return "24:00" if t == END_OF_DAY else t.strftime("%H:%M")

        if not self.has_times:
            return _d(self.start) if self.start == self.end else f"{_d(self.start)} – {_d(self.end)}"
        if self.start == self.end:
            return f"{_d(self.start)} {_t(self.start_time)}–{_t(self.end_time)}"
        return f"{_d(self.start)} {_t(self.start_time)} – {_d(self.end)} {_t(self.end_time)}"


@dataclass(frozen=True)
class DateResolution:
    """Outcome of resolving a date phrase.

    ``resolved`` is False when every strategy failed; ``label`` then holds
    the original phrase and ``range`` is None.
    """

    resolved: bool
    label: str
    range: DateRange | None = None
    strategy: str = ""

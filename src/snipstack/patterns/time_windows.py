"""Named time-of-day windows shared by the date resolver and the remote prompt.

A window whose end is earlier than its start (``night``) wraps past midnight
into the following calendar day.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time

END_OF_DAY = time(23, 59, 59, 999999)


@dataclass(frozen=True)
class TimeWindow:
    name: str
    start: time
    end: time

    @property
    def wraps(self) -> bool:
        return self.start > self.end


# Ordered longest-name-first so "midnight" wins over "night" when scanning.
TIME_WINDOWS: dict[str, TimeWindow] = {
    "midnight": TimeWindow("midnight", time(0, 0), time(1, 0)),
    "afternoon": TimeWindow("afternoon", time(12, 0), time(18, 0)),
    "morning": TimeWindow("morning", time(5, 0), time(12, 0)),
    "evening": TimeWindow("evening", time(18, 0), END_OF_DAY),
    "night": TimeWindow("night", time(22, 0), time(4, 0)),
    "noon": TimeWindow("noon", time(12, 0), time(13, 0)),
}

_WINDOW_RE = re.compile(r"\b(" + "|".join(TIME_WINDOWS) + r")\b", re.IGNORECASE)


def find_time_window(text: str) -> TimeWindow | None:
    """Return the first named time-of-day window mentioned in *text*."""
    match = _WINDOW_RE.search(text)
    return TIME_WINDOWS[match.group(1).lower()] if match else None


def describe_windows() -> str:
    """Render the window table for prompts, e.g. ``morning 05:00-12:00``."""
    parts = []
    for window in TIME_WINDOWS.values():
        end = "24:00" if window.end == END_OF_DAY else window.end.strftime("%H:%M")
        suffix = " (next day)" if window.wraps else ""
        parts.append(f"{window.name} {window.start.strftime('%H:%M')}-{end}{suffix}")
    return ", ".join(parts)

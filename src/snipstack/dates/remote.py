"""Remote date resolver — ask an LLM for an explicit range when local parsing fails."""

from __future__ import annotations

from datetime import date, datetime, time

from snipstack.dates.models import DateRange
from snipstack.llm import client as llm_client
from snipstack.llm.client import RemoteError
from snipstack.patterns.time_windows import END_OF_DAY, describe_windows

_DATE_PROMPT = """\
Today is {today} ({weekday}). A user searched their clipboard history for
items from: "{phrase}".

Reply with JSON only:
{{"from": "YYYY-MM-DD", "to": "YYYY-MM-DD", "fromTime": "HH:MM" or null,
  "toTime": "HH:MM" or null, "display": "short human label"}}

Rules:
- Named times of day map to these hour ranges: {windows}.
- When the range crosses midnight, "to" is the following calendar day.
- Omit times (null) when the phrase names whole days.
- Prefer dates in the past."""


def _parse_clock(value: object) -> time | None:
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise RemoteError(f"bad time value: {value!r}")
    if value.strip() in ("24:00", "24:00:00"):
        return END_OF_DAY
    try:
        return time.fromisoformat(value.strip())
    except ValueError as exc:
        raise RemoteError(f"bad time value: {value!r}") from exc


def _parse_day(value: object) -> date:
    if not isinstance(value, str):
        raise RemoteError(f"bad date value: {value!r}")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise RemoteError(f"bad date value: {value!r}") from exc


class RemoteDateResolver:
    """LLM-backed date-range resolver.

    Args:
        model:       LiteLLM model string.
        timeout:     Per-request network timeout in seconds.
        num_retries: LiteLLM retries on transient errors.
    """

    def __init__(self, model: str, timeout: float | None = 10.0, num_retries: int = 1) -> None:
        self.model = model
        self.timeout = timeout
        self.num_retries = num_retries

    def resolve(self, phrase: str, now: datetime) -> tuple[DateRange, str]:
        """Return ``(range, display_label)`` for *phrase* relative to *now*.

        Raises:
            RemoteError: On call failure or an unusable reply.
        """
        prompt = _DATE_PROMPT.format(
            today=now.date().isoformat(),
            weekday=now.strftime("%A"),
            phrase=phrase,
            windows=describe_windows(),
        )
        data = llm_client.complete_json(
            self.model,
            [{"role": "user", "content": prompt}],
            max_tokens=80,
            temperature=0.0,
            num_retries=self.num_retries,
            timeout=self.timeout,
        )
        start = _parse_day(data.get("from"))
        end = _parse_day(data.get("to") or data.get("from"))
        start_time = _parse_clock(data.get("fromTime"))
        end_time = _parse_clock(data.get("toTime"))
        display = data.get("display")
        label = display.strip() if isinstance(display, str) and display.strip() else phrase
        return DateRange.create(start, end, start_time, end_time), label

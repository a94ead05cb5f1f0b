"""Capture handling: de-duplication and self-copy suppression.

The last-capture state is an explicit immutable value threaded through
:func:`admit_capture`; :class:`CaptureHandler` owns the current value and
feeds admitted events to the collection one at a time.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from loguru import logger

from snipstack.collection import SnippetCollection, SnippetNotFound
from snipstack.store.models import Snippet, SourceApp

DEBOUNCE_MS: int = 500


@dataclass(frozen=True)
class CaptureEvent:
    text: str
    source_app: SourceApp | None = None


@dataclass(frozen=True)
class CaptureState:
    """Most recent clipboard text seen by the handler.

    Attributes:
        text: The clipboard text.
        at: Monotonic time (seconds) it was seen.
        self_copy: True when the text came from the user's own copy action
            on an existing snippet and must not be captured again.
    """

    text: str
    at: float
    self_copy: bool = False


def admit_capture(
    state: CaptureState | None,
    event: CaptureEvent,
    now: float,
    debounce: float = DEBOUNCE_MS / 1000.0,
) -> tuple[bool, CaptureState | None]:
    """Decide whether *event* should be classified.

    Returns ``(admitted, next_state)``. Rejected: text equal to a pending
    self-copy, and text equal to the previous capture within *debounce*
    seconds.
    """
    if state is not None and state.text == event.text:
        if state.self_copy:
            return False, state
        if now - state.at < debounce:
            return False, state
    return True, CaptureState(event.text, now)


class CaptureHandler:
    """Serialises capture events into the collection.

    Args:
        collection: Target collection.
        debounce_ms: Window in which an identical repeat is dropped.
        clock: Monotonic clock in seconds.
    """

    def __init__(
        self,
        collection: SnippetCollection,
        debounce_ms: int = DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._collection = collection
        self._debounce = debounce_ms / 1000.0
        self._clock = clock
        self.state: CaptureState | None = None

    def handle(self, event: CaptureEvent) -> Snippet | None:
        """Capture *event* unless it is a repeat or a self-copy."""
        admitted, self.state = admit_capture(self.state, event, self._clock(), self._debounce)
        if not admitted:
            logger.debug("Capture suppressed (repeat or own copy)")
            return None
        return self._collection.capture(event.text, event.source_app)

    def handle_all(self, events: Iterable[CaptureEvent]) -> list[Snippet]:
        captured = []
        for event in events:
            snippet = self.handle(event)
            if snippet is not None:
                captured.append(snippet)
        return captured

    def mark_copied(self, text: str) -> None:
        """Record that the user copied *text* out of an existing snippet."""
        self.state = CaptureState(text, self._clock(), self_copy=True)

    def copy(self, snippet_id: str) -> str:
        """Return the content of *snippet_id* for the clipboard and mark it as a self-copy.

        Raises:
            SnippetNotFound: Unknown id.
        """
        snippet = self._collection.get(snippet_id)
        if snippet is None:
            raise SnippetNotFound(snippet_id)
        self.mark_copied(snippet.content)
        return snippet.content

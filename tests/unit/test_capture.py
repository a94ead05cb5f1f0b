"""Tests for capture admission and the capture handler."""

from __future__ import annotations

import pytest

from snipstack.capture import CaptureEvent, CaptureHandler, CaptureState, admit_capture
from snipstack.collection import SnippetNotFound


class _Tick:
    def __init__(self) -> None:
        self.t = 100.0

    def __call__(self) -> float:
        return self.t


@pytest.fixture
def tick():
    return _Tick()


@pytest.fixture
def handler(collection, tick):
    return CaptureHandler(collection, debounce_ms=500, clock=tick)


# ------------------------------------------------------------------
# admit_capture
# ------------------------------------------------------------------


def test_first_event_admitted():
    admitted, state = admit_capture(None, CaptureEvent("hello"), now=1.0)
    assert admitted
    assert state == CaptureState("hello", 1.0)


def test_repeat_within_window_rejected():
    state = CaptureState("hello", 1.0)
    admitted, after = admit_capture(state, CaptureEvent("hello"), now=1.2)
    assert not admitted
    assert after is state


def test_repeat_after_window_admitted():
    admitted, _ = admit_capture(CaptureState("hello", 1.0), CaptureEvent("hello"), now=2.0)
    assert admitted


def test_self_copy_rejected_until_text_changes():
    state = CaptureState("hello", 1.0, self_copy=True)
    admitted, state = admit_capture(state, CaptureEvent("hello"), now=60.0)
    assert not admitted
    admitted, state = admit_capture(state, CaptureEvent("other"), now=61.0)
    assert admitted
    assert not state.self_copy


# ------------------------------------------------------------------
# CaptureHandler
# ------------------------------------------------------------------


def test_handler_captures_once(handler, collection, tick):
    assert handler.handle(CaptureEvent("buy milk")) is not None
    tick.t += 0.1
    assert handler.handle(CaptureEvent("buy milk")) is None
    assert len(collection) == 1


def test_handle_all_in_order(handler):
    captured = handler.handle_all([CaptureEvent("one thing"), CaptureEvent("another thing")])
    assert [s.content for s in captured] == ["one thing", "another thing"]


def test_copy_marks_self_copy(handler, collection, tick):
    snippet = collection.capture("copied back out")
    assert handler.copy(snippet.id) == "copied back out"
    assert handler.state.self_copy
    tick.t += 30
    assert handler.handle(CaptureEvent("copied back out")) is None


def test_copy_unknown_id(handler):
    with pytest.raises(SnippetNotFound):
        handler.copy("missing")

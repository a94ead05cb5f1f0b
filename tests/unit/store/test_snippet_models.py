"""Tests for the Snippet variant family and its serialisation."""

from __future__ import annotations

from datetime import datetime

import pytest

from snipstack.store.models import (
    CodeSnippet,
    ColorSnippet,
    LinkSnippet,
    PrimaryType,
    SourceApp,
    TextSnippet,
    format_timestamp,
    make_snippet,
    snippet_from_dict,
    snippet_to_dict,
)

TS = datetime(2025, 5, 2, 14, 34)


def _common(**overrides):
    data = dict(id="s1", content="hello", source="Notes", timestamp=TS, tags=["note", "text"])
    data.update(overrides)
    return data


def test_format_timestamp():
    assert format_timestamp(TS) == "May 2, 2025 · 2:34 PM"
    assert format_timestamp(datetime(2024, 1, 9, 0, 5)) == "January 9, 2024 · 12:05 AM"


def test_variant_type_is_fixed_by_class():
    assert CodeSnippet(**_common()).type is PrimaryType.CODE
    assert TextSnippet(**_common()).type is PrimaryType.TEXT


def test_variant_fields_only_on_their_variant():
    code = CodeSnippet(**_common(), path="src/a.py")
    assert code.variant_fields() == {"path": "src/a.py"}
    assert TextSnippet(**_common()).variant_fields() == {}
    assert not hasattr(TextSnippet(**_common()), "path")


def test_empty_tags_rejected():
    with pytest.raises(ValueError):
        TextSnippet(**_common(tags=[]))


def test_make_snippet_unknown_type():
    with pytest.raises(ValueError):
        make_snippet("video", **_common())


def test_round_trip_keeps_variant_and_icon():
    original = LinkSnippet(
        **_common(content="https://react.dev", source_app=SourceApp("Safari", b"\x89PNG")),
        title="react.dev",
    )
    original.notes.append("docs")
    original.is_favorite = True

    restored = snippet_from_dict(snippet_to_dict(original))

    assert isinstance(restored, LinkSnippet)
    assert restored.title == "react.dev"
    assert restored.source_app == SourceApp("Safari", b"\x89PNG")
    assert restored.notes == ["docs"]
    assert restored.is_favorite is True
    assert restored.timestamp == TS


def test_from_dict_unknown_type_raises():
    data = snippet_to_dict(ColorSnippet(**_common(content="teal"), color_value="teal"))
    data["type"] = "hologram"
    with pytest.raises(ValueError):
        snippet_from_dict(data)

"""Domain models for captured snippets.

``Snippet`` is a closed family: one dataclass per primary type, each carrying
only the fields its variant requires (``CodeSnippet.path``,
``LinkSnippet.title`` …). The common header is shared through ``Snippet``.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class PrimaryType(str, Enum):
    CODE = "code"
    TWEET = "tweet"
    QUOTE = "quote"
    LINK = "link"
    TEXT = "text"
    MESSAGE = "message"
    COLOR = "color"


@dataclass(frozen=True)
class SourceApp:
    name: str
    icon_blob: bytes | None = None


def format_timestamp(ts: datetime) -> str:
    """Render *ts* as ``"May 2, 2025 · 2:34 PM"``."""
    hour = ts.hour % 12 or 12
    meridiem = "AM" if ts.hour < 12 else "PM"
    return f"{ts.strftime('%B')} {ts.day}, {ts.year} · {hour}:{ts.minute:02d} {meridiem}"


@dataclass
class Snippet:
    """Common header of every captured snippet.

    ``content`` and ``timestamp`` never change after creation; ``notes`` and
    ``is_favorite`` are the user's annotation overlay.
    """

    id: str
    content: str
    source: str
    timestamp: datetime
    tags: list[str]
    source_app: SourceApp | None = None
    notes: list[str] = field(default_factory=list)
    is_favorite: bool = False

    type: PrimaryType = field(init=False, default=PrimaryType.TEXT)

    def __post_init__(self) -> None:
        if not self.tags:
            raise ValueError("a snippet must carry at least one tag")

    @property
    def display_timestamp(self) -> str:
        return format_timestamp(self.timestamp)

    def variant_fields(self) -> dict[str, str]:
        """Return the variant-specific fields as a dict (empty for text)."""
        return {}


@dataclass
class CodeSnippet(Snippet):
    path: str = ""
    type: PrimaryType = field(init=False, default=PrimaryType.CODE)

    def variant_fields(self) -> dict[str, str]:
        return {"path": self.path}


@dataclass
class TweetSnippet(Snippet):
    handle: str = ""
    type: PrimaryType = field(init=False, default=PrimaryType.TWEET)

    def variant_fields(self) -> dict[str, str]:
        return {"handle": self.handle}


@dataclass
class QuoteSnippet(Snippet):
    author: str = ""
    type: PrimaryType = field(init=False, default=PrimaryType.QUOTE)

    def variant_fields(self) -> dict[str, str]:
        return {"author": self.author}


@dataclass
class LinkSnippet(Snippet):
    title: str = ""
    type: PrimaryType = field(init=False, default=PrimaryType.LINK)

    def variant_fields(self) -> dict[str, str]:
        return {"title": self.title}


@dataclass
class TextSnippet(Snippet):
    type: PrimaryType = field(init=False, default=PrimaryType.TEXT)


@dataclass
class MessageSnippet(Snippet):
    contact: str = ""
    type: PrimaryType = field(init=False, default=PrimaryType.MESSAGE)

    def variant_fields(self) -> dict[str, str]:
        return {"contact": self.contact}


@dataclass
class ColorSnippet(Snippet):
    color_value: str = ""
    type: PrimaryType = field(init=False, default=PrimaryType.COLOR)

    def variant_fields(self) -> dict[str, str]:
        return {"color_value": self.color_value}


SNIPPET_CLASSES: dict[PrimaryType, type[Snippet]] = {
    PrimaryType.CODE: CodeSnippet,
    PrimaryType.TWEET: TweetSnippet,
    PrimaryType.QUOTE: QuoteSnippet,
    PrimaryType.LINK: LinkSnippet,
    PrimaryType.TEXT: TextSnippet,
    PrimaryType.MESSAGE: MessageSnippet,
    PrimaryType.COLOR: ColorSnippet,
}


def make_snippet(primary_type: PrimaryType | str, **kwargs: Any) -> Snippet:
    """Build the variant dataclass for *primary_type*.

    Raises:
        ValueError: If *primary_type* is not a known variant.
    """
    cls = SNIPPET_CLASSES[PrimaryType(primary_type)]
    return cls(**kwargs)


# ------------------------------------------------------------------
# Serialisation
# ------------------------------------------------------------------


def snippet_to_dict(snippet: Snippet) -> dict[str, Any]:
    app = None
    if snippet.source_app is not None:
        blob = snippet.source_app.icon_blob
        app = {
            "name": snippet.source_app.name,
            "icon_blob": base64.b64encode(blob).decode("ascii") if blob else None,
        }
    data: dict[str, Any] = {
        "id": snippet.id,
        "type": snippet.type.value,
        "content": snippet.content,
        "source": snippet.source,
        "source_app": app,
        "timestamp": snippet.timestamp.isoformat(),
        "tags": list(snippet.tags),
        "notes": list(snippet.notes),
        "is_favorite": snippet.is_favorite,
    }
    data.update(snippet.variant_fields())
    return data


def snippet_from_dict(data: dict[str, Any]) -> Snippet:
    """Rebuild a Snippet from :func:`snippet_to_dict` output.

    Raises:
        ValueError: On an unknown ``type`` or a record without tags.
        KeyError: If a required common field is missing.
    """
    primary = PrimaryType(data["type"])
    app_raw = data.get("source_app")
    source_app = None
    if app_raw:
        blob = app_raw.get("icon_blob")
        source_app = SourceApp(
            name=app_raw["name"],
            icon_blob=base64.b64decode(blob) if blob else None,
        )
    kwargs: dict[str, Any] = {
        "id": data["id"],
        "content": data["content"],
        "source": data.get("source", ""),
        "source_app": source_app,
        "timestamp": datetime.fromisoformat(data["timestamp"]),
        "tags": list(data["tags"]),
        "notes": list(data.get("notes", [])),
        "is_favorite": bool(data.get("is_favorite", False)),
    }
    cls = SNIPPET_CLASSES[primary]
    for name in ("path", "handle", "author", "title", "contact", "color_value"):
        if name in cls.__dataclass_fields__ and name in data:
            kwargs[name] = data[name]
    return cls(**kwargs)

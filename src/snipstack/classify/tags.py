"""Tag vocabulary, ranking, and the two-tag policy.

Every snippet ends up with exactly two tags where possible: the strongest
signal first (``code`` + language, then priority tags), generic filler only
when nothing better exists.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from snipstack.patterns.code import LANGUAGES, normalize_language
from snipstack.store.models import PrimaryType

MAX_TAGS: int = 2

PRIORITY_TAGS: tuple[str, ...] = (
    "link",
    "url",
    "email",
    "error-message",
    "table",
    "json",
    "list",
    "todo-item",
    "markdown",
)
GENERIC_TAGS: tuple[str, ...] = ("text", "clipboard", "snippet", "content")

# Second tag appended by the tag floor, first candidate not already present wins.
TYPE_FLOOR_TAGS: dict[PrimaryType, tuple[str, ...]] = {
    PrimaryType.CODE: ("code", "snippet"),
    PrimaryType.LINK: ("link", "url"),
    PrimaryType.COLOR: ("color", "design"),
    PrimaryType.MESSAGE: ("message", "chat"),
    PrimaryType.QUOTE: ("quote", "text"),
    PrimaryType.TWEET: ("tweet", "social"),
    PrimaryType.TEXT: ("text", "clipboard"),
}

_TAG_CLEAN_RE = re.compile(r"[^a-z0-9+#\-]+")

LanguageDetector = Callable[[str], "str | None"]


def clean_tag(tag: str) -> str:
    """Lowercase *tag*, drop a leading ``#`` and collapse spaces to dashes."""
    t = tag.strip().lower().lstrip("#").strip()
    t = re.sub(r"\s+", "-", t)
    return _TAG_CLEAN_RE.sub("", t)


def dedupe_tags(tags: Iterable[str]) -> list[str]:
    """Clean and deduplicate case-insensitively, keeping first occurrence order."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in tags:
        tag = clean_tag(str(raw))
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def _language_in(tags: list[str]) -> str | None:
    for tag in tags:
        canonical = normalize_language(tag)
        if canonical in LANGUAGES:
            return canonical
    return None


def rank_tags(
    tags: Iterable[str],
    content: str,
    detect_language: LanguageDetector | None = None,
) -> list[str]:
    """Re-rank remote tags by priority and truncate to two.

    Order: ``code`` + language pair; ``code`` alone gets a detected language
    appended; known priority tags; remaining non-generic tags; generic filler
    only while fewer than two tags remain.
    """
    cleaned = dedupe_tags(tags)
    ranked: list[str] = []

    if "code" in cleaned:
        ranked.append("code")
        language = _language_in(cleaned)
        if language is None and detect_language is not None:
            language = detect_language(content)
        if language:
            ranked.append(language)

    for tag in PRIORITY_TAGS:
        if tag in cleaned and tag not in ranked:
            ranked.append(tag)

    for tag in cleaned:
        if tag not in ranked and tag not in GENERIC_TAGS:
            if "code" in ranked and normalize_language(tag) in ranked:
                continue
            ranked.append(tag)

    if len(ranked) < MAX_TAGS:
        for tag in cleaned:
            if tag in GENERIC_TAGS and tag not in ranked:
                ranked.append(tag)
            if len(ranked) >= MAX_TAGS:
                break

    return ranked[:MAX_TAGS]


def derive_primary_type(tags: Iterable[str]) -> PrimaryType:
    """``code`` tag → code; ``link``/``url`` tag → link; otherwise text."""
    tag_set = set(tags)
    if "code" in tag_set:
        return PrimaryType.CODE
    if "link" in tag_set or "url" in tag_set:
        return PrimaryType.LINK
    return PrimaryType.TEXT


def apply_tag_floor(tags: list[str], primary_type: PrimaryType) -> list[str]:
    """Return *tags* topped up to two entries from *primary_type*'s floor tags."""
    result = list(tags)
    for candidate in TYPE_FLOOR_TAGS[primary_type]:
        if len(result) >= MAX_TAGS:
            break
        if candidate not in result:
            result.append(candidate)
    return result[:MAX_TAGS]


def ensure_tag(tags: list[str], tag: str) -> list[str]:
    """Return *tags* with *tag* present, placed first and still at most two long."""
    if tag in tags:
        return list(tags)
    return ([tag] + list(tags))[:MAX_TAGS]

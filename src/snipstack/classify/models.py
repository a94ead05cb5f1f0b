"""Classification result model."""

from __future__ import annotations

from dataclasses import dataclass, field

from snipstack.store.models import PrimaryType


@dataclass
class Classification:
    """Outcome of classifying one text blob.

    Attributes:
        primary_type: The snippet variant to create.
        tags: Ranked lowercase tags (1–2 entries after the tag floor).
        confidence: 1.0 for pattern matches, the remote score for remote
            answers, a fixed lower value for deterministic fallback.
        detected_language: Canonical language tag for code, if known.
        strategy: Name of the chain stage that produced the result.
        contact: Sender name for messages, when one was recognised.
        color_value: Normalised colour literal for colours.
    """

    primary_type: PrimaryType
    tags: list[str] = field(default_factory=list)
    confidence: float = 1.0
    detected_language: str | None = None
    strategy: str = ""
    contact: str | None = None
    color_value: str | None = None

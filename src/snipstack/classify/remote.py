"""Remote classifier — tag a text blob via an LLM with a fixed taxonomy prompt.

Also infers ``content_type`` / ``language`` from free-form ``/type`` phrases
when the local keyword table misses.
"""

from __future__ import annotations

from dataclasses import dataclass

from snipstack.llm import client as llm_client
from snipstack.llm.client import RemoteError
from snipstack.patterns.code import LANGUAGES, normalize_language

DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_MAX_CHARS = 1_500

_TAXONOMY_PROMPT = """\
You label clipboard snippets. Reply with JSON only:
{{"tags": ["tag1", "tag2"], "confidence": 0.0-1.0}}

Rules:
- 1 to 3 lowercase tags, most specific first.
- Source code: "code" plus its language ({languages}).
- Web addresses: "link" or "url". Email addresses: "email".
- Error output or stack traces: "error-message".
- Structured data: "json", "table", "markdown", "list".
- Tasks and reminders: "todo-item". Chat or personal messages: "message".
- Otherwise pick short topical tags (e.g. "meeting", "recipe", "address").
- Use "text" only when nothing else fits.

Snippet (first {max_chars} characters):
{content}"""

_TYPE_PROMPT = """\
A user filtered their clipboard history with: "{phrase}".
Which content type do they mean? Reply with JSON only:
{{"content_type": one of ["code", "link", "text", "color", "message", "quote", "tweet", null],
  "language": programming language for code or null}}
Known languages: {languages}."""

_CONTENT_TYPES = frozenset(["code", "link", "text", "color", "message", "quote", "tweet"])


@dataclass
class RemoteTags:
    tags: list[str]
    confidence: float


class RemoteClassifier:
    """LLM-backed classifier.

    Args:
        model:       LiteLLM model string.
        max_chars:   Content prefix length sent to the model.
        timeout:     Per-request network timeout in seconds.
        num_retries: LiteLLM retries on transient errors.
        enabled:     When False every call raises RemoteError immediately.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_chars: int = DEFAULT_MAX_CHARS,
        timeout: float | None = 10.0,
        num_retries: int = 1,
        enabled: bool = True,
    ) -> None:
        self.model = model
        self.max_chars = max_chars
        self.timeout = timeout
        self.num_retries = num_retries
        self.enabled = enabled

    def classify(self, text: str) -> RemoteTags:
        """Return the model's tags for *text*.

        Raises:
            RemoteError: If disabled, on call failure, or when the reply has no
                usable tags.
        """
        self._require_enabled()
        prompt = _TAXONOMY_PROMPT.format(
            languages=", ".join(LANGUAGES),
            max_chars=self.max_chars,
            content=text[: self.max_chars],
        )
        data = llm_client.complete_json(
            self.model,
            [{"role": "user", "content": prompt}],
            max_tokens=60,
            temperature=0.0,
            num_retries=self.num_retries,
            timeout=self.timeout,
        )
        tags = data.get("tags")
        if not isinstance(tags, list) or not any(isinstance(t, str) and t.strip() for t in tags):
            raise RemoteError("response has no tags")
        try:
            confidence = float(data.get("confidence", 0.5))
        except (TypeError, ValueError):
            confidence = 0.5
        return RemoteTags(
            tags=[t for t in tags if isinstance(t, str)],
            confidence=min(max(confidence, 0.0), 1.0),
        )

    def infer_type(self, phrase: str) -> tuple[str | None, str | None]:
        """Map a free-form ``/type`` phrase to ``(content_type, language)``.

        Raises:
            RemoteError: If disabled or on call failure.
        """
        self._require_enabled()
        data = llm_client.complete_json(
            self.model,
            [
                {
                    "role": "user",
                    "content": _TYPE_PROMPT.format(phrase=phrase, languages=", ".join(LANGUAGES)),
                }
            ],
            max_tokens=40,
            temperature=0.0,
            num_retries=self.num_retries,
            timeout=self.timeout,
        )
        content_type = data.get("content_type")
        if not isinstance(content_type, str) or content_type.lower() not in _CONTENT_TYPES:
            content_type = None
        else:
            content_type = content_type.lower()
        language = data.get("language")
        if isinstance(language, str) and language.strip():
            language = normalize_language(language)
            if content_type is None:
                content_type = "code"
        else:
            language = None
        return content_type, language

    def _require_enabled(self) -> None:
        if not self.enabled:
            raise RemoteError("remote classifier disabled")

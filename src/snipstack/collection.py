"""In-memory snippet collection backed by the repository.

The collection is the single writer: every mutation goes through it and ends
with one ``repository.save(all)`` call. Persistence failures never undo a
mutation; they are logged and kept in ``last_warning`` so the caller can show
a non-fatal warning.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import datetime
from urllib.parse import urlparse

from loguru import logger

from snipstack.classify.classifier import ContentClassifier
from snipstack.classify.models import Classification
from snipstack.patterns.text import first_url
from snipstack.search.engine import MIN_MATCH_RATIO, apply
from snipstack.search.query import FilterSpec
from snipstack.store.models import PrimaryType, Snippet, SourceApp, make_snippet
from snipstack.store.repository import SnippetRepository, StorageError

DEFAULT_SOURCE = "Clipboard"


class SnippetNotFound(KeyError):
    """No snippet with the given id exists in the collection."""


def _link_title(text: str) -> str:
    url = first_url(text) or text.strip()
    if "://" not in url:
        url = f"http://{url}"
    host = urlparse(url).hostname
    return host or text.strip()


class SnippetCollection:
    """Ordered snippet collection (insertion order = capture order).

    Args:
        repository: Persistence collaborator.
        classifier: Content classifier used by :meth:`capture`.
        now: Clock used for capture timestamps.
        min_match_ratio: Fraction of free-text terms that must match.
    """

    def __init__(
        self,
        repository: SnippetRepository,
        classifier: ContentClassifier,
        now: Callable[[], datetime] = datetime.now,
        min_match_ratio: float = MIN_MATCH_RATIO,
    ) -> None:
        self._repository = repository
        self._classifier = classifier
        self._now = now
        self._min_match_ratio = min_match_ratio
        self._snippets: list[Snippet] = []
        self.last_warning: str | None = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def snippets(self) -> list[Snippet]:
        return list(self._snippets)

    def __len__(self) -> int:
        return len(self._snippets)

    def get(self, snippet_id: str) -> Snippet | None:
        return next((s for s in self._snippets if s.id == snippet_id), None)

    def search(
        self, spec: FilterSpec, view: str = "all", sort_order: str = "newest"
    ) -> list[Snippet]:
        return apply(
            self._snippets,
            spec,
            view,
            sort_order,
            detect_language=self._classifier.detect_language,
            min_match_ratio=self._min_match_ratio,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def load(self) -> list[Snippet]:
        """Replace the in-memory collection with the persisted one."""
        try:
            self._snippets = self._repository.load()
        except StorageError as exc:
            self._warn(f"Could not load saved snippets: {exc}")
            self._snippets = []
        return self.snippets

    def capture(self, text: str, source_app: SourceApp | None = None) -> Snippet | None:
        """Classify *text* and append it as a new snippet.

        Returns None, without touching the store, for empty input or content
        already in the collection.
        """
        if not text or not text.strip():
            return None
        if any(s.content == text for s in self._snippets):
            logger.debug("Duplicate capture ignored")
            return None

        result = self._classifier.classify(text, source_app)
        if result is None:
            return None

        snippet = self._build(text, source_app, result)
        self._snippets.append(snippet)
        self._persist()
        return snippet

    def add(self, snippets: Iterable[Snippet]) -> list[Snippet]:
        """Append ready-made snippets, skipping duplicate content. Returns those added."""
        added: list[Snippet] = []
        known = {s.content for s in self._snippets}
        for snippet in snippets:
            if snippet.content in known:
                continue
            known.add(snippet.content)
            self._snippets.append(snippet)
            added.append(snippet)
        if added:
            self._persist()
        return added

    def add_note(self, snippet_id: str, note: str) -> Snippet:
        snippet = self._require(snippet_id)
        snippet.notes.append(note)
        self._persist()
        return snippet

    def remove_note(self, snippet_id: str, index: int) -> str:
        """Remove and return the note at *index*.

        Raises:
            SnippetNotFound: Unknown id.
            IndexError: No note at *index*.
        """
        snippet = self._require(snippet_id)
        note = snippet.notes.pop(index)
        self._persist()
        return note

    def toggle_favorite(self, snippet_id: str) -> bool:
        snippet = self._require(snippet_id)
        snippet.is_favorite = not snippet.is_favorite
        self._persist()
        return snippet.is_favorite

    def delete(self, snippet_id: str) -> Snippet:
        snippet = self._require(snippet_id)
        self._snippets.remove(snippet)
        self._persist()
        return snippet

    def delete_all(self) -> int:
        count = len(self._snippets)
        self._snippets = []
        self._persist()
        return count

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, snippet_id: str) -> Snippet:
        snippet = self.get(snippet_id)
        if snippet is None:
            raise SnippetNotFound(snippet_id)
        return snippet

    def _build(
        self, text: str, source_app: SourceApp | None, result: Classification
    ) -> Snippet:
        fields: dict[str, str] = {}
        primary = result.primary_type
        if primary is PrimaryType.CODE:
            fields["path"] = ""
        elif primary is PrimaryType.LINK:
            fields["title"] = _link_title(text)
        elif primary is PrimaryType.MESSAGE:
            fields["contact"] = result.contact or (source_app.name if source_app else "")
        elif primary is PrimaryType.COLOR:
            fields["color_value"] = result.color_value or text.strip()
        elif primary is PrimaryType.TWEET:
            fields["handle"] = ""
        elif primary is PrimaryType.QUOTE:
            fields["author"] = ""

        return make_snippet(
            primary,
            id=str(uuid.uuid4()),
            content=text,
            source=source_app.name if source_app else DEFAULT_SOURCE,
            source_app=source_app,
            timestamp=self._now(),
            tags=list(result.tags),
            **fields,
        )

    def _persist(self) -> None:
        try:
            self._repository.save(self._snippets)
        except StorageError as exc:
            hint = " (storage is full)" if exc.capacity else ""
            self._warn(f"Snippets not saved{hint}: {exc}")
        else:
            self.last_warning = None

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.last_warning = message

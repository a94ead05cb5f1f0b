"""Demo collection: one sample snippet of each everyday variant."""

from __future__ import annotations

import uuid
from datetime import datetime

from snipstack.store.models import (
    CodeSnippet,
    LinkSnippet,
    MessageSnippet,
    QuoteSnippet,
    Snippet,
    SourceApp,
    TextSnippet,
    TweetSnippet,
)

_FETCH_USER = """\
const fetchUserData = async (userId) => {
  try {
    const response = await api.get(`/users/${userId}`);
    return response.data;
  } catch (error) {
    console.error('Error fetching user data:', error);
    return null;
  }
};"""


def _id() -> str:
    return str(uuid.uuid4())


def demo_snippets() -> list[Snippet]:
    """Return fresh demo snippets, newest first."""
    return [
        CodeSnippet(
            id=_id(),
            content=_FETCH_USER,
            source="VS Code",
            source_app=SourceApp("VS Code"),
            timestamp=datetime(2025, 5, 2, 14, 34),
            tags=["typescript", "api"],
            path="src/utils/api.ts",
        ),
        TweetSnippet(
            id=_id(),
            content=(
                "Just launched our new design system! Check out how we're using Figma and "
                "React to create a seamless workflow between design and development. "
                "#designsystem #frontend"
            ),
            source="Twitter",
            timestamp=datetime(2025, 5, 2, 13, 15),
            tags=["design", "announcement"],
            handle="@designer",
        ),
        QuoteSnippet(
            id=_id(),
            content=(
                "The best way to predict the future is to invent it. The future is not laid "
                "out on a track. It is something that we can decide, and to the extent that "
                "we do not violate any known laws of the universe, we can probably make it "
                "work the way that we want to."
            ),
            source="Medium",
            timestamp=datetime(2025, 5, 1, 11, 22),
            tags=["inspiration", "quote"],
            author="Alan Kay",
        ),
        TextSnippet(
            id=_id(),
            content="Pick up groceries: eggs, milk, bread, avocados, chicken, pasta",
            source="Notes",
            source_app=SourceApp("Notes"),
            timestamp=datetime(2025, 5, 1, 9, 42),
            tags=["todo", "text"],
        ),
        LinkSnippet(
            id=_id(),
            content="https://react.dev/reference/react",
            source="Browser",
            timestamp=datetime(2025, 4, 30, 16, 18),
            tags=["resource", "reference"],
            title="React Documentation",
        ),
        MessageSnippet(
            id=_id(),
            content=(
                "Hey, can you send me the latest design mockups for the dashboard? "
                "I need to implement those changes by Friday."
            ),
            source="iMessage",
            source_app=SourceApp("iMessage"),
            timestamp=datetime(2025, 4, 30, 13, 35),
            tags=["work", "design"],
            contact="Alex Chen",
        ),
    ]

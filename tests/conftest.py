"""Shared pytest fixtures for Marginalia tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime

import pytest

from marginalia.config import get_settings
from marginalia.document import ContentBlock, ContentState, EditorState
from marginalia.models import Highlight, HighlightType

# Fixed timestamp so records compare equal across fixtures
SAMPLE_TIMESTAMP = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


def make_highlight(
    type_: HighlightType = HighlightType.COMMENT,
    author: str = "Ada",
    message: str = "Needs a source",
) -> Highlight:
    """Build a highlight record with stable defaults."""
    return Highlight(
        type=type_,
        author=author,
        email=f"{author.lower()}@example.org",
        timestamp=SAMPLE_TIMESTAMP,
        message=message,
    )


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep cached settings and env overrides from leaking between tests."""
    for key in ("HIGHLIGHTS__STORAGE", "LOGGING__LEVEL", "LOGGING__LOG_DIR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOGGING__FILE_LOGGING", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def content() -> ContentState:
    """Three blocks ``a``, ``b``, ``c`` in that order."""
    return ContentState(
        blocks=(
            ContentBlock(key="a", text="The quick brown fox"),
            ContentBlock(key="b", text="jumps over"),
            ContentBlock(key="c", text="the lazy dog"),
        )
    )


@pytest.fixture
def editor_state(content: ContentState) -> EditorState:
    return EditorState.create_with_content(content)

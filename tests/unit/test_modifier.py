"""Tests for pure content modifiers."""

from __future__ import annotations

import pytest

from marginalia.document import BlockNotFoundError, ContentState, Range, SelectionState
from marginalia.document.modifier import apply_inline_style, remove_inline_style


def _styled_offsets(content: ContentState, key: str, style: str) -> list[int]:
    return [i for i, s in enumerate(content.get_block(key).styles) if style in s]


class TestInlineStyle:
    """apply_inline_style / remove_inline_style."""

    def test_single_block(self, content: ContentState) -> None:
        """Styles exactly [start, end) of one block."""
        result = apply_inline_style(content, Range("a", 4, "a", 9), "COMMENT")

        assert _styled_offsets(result, "a", "COMMENT") == [4, 5, 6, 7, 8]

    def test_multi_block_covers_middle_blocks_whole(
        self, content: ContentState
    ) -> None:
        """Start block from its offset, middle whole, end block up to its offset."""
        result = apply_inline_style(content, Range("a", 16, "c", 3), "COMMENT")

        assert _styled_offsets(result, "a", "COMMENT") == [16, 17, 18]
        assert len(_styled_offsets(result, "b", "COMMENT")) == len("jumps over")
        assert _styled_offsets(result, "c", "COMMENT") == [0, 1, 2]

    def test_records_range_as_selection(self, content: ContentState) -> None:
        """The styled range becomes selection_before and selection_after."""
        target = Range("a", 0, "b", 2)
        result = apply_inline_style(content, target, "COMMENT")

        assert result.selection_after == SelectionState.from_range(target)
        assert result.selection_before == SelectionState.from_range(target)

    def test_input_content_is_untouched(self, content: ContentState) -> None:
        """Modifiers never mutate their input."""
        apply_inline_style(content, Range("a", 0, "a", 3), "COMMENT")

        assert _styled_offsets(content, "a", "COMMENT") == []

    def test_remove_only_named_style(self, content: ContentState) -> None:
        """Removing one style leaves others on the same characters."""
        target = Range("b", 0, "b", 5)
        styled = apply_inline_style(content, target, "COMMENT")
        styled = apply_inline_style(styled, target, "BOLD")

        result = remove_inline_style(styled, target, "COMMENT")

        assert _styled_offsets(result, "b", "COMMENT") == []
        assert _styled_offsets(result, "b", "BOLD") == [0, 1, 2, 3, 4]

    def test_unknown_block_raises(self, content: ContentState) -> None:
        """Ranges over missing blocks surface BlockNotFoundError."""
        with pytest.raises(BlockNotFoundError):
            apply_inline_style(content, Range("a", 0, "zz", 1), "COMMENT")

    def test_end_before_start_raises(self, content: ContentState) -> None:
        """A multi-block range whose end block precedes its start is rejected."""
        with pytest.raises(ValueError, match="ends before it starts"):
            apply_inline_style(content, Range("c", 0, "a", 1), "COMMENT")

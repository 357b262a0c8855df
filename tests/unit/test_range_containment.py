"""Tests for cursor-in-range containment."""

from __future__ import annotations

import pytest

from marginalia.document import ContentBlock, ContentState, Range, SelectionState
from marginalia.highlights import range_contains_cursor


def _cursor(key: str, offset: int) -> SelectionState:
    return SelectionState(key, offset, key, offset)


@pytest.fixture
def long_content() -> ContentState:
    """Blocks a..e with enough text for any offset used below."""
    return ContentState(
        blocks=tuple(ContentBlock(key=k, text="x" * 20) for k in "abcde")
    )


class TestCursorShape:
    """Only a collapsed cursor can be contained."""

    def test_absent_cursor(self, long_content: ContentState) -> None:
        """No cursor is never contained."""
        assert not range_contains_cursor(long_content, None, Range("a", 0, "a", 9))

    def test_expanded_selection(self, long_content: ContentState) -> None:
        """A non-collapsed selection is never contained, even when inside."""
        selection = SelectionState("a", 3, "a", 4)

        assert not range_contains_cursor(long_content, selection, Range("a", 0, "a", 9))


class TestSingleBlock:
    """Both edges of a single-block range are inclusive."""

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [(4, False), (5, True), (7, True), (10, True), (11, False)],
    )
    def test_offsets(
        self, long_content: ContentState, offset: int, expected: bool
    ) -> None:
        """Cursor at 5 and 10 is inside [5, 10]; 4 and 11 are outside."""
        target = Range("b", 5, "b", 10)

        assert range_contains_cursor(long_content, _cursor("b", offset), target) is (
            expected
        )

    def test_other_block(self, long_content: ContentState) -> None:
        """Same offset in a different block is outside."""
        target = Range("b", 5, "b", 10)

        assert not range_contains_cursor(long_content, _cursor("c", 7), target)


class TestMultiBlock:
    """Start edge and end edge are exclusive; middle blocks are inside."""

    target = Range("a", 8, "c", 3)

    @pytest.mark.parametrize("offset", [0, 5, 19])
    def test_middle_block_any_offset(
        self, long_content: ContentState, offset: int
    ) -> None:
        """Any offset in a block between start and end is inside."""
        assert range_contains_cursor(long_content, _cursor("b", offset), self.target)

    def test_start_block(self, long_content: ContentState) -> None:
        """Start block: strictly after the start offset."""
        assert range_contains_cursor(long_content, _cursor("a", 9), self.target)
        assert not range_contains_cursor(long_content, _cursor("a", 8), self.target)
        assert not range_contains_cursor(long_content, _cursor("a", 7), self.target)

    def test_end_block(self, long_content: ContentState) -> None:
        """End block: strictly before the end offset."""
        assert range_contains_cursor(long_content, _cursor("c", 2), self.target)
        assert not range_contains_cursor(long_content, _cursor("c", 3), self.target)
        assert not range_contains_cursor(long_content, _cursor("c", 4), self.target)

    def test_blocks_outside_range(self, long_content: ContentState) -> None:
        """Blocks after the end block are outside."""
        assert not range_contains_cursor(long_content, _cursor("d", 0), self.target)
        assert not range_contains_cursor(long_content, _cursor("e", 5), self.target)

    def test_several_middle_blocks(self, long_content: ContentState) -> None:
        """Every block strictly between start and end is inside."""
        target = Range("a", 3, "e", 1)

        for key in "bcd":
            assert range_contains_cursor(long_content, _cursor(key, 0), target)

    def test_adjacent_blocks_have_no_middle(self, long_content: ContentState) -> None:
        """With start and end adjacent, only the edge rules apply."""
        target = Range("b", 10, "c", 5)

        assert range_contains_cursor(long_content, _cursor("b", 15), target)
        assert range_contains_cursor(long_content, _cursor("c", 0), target)
        assert not range_contains_cursor(long_content, _cursor("a", 15), target)

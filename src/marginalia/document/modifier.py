"""Pure content transformations over inline styles.

Each function takes a ``ContentState`` and returns a new one; the input is
never modified. Style changes record the affected range as the snapshot's
``selection_before``/``selection_after``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from marginalia.document.selection import Range, SelectionState

if TYPE_CHECKING:
    from marginalia.document.block import ContentBlock
    from marginalia.document.content import ContentState


def _spans(content: ContentState, target: Range) -> Iterator[tuple[str, int, int]]:
    """Yield ``(block_key, start, end)`` for each block ``target`` covers."""
    key: str | None = target.start_key
    while key is not None:
        block = content.get_block(key)
        start = target.start_offset if key == target.start_key else 0
        end = target.end_offset if key == target.end_key else block.length
        yield key, start, end
        if key == target.end_key:
            return
        key = content.key_after(key)
    # Walked off the last block without meeting the end key.
    content.get_block(target.end_key)
    msg = f"Range {target} ends before it starts"
    raise ValueError(msg)


def _restyle(
    content: ContentState,
    target: Range,
    change: Callable[[ContentBlock, int, int], ContentBlock],
) -> ContentState:
    updated = [
        change(content.get_block(key), start, end)
        for key, start, end in _spans(content, target)
    ]
    selection = SelectionState.from_range(target)
    return content.replace_blocks(updated).with_selection(selection, selection)


def apply_inline_style(
    content: ContentState, target: Range, style: str
) -> ContentState:
    """Add ``style`` to every character covered by ``target``."""
    return _restyle(content, target, lambda b, s, e: b.with_style(s, e, style))


def remove_inline_style(
    content: ContentState, target: Range, style: str
) -> ContentState:
    """Remove ``style`` from every character covered by ``target``."""
    return _restyle(content, target, lambda b, s, e: b.without_style(s, e, style))

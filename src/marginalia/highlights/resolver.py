"""Whether a collapsed cursor lies inside a stored range."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from marginalia.document.content import ContentState
    from marginalia.document.selection import Range, SelectionState


def range_contains_cursor(
    content: ContentState, cursor: SelectionState | None, target: Range
) -> bool:
    """Return True if ``cursor`` is collapsed and lies inside ``target``.

    Within a single block both edges are inclusive. For a range spanning
    blocks, the cursor must be strictly past the start offset in the start
    block, strictly before the end offset in the end block, or anywhere in a
    block between them.

    Args:
        content: Snapshot used to walk block order.
        cursor: The user's selection; None or non-collapsed never matches.
        target: The stored range.
    """
    if cursor is None or not cursor.is_collapsed:
        return False

    if target.is_single_block:
        return cursor.has_edge_within(
            target.start_key, target.start_offset, target.end_offset
        )

    key = cursor.start_key
    offset = cursor.start_offset

    if key == target.start_key and offset > target.start_offset:
        return True
    if key == target.end_key and offset < target.end_offset:
        return True

    # Blocks only expose "next key", so scan forward from the start block.
    current = content.key_after(target.start_key)
    while current is not None and current != target.end_key:
        if current == key:
            return True
        current = content.key_after(current)

    return False

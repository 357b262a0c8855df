"""Highlight store: the ordered mapping of ranges to highlight records.

The mapping lives on the content snapshot next to its blocks, so a single
read or write always sees the whole store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from marginalia.document.editor_state import ChangeType
from marginalia.document.modifier import apply_inline_style
from marginalia.document.selection import SelectionState
from marginalia.models import HighlightMap

if TYPE_CHECKING:
    from collections.abc import Mapping

    from marginalia.document.content import ContentState
    from marginalia.document.editor_state import EditorState
    from marginalia.document.selection import Range
    from marginalia.models import Highlight

logger = logging.getLogger(__name__)


def get_highlights(content: ContentState) -> HighlightMap:
    """Return every highlight in ``content``, in insertion order."""
    return content.highlights


def add_highlight(
    editor_state: EditorState, target: Range, highlight: Highlight
) -> EditorState:
    """Store ``highlight`` over ``target`` and style the range.

    Existing entries are kept; re-adding a range replaces its record in place.
    The change is pushed as one undoable inline-style revision.

    Raises:
        BlockNotFoundError: If ``target`` refers to a block not in the content.
    """
    content = editor_state.current_content
    content = content.with_highlights(get_highlights(content).set(target, highlight))
    content = apply_inline_style(content, target, highlight.type.style_name)
    logger.debug("Added %s highlight at %s", highlight.type, target)
    return editor_state.push(content, ChangeType.CHANGE_INLINE_STYLE)


def replace_highlights(
    editor_state: EditorState, highlights: Mapping[Range, Highlight]
) -> EditorState:
    """Overwrite the whole store with ``highlights``.

    Styling is left alone; call ``redraw_highlights`` to resynchronise it.
    The user's selection is re-accepted afterwards, so the cursor neither
    moves nor takes focus.
    """
    content = editor_state.current_content
    anchor = SelectionState.create_empty(content.first_block.key)
    content = content.with_highlights(HighlightMap(highlights)).with_selection(
        anchor, anchor
    )
    logger.debug("Replaced highlight store with %d entries", len(highlights))
    new_state = editor_state.push(content, ChangeType.CHANGE_BLOCK_DATA)
    return new_state.accept_selection(editor_state.selection)

"""Resynchronise highlight styling with the highlight store.

A redraw strips every highlight style from the content, reapplies one style
per stored highlight, and layers a ``<TYPE>_SELECTED`` marker over the
highlight holding the cursor. The result is pushed as a single revision that
never reaches the undo history.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from marginalia.document.editor_state import ChangeType
from marginalia.document.modifier import apply_inline_style, remove_inline_style
from marginalia.document.selection import Range
from marginalia.highlights.resolver import range_contains_cursor
from marginalia.highlights.store import get_highlights
from marginalia.models import HIGHLIGHT_STYLES, ActiveHighlight

if TYPE_CHECKING:
    from marginalia.document.content import ContentState
    from marginalia.document.editor_state import EditorState
    from marginalia.document.selection import SelectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RedrawResult:
    """Outcome of ``redraw_highlights``.

    Attributes:
        editor_state: The resynchronised editor state.
        active_highlight: The highlight holding the cursor, if any.
    """

    editor_state: EditorState
    active_highlight: ActiveHighlight | None


def remove_inline_styles(
    content: ContentState, styles: Iterable[str] = HIGHLIGHT_STYLES
) -> ContentState:
    """Return ``content`` with ``styles`` removed wherever they occur.

    Each maximal run carrying any of ``styles`` loses all of them. Content
    without such runs is returned unchanged, so stripping is idempotent.
    """
    names = frozenset(styles)
    for block in content.blocks:
        runs = block.find_style_ranges(lambda s: not names.isdisjoint(s))
        for start, end in runs:
            target = Range(block.key, start, block.key, end)
            for style in names:
                content = remove_inline_style(content, target, style)
    return content


def apply_inline_styles(
    content: ContentState, cursor: SelectionState | None = None
) -> tuple[ContentState, ActiveHighlight | None]:
    """Style every stored highlight and find the one holding ``cursor``.

    Highlights are applied in insertion order; the first whose range
    contains the cursor is active, regardless of range size. Its selected
    style goes on after all base styles.

    Returns:
        The styled content and the active highlight (or None).
    """
    highlights = get_highlights(content)
    if not highlights:
        return content, None

    styled = content
    active: ActiveHighlight | None = None
    for target, highlight in highlights.items():
        if active is None and range_contains_cursor(content, cursor, target):
            active = ActiveHighlight(range=target, highlight=highlight)
        styled = apply_inline_style(styled, target, highlight.type.style_name)

    if active is not None:
        styled = apply_inline_style(
            styled, active.range, active.highlight.type.selected_style
        )

    return styled, active


def redraw_highlights(editor_state: EditorState) -> RedrawResult:
    """Strip and reapply highlight styles as one non-undoable revision.

    The user's selection is restored afterwards. It is forced back into
    focus only if it had focus before; otherwise it is merely accepted, so a
    redraw never steals focus.
    """
    selection = editor_state.selection
    clean = remove_inline_styles(editor_state.current_content)
    content, active = apply_inline_styles(clean, selection)

    state = editor_state.with_options(allow_undo=False)
    state = state.push(content, ChangeType.CHANGE_INLINE_STYLE)
    if selection.has_focus:
        state = state.force_selection_to(selection)
    else:
        state = state.accept_selection(selection)
    state = state.with_options(allow_undo=True)

    logger.debug(
        "Redrew %d highlight(s); active: %s",
        len(get_highlights(content)),
        active.range if active else None,
    )
    return RedrawResult(editor_state=state, active_highlight=active)

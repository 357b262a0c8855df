"""Editor state: current content, selection and undo/redo history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from marginalia.document.selection import SelectionState

if TYPE_CHECKING:
    from marginalia.document.content import ContentState

logger = logging.getLogger(__name__)


class ChangeType(StrEnum):
    """Tag describing what kind of change produced a revision."""

    INSERT_CHARACTERS = "insert-characters"
    BACKSPACE_CHARACTER = "backspace-character"
    DELETE_CHARACTER = "delete-character"
    REMOVE_RANGE = "remove-range"
    INSERT_FRAGMENT = "insert-fragment"
    SPLIT_BLOCK = "split-block"
    CHANGE_BLOCK_TYPE = "change-block-type"
    CHANGE_BLOCK_DATA = "change-block-data"
    CHANGE_INLINE_STYLE = "change-inline-style"
    APPLY_ENTITY = "apply-entity"
    UNDO = "undo"
    REDO = "redo"


# Consecutive character edits of the same kind share one undo entry.
_COALESCING_CHANGES = frozenset(
    {
        ChangeType.INSERT_CHARACTERS,
        ChangeType.BACKSPACE_CHARACTER,
        ChangeType.DELETE_CHARACTER,
    }
)


@dataclass(frozen=True)
class EditorState:
    """Immutable editor state.

    Attributes:
        current_content: The content being edited.
        selection: The user's current selection.
        undo_stack: Previous contents, most recent last.
        redo_stack: Undone contents, most recent last.
        allow_undo: When False, ``push`` leaves both stacks untouched.
        last_change_type: Tag of the change that produced ``current_content``.
        force_selection: Whether the view must re-apply ``selection`` and
            take input focus.
    """

    current_content: ContentState
    selection: SelectionState
    undo_stack: tuple[ContentState, ...] = ()
    redo_stack: tuple[ContentState, ...] = ()
    allow_undo: bool = True
    last_change_type: ChangeType | None = None
    force_selection: bool = False

    @classmethod
    def create_with_content(cls, content: ContentState) -> EditorState:
        """Start editing ``content`` with an unfocused cursor at its start."""
        return cls(
            current_content=content,
            selection=SelectionState.create_empty(content.first_block.key),
        )

    def with_options(self, **changes: Any) -> EditorState:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def push(self, content: ContentState, change_type: ChangeType) -> EditorState:
        """Make ``content`` current, recording the old content for undo.

        The selection moves to ``content.selection_after``. With
        ``allow_undo`` off, neither stack changes.
        """
        if not self.allow_undo:
            return replace(
                self,
                current_content=content,
                selection=content.selection_after,
                last_change_type=change_type,
                force_selection=False,
            )

        undo_stack = self.undo_stack
        if self.selection != self.current_content.selection_after or (
            self._must_become_boundary(change_type)
        ):
            undo_stack = (*undo_stack, self.current_content)

        return replace(
            self,
            current_content=content,
            selection=content.selection_after,
            undo_stack=undo_stack,
            redo_stack=(),
            last_change_type=change_type,
            force_selection=False,
        )

    def accept_selection(self, selection: SelectionState) -> EditorState:
        """Adopt ``selection`` without forcing the view to take focus."""
        return replace(self, selection=selection, force_selection=False)

    def force_selection_to(self, selection: SelectionState) -> EditorState:
        """Adopt ``selection`` and force the view to focus it."""
        return replace(
            self, selection=selection.with_focus(True), force_selection=True
        )

    def undo(self) -> EditorState:
        if not self.allow_undo or not self.undo_stack:
            return self
        previous = self.undo_stack[-1]
        logger.debug("Undo: %d entries remain", len(self.undo_stack) - 1)
        return replace(
            self,
            current_content=previous,
            selection=self.current_content.selection_before,
            undo_stack=self.undo_stack[:-1],
            redo_stack=(*self.redo_stack, self.current_content),
            last_change_type=ChangeType.UNDO,
            force_selection=True,
        )

    def redo(self) -> EditorState:
        if not self.allow_undo or not self.redo_stack:
            return self
        following = self.redo_stack[-1]
        logger.debug("Redo: %d entries remain", len(self.redo_stack) - 1)
        return replace(
            self,
            current_content=following,
            selection=following.selection_after,
            undo_stack=(*self.undo_stack, self.current_content),
            redo_stack=self.redo_stack[:-1],
            last_change_type=ChangeType.REDO,
            force_selection=True,
        )

    def _must_become_boundary(self, change_type: ChangeType) -> bool:
        return (
            change_type != self.last_change_type
            or change_type not in _COALESCING_CHANGES
        )

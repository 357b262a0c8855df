"""Immutable block-structured document model."""

from marginalia.document.block import ContentBlock
from marginalia.document.content import BlockNotFoundError, ContentState
from marginalia.document.editor_state import ChangeType, EditorState
from marginalia.document.selection import Range, SelectionState

__all__ = [
    "BlockNotFoundError",
    "ChangeType",
    "ContentBlock",
    "ContentState",
    "EditorState",
    "Range",
    "SelectionState",
]

"""Ranges and selections over block-structured content.

A ``Range`` is a direction-less span addressed by block key and character
offset. It is hashable and orderable, so it doubles as the key type of the
highlight store. A ``SelectionState`` is what the user actually holds: an
anchor and a focus, a direction, and whether the editor has input focus.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, order=True, slots=True)
class Range:
    """A span of text from ``(start_key, start_offset)`` to ``(end_key, end_offset)``.

    Attributes:
        start_key: Key of the block the range starts in.
        start_offset: Character offset within the start block.
        end_key: Key of the block the range ends in.
        end_offset: Character offset within the end block.
    """

    start_key: str
    start_offset: int
    end_key: str
    end_offset: int

    def __post_init__(self) -> None:
        if self.start_offset < 0 or self.end_offset < 0:
            msg = f"Range offsets must be non-negative: {self!r}"
            raise ValueError(msg)
        if self.is_single_block and self.start_offset > self.end_offset:
            msg = f"Single-block range starts after it ends: {self!r}"
            raise ValueError(msg)

    @classmethod
    def collapsed_at(cls, key: str, offset: int = 0) -> Range:
        """Return a zero-width range at ``offset`` in block ``key``."""
        return cls(key, offset, key, offset)

    @property
    def collapsed(self) -> bool:
        return self.start_key == self.end_key and self.start_offset == self.end_offset

    @property
    def is_single_block(self) -> bool:
        return self.start_key == self.end_key

    def __str__(self) -> str:
        return (
            f"{self.start_key}:{self.start_offset}-{self.end_key}:{self.end_offset}"
        )


@dataclass(frozen=True, slots=True)
class SelectionState:
    """The user's selection: anchor, focus, direction and input focus.

    ``is_backward`` is true when the focus precedes the anchor in document
    order, so the derived ``start_*``/``end_*`` edges read from the focus.
    """

    anchor_key: str
    anchor_offset: int
    focus_key: str
    focus_offset: int
    is_backward: bool = False
    has_focus: bool = False

    @classmethod
    def create_empty(cls, key: str) -> SelectionState:
        """Collapsed, unfocused selection at the start of block ``key``."""
        return cls(key, 0, key, 0)

    @classmethod
    def from_range(cls, target: Range, *, has_focus: bool = False) -> SelectionState:
        return cls(
            anchor_key=target.start_key,
            anchor_offset=target.start_offset,
            focus_key=target.end_key,
            focus_offset=target.end_offset,
            has_focus=has_focus,
        )

    @property
    def start_key(self) -> str:
        return self.focus_key if self.is_backward else self.anchor_key

    @property
    def start_offset(self) -> int:
        return self.focus_offset if self.is_backward else self.anchor_offset

    @property
    def end_key(self) -> str:
        return self.anchor_key if self.is_backward else self.focus_key

    @property
    def end_offset(self) -> int:
        return self.anchor_offset if self.is_backward else self.focus_offset

    @property
    def is_collapsed(self) -> bool:
        return (
            self.anchor_key == self.focus_key
            and self.anchor_offset == self.focus_offset
        )

    @property
    def range(self) -> Range:
        """The selection as a direction-less ``Range``."""
        return Range(self.start_key, self.start_offset, self.end_key, self.end_offset)

    def has_edge_within(self, key: str, start: int, end: int) -> bool:
        """Whether the anchor or focus lies in block ``key`` within ``[start, end]``.

        Both bounds are inclusive: an edge sitting exactly on either boundary
        counts as within.
        """
        if self.anchor_key == key and start <= self.anchor_offset <= end:
            return True
        return self.focus_key == key and start <= self.focus_offset <= end

    def with_focus(self, has_focus: bool) -> SelectionState:
        return replace(self, has_focus=has_focus)

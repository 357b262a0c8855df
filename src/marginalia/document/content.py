"""Immutable content snapshots: ordered blocks plus the highlight mapping."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from uuid import uuid4

from marginalia.document.block import ContentBlock
from marginalia.document.selection import Range, SelectionState
from marginalia.models import Highlight, HighlightMap


class BlockNotFoundError(KeyError):
    """Raised when a block key does not exist in the content."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"No block with key {self.key!r}"


def generate_key(existing: Iterable[str] = ()) -> str:
    """Generate a short block key not present in ``existing``."""
    taken = set(existing)
    while True:
        key = uuid4().hex[:5]
        if key not in taken:
            return key


@dataclass(frozen=True)
class ContentState:
    """A snapshot of document content.

    Blocks are kept in document order. Unchanged blocks are shared between
    snapshots, so deriving a new snapshot only copies the block tuple.

    Attributes:
        blocks: Blocks in document order; at least one, keys unique.
        highlights: Highlight mapping stored alongside the blocks.
        selection_before: Selection before the change producing this snapshot.
        selection_after: Selection after that change.
    """

    blocks: tuple[ContentBlock, ...]
    highlights: HighlightMap = field(default_factory=HighlightMap)
    selection_before: SelectionState | None = None
    selection_after: SelectionState | None = None
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.blocks:
            msg = "Content must contain at least one block"
            raise ValueError(msg)
        index = {block.key: pos for pos, block in enumerate(self.blocks)}
        if len(index) != len(self.blocks):
            msg = "Block keys must be unique"
            raise ValueError(msg)
        object.__setattr__(self, "_index", index)
        if not isinstance(self.highlights, HighlightMap):
            object.__setattr__(self, "highlights", HighlightMap(self.highlights))
        empty = SelectionState.create_empty(self.blocks[0].key)
        if self.selection_before is None:
            object.__setattr__(self, "selection_before", empty)
        if self.selection_after is None:
            object.__setattr__(self, "selection_after", empty)

    @classmethod
    def from_text(cls, text: str, block_type: str = "unstyled") -> ContentState:
        """Build content with one block per line of ``text``."""
        keys: list[str] = []
        blocks = []
        for line in text.split("\n"):
            key = generate_key(keys)
            keys.append(key)
            blocks.append(ContentBlock(key=key, text=line, type=block_type))
        return cls(blocks=tuple(blocks))

    def __iter__(self) -> Iterator[ContentBlock]:
        return iter(self.blocks)

    @property
    def first_block(self) -> ContentBlock:
        return self.blocks[0]

    def block_keys(self) -> list[str]:
        return [block.key for block in self.blocks]

    def has_block(self, key: str) -> bool:
        return key in self._index

    def get_block(self, key: str) -> ContentBlock:
        try:
            return self.blocks[self._index[key]]
        except KeyError:
            raise BlockNotFoundError(key) from None

    def key_after(self, key: str) -> str | None:
        """Key of the block following ``key``, or None for the last block."""
        pos = self._position(key) + 1
        return self.blocks[pos].key if pos < len(self.blocks) else None

    def key_before(self, key: str) -> str | None:
        """Key of the block preceding ``key``, or None for the first block."""
        pos = self._position(key) - 1
        return self.blocks[pos].key if pos >= 0 else None

    def plain_text(self, delimiter: str = "\n") -> str:
        return delimiter.join(block.text for block in self.blocks)

    def replace_blocks(self, updated: Iterable[ContentBlock]) -> ContentState:
        """Return a snapshot with blocks swapped in by key.

        Every updated block must replace an existing block with the same key;
        block order is unchanged.
        """
        blocks = list(self.blocks)
        for block in updated:
            blocks[self._position(block.key)] = block
        return replace(self, blocks=tuple(blocks))

    def with_highlights(
        self, highlights: Mapping[Range, Highlight]
    ) -> ContentState:
        return replace(self, highlights=HighlightMap(highlights))

    def with_selection(
        self, before: SelectionState, after: SelectionState
    ) -> ContentState:
        return replace(self, selection_before=before, selection_after=after)

    def _position(self, key: str) -> int:
        try:
            return self._index[key]
        except KeyError:
            raise BlockNotFoundError(key) from None

"""Highlight records and the ordered highlight mapping.

``Highlight`` is validated with pydantic so records read back from stored
documents (including the older ``date``/``msg`` field names) are checked at
the boundary. ``HighlightMap`` is a plain immutable mapping; it lives here
rather than in the highlights package so the document model can carry one
without importing the style machinery.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from marginalia.document.selection import Range

SELECTED_SUFFIX = "_SELECTED"


class HighlightType(StrEnum):
    """Kinds of highlight.

    Each value doubles as the inline style name applied over the highlighted
    range, and as the ``type`` discriminant on ``Highlight`` records.
    """

    COMMENT = "COMMENT"
    ANNOTATION = "ANNOTATION"

    @property
    def style_name(self) -> str:
        return self.value

    @property
    def selected_style(self) -> str:
        """Style layered over the active highlight of this type."""
        return f"{self.value}{SELECTED_SUFFIX}"


HIGHLIGHT_TYPES: tuple[HighlightType, ...] = tuple(HighlightType)

# Every style owned by the overlay engine: base styles and active markers.
HIGHLIGHT_STYLES: frozenset[str] = frozenset(
    [t.style_name for t in HIGHLIGHT_TYPES]
    + [t.selected_style for t in HIGHLIGHT_TYPES]
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Highlight(BaseModel):
    """A comment or annotation attached to a range of text.

    Attributes:
        type: Highlight kind; also the inline style applied over the range.
        author: Display name of the author.
        email: Author email address.
        timestamp: When the highlight was created (accepts legacy ``date``).
        message: Body text (accepts legacy ``msg``).

    Unknown fields are kept as extras, so records written by other tools
    survive a load and save unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: HighlightType
    author: str
    email: str = ""
    timestamp: datetime = Field(
        default_factory=_utcnow,
        validation_alias=AliasChoices("timestamp", "date"),
    )
    message: str = Field(
        default="",
        validation_alias=AliasChoices("message", "msg"),
    )


@dataclass(frozen=True, slots=True)
class ActiveHighlight:
    """The highlight whose range contains the cursor, with that range."""

    range: Range
    highlight: Highlight


class HighlightMap(Mapping["Range", Highlight]):
    """Immutable mapping of ``Range`` to ``Highlight`` in insertion order.

    Insertion order is part of the contract: the first entry whose range
    contains the cursor wins the active highlight. Setting an existing key
    replaces its value in place without moving it to the end.
    """

    __slots__ = ("_entries",)

    def __init__(
        self,
        entries: Mapping[Range, Highlight]
        | Iterable[tuple[Range, Highlight]]
        | None = None,
    ) -> None:
        self._entries: dict[Range, Highlight] = dict(entries or ())

    def __getitem__(self, key: Range) -> Highlight:
        return self._entries[key]

    def __iter__(self) -> Iterator[Range]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HighlightMap({list(self._entries.items())!r})"

    def __hash__(self) -> int:
        # Mapping equality ignores order, so the hash must too.
        return hash(frozenset(self._entries.items()))

    def set(self, key: Range, highlight: Highlight) -> HighlightMap:
        """Return a new map with ``key`` bound to ``highlight``."""
        entries = dict(self._entries)
        entries[key] = highlight
        return HighlightMap(entries)

    def merge(self, other: Mapping[Range, Highlight]) -> HighlightMap:
        """Return a new map with ``other``'s entries layered over this one."""
        entries = dict(self._entries)
        entries.update(other)
        return HighlightMap(entries)

"""Conversion between ``ContentState`` and the raw JSON document format.

The raw format is the Draft.js one: a list of blocks with inline style
ranges, plus an entity map. Highlights are written as an ordered top-level
``highlights`` list. Older documents instead kept them in the first block's
``data``, keyed by a JSON-serialised selection; those are still read, and can
still be written with ``storage="anchor_block"``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from marginalia.document.block import ContentBlock
from marginalia.document.content import ContentState
from marginalia.document.selection import Range, SelectionState
from marginalia.models import Highlight, HighlightMap

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

type Storage = Literal["document", "anchor_block"]


class _RawModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )


class RawInlineStyleRange(_RawModel):
    offset: int = Field(ge=0)
    length: int = Field(ge=0)
    style: str


class RawBlock(_RawModel):
    key: str
    text: str = ""
    type: str = "unstyled"
    depth: int = 0
    inline_style_ranges: list[RawInlineStyleRange] = Field(default_factory=list)
    entity_ranges: list[dict[str, Any]] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)


class RawSelection(_RawModel):
    """A selection as serialised by the editor, used as a legacy store key."""

    model_config = ConfigDict(extra="forbid")

    anchor_key: str
    anchor_offset: int
    focus_key: str
    focus_offset: int
    is_backward: bool = False
    has_focus: bool = False

    @classmethod
    def from_range(cls, target: Range) -> RawSelection:
        return cls(
            anchor_key=target.start_key,
            anchor_offset=target.start_offset,
            focus_key=target.end_key,
            focus_offset=target.end_offset,
        )

    def to_range(self) -> Range:
        return SelectionState(
            anchor_key=self.anchor_key,
            anchor_offset=self.anchor_offset,
            focus_key=self.focus_key,
            focus_offset=self.focus_offset,
            is_backward=self.is_backward,
        ).range


class RawHighlightEntry(_RawModel):
    range: RawSelection
    highlight: Highlight


class RawContent(_RawModel):
    blocks: list[RawBlock] = Field(min_length=1)
    entity_map: dict[str, Any] = Field(default_factory=dict)
    highlights: list[RawHighlightEntry] | None = None


# ---------------------------------------------------------------------------
# Legacy selection offsets
#
# Serialised editor selections count UTF-16 code units, while block text and
# inline style ranges count code points. The two differ after any character
# outside the Basic Multilingual Plane.
# ---------------------------------------------------------------------------


def _utf16_to_index(text: str, units: int) -> int:
    """Code-point index of the UTF-16 offset ``units`` within ``text``."""
    count = 0
    for index, char in enumerate(text):
        if count >= units:
            return index
        count += 2 if ord(char) > 0xFFFF else 1
    return len(text) + max(units - count, 0)


def _index_to_utf16(text: str, index: int) -> int:
    """UTF-16 offset of the code-point ``index`` within ``text``."""
    units = len(text[:index].encode("utf-16-le")) // 2
    return units + max(index - len(text), 0)


def _recount(
    selection: RawSelection,
    texts: Mapping[str, str],
    convert: Callable[[str, int], int],
) -> RawSelection:
    return selection.model_copy(
        update={
            "anchor_offset": convert(
                texts.get(selection.anchor_key, ""), selection.anchor_offset
            ),
            "focus_offset": convert(
                texts.get(selection.focus_key, ""), selection.focus_offset
            ),
        }
    )


def _block_texts(raw: RawContent) -> dict[str, str]:
    return {block.key: block.text for block in raw.blocks}


# ---------------------------------------------------------------------------
# Highlight layouts
# ---------------------------------------------------------------------------


def _lift_legacy_highlights(raw: RawContent) -> list[RawHighlightEntry]:
    """Move highlight entries out of the first block's data.

    Data keys that are not serialised selections, or whose value is not a
    highlight record, stay where they are. Selection offsets are converted
    from UTF-16 units to code points.
    """
    anchor = raw.blocks[0]
    texts = _block_texts(raw)
    entries: list[RawHighlightEntry] = []
    remaining: dict[str, Any] = {}
    for key, value in anchor.data.items():
        try:
            selection = RawSelection.model_validate_json(key)
        except ValidationError:
            remaining[key] = value
            continue
        selection = _recount(selection, texts, _utf16_to_index)
        try:
            highlight = Highlight.model_validate(value)
        except ValidationError:
            logger.warning("Ignoring malformed legacy highlight at %s", key)
            remaining[key] = value
            continue
        entries.append(RawHighlightEntry(range=selection, highlight=highlight))
    anchor.data = remaining
    if entries:
        logger.debug(
            "Lifted %d legacy highlight(s) from block %s", len(entries), anchor.key
        )
    return entries


def _legacy_payload(highlight: Highlight) -> dict[str, Any]:
    payload = highlight.model_dump(mode="json")
    payload["date"] = payload.pop("timestamp")
    payload["msg"] = payload.pop("message")
    return payload


def _store_entries(
    raw: RawContent, entries: list[RawHighlightEntry], storage: Storage
) -> dict[str, Any]:
    if storage == "anchor_block":
        raw.highlights = None
        anchor = raw.blocks[0]
        texts = _block_texts(raw)
        for entry in entries:
            selection = _recount(entry.range, texts, _index_to_utf16)
            key = selection.model_dump_json(by_alias=True)
            anchor.data[key] = _legacy_payload(entry.highlight)
    else:
        raw.highlights = entries
    dumped = raw.model_dump(mode="json", by_alias=True)
    if raw.highlights is None:
        dumped.pop("highlights", None)
    return dumped


def _load(raw: Mapping[str, Any] | str) -> RawContent:
    if isinstance(raw, str):
        return RawContent.model_validate_json(raw)
    return RawContent.model_validate(raw)


def _entries(raw: RawContent) -> list[RawHighlightEntry]:
    if raw.highlights is not None:
        return raw.highlights
    return _lift_legacy_highlights(raw)


def _default_storage() -> Storage:
    from marginalia.config import get_settings

    return get_settings().highlights.storage


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def convert_from_raw(raw: Mapping[str, Any] | str) -> ContentState:
    """Build a ``ContentState`` from a raw document (dict or JSON string).

    Raises:
        pydantic.ValidationError: If the document does not match the format.
        ValueError: If it has duplicate block keys.
    """
    content = _load(raw)
    entries = _entries(content)

    blocks = []
    for raw_block in content.blocks:
        styles = [set() for _ in raw_block.text]
        for style_range in raw_block.inline_style_ranges:
            end = min(style_range.offset + style_range.length, len(styles))
            for offset in range(style_range.offset, end):
                styles[offset].add(style_range.style)
        blocks.append(
            ContentBlock(
                key=raw_block.key,
                text=raw_block.text,
                type=raw_block.type,
                depth=raw_block.depth,
                styles=tuple(frozenset(s) for s in styles),
                data=raw_block.data,
            )
        )

    keys = {block.key for block in blocks}
    highlights = []
    for entry in entries:
        target = entry.range.to_range()
        if target.start_key not in keys or target.end_key not in keys:
            logger.warning("Dropping highlight on missing block(s): %s", target)
            continue
        highlights.append((target, entry.highlight))
    return ContentState(blocks=tuple(blocks), highlights=HighlightMap(highlights))


def convert_to_raw(
    content: ContentState, storage: Storage | None = None
) -> dict[str, Any]:
    """Serialise ``content`` to a raw document dict.

    Args:
        content: The content to serialise.
        storage: ``"document"`` for the top-level highlights list, or
            ``"anchor_block"`` for the legacy first-block layout. Defaults to
            the configured ``highlights.storage``.
    """
    raw = RawContent(
        blocks=[
            RawBlock(
                key=block.key,
                text=block.text,
                type=block.type,
                depth=block.depth,
                inline_style_ranges=[
                    RawInlineStyleRange(offset=start, length=end - start, style=name)
                    for name, runs in block.style_ranges().items()
                    for start, end in runs
                ],
                data=dict(block.data),
            )
            for block in content.blocks
        ]
    )
    entries = [
        RawHighlightEntry(range=RawSelection.from_range(target), highlight=highlight)
        for target, highlight in content.highlights.items()
    ]
    return _store_entries(raw, entries, storage or _default_storage())


def migrate_raw(raw: Mapping[str, Any] | str, storage: Storage) -> dict[str, Any]:
    """Rewrite a raw document's highlights into the ``storage`` layout.

    Everything other than the highlight entries, entities included, is
    passed through unchanged. Records keep their extra fields; legacy
    ``date``/``msg`` names are normalised on the way through.
    """
    content = _load(raw)
    entries = _entries(content)
    return _store_entries(content, entries, storage)

"""Content blocks: the atomic unit of document text and inline style."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

type StyleSet = frozenset[str]

_NO_STYLE: StyleSet = frozenset()


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """A block of text with per-character inline styles and metadata.

    Attributes:
        key: Opaque key, unique within a document.
        text: Block text.
        type: Block type (e.g. ``"unstyled"``, ``"header-one"``).
        depth: Nesting depth for list blocks.
        styles: One style set per character of ``text``. Defaults to unstyled.
        data: Free-form block metadata.
    """

    key: str
    text: str = ""
    type: str = "unstyled"
    depth: int = 0
    styles: tuple[StyleSet, ...] | None = None
    data: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if self.styles is None:
            object.__setattr__(self, "styles", (_NO_STYLE,) * len(self.text))
        elif len(self.styles) != len(self.text):
            msg = (
                f"Block {self.key!r} has {len(self.styles)} style entries "
                f"for {len(self.text)} characters"
            )
            raise ValueError(msg)
        if not isinstance(self.data, MappingProxyType):
            object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def __len__(self) -> int:
        return len(self.text)

    @property
    def length(self) -> int:
        return len(self.text)

    def style_at(self, offset: int) -> StyleSet:
        """Styles on the character at ``offset``."""
        return self.styles[offset]

    def find_style_ranges(
        self, predicate: Callable[[StyleSet], bool]
    ) -> list[tuple[int, int]]:
        """Return maximal ``(start, end)`` runs whose styles satisfy ``predicate``.

        Ranges are half-open. Adjacent characters that both satisfy the
        predicate belong to the same run even if their style sets differ.
        """
        runs: list[tuple[int, int]] = []
        run_start: int | None = None
        for offset, styles in enumerate(self.styles):
            if predicate(styles):
                if run_start is None:
                    run_start = offset
            elif run_start is not None:
                runs.append((run_start, offset))
                run_start = None
        if run_start is not None:
            runs.append((run_start, len(self.styles)))
        return runs

    def style_ranges(self) -> dict[str, list[tuple[int, int]]]:
        """Return the runs of every style present, keyed by style name."""
        names = sorted(set().union(*self.styles)) if self.styles else []
        return {
            name: self.find_style_ranges(lambda s, name=name: name in s)
            for name in names
        }

    def with_style(self, start: int, end: int, style: str) -> ContentBlock:
        """Return a copy with ``style`` added over ``[start, end)``."""
        return self._restyle(start, end, lambda s: s | {style})

    def without_style(self, start: int, end: int, style: str) -> ContentBlock:
        """Return a copy with ``style`` removed over ``[start, end)``."""
        return self._restyle(start, end, lambda s: s - {style})

    def with_data(self, data: Mapping[str, Any]) -> ContentBlock:
        return replace(self, data=data)

    def _restyle(
        self, start: int, end: int, change: Callable[[StyleSet], StyleSet]
    ) -> ContentBlock:
        start = max(start, 0)
        end = min(end, len(self.text))
        if start >= end:
            return self
        assert self.styles is not None
        updated = tuple(change(s) for s in self.styles[start:end])
        if updated == self.styles[start:end]:
            return self
        styles = self.styles[:start] + updated + self.styles[end:]
        return replace(self, styles=styles)

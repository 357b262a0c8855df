"""Highlight overlays: store, cursor containment and style redraw."""

from marginalia.highlights.resolver import range_contains_cursor
from marginalia.highlights.store import (
    add_highlight,
    get_highlights,
    replace_highlights,
)
from marginalia.highlights.styles import (
    RedrawResult,
    apply_inline_styles,
    redraw_highlights,
    remove_inline_styles,
)
from marginalia.models import (
    HIGHLIGHT_STYLES,
    HIGHLIGHT_TYPES,
    ActiveHighlight,
    Highlight,
    HighlightMap,
    HighlightType,
)

__all__ = [
    "HIGHLIGHT_STYLES",
    "HIGHLIGHT_TYPES",
    "ActiveHighlight",
    "Highlight",
    "HighlightMap",
    "HighlightType",
    "RedrawResult",
    "add_highlight",
    "apply_inline_styles",
    "get_highlights",
    "range_contains_cursor",
    "redraw_highlights",
    "remove_inline_styles",
    "replace_highlights",
]

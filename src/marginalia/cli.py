"""Command-line tools for inspecting and migrating raw documents.

Usage:
    marginalia inspect doc.json                   # show highlights
    marginalia inspect doc.json --cursor a1b2c:4  # mark the active one
    marginalia migrate doc.json --storage document -o out.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from marginalia import _setup_logging
from marginalia.document import BlockNotFoundError, EditorState, SelectionState
from marginalia.document.convert import convert_from_raw, migrate_raw
from marginalia.highlights import HighlightType, get_highlights, redraw_highlights

if TYPE_CHECKING:
    from marginalia.document import ContentBlock
    from marginalia.document.convert import Storage
    from marginalia.models import ActiveHighlight

logger = logging.getLogger(__name__)

console = Console()

# Terminal rendering of highlight styles.
_STYLE_COLOURS = {
    HighlightType.COMMENT.style_name: "on dark_goldenrod",
    HighlightType.ANNOTATION.style_name: "on dark_cyan",
}
_SELECTED_STYLE = "bold underline"


def _parse_cursor(value: str) -> SelectionState:
    """Parse ``KEY:OFFSET`` into a collapsed selection."""
    key, sep, offset = value.rpartition(":")
    if not sep or not key or not offset.isdigit():
        msg = f"expected KEY:OFFSET, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return SelectionState(key, int(offset), key, int(offset))


def _render_block(block: ContentBlock) -> Text:
    text = Text(block.text)
    for name, runs in block.style_ranges().items():
        if name.endswith("_SELECTED"):
            style = _SELECTED_STYLE
        else:
            style = _STYLE_COLOURS.get(name)
        if style is None:
            continue
        for start, end in runs:
            text.stylize(style, start, end)
    return text


def _inspect(path: Path, cursor: SelectionState | None) -> None:
    content = convert_from_raw(path.read_text(encoding="utf-8"))
    state = EditorState.create_with_content(content)
    if cursor is not None:
        if not content.has_block(cursor.anchor_key):
            raise BlockNotFoundError(cursor.anchor_key)
        state = state.accept_selection(cursor)

    result = redraw_highlights(state)
    content = result.editor_state.current_content
    active: ActiveHighlight | None = result.active_highlight

    for block in content.blocks:
        console.print(Text(f"{block.key} ", style="dim"), _render_block(block))
    console.print()

    table = Table(title=f"{len(get_highlights(content))} highlight(s)")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Range")
    table.add_column("Author")
    table.add_column("Message")
    table.add_column("Active", justify="center")
    for position, (target, highlight) in enumerate(
        get_highlights(content).items(), start=1
    ):
        is_active = active is not None and active.range == target
        table.add_row(
            str(position),
            highlight.type.value,
            str(target),
            Text(highlight.author),
            Text(highlight.message),
            "[green]*[/]" if is_active else "",
        )
    console.print(table)

    if cursor is not None and active is None:
        console.print("[dim]Cursor is not inside any highlight.[/]")


def _migrate(path: Path, storage: Storage, output: Path | None) -> None:
    migrated = migrate_raw(path.read_text(encoding="utf-8"), storage)
    rendered = json.dumps(migrated, indent=2, ensure_ascii=False)
    if output is None:
        sys.stdout.write(rendered + "\n")
        return
    output.write_text(rendered + "\n", encoding="utf-8")
    console.print(f"Wrote [bold]{escape(str(output))}[/] ({storage} storage)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marginalia",
        description="Inspect and migrate highlight overlays in raw documents.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect = subparsers.add_parser("inspect", help="Show a document's highlights.")
    inspect.add_argument("path", type=Path, help="Raw document JSON file.")
    inspect.add_argument(
        "--cursor",
        type=_parse_cursor,
        default=None,
        help="Collapsed cursor as KEY:OFFSET; marks the active highlight.",
    )

    migrate = subparsers.add_parser(
        "migrate", help="Rewrite where highlights are stored."
    )
    migrate.add_argument("path", type=Path, help="Raw document JSON file.")
    migrate.add_argument(
        "--storage",
        choices=["document", "anchor_block"],
        default="document",
        help="Target layout (default: document).",
    )
    migrate.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file (default: stdout)."
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        if args.command == "inspect":
            _inspect(args.path, args.cursor)
        else:
            _migrate(args.path, args.storage, args.output)
    except (OSError, ValidationError, BlockNotFoundError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Render an editor buffer with a visible cursor cell."""

from __future__ import annotations

import curses

from apiterm.cli.tui.types import Segment, StyledLine


def input_line(prefix: str, text: str, cursor: int, show_cursor: bool = True, attr: int = 0) -> StyledLine:
    """One line of editable text; the cursor cell is drawn reversed."""
    if not show_cursor:
        return [Segment(prefix + text, attr)]
    cursor = max(0, min(cursor, len(text)))
    under = text[cursor] if cursor < len(text) else " "
    return [
        Segment(prefix + text[:cursor], attr),
        Segment(under, attr | curses.A_REVERSE),
        Segment(text[cursor + 1 :], attr),
    ]


def multiline_input(text: str, cursor: int, indent: str = "", show_cursor: bool = True) -> list[StyledLine]:
    """Lines of a multi-line buffer, with the cursor on the line containing it."""
    lines: list[StyledLine] = []
    start = 0
    for raw in text.split("\n"):
        end = start + len(raw)
        on_line = show_cursor and start <= cursor <= end
        lines.append(input_line(indent, raw, cursor - start, show_cursor=on_line))
        start = end + 1
    return lines

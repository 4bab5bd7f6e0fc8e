"""Scrolling window calculation shared by every panel.

A panel hands over its row count, cursor and the height it may use; the
result says which slice of rows to draw and whether to draw the
"more above"/"more below" indicator lines. Nothing here touches curses.
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_VISIBLE = 1


@dataclass(frozen=True)
class ViewportState:
    scroll_offset: int
    visible_count: int
    has_overflow_above: bool
    has_overflow_below: bool

    @property
    def indicator_lines(self) -> int:
        return int(self.has_overflow_above) + int(self.has_overflow_below)

    def visible_range(self) -> range:
        return range(self.scroll_offset, self.scroll_offset + self.visible_count)


def clamp_cursor(index: int, row_count: int) -> int:
    """Clamp a cursor into ``[0, row_count - 1]`` (0 for an empty list)."""
    return max(0, min(index, row_count - 1))


def _fit_offset(offset: int, cursor: int, content_height: int, row_count: int) -> int:
    if cursor < offset:
        offset = cursor
    elif cursor >= offset + content_height:
        offset = cursor - content_height + 1
    return max(0, min(offset, row_count - content_height))


def compute_viewport(
    row_count: int,
    cursor_index: int,
    reserved_lines: int,
    available_height: int,
    previous_offset: int = 0,
) -> ViewportState:
    """Compute the visible window for a list.

    Args:
        row_count: Number of rows in the list.
        cursor_index: Selected row; clamped into range first.
        reserved_lines: Lines of the available height used by panel chrome.
        available_height: Height of the panel.
        previous_offset: Offset from the last render, so scrolling is sticky.

    Returns:
        Offset and size of the visible slice plus overflow flags.

    Overflow indicators each cost one line. The offset is fitted with the full
    height, the indicator cost is derived from that offset, and the fit is
    repeated with what remains. Content height only ever shrinks while fitting,
    so the loop settles after at most three fits.
    """
    raw_available = max(MIN_VISIBLE, available_height - reserved_lines)
    if row_count <= raw_available:
        return ViewportState(0, max(0, row_count), False, False)

    cursor = clamp_cursor(cursor_index, row_count)
    content_height = raw_available
    offset = max(0, previous_offset)
    while True:
        offset = _fit_offset(offset, cursor, content_height, row_count)
        indicators = int(offset > 0) + int(offset + content_height < row_count)
        needed = max(MIN_VISIBLE, raw_available - indicators)
        if needed >= content_height:
            break
        content_height = needed

    return ViewportState(
        scroll_offset=offset,
        visible_count=content_height,
        has_overflow_above=offset > 0,
        has_overflow_below=offset + content_height < row_count,
    )

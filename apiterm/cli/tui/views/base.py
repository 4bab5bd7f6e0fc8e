"""Base classes and mixins for TUI views."""

from __future__ import annotations

import curses

from apiterm.cli.tui.types import CursesWindow, KeyEvent, Segment, StyledLine, plain_text
from apiterm.cli.tui.viewport import ViewportState, compute_viewport
from apiterm.cli.tui.widgets.scroll_indicator import scroll_indicator


class BaseView:
    """Base class for all panels.

    Panels build styled lines; ``render`` draws them with curses and
    ``get_render_lines`` returns their text, so panels are testable without
    a terminal.
    """

    title = ""
    focused = False

    def get_styled_lines(self, width: int, height: int) -> list[StyledLine]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement get_styled_lines()")

    def get_render_lines(self, width: int, height: int) -> list[str]:
        """Return lines this view would render (testable without curses).

        Args:
            width: Panel inner width
            height: Panel inner height

        Returns:
            List of strings representing rendered output
        """
        return [plain_text(line)[:width] for line in self.get_styled_lines(width, height)[:height]]

    def render(self, stdscr: CursesWindow, row_start: int, col_start: int, height: int, width: int) -> None:
        """Draw the panel's lines into a screen region."""
        for offset, line in enumerate(self.get_styled_lines(width, height)[:height]):
            col = col_start
            remaining = width
            for segment in line:
                if remaining <= 0:
                    break
                text = segment.text[:remaining]
                try:
                    stdscr.addstr(row_start + offset, col, text, segment.attr)
                except curses.error:
                    pass  # Region may extend past a small terminal
                col += len(text)
                remaining -= len(text)

    def handle_key(self, event: KeyEvent) -> bool:
        """Handle a key. Returns True if the panel consumed it."""
        return False

    def get_action_bar(self) -> str:
        """Return action bar string."""
        return ""

    @property
    def capturing_text(self) -> bool:
        """True while the panel wants every key, including global ones."""
        return False


class ScrollableViewMixin:
    """Mixin keeping a sticky scroll offset for a panel's row list.

    Requires these attributes on the class:
    - scroll_offset: int - First visible row index, kept between renders
    """

    scroll_offset: int = 0

    def update_viewport(self, row_count: int, cursor: int, height: int, reserved_lines: int) -> ViewportState:
        """Recompute the visible window and remember its offset."""
        viewport = compute_viewport(row_count, cursor, reserved_lines, height, self.scroll_offset)
        self.scroll_offset = viewport.scroll_offset
        return viewport

    def windowed(self, lines: list[StyledLine], viewport: ViewportState) -> list[StyledLine]:
        """Slice ``lines`` to the viewport and add overflow indicators."""
        out: list[StyledLine] = []
        if viewport.has_overflow_above:
            out.append(scroll_indicator("up"))
        out.extend(lines[viewport.scroll_offset : viewport.scroll_offset + viewport.visible_count])
        if viewport.has_overflow_below:
            out.append(scroll_indicator("down"))
        return out


def selection_attr(selected: bool, focused: bool) -> int:
    if selected and focused:
        return curses.A_REVERSE
    if selected:
        return curses.A_BOLD
    return curses.A_NORMAL


def text_line(text: str, attr: int = 0) -> StyledLine:
    return [Segment(text, attr)]

"""Keyboard shortcut overlay."""

from __future__ import annotations

import curses

from apiterm.cli.tui.types import Key, KeyEvent, Segment, StyledLine
from apiterm.cli.tui.views.base import BaseView, ScrollableViewMixin, text_line

KEY_WIDTH = 20

KEYBINDING_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    (
        "Global",
        [
            ("q / Ctrl+C", "Quit"),
            ("Tab", "Next panel"),
            ("Shift+Tab", "Previous panel"),
            ("f", "Toggle fullscreen"),
            ("?", "Toggle help"),
        ],
    ),
    (
        "Navigation",
        [
            ("j / Down", "Move down"),
            ("k / Up", "Move up"),
            ("g", "Go to top"),
            ("G", "Go to bottom"),
            ("Enter", "Toggle / select / open"),
            ("h / l", "Collapse / expand group"),
        ],
    ),
    (
        "Endpoint List",
        [
            ("/", "Filter endpoints"),
            ("Enter", "Keep filter"),
            ("Esc", "Clear filter"),
        ],
    ),
    (
        "Endpoint Detail",
        [
            ("Enter", "Toggle section, open schema, show field details"),
            ("Bksp / Del / Esc", "Back out of a schema"),
        ],
    ),
    (
        "Request Panel",
        [
            ("Enter", "Edit parameter / send"),
            ("s", "Send request"),
            ("S", "Switch server"),
            ("e", "Edit body"),
            ("1 / 2 / 3", "Response tab (Pretty/Raw/Headers)"),
        ],
    ),
    (
        "Body Editor",
        [
            ("Esc", "Normal mode"),
            ("h l w b 0 $", "Move"),
            ("x", "Delete character"),
            ("i a I A", "Insert mode"),
            ("Enter / Esc", "Save (normal mode)"),
        ],
    ),
]


class HelpView(ScrollableViewMixin, BaseView):
    """Full-screen list of keybindings, scrollable with j/k."""

    title = "Keyboard Shortcuts"

    def __init__(self) -> None:
        self.cursor = 0
        self.scroll_offset = 0
        self._lines = self._build_lines()

    @staticmethod
    def _build_lines() -> list[StyledLine]:
        lines: list[StyledLine] = []
        for index, (section, bindings) in enumerate(KEYBINDING_SECTIONS):
            if index:
                lines.append(text_line(""))
            lines.append(text_line(section, curses.A_BOLD | curses.A_UNDERLINE))
            for key, description in bindings:
                lines.append([Segment(f"  {key:<{KEY_WIDTH}}", curses.A_BOLD), Segment(description)])
        return lines

    def handle_key(self, event: KeyEvent) -> bool:
        # Scroll the page itself; the cursor pins the top visible line.
        last = len(self._lines) - 1
        if event.is_char("j") or event.key is Key.DOWN:
            self.scroll_offset = min(last, self.scroll_offset + 1)
        elif event.is_char("k") or event.key is Key.UP:
            self.scroll_offset = max(0, self.scroll_offset - 1)
        elif event.is_char("g"):
            self.scroll_offset = 0
        elif event.is_char("G"):
            self.scroll_offset = last
        else:
            return False
        self.cursor = self.scroll_offset
        return True

    def get_styled_lines(self, width: int, height: int) -> list[StyledLine]:
        header = [text_line(self.title, curses.A_BOLD), text_line("Press ? or Esc to close", curses.A_DIM)]
        viewport = self.update_viewport(len(self._lines), self.cursor, height, reserved_lines=len(header))
        return header + self.windowed(self._lines, viewport)

"""Endpoint list panel: tag groups, collapse state and filtering."""

from __future__ import annotations

import curses
from typing import Callable

from apiterm.cli.models import Endpoint, TagGroup
from apiterm.cli.tui.line_editor import DEFAULT_FLUSH_DELAY, EditorAction, LineEditor
from apiterm.cli.tui.rows import CollapsibleList, LeafRow, Row, RowGroup, is_group_row, is_leaf_row
from apiterm.cli.tui.scheduler import FlushScheduler
from apiterm.cli.tui.theme import error_attr, method_attr
from apiterm.cli.tui.types import Key, KeyEvent, Segment, StyledLine
from apiterm.cli.tui.views.base import BaseView, ScrollableViewMixin, selection_attr, text_line
from apiterm.cli.tui.widgets.text_input import input_line
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

COLLAPSED_MARK = "▶"
EXPANDED_MARK = "▼"


def endpoint_search_fields(endpoint: Endpoint) -> tuple[str | None, str | None]:
    return (endpoint.path, endpoint.summary)


class EndpointsView(ScrollableViewMixin, BaseView):
    """Panel 1: endpoints grouped by tag."""

    title = "Endpoints"

    def __init__(
        self,
        on_select: Callable[[Endpoint], None] | None = None,
        scheduler: FlushScheduler | None = None,
        flush_delay: float = DEFAULT_FLUSH_DELAY,
    ):
        self.on_select = on_select
        self.list: CollapsibleList[Endpoint] = CollapsibleList(
            search_fields=endpoint_search_fields,
            collapse_new_groups=True,
        )
        self.filter_editor = LineEditor(
            multiline=False,
            scheduler=scheduler,
            flush_delay=flush_delay,
            on_flush=self._apply_filter,
        )
        self.filtering = False
        self.error: str | None = None
        self.scroll_offset = 0

    def set_tag_groups(self, tag_groups: list[TagGroup]) -> None:
        """Load a new set of groups; every group starts collapsed."""
        groups = [
            RowGroup(key=tag.name, label=tag.name, children=[LeafRow(endpoint) for endpoint in tag.endpoints])
            for tag in tag_groups
        ]
        if self.filtering:
            self.filter_editor.end()
            self.filtering = False
        self.list.set_groups(groups)
        self.scroll_offset = 0
        self.error = None

    def set_error(self, message: str) -> None:
        self.error = message

    @property
    def rows(self) -> list[Row]:
        return self.list.rows

    @property
    def cursor(self) -> int:
        return self.list.cursor

    @property
    def capturing_text(self) -> bool:
        return self.filtering

    @property
    def filter_text(self) -> str:
        return self.list.filter_text

    def _apply_filter(self, text: str) -> None:
        # Rows follow each flush of the editor, so a paste refilters once.
        if self.filtering:
            self.list.set_filter(text)

    def start_filter(self) -> None:
        self.filtering = True
        self.filter_editor.begin(self.list.filter_text)

    def _finish_filter(self, keep: bool) -> None:
        text = self.filter_editor.end()
        self.filtering = False
        self.list.set_filter(text if keep else "")
        logger.debug("Filter {}: {!r}", "applied" if keep else "cleared", self.list.filter_text)

    def handle_key(self, event: KeyEvent) -> bool:
        if self.filtering:
            return self._handle_filter_key(event)

        if event.is_char("/"):
            self.start_filter()
        elif event.is_char("j") or event.key is Key.DOWN:
            self.list.move(1)
        elif event.is_char("k") or event.key is Key.UP:
            self.list.move(-1)
        elif event.is_char("g") or event.key is Key.HOME:
            self.list.move_to_top()
        elif event.is_char("G") or event.key is Key.END:
            self.list.move_to_bottom()
        elif event.key is Key.ENTER:
            self._activate()
        elif event.is_char("h") or event.key is Key.LEFT:
            self.list.collapse()
        elif event.is_char("l") or event.key is Key.RIGHT:
            self.list.expand()
        elif event.key is Key.ESCAPE and self.list.filter_text:
            self.list.set_filter("")
        else:
            return False
        return True

    def _handle_filter_key(self, event: KeyEvent) -> bool:
        if event.key is Key.DOWN:
            self.filter_editor.flush()
            self.list.move(1)
            return True
        if event.key is Key.UP:
            self.filter_editor.flush()
            self.list.move(-1)
            return True
        action = self.filter_editor.handle_key(event)
        if action is EditorAction.COMMIT:
            self._finish_filter(keep=True)
        elif action is EditorAction.CANCEL:
            self._finish_filter(keep=False)
        return True

    def _activate(self) -> None:
        row = self.list.current_row
        if row is None:
            return
        if is_group_row(row):
            self.list.toggle(row.key)
        elif is_leaf_row(row):
            logger.debug("Endpoint selected: {} {}", row.item.method, row.item.path)
            if self.on_select:
                self.on_select(row.item)

    def get_action_bar(self) -> str:
        if self.filtering:
            return "[Enter] Keep filter  [Esc] Clear"
        return "[Enter] Select/Toggle  [h/l] Collapse/Expand  [/] Filter"

    def _row_line(self, row: Row, selected: bool) -> StyledLine:
        attr = selection_attr(selected, self.focused)
        if is_group_row(row):
            mark = COLLAPSED_MARK if row.collapsed else EXPANDED_MARK
            return [Segment(f"{mark} {row.label} ({row.child_count})", attr | curses.A_BOLD)]
        if is_leaf_row(row):
            endpoint: Endpoint = row.item
            indent = "" if self.list.filter_text else "  "
            path_attr = attr | (curses.A_DIM if endpoint.deprecated else 0)
            return [
                Segment(indent, attr),
                Segment(f"{endpoint.method.upper():<7}", method_attr(endpoint.method) | attr),
                Segment(endpoint.path, path_attr),
            ]
        return text_line("")

    def get_styled_lines(self, width: int, height: int) -> list[StyledLine]:
        lines: list[StyledLine] = [text_line(self.title, curses.A_BOLD if self.focused else curses.A_DIM)]
        if self.filtering:
            lines.append(input_line("/ ", self.filter_editor.text, self.filter_editor.cursor))
        elif self.list.filter_text:
            lines.append(text_line(f"/ {self.list.filter_text}", curses.A_DIM))

        if self.error:
            lines.extend(text_line(part, error_attr()) for part in self.error.splitlines())
            return lines
        if not self.list.rows:
            lines.append(text_line("(no matches)" if self.list.filter_text else "(no endpoints)", curses.A_DIM))
            return lines

        viewport = self.update_viewport(len(self.list.rows), self.list.cursor, height, reserved_lines=len(lines))
        row_lines = [self._row_line(row, index == self.list.cursor) for index, row in enumerate(self.list.rows)]
        lines.extend(self.windowed(row_lines, viewport))
        return lines

"""Endpoint detail panel: collapsible sections and schema drill-down."""

from __future__ import annotations

import curses
from typing import Any

from apiterm.cli.models import Endpoint, MediaTypeInfo, ParameterInfo, SchemaInfo
from apiterm.cli.tui.navigation import SchemaNavigator
from apiterm.cli.tui.rows import CollapsibleList, LeafRow, MarkerRow, Row, RowGroup, is_group_row, is_leaf_row
from apiterm.cli.tui.schema_rows import (
    MAX_FLATTEN_DEPTH,
    SchemaField,
    field_detail_lines,
    flatten_schema,
    is_navigable_schema,
    schema_summary,
)
from apiterm.cli.tui.theme import method_attr, muted_attr
from apiterm.cli.tui.types import Key, KeyEvent, MarkerKind, Segment, StyledLine
from apiterm.cli.tui.utils.formatters import format_type, status_reason, status_text, truncate_text
from apiterm.cli.tui.viewport import clamp_cursor
from apiterm.cli.tui.views.base import BaseView, ScrollableViewMixin, selection_attr, text_line
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

LOCATION_ORDER = ("path", "query", "header", "cookie")

PARAMETERS_KEY = "parameters"
BODY_KEY = "body"
RESPONSE_KEY_PREFIX = "response:"


def sort_parameters(parameters: list[ParameterInfo]) -> list[ParameterInfo]:
    """Order parameters by location (path, query, header, cookie), stable within one."""

    def rank(param: ParameterInfo) -> int:
        return LOCATION_ORDER.index(param.location) if param.location in LOCATION_ORDER else len(LOCATION_ORDER)

    return sorted(parameters, key=rank)


def parameter_path(param: ParameterInfo) -> str:
    return f"param/{param.location}/{param.name}"


def drill_target(schema: SchemaInfo, label: str) -> tuple[SchemaInfo, str]:
    """Schema and breadcrumb label to push for a field; arrays drill into their items."""
    if schema.items is not None and not schema.properties and not (schema.all_of or schema.one_of or schema.any_of):
        items = schema.items
        return items, f"{items.ref_name or label}[]"
    return schema, schema.ref_name or label


class EndpointDetailView(ScrollableViewMixin, BaseView):
    """Panel 2: parameters, request body and responses of the selected endpoint."""

    title = "Endpoint Detail"

    def __init__(self, max_depth: int = MAX_FLATTEN_DEPTH):
        self.max_depth = max_depth
        self.endpoint: Endpoint | None = None
        self.navigator = SchemaNavigator()
        self.sections: CollapsibleList[Any] = CollapsibleList()
        self.expanded: set[str] = set()
        self.drill_rows: list[Row] = []
        self.drill_cursor = 0
        self.drill_expanded: set[str] = set()
        self._cursor_stack: list[int] = []
        self.scroll_offset = 0

    # -- data -------------------------------------------------------------

    def set_endpoint(self, endpoint: Endpoint | None) -> None:
        """Show an endpoint. A different endpoint resets every panel state."""
        subject_changed = self.navigator.bind_subject(endpoint.id if endpoint else None)
        self.endpoint = endpoint
        if not subject_changed:
            return
        self.expanded = set()
        self.drill_expanded = set()
        self.drill_rows = []
        self.drill_cursor = 0
        self._cursor_stack = []
        self.scroll_offset = 0
        self.sections.set_groups(self._build_sections())

    def _schema_rows(self, schema: SchemaInfo | None, depth: int, path: str, expanded: set[str]) -> list[Row]:
        if schema is None:
            return []
        rows = flatten_schema(schema, depth=depth, max_depth=self.max_depth, expanded=expanded, path=path)
        if rows:
            return rows
        return [MarkerRow(MarkerKind.TEXT, schema_summary(schema), depth)]

    def _media_rows(self, content: list[MediaTypeInfo], path: str) -> list[Row]:
        rows: list[Row] = []
        for media in content:
            rows.append(MarkerRow(MarkerKind.MEDIA_TYPE, media.media_type, 1))
            rows.extend(self._schema_rows(media.schema, 2, f"{path}/{media.media_type}", self.expanded))
        return rows

    def _build_sections(self) -> list[RowGroup]:
        endpoint = self.endpoint
        if endpoint is None:
            return []
        groups: list[RowGroup] = []

        if endpoint.parameters:
            children: list[Row] = []
            for param in sort_parameters(endpoint.parameters):
                children.append(LeafRow(param, 1))
                if parameter_path(param) in self.expanded:
                    children.extend(MarkerRow(MarkerKind.DETAIL, line, 2) for line in self._parameter_details(param))
            groups.append(RowGroup(PARAMETERS_KEY, "Parameters", children))

        body = endpoint.request_body
        if body is not None:
            label = "Request Body (required)" if body.required else "Request Body"
            children = []
            if body.description:
                children.append(MarkerRow(MarkerKind.TEXT, body.description, 1))
            children.extend(self._media_rows(body.content, BODY_KEY))
            groups.append(RowGroup(BODY_KEY, label, children))

        for response in endpoint.responses:
            key = f"{RESPONSE_KEY_PREFIX}{response.status_code}"
            children = []
            if response.description:
                children.append(MarkerRow(MarkerKind.TEXT, response.description, 1))
            for header in response.headers:
                req = "*" if header.required else ""
                children.append(
                    MarkerRow(MarkerKind.TEXT, f"header {header.name}{req}  {format_type(header.schema)}".rstrip(), 1)
                )
            children.extend(self._media_rows(response.content, key))
            label = status_text(response.status_code, status_reason(response.status_code))
            groups.append(RowGroup(key, label, children))
        return groups

    def _parameter_details(self, param: ParameterInfo) -> list[str]:
        lines: list[str] = []
        if param.description:
            lines.append(param.description)
        if param.schema is not None:
            lines.extend(line for line in field_detail_lines(param.schema) if line != "(no details)")
        if param.example is not None:
            lines.append(f"example: {param.example}")
        return lines or ["(no details)"]

    def _rebuild_drill_rows(self) -> None:
        subtree = self.navigator.current_subtree()
        self.drill_rows = self._schema_rows(subtree, 0, "drill", self.drill_expanded)
        self.drill_cursor = clamp_cursor(self.drill_cursor, len(self.drill_rows))

    # -- state ------------------------------------------------------------

    @property
    def in_drilldown(self) -> bool:
        return bool(self.navigator.stack)

    @property
    def rows(self) -> list[Row]:
        return self.drill_rows if self.in_drilldown else self.sections.rows

    @property
    def cursor(self) -> int:
        return self.drill_cursor if self.in_drilldown else self.sections.cursor

    def _set_cursor(self, index: int) -> None:
        if self.in_drilldown:
            self.drill_cursor = clamp_cursor(index, len(self.drill_rows))
        else:
            self.sections.cursor = clamp_cursor(index, len(self.sections.rows))

    def drill_into(self, schema: SchemaInfo, label: str) -> None:
        """Push a sub-schema; the current cursor is restored on the way back."""
        target, crumb = drill_target(schema, label)
        self._cursor_stack.append(self.cursor)
        self.navigator.push(target, crumb)
        self.drill_cursor = 0
        self.drill_expanded = set()
        self.scroll_offset = 0
        self._rebuild_drill_rows()

    def go_back(self) -> bool:
        if not self.navigator.pop():
            return False
        restored = self._cursor_stack.pop() if self._cursor_stack else 0
        self.drill_expanded = set()
        if self.in_drilldown:
            self.drill_cursor = restored
            self._rebuild_drill_rows()
        else:
            self.drill_rows = []
            self.sections.cursor = clamp_cursor(restored, len(self.sections.rows))
        return True

    # -- input ------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        if self.endpoint is None:
            return False
        if self.in_drilldown and event.key in (Key.BACKSPACE, Key.DELETE, Key.ESCAPE):
            self.go_back()
            return True

        if event.is_char("j") or event.key is Key.DOWN:
            self._set_cursor(self.cursor + 1)
        elif event.is_char("k") or event.key is Key.UP:
            self._set_cursor(self.cursor - 1)
        elif event.is_char("g") or event.key is Key.HOME:
            self._set_cursor(0)
        elif event.is_char("G") or event.key is Key.END:
            self._set_cursor(len(self.rows) - 1)
        elif event.key is Key.ENTER:
            self._activate()
        elif (event.is_char("h") or event.key is Key.LEFT) and not self.in_drilldown:
            self.sections.collapse()
        elif (event.is_char("l") or event.key is Key.RIGHT) and not self.in_drilldown:
            self.sections.expand()
        else:
            return False
        return True

    def _activate(self) -> None:
        rows = self.rows
        if not rows:
            return
        row = rows[self.cursor]
        if is_group_row(row):
            self.sections.toggle(row.key)
            return
        if not is_leaf_row(row):
            return
        item = row.item
        if isinstance(item, SchemaField):
            if item.is_navigable:
                self.drill_into(item.schema, item.name)
            else:
                self._toggle_expanded(item.path)
        elif isinstance(item, ParameterInfo):
            schema = item.schema
            if schema is not None and is_navigable_schema(schema):
                self.drill_into(schema, item.name)
            else:
                self._toggle_expanded(parameter_path(item))

    def _toggle_expanded(self, path: str) -> None:
        target = self.drill_expanded if self.in_drilldown else self.expanded
        if path in target:
            target.discard(path)
        else:
            target.add(path)
        if self.in_drilldown:
            self._rebuild_drill_rows()
        else:
            self.sections.replace_children(self._build_sections())

    def get_action_bar(self) -> str:
        if self.endpoint is None:
            return ""
        if self.in_drilldown:
            return "[Enter] Open/Details  [Bksp/Esc] Back"
        return "[Enter] Open/Toggle  [h/l] Collapse/Expand"

    # -- rendering --------------------------------------------------------

    def _header_lines(self, width: int) -> list[StyledLine]:
        lines: list[StyledLine] = [text_line(self.title, curses.A_BOLD if self.focused else curses.A_DIM)]
        endpoint = self.endpoint
        if endpoint is None:
            return lines
        method_line: StyledLine = [
            Segment(endpoint.method.upper(), method_attr(endpoint.method)),
            Segment(f" {endpoint.path}", curses.A_DIM if endpoint.deprecated else curses.A_NORMAL),
        ]
        if endpoint.deprecated:
            method_line.append(Segment(" (deprecated)", muted_attr()))
        lines.append(method_line)
        if endpoint.summary:
            lines.append(text_line(truncate_text(endpoint.summary, max(1, width)), curses.A_DIM))
        if endpoint.description and endpoint.description != endpoint.summary:
            lines.append(text_line(truncate_text(endpoint.description, max(1, width)), muted_attr()))
        if self.in_drilldown:
            lines.append(text_line(truncate_text(self.navigator.get_breadcrumb(), max(1, width)), curses.A_BOLD))
        return lines

    def _row_line(self, row: Row, selected: bool) -> StyledLine:
        attr = selection_attr(selected, self.focused)
        indent = "  " * row.depth
        if is_group_row(row):
            mark = "▶" if row.collapsed else "▼"
            return [Segment(f"{mark} {row.label}", attr | curses.A_BOLD)]
        if is_leaf_row(row):
            item = row.item
            if isinstance(item, ParameterInfo):
                req = "*" if item.required else ""
                text = f"{indent}{item.location:<7}{item.name}{req}  {format_type(item.schema)}".rstrip()
                return [Segment(text, attr | (curses.A_DIM if item.deprecated else 0))]
            if isinstance(item, SchemaField):
                req = "*" if item.required else ""
                suffix = " ›" if item.is_navigable else ""
                return [
                    Segment(f"{indent}{item.name}{req}", attr),
                    Segment(f"  {format_type(item.schema)}{suffix}", attr | curses.A_DIM),
                ]
            return [Segment(f"{indent}{item}", attr)]
        marker_attr = {
            MarkerKind.COMPOSITION: curses.A_BOLD,
            MarkerKind.MEDIA_TYPE: curses.A_UNDERLINE,
            MarkerKind.TRUNCATED: curses.A_DIM,
            MarkerKind.DETAIL: curses.A_DIM,
        }.get(row.marker, curses.A_NORMAL)
        text = f"{row.text}:" if row.marker is MarkerKind.COMPOSITION else row.text
        return [Segment(f"{indent}{text}", attr | marker_attr)]

    def get_styled_lines(self, width: int, height: int) -> list[StyledLine]:
        lines = self._header_lines(width)
        if self.endpoint is None:
            lines.append(text_line("No endpoint selected", curses.A_DIM))
            return lines
        rows = self.rows
        if not rows:
            lines.append(text_line("(nothing to show)", curses.A_DIM))
            return lines
        viewport = self.update_viewport(len(rows), self.cursor, height, reserved_lines=len(lines))
        row_lines = [self._row_line(row, index == self.cursor) for index, row in enumerate(rows)]
        lines.extend(self.windowed(row_lines, viewport))
        return lines

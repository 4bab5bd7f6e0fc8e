"""Request panel: server, parameters, body editor, send and response tabs."""

from __future__ import annotations

import asyncio
import curses
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from apiterm.cli.collaborators import RequestSender
from apiterm.cli.models import Endpoint, HttpResponse, RequestDraft, ServerInfo
from apiterm.cli.tui.body_template import generate_body_template
from apiterm.cli.tui.line_editor import DEFAULT_FLUSH_DELAY, EditorAction, EditorMode, LineEditor
from apiterm.cli.tui.scheduler import FlushScheduler
from apiterm.cli.tui.theme import error_attr, method_attr, status_attr
from apiterm.cli.tui.types import Key, KeyEvent, NotificationLevel, ResponseTab, Segment, StyledLine
from apiterm.cli.tui.utils.formatters import truncate_text
from apiterm.cli.tui.viewport import clamp_cursor, compute_viewport
from apiterm.cli.tui.views.base import BaseView, ScrollableViewMixin, selection_attr, text_line
from apiterm.cli.tui.widgets.text_input import input_line, multiline_input
from apiterm.errors import HttpRequestError
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

PRETTY_LINE_CAP = 40
RAW_CHAR_CAP = 2000
JSON_MEDIA_TYPE = "application/json"
BODY_METHODS = ("post", "put", "patch")
EDITABLE_LOCATIONS = ("path", "query", "header")

TAB_KEYS: dict[str, ResponseTab] = {
    "1": ResponseTab.PRETTY,
    "2": ResponseTab.RAW,
    "3": ResponseTab.HEADERS,
}
TAB_LABELS = {ResponseTab.PRETTY: "Pretty", ResponseTab.RAW: "Raw", ResponseTab.HEADERS: "Headers"}


class RequestRowType(str, Enum):
    SERVER = "server"
    PARAM = "param"
    BODY = "body"
    SEND = "send"
    TABS = "tabs"
    RESPONSE = "response"


@dataclass(frozen=True)
class RequestRow:
    type: RequestRowType
    label: str
    param_key: str | None = None


@dataclass
class RequestState:
    """Per-endpoint request state. The server choice survives endpoint changes."""

    server_index: int = 0
    param_values: dict[str, str] = field(default_factory=dict)
    body_text: str = "{}"
    body_error: str | None = None
    response: HttpResponse | None = None
    error: str | None = None
    is_loading: bool = False
    active_tab: ResponseTab = ResponseTab.PRETTY


def format_pretty(body: str) -> list[str]:
    """Indent a JSON body, capped at PRETTY_LINE_CAP lines. Non-JSON is shown as is."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body.splitlines() or [""]
    lines = json.dumps(parsed, indent=2, ensure_ascii=False).split("\n")
    if len(lines) > PRETTY_LINE_CAP:
        hidden = len(lines) - PRETTY_LINE_CAP
        return lines[:PRETTY_LINE_CAP] + [f"... ({hidden} more lines)"]
    return lines


def format_raw(body: str) -> list[str]:
    if len(body) > RAW_CHAR_CAP:
        return (body[:RAW_CHAR_CAP] + "... (truncated)").splitlines()
    return body.splitlines() or [""]


def format_headers(headers: dict[str, str]) -> list[str]:
    return [f"{name}: {value}" for name, value in headers.items()] or ["(no headers)"]


def json_body_schema_present(endpoint: Endpoint) -> bool:
    body = endpoint.request_body
    return body is not None and body.media(JSON_MEDIA_TYPE) is not None


def initial_body(endpoint: Endpoint | None) -> str:
    if endpoint is None or endpoint.request_body is None:
        return "{}"
    media = endpoint.request_body.media(JSON_MEDIA_TYPE)
    if media is None or media.schema is None:
        return "{}"
    return generate_body_template(media.schema)


class RequestView(ScrollableViewMixin, BaseView):
    """Panel 3: build and send a request for the selected endpoint."""

    title = "Request / Response"

    def __init__(
        self,
        sender: RequestSender | None = None,
        servers: list[ServerInfo] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        scheduler: FlushScheduler | None = None,
        flush_delay: float = DEFAULT_FLUSH_DELAY,
        default_tab: ResponseTab = ResponseTab.PRETTY,
        notify: Callable[[str, NotificationLevel], None] | None = None,
    ):
        self.sender = sender
        self.servers: list[ServerInfo] = servers or []
        self._loop = loop
        self.default_tab = default_tab
        self.notify = notify
        self.endpoint: Endpoint | None = None
        self.state = RequestState(active_tab=default_tab)
        self.cursor = 0
        self.scroll_offset = 0
        self.param_editor = LineEditor(multiline=False, scheduler=scheduler, flush_delay=flush_delay)
        self.body_editor = LineEditor(multiline=True, scheduler=scheduler, flush_delay=flush_delay)
        self.editing_param: str | None = None
        self.editing_body = False
        self._body_scroll = 0

    # -- data -------------------------------------------------------------

    def set_servers(self, servers: list[ServerInfo]) -> None:
        self.servers = servers

    def set_endpoint(self, endpoint: Endpoint | None) -> None:
        """Switch endpoint; resets everything except the server choice."""
        if endpoint is self.endpoint or (endpoint and self.endpoint and endpoint.id == self.endpoint.id):
            return
        self._stop_editing()
        self.endpoint = endpoint
        self.state = RequestState(
            server_index=self.state.server_index,
            body_text=initial_body(endpoint),
            active_tab=self.default_tab,
        )
        self.cursor = 0
        self.scroll_offset = 0

    def _stop_editing(self) -> None:
        if self.editing_param is not None:
            self.param_editor.end()
            self.editing_param = None
        if self.editing_body:
            self.body_editor.end()
            self.editing_body = False

    @property
    def capturing_text(self) -> bool:
        return self.editing_param is not None or self.editing_body

    @property
    def current_server(self) -> ServerInfo | None:
        if not self.servers:
            return None
        return self.servers[self.state.server_index % len(self.servers)]

    def response_lines(self) -> list[str]:
        state = self.state
        if state.is_loading:
            return ["Sending..."]
        if state.error:
            return state.error.splitlines() or [state.error]
        if state.response is None:
            return []
        if state.active_tab is ResponseTab.RAW:
            return format_raw(state.response.body)
        if state.active_tab is ResponseTab.HEADERS:
            return format_headers(state.response.headers)
        return format_pretty(state.response.body)

    def build_rows(self) -> list[RequestRow]:
        endpoint = self.endpoint
        if endpoint is None:
            return []
        rows = [RequestRow(RequestRowType.SERVER, "Server")]
        for param in endpoint.parameters:
            if param.location in EDITABLE_LOCATIONS:
                key = f"{param.location}:{param.name}"
                rows.append(RequestRow(RequestRowType.PARAM, key, param_key=key))
        if json_body_schema_present(endpoint):
            rows.append(RequestRow(RequestRowType.BODY, "Body"))
        rows.append(RequestRow(RequestRowType.SEND, "Send Request"))
        rows.append(RequestRow(RequestRowType.TABS, "Response"))
        rows.extend(RequestRow(RequestRowType.RESPONSE, line) for line in self.response_lines())
        return rows

    # -- actions ----------------------------------------------------------

    def cycle_server(self) -> None:
        self.state.server_index += 1
        logger.debug("Server cycled to index {}", self.state.server_index)

    def set_tab(self, tab: ResponseTab) -> None:
        self.state.active_tab = tab

    def validate_body(self) -> bool:
        try:
            json.loads(self.state.body_text)
        except ValueError:
            self.state.body_error = "Invalid JSON"
            return False
        self.state.body_error = None
        return True

    def build_draft(self) -> RequestDraft | None:
        endpoint = self.endpoint
        if endpoint is None:
            return None
        has_body = endpoint.method in BODY_METHODS and endpoint.request_body is not None
        values = {key: value for key, value in self.state.param_values.items() if value}
        return RequestDraft(
            endpoint=endpoint,
            server=self.current_server,
            param_values=values,
            body=self.state.body_text if has_body else None,
        )

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        return self._loop

    def send(self) -> None:
        """Send the current request and wait for the response."""
        if self.state.is_loading or self.endpoint is None:
            return
        if self.sender is None:
            self.state.error = "No request sender configured (use --sender)"
            return
        draft = self.build_draft()
        if draft is None:
            return
        if draft.body is not None and not self.validate_body():
            return

        self.state.is_loading = True
        self.state.error = None
        try:
            response = self._get_loop().run_until_complete(self.sender.send(draft))
            self.state.response = response
            self.state.active_tab = self.default_tab
            logger.debug("Response {} for {} {}", response.status, draft.endpoint.method, draft.endpoint.path)
        except HttpRequestError as e:
            logger.error("Request failed for {}: {}", draft.endpoint.path, e)
            self.state.error = str(e)
            self._notify(f"Request failed: {e}", NotificationLevel.ERROR)
        except Exception as e:
            logger.error("Unexpected error sending {}: {}", draft.endpoint.path, e)
            self.state.error = f"Unknown error: {e}"
            self._notify(f"Request failed: {e}", NotificationLevel.ERROR)
        finally:
            self.state.is_loading = False

    def _notify(self, message: str, level: NotificationLevel) -> None:
        if self.notify:
            self.notify(message, level)

    # -- input ------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        if self.editing_param is not None:
            self._handle_param_edit(event)
            return True
        if self.editing_body:
            self._handle_body_edit(event)
            return True
        if self.endpoint is None:
            return False

        rows = self.build_rows()
        self.cursor = clamp_cursor(self.cursor, len(rows))
        row = rows[self.cursor] if rows else None

        if event.is_char("j") or event.key is Key.DOWN:
            self.cursor = clamp_cursor(self.cursor + 1, len(rows))
        elif event.is_char("k") or event.key is Key.UP:
            self.cursor = clamp_cursor(self.cursor - 1, len(rows))
        elif event.is_char("g") or event.key is Key.HOME:
            self.cursor = 0
        elif event.is_char("G") or event.key is Key.END:
            self.cursor = clamp_cursor(len(rows) - 1, len(rows))
        elif event.is_char("S"):
            self.cycle_server()
        elif event.is_char("s"):
            self.send()
        elif event.key is Key.CHAR and not event.ctrl and not event.meta and event.char in TAB_KEYS:
            self.set_tab(TAB_KEYS[event.char])
        elif event.key is Key.ENTER and row is not None:
            if row.type is RequestRowType.PARAM and row.param_key:
                self.editing_param = row.param_key
                self.param_editor.begin(self.state.param_values.get(row.param_key, ""))
            elif row.type is RequestRowType.SEND:
                self.send()
            elif row.type is RequestRowType.SERVER:
                self.cycle_server()
            elif row.type is RequestRowType.BODY:
                self._start_body_edit()
        elif event.is_char("e") and row is not None and row.type is RequestRowType.BODY:
            self._start_body_edit()
        else:
            return False
        return True

    def _start_body_edit(self) -> None:
        self.editing_body = True
        self._body_scroll = 0
        self.body_editor.begin(self.state.body_text)

    def _handle_param_edit(self, event: KeyEvent) -> None:
        action = self.param_editor.handle_key(event)
        if action is EditorAction.HANDLED:
            return
        value = self.param_editor.end()
        if action is EditorAction.COMMIT and self.editing_param is not None:
            self.state.param_values[self.editing_param] = value
        self.editing_param = None

    def _handle_body_edit(self, event: KeyEvent) -> None:
        action = self.body_editor.handle_key(event)
        if action is EditorAction.HANDLED:
            return
        self.state.body_text = self.body_editor.end()
        self.editing_body = False
        self.validate_body()

    def get_action_bar(self) -> str:
        if self.editing_param is not None:
            return "[Enter] Save  [Esc] Cancel"
        if self.editing_body:
            if self.body_editor.mode is EditorMode.NORMAL:
                return "[i/a] Insert  [Enter/Esc] Save"
            return "[Esc] Normal mode"
        if self.endpoint is None:
            return ""
        return "[Enter] Edit/Send  [e] Body  [s] Send  [S] Server  [1/2/3] Tab"

    # -- rendering --------------------------------------------------------

    def _row_line(self, row: RequestRow, selected: bool, width: int) -> StyledLine:
        attr = selection_attr(selected, self.focused)
        state = self.state
        if row.type is RequestRowType.SERVER:
            server = self.current_server
            url = server.resolved_url() if server else "(no servers)"
            return [Segment("Server  ", attr | curses.A_BOLD), Segment(url, attr)]
        if row.type is RequestRowType.PARAM and row.param_key:
            if row.param_key == self.editing_param:
                return input_line(f"{row.label} = ", self.param_editor.text, self.param_editor.cursor)
            value = state.param_values.get(row.param_key, "")
            return [Segment(f"{row.label} = ", attr), Segment(value or "(empty)", attr | (0 if value else curses.A_DIM))]
        if row.type is RequestRowType.BODY:
            first = truncate_text(state.body_text, max(1, width - 8))
            line = [Segment("Body  ", attr | curses.A_BOLD), Segment(first, attr)]
            if state.body_error:
                line.append(Segment(f"  {state.body_error}", error_attr()))
            return line
        if row.type is RequestRowType.SEND:
            label = "[ Sending... ]" if state.is_loading else "[ Send Request ]"
            return [Segment(label, attr | curses.A_BOLD)]
        if row.type is RequestRowType.TABS:
            segments: list[Segment] = []
            for key, tab in TAB_KEYS.items():
                tab_attr = curses.A_BOLD | curses.A_UNDERLINE if tab is state.active_tab else curses.A_DIM
                segments.append(Segment(f"{key} {TAB_LABELS[tab]}", attr | tab_attr))
                segments.append(Segment("  ", attr))
            if state.response is not None:
                response = state.response
                segments.append(Segment(f"{response.status} {response.status_text}", status_attr(response.status)))
                segments.append(Segment(f"  {response.duration_ms:.0f}ms", curses.A_DIM))
            return segments
        line_attr = error_attr() if state.error else curses.A_NORMAL
        return [Segment(row.label, attr | line_attr)]

    def _header_lines(self) -> list[StyledLine]:
        lines: list[StyledLine] = [text_line(self.title, curses.A_BOLD if self.focused else curses.A_DIM)]
        if self.endpoint is not None:
            lines.append(
                [Segment(self.endpoint.method.upper(), method_attr(self.endpoint.method)), Segment(f" {self.endpoint.path}")]
            )
        return lines

    def _body_editor_lines(self, height: int, header: list[StyledLine]) -> list[StyledLine]:
        editor = self.body_editor
        mode = "-- NORMAL --" if editor.mode is EditorMode.NORMAL else "-- INSERT --"
        lines = header + [text_line(f"Body {mode}", curses.A_BOLD)]
        body = multiline_input(editor.text, editor.cursor)
        cursor_line = editor.text.count("\n", 0, editor.cursor)
        viewport = compute_viewport(len(body), cursor_line, len(lines), height, self._body_scroll)
        self._body_scroll = viewport.scroll_offset
        lines.extend(self.windowed(body, viewport))
        return lines

    def get_styled_lines(self, width: int, height: int) -> list[StyledLine]:
        header = self._header_lines()
        if self.endpoint is None:
            return header + [text_line("No endpoint selected", curses.A_DIM)]
        if self.editing_body:
            return self._body_editor_lines(height, header)
        rows = self.build_rows()
        self.cursor = clamp_cursor(self.cursor, len(rows))
        viewport = self.update_viewport(len(rows), self.cursor, height, reserved_lines=len(header))
        row_lines = [self._row_line(row, index == self.cursor, width) for index, row in enumerate(rows)]
        return header + self.windowed(row_lines, viewport)

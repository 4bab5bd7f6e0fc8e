"""Main TUI application: three panels, focus cycling and overlays."""

import asyncio
import curses
import math
import time
from dataclasses import dataclass

from apiterm.cli.collaborators import RequestSender
from apiterm.cli.models import Endpoint, ParsedSpec
from apiterm.cli.tui.keys import decode_codes, drain
from apiterm.cli.tui.scheduler import DeadlineScheduler
from apiterm.cli.tui.state import Intent, IntentType, ShellState, reduce_state
from apiterm.cli.tui.theme import error_attr, focus_border_attr, init_colors
from apiterm.cli.tui.types import CursesWindow, Key, KeyEvent, NotificationLevel, PanelId, ResponseTab
from apiterm.cli.tui.views.base import BaseView
from apiterm.cli.tui.views.detail import EndpointDetailView
from apiterm.cli.tui.views.endpoints import EndpointsView
from apiterm.cli.tui.views.help import HelpView
from apiterm.cli.tui.views.request import RequestView
from apiterm.cli.tui.widgets.footer import build_hints
from apiterm.config.schema import AppConfig
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

# Column shares for endpoints / detail / request
PANEL_WIDTHS: tuple[tuple[PanelId, float], ...] = (
    (PanelId.ENDPOINTS, 0.25),
    (PanelId.DETAIL, 0.38),
    (PanelId.REQUEST, 0.37),
)

# Notification durations in seconds
NOTIFICATION_DURATION_INFO = 3.0
NOTIFICATION_DURATION_ERROR = 5.0


@dataclass
class Notification:
    """A temporary notification message."""

    text: str
    level: NotificationLevel
    expires_at: float


@dataclass(frozen=True)
class PanelRect:
    panel: PanelId
    col: int
    width: int


def panel_layout(width: int, fullscreen: bool, focused: PanelId) -> list[PanelRect]:
    """Split the screen width into panel columns (one column when fullscreen)."""
    if fullscreen:
        return [PanelRect(focused, 0, width)]
    rects: list[PanelRect] = []
    col = 0
    for index, (panel, share) in enumerate(PANEL_WIDTHS):
        # Last column takes the remainder so rounding never leaves a gap.
        panel_width = width - col if index == len(PANEL_WIDTHS) - 1 else int(width * share)
        rects.append(PanelRect(panel, col, panel_width))
        col += panel_width
    return rects


class ApitermApp:
    """Terminal browser for one parsed API description."""

    def __init__(
        self,
        spec: ParsedSpec | None,
        sender: RequestSender | None = None,
        config: AppConfig | None = None,
        load_error: str | None = None,
    ):
        self.config = config or AppConfig()
        ui = self.config.ui
        self.spec = spec
        self.running = True
        self.poll_interval_ms = ui.poll_interval_ms
        self.state = ShellState(focused=PanelId(ui.start_panel))
        self.scheduler = DeadlineScheduler()
        self.notification: Notification | None = None
        self._loop = asyncio.new_event_loop()
        self._dirty = True

        flush_delay = ui.flush_delay_ms / 1000
        self.endpoints_view = EndpointsView(
            on_select=self._on_select_endpoint,
            scheduler=self.scheduler,
            flush_delay=flush_delay,
        )
        self.detail_view = EndpointDetailView(max_depth=ui.max_schema_depth)
        self.request_view = RequestView(
            sender=sender,
            loop=self._loop,
            scheduler=self.scheduler,
            flush_delay=flush_delay,
            default_tab=ResponseTab(ui.default_response_tab),
            notify=self.notify,
        )
        self.help_view = HelpView()
        self.views: dict[PanelId, BaseView] = {
            PanelId.ENDPOINTS: self.endpoints_view,
            PanelId.DETAIL: self.detail_view,
            PanelId.REQUEST: self.request_view,
        }

        if spec is not None:
            self.endpoints_view.set_tag_groups(spec.tag_groups)
            self.request_view.set_servers(spec.servers)
        if load_error:
            self.endpoints_view.set_error(load_error)
        self._sync_focus()

    # -- state ------------------------------------------------------------

    def _dispatch(self, intent: Intent) -> None:
        self.state = reduce_state(self.state, intent)

    @property
    def focused_view(self) -> BaseView:
        return self.views[self.state.focused]

    def _sync_focus(self) -> None:
        for panel, view in self.views.items():
            view.focused = panel is self.state.focused

    def _sync_text_capture(self) -> None:
        capturing = self.focused_view.capturing_text
        if capturing != self.state.text_capture:
            self._dispatch(Intent(IntentType.SET_TEXT_CAPTURE, {"capturing": capturing}))

    def _on_select_endpoint(self, endpoint: Endpoint) -> None:
        self._dispatch(Intent(IntentType.SELECT_ENDPOINT, {"endpoint_id": endpoint.id}))
        self.detail_view.set_endpoint(endpoint)
        self.request_view.set_endpoint(endpoint)

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        """Show a temporary notification."""
        duration = NOTIFICATION_DURATION_ERROR if level is NotificationLevel.ERROR else NOTIFICATION_DURATION_INFO
        self.notification = Notification(message, level, time.time() + duration)
        self._dirty = True

    def cleanup(self) -> None:
        if not self._loop.is_closed():
            self._loop.close()

    # -- input ------------------------------------------------------------

    def _handle_key(self, event: KeyEvent) -> None:
        """Route one input event: overlays first, then globals, then the focused panel."""
        logger.trace("Key event {} {!r} focus={}", event.key.value, event.char, self.state.focused.value)
        if event.key is Key.RESIZE:
            return

        if event.is_ctrl("c"):
            self._quit()
            return

        if self.state.show_help:
            if event.is_char("?") or event.key is Key.ESCAPE:
                self._dispatch(Intent(IntentType.CLOSE_HELP))
            elif event.is_char("q"):
                self._quit()
            else:
                self.help_view.handle_key(event)
            return

        view = self.focused_view
        if self.state.text_capture or view.capturing_text:
            view.handle_key(event)
            self._sync_text_capture()
            return

        if event.key is Key.CHAR and len(event.char) > 1:
            # A burst that arrived while nothing captured text: replay key by key.
            for ch in event.char:
                self._handle_key(KeyEvent(Key.CHAR, char=ch))
                if not self.running:
                    return
            return

        if event.is_char("q"):
            self._quit()
        elif event.key is Key.TAB:
            self._dispatch(Intent(IntentType.FOCUS_NEXT))
            self._sync_focus()
        elif event.key is Key.BACKTAB:
            self._dispatch(Intent(IntentType.FOCUS_PREV))
            self._sync_focus()
        elif event.is_char("?"):
            self._dispatch(Intent(IntentType.TOGGLE_HELP))
        elif event.is_char("f"):
            self._dispatch(Intent(IntentType.TOGGLE_FULLSCREEN))
        else:
            view.handle_key(event)
        self._sync_text_capture()

    def _quit(self) -> None:
        logger.debug("Quit requested")
        self.running = False

    # -- main loop --------------------------------------------------------

    def run(self, stdscr: CursesWindow) -> None:
        """Main event loop.

        Waits for input no longer than the next scheduled editor flush.
        Every key already waiting is read in one go, so a paste is handled as
        one burst. The screen redraws only when something changed and no
        editor flush is outstanding.

        Args:
            stdscr: Curses screen object
        """
        curses.curs_set(0)
        curses.raw()
        if hasattr(curses, "set_escdelay"):
            curses.set_escdelay(25)
        init_colors()
        stdscr.keypad(True)

        self._render(stdscr)
        try:
            while self.running:
                if self.scheduler.run_due():
                    self._dirty = True

                stdscr.timeout(self._poll_timeout_ms())
                key = stdscr.getch()
                if key != -1:
                    stdscr.nodelay(True)
                    codes = drain(key, stdscr.getch)
                    for event in decode_codes(codes, coalesce=self.state.text_capture):
                        self._handle_key(event)
                        if not self.running:
                            break
                    self._dirty = True
                    if self.scheduler.run_due():
                        self._dirty = True

                if self.notification and time.time() > self.notification.expires_at:
                    self.notification = None
                    self._dirty = True

                if self._dirty and not self.scheduler.pending:
                    self._render(stdscr)
                    self._dirty = False
        finally:
            self.cleanup()

    def _poll_timeout_ms(self) -> int:
        """Wait for input no longer than the next scheduled flush allows."""
        due = self.scheduler.time_until_due()
        if due is None:
            return self.poll_interval_ms
        return max(0, min(self.poll_interval_ms, math.ceil(due * 1000)))

    # -- rendering --------------------------------------------------------

    def _render(self, stdscr: CursesWindow) -> None:
        """Render header, panels and footer.

        Args:
            stdscr: Curses screen object
        """
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        if height < 3 or width < 10:
            stdscr.refresh()
            return

        self._render_title(stdscr, width)
        body_top = 1
        body_height = height - 2

        if self.state.show_help:
            self._render_panel(stdscr, self.help_view, body_top, 0, body_height, width, True)
        else:
            for rect in panel_layout(width, self.state.fullscreen, self.state.focused):
                view = self.views[rect.panel]
                focused = rect.panel is self.state.focused
                self._render_panel(stdscr, view, body_top, rect.col, body_height, rect.width, focused)

        view = self.help_view if self.state.show_help else self.focused_view
        hints = build_hints(view.get_action_bar(), width - 1, capturing=self.state.text_capture)
        try:
            stdscr.addstr(height - 1, 0, hints, curses.A_DIM)
        except curses.error:
            pass

        self._render_notification(stdscr, width, body_top)
        stdscr.refresh()

    def _render_title(self, stdscr: CursesWindow, width: int) -> None:
        if self.spec is not None:
            info = self.spec.info
            title = f" {info.title} v{info.version}"
        else:
            title = " apiterm"
        try:
            stdscr.addstr(0, 0, title[: width - 1], curses.A_BOLD)
        except curses.error:
            pass

    def _render_panel(
        self,
        stdscr: CursesWindow,
        view: BaseView,
        top: int,
        left: int,
        height: int,
        width: int,
        focused: bool,
    ) -> None:
        if height < 3 or width < 4:
            return
        attr = focus_border_attr(focused)
        horizontal = "─" * (width - 2)
        try:
            stdscr.addstr(top, left, "┌" + horizontal + "┐", attr)
            for row in range(top + 1, top + height - 1):
                stdscr.addstr(row, left, "│", attr)
                stdscr.addstr(row, left + width - 1, "│", attr)
            # Writing the bottom-right cell of the screen raises after drawing; ignore it.
            stdscr.addstr(top + height - 1, left, "└" + horizontal + "┘", attr)
        except curses.error:
            pass
        view.render(stdscr, top + 1, left + 1, height - 2, width - 2)

    def _render_notification(self, stdscr: CursesWindow, width: int, row: int) -> None:
        """Render notification toast if active.

        Args:
            stdscr: Curses screen object
            width: Screen width
            row: Row to render notification at
        """
        if not self.notification:
            return
        if time.time() > self.notification.expires_at:
            self.notification = None
            return

        text = self.notification.text[: max(1, width - 6)]
        box_width = len(text) + 4
        start_col = max(0, (width - box_width) // 2)
        is_error = self.notification.level is NotificationLevel.ERROR
        border_attr = error_attr() if is_error else curses.A_NORMAL
        if is_error:
            text_attr = error_attr()
        elif self.notification.level is NotificationLevel.SUCCESS:
            text_attr = curses.A_BOLD
        else:
            text_attr = curses.A_NORMAL
        try:
            stdscr.addstr(row, start_col, "┌" + "─" * (box_width - 2) + "┐", border_attr)
            stdscr.addstr(row + 1, start_col, "│", border_attr)
            stdscr.addstr(row + 1, start_col + 1, f" {text} ", text_attr)
            stdscr.addstr(row + 1, start_col + box_width - 1, "│", border_attr)
            stdscr.addstr(row + 2, start_col, "└" + "─" * (box_width - 2) + "┘", border_attr)
        except curses.error:
            pass  # Ignore if can't render (screen too small)

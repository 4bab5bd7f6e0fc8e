"""Modal line editor used for filters, parameter values and request bodies.

Insert mode handles typing and readline-style motions. Multi-line editors
also have a normal mode with vi-style motions; single-line editors commit on
Enter and cancel on Escape.

Typed characters go into the authoritative buffer immediately, but the
visible snapshot (``text``/``cursor``) is refreshed by one scheduled flush per
burst, so a paste re-renders once instead of once per character. Every other
action flushes first.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from apiterm.cli.tui.scheduler import FlushScheduler
from apiterm.cli.tui.types import Key, KeyEvent
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_FLUSH_DELAY = 0.016


class EditorMode(str, Enum):
    INSERT = "insert"
    NORMAL = "normal"


class EditorAction(str, Enum):
    HANDLED = "handled"
    COMMIT = "commit"
    CANCEL = "cancel"


def is_word_char(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def next_word_boundary(text: str, pos: int) -> int:
    """Index of the start of the next word (or ``len(text)``)."""
    i = pos
    if i >= len(text):
        return len(text)
    while i < len(text) and is_word_char(text[i]):
        i += 1
    while i < len(text) and not is_word_char(text[i]):
        i += 1
    return i


def prev_word_boundary(text: str, pos: int) -> int:
    """Index of the start of the word before ``pos``."""
    i = pos
    while i > 0 and not is_word_char(text[i - 1]):
        i -= 1
    while i > 0 and is_word_char(text[i - 1]):
        i -= 1
    return i


class LineEditor:
    """Editing session over a text buffer.

    Call ``begin`` to start, feed ``handle_key`` with events, and call
    ``end`` once a COMMIT or CANCEL came back.
    """

    def __init__(
        self,
        multiline: bool = False,
        scheduler: FlushScheduler | None = None,
        flush_delay: float = DEFAULT_FLUSH_DELAY,
        on_flush: Callable[[str], None] | None = None,
    ):
        self.multiline = multiline
        self.scheduler = scheduler
        self.flush_delay = flush_delay
        # Called with the visible text each time the snapshot is refreshed.
        self.on_flush = on_flush
        self.active = False
        self.mode = EditorMode.INSERT
        # Visible snapshot.
        self.text = ""
        self.cursor = 0
        # Authoritative buffer.
        self._buffer = ""
        self._pos = 0
        self._flush_pending = False

    @property
    def value(self) -> str:
        """Latest buffer content, including input not yet flushed."""
        return self._buffer

    @property
    def flush_pending(self) -> bool:
        return self._flush_pending

    def begin(self, value: str = "") -> None:
        """Start a session with ``value``, cursor at the end, insert mode."""
        self._cancel_scheduled()
        self._buffer = value
        self._pos = len(value)
        self.mode = EditorMode.INSERT
        self.active = True
        self.flush()

    def end(self) -> str:
        """Finish the session and return the final text."""
        self.flush()
        final = self._buffer
        self.active = False
        self.mode = EditorMode.INSERT
        self._buffer = ""
        self._pos = 0
        self.text = ""
        self.cursor = 0
        return final

    def flush(self) -> None:
        """Apply buffered input to the visible snapshot now."""
        self._cancel_scheduled()
        self.text = self._buffer
        self.cursor = self._pos
        self._notify_flush()

    def _cancel_scheduled(self) -> None:
        if self._flush_pending and self.scheduler is not None:
            self.scheduler.cancel()
        self._flush_pending = False

    def _scheduled_flush(self) -> None:
        self._flush_pending = False
        self.text = self._buffer
        self.cursor = self._pos
        self._notify_flush()

    def _notify_flush(self) -> None:
        if self.on_flush is not None and self.active:
            self.on_flush(self.text)

    def _schedule_flush(self) -> None:
        if self.scheduler is None:
            self.flush()
            return
        if not self._flush_pending:
            self._flush_pending = True
            self.scheduler.schedule(self.flush_delay, self._scheduled_flush)

    def _insert(self, chars: str) -> None:
        self._buffer = self._buffer[: self._pos] + chars + self._buffer[self._pos :]
        self._pos += len(chars)
        self._schedule_flush()

    def _delete_back(self, to_word: bool) -> None:
        if self._pos == 0:
            return
        start = prev_word_boundary(self._buffer, self._pos) if to_word else self._pos - 1
        self._buffer = self._buffer[:start] + self._buffer[self._pos :]
        self._pos = start

    def _last_char_index(self) -> int:
        return max(0, len(self._buffer) - 1)

    def handle_key(self, event: KeyEvent) -> EditorAction:
        if not self.active:
            return EditorAction.HANDLED
        if self.mode is EditorMode.NORMAL:
            return self._handle_normal(event)
        return self._handle_insert(event)

    def _handle_insert(self, event: KeyEvent) -> EditorAction:
        if event.key is Key.ENTER:
            if self.multiline:
                self._insert("\n")
                return EditorAction.HANDLED
            self.flush()
            logger.debug("Editor commit ({} chars)", len(self._buffer))
            return EditorAction.COMMIT

        if event.key is Key.ESCAPE:
            self.flush()
            if not self.multiline:
                logger.debug("Editor cancel")
                return EditorAction.CANCEL
            self.mode = EditorMode.NORMAL
            self._pos = min(self._pos, self._last_char_index())
            self.flush()
            return EditorAction.HANDLED

        if event.key in (Key.BACKSPACE, Key.DELETE):
            self._delete_back(to_word=event.meta or event.ctrl)
            self.flush()
            return EditorAction.HANDLED

        if event.is_ctrl("w"):
            self._delete_back(to_word=True)
            self.flush()
            return EditorAction.HANDLED

        if event.key is Key.LEFT:
            if event.meta or event.ctrl:
                self._pos = prev_word_boundary(self._buffer, self._pos)
            else:
                self._pos = max(0, self._pos - 1)
            self.flush()
            return EditorAction.HANDLED

        if event.key is Key.RIGHT:
            if event.meta or event.ctrl:
                self._pos = next_word_boundary(self._buffer, self._pos)
            else:
                self._pos = min(len(self._buffer), self._pos + 1)
            self.flush()
            return EditorAction.HANDLED

        if event.is_ctrl("a") or event.key is Key.HOME:
            self._pos = 0
            self.flush()
            return EditorAction.HANDLED

        if event.is_ctrl("e") or event.key is Key.END:
            self._pos = len(self._buffer)
            self.flush()
            return EditorAction.HANDLED

        if event.is_printable:
            self._insert(event.char)
        return EditorAction.HANDLED

    def _handle_normal(self, event: KeyEvent) -> EditorAction:
        self.flush()
        if event.key in (Key.ENTER, Key.ESCAPE):
            logger.debug("Editor commit ({} chars)", len(self._buffer))
            return EditorAction.COMMIT

        if event.is_char("h") or event.key is Key.LEFT:
            self._pos = max(0, self._pos - 1)
        elif event.is_char("l") or event.key is Key.RIGHT:
            self._pos = min(self._last_char_index(), self._pos + 1)
        elif event.is_char("w"):
            self._pos = min(next_word_boundary(self._buffer, self._pos), self._last_char_index())
        elif event.is_char("b"):
            self._pos = prev_word_boundary(self._buffer, self._pos)
        elif event.is_char("0"):
            self._pos = 0
        elif event.is_char("$"):
            self._pos = self._last_char_index()
        elif event.is_char("x"):
            if self._pos < len(self._buffer):
                self._buffer = self._buffer[: self._pos] + self._buffer[self._pos + 1 :]
                self._pos = min(self._pos, self._last_char_index())
        elif event.is_char("i"):
            self.mode = EditorMode.INSERT
        elif event.is_char("a"):
            self._pos = min(len(self._buffer), self._pos + 1)
            self.mode = EditorMode.INSERT
        elif event.is_char("I"):
            self._pos = 0
            self.mode = EditorMode.INSERT
        elif event.is_char("A"):
            self._pos = len(self._buffer)
            self.mode = EditorMode.INSERT
        self.flush()
        return EditorAction.HANDLED

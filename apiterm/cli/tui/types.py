"""Shared TUI types."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


class Key(str, Enum):
    """Logical key identifiers produced by the key decoder."""

    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    TAB = "tab"
    BACKTAB = "backtab"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    RESIZE = "resize"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KeyEvent:
    """One decoded input event.

    ``char`` holds the typed text for CHAR events. It may be longer than one
    character when a burst of input (a paste) was coalesced.
    """

    key: Key
    char: str = ""
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    def is_char(self, value: str) -> bool:
        """Return True for an unmodified press of exactly ``value``."""
        return self.key is Key.CHAR and self.char == value and not self.ctrl and not self.meta

    def is_ctrl(self, letter: str) -> bool:
        return self.key is Key.CHAR and self.ctrl and self.char == letter

    @property
    def is_printable(self) -> bool:
        return self.key is Key.CHAR and not self.ctrl and not self.meta and bool(self.char)


class PanelId(str, Enum):
    """Focusable panels, in Tab order."""

    ENDPOINTS = "endpoints"
    DETAIL = "detail"
    REQUEST = "request"


class RowKind(str, Enum):
    """Flattened row variants."""

    GROUP = "group"
    LEAF = "leaf"
    MARKER = "marker"


class MarkerKind(str, Enum):
    """Structural marker rows that are neither headers nor selectable content."""

    COMPOSITION = "composition"
    TRUNCATED = "truncated"
    MEDIA_TYPE = "media_type"
    DETAIL = "detail"
    TEXT = "text"


class NotificationLevel(str, Enum):
    """Notification severity levels."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class ResponseTab(str, Enum):
    PRETTY = "pretty"
    RAW = "raw"
    HEADERS = "headers"


CursesWindow: TypeAlias = curses.window


@dataclass(frozen=True)
class Segment:
    """A run of text drawn with one curses attribute."""

    text: str
    attr: int = 0


StyledLine: TypeAlias = list[Segment]


def plain_text(line: StyledLine) -> str:
    return "".join(segment.text for segment in line)

"""Decode curses key codes into KeyEvents.

Curses delivers one integer per byte or function key. A burst of printable
bytes arriving within one poll (a paste, or fast typing) can be coalesced into
a single CHAR event so a text editor applies it in one step.
"""

from __future__ import annotations

import curses
from typing import Callable

from apiterm.cli.tui.types import Key, KeyEvent
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

ESC = 27
# Upper bound on codes drained per poll; a larger paste continues next poll.
MAX_DRAIN = 4096

_SPECIAL_KEYS: dict[int, Key] = {
    curses.KEY_ENTER: Key.ENTER,
    10: Key.ENTER,
    13: Key.ENTER,
    9: Key.TAB,
    curses.KEY_BTAB: Key.BACKTAB,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    127: Key.BACKSPACE,
    8: Key.BACKSPACE,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_RESIZE: Key.RESIZE,
}

# ncurses names for modified arrows: suffix 3 = Alt, 5 = Ctrl, 2 = Shift.
_MODIFIED_ARROWS: dict[str, Key] = {
    "kLFT": Key.LEFT,
    "kRIT": Key.RIGHT,
    "kUP": Key.UP,
    "kDN": Key.DOWN,
}


def _keyname(code: int) -> str:
    try:
        return curses.keyname(code).decode("ascii", "replace")
    except (curses.error, ValueError):
        return ""


def _decode_modified_arrow(code: int, keyname: Callable[[int], str]) -> KeyEvent | None:
    name = keyname(code)
    for prefix, key in _MODIFIED_ARROWS.items():
        if name.startswith(prefix) and name[len(prefix) :].isdigit():
            modifier = int(name[len(prefix) :])
            return KeyEvent(key, ctrl=modifier in (5, 6, 7), meta=modifier in (3, 4, 7), shift=modifier in (2, 4, 6))
    return None


def decode_key(code: int, keyname: Callable[[int], str] = _keyname) -> KeyEvent:
    """Decode a single curses code (no ESC-prefix handling)."""
    special = _SPECIAL_KEYS.get(code)
    if special is not None:
        return KeyEvent(special)
    if code == ESC:
        return KeyEvent(Key.ESCAPE)
    if 1 <= code <= 26:
        return KeyEvent(Key.CHAR, char=chr(code + 96), ctrl=True)
    if 32 <= code <= 255:
        # Bytes above 127 that did not form valid UTF-8 stay as literal characters.
        return KeyEvent(Key.CHAR, char=chr(code))
    if code > 255:
        modified = _decode_modified_arrow(code, keyname)
        if modified is not None:
            return modified
    logger.trace("Unmapped key code {}", code)
    return KeyEvent(Key.UNKNOWN)


def _is_text_byte(code: int) -> bool:
    return 32 <= code <= 126 or 128 <= code <= 255


def _decode_text(raw: list[int]) -> str:
    data = bytes(raw)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def drain(first: int, getch: Callable[[], int], limit: int = MAX_DRAIN) -> list[int]:
    """Collect ``first`` plus every code ``getch`` returns before it reports -1."""
    codes = [first]
    while len(codes) < limit:
        code = getch()
        if code == -1:
            break
        codes.append(code)
    return codes


def decode_codes(
    codes: list[int],
    coalesce: bool = False,
    keyname: Callable[[int], str] = _keyname,
) -> list[KeyEvent]:
    """Turn raw codes into events, in arrival order.

    ESC followed by another code is read as that key with the meta modifier.
    Runs of text bytes are UTF-8 decoded; with ``coalesce`` each run becomes
    one CHAR event, otherwise one event per decoded character.
    """
    events: list[KeyEvent] = []
    i = 0
    while i < len(codes):
        code = codes[i]
        if code == ESC and i + 1 < len(codes) and codes[i + 1] != ESC:
            inner = decode_key(codes[i + 1], keyname)
            events.append(KeyEvent(inner.key, char=inner.char, ctrl=inner.ctrl, meta=True, shift=inner.shift))
            i += 2
            continue
        if _is_text_byte(code):
            j = i
            while j < len(codes) and _is_text_byte(codes[j]):
                j += 1
            text = _decode_text(codes[i:j])
            if coalesce:
                events.append(KeyEvent(Key.CHAR, char=text))
            else:
                events.extend(KeyEvent(Key.CHAR, char=ch) for ch in text)
            i = j
            continue
        events.append(decode_key(code, keyname))
        i += 1
    return events

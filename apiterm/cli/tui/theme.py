"""Colors and styling for the TUI.

Pair IDs are fixed; ``init_colors`` must run after curses is initialized.
"""

import curses

# HTTP method pair IDs
METHOD_COLORS: dict[str, int] = {
    "get": 1,
    "post": 2,
    "put": 3,
    "patch": 4,
    "delete": 5,
    "options": 6,
    "head": 6,
    "trace": 6,
}

# Response status classes
STATUS_COLORS: dict[str, int] = {
    "2": 7,  # Green
    "3": 8,  # Cyan
    "4": 3,  # Yellow
    "5": 5,  # Red
}

FOCUS_BORDER_PAIR = 9
ERROR_PAIR = 5
SUCCESS_PAIR = 7
MUTED_PAIR = 10

_colors_ready = False


def init_colors() -> None:
    """Initialize curses color pairs on the terminal's default background."""
    global _colors_ready  # noqa: PLW0603
    curses.start_color()
    curses.use_default_colors()

    curses.init_pair(1, curses.COLOR_GREEN, -1)
    curses.init_pair(2, curses.COLOR_BLUE, -1)
    curses.init_pair(3, curses.COLOR_YELLOW, -1)
    curses.init_pair(4, curses.COLOR_MAGENTA, -1)
    curses.init_pair(5, curses.COLOR_RED, -1)
    curses.init_pair(6, curses.COLOR_WHITE, -1)
    curses.init_pair(7, curses.COLOR_GREEN, -1)
    curses.init_pair(8, curses.COLOR_CYAN, -1)
    curses.init_pair(9, curses.COLOR_CYAN, -1)
    # 8 = bright black on 16-color terminals; fall back to white
    curses.init_pair(10, 8 if curses.COLORS > 8 else curses.COLOR_WHITE, -1)
    _colors_ready = True


def _pair(pair_id: int) -> int:
    if not _colors_ready:
        return 0
    return curses.color_pair(pair_id)


def method_attr(method: str) -> int:
    """Attribute for an HTTP method label."""
    return _pair(METHOD_COLORS.get(method.lower(), 6)) | curses.A_BOLD


def status_attr(status: int | str) -> int:
    """Attribute for a response status code, by class (2xx, 3xx, ...)."""
    pair_id = STATUS_COLORS.get(str(status)[:1])
    if pair_id is None:
        return curses.A_NORMAL
    return _pair(pair_id) | curses.A_BOLD


def focus_border_attr(focused: bool) -> int:
    if focused:
        return _pair(FOCUS_BORDER_PAIR) | curses.A_BOLD
    return curses.A_DIM


def error_attr() -> int:
    return _pair(ERROR_PAIR) | curses.A_BOLD


def muted_attr() -> int:
    return _pair(MUTED_PAIR) | curses.A_DIM

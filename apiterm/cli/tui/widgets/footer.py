"""Bottom hints line: panel actions on the left, global keys on the right."""

from __future__ import annotations

GLOBAL_HINTS = "[Tab] Panel  [f] Fullscreen  [?] Help  [q] Quit"
CAPTURE_HINTS = "[Enter] Apply  [Esc] Cancel"


def build_hints(action_bar: str, width: int, capturing: bool = False) -> str:
    """Compose the hints line for the current panel, right-aligning global keys."""
    right = CAPTURE_HINTS if capturing else GLOBAL_HINTS
    left = action_bar
    gap = width - len(left) - len(right)
    if gap >= 2:
        return left + " " * gap + right
    if left:
        return left[:width]
    return right[:width]

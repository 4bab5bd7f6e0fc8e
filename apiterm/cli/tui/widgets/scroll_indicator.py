"""Overflow indicator lines drawn above and below a scrolled list."""

from __future__ import annotations

import curses

from apiterm.cli.tui.types import Segment, StyledLine

MORE_ABOVE = "-- more above --"
MORE_BELOW = "-- more below --"


def scroll_indicator(direction: str) -> StyledLine:
    """Return the indicator line for ``"up"`` or ``"down"``."""
    text = MORE_ABOVE if direction == "up" else MORE_BELOW
    return [Segment(text, curses.A_DIM)]

"""Shell state model and reducer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypedDict, cast

from apiterm.cli.tui.types import PanelId
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

PANEL_ORDER: tuple[PanelId, ...] = (PanelId.ENDPOINTS, PanelId.DETAIL, PanelId.REQUEST)


@dataclass
class ShellState:
    """Application-level state shared by the shell and its panels."""

    focused: PanelId = PanelId.ENDPOINTS
    show_help: bool = False
    fullscreen: bool = False
    # Set while the focused panel captures free text; global keys go to the panel.
    text_capture: bool = False
    selected_endpoint_id: str | None = None


class IntentType(str, Enum):
    """Intent identifiers for reducer-driven state updates."""

    FOCUS_NEXT = "focus_next"
    FOCUS_PREV = "focus_prev"
    FOCUS_PANEL = "focus_panel"
    TOGGLE_HELP = "toggle_help"
    CLOSE_HELP = "close_help"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    SET_TEXT_CAPTURE = "set_text_capture"
    SELECT_ENDPOINT = "select_endpoint"


class IntentPayload(TypedDict, total=False):
    panel: str
    capturing: bool
    endpoint_id: str | None


@dataclass(frozen=True)
class Intent:
    """State transition request."""

    type: IntentType
    payload: IntentPayload | None = None


def _cycle(current: PanelId, step: int) -> PanelId:
    index = PANEL_ORDER.index(current)
    return PANEL_ORDER[(index + step) % len(PANEL_ORDER)]


def reduce_state(state: ShellState, intent: Intent) -> ShellState:
    """Apply an intent to shell state (mutates and returns ``state``)."""
    payload = intent.payload or cast(IntentPayload, {})
    t = intent.type

    if t is IntentType.FOCUS_NEXT or t is IntentType.FOCUS_PREV:
        if state.text_capture:
            return state
        state.focused = _cycle(state.focused, 1 if t is IntentType.FOCUS_NEXT else -1)
        logger.debug("Focus moved to {}", state.focused.value)
        return state

    if t is IntentType.FOCUS_PANEL:
        panel = payload.get("panel")
        if panel and not state.text_capture:
            state.focused = PanelId(panel)
        return state

    if t is IntentType.TOGGLE_HELP:
        state.show_help = not state.show_help
        return state

    if t is IntentType.CLOSE_HELP:
        state.show_help = False
        return state

    if t is IntentType.TOGGLE_FULLSCREEN:
        state.fullscreen = not state.fullscreen
        return state

    if t is IntentType.SET_TEXT_CAPTURE:
        state.text_capture = bool(payload.get("capturing", False))
        return state

    if t is IntentType.SELECT_ENDPOINT:
        state.selected_endpoint_id = payload.get("endpoint_id")
        return state

    return state

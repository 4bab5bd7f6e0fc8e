"""Unit tests for small TUI widgets, the help overlay and the flush scheduler."""

import pytest

from apiterm.cli.tui.scheduler import DeadlineScheduler
from apiterm.cli.tui.types import Key, KeyEvent, plain_text
from apiterm.cli.tui.views.help import HelpView
from apiterm.cli.tui.widgets.footer import CAPTURE_HINTS, GLOBAL_HINTS, build_hints
from apiterm.cli.tui.widgets.text_input import input_line, multiline_input


@pytest.mark.unit
def test_hints_right_align_global_keys():
    line = build_hints("[/] Filter", 80)
    assert line.startswith("[/] Filter")
    assert line.endswith(GLOBAL_HINTS)
    assert len(line) == 80


@pytest.mark.unit
def test_hints_switch_while_capturing():
    assert build_hints("", 60, capturing=True).endswith(CAPTURE_HINTS)


@pytest.mark.unit
def test_hints_prefer_panel_actions_when_narrow():
    assert build_hints("[Enter] Save", 20) == "[Enter] Save"


@pytest.mark.unit
def test_input_line_marks_cursor_cell():
    assert plain_text(input_line("> ", "abc", 1)) == "> abc"
    assert plain_text(input_line("> ", "abc", 3)) == "> abc "


@pytest.mark.unit
def test_multiline_input_one_line_per_row():
    lines = multiline_input("{\n}", 2)
    assert [plain_text(line) for line in lines] == ["{", "}"]
    assert len(lines[1]) == 3


@pytest.mark.unit
def test_help_lists_sections_and_scrolls():
    view = HelpView()
    lines = view.get_render_lines(60, 100)
    assert lines[0] == "Keyboard Shortcuts"
    assert "Global" in lines
    assert any("Filter endpoints" in line for line in lines)

    assert view.handle_key(KeyEvent(Key.CHAR, char="j")) is True
    assert view.scroll_offset == 1
    assert view.handle_key(KeyEvent(Key.CHAR, char="x")) is False

    short = view.get_render_lines(60, 8)
    assert short[2] == "-- more above --"
    assert short[-1] == "-- more below --"


@pytest.mark.unit
def test_scheduler_keeps_earliest_deadline():
    now = [0.0]
    calls = []
    scheduler = DeadlineScheduler(lambda: now[0])

    scheduler.schedule(0.1, lambda: calls.append("first"))
    now[0] = 0.05
    scheduler.schedule(0.1, lambda: calls.append("second"))
    assert scheduler.time_until_due() == pytest.approx(0.05)

    now[0] = 0.11
    assert scheduler.run_due() is True
    assert calls == ["second"]
    assert not scheduler.pending
    assert scheduler.time_until_due() is None


@pytest.mark.unit
def test_scheduler_cancel_drops_callback():
    scheduler = DeadlineScheduler(lambda: 1.0)
    scheduler.schedule(0.0, lambda: pytest.fail("cancelled callback ran"))
    scheduler.cancel()
    assert scheduler.run_due() is False

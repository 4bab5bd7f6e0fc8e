"""Unit tests for key decoding."""

import curses

import pytest

from apiterm.cli.tui.keys import decode_codes, decode_key, drain
from apiterm.cli.tui.types import Key, KeyEvent


def no_keyname(code: int) -> str:
    return ""


@pytest.mark.unit
def test_special_keys():
    assert decode_key(10).key is Key.ENTER
    assert decode_key(9).key is Key.TAB
    assert decode_key(127).key is Key.BACKSPACE
    assert decode_key(curses.KEY_UP).key is Key.UP
    assert decode_key(27).key is Key.ESCAPE


@pytest.mark.unit
def test_control_letters():
    assert decode_key(3) == KeyEvent(Key.CHAR, char="c", ctrl=True)
    assert decode_key(23).is_ctrl("w")


@pytest.mark.unit
def test_escape_prefix_sets_meta():
    events = decode_codes([27, ord("b")])
    assert events == [KeyEvent(Key.CHAR, char="b", meta=True)]
    events = decode_codes([27, 127])
    assert events == [KeyEvent(Key.BACKSPACE, meta=True)]


@pytest.mark.unit
def test_lone_escape():
    assert decode_codes([27]) == [KeyEvent(Key.ESCAPE)]


@pytest.mark.unit
def test_text_runs_split_or_coalesced():
    codes = [ord(c) for c in "ab"] + [10]
    assert decode_codes(codes) == [
        KeyEvent(Key.CHAR, char="a"),
        KeyEvent(Key.CHAR, char="b"),
        KeyEvent(Key.ENTER),
    ]
    assert decode_codes(codes, coalesce=True) == [KeyEvent(Key.CHAR, char="ab"), KeyEvent(Key.ENTER)]


@pytest.mark.unit
def test_utf8_bytes_are_decoded():
    codes = list("é".encode("utf-8"))
    assert decode_codes(codes, coalesce=True) == [KeyEvent(Key.CHAR, char="é")]


@pytest.mark.unit
def test_modified_arrow_from_keyname():
    names = {600: "kLFT5", 601: "kRIT3"}
    left = decode_key(600, names.get)
    right = decode_key(601, names.get)
    assert left == KeyEvent(Key.LEFT, ctrl=True)
    assert right == KeyEvent(Key.RIGHT, meta=True)
    assert decode_key(602, no_keyname).key is Key.UNKNOWN


@pytest.mark.unit
def test_drain_stops_at_no_input():
    pending = iter([ord("b"), ord("c"), -1, ord("d")])
    assert drain(ord("a"), lambda: next(pending)) == [ord("a"), ord("b"), ord("c")]


@pytest.mark.unit
def test_drain_respects_limit():
    assert drain(1, lambda: 2, limit=3) == [1, 2, 2]

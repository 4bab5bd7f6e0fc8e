"""Unit tests for display formatters."""

import pytest

from apiterm.cli.models import SchemaConstraints, SchemaInfo
from apiterm.cli.tui.utils.formatters import (
    fit_line,
    format_constraints,
    format_type,
    format_value,
    status_reason,
    status_text,
    truncate_text,
)


@pytest.mark.unit
def test_truncate_text():
    assert truncate_text(None) == ""
    assert truncate_text("a  b\nc") == "a b c"
    assert truncate_text("abcdef", 4) == "abc…"
    assert truncate_text("abcdef", 1) == "a"


@pytest.mark.unit
def test_fit_line_keeps_spacing():
    assert fit_line("  a  b", 4) == "  a "
    assert fit_line("abc", 0) == ""


@pytest.mark.unit
def test_format_constraints():
    constraints = SchemaConstraints(minimum=1, maximum=2.5, min_items=1, unique_items=True)
    assert format_constraints(constraints) == "min: 1, max: 2.5, minItems: 1, unique"
    assert format_constraints(None) == ""


@pytest.mark.unit
def test_format_value():
    assert format_value("x") == '"x"'
    assert format_value({"a": [1, None]}) == '{"a": [1, null]}'


@pytest.mark.unit
def test_format_type():
    assert format_type(None) == ""
    assert format_type(SchemaInfo(type="string", format="uuid", nullable=True)) == "string (uuid) nullable"
    assert format_type(SchemaInfo(type="object", ref_name="Pet")) == "Pet"


@pytest.mark.unit
def test_status_text():
    assert status_text("200", "OK") == "200 OK"
    assert status_text("default") == "default"


@pytest.mark.unit
def test_status_reason():
    assert status_reason("200") == "OK"
    assert status_reason("404") == "Not Found"
    assert status_reason("default") == ""
    assert status_reason("2XX") == ""
    assert status_reason("599") == ""

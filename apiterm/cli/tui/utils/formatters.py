"""Formatting utilities for TUI display."""

from __future__ import annotations

import json
from http import HTTPStatus

from apiterm.cli.models import JsonValue, SchemaConstraints, SchemaInfo


def truncate_text(text: str | None, max_len: int = 60) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return ""
    # Collapse whitespace
    text = " ".join(text.split())
    if len(text) <= max_len:
        return text
    if max_len <= 1:
        return text[:max_len]
    return text[: max_len - 1] + "…"


def fit_line(text: str, width: int) -> str:
    """Cut a line to ``width`` columns without collapsing whitespace."""
    if width <= 0:
        return ""
    return text[:width]


def format_constraints(constraints: SchemaConstraints | None) -> str:
    """Summarize schema constraints, e.g. ``min: 1, maxLen: 64, unique``."""
    if constraints is None:
        return ""
    parts: list[str] = []
    if constraints.minimum is not None:
        parts.append(f"min: {_number(constraints.minimum)}")
    if constraints.maximum is not None:
        parts.append(f"max: {_number(constraints.maximum)}")
    if constraints.min_length is not None:
        parts.append(f"minLen: {constraints.min_length}")
    if constraints.max_length is not None:
        parts.append(f"maxLen: {constraints.max_length}")
    if constraints.pattern:
        parts.append(f"pattern: {constraints.pattern}")
    if constraints.min_items is not None:
        parts.append(f"minItems: {constraints.min_items}")
    if constraints.max_items is not None:
        parts.append(f"maxItems: {constraints.max_items}")
    if constraints.unique_items:
        parts.append("unique")
    return ", ".join(parts)


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_value(value: JsonValue) -> str:
    """Compact JSON rendering of an example or default value."""
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return "(unable to display)"


def format_type(schema: SchemaInfo | None) -> str:
    """Type summary for a row: display type, format and nullability."""
    if schema is None:
        return ""
    text = schema.label
    if schema.format:
        text += f" ({schema.format})"
    if schema.nullable:
        text += " nullable"
    return text


def status_text(status_code: str, description: str = "") -> str:
    """Label for a response section, e.g. ``200 OK``."""
    return f"{status_code} {description}".strip()


def status_reason(status_code: str) -> str:
    """Standard reason phrase for a status code; empty for ``default`` or ranges like ``2XX``."""
    try:
        return HTTPStatus(int(status_code)).phrase
    except ValueError:
        return ""

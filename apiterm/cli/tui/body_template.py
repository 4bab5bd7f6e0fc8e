"""Generate a JSON skeleton for a request body from its schema."""

from __future__ import annotations

import json

from apiterm.cli.models import JsonValue, SchemaInfo

MAX_TEMPLATE_DEPTH = 10


def _template_value(schema: SchemaInfo, ancestors: set[int], depth: int) -> JsonValue:
    if depth >= MAX_TEMPLATE_DEPTH or id(schema) in ancestors:
        return {}

    # Priority: example > default > first enum value > composition > type
    if schema.example is not None:
        return schema.example
    if schema.default_value is not None:
        return schema.default_value
    if schema.enum_values:
        return schema.enum_values[0]

    ancestors.add(id(schema))
    try:
        if schema.one_of:
            return _template_value(schema.one_of[0], ancestors, depth)
        if schema.any_of:
            return _template_value(schema.any_of[0], ancestors, depth)
        if schema.all_of:
            merged: dict[str, JsonValue] = {}
            has_object = False
            for member in schema.all_of:
                value = _template_value(member, ancestors, depth)
                if isinstance(value, dict):
                    merged.update(value)
                    has_object = True
            if has_object:
                return merged
            return _template_value(schema.all_of[0], ancestors, depth)

        if schema.type == "string":
            return ""
        if schema.type in ("number", "integer"):
            return 0
        if schema.type == "boolean":
            return False
        if schema.type == "null":
            return None
        if schema.type == "array":
            if schema.items is None:
                return []
            return [_template_value(schema.items, ancestors, depth + 1)]
        if schema.type == "object" and schema.properties:
            return {name: _template_value(prop, ancestors, depth + 1) for name, prop in schema.properties.items()}
        return {}
    finally:
        ancestors.discard(id(schema))


def generate_body_template(schema: SchemaInfo | None) -> str:
    """Return a pretty-printed JSON template for ``schema``.

    Self-referencing schemas terminate: a schema met again on its own path
    becomes ``{}``, as does anything deeper than MAX_TEMPLATE_DEPTH.
    """
    if schema is None:
        return "{}"
    value = _template_value(schema, set(), 0)
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return "{}"

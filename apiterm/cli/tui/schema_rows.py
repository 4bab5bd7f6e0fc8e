"""Flatten a schema tree into rows for the detail panel.

Composition members (allOf/oneOf/anyOf) are expanded inline one level deeper;
object properties become one leaf row each. Recursion is bounded by a depth
cap and by a path-local ancestors set, so a schema that contains itself
yields a single "(truncated)" marker while a schema shared by several
branches still renders in full on each of them.
"""

from __future__ import annotations

from dataclasses import dataclass

from apiterm.cli.models import SchemaInfo
from apiterm.cli.tui.rows import LeafRow, MarkerRow, Row
from apiterm.cli.tui.types import MarkerKind
from apiterm.cli.tui.utils.formatters import format_constraints, format_value

MAX_FLATTEN_DEPTH = 20
TRUNCATED_LABEL = "(truncated)"

COMPOSITION_KINDS = ("all_of", "one_of", "any_of")
COMPOSITION_LABELS = {"all_of": "allOf", "one_of": "oneOf", "any_of": "anyOf"}


def is_navigable_schema(schema: SchemaInfo) -> bool:
    """Whether a schema has structure worth drilling into: a $ref, properties or structured items."""
    if schema.ref_name is not None or schema.properties:
        return True
    items = schema.items
    return items is not None and bool(items.properties or items.ref_name)


@dataclass(frozen=True)
class SchemaField:
    """A selectable schema row: a property or a referenced composition member."""

    name: str
    schema: SchemaInfo
    required: bool
    path: str

    @property
    def is_ref(self) -> bool:
        return self.schema.ref_name is not None

    @property
    def is_navigable(self) -> bool:
        """Whether Enter should drill into this field rather than expand it."""
        return is_navigable_schema(self.schema)


def _members(schema: SchemaInfo, kind: str) -> list[SchemaInfo]:
    return getattr(schema, kind) or []


def field_detail_lines(schema: SchemaInfo) -> list[str]:
    """Detail lines shown under an expanded field."""
    lines: list[str] = []
    if schema.description:
        lines.append(schema.description)
    if schema.enum_values:
        lines.append(f"enum: [{', '.join(schema.enum_values)}]")
    constraints = format_constraints(schema.constraints)
    if constraints:
        lines.append(constraints)
    if schema.example is not None:
        lines.append(f"example: {format_value(schema.example)}")
    if schema.default_value is not None:
        lines.append(f"default: {format_value(schema.default_value)}")
    if schema.read_only:
        lines.append("read-only")
    if schema.write_only:
        lines.append("write-only")
    return lines or ["(no details)"]


def flatten_schema(
    schema: SchemaInfo,
    depth: int = 0,
    max_depth: int = MAX_FLATTEN_DEPTH,
    expanded: frozenset[str] | set[str] = frozenset(),
    path: str = "",
    ancestors: set[int] | None = None,
) -> list[Row]:
    """Flatten one schema level into rows.

    Args:
        schema: Schema to flatten.
        depth: Indent level of the rows produced for this schema.
        max_depth: Deepest level expanded before a truncation marker.
        expanded: Paths of fields whose detail lines are shown.
        path: Path prefix identifying this schema within the tree.
        ancestors: Ids of schemas on the current recursion path.

    Returns:
        Leaf rows carry SchemaField items; markers label compositions,
        truncation and field details.
    """
    if ancestors is None:
        ancestors = set()
    if depth > max_depth or id(schema) in ancestors:
        return [MarkerRow(MarkerKind.TRUNCATED, TRUNCATED_LABEL, depth)]

    ancestors.add(id(schema))
    try:
        rows: list[Row] = []
        for kind in COMPOSITION_KINDS:
            members = _members(schema, kind)
            if not members:
                continue
            label = COMPOSITION_LABELS[kind]
            rows.append(MarkerRow(MarkerKind.COMPOSITION, label, depth))
            for index, member in enumerate(members):
                member_path = f"{path}/{label}[{index}]"
                if member.ref_name:
                    rows.extend(_field_rows(SchemaField(member.ref_name, member, False, member_path), depth + 1, expanded))
                else:
                    rows.extend(flatten_schema(member, depth + 1, max_depth, expanded, member_path, ancestors))

        if schema.properties:
            required = set(schema.required)
            for name, prop in schema.properties.items():
                rows.extend(_field_rows(SchemaField(name, prop, name in required, f"{path}/{name}"), depth, expanded))
        return rows
    finally:
        ancestors.discard(id(schema))


def _field_rows(schema_field: SchemaField, depth: int, expanded: frozenset[str] | set[str]) -> list[Row]:
    rows: list[Row] = [LeafRow(schema_field, depth)]
    if schema_field.path in expanded:
        rows.extend(MarkerRow(MarkerKind.DETAIL, line, depth + 1) for line in field_detail_lines(schema_field.schema))
    return rows


def schema_summary(schema: SchemaInfo) -> str:
    """One-line description of a schema with no rows of its own (primitive or array)."""
    parts = [schema.display_type or schema.type]
    if schema.format:
        parts.append(f"({schema.format})")
    if schema.nullable:
        parts.append("nullable")
    if schema.enum_values:
        parts.append(f"enum: [{', '.join(schema.enum_values)}]")
    return " ".join(parts)

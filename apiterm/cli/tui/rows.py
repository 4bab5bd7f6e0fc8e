"""Flatten collapsible groups into a navigable row list.

Rows are derived state: they are rebuilt from (groups, collapse set, filter)
whenever one of the three changes and are never edited in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, TypeGuard, TypeVar

from apiterm.cli.tui.types import MarkerKind, RowKind
from apiterm.cli.tui.viewport import clamp_cursor
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GroupRow:
    key: str
    label: str
    child_count: int
    collapsed: bool
    depth: int = 0
    kind: RowKind = field(default=RowKind.GROUP, init=False)


@dataclass(frozen=True)
class LeafRow(Generic[T]):
    item: T
    depth: int = 0
    kind: RowKind = field(default=RowKind.LEAF, init=False)


@dataclass(frozen=True)
class MarkerRow:
    marker: MarkerKind
    text: str
    depth: int = 0
    kind: RowKind = field(default=RowKind.MARKER, init=False)


Row = GroupRow | LeafRow[Any] | MarkerRow


def is_group_row(row: Row) -> TypeGuard[GroupRow]:
    """Return True when the row is a group header."""
    return row.kind is RowKind.GROUP


def is_leaf_row(row: Row) -> TypeGuard[LeafRow[Any]]:
    """Return True when the row carries caller content."""
    return row.kind is RowKind.LEAF


def is_marker_row(row: Row) -> TypeGuard[MarkerRow]:
    """Return True when the row is a structural marker."""
    return row.kind is RowKind.MARKER


@dataclass(frozen=True)
class RowGroup:
    """A collapsible group: a header plus the rows shown under it when expanded."""

    key: str
    label: str
    children: list[Row]

    @property
    def leaf_count(self) -> int:
        return sum(1 for row in self.children if is_leaf_row(row))


SearchFields = Callable[[Any], Iterable[str | None]]


def _matches(item: Any, needle: str, search_fields: SearchFields) -> bool:
    return any(value and needle in value.lower() for value in search_fields(item))


def _flatten(
    groups: list[RowGroup],
    collapsed: set[str],
    filter_text: str,
    search_fields: SearchFields | None,
) -> tuple[list[Row], list[str | None]]:
    rows: list[Row] = []
    owners: list[str | None] = []
    needle = filter_text.strip().lower()

    if needle:
        # Filtering flattens across groups: matching leaves only, no headers or markers.
        fields = search_fields or (lambda item: [str(item)])
        for group in groups:
            for row in group.children:
                if is_leaf_row(row) and _matches(row.item, needle, fields):
                    rows.append(row)
                    owners.append(group.key)
        return rows, owners

    for group in groups:
        is_collapsed = group.key in collapsed
        rows.append(GroupRow(group.key, group.label, group.leaf_count, is_collapsed))
        owners.append(None)
        if is_collapsed:
            continue
        rows.extend(group.children)
        owners.extend([group.key] * len(group.children))
    return rows, owners


def flatten_groups(
    groups: list[RowGroup],
    collapsed: set[str],
    filter_text: str = "",
    search_fields: SearchFields | None = None,
) -> list[Row]:
    """Build the row list for groups under a collapse set and optional filter.

    Args:
        groups: Groups in display order.
        collapsed: Keys of collapsed groups.
        filter_text: Case-insensitive substring; blank disables filtering.
        search_fields: Returns the strings of a leaf item to match against.

    Returns:
        Ordered rows. Stable for the same inputs.
    """
    rows, _ = _flatten(groups, collapsed, filter_text, search_fields)
    return rows


class CollapsibleList(Generic[T]):
    """Groups, collapse set, filter and cursor bundled for one panel."""

    def __init__(self, search_fields: SearchFields | None = None, collapse_new_groups: bool = False):
        self.search_fields = search_fields
        self.collapse_new_groups = collapse_new_groups
        self.groups: list[RowGroup] = []
        self.collapsed: set[str] = set()
        self.filter_text = ""
        self.cursor = 0
        self.rows: list[Row] = []
        self._owners: list[str | None] = []

    def set_groups(self, groups: list[RowGroup]) -> None:
        """Replace the source tree. Resets collapse state, filter and cursor."""
        self.groups = groups
        self.collapsed = {group.key for group in groups} if self.collapse_new_groups else set()
        self.filter_text = ""
        self.cursor = 0
        self._rebuild()

    def replace_children(self, groups: list[RowGroup]) -> None:
        """Swap group contents without touching collapse state or cursor index."""
        self.groups = groups
        self._rebuild()

    def _rebuild(self) -> None:
        self.rows, self._owners = _flatten(self.groups, self.collapsed, self.filter_text, self.search_fields)
        self.cursor = clamp_cursor(self.cursor, len(self.rows))

    @property
    def current_row(self) -> Row | None:
        if not self.rows:
            return None
        return self.rows[self.cursor]

    def move(self, delta: int) -> None:
        self.cursor = clamp_cursor(self.cursor + delta, len(self.rows))

    def move_to_top(self) -> None:
        self.cursor = 0

    def move_to_bottom(self) -> None:
        self.cursor = clamp_cursor(len(self.rows) - 1, len(self.rows))

    def group_key_at(self, index: int) -> str | None:
        """Key of the group a row belongs to (its own key for a header)."""
        if not 0 <= index < len(self.rows):
            return None
        row = self.rows[index]
        if is_group_row(row):
            return row.key
        return self._owners[index]

    def header_index(self, key: str) -> int | None:
        for index, row in enumerate(self.rows):
            if is_group_row(row) and row.key == key:
                return index
        return None

    def toggle(self, key: str | None = None) -> None:
        """Toggle a group (default: the cursor's group)."""
        key = key if key is not None else self.group_key_at(self.cursor)
        if key is None:
            return
        cursor_owner = self._owners[self.cursor] if self.rows else None
        if key in self.collapsed:
            self.collapsed.discard(key)
        else:
            self.collapsed.add(key)
        logger.debug("Toggled group {} (collapsed={})", key, key in self.collapsed)
        self._rebuild()
        if cursor_owner == key and key in self.collapsed:
            header = self.header_index(key)
            if header is not None:
                self.cursor = header

    def collapse(self, key: str | None = None) -> None:
        key = key if key is not None else self.group_key_at(self.cursor)
        if key is not None and key not in self.collapsed:
            self.toggle(key)

    def expand(self, key: str | None = None) -> None:
        key = key if key is not None else self.group_key_at(self.cursor)
        if key is not None and key in self.collapsed:
            self.toggle(key)

    def set_filter(self, text: str) -> None:
        if text == self.filter_text:
            return
        self.filter_text = text
        self.cursor = 0
        self._rebuild()

    def reset(self) -> None:
        """Back to the initial state for the current groups."""
        self.set_groups(self.groups)

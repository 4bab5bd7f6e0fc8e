"""Unit tests for collapsible row flattening and cursor handling."""

import pytest

from apiterm.cli.tui.rows import (
    CollapsibleList,
    LeafRow,
    MarkerRow,
    RowGroup,
    flatten_groups,
    is_group_row,
    is_leaf_row,
)
from apiterm.cli.tui.types import MarkerKind
from apiterm.cli.tui.views.endpoints import endpoint_search_fields


def _groups(tag_groups):
    return [RowGroup(tag.name, tag.name, [LeafRow(ep) for ep in tag.endpoints]) for tag in tag_groups]


@pytest.mark.unit
def test_headers_precede_children_when_expanded(petstore_groups):
    rows = flatten_groups(_groups(petstore_groups), collapsed=set())

    assert [row.kind.value for row in rows] == ["group", "leaf", "leaf", "group", "leaf"]
    assert rows[0].label == "pets" and rows[0].child_count == 2
    assert rows[3].label == "store" and rows[3].child_count == 1


@pytest.mark.unit
def test_collapsed_group_emits_only_its_header(petstore_groups):
    rows = flatten_groups(_groups(petstore_groups), collapsed={"pets"})

    assert len(rows) == 3
    assert is_group_row(rows[0]) and rows[0].collapsed
    assert is_group_row(rows[1]) and rows[1].label == "store"


@pytest.mark.unit
def test_filter_returns_matching_leaves_without_headers(petstore_groups):
    rows = flatten_groups(
        _groups(petstore_groups),
        collapsed={"pets", "store"},
        filter_text="inventory",
        search_fields=endpoint_search_fields,
    )

    assert len(rows) == 1
    assert is_leaf_row(rows[0])
    assert rows[0].item.path == "/store/inventory"
    assert not any(is_group_row(row) for row in rows)


@pytest.mark.unit
def test_filter_matches_summary_case_insensitively(petstore_groups):
    rows = flatten_groups(_groups(petstore_groups), set(), "CREATE", endpoint_search_fields)
    assert [row.item.method for row in rows] == ["post"]


@pytest.mark.unit
def test_filter_skips_marker_rows():
    group = RowGroup("g", "G", [MarkerRow(MarkerKind.TEXT, "needle"), LeafRow("needle leaf")])
    rows = flatten_groups([group], set(), "needle")
    assert rows == [LeafRow("needle leaf")]


@pytest.mark.unit
def test_blank_filter_is_ignored(petstore_groups):
    assert flatten_groups(_groups(petstore_groups), set(), "   ") == flatten_groups(_groups(petstore_groups), set())


@pytest.mark.unit
def test_toggle_twice_restores_rows(petstore_groups):
    model = CollapsibleList()
    model.set_groups(_groups(petstore_groups))
    before = list(model.rows)

    model.toggle("pets")
    assert model.rows != before
    model.toggle("pets")

    assert model.rows == before


@pytest.mark.unit
def test_collapse_from_child_snaps_cursor_to_header(petstore_groups):
    model = CollapsibleList()
    model.set_groups(_groups(petstore_groups))
    model.cursor = 4  # the /store/inventory leaf

    model.collapse()

    assert model.cursor == 3
    assert is_group_row(model.current_row) and model.current_row.label == "store"


@pytest.mark.unit
def test_toggle_on_header_keeps_cursor_index(petstore_groups):
    model = CollapsibleList()
    model.set_groups(_groups(petstore_groups))
    model.cursor = 3

    model.toggle()

    assert model.cursor == 3
    assert model.current_row.collapsed


@pytest.mark.unit
def test_new_groups_start_collapsed_when_requested(petstore_groups):
    model = CollapsibleList(collapse_new_groups=True)
    model.set_groups(_groups(petstore_groups))

    assert model.collapsed == {"pets", "store"}
    assert len(model.rows) == 2


@pytest.mark.unit
def test_cursor_stays_within_bounds(petstore_groups):
    model = CollapsibleList()
    model.set_groups(_groups(petstore_groups))

    for delta in (-5, 1, 1, 1, 1, 1, 1, 1, -2, 10):
        model.move(delta)
        assert 0 <= model.cursor <= len(model.rows) - 1
    model.move_to_top()
    assert model.cursor == 0
    model.move_to_bottom()
    assert model.cursor == len(model.rows) - 1


@pytest.mark.unit
def test_cursor_reclamped_when_rows_shrink(petstore_groups):
    model = CollapsibleList(search_fields=endpoint_search_fields)
    model.set_groups(_groups(petstore_groups))
    model.move_to_bottom()

    model.set_filter("inventory")

    assert model.cursor == 0
    assert len(model.rows) == 1


@pytest.mark.unit
def test_empty_list_cursor_is_zero():
    model = CollapsibleList()
    model.set_groups([])
    model.move(3)
    assert model.cursor == 0
    assert model.current_row is None

"""Unit tests for the endpoint detail panel."""

import pytest

from apiterm.cli.models import MediaTypeInfo, ParameterInfo, ResponseInfo, SchemaInfo
from apiterm.cli.tui.rows import is_group_row, is_leaf_row
from apiterm.cli.tui.types import Key, KeyEvent
from apiterm.cli.tui.views.detail import EndpointDetailView, drill_target, sort_parameters


def ch(value: str) -> KeyEvent:
    return KeyEvent(Key.CHAR, char=value)


@pytest.fixture
def owners_endpoint(endpoint_factory, pet_schema):
    owner = SchemaInfo(
        type="object",
        ref_name="Owner",
        properties={
            "name": SchemaInfo(type="string", display_type="string"),
            "pets": SchemaInfo(type="array", display_type="Pet[]", items=pet_schema),
        },
        required=["name"],
    )
    return endpoint_factory(
        "get",
        "/owners/{id}",
        "Find an owner",
        responses=[ResponseInfo("200", content=[MediaTypeInfo("application/json", owner)])],
    )


@pytest.mark.unit
def test_placeholder_without_endpoint():
    view = EndpointDetailView()
    assert view.get_render_lines(40, 10) == ["Endpoint Detail", "No endpoint selected"]
    assert view.handle_key(ch("j")) is False


@pytest.mark.unit
def test_sections_for_list_endpoint(petstore_groups):
    view = EndpointDetailView()
    view.set_endpoint(petstore_groups[0].endpoints[0])

    assert view.get_render_lines(40, 20) == [
        "Endpoint Detail",
        "GET /pets",
        "List all pets",
        "▼ Parameters",
        "  query  limit  integer",
        "▼ 200 OK",
        "  A list of pets",
        "  application/json",
        "    Pet[]",
    ]


@pytest.mark.unit
def test_required_body_section_lists_schema_fields(petstore_groups):
    view = EndpointDetailView()
    view.set_endpoint(petstore_groups[0].endpoints[1])

    lines = view.get_render_lines(40, 20)
    assert "▼ Request Body (required)" in lines
    assert "    id*  integer (int64)" in lines
    assert "    tag  string" in lines
    assert "▼ 201 Created" in lines


@pytest.mark.unit
def test_h_collapses_section(petstore_groups):
    view = EndpointDetailView()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.handle_key(ch("h"))

    assert view.rows[0].collapsed
    assert is_group_row(view.rows[1])


@pytest.mark.unit
def test_enter_on_parameter_toggles_details(petstore_groups):
    view = EndpointDetailView()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.handle_key(ch("j"))
    view.handle_key(KeyEvent(Key.ENTER))

    assert view.get_render_lines(40, 20)[5] == "    (no details)"
    view.handle_key(KeyEvent(Key.ENTER))
    assert view.get_render_lines(40, 20)[5] == "▼ 200 OK"


@pytest.mark.unit
def test_drill_into_array_field_and_back(owners_endpoint, pet_schema):
    view = EndpointDetailView()
    view.set_endpoint(owners_endpoint)
    for _ in range(3):
        view.handle_key(ch("j"))
    assert view.rows[view.cursor].item.name == "pets"

    view.handle_key(KeyEvent(Key.ENTER))

    assert view.in_drilldown
    assert view.navigator.current_subtree() is pet_schema
    assert [row.item.name for row in view.rows] == ["id", "name", "tag"]
    lines = view.get_render_lines(40, 20)
    assert lines[3] == "Pet[]"
    assert lines[4] == "id*  integer (int64)"

    assert view.handle_key(KeyEvent(Key.BACKSPACE)) is True
    assert not view.in_drilldown
    assert view.cursor == 3


@pytest.mark.unit
def test_field_details_inside_drilldown(owners_endpoint):
    view = EndpointDetailView()
    view.set_endpoint(owners_endpoint)
    view.handle_key(ch("G"))
    view.handle_key(KeyEvent(Key.ENTER))
    view.handle_key(ch("j"))
    view.handle_key(KeyEvent(Key.ENTER))

    lines = view.get_render_lines(40, 20)
    assert "  Pet name" in lines
    assert '  example: "doggie"' in lines


@pytest.mark.unit
def test_new_endpoint_resets_drilldown(owners_endpoint, petstore_groups):
    view = EndpointDetailView()
    view.set_endpoint(owners_endpoint)
    view.handle_key(ch("G"))
    view.handle_key(KeyEvent(Key.ENTER))
    assert view.in_drilldown

    view.set_endpoint(owners_endpoint)
    assert view.in_drilldown

    view.set_endpoint(petstore_groups[1].endpoints[0])
    assert not view.in_drilldown
    assert view.navigator.get_breadcrumb() == ""


@pytest.mark.unit
def test_go_back_on_base_view_returns_false():
    view = EndpointDetailView()
    assert view.go_back() is False


@pytest.mark.unit
def test_sort_parameters_by_location():
    params = [
        ParameterInfo("x-trace", "header"),
        ParameterInfo("limit", "query"),
        ParameterInfo("id", "path"),
        ParameterInfo("offset", "query"),
    ]
    assert [p.name for p in sort_parameters(params)] == ["id", "limit", "offset", "x-trace"]


@pytest.mark.unit
def test_drill_target_for_arrays(pet_schema):
    assert drill_target(SchemaInfo(type="array", items=pet_schema), "pets") == (pet_schema, "Pet[]")
    assert drill_target(pet_schema, "pet") == (pet_schema, "Pet")
    inline = SchemaInfo(type="array", items=SchemaInfo(type="object", properties={}))
    assert drill_target(inline, "rows")[1] == "rows[]"


@pytest.mark.unit
def test_leaf_rows_carry_parameters(petstore_groups):
    view = EndpointDetailView()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    leaves = [row for row in view.rows if is_leaf_row(row)]
    assert [row.item.name for row in leaves] == ["limit"]


@pytest.mark.unit
def test_enter_drills_into_inline_object_parameter(endpoint_factory):
    status = SchemaInfo(type="string", display_type="string")
    criteria = SchemaInfo(type="object", display_type="object", properties={"status": status})
    endpoint = endpoint_factory(
        "get",
        "/pets/search",
        parameters=[ParameterInfo(name="criteria", location="query", schema=criteria)],
    )
    view = EndpointDetailView()
    view.set_endpoint(endpoint)
    view.handle_key(ch("j"))
    assert view.rows[view.cursor].item.name == "criteria"

    view.handle_key(KeyEvent(Key.ENTER))

    assert view.in_drilldown
    assert view.navigator.breadcrumbs[-1] == "criteria"
    assert view.navigator.current_subtree() is criteria
    assert [row.item.name for row in view.rows] == ["status"]

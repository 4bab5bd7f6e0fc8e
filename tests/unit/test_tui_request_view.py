"""Unit tests for the request/response panel."""

import asyncio
import json

import pytest

from apiterm.cli.models import HttpResponse, ServerInfo, ServerVariable
from apiterm.cli.tui.types import Key, KeyEvent, NotificationLevel, ResponseTab
from apiterm.cli.tui.views.request import (
    PRETTY_LINE_CAP,
    RAW_CHAR_CAP,
    RequestRowType,
    RequestView,
    format_headers,
    format_pretty,
    format_raw,
)
from apiterm.errors import HttpRequestError


def ch(value: str) -> KeyEvent:
    return KeyEvent(Key.CHAR, char=value)


class FakeSender:
    def __init__(self, response=None, error=None):
        self.response = response or HttpResponse(200, "OK", {"content-type": "application/json"}, '{"id": 1}', 12.0)
        self.error = error
        self.drafts = []

    async def send(self, draft):
        self.drafts.append(draft)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def servers():
    return [
        ServerInfo("https://{region}.example.com/v1", variables={"region": ServerVariable("eu")}),
        ServerInfo("http://localhost:8080"),
    ]


@pytest.fixture
def make_view(loop, servers):
    def factory(sender=None, notify=None):
        return RequestView(sender=sender, servers=servers, loop=loop, notify=notify)

    return factory


@pytest.mark.unit
def test_rows_for_get_endpoint(make_view, petstore_groups):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[0])

    assert [row.type for row in view.build_rows()] == [
        RequestRowType.SERVER,
        RequestRowType.PARAM,
        RequestRowType.SEND,
        RequestRowType.TABS,
    ]
    lines = view.get_render_lines(60, 20)
    assert lines[1] == "GET /pets"
    assert lines[2] == "Server  https://eu.example.com/v1"
    assert lines[3] == "query:limit = (empty)"


@pytest.mark.unit
def test_body_row_is_prefilled_from_schema(make_view, petstore_groups):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[1])

    assert RequestRowType.BODY in [row.type for row in view.build_rows()]
    assert json.loads(view.state.body_text) == {"id": 0, "name": "doggie", "tag": ""}


@pytest.mark.unit
def test_edit_parameter_and_send(make_view, petstore_groups, servers):
    sender = FakeSender()
    view = make_view(sender)
    view.set_endpoint(petstore_groups[0].endpoints[0])

    view.handle_key(ch("j"))
    view.handle_key(KeyEvent(Key.ENTER))
    assert view.capturing_text
    view.handle_key(ch("1"))
    view.handle_key(ch("0"))
    view.handle_key(KeyEvent(Key.ENTER))
    assert not view.capturing_text
    assert view.state.param_values == {"query:limit": "10"}

    view.handle_key(ch("s"))

    draft = sender.drafts[0]
    assert draft.param_values == {"query:limit": "10"}
    assert draft.server is servers[0]
    assert draft.body is None
    assert view.state.response is sender.response
    assert view.response_lines() == ["{", '  "id": 1', "}"]


@pytest.mark.unit
def test_escape_discards_parameter_edit(make_view, petstore_groups):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.handle_key(ch("j"))
    view.handle_key(KeyEvent(Key.ENTER))
    view.handle_key(ch("5"))
    view.handle_key(KeyEvent(Key.ESCAPE))

    assert view.state.param_values == {}
    assert not view.capturing_text


@pytest.mark.unit
def test_invalid_json_body_is_not_sent(make_view, petstore_groups):
    sender = FakeSender()
    view = make_view(sender)
    view.set_endpoint(petstore_groups[0].endpoints[1])
    view.state.body_text = '{"id": '

    view.send()

    assert sender.drafts == []
    assert view.state.body_error == "Invalid JSON"


@pytest.mark.unit
def test_body_is_sent_for_post(make_view, petstore_groups):
    sender = FakeSender()
    view = make_view(sender)
    view.set_endpoint(petstore_groups[0].endpoints[1])

    view.send()

    assert json.loads(sender.drafts[0].body)["name"] == "doggie"


@pytest.mark.unit
def test_body_editor_types_then_commits_from_normal_mode(make_view, petstore_groups):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[1])
    view.cursor = 1
    view.handle_key(ch("e"))
    assert view.capturing_text
    assert view.get_render_lines(60, 20)[2] == "Body -- INSERT --"

    view.body_editor.begin("")
    for value in "[1]":
        view.handle_key(ch(value))
    view.handle_key(KeyEvent(Key.ESCAPE))
    assert view.capturing_text
    assert view.get_action_bar() == "[i/a] Insert  [Enter/Esc] Save"
    view.handle_key(KeyEvent(Key.ENTER))

    assert not view.capturing_text
    assert view.state.body_text == "[1]"
    assert view.state.body_error is None


@pytest.mark.unit
def test_missing_sender_reports_error(make_view, petstore_groups):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.send()
    assert view.response_lines() == ["No request sender configured (use --sender)"]


@pytest.mark.unit
def test_sender_failure_is_shown_and_notified(make_view, petstore_groups):
    notices = []
    sender = FakeSender(error=HttpRequestError("connection refused"))
    view = make_view(sender, notify=lambda message, level: notices.append((message, level)))
    view.set_endpoint(petstore_groups[0].endpoints[0])

    view.send()

    assert view.state.error == "connection refused"
    assert not view.state.is_loading
    assert notices == [("Request failed: connection refused", NotificationLevel.ERROR)]


@pytest.mark.unit
def test_unexpected_sender_exception_is_contained(make_view, petstore_groups):
    view = make_view(FakeSender(error=RuntimeError("boom")))
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.send()
    assert view.state.error == "Unknown error: boom"


@pytest.mark.unit
def test_tabs_switch_response_rendering(make_view, petstore_groups):
    view = make_view(FakeSender())
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.send()

    view.handle_key(ch("2"))
    assert view.state.active_tab is ResponseTab.RAW
    assert view.response_lines() == ['{"id": 1}']
    view.handle_key(ch("3"))
    assert view.response_lines() == ["content-type: application/json"]
    view.handle_key(ch("1"))
    assert view.state.active_tab is ResponseTab.PRETTY


@pytest.mark.unit
def test_server_choice_survives_endpoint_change(make_view, petstore_groups):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.handle_key(ch("S"))
    view.state.param_values["query:limit"] = "3"

    view.set_endpoint(petstore_groups[1].endpoints[0])

    assert view.current_server.url == "http://localhost:8080"
    assert view.state.param_values == {}


@pytest.mark.unit
def test_server_cycle_wraps(make_view, petstore_groups, servers):
    view = make_view()
    view.set_endpoint(petstore_groups[0].endpoints[0])
    view.cycle_server()
    view.cycle_server()
    assert view.current_server is servers[0]


@pytest.mark.unit
def test_no_endpoint_placeholder(make_view):
    view = make_view()
    assert view.get_render_lines(60, 10) == ["Request / Response", "No endpoint selected"]
    assert view.handle_key(ch("s")) is False


@pytest.mark.unit
def test_pretty_output_is_capped():
    body = json.dumps(list(range(100)))
    lines = format_pretty(body)
    assert len(lines) == PRETTY_LINE_CAP + 1
    assert lines[-1] == "... (62 more lines)"


@pytest.mark.unit
def test_pretty_falls_back_to_plain_text():
    assert format_pretty("not json\nline two") == ["not json", "line two"]


@pytest.mark.unit
def test_raw_output_is_capped():
    lines = format_raw("x" * (RAW_CHAR_CAP + 50))
    assert lines == ["x" * RAW_CHAR_CAP + "... (truncated)"]


@pytest.mark.unit
def test_headers_listing():
    assert format_headers({}) == ["(no headers)"]
    assert format_headers({"a": "1", "b": "2"}) == ["a: 1", "b: 2"]

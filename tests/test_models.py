import pytest
from confluence_mcp.core.links import get_link, next_link, parse_cursor
from confluence_mcp.core.models import (
    CommentCreateInput,
    ContentBodyInput,
    PageCreateInput,
    PaginatedResult,
    next_version,
)
from pydantic import ValidationError


def test_paginated_result_with_next_link():
    page = PaginatedResult.model_validate(
        {
            "results": [{"id": "1"}, {"id": "2"}],
            "_links": {"next": "/wiki/api/v2/pages?limit=2&cursor=abc123"},
        }
    )

    assert [r["id"] for r in page.results] == ["1", "2"]
    assert page.has_more is True
    assert page.next_cursor == "abc123"


def test_paginated_result_without_next():
    page = PaginatedResult.model_validate({"results": [], "_links": {"base": "x"}})

    assert page.has_more is False
    assert page.next_cursor is None


def test_paginated_payload_round_trips_extra_fields():
    raw = {"results": [{"id": "1"}], "start": 0, "totalSize": 1}

    assert PaginatedResult.model_validate(raw).to_payload() == raw


def test_next_version_increments():
    version = next_version(4, "typo fix")

    assert version.number == 5
    assert version.to_payload() == {"number": 5, "message": "typo fix"}
    assert next_version(1).to_payload() == {"number": 2}


def test_page_create_payload_uses_wire_names():
    payload = PageCreateInput(
        space_id="42",
        title="Hello",
        body=ContentBodyInput(value="<p>x</p>"),
    ).to_payload()

    assert payload == {
        "spaceId": "42",
        "title": "Hello",
        "body": {"representation": "storage", "value": "<p>x</p>"},
    }
    assert "version" not in payload


def test_input_models_reject_unknown_fields():
    with pytest.raises(ValidationError):
        CommentCreateInput(body=ContentBodyInput(value="x"), unexpected="y")


def test_link_helpers():
    payload = {"_links": {"next": "/wiki/api/v2/spaces?cursor=zz", "self": ""}}

    assert next_link(payload) == "/wiki/api/v2/spaces?cursor=zz"
    assert get_link(payload, "self") is None
    assert get_link({"_links": "bad"}, "next") is None
    assert parse_cursor(None) is None
    assert parse_cursor("/wiki/api/v2/spaces?limit=1") is None

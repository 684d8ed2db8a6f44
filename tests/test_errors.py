import json

import pytest
from confluence_mcp.core.errors import (
    ConfluenceAPIError,
    ErrorKind,
    classify_response,
)


def test_429_is_rate_limit_with_retry_after():
    record = classify_response(429, {"Retry-After": "30"}, "", "/pages")

    assert record.kind is ErrorKind.RATE_LIMIT
    assert record.retry_after_seconds == 30
    assert record.retryable is True
    assert record.message == "Rate limit exceeded"


@pytest.mark.parametrize("header", [{}, {"Retry-After": "soon"}])
def test_429_retry_after_defaults_to_60(header):
    record = classify_response(429, header, None, "/pages")

    assert record.retry_after_seconds == 60


def test_401_403_404():
    auth = classify_response(401, {}, '{"message": "nope"}', "/spaces")
    forbidden = classify_response(403, {}, "", "/spaces")
    missing = classify_response(404, {}, "", "/pages/123")

    assert auth.kind is ErrorKind.AUTHENTICATION
    assert auth.message == "Authentication failed. Check your credentials."
    assert forbidden.kind is ErrorKind.FORBIDDEN
    assert missing.kind is ErrorKind.NOT_FOUND
    assert missing.message == "Resource not found: /pages/123"
    assert not any(r.retryable for r in (auth, forbidden, missing))


@pytest.mark.parametrize(
    "body, expected",
    [
        (json.dumps({"message": "Title taken"}), "Title taken"),
        (json.dumps({"error": "bad cql"}), "bad cql"),
        (json.dumps({"errors": [{"message": "Version conflict"}]}), "Version conflict"),
        ("<html>oops</html>", "API error: 400"),
        ("", "API error: 400"),
    ],
)
def test_generic_message_extraction(body, expected):
    record = classify_response(400, {}, body, "/pages")

    assert record.kind is ErrorKind.GENERIC
    assert record.message == expected
    assert record.retryable is False


def test_5xx_is_retryable():
    record = classify_response(503, {}, "", "/pages")

    assert record.kind is ErrorKind.GENERIC
    assert record.retryable is True


def test_well_known_status_ignores_body():
    record = classify_response(404, {}, json.dumps({"message": "custom"}), "/x")

    assert record.kind is ErrorKind.NOT_FOUND
    assert "custom" not in record.message


def test_api_error_exposes_record():
    record = classify_response(429, {"Retry-After": "5"}, "", "/search")
    exc = ConfluenceAPIError(record)

    assert exc.kind is ErrorKind.RATE_LIMIT
    assert exc.status_code == 429
    assert exc.retryable
    assert str(exc) == "Rate limit exceeded"
    assert exc.record.to_details()["retry_after_seconds"] == 5


def test_details_omit_retry_after_for_other_kinds():
    details = classify_response(404, {}, "", "/x").to_details()

    assert "retry_after_seconds" not in details
    assert details["kind"] == "not_found"

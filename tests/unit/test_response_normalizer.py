"""Unit tests for response normalization."""

import json

import httpx
import pytest

from mailgun_request.exceptions import (
    APIError,
    ErrorCause,
    ResponseParseError,
    TransportError,
)
from mailgun_request.utils.http import ResponseNormalizer, ResponseState

JSON = "application/json; charset=utf-8"


def _finish(path, status, content_type, raw):
    normalizer = ResponseNormalizer(path)
    normalizer.feed(raw)
    return normalizer, normalizer.finish(status, content_type)


@pytest.mark.unit
def test_success_with_json_body():
    normalizer, outcome = _finish("/v2/domains", 200, JSON, b'{"total_count": 1}')
    assert outcome.ok
    assert outcome.body == {"total_count": 1}
    assert normalizer.state is ResponseState.RESOLVED


@pytest.mark.unit
def test_body_assembled_from_chunks():
    normalizer = ResponseNormalizer("/v2/domains")
    for chunk in (b'{"items"', b": [1, ", b"2]}"):
        normalizer.feed(chunk)
    outcome = normalizer.finish(200, JSON)
    assert outcome.body == {"items": [1, 2]}


@pytest.mark.unit
def test_status_error_uses_message_field():
    _, outcome = _finish("/v2/x", 400, JSON, b'{"message": "bad request"}')
    assert isinstance(outcome.error, APIError)
    assert outcome.error.message == "bad request"
    assert str(outcome.error) == "bad request"
    assert outcome.error.status_code == 400
    assert outcome.error.cause is ErrorCause.STATUS
    assert outcome.body is None


@pytest.mark.unit
def test_status_error_falls_back_to_response_field():
    _, outcome = _finish("/v2/x", 404, JSON, b'{"response": "not found"}')
    assert outcome.error.message == "not found"


@pytest.mark.unit
def test_status_error_falls_back_to_whole_body():
    _, outcome = _finish("/v2/x", 401, JSON, b'{"error": "forbidden"}')
    assert json.loads(outcome.error.message) == {"error": "forbidden"}
    assert outcome.error.response_body == {"error": "forbidden"}


@pytest.mark.unit
def test_status_error_with_string_body():
    _, outcome = _finish("/v2/x", 500, JSON, b'"boom"')
    assert outcome.error.message == "boom"


@pytest.mark.unit
def test_status_error_with_unparsed_body_uses_raw_text():
    _, outcome = _finish("/v2/x", 502, "text/html", b"Bad Gateway")
    assert isinstance(outcome.error, APIError)
    assert outcome.error.message == "Bad Gateway"
    assert outcome.error.response_body == "Bad Gateway"


@pytest.mark.unit
def test_only_status_200_is_success():
    _, outcome = _finish("/v2/x", 201, JSON, b'{"message": "created"}')
    assert isinstance(outcome.error, APIError)
    assert outcome.error.message == "created"


@pytest.mark.unit
def test_malformed_json_is_a_parse_error():
    normalizer, outcome = _finish("/v2/x", 200, JSON, b'{"truncated":')
    assert isinstance(outcome.error, ResponseParseError)
    assert outcome.error.cause is ErrorCause.MALFORMED_JSON
    assert outcome.body is None
    assert normalizer.state is ResponseState.REJECTED


@pytest.mark.unit
def test_malformed_json_on_error_status_stays_a_parse_error():
    _, outcome = _finish("/v2/x", 500, JSON, b"<html>")
    assert isinstance(outcome.error, ResponseParseError)


@pytest.mark.unit
def test_empty_json_body_is_a_parse_error():
    _, outcome = _finish("/v2/x", 200, JSON, b"")
    assert isinstance(outcome.error, ResponseParseError)


@pytest.mark.unit
def test_campaigns_path_skips_content_type_check():
    _, outcome = _finish("/v2/example.com/campaigns", 200, "text/html", b'{"items": []}')
    assert outcome.ok
    assert outcome.body == {"items": []}


@pytest.mark.unit
def test_campaigns_path_with_invalid_json_fails_to_parse():
    _, outcome = _finish("/v2/example.com/campaigns/abc", 200, "text/html", b"<html>")
    assert isinstance(outcome.error, ResponseParseError)


@pytest.mark.unit
def test_non_json_success_resolves_without_body():
    _, outcome = _finish("/v2/x", 200, "text/plain", b"OK")
    assert outcome.ok
    assert outcome.body is None


@pytest.mark.unit
def test_missing_content_type_is_not_json():
    _, outcome = _finish("/v2/x", 200, None, b'{"a": 1}')
    assert outcome.ok
    assert outcome.body is None


@pytest.mark.unit
def test_stream_error_wins_over_body():
    normalizer = ResponseNormalizer("/v2/x")
    normalizer.feed(b'{"a": 1}')
    normalizer.fail(httpx.ReadError("reset"))
    outcome = normalizer.finish(200, JSON)
    assert isinstance(outcome.error, TransportError)
    assert outcome.error.cause is ErrorCause.TRANSPORT
    assert isinstance(outcome.error.original_error, httpx.ReadError)


@pytest.mark.unit
def test_stream_error_on_campaigns_path_skips_parsing():
    normalizer = ResponseNormalizer("/v2/campaigns")
    normalizer.fail(httpx.ReadError("reset"))
    outcome = normalizer.finish(400, "text/html")
    assert isinstance(outcome.error, TransportError)


@pytest.mark.unit
def test_classification_happens_once():
    normalizer, _ = _finish("/v2/x", 200, JSON, b"{}")
    with pytest.raises(RuntimeError):
        normalizer.finish(200, JSON)
    with pytest.raises(RuntimeError):
        normalizer.feed(b"more")


@pytest.mark.asyncio
async def test_consume_reads_response():
    request = httpx.Request("GET", "https://api.mailgun.net/v2/domains")
    response = httpx.Response(200, json={"items": ["a"]}, request=request)
    outcome = await ResponseNormalizer("/v2/domains").consume(response)
    assert outcome.body == {"items": ["a"]}


@pytest.mark.asyncio
async def test_consume_captures_stream_errors(failing_stream):
    request = httpx.Request("GET", "https://api.mailgun.net/v2/domains")
    response = httpx.Response(
        200,
        headers={"content-type": "application/json"},
        stream=failing_stream(),
        request=request,
    )
    normalizer = ResponseNormalizer("/v2/domains")
    outcome = await normalizer.consume(response)
    assert isinstance(outcome.error, TransportError)
    assert outcome.error.cause is ErrorCause.TRANSPORT
    assert normalizer.raw == b'{"partial":'

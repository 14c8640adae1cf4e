"""Tests for the structured exception hierarchy."""

import json

import httpx
import pytest

from mailgun_request.exceptions import (
    APIError,
    ConfigurationError,
    ErrorCause,
    MailgunError,
    ResponseParseError,
    TransportError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error,cause",
    [
        (TransportError("down"), ErrorCause.NETWORK),
        (TransportError("reset", cause=ErrorCause.TRANSPORT), ErrorCause.TRANSPORT),
        (APIError("bad", status_code=400), ErrorCause.STATUS),
        (ResponseParseError("Expecting value"), ErrorCause.MALFORMED_JSON),
        (ConfigurationError("missing"), None),
        (ValidationError("nope"), None),
    ],
)
def test_causes(error, cause):
    assert isinstance(error, MailgunError)
    assert error.cause is cause


def test_cause_values_are_stable():
    assert [c.value for c in ErrorCause] == [
        "network",
        "transport-error",
        "non-200-status",
        "malformed-json",
    ]


def test_to_dict_for_api_error():
    error = APIError("bad request", status_code=400, response_body={"message": "bad request"})
    assert error.to_dict() == {
        "error": "API_ERROR",
        "cause": "non-200-status",
        "message": "bad request",
        "details": {"status_code": 400, "response_body": {"message": "bad request"}},
    }


def test_transport_error_keeps_original():
    original = httpx.ConnectError("connection refused")
    error = TransportError("Request failed", original_error=original)
    assert error.original_error is original
    assert error.details == {
        "original_error": "connection refused",
        "error_type": "ConnectError",
    }


def test_to_json_round_trips_through_json():
    error = ValidationError("Unsupported HTTP method", field="method", value="FETCH")
    payload = json.loads(error.to_json())
    assert payload["error"] == "VALIDATION_ERROR"
    assert payload["cause"] is None
    assert payload["details"] == {"field": "method", "value": "FETCH"}


def test_default_code_is_class_name():
    assert MailgunError("generic").code == "MailgunError"
    assert str(MailgunError("generic")) == "generic"

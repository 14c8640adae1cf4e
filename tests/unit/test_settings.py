"""Unit tests for environment-driven settings."""

import pytest

from mailgun_request.config.settings import Settings
from mailgun_request.exceptions import ConfigurationError


@pytest.mark.unit
def test_defaults():
    settings = Settings()
    assert settings.mailgun_host == "api.mailgun.net"
    assert settings.mailgun_endpoint == "/v2"
    assert settings.mailgun_port == 443
    assert settings.request_timeout is None
    assert settings.base_url == "https://api.mailgun.net"


@pytest.mark.unit
def test_api_key_from_environment():
    settings = Settings()
    assert settings.basic_auth == ("api", "key-0123456789abcdef0123456789abcdef")


@pytest.mark.unit
def test_legacy_key_variable(monkeypatch):
    monkeypatch.delenv("MAILGUN_API_KEY", raising=False)
    monkeypatch.setenv("MAILGUN_KEY", "key-legacy")
    assert Settings().basic_auth == ("api", "key-legacy")


@pytest.mark.unit
def test_api_key_is_stripped(monkeypatch):
    monkeypatch.setenv("MAILGUN_API_KEY", "  key-padded \n")
    assert Settings().basic_auth == ("api", "key-padded")


@pytest.mark.unit
@pytest.mark.parametrize("value", ["", "   "])
def test_blank_api_key_is_a_configuration_error(monkeypatch, value):
    monkeypatch.setenv("MAILGUN_API_KEY", value)
    with pytest.raises(ConfigurationError) as exc_info:
        Settings().basic_auth
    assert exc_info.value.details == {"setting": "mailgun_api_key"}


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw,expected",
    [("/v3", "/v3"), ("v3", "/v3"), ("/v3/", "/v3"), (" v4 ", "/v4"), ("", "")],
)
def test_endpoint_normalized(monkeypatch, raw, expected):
    monkeypatch.setenv("MAILGUN_ENDPOINT", raw)
    assert Settings().mailgun_endpoint == expected


@pytest.mark.unit
def test_host_and_protocol_overrides(monkeypatch):
    monkeypatch.setenv("MAILGUN_HOST", "localhost:8080")
    monkeypatch.setenv("MAILGUN_PROTOCOL", "http")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
    settings = Settings()
    assert settings.base_url == "http://localhost:8080"
    assert settings.request_timeout == 2.5

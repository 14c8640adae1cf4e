import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

TEST_API_KEY = "key-0123456789abcdef0123456789abcdef"


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    # Add custom markers for test organization
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set the environment variables the Settings class reads."""
    monkeypatch.setenv("MAILGUN_API_KEY", TEST_API_KEY)
    monkeypatch.delenv("MAILGUN_KEY", raising=False)
    monkeypatch.delenv("MAILGUN_HOST", raising=False)
    monkeypatch.delenv("MAILGUN_ENDPOINT", raising=False)
    monkeypatch.delenv("MAILGUN_PROTOCOL", raising=False)
    monkeypatch.delenv("MAILGUN_PORT", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    yield


@pytest.fixture
def mock_transport():
    """Build an httpx MockTransport that records every request it sees.

    The handler receives the request and returns an ``httpx.Response``;
    it may also raise to simulate transport failures.
    """

    def factory(handler):
        seen = []

        async def _handle(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        transport = httpx.MockTransport(_handle)
        transport.requests = seen
        return transport

    return factory


@pytest.fixture
def json_response():
    """Shorthand for a JSON response with an explicit status code."""

    def factory(status_code=200, payload=None, **kwargs):
        return httpx.Response(status_code, json=payload if payload is not None else {}, **kwargs)

    return factory


class FailingStream(httpx.AsyncByteStream):
    """Response body that yields some data and then breaks."""

    def __init__(self, chunks=(b'{"partial":',), error=None):
        self.chunks = list(chunks)
        self.error = error or httpx.ReadError("connection reset by peer")

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        raise self.error


@pytest.fixture
def failing_stream():
    return FailingStream

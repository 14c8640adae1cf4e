"""Response normalization.

:class:`ResponseNormalizer` turns one streamed HTTP response into an
:class:`~mailgun_request.utils.http.outcome.Outcome`. It moves through
four states:

- RECEIVING: chunks are appended to an instance-owned buffer; a stream
  error is recorded and ends reception
- ENDED: the buffer is parsed and the status classified
- RESOLVED / REJECTED: terminal, one per response

JSON is parsed only when no stream error occurred and the response is
declared as JSON. The campaigns endpoints are parsed regardless of their
content type because the API labels those JSON responses incorrectly.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Optional

import httpx

from ...exceptions import (
    APIError,
    ErrorCause,
    MailgunError,
    ResponseParseError,
    TransportError,
)
from .outcome import Outcome

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
CONTENT_TYPE_EXEMPT_PATH = re.compile(r"/campaigns")


class ResponseState(str, Enum):
    RECEIVING = "receiving"
    ENDED = "ended"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class ResponseNormalizer:
    """Buffer, parse and classify a single response.

    :param request_path: Path of the request, used for the content-type
        exemption
    :type request_path: str
    """

    def __init__(self, request_path: str) -> None:
        self.request_path = request_path
        self.state = ResponseState.RECEIVING
        self.status_code: Optional[int] = None
        self.content_type = ""
        self._buffer = bytearray()
        self._error: Optional[MailgunError] = None

    @property
    def skips_content_type_check(self) -> bool:
        return CONTENT_TYPE_EXEMPT_PATH.search(self.request_path) is not None

    @property
    def raw(self) -> bytes:
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> None:
        """Append a chunk of the response body."""
        if self.state is not ResponseState.RECEIVING:
            raise RuntimeError(f"Cannot receive data in state {self.state.value}")
        self._buffer.extend(chunk)

    def fail(self, exc: BaseException) -> None:
        """Record a stream error; the response is still classified at the end."""
        if self._error is None:
            self._error = TransportError(
                f"Response stream failed: {exc}",
                original_error=exc,
                cause=ErrorCause.TRANSPORT,
            )

    async def consume(self, response: httpx.Response) -> Outcome:
        """Read a streamed response to the end and classify it.

        :param response: Response opened with ``stream=True``
        :type response: httpx.Response
        :return: The call's outcome
        :rtype: Outcome
        """
        try:
            async for chunk in response.aiter_bytes():
                self.feed(chunk)
        except (httpx.HTTPError, httpx.StreamError) as exc:
            logger.debug("response stream error: %s", exc)
            self.fail(exc)
        return self.finish(response.status_code, response.headers.get("content-type"))

    def finish(self, status_code: int, content_type: Optional[str]) -> Outcome:
        """Classify the buffered response.

        :param status_code: HTTP status code
        :param content_type: ``content-type`` header, if any
        :return: The call's outcome
        :rtype: Outcome
        """
        if self.state is not ResponseState.RECEIVING:
            raise RuntimeError(f"Response already classified ({self.state.value})")
        self.state = ResponseState.ENDED
        self.status_code = status_code
        self.content_type = content_type or ""

        logger.debug(
            "response status code: %s content type: %s",
            status_code,
            self.content_type,
        )

        body: Any = None
        if self._error is None and (
            self.skips_content_type_check or JSON_CONTENT_TYPE in self.content_type
        ):
            try:
                body = json.loads(self.raw)
            except ValueError as exc:
                body = None
                self._error = ResponseParseError(str(exc), status_code=status_code)

        if self._error is None and status_code != 200:
            self._error = APIError(
                self._status_message(body),
                status_code=status_code,
                response_body=body if body is not None else self._text(),
            )

        if self._error is not None:
            self.state = ResponseState.REJECTED
            return Outcome.failure(self._error)

        self.state = ResponseState.RESOLVED
        return Outcome.success(body)

    def _text(self) -> str:
        return self._buffer.decode("utf-8", errors="replace")

    def _status_message(self, body: Any) -> str:
        if isinstance(body, dict):
            message = body.get("message") or body.get("response")
            if message:
                return message if isinstance(message, str) else json.dumps(message)
        if body:
            return body if isinstance(body, str) else json.dumps(body)
        return self._text()

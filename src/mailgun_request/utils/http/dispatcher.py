"""Request dispatch for the Mailgun API.

:class:`RequestDispatcher` is the single entry point used by resource
wrappers. Each call is encoded, sent over one of two transport paths and
normalized into exactly one outcome, which is delivered both to the
caller's callback and as the awaited return value (or raised error).

Transport paths:

- multipart: a dedicated client is opened for the upload, sends the
  streamed form to the API host on the configured port, and is closed
  once the response has been read; an injected transport stays open
  for later calls
- standard: the dispatcher's shared client sends the method, path and
  headers, plus the url-encoded body for POST / PUT / PATCH

Transport failures are delivered once and never retried. There is no
timeout unless ``request_timeout`` is configured.

Examples:
    >>> dispatcher = RequestDispatcher(auth="api:key-123")
    >>> body = await dispatcher.request("GET", "/domains", {"limit": 10})
"""

import asyncio
import logging
from typing import Any, Mapping, Optional, Tuple, Union

import httpx

from ...config.settings import Settings
from ...config.settings import settings as default_settings
from ...exceptions import MailgunError, TransportError
from ...models.request import CallRequest, EncodedRequest, HttpMethod
from ..security import sanitize_headers
from .encoder import Encoder
from .outcome import Callback, Outcome, OutcomeChannel, callback_adapter, future_adapter
from .response import ResponseNormalizer

logger = logging.getLogger(__name__)

Credential = Union[str, Tuple[str, str], httpx.Auth]

# Failures raised before a response exists; all are delivered as network errors
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, OSError)


class _BorrowedTransport(httpx.AsyncBaseTransport):
    """Lend a transport to a short-lived client without handing over ownership."""

    def __init__(self, transport: httpx.AsyncBaseTransport) -> None:
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        # Closed by the dispatcher that owns it
        pass


def build_auth(credential: Credential) -> httpx.Auth:
    """Turn an opaque credential into httpx basic auth.

    ``"user:password"`` strings are split on the first colon; a string
    without a colon is taken as an API key for the ``api`` user.

    :param credential: Credential string, ``(user, password)`` pair or
        an httpx auth instance
    :return: Auth flow attached to every request
    :rtype: httpx.Auth
    """
    if isinstance(credential, httpx.Auth):
        return credential
    if isinstance(credential, tuple):
        return httpx.BasicAuth(*credential)
    user, sep, password = str(credential).partition(":")
    if not sep:
        return httpx.BasicAuth("api", user)
    return httpx.BasicAuth(user, password)


class RequestDispatcher:
    """Encode, send and normalize API calls.

    :param auth: Credential; defaults to the configured API key
    :type auth: Optional[Credential]
    :param settings: Settings providing host, version prefix and timeout
    :type settings: Optional[Settings]
    :param transport: httpx transport used by both paths, mainly for tests
    :type transport: Optional[httpx.AsyncBaseTransport]
    :raises ConfigurationError: If no credential is given or configured
    """

    def __init__(
        self,
        auth: Optional[Credential] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.host = self.settings.mailgun_host
        self.endpoint = self.settings.mailgun_endpoint
        self.auth = build_auth(auth if auth is not None else self.settings.basic_auth)
        self.encoder = Encoder(endpoint=self.endpoint)
        self._transport = transport
        self._timeout = httpx.Timeout(self.settings.request_timeout)
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                auth=self.auth,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the shared client and the injected transport, if any."""
        if self._client is not None:
            # The shared client owns the injected transport and closes it too
            await self._client.aclose()
            self._client = None
        elif self._transport is not None:
            await self._transport.aclose()

    async def request(
        self,
        method: Union[str, HttpMethod],
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        """Perform one API call.

        The outcome is delivered to ``callback(error, body)`` and returned
        (or raised) from this coroutine; both channels see the same
        values exactly once.

        :param method: HTTP method
        :param resource: Resource path below the version prefix
        :param data: Request fields, defaults to none
        :param callback: Error-first callback, defaults to a no-op
        :return: Parsed response body
        :raises MailgunError: When the call fails
        """
        future: "asyncio.Future[Any]" = asyncio.get_running_loop().create_future()
        channel = OutcomeChannel()
        channel.subscribe(future_adapter(future))
        channel.subscribe(callback_adapter(callback))

        outcome = await self._perform(method, resource, data)

        try:
            await channel.publish(outcome)
        except Exception:
            # The callback raised after the future was settled
            if future.done():
                future.exception()
            raise
        return await future

    async def _perform(
        self,
        method: Union[str, HttpMethod],
        resource: str,
        data: Optional[Mapping[str, Any]],
    ) -> Outcome:
        try:
            call = CallRequest(
                method=HttpMethod.parse(method),
                resource_path=resource,
                fields=dict(data or {}),
                credential=self.auth,
            )
            encoded = self.encoder.encode(call)
        except MailgunError as exc:
            return Outcome.failure(exc)

        logger.debug("%s %s", encoded.method.value, encoded.path)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("headers: %s", sanitize_headers(encoded.headers))

        normalizer = ResponseNormalizer(encoded.path)
        try:
            if encoded.is_multipart and encoded.method.has_body:
                return await self._submit_form(call, encoded, normalizer)
            return await self._send(call, encoded, normalizer)
        except REQUEST_ERRORS as exc:
            logger.debug("request error: %s %s: %s", encoded.method.value, encoded.path, exc)
            return Outcome.failure(
                TransportError(f"Request failed: {exc}", original_error=exc)
            )

    async def _submit_form(
        self, call: CallRequest, encoded: EncodedRequest, normalizer: ResponseNormalizer
    ) -> Outcome:
        url = httpx.URL(
            scheme=self.settings.mailgun_protocol,
            host=self.host,
            port=self.settings.mailgun_port,
            path=encoded.path,
        )
        transport = (
            _BorrowedTransport(self._transport) if self._transport is not None else None
        )
        async with httpx.AsyncClient(timeout=self._timeout, transport=transport) as client:
            request = client.build_request(
                encoded.method.value, url, headers=encoded.headers, content=encoded.form
            )
            response = await client.send(request, auth=call.credential, stream=True)
            try:
                return await normalizer.consume(response)
            finally:
                await response.aclose()

    async def _send(
        self, call: CallRequest, encoded: EncodedRequest, normalizer: ResponseNormalizer
    ) -> Outcome:
        client = self._get_client()
        content = encoded.body if encoded.method.has_body and encoded.body else None
        request = client.build_request(
            encoded.method.value, encoded.path, headers=encoded.headers, content=content
        )
        response = await client.send(request, auth=call.credential, stream=True)
        try:
            return await normalizer.consume(response)
        finally:
            await response.aclose()

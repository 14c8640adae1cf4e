"""Convenience client over :class:`RequestDispatcher`.

:class:`MailgunClient` is the thin surface resource wrappers build on:
one coroutine per HTTP method, each forwarding ``(resource, data,
callback)`` to the dispatcher unchanged.
"""

from typing import Any, Mapping, Optional

import httpx

from ...config.settings import Settings
from .dispatcher import Credential, RequestDispatcher
from .outcome import Callback


class MailgunClient:
    """Mailgun API client.

    :param api_key: API key or ``user:password`` credential; defaults to
        the configured key
    :type api_key: Optional[Credential]
    :param settings: Optional settings override
    :type settings: Optional[Settings]
    :param transport: Optional httpx transport
    :type transport: Optional[httpx.AsyncBaseTransport]

    .. example::
       >>> async with MailgunClient("key-123") as mailgun:
       ...     await mailgun.post("/example.com/messages", {"to": "a@b.c"})
    """

    def __init__(
        self,
        api_key: Optional[Credential] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.dispatcher = RequestDispatcher(
            auth=api_key, settings=settings, transport=transport
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MailgunClient":
        """Create a client from settings only.

        :param settings: Settings to use, the global instance when omitted
        :return: Configured client
        :rtype: MailgunClient
        :raises ConfigurationError: If no API key is configured
        """
        return cls(settings=settings)

    async def __aenter__(self) -> "MailgunClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.dispatcher.aclose()

    async def request(
        self,
        method: str,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        """Make a request with any supported method.

        :param method: HTTP method
        :param resource: Resource path below the version prefix
        :param data: Request fields
        :param callback: Error-first callback
        :return: Parsed response body
        """
        return await self.dispatcher.request(method, resource, data, callback)

    async def get(
        self,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        return await self.request("GET", resource, data, callback)

    async def post(
        self,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        return await self.request("POST", resource, data, callback)

    async def put(
        self,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        return await self.request("PUT", resource, data, callback)

    async def delete(
        self,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        return await self.request("DELETE", resource, data, callback)

    async def patch(
        self,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        return await self.request("PATCH", resource, data, callback)

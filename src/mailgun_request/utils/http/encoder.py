"""Request encoding.

Turns a :class:`~mailgun_request.models.CallRequest` into an
:class:`~mailgun_request.models.EncodedRequest`. The encoding is chosen
per method through a single dispatch table:

- GET / DELETE: fields go into the query string
- POST / PUT / PATCH: fields go into a url-encoded body, or into a
  multipart body when ``attachment`` or ``inline`` is present

Encoding performs no I/O apart from sizing file attachments, so every
field is serialized before the request reaches the network.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from ...models.request import CallRequest, EncodedRequest, HttpMethod
from .fields import has_attachments, prepare_fields, urlencode_fields
from .multipart import build_multipart

FORM_URLENCODED = "application/x-www-form-urlencoded"
RFC2822 = "message/rfc2822"

_Strategy = Callable[[HttpMethod, str, Dict[str, Any], Optional[str]], EncodedRequest]


class Encoder:
    """Encode calls for a given API version prefix.

    :param endpoint: Version prefix prepended to every resource path
    :type endpoint: str
    """

    def __init__(self, endpoint: str = "/v2") -> None:
        self.endpoint = endpoint
        self._strategies: Dict[HttpMethod, _Strategy] = {
            HttpMethod.GET: self._encode_query,
            HttpMethod.DELETE: self._encode_query,
            HttpMethod.POST: self._encode_body,
            HttpMethod.PUT: self._encode_body,
            HttpMethod.PATCH: self._encode_body,
        }

    def encode(self, call: CallRequest, boundary: Optional[str] = None) -> EncodedRequest:
        """Encode a call.

        :param call: The call to encode
        :type call: CallRequest
        :param boundary: Fixed multipart boundary, random when omitted
        :type boundary: Optional[str]
        :return: The wire form of the call
        :rtype: EncodedRequest
        """
        params = prepare_fields(call.fields)
        path = f"{self.endpoint}{call.resource_path}"
        encoded = self._strategies[call.method](call.method, path, params, boundary)

        if (
            call.method is HttpMethod.GET
            and "/messages" in encoded.path
            and params.get("MIME") is True
        ):
            headers = dict(encoded.headers)
            headers["Accept"] = RFC2822
            encoded = encoded.model_copy(update={"headers": headers})

        return encoded

    def _encode_query(
        self,
        method: HttpMethod,
        path: str,
        params: Dict[str, Any],
        boundary: Optional[str],
    ) -> EncodedRequest:
        query = urlencode_fields(params)
        if query:
            path = f"{path}?{query}"
        return EncodedRequest(method=method, path=path)

    def _encode_body(
        self,
        method: HttpMethod,
        path: str,
        params: Dict[str, Any],
        boundary: Optional[str],
    ) -> EncodedRequest:
        if has_attachments(params):
            form = build_multipart(params, boundary=boundary)
            return EncodedRequest(
                method=method, path=path, headers=form.headers(), form=form
            )

        body = urlencode_fields(params).encode("utf-8")
        headers = {
            "Content-Type": FORM_URLENCODED,
            "Content-Length": str(len(body)),
        }
        return EncodedRequest(method=method, path=path, headers=headers, body=body)


def encode(
    method: Any,
    resource_path: str,
    fields: Optional[Mapping[str, Any]] = None,
    endpoint: str = "/v2",
    boundary: Optional[str] = None,
) -> EncodedRequest:
    """Encode a single call without building a dispatcher.

    :param method: HTTP method name or member
    :param resource_path: Resource path below the version prefix
    :param fields: Request fields
    :param endpoint: Version prefix
    :param boundary: Fixed multipart boundary
    :return: Encoded request
    :rtype: EncodedRequest
    :raises ValidationError: If the method is not supported
    """
    call = CallRequest(
        method=HttpMethod.parse(method),
        resource_path=resource_path,
        fields=dict(fields or {}),
    )
    return Encoder(endpoint=endpoint).encode(call, boundary=boundary)

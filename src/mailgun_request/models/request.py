"""Request models shared by the encoder and the dispatcher."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ValidationError


class HttpMethod(str, Enum):
    """HTTP methods accepted by the API.

    GET and DELETE carry their fields in the query string; POST, PUT and
    PATCH carry them in the request body.
    """

    GET = "GET"
    DELETE = "DELETE"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"

    @property
    def has_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)

    @classmethod
    def parse(cls, value: Any) -> "HttpMethod":
        """Convert a method name to a member.

        :param value: Method name (case-insensitive) or member
        :return: Matching HttpMethod
        :raises ValidationError: If the method is not supported
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValidationError(
                f"Unsupported HTTP method: {value!r}", field="method", value=value
            ) from None


class CallRequest(BaseModel):
    """A single call as issued by the caller.

    :param method: HTTP method
    :type method: HttpMethod
    :param resource_path: Resource path below the API version prefix
    :type resource_path: str
    :param fields: Request fields
    :type fields: Dict[str, Any]
    :param credential: Opaque credential attached as basic auth
    :type credential: Any
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HttpMethod
    resource_path: str
    fields: Dict[str, Any] = Field(default_factory=dict)
    credential: Any = None


class EncodedRequest(BaseModel):
    """Wire form of a :class:`CallRequest`.

    ``body`` holds the url-encoded payload for body-carrying methods
    without attachments; ``form`` holds the multipart body otherwise.
    GET and DELETE requests have neither.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HttpMethod
    path: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = None
    form: Optional[Any] = None  # MultipartForm

    @property
    def is_multipart(self) -> bool:
        return self.form is not None

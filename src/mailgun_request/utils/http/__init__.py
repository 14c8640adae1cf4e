"""HTTP utilities public API (barrel module).

This package provides:
- Field preparation and url-encoding
- Multipart assembly for attachments
- Response normalization into a single outcome
- The request dispatcher and a convenience client

Recommended import pattern for consumers:
    from mailgun_request.utils.http import MailgunClient, RequestDispatcher
"""

from .dispatcher import RequestDispatcher, build_auth
from .encoder import Encoder, encode
from .fields import (
    ATTACHMENT_FIELDS,
    JSON_FIELDS,
    format_scalar,
    prepare_fields,
    urlencode_fields,
)
from .multipart import FilePart, MultipartForm, TextPart, build_multipart
from .outcome import Outcome, OutcomeChannel, callback_adapter, future_adapter
from .request import MailgunClient
from .response import ResponseNormalizer, ResponseState

__all__ = [
    "ATTACHMENT_FIELDS",
    "JSON_FIELDS",
    "Encoder",
    "FilePart",
    "MailgunClient",
    "MultipartForm",
    "Outcome",
    "OutcomeChannel",
    "RequestDispatcher",
    "ResponseNormalizer",
    "ResponseState",
    "TextPart",
    "build_auth",
    "build_multipart",
    "callback_adapter",
    "encode",
    "format_scalar",
    "future_adapter",
    "prepare_fields",
    "urlencode_fields",
]

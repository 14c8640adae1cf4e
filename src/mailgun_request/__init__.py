"""Mailgun request layer.

This package builds, sends and normalizes HTTP requests for the Mailgun
API: url-encoded or multipart bodies depending on attachments, basic-auth
dispatch over TLS, and a single success/failure outcome delivered to a
callback and as the awaited result.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.1.0"

from .exceptions import (  # noqa: E402
    APIError,
    ConfigurationError,
    ErrorCause,
    MailgunError,
    ResponseParseError,
    TransportError,
    ValidationError,
)
from .models import Attachment, HttpMethod  # noqa: E402
from .utils.http import MailgunClient, RequestDispatcher  # noqa: E402

__all__ = [
    "APIError",
    "Attachment",
    "ConfigurationError",
    "ErrorCause",
    "HttpMethod",
    "MailgunClient",
    "MailgunError",
    "RequestDispatcher",
    "ResponseParseError",
    "TransportError",
    "ValidationError",
    "__version__",
]

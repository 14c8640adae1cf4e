"""Mailgun request models package.

Pydantic models for caller input (:class:`CallRequest`, attachments) and
the encoded wire form handed to the transport.
"""

from .attachment import DEFAULT_FILENAME, Attachment, coerce_attachment
from .request import CallRequest, EncodedRequest, HttpMethod

__all__ = [
    "Attachment",
    "CallRequest",
    "DEFAULT_FILENAME",
    "EncodedRequest",
    "HttpMethod",
    "coerce_attachment",
]

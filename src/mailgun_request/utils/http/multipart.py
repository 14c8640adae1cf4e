"""Multipart/form-data assembly for attachment uploads.

This module builds the request body used when a call carries
``attachment`` or ``inline`` fields. Parts are kept in field order and
the body is produced lazily: file-backed parts are opened only while the
body is being streamed, and each file is closed as soon as its part has
been written or the stream fails.

The resulting :class:`MultipartForm` is an async iterable of ``bytes``
and can be passed directly as ``content=`` to an httpx client.
"""

import logging
import mimetypes
import secrets
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple, Union

import anyio

from ...models.attachment import Attachment, coerce_attachment
from .fields import ATTACHMENT_FIELDS, format_scalar, iter_field_items

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
CHUNK_SIZE = 64 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def generate_boundary() -> str:
    """Create a random boundary: 26 dashes followed by 24 hex digits."""
    return "-" * 26 + secrets.token_hex(12)


def _quote(value: str) -> str:
    return value.replace("\r", "%0D").replace("\n", "%0A").replace('"', "%22")


@dataclass(frozen=True)
class TextPart:
    """Plain form field."""

    name: str
    value: str


@dataclass(frozen=True)
class FilePart:
    """File upload backed by in-memory bytes or a path."""

    name: str
    attachment: Attachment

    @property
    def filename(self) -> str:
        return self.attachment.resolved_filename

    @property
    def content_type(self) -> str:
        if self.attachment.content_type:
            return self.attachment.content_type
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or DEFAULT_CONTENT_TYPE


Part = Union[TextPart, FilePart]


class MultipartForm:
    """Ordered multipart/form-data body.

    :param boundary: Boundary to use, generated when omitted
    :type boundary: Optional[str]
    """

    def __init__(self, boundary: Optional[str] = None) -> None:
        self.boundary = boundary or generate_boundary()
        self._parts: List[Part] = []

    @property
    def parts(self) -> Tuple[Part, ...]:
        return tuple(self._parts)

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def append(self, name: str, value: Any) -> None:
        """Append a text part; the value is rendered with the scalar rules."""
        self._parts.append(TextPart(name=name, value=format_scalar(value)))

    def append_attachment(self, name: str, value: Any) -> bool:
        """Append a file part for a supported attachment value.

        Bytes, path strings, ``os.PathLike`` objects and
        :class:`Attachment` instances are accepted. Anything else is
        skipped without error.

        :param name: Field name
        :param value: Attachment value
        :return: Whether a part was appended
        :rtype: bool
        """
        attachment = coerce_attachment(value)
        if attachment is None:
            logger.debug("unknown attachment type. key: %s", name)
            return False
        if attachment.is_path:
            logger.debug(
                "appending attachment stream to form data. key: %s path: %s filename: %s",
                name,
                attachment.data,
                attachment.resolved_filename,
            )
        else:
            logger.debug(
                "appending attachment buffer to form data. key: %s filename: %s",
                name,
                attachment.resolved_filename,
            )
        self._parts.append(FilePart(name=name, attachment=attachment))
        return True

    def _part_header(self, part: Part) -> bytes:
        disposition = f'Content-Disposition: form-data; name="{_quote(part.name)}"'
        lines = [f"--{self.boundary}"]
        if isinstance(part, FilePart):
            lines.append(f'{disposition}; filename="{_quote(part.filename)}"')
            lines.append(f"Content-Type: {part.content_type}")
        else:
            lines.append(disposition)
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    def _closing(self) -> bytes:
        return f"--{self.boundary}--\r\n".encode("ascii")

    def _part_size(self, part: Part) -> int:
        if isinstance(part, TextPart):
            return len(part.value.encode("utf-8"))
        attachment = part.attachment
        if attachment.known_length is not None:
            return attachment.known_length
        if attachment.is_path:
            return attachment.data.stat().st_size
        return len(attachment.data)

    def content_length(self) -> Optional[int]:
        """Total body size, or None when a file cannot be inspected.

        :return: Size in bytes
        :rtype: Optional[int]
        """
        total = len(self._closing())
        for part in self._parts:
            try:
                size = self._part_size(part)
            except OSError:
                return None
            total += len(self._part_header(part)) + size + len(CRLF)
        return total

    def headers(self) -> Dict[str, str]:
        """Headers describing this body.

        ``Content-Length`` is omitted when the size is unknown, in which
        case the body is sent with chunked transfer encoding.
        """
        headers = {"Content-Type": self.content_type}
        length = self.content_length()
        if length is not None:
            headers["Content-Length"] = str(length)
        return headers

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for part in self._parts:
            yield self._part_header(part)
            if isinstance(part, TextPart):
                yield part.value.encode("utf-8")
            elif part.attachment.is_path:
                async with await anyio.open_file(part.attachment.data, "rb") as fh:
                    while True:
                        chunk = await fh.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        yield chunk
            else:
                yield part.attachment.data
            yield CRLF
        yield self._closing()

    async def render(self) -> bytes:
        """Render the whole body into memory."""
        return b"".join([chunk async for chunk in self])


def build_multipart(
    params: Mapping[str, Any], boundary: Optional[str] = None
) -> MultipartForm:
    """Build a multipart body from prepared fields.

    Attachment fields holding a list or tuple produce one part per
    element under the same name, in order. Other fields become text
    parts; JSON fields must already be serialized.

    :param params: Prepared fields
    :type params: Mapping[str, Any]
    :param boundary: Optional fixed boundary
    :type boundary: Optional[str]
    :return: Assembled form
    :rtype: MultipartForm
    """
    form = MultipartForm(boundary=boundary)
    for name, value in iter_field_items(params):
        if name in ATTACHMENT_FIELDS:
            form.append_attachment(name, value)
        else:
            form.append(name, value)
    return form

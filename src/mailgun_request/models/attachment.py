"""Attachment value model.

An attachment is either in-memory bytes or a filesystem path that is
read lazily when the request body is streamed. Callers may pass raw
``bytes`` or a path string where an attachment is expected;
:func:`coerce_attachment` turns those into :class:`Attachment` so the
multipart assembler only ever handles one closed shape.
"""

import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import ValidationError

DEFAULT_FILENAME = "file"


class Attachment(BaseModel):
    """File content to upload as a multipart part.

    Exactly one source is held: ``data`` is either ``bytes`` or a
    :class:`~pathlib.Path`. A ``str`` or ``os.PathLike`` given as data is
    treated as a path. ``path=`` and ``content=`` are accepted as explicit
    spellings of the two sources.

    :param data: Bytes to upload, or path of the file to stream
    :type data: Union[bytes, Path]
    :param filename: Filename sent in the part, defaults to ``"file"``
    :type filename: Optional[str]
    :param content_type: Explicit part content type
    :type content_type: Optional[str]
    :param known_length: Size in bytes when the caller already knows it
    :type known_length: Optional[int]

    .. example::
       >>> Attachment(data=b"hello", filename="hello.txt").filename
       'hello.txt'
       >>> Attachment(path="/tmp/report.pdf").is_path
       True
    """

    model_config = ConfigDict(frozen=True)

    data: Union[bytes, Path]
    filename: Optional[str] = None
    content_type: Optional[str] = None
    known_length: Optional[int] = Field(None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _select_source(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        values = dict(values)
        sources = [k for k in ("data", "path", "content") if values.get(k) is not None]
        if len(sources) != 1:
            raise ValidationError(
                "Attachment requires exactly one of data, path or content",
                field="data",
            )
        source = sources[0]
        value = values.pop(source)
        if source == "content" and not isinstance(value, (bytes, bytearray)):
            raise ValidationError("Attachment content must be bytes", field="content")
        if isinstance(value, bytearray):
            value = bytes(value)
        elif isinstance(value, (str, os.PathLike)):
            value = Path(value)
        elif not isinstance(value, bytes):
            raise ValidationError(
                "Attachment data must be bytes or a path",
                field="data",
                value=type(value).__name__,
            )
        values["data"] = value
        return values

    @property
    def is_path(self) -> bool:
        """Whether the content is streamed from a file."""
        return isinstance(self.data, Path)

    @property
    def resolved_filename(self) -> str:
        """Filename sent with the part."""
        return self.filename or DEFAULT_FILENAME


def coerce_attachment(value: Any) -> Optional[Attachment]:
    """Normalize a caller-supplied attachment value.

    Raw bytes get the default filename; a bare path keeps its basename,
    as a file stream upload would. Unsupported shapes return ``None`` and
    are skipped by the caller.

    :param value: bytes, path string, ``os.PathLike`` or :class:`Attachment`
    :return: Normalized attachment, or None for unsupported values
    :rtype: Optional[Attachment]
    """
    if isinstance(value, Attachment):
        return value
    if isinstance(value, (bytes, bytearray)):
        return Attachment(data=bytes(value), filename=DEFAULT_FILENAME)
    if isinstance(value, (str, os.PathLike)):
        path = Path(value)
        return Attachment(data=path, filename=path.name or DEFAULT_FILENAME)
    return None

"""Field preparation and scalar rendering shared by both body encodings.

Values reach the wire in two ways, as ``application/x-www-form-urlencoded``
pairs or as multipart text parts. Both use the same rendering rules:

- ``True`` / ``False`` become ``"true"`` / ``"false"``
- ``None`` becomes an empty string
- integral floats drop their fractional part (``2.0`` -> ``"2"``)
- list and tuple values repeat the field once per element
- any other object (including mappings other than ``vars`` and
  ``members``) renders as an empty string
"""

import json
import math
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

# Fields whose values are uploaded as files
ATTACHMENT_FIELDS = ("attachment", "inline")

# Fields the API expects as JSON documents
JSON_FIELDS = ("vars", "members")

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def prepare_fields(fields: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a copy of ``fields`` with JSON fields serialized.

    ``vars`` and ``members`` are each serialized independently when they
    hold a mapping or a list. Other structured values are left alone.

    :param fields: Caller-supplied fields
    :type fields: Optional[Mapping[str, Any]]
    :return: New dictionary safe to encode
    :rtype: Dict[str, Any]
    """
    params = dict(fields or {})
    for name in JSON_FIELDS:
        value = params.get(name)
        if isinstance(value, (Mapping, list, tuple)):
            params[name] = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return params


def _is_set(value: Any) -> bool:
    # Empty buffers and sequences still count, only falsy scalars are absent
    if isinstance(value, (bytes, bytearray, list, tuple)):
        return True
    return bool(value)


def has_attachments(params: Mapping[str, Any]) -> bool:
    """Whether ``attachment`` or ``inline`` holds a value.

    ``None``, ``""``, ``False`` and ``0`` count as absent, so such a field
    is url-encoded like any other.

    :param params: Prepared fields
    :rtype: bool
    """
    return any(_is_set(params.get(name)) for name in ATTACHMENT_FIELDS)


def format_scalar(value: Any) -> str:
    """Render a single field value as text.

    :param value: Field value
    :return: Wire representation
    :rtype: str
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return ""


def iter_field_items(params: Mapping[str, Any]) -> Iterator[Tuple[str, Any]]:
    """Yield ``(name, value)`` pairs, expanding sequence values.

    :param params: Prepared fields
    :return: Iterator of pairs in field order
    """
    for name, value in params.items():
        if isinstance(value, (list, tuple)):
            for item in value:
                yield name, item
        else:
            yield name, value


def urlencode_fields(params: Mapping[str, Any]) -> str:
    """Encode prepared fields as a query string.

    Percent-encoding matches ``encodeURIComponent``: spaces become ``%20``
    and ``-_.!~*'()`` are kept.

    :param params: Prepared fields
    :return: Encoded string, empty when there are no fields
    :rtype: str
    """
    pairs = [(name, format_scalar(value)) for name, value in iter_field_items(params)]
    return urlencode(pairs, safe=_URI_COMPONENT_SAFE, quote_via=quote)

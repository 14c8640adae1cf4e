"""Secure logging for the Mailgun request layer.

This module provides:
- Redaction of Mailgun API keys and basic-auth credentials in strings
- Header sanitization for debug logging of outgoing requests
- A logging formatter that redacts every record before it is emitted
- Idempotent logging setup for applications embedding the client
"""

import logging
import re
import sys
from typing import Any, Dict, Mapping

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "mailgun_key": re.compile(r"\bkey-[0-9a-zA-Z]{32}\b"),
    "mailgun_private_key": re.compile(
        r"\b[0-9a-f]{32}-[0-9a-f]{8}-[0-9a-f]{8}\b", re.IGNORECASE
    ),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
    "basic_auth": re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE),
    "api_credential": re.compile(r"\bapi:[^\s'\"@]+"),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
}


def sanitize_string(value: str) -> str:
    """Redact credentials embedded in a string.

    Each match of a sensitive pattern is replaced in place, so the
    surrounding text stays readable.

    :param value: String to sanitize
    :type value: str
    :return: Sanitized string with sensitive data redacted
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        value = pattern.sub(f"<{pattern_name}:REDACTED>", value)
    return value


def sanitize_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: HTTP headers
    :type headers: Mapping[str, Any]
    :return: Copy of the headers with sensitive values redacted
    :rtype: Dict[str, Any]
    """
    sanitized: Dict[str, Any] = {}
    for key, value in (headers or {}).items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and len(value) > 0:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
        else:
            sanitized[key] = value
    return sanitized


class SanitizingFormatter(logging.Formatter):
    """Formatter that redacts credentials from every log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with automatic sanitization.

        :param record: Log record to format
        :type record: logging.LogRecord
        :return: Sanitized log message
        :rtype: str
        """
        if record.args:
            try:
                record.msg = sanitize_string(record.msg % record.args)
                record.args = None
            except (TypeError, ValueError):
                # Leave mismatched format arguments for the base formatter
                record.msg = sanitize_string(str(record.msg))
                record.args = tuple(
                    sanitize_string(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )
        else:
            record.msg = sanitize_string(str(record.msg))
        return sanitize_string(super().format(record))


# Global flag to track if logging has been set up
_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Set up logging with automatic sanitization.

    Installs a single stdout handler using :class:`SanitizingFormatter`
    on the root logger. Repeated calls are ignored.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        SanitizingFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs every request line at INFO, including the URL
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True

"""Structured exception classes for the Mailgun request layer."""

import json
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCause(str, Enum):
    """Classification of a failed call.

    Every failure delivered by the dispatcher carries exactly one cause
    so that callers can branch without inspecting exception types.
    """

    NETWORK = "network"
    TRANSPORT = "transport-error"
    STATUS = "non-200-status"
    MALFORMED_JSON = "malformed-json"


class MailgunError(Exception):
    """Base exception for all Mailgun request errors.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    :param cause: Optional failure classification
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[ErrorCause] = None,
    ):
        """Initialize the exception with message, code, details and cause."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, cause, message, and details
        """
        return {
            "error": self.code,
            "cause": self.cause.value if self.cause else None,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class TransportError(MailgunError):
    """Raised when the request could not be sent or the response stream broke.

    Request-phase failures (connection refused, TLS handshake, unreadable
    attachment file) are classified as ``network``; failures while reading
    the response body are classified as ``transport-error``.

    :param message: Description of the transport failure
    :param original_error: The exception raised by the transport
    :param cause: Failure classification, defaults to ``network``
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[BaseException] = None,
        cause: ErrorCause = ErrorCause.NETWORK,
    ):
        """Initialize transport error with the underlying exception."""
        details: Dict[str, Any] = {}
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["error_type"] = type(original_error).__name__
        super().__init__(
            message=message, code="TRANSPORT_ERROR", details=details, cause=cause
        )
        self.original_error = original_error


class ResponseParseError(MailgunError):
    """Raised when a response declared as JSON cannot be parsed.

    :param message: Parser error message
    :param status_code: Optional HTTP status code of the response
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        """Initialize parse error with message and optional status code."""
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=message,
            code="RESPONSE_PARSE_ERROR",
            details=details,
            cause=ErrorCause.MALFORMED_JSON,
        )
        self.status_code = status_code


class APIError(MailgunError):
    """Raised when the API answers with a status other than 200.

    :param message: Best available message extracted from the response
    :param status_code: HTTP status code from the API response
    :param response_body: Parsed body, or raw text when it was not parsed
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[Any] = None,
    ):
        """Initialize API error with message and response details."""
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if response_body is not None:
            details["response_body"] = response_body
        super().__init__(
            message=message, code="API_ERROR", details=details, cause=ErrorCause.STATUS
        )
        self.status_code = status_code
        self.response_body = response_body


class ConfigurationError(MailgunError):
    """Raised for configuration-related errors.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class ValidationError(MailgunError):
    """Raised when caller input is rejected before anything is sent.

    :param message: Description of the validation error
    :param field: Optional name of the field that failed validation
    :param value: Optional value that caused the validation failure
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        """Initialize validation error with message and optional field/value."""
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message=message, code="VALIDATION_ERROR", details=details)

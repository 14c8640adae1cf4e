"""Configuration settings for the Mailgun request layer.

This module defines the API host, version prefix and credential used by
the dispatcher. Settings are loaded from environment variables and .env
files.
"""

from typing import Literal, Optional, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    :param mailgun_api_key: Mailgun private API key
    :type mailgun_api_key: Optional[str]
    :param mailgun_host: API host name
    :type mailgun_host: str
    :param mailgun_endpoint: API version path prefix
    :type mailgun_endpoint: str
    :param mailgun_protocol: URL scheme used for requests
    :type mailgun_protocol: Literal["https", "http"]
    :param mailgun_port: Port used by the multipart upload path
    :type mailgun_port: int
    :param request_timeout: Optional timeout in seconds, None waits forever
    :type request_timeout: Optional[float]
    :param log_level: Logging level for the application
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )

    mailgun_api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("MAILGUN_API_KEY", "MAILGUN_KEY"),
        description="Mailgun private API key",
    )

    # API Configuration
    mailgun_host: str = Field("api.mailgun.net", description="Mailgun API host")
    mailgun_endpoint: str = Field("/v2", description="Mailgun API version prefix")
    mailgun_protocol: Literal["https", "http"] = Field(
        "https", description="URL scheme for API requests"
    )
    mailgun_port: int = Field(443, description="Port for multipart uploads")

    # Requests wait indefinitely unless a timeout is set
    request_timeout: Optional[float] = Field(
        None, description="Request timeout in seconds (None disables timeouts)"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("mailgun_endpoint")
    @classmethod
    def normalize_endpoint(cls, v: str) -> str:
        """Ensure the version prefix starts with a slash and has no trailing one.

        :param v: The configured endpoint prefix
        :type v: str
        :return: Normalized prefix, e.g. ``/v2``
        :rtype: str
        """
        v = (v or "").strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @property
    def base_url(self) -> str:
        """Get the scheme and host that requests are sent to.

        :return: Base URL such as ``https://api.mailgun.net``
        :rtype: str
        """
        return f"{self.mailgun_protocol}://{self.mailgun_host}"

    @property
    def basic_auth(self) -> Tuple[str, str]:
        """Get the HTTP basic credential pair for the configured API key.

        :return: ``("api", key)``
        :rtype: Tuple[str, str]
        :raises ConfigurationError: If no API key is configured
        """
        if not self.mailgun_api_key or not self.mailgun_api_key.strip():
            raise ConfigurationError(
                "MAILGUN_API_KEY is not configured", setting="mailgun_api_key"
            )
        return ("api", self.mailgun_api_key.strip())


settings = Settings()
"""Global settings instance.

Created once at import time and used as the default configuration for
dispatchers and clients that are not given explicit settings.
"""

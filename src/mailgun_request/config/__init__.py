"""Configuration for the Mailgun request layer."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]

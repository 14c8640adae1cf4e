"""Utilities for the Mailgun request layer."""

"""
Error Hierarchy
===============

Typed exceptions for every way a subscription can fail. Each error carries the
HTTP status it maps to, so the subscription handler never inspects driver
error codes or provider responses.
"""

from typing import Optional


class NewsletterError(Exception):
    """Base exception for all newsletter service errors."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(NewsletterError):
    """Required configuration is missing. Raised at startup, never per request."""


class SubscriptionValidationError(NewsletterError):
    """The request did not carry a usable email address."""

    http_status = 400


class StorageError(NewsletterError):
    """The subscriber store rejected or failed a write."""


class DuplicateSubscriberError(StorageError):
    """The email is already stored (unique constraint violation)."""

    http_status = 409

    def __init__(self, email: str):
        super().__init__(f"Subscriber already exists: {email}")
        self.email = email


class NotificationError(NewsletterError):
    """The confirmation email could not be delivered."""

    def __init__(self, message: str, recipient: Optional[str] = None):
        super().__init__(message)
        self.recipient = recipient

"""
Newsletter Core
===============

Configuration, database handle, logging and the error hierarchy shared by the
service's modules.
"""

from .config import Config
from .database import db, init_database
from .errors import (
    NewsletterError,
    ConfigurationError,
    SubscriptionValidationError,
    StorageError,
    DuplicateSubscriberError,
    NotificationError,
)
from .logging_service import LoggingService, setup_logging

__all__ = [
    'Config', 'db', 'init_database', 'LoggingService', 'setup_logging',
    'NewsletterError', 'ConfigurationError', 'SubscriptionValidationError',
    'StorageError', 'DuplicateSubscriberError', 'NotificationError',
]

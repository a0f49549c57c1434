"""
Subscription Handler
====================

Persist-then-notify for one subscribe request. The store and mailer are
injected by the application factory and shared by all requests; the handler
keeps no state between calls.

    Received -> Validated -> Persisted -> Notified -> Succeeded
        |            |            |
        v            v            v
     Rejected   Conflicted     Failed
                  Failed
"""

from enum import Enum
from typing import Any, NamedTuple, Optional

from newsletter.core.errors import (
    DuplicateSubscriberError,
    StorageError,
    SubscriptionValidationError,
)
from newsletter.core.logging_service import LoggingService
from .models import Subscriber

MESSAGE_REQUIRED = 'Email is required.'
MESSAGE_SUCCESS = 'Subscription successful! Please check your inbox for a confirmation email.'
MESSAGE_CONFLICT = 'You are already subscribed!'
MESSAGE_FAILED = 'Subscription failed. Please check server logs for details.'


class SubscriptionState(Enum):
    """Terminal states of a subscribe request"""
    SUCCEEDED = 'succeeded'
    REJECTED = 'rejected'
    CONFLICTED = 'conflicted'
    FAILED = 'failed'


class SubscriptionOutcome(NamedTuple):
    state: SubscriptionState
    status_code: int
    message: str
    subscriber: Optional[Subscriber] = None

    def to_response(self):
        return {'message': self.message}


def normalize_email(payload: Any) -> str:
    """
    Pull the email out of a decoded JSON body.

    Addresses are compared case-insensitively: the value is stripped and
    lower-cased, so 'A@x.com ' and 'a@x.com' are the same subscriber.

    Raises:
        SubscriptionValidationError: body is not an object, or email is
            absent, not a string, or blank
    """
    if not isinstance(payload, dict):
        raise SubscriptionValidationError(MESSAGE_REQUIRED)

    email = payload.get('email')
    if not isinstance(email, str) or not email.strip():
        raise SubscriptionValidationError(MESSAGE_REQUIRED)

    return email.strip().lower()


class SubscriptionHandler:

    def __init__(self, store, mailer, brand_name=None):
        self.store = store
        self.mailer = mailer
        self.brand_name = brand_name

    def subscribe(self, payload) -> SubscriptionOutcome:
        try:
            email = normalize_email(payload)
        except SubscriptionValidationError as e:
            return SubscriptionOutcome(SubscriptionState.REJECTED, e.http_status, e.message)

        subscriber = Subscriber(email=email)
        try:
            self.store.insert_unique(subscriber)
        except DuplicateSubscriberError as e:
            LoggingService.info('subscribers', f'Already subscribed: {email}')
            return SubscriptionOutcome(SubscriptionState.CONFLICTED, e.http_status, self._conflict_message())
        except StorageError as e:
            LoggingService.error('subscribers', 'Database error in subscribe', {'email': email, 'error': str(e)})
            return SubscriptionOutcome(SubscriptionState.FAILED, e.http_status, MESSAGE_FAILED)

        LoggingService.info('subscribers', f'New subscriber saved to DB: {email}')

        try:
            self.mailer.send_confirmation_email(email)
        except Exception as e:
            # The record is already committed; it stays, and the caller sees a failure
            LoggingService.error(
                'subscribers',
                f'Failed to send confirmation email to {email}; subscriber remains stored',
                {'email': email, 'error': str(e), 'error_type': type(e).__name__},
            )
            return SubscriptionOutcome(SubscriptionState.FAILED, 500, MESSAGE_FAILED, subscriber)

        LoggingService.info('subscribers', f'Confirmation email sent to: {email}')
        return SubscriptionOutcome(SubscriptionState.SUCCEEDED, 200, MESSAGE_SUCCESS, subscriber)

    def _conflict_message(self):
        if self.brand_name:
            return f'You are already subscribed to {self.brand_name}!'
        return MESSAGE_CONFLICT

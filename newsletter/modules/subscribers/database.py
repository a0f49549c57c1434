import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from newsletter.core.errors import DuplicateSubscriberError, StorageError
from .models import Subscriber

logger = logging.getLogger(__name__)


class SubscriberStore:
    """
    Write access to the subscribers table.

    Uniqueness is enforced by the UNIQUE constraint on ``email`` at insert
    time, so two concurrent inserts of the same address cannot both commit.
    """

    def __init__(self, session):
        self.session = session

    def insert_unique(self, subscriber):
        """
        Insert a new subscriber in its own transaction.

        Returns:
            Subscriber: the persisted record

        Raises:
            DuplicateSubscriberError: the email is already stored
            StorageError: any other database failure
        """
        try:
            self.session.add(subscriber)
            self.session.commit()
        except IntegrityError:
            # Email is the only constrained column the caller can violate
            self.session.rollback()
            raise DuplicateSubscriberError(subscriber.email)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error inserting subscriber {subscriber.email}: {e}")
            raise StorageError(f"Could not store subscriber: {e}") from e
        return subscriber

    def get_by_email(self, email):
        """Get a subscriber by (normalised) email address"""
        return self.session.query(Subscriber).filter_by(email=email).first()

    def count(self):
        """Total number of stored subscribers"""
        return self.session.query(Subscriber).count()

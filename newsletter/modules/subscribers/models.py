from datetime import datetime, timezone

from newsletter.core.config import Config
from newsletter.core.database import db


def _utcnow():
    return datetime.now(timezone.utc)


class Subscriber(db.Model):
    """One newsletter signup. Created once, never updated by this service."""

    __tablename__ = Config.SUBSCRIBERS

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    subscribed_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<Subscriber {self.email}>"

"""
SubscriberStore Tests
=====================

Runs against a real SQLite file so the UNIQUE constraint does the work.
"""

import os
import shutil
import tempfile
from unittest.mock import MagicMock

import pytest
from flask import Flask
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from newsletter.core.database import db, init_database
from newsletter.core.errors import DuplicateSubscriberError, StorageError
from newsletter.modules.subscribers.database import SubscriberStore
from newsletter.modules.subscribers.models import Subscriber


@pytest.fixture
def tmp_db_dir():
    d = tempfile.mkdtemp(prefix="newsletter-store-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["DATABASE_URL"] = "sqlite:///" + os.path.join(tmp_db_dir, "store.db")
    init_database(app)
    return app


@pytest.fixture
def store(app):
    with app.app_context():
        yield SubscriberStore(db.session)


def test_insert_unique_persists_record(store):
    saved = store.insert_unique(Subscriber(email="a@x.com"))

    assert saved.id is not None
    assert saved.subscribed_at is not None
    assert store.count() == 1
    assert store.get_by_email("a@x.com").email == "a@x.com"


def test_duplicate_raises_typed_error(store):
    store.insert_unique(Subscriber(email="a@x.com"))

    with pytest.raises(DuplicateSubscriberError) as exc_info:
        store.insert_unique(Subscriber(email="a@x.com"))

    assert exc_info.value.email == "a@x.com"
    assert exc_info.value.http_status == 409
    assert store.count() == 1


def test_store_usable_after_duplicate(store):
    store.insert_unique(Subscriber(email="a@x.com"))
    with pytest.raises(DuplicateSubscriberError):
        store.insert_unique(Subscriber(email="a@x.com"))

    store.insert_unique(Subscriber(email="b@x.com"))

    assert store.count() == 2


def test_constraint_arbitrates_between_sessions(app):
    """Two sessions that both believe the email is new: exactly one commit wins."""
    with app.app_context():
        first = SubscriberStore(Session(db.engine))
        second = SubscriberStore(Session(db.engine))

        first.insert_unique(Subscriber(email="race@x.com"))
        with pytest.raises(DuplicateSubscriberError):
            second.insert_unique(Subscriber(email="race@x.com"))

        assert SubscriberStore(db.session).count() == 1
        first.session.close()
        second.session.close()


def test_other_database_errors_become_storage_error():
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

    with pytest.raises(StorageError) as exc_info:
        SubscriberStore(session).insert_unique(Subscriber(email="a@x.com"))

    assert not isinstance(exc_info.value, DuplicateSubscriberError)
    session.rollback.assert_called_once()

"""
Database
========

Process-wide Flask-SQLAlchemy handle. Module models import ``db`` from here;
the application factory binds it to the app and creates the tables.
"""

import logging
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def init_database(app):
    """Bind the SQLAlchemy handle to the app and create missing tables"""
    app.config.setdefault('SQLALCHEMY_DATABASE_URI', app.config['DATABASE_URL'])
    app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
    db.init_app(app)

    # Models register their tables on db.metadata at import time
    from newsletter.modules.subscribers import models  # noqa: F401

    with app.app_context():
        db.create_all()
        logger.info("Database tables created/verified successfully")

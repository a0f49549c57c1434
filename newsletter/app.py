"""
Application factory. Owns the process-lifetime collaborators: the database
handle, the subscriber store and the email service.
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from newsletter.core.config import DEFAULT_BRAND_NAME, Config
from newsletter.core.database import db, init_database
from newsletter.core.errors import ConfigurationError
from newsletter.core.logging_service import LoggingService
from newsletter.modules.email import EmailService
from newsletter.modules.subscribers import subscribers_bp
from newsletter.modules.subscribers.database import SubscriberStore
from newsletter.modules.subscribers.handler import SubscriptionHandler

logger = logging.getLogger(__name__)


def _parse_origins(value):
    if not value or value == '*':
        return '*'
    if isinstance(value, str):
        return [origin.strip() for origin in value.split(',') if origin.strip()]
    return list(value)


def create_app(config=None, mailer=None, store=None):
    """
    Build the Flask app.

    Args:
        config: dict of overrides applied on top of Config
        mailer: object with send_confirmation_email(email); defaults to EmailService
        store: object with insert_unique(subscriber) and count(); defaults to SubscriberStore

    Raises:
        ConfigurationError: DATABASE_URL is missing
    """
    app = Flask(__name__)
    app.config.update(Config.as_dict())
    if config:
        app.config.update(config)

    if not app.config.get('DATABASE_URL'):
        raise ConfigurationError("DATABASE_URL is not defined")

    CORS(app, origins=_parse_origins(app.config.get('CORS_ORIGINS')))

    LoggingService.init_app(app)
    init_database(app)

    if mailer is None:
        mailer = EmailService(app)
    if store is None:
        store = SubscriberStore(db.session)

    brand_name = app.config.get('EMAIL_BRAND_NAME') or DEFAULT_BRAND_NAME
    app.extensions['newsletter'] = SubscriptionHandler(store, mailer, brand_name=brand_name)

    app.register_blueprint(subscribers_bp)
    _register_error_handlers(app)

    @app.route('/')
    def index():
        """Liveness check"""
        return f'{brand_name} Backend is Running! ☕', 200, {'Content-Type': 'text/plain; charset=utf-8'}

    return app


def _register_error_handlers(app):
    """Every error response is a JSON object with a message field"""

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'message': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        LoggingService.log_error_with_traceback('system', e)
        return jsonify({'message': 'An unexpected error occurred'}), 500

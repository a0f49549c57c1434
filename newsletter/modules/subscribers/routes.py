"""
Subscribers Routes
==================

Thin HTTP layer over SubscriptionHandler. The handler instance is created by
the application factory and stored on app.extensions['newsletter'].
"""

import logging

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from . import subscribers_bp

logger = logging.getLogger(__name__)


def _get_handler():
    return current_app.extensions['newsletter']


@subscribers_bp.route('/subscribe', methods=['POST'])
def subscribe():
    """Handle new subscription requests"""
    data = request.get_json(silent=True)
    outcome = _get_handler().subscribe(data)
    return jsonify(outcome.to_response()), outcome.status_code


@subscribers_bp.route('/health', methods=['GET'])
def health():
    """Report storage connectivity and subscriber count"""
    try:
        count = _get_handler().store.count()
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return jsonify({'status': 'error', 'message': 'Database connectivity failed'}), 503

    return jsonify({'status': 'ok', 'subscribers': count}), 200

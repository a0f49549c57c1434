"""
Subscribers Module
==================

Provides:
- POST /subscribe -- store a new subscriber and send the confirmation email
- GET /health -- storage connectivity and subscriber count
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__)

from . import routes  # noqa: E402,F401

"""
Newsletter Signup Service
=========================

A small Flask service that takes an email address, stores it once, and sends
a confirmation email.

Usage:
    from newsletter import create_app

    app = create_app({'DATABASE_URL': 'sqlite:///subscribers.db'})
    app.run(port=3000)

Or from the command line (reads DATABASE_URL and mail settings from .env):
    python -m newsletter
"""

__version__ = '0.1.0'

from .app import create_app

__all__ = ['create_app']

"""
Email Module
============

Provides outbound email with SMTP and Resend providers, and the fixed
subscription confirmation template.
"""

from .email_service import EmailService

__all__ = ['EmailService']

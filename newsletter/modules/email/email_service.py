"""
Email Service Module
====================

Outbound mail for the newsletter service, supporting SMTP (e.g. Gmail) and
Resend. Provider is selected via EMAIL_PROVIDER config ('smtp' or 'resend').
Every message goes to exactly one recipient; any delivery failure is raised as
NotificationError.
"""

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import resend

from newsletter.core.config import DEFAULT_BRAND_NAME, DEFAULT_SIGNOFF
from newsletter.core.errors import NotificationError

logger = logging.getLogger(__name__)


class EmailService:
    """
    Configurable email service supporting SMTP (e.g. Gmail) and Resend.

    Configuration (set in Flask app.config):
        EMAIL_PROVIDER: 'smtp' (default) or 'resend'
        EMAIL_ADDRESS: Sender email address, also the SMTP login
        EMAIL_PASSWORD: SMTP password/app password (required if provider is 'smtp')
        EMAIL_HOST: SMTP server host (default: 'smtp.gmail.com')
        EMAIL_PORT: SMTP server port (default: 587)
        EMAIL_TIMEOUT: SMTP socket timeout in seconds (default: 10)
        RESEND_API_KEY: Your Resend API key (required if provider is 'resend')
        EMAIL_BRAND_NAME: Brand name used in the sender name and templates
        EMAIL_SIGNOFF: Sign-off line of the plain text confirmation
    """

    def __init__(self, app=None):
        self.provider = 'smtp'
        self.api_key = None
        self.sender_email = None
        self.smtp_host = 'smtp.gmail.com'
        self.smtp_port = 587
        self.smtp_password = None
        self.timeout = 10.0
        self.brand_name = DEFAULT_BRAND_NAME
        self.signoff = DEFAULT_SIGNOFF

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.provider = (app.config.get('EMAIL_PROVIDER') or 'smtp').lower()
        logger.info(f"=== INITIALIZING EMAIL SERVICE (provider: {self.provider}) ===")

        self.sender_email = app.config.get('EMAIL_ADDRESS')
        self.brand_name = app.config.get('EMAIL_BRAND_NAME') or DEFAULT_BRAND_NAME
        self.signoff = app.config.get('EMAIL_SIGNOFF') or DEFAULT_SIGNOFF
        self.timeout = float(app.config.get('EMAIL_TIMEOUT', self.timeout))

        logger.info(f"Sender email: {self.sender_email}")
        logger.info(f"Brand name: {self.brand_name}")

        if self.provider == 'resend':
            self._init_resend(app)
        else:
            self._init_smtp(app)

    def _init_resend(self, app):
        """Initialize Resend provider"""
        self.api_key = app.config.get('RESEND_API_KEY')

        if not self.api_key:
            logger.warning("RESEND_API_KEY not configured - email sending disabled")
            return

        resend.api_key = self.api_key
        logger.info("Resend API client initialized successfully")

    def _init_smtp(self, app):
        """Initialize SMTP provider (e.g. Gmail)"""
        self.smtp_host = app.config.get('EMAIL_HOST', self.smtp_host)
        self.smtp_port = int(app.config.get('EMAIL_PORT', self.smtp_port))
        self.smtp_password = app.config.get('EMAIL_PASSWORD')

        if not self.smtp_password:
            logger.warning("EMAIL_PASSWORD not configured - SMTP email sending disabled")
            return

        logger.info(f"SMTP configured: {self.smtp_host}:{self.smtp_port}")

    @property
    def sender(self) -> str:
        """Sender header, e.g. '"Coffee & Rhythms" <hello@example.com>'"""
        return f'"{self.brand_name}" <{self.sender_email}>'

    def send_email(self, to: str, subject: str, html_body: str,
                   text_body: Optional[str] = None) -> None:
        """
        Send one email to one recipient via the configured provider.

        Args:
            to: Recipient email address
            subject: Email subject
            html_body: HTML content of the email
            text_body: Plain text content (optional)

        Raises:
            NotificationError: the message was not handed to the provider
        """
        if not to:
            raise NotificationError("No recipient provided")

        if not self.sender_email:
            raise NotificationError("Sender email not configured", recipient=to)

        logger.info(f"Sending email from: {self.sender_email} to: {to}")
        logger.info(f"Subject: {subject}")

        if self.provider == 'resend':
            self._send_via_resend(to, subject, html_body, text_body)
        else:
            self._send_via_smtp(to, subject, html_body, text_body)

        logger.info(f"Email sent successfully to {to}: {subject}")

    def _send_via_resend(self, recipient: str, subject: str, html_body: str,
                         text_body: Optional[str] = None) -> None:
        """Send a single email via Resend API"""
        if not self.api_key:
            raise NotificationError("Resend API key not configured", recipient=recipient)

        email_params = {
            "from": self.sender,
            "to": [recipient],
            "subject": subject,
            "html": html_body
        }
        if text_body:
            email_params["text"] = text_body

        try:
            r = resend.Emails.send(email_params)
        except Exception as e:
            raise NotificationError(f"Resend error for {recipient}: {e}", recipient=recipient) from e

        logger.info(f"Resend response: {r}")
        if not r or not r.get('id'):
            raise NotificationError(f"Resend returned no message id for {recipient}: {r}",
                                    recipient=recipient)

    def _send_via_smtp(self, recipient: str, subject: str, html_body: str,
                       text_body: Optional[str] = None) -> None:
        """Send a single email via SMTP (e.g. Gmail)"""
        if not self.smtp_password:
            raise NotificationError("SMTP password not configured", recipient=recipient)

        msg = MIMEMultipart('alternative')
        msg['From'] = self.sender
        msg['To'] = recipient
        msg['Subject'] = subject

        if text_body:
            msg.attach(MIMEText(text_body, 'plain', 'utf-8'))
        msg.attach(MIMEText(html_body, 'html', 'utf-8'))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.sender_email, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP error for {recipient}: {e}", recipient=recipient) from e

        logger.info(f"SMTP email sent to {recipient}")

    # ==================== Confirmation Email ====================

    def send_confirmation_email(self, email: str) -> None:
        """Send the subscription confirmation to a new subscriber."""
        subject = f"☕ Welcome to {self.brand_name}!"
        html_body = self._get_confirmation_template()
        text_body = (
            f"Welcome to {self.brand_name}! Thank you for subscribing. "
            f"Cheers, {self.signoff}"
        )
        self.send_email(email, subject, html_body, text_body)

    def _get_confirmation_template(self) -> str:
        """Get confirmation email HTML template"""
        return f"""
<div style="font-family: Montserrat, sans-serif; color: #4a2c2a; line-height: 1.6;">
    <h2 style="color: #8b5e3c; border-bottom: 2px solid #c8a379; padding-bottom: 10px;">The Comfort of Pause Awaits.</h2>
    <p>Thanks for subscribing! Expect freshly brewed updates, featured artists, and soulful reads delivered straight to your inbox.</p>
    <p style="margin-top: 20px;">Cheers,<br> {self.brand_name}</p>
    <p style="font-size: 12px; color: #8b5e3c;">{self.brand_name} . {datetime.now().year}</p>
</div>
        """

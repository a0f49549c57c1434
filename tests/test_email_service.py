"""
EmailService Tests
==================

SMTP and Resend transports are patched out; these tests check provider
selection, message construction and failure reporting.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest
from flask import Flask

from newsletter.core.errors import NotificationError
from newsletter.modules.email.email_service import EmailService


def make_service(**config):
    app = Flask(__name__)
    app.config.update({
        "EMAIL_ADDRESS": "hello@coffee.test",
        "EMAIL_BRAND_NAME": "Coffee & Rhythms",
        "EMAIL_SIGNOFF": "Mich R. Leisibach",
    })
    app.config.update(config)
    return EmailService(app)


# ---------------------------------------------------------------------------
# Initialisation
# ---------------------------------------------------------------------------

def test_init_smtp_defaults():
    svc = make_service(EMAIL_PASSWORD="app-password")

    assert svc.provider == "smtp"
    assert svc.smtp_host == "smtp.gmail.com"
    assert svc.smtp_port == 587
    assert svc.sender == '"Coffee & Rhythms" <hello@coffee.test>'


def test_init_resend():
    svc = make_service(EMAIL_PROVIDER="Resend", RESEND_API_KEY="re_test_fake_key_123")

    assert svc.provider == "resend"
    assert svc.api_key == "re_test_fake_key_123"


# ---------------------------------------------------------------------------
# SMTP
# ---------------------------------------------------------------------------

@patch("newsletter.modules.email.email_service.smtplib.SMTP")
def test_smtp_sends_confirmation(smtp_cls):
    server = smtp_cls.return_value.__enter__.return_value
    svc = make_service(EMAIL_PASSWORD="app-password", EMAIL_TIMEOUT=5)

    svc.send_confirmation_email("a@x.com")

    smtp_cls.assert_called_once_with("smtp.gmail.com", 587, timeout=5.0)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("hello@coffee.test", "app-password")
    msg = server.send_message.call_args[0][0]
    assert msg["To"] == "a@x.com"
    assert "Welcome to Coffee & Rhythms" in msg["Subject"]
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


@patch("newsletter.modules.email.email_service.smtplib.SMTP")
def test_smtp_failure_raises_notification_error(smtp_cls):
    server = smtp_cls.return_value.__enter__.return_value
    server.send_message.side_effect = smtplib.SMTPRecipientsRefused({"a@x.com": (550, b"no such user")})
    svc = make_service(EMAIL_PASSWORD="app-password")

    with pytest.raises(NotificationError) as exc_info:
        svc.send_confirmation_email("a@x.com")

    assert exc_info.value.recipient == "a@x.com"


@patch("newsletter.modules.email.email_service.smtplib.SMTP")
def test_smtp_connection_timeout_raises_notification_error(smtp_cls):
    smtp_cls.side_effect = TimeoutError("timed out")
    svc = make_service(EMAIL_PASSWORD="app-password")

    with pytest.raises(NotificationError):
        svc.send_confirmation_email("a@x.com")


def test_smtp_without_password_raises():
    svc = make_service()

    with pytest.raises(NotificationError):
        svc.send_confirmation_email("a@x.com")


def test_missing_sender_raises():
    svc = make_service(EMAIL_ADDRESS=None, EMAIL_PASSWORD="app-password")

    with pytest.raises(NotificationError):
        svc.send_email("a@x.com", "Subject", "<p>hi</p>")


# ---------------------------------------------------------------------------
# Resend
# ---------------------------------------------------------------------------

@patch("newsletter.modules.email.email_service.resend.Emails.send")
def test_resend_sends_to_single_recipient(send):
    send.return_value = {"id": "msg_123"}
    svc = make_service(EMAIL_PROVIDER="resend", RESEND_API_KEY="re_test")

    svc.send_confirmation_email("a@x.com")

    params = send.call_args[0][0]
    assert params["to"] == ["a@x.com"]
    assert params["from"] == '"Coffee & Rhythms" <hello@coffee.test>'
    assert "Mich R. Leisibach" in params["text"]


@patch("newsletter.modules.email.email_service.resend.Emails.send")
def test_resend_without_message_id_raises(send):
    send.return_value = {}
    svc = make_service(EMAIL_PROVIDER="resend", RESEND_API_KEY="re_test")

    with pytest.raises(NotificationError):
        svc.send_confirmation_email("a@x.com")


@patch("newsletter.modules.email.email_service.resend.Emails.send")
def test_resend_api_exception_raises(send):
    send.side_effect = RuntimeError("401 unauthorized")
    svc = make_service(EMAIL_PROVIDER="resend", RESEND_API_KEY="re_test")

    with pytest.raises(NotificationError):
        svc.send_confirmation_email("a@x.com")


def test_resend_without_api_key_raises():
    svc = make_service(EMAIL_PROVIDER="resend")

    with pytest.raises(NotificationError):
        svc.send_confirmation_email("a@x.com")


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def test_signoff_defaults_when_unset():
    svc = make_service(EMAIL_SIGNOFF=None, EMAIL_PASSWORD="app-password")

    assert svc.signoff == "Mich R. Leisibach"
    assert EmailService().signoff == "Mich R. Leisibach"


@patch("newsletter.modules.email.email_service.smtplib.SMTP")
def test_default_signoff_in_confirmation_text(smtp_cls):
    server = smtp_cls.return_value.__enter__.return_value
    svc = make_service(EMAIL_SIGNOFF="", EMAIL_PASSWORD="app-password")

    svc.send_confirmation_email("a@x.com")

    msg = server.send_message.call_args[0][0]
    text_part = msg.get_payload()[0].get_payload(decode=True).decode("utf-8")
    assert text_part.endswith("Cheers, Mich R. Leisibach")

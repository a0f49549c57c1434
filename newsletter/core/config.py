import os
from dotenv import load_dotenv

load_dotenv(override=True)

DEFAULT_BRAND_NAME = 'Coffee & Rhythms'
DEFAULT_SIGNOFF = 'Mich R. Leisibach'


class Config:
    """
    Base configuration for the newsletter service.
    Values come from environment variables (or a .env file next to the process).
    """
    # Storage - required, the app refuses to start without it
    DATABASE_URL = os.getenv('DATABASE_URL')

    # HTTP
    PORT = int(os.getenv('PORT', '3000'))
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Email settings
    # Gmail SMTP by default; set EMAIL_PROVIDER=resend to use the Resend API
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'smtp')
    EMAIL_ADDRESS = os.getenv('EMAIL_ADDRESS') or os.getenv('EMAIL_USER')
    EMAIL_PASSWORD = os.getenv('EMAIL_PASSWORD') or os.getenv('EMAIL_PASS')
    EMAIL_HOST = os.getenv('EMAIL_HOST', 'smtp.gmail.com')
    EMAIL_PORT = int(os.getenv('EMAIL_PORT', '587'))
    EMAIL_TIMEOUT = float(os.getenv('EMAIL_TIMEOUT', '10'))

    # Resend API settings
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')

    # Branding
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', DEFAULT_BRAND_NAME)
    EMAIL_SIGNOFF = os.getenv('EMAIL_SIGNOFF', DEFAULT_SIGNOFF)

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DB = os.getenv('LOG_DB')

    # Table names
    SUBSCRIBERS = "subscribers"
    LOGS_TABLE = "app_logs"

    @classmethod
    def as_dict(cls):
        """Upper-case class attributes, ready to load into app.config"""
        return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}

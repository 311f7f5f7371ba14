import os
from dotenv import load_dotenv

load_dotenv(override=True)

IS_PRODUCTION = (
    os.getenv('ENVIRONMENT') == 'production' or
    os.getenv('FLASK_ENV') == 'production' or
    os.getenv('NODE_ENV') == 'production'
)


class Config:
    """
    Base configuration for the Solid Steel backend.
    Every value can be overridden through app.config or environment variables.
    """
    IS_PRODUCTION = IS_PRODUCTION

    # Session
    SECRET_KEY = os.getenv('SECRET_COOKIE_PASSWORD') or os.getenv('FLASK_SECRET_KEY')
    SESSION_COOKIE_NAME = 'solid-steel-admin-session'

    # Admin credentials (plain values, compared on login)
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # JSON content files
    DATA_DIR = os.getenv('DATA_DIR', os.path.join(os.getcwd(), 'data'))
    PROJECTS_JSON = os.getenv('PROJECTS_JSON', os.path.join(DATA_DIR, 'projects.json'))
    CASE_STUDIES_JSON = os.getenv('CASE_STUDIES_JSON', os.path.join(DATA_DIR, 'case-studies.json'))
    SUBSCRIBERS_JSON = os.getenv('SUBSCRIBERS_JSON', os.path.join(DATA_DIR, 'subscribers.json'))

    # Persistent log database
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DATA_DIR, 'app_logs.db'))

    # Vercel Blob storage
    BLOB_READ_WRITE_TOKEN = os.getenv('BLOB_READ_WRITE_TOKEN')
    BLOB_API_URL = os.getenv('BLOB_API_URL', 'https://blob.vercel-storage.com')
    HERO_VIDEO_PATHNAME = os.getenv(
        'HERO_VIDEO_PATHNAME',
        'video/builders-on-the-construction-2023-11-27-05-02-01-utc.mp4'
    )

    # reCAPTCHA v3
    RECAPTCHA_SECRET_KEY = os.getenv('RECAPTCHA_SECRET_KEY')
    RECAPTCHA_MIN_SCORE = float(os.getenv('RECAPTCHA_MIN_SCORE', '0.5'))

    # Groundhogg CRM webhooks
    GROUNDHOGG_WEBHOOK_CONTACT_URL = os.getenv('GROUNDHOGG_WEBHOOK_CONTACT_URL')
    GROUNDHOGG_WEBHOOK_QUOTE_URL = os.getenv('GROUNDHOGG_WEBHOOK_QUOTE_URL')
    GROUNDHOGG_WEBHOOK_PROFORMA_URL = os.getenv('GROUNDHOGG_WEBHOOK_PROFORMA_URL')

    # Uploads: largest allowed file (video) plus multipart overhead
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(101 * 1024 * 1024)))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)

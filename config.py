"""
Configuration for the Spopeer submission gateway
Loads settings from environment variables
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _split_list(value):
    return [item.strip() for item in (value or '').split(',') if item.strip()]


class Config:
    """Application configuration"""

    # Flask
    APP_ENV = os.environ.get('APP_ENV', 'production')
    DEBUG = os.environ.get('FLASK_ENV') == 'development' or os.environ.get('FLASK_DEBUG') == '1'

    # Storage backend: "database" or "sheets"
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'database')

    # Database
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'submissions.db'

    # Google Sheets
    GOOGLE_SHEETS_CLIENT_EMAIL = os.environ.get('GOOGLE_SHEETS_CLIENT_EMAIL')
    GOOGLE_SHEETS_PRIVATE_KEY = os.environ.get('GOOGLE_SHEETS_PRIVATE_KEY')
    GOOGLE_SHEETS_SPREADSHEET_ID = os.environ.get('GOOGLE_SHEETS_SPREADSHEET_ID')
    GOOGLE_SHEETS_WAITLIST_RANGE = os.environ.get('GOOGLE_SHEETS_WAITLIST_RANGE', 'Waitlist!A:D')
    GOOGLE_SHEETS_CONTACT_RANGE = os.environ.get('GOOGLE_SHEETS_CONTACT_RANGE', 'Support!A:D')
    GOOGLE_SHEETS_HEADER_ROWS = int(os.environ.get('GOOGLE_SHEETS_HEADER_ROWS', '0'))

    # CORS
    CORS_ALLOWED_ORIGINS = _split_list(os.environ.get('CORS_ALLOWED_ORIGINS', 'http://localhost:8080'))
    CORS_ALLOW_CREDENTIALS = os.environ.get('CORS_ALLOW_CREDENTIALS', '1') == '1'

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    SUBMISSION_RATE_LIMIT = os.environ.get('SUBMISSION_RATE_LIMIT', '10 per minute')

    # Monitoring / logging
    SENTRY_DSN = os.environ.get('SENTRY_DSN')
    SENTRY_TRACES_SAMPLE_RATE = float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE', '0.1'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')

    PORT = int(os.environ.get('PORT', '5000'))

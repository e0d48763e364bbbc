"""
Spopeer submission gateway - Flask Application
JSON API for waitlist sign-ups and contact messages, stored in SQLite or Google Sheets
"""

import atexit
import html
import os
import logging
from logging.handlers import RotatingFileHandler

import bleach
import sentry_sdk
from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sentry_sdk.integrations.flask import FlaskIntegration

from config import Config
from services.errors import StorageError
from services.submission_store import ContactMessage, WaitlistEntry, build_store

logger = logging.getLogger(__name__)

CORS_METHODS = ['GET', 'POST', 'OPTIONS']
CORS_HEADERS = ['Content-Type', 'Authorization', 'X-Custom-Header']

WAITLIST_FIELDS = ('email', 'role', 'sport')
CONTACT_FIELDS = ('name', 'email', 'message')

limiter = Limiter(key_func=get_remote_address, default_limits=[])


@limiter.request_filter
def _rate_limit_exempt_for_tests():
    return current_app.config.get('TESTING', False)


def submission_limit():
    return current_app.config.get('SUBMISSION_RATE_LIMIT', '10 per minute')


api = Blueprint('api', __name__, url_prefix='/api')


def get_store():
    return current_app.extensions['submission_store']


def clean_field(value):
    if not isinstance(value, str):
        return ''
    # Stored as plain text: markup is dropped, entities are decoded back.
    return html.unescape(bleach.clean(value, tags=set(), attributes={}, strip=True)).strip()


def read_submission(field_names):
    """Return the cleaned fields from the JSON body and the names left empty."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    fields = {name: clean_field(payload.get(name)) for name in field_names}
    missing = [name for name, value in fields.items() if not value]
    return fields, missing


# ===== ROUTES =====

@api.route('/health')
def health():
    return jsonify({'status': 'ok'}), 200


@api.route('/waitlist/count')
def waitlist_count():
    try:
        count = get_store().count_waitlist_entries()
    except StorageError:
        logger.exception('Error counting waitlist entries')
        return jsonify({'error': 'Failed to count waitlist entries'}), 500
    return jsonify({'count': count}), 200


@api.route('/waitlist', methods=['POST'])
@limiter.limit(submission_limit)
def waitlist():
    fields, missing = read_submission(WAITLIST_FIELDS)
    if missing:
        logger.info('Waitlist submission rejected; missing=%s', missing)
        return jsonify({'error': 'Missing required fields'}), 400

    try:
        entry = get_store().add_waitlist_entry(WaitlistEntry(**fields))
    except StorageError:
        logger.exception('Error adding to waitlist')
        return jsonify({'error': 'Failed to add to waitlist'}), 500

    return jsonify({'message': 'Successfully added to waitlist!', 'data': entry}), 200


@api.route('/contact', methods=['POST'])
@limiter.limit(submission_limit)
def contact():
    fields, missing = read_submission(CONTACT_FIELDS)
    if missing:
        logger.info('Contact submission rejected; missing=%s', missing)
        return jsonify({'error': 'Missing required fields'}), 400

    try:
        entry = get_store().add_contact_message(ContactMessage(**fields))
    except StorageError:
        logger.exception('Error sending message')
        return jsonify({'error': 'Failed to send message'}), 500

    return jsonify({'message': 'Message sent successfully!', 'data': entry}), 200


# ===== ERROR HANDLERS =====

def not_found(error):
    return jsonify({'error': 'Not found'}), 404


def method_not_allowed(error):
    return jsonify({'error': 'Method not allowed'}), 405


def rate_limited(error):
    return jsonify({'error': 'Too many requests', 'limit': str(error.description)}), 429


def internal_error(error):
    return jsonify({'error': 'Something broke!'}), 500


# ===== APPLICATION SETUP =====

def configure_logging(app):
    log_dir = app.config.get('LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    logging.getLogger('services').setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if not any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, 'app.log'),
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
        app.logger.addHandler(file_handler)
        logging.getLogger('services').addHandler(file_handler)


def create_app(overrides=None):
    """Build the Flask app and its submission store.

    ``overrides`` is applied on top of :class:`config.Config` before the store
    is constructed, so tests can point the app at a temporary database.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    if app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config.get('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=app.config.get('SENTRY_TRACES_SAMPLE_RATE', 0.1),
        )

    CORS(
        app,
        resources={r'/api/*': {'origins': app.config.get('CORS_ALLOWED_ORIGINS', [])}},
        methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        supports_credentials=app.config.get('CORS_ALLOW_CREDENTIALS', False),
    )
    limiter.init_app(app)

    store = build_store(app.config)
    app.extensions['submission_store'] = store
    atexit.register(store.close)

    app.register_blueprint(api)
    app.register_error_handler(404, not_found)
    app.register_error_handler(405, method_not_allowed)
    app.register_error_handler(429, rate_limited)
    app.register_error_handler(500, internal_error)

    app.logger.info(
        'Gateway started: env=%s backend=%s origins=%s',
        app.config.get('APP_ENV'),
        store.backend.value,
        app.config.get('CORS_ALLOWED_ORIGINS'),
    )
    return app


# ===== APPLICATION ENTRY POINT =====

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=app.config['DEBUG'])

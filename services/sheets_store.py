"""Google Sheets persistence: each submission is appended as one spreadsheet row."""

from __future__ import annotations

import logging
from datetime import datetime

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from pyasn1.error import PyAsn1Error

from services.errors import ConfigurationError, StorageError
from services.key_normalizer import describe_key, normalize_private_key
from services.submission_store import (
    ContactMessage,
    StorageBackend,
    SubmissionStore,
    WaitlistEntry,
)

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = (
    'GOOGLE_SHEETS_CLIENT_EMAIL',
    'GOOGLE_SHEETS_PRIVATE_KEY',
    'GOOGLE_SHEETS_SPREADSHEET_ID',
)
SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
TOKEN_URI = 'https://oauth2.googleapis.com/token'
TIMESTAMP_FORMAT = '%d/%m/%Y, %H:%M'

_API_ERRORS = (HttpError, GoogleAuthError, OSError)


def missing_settings(config) -> list:
    return [name for name in REQUIRED_SETTINGS if not config.get(name)]


def load_credentials(client_email: str, raw_private_key: str):
    """Build service-account credentials from an environment-supplied key."""
    private_key = normalize_private_key(raw_private_key)
    logger.debug('Loading service-account credentials: %s', describe_key(private_key))
    info = {
        'type': 'service_account',
        'client_email': client_email,
        'private_key': private_key,
        'token_uri': TOKEN_URI,
    }
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except (ValueError, PyAsn1Error) as exc:
        raise ConfigurationError(
            'GOOGLE_SHEETS_PRIVATE_KEY could not be loaded as a service-account private key'
        ) from exc


class SheetsStore(SubmissionStore):
    backend = StorageBackend.SHEETS

    def __init__(self, service, spreadsheet_id: str, waitlist_range: str = 'Waitlist!A:D',
                 contact_range: str = 'Support!A:D', header_rows: int = 0):
        self._service = service
        self.spreadsheet_id = spreadsheet_id
        self.waitlist_range = waitlist_range
        self.contact_range = contact_range
        self.header_rows = header_rows

    @classmethod
    def from_config(cls, config) -> 'SheetsStore':
        missing = missing_settings(config)
        if missing:
            raise ConfigurationError(
                'Google Sheets backend selected but settings are missing: ' + ', '.join(missing)
            )

        credentials = load_credentials(
            config['GOOGLE_SHEETS_CLIENT_EMAIL'],
            config['GOOGLE_SHEETS_PRIVATE_KEY'],
        )
        service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)
        return cls(
            service,
            config['GOOGLE_SHEETS_SPREADSHEET_ID'],
            waitlist_range=config.get('GOOGLE_SHEETS_WAITLIST_RANGE', 'Waitlist!A:D'),
            contact_range=config.get('GOOGLE_SHEETS_CONTACT_RANGE', 'Support!A:D'),
            header_rows=int(config.get('GOOGLE_SHEETS_HEADER_ROWS', 0)),
        )

    def _values(self):
        return self._service.spreadsheets().values()

    def _append(self, sheet_range: str, fields: dict) -> dict:
        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        row = [timestamp, *fields.values()]
        try:
            self._values().append(
                spreadsheetId=self.spreadsheet_id,
                range=sheet_range,
                valueInputOption='RAW',
                insertDataOption='INSERT_ROWS',
                body={'values': [row]},
            ).execute()
        except _API_ERRORS as exc:
            raise StorageError(f'Could not append row to {sheet_range}') from exc

        logger.info('Appended row to %s', sheet_range)
        return {'timestamp': timestamp, **fields}

    def add_waitlist_entry(self, entry: WaitlistEntry) -> dict:
        return self._append(self.waitlist_range, {
            'email': entry.email,
            'role': entry.role,
            'sport': entry.sport,
        })

    def add_contact_message(self, message: ContactMessage) -> dict:
        return self._append(self.contact_range, {
            'name': message.name,
            'email': message.email,
            'message': message.message,
        })

    def count_waitlist_entries(self) -> int:
        try:
            result = self._values().get(
                spreadsheetId=self.spreadsheet_id,
                range=self.waitlist_range,
            ).execute()
        except _API_ERRORS as exc:
            raise StorageError(f'Could not read {self.waitlist_range}') from exc

        rows = [row for row in result.get('values', []) if any(str(cell).strip() for cell in row)]
        return max(len(rows) - self.header_rows, 0)

    def close(self) -> None:
        close = getattr(self._service, 'close', None)
        if close is not None:
            close()

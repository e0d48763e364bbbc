"""Storage backend selection and the interface shared by every backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from services.errors import ConfigurationError

logger = logging.getLogger(__name__)


class StorageBackend(str, Enum):
    DATABASE = 'database'
    SHEETS = 'sheets'

    @classmethod
    def parse(cls, value) -> 'StorageBackend':
        try:
            return cls(str(value or '').strip().lower())
        except ValueError:
            choices = ', '.join(b.value for b in cls)
            raise ConfigurationError(
                f'Unknown STORAGE_BACKEND {value!r}; expected one of: {choices}'
            ) from None


@dataclass(frozen=True)
class WaitlistEntry:
    email: str
    role: str
    sport: str


@dataclass(frozen=True)
class ContactMessage:
    name: str
    email: str
    message: str


class SubmissionStore:
    """Persists form submissions. Backends raise StorageError on failure."""

    backend: StorageBackend

    def add_waitlist_entry(self, entry: WaitlistEntry) -> dict:
        raise NotImplementedError

    def add_contact_message(self, message: ContactMessage) -> dict:
        raise NotImplementedError

    def count_waitlist_entries(self) -> int:
        raise NotImplementedError

    def close(self) -> None:
        return None


def build_store(config) -> SubmissionStore:
    """Construct the store selected by ``config['STORAGE_BACKEND']``."""
    backend = StorageBackend.parse(config.get('STORAGE_BACKEND'))

    if backend is StorageBackend.SHEETS:
        from services.sheets_store import SheetsStore

        store = SheetsStore.from_config(config)
    else:
        from services.database_store import DatabaseStore

        store = DatabaseStore(config['DATABASE_PATH'])
        store.open()

    logger.info('Submission store ready: backend=%s', backend.value)
    return store

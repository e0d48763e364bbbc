"""SQLite persistence for waitlist sign-ups and contact messages."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from services.errors import StorageError
from services.submission_store import (
    ContactMessage,
    StorageBackend,
    SubmissionStore,
    WaitlistEntry,
)

logger = logging.getLogger(__name__)


class DatabaseStore(SubmissionStore):
    backend = StorageBackend.DATABASE

    def __init__(self, database_path: str):
        self.database_path = database_path

    def connect(self):
        conn = sqlite3.connect(self.database_path)
        conn.execute('PRAGMA foreign_keys = ON')
        return conn

    def open(self) -> None:
        """Create the submission tables if they do not exist yet."""
        try:
            conn = self.connect()
            try:
                c = conn.cursor()
                c.execute('''
                    CREATE TABLE IF NOT EXISTS waitlist (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        email TEXT NOT NULL,
                        role TEXT NOT NULL,
                        sport TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                ''')
                c.execute('''
                    CREATE TABLE IF NOT EXISTS contact (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        email TEXT NOT NULL,
                        message TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                ''')
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f'Could not initialize database at {self.database_path}') from exc

    def _insert(self, table: str, values: dict) -> dict:
        created_at = datetime.now(timezone.utc).isoformat()
        columns = list(values) + ['created_at']
        placeholders = ', '.join('?' for _ in columns)
        try:
            conn = self.connect()
            try:
                c = conn.cursor()
                c.execute(
                    f'INSERT INTO {table} ({", ".join(columns)}) VALUES ({placeholders})',
                    (*values.values(), created_at),
                )
                conn.commit()
                row_id = c.lastrowid
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f'Could not insert into {table}') from exc

        logger.info('Stored %s row id=%s', table, row_id)
        return {'id': row_id, **values, 'created_at': created_at}

    def add_waitlist_entry(self, entry: WaitlistEntry) -> dict:
        return self._insert('waitlist', {
            'email': entry.email,
            'role': entry.role,
            'sport': entry.sport,
        })

    def add_contact_message(self, message: ContactMessage) -> dict:
        return self._insert('contact', {
            'name': message.name,
            'email': message.email,
            'message': message.message,
        })

    def count_waitlist_entries(self) -> int:
        try:
            conn = self.connect()
            try:
                c = conn.cursor()
                c.execute('SELECT COUNT(*) FROM waitlist')
                count = c.fetchone()[0]
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError('Could not count waitlist entries') from exc
        return count

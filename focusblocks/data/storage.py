"""Байтовые хранилища слотов состояния: SQLite и in-memory."""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


SCHEMA_VERSION = 1

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Key/value store of raw bytes. Reads may return None, writes report success."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the stored payload or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> bool:
        """Store the payload and return True on success."""


class MemoryBackend(StorageBackend):
    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.slots: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.slots.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self.slots[key] = bytes(value)
        return True


class SqliteBackend(StorageBackend):
    """Хранит слоты в одной таблице SQLite; каждое обращение открывает свое подключение."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.DatabaseError:
            pass
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Создает таблицы при первом запуске."""
        with self._transaction() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if not row:
                conn.execute("INSERT INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,))
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS slots(
                    key TEXT PRIMARY KEY,
                    value BLOB
                )
                """
            )

    def get(self, key: str) -> bytes | None:
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT value FROM slots WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.warning("Failed to read slot %r: %s", key, exc)
            return None
        if not row or row["value"] is None:
            return None
        raw = row["value"]
        return raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)

    def set(self, key: str, value: bytes) -> bool:
        try:
            with self._transaction() as conn:
                conn.execute(
                    "INSERT INTO slots(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (key, sqlite3.Binary(value)),
                )
        except sqlite3.Error as exc:
            logger.warning("Failed to write slot %r: %s", key, exc)
            return False
        return True

"""SQLite access for the audit log, one connection per thread."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class ThreadLocalConnection:
    """Open the audit database lazily, keeping one connection per thread.

    ``":memory:"`` gives each thread its own private database, which is only
    useful for single-threaded runs and tests.
    """

    def __init__(self, db_path: str | Path):
        self._db_path = str(db_path)
        self._local = threading.local()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def in_memory(self) -> bool:
        return self._db_path == MEMORY_PATH

    def _open(self) -> sqlite3.Connection:
        if not self.in_memory:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        logger.debug("Opened audit database %s", self._db_path)
        return connection

    def connection(self) -> sqlite3.Connection:
        connection = getattr(self._local, "connection", None)
        if connection is None:
            connection = self._open()
            self._local.connection = connection
        return connection

    def close(self) -> None:
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            self._local.connection = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success, roll back when the block raises."""
        connection = self.connection()
        with connection:
            yield connection

    def execute(self, query: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        with self.transaction() as connection:
            return connection.execute(query, tuple(params))

    def fetchall(self, query: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        return self.connection().execute(query, tuple(params)).fetchall()

    def scalar(self, query: str, params: Sequence[Any] = ()) -> Any:
        """Return the first column of the first row, or None."""
        row = self.connection().execute(query, tuple(params)).fetchone()
        return None if row is None else row[0]

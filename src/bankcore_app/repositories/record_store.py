"""Flat-file record store keyed by the first column of each row."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class CsvRecordStore:
    """Reads and rewrites CSV tables stored under one directory.

    Each table is a CSV file whose first field is the record key. Rows are
    variable length. Updates rewrite the whole file; there is no locking.
    """

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    def table_path(self, table: str) -> Path:
        return self._directory / table

    def _read_rows(self, table: str) -> list[list[str]]:
        path = self.table_path(table)
        if not path.exists():
            return []
        with path.open("r", encoding="utf-8", newline="") as csv_file:
            return [row for row in csv.reader(csv_file) if row]

    def _write_rows(self, table: str, rows: list[list[str]]) -> None:
        path = self.table_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerows(rows)

    def get_record(self, key: str, table: str) -> list[str] | None:
        """Return the row for key, or None when absent."""
        for row in self._read_rows(table):
            if row[0] == key:
                return row
        return None

    def update_record(self, key: str, table: str, row: list[str]) -> None:
        """Replace the row for key, appending it when absent."""
        if not row or row[0] != key:
            raise ValueError("Row must start with its record key.")

        rows = self._read_rows(table)
        for index, existing in enumerate(rows):
            if existing[0] == key:
                rows[index] = list(row)
                break
        else:
            rows.append(list(row))
        self._write_rows(table, rows)
        logger.debug("Wrote record %s to %s", key, table)

    def delete_record(self, key: str, table: str) -> bool:
        """Remove the row for key and return True when something was removed."""
        rows = self._read_rows(table)
        remaining = [row for row in rows if row[0] != key]
        if len(remaining) == len(rows):
            return False
        self._write_rows(table, remaining)
        return True

    def list_keys(self, table: str) -> list[str]:
        """Return record keys in file order."""
        return [row[0] for row in self._read_rows(table)]

"""Audit trail of account mutations and policy quotes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bankcore_app.repositories.db_pool import ThreadLocalConnection


@dataclass(frozen=True)
class AuditEntry:
    id: int
    action: str
    entity: str
    entity_key: str | None
    detail: str
    created_at: str

    def payload(self) -> dict[str, Any]:
        """Decode a JSON detail. Plain-text details come back under ``message``."""
        try:
            value = json.loads(self.detail)
        except json.JSONDecodeError:
            return {"message": self.detail}
        if not isinstance(value, dict):
            return {"message": self.detail}
        return value

    def summary(self) -> str:
        return f"{self.created_at} {self.action} {self.entity} {self.entity_key} {self.detail}"


class AuditRepository:
    """Appends and queries audit log rows."""

    def __init__(self, pool: ThreadLocalConnection):
        self._pool = pool

    def add_log(
        self,
        action: str,
        entity: str,
        entity_key: str | None,
        detail: str | Mapping[str, Any],
    ) -> int:
        """Insert one audit row and return its id. Mappings are stored as JSON."""
        if not isinstance(detail, str):
            detail = json.dumps(dict(detail), ensure_ascii=False)
        cursor = self._pool.execute(
            "INSERT INTO audit_logs (action, entity, entity_key, detail) VALUES (?, ?, ?, ?)",
            (action, entity, entity_key, detail),
        )
        return int(cursor.lastrowid)

    def cleanup_old_logs(self, retention_days: int) -> int:
        """Delete rows older than retention_days; zero or less keeps everything."""
        if retention_days <= 0:
            return 0
        cursor = self._pool.execute(
            "DELETE FROM audit_logs WHERE created_at < datetime('now', ?)",
            (f"-{retention_days} days",),
        )
        return cursor.rowcount

    def list_logs(
        self,
        limit: int = 200,
        offset: int = 0,
        action: str | None = None,
        entity: str | None = None,
        entity_key: str | None = None,
        keyword: str | None = None,
    ) -> list[AuditEntry]:
        """List entries newest first. A negative limit returns every match."""
        filters = {"action": action, "entity": entity, "entity_key": entity_key}
        clauses = [f"{column} = ?" for column, value in filters.items() if value]
        params: list[Any] = [value for value in filters.values() if value]
        if keyword and keyword.strip():
            clauses.append("detail LIKE ?")
            params.append(f"%{keyword.strip()}%")

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._pool.fetchall(
            f"""
            SELECT id, action, entity, entity_key, detail, created_at
            FROM audit_logs
            {where_sql}
            ORDER BY id DESC
            LIMIT ? OFFSET ?
            """,
            [*params, limit, offset],
        )
        return [AuditEntry(**dict(row)) for row in rows]

    def account_trail(self, account_number: str) -> list[dict[str, Any]]:
        """Decoded payloads for one account, oldest first, each tagged with its action."""
        entries = self.list_logs(limit=-1, entity="account", entity_key=account_number)
        return [{"action": entry.action, **entry.payload()} for entry in reversed(entries)]

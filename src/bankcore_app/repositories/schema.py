"""Audit log schema, versioned through SQLite's ``user_version`` pragma."""

from __future__ import annotations

from bankcore_app.repositories.db_pool import ThreadLocalConnection

AUDIT_SCHEMA_VERSION = 1

# entity_key holds account numbers and policy numbers, both text.
AUDIT_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS audit_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        action TEXT NOT NULL,
        entity TEXT NOT NULL,
        entity_key TEXT,
        detail TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_audit_logs_entity ON audit_logs(entity, entity_key)",
    "CREATE INDEX IF NOT EXISTS idx_audit_logs_action ON audit_logs(action)",
    "CREATE INDEX IF NOT EXISTS idx_audit_logs_created_at ON audit_logs(created_at)",
)


def schema_version(pool: ThreadLocalConnection) -> int:
    return int(pool.scalar("PRAGMA user_version") or 0)


def initialize_schema(pool: ThreadLocalConnection) -> None:
    """Create the audit tables and stamp the schema version.

    A database stamped by a newer release is refused rather than written to.
    """
    current = schema_version(pool)
    if current > AUDIT_SCHEMA_VERSION:
        raise RuntimeError(
            f"Audit database {pool.db_path} has schema version {current}, "
            f"newer than the supported version {AUDIT_SCHEMA_VERSION}."
        )

    with pool.transaction() as connection:
        for statement in AUDIT_SCHEMA:
            connection.execute(statement)
        connection.execute(f"PRAGMA user_version = {AUDIT_SCHEMA_VERSION}")

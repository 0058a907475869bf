"""Configuration loader for record store, audit and logging settings."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import yaml


@dataclass(frozen=True)
class StoreConfig:
    directory: str
    accounts_table: str


@dataclass(frozen=True)
class AccountsConfig:
    default_transfer_limit: Decimal


@dataclass(frozen=True)
class AuditConfig:
    path: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    retention_days: int


@dataclass(frozen=True)
class AppConfig:
    store: StoreConfig
    accounts: AccountsConfig
    audit: AuditConfig
    logging: LoggingConfig


DEFAULT_CONFIG_REL_PATH = Path("config/app.yaml")
CONFIG_PATH_ENV = "BANKCORE_CONFIG_PATH"
DEFAULT_ACCOUNTS_TABLE = "Accounts.csv"
DEFAULT_TRANSFER_LIMIT = Decimal("1000.00")


def _project_root() -> Path:
    """Return the directory holding config/ for source and packaged runs."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[3]


def resolve_default_config_path() -> Path:
    """Resolve configuration path for source and packaged execution."""
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    candidates: list[Path] = []

    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        candidates.append(exe_dir / DEFAULT_CONFIG_REL_PATH)

    candidates.append(Path.cwd() / DEFAULT_CONFIG_REL_PATH)
    candidates.append(_project_root() / DEFAULT_CONFIG_REL_PATH)

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return candidates[0] if candidates else DEFAULT_CONFIG_REL_PATH


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise RuntimeError(f"Configuration section '{name}' must be a mapping.")
    return value


def build_config(raw: dict | None) -> AppConfig:
    """Build an AppConfig from parsed YAML, filling in defaults."""
    raw = raw or {}
    store = _section(raw, "store")
    accounts = _section(raw, "accounts")
    audit = _section(raw, "audit")
    logging = _section(raw, "logging")

    directory = str(store.get("directory", "data"))
    return AppConfig(
        store=StoreConfig(
            directory=directory,
            accounts_table=str(store.get("accounts_table", DEFAULT_ACCOUNTS_TABLE)),
        ),
        accounts=AccountsConfig(
            default_transfer_limit=Decimal(
                str(accounts.get("default_transfer_limit", DEFAULT_TRANSFER_LIMIT))
            ),
        ),
        audit=AuditConfig(
            path=str(audit.get("path", str(Path(directory) / "audit.db"))),
        ),
        logging=LoggingConfig(
            level=str(logging.get("level", "INFO")),
            retention_days=int(logging.get("retention_days", 1095)),
        ),
    )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the app configuration from YAML, or defaults when no file exists."""
    path = config_path or resolve_default_config_path()
    if not path.exists():
        if config_path is not None or os.getenv(CONFIG_PATH_ENV):
            raise RuntimeError(f"Configuration file not found: {path}")
        return build_config(None)

    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file)

    return build_config(raw)

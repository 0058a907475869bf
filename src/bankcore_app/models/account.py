"""Account domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class AccountRecord:
    """Persisted account state, one row in the accounts table."""

    account_number: str
    balance: Decimal
    transfer_limit: Decimal
    history: list[str] = field(default_factory=list)

"""Account repository over the flat-file record store."""

from __future__ import annotations

import re
from decimal import Decimal

from bankcore_app.core.validation import convert_2dp, to_decimal
from bankcore_app.models.account import AccountRecord
from bankcore_app.repositories.record_store import CsvRecordStore

# Row layout, schema version 2:
#   account_number, balance, debt, transfer_limit, history...
# The debt column is reserved and always written as 0.00. Version 1 rows
# omitted it: account_number, balance, transfer_limit, history...
# Amount columns are always written with two decimals, which is how the
# layouts are told apart. A version 1 row whose first history entry is itself
# a two-decimal number cannot be distinguished and reads as version 2.
ROW_SCHEMA_VERSION = 2
DEBT_PLACEHOLDER = "0.00"
HISTORY_START = 4
LEGACY_HISTORY_START = 3
AMOUNT_FIELD = re.compile(r"-?\d+\.\d{2}")


def _has_debt_column(row: list[str]) -> bool:
    if len(row) < HISTORY_START:
        return False
    return all(AMOUNT_FIELD.fullmatch(field.strip()) for field in row[2:HISTORY_START])


class AccountRepository:
    """Converts account state to and from rows and persists them."""

    def __init__(
        self,
        store: CsvRecordStore,
        table: str = "Accounts.csv",
        default_transfer_limit: Decimal = Decimal("1000.00"),
    ):
        self._store = store
        self._table = table
        self.default_transfer_limit = default_transfer_limit

    @staticmethod
    def to_row(record: AccountRecord) -> list[str]:
        """Serialize account state using the current row schema."""
        return [
            record.account_number,
            convert_2dp(record.balance),
            DEBT_PLACEHOLDER,
            convert_2dp(record.transfer_limit),
            *record.history,
        ]

    @staticmethod
    def from_row(row: list[str]) -> AccountRecord:
        """Parse a row written in either the current or the legacy layout."""
        if len(row) < 3:
            raise ValueError(f"Account row is too short: {row!r}")

        if _has_debt_column(row):
            transfer_limit = to_decimal(row[3])
            history = row[HISTORY_START:]
        else:
            transfer_limit = to_decimal(row[2])
            history = row[LEGACY_HISTORY_START:]

        return AccountRecord(
            account_number=row[0],
            balance=to_decimal(row[1]),
            transfer_limit=transfer_limit,
            history=list(history),
        )

    def get(self, account_number: str) -> AccountRecord | None:
        """Load one account, or None when it has never been saved."""
        row = self._store.get_record(account_number, self._table)
        if row is None:
            return None
        return self.from_row(row)

    def save(self, record: AccountRecord) -> None:
        """Write the full account state, replacing any previous row."""
        self._store.update_record(record.account_number, self._table, self.to_row(record))

    def delete(self, account_number: str) -> bool:
        return self._store.delete_record(account_number, self._table)

    def list_account_numbers(self) -> list[str]:
        return self._store.list_keys(self._table)

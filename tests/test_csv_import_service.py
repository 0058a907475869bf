"""Tests for CSV import service."""

from __future__ import annotations

import csv
from decimal import Decimal

import pytest

from bankcore_app.repositories.account_repository import AccountRepository
from bankcore_app.repositories.record_store import CsvRecordStore
from bankcore_app.services.account_service import AccountService
from bankcore_app.services.csv_import_service import CsvImportService
from bankcore_app.services.insurance_service import InsuranceService


class FakeAccountService:
    def __init__(self):
        self.items = []

    def deposit(self, account_number, amount):
        self.items.append(("deposit", account_number, amount))

    def withdraw(self, account_number, amount, minimum_balance=None):
        self.items.append(("withdraw", account_number, amount))
        return minimum_balance is None


def write_csv(path, rows) -> str:
    with path.open("w", encoding="utf-8", newline="") as file:
        writer = csv.writer(file)
        writer.writerows(rows)
    return str(path)


def test_import_transactions_collects_row_errors(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path / "transactions.csv",
        [
            ["account_number", "type", "amount"],
            ["A1", "deposit", "100.00"],
            ["A1", "transfer", "5"],
            ["A1", "withdraw", "abc"],
            ["", "deposit", "5"],
            ["A2", "WITHDRAW", "20"],
        ],
    )
    accounts = FakeAccountService()
    service = CsvImportService(accounts, InsuranceService())

    result = service.import_transactions(csv_path)

    assert result.created_count == 2
    assert result.failed_count == 3
    assert result.error_messages[0] == "row 3: unknown transaction type 'transfer'"
    assert result.error_messages[1].startswith("row 4:")
    assert result.error_messages[2].startswith("row 5:")
    assert accounts.items == [
        ("deposit", "A1", Decimal("100.00")),
        ("withdraw", "A2", Decimal("20")),
    ]


def test_import_transactions_reports_refused_savings_withdrawal(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path / "transactions.csv",
        [
            ["account_number", "type", "amount", "minimum_balance"],
            ["S1", "withdraw", "10", "50"],
        ],
    )
    service = CsvImportService(FakeAccountService(), InsuranceService())

    result = service.import_transactions(csv_path)

    assert result.failed_count == 1
    assert "minimum balance" in result.error_messages[0]


def test_import_transactions_against_store(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path / "transactions.csv",
        [
            ["account_number", "type", "amount"],
            ["A1", "deposit", "100"],
            ["A1", "withdraw", "30"],
            ["A1", "withdraw", "500"],
        ],
    )
    accounts = AccountService(AccountRepository(CsvRecordStore(tmp_path / "data")))
    service = CsvImportService(accounts, InsuranceService())

    result = service.import_transactions(csv_path)

    assert result.created_count == 3
    account = accounts.open_account("A1")
    assert account.balance == Decimal("0.00")
    assert account.get_history() == (
        "Deposited: $100.00",
        "Withdrawn: $30.00",
        "Withdrawn: $500.00",
    )


def test_import_policies(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path / "policies.csv",
        [
            ["policy_type", "start_date", "coverage", "tenure", "frequency", "age", "risk_flag"],
            ["life", "2024-01-01", "STANDARD", "FIVE_YEARS", "MONTHLY", "30", "yes"],
            ["accident", "2024-01-01", "BASIC", "TEN_YEARS", "QUARTERLY", "40", "no"],
            ["health", "01/01/2024", "BASIC", "TEN_YEARS", "MONTHLY", "40", "no"],
            ["life", "2024-01-01", "GOLD", "TEN_YEARS", "MONTHLY", "40", "no"],
            ["life", "2024-01-01", "BASIC", "TEN_YEARS", "MONTHLY", "forty", "no"],
        ],
    )
    service = CsvImportService(FakeAccountService(), InsuranceService())

    result = service.import_policies(csv_path)

    assert result.created_count == 2
    assert result.failed_count == 3
    assert len(result.policy_numbers) == 2
    assert result.error_messages[0] == "row 4: Invalid date format. Please use 'yyyy-MM-dd'."
    assert result.error_messages[1].startswith("row 5: Unknown CoverageOption 'GOLD'")


def test_missing_headers_rejected(tmp_path) -> None:
    csv_path = write_csv(tmp_path / "transactions.csv", [["account_number", "amount"]])
    service = CsvImportService(FakeAccountService(), InsuranceService())

    with pytest.raises(ValueError, match="type"):
        service.import_transactions(csv_path)

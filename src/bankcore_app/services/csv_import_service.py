"""CSV import service for account transactions and policy quotes."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from decimal import InvalidOperation

from bankcore_app.core.validation import parse_flag, to_decimal, validate_required_text
from bankcore_app.models.insurance import PolicyError
from bankcore_app.services.account_service import AccountService
from bankcore_app.services.insurance_service import InsuranceService

logger = logging.getLogger(__name__)

TRANSACTION_CSV_HEADERS = [
    "account_number",
    "type",
    "amount",
]

POLICY_CSV_HEADERS = [
    "policy_type",
    "start_date",
    "coverage",
    "tenure",
    "frequency",
    "age",
    "risk_flag",
]

MAX_ERROR_MESSAGES = 10


@dataclass
class CsvImportResult:
    """Result summary for CSV imports."""

    created_count: int
    failed_count: int
    error_messages: list[str]
    policy_numbers: list[str] = field(default_factory=list)


class CsvImportService:
    """Applies CSV rows through the account and insurance services."""

    def __init__(self, account_service: AccountService, insurance_service: InsuranceService):
        self._account_service = account_service
        self._insurance_service = insurance_service

    @staticmethod
    def _validate_headers(fieldnames: list[str] | None, required: list[str]) -> None:
        if fieldnames is None:
            raise ValueError("CSV file has no header row.")
        missing = [header for header in required if header not in fieldnames]
        if missing:
            raise ValueError(f"CSV headers missing: {', '.join(missing)}")

    def _apply_transaction(self, row: dict[str, str]) -> None:
        account_number = validate_required_text(row["account_number"] or "", "account_number")
        kind = (row["type"] or "").strip().lower()
        amount = to_decimal(row["amount"] or "")
        minimum_balance = (row.get("minimum_balance") or "").strip()

        if kind == "deposit":
            self._account_service.deposit(account_number, amount)
        elif kind == "withdraw":
            accepted = self._account_service.withdraw(
                account_number,
                amount,
                to_decimal(minimum_balance) if minimum_balance else None,
            )
            if not accepted:
                raise ValueError("withdrawal refused, minimum balance must be maintained")
        else:
            raise ValueError(f"unknown transaction type '{row['type']}'")

    def import_transactions(self, file_path: str) -> CsvImportResult:
        """Apply deposit/withdraw rows in file order and return counts.

        An optional ``minimum_balance`` column routes withdrawals through the
        savings-account floor.
        """
        created_count = 0
        failed_count = 0
        errors: list[str] = []

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csv_file:
            reader = csv.DictReader(csv_file)
            self._validate_headers(reader.fieldnames, TRANSACTION_CSV_HEADERS)

            for row_index, row in enumerate(reader, start=2):
                try:
                    self._apply_transaction(row)
                    created_count += 1
                except (InvalidOperation, ValueError, KeyError, TypeError) as error:
                    failed_count += 1
                    if len(errors) < MAX_ERROR_MESSAGES:
                        errors.append(f"row {row_index}: {error}")

        logger.info(
            "Imported transactions from %s: %d applied, %d failed",
            file_path,
            created_count,
            failed_count,
        )
        return CsvImportResult(
            created_count=created_count,
            failed_count=failed_count,
            error_messages=errors,
        )

    def import_policies(self, file_path: str) -> CsvImportResult:
        """Quote one policy per row and return counts with the new policy numbers."""
        created_count = 0
        failed_count = 0
        errors: list[str] = []
        policy_numbers: list[str] = []

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csv_file:
            reader = csv.DictReader(csv_file)
            self._validate_headers(reader.fieldnames, POLICY_CSV_HEADERS)

            for row_index, row in enumerate(reader, start=2):
                try:
                    policy = self._insurance_service.create_policy(
                        policy_type=row["policy_type"] or "",
                        start_date=row["start_date"] or "",
                        coverage=row["coverage"] or "",
                        tenure=row["tenure"] or "",
                        frequency=row["frequency"] or "",
                        age=int(row["age"]),
                        risk_flag=parse_flag(row["risk_flag"] or ""),
                    )
                    policy_numbers.append(policy.policy_number)
                    created_count += 1
                except (PolicyError, ValueError, KeyError, TypeError) as error:
                    failed_count += 1
                    if len(errors) < MAX_ERROR_MESSAGES:
                        errors.append(f"row {row_index}: {error}")

        logger.info(
            "Imported policies from %s: %d quoted, %d failed",
            file_path,
            created_count,
            failed_count,
        )
        return CsvImportResult(
            created_count=created_count,
            failed_count=failed_count,
            error_messages=errors,
            policy_numbers=policy_numbers,
        )

"""Account ledger: balances, transaction history and loan attachment."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from bankcore_app.core.config import DEFAULT_TRANSFER_LIMIT
from bankcore_app.core.validation import convert_2dp, to_decimal
from bankcore_app.models.account import AccountRecord
from bankcore_app.models.loan import Loan
from bankcore_app.repositories.account_repository import AccountRepository
from bankcore_app.repositories.audit_repository import AuditRepository

logger = logging.getLogger(__name__)

Amount = Decimal | int | float | str


class Account:
    """Bank account whose every mutation is written straight back to the store.

    Without ``balance`` the account is hydrated from its stored row (or starts
    from defaults when none exists). With ``balance`` it is created in memory
    with an empty history and no lookup. Accounts without a repository are
    detached and never written.
    """

    def __init__(
        self,
        account_number: str,
        repository: AccountRepository | None = None,
        *,
        balance: Amount | None = None,
        audit_repo: AuditRepository | None = None,
    ):
        self._account_number = account_number
        self._repository = repository
        self._audit_repo = audit_repo
        self._balance = Decimal("0")
        self._transfer_limit = (
            repository.default_transfer_limit if repository else DEFAULT_TRANSFER_LIMIT
        )
        self._history: list[str] = []
        self._loan: Loan | None = None

        if balance is not None:
            self._balance = to_decimal(balance)
        elif repository is not None:
            record = repository.get(account_number)
            if record is not None:
                self._balance = record.balance
                self._transfer_limit = record.transfer_limit
                self._history = list(record.history)

    @property
    def account_number(self) -> str:
        return self._account_number

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def transfer_limit(self) -> Decimal:
        return self._transfer_limit

    @property
    def loan(self) -> Loan | None:
        return self._loan

    def to_record(self) -> AccountRecord:
        return AccountRecord(
            account_number=self._account_number,
            balance=self._balance,
            transfer_limit=self._transfer_limit,
            history=list(self._history),
        )

    def _flush(self, action: str, **detail: str) -> None:
        """Write the full state to the store, then record the audit entry."""
        if self._repository is not None:
            self._repository.save(self.to_record())
        if self._audit_repo is not None:
            payload = {"event": action.lower(), "balance": convert_2dp(self._balance), **detail}
            self._audit_repo.add_log(action, "account", self._account_number, payload)

    def withdraw(self, amount: Amount) -> bool:
        """Withdraw amount, clamping the balance at zero on a shortfall."""
        value = to_decimal(amount)
        if self._balance - value < 0:
            logger.warning(
                "Withdrawal limit reached on %s. Remaining amount will be loaned, "
                "and added to debt",
                self._account_number,
            )
            self._balance = Decimal("0.00")
        else:
            self._balance -= value
        self._history.append(f"Withdrawn: ${convert_2dp(value)}")
        self._flush("WITHDRAW", amount=convert_2dp(value))
        return True

    def deposit(self, amount: Amount) -> None:
        value = to_decimal(amount)
        self._balance += value
        self._history.append(f"Deposited: ${convert_2dp(value)}")
        self._flush("DEPOSIT", amount=convert_2dp(value))

    def set_balance(self, amount: Amount) -> None:
        """Overwrite the balance, used when settling a funds transfer."""
        self._balance = to_decimal(amount)
        self._flush("SET_BALANCE")

    def set_transfer_limit(self, limit: Amount) -> None:
        self._transfer_limit = to_decimal(limit)
        self._flush("SET_TRANSFER_LIMIT", transfer_limit=convert_2dp(self._transfer_limit))

    def add_history(self, entry: str) -> None:
        self._history.append(entry)
        self._flush("ADD_HISTORY", entry=entry)

    def get_history(self) -> tuple[str, ...]:
        """Return a snapshot of the transaction history, oldest first."""
        return tuple(self._history)

    def clear_history(self) -> None:
        self._history.clear()
        self._flush("CLEAR_HISTORY")

    def transaction_history(self) -> str:
        lines = [f"{self._account_number} Transaction History:", *self._history]
        return "\n".join(lines) + "\n"

    def display_account_info(self) -> str:
        lines = [
            f"Account Number: {self._account_number}",
            f"Current Balance: ${convert_2dp(self._balance)}",
            f"Transfer Limit: {convert_2dp(self._transfer_limit)}",
        ]
        return "\n".join(lines) + "\n"

    def apply_for_loan(
        self,
        principal: Amount,
        interest_rate: Amount,
        start_date: date,
        term_months: int,
        replace: bool = False,
    ) -> Loan:
        """Attach a new loan; an existing loan is only discarded when replace=True."""
        if self._loan is not None and not replace:
            raise ValueError(
                f"Account {self._account_number} already has an active loan "
                f"({self._loan.get_id()})."
            )

        loan = Loan(
            principal=to_decimal(principal),
            annual_interest_rate=to_decimal(interest_rate),
            start_date=start_date,
            term_months=term_months,
        )
        self._loan = loan
        self._history.append(f"Applied for Loan: ${convert_2dp(loan.principal)}")
        self._flush("APPLY_LOAN", loan_id=loan.get_id(), principal=convert_2dp(loan.principal))
        return loan

    def make_loan_payment(self, amount: Amount) -> bool:
        """Pay towards the attached loan; returns False when there is none."""
        if self._loan is None:
            logger.warning("No active loan for account %s.", self._account_number)
            return False

        value = to_decimal(amount)
        self._loan.pay(value)
        self._history.append(f"Loan Payment: ${convert_2dp(value)}")
        self._flush("LOAN_PAYMENT", loan_id=self._loan.get_id(), amount=convert_2dp(value))
        return True

    def display_loan_details(self) -> str | None:
        if self._loan is None:
            logger.warning("No active loan for account %s.", self._account_number)
            return None
        return self._loan.display_details()

    def get_loan_id(self) -> str | None:
        if self._loan is None:
            return None
        return self._loan.get_id()

    def get_loan_repayment_remaining(self) -> Decimal:
        if self._loan is None:
            return Decimal("0")
        return self._loan.get_repayment_remaining()

    def delete_loan(self) -> None:
        self._loan = None
        self._flush("DELETE_LOAN")


class SavingsAccount(Account):
    """Account that refuses withdrawals breaching its minimum balance."""

    def __init__(
        self,
        account_number: str,
        minimum_balance: Amount,
        repository: AccountRepository | None = None,
        *,
        balance: Amount | None = None,
        audit_repo: AuditRepository | None = None,
    ):
        super().__init__(account_number, repository, balance=balance, audit_repo=audit_repo)
        self._minimum_balance = to_decimal(minimum_balance)

    @property
    def minimum_balance(self) -> Decimal:
        return self._minimum_balance

    def withdraw(self, amount: Amount) -> bool:
        value = to_decimal(amount)
        if self.balance - value < self._minimum_balance:
            logger.warning(
                "Cannot withdraw from %s. Minimum balance must be maintained.",
                self.account_number,
            )
            return False
        return super().withdraw(value)


class AccountService:
    """Opens accounts and applies transactions for the CLI and batch imports."""

    def __init__(self, account_repo: AccountRepository, audit_repo: AuditRepository | None = None):
        self._account_repo = account_repo
        self._audit_repo = audit_repo

    def open_account(self, account_number: str, minimum_balance: Amount | None = None) -> Account:
        """Load an account, as a savings account when a minimum balance is given."""
        account_number = account_number.strip()
        if not account_number:
            raise ValueError("Account number is required.")
        if minimum_balance is not None:
            return SavingsAccount(
                account_number,
                minimum_balance,
                self._account_repo,
                audit_repo=self._audit_repo,
            )
        return Account(account_number, self._account_repo, audit_repo=self._audit_repo)

    def exists(self, account_number: str) -> bool:
        return self._account_repo.get(account_number) is not None

    def list_account_numbers(self) -> list[str]:
        return self._account_repo.list_account_numbers()

    def close_account(self, account_number: str) -> None:
        """Delete the stored row and audit its final state."""
        account_number = account_number.strip()
        record = self._account_repo.get(account_number)
        if record is None or not self._account_repo.delete(account_number):
            raise ValueError(f"Account {account_number} not found.")
        if self._audit_repo is not None:
            self._audit_repo.add_log(
                "CLOSE_ACCOUNT",
                "account",
                account_number,
                {"event": "close_account", "balance": convert_2dp(record.balance)},
            )

    def deposit(self, account_number: str, amount: Amount) -> Account:
        account = self.open_account(account_number)
        account.deposit(amount)
        return account

    def withdraw(
        self,
        account_number: str,
        amount: Amount,
        minimum_balance: Amount | None = None,
    ) -> bool:
        """Withdraw through the account's policy; False when the savings floor refuses it."""
        account = self.open_account(account_number, minimum_balance)
        return account.withdraw(amount)

    def audit_trail(self, account_number: str) -> list[dict[str, str]]:
        """Audited mutations of one account, oldest first; empty without an audit log."""
        if self._audit_repo is None:
            return []
        return self._audit_repo.account_trail(account_number.strip())

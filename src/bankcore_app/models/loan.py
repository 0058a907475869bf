"""Loan attached to an account."""

from __future__ import annotations

import calendar
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from bankcore_app.core.validation import (
    CENT,
    convert_2dp,
    to_decimal,
    validate_positive_amount,
    validate_term_months,
)


def add_months(start_date: date, months: int) -> date:
    """Add months to a date, clamping to the last day of the target month."""
    month = start_date.month - 1 + months
    year = start_date.year + month // 12
    month = month % 12 + 1
    day = min(start_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


@dataclass
class Loan:
    """Equal-installment loan with a running repayment balance.

    ``annual_interest_rate`` is a fraction, e.g. ``Decimal("0.05")`` for 5%.
    """

    principal: Decimal
    annual_interest_rate: Decimal
    start_date: date
    term_months: int
    loan_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    amount_paid: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        self.principal = validate_positive_amount(to_decimal(self.principal), "Loan principal")
        self.annual_interest_rate = to_decimal(self.annual_interest_rate)
        if self.annual_interest_rate < 0:
            raise ValueError("Interest rate cannot be negative.")
        self.term_months = validate_term_months(int(self.term_months))

    @property
    def monthly_payment(self) -> Decimal:
        """Scheduled payment: P * r(1+r)^n / ((1+r)^n - 1), r = annual rate / 12."""
        periodic_rate = self.annual_interest_rate / Decimal("12")
        periods = self.term_months
        if periodic_rate == 0:
            payment = self.principal / Decimal(periods)
        else:
            factor = (Decimal("1") + periodic_rate) ** periods
            payment = self.principal * (periodic_rate * factor) / (factor - Decimal("1"))
        return payment.quantize(CENT, rounding=ROUND_HALF_UP)

    @property
    def total_repayment(self) -> Decimal:
        return self.monthly_payment * self.term_months

    @property
    def maturity_date(self) -> date:
        return add_months(self.start_date, self.term_months)

    @property
    def is_paid_off(self) -> bool:
        return self.get_repayment_remaining() == 0

    def get_id(self) -> str:
        return self.loan_id

    def get_repayment_remaining(self) -> Decimal:
        """Return what is left to repay, never below zero."""
        return max(self.total_repayment - self.amount_paid, Decimal("0.00"))

    def pay(self, amount: Decimal | int | float | str) -> Decimal:
        """Record a repayment and return the remaining balance."""
        payment = validate_positive_amount(to_decimal(amount), "Loan payment")
        self.amount_paid += payment
        return self.get_repayment_remaining()

    def display_details(self) -> str:
        """Render a human-readable loan summary."""
        lines = [
            f"Loan ID: {self.loan_id}",
            f"Principal: ${convert_2dp(self.principal)}",
            f"Annual Interest Rate: {convert_2dp(self.annual_interest_rate * 100)}%",
            f"Start Date: {self.start_date.isoformat()}",
            f"Maturity Date: {self.maturity_date.isoformat()}",
            f"Term: {self.term_months} months",
            f"Monthly Payment: ${convert_2dp(self.monthly_payment)}",
            f"Total Repayment: ${convert_2dp(self.total_repayment)}",
            f"Amount Paid: ${convert_2dp(self.amount_paid)}",
            f"Repayment Remaining: ${convert_2dp(self.get_repayment_remaining())}",
        ]
        return "\n".join(lines) + "\n"

"""Input parsing and validation rules for account and policy records."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

DATE_FORMAT = "%Y-%m-%d"
CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric input to a finite Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as error:
            raise ValueError(f"Not a valid amount: {value!r}") from error
    if not result.is_finite():
        raise ValueError(f"Not a valid amount: {value!r}")
    return result


def convert_2dp(amount: Decimal | int | float) -> str:
    """Render an amount with exactly two decimal places."""
    return str(to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def parse_iso_date(value: str) -> date:
    """Parse a yyyy-mm-dd string into a date."""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def validate_age(age: int) -> int:
    """Validate policyholder age range."""
    if age < 0 or age > 150:
        raise ValueError("Age must be between 0 and 150.")
    return age


def validate_positive_amount(amount: Decimal, field_name: str) -> Decimal:
    """Reject zero or negative amounts."""
    if amount <= 0:
        raise ValueError(f"{field_name} must be positive.")
    return amount


def validate_term_months(term_months: int) -> int:
    """Validate loan term in months."""
    if term_months <= 0:
        raise ValueError("Loan term must be at least one month.")
    return term_months


def validate_required_text(value: str, field_name: str) -> str:
    """Validate non-empty text fields."""
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{field_name} is required.")
    return normalized


def parse_flag(value: str) -> bool:
    """Parse a yes/no style CSV flag."""
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y"}:
        return True
    if normalized in {"", "0", "false", "no", "n"}:
        return False
    raise ValueError(f"Not a valid flag: {value!r}")

"""Insurance policy models and premium calculation."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from enum import Enum

from bankcore_app.core.validation import convert_2dp, parse_iso_date

GST_RATE = Decimal("0.09")
AGE_RATE = Decimal("10")
SMOKER_SURCHARGE = Decimal("500")
PAST_INJURIES_SURCHARGE = Decimal("1000")

PREMIUM_KEYS = (
    "base_premium_before_modifiers",
    "base_premium_after_modifiers",
    "premium_per_period",
    "total_premium",
    "gst",
    "total_premium_with_gst",
    "gst_per_period",
    "premium_per_period_with_gst",
)


class PolicyError(Exception):
    """Raised when a policy cannot be created or priced."""


class _NamedOption(Enum):
    @classmethod
    def from_name(cls, name: str):
        """Resolve a member from its name, ignoring case and separators."""
        key = name.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[key]
        except KeyError as error:
            choices = ", ".join(member.name for member in cls)
            raise PolicyError(
                f"Unknown {cls.__name__} '{name}'. Choose one of: {choices}."
            ) from error


class CoverageOption(_NamedOption):
    """Base coverage value in currency units."""

    BASIC = 1000
    STANDARD = 2000
    PREMIUM = 3000

    @property
    def amount(self) -> Decimal:
        return Decimal(self.value)


class PolicyTenure(_NamedOption):
    FIVE_YEARS = 5
    TEN_YEARS = 10
    FIFTEEN_YEARS = 15
    TWENTY_YEARS = 20

    @property
    def years(self) -> int:
        return self.value


class PremiumFrequency(_NamedOption):
    """Months covered by one premium payment."""

    MONTHLY = 1
    QUARTERLY = 3
    SEMI_ANNUALLY = 6
    ANNUALLY = 12

    @property
    def months(self) -> int:
        return self.value


def _add_years(start: date, years: int) -> date:
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        # Feb 29 into a non-leap year.
        return start.replace(year=start.year + years, day=28)


class InsurancePolicy(ABC):
    """Date-bounded insurance policy with tiered premium calculation.

    Policies are immutable once constructed: the policy number and both date
    bounds are fixed, and the active state depends only on the current date.
    """

    policy_type: str = ""

    def __init__(
        self,
        start_date: str,
        coverage_option: CoverageOption,
        policy_tenure: PolicyTenure,
        premium_frequency: PremiumFrequency,
        age: int,
    ):
        self._coverage_option = coverage_option
        self._policy_tenure = policy_tenure
        self._premium_frequency = premium_frequency
        self._age = int(age)
        self._policy_number = str(uuid.uuid4())
        try:
            self._policy_start_date = parse_iso_date(start_date)
        except (ValueError, TypeError, AttributeError) as error:
            raise PolicyError("Invalid date format. Please use 'yyyy-MM-dd'.") from error
        self._policy_end_date = _add_years(self._policy_start_date, policy_tenure.years)

    @property
    def policy_number(self) -> str:
        return self._policy_number

    @property
    def policy_start_date(self) -> date:
        return self._policy_start_date

    @property
    def policy_end_date(self) -> date:
        return self._policy_end_date

    @property
    def coverage_option(self) -> CoverageOption:
        return self._coverage_option

    @property
    def policy_tenure(self) -> PolicyTenure:
        return self._policy_tenure

    @property
    def premium_frequency(self) -> PremiumFrequency:
        return self._premium_frequency

    @property
    def age(self) -> int:
        return self._age

    @abstractmethod
    def risk_surcharge_label(self) -> str:
        """Report label for the variant's risk surcharge line."""

    @abstractmethod
    def risk_surcharge_amount(self) -> Decimal:
        """Flat surcharge applied when the variant's risk flag is set."""

    def age_price_added(self) -> Decimal:
        return Decimal(self._age) * AGE_RATE

    def calculate_base_premium(self) -> Decimal:
        """Coverage value plus the age and risk surcharges."""
        return (
            self._coverage_option.amount
            + self.age_price_added()
            + self.risk_surcharge_amount()
        )

    def is_policy_active(self, today: date | None = None) -> bool:
        """Return True strictly between the start and end dates."""
        current = today or date.today()
        return self._policy_start_date < current < self._policy_end_date

    def calculate_premium(self) -> dict[str, Decimal]:
        """Derive per-period, total and GST figures from the base premium.

        The period count multiplies months-per-period by tenure years, so a
        monthly policy over five years is billed over five periods.
        """
        try:
            base_premium = self.calculate_base_premium()
            months = self._premium_frequency.months
            premium_per_period = base_premium / Decimal(months)
            total_periods = months * self._policy_tenure.years

            total_premium = premium_per_period * total_periods
            gst = total_premium * GST_RATE
            total_premium_with_gst = total_premium + gst

            gst_per_period = gst / Decimal(total_periods)
            premium_per_period_with_gst = premium_per_period + gst_per_period
        except (ArithmeticError, TypeError, ValueError) as error:
            raise PolicyError(f"Error calculating premiums: {error}") from error

        return {
            "base_premium_before_modifiers": base_premium,
            "base_premium_after_modifiers": base_premium,
            "premium_per_period": premium_per_period,
            "total_premium": total_premium,
            "gst": gst,
            "total_premium_with_gst": total_premium_with_gst,
            "gst_per_period": gst_per_period,
            "premium_per_period_with_gst": premium_per_period_with_gst,
        }

    def display_policy_details(self) -> str:
        """Render policy identity, terms and premium figures as text."""
        lines = [
            f"{self.policy_type} Policy Details:",
            f"Policy Number: {self._policy_number}",
            f"Coverage Option: {self._coverage_option.name}",
            f"Policy Tenure: {self._policy_tenure.name}",
            f"Premium Frequency: {self._premium_frequency.name}",
            f"Policy Start Date: {self._policy_start_date.isoformat()}",
            f"Policy End Date: {self._policy_end_date.isoformat()}",
        ]

        try:
            premiums = self.calculate_premium()
        except PolicyError as error:
            lines.append(str(error))
            return "\n".join(lines) + "\n"

        lines.extend(
            [
                f"Base Premium (Before Modifier): ${convert_2dp(self._coverage_option.amount)}",
                f"Age Price Added: ${convert_2dp(self.age_price_added())}",
                f"{self.risk_surcharge_label()}: ${convert_2dp(self.risk_surcharge_amount())}",
                "Base Premium (After Modifiers): "
                f"${convert_2dp(premiums['base_premium_after_modifiers'])}",
                f"Premium Per Period: ${convert_2dp(premiums['premium_per_period'])}",
                f"GST Per Period: ${convert_2dp(premiums['gst_per_period'])}",
                "Premium Per Period (With GST): "
                f"${convert_2dp(premiums['premium_per_period_with_gst'])}",
                f"Total Premium: ${convert_2dp(premiums['total_premium'])}",
                f"GST (9%): ${convert_2dp(premiums['gst'])}",
                f"Total Premium (With GST): ${convert_2dp(premiums['total_premium_with_gst'])}",
            ]
        )
        return "\n".join(lines) + "\n"


class LifeInsurance(InsurancePolicy):
    policy_type = "LIFE"

    def __init__(
        self,
        start_date: str,
        coverage_option: CoverageOption,
        policy_tenure: PolicyTenure,
        premium_frequency: PremiumFrequency,
        age: int,
        smoker: bool,
    ):
        super().__init__(start_date, coverage_option, policy_tenure, premium_frequency, age)
        self._smoker = bool(smoker)

    @property
    def smoker(self) -> bool:
        return self._smoker

    def risk_surcharge_label(self) -> str:
        return "Smoker Price"

    def risk_surcharge_amount(self) -> Decimal:
        return SMOKER_SURCHARGE if self._smoker else Decimal("0")


class HealthInsurance(InsurancePolicy):
    policy_type = "HEALTH"

    def __init__(
        self,
        start_date: str,
        coverage_option: CoverageOption,
        policy_tenure: PolicyTenure,
        premium_frequency: PremiumFrequency,
        age: int,
        smoker: bool,
    ):
        super().__init__(start_date, coverage_option, policy_tenure, premium_frequency, age)
        self._smoker = bool(smoker)

    @property
    def smoker(self) -> bool:
        return self._smoker

    def risk_surcharge_label(self) -> str:
        return "Smoker Price"

    def risk_surcharge_amount(self) -> Decimal:
        return SMOKER_SURCHARGE if self._smoker else Decimal("0")


class AccidentInsurance(InsurancePolicy):
    policy_type = "ACCIDENT"

    def __init__(
        self,
        start_date: str,
        coverage_option: CoverageOption,
        policy_tenure: PolicyTenure,
        premium_frequency: PremiumFrequency,
        age: int,
        past_injuries: bool,
    ):
        super().__init__(start_date, coverage_option, policy_tenure, premium_frequency, age)
        self._past_injuries = bool(past_injuries)

    @property
    def past_injuries(self) -> bool:
        return self._past_injuries

    def risk_surcharge_label(self) -> str:
        return "Injuries Price"

    def risk_surcharge_amount(self) -> Decimal:
        return PAST_INJURIES_SURCHARGE if self._past_injuries else Decimal("0")


POLICY_TYPES: dict[str, type[InsurancePolicy]] = {
    "life": LifeInsurance,
    "health": HealthInsurance,
    "accident": AccidentInsurance,
}

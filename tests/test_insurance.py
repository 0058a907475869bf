"""Tests for insurance policy premium calculation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from itertools import product

import pytest

from bankcore_app.models.insurance import (
    PREMIUM_KEYS,
    AccidentInsurance,
    CoverageOption,
    HealthInsurance,
    LifeInsurance,
    PolicyError,
    PolicyTenure,
    PremiumFrequency,
)


def life_policy(**overrides) -> LifeInsurance:
    values = {
        "start_date": "2024-01-01",
        "coverage_option": CoverageOption.STANDARD,
        "policy_tenure": PolicyTenure.FIVE_YEARS,
        "premium_frequency": PremiumFrequency.MONTHLY,
        "age": 30,
        "smoker": True,
    }
    values.update(overrides)
    return LifeInsurance(**values)


def test_life_smoker_premium() -> None:
    premiums = life_policy().calculate_premium()

    assert premiums["base_premium_before_modifiers"] == Decimal("2800")
    assert premiums["base_premium_after_modifiers"] == Decimal("2800")
    assert premiums["premium_per_period"] == Decimal("2800")
    assert premiums["total_premium"] == Decimal("14000")
    assert premiums["gst"] == Decimal("1260")
    assert premiums["total_premium_with_gst"] == Decimal("15260")
    assert premiums["gst_per_period"] == Decimal("252")
    assert premiums["premium_per_period_with_gst"] == Decimal("3052")


def test_accident_past_injuries_premium() -> None:
    policy = AccidentInsurance(
        "2024-01-01",
        CoverageOption.BASIC,
        PolicyTenure.TEN_YEARS,
        PremiumFrequency.QUARTERLY,
        40,
        True,
    )
    premiums = policy.calculate_premium()

    assert policy.calculate_base_premium() == Decimal("2400")
    assert premiums["premium_per_period"] == Decimal("800")
    assert premiums["total_premium"] == Decimal("24000")
    assert premiums["gst"] == Decimal("2160")
    assert premiums["gst_per_period"] == Decimal("72")


def test_health_non_smoker_base_premium() -> None:
    policy = HealthInsurance(
        "2024-01-01",
        CoverageOption.PREMIUM,
        PolicyTenure.TWENTY_YEARS,
        PremiumFrequency.ANNUALLY,
        50,
        False,
    )

    assert policy.calculate_base_premium() == Decimal("3500")
    assert policy.risk_surcharge_amount() == Decimal("0")
    assert policy.age_price_added() == Decimal("500")


def test_calculate_premium_is_deterministic() -> None:
    policy = life_policy(premium_frequency=PremiumFrequency.QUARTERLY)

    assert policy.calculate_premium() == policy.calculate_premium()


@pytest.mark.parametrize("policy_cls", [LifeInsurance, HealthInsurance, AccidentInsurance])
def test_gst_identities_hold_for_all_options(policy_cls) -> None:
    for coverage, tenure, frequency, flag in product(
        CoverageOption, PolicyTenure, PremiumFrequency, (True, False)
    ):
        premiums = policy_cls("2024-01-01", coverage, tenure, frequency, 37, flag).calculate_premium()

        assert set(premiums) == set(PREMIUM_KEYS)
        assert premiums["total_premium_with_gst"] == premiums["total_premium"] + premiums["gst"]
        assert (
            premiums["premium_per_period_with_gst"]
            == premiums["premium_per_period"] + premiums["gst_per_period"]
        )


def test_end_date_is_start_plus_tenure() -> None:
    policy = life_policy(policy_tenure=PolicyTenure.FIFTEEN_YEARS)

    assert policy.policy_start_date == date(2024, 1, 1)
    assert policy.policy_end_date == date(2039, 1, 1)


def test_leap_day_start_rolls_to_february_28() -> None:
    policy = life_policy(start_date="2024-02-29")

    assert policy.policy_end_date == date(2029, 2, 28)


def test_policy_active_strictly_between_dates() -> None:
    policy = life_policy()

    assert not policy.is_policy_active(date(2024, 1, 1))
    assert policy.is_policy_active(date(2024, 1, 2))
    assert policy.is_policy_active(date(2028, 12, 31))
    assert not policy.is_policy_active(date(2029, 1, 1))


@pytest.mark.parametrize("start_date", ["2024/01/01", "2024-13-01", "", "tomorrow"])
def test_invalid_start_date_raises_policy_error(start_date) -> None:
    with pytest.raises(PolicyError, match="Invalid date format. Please use 'yyyy-MM-dd'."):
        life_policy(start_date=start_date)


def test_policy_numbers_are_unique() -> None:
    numbers = {life_policy().policy_number for _ in range(20)}

    assert len(numbers) == 20


def test_option_lookup_by_name() -> None:
    assert CoverageOption.from_name("standard") is CoverageOption.STANDARD
    assert PolicyTenure.from_name("five-years") is PolicyTenure.FIVE_YEARS
    assert PremiumFrequency.from_name("Semi Annually") is PremiumFrequency.SEMI_ANNUALLY
    with pytest.raises(PolicyError):
        CoverageOption.from_name("GOLD")


def test_option_values() -> None:
    assert CoverageOption.PREMIUM.amount == Decimal("3000")
    assert PolicyTenure.TWENTY_YEARS.years == 20
    assert PremiumFrequency.SEMI_ANNUALLY.months == 6


def test_display_policy_details_life() -> None:
    policy = life_policy()
    details = policy.display_policy_details()

    assert details.startswith("LIFE Policy Details:\n")
    assert f"Policy Number: {policy.policy_number}\n" in details
    for line in [
        "Coverage Option: STANDARD",
        "Policy Tenure: FIVE_YEARS",
        "Premium Frequency: MONTHLY",
        "Policy Start Date: 2024-01-01",
        "Policy End Date: 2029-01-01",
        "Base Premium (Before Modifier): $2000.00",
        "Age Price Added: $300.00",
        "Smoker Price: $500.00",
        "Base Premium (After Modifiers): $2800.00",
        "Premium Per Period: $2800.00",
        "GST Per Period: $252.00",
        "Premium Per Period (With GST): $3052.00",
        "Total Premium: $14000.00",
        "GST (9%): $1260.00",
        "Total Premium (With GST): $15260.00",
    ]:
        assert line + "\n" in details


def test_display_policy_details_accident_uses_injuries_line() -> None:
    policy = AccidentInsurance(
        "2024-01-01",
        CoverageOption.BASIC,
        PolicyTenure.FIVE_YEARS,
        PremiumFrequency.ANNUALLY,
        20,
        False,
    )
    details = policy.display_policy_details()

    assert details.startswith("ACCIDENT Policy Details:")
    assert "Injuries Price: $0.00\n" in details
    assert "Smoker Price" not in details


class BrokenLifeInsurance(LifeInsurance):
    def calculate_base_premium(self) -> Decimal:
        raise ZeroDivisionError("boom")


def test_calculation_failure_is_wrapped() -> None:
    policy = BrokenLifeInsurance(
        "2024-01-01",
        CoverageOption.BASIC,
        PolicyTenure.FIVE_YEARS,
        PremiumFrequency.MONTHLY,
        30,
        False,
    )

    with pytest.raises(PolicyError, match="Error calculating premiums: boom"):
        policy.calculate_premium()

    details = policy.display_policy_details()
    assert "Error calculating premiums: boom\n" in details
    assert "Premium Per Period" not in details

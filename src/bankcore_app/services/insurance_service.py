"""Insurance quoting service."""

from __future__ import annotations

from decimal import Decimal

from bankcore_app.core.validation import convert_2dp, validate_age
from bankcore_app.models.insurance import (
    POLICY_TYPES,
    PREMIUM_KEYS,
    CoverageOption,
    InsurancePolicy,
    PolicyError,
    PolicyTenure,
    PremiumFrequency,
)
from bankcore_app.repositories.audit_repository import AuditRepository


class InsuranceService:
    """Coordinates policy creation and premium quotes."""

    def __init__(self, audit_repo: AuditRepository | None = None):
        self._audit_repo = audit_repo

    @staticmethod
    def _resolve_type(policy_type: str) -> type[InsurancePolicy]:
        key = policy_type.strip().lower()
        if key not in POLICY_TYPES:
            raise PolicyError(
                f"Unknown policy type '{policy_type}'. Choose one of: {', '.join(POLICY_TYPES)}."
            )
        return POLICY_TYPES[key]

    def create_policy(
        self,
        policy_type: str,
        start_date: str,
        coverage: CoverageOption | str,
        tenure: PolicyTenure | str,
        frequency: PremiumFrequency | str,
        age: int,
        risk_flag: bool = False,
    ) -> InsurancePolicy:
        """Build a policy of the named type and audit its quote.

        ``risk_flag`` is the smoker flag for life and health policies and the
        past-injuries flag for accident policies.
        """
        policy_cls = self._resolve_type(policy_type)
        if isinstance(coverage, str):
            coverage = CoverageOption.from_name(coverage)
        if isinstance(tenure, str):
            tenure = PolicyTenure.from_name(tenure)
        if isinstance(frequency, str):
            frequency = PremiumFrequency.from_name(frequency)

        policy = policy_cls(start_date, coverage, tenure, frequency, validate_age(int(age)), risk_flag)

        if self._audit_repo is not None:
            self._audit_repo.add_log(
                "QUOTE",
                "policy",
                policy.policy_number,
                {
                    "event": "policy quoted",
                    "type": policy.policy_type,
                    "coverage": coverage.name,
                    "tenure": tenure.name,
                    "frequency": frequency.name,
                    "start_date": policy.policy_start_date.isoformat(),
                    "premiums": self.quote(policy),
                },
            )
        return policy

    @staticmethod
    def quote(policy: InsurancePolicy) -> dict[str, str]:
        """Return the premium figures rounded to cents for presentation."""
        premiums: dict[str, Decimal] = policy.calculate_premium()
        return {key: convert_2dp(premiums[key]) for key in PREMIUM_KEYS}

"""
Youth Allowance Eligibility Engine.
Implements gated eligibility checks, independence status, base rate selection
and the parental and personal income tests.
"""

import logging
from typing import List, Optional, Tuple

from ..config.threshold_config import (
    DEFAULT_POLICY_YEAR,
    FORTNIGHTS_PER_YEAR,
    ThresholdTable,
    get_threshold_table,
)
from .income_reduction import (
    calculate_parental_income_reduction,
    calculate_personal_income_reduction,
)
from .models import (
    ApplicantProfile,
    BreakdownStep,
    IndependenceReason,
    IndependenceStatus,
    LivingSituation,
    PaymentResult,
)

logger = logging.getLogger(__name__)


class PaymentEligibilityEngine:
    """Youth Allowance eligibility and payment engine."""

    def __init__(self, thresholds: Optional[ThresholdTable] = None):
        """
        Initialize the engine with a threshold table.

        Args:
            thresholds: Threshold table to evaluate against. Defaults to the
                        configured table for the default policy year.
        """
        self.thresholds = thresholds or get_threshold_table(DEFAULT_POLICY_YEAR)

    def evaluate(self, profile: ApplicantProfile) -> PaymentResult:
        """
        Evaluate an applicant profile.

        Args:
            profile: Validated applicant profile

        Returns:
            PaymentResult with eligibility, reductions and breakdown
        """
        t = self.thresholds
        breakdown: List[BreakdownStep] = []
        eligible_reasons: List[str] = []

        # Gate 1: Age
        breakdown.append(BreakdownStep("Gate 1", "Checking core eligibility..."))
        if profile.age < t.age_min or profile.age > t.age_max:
            reason = (
                f"Age {profile.age} is outside the eligible range "
                f"({t.age_min}-{t.age_max} years)"
            )
            return self._ineligible(reason, breakdown)
        eligible_reasons.append(f"Age {profile.age} is within eligible range")

        # Gate 2: Study load
        if not profile.study_load_full_time and not profile.concessional_study_load:
            reason = "Must be studying full-time (75%+ load) or have concessional study load"
            return self._ineligible(reason, breakdown)
        eligible_reasons.append("Study load requirement met")

        # Independence status
        breakdown.append(BreakdownStep("Gate 2", "Determining independence status..."))
        status, independence_reason = self._check_independence(profile)
        if status == IndependenceStatus.INDEPENDENT:
            eligible_reasons.append(f"Independent student ({independence_reason.value})")
            breakdown.append(BreakdownStep(
                "Independence",
                f"Student is independent: {independence_reason.value}",
            ))
        else:
            breakdown.append(BreakdownStep(
                "Independence",
                "Student is dependent - parental income test will apply",
            ))

        # Gate 3: Assets
        breakdown.append(BreakdownStep("Gate 3", "Applying financial tests..."))
        assets_test_applied = False
        if profile.personal_assets is not None and profile.personal_assets > 0:
            assets_test_applied = True
            limit = t.assets_limit(profile.is_homeowner)
            if profile.personal_assets > limit:
                breakdown.append(BreakdownStep(
                    "Assets Test",
                    f"Assets exceed limit: ${profile.personal_assets:,.0f} > ${limit:,.0f}",
                ))
                reason = (
                    f"Personal assets (${profile.personal_assets:,.0f}) exceed "
                    f"the limit (${limit:,.0f})"
                )
                return self._ineligible(
                    reason,
                    breakdown,
                    eligible_reasons=eligible_reasons,
                    independence=(status, independence_reason),
                    assets_test_applied=True,
                )
            breakdown.append(BreakdownStep(
                "Assets Test",
                f"Assets within limit: ${profile.personal_assets:,.0f} <= ${limit:,.0f}",
            ))

        # Base rate
        base_rate, rate_label = self._select_base_rate(profile)
        breakdown.append(BreakdownStep(
            "Base Rate",
            f"Base rate determined: ${base_rate:.2f}/fortnight ({rate_label})",
            base_rate,
        ))

        # Parental income test (dependent applicants only)
        parental_reduction = 0.0
        parental_applied = False
        if status == IndependenceStatus.DEPENDENT and profile.parental_income_annual is not None:
            parental_applied = True
            siblings = profile.siblings_receiving_payments
            parental_reduction = calculate_parental_income_reduction(
                profile.parental_income_annual, siblings, t
            )
            if parental_reduction > 0:
                shared = ""
                if siblings > 0:
                    shared = f" (shared with {siblings} sibling{'s' if siblings > 1 else ''})"
                breakdown.append(BreakdownStep(
                    "Parental Income Test",
                    f"Parental income ${profile.parental_income_annual:,.0f}/year reduces "
                    f"payment by ${parental_reduction:.2f}/fortnight{shared}",
                    -parental_reduction,
                ))
            else:
                breakdown.append(BreakdownStep(
                    "Parental Income Test",
                    f"Parental income ${profile.parental_income_annual:,.0f}/year is within "
                    f"free area - no reduction",
                    0.0,
                ))

        # Personal income test (all applicants)
        personal_reduction = 0.0
        personal_applied = False
        income = profile.personal_income_fortnightly
        if income is not None and income > 0:
            personal_applied = True
            personal_reduction = calculate_personal_income_reduction(
                income, t, income_bank_credit=profile.income_bank_credit or 0.0
            )
            if personal_reduction > 0:
                breakdown.append(BreakdownStep(
                    "Personal Income Test",
                    f"Personal income ${income:.2f}/fortnight reduces payment by "
                    f"${personal_reduction:.2f}/fortnight",
                    -personal_reduction,
                ))
            else:
                breakdown.append(BreakdownStep(
                    "Personal Income Test",
                    f"Personal income ${income:.2f}/fortnight is within free area - no reduction",
                    0.0,
                ))

        final_payment = max(0.0, base_rate - parental_reduction - personal_reduction)
        annual_payment = final_payment * FORTNIGHTS_PER_YEAR
        breakdown.append(BreakdownStep(
            "Final Calculation",
            f"Final payment: ${base_rate:.2f} - ${parental_reduction:.2f} - "
            f"${personal_reduction:.2f} = ${final_payment:.2f}/fortnight",
            final_payment,
        ))

        # A zero payment is reported as ineligible with its own flag
        ineligible_reasons: Tuple[str, ...] = ()
        reduced_to_zero = final_payment == 0
        if reduced_to_zero:
            ineligible_reasons = ("Payment reduced to zero due to income tests",)
        else:
            eligible_reasons.append(f"Eligible for ${final_payment:.2f} per fortnight")

        logger.debug(
            "Evaluated profile age=%d: base=%.2f parental=%.2f personal=%.2f final=%.2f",
            profile.age, base_rate, parental_reduction, personal_reduction, final_payment,
        )

        return PaymentResult(
            eligible=not reduced_to_zero,
            eligible_reasons=tuple(eligible_reasons),
            ineligible_reasons=ineligible_reasons,
            base_rate=base_rate,
            parental_income_reduction=parental_reduction,
            personal_income_reduction=personal_reduction,
            final_fortnightly_payment=final_payment,
            annual_payment=annual_payment,
            independence_status=status,
            independence_reason=independence_reason,
            parental_income_test_applied=parental_applied,
            personal_income_test_applied=personal_applied,
            assets_test_applied=assets_test_applied,
            assets_test_passed=True,
            reduced_to_zero_by_income=reduced_to_zero,
            calculation_breakdown=tuple(breakdown),
        )

    def _check_independence(
        self, profile: ApplicantProfile
    ) -> Tuple[IndependenceStatus, Optional[IndependenceReason]]:
        """Explicit declaration first, then the independence age. Nothing else is inferred."""
        if profile.is_independent:
            return (
                IndependenceStatus.INDEPENDENT,
                profile.independence_reason or IndependenceReason.DECLARED,
            )

        if profile.age >= self.thresholds.independence_age:
            return IndependenceStatus.INDEPENDENT, IndependenceReason.AGE_22

        return IndependenceStatus.DEPENDENT, None

    def _select_base_rate(self, profile: ApplicantProfile) -> Tuple[float, str]:
        """Dependent children, then partnered, then living situation."""
        t = self.thresholds
        if profile.has_dependent_children:
            return t.max_rate_single_with_children, "with dependent children"

        if profile.is_partnered:
            return t.max_rate_partnered_no_children, "partnered"

        # renting, moving_out, on-campus and unsure are all assessed as away from home
        if profile.living_situation == LivingSituation.HOME:
            return t.max_rate_single_at_home, profile.living_situation.value
        return t.max_rate_single_away, profile.living_situation.value

    def _ineligible(
        self,
        reason: str,
        breakdown: List[BreakdownStep],
        eligible_reasons: Optional[List[str]] = None,
        independence: Optional[Tuple[IndependenceStatus, Optional[IndependenceReason]]] = None,
        assets_test_applied: bool = False,
    ) -> PaymentResult:
        """Build a gate-failure result with every monetary field zeroed."""
        status, independence_reason = independence or (IndependenceStatus.DEPENDENT, None)
        logger.debug("Gate failed: %s", reason)
        return PaymentResult(
            eligible=False,
            eligible_reasons=tuple(eligible_reasons or ()),
            ineligible_reasons=(reason,),
            independence_status=status,
            independence_reason=independence_reason,
            assets_test_applied=assets_test_applied,
            assets_test_passed=False,
            calculation_breakdown=tuple(breakdown),
        )


def evaluate(profile: ApplicantProfile, thresholds: ThresholdTable) -> PaymentResult:
    """Evaluate a profile against a threshold table."""
    return PaymentEligibilityEngine(thresholds).evaluate(profile)

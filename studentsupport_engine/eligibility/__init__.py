"""
Eligibility Module for Youth Allowance.

Contains applicant/result types, the income test reductions and the gated
payment engine.
"""

from .models import (
    ApplicantProfile,
    BreakdownStep,
    IndependenceReason,
    IndependenceStatus,
    LivingSituation,
    PaymentResult,
)

from .income_reduction import (
    apply_income_bank,
    calculate_parental_income_reduction,
    calculate_personal_income_reduction,
)

from .payment_engine import (
    PaymentEligibilityEngine,
    evaluate,
)

from .income_bands import (
    HOUSEHOLD_INCOME_BANDS,
    PERSONAL_INCOME_BANDS,
    parse_household_income_band,
    parse_personal_income_fortnightly_band,
)

__all__ = [
    # Models
    "ApplicantProfile",
    "BreakdownStep",
    "IndependenceReason",
    "IndependenceStatus",
    "LivingSituation",
    "PaymentResult",
    # Income tests
    "apply_income_bank",
    "calculate_parental_income_reduction",
    "calculate_personal_income_reduction",
    # Engine
    "PaymentEligibilityEngine",
    "evaluate",
    # Form bands
    "HOUSEHOLD_INCOME_BANDS",
    "PERSONAL_INCOME_BANDS",
    "parse_household_income_band",
    "parse_personal_income_fortnightly_band",
]

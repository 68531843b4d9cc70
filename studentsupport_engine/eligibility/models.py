"""
Input and result types for the Youth Allowance eligibility engine.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Optional, Tuple

from ..exceptions import ProfileValidationError
from ..validation import check_amount, check_flag, coerce_enum


class LivingSituation(Enum):
    """Where the applicant lives while studying."""
    HOME = "home"
    AWAY = "away"
    RENTING = "renting"
    MOVING_OUT = "moving_out"
    ON_CAMPUS = "on-campus"
    UNSURE = "unsure"


class IndependenceStatus(Enum):
    """Whether entitlement is assessed on the applicant's or parents' circumstances."""
    INDEPENDENT = "independent"
    DEPENDENT = "dependent"


class IndependenceReason(Enum):
    """Declared or inferred basis for independence."""
    DECLARED = "declared"
    AGE_22 = "age22"
    MARRIED = "married"
    CHILD = "child"
    WORK_18_MONTHS = "work18months"
    REGIONAL = "regional"


_FLAG_FIELDS = (
    "study_load_full_time",
    "concessional_study_load",
    "is_independent",
    "is_homeowner",
    "has_dependent_children",
    "is_partnered",
)


@dataclass(frozen=True)
class ApplicantProfile:
    """
    Declared circumstances of a Youth Allowance applicant.

    Income and asset fields are optional: None means the corresponding test
    is not applied, which is different from a declared value of zero.
    """
    age: int
    study_load_full_time: bool
    living_situation: LivingSituation = LivingSituation.HOME
    concessional_study_load: bool = False

    # Independence
    is_independent: bool = False
    independence_reason: Optional[IndependenceReason] = None

    # Parental income test (annual, dependent applicants only)
    parental_income_annual: Optional[float] = None
    siblings_receiving_payments: int = 0

    # Personal income test (fortnightly)
    personal_income_fortnightly: Optional[float] = None
    income_bank_credit: Optional[float] = None

    # Personal assets test
    personal_assets: Optional[float] = None
    is_homeowner: bool = False

    has_dependent_children: bool = False
    is_partnered: bool = False

    def __post_init__(self):
        if isinstance(self.age, bool) or not isinstance(self.age, int):
            raise ProfileValidationError("age", f"must be an integer, got {self.age!r}")
        if self.age < 0:
            raise ProfileValidationError("age", f"cannot be negative, got {self.age}")

        if isinstance(self.siblings_receiving_payments, bool) or not isinstance(
            self.siblings_receiving_payments, int
        ):
            raise ProfileValidationError(
                "siblings_receiving_payments",
                f"must be an integer, got {self.siblings_receiving_payments!r}",
            )
        if self.siblings_receiving_payments < 0:
            raise ProfileValidationError(
                "siblings_receiving_payments",
                f"cannot be negative, got {self.siblings_receiving_payments}",
            )

        for name in _FLAG_FIELDS:
            check_flag(getattr(self, name), name)

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(
            self,
            "living_situation",
            coerce_enum(LivingSituation, self.living_situation, "living_situation"),
        )
        if self.independence_reason is not None:
            object.__setattr__(
                self,
                "independence_reason",
                coerce_enum(IndependenceReason, self.independence_reason, "independence_reason"),
            )

        for name in (
            "parental_income_annual",
            "personal_income_fortnightly",
            "income_bank_credit",
            "personal_assets",
        ):
            object.__setattr__(self, name, check_amount(getattr(self, name), name))

    @classmethod
    def from_dict(cls, data: Dict) -> "ApplicantProfile":
        """
        Build a profile from upstream form data.

        Accepts snake_case keys or the portal's camelCase keys. Keys that are
        absent or None are left as "not supplied".

        Raises:
            ProfileValidationError: If a required key is missing or a value is invalid
        """
        values = {}
        for name, aliases in _PROFILE_KEYS.items():
            for key in (name,) + aliases:
                if key in data and data[key] is not None:
                    values[name] = data[key]
                    break

        for required in ("age", "study_load_full_time"):
            if required not in values:
                raise ProfileValidationError(required, "is required")

        return cls(**values)


_PROFILE_KEYS: Dict[str, Tuple[str, ...]] = {
    "age": (),
    "study_load_full_time": ("studyLoadFullTime",),
    "living_situation": ("livingSituation",),
    "concessional_study_load": ("concessionalStudyLoad",),
    "is_independent": ("isIndependent",),
    "independence_reason": ("independenceReason",),
    "parental_income_annual": ("parentalIncomeAnnual",),
    "siblings_receiving_payments": ("siblingsReceivingPayments",),
    "personal_income_fortnightly": ("personalIncomeFortnightly",),
    "income_bank_credit": ("incomeBankCredit",),
    "personal_assets": ("personalAssets",),
    "is_homeowner": ("isHomeowner",),
    "has_dependent_children": ("hasDependentChildren",),
    "is_partnered": ("isPartnered",),
}


@dataclass(frozen=True)
class BreakdownStep:
    """One explainability step of a payment calculation."""
    step: str
    description: str
    amount: Optional[float] = None


@dataclass(frozen=True)
class PaymentResult:
    """Complete, immutable Youth Allowance evaluation result."""
    eligible: bool = False
    eligible_reasons: Tuple[str, ...] = ()
    ineligible_reasons: Tuple[str, ...] = ()

    # Payment calculation
    base_rate: float = 0.0
    parental_income_reduction: float = 0.0
    personal_income_reduction: float = 0.0
    final_fortnightly_payment: float = 0.0
    annual_payment: float = 0.0

    # Calculation details
    independence_status: IndependenceStatus = IndependenceStatus.DEPENDENT
    independence_reason: Optional[IndependenceReason] = None
    parental_income_test_applied: bool = False
    personal_income_test_applied: bool = False
    assets_test_applied: bool = False
    assets_test_passed: bool = False
    reduced_to_zero_by_income: bool = False

    calculation_breakdown: Tuple[BreakdownStep, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        """Serialise to plain types for a display layer."""
        data = asdict(self)
        data["eligible_reasons"] = list(self.eligible_reasons)
        data["ineligible_reasons"] = list(self.ineligible_reasons)
        data["independence_status"] = self.independence_status.value
        data["independence_reason"] = (
            self.independence_reason.value if self.independence_reason else None
        )
        data["calculation_breakdown"] = [asdict(step) for step in self.calculation_breakdown]
        return data

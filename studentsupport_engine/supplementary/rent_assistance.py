"""
Rent Assistance Calculator.
Supplementary payment added to Youth Allowance when paying eligible rent.
Formula: (Eligible Rent - Rent Threshold) x 0.75, capped at the household's max rate.
"""

import logging
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..config.threshold_config import ThresholdTable
from ..validation import check_amount, coerce_enum

logger = logging.getLogger(__name__)

# Fixed for every household type
RENT_ASSISTANCE_TAPER = 0.75


class RentType(Enum):
    """How the fortnightly amount is paid."""
    PRIVATE = "private"
    BOARD_LODGING = "board_lodging"
    BOARD_ONLY = "board_only"


class HouseholdType(Enum):
    """Household categories with their own threshold and cap."""
    SINGLE = "single"
    SINGLE_SHARER = "single_sharer"
    COUPLE = "couple"


# Fraction of the amount paid that counts as rent
ELIGIBLE_RENT_FRACTIONS = {
    RentType.PRIVATE: 1.0,
    RentType.BOARD_LODGING: 2 / 3,
    RentType.BOARD_ONLY: 1 / 3,
}

RENT_TYPE_LABELS = {
    RentType.PRIVATE: "Private rent (e.g. share house, apartment)",
    RentType.BOARD_LODGING: "Board and lodging (room + meals)",
    RentType.BOARD_ONLY: "Board only (room, no meals)",
}

HOUSEHOLD_TYPE_LABELS = {
    HouseholdType.SINGLE: "Single (not sharing)",
    HouseholdType.SINGLE_SHARER: "Single, sharing (e.g. share house)",
    HouseholdType.COUPLE: "Couple (combined)",
}


@dataclass(frozen=True)
class RentAssistanceInput:
    """Rent Assistance request."""
    fortnightly_amount: float
    rent_type: RentType
    household_type: HouseholdType
    base_payment_fortnightly: Optional[float] = None  # Final Youth Allowance amount
    personal_income_fortnightly: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(
            self,
            "fortnightly_amount",
            check_amount(self.fortnightly_amount, "fortnightly_amount", required=True),
        )
        object.__setattr__(self, "rent_type", coerce_enum(RentType, self.rent_type, "rent_type"))
        object.__setattr__(
            self,
            "household_type",
            coerce_enum(HouseholdType, self.household_type, "household_type"),
        )
        for name in ("base_payment_fortnightly", "personal_income_fortnightly"):
            object.__setattr__(self, name, check_amount(getattr(self, name), name))

    @classmethod
    def from_dict(cls, data: Dict) -> "RentAssistanceInput":
        """Build an input from snake_case or camelCase form data."""
        def pick(name: str, alias: str):
            value = data.get(name)
            return data.get(alias) if value is None else value

        return cls(
            fortnightly_amount=pick("fortnightly_amount", "fortnightlyAmount"),
            rent_type=pick("rent_type", "rentType"),
            household_type=pick("household_type", "householdType"),
            base_payment_fortnightly=pick("base_payment_fortnightly", "basePaymentFortnightly"),
            personal_income_fortnightly=pick("personal_income_fortnightly", "personalIncomeFortnightly"),
        )


@dataclass(frozen=True)
class RentAssistanceResult:
    """Rent Assistance calculation result."""
    eligible: bool
    eligible_rent: float
    rent_threshold: float
    max_rate: float
    rent_ceiling: float
    rent_assistance_before_cap: float
    rent_assistance_fortnightly: float
    is_capped: bool = False
    income_test_reduces_to_zero: bool = False
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        """Serialise to plain types for a display layer."""
        data = asdict(self)
        data["warnings"] = list(self.warnings)
        return data


def get_eligible_rent_amount(fortnightly_amount: float, rent_type: RentType) -> float:
    """
    Convert the amount paid to eligible rent.

    Private rent counts in full, board and lodging counts two thirds and
    board only counts one third.
    """
    rent_type = coerce_enum(RentType, rent_type, "rent_type")
    if rent_type == RentType.PRIVATE:
        return fortnightly_amount
    return ELIGIBLE_RENT_FRACTIONS[rent_type] * fortnightly_amount


def calculate_rent_assistance(
    inp: RentAssistanceInput,
    thresholds: ThresholdTable,
) -> RentAssistanceResult:
    """
    Calculate Rent Assistance using the 75% rule.

    Args:
        inp: Validated Rent Assistance input
        thresholds: Threshold table for the policy year

    Returns:
        RentAssistanceResult with the capped fortnightly amount and warnings
    """
    warnings: List[str] = []
    eligible_rent = get_eligible_rent_amount(inp.fortnightly_amount, inp.rent_type)
    rates = thresholds.rent_assistance_for(inp.household_type.value)
    rent_threshold = rates.rent_threshold
    max_rate = rates.max_rate

    if eligible_rent < rent_threshold:
        shortfall = rent_threshold - eligible_rent
        logger.debug(
            "Eligible rent %.2f below threshold %.2f (%s)",
            eligible_rent, rent_threshold, inp.household_type.value,
        )
        return RentAssistanceResult(
            eligible=False,
            eligible_rent=eligible_rent,
            rent_threshold=rent_threshold,
            max_rate=max_rate,
            rent_ceiling=rates.rent_ceiling,
            rent_assistance_before_cap=0.0,
            rent_assistance_fortnightly=0.0,
            warnings=(
                f"Your eligible rent (${eligible_rent:.2f}/fortnight) is below the threshold "
                f"(${rent_threshold:.2f}/fortnight) by ${shortfall:.2f}. You need to pay more "
                f"than ${rent_threshold:.2f} in eligible rent to receive Rent Assistance.",
            ),
        )

    before_cap = (eligible_rent - rent_threshold) * RENT_ASSISTANCE_TAPER
    amount = min(before_cap, max_rate)
    is_capped = before_cap > max_rate

    # RA is added to the base payment before the personal income test
    reduces_to_zero = False
    if (
        inp.base_payment_fortnightly is not None
        and inp.personal_income_fortnightly is not None
        and inp.personal_income_fortnightly > thresholds.personal_income_free_area
    ):
        if inp.base_payment_fortnightly <= 0:
            reduces_to_zero = True
            amount = 0.0
            warnings.append(
                "Your main payment (e.g. Youth Allowance) is reduced to $0 by the income "
                "test, so your Rent Assistance is also $0."
            )
        else:
            warnings.append(
                "Rent Assistance is added to your base payment before the income test. If "
                "your total payment is reduced to $0 by income, Rent Assistance will also be $0."
            )

    logger.debug(
        "Rent Assistance: eligible rent %.2f, before cap %.2f, paid %.2f (cap %.2f)",
        eligible_rent, before_cap, amount, max_rate,
    )

    return RentAssistanceResult(
        eligible=True,
        eligible_rent=eligible_rent,
        rent_threshold=rent_threshold,
        max_rate=max_rate,
        rent_ceiling=rates.rent_ceiling,
        rent_assistance_before_cap=before_cap,
        rent_assistance_fortnightly=amount,
        is_capped=is_capped,
        income_test_reduces_to_zero=reduces_to_zero,
        warnings=tuple(warnings),
    )


def withhold_rent_assistance(result: RentAssistanceResult) -> RentAssistanceResult:
    """Zero a result when the main payment it rides on is not payable."""
    warnings = result.warnings
    if not result.income_test_reduces_to_zero:
        warnings += (
            "You are not currently eligible for the main payment (e.g. Youth Allowance), "
            "so Rent Assistance is not payable.",
        )
    return replace(result, eligible=False, rent_assistance_fortnightly=0.0, warnings=warnings)


def get_rent_type_label(rent_type: RentType) -> str:
    """Display label for a rent type."""
    return RENT_TYPE_LABELS[coerce_enum(RentType, rent_type, "rent_type")]


def get_household_type_label(household_type: HouseholdType) -> str:
    """Display label for a household type."""
    return HOUSEHOLD_TYPE_LABELS[coerce_enum(HouseholdType, household_type, "household_type")]

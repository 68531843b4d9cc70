"""
Supplementary payments derived from the Youth Allowance result.
"""

from .rent_assistance import (
    RENT_ASSISTANCE_TAPER,
    HouseholdType,
    RentType,
    RentAssistanceInput,
    RentAssistanceResult,
    calculate_rent_assistance,
    get_eligible_rent_amount,
    get_household_type_label,
    get_rent_type_label,
    withhold_rent_assistance,
)

__all__ = [
    "RENT_ASSISTANCE_TAPER",
    "HouseholdType",
    "RentType",
    "RentAssistanceInput",
    "RentAssistanceResult",
    "calculate_rent_assistance",
    "get_eligible_rent_amount",
    "get_household_type_label",
    "get_rent_type_label",
    "withhold_rent_assistance",
]

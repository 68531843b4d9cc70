"""
Student Support Engine - deterministic payment and ATAR estimates.

A set of pure calculations that turn a student's declared circumstances into
Youth Allowance, Rent Assistance and ATAR estimates.

Main Components:
    - config: Policy-year threshold tables and ATAR reference data loaders
    - eligibility: Youth Allowance gates and income tests
    - supplementary: Rent Assistance
    - scaling: Scaled marks, aggregate and ATAR conversion
"""

from typing import Dict, Optional

# Configuration
from .config.threshold_config import (
    ATAR_CONFIG,
    DEFAULT_POLICY_YEAR,
    RENT_ASSISTANCE_CONFIG,
    THRESHOLD_CONFIG,
    ThresholdTable,
    get_threshold_table,
)

# Youth Allowance
from .eligibility import (
    ApplicantProfile,
    BreakdownStep,
    IndependenceReason,
    IndependenceStatus,
    LivingSituation,
    PaymentEligibilityEngine,
    PaymentResult,
    calculate_parental_income_reduction,
    calculate_personal_income_reduction,
    evaluate,
    parse_household_income_band,
    parse_personal_income_fortnightly_band,
)

# Rent Assistance
from .supplementary import (
    HouseholdType,
    RentAssistanceInput,
    RentAssistanceResult,
    RentType,
    calculate_rent_assistance,
    get_eligible_rent_amount,
    get_household_type_label,
    get_rent_type_label,
    withhold_rent_assistance,
)

# ATAR
from .scaling import (
    AtarResult,
    ConversionTable,
    ScalingTable,
    SubjectScoreEntry,
    calculate_atar,
    convert_to_final_score,
    get_scaled_mark,
    scale_and_aggregate,
)

from .config.reference_loader import (
    AtarReferenceData,
    load_conversion_table_csv,
    load_reference_tables,
    load_scaling_table_csv,
)

from .exceptions import (
    ProfileValidationError,
    ReferenceDataError,
    ThresholdConfigError,
)


__version__ = "1.0.0"
__all__ = [
    # Configuration
    "ATAR_CONFIG",
    "DEFAULT_POLICY_YEAR",
    "RENT_ASSISTANCE_CONFIG",
    "THRESHOLD_CONFIG",
    "ThresholdTable",
    "get_threshold_table",
    # Youth Allowance
    "ApplicantProfile",
    "BreakdownStep",
    "IndependenceReason",
    "IndependenceStatus",
    "LivingSituation",
    "PaymentEligibilityEngine",
    "PaymentResult",
    "calculate_parental_income_reduction",
    "calculate_personal_income_reduction",
    "evaluate",
    "parse_household_income_band",
    "parse_personal_income_fortnightly_band",
    # Rent Assistance
    "HouseholdType",
    "RentAssistanceInput",
    "RentAssistanceResult",
    "RentType",
    "calculate_rent_assistance",
    "get_eligible_rent_amount",
    "get_household_type_label",
    "get_rent_type_label",
    "withhold_rent_assistance",
    # ATAR
    "AtarResult",
    "ConversionTable",
    "ScalingTable",
    "SubjectScoreEntry",
    "calculate_atar",
    "convert_to_final_score",
    "get_scaled_mark",
    "scale_and_aggregate",
    "AtarReferenceData",
    "load_conversion_table_csv",
    "load_reference_tables",
    "load_scaling_table_csv",
    # Errors
    "ProfileValidationError",
    "ReferenceDataError",
    "ThresholdConfigError",
    # Main function
    "run_student_support_assessment",
]


def run_student_support_assessment(
    profile_data: Dict,
    rent_data: Optional[Dict] = None,
    policy_year: int = DEFAULT_POLICY_YEAR,
    thresholds: Optional[ThresholdTable] = None,
) -> Dict:
    """
    Main entry point for a student support estimate.

    This function orchestrates the complete pipeline:
    1. Build and validate the applicant profile
    2. Evaluate Youth Allowance eligibility and payment
    3. Calculate Rent Assistance on top of the payment (if rent data given)
    4. Return a display-ready dictionary

    Args:
        profile_data: Applicant form data (snake_case or camelCase keys):
            - age: Age in years (required)
            - study_load_full_time: Full-time study flag (required)
            - living_situation: home/away/renting/moving_out/on-campus/unsure
            - parental_income_annual, personal_income_fortnightly,
              personal_assets: Optional; omitted means "not tested"
        rent_data: Optional Rent Assistance form data with keys:
            - fortnightly_amount: Rent or board paid per fortnight
            - rent_type: private/board_lodging/board_only
            - household_type: single/single_sharer/couple
        policy_year: Policy year of the threshold table
        thresholds: Explicit threshold table (overrides policy_year)

    Returns:
        Dictionary containing:
            - policy_year: Year of the thresholds used
            - youth_allowance: PaymentResult as a dictionary
            - rent_assistance: RentAssistanceResult as a dictionary, or None
            - total_fortnightly: Youth Allowance plus Rent Assistance

    Raises:
        ProfileValidationError: If the form data is malformed
        ThresholdConfigError: If the threshold table is missing or invalid

    Example:
        >>> result = run_student_support_assessment(
        ...     {"age": 19, "study_load_full_time": True, "living_situation": "renting"},
        ...     rent_data={"fortnightly_amount": 400, "rent_type": "private",
        ...                "household_type": "single"},
        ... )
        >>> result["rent_assistance"]["rent_assistance_fortnightly"]
        186.0
    """
    table = thresholds or get_threshold_table(policy_year)

    # Step 1: Build the profile
    profile = ApplicantProfile.from_dict(profile_data)

    # Step 2: Youth Allowance
    payment = evaluate(profile, table)

    # Step 3: Rent Assistance rides on the final Youth Allowance amount
    rent_result = None
    if rent_data:
        rent_input_data = dict(rent_data)
        if "basePaymentFortnightly" not in rent_input_data:
            rent_input_data.setdefault("base_payment_fortnightly", payment.final_fortnightly_payment)
        if (
            profile.personal_income_fortnightly is not None
            and "personalIncomeFortnightly" not in rent_input_data
        ):
            rent_input_data.setdefault(
                "personal_income_fortnightly", profile.personal_income_fortnightly
            )
        rent_result = calculate_rent_assistance(
            RentAssistanceInput.from_dict(rent_input_data), table
        )
        if not payment.eligible:
            rent_result = withhold_rent_assistance(rent_result)

    total = payment.final_fortnightly_payment
    if rent_result is not None:
        total += rent_result.rent_assistance_fortnightly

    # Step 4: Build response
    return {
        "policy_year": table.policy_year,
        "youth_allowance": payment.to_dict(),
        "rent_assistance": rent_result.to_dict() if rent_result is not None else None,
        "total_fortnightly": total,
    }

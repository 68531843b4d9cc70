"""
Income test reductions for Youth Allowance.

Parental income uses a single taper shared across every child in the family
receiving a student payment. Personal income uses a two-tier taper over the
fortnightly free area.
"""

import logging

from ..config.threshold_config import ThresholdTable

logger = logging.getLogger(__name__)


def calculate_parental_income_reduction(
    parental_income: float,
    siblings_count: int,
    thresholds: ThresholdTable,
) -> float:
    """
    Calculate the parental income reduction for one applicant.

    The family's total reduction is split evenly between the applicant and
    every sibling also receiving a student payment. This ignores each
    sibling's own rate and is a known approximation.

    Args:
        parental_income: Combined parental taxable income (annual)
        siblings_count: Number of OTHER children receiving a student payment
        thresholds: Threshold table for the policy year

    Returns:
        Reduction attributed to this applicant
    """
    free_area = thresholds.parental_income_free_area
    if parental_income <= free_area:
        return 0.0

    excess_income = parental_income - free_area
    total_reduction = excess_income * thresholds.parental_income_taper_rate

    total_children = siblings_count + 1
    reduction_per_child = total_reduction / total_children

    logger.debug(
        "Parental income %.2f exceeds free area %.2f: pool %.2f split %d ways",
        parental_income, free_area, total_reduction, total_children,
    )
    return reduction_per_child


def apply_income_bank(personal_income: float, income_bank_credit: float, thresholds: ThresholdTable) -> float:
    """Subtract available income bank credits (capped) from fortnightly income."""
    credit = min(max(0.0, income_bank_credit), thresholds.income_bank_cap)
    return max(0.0, personal_income - credit)


def calculate_personal_income_reduction(
    personal_income: float,
    thresholds: ThresholdTable,
    income_bank_credit: float = 0.0,
) -> float:
    """
    Calculate the fortnightly personal income reduction.

    Tier 1 applies between the free area and the tier-1 ceiling (inclusive).
    Above the ceiling the reduction is the full tier-1 accrual plus the
    tier-2 flat offset plus the tier-2 rate on income over the ceiling.

    Args:
        personal_income: Gross earnings per fortnight
        thresholds: Threshold table for the policy year
        income_bank_credit: Unused income bank credits (0 when not tracked)

    Returns:
        Fortnightly reduction
    """
    if not personal_income or personal_income <= 0:
        return 0.0

    effective_income = apply_income_bank(personal_income, income_bank_credit, thresholds)

    free_area = thresholds.personal_income_free_area
    tier1_ceiling = thresholds.personal_income_tier1_ceiling
    tier1_rate = thresholds.personal_income_tier1_rate

    if effective_income <= free_area:
        return 0.0

    if effective_income <= tier1_ceiling:
        return (effective_income - free_area) * tier1_rate

    tier1_flat_amount = (tier1_ceiling - free_area) * tier1_rate
    excess_over_tier1 = effective_income - tier1_ceiling
    return (
        tier1_flat_amount
        + thresholds.personal_income_tier2_flat_offset
        + excess_over_tier1 * thresholds.personal_income_tier2_rate
    )

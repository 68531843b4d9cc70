"""
Threshold configuration for the Student Support Engine.
Contains policy-year rates, free areas, tapers and caps for Youth Allowance,
Rent Assistance and the ATAR aggregate.
"""

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from ..exceptions import ThresholdConfigError

logger = logging.getLogger(__name__)


DEFAULT_POLICY_YEAR = 2026

HOUSEHOLD_TYPES = ("single", "single_sharer", "couple")

# Youth Allowance thresholds by policy year
# NOTE: The published $53.50 tier-2 amount is the reduction already accrued
# over tier 1 ((646 - 539) * 0.50), so the extra offset is stored as 0.0.
THRESHOLD_CONFIG = {
    2026: {
        # Age limits
        "age_min": 18,
        "age_max": 24,
        "independence_age": 22,

        # Parental income test (annual)
        "parental_income_free_area": 66722,
        "parental_income_taper_rate": 0.20,  # 20c per $1 over free area

        # Personal income test (fortnightly)
        "personal_income_free_area": 539,
        "personal_income_tier1_ceiling": 646,
        "personal_income_tier1_rate": 0.50,  # 50c per $1
        "personal_income_tier2_flat_offset": 0.0,
        "personal_income_tier2_rate": 0.60,  # 60c per $1
        "income_bank_cap": 13500,  # Maximum income bank credits

        # Personal assets test
        "assets_limit_homeowner": 321500,
        "assets_limit_non_homeowner": 579500,

        # Maximum fortnightly rates
        "max_rate_single_at_home": 482.40,
        "max_rate_single_away": 677.20,
        "max_rate_single_with_children": 854.20,
        "max_rate_partnered_no_children": 677.20,
    },
}

# Rent Assistance rates by policy year and household type (fortnightly)
RENT_ASSISTANCE_CONFIG = {
    2026: {
        "single": {"rent_threshold": 152, "max_rate": 215.4, "rent_ceiling": 439.2},
        "single_sharer": {"rent_threshold": 152, "max_rate": 143.6, "rent_ceiling": 343.47},
        "couple": {"rent_threshold": 246.2, "max_rate": 203, "rent_ceiling": 516.87},
    },
}

# ATAR aggregate parameters
ATAR_CONFIG = {
    "unit_budget": 10,  # Best 10 units count towards the aggregate
    "final_score_decimals": 1,
}

FORTNIGHTS_PER_YEAR = 26

REQUIRED_THRESHOLD_KEYS = tuple(THRESHOLD_CONFIG[DEFAULT_POLICY_YEAR].keys())
REQUIRED_RENT_ASSISTANCE_KEYS = ("rent_threshold", "max_rate", "rent_ceiling")


@dataclass(frozen=True)
class RentAssistanceRates:
    """Rent Assistance parameters for one household type."""
    rent_threshold: float
    max_rate: float
    rent_ceiling: float


@dataclass(frozen=True)
class ThresholdTable:
    """Validated, read-only threshold constants for one policy year."""
    policy_year: int

    age_min: int
    age_max: int
    independence_age: int

    parental_income_free_area: float
    parental_income_taper_rate: float

    personal_income_free_area: float
    personal_income_tier1_ceiling: float
    personal_income_tier1_rate: float
    personal_income_tier2_flat_offset: float
    personal_income_tier2_rate: float
    income_bank_cap: float

    assets_limit_homeowner: float
    assets_limit_non_homeowner: float

    max_rate_single_at_home: float
    max_rate_single_away: float
    max_rate_single_with_children: float
    max_rate_partnered_no_children: float

    rent_assistance: Mapping[str, RentAssistanceRates]

    @classmethod
    def from_config(
        cls,
        config: Dict,
        rent_assistance_config: Dict,
        policy_year: int = DEFAULT_POLICY_YEAR,
    ) -> "ThresholdTable":
        """
        Build a threshold table from raw config dictionaries.

        Args:
            config: Youth Allowance constants (see THRESHOLD_CONFIG)
            rent_assistance_config: Rent Assistance rates keyed by household type
            policy_year: Policy year the constants belong to

        Returns:
            Validated ThresholdTable

        Raises:
            ThresholdConfigError: If a constant is missing, non-numeric,
                negative, or the tiers are inconsistent
        """
        missing = [key for key in REQUIRED_THRESHOLD_KEYS if key not in config]
        if missing:
            raise ThresholdConfigError(
                f"Threshold table for {policy_year} is missing required constants: "
                f"{', '.join(missing)}"
            )

        values = {key: _require_rate(key, config[key]) for key in REQUIRED_THRESHOLD_KEYS}

        rent_rates = {}
        for household in HOUSEHOLD_TYPES:
            if household not in rent_assistance_config:
                raise ThresholdConfigError(
                    f"Rent Assistance rates for {policy_year} missing household type '{household}'"
                )
            household_config = rent_assistance_config[household]
            missing = [key for key in REQUIRED_RENT_ASSISTANCE_KEYS if key not in household_config]
            if missing:
                raise ThresholdConfigError(
                    f"Rent Assistance rates for '{household}' missing: {', '.join(missing)}"
                )
            rent_rates[household] = RentAssistanceRates(
                **{
                    key: _require_rate(f"{household}.{key}", household_config[key])
                    for key in REQUIRED_RENT_ASSISTANCE_KEYS
                }
            )

        table = cls(
            policy_year=policy_year,
            age_min=int(values.pop("age_min")),
            age_max=int(values.pop("age_max")),
            independence_age=int(values.pop("independence_age")),
            rent_assistance=MappingProxyType(rent_rates),
            **values,
        )
        table._check_consistency()
        return table

    def _check_consistency(self) -> None:
        """Cross-field checks that individual constants cannot express."""
        if self.age_min > self.age_max:
            raise ThresholdConfigError(
                f"age_min ({self.age_min}) is greater than age_max ({self.age_max})"
            )
        if self.personal_income_tier1_ceiling < self.personal_income_free_area:
            raise ThresholdConfigError(
                f"Tier 1 ceiling ({self.personal_income_tier1_ceiling}) is below the "
                f"personal income free area ({self.personal_income_free_area})"
            )
        if self.personal_income_tier2_rate < self.personal_income_tier1_rate:
            raise ThresholdConfigError(
                f"Tier 2 rate ({self.personal_income_tier2_rate}) is lower than "
                f"tier 1 rate ({self.personal_income_tier1_rate})"
            )
        if self.personal_income_tier2_flat_offset != 0:
            logger.warning(
                "Threshold table %s has a tier-2 flat offset of %.2f; personal income "
                "reduction will step by that amount at the tier-1 ceiling (%.2f)",
                self.policy_year,
                self.personal_income_tier2_flat_offset,
                self.personal_income_tier1_ceiling,
            )

    def rent_assistance_for(self, household_type: str) -> RentAssistanceRates:
        """Get Rent Assistance rates for a household type value."""
        try:
            return self.rent_assistance[household_type]
        except KeyError:
            raise ThresholdConfigError(
                f"No Rent Assistance rates for household type '{household_type}'"
            ) from None

    def assets_limit(self, is_homeowner: bool) -> float:
        """Get the personal assets limit for the applicant's home-ownership status."""
        if is_homeowner:
            return self.assets_limit_homeowner
        return self.assets_limit_non_homeowner


def _require_rate(name: str, value) -> float:
    """Coerce a config constant to float, rejecting missing, NaN and negative values."""
    if value is None or isinstance(value, bool):
        raise ThresholdConfigError(f"Threshold constant '{name}' has no numeric value")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ThresholdConfigError(
            f"Threshold constant '{name}' is not numeric: {value!r}"
        ) from None
    if math.isnan(number) or math.isinf(number):
        raise ThresholdConfigError(f"Threshold constant '{name}' is not finite: {value!r}")
    if number < 0:
        raise ThresholdConfigError(f"Threshold constant '{name}' is negative: {value!r}")
    return number


def get_threshold_table(
    policy_year: int = DEFAULT_POLICY_YEAR,
    overrides: Optional[Dict] = None,
) -> ThresholdTable:
    """
    Get the validated threshold table for a policy year.

    Args:
        policy_year: Policy year to load
        overrides: Optional constants replacing the configured values

    Returns:
        ThresholdTable for the year

    Raises:
        ThresholdConfigError: If the year is not configured or the constants are invalid
    """
    if policy_year not in THRESHOLD_CONFIG or policy_year not in RENT_ASSISTANCE_CONFIG:
        raise ThresholdConfigError(f"No threshold table configured for policy year {policy_year}")

    config = dict(THRESHOLD_CONFIG[policy_year])
    if overrides:
        unknown = sorted(key for key in overrides if key not in REQUIRED_THRESHOLD_KEYS)
        if unknown:
            raise ThresholdConfigError(
                f"Unknown threshold constants in overrides: {', '.join(unknown)}"
            )
        config.update(overrides)

    return ThresholdTable.from_config(
        config,
        RENT_ASSISTANCE_CONFIG[policy_year],
        policy_year=policy_year,
    )

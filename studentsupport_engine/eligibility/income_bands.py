"""
Conversion of the portal's income select-box bands to numeric estimates.
Midpoints are used where a band is bounded, conservative values otherwise.
"""

from typing import Optional

# Annual household (parental) income bands
HOUSEHOLD_INCOME_BANDS = {
    "under-66722": 50000,  # Conservative: use lower bound
    "66723-80k": 73361,  # Midpoint: (66723 + 80000) / 2
    "80k-100k": 90000,
    "100k-150k": 125000,
    "over-150k": 175000,  # Conservative estimate
}

# Fortnightly personal income bands
PERSONAL_INCOME_BANDS = {
    "under-190": 150,
    "190-539": 364,  # Midpoint: (190 + 539) / 2
    "over-539": 700,  # Conservative estimate for calculation
}


def parse_household_income_band(income_band: str) -> Optional[float]:
    """Annual parental income estimate for a band, or None for an unknown band."""
    value = HOUSEHOLD_INCOME_BANDS.get(income_band)
    return float(value) if value is not None else None


def parse_personal_income_fortnightly_band(income_band: str) -> Optional[float]:
    """Fortnightly personal income estimate for a band, or None for an unknown band."""
    value = PERSONAL_INCOME_BANDS.get(income_band)
    return float(value) if value is not None else None

"""
Configuration module for the Student Support Engine.

This module contains the policy-year threshold tables and the ATAR
reference data loaders.
"""

from .threshold_config import (
    ATAR_CONFIG,
    DEFAULT_POLICY_YEAR,
    FORTNIGHTS_PER_YEAR,
    HOUSEHOLD_TYPES,
    RENT_ASSISTANCE_CONFIG,
    THRESHOLD_CONFIG,
    RentAssistanceRates,
    ThresholdTable,
    get_threshold_table,
)

__all__ = [
    "ATAR_CONFIG",
    "DEFAULT_POLICY_YEAR",
    "FORTNIGHTS_PER_YEAR",
    "HOUSEHOLD_TYPES",
    "RENT_ASSISTANCE_CONFIG",
    "THRESHOLD_CONFIG",
    "RentAssistanceRates",
    "ThresholdTable",
    "get_threshold_table",
]

"""
Scaling Module for ATAR estimates.

Contains scaled-mark interpolation, best-units aggregation and the
aggregate-to-ATAR conversion.
"""

from .atar_calculator import (
    AggregateResult,
    AtarResult,
    ConversionTable,
    ScalingTable,
    SubjectScaledMark,
    SubjectScoreEntry,
    calculate_atar,
    convert_to_final_score,
    get_scaled_mark,
    interpolate,
    scale_and_aggregate,
)

__all__ = [
    "AggregateResult",
    "AtarResult",
    "ConversionTable",
    "ScalingTable",
    "SubjectScaledMark",
    "SubjectScoreEntry",
    "calculate_atar",
    "convert_to_final_score",
    "get_scaled_mark",
    "interpolate",
    "scale_and_aggregate",
]

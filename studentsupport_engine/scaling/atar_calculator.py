"""
ATAR Calculator.

Converts raw subject marks to scaled marks by piecewise-linear interpolation
over each subject's scaling statistics, aggregates the best units, then
converts the aggregate to an ATAR over the conversion table.

Both lookups clamp to the first/last row outside the table range, which is
exactly what numpy.interp does for increasing sample points.
"""

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..config.threshold_config import ATAR_CONFIG
from ..exceptions import ProfileValidationError, ReferenceDataError

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def _check_increasing(points: Sequence[Point], label: str) -> None:
    for key, value in points:
        if math.isnan(key) or math.isnan(value):
            raise ReferenceDataError(f"{label}: NaN in table row ({key}, {value})")
    for previous, current in zip(points, points[1:]):
        if current[0] <= previous[0]:
            raise ReferenceDataError(
                f"{label}: keys must be strictly increasing, "
                f"got {previous[0]} followed by {current[0]}"
            )


def _sorted_points(points: Iterable[Point], label: str) -> Tuple[Point, ...]:
    """Sort (key, value) pairs by key and reject duplicate keys."""
    ordered = tuple(sorted((float(k), float(v)) for k, v in points))
    _check_increasing(ordered, label)
    return ordered


def interpolate(x: float, points: Sequence[Point]) -> float:
    """
    Piecewise-linear lookup with clamping at both ends.

    Returns 0.0 when there are no points.
    """
    if not points:
        return 0.0
    xp = np.fromiter((p[0] for p in points), dtype=float, count=len(points))
    fp = np.fromiter((p[1] for p in points), dtype=float, count=len(points))
    return float(np.interp(x, xp, fp))


@dataclass(frozen=True)
class ScalingTable:
    """Per-subject (percentile, scaled mark) rows for one year."""
    rows: Mapping[int, Tuple[Point, ...]]
    year: Optional[int] = None

    def __post_init__(self):
        frozen_rows = {
            int(subject_id): tuple((float(p[0]), float(p[1])) for p in points)
            for subject_id, points in self.rows.items()
        }
        for subject_id, points in frozen_rows.items():
            _check_increasing(points, f"Scaling rows for subject {subject_id}")
        object.__setattr__(self, "rows", MappingProxyType(frozen_rows))

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Tuple[int, float, float]],
        year: Optional[int] = None,
    ) -> "ScalingTable":
        """
        Build a table from flat (subject_id, percentile, scaled_mark) rows.

        Raises:
            ReferenceDataError: If a subject has a duplicate percentile
        """
        grouped: Dict[int, List[Point]] = {}
        for subject_id, percentile, scaled_mark in rows:
            grouped.setdefault(int(subject_id), []).append((percentile, scaled_mark))

        return cls(
            rows={
                subject_id: _sorted_points(points, f"Scaling rows for subject {subject_id}")
                for subject_id, points in grouped.items()
            },
            year=year,
        )

    def rows_for(self, subject_id: int) -> Tuple[Point, ...]:
        return self.rows.get(subject_id, ())


@dataclass(frozen=True)
class ConversionTable:
    """(aggregate, ATAR) rows for one year."""
    points: Tuple[Point, ...]
    year: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(
            self, "points", tuple((float(p[0]), float(p[1])) for p in self.points)
        )
        _check_increasing(self.points, "Conversion table")

    @classmethod
    def from_rows(cls, rows: Iterable[Point], year: Optional[int] = None) -> "ConversionTable":
        """Build a table from (aggregate, atar) rows in any order."""
        return cls(points=_sorted_points(rows, "Conversion table"), year=year)


@dataclass(frozen=True)
class SubjectScoreEntry:
    """One subject result entered by the student."""
    subject_id: int
    subject_name: str
    units: float
    mark: float  # Mark or percentile (0-100) used to look up the scaled mark

    def __post_init__(self):
        for name in ("units", "mark"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ProfileValidationError(name, f"must be a number, got {value!r}")
            if math.isnan(value) or math.isinf(value):
                raise ProfileValidationError(name, f"must be finite, got {value!r}")
        if self.units < 0:
            raise ProfileValidationError("units", f"cannot be negative, got {self.units!r}")


@dataclass(frozen=True)
class SubjectScaledMark:
    """Scaled mark for one subject and how many of its units counted."""
    subject_id: int
    subject_name: str
    units: float
    scaled_mark: float
    units_taken: float = 0.0


@dataclass(frozen=True)
class AggregateResult:
    aggregate: float
    by_subject: Tuple[SubjectScaledMark, ...] = field(default_factory=tuple)

    @property
    def units_counted(self) -> float:
        return sum(s.units_taken for s in self.by_subject)


@dataclass(frozen=True)
class AtarResult:
    """Full ATAR calculation result."""
    aggregate: float
    atar: float
    by_subject: Tuple[SubjectScaledMark, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        return {
            "aggregate": self.aggregate,
            "atar": self.atar,
            "by_subject": [
                {
                    "subject_id": s.subject_id,
                    "subject_name": s.subject_name,
                    "units": s.units,
                    "scaled_mark": s.scaled_mark,
                    "units_taken": s.units_taken,
                }
                for s in self.by_subject
            ],
        }


def get_scaled_mark(subject_id: int, mark: float, scaling_table: ScalingTable) -> float:
    """
    Get the scaled mark for a subject by interpolating its scaling rows.

    A subject with no rows gets 0.0 rather than failing the whole calculation.
    """
    points = scaling_table.rows_for(subject_id)
    if not points:
        logger.warning("No scaling rows for subject %s; using scaled mark 0", subject_id)
        return 0.0
    return interpolate(mark, points)


def scale_and_aggregate(
    entries: Sequence[SubjectScoreEntry],
    scaling_table: ScalingTable,
    unit_budget: float = ATAR_CONFIG["unit_budget"],
) -> AggregateResult:
    """
    Scale every subject and aggregate the best units.

    Subjects are taken greedily from the highest scaled mark down (ties keep
    input order) until the unit budget is used; the last subject may count
    only part of its units.

    Args:
        entries: Subject results in input order
        scaling_table: Scaling rows for the year
        unit_budget: Units counted towards the aggregate

    Returns:
        AggregateResult with per-subject scaled marks in input order
    """
    scaled = [get_scaled_mark(e.subject_id, e.mark, scaling_table) for e in entries]

    # sorted() is stable with reverse=True, so equal marks keep input order
    order = sorted(range(len(entries)), key=lambda i: scaled[i], reverse=True)

    units_taken = [0.0] * len(entries)
    units_left = float(unit_budget)
    aggregate = 0.0
    for i in order:
        if units_left <= 0:
            break
        take = min(float(entries[i].units), units_left)
        units_taken[i] = take
        aggregate += scaled[i] * take
        units_left -= take

    by_subject = tuple(
        SubjectScaledMark(
            subject_id=e.subject_id,
            subject_name=e.subject_name,
            units=e.units,
            scaled_mark=scaled[i],
            units_taken=units_taken[i],
        )
        for i, e in enumerate(entries)
    )

    logger.debug(
        "Aggregate %.2f from %d subjects (%.1f of %.1f units)",
        aggregate, len(entries), sum(units_taken), unit_budget,
    )
    return AggregateResult(aggregate=aggregate, by_subject=by_subject)


def convert_to_final_score(aggregate: float, conversion_table: ConversionTable) -> float:
    """Convert an aggregate to an ATAR, rounded to one decimal place."""
    if not conversion_table.points:
        return 0.0
    atar = interpolate(aggregate, conversion_table.points)
    # half-up, so a midpoint such as 85.25 shows as 85.3
    step = Decimal(1).scaleb(-ATAR_CONFIG["final_score_decimals"])
    return float(Decimal(str(atar)).quantize(step, rounding=ROUND_HALF_UP))


def calculate_atar(
    entries: Sequence[SubjectScoreEntry],
    scaling_table: ScalingTable,
    conversion_table: ConversionTable,
    unit_budget: float = ATAR_CONFIG["unit_budget"],
) -> AtarResult:
    """Full calculation: subject entries + scaling + conversion -> aggregate and ATAR."""
    aggregated = scale_and_aggregate(entries, scaling_table, unit_budget=unit_budget)
    atar = convert_to_final_score(aggregated.aggregate, conversion_table)
    return AtarResult(aggregate=aggregated.aggregate, atar=atar, by_subject=aggregated.by_subject)

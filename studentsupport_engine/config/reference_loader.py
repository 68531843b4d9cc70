"""
ATAR reference data loader.
Loads CSV files containing subject scaling statistics and the
aggregate-to-ATAR conversion table for a year.

Nothing is cached here: callers load the tables once and pass them into the
calculator.
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..exceptions import ReferenceDataError
from ..scaling.atar_calculator import ConversionTable, ScalingTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtarReferenceData:
    """Scaling and conversion tables for one year."""
    year: Optional[int]
    scaling_table: ScalingTable
    conversion_table: ConversionTable
    subjects: Tuple[Dict, ...] = ()


def _read_rows(csv_path: str, label: str) -> List[Dict[str, str]]:
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"{label} file not found: {csv_path}")

    with open(csv_file, "r", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def _number(row: Dict[str, str], column: str, line: int, label: str) -> float:
    raw = (row.get(column) or "").strip()
    try:
        return float(raw)
    except ValueError:
        raise ReferenceDataError(
            f"{label} line {line}: column '{column}' is not numeric: {raw!r}"
        ) from None


def _matches_year(row: Dict[str, str], year: Optional[int], line: int, label: str) -> bool:
    if year is None or not (row.get("year") or "").strip():
        return True
    return int(_number(row, "year", line, label)) == year


def load_scaling_table_csv(csv_path: str, year: Optional[int] = None) -> ScalingTable:
    """
    Load subject scaling statistics from CSV file.

    Args:
        csv_path: Path to CSV file containing scaling statistics
        year: Only keep rows for this year (rows without a year are always kept)

    Returns:
        ScalingTable keyed by subject id

    Example CSV format:
        subject_id,year,percentile,scaled_mark
        1,2025,40,30.0
        1,2025,60,40.0
    """
    label = "Scaling statistics"
    rows = []
    for line, row in enumerate(_read_rows(csv_path, label), start=2):
        if not _matches_year(row, year, line, label):
            continue
        rows.append((
            int(_number(row, "subject_id", line, label)),
            _number(row, "percentile", line, label),
            _number(row, "scaled_mark", line, label),
        ))

    table = ScalingTable.from_rows(rows, year=year)
    logger.info("Loaded scaling statistics for %d subjects from %s", len(table.rows), csv_path)
    return table


def load_conversion_table_csv(csv_path: str, year: Optional[int] = None) -> ConversionTable:
    """
    Load the aggregate-to-ATAR conversion table from CSV file.

    Example CSV format:
        year,aggregate,atar
        2025,300,70.0
        2025,400,90.0
    """
    label = "ATAR conversion"
    points = []
    for line, row in enumerate(_read_rows(csv_path, label), start=2):
        if not _matches_year(row, year, line, label):
            continue
        points.append((
            _number(row, "aggregate", line, label),
            _number(row, "atar", line, label),
        ))

    table = ConversionTable.from_rows(points, year=year)
    logger.info("Loaded %d ATAR conversion rows from %s", len(table.points), csv_path)
    return table


def load_subjects_csv(csv_path: str) -> Tuple[Dict, ...]:
    """
    Load the subject list (id, name, units) from CSV file.

    Example CSV format:
        id,name,units
        1,Mathematics Advanced,2
    """
    label = "Subjects"
    subjects = []
    for line, row in enumerate(_read_rows(csv_path, label), start=2):
        subjects.append({
            "id": int(_number(row, "id", line, label)),
            "name": (row.get("name") or "").strip(),
            "units": _number(row, "units", line, label),
        })
    return tuple(sorted(subjects, key=lambda s: s["name"]))


def load_reference_tables(
    scaling_csv_path: str,
    conversion_csv_path: str,
    year: Optional[int] = None,
    subjects_csv_path: Optional[str] = None,
) -> AtarReferenceData:
    """Load every ATAR reference table for a year."""
    return AtarReferenceData(
        year=year,
        scaling_table=load_scaling_table_csv(scaling_csv_path, year=year),
        conversion_table=load_conversion_table_csv(conversion_csv_path, year=year),
        subjects=load_subjects_csv(subjects_csv_path) if subjects_csv_path else (),
    )

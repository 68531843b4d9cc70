#!/usr/bin/env python3
"""
Student Support Batch Processor for evaluating many applicants at once.
Reads an applicant table (one profile per row) and produces a results table
with per-row error capture.

Usage:
    python student_batch_processor.py applicants.csv [results.csv]
"""

import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

import pandas as pd

from studentsupport_engine import (
    ApplicantProfile,
    PaymentEligibilityEngine,
    PaymentResult,
    ProfileValidationError,
    RentAssistanceInput,
    RentAssistanceResult,
    ThresholdTable,
    calculate_rent_assistance,
    get_threshold_table,
    withhold_rent_assistance,
)
from studentsupport_engine.config.threshold_config import DEFAULT_POLICY_YEAR

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

INTEGER_FIELDS = ("age", "siblings_receiving_payments")
BOOLEAN_FIELDS = (
    "study_load_full_time",
    "concessional_study_load",
    "is_independent",
    "is_homeowner",
    "has_dependent_children",
    "is_partnered",
)
RENT_FIELDS = ("fortnightly_amount", "rent_type", "household_type")
TRUE_STRINGS = {"true", "yes", "y", "1"}
FALSE_STRINGS = {"false", "no", "n", "0"}


@dataclass
class ProcessingError:
    """Details of a processing error."""
    row_ref: str
    error_type: str
    error_message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class ApplicantOutcome:
    """Evaluation of one applicant row."""
    row_ref: str
    payment: PaymentResult
    rent_assistance: Optional[RentAssistanceResult] = None

    @property
    def total_fortnightly(self) -> float:
        total = self.payment.final_fortnightly_payment
        if self.rent_assistance is not None:
            total += self.rent_assistance.rent_assistance_fortnightly
        return total


@dataclass
class BatchStats:
    """Statistics for batch processing."""
    total_rows: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0

    # Outcome counts
    eligible: int = 0
    ineligible: int = 0
    reduced_to_zero: int = 0

    # Payment statistics
    total_fortnightly_payment: float = 0.0

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def average_fortnightly_payment(self) -> float:
        """Average fortnightly payment across eligible applicants."""
        if self.eligible == 0:
            return 0.0
        return self.total_fortnightly_payment / self.eligible

    @property
    def processing_time(self) -> float:
        """Calculate total processing time in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total_rows == 0:
            return 0.0
        return (self.successful / self.total_rows) * 100


@dataclass
class BatchResult:
    """Complete result of batch processing."""
    stats: BatchStats
    outcomes: List[ApplicantOutcome]
    errors: List[ProcessingError]
    error_summary: Dict[str, int] = field(default_factory=dict)

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten outcomes into one row per successfully evaluated applicant."""
        records = []
        for outcome in self.outcomes:
            payment = outcome.payment
            ra = outcome.rent_assistance
            records.append({
                "row_ref": outcome.row_ref,
                "eligible": payment.eligible,
                "independence_status": payment.independence_status.value,
                "base_rate": payment.base_rate,
                "parental_income_reduction": round(payment.parental_income_reduction, 2),
                "personal_income_reduction": round(payment.personal_income_reduction, 2),
                "final_fortnightly_payment": round(payment.final_fortnightly_payment, 2),
                "annual_payment": round(payment.annual_payment, 2),
                "reduced_to_zero_by_income": payment.reduced_to_zero_by_income,
                "rent_assistance_fortnightly": (
                    round(ra.rent_assistance_fortnightly, 2) if ra is not None else None
                ),
                "total_fortnightly": round(outcome.total_fortnightly, 2),
                "reasons": "; ".join(payment.ineligible_reasons or payment.eligible_reasons),
            })
        return pd.DataFrame.from_records(records)

    def errors_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(
            [
                {
                    "row_ref": e.row_ref,
                    "error_type": e.error_type,
                    "error_message": e.error_message,
                    "timestamp": e.timestamp,
                }
                for e in self.errors
            ],
            columns=["row_ref", "error_type", "error_message", "timestamp"],
        )


def _clean_value(name: str, value):
    """Convert a pandas cell to a plain Python value (NaN becomes None)."""
    if value is None:
        return None
    if not isinstance(value, (list, tuple, dict)) and pd.isna(value):
        return None
    if hasattr(value, "item"):
        value = value.item()

    if name in BOOLEAN_FIELDS and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
        raise ProfileValidationError(name, f"not a yes/no value: {value!r}")
    if name in BOOLEAN_FIELDS and isinstance(value, (int, float)) and not isinstance(value, bool):
        return bool(value)

    if name in INTEGER_FIELDS and isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


class StudentSupportBatchProcessor:
    """Batch processor for student support estimates."""

    def __init__(self, thresholds: Optional[ThresholdTable] = None, policy_year: int = DEFAULT_POLICY_YEAR):
        """
        Initialize the batch processor.

        Args:
            thresholds: Threshold table to evaluate against (optional)
            policy_year: Policy year to load when no table is given
        """
        self.thresholds = thresholds or get_threshold_table(policy_year)
        self.engine = PaymentEligibilityEngine(self.thresholds)

        logger.info(f"Initialized batch processor: policy_year={self.thresholds.policy_year}")

    def process_dataframe(
        self,
        df: pd.DataFrame,
        id_column: Optional[str] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> BatchResult:
        """
        Evaluate every applicant row in a DataFrame.

        Args:
            df: One applicant per row, columns named like ApplicantProfile fields,
                plus optional fortnightly_amount, rent_type, household_type
            id_column: Column holding an applicant reference (defaults to the index)
            progress_callback: Optional callback(current, total, message)

        Returns:
            BatchResult with all processing results
        """
        stats = BatchStats(
            total_rows=len(df),
            start_time=datetime.now()
        )

        outcomes = []
        errors = []
        error_types = {}

        logger.info(f"Starting batch processing of {len(df)} applicants")

        for position, (index, row) in enumerate(df.iterrows()):
            row_ref = str(row[id_column]) if id_column else str(index)
            try:
                if progress_callback:
                    progress_callback(position + 1, len(df), f"Processing: {row_ref}")

                outcome = self._process_single_applicant(row_ref, row.to_dict())

                outcomes.append(outcome)
                stats.processed += 1
                stats.successful += 1

                if outcome.payment.eligible:
                    stats.eligible += 1
                    stats.total_fortnightly_payment += outcome.payment.final_fortnightly_payment
                else:
                    stats.ineligible += 1
                if outcome.payment.reduced_to_zero_by_income:
                    stats.reduced_to_zero += 1

            except ProfileValidationError as e:
                self._record_error(errors, error_types, stats, row_ref, "DATA_VALIDATION_ERROR", str(e))
                logger.error(f"Data validation error in row {row_ref}: {e}")

            except KeyError as e:
                self._record_error(
                    errors, error_types, stats, row_ref, "MISSING_DATA",
                    f"Missing required field: {str(e)}"
                )
                logger.error(f"Missing data in row {row_ref}: {e}")

            except Exception as e:
                self._record_error(
                    errors, error_types, stats, row_ref, "PROCESSING_ERROR",
                    f"{type(e).__name__}: {str(e)}"
                )
                logger.error(f"Processing error in row {row_ref}: {traceback.format_exc()}")

        stats.end_time = datetime.now()

        logger.info(
            f"Batch processing complete: {stats.successful}/{stats.total_rows} successful, "
            f"{stats.eligible} eligible, avg payment: ${stats.average_fortnightly_payment:.2f}, "
            f"time: {stats.processing_time:.1f}s"
        )

        return BatchResult(
            stats=stats,
            outcomes=outcomes,
            errors=errors,
            error_summary=error_types
        )

    def _record_error(self, errors, error_types, stats, row_ref, error_type, message) -> None:
        errors.append(ProcessingError(row_ref=row_ref, error_type=error_type, error_message=message))
        stats.failed += 1
        stats.processed += 1
        error_types[error_type] = error_types.get(error_type, 0) + 1

    def _process_single_applicant(self, row_ref: str, row: Dict) -> ApplicantOutcome:
        """Evaluate a single applicant row."""
        data = {name: _clean_value(name, value) for name, value in row.items()}

        profile = ApplicantProfile.from_dict(data)
        payment = self.engine.evaluate(profile)

        rent_result = None
        if data.get("fortnightly_amount") is not None:
            missing = [name for name in RENT_FIELDS if data.get(name) is None]
            if missing:
                raise KeyError(", ".join(missing))
            rent_input = RentAssistanceInput(
                fortnightly_amount=data["fortnightly_amount"],
                rent_type=data["rent_type"],
                household_type=data["household_type"],
                base_payment_fortnightly=payment.final_fortnightly_payment,
                personal_income_fortnightly=profile.personal_income_fortnightly,
            )
            rent_result = calculate_rent_assistance(rent_input, self.thresholds)
            if not payment.eligible:
                rent_result = withhold_rent_assistance(rent_result)

        return ApplicantOutcome(row_ref=row_ref, payment=payment, rent_assistance=rent_result)


def main(argv: List[str]) -> int:
    if len(argv) < 2:
        print("Usage: python student_batch_processor.py applicants.csv [results.csv]")
        return 1

    input_path = argv[1]
    output_path = argv[2] if len(argv) > 2 else "student_support_results.csv"

    df = pd.read_csv(input_path)
    processor = StudentSupportBatchProcessor()
    result = processor.process_dataframe(df, id_column="applicant_id" if "applicant_id" in df.columns else None)

    result.to_dataframe().to_csv(output_path, index=False)
    print(f"Wrote {len(result.outcomes)} results to {output_path}")

    if result.errors:
        print(f"\n{len(result.errors)} rows failed:")
        for error_type, count in result.error_summary.items():
            print(f"  {error_type}: {count}")

    print(f"\nEligible: {result.stats.eligible}  Ineligible: {result.stats.ineligible}  "
          f"Reduced to zero: {result.stats.reduced_to_zero}")
    print(f"Average fortnightly payment: ${result.stats.average_fortnightly_payment:.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))

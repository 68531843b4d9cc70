"""
Tests for the student support batch processor.
"""

import math
import unittest

import numpy as np
import pandas as pd

from student_batch_processor import StudentSupportBatchProcessor, _clean_value
from studentsupport_engine.exceptions import ProfileValidationError


class TestCleanValue(unittest.TestCase):
    """Test conversion of DataFrame cells to plain values."""

    def test_nan_becomes_none(self):
        self.assertIsNone(_clean_value("parental_income_annual", float("nan")))
        self.assertIsNone(_clean_value("rent_type", None))

    def test_numpy_scalars_unwrapped(self):
        value = _clean_value("personal_assets", np.float64(1200.5))
        self.assertIsInstance(value, float)
        self.assertEqual(_clean_value("age", np.int64(19)), 19)

    def test_float_age_becomes_int(self):
        value = _clean_value("age", 19.0)
        self.assertEqual(value, 19)
        self.assertIsInstance(value, int)

    def test_boolean_strings(self):
        self.assertTrue(_clean_value("study_load_full_time", "Yes"))
        self.assertFalse(_clean_value("is_partnered", "false"))
        with self.assertRaises(ProfileValidationError):
            _clean_value("is_partnered", "maybe")


class TestStudentSupportBatchProcessor(unittest.TestCase):
    """Test batch evaluation with per-row error capture."""

    def setUp(self):
        """Set up test fixtures."""
        self.processor = StudentSupportBatchProcessor()
        self.df = pd.DataFrame([
            {"applicant_id": "A1", "age": 19, "study_load_full_time": True,
             "living_situation": "home", "parental_income_annual": None,
             "fortnightly_amount": None, "rent_type": None, "household_type": None},
            {"applicant_id": "A2", "age": -1, "study_load_full_time": True,
             "living_situation": "home", "parental_income_annual": None,
             "fortnightly_amount": None, "rent_type": None, "household_type": None},
            {"applicant_id": "A3", "age": 20, "study_load_full_time": True,
             "living_situation": "renting", "parental_income_annual": None,
             "fortnightly_amount": 400.0, "rent_type": "private", "household_type": "single"},
            {"applicant_id": "A4", "age": 21, "study_load_full_time": True,
             "living_situation": "renting", "parental_income_annual": None,
             "fortnightly_amount": 400.0, "rent_type": None, "household_type": "single"},
            {"applicant_id": "A5", "age": 19, "study_load_full_time": True,
             "living_situation": "home", "parental_income_annual": 150000.0,
             "fortnightly_amount": None, "rent_type": None, "household_type": None},
        ])

    def test_stats(self):
        result = self.processor.process_dataframe(self.df, id_column="applicant_id")
        stats = result.stats

        self.assertEqual(stats.total_rows, 5)
        self.assertEqual(stats.processed, 5)
        self.assertEqual(stats.successful, 3)
        self.assertEqual(stats.failed, 2)
        self.assertEqual(stats.eligible, 2)
        self.assertEqual(stats.ineligible, 1)
        self.assertEqual(stats.reduced_to_zero, 1)
        self.assertAlmostEqual(stats.average_fortnightly_payment, (482.40 + 677.20) / 2)
        self.assertAlmostEqual(stats.success_rate, 60.0)

    def test_errors_classified(self):
        result = self.processor.process_dataframe(self.df, id_column="applicant_id")

        self.assertEqual(result.error_summary, {"DATA_VALIDATION_ERROR": 1, "MISSING_DATA": 1})
        by_row = {e.row_ref: e for e in result.errors}
        self.assertEqual(by_row["A2"].error_type, "DATA_VALIDATION_ERROR")
        self.assertIn("age", by_row["A2"].error_message)
        self.assertEqual(by_row["A4"].error_type, "MISSING_DATA")
        self.assertIn("rent_type", by_row["A4"].error_message)

    def test_results_dataframe(self):
        result = self.processor.process_dataframe(self.df, id_column="applicant_id")
        output = result.to_dataframe().set_index("row_ref")

        self.assertEqual(len(output), 3)
        self.assertAlmostEqual(output.loc["A3", "rent_assistance_fortnightly"], 186.0)
        self.assertAlmostEqual(output.loc["A3", "total_fortnightly"], 863.2)
        self.assertTrue(math.isnan(output.loc["A1", "rent_assistance_fortnightly"]))
        self.assertFalse(output.loc["A5", "eligible"])
        self.assertIn("reduced to zero", output.loc["A5", "reasons"])

    def test_errors_dataframe(self):
        result = self.processor.process_dataframe(self.df, id_column="applicant_id")
        errors = result.errors_dataframe()

        self.assertEqual(list(errors.columns), ["row_ref", "error_type", "error_message", "timestamp"])
        self.assertEqual(len(errors), 2)

    def test_index_used_without_id_column(self):
        result = self.processor.process_dataframe(self.df.iloc[[0]])
        self.assertEqual(result.outcomes[0].row_ref, "0")

    def test_progress_callback(self):
        calls = []
        self.processor.process_dataframe(
            self.df, id_column="applicant_id",
            progress_callback=lambda current, total, message: calls.append((current, total)),
        )
        self.assertEqual(calls[0], (1, 5))
        self.assertEqual(calls[-1], (5, 5))

    def test_empty_dataframe(self):
        result = self.processor.process_dataframe(pd.DataFrame())

        self.assertEqual(result.stats.total_rows, 0)
        self.assertEqual(result.stats.average_fortnightly_payment, 0.0)
        self.assertTrue(result.to_dataframe().empty)


if __name__ == "__main__":
    unittest.main()

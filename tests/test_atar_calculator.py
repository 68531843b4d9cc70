"""
Tests for the ATAR calculator.
Covers scaled-mark interpolation, best-units aggregation and conversion.
"""

import unittest

from studentsupport_engine.exceptions import ProfileValidationError, ReferenceDataError
from studentsupport_engine.scaling.atar_calculator import (
    ConversionTable,
    ScalingTable,
    SubjectScoreEntry,
    calculate_atar,
    convert_to_final_score,
    get_scaled_mark,
    interpolate,
    scale_and_aggregate,
)


class TestScaledMark(unittest.TestCase):
    """Test interpolation over a subject's scaling rows."""

    def setUp(self):
        """Set up test fixtures."""
        self.table = ScalingTable.from_rows([
            (1, 40, 30),
            (1, 60, 40),
            (2, 0, 0),
            (2, 100, 100),
        ])

    def test_midpoint_interpolation(self):
        self.assertAlmostEqual(get_scaled_mark(1, 50, self.table), 35.0)

    def test_exact_table_points(self):
        self.assertEqual(get_scaled_mark(1, 40, self.table), 30.0)
        self.assertEqual(get_scaled_mark(1, 60, self.table), 40.0)

    def test_clamped_below_and_above(self):
        self.assertEqual(get_scaled_mark(1, 10, self.table), 30.0)
        self.assertEqual(get_scaled_mark(1, 99, self.table), 40.0)

    def test_missing_subject_scores_zero_with_warning(self):
        with self.assertLogs("studentsupport_engine.scaling.atar_calculator", level="WARNING") as logs:
            self.assertEqual(get_scaled_mark(99, 80, self.table), 0.0)
        self.assertIn("99", logs.output[0])

    def test_unsorted_rows_are_sorted(self):
        table = ScalingTable.from_rows([(1, 60, 40), (1, 40, 30)])
        self.assertEqual(table.rows_for(1), ((40.0, 30.0), (60.0, 40.0)))

    def test_duplicate_percentile_rejected(self):
        with self.assertRaises(ReferenceDataError):
            ScalingTable.from_rows([(1, 40, 30), (1, 40, 32)])

    def test_direct_construction_requires_increasing_rows(self):
        with self.assertRaises(ReferenceDataError):
            ScalingTable(rows={1: ((60, 40), (40, 30))})

    def test_direct_construction_rejects_nan(self):
        with self.assertRaises(ReferenceDataError):
            ScalingTable(rows={1: ((40, 30), (float("nan"), 35))})
        with self.assertRaises(ReferenceDataError):
            ConversionTable(points=((200, 50.0), (300, float("nan"))))

    def test_table_is_read_only(self):
        with self.assertRaises(TypeError):
            self.table.rows[3] = ((0.0, 0.0),)

    def test_empty_points_interpolate_to_zero(self):
        self.assertEqual(interpolate(50, ()), 0.0)


class TestAggregate(unittest.TestCase):
    """Test greedy best-units aggregation."""

    def setUp(self):
        """Set up test fixtures."""
        # Identity scaling so scaled mark == mark
        self.table = ScalingTable.from_rows([(1, 0, 0), (1, 100, 100)])

    def test_last_subject_counts_partial_units(self):
        entries = [
            SubjectScoreEntry(1, "C", 4, 70),
            SubjectScoreEntry(1, "A", 4, 90),
            SubjectScoreEntry(1, "B", 4, 80),
        ]
        result = scale_and_aggregate(entries, self.table)

        self.assertAlmostEqual(result.aggregate, 90 * 4 + 80 * 4 + 70 * 2)
        self.assertEqual([s.units_taken for s in result.by_subject], [2.0, 4.0, 4.0])
        self.assertEqual(result.units_counted, 10)

    def test_by_subject_keeps_input_order(self):
        entries = [SubjectScoreEntry(1, "Low", 2, 20), SubjectScoreEntry(1, "High", 2, 95)]
        result = scale_and_aggregate(entries, self.table)
        self.assertEqual([s.subject_name for s in result.by_subject], ["Low", "High"])

    def test_ties_keep_input_order(self):
        entries = [SubjectScoreEntry(1, "X", 6, 50), SubjectScoreEntry(1, "Y", 6, 50)]
        result = scale_and_aggregate(entries, self.table)

        self.assertEqual(result.by_subject[0].units_taken, 6.0)
        self.assertEqual(result.by_subject[1].units_taken, 4.0)
        self.assertAlmostEqual(result.aggregate, 500.0)

    def test_fewer_units_than_budget(self):
        entries = [SubjectScoreEntry(1, "A", 2, 50), SubjectScoreEntry(1, "B", 2, 60)]
        result = scale_and_aggregate(entries, self.table)

        self.assertAlmostEqual(result.aggregate, 220.0)
        self.assertEqual(result.units_counted, 4)

    def test_custom_unit_budget(self):
        entries = [SubjectScoreEntry(1, "A", 2, 50), SubjectScoreEntry(1, "B", 2, 60)]
        result = scale_and_aggregate(entries, self.table, unit_budget=3)
        self.assertAlmostEqual(result.aggregate, 60 * 2 + 50 * 1)

    def test_no_entries(self):
        result = scale_and_aggregate([], self.table)
        self.assertEqual(result.aggregate, 0.0)
        self.assertEqual(result.by_subject, ())

    def test_invalid_entry_rejected(self):
        with self.assertRaises(ProfileValidationError):
            SubjectScoreEntry(1, "A", -2, 50)
        with self.assertRaises(ProfileValidationError):
            SubjectScoreEntry(1, "A", 2, float("nan"))


class TestConversion(unittest.TestCase):
    """Test aggregate to ATAR conversion."""

    def setUp(self):
        """Set up test fixtures."""
        self.conversion = ConversionTable.from_rows([(300, 70.0), (200, 50.0)])

    def test_interpolated_and_rounded(self):
        # 250.33 -> 60.066
        self.assertEqual(convert_to_final_score(250.33, self.conversion), 60.1)

    def test_midpoint_rounds_half_up(self):
        conversion = ConversionTable.from_rows([(200, 85.0), (300, 85.5)])
        self.assertEqual(convert_to_final_score(250, conversion), 85.3)

    def test_clamped(self):
        self.assertEqual(convert_to_final_score(100, self.conversion), 50.0)
        self.assertEqual(convert_to_final_score(1000, self.conversion), 70.0)

    def test_empty_table(self):
        self.assertEqual(convert_to_final_score(300, ConversionTable(points=())), 0.0)

    def test_duplicate_aggregate_rejected(self):
        with self.assertRaises(ReferenceDataError):
            ConversionTable.from_rows([(200, 50.0), (200, 51.0)])


class TestCalculateAtar(unittest.TestCase):
    """Test the full calculation."""

    def test_full_calculation(self):
        scaling = ScalingTable.from_rows([(1, 0, 0), (1, 100, 50)])
        conversion = ConversionTable.from_rows([(0, 0.0), (500, 99.95)])
        entries = [SubjectScoreEntry(1, "Subject %d" % i, 2, 80) for i in range(5)]

        result = calculate_atar(entries, scaling, conversion)

        self.assertAlmostEqual(result.aggregate, 400.0)
        self.assertEqual(result.atar, round(400 / 500 * 99.95, 1))
        data = result.to_dict()
        self.assertEqual(len(data["by_subject"]), 5)
        self.assertEqual(data["by_subject"][0]["units_taken"], 2.0)


if __name__ == "__main__":
    unittest.main()

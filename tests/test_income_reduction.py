"""
Tests for the parental and personal income test reductions.
"""

import unittest

from studentsupport_engine.config.threshold_config import get_threshold_table
from studentsupport_engine.eligibility.income_reduction import (
    apply_income_bank,
    calculate_parental_income_reduction,
    calculate_personal_income_reduction,
)


class TestParentalIncomeReduction(unittest.TestCase):
    """Test the pooled parental income taper."""

    def setUp(self):
        """Set up test fixtures."""
        self.thresholds = get_threshold_table(2026)

    def test_within_free_area_no_reduction(self):
        self.assertEqual(calculate_parental_income_reduction(60000, 0, self.thresholds), 0.0)
        self.assertEqual(calculate_parental_income_reduction(66722, 0, self.thresholds), 0.0)

    def test_taper_over_free_area(self):
        """$1,000 over the free area at 20c per dollar."""
        reduction = calculate_parental_income_reduction(67722, 0, self.thresholds)
        self.assertAlmostEqual(reduction, 200.0)

    def test_pool_split_across_siblings(self):
        """The pool is split evenly between the applicant and each sibling."""
        alone = calculate_parental_income_reduction(67722, 0, self.thresholds)
        with_one = calculate_parental_income_reduction(67722, 1, self.thresholds)
        with_three = calculate_parental_income_reduction(67722, 3, self.thresholds)

        self.assertAlmostEqual(with_one, alone / 2)
        self.assertAlmostEqual(with_three, alone / 4)

    def test_monotonic_in_income(self):
        incomes = [0, 50000, 66722, 66723, 70000, 90000, 150000, 300000]
        reductions = [
            calculate_parental_income_reduction(i, 0, self.thresholds) for i in incomes
        ]
        for lower, higher in zip(reductions, reductions[1:]):
            self.assertLessEqual(lower, higher)

    def test_non_increasing_in_siblings(self):
        reductions = [
            calculate_parental_income_reduction(120000, s, self.thresholds) for s in range(6)
        ]
        for fewer, more in zip(reductions, reductions[1:]):
            self.assertGreaterEqual(fewer, more)


class TestPersonalIncomeReduction(unittest.TestCase):
    """Test the two-tier personal income taper."""

    def setUp(self):
        """Set up test fixtures."""
        self.thresholds = get_threshold_table(2026)

    def test_no_income_no_reduction(self):
        self.assertEqual(calculate_personal_income_reduction(0, self.thresholds), 0.0)

    def test_within_free_area_no_reduction(self):
        self.assertEqual(calculate_personal_income_reduction(539, self.thresholds), 0.0)
        self.assertEqual(calculate_personal_income_reduction(400, self.thresholds), 0.0)

    def test_tier1_reduction(self):
        """50c per dollar between $539 and $646."""
        self.assertAlmostEqual(calculate_personal_income_reduction(600, self.thresholds), 30.5)

    def test_reduction_at_tier1_ceiling(self):
        self.assertAlmostEqual(calculate_personal_income_reduction(646, self.thresholds), 53.5)

    def test_tier2_reduction(self):
        """$53.50 accrued over tier 1 plus 60c per dollar over $646."""
        self.assertAlmostEqual(calculate_personal_income_reduction(700, self.thresholds), 85.9)

    def test_continuous_at_tier_boundary(self):
        ceiling = self.thresholds.personal_income_tier1_ceiling
        epsilon = 1e-6
        below = calculate_personal_income_reduction(ceiling - epsilon, self.thresholds)
        at = calculate_personal_income_reduction(ceiling, self.thresholds)
        above = calculate_personal_income_reduction(ceiling + epsilon, self.thresholds)

        self.assertAlmostEqual(below, above, places=5)
        self.assertAlmostEqual(at, (ceiling - 539) * 0.50)

    def test_non_decreasing_in_income(self):
        previous = 0.0
        for income in range(0, 1500, 7):
            reduction = calculate_personal_income_reduction(income, self.thresholds)
            self.assertGreaterEqual(reduction, previous)
            previous = reduction

    def test_explicit_tier2_offset(self):
        """A table with a $53.50 tier-2 offset applies it on top of the tier-1 accrual."""
        thresholds = get_threshold_table(
            2026, overrides={"personal_income_tier2_flat_offset": 53.50}
        )
        reduction = calculate_personal_income_reduction(700, thresholds)

        # (646 - 539) * 0.50 + 53.50 + (700 - 646) * 0.60
        self.assertAlmostEqual(reduction, 139.4)

    def test_income_bank_credit_applied_first(self):
        reduction = calculate_personal_income_reduction(700, self.thresholds, income_bank_credit=100)
        self.assertAlmostEqual(reduction, 30.5)

    def test_income_bank_credit_capped(self):
        self.assertEqual(apply_income_bank(20000, 50000, self.thresholds), 20000 - 13500)

    def test_income_bank_credit_cannot_go_below_zero(self):
        self.assertEqual(apply_income_bank(300, 1000, self.thresholds), 0.0)
        self.assertEqual(
            calculate_personal_income_reduction(300, self.thresholds, income_bank_credit=1000), 0.0
        )


if __name__ == "__main__":
    unittest.main()

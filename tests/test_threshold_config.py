"""
Tests for the policy-year threshold tables.
"""

import unittest
from dataclasses import FrozenInstanceError

from studentsupport_engine.config.threshold_config import (
    RENT_ASSISTANCE_CONFIG,
    THRESHOLD_CONFIG,
    ThresholdTable,
    get_threshold_table,
)
from studentsupport_engine.exceptions import ThresholdConfigError


class TestThresholdTable(unittest.TestCase):
    """Test threshold table loading and validation."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = dict(THRESHOLD_CONFIG[2026])
        self.rent_config = RENT_ASSISTANCE_CONFIG[2026]

    def test_default_table_values(self):
        """The 2026 table carries the published rates."""
        table = get_threshold_table(2026)

        self.assertEqual(table.policy_year, 2026)
        self.assertEqual(table.age_min, 18)
        self.assertEqual(table.age_max, 24)
        self.assertEqual(table.independence_age, 22)
        self.assertEqual(table.parental_income_free_area, 66722)
        self.assertEqual(table.personal_income_free_area, 539)
        self.assertEqual(table.personal_income_tier1_ceiling, 646)
        self.assertEqual(table.max_rate_single_at_home, 482.40)
        self.assertEqual(table.max_rate_single_away, 677.20)
        self.assertEqual(table.rent_assistance_for("single").rent_threshold, 152)
        self.assertEqual(table.rent_assistance_for("couple").max_rate, 203)

    def test_default_table_is_continuous_at_tier_boundary(self):
        """The bundled table stores no extra tier-2 offset."""
        self.assertEqual(get_threshold_table(2026).personal_income_tier2_flat_offset, 0.0)

    def test_assets_limit_by_home_ownership(self):
        table = get_threshold_table(2026)
        self.assertEqual(table.assets_limit(True), 321500)
        self.assertEqual(table.assets_limit(False), 579500)

    def test_unknown_policy_year_raises(self):
        with self.assertRaises(ThresholdConfigError):
            get_threshold_table(1999)

    def test_missing_constant_raises(self):
        """A missing rate must fail loudly, never default to zero."""
        del self.config["parental_income_taper_rate"]
        with self.assertRaises(ThresholdConfigError) as ctx:
            ThresholdTable.from_config(self.config, self.rent_config)
        self.assertIn("parental_income_taper_rate", str(ctx.exception))

    def test_none_constant_raises(self):
        self.config["max_rate_single_away"] = None
        with self.assertRaises(ThresholdConfigError):
            ThresholdTable.from_config(self.config, self.rent_config)

    def test_negative_rate_raises(self):
        self.config["personal_income_tier1_rate"] = -0.5
        with self.assertRaises(ThresholdConfigError):
            ThresholdTable.from_config(self.config, self.rent_config)

    def test_tier2_rate_below_tier1_raises(self):
        self.config["personal_income_tier2_rate"] = 0.40
        with self.assertRaises(ThresholdConfigError):
            ThresholdTable.from_config(self.config, self.rent_config)

    def test_missing_household_rates_raise(self):
        rent_config = {k: v for k, v in self.rent_config.items() if k != "couple"}
        with self.assertRaises(ThresholdConfigError):
            ThresholdTable.from_config(self.config, rent_config)

    def test_tier2_offset_logs_warning(self):
        with self.assertLogs("studentsupport_engine.config.threshold_config", level="WARNING"):
            get_threshold_table(2026, overrides={"personal_income_tier2_flat_offset": 53.50})

    def test_table_is_read_only(self):
        table = get_threshold_table(2026)
        with self.assertRaises(FrozenInstanceError):
            table.age_min = 16
        with self.assertRaises(TypeError):
            table.rent_assistance["single"] = None

    def test_overrides_do_not_mutate_config(self):
        get_threshold_table(2026, overrides={"age_max": 30})
        self.assertEqual(THRESHOLD_CONFIG[2026]["age_max"], 24)

    def test_unknown_override_rejected(self):
        with self.assertRaises(ThresholdConfigError) as ctx:
            get_threshold_table(2026, overrides={"age_maxx": 30})
        self.assertIn("age_maxx", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()

"""
Tests for the nuclide reference data and its formatting helpers.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from constants import HALF_LIFE_NUMBER_LINE_END_EXPONENT, YEAR
from nuclide_data import (
    NuclideDataTable,
    element_name,
    element_symbol,
    format_time_value_with_unit,
    nearest_timescale_point,
)
from particles import DecayType, decay_product


class TestNuclideDataTable(unittest.TestCase):
    def setUp(self):
        self.table = NuclideDataTable()

    def test_existence(self):
        self.assertTrue(self.table.exists(1, 0))
        self.assertTrue(self.table.exists(0, 1))
        self.assertFalse(self.table.exists(2, 0))     # He-2
        self.assertFalse(self.table.exists(0, 0))

    def test_stability(self):
        self.assertTrue(self.table.is_stable(2, 2))
        self.assertFalse(self.table.is_stable(1, 2))
        self.assertFalse(self.table.is_stable(2, 0))

    def test_half_life(self):
        self.assertEqual(self.table.half_life(2, 2), float('inf'))
        self.assertAlmostEqual(self.table.half_life(1, 2), 12.32 * YEAR)
        self.assertIsNone(self.table.half_life(2, 0))

    def test_decay_options(self):
        self.assertEqual(self.table.decay_options(1, 2), [(DecayType.BETA_MINUS_DECAY, 100.0)])
        self.assertEqual(self.table.decay_options(2, 2), [])
        self.assertEqual(self.table.decay_options(2, 0), [])

    def test_unknown_percent_goes_last(self):
        table = NuclideDataTable({
            (5, 3): (0.77, [(DecayType.ALPHA_DECAY, None), (DecayType.BETA_PLUS_DECAY, 100.0)]),
        })
        decays = table.decay_options(5, 3)
        self.assertEqual(decays[0], (DecayType.BETA_PLUS_DECAY, 100.0))
        self.assertEqual(decays[1], (DecayType.ALPHA_DECAY, None))

    def test_neighbours(self):
        self.assertTrue(self.table.does_next_isotope_exist(1, 1))
        self.assertFalse(self.table.does_next_isotone_exist(1, 0))   # He-2
        self.assertTrue(self.table.does_next_nuclide_exist(1, 1))
        self.assertFalse(self.table.does_previous_isotope_exist(1, 0))
        self.assertTrue(self.table.does_previous_isotone_exist(2, 1))
        self.assertTrue(self.table.does_previous_nuclide_exist(2, 1))
        self.assertFalse(self.table.does_previous_nuclide_exist(1, 0))

    def test_half_life_display_value(self):
        self.assertEqual(self.table.half_life_display_value(2, 2), 10 ** HALF_LIFE_NUMBER_LINE_END_EXPONENT)
        self.assertEqual(self.table.half_life_display_value(2, 0), 0)
        self.assertEqual(self.table.half_life_display_value(1, 6), -1)
        self.assertAlmostEqual(self.table.half_life_display_value(0, 1), 613.9)

    def test_every_listed_decay_product_is_in_range(self):
        for (protons, neutrons), record in self.table._records.items():
            for decay_type, _ in record.decays:
                z, n = decay_product(protons, neutrons, decay_type)
                self.assertGreaterEqual(z, 0, f"{decay_type} of ({protons}, {neutrons})")
                self.assertGreaterEqual(n, 0, f"{decay_type} of ({protons}, {neutrons})")


class TestNames(unittest.TestCase):
    def test_element_names(self):
        self.assertEqual(element_name(1), "Hydrogen")
        self.assertEqual(element_name(10), "Neon")
        self.assertEqual(element_symbol(2), "He")

    def test_out_of_range(self):
        self.assertEqual(element_symbol(500), "E500")
        self.assertEqual(element_name(500), "Element 500")


class TestTimeFormatting(unittest.TestCase):
    def test_units(self):
        self.assertEqual(format_time_value_with_unit(None), "unknown")
        self.assertEqual(format_time_value_with_unit(float('inf')), "stable")
        self.assertEqual(format_time_value_with_unit(30.0), "30.00 s")
        self.assertEqual(format_time_value_with_unit(120.0), "2.00 min")
        self.assertEqual(format_time_value_with_unit(2 * YEAR), "2.00 years")
        self.assertEqual(format_time_value_with_unit(5e-3), "5.00 ms")

    def test_nearest_timescale_point(self):
        label, _ = nearest_timescale_point(70.0)
        self.assertEqual(label, "one minute")
        label, _ = nearest_timescale_point(9.1e-23)
        self.assertEqual(label, "time for light to cross a nucleus")

    def test_no_timescale_point(self):
        self.assertIsNone(nearest_timescale_point(None))
        self.assertIsNone(nearest_timescale_point(float('inf')))


if __name__ == '__main__':
    unittest.main()

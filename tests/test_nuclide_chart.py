"""
Tests for nuclide chart cells and decay equations.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nuclide_chart import (
    DOES_NOT_EXIST_COLOR,
    STABLE_COLOR,
    UNKNOWN_COLOR,
    CellClassification,
    NuclideChart,
    NuclideChartCellModel,
    decay_equation,
    most_likely_decay,
)
from nuclide_data import STABLE, NuclideDataTable
from particles import DECAY_COLORS, DecayType

ALPHA = DecayType.ALPHA_DECAY
BETA_MINUS = DecayType.BETA_MINUS_DECAY
BETA_PLUS = DecayType.BETA_PLUS_DECAY
NEUTRON = DecayType.NEUTRON_EMISSION

TABLE = NuclideDataTable({
    (1, 0): (STABLE, []),
    (1, 2): (3.9e8, [(BETA_MINUS, 100.0)]),
    (3, 9): (None, [(NEUTRON, None)]),
    (5, 3): (0.77, [(BETA_PLUS, 100.0), (ALPHA, None)]),
    (6, 12): (0.09, []),
})


class TestMostLikelyDecay(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(most_likely_decay([]), (None, None))

    def test_highest_percent_wins(self):
        decays = [(BETA_PLUS, 20.0), (ALPHA, 80.0)]
        self.assertEqual(most_likely_decay(decays), (ALPHA, 80.0))

    def test_known_percent_beats_unknown(self):
        self.assertEqual(most_likely_decay([(ALPHA, None), (BETA_PLUS, 1.0)]), (BETA_PLUS, 1.0))

    def test_only_unknown(self):
        self.assertEqual(most_likely_decay([(NEUTRON, None)]), (NEUTRON, None))


class TestCellModel(unittest.TestCase):
    def test_stable(self):
        cell = NuclideChartCellModel(1, 0, TABLE)
        self.assertTrue(cell.exists)
        self.assertTrue(cell.is_stable)
        self.assertIsNone(cell.decay_type)
        self.assertEqual(cell.classification, CellClassification.STABLE)
        self.assertEqual(cell.color, STABLE_COLOR)

    def test_known_decay(self):
        cell = NuclideChartCellModel(1, 2, TABLE)
        self.assertEqual(cell.mass_number, 3)
        self.assertEqual(cell.decay_type, BETA_MINUS)
        self.assertEqual(cell.decay_likelihood_percent, 100.0)
        self.assertEqual(cell.classification, CellClassification.UNSTABLE_KNOWN_DECAY)
        self.assertEqual(cell.color, DECAY_COLORS[BETA_MINUS])

    def test_decay_with_unknown_percent_is_still_known(self):
        cell = NuclideChartCellModel(3, 9, TABLE)
        self.assertEqual(cell.decay_type, NEUTRON)
        self.assertIsNone(cell.decay_likelihood_percent)
        self.assertEqual(cell.classification, CellClassification.UNSTABLE_KNOWN_DECAY)

    def test_unknown_decay(self):
        cell = NuclideChartCellModel(6, 12, TABLE)
        self.assertIsNone(cell.decay_type)
        self.assertEqual(cell.classification, CellClassification.UNSTABLE_UNKNOWN_DECAY)
        self.assertEqual(cell.color, UNKNOWN_COLOR)

    def test_does_not_exist(self):
        cell = NuclideChartCellModel(2, 0, TABLE)
        self.assertFalse(cell.exists)
        self.assertEqual(cell.classification, CellClassification.DOES_NOT_EXIST)
        self.assertEqual(cell.color, DOES_NOT_EXIST_COLOR)

    def test_immutable(self):
        cell = NuclideChartCellModel(1, 0, TABLE)
        with self.assertRaises(AttributeError):
            cell.proton_number = 5
        with self.assertRaises(AttributeError):
            cell.anything = 1


class TestChart(unittest.TestCase):
    def setUp(self):
        self.chart = NuclideChart(TABLE)

    def test_cells_are_cached(self):
        self.assertIs(self.chart.cell(1, 2), self.chart.cell(1, 2))
        self.assertEqual(len(self.chart), 1)

    def test_cells_around_clips_at_zero(self):
        rows = self.chart.cells_around(0, 1, radius=2)
        self.assertEqual(len(rows), 3)           # Z = 0, 1, 2
        self.assertEqual(len(rows[0]), 4)        # N = 0..3
        self.assertEqual((rows[1][2].proton_number, rows[1][2].neutron_number), (1, 2))

    def test_clear(self):
        self.chart.cells_around(3, 3)
        self.chart.clear()
        self.assertEqual(len(self.chart), 0)


class TestDecayEquation(unittest.TestCase):
    def test_beta_minus(self):
        equation = decay_equation(NuclideChartCellModel(1, 2, TABLE))
        self.assertEqual(tuple(equation), (1, 3, BETA_MINUS, 2, 3))

    def test_most_likely_branch_is_used(self):
        equation = decay_equation(NuclideChartCellModel(5, 3, TABLE))
        self.assertEqual(tuple(equation), (5, 8, BETA_PLUS, 4, 8))

    def test_no_decay_repeats_numbers(self):
        for protons, neutrons in ((1, 0), (6, 12), (2, 0)):
            cell = NuclideChartCellModel(protons, neutrons, TABLE)
            equation = decay_equation(cell)
            self.assertIsNone(equation.decay_type)
            self.assertEqual(equation.final_protons, equation.initial_protons)
            self.assertEqual(equation.final_mass, equation.initial_mass)


if __name__ == '__main__':
    unittest.main()

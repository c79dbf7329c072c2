"""
Tests for the shell placement engine.
"""

import unittest
import sys
import os

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from constants import PARTICLE_DIAMETER, TOTAL_SHELL_CAPACITY, X_DISTANCE_BETWEEN_ENERGY_LEVELS
from errors import NoCapacityError
from particles import Nucleon, NucleonState, ParticleType
from shells import ShellPlacementEngine, fill_level, rank_to_slot

PROTON = ParticleType.PROTON
NEUTRON = ParticleType.NEUTRON


def make_nucleons(count, species=PROTON, state=NucleonState.SETTLED):
    nucleons = [Nucleon(0, 0, species) for _ in range(count)]
    for nucleon in nucleons:
        nucleon.state = state
    return nucleons


class TestLevelArithmetic(unittest.TestCase):
    def test_fill_level(self):
        self.assertEqual(fill_level(0), 0)
        self.assertEqual(fill_level(2), 0)
        self.assertEqual(fill_level(3), 1)
        self.assertEqual(fill_level(8), 1)
        self.assertEqual(fill_level(9), 2)
        self.assertEqual(fill_level(14), 2)

    def test_rank_to_slot(self):
        self.assertEqual(rank_to_slot(0), (0, 0))
        self.assertEqual(rank_to_slot(1), (0, 1))
        self.assertEqual(rank_to_slot(2), (1, 0))
        self.assertEqual(rank_to_slot(7), (1, 5))
        self.assertEqual(rank_to_slot(8), (2, 0))
        self.assertEqual(rank_to_slot(13), (2, 5))
        with self.assertRaises(NoCapacityError):
            rank_to_slot(14)


class TestAssignDestination(unittest.TestCase):
    def setUp(self):
        self.shells = ShellPlacementEngine()

    def test_fills_bottom_level_first_left_to_right(self):
        nucleons = make_nucleons(3, state=NucleonState.INCOMING)
        for nucleon in nucleons:
            destination = self.shells.assign_destination(PROTON, nucleon)
            self.assertEqual(destination, self.shells.slot_position(PROTON, nucleon.level, nucleon.slot))

        self.assertEqual([(n.level, n.slot) for n in nucleons], [(0, 0), (0, 1), (1, 0)])

    def test_reservation_prevents_double_assignment(self):
        first, second = make_nucleons(2, state=NucleonState.INCOMING)
        self.shells.assign_destination(PROTON, first)
        self.shells.assign_destination(PROTON, second)
        self.assertNotEqual((first.level, first.slot), (second.level, second.slot))
        self.assertEqual(len(self.shells.occupied_slots(PROTON)), 2)

    def test_no_capacity_beyond_fourteen(self):
        for nucleon in make_nucleons(TOTAL_SHELL_CAPACITY):
            self.shells.assign_destination(PROTON, nucleon)
        with self.assertRaises(NoCapacityError):
            self.shells.assign_destination(PROTON, Nucleon(0, 0, PROTON))

    def test_species_have_separate_slots(self):
        proton, = make_nucleons(1, PROTON)
        neutron, = make_nucleons(1, NEUTRON)
        self.shells.assign_destination(PROTON, proton)
        self.shells.assign_destination(NEUTRON, neutron)
        self.assertEqual((proton.level, proton.slot), (0, 0))
        self.assertEqual((neutron.level, neutron.slot), (0, 0))
        self.assertAlmostEqual(neutron.destination[0] - proton.destination[0], X_DISTANCE_BETWEEN_ENERGY_LEVELS)
        self.assertEqual(neutron.destination[1], proton.destination[1])

    def test_higher_levels_are_higher_on_screen(self):
        self.assertLess(self.shells.slot_position(PROTON, 1, 0)[1], self.shells.slot_position(PROTON, 0, 0)[1])
        self.assertLess(self.shells.slot_position(PROTON, 2, 0)[1], self.shells.slot_position(PROTON, 1, 0)[1])


class TestReconfigure(unittest.TestCase):
    def setUp(self):
        self.shells = ShellPlacementEngine()

    def test_places_by_rank(self):
        nucleons = make_nucleons(9)
        self.shells.reconfigure(PROTON, nucleons)
        self.assertEqual([(n.level, n.slot) for n in nucleons[:3]], [(0, 0), (0, 1), (1, 0)])
        self.assertEqual((nucleons[8].level, nucleons[8].slot), (2, 0))

    def test_top_level_is_not_compacted(self):
        nucleons = make_nucleons(2)
        self.shells.reconfigure(PROTON, nucleons)
        for nucleon in nucleons:
            self.assertTrue(nucleon.input_enabled)
            self.assertEqual(nucleon.destination, self.shells.slot_position(PROTON, nucleon.level, nucleon.slot))

    def test_lower_level_is_compacted(self):
        nucleons = make_nucleons(3)
        self.shells.reconfigure(PROTON, nucleons)
        bound = nucleons[:2]
        self.assertEqual([n.input_enabled for n in nucleons], [False, False, True])

        # Gap closed: neighbours touch
        self.assertAlmostEqual(bound[1].destination[0] - bound[0].destination[0], PARTICLE_DIAMETER)
        # Still centred where the level's slots are centred
        slot_xs = [self.shells.slot_position(PROTON, 0, slot)[0] for slot in range(2)]
        self.assertAlmostEqual(np.mean([n.destination[0] for n in bound]), np.mean(slot_xs))
        # Occupancy is unchanged by compaction
        self.assertEqual([(n.level, n.slot) for n in bound], [(0, 0), (0, 1)])

    def test_two_levels_compacted_when_third_is_reached(self):
        nucleons = make_nucleons(9)
        self.shells.reconfigure(PROTON, nucleons)
        self.assertFalse(any(n.input_enabled for n in nucleons[:8]))
        self.assertTrue(nucleons[8].input_enabled)

    def test_incoming_reservations_follow_settled(self):
        settled_first, incoming = make_nucleons(2)
        incoming.state = NucleonState.INCOMING
        self.shells.assign_destination(PROTON, settled_first)
        self.shells.assign_destination(PROTON, incoming)

        settled_second, = make_nucleons(1)
        self.shells.reconfigure(PROTON, [settled_first, settled_second])

        self.assertEqual((settled_first.level, settled_first.slot), (0, 0))
        self.assertEqual((settled_second.level, settled_second.slot), (0, 1))
        self.assertEqual((incoming.level, incoming.slot), (1, 0))
        self.assertEqual(incoming.destination, self.shells.slot_position(PROTON, 1, 0))

    def test_overfull_reconfigure_raises(self):
        for nucleon in make_nucleons(TOTAL_SHELL_CAPACITY, state=NucleonState.INCOMING):
            self.shells.assign_destination(PROTON, nucleon)
        with self.assertRaises(NoCapacityError):
            self.shells.reconfigure(PROTON, make_nucleons(1))


class TestRightmostAndVacate(unittest.TestCase):
    def setUp(self):
        self.shells = ShellPlacementEngine()

    def test_rightmost_is_last_placed(self):
        nucleons = make_nucleons(4)
        self.shells.reconfigure(PROTON, nucleons)
        self.assertIs(self.shells.get_rightmost_occupied(PROTON), nucleons[-1])

    def test_rightmost_with_state_filter(self):
        nucleons = make_nucleons(3)
        self.shells.reconfigure(PROTON, nucleons)
        incoming = Nucleon(0, 0, PROTON)
        incoming.state = NucleonState.INCOMING
        self.shells.assign_destination(PROTON, incoming)

        self.assertIs(self.shells.get_rightmost_occupied(PROTON), incoming)
        self.assertIs(self.shells.get_rightmost_occupied(PROTON, NucleonState.SETTLED), nucleons[-1])

    def test_rightmost_of_empty_species(self):
        self.assertIsNone(self.shells.get_rightmost_occupied(NEUTRON))

    def test_vacate_is_idempotent(self):
        nucleon, = make_nucleons(1)
        self.shells.assign_destination(PROTON, nucleon)
        self.shells.vacate(PROTON, nucleon)
        self.shells.vacate(PROTON, nucleon)
        self.assertEqual(self.shells.occupied_slots(PROTON), {})
        self.assertIsNone(nucleon.level)
        self.assertIsNone(nucleon.slot)

    def test_clear(self):
        self.shells.reconfigure(PROTON, make_nucleons(3))
        self.shells.reconfigure(NEUTRON, make_nucleons(2, NEUTRON))
        self.shells.clear()
        self.assertEqual(self.shells.occupied_slots(PROTON), {})
        self.assertEqual(self.shells.occupied_slots(NEUTRON), {})


if __name__ == '__main__':
    unittest.main()

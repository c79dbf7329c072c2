"""
Tests for particle types, decay properties and the alpha particle.
"""

import unittest
import sys
import os

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from particles import (
    AlphaParticle,
    DecayType,
    Nucleon,
    ParticleType,
    decay_product,
    decay_symbol,
    other_species,
)


class TestDecayTables(unittest.TestCase):
    def test_products(self):
        self.assertEqual(decay_product(4, 4, DecayType.ALPHA_DECAY), (2, 2))
        self.assertEqual(decay_product(1, 2, DecayType.BETA_MINUS_DECAY), (2, 1))
        self.assertEqual(decay_product(4, 3, DecayType.BETA_PLUS_DECAY), (3, 4))
        self.assertEqual(decay_product(3, 1, DecayType.PROTON_EMISSION), (2, 1))
        self.assertEqual(decay_product(1, 3, DecayType.NEUTRON_EMISSION), (1, 2))

    def test_symbols(self):
        self.assertEqual(decay_symbol(DecayType.ALPHA_DECAY), "α")
        self.assertEqual(decay_symbol(DecayType.BETA_MINUS_DECAY), "β-")

    def test_other_species(self):
        self.assertEqual(other_species(ParticleType.PROTON), ParticleType.NEUTRON)
        self.assertEqual(other_species(ParticleType.NEUTRON), ParticleType.PROTON)


class TestParticles(unittest.TestCase):
    def test_nucleon_must_be_proton_or_neutron(self):
        with self.assertRaises(ValueError):
            Nucleon(0, 0, ParticleType.ELECTRON)

    def test_ids_are_unique(self):
        a, b = Nucleon(0, 0, ParticleType.PROTON), Nucleon(0, 0, ParticleType.PROTON)
        self.assertNotEqual(a.id, b.id)

    def test_alpha_carries_constituents(self):
        protons = [Nucleon(0, 0, ParticleType.PROTON), Nucleon(20, 0, ParticleType.PROTON)]
        neutrons = [Nucleon(0, 20, ParticleType.NEUTRON), Nucleon(20, 20, ParticleType.NEUTRON)]
        alpha = AlphaParticle(protons, neutrons)
        self.assertEqual((alpha.x, alpha.y), (10.0, 10.0))

        alpha.set_position(110, 10)
        for constituent in protons + neutrons:
            self.assertLess(np.hypot(constituent.x - 110, constituent.y - 10), alpha.radius)
        self.assertEqual(alpha.protons, protons)
        self.assertEqual(alpha.neutrons, neutrons)

        self.assertEqual(len(alpha.decompose()), 4)
        self.assertEqual(alpha.constituents, [])

    def test_alpha_needs_two_of_each(self):
        protons = [Nucleon(0, 0, ParticleType.PROTON)]
        neutrons = [Nucleon(0, 0, ParticleType.NEUTRON), Nucleon(0, 0, ParticleType.NEUTRON)]
        with self.assertRaises(ValueError):
            AlphaParticle(protons, neutrons)


if __name__ == '__main__':
    unittest.main()

"""
Tests for the step-driven particle animator.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from animation import ParticleAnimator
from constants import PARTICLE_ANIMATION_SPEED
from particles import Nucleon, ParticleType


class TestParticleAnimator(unittest.TestCase):
    def setUp(self):
        self.animator = ParticleAnimator()
        self.nucleon = Nucleon(0, 0, ParticleType.PROTON)

    def test_moves_at_particle_speed(self):
        self.animator.schedule_motion(self.nucleon, (PARTICLE_ANIMATION_SPEED * 2, 0))
        self.animator.step(0.5)
        self.assertAlmostEqual(self.nucleon.x, PARTICLE_ANIMATION_SPEED * 0.5)
        self.assertAlmostEqual(self.nucleon.y, 0.0)
        self.assertTrue(self.animator.is_animating(self.nucleon))

    def test_snaps_to_destination_and_calls_back(self):
        arrived = []
        self.animator.schedule_motion(self.nucleon, (30, 40), lambda: arrived.append(self.nucleon))
        finished = self.animator.step(1.0)

        self.assertEqual(finished, 1)
        self.assertEqual((self.nucleon.x, self.nucleon.y), (30.0, 40.0))
        self.assertEqual(arrived, [self.nucleon])
        self.assertFalse(self.animator.is_animating(self.nucleon))

    def test_follows_changed_destination(self):
        self.animator.schedule_motion(self.nucleon, (1000, 0))
        self.nucleon.destination = (0, 1000)
        self.animator.step(0.1)
        self.assertAlmostEqual(self.nucleon.x, 0.0)
        self.assertGreater(self.nucleon.y, 0.0)

    def test_finished_motion_is_logged(self):
        self.animator.schedule_motion(self.nucleon, (10, 0))
        with self.assertLogs("NuclearSim", level="DEBUG") as logs:
            self.animator.step(1.0)
        self.assertIn("finished at (10.0, 0.0)", logs.output[0])

    def test_cancel_skips_callback(self):
        arrived = []
        self.animator.schedule_motion(self.nucleon, (10, 0), lambda: arrived.append(True))
        self.assertTrue(self.animator.cancel(self.nucleon))
        self.assertFalse(self.animator.cancel(self.nucleon))
        self.animator.step(1.0)
        self.assertEqual(arrived, [])

    def test_rescheduling_replaces_callback(self):
        calls = []
        self.animator.schedule_motion(self.nucleon, (10, 0), lambda: calls.append("first"))
        self.animator.schedule_motion(self.nucleon, (20, 0), lambda: calls.append("second"))
        self.animator.step(1.0)
        self.assertEqual(calls, ["second"])

    def test_callback_may_reschedule_another_finished_motion(self):
        other = Nucleon(0, 0, ParticleType.NEUTRON)
        calls = []

        def redirect_other():
            calls.append("first")
            self.animator.schedule_motion(other, (500, 0), lambda: calls.append("redirected"))

        self.animator.schedule_motion(self.nucleon, (1, 0), redirect_other)
        self.animator.schedule_motion(other, (1, 0), lambda: calls.append("stale"))
        self.animator.step(1.0)

        self.assertEqual(calls, ["first"])
        self.assertTrue(self.animator.is_animating(other))

    def test_speed_scale(self):
        animator = ParticleAnimator(speed_scale=2.0)
        animator.schedule_motion(self.nucleon, (PARTICLE_ANIMATION_SPEED * 4, 0))
        animator.step(0.5)
        self.assertAlmostEqual(self.nucleon.x, PARTICLE_ANIMATION_SPEED)

    def test_cancel_all(self):
        self.animator.schedule_motion(self.nucleon, (10, 0))
        self.animator.cancel_all()
        self.assertEqual(self.animator.animated_particles(), [])


if __name__ == '__main__':
    unittest.main()

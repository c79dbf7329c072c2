"""
Step-driven motion of particles toward their destinations.

The core never interpolates positions itself: it sets destinations and
registers completion callbacks here. A motion always heads for the
particle's *current* ``destination``, so a reconfigured shell redirects
particles that are still in flight.
"""
import itertools
import logging

import numpy as np

logger = logging.getLogger("NuclearSim")


class ParticleAnimator:
    def __init__(self, speed_scale=1.0):
        self.speed_scale = speed_scale
        self._motions = {}  # particle id -> (token, particle, on_complete)
        self._tokens = itertools.count()

    def schedule_motion(self, particle, destination, on_complete=None):
        """Move ``particle`` to ``destination``; replaces any motion it already had."""
        particle.destination = (float(destination[0]), float(destination[1]))
        self._motions[particle.id] = (next(self._tokens), particle, on_complete)

    def cancel(self, particle):
        """Stop a motion without running its callback. Returns False if none was running."""
        return self._motions.pop(particle.id, None) is not None

    def cancel_all(self):
        self._motions.clear()

    def is_animating(self, particle):
        return particle.id in self._motions

    def animated_particles(self):
        return [particle for _, particle, _ in self._motions.values()]

    def step(self, dt):
        """Advance every motion by ``dt`` seconds and fire callbacks of finished ones."""
        finished = []
        for particle_id, (token, particle, on_complete) in list(self._motions.items()):
            position = particle.position
            target = np.array(particle.destination, dtype=float)
            delta = target - position
            distance = float(np.linalg.norm(delta))
            travel = particle.speed * self.speed_scale * dt

            if travel >= distance:
                particle.set_position(target[0], target[1])
                finished.append((particle_id, token, on_complete))
            else:
                new_position = position + delta / distance * travel
                particle.set_position(new_position[0], new_position[1])

        for particle_id, token, on_complete in finished:
            # An earlier callback may have cancelled or replaced this motion
            current = self._motions.get(particle_id)
            if current is None or current[0] != token:
                continue
            del self._motions[particle_id]
            particle = current[1]
            logger.debug(f"Motion of {particle!r} finished at ({particle.x:.1f}, {particle.y:.1f})")
            if on_complete is not None:
                on_complete()
        return len(finished)

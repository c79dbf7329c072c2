from enum import Enum
from typing import NamedTuple
import itertools

import numpy as np

from constants import EMITTED_PARTICLE_SPEED, PARTICLE_ANIMATION_SPEED, PARTICLE_RADIUS


class ParticleType(Enum):
    PROTON = 0
    NEUTRON = 1
    ELECTRON = 2
    POSITRON = 3
    ALPHA = 4


# The two nucleon species, in the order they are reported everywhere
NUCLEON_TYPES = (ParticleType.PROTON, ParticleType.NEUTRON)


class NucleonState(Enum):
    SETTLED = 0
    INCOMING = 1
    OUTGOING = 2
    USER_HELD = 3


class DecayType(Enum):
    ALPHA_DECAY = 0
    BETA_MINUS_DECAY = 1
    BETA_PLUS_DECAY = 2
    PROTON_EMISSION = 3
    NEUTRON_EMISSION = 4


class DecayProperties(NamedTuple):
    mass_number: int    # nucleons the decay takes away
    proton_number: int  # charge the decay takes away
    symbol: str
    label: str


DECAY_PROPERTIES = {
    DecayType.ALPHA_DECAY: DecayProperties(4, 2, "α", "Alpha Decay"),
    DecayType.BETA_MINUS_DECAY: DecayProperties(0, -1, "β-", "Beta Minus Decay"),
    DecayType.BETA_PLUS_DECAY: DecayProperties(0, 1, "β+", "Beta Plus Decay"),
    DecayType.PROTON_EMISSION: DecayProperties(1, 1, "p", "Proton Emission"),
    DecayType.NEUTRON_EMISSION: DecayProperties(1, 0, "n", "Neutron Emission"),
}

PARTICLE_COLORS = {
    ParticleType.PROTON: (255, 100, 100),
    ParticleType.NEUTRON: (150, 150, 150),
    ParticleType.ELECTRON: (0, 255, 255),
    ParticleType.POSITRON: (255, 0, 255),
    ParticleType.ALPHA: (255, 200, 0),
}

DECAY_COLORS = {
    DecayType.ALPHA_DECAY: (255, 200, 0),
    DecayType.BETA_MINUS_DECAY: (0, 255, 255),
    DecayType.BETA_PLUS_DECAY: (255, 0, 255),
    DecayType.PROTON_EMISSION: (255, 100, 100),
    DecayType.NEUTRON_EMISSION: (100, 100, 255),
}


def decay_symbol(decay_type):
    """Get a symbol for the decay type"""
    return DECAY_PROPERTIES[decay_type].symbol


def decay_product(protons, neutrons, decay_type):
    """Return the (Z, N) a nuclide decays into."""
    props = DECAY_PROPERTIES[decay_type]
    new_protons = protons - props.proton_number
    new_mass = protons + neutrons - props.mass_number
    return new_protons, new_mass - new_protons


def other_species(species):
    return ParticleType.NEUTRON if species == ParticleType.PROTON else ParticleType.PROTON


class Particle:
    """Anything the view draws: nucleons, emitted leptons and alpha particles.

    ``destination`` is read by the animation layer every step, so changing it
    mid-flight redirects the particle without restarting its motion.
    """

    _ids = itertools.count(1)

    def __init__(self, x, y, particle_type):
        self.id = next(Particle._ids)
        self.x = float(x)
        self.y = float(y)
        self.type = particle_type
        self.destination = (self.x, self.y)
        self.radius = {
            ParticleType.ALPHA: PARTICLE_RADIUS * 2,
            ParticleType.ELECTRON: PARTICLE_RADIUS * 0.5,
            ParticleType.POSITRON: PARTICLE_RADIUS * 0.5,
        }.get(particle_type, PARTICLE_RADIUS)
        self.speed = {
            ParticleType.ALPHA: EMITTED_PARTICLE_SPEED["alpha"],
            ParticleType.ELECTRON: EMITTED_PARTICLE_SPEED["electron"],
            ParticleType.POSITRON: EMITTED_PARTICLE_SPEED["positron"],
        }.get(particle_type, PARTICLE_ANIMATION_SPEED)

    @property
    def position(self):
        return np.array([self.x, self.y])

    def set_position(self, x, y):
        self.x = float(x)
        self.y = float(y)

    def set_position_and_destination(self, x, y):
        self.set_position(x, y)
        self.destination = (self.x, self.y)

    def distance_to(self, point):
        return float(np.hypot(self.x - point[0], self.y - point[1]))

    def at_destination(self):
        return self.distance_to(self.destination) < 1e-6

    def get_color(self):
        return PARTICLE_COLORS.get(self.type, (255, 255, 255))

    def __repr__(self):
        return f"{self.type.name.title()}(id={self.id}, pos=({self.x:.1f}, {self.y:.1f}))"


class Nucleon(Particle):
    """A proton or neutron, tracked individually by the ledger.

    Attributes:
        state (NucleonState): logical state, ``None`` before the ledger takes it
        level, slot (int): shell slot while the nucleon holds one
        input_enabled (bool): False while its level is compacted
    """

    def __init__(self, x, y, particle_type):
        if particle_type not in NUCLEON_TYPES:
            raise ValueError(f"A nucleon must be a proton or neutron, got {particle_type}")
        super().__init__(x, y, particle_type)
        self.state = None
        self.level = None
        self.slot = None
        self.input_enabled = True

    @property
    def species(self):
        return self.type

    def __repr__(self):
        state = self.state.name if self.state else "-"
        return f"{self.type.name.title()}(id={self.id}, {state}, slot={self.level}/{self.slot})"


class AlphaParticle(Particle):
    """Two protons and two neutrons flying out as one unit.

    The constituents keep their identity so the ledger can finalise them once
    the alpha particle reaches its destination.
    """

    # Offsets of the four constituents around the centre, in particle radii
    _LAYOUT = np.array([[-1.0, -1.0], [1.0, 1.0], [1.0, -1.0], [-1.0, 1.0]]) * PARTICLE_RADIUS * 0.9

    def __init__(self, protons, neutrons):
        if len(protons) != 2 or len(neutrons) != 2:
            raise ValueError("An alpha particle is made of 2 protons and 2 neutrons")
        self.constituents = list(protons) + list(neutrons)
        center = np.mean([c.position for c in self.constituents], axis=0)
        super().__init__(center[0], center[1], ParticleType.ALPHA)
        self._offsets = self._LAYOUT.copy()
        self.set_position_and_destination(self.x, self.y)

    def set_position(self, x, y):
        super().set_position(x, y)
        for constituent, offset in zip(self.constituents, self._offsets):
            constituent.set_position_and_destination(self.x + offset[0], self.y + offset[1])

    @property
    def protons(self):
        return [c for c in self.constituents if c.type == ParticleType.PROTON]

    @property
    def neutrons(self):
        return [c for c in self.constituents if c.type == ParticleType.NEUTRON]

    def decompose(self):
        """Release the constituents; the alpha particle is empty afterwards."""
        constituents, self.constituents = self.constituents, []
        return constituents

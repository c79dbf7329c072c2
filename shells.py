"""
Energy-level placement for the nucleons of each species.

Each species has three levels with capacities (2, 6, 6). Nucleons take slots
bottom level first, left to right, in the order they settled. Levels below
the one currently being filled are drawn compacted: their slots close up
around the middle of the level, which moves destinations only and never
changes which nucleon owns which slot.
"""
import logging

import numpy as np

from constants import (
    ALLOWED_PARTICLE_POSITIONS,
    LEVEL_CAPACITIES,
    NUMBER_OF_ENERGY_LEVELS,
    PARTICLE_DIAMETER,
    PARTICLE_X_SPACING,
    PARTICLE_Y_SPACING,
    SHELL_ORIGIN,
    TOTAL_SHELL_CAPACITY,
    X_DISTANCE_BETWEEN_ENERGY_LEVELS,
)
from errors import NoCapacityError
from particles import NUCLEON_TYPES, ParticleType

logger = logging.getLogger("NuclearSim")


def fill_level(count):
    """Level the given number of settled nucleons currently reaches."""
    if count > LEVEL_CAPACITIES[0] + LEVEL_CAPACITIES[1]:
        return 2
    if count > LEVEL_CAPACITIES[0]:
        return 1
    return 0


def rank_to_slot(rank):
    """Map a settle rank (0-based) onto its (level, slot) pair."""
    for level, capacity in enumerate(LEVEL_CAPACITIES):
        if rank < capacity:
            return level, rank
        rank -= capacity
    raise NoCapacityError(f"No slot for rank beyond total capacity {TOTAL_SHELL_CAPACITY}")


class ShellPlacementEngine:
    """Tracks slot occupancy per species and computes nucleon destinations.

    Occupancy lives in ``self.levels[species][level][slot]`` which holds the
    nucleon reserving the slot or ``None``. A slot is reserved as soon as a
    destination is handed out so two nucleons in flight never share one.
    """

    def __init__(self, origin=SHELL_ORIGIN):
        self.origin = np.array(origin, dtype=float)
        self.levels = {
            species: [[None] * capacity for capacity in LEVEL_CAPACITIES]
            for species in NUCLEON_TYPES
        }

        # Layout centre: middle of every slot position of both species
        points = [
            self.slot_position(species, level, slot)
            for species in NUCLEON_TYPES
            for level in range(NUMBER_OF_ENERGY_LEVELS)
            for slot in range(LEVEL_CAPACITIES[level])
        ]
        self.center = tuple(np.mean(points, axis=0))

    def slot_position(self, species, level, slot):
        """View coordinates of an uncompacted slot."""
        column = ALLOWED_PARTICLE_POSITIONS[level][slot]
        x = self.origin[0] + column * PARTICLE_X_SPACING
        if species == ParticleType.NEUTRON:
            x += X_DISTANCE_BETWEEN_ENERGY_LEVELS
        y = self.origin[1] - level * PARTICLE_Y_SPACING
        return float(x), float(y)

    def compacted_position(self, species, level, slot):
        """Slot coordinates once the level is bound: no gaps, centred on the level."""
        columns = ALLOWED_PARTICLE_POSITIONS[level]
        middle_column = np.mean(columns)
        offset = (slot - (len(columns) - 1) / 2) * PARTICLE_DIAMETER
        x = self.origin[0] + middle_column * PARTICLE_X_SPACING + offset
        if species == ParticleType.NEUTRON:
            x += X_DISTANCE_BETWEEN_ENERGY_LEVELS
        y = self.origin[1] - level * PARTICLE_Y_SPACING
        return float(x), float(y)

    def _place(self, species, nucleon, level, slot, compacted=False):
        self.levels[species][level][slot] = nucleon
        nucleon.level = level
        nucleon.slot = slot
        if compacted:
            nucleon.destination = self.compacted_position(species, level, slot)
        else:
            nucleon.destination = self.slot_position(species, level, slot)
        nucleon.input_enabled = not compacted

    def assign_destination(self, species, nucleon):
        """Reserve the first free slot for ``nucleon`` and return its coordinates."""
        for level, slots in enumerate(self.levels[species]):
            for slot, occupant in enumerate(slots):
                if occupant is None:
                    self._place(species, nucleon, level, slot)
                    logger.debug(f"Reserved {species.name.lower()} slot {level}/{slot} for {nucleon!r}")
                    return nucleon.destination
        raise NoCapacityError(f"All {TOTAL_SHELL_CAPACITY} {species.name.lower()} slots are taken")

    def reconfigure(self, species, ordered_settled):
        """Re-place every settled nucleon by rank and re-reserve the incoming ones.

        Nucleons that held a slot but are not in ``ordered_settled`` keep a
        reservation after the settled ones, in their previous slot order.
        """
        settled_ids = {nucleon.id for nucleon in ordered_settled}
        reserved = [
            nucleon for nucleon in self._occupants(species)
            if nucleon.id not in settled_ids
        ]
        if len(ordered_settled) + len(reserved) > TOTAL_SHELL_CAPACITY:
            raise NoCapacityError(
                f"{len(ordered_settled)} settled and {len(reserved)} reserved "
                f"{species.name.lower()}s exceed capacity {TOTAL_SHELL_CAPACITY}"
            )

        self._clear_species(species)
        bound_below = fill_level(len(ordered_settled))
        for rank, nucleon in enumerate(ordered_settled):
            level, slot = rank_to_slot(rank)
            self._place(species, nucleon, level, slot, compacted=level < bound_below)
        for rank, nucleon in enumerate(reserved, start=len(ordered_settled)):
            level, slot = rank_to_slot(rank)
            self._place(species, nucleon, level, slot)

    def get_rightmost_occupied(self, species, state=None):
        """Highest-level, highest-slot nucleon, optionally only in ``state``."""
        for slots in reversed(self.levels[species]):
            for occupant in reversed(slots):
                if occupant is not None and (state is None or occupant.state == state):
                    return occupant
        return None

    def vacate(self, species, nucleon):
        """Release any slot held by ``nucleon``. Safe to call more than once."""
        for slots in self.levels[species]:
            for slot, occupant in enumerate(slots):
                if occupant is nucleon:
                    slots[slot] = None
        nucleon.level = None
        nucleon.slot = None
        nucleon.input_enabled = True

    def occupied_slots(self, species):
        """Map of (level, slot) to the nucleon holding it."""
        return {
            (level, slot): occupant
            for level, slots in enumerate(self.levels[species])
            for slot, occupant in enumerate(slots)
            if occupant is not None
        }

    def _occupants(self, species):
        return [occupant for slots in self.levels[species] for occupant in slots if occupant is not None]

    def _clear_species(self, species):
        for slots in self.levels[species]:
            for slot in range(len(slots)):
                slots[slot] = None

    def clear(self):
        for species in NUCLEON_TYPES:
            self._clear_species(species)

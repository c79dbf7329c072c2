"""
Authoritative nucleon bookkeeping.

Every nucleon the nucleus knows about is in exactly one of four states:
settled in a shell slot, incoming (flying toward its reserved slot),
outgoing (flying away, already not counted) or user-held (being dragged).
State changes happen synchronously when they are requested; animations
only report back through the handle verbs ``confirm_arrival``,
``cancel_incoming`` and ``finalize_removal``.
"""
from dataclasses import dataclass
from typing import NamedTuple
import logging

from constants import (
    MAX_NEUTRONS,
    MAX_PROTONS,
    NEUTRON_CREATOR_POSITION,
    PROTON_CREATOR_POSITION,
    TOTAL_SHELL_CAPACITY,
)
from errors import InsufficientNucleonsError, NoCapacityError, NotFoundError
from particles import NUCLEON_TYPES, Nucleon, NucleonState, ParticleType
from shells import ShellPlacementEngine

logger = logging.getLogger("NuclearSim")

CREATOR_POSITIONS = {
    ParticleType.PROTON: PROTON_CREATOR_POSITION,
    ParticleType.NEUTRON: NEUTRON_CREATOR_POSITION,
}


@dataclass(frozen=True)
class NucleonHandle:
    """Reference to one nucleon for the completion verbs of an animation."""
    nucleon_id: int
    nucleon: Nucleon

    @property
    def species(self):
        return self.nucleon.species


class SpeciesCounts(NamedTuple):
    settled: int
    incoming: int
    outgoing: int
    user_held: int

    @property
    def effective(self):
        return self.settled + self.incoming + self.user_held


class NucleonLedger:
    def __init__(self, shells=None, max_counts=None):
        self.shells = shells if shells is not None else ShellPlacementEngine()
        self.max_counts = {
            ParticleType.PROTON: MAX_PROTONS,
            ParticleType.NEUTRON: MAX_NEUTRONS,
        }
        if max_counts:
            self.max_counts.update(max_counts)

        self._settled = {species: [] for species in NUCLEON_TYPES}     # settle order
        self._incoming = {species: [] for species in NUCLEON_TYPES}    # request order
        self._user_held = {species: [] for species in NUCLEON_TYPES}
        self._outgoing = {}   # id -> nucleon
        self._nucleons = {}   # id -> every live nucleon

    # ----------------------------------------------------------------- queries

    def counts(self, species):
        return SpeciesCounts(
            len(self._settled[species]),
            len(self._incoming[species]),
            sum(1 for nucleon in self._outgoing.values() if nucleon.species == species),
            len(self._user_held[species]),
        )

    def effective_count(self, species):
        return self.counts(species).effective

    def settled(self, species):
        return list(self._settled[species])

    def incoming(self, species):
        return list(self._incoming[species])

    def user_held(self, species):
        return list(self._user_held[species])

    def outgoing(self, species=None):
        return [n for n in self._outgoing.values() if species is None or n.species == species]

    def nucleon(self, nucleon_id):
        return self._nucleons.get(nucleon_id)

    def nucleons(self):
        return list(self._nucleons.values())

    # ------------------------------------------------------------- transitions

    def request_add(self, species, position=None, nucleon=None):
        """Bring a nucleon in: it becomes INCOMING with a reserved slot.

        A user-held nucleon of the same species may be passed back in; it is
        already part of the effective count so the limit is not re-checked.
        """
        re_entering = nucleon is not None and nucleon.state == NucleonState.USER_HELD
        if not re_entering and self.effective_count(species) >= self.max_counts[species]:
            raise NoCapacityError(
                f"Cannot add {species.name.lower()}: limit of {self.max_counts[species]} reached"
            )

        if nucleon is None:
            x, y = position if position is not None else CREATOR_POSITIONS[species]
            nucleon = Nucleon(x, y, species)
        elif nucleon.species != species:
            raise ValueError(f"{nucleon!r} is not a {species.name.lower()}")

        self.shells.assign_destination(species, nucleon)
        if re_entering:
            self._user_held[species].remove(nucleon)
        nucleon.state = NucleonState.INCOMING
        self._incoming[species].append(nucleon)
        self._nucleons[nucleon.id] = nucleon
        logger.debug(f"Incoming {nucleon!r}")
        return NucleonHandle(nucleon.id, nucleon)

    def confirm_arrival(self, handle):
        try:
            nucleon = self._take(handle, NucleonState.INCOMING)
        except NotFoundError as e:
            logger.warning(f"Ignoring arrival: {e}")
            return False

        species = nucleon.species
        self._incoming[species].remove(nucleon)
        nucleon.state = NucleonState.SETTLED
        self._settled[species].append(nucleon)
        self.shells.reconfigure(species, self._settled[species])
        logger.debug(f"Settled {nucleon!r}")
        return True

    def cancel_incoming(self, handle):
        """Turn an incoming nucleon around; it flies back as OUTGOING."""
        try:
            nucleon = self._take(handle, NucleonState.INCOMING)
        except NotFoundError as e:
            logger.warning(f"Ignoring cancel: {e}")
            return False

        species = nucleon.species
        self._incoming[species].remove(nucleon)
        self.shells.vacate(species, nucleon)
        self._send_out(nucleon)
        self.shells.reconfigure(species, self._settled[species])
        return True

    def request_remove(self, species):
        """Send the most recently settled nucleon of ``species`` out."""
        if not self._settled[species]:
            raise InsufficientNucleonsError(f"No settled {species.name.lower()} to remove")

        nucleon = self.shells.get_rightmost_occupied(species, NucleonState.SETTLED)
        self._settled[species].remove(nucleon)
        self.shells.vacate(species, nucleon)
        self._send_out(nucleon)
        self.shells.reconfigure(species, self._settled[species])
        return NucleonHandle(nucleon.id, nucleon)

    def extract(self, nucleons):
        """Send specific settled nucleons out together, reconfiguring once per species."""
        for nucleon in nucleons:
            if nucleon.state != NucleonState.SETTLED or nucleon.id not in self._nucleons:
                raise InsufficientNucleonsError(f"{nucleon!r} is not settled")

        handles = []
        touched = set()
        for nucleon in nucleons:
            species = nucleon.species
            self._settled[species].remove(nucleon)
            self.shells.vacate(species, nucleon)
            self._send_out(nucleon)
            handles.append(NucleonHandle(nucleon.id, nucleon))
            touched.add(species)
        for species in NUCLEON_TYPES:
            if species in touched:
                self.shells.reconfigure(species, self._settled[species])
        return handles

    def finalize_removal(self, handle):
        """Forget an outgoing nucleon once its animation is over."""
        try:
            nucleon = self._take(handle, NucleonState.OUTGOING)
        except NotFoundError as e:
            logger.warning(f"Ignoring finalize: {e}")
            return False

        del self._outgoing[nucleon.id]
        del self._nucleons[nucleon.id]
        nucleon.state = None
        logger.debug(f"Finalized removal of {nucleon.type.name.lower()} {nucleon.id}")
        return True

    def set_user_held(self, handle, held, recapture=True):
        """Start or end a drag.

        Grabbing takes the nucleon out of its slot and out of the settled and
        incoming counts. Releasing with ``recapture`` sends it back in as an
        incoming nucleon; without it the nucleon leaves as OUTGOING.
        Returns the handle the caller should animate.
        """
        nucleon = self._resolve(handle)
        species = nucleon.species

        if held:
            if nucleon.state == NucleonState.SETTLED:
                self._settled[species].remove(nucleon)
            elif nucleon.state == NucleonState.INCOMING:
                self._incoming[species].remove(nucleon)
            else:
                raise NotFoundError(f"{nucleon!r} cannot be picked up")
            self.shells.vacate(species, nucleon)
            nucleon.state = NucleonState.USER_HELD
            self._user_held[species].append(nucleon)
            self.shells.reconfigure(species, self._settled[species])
            return NucleonHandle(nucleon.id, nucleon)

        if nucleon.state != NucleonState.USER_HELD:
            raise NotFoundError(f"{nucleon!r} is not being held")
        if recapture:
            return self.request_add(species, nucleon=nucleon)
        self._user_held[species].remove(nucleon)
        self._send_out(nucleon)
        return NucleonHandle(nucleon.id, nucleon)

    def change_species(self, nucleon, new_species):
        """Convert a settled nucleon in place (beta decay)."""
        old_species = nucleon.species
        if nucleon.state != NucleonState.SETTLED or nucleon not in self._settled[old_species]:
            raise InsufficientNucleonsError(f"{nucleon!r} is not settled")
        if new_species == old_species:
            return
        if self.counts(new_species).settled + self.counts(new_species).incoming >= TOTAL_SHELL_CAPACITY:
            raise NoCapacityError(f"No {new_species.name.lower()} slot left for {nucleon!r}")

        self._settled[old_species].remove(nucleon)
        self.shells.vacate(old_species, nucleon)
        nucleon.type = new_species
        self._settled[new_species].append(nucleon)
        self.shells.reconfigure(old_species, self._settled[old_species])
        self.shells.reconfigure(new_species, self._settled[new_species])
        logger.debug(f"{old_species.name.title()} {nucleon.id} became a {new_species.name.lower()}")

    def restore_settled(self, order):
        """Reinstate an exact settled population, ``{species: [nucleon, ...]}``.

        Nucleons are put back in the given order with the given species;
        outgoing ones are pulled back in. Incoming and held nucleons are left
        alone and keep their reservations.
        """
        for species, nucleons in order.items():
            for nucleon in nucleons:
                self._outgoing.pop(nucleon.id, None)
                for other in NUCLEON_TYPES:
                    if nucleon in self._settled[other]:
                        self._settled[other].remove(nucleon)
                        self.shells.vacate(other, nucleon)
                nucleon.type = species
                nucleon.state = NucleonState.SETTLED
                self._nucleons[nucleon.id] = nucleon

        for species in NUCLEON_TYPES:
            restored = order.get(species, [])
            kept = [nucleon for nucleon in self._settled[species] if nucleon not in restored]
            self._settled[species] = list(restored) + kept
        for species in NUCLEON_TYPES:
            self.shells.reconfigure(species, self._settled[species])

    def clear(self):
        self.shells.clear()
        for species in NUCLEON_TYPES:
            self._settled[species].clear()
            self._incoming[species].clear()
            self._user_held[species].clear()
        for nucleon in self._nucleons.values():
            nucleon.state = None
        self._outgoing.clear()
        self._nucleons.clear()

    # ---------------------------------------------------------------- helpers

    def _send_out(self, nucleon):
        nucleon.state = NucleonState.OUTGOING
        nucleon.destination = CREATOR_POSITIONS[nucleon.species]
        self._outgoing[nucleon.id] = nucleon

    def _resolve(self, handle):
        nucleon = handle.nucleon if isinstance(handle, NucleonHandle) else handle
        if nucleon is None or self._nucleons.get(nucleon.id) is not nucleon:
            raise NotFoundError(f"Nucleon {getattr(nucleon, 'id', None)} is not tracked")
        return nucleon

    def _take(self, handle, state):
        nucleon = self._resolve(handle)
        if nucleon.state != state:
            raise NotFoundError(f"{nucleon!r} is not {state.name.lower()}")
        return nucleon

    def check_invariants(self):
        """Return a list of consistency problems; empty when the books balance."""
        problems = []
        for species in NUCLEON_TYPES:
            counts = self.counts(species)
            live = [
                n for n in self._nucleons.values()
                if n.species == species and n.state != NucleonState.OUTGOING
            ]
            if counts.effective != len(live):
                problems.append(
                    f"{species.name}: effective {counts.effective} != {len(live)} live nucleons"
                )

            occupied = self.shells.occupied_slots(species)
            holders = list(occupied.values())
            if len({id(n) for n in holders}) != len(holders):
                problems.append(f"{species.name}: a nucleon holds more than one slot")
            for (level, slot), nucleon in occupied.items():
                if nucleon.state not in (NucleonState.SETTLED, NucleonState.INCOMING):
                    problems.append(f"{species.name}: slot {level}/{slot} held by {nucleon!r}")
                if (nucleon.level, nucleon.slot) != (level, slot):
                    problems.append(f"{species.name}: {nucleon!r} disagrees with slot {level}/{slot}")
            for nucleon in self._settled[species] + self._incoming[species]:
                if nucleon not in holders:
                    problems.append(f"{species.name}: {nucleon!r} has no slot")
        return problems

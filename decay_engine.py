"""
Decay operations on the nucleon ledger.

Every decay follows the same path: check eligibility, take the nucleons out
of the ledger, build the emitted particle(s), send them to a point well
outside the view, and finalise the ledger once their motion completes.
Counts change at the moment the decay is requested; the animation only
decides when outgoing nucleons are forgotten.
"""
from dataclasses import dataclass, field
import logging

import numpy as np

from constants import (
    DOES_NOT_EXIST_GRACE_PERIOD,
    EMITTED_PARTICLE_SPEED,
    ESCAPE_DISTANCE,
)
from errors import InsufficientNucleonsError
from nuclide_data import element_symbol
from particles import (
    AlphaParticle,
    DecayType,
    Nucleon,
    Particle,
    ParticleType,
    decay_symbol,
)

logger = logging.getLogger("NuclearSim")

PROTON = ParticleType.PROTON
NEUTRON = ParticleType.NEUTRON


@dataclass
class DecayResult:
    decay_type: DecayType
    parent: tuple                                   # (protons, neutrons) before
    daughter: tuple                                 # (protons, neutrons) after
    emitted: list = field(default_factory=list)     # particles sent out of the view
    handles: list = field(default_factory=list)     # outgoing nucleons to finalise
    converted: object = None                        # nucleon that changed species


@dataclass
class _DecayRecord:
    # [(nucleon, species, resting destination)] in settle order, per species
    snapshot: dict
    result: DecayResult


@dataclass
class _ScheduledEmission:
    remaining: float
    decay_types: list


def nuclide_name(protons, neutrons):
    """Short name used in decay log lines, e.g. ``He-4``."""
    if protons + neutrons == 0:
        return "-"
    if protons == 0:
        return f"n{neutrons}" if neutrons > 1 else "n"
    return f"{element_symbol(protons)}-{protons + neutrons}"


class DecayEngine:
    """Runs the five decay kinds against a ``NucleonLedger``.

    Args:
        ledger: the ledger owning the nucleons
        scheduler: animation hand-off with ``schedule_motion`` and ``cancel``
        center: point emitted particles fly away from
        grace_period: delay before the leftover protons of Helium-2 are emitted
        seed: seed for escape directions
    """

    def __init__(self, ledger, scheduler, center=None, grace_period=DOES_NOT_EXIST_GRACE_PERIOD, seed=None):
        self.ledger = ledger
        self.scheduler = scheduler
        self.center = np.array(center if center is not None else ledger.shells.center, dtype=float)
        self.grace_period = grace_period
        self.rng = np.random.default_rng(seed)

        self.emitted = {}        # id -> lepton or alpha particle in flight
        self._scheduled = []
        self._last_decay = None

        self._handlers = {
            DecayType.ALPHA_DECAY: self._alpha_decay,
            DecayType.BETA_MINUS_DECAY: lambda result: self._beta_decay(NEUTRON, PROTON, ParticleType.ELECTRON, result),
            DecayType.BETA_PLUS_DECAY: lambda result: self._beta_decay(PROTON, NEUTRON, ParticleType.POSITRON, result),
            DecayType.PROTON_EMISSION: lambda result: self._emit_nucleon(PROTON, result),
            DecayType.NEUTRON_EMISSION: lambda result: self._emit_nucleon(NEUTRON, result),
        }

    # -------------------------------------------------------------- eligibility

    def is_eligible(self, decay_type):
        settled_protons = self.ledger.counts(PROTON).settled
        settled_neutrons = self.ledger.counts(NEUTRON).settled
        if decay_type == DecayType.ALPHA_DECAY:
            return settled_protons >= 2 and settled_neutrons >= 2
        if decay_type in (DecayType.BETA_MINUS_DECAY, DecayType.NEUTRON_EMISSION):
            return settled_neutrons >= 1
        if decay_type in (DecayType.BETA_PLUS_DECAY, DecayType.PROTON_EMISSION):
            return settled_protons >= 1
        raise ValueError(f"Unknown decay type {decay_type}")

    def _effective(self):
        return self.ledger.effective_count(PROTON), self.ledger.effective_count(NEUTRON)

    # -------------------------------------------------------------------- decay

    def decay(self, decay_type):
        """Run one decay now and return what it emitted."""
        if not self.is_eligible(decay_type):
            raise InsufficientNucleonsError(
                f"Not enough settled nucleons for {decay_type.name.lower()}"
            )

        parent = self._effective()
        snapshot = self._snapshot()
        self.cancel_scheduled()

        result = DecayResult(decay_type, parent, parent)
        self._handlers[decay_type](result)
        result.daughter = self._effective()
        self._last_decay = _DecayRecord(snapshot, result)
        self._log_decay(result)

        if decay_type == DecayType.ALPHA_DECAY and self._is_helium_2():
            logger.info("Helium-2 does not form, emitting its protons")
            self._scheduled.append(_ScheduledEmission(
                self.grace_period,
                [DecayType.PROTON_EMISSION, DecayType.PROTON_EMISSION],
            ))
        return result

    def _emit_nucleon(self, species, result=None):
        handle = self.ledger.request_remove(species)
        nucleon = handle.nucleon
        nucleon.speed = EMITTED_PARTICLE_SPEED["nucleon"]
        self.scheduler.schedule_motion(
            nucleon,
            self._escape_destination(),
            lambda: self.ledger.finalize_removal(handle),
        )
        if result is not None:
            result.emitted.append(nucleon)
            result.handles.append(handle)
        return handle

    def _beta_decay(self, from_species, to_species, lepton_type, result):
        nucleon = self._closest_to_center(from_species, 1)[0]
        x, y = nucleon.x, nucleon.y
        self.ledger.change_species(nucleon, to_species)

        lepton = Particle(x, y, lepton_type)
        self.emitted[lepton.id] = lepton
        self.scheduler.schedule_motion(
            lepton,
            self._escape_destination(),
            lambda: self.emitted.pop(lepton.id, None),
        )
        result.emitted.append(lepton)
        result.converted = nucleon

    def _alpha_decay(self, result):
        protons = self._closest_to_center(PROTON, 2)
        neutrons = self._closest_to_center(NEUTRON, 2)
        handles = self.ledger.extract(protons + neutrons)

        alpha = AlphaParticle(protons, neutrons)
        for handle in handles:
            # The constituents ride along with the alpha particle
            self.scheduler.cancel(handle.nucleon)
        self.emitted[alpha.id] = alpha
        self.scheduler.schedule_motion(
            alpha,
            self._escape_destination(),
            lambda: self._finish_alpha(alpha, handles),
        )
        result.emitted.append(alpha)
        result.handles.extend(handles)

    def _finish_alpha(self, alpha, handles):
        alpha.decompose()
        self.emitted.pop(alpha.id, None)
        for handle in handles:
            self.ledger.finalize_removal(handle)

    # ---------------------------------------------------------------- geometry

    def _closest_to_center(self, species, count):
        """The ``count`` settled nucleons of ``species`` nearest the nucleus centre.

        The centre is the centroid of every settled nucleon's resting point;
        ties go to the nucleon that settled first.
        """
        settled = self.ledger.settled(PROTON) + self.ledger.settled(NEUTRON)
        center = np.mean([n.destination for n in settled], axis=0)
        candidates = self.ledger.settled(species)
        distances = np.array([np.hypot(*(np.array(n.destination) - center)) for n in candidates])
        order = np.argsort(distances, kind="stable")
        return [candidates[i] for i in order[:count]]

    def _escape_destination(self):
        angle = self.rng.uniform(0, 2 * np.pi)
        destination = self.center + ESCAPE_DISTANCE * np.array([np.cos(angle), np.sin(angle)])
        return float(destination[0]), float(destination[1])

    # -------------------------------------------------------- scheduled protons

    def _is_helium_2(self):
        return (
            self.ledger.counts(PROTON).settled == 2
            and self._effective() == (2, 0)
        )

    def has_scheduled_emissions(self):
        return bool(self._scheduled)

    def cancel_scheduled(self):
        if self._scheduled:
            logger.debug("Cancelled scheduled proton emissions")
        self._scheduled.clear()

    def step(self, dt):
        """Advance scheduled emissions; fire those whose delay has passed."""
        for scheduled in list(self._scheduled):
            scheduled.remaining -= dt
            if scheduled.remaining > 0:
                continue
            if not self._is_helium_2():
                if self._effective() == (2, 0):
                    # A proton is held or on its way back; fire once it settles
                    continue
                self._scheduled.remove(scheduled)
                logger.debug("Nucleus changed before the scheduled emissions, skipping them")
                continue
            self._scheduled.remove(scheduled)

            # These are not user decays and cannot be undone
            self._last_decay = None
            for decay_type in scheduled.decay_types:
                parent = self._effective()
                result = DecayResult(decay_type, parent, parent)
                self._handlers[decay_type](result)
                result.daughter = self._effective()
                self._log_decay(result)

    # --------------------------------------------------------------------- undo

    def _snapshot(self):
        return {
            species: [(n, species, n.destination) for n in self.ledger.settled(species)]
            for species in (PROTON, NEUTRON)
        }

    def can_undo(self):
        return self._last_decay is not None

    def forget_last_decay(self):
        self._last_decay = None

    def undo_last_decay(self):
        """Put the nucleus back exactly as it was before the last decay.

        Emitted particles are dropped, the decay's outgoing nucleons are
        discarded and replaced by fresh ones at their old resting points, and
        the settled order and species are restored rank by rank.
        """
        record = self._last_decay
        if record is None:
            return False
        self._last_decay = None
        self.cancel_scheduled()

        result = record.result
        for particle in result.emitted:
            self.scheduler.cancel(particle)
            self.emitted.pop(particle.id, None)
            if isinstance(particle, AlphaParticle):
                particle.decompose()

        replacements = {}
        for handle in result.handles:
            self.scheduler.cancel(handle.nucleon)
            if self.ledger.nucleon(handle.nucleon_id) is handle.nucleon:
                self.ledger.finalize_removal(handle)
            replacements[handle.nucleon_id] = None

        order = {}
        for species, entries in record.snapshot.items():
            order[species] = []
            for nucleon, original_species, destination in entries:
                if nucleon.id in replacements:
                    replacement = Nucleon(destination[0], destination[1], original_species)
                    replacement.set_position_and_destination(*destination)
                    replacements[nucleon.id] = replacement
                    nucleon = replacement
                order[species].append(nucleon)
        self.ledger.restore_settled(order)

        logger.info(
            f"UNDO: {nuclide_name(*result.daughter)} → {nuclide_name(*result.parent)} "
            f"({decay_symbol(result.decay_type)})"
        )
        return True

    def _log_decay(self, result):
        logger.info(
            f"DECAY: {nuclide_name(*result.parent)} → {nuclide_name(*result.daughter)} "
            f"({decay_symbol(result.decay_type)})"
        )

    def clear(self):
        for particle in list(self.emitted.values()):
            self.scheduler.cancel(particle)
        self.emitted.clear()
        self._scheduled.clear()
        self._last_decay = None

    def emitted_particles(self):
        return list(self.emitted.values())

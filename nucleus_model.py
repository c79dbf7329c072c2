"""
Per-screen nucleus model.

Owns the ledger, the shell engine and the decay engine, and is the only
thing the view talks to. Every UI action is a method here; after each one
the derived nuclide state is recomputed and listeners get the fields that
changed. A nuclide that does not exist is allowed to show for a grace
period, after which the change that produced it is undone.
"""
from typing import NamedTuple
import functools
import logging

from animation import ParticleAnimator
from config import SimulationConfig
from decay_engine import DecayEngine
from errors import InsufficientNucleonsError, NoCapacityError, NotFoundError, NucleusError
from ledger import CREATOR_POSITIONS, NucleonHandle, NucleonLedger
from nuclide_chart import NuclideChartCellModel, decay_equation
from nuclide_data import NuclideDataTable, element_name
from particles import NUCLEON_TYPES, NucleonState, ParticleType
from shells import ShellPlacementEngine

logger = logging.getLogger("NuclearSim")

PROTON = ParticleType.PROTON
NEUTRON = ParticleType.NEUTRON


class NuclideState(NamedTuple):
    protons: int
    neutrons: int
    exists: bool
    is_stable: bool
    half_life: object

    @property
    def mass_number(self):
        return self.protons + self.neutrons


def contract(method):
    """Run a UI action; contract violations raise or are logged depending on config."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except NucleusError as e:
            if self.config.strict_contracts:
                raise
            logger.error(f"{method.__name__} rejected: {e}")
            return None
    return wrapper


class NucleusSimulationModel:
    """The nucleus of one screen.

    Args:
        config: start-up configuration, validated before use
        data_table: nuclide reference data, the built-in table by default
        scheduler: animation hand-off, a ``ParticleAnimator`` by default
    """

    def __init__(self, config=None, data_table=None, scheduler=None):
        self.config = config if config is not None else SimulationConfig()
        self.data_table = data_table if data_table is not None else NuclideDataTable()
        self.scheduler = scheduler if scheduler is not None else ParticleAnimator()

        self.shells = ShellPlacementEngine()
        self.ledger = NucleonLedger(self.shells)
        self.engine = None

        self._listeners = []
        self._state = None
        self._grace_timer = 0.0
        self._changes = {}   # species -> last +1/-1 since the nuclide last existed

        self.initialize(self.config)

    # ---------------------------------------------------------- initialisation

    def initialize(self, config):
        """Start over from ``config``: its nucleons are placed directly as settled."""
        config.validate(self.data_table)
        self.config = config

        if self.engine is not None:
            self.engine.clear()
        self.scheduler.cancel_all()
        self.ledger.clear()
        self.ledger.max_counts = {PROTON: config.max_protons, NEUTRON: config.max_neutrons}
        self.engine = DecayEngine(
            self.ledger,
            self.scheduler,
            center=self.shells.center,
            grace_period=config.grace_period,
            seed=config.seed,
        )

        for species, count in ((PROTON, config.initial_protons), (NEUTRON, config.initial_neutrons)):
            for _ in range(count):
                self.ledger.confirm_arrival(self.ledger.request_add(species))
        for nucleon in self.ledger.nucleons():
            nucleon.set_position_and_destination(*nucleon.destination)

        self._grace_timer = 0.0
        self._changes.clear()
        self._state = self._compute_state()
        logger.info(f"Nucleus initialised with {config.initial_protons} protons, {config.initial_neutrons} neutrons")

    def reset(self):
        self.initialize(self.config)
        self._notify_all()

    # ----------------------------------------------------------- derived state

    @property
    def state(self):
        return self._state

    def add_listener(self, callback):
        """``callback(changes)`` receives a dict of the NuclideState fields that changed."""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        self._listeners.remove(callback)

    def counts(self, species):
        return self.ledger.counts(species)

    def effective_counts(self):
        return self.ledger.effective_count(PROTON), self.ledger.effective_count(NEUTRON)

    def _compute_state(self):
        protons, neutrons = self.effective_counts()
        record = self.data_table.lookup(protons, neutrons)
        return NuclideState(protons, neutrons, record.exists, record.is_stable, record.half_life)

    def _refresh(self):
        new_state = self._compute_state()
        old_state = self._state
        self._state = new_state
        if new_state.exists:
            self._grace_timer = 0.0
            self._changes.clear()

        changes = {
            name: value
            for name, value in new_state._asdict().items()
            if getattr(old_state, name) != value
        }
        if changes:
            logger.debug(f"Nuclide state changed: {changes}")
            for listener in list(self._listeners):
                listener(changes)
        return new_state

    def _notify_all(self):
        for listener in list(self._listeners):
            listener(self._state._asdict())

    def _record_change(self, species, delta):
        self._changes[species] = delta

    def _after_mutation(self):
        self.engine.forget_last_decay()
        self._animate_settled()
        return self._refresh()

    def _animate_settled(self):
        """Send settled nucleons whose slot moved to their new destination."""
        for species in NUCLEON_TYPES:
            for nucleon in self.ledger.settled(species):
                if not nucleon.at_destination() and not self.scheduler.is_animating(nucleon):
                    self.scheduler.schedule_motion(nucleon, nucleon.destination)

    # -------------------------------------------------------------- UI actions

    def _increment(self, species):
        handle = self.ledger.request_add(species)
        self.scheduler.schedule_motion(
            handle.nucleon,
            handle.nucleon.destination,
            lambda: self._on_arrival(handle),
        )
        return handle

    def _decrement(self, species):
        incoming = self.ledger.incoming(species)
        if incoming:
            nucleon = incoming[-1]
            handle = NucleonHandle(nucleon.id, nucleon)
            self.ledger.cancel_incoming(handle)
        else:
            handle = self.ledger.request_remove(species)
        self.scheduler.schedule_motion(
            handle.nucleon,
            CREATOR_POSITIONS[species],
            lambda: self.ledger.finalize_removal(handle),
        )
        return handle

    def _on_arrival(self, handle):
        self.ledger.confirm_arrival(handle)
        self._animate_settled()
        self._refresh()

    @contract
    def request_increment(self, species):
        handle = self._increment(species)
        self._record_change(species, +1)
        self._after_mutation()
        return handle

    @contract
    def request_decrement(self, species):
        handle = self._decrement(species)
        self._record_change(species, -1)
        self._after_mutation()
        return handle

    @contract
    def request_increment_both(self):
        for species in NUCLEON_TYPES:
            if self.ledger.effective_count(species) >= self.ledger.max_counts[species]:
                raise NoCapacityError(f"Cannot add {species.name.lower()}: limit reached")
        handles = [self._increment(species) for species in NUCLEON_TYPES]
        for species in NUCLEON_TYPES:
            self._record_change(species, +1)
        self._after_mutation()
        return handles

    @contract
    def request_decrement_both(self):
        for species in NUCLEON_TYPES:
            counts = self.ledger.counts(species)
            if counts.settled + counts.incoming == 0:
                raise InsufficientNucleonsError(f"No {species.name.lower()} to remove")
        handles = [self._decrement(species) for species in NUCLEON_TYPES]
        for species in NUCLEON_TYPES:
            self._record_change(species, -1)
        self._after_mutation()
        return handles

    @contract
    def begin_user_hold(self, nucleon_id):
        nucleon = self._nucleon(nucleon_id)
        if not nucleon.input_enabled:
            logger.debug(f"{nucleon!r} is bound in a compacted level and cannot be picked up")
            return None
        self.scheduler.cancel(nucleon)
        handle = self.ledger.set_user_held(nucleon, True)
        self._after_mutation()
        return handle

    @contract
    def drag_user_held(self, nucleon_id, position):
        nucleon = self._nucleon(nucleon_id)
        if nucleon.state != NucleonState.USER_HELD:
            raise NotFoundError(f"{nucleon!r} is not being held")
        nucleon.set_position_and_destination(*position)

    @contract
    def end_user_hold(self, nucleon_id, drop_position):
        """Drop a dragged nucleon: back into the nucleus if close enough, otherwise away."""
        nucleon = self._nucleon(nucleon_id)
        if nucleon.state != NucleonState.USER_HELD:
            raise NotFoundError(f"{nucleon!r} is not being held")
        nucleon.set_position_and_destination(*drop_position)
        species = nucleon.species

        if nucleon.distance_to(self.shells.center) <= self.config.capture_radius:
            handle = self.ledger.set_user_held(nucleon, False, recapture=True)
            self.scheduler.schedule_motion(nucleon, nucleon.destination, lambda: self._on_arrival(handle))
        else:
            handle = self.ledger.set_user_held(nucleon, False, recapture=False)
            self.scheduler.schedule_motion(
                nucleon,
                CREATOR_POSITIONS[species],
                lambda: self.ledger.finalize_removal(handle),
            )
            self._record_change(species, -1)
        self._after_mutation()
        return handle

    @contract
    def request_decay(self, decay_type):
        result = self.engine.decay(decay_type)
        self._changes.clear()
        self._animate_settled()
        self._refresh()
        return result

    def undo_decay(self):
        if not self.engine.undo_last_decay():
            return False
        self._changes.clear()
        self._animate_settled()
        self._refresh()
        return True

    def can_undo_decay(self):
        return self.engine.can_undo()

    def step(self, dt):
        """Advance animations, scheduled emissions and the existence guard by ``dt`` seconds."""
        self.scheduler.step(dt)
        had_scheduled = self.engine.has_scheduled_emissions()
        self.engine.step(dt)
        if had_scheduled and not self.engine.has_scheduled_emissions():
            self._animate_settled()
        state = self._refresh()

        if state.exists or state.mass_number == 0:
            self._grace_timer = 0.0
            self._changes.clear()
            return
        if self.engine.has_scheduled_emissions():
            return

        self._grace_timer += dt
        if self._grace_timer >= self.config.grace_period:
            self._grace_timer = 0.0
            self._revert_changes()

    def _revert_changes(self):
        """Undo the last nucleon change of each species that led to a missing nuclide."""
        changes, self._changes = self._changes, {}
        if not changes:
            return
        logger.info(f"{self.nuclide_label()}, reverting {len(changes)} change(s)")
        for species, delta in changes.items():
            try:
                if delta > 0:
                    self._decrement(species)
                else:
                    self._increment(species)
            except NucleusError as e:
                logger.error(f"Could not revert {species.name.lower()} change: {e}")
        self._after_mutation()

    def _nucleon(self, nucleon_id):
        nucleon = self.ledger.nucleon(nucleon_id)
        if nucleon is None:
            raise NotFoundError(f"No nucleon with id {nucleon_id}")
        return nucleon

    # ------------------------------------------------------- control predicates

    def _blocked(self):
        state = self._state
        return not state.exists and (state.mass_number > 0 or self._held_count() > 0)

    def _held_count(self):
        return sum(len(self.ledger.user_held(species)) for species in NUCLEON_TYPES)

    def can_increment(self, species):
        if self._blocked():
            return False
        return self.ledger.effective_count(species) < self.ledger.max_counts[species]

    def can_decrement(self, species):
        if self._blocked():
            return False
        counts = self.ledger.counts(species)
        if counts.settled + counts.incoming == 0:
            return False
        protons, neutrons = self.effective_counts()
        # Stepping down to an empty nucleus is always allowed
        if protons + neutrons == 1:
            return True
        if species == PROTON:
            return self.data_table.does_previous_isotone_exist(protons, neutrons)
        return self.data_table.does_previous_isotope_exist(protons, neutrons)

    def can_increment_both(self):
        return all(self.can_increment(species) for species in NUCLEON_TYPES)

    def can_decrement_both(self):
        if self._blocked():
            return False
        for species in NUCLEON_TYPES:
            counts = self.ledger.counts(species)
            if counts.settled + counts.incoming == 0:
                return False
        protons, neutrons = self.effective_counts()
        if (protons, neutrons) == (1, 1):
            return True
        return self.data_table.does_previous_nuclide_exist(protons, neutrons)

    def is_decay_available(self, decay_type):
        if self.engine.has_scheduled_emissions():
            return False
        for species in NUCLEON_TYPES:
            counts = self.ledger.counts(species)
            if counts.incoming or counts.user_held:
                return False
        state = self._state
        if not state.exists or not self.engine.is_eligible(decay_type):
            return False
        listed = [decay for decay, _ in self.data_table.decay_options(state.protons, state.neutrons)]
        return decay_type in listed

    # --------------------------------------------------------- display helpers

    def nuclide_label(self):
        """Name shown above the nucleus, e.g. ``Helium-4`` or ``Helium - 2 does not form``."""
        protons, neutrons = self.effective_counts()
        mass = protons + neutrons
        if mass == 0:
            return ""
        if protons == 0:
            return "1 neutron" if neutrons == 1 else f"cluster of {neutrons} neutrons"
        name = element_name(protons)
        if self._state.exists:
            return f"{name}-{mass}"
        return f"{name} - {mass} does not form"

    def half_life_display_value(self):
        return self.data_table.half_life_display_value(self._state.protons, self._state.neutrons)

    def current_cell(self):
        return NuclideChartCellModel(self._state.protons, self._state.neutrons, self.data_table)

    def decay_equation(self):
        return decay_equation(self.current_cell())

    # ------------------------------------------------------- rendering access

    def nucleons(self):
        return self.ledger.nucleons()

    def nucleon_at(self, position):
        """The nucleon a click at ``position`` would pick up, or None."""
        for nucleon in self.ledger.nucleons():
            if nucleon.state == NucleonState.OUTGOING or not nucleon.input_enabled:
                continue
            if nucleon.distance_to(position) <= nucleon.radius:
                return nucleon
        return None

    def emitted_particles(self):
        return self.engine.emitted_particles()

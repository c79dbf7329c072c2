"""
Nuclide chart cells and decay equations.

A cell is built once per visited (Z, N) from a single data-table lookup and
never changes afterwards. ``NuclideChart`` keeps the cells it has handed
out until the view that asked for them is torn down.
"""
from enum import Enum
from typing import NamedTuple

from particles import DECAY_COLORS, DECAY_PROPERTIES

STABLE_COLOR = (30, 30, 30)
UNKNOWN_COLOR = (190, 190, 190)
DOES_NOT_EXIST_COLOR = (255, 255, 255)


class CellClassification(Enum):
    STABLE = 0
    UNSTABLE_KNOWN_DECAY = 1
    UNSTABLE_UNKNOWN_DECAY = 2
    DOES_NOT_EXIST = 3


def most_likely_decay(decays):
    """Pick the likeliest (decay, percent) entry.

    An entry with a known percent always beats one whose percent is unknown;
    among unknown ones the first listed wins.
    """
    if not decays:
        return None, None
    best = decays[0]
    for entry in decays[1:]:
        if best[1] is None:
            best = entry
        elif entry[1] is not None and entry[1] > best[1]:
            best = entry
    return best


class NuclideChartCellModel:
    __slots__ = ("_protons", "_neutrons", "_exists", "_is_stable", "_decay_type", "_percent")

    def __init__(self, proton_number, neutron_number, data_table):
        record = data_table.lookup(proton_number, neutron_number)
        decay_type, percent = most_likely_decay(record.decays)
        object.__setattr__(self, "_protons", proton_number)
        object.__setattr__(self, "_neutrons", neutron_number)
        object.__setattr__(self, "_exists", record.exists)
        object.__setattr__(self, "_is_stable", record.is_stable)
        object.__setattr__(self, "_decay_type", decay_type)
        object.__setattr__(self, "_percent", percent)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def proton_number(self):
        return self._protons

    @property
    def neutron_number(self):
        return self._neutrons

    @property
    def mass_number(self):
        return self._protons + self._neutrons

    @property
    def exists(self):
        return self._exists

    @property
    def is_stable(self):
        return self._is_stable

    @property
    def decay_type(self):
        """Most likely decay, or ``None`` for stable nuclides and unknown decays."""
        return self._decay_type

    @property
    def decay_likelihood_percent(self):
        return self._percent

    @property
    def classification(self):
        if not self._exists:
            return CellClassification.DOES_NOT_EXIST
        if self._is_stable:
            return CellClassification.STABLE
        if self._decay_type is None:
            return CellClassification.UNSTABLE_UNKNOWN_DECAY
        return CellClassification.UNSTABLE_KNOWN_DECAY

    @property
    def color(self):
        classification = self.classification
        if classification == CellClassification.STABLE:
            return STABLE_COLOR
        if classification == CellClassification.UNSTABLE_UNKNOWN_DECAY:
            return UNKNOWN_COLOR
        if classification == CellClassification.DOES_NOT_EXIST:
            return DOES_NOT_EXIST_COLOR
        return DECAY_COLORS[self._decay_type]

    def __repr__(self):
        decay = self._decay_type.name if self._decay_type else None
        return f"NuclideChartCellModel(Z={self._protons}, N={self._neutrons}, {self.classification.name}, {decay})"


class NuclideChart:
    """Lazily built cells of the chart, one per visited (Z, N)."""

    def __init__(self, data_table):
        self.data_table = data_table
        self._cells = {}

    def cell(self, protons, neutrons):
        key = (protons, neutrons)
        if key not in self._cells:
            self._cells[key] = NuclideChartCellModel(protons, neutrons, self.data_table)
        return self._cells[key]

    def cells_around(self, protons, neutrons, radius=2):
        """Cells of the zoomed-in view centred on (Z, N); rows by proton number."""
        return [
            [
                self.cell(z, n)
                for n in range(max(0, neutrons - radius), neutrons + radius + 1)
            ]
            for z in range(max(0, protons - radius), protons + radius + 1)
        ]

    def __len__(self):
        return len(self._cells)

    def clear(self):
        self._cells.clear()


class DecayEquation(NamedTuple):
    initial_protons: int
    initial_mass: int
    decay_type: object   # DecayType or None
    final_protons: int
    final_mass: int


def decay_equation(cell):
    """Parent and daughter of the cell's most likely decay.

    Without a decay (stable, unknown or missing nuclide) the final numbers
    repeat the initial ones.
    """
    protons, mass = cell.proton_number, cell.mass_number
    decay_type = cell.decay_type if cell.exists else None
    if decay_type is None:
        return DecayEquation(protons, mass, None, protons, mass)

    props = DECAY_PROPERTIES[decay_type]
    return DecayEquation(
        protons,
        mass,
        decay_type,
        protons - props.proton_number,
        mass - props.mass_number,
    )

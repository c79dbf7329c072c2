"""
Read-only reference data for light nuclides.

The simulation core only asks questions by (protons, neutrons): does the
nuclide exist, is it stable, what is its half-life and which decays does
it undergo. ``NuclideDataTable`` answers them from the ``NUCLIDES`` table
below; tests may build one from their own table.
"""
from typing import NamedTuple
import math

from constants import (
    DAY,
    HALF_LIFE_NUMBER_LINE_END_EXPONENT,
    HOUR,
    MINUTE,
    YEAR,
)
from particles import DecayType

STABLE = float('inf')

ALPHA = DecayType.ALPHA_DECAY
BETA_MINUS = DecayType.BETA_MINUS_DECAY
BETA_PLUS = DecayType.BETA_PLUS_DECAY
PROTON = DecayType.PROTON_EMISSION
NEUTRON = DecayType.NEUTRON_EMISSION

# Format: (Z, N): (half_life_in_seconds, [(decay, percent), ...])
# half_life is STABLE for stable nuclides and None when it was never measured.
# A percent of None means the branch is known but its likelihood is not.
NUCLIDES = {
    # Free neutron
    (0, 1): (613.9, [(BETA_MINUS, 100.0)]),

    # Hydrogen isotopes
    (1, 0): (STABLE, []),                       # H-1
    (1, 1): (STABLE, []),                       # H-2 (deuterium)
    (1, 2): (12.32 * YEAR, [(BETA_MINUS, 100.0)]),  # H-3 (tritium)
    (1, 3): (1.39e-22, [(NEUTRON, 100.0)]),     # H-4
    (1, 4): (8.6e-23, [(NEUTRON, 100.0)]),      # H-5
    (1, 5): (2.94e-22, [(NEUTRON, 100.0)]),     # H-6
    (1, 6): (None, []),                         # H-7: decay not measured

    # Helium isotopes (He-2 does not exist)
    (2, 1): (STABLE, []),                       # He-3
    (2, 2): (STABLE, []),                       # He-4
    (2, 3): (7.04e-22, [(NEUTRON, 100.0)]),     # He-5
    (2, 4): (0.8067, [(BETA_MINUS, 100.0)]),    # He-6
    (2, 5): (2.51e-21, [(NEUTRON, 100.0)]),     # He-7
    (2, 6): (0.1191, [(BETA_MINUS, 100.0)]),    # He-8
    (2, 7): (2.5e-21, [(NEUTRON, 100.0)]),      # He-9
    (2, 8): (2.6e-22, [(NEUTRON, 100.0)]),      # He-10

    # Lithium isotopes
    (3, 1): (9.1e-23, [(PROTON, 100.0)]),       # Li-4
    (3, 2): (3.7e-22, [(PROTON, 100.0)]),       # Li-5
    (3, 3): (STABLE, []),                       # Li-6
    (3, 4): (STABLE, []),                       # Li-7
    (3, 5): (0.8399, [(BETA_MINUS, 100.0)]),    # Li-8
    (3, 6): (0.1782, [(BETA_MINUS, 100.0)]),    # Li-9
    (3, 7): (2.0e-21, [(NEUTRON, 100.0)]),      # Li-10
    (3, 8): (8.75e-3, [(BETA_MINUS, 100.0)]),   # Li-11
    (3, 9): (None, [(NEUTRON, None)]),          # Li-12
    (3, 10): (3.3e-21, [(NEUTRON, 100.0)]),     # Li-13

    # Beryllium isotopes
    (4, 2): (5.0e-21, [(PROTON, 100.0)]),       # Be-6
    (4, 3): (53.22 * DAY, [(BETA_PLUS, 100.0)]),  # Be-7
    (4, 4): (8.19e-17, [(ALPHA, 100.0)]),       # Be-8
    (4, 5): (STABLE, []),                       # Be-9
    (4, 6): (1.51e6 * YEAR, [(BETA_MINUS, 100.0)]),  # Be-10
    (4, 7): (13.76, [(BETA_MINUS, 100.0)]),     # Be-11
    (4, 8): (21.5e-3, [(BETA_MINUS, 100.0)]),   # Be-12
    (4, 9): (1.0e-21, [(NEUTRON, 100.0)]),      # Be-13
    (4, 10): (4.35e-3, [(BETA_MINUS, 100.0)]),  # Be-14
    (4, 11): (7.9e-22, [(NEUTRON, 100.0)]),     # Be-15
    (4, 12): (6.5e-22, [(NEUTRON, 100.0)]),     # Be-16

    # Boron isotopes
    (5, 2): (5.7e-22, [(PROTON, 100.0)]),       # B-7
    (5, 3): (0.77, [(BETA_PLUS, 100.0)]),       # B-8
    (5, 4): (8.0e-19, [(PROTON, 100.0)]),       # B-9
    (5, 5): (STABLE, []),                       # B-10
    (5, 6): (STABLE, []),                       # B-11
    (5, 7): (0.0202, [(BETA_MINUS, 100.0), (ALPHA, 0.6)]),  # B-12
    (5, 8): (0.01736, [(BETA_MINUS, 100.0)]),   # B-13
    (5, 9): (0.0125, [(BETA_MINUS, 100.0)]),    # B-14
    (5, 10): (9.93e-3, [(BETA_MINUS, 100.0)]),  # B-15
    (5, 11): (4.6e-22, [(NEUTRON, 100.0)]),     # B-16
    (5, 12): (5.08e-3, [(BETA_MINUS, 100.0)]),  # B-17

    # Carbon isotopes
    (6, 2): (3.5e-21, [(PROTON, 100.0)]),       # C-8
    (6, 3): (0.1265, [(BETA_PLUS, 100.0), (PROTON, 23.0)]),  # C-9
    (6, 4): (19.3, [(BETA_PLUS, 100.0)]),       # C-10
    (6, 5): (1221.8, [(BETA_PLUS, 100.0)]),     # C-11
    (6, 6): (STABLE, []),                       # C-12
    (6, 7): (STABLE, []),                       # C-13
    (6, 8): (5730 * YEAR, [(BETA_MINUS, 100.0)]),  # C-14
    (6, 9): (2.449, [(BETA_MINUS, 100.0)]),     # C-15
    (6, 10): (0.747, [(BETA_MINUS, 100.0)]),    # C-16
    (6, 11): (0.193, [(BETA_MINUS, 100.0)]),    # C-17
    (6, 12): (0.092, [(BETA_MINUS, 100.0)]),    # C-18

    # Nitrogen isotopes
    (7, 3): (2.0e-22, [(PROTON, 100.0)]),       # N-10
    (7, 4): (5.5e-22, [(PROTON, 100.0)]),       # N-11
    (7, 5): (0.011, [(BETA_PLUS, 100.0)]),      # N-12
    (7, 6): (597.9, [(BETA_PLUS, 100.0)]),      # N-13
    (7, 7): (STABLE, []),                       # N-14
    (7, 8): (STABLE, []),                       # N-15
    (7, 9): (7.13, [(BETA_MINUS, 100.0)]),      # N-16
    (7, 10): (4.173, [(BETA_MINUS, 100.0), (NEUTRON, 95.1)]),  # N-17
    (7, 11): (0.619, [(BETA_MINUS, 100.0)]),    # N-18
    (7, 12): (0.336, [(BETA_MINUS, 100.0)]),    # N-19

    # Oxygen isotopes
    (8, 4): (8.9e-22, [(PROTON, 100.0)]),       # O-12
    (8, 5): (8.58e-3, [(BETA_PLUS, 100.0)]),    # O-13
    (8, 6): (70.62, [(BETA_PLUS, 100.0)]),      # O-14
    (8, 7): (122.24, [(BETA_PLUS, 100.0)]),     # O-15
    (8, 8): (STABLE, []),                       # O-16
    (8, 9): (STABLE, []),                       # O-17
    (8, 10): (STABLE, []),                      # O-18
    (8, 11): (26.88, [(BETA_MINUS, 100.0)]),    # O-19
    (8, 12): (13.51, [(BETA_MINUS, 100.0)]),    # O-20

    # Fluorine isotopes
    (9, 5): (5.0e-22, [(PROTON, 100.0)]),       # F-14
    (9, 6): (1.1e-21, [(PROTON, 100.0)]),       # F-15
    (9, 7): (1.1e-20, [(PROTON, 100.0)]),       # F-16
    (9, 8): (64.49, [(BETA_PLUS, 100.0)]),      # F-17
    (9, 9): (6586.2, [(BETA_PLUS, 100.0)]),     # F-18
    (9, 10): (STABLE, []),                      # F-19
    (9, 11): (11.07, [(BETA_MINUS, 100.0)]),    # F-20
    (9, 12): (4.158, [(BETA_MINUS, 100.0)]),    # F-21

    # Neon isotopes
    (10, 6): (9.0e-21, [(PROTON, 100.0)]),      # Ne-16
    (10, 7): (0.1092, [(BETA_PLUS, 100.0)]),    # Ne-17
    (10, 8): (1.672, [(BETA_PLUS, 100.0)]),     # Ne-18
    (10, 9): (17.22, [(BETA_PLUS, 100.0)]),     # Ne-19
    (10, 10): (STABLE, []),                     # Ne-20
    (10, 11): (STABLE, []),                     # Ne-21
    (10, 12): (STABLE, []),                     # Ne-22
}

ELEMENT_SYMBOLS = [
    "", "H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne", "Na", "Mg", "Al", "Si", "P",
    "S", "Cl", "Ar", "K", "Ca", "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr", "Rb", "Sr", "Y", "Zr", "Nb", "Mo", "Tc", "Ru", "Rh",
    "Pd", "Ag", "Cd", "In", "Sn", "Sb", "Te", "I", "Xe", "Cs", "Ba", "La", "Ce", "Pr", "Nd",
    "Pm", "Sm", "Eu", "Gd", "Tb", "Dy", "Ho", "Er", "Tm", "Yb", "Lu", "Hf", "Ta", "W", "Re",
    "Os", "Ir", "Pt", "Au", "Hg", "Tl", "Pb", "Bi", "Po", "At", "Rn", "Fr", "Ra", "Ac", "Th",
    "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf", "Es", "Fm", "Md", "No", "Lr", "Rf", "Db",
    "Sg", "Bh", "Hs", "Mt", "Ds", "Rg", "Cn", "Nh", "Fl", "Mc", "Lv", "Ts", "Og",
]

ELEMENT_NAMES = [
    "", "Hydrogen", "Helium", "Lithium", "Beryllium", "Boron", "Carbon", "Nitrogen", "Oxygen",
    "Fluorine", "Neon", "Sodium", "Magnesium", "Aluminum", "Silicon", "Phosphorus", "Sulfur",
    "Chlorine", "Argon", "Potassium", "Calcium", "Scandium", "Titanium", "Vanadium", "Chromium",
    "Manganese", "Iron", "Cobalt", "Nickel", "Copper", "Zinc", "Gallium", "Germanium", "Arsenic",
    "Selenium", "Bromine", "Krypton", "Rubidium", "Strontium", "Yttrium", "Zirconium", "Niobium",
    "Molybdenum", "Technetium", "Ruthenium", "Rhodium", "Palladium", "Silver", "Cadmium", "Indium",
    "Tin", "Antimony", "Tellurium", "Iodine", "Xenon", "Cesium", "Barium", "Lanthanum", "Cerium",
    "Praseodymium", "Neodymium", "Promethium", "Samarium", "Europium", "Gadolinium", "Terbium",
    "Dysprosium", "Holmium", "Erbium", "Thulium", "Ytterbium", "Lutetium", "Hafnium", "Tantalum",
    "Tungsten", "Rhenium", "Osmium", "Iridium", "Platinum", "Gold", "Mercury", "Thallium", "Lead",
    "Bismuth", "Polonium", "Astatine", "Radon", "Francium", "Radium", "Actinium", "Thorium",
    "Protactinium", "Uranium", "Neptunium", "Plutonium", "Americium", "Curium", "Berkelium",
    "Californium", "Einsteinium", "Fermium", "Mendelevium", "Nobelium", "Lawrencium",
    "Rutherfordium", "Dubnium", "Seaborgium", "Bohrium", "Hassium", "Meitnerium", "Darmstadtium",
    "Roentgenium", "Copernicium", "Nihonium", "Flerovium", "Moscovium", "Livermorium",
    "Tennessine", "Oganesson",
]

# Reference points for the half-life number line, in seconds
TIMESCALE_POINTS = [
    ("time for light to cross a nucleus", 1e-23),
    ("time for light to cross an atom", 1e-19),
    ("time for light to cross one thousand atoms", 1e-16),
    ("time for sound to travel one millimeter", 2e-6),
    ("a blink of an eye", 1 / 3),
    ("one minute", MINUTE),
    ("one year", YEAR),
    ("average human lifespan", 72.6 * YEAR),
    ("age of the universe", 13.77e9 * YEAR),
    ("lifetime of longest-lived stars", 450e18),
]


class NuclideRecord(NamedTuple):
    protons: int
    neutrons: int
    exists: bool
    is_stable: bool
    half_life: object  # float, STABLE, or None when unknown
    decays: tuple      # ((DecayType, percent or None), ...) most likely first


def _rank_decays(decays):
    """Order decays by likelihood; branches with unknown percent go last."""
    known = sorted((d for d in decays if d[1] is not None), key=lambda d: -d[1])
    unknown = [d for d in decays if d[1] is None]
    return tuple(known + unknown)


class NuclideDataTable:
    """Answers existence, stability, half-life and decay queries by (Z, N).

    Every query is pure; the table is never modified after construction.
    """

    def __init__(self, nuclides=None):
        source = NUCLIDES if nuclides is None else nuclides
        self._records = {}
        for (z, n), (half_life, decays) in source.items():
            self._records[(z, n)] = NuclideRecord(
                z, n, True, half_life == STABLE, half_life, _rank_decays(decays)
            )

    def lookup(self, protons, neutrons):
        record = self._records.get((protons, neutrons))
        if record is None:
            return NuclideRecord(protons, neutrons, False, False, None, ())
        return record

    def exists(self, protons, neutrons):
        return (protons, neutrons) in self._records

    def is_stable(self, protons, neutrons):
        return self.lookup(protons, neutrons).is_stable

    def half_life(self, protons, neutrons):
        """Half-life in seconds, ``inf`` when stable, ``None`` when unknown."""
        return self.lookup(protons, neutrons).half_life

    def decay_options(self, protons, neutrons):
        return list(self.lookup(protons, neutrons).decays)

    # Neighbours on the chart, used to decide which arrow buttons make sense

    def does_next_isotope_exist(self, protons, neutrons):
        return self.exists(protons, neutrons + 1)

    def does_next_isotone_exist(self, protons, neutrons):
        return self.exists(protons + 1, neutrons)

    def does_next_nuclide_exist(self, protons, neutrons):
        return self.exists(protons + 1, neutrons + 1)

    def does_previous_isotope_exist(self, protons, neutrons):
        return neutrons > 0 and self.exists(protons, neutrons - 1)

    def does_previous_isotone_exist(self, protons, neutrons):
        return protons > 0 and self.exists(protons - 1, neutrons)

    def does_previous_nuclide_exist(self, protons, neutrons):
        return protons > 0 and neutrons > 0 and self.exists(protons - 1, neutrons - 1)

    def half_life_display_value(self, protons, neutrons):
        """Value the half-life number line shows for a nuclide.

        Stable nuclides sit at the far end of the line, unknown half-lives are
        reported as -1 and nuclides that do not exist as 0.
        """
        record = self.lookup(protons, neutrons)
        if not record.exists:
            return 0
        if record.is_stable:
            return 10 ** HALF_LIFE_NUMBER_LINE_END_EXPONENT
        if record.half_life is None:
            return -1
        return record.half_life


def element_symbol(atomic_number):
    """Get the element symbol for an atomic number"""
    if 0 <= atomic_number < len(ELEMENT_SYMBOLS):
        return ELEMENT_SYMBOLS[atomic_number]
    return f"E{atomic_number}"


def element_name(atomic_number):
    if 0 <= atomic_number < len(ELEMENT_NAMES):
        return ELEMENT_NAMES[atomic_number]
    return f"Element {atomic_number}"


def format_time_value_with_unit(seconds):
    """Format a time value with appropriate units based on scale"""
    if seconds is None:
        return "unknown"
    if math.isinf(seconds):
        return "stable"
    abs_seconds = abs(seconds)
    if abs_seconds == 0:
        return "0 s"
    elif abs_seconds < 1e-15:
        return f"{seconds:.2e} s"
    elif abs_seconds < 1e-12:
        return f"{seconds * 1e15:.2f} fs"
    elif abs_seconds < 1e-9:
        return f"{seconds * 1e12:.2f} ps"
    elif abs_seconds < 1e-6:
        return f"{seconds * 1e9:.2f} ns"
    elif abs_seconds < 1e-3:
        return f"{seconds * 1e6:.2f} μs"
    elif abs_seconds < 1:
        return f"{seconds * 1e3:.2f} ms"
    elif abs_seconds < MINUTE:
        return f"{seconds:.2f} s"
    elif abs_seconds < HOUR:
        return f"{seconds / MINUTE:.2f} min"
    elif abs_seconds < DAY:
        return f"{seconds / HOUR:.2f} h"
    elif abs_seconds < YEAR:
        return f"{seconds / DAY:.2f} days"
    else:
        return f"{seconds / YEAR:.2f} years"


def nearest_timescale_point(seconds):
    """Return the reference point closest to ``seconds`` on a log scale."""
    if seconds is None or seconds <= 0 or math.isinf(seconds):
        return None
    exponent = math.log10(seconds)
    return min(TIMESCALE_POINTS, key=lambda point: abs(math.log10(point[1]) - exponent))

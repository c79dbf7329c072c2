"""
Simulation configuration.

``SimulationConfig`` replaces ad-hoc global start-up state: a screen is
built from one of these, and ``validate`` checks it against the same
existence rule the running model uses. Defaults describe the nucleus
builder screen (up to Neon-22, empty at start).
"""

from __future__ import annotations

from dataclasses import dataclass

from constants import (
    DOES_NOT_EXIST_GRACE_PERIOD,
    MAX_NEUTRONS,
    MAX_PROTONS,
    NUCLEON_CAPTURE_RADIUS,
    TOTAL_SHELL_CAPACITY,
)
from errors import ConfigError


@dataclass
class SimulationConfig:
    """Start-up parameters for one simulation screen."""

    # Nuclide the screen starts with
    initial_protons: int = 0
    initial_neutrons: int = 0

    # Upper bounds for the nucleon counts
    max_protons: int = MAX_PROTONS
    max_neutrons: int = MAX_NEUTRONS

    # Existence guard
    grace_period: float = DOES_NOT_EXIST_GRACE_PERIOD

    # Drop distance that counts as "back in the nucleus"
    capture_radius: float = NUCLEON_CAPTURE_RADIUS

    # Seed for escape directions of emitted particles
    seed: int = 42

    # Raise on contract violations (development, tests). When False they are
    # logged and the offending call does nothing.
    strict_contracts: bool = True

    def validate(self, data_table=None) -> None:
        """Raise ``ConfigError`` if the configuration cannot be used.

        When a data table is given the initial nuclide must exist, unless
        the nucleus starts empty.
        """
        for name in ("max_protons", "max_neutrons"):
            value = getattr(self, name)
            if value < 0 or value > TOTAL_SHELL_CAPACITY:
                raise ConfigError(f"{name}={value} must be within 0..{TOTAL_SHELL_CAPACITY}")
        if not 0 <= self.initial_protons <= self.max_protons:
            raise ConfigError(f"initial_protons={self.initial_protons} outside 0..{self.max_protons}")
        if not 0 <= self.initial_neutrons <= self.max_neutrons:
            raise ConfigError(f"initial_neutrons={self.initial_neutrons} outside 0..{self.max_neutrons}")
        if self.grace_period < 0:
            raise ConfigError("grace_period must not be negative")
        if self.capture_radius <= 0:
            raise ConfigError("capture_radius must be positive")

        if data_table is not None and self.initial_protons + self.initial_neutrons > 0:
            if not data_table.exists(self.initial_protons, self.initial_neutrons):
                raise ConfigError(
                    f"Initial nuclide Z={self.initial_protons}, N={self.initial_neutrons} does not exist"
                )

    def to_dict(self) -> dict:
        """Return a dict representation of the configuration."""
        return self.__dict__.copy()

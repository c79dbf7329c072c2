"""
Error types raised by the nucleon accounting and decay core.
"""


class NucleusError(Exception):
    """Base class for contract violations in the nucleus core."""


class NoCapacityError(NucleusError):
    """A nucleon was placed beyond shell capacity or the allowed count."""


class InsufficientNucleonsError(NucleusError):
    """A decay or decrement was requested without enough settled nucleons."""


class NotFoundError(NucleusError):
    """A handle refers to a nucleon the ledger no longer tracks."""


class ConfigError(NucleusError, ValueError):
    """The simulation configuration is invalid."""

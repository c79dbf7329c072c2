#!/usr/bin/env python
"""
Build a Nucleus
Add protons and neutrons to a nucleus and watch it decay
"""
import argparse
import logging
import sys

from config import SimulationConfig
from constants import DOES_NOT_EXIST_GRACE_PERIOD, MAX_NEUTRONS, MAX_PROTONS
from errors import ConfigError

logger = logging.getLogger("NuclearSim")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Build a Nucleus: nucleon shells and radioactive decay')
    parser.add_argument('--protons', type=int, default=0, help='Protons in the starting nucleus')
    parser.add_argument('--neutrons', type=int, default=0, help='Neutrons in the starting nucleus')
    parser.add_argument('--max-protons', type=int, default=MAX_PROTONS, help='Largest proton count allowed')
    parser.add_argument('--max-neutrons', type=int, default=MAX_NEUTRONS, help='Largest neutron count allowed')
    parser.add_argument('--grace-period', type=float, default=DOES_NOT_EXIST_GRACE_PERIOD,
                        help='Seconds a nuclide that does not exist stays before it is corrected')
    parser.add_argument('--seed', type=int, default=42, help='Seed for emitted particle directions')
    parser.add_argument('--strict', action='store_true', help='Raise on rejected actions instead of logging them')
    parser.add_argument('--debug', action='store_true', help='Log every nucleon transition')
    return parser.parse_args(argv)


def config_from_args(args):
    return SimulationConfig(
        initial_protons=args.protons,
        initial_neutrons=args.neutrons,
        max_protons=args.max_protons,
        max_neutrons=args.max_neutrons,
        grace_period=args.grace_period,
        seed=args.seed,
        strict_contracts=args.strict,
    )


def main(argv=None):
    """Main entry point for Build a Nucleus."""
    args = parse_args(argv)
    config = config_from_args(args)

    # Imported here so a bad command line fails before pygame opens a window
    from nuclear_sim import NuclearSimulation
    from nuclide_data import NuclideDataTable

    if args.debug:
        logging.getLogger("NuclearSim").setLevel(logging.DEBUG)

    try:
        config.validate(NuclideDataTable())
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    print("Interactive controls:")
    print("  1/2: add/remove proton    3/4: add/remove neutron    5/6: both")
    print("  A: alpha  B: beta-minus  V: beta-plus  P: proton emission  N: neutron emission")
    print("  U: undo decay  R: reset  drag a nucleon out of the nucleus to remove it")
    print("  Escape key: Exit simulation")

    simulation = NuclearSimulation(config)
    simulation.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

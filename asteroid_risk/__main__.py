"""
Command-line interface for asteroid_risk.

Usage:
    # Effects of a 500 m stony impactor at 20 km/s, 45 degrees, on land
    python -m asteroid_risk impact --diameter 500 --density 3000 --velocity 20 --angle 45

    # Same impactor into 4 km of ocean, using a composition preset
    python -m asteroid_risk impact --diameter 500 --composition stone --velocity 20 --water-depth 4000

    # Positions of the bundled sample NEOs 100 days after J2000
    python -m asteroid_risk orbit --time 100 --time-units jd_day
"""

import argparse
import logging
import sys

import numpy as np
import openmdao.utils.units as om_units

from asteroid_risk.catalog import load_catalog, catalog_positions
from asteroid_risk.impact import ImpactParameters, compute_impact
from asteroid_risk.units import LENGTH_UNITS, VELOCITY_UNITS


def _setup_impact_parser(subparsers):
    """
    Set up the impact subcommand parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        The subparsers object from the main parser

    Returns
    -------
    argparse.ArgumentParser
        The configured impact parser
    """
    impact_parser = subparsers.add_parser(
        'impact',
        help='Compute crater, energy, thermal and casualty estimates for an impact',
    )
    impact_parser.add_argument('--diameter', type=float, required=True,
                               help='Impactor diameter')
    impact_parser.add_argument('--diameter-unit', default='meter', choices=sorted(LENGTH_UNITS),
                               help='Unit of --diameter (default: meter)')
    density_group = impact_parser.add_mutually_exclusive_group(required=True)
    density_group.add_argument('--density', type=float,
                               help='Impactor density in kg/m^3')
    density_group.add_argument('--composition', choices=['iron', 'stone', 'carbon', 'ice'],
                               help='Use the nominal density of a composition')
    impact_parser.add_argument('--velocity', type=float, required=True,
                               help='Impact velocity')
    impact_parser.add_argument('--velocity-unit', default='km/s', choices=sorted(VELOCITY_UNITS),
                               help='Unit of --velocity (default: km/s)')
    impact_parser.add_argument('--angle', type=float, default=90.0,
                               help='Impact angle from the surface in degrees (default: 90)')
    impact_parser.add_argument('--water-depth', type=float, default=None,
                               help='Water depth at the impact site in meters (omit for land)')
    impact_parser.add_argument('--population-density', type=float, default=0.0,
                               help='People per km^2 around the impact site (default: 0)')
    impact_parser.add_argument('--truncate', action='store_true',
                               help='Truncate results toward zero for display')
    impact_parser.set_defaults(func=_run_impact)
    return impact_parser


def _setup_orbit_parser(subparsers):
    """
    Set up the orbit subcommand parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        The subparsers object from the main parser

    Returns
    -------
    argparse.ArgumentParser
        The configured orbit parser
    """
    orbit_parser = subparsers.add_parser(
        'orbit',
        help='Print positions of catalog bodies at a given time',
    )
    orbit_parser.add_argument('--catalog', type=str, default=None,
                              help='JSON catalog of JPL small-body records (default: bundled sample)')
    orbit_parser.add_argument('--time', type=float, default=0.0,
                              help='Clock time since J2000 (default: 0)')
    orbit_parser.add_argument('--time-units', type=str, default='s',
                              help="Unit of --time, e.g. 's', 'jd_day', 'sidereal_year' (default: s)")
    orbit_parser.add_argument('--length-units', type=str, default='million_km',
                              help="Unit of the printed positions (default: million_km)")
    orbit_parser.add_argument('--name', type=str, default=None,
                              help='Only print bodies whose name contains this text')
    orbit_parser.set_defaults(func=_run_orbit)
    return orbit_parser


def _run_impact(args):
    params = ImpactParameters.create(
        diameter=args.diameter,
        diameter_unit=args.diameter_unit,
        density=args.density,
        composition=args.composition,
        velocity=args.velocity,
        velocity_unit=args.velocity_unit,
        angle=args.angle,
        water_depth=args.water_depth,
        population_density=args.population_density
    )
    result = compute_impact(params)
    if args.truncate:
        result = result.truncated()

    for name, value in result.model_dump().items():
        if value is None:
            continue
        print(f"{name:28s} {value:.6g}")
    return 0


def _run_orbit(args):
    bodies = load_catalog(args.catalog, time_units=args.time_units)
    if args.name:
        bodies = [body for body in bodies if args.name.lower() in body.name.lower()]
    if not bodies:
        print("No matching bodies in catalog", file=sys.stderr)
        return 1

    positions = catalog_positions(bodies, args.time)
    positions = np.asarray(om_units.convert_units(positions, 'million_km', args.length_units))

    print(f"# t = {args.time} {args.time_units}, positions in {args.length_units}")
    for body, r in zip(bodies, positions):
        print(f"{body.name:40s} {r[0]: .6e} {r[1]: .6e} {r[2]: .6e}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='asteroid_risk',
        description='Orbit propagation and impact effects for asteroid risk education',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    _setup_impact_parser(subparsers)
    _setup_orbit_parser(subparsers)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())

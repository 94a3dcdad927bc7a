# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

import openmdao.utils.units as om_units

from .constants import (
    # Constants
    MKM_PER_AU,
    DAY,
    SIDEREAL_YEAR,
    JD_J2000,
    G_EARTH,
    J_PER_TON_TNT,
    TONS_PER_MEGATON,
    COMPOSITION_DENSITIES,
)

# Add the units used by the catalog adapter to OpenMDAO's recognized units.
om_units.add_unit('jd_day', f'{DAY}*s')
om_units.add_unit('sidereal_year', f'{SIDEREAL_YEAR}*s')
om_units.add_unit('million_km', '1.0e9*m')

from .orbital_elements import OrbitalElements, validate_elements

from .kepler import (
    # Functions
    mean_anomaly,
    kepler_start3,
    kepler_eps3,
    solve_kepler,
    solve_kepler_with_count,
    solve_kepler_vec,
)

from .orbit import (
    # Orbit engine
    Orbit,
    perifocal_to_reference,
    position_at,
    position_and_iterations,
    positions_at,
    positions_over_time,
    ellipse_points,
    orbit_center,
)

from .units import (
    UnsupportedUnitError,
    to_meters,
    to_meters_per_second,
    convert_time,
)

from .impact import (
    # Impact calculator
    ImpactParameters,
    ImpactResult,
    compute_impact,
    density_for_composition,
)

from .catalog import (
    # Catalog adapter
    CatalogRecord,
    CatalogBody,
    record_to_elements,
    parse_records,
    load_catalog,
    catalog_positions,
)

from .population import get_population_density, lookup_population_density

__all__ = [
    # Constants
    "MKM_PER_AU",
    "DAY",
    "SIDEREAL_YEAR",
    "JD_J2000",
    "G_EARTH",
    "J_PER_TON_TNT",
    "TONS_PER_MEGATON",
    "COMPOSITION_DENSITIES",

    # Named tuples
    "OrbitalElements",
    "validate_elements",

    # Kepler solver
    "mean_anomaly",
    "kepler_start3",
    "kepler_eps3",
    "solve_kepler",
    "solve_kepler_with_count",
    "solve_kepler_vec",

    # Orbit engine
    "Orbit",
    "perifocal_to_reference",
    "position_at",
    "position_and_iterations",
    "positions_at",
    "positions_over_time",
    "ellipse_points",
    "orbit_center",

    # Units
    "UnsupportedUnitError",
    "to_meters",
    "to_meters_per_second",
    "convert_time",

    # Impact calculator
    "ImpactParameters",
    "ImpactResult",
    "compute_impact",
    "density_for_composition",

    # Catalog
    "CatalogRecord",
    "CatalogBody",
    "record_to_elements",
    "parse_records",
    "load_catalog",
    "catalog_positions",

    # Population lookup
    "get_population_density",
    "lookup_population_density",
]

"""
Physical, unit and model constants for asteroid_risk.

This module contains all constants used by the orbit engine, the catalog
adapter and the impact calculator.
"""

# Basic astronomical and time constants
MKM_PER_AU = 149.5978707  # millions of km per AU
DAY = 86400.0  # seconds per day
SIDEREAL_YEAR_DAYS = 365.256363  # days per sidereal year
SIDEREAL_YEAR = SIDEREAL_YEAR_DAYS * DAY  # seconds per sidereal year
JD_J2000 = 2451545.0  # Julian date of the J2000.0 epoch (TDB)

# Kepler solver tuning
KEPLER_TOL = 1e-12  # convergence tolerance on successive eccentric anomalies (rad)
KEPLER_MAX_ITER = 100  # hard iteration cap
ELLIPSE_POINTS = 80  # default sample count for the static orbit curve

# Impact calculator
G_EARTH = 9.81  # m/s^2
MIN_IMPACT_VELOCITY = 11000.0  # m/s, Earth escape velocity
MAX_IMPACT_VELOCITY = 72000.0  # m/s, retrograde heliocentric ceiling
MAX_IMPACT_ANGLE = 90.0  # degrees from the surface
WATER_DENSITY = 1000.0  # kg/m^3
ROCK_DENSITY = 2500.0  # kg/m^3, generic crustal rock/soil

# Impactor densities by composition (kg/m^3)
COMPOSITION_DENSITIES = {
    'iron': 7800.0,
    'stone': 3000.0,
    'carbon': 2000.0,
    'ice': 1000.0,
}

# Energy equivalences
J_PER_TON_TNT = 4.184e9  # joules per (metric) ton of TNT
TONS_PER_MEGATON = 1.0e6

# Fireball and thermal radiation
FIREBALL_COEFF = 0.002  # m / J^(1/3)
LUMINOUS_EFFICIENCY = 3e-3  # fraction of impact energy radiated as heat
THERMAL_ENERGY_SCALE = 1e-6  # J -> MJ, matches thresholds below

# Thermal fluence thresholds (MJ/m^2), most to least severe
CLOTHING_IGNITION_FLUENCE = 1.0
THIRD_DEGREE_BURN_FLUENCE = 0.42
SECOND_DEGREE_BURN_FLUENCE = 0.25
FIRST_DEGREE_BURN_FLUENCE = 0.13

# Population density is people per km^2; areas are computed in m^2
KM2_PER_M2 = 1e-6

# Transient crater scaling
CRATER_COEFF = 1.161
CRATER_DEPTH_RATIO = 8.0 ** 0.5  # diameter / depth

# Secondary effects
SEISMIC_SLOPE = 0.67
SEISMIC_OFFSET = 5.87
AIRBLAST_COEFF = 3000.0  # m / Mt^(1/3)
TSUNAMI_AMPLITUDE_RATIO = 0.14  # initial wave height / transient crater diameter

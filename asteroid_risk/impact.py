"""
Impact calculator.

Turns impactor and target parameters into crater, energy, thermal
radiation and casualty estimates using simplified point-source scaling
laws. Suitable for an educational demo, not for hazard assessment.

All lengths are in meters, energies in joules, and population densities
in people per km^2.
"""
import math
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from asteroid_risk.constants import (
    G_EARTH,
    MIN_IMPACT_VELOCITY, MAX_IMPACT_VELOCITY, MAX_IMPACT_ANGLE,
    WATER_DENSITY, ROCK_DENSITY, COMPOSITION_DENSITIES,
    J_PER_TON_TNT, TONS_PER_MEGATON,
    FIREBALL_COEFF, LUMINOUS_EFFICIENCY, THERMAL_ENERGY_SCALE,
    CLOTHING_IGNITION_FLUENCE, THIRD_DEGREE_BURN_FLUENCE,
    SECOND_DEGREE_BURN_FLUENCE, FIRST_DEGREE_BURN_FLUENCE,
    KM2_PER_M2,
    CRATER_COEFF, CRATER_DEPTH_RATIO,
    SEISMIC_SLOPE, SEISMIC_OFFSET, AIRBLAST_COEFF, TSUNAMI_AMPLITUDE_RATIO,
)
from asteroid_risk.units import length_unit, velocity_unit, to_meters, to_meters_per_second


def density_for_composition(composition: str) -> float:
    """
    Nominal bulk density (kg/m^3) of an impactor composition.

    Args:
        composition: One of 'iron', 'stone', 'carbon', 'ice'

    Raises:
        ValueError: For an unknown composition.
    """
    key = composition.strip().lower()
    if key not in COMPOSITION_DENSITIES:
        raise ValueError(f"Unknown composition '{composition}'. "
                         f"Must be one of: {', '.join(COMPOSITION_DENSITIES)}")
    return COMPOSITION_DENSITIES[key]


class ImpactParameters(BaseModel):
    """
    Impactor and target description for a single simulation run.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    diameter: float = Field(..., gt=0.0, description="Impactor diameter, in diameter_unit")
    diameter_unit: str = Field('meter', description="meter, kilometer, foot or mile")
    density: float = Field(..., gt=0.0, description="Impactor density (kg/m^3), nominally 1000 to 8000")
    velocity: float = Field(..., gt=0.0, description="Impact velocity, in velocity_unit")
    velocity_unit: str = Field('km/s', description="km/s or mile/s")
    angle: float = Field(90.0, ge=0.0, description="Impact angle from the surface (deg), capped at 90")
    water_depth: Optional[float] = Field(
        None,
        description="Water depth at the impact site (m). None or negative means a land impact"
    )
    population_density: float = Field(0.0, ge=0.0, description="People per km^2 around the impact site")

    @field_validator('diameter_unit')
    @classmethod
    def validate_diameter_unit(cls, v):
        length_unit(v)
        return v

    @field_validator('velocity_unit')
    @classmethod
    def validate_velocity_unit(cls, v):
        velocity_unit(v)
        return v

    @model_validator(mode='after')
    def validate_energy_finite(self):
        energy = impact_energy(self.diameter_m, self.density, clamp_velocity(self.velocity_m_s))
        if not np.isfinite(energy):
            raise ValueError(f"Impact energy overflows for diameter={self.diameter} {self.diameter_unit} "
                             f"and density={self.density} kg/m^3")
        return self

    @property
    def target_is_water(self) -> bool:
        return self.water_depth is not None and self.water_depth >= 0.0

    @property
    def diameter_m(self) -> float:
        return to_meters(self.diameter, self.diameter_unit)

    @property
    def velocity_m_s(self) -> float:
        return to_meters_per_second(self.velocity, self.velocity_unit)

    @staticmethod
    def create(
        diameter: float,
        velocity: float,
        density: Optional[float] = None,
        composition: Optional[str] = None,
        diameter_unit: str = 'meter',
        velocity_unit: str = 'km/s',
        angle: float = 90.0,
        water_depth: Optional[float] = None,
        population_density: float = 0.0
    ) -> 'ImpactParameters':
        """
        Create impact parameters, taking the density either directly or
        from a named composition.

        Args:
            diameter: Impactor diameter
            velocity: Impact velocity
            density: Impactor density (kg/m^3)
            composition: 'iron', 'stone', 'carbon' or 'ice', used when
                density is not given
            diameter_unit: Unit of diameter
            velocity_unit: Unit of velocity
            angle: Impact angle from the surface (deg)
            water_depth: Water depth (m), None for land
            population_density: People per km^2

        Returns:
            ImpactParameters object
        """
        if density is None:
            if composition is None:
                raise ValueError("Either density or composition must be given")
            density = density_for_composition(composition)

        return ImpactParameters(
            diameter=diameter,
            diameter_unit=diameter_unit,
            density=density,
            velocity=velocity,
            velocity_unit=velocity_unit,
            angle=angle,
            water_depth=water_depth,
            population_density=population_density
        )


class ImpactResult(BaseModel):
    """
    Derived quantities of one impact. Plain numbers, no identity.
    """
    model_config = ConfigDict(frozen=True)

    crater_diameter: float = Field(..., description="Transient crater diameter (m)")
    crater_depth: float = Field(..., description="Transient crater depth (m)")
    energy_joules: float = Field(..., description="Kinetic energy at impact (J)")
    energy_tons_tnt: float = Field(..., description="Energy in tons of TNT")
    energy_megatons_tnt: float = Field(..., description="Energy in megatons of TNT")
    fireball_diameter: float = Field(..., description="Fireball diameter (m)")
    clothing_ignition_radius: float = Field(..., description="Radius of clothing ignition (m)")
    third_degree_burn_radius: float = Field(..., description="Radius of third-degree burns (m)")
    second_degree_burn_radius: float = Field(..., description="Radius of second-degree burns (m)")
    first_degree_burn_radius: float = Field(..., description="Radius of first-degree burns (m)")
    deaths: float = Field(..., description="Estimated deaths within the clothing ignition radius")
    injuries: float = Field(..., description="Estimated injuries within the first-degree burn radius")
    seismic_magnitude: float = Field(..., description="Richter-equivalent magnitude of the ground shaking")
    airblast_radius: float = Field(..., description="Radius of severe airblast damage (m)")
    tsunami_amplitude: Optional[float] = Field(None, description="Initial tsunami wave height (m), water impacts only")

    def truncated(self) -> 'ImpactResult':
        """
        Copy with every value truncated toward zero, for integer-style
        presentation. The magnitude is kept to one decimal.
        """
        update = {}
        for name, value in self.model_dump().items():
            if value is None:
                continue
            if name == 'seismic_magnitude':
                update[name] = math.trunc(value * 10.0) / 10.0
            else:
                update[name] = float(math.trunc(value))
        return self.model_copy(update=update)


def clamp_velocity(velocity: float) -> float:
    """Clamp an impact velocity (m/s) into the interplanetary encounter range."""
    return float(np.clip(velocity, MIN_IMPACT_VELOCITY, MAX_IMPACT_VELOCITY))


def clamp_angle(angle: float) -> float:
    """Cap an impact angle (deg) at vertical."""
    return min(angle, MAX_IMPACT_ANGLE)


def impact_energy(diameter: float, density: float, velocity: float) -> float:
    """
    Kinetic energy (J) of a spherical impactor.

    E = (π/12) ρ D^3 v^2, i.e. ½ m v^2 with m = ρ π D^3 / 6.
    """
    with np.errstate(over='ignore'):
        return float(np.pi / 12.0 * density * np.power(diameter, 3.0) * np.power(velocity, 2.0))


def tnt_equivalent(energy: float) -> tuple[float, float]:
    """
    Energy expressed in TNT equivalent.

    Returns:
        (tons of TNT, megatons of TNT)
    """
    tons = energy / J_PER_TON_TNT
    return tons, tons / TONS_PER_MEGATON


def fireball_diameter(energy: float) -> float:
    """Fireball diameter (m) for an impact energy in joules."""
    return FIREBALL_COEFF * np.cbrt(energy)


def thermal_radius(energy: float, fluence: float) -> float:
    """
    Distance (m) at which the thermal fluence drops to a threshold.

    Point-source radiation over a hemisphere: the fraction
    LUMINOUS_EFFICIENCY of the energy spreads over 2πr^2, so
    r = sqrt(η E / (2π φ)).

    Args:
        energy: Impact energy (J)
        fluence: Threshold fluence (MJ/m^2)
    """
    scaled_energy = energy * THERMAL_ENERGY_SCALE
    return np.sqrt(LUMINOUS_EFFICIENCY * scaled_energy / (2.0 * np.pi * fluence))


def casualties(radius: float, population_density: float) -> float:
    """Number of people within radius (m) at population_density (people/km^2)."""
    return np.pi * radius**2 * KM2_PER_M2 * population_density


def transient_crater_diameter(diameter: float, density: float, velocity: float,
                              angle: float, target_density: float, g: float = G_EARTH) -> float:
    """
    Transient crater diameter (m) from point-source crater scaling.

    Args:
        diameter: Impactor diameter (m)
        density: Impactor density (kg/m^3)
        velocity: Impact velocity (m/s)
        angle: Impact angle from the surface (deg)
        target_density: Target density (kg/m^3)
        g: Surface gravity (m/s^2)
    """
    sin_angle = np.sin(np.deg2rad(angle))
    return (CRATER_COEFF
            * np.cbrt(density / target_density)
            * diameter**0.78
            * velocity**0.44
            * g**-0.22
            * np.cbrt(sin_angle))


def transient_crater_depth(crater_diameter: float) -> float:
    """Transient crater depth (m), a fixed fraction 1/√8 of the diameter."""
    return crater_diameter / CRATER_DEPTH_RATIO


def seismic_magnitude(energy: float) -> float:
    """Richter-equivalent magnitude, M = 0.67 log10(E) - 5.87."""
    return SEISMIC_SLOPE * np.log10(energy) - SEISMIC_OFFSET


def airblast_radius(megatons: float) -> float:
    """Radius (m) of severe airblast damage, scaling with the cube root of yield."""
    return AIRBLAST_COEFF * np.cbrt(megatons)


def tsunami_amplitude(crater_diameter: float, water_depth: float) -> float:
    """Initial tsunami wave height (m), limited by the water depth."""
    return min(TSUNAMI_AMPLITUDE_RATIO * crater_diameter, water_depth)


def compute_impact(params: ImpactParameters) -> ImpactResult:
    """
    Compute the effects of an impact.

    Velocity is clamped into [11, 72] km/s and the angle is capped at 90°
    before any law is applied. Values keep full float precision; use
    ImpactResult.truncated() for integer-style presentation.

    Args:
        params: Impactor and target parameters

    Returns:
        ImpactResult
    """
    diameter = params.diameter_m
    velocity = clamp_velocity(params.velocity_m_s)
    angle = clamp_angle(params.angle)
    target_density = WATER_DENSITY if params.target_is_water else ROCK_DENSITY

    energy = impact_energy(diameter, params.density, velocity)
    tons, megatons = tnt_equivalent(energy)

    clothing = thermal_radius(energy, CLOTHING_IGNITION_FLUENCE)
    third = thermal_radius(energy, THIRD_DEGREE_BURN_FLUENCE)
    second = thermal_radius(energy, SECOND_DEGREE_BURN_FLUENCE)
    first = thermal_radius(energy, FIRST_DEGREE_BURN_FLUENCE)

    crater_diameter = transient_crater_diameter(diameter, params.density, velocity, angle, target_density)

    tsunami = None
    if params.target_is_water:
        tsunami = float(tsunami_amplitude(crater_diameter, params.water_depth))

    return ImpactResult(
        crater_diameter=float(crater_diameter),
        crater_depth=float(transient_crater_depth(crater_diameter)),
        energy_joules=float(energy),
        energy_tons_tnt=float(tons),
        energy_megatons_tnt=float(megatons),
        fireball_diameter=float(fireball_diameter(energy)),
        clothing_ignition_radius=float(clothing),
        third_degree_burn_radius=float(third),
        second_degree_burn_radius=float(second),
        first_degree_burn_radius=float(first),
        deaths=float(casualties(clothing, params.population_density)),
        injuries=float(casualties(first, params.population_density)),
        seismic_magnitude=float(seismic_magnitude(energy)),
        airblast_radius=float(airblast_radius(megatons)),
        tsunami_amplitude=tsunami
    )

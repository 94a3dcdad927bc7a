"""
Orbital elements representation for orbiting bodies.
"""
import math
from typing import NamedTuple

import jax.numpy as jnp


class OrbitalElements(NamedTuple):
    """
    Keplerian orbital elements of a body, parameterized by period and
    time of periapsis passage rather than by a gravitational parameter.

    All angular quantities are in radians. The length unit is arbitrary
    but must be shared by every body in a scene, and the time unit must
    match the caller's clock.

    Attributes:
        a: Semi-major axis
        e: Eccentricity (dimensionless, 0 ≤ e < 1)
        i: Inclination relative to the reference plane (radians)
        Omega: Longitude of the ascending node (radians)
        omega: Argument of periapsis (radians)
        period: Time for one revolution
        tau: Clock time of periapsis passage

    Note:
        - Only elliptical orbits are supported. Parabolic and hyperbolic
          element sets are rejected by validate_elements.
        - Being a NamedTuple, instances are immutable and can be passed
          directly through jax.jit and jax.vmap.
    """
    a: float  # semi-major axis
    e: float  # eccentricity
    i: float  # inclination (rad)
    Omega: float  # longitude of ascending node (rad)
    omega: float  # argument of periapsis (rad)
    period: float  # orbital period
    tau: float  # time of periapsis passage

    @property
    def b(self):
        """Semi-minor axis."""
        return self.a * jnp.sqrt(1.0 - self.e**2)

    @property
    def c(self):
        """Distance from the ellipse centre to the focus."""
        return self.e * self.a

    semi_minor_axis = b
    focal_offset = c

    @property
    def mean_motion(self):
        return 2.0 * jnp.pi / self.period

    def to_array(self) -> jnp.ndarray:
        """Return the seven elements as a 1D array in field order."""
        return jnp.array([float(x) for x in self], dtype=float)


def validate_elements(elements: OrbitalElements) -> OrbitalElements:
    """
    Check that an element set describes a closed, non-degenerate orbit.

    Args:
        elements: The element set to check.

    Returns:
        The same element set, for chaining.

    Raises:
        ValueError: If any element is not finite, if a <= 0, if e is
            outside [0, 1), or if period <= 0.
    """
    for name, value in zip(elements._fields, elements):
        if not math.isfinite(float(value)):
            raise ValueError(f"Orbital element '{name}' must be finite, got {value}")

    if elements.a <= 0.0:
        raise ValueError(f"Semi-major axis must be positive, got {elements.a}")
    if elements.e < 0.0:
        raise ValueError(f"Eccentricity must be non-negative, got {elements.e}")
    if elements.e >= 1.0:
        raise ValueError(f"Only elliptical orbits are supported (e < 1), got e={elements.e}")
    if elements.period <= 0.0:
        raise ValueError(f"Period must be positive, got {elements.period}")

    return elements

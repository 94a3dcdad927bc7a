"""
Orbit engine: position of a body along its Keplerian ellipse as a
function of clock time, and the static ellipse used for trail rendering.

Every point produced here, instantaneous or static, goes through
perifocal_to_reference so that a body always sits on its drawn orbit.
"""
import logging

import jax
import jax.numpy as jnp
from jax import jit
import numpy as np
import pydantic
from pydantic import ConfigDict, Field, field_validator

from asteroid_risk.constants import ELLIPSE_POINTS, KEPLER_TOL, KEPLER_MAX_ITER
from asteroid_risk.kepler import mean_anomaly, solve_kepler_vec, solve_kepler_with_count
from asteroid_risk.orbital_elements import OrbitalElements, validate_elements

logger = logging.getLogger(__name__)


def perifocal_to_reference(x_p, y_p, i, Omega, omega):
    """
    Rotate a point in the orbital plane into the reference frame.

    The rotation is R = R3(-Omega) * R1(-i) * R3(-omega): argument of
    periapsis about z, then inclination about x, then ascending node
    about z. Inputs broadcast, so x_p and y_p may be arrays of samples.

    Args:
        x_p: Perifocal x (towards periapsis)
        y_p: Perifocal y
        i: Inclination (rad)
        Omega: Longitude of the ascending node (rad)
        omega: Argument of periapsis (rad)

    Returns:
        (x, y, z) in the reference frame
    """
    cos_Omega = jnp.cos(Omega)
    sin_Omega = jnp.sin(Omega)
    cos_i = jnp.cos(i)
    sin_i = jnp.sin(i)
    cos_omega = jnp.cos(omega)
    sin_omega = jnp.sin(omega)

    x = (cos_Omega * cos_omega - sin_Omega * sin_omega * cos_i) * x_p + \
        (-cos_Omega * sin_omega - sin_Omega * cos_omega * cos_i) * y_p

    y = (sin_Omega * cos_omega + cos_Omega * sin_omega * cos_i) * x_p + \
        (-sin_Omega * sin_omega + cos_Omega * cos_omega * cos_i) * y_p

    z = (sin_omega * sin_i) * x_p + (cos_omega * sin_i) * y_p

    return x, y, z


def _perifocal_position(a, e, E):
    """Focus-centred position in the orbital plane for eccentric anomaly E."""
    x_p = a * (jnp.cos(E) - e)
    y_p = a * jnp.sqrt(1.0 - e**2) * jnp.sin(E)
    return x_p, y_p


@jit
def position_and_iterations(elements: OrbitalElements, t: float,
                            tol: float = KEPLER_TOL,
                            max_iter: int = KEPLER_MAX_ITER) -> tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """
    Position of a body at clock time t, along with the Kepler solver's
    iteration count and final step size.

    Args:
        elements: Orbital elements of the body
        t: Clock time, same unit as elements.period and elements.tau
        tol: Kepler solver tolerance on |E - E_previous|
        max_iter: Kepler solver iteration cap

    Returns:
        (position [x, y, z] in the length unit of elements.a, iterations,
        last |E - E_previous|)
    """
    a, e, i, Omega, omega, period, tau = elements

    M = mean_anomaly(t, period, tau)
    E, count, dE = solve_kepler_with_count(M, e, tol, max_iter)

    x_p, y_p = _perifocal_position(a, e, E)
    x, y, z = perifocal_to_reference(x_p, y_p, i, Omega, omega)

    return jnp.array([x, y, z]), count, dE


@jit
def position_at(elements: OrbitalElements, t: float) -> jnp.ndarray:
    """
    Position of a body at clock time t.

    Args:
        elements: Orbital elements of the body
        t: Clock time, same unit as elements.period and elements.tau

    Returns:
        Position [x, y, z] in the length unit of elements.a
    """
    r, _, _ = position_and_iterations(elements, t)
    return r


@jit
def positions_at(elements: jnp.ndarray, t: float) -> jnp.ndarray:
    """
    Positions of many bodies at the same clock time.

    Parameters
    ----------
    elements : jnp.ndarray
        Array of shape (n, 7), one row per body, columns in
        OrbitalElements field order:
        - semi-major axis
        - eccentricity
        - inclination (radians)
        - longitude of ascending node (radians)
        - argument of periapsis (radians)
        - period
        - time of periapsis passage
    t : float
        The clock time at which positions are requested.

    Returns
    -------
    r : jnp.ndarray
        Positions with shape (n, 3).
    """
    a, e, i, Omega, omega, period, tau = (elements[:, k] for k in range(7))

    M = mean_anomaly(t, period, tau)
    E = solve_kepler_vec(M, e, KEPLER_TOL, KEPLER_MAX_ITER)

    x_p, y_p = _perifocal_position(a, e, E)
    x, y, z = perifocal_to_reference(x_p, y_p, i, Omega, omega)

    # Stack to (n, 3) shape: each row is [x, y, z] for one body
    return jnp.stack([x, y, z], axis=1)


def ellipse_points(elements: OrbitalElements, num_points: int = ELLIPSE_POINTS) -> jnp.ndarray:
    """
    Sample the full orbit for drawing, independent of time.

    The curve is parameterized by the geometric angle u in [-π, π]
    (uniformly spaced, both ends included so the curve closes), not by
    mean anomaly.

    Returns:
        Array of shape (num_points, 3)
    """
    u = jnp.linspace(-jnp.pi, jnp.pi, num_points)
    x_p, y_p = _perifocal_position(elements.a, elements.e, u)
    x, y, z = perifocal_to_reference(x_p, y_p, elements.i, elements.Omega, elements.omega)
    return jnp.stack([x, y, z], axis=1)


def orbit_center(elements: OrbitalElements) -> jnp.ndarray:
    """Centre of the ellipse in the reference frame (the focus is the origin)."""
    x, y, z = perifocal_to_reference(-elements.c, 0.0, elements.i, elements.Omega, elements.omega)
    return jnp.array([x, y, z])


class Orbit(pydantic.BaseModel):
    """
    Orbit engine for a single body.

    Wraps one validated, immutable element set. An Orbit holds no state
    between calls, so it can be rebuilt at will.

    Attributes:
        elements: Orbital elements of the body
        num_points: Number of samples in the static ellipse
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # Allow OrbitalElements (NamedTuple)

    elements: OrbitalElements
    num_points: int = Field(default=ELLIPSE_POINTS, ge=2)

    @field_validator('elements')
    @classmethod
    def validate_orbit_elements(cls, v):
        return validate_elements(OrbitalElements(*(float(x) for x in v)))

    @staticmethod
    def create(
        semi_major_axis: float,
        eccentricity: float,
        inclination: float = 0.0,
        ascending_node: float = 0.0,
        arg_periapsis: float = 0.0,
        period: float = 1.0,
        tau: float = 0.0,
        num_points: int = ELLIPSE_POINTS
    ) -> 'Orbit':
        """
        Create an orbit from individual elements.

        Args:
            semi_major_axis: Semi-major axis (> 0)
            eccentricity: Eccentricity (0 <= e < 1)
            inclination: Inclination (rad)
            ascending_node: Longitude of the ascending node (rad)
            arg_periapsis: Argument of periapsis (rad)
            period: Orbital period (> 0)
            tau: Clock time of periapsis passage
            num_points: Samples in the static ellipse

        Returns:
            Orbit object
        """
        elements = OrbitalElements(
            a=semi_major_axis,
            e=eccentricity,
            i=inclination,
            Omega=ascending_node,
            omega=arg_periapsis,
            period=period,
            tau=tau
        )
        return Orbit(elements=elements, num_points=num_points)

    def position_at(self, t: float) -> np.ndarray:
        """
        Position [x, y, z] of the body at clock time t.

        Logs a warning if the Kepler solver stopped at its iteration cap;
        the returned position is still the best available estimate.
        """
        r, count, dE = position_and_iterations(self.elements, t, KEPLER_TOL, KEPLER_MAX_ITER)
        if float(dE) >= KEPLER_TOL:
            logger.warning("Kepler solver did not converge in %d iterations (t=%s, e=%.6f, dE=%.3g)",
                           int(count), t, self.elements.e, float(dE))
        return np.asarray(r)

    def ellipse_points(self) -> np.ndarray:
        """Static orbit curve of shape (num_points, 3)."""
        return np.asarray(ellipse_points(self.elements, self.num_points))

    def center(self) -> np.ndarray:
        """Centre of the ellipse in the reference frame."""
        return np.asarray(orbit_center(self.elements))

    def __repr__(self) -> str:
        return f"Orbit(a={self.elements.a}, e={self.elements.e}, period={self.elements.period})"


# jax.vmap over time for a single body, handy for sampling trails
positions_over_time = jax.vmap(position_at, in_axes=(None, 0))

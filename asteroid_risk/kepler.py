"""
Kepler's equation solver.

The solver works on mean anomalies reduced into [0, 2π). The third-order
starter below is tuned for that range, so callers should go through
mean_anomaly() rather than passing raw, unreduced angles.
"""
import jax
import jax.numpy as jnp

from asteroid_risk.constants import KEPLER_TOL, KEPLER_MAX_ITER


def mean_anomaly(t, period, tau):
    """
    Mean anomaly at clock time t, reduced into [0, 2π).

    Args:
        t: Clock time
        period: Orbital period, same time unit as t
        tau: Clock time of periapsis passage

    Returns:
        M: Mean anomaly (radians) in [0, 2π)
    """
    n = 2.0 * jnp.pi / period
    return jnp.mod(n * (t - tau), 2.0 * jnp.pi)


def kepler_start3(M, e):
    """
    Third-order starter for the eccentric anomaly.

    This is the inverse Kepler series truncated at e^3, accurate for small
    to moderate eccentricity. A poor starter only costs iterations.
    """
    e2 = e * e
    e3 = e * e2
    cos_M = jnp.cos(M)
    return M + (-0.5 * e3 + e + (e2 + 1.5 * cos_M * e3) * cos_M) * jnp.sin(M)


def kepler_eps3(M, E, e):
    """
    Third-order correction to the eccentric anomaly E.

    The next iterate is E - kepler_eps3(M, E, e). Convergence is cubic near
    the root, against quadratic for the plain Newton step f/f'.
    """
    cos_E = jnp.cos(E)
    sin_E = jnp.sin(E)
    t2 = -1.0 + e * cos_E  # -f'(E)
    t4 = e * sin_E
    t5 = -E + t4 + M  # -f(E)
    t6 = t5 / (0.5 * t5 * t4 / t2 + t2)
    return t5 / ((0.5 * sin_E - cos_E * t6 / 6.0) * e * t6 + t2)


def solve_kepler_with_count(M, e, tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER):
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E.

    Iterates the third-order correction with jax.lax.while_loop, stopping
    when two successive iterates differ by less than tol or after max_iter
    iterations, whichever comes first. Hitting the cap is not an error;
    the last iterate is returned.

    Parameters
    ----------
    M : float or jnp.ndarray
        Mean anomaly (radians), expected in [0, 2π)
    e : float or jnp.ndarray
        Eccentricity, 0 <= e < 1
    tol : float, optional
        Tolerance on |E - E_previous|
    max_iter : int, optional
        Maximum number of iterations

    Returns
    -------
    E : jnp.ndarray
        Eccentric anomaly (radians)
    count : jnp.ndarray
        Number of iterations performed
    dE : jnp.ndarray
        |E - E_previous| of the last iteration. The solve converged when
        this is below tol.
    """
    M = jnp.asarray(M, dtype=float)
    e = jnp.asarray(e, dtype=float)

    E0 = kepler_start3(M, e)

    def cond_fn(carry):
        _, dE, count = carry
        return (dE >= tol) & (count < max_iter)

    def body_fn(carry):
        E, _, count = carry
        E_new = E - kepler_eps3(M, E, e)
        return E_new, jnp.abs(E_new - E), count + 1

    init = (E0, jnp.full_like(E0, jnp.inf), jnp.zeros(E0.shape, dtype=jnp.int32))
    E, dE, count = jax.lax.while_loop(cond_fn, body_fn, init)
    return E, count, dE


def solve_kepler(M, e, tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER):
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E.

    See solve_kepler_with_count for details.
    """
    E, _, _ = solve_kepler_with_count(M, e, tol=tol, max_iter=max_iter)
    return E


# Vectorized version using vmap
# Note: vmap over M and e, broadcast tol and max_iter
_solve_kepler_vec = jax.vmap(solve_kepler, in_axes=(0, 0, None, None))


def solve_kepler_vec(M, e, tol=KEPLER_TOL, max_iter=KEPLER_MAX_ITER):
    """
    Vectorized version of solve_kepler that handles arrays of M and e.

    Parameters
    ----------
    M : jnp.ndarray
        Array of mean anomalies
    e : jnp.ndarray
        Array of eccentricities
    tol : float, optional
        Tolerance for convergence
    max_iter : int, optional
        Maximum number of iterations

    Returns
    -------
    E : jnp.ndarray
        Array of eccentric anomalies
    """
    return _solve_kepler_vec(jnp.asarray(M, dtype=float), jnp.asarray(e, dtype=float), tol, max_iter)

"""Tests for the Kepler equation solver"""
import unittest

import numpy as np
import jax.numpy as jnp

from openmdao.utils.assert_utils import assert_near_equal

from asteroid_risk.kepler import (
    mean_anomaly,
    kepler_start3,
    solve_kepler,
    solve_kepler_vec,
    solve_kepler_with_count,
)


class TestMeanAnomaly(unittest.TestCase):

    def test_zero_at_periapsis(self):
        M = mean_anomaly(15.0, 120.0, 15.0)
        assert_near_equal(float(M), 0.0, tolerance=1e-15)

    def test_reduced_into_zero_two_pi(self):
        """Mean anomaly is reduced into [0, 2π) for times before and after periapsis"""
        period = 120.0
        for t in [-1000.0, -60.0, -1e-3, 0.0, 30.0, 119.999, 1e6]:
            M = float(mean_anomaly(t, period, 0.0))
            self.assertGreaterEqual(M, 0.0)
            self.assertLess(M, 2 * np.pi + 1e-12)

    def test_half_period_is_pi(self):
        M = mean_anomaly(-40.0, 120.0, -100.0)
        assert_near_equal(float(M), np.pi, tolerance=1e-14)


class TestSolveKepler(unittest.TestCase):

    def test_residual_grid(self):
        """Solution satisfies Kepler's equation for e in [0, 0.9] and M in [0, 2π)"""
        e_vals = np.linspace(0.0, 0.9, 19)
        M_vals = np.linspace(0.0, 2 * np.pi, 181, endpoint=False)
        e_grid, M_grid = np.meshgrid(e_vals, M_vals)
        e_flat = e_grid.ravel()
        M_flat = M_grid.ravel()

        E = np.asarray(solve_kepler_vec(M_flat, e_flat))
        residual = np.abs(E - e_flat * np.sin(E) - M_flat)

        self.assertLess(residual.max(), 1e-8)

    def test_circular_is_identity(self):
        for M in [0.0, 0.5, 2.0, 4.0, 6.0]:
            E = solve_kepler(M, 0.0)
            assert_near_equal(float(E), M, tolerance=1e-14)

    def test_fast_convergence(self):
        """Moderate eccentricities converge well under the iteration cap"""
        for e in [0.1, 0.5, 0.8, 0.9]:
            for M in np.linspace(0.01, 2 * np.pi - 0.01, 25):
                _, count, _ = solve_kepler_with_count(M, e)
                self.assertLess(int(count), 10, f"e={e}, M={M} took {int(count)} iterations")

    def test_iteration_cap_returns_estimate(self):
        """Reaching max_iter returns the current iterate instead of failing"""
        M, e = 0.3, 0.9
        E, count, _ = solve_kepler_with_count(M, e, tol=0.0, max_iter=3)
        self.assertEqual(int(count), 3)
        self.assertTrue(np.isfinite(float(E)))

        E_converged = solve_kepler(M, e)
        self.assertLess(abs(float(E) - float(E_converged)), 1e-3)

    def test_starter_close_for_small_e(self):
        M = 1.2
        e = 0.05
        E0 = float(kepler_start3(M, e))
        E = float(solve_kepler(M, e))
        self.assertLess(abs(E0 - E), 1e-5)

    def test_vectorized_matches_scalar(self):
        M = jnp.array([0.1, 1.0, 3.0, 5.5])
        e = jnp.array([0.0, 0.2, 0.6, 0.85])
        E_vec = np.asarray(solve_kepler_vec(M, e))
        for k in range(4):
            assert_near_equal(E_vec[k], float(solve_kepler(M[k], e[k])), tolerance=1e-14)


if __name__ == '__main__':
    unittest.main()

"""Tests for the bounded Kepler solver."""

import jax
import jax.numpy as jnp
import pytest

from astroprop.sgp4 import solve_kepler


def _residual(sol, u, axnl, aynl):
    return sol.eo1 - axnl * jnp.sin(sol.eo1) + aynl * jnp.cos(sol.eo1) - u


class TestSolveKepler:
    def test_circular_orbit_is_identity(self) -> None:
        sol = solve_kepler(1.234, 0.0, 0.0)
        assert float(sol.eo1) == pytest.approx(1.234, abs=1e-14)
        assert bool(sol.converged)

    @pytest.mark.parametrize("u", [0.0, 0.5, 2.0, 3.14, 5.5])
    @pytest.mark.parametrize("ecc", [0.001, 0.1, 0.5, 0.7])
    def test_satisfies_equation(self, u, ecc) -> None:
        axnl = ecc * jnp.cos(0.3)
        aynl = ecc * jnp.sin(0.3)
        sol = solve_kepler(u, axnl, aynl)
        assert bool(sol.converged)
        assert abs(float(_residual(sol, u, axnl, aynl))) < 1e-11

    def test_sin_cos_from_last_iteration_start(self) -> None:
        """The returned sine and cosine lag the final iterate by one correction."""
        sol = solve_kepler(1.0, 0.1, 0.05)
        assert float(sol.sin_eo1) == pytest.approx(float(jnp.sin(sol.eo1)), abs=1e-11)
        assert float(sol.cos_eo1) == pytest.approx(float(jnp.cos(sol.eo1)), abs=1e-11)

    def test_iteration_cap(self) -> None:
        """A single allowed step is taken and reported unconverged."""
        sol = solve_kepler(2.0, 0.9, 0.0, max_iter=1)
        assert int(sol.iterations) == 1
        assert not bool(sol.converged)

    def test_step_is_clamped(self) -> None:
        """Near-parabolic first corrections are limited to 0.95 rad."""
        sol = solve_kepler(0.01, 0.99, 0.0, max_iter=1)
        assert abs(float(sol.eo1) - 0.01) <= 0.95 + 1e-15

    def test_vmap(self) -> None:
        u = jnp.linspace(0.0, 6.0, 7)
        sols = jax.vmap(lambda x: solve_kepler(x, 0.2, 0.1))(u)
        assert sols.eo1.shape == (7,)
        assert jnp.all(sols.converged)

    def test_jit(self) -> None:
        sol = jax.jit(solve_kepler)(1.0, 0.1, 0.0)
        assert bool(sol.converged)

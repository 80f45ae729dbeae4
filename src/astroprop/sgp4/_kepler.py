"""
Bounded Newton solve of Kepler's equation in equinoctial form.

Solves ``u = E - axnl * sin(E) + aynl * cos(E)`` for the eccentric longitude
``E``, starting from ``E = u``. Each Newton correction is clamped to
``+/-0.95`` rad and at most ``max_iter`` corrections are taken. Failing to
converge is not an error: the last iterate is used and the outcome is
reported in the returned :class:`KeplerSolution`.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from astroprop.sgp4._types import KeplerSolution

MAX_STEP = 0.95


def solve_kepler(
    u: ArrayLike,
    axnl: ArrayLike,
    aynl: ArrayLike,
    max_iter: int = 10,
    tol: float = 1.0e-12,
) -> KeplerSolution:
    """Solve Kepler's equation for the eccentric longitude.

    Args:
        u: Mean longitude minus node, in ``[0, 2pi)`` [rad].
        axnl: ``e * cos(argp)`` component of the eccentricity vector.
        aynl: ``e * sin(argp)`` component, including the long-period term.
        max_iter: Maximum number of Newton corrections.
        tol: Convergence threshold on the size of the last correction [rad].

    Returns:
        KeplerSolution: Final iterate, the sine and cosine the last correction
        was evaluated with, whether it converged, and the step count.

    Examples:
        ```python
        from astroprop.sgp4 import solve_kepler
        sol = solve_kepler(1.0, 0.1, 0.0)
        # sol.eo1 - 0.1 * sin(sol.eo1) ≈ 1.0
        ```
    """
    u = jnp.asarray(u)
    axnl = jnp.asarray(axnl)
    aynl = jnp.asarray(aynl)

    def cond(carry):
        _, _, _, tem5, ktr = carry
        return (jnp.abs(tem5) >= tol) & (ktr < max_iter)

    def body(carry):
        eo1, _, _, _, ktr = carry
        sineo1 = jnp.sin(eo1)
        coseo1 = jnp.cos(eo1)
        tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / (
            1.0 - coseo1 * axnl - sineo1 * aynl
        )
        tem5 = jnp.clip(tem5, -MAX_STEP, MAX_STEP)
        return eo1 + tem5, sineo1, coseo1, tem5, ktr + 1

    init = (
        u,
        jnp.sin(u),
        jnp.cos(u),
        jnp.full_like(u, 9999.9),
        jnp.int32(0),
    )
    eo1, sineo1, coseo1, tem5, ktr = jax.lax.while_loop(cond, body, init)

    return KeplerSolution(
        eo1=eo1,
        sin_eo1=sineo1,
        cos_eo1=coseo1,
        converged=jnp.abs(tem5) < tol,
        iterations=ktr,
    )

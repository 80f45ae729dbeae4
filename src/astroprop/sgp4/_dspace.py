"""
Deep-space secular integrator (``dspace``).

Applies the lunar/solar secular rates to the mean elements and, for
resonant orbits, integrates the resonance longitude and mean motion from the
integrator's last stopping point to the requested time with a fixed 720
minute Euler-Maclaurin step followed by a fractional step.

The integrator state ``(atime, xli, xni)`` is passed in and returned
explicitly. It is reset to the epoch values whenever the requested time is
on the other side of epoch from the last stop, or closer to epoch than it.
The stepping loop uses ``jax.lax.while_loop`` so the function is traceable
under ``jax.jit`` and ``jax.vmap``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.sgp4._constants import RPTIM, STEP2, STEPP, TWOPI
from astroprop.sgp4._types import DspaceResult, IntegratorState, ResonanceTerms

# Phase constants of the resonance terms
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087
G22 = 5.7686396
G32 = 0.95240898
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898


def _resonance_rates(
    res: ResonanceTerms,
    argpo: ArrayLike,
    argpdot: ArrayLike,
    atime: ArrayLike,
    xli: ArrayLike,
    xni: ArrayLike,
) -> tuple[Array, Array, Array]:
    """Return ``(xndt, xldot, xnddt)`` at the integrator's current point."""
    xldot = xni + res.xfact

    # Synchronous resonance
    xndt_sync = (
        res.del1 * jnp.sin(xli - FASX2)
        + res.del2 * jnp.sin(2.0 * (xli - FASX4))
        + res.del3 * jnp.sin(3.0 * (xli - FASX6))
    )
    xnddt_sync = (
        res.del1 * jnp.cos(xli - FASX2)
        + 2.0 * res.del2 * jnp.cos(2.0 * (xli - FASX4))
        + 3.0 * res.del3 * jnp.cos(3.0 * (xli - FASX6))
    )

    # Half-day resonance
    xomi = argpo + argpdot * atime
    x2omi = xomi + xomi
    x2li = xli + xli
    xndt_half = (
        res.d2201 * jnp.sin(x2omi + xli - G22)
        + res.d2211 * jnp.sin(xli - G22)
        + res.d3210 * jnp.sin(xomi + xli - G32)
        + res.d3222 * jnp.sin(-xomi + xli - G32)
        + res.d4410 * jnp.sin(x2omi + x2li - G44)
        + res.d4422 * jnp.sin(x2li - G44)
        + res.d5220 * jnp.sin(xomi + xli - G52)
        + res.d5232 * jnp.sin(-xomi + xli - G52)
        + res.d5421 * jnp.sin(xomi + x2li - G54)
        + res.d5433 * jnp.sin(-xomi + x2li - G54)
    )
    xnddt_half = (
        res.d2201 * jnp.cos(x2omi + xli - G22)
        + res.d2211 * jnp.cos(xli - G22)
        + res.d3210 * jnp.cos(xomi + xli - G32)
        + res.d3222 * jnp.cos(-xomi + xli - G32)
        + res.d5220 * jnp.cos(xomi + xli - G52)
        + res.d5232 * jnp.cos(-xomi + xli - G52)
        + 2.0
        * (
            res.d4410 * jnp.cos(x2omi + x2li - G44)
            + res.d4422 * jnp.cos(x2li - G44)
            + res.d5421 * jnp.cos(xomi + x2li - G54)
            + res.d5433 * jnp.cos(-xomi + x2li - G54)
        )
    )

    half_day = res.irez == 2.0
    xndt = jnp.where(half_day, xndt_half, xndt_sync)
    xnddt = jnp.where(half_day, xnddt_half, xnddt_sync) * xldot
    return xndt, xldot, xnddt


def dspace(
    resonance: ResonanceTerms,
    argpo: ArrayLike,
    no: ArrayLike,
    argpdot: ArrayLike,
    t: ArrayLike,
    em: ArrayLike,
    argpm: ArrayLike,
    inclm: ArrayLike,
    mm: ArrayLike,
    nodem: ArrayLike,
    nm: ArrayLike,
    state: IntegratorState,
) -> tuple[DspaceResult, IntegratorState]:
    """Apply deep-space secular effects and integrate resonance.

    Args:
        resonance: Secular rates and resonance coefficients.
        argpo: Argument of perigee at epoch [rad].
        no: Un-Kozai mean motion at epoch [rad/min].
        argpdot: Secular rate of the argument of perigee [rad/min].
        t: Time since epoch [min].
        em: Eccentricity.
        argpm: Argument of perigee [rad].
        inclm: Inclination [rad].
        mm: Mean anomaly [rad].
        nodem: Right ascension of the ascending node [rad].
        nm: Mean motion [rad/min].
        state: Integrator continuation token from the previous call.

    Returns:
        tuple: ``(DspaceResult, IntegratorState)``. For non-resonant orbits
        the state is returned unchanged and ``nm`` passes through.
    """
    res = resonance
    t = jnp.asarray(t)

    theta = (res.gsto + t * RPTIM) % TWOPI
    em = em + res.dedt * t
    inclm = inclm + res.didt * t
    argpm = argpm + res.domdt * t
    nodem = nodem + res.dnodt * t
    mm = mm + res.dmdt * t

    resonant = res.irez != 0.0

    atime = jnp.asarray(state.atime, dtype=t.dtype)
    restart = resonant & (
        (atime == 0.0) | (t * atime <= 0.0) | (jnp.abs(t) < jnp.abs(atime))
    )
    atime = jnp.where(restart, 0.0, atime)
    xli = jnp.where(restart, res.xlamo, state.xli)
    xni = jnp.where(restart, no, state.xni)

    delt = jnp.where(t > 0.0, STEPP, -STEPP)

    def cond(carry):
        atime_c, _, _ = carry
        return resonant & (jnp.abs(t - atime_c) >= STEPP)

    def body(carry):
        atime_c, xli_c, xni_c = carry
        xndt, xldot, xnddt = _resonance_rates(res, argpo, argpdot, atime_c, xli_c, xni_c)
        xli_c = xli_c + xldot * delt + xndt * STEP2
        xni_c = xni_c + xndt * delt + xnddt * STEP2
        return atime_c + delt, xli_c, xni_c

    atime, xli, xni = jax.lax.while_loop(cond, body, (atime, xli, xni))

    ft = t - atime
    xndt, xldot, xnddt = _resonance_rates(res, argpo, argpdot, atime, xli, xni)
    nm_res = xni + xndt * ft + xnddt * ft * ft * 0.5
    xl = xli + xldot * ft + xndt * ft * ft * 0.5

    mm_res = jnp.where(
        res.irez == 1.0,
        xl - nodem - argpm + theta,
        xl - 2.0 * nodem + 2.0 * theta,
    )
    dndt_res = nm_res - no

    result = DspaceResult(
        em=em,
        argpm=argpm,
        inclm=inclm,
        mm=jnp.where(resonant, mm_res, mm),
        nodem=nodem,
        nm=jnp.where(resonant, no + dndt_res, nm),
        dndt=jnp.where(resonant, dndt_res, 0.0),
    )
    return result, IntegratorState(atime=atime, xli=xli, xni=xni)

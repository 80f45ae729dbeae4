"""
Lunar/solar long-period periodics (``dpper``) for deep-space orbits.

Adds the third-body long-period corrections to eccentricity, inclination,
node, argument of perigee and mean anomaly. Above 0.2 rad inclination the
corrections are applied directly; below it they are applied in
``(sin i sin node, sin i cos node)`` space (the Lyddane modification), which
stays well defined as the node becomes singular near the equator.

All branches are evaluated with ``jnp.where`` so the function is traceable
under ``jax.jit`` and ``jax.vmap``.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.sgp4._constants import TWOPI, ZEL, ZES, ZNL, ZNS
from astroprop.sgp4._types import DpperMode, LongPeriodElements, LunarSolarTerms

_LYDDANE_INCLINATION = 0.2


def periodic_sums(
    terms: LunarSolarTerms,
    t: ArrayLike,
    mode: DpperMode = DpperMode.UPDATE,
) -> tuple[Array, Array, Array, Array, Array]:
    """Sum the solar and lunar long-period periodics at time ``t``.

    In ``INIT`` mode the Sun's and Moon's mean anomalies are held at their
    epoch values.

    Args:
        terms: Lunar/solar amplitudes from initialization.
        t: Time since epoch [min].
        mode: Evaluation mode.

    Returns:
        tuple: ``(pe, pinc, pl, pgh, ph)`` before the epoch offsets are
        removed.
    """
    if mode is DpperMode.INIT:
        zm_sun = jnp.asarray(terms.zmos)
        zm_moon = jnp.asarray(terms.zmol)
    else:
        zm_sun = terms.zmos + ZNS * t
        zm_moon = terms.zmol + ZNL * t

    zf = zm_sun + 2.0 * ZES * jnp.sin(zm_sun)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    ses = terms.se2 * f2 + terms.se3 * f3
    sis = terms.si2 * f2 + terms.si3 * f3
    sls = terms.sl2 * f2 + terms.sl3 * f3 + terms.sl4 * sinzf
    sghs = terms.sgh2 * f2 + terms.sgh3 * f3 + terms.sgh4 * sinzf
    shs = terms.sh2 * f2 + terms.sh3 * f3

    zf = zm_moon + 2.0 * ZEL * jnp.sin(zm_moon)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    sel = terms.ee2 * f2 + terms.e3 * f3
    sil = terms.xi2 * f2 + terms.xi3 * f3
    sll = terms.xl2 * f2 + terms.xl3 * f3 + terms.xl4 * sinzf
    sghl = terms.xgh2 * f2 + terms.xgh3 * f3 + terms.xgh4 * sinzf
    shll = terms.xh2 * f2 + terms.xh3 * f3

    return ses + sel, sis + sil, sls + sll, sghs + sghl, shs + shll


def dpper(
    terms: LunarSolarTerms,
    t: ArrayLike,
    elements: LongPeriodElements,
    mode: DpperMode = DpperMode.UPDATE,
    opsmode: str = "i",
) -> LongPeriodElements:
    """Apply the lunar/solar long-period periodics.

    Args:
        terms: Lunar/solar amplitudes from initialization.
        t: Time since epoch [min].
        elements: Mean elements to correct.
        mode: ``INIT`` returns the elements unchanged; ``UPDATE`` removes the
            epoch offsets and applies the corrections.
        opsmode: ``'a'`` keeps the Lyddane node in ``[0, 2pi)`` as the AFSPC
            code does; ``'i'`` leaves it signed.

    Returns:
        LongPeriodElements: Corrected elements.
    """
    if mode is DpperMode.INIT:
        return elements

    pe, pinc, pl, pgh, ph = periodic_sums(terms, t, mode)

    pe = pe - terms.peo
    pinc = pinc - terms.pinco
    pl = pl - terms.plo
    pgh = pgh - terms.pgho
    ph = ph - terms.pho

    ep, inclp, nodep, argpp, mp = elements
    inclp = inclp + pinc
    ep = ep + pe
    sinip = jnp.sin(inclp)
    cosip = jnp.cos(inclp)

    # Direct application
    ph_direct = ph / sinip
    argpp_direct = argpp + (pgh - cosip * ph_direct)
    nodep_direct = nodep + ph_direct

    # Lyddane modification
    sinop = jnp.sin(nodep)
    cosop = jnp.cos(nodep)
    alfdp = sinip * sinop + (ph * cosop + pinc * cosip * sinop)
    betdp = sinip * cosop + (-ph * sinop + pinc * cosip * cosop)
    xnoh = jnp.fmod(nodep, TWOPI)
    if opsmode == "a":
        xnoh = jnp.where(xnoh < 0.0, xnoh + TWOPI, xnoh)
    xls = mp + argpp + pl + pgh + (cosip - pinc * sinip) * xnoh
    nodep_lyd = jnp.arctan2(alfdp, betdp)
    if opsmode == "a":
        nodep_lyd = jnp.where(nodep_lyd < 0.0, nodep_lyd + TWOPI, nodep_lyd)
    nodep_lyd = jnp.where(
        jnp.abs(xnoh - nodep_lyd) > jnp.pi,
        jnp.where(nodep_lyd < xnoh, nodep_lyd + TWOPI, nodep_lyd - TWOPI),
        nodep_lyd,
    )
    mp = mp + pl
    argpp_lyd = xls - mp - cosip * nodep_lyd

    direct = inclp >= _LYDDANE_INCLINATION
    return LongPeriodElements(
        ep=ep,
        inclp=inclp,
        nodep=jnp.where(direct, nodep_direct, nodep_lyd),
        argpp=jnp.where(direct, argpp_direct, argpp_lyd),
        mp=mp,
    )

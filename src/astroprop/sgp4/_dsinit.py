"""
Deep-space resonance initializer (``dsinit``).

Classifies the orbit's geopotential resonance, derives the lunar/solar
secular rates, and computes the resonance amplitude and phase coefficients
used by the resonance integrator. Runs once at initialization in plain
Python floats.

Resonance classes:

- ``irez = 1``: synchronous, mean motion between 0.0034906585 and
  0.0052359877 rad/min (roughly 0.8 to 1.2 rev/day).
- ``irez = 2``: half-day, mean motion between 8.26e-3 and 9.24e-3 rad/min
  with eccentricity of at least 0.5 (Molniya-type orbits).
- ``irez = 0``: no resonance.
"""

from __future__ import annotations

import logging
from math import pi

from astroprop.sgp4._constants import RPTIM, TWOPI, X2O3, ZNL, ZNS
from astroprop.sgp4._types import (
    DscomResult,
    EpochElements,
    IntegratorState,
    NearEarthTerms,
    ResonanceTerms,
)

logger = logging.getLogger(__name__)

# Geopotential resonance coefficients
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7
ROOT22 = 1.7891679e-6
ROOT44 = 7.3636953e-9
ROOT54 = 2.1765803e-9
ROOT32 = 3.7393792e-7
ROOT52 = 1.1428639e-7

# Below 3 deg (or above 177 deg) the node rates are not defined
_SMALL_INCLINATION = 5.2359877e-2


def classify_resonance(nm: float, em: float) -> int:
    """Return the resonance class of an orbit.

    Args:
        nm: Un-Kozai mean motion [rad/min].
        em: Eccentricity.

    Returns:
        int: 0 (none), 1 (synchronous) or 2 (half-day).
    """
    irez = 0
    if 0.0034906585 < nm < 0.0052359877:
        irez = 1
    if 8.26e-3 <= nm <= 9.24e-3 and em >= 0.5:
        irez = 2
    return irez


def _half_day_g_coefficients(em: float, emsq: float) -> tuple[float, ...]:
    """Eccentricity functions of the half-day resonance.

    Returns ``(g201, g211, g310, g322, g410, g422, g520, g521, g532, g533)``.
    The polynomial fits switch at e = 0.65, 0.7 and 0.715.
    """
    eoc = em * emsq
    g201 = -0.306 - (em - 0.64) * 0.440

    if em <= 0.65:
        g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
        g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
        g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
        g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
        g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
        g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
    else:
        g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
        g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
        if em > 0.715:
            g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
        else:
            g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq

    if em < 0.7:
        g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
        g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
    else:
        g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
        g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

    return g201, g211, g310, g322, g410, g422, g520, g521, g532, g533


def dsinit(
    xke: float,
    ds: DscomResult,
    elements: EpochElements,
    near: NearEarthTerms,
    gsto: float,
    xpidot: float,
    eccsq: float,
    inclm: float,
    tc: float = 0.0,
) -> tuple[ResonanceTerms, IntegratorState]:
    """Initialize the deep-space secular rates and resonance terms.

    Args:
        xke: Gravity model ``xke``.
        ds: Output of :func:`~astroprop.sgp4._dscom.dscom` at epoch.
        elements: Mean elements at epoch (``no_unkozai`` populated).
        near: Secular rates from the near-earth initialization.
        gsto: Greenwich sidereal time at epoch [rad].
        xpidot: Secular rate of the longitude of perigee [rad/min].
        eccsq: Eccentricity squared at epoch.
        inclm: Inclination [rad].
        tc: Time offset from epoch [min]; zero at initialization.

    Returns:
        tuple: ``(ResonanceTerms, IntegratorState)``. The integrator starts
        at ``atime = 0`` with ``xli = xlamo`` and ``xni = no_unkozai``.
    """
    sinim = ds.sinim
    cosim = ds.cosim
    emsq = ds.emsq
    nm = elements.no_unkozai
    em = elements.ecco
    no = elements.no_unkozai

    irez = classify_resonance(nm, em)
    small_incl = inclm < _SMALL_INCLINATION or inclm > pi - _SMALL_INCLINATION

    # Solar secular rates
    ses = ds.ss1 * ZNS * ds.ss5
    sis = ds.ss2 * ZNS * (ds.sz11 + ds.sz13)
    sls = -ZNS * ds.ss3 * (ds.sz1 + ds.sz3 - 14.0 - 6.0 * emsq)
    sghs = ds.ss4 * ZNS * (ds.sz31 + ds.sz33 - 6.0)
    shs = -ZNS * ds.ss2 * (ds.sz21 + ds.sz23)
    if small_incl:
        shs = 0.0
    if sinim != 0.0:
        shs = shs / sinim
    sgs = sghs - cosim * shs

    # Lunar secular rates
    dedt = ses + ds.s1 * ZNL * ds.s5
    didt = sis + ds.s2 * ZNL * (ds.z11 + ds.z13)
    dmdt = sls - ZNL * ds.s3 * (ds.z1 + ds.z3 - 14.0 - 6.0 * emsq)
    sghl = ds.s4 * ZNL * (ds.z31 + ds.z33 - 6.0)
    shll = -ZNL * ds.s2 * (ds.z21 + ds.z23)
    if small_incl:
        shll = 0.0
    domdt = sgs + sghl
    dnodt = shs
    if sinim != 0.0:
        domdt = domdt - cosim / sinim * shll
        dnodt = dnodt + shll / sinim

    theta = (gsto + tc * RPTIM) % TWOPI

    d2201 = d2211 = d3210 = d3222 = 0.0
    d4410 = d4422 = d5220 = d5232 = d5421 = d5433 = 0.0
    del1 = del2 = del3 = 0.0
    xfact = xlamo = 0.0

    if irez != 0:
        aonv = (nm / xke) ** X2O3

        if irez == 2:
            cosisq = cosim * cosim
            g201, g211, g310, g322, g410, g422, g520, g521, g532, g533 = (
                _half_day_g_coefficients(elements.ecco, eccsq)
            )

            sini2 = sinim * sinim
            f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
            f221 = 1.5 * sini2
            f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
            f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
            f441 = 35.0 * sini2 * f220
            f442 = 39.3750 * sini2 * sini2
            f522 = (
                9.84375
                * sinim
                * (
                    sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq)
                    + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq)
                )
            )
            f523 = sinim * (
                4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq)
                + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq)
            )
            f542 = (
                29.53125
                * sinim
                * (2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq))
            )
            f543 = (
                29.53125
                * sinim
                * (-2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq))
            )

            temp1 = 3.0 * nm * nm * aonv * aonv
            temp = temp1 * ROOT22
            d2201 = temp * f220 * g201
            d2211 = temp * f221 * g211
            temp1 = temp1 * aonv
            temp = temp1 * ROOT32
            d3210 = temp * f321 * g310
            d3222 = temp * f322 * g322
            temp1 = temp1 * aonv
            temp = 2.0 * temp1 * ROOT44
            d4410 = temp * f441 * g410
            d4422 = temp * f442 * g422
            temp1 = temp1 * aonv
            temp = temp1 * ROOT52
            d5220 = temp * f522 * g520
            d5232 = temp * f523 * g532
            temp = 2.0 * temp1 * ROOT54
            d5421 = temp * f542 * g521
            d5433 = temp * f543 * g533
            xlamo = (elements.mo + elements.nodeo + elements.nodeo - theta - theta) % TWOPI
            xfact = near.mdot + dmdt + 2.0 * (near.nodedot + dnodt - RPTIM) - no

        if irez == 1:
            g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
            g310 = 1.0 + 2.0 * emsq
            g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
            f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
            f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
            f330 = 1.0 + cosim
            f330 = 1.875 * f330 * f330 * f330
            del1 = 3.0 * nm * nm * aonv * aonv
            del2 = 2.0 * del1 * f220 * g200 * Q22
            del3 = 3.0 * del1 * f330 * g300 * Q33 * aonv
            del1 = del1 * f311 * g310 * Q31 * aonv
            xlamo = (elements.mo + elements.nodeo + elements.argpo - theta) % TWOPI
            xfact = near.mdot + xpidot - RPTIM + dmdt + domdt + dnodt - no

    logger.debug("Resonance class %d (nm=%.9f rad/min, e=%.7f)", irez, nm, em)

    resonance = ResonanceTerms(
        irez=float(irez),
        d2201=d2201,
        d2211=d2211,
        d3210=d3210,
        d3222=d3222,
        d4410=d4410,
        d4422=d4422,
        d5220=d5220,
        d5232=d5232,
        d5421=d5421,
        d5433=d5433,
        del1=del1,
        del2=del2,
        del3=del3,
        dedt=dedt,
        didt=didt,
        dmdt=dmdt,
        dnodt=dnodt,
        domdt=domdt,
        xfact=xfact,
        xlamo=xlamo,
        gsto=gsto,
    )
    integrator = IntegratorState(atime=0.0, xli=xlamo, xni=no)
    return resonance, integrator

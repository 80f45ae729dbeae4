"""
Deep-space common terms (``dscom``).

Computes the lunar and solar geometry at epoch and the amplitude
coefficients of the third-body long-period periodics. The same set of
formulae is evaluated twice, first with the Sun's orbit constants and then
with the Moon's, whose node and argument are taken from a low-precision
day-number model.

Runs once per deep-space satellite at initialization, in plain Python floats.
"""

from __future__ import annotations

from math import atan2, cos, sin, sqrt
from typing import NamedTuple

from astroprop.sgp4._constants import TWOPI, ZEL, ZES
from astroprop.sgp4._types import DscomResult, LunarSolarTerms

# Solar perturbation coefficient and orientation of the ecliptic
C1SS = 2.9864797e-6
ZSINIS = 0.39785416
ZCOSIS = 0.91744867
ZCOSGS = 0.1945905
ZSINGS = -0.98088458

# Lunar perturbation coefficient
C1L = 4.7968065e-7


class _BodyTerms(NamedTuple):
    s1: float
    s2: float
    s3: float
    s4: float
    s5: float
    s6: float
    s7: float
    z1: float
    z2: float
    z3: float
    z11: float
    z12: float
    z13: float
    z21: float
    z22: float
    z23: float
    z31: float
    z32: float
    z33: float


def _body_terms(
    zcosg: float,
    zsing: float,
    zcosi: float,
    zsini: float,
    zcosh: float,
    zsinh: float,
    cc: float,
    xnoi: float,
    em: float,
    emsq: float,
    betasq: float,
    rtemsq: float,
    sinim: float,
    cosim: float,
    sinomm: float,
    cosomm: float,
) -> _BodyTerms:
    """Evaluate the third-body expansion for one perturbing body.

    ``zcosg..zsinh`` describe the perturbing body's orbit orientation and
    ``cc`` its perturbation coefficient.
    """
    a1 = zcosg * zcosh + zsing * zcosi * zsinh
    a3 = -zsing * zcosh + zcosg * zcosi * zsinh
    a7 = -zcosg * zsinh + zsing * zcosi * zcosh
    a8 = zsing * zsini
    a9 = zsing * zsinh + zcosg * zcosi * zcosh
    a10 = zcosg * zsini
    a2 = cosim * a7 + sinim * a8
    a4 = cosim * a9 + sinim * a10
    a5 = -sinim * a7 + cosim * a8
    a6 = -sinim * a9 + cosim * a10

    x1 = a1 * cosomm + a2 * sinomm
    x2 = a3 * cosomm + a4 * sinomm
    x3 = -a1 * sinomm + a2 * cosomm
    x4 = -a3 * sinomm + a4 * cosomm
    x5 = a5 * sinomm
    x6 = a6 * sinomm
    x7 = a5 * cosomm
    x8 = a6 * cosomm

    z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
    z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
    z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
    z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
    z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
    z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
    z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
    z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (
        -24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5)
    )
    z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
    z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
    z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (
        24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8)
    )
    z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
    z1 = z1 + z1 + betasq * z31
    z2 = z2 + z2 + betasq * z32
    z3 = z3 + z3 + betasq * z33

    s3 = cc * xnoi
    s2 = -0.5 * s3 / rtemsq
    s4 = s3 * rtemsq
    s1 = -15.0 * em * s4
    s5 = x1 * x3 + x2 * x4
    s6 = x2 * x3 + x1 * x4
    s7 = x2 * x4 - x1 * x3

    return _BodyTerms(
        s1, s2, s3, s4, s5, s6, s7,
        z1, z2, z3, z11, z12, z13, z21, z22, z23, z31, z32, z33,
    )


def _amplitudes(b: _BodyTerms, emsq: float, zecc: float) -> tuple[float, ...]:
    """Long-period amplitudes ``(e2, e3, i2, i3, l2, l3, l4, gh2, gh3, gh4, h2, h3)``."""
    return (
        2.0 * b.s1 * b.s6,
        2.0 * b.s1 * b.s7,
        2.0 * b.s2 * b.z12,
        2.0 * b.s2 * (b.z13 - b.z11),
        -2.0 * b.s3 * b.z2,
        -2.0 * b.s3 * (b.z3 - b.z1),
        -2.0 * b.s3 * (-21.0 - 9.0 * emsq) * zecc,
        2.0 * b.s4 * b.z32,
        2.0 * b.s4 * (b.z33 - b.z31),
        -18.0 * b.s4 * zecc,
        -2.0 * b.s2 * b.z22,
        -2.0 * b.s2 * (b.z23 - b.z21),
    )


def dscom(
    epoch: float,
    ep: float,
    argpp: float,
    tc: float,
    inclp: float,
    nodep: float,
    np: float,
) -> DscomResult:
    """Compute the deep-space lunar/solar common terms.

    Args:
        epoch: Epoch in days since 1949 December 31 00:00 UT.
        ep: Eccentricity.
        argpp: Argument of perigee [rad].
        tc: Time offset from epoch [min]; zero at initialization.
        inclp: Inclination [rad].
        nodep: Right ascension of the ascending node [rad].
        np: Mean motion [rad/min].

    Returns:
        DscomResult: Periodic amplitudes plus the intermediates used by
        :func:`dsinit`. The periodic offsets ``peo..pho`` are zero.
    """
    snodm = sin(nodep)
    cnodm = cos(nodep)
    sinomm = sin(argpp)
    cosomm = cos(argpp)
    sinim = sin(inclp)
    cosim = cos(inclp)
    emsq = ep * ep
    betasq = 1.0 - emsq
    rtemsq = sqrt(betasq)

    # Lunar orbit orientation from the day number
    day = epoch + 18261.5 + tc / 1440.0
    xnodce = (4.5236020 - 9.2422029e-4 * day) % TWOPI
    stem = sin(xnodce)
    ctem = cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = sqrt(1.0 - zsinhl * zsinhl)
    gam = 5.8351514 + 0.0019443680 * day
    zx = 0.39785416 * stem / zsinil
    zy = zcoshl * ctem + 0.91744867 * zsinhl * stem
    zx = atan2(zx, zy)
    zx = gam + zx - xnodce
    zcosgl = cos(zx)
    zsingl = sin(zx)

    common = dict(
        xnoi=1.0 / np,
        em=ep,
        emsq=emsq,
        betasq=betasq,
        rtemsq=rtemsq,
        sinim=sinim,
        cosim=cosim,
        sinomm=sinomm,
        cosomm=cosomm,
    )
    sun = _body_terms(
        ZCOSGS, ZSINGS, ZCOSIS, ZSINIS, cnodm, snodm, C1SS, **common
    )
    moon = _body_terms(
        zcosgl,
        zsingl,
        zcosil,
        zsinil,
        zcoshl * cnodm + zsinhl * snodm,
        snodm * zcoshl - cnodm * zsinhl,
        C1L,
        **common,
    )

    zmol = (4.7199672 + 0.22997150 * day - gam) % TWOPI
    zmos = (6.2565837 + 0.017201977 * day) % TWOPI

    se2, se3, si2, si3, sl2, sl3, sl4, sgh2, sgh3, sgh4, sh2, sh3 = _amplitudes(sun, emsq, ZES)
    ee2, e3, xi2, xi3, xl2, xl3, xl4, xgh2, xgh3, xgh4, xh2, xh3 = _amplitudes(moon, emsq, ZEL)

    lunar_solar = LunarSolarTerms(
        se2=se2, se3=se3, si2=si2, si3=si3,
        sl2=sl2, sl3=sl3, sl4=sl4,
        sgh2=sgh2, sgh3=sgh3, sgh4=sgh4, sh2=sh2, sh3=sh3,
        ee2=ee2, e3=e3, xi2=xi2, xi3=xi3,
        xl2=xl2, xl3=xl3, xl4=xl4,
        xgh2=xgh2, xgh3=xgh3, xgh4=xgh4, xh2=xh2, xh3=xh3,
        zmol=zmol, zmos=zmos,
        peo=0.0, pinco=0.0, plo=0.0, pgho=0.0, pho=0.0,
    )

    return DscomResult(
        lunar_solar=lunar_solar,
        sinim=sinim,
        cosim=cosim,
        emsq=emsq,
        s1=moon.s1, s2=moon.s2, s3=moon.s3, s4=moon.s4, s5=moon.s5,
        ss1=sun.s1, ss2=sun.s2, ss3=sun.s3, ss4=sun.s4, ss5=sun.s5,
        z1=moon.z1, z3=moon.z3, z11=moon.z11, z13=moon.z13,
        z21=moon.z21, z23=moon.z23, z31=moon.z31, z33=moon.z33,
        sz1=sun.z1, sz3=sun.z3, sz11=sun.z11, sz13=sun.z13,
        sz21=sun.z21, sz23=sun.z23, sz31=sun.z31, sz33=sun.z33,
    )

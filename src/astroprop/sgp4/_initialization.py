"""
SGP4/SDP4 element initialization.

``sgp4_init`` turns mean elements into a :class:`SatelliteRecord`: it
recovers the un-Kozai mean motion, derives the secular gravity rates and
drag coefficients, chooses the near-earth or deep-space branch, runs the
deep-space initializers where needed, and finally propagates once to the
epoch so that the record is fully primed.

Initialization runs at Python time with plain floats; the resulting
coefficient groups are stored as JAX arrays of the configured dtype.
"""

from __future__ import annotations

import logging
from math import cos, fabs, floor, sin, sqrt
from typing import NamedTuple

import jax.numpy as jnp

from astroprop.config import get_dtype
from astroprop.constants import JD_SGP4_EPOCH_BASE
from astroprop.sgp4._constants import (
    DEEP_SPACE_PERIOD_MIN,
    TEMP4,
    TWOPI,
    WGS72,
    X2O3,
    EarthGravity,
    get_gravity_model,
)
from astroprop.sgp4._dpper import dpper
from astroprop.sgp4._dscom import dscom
from astroprop.sgp4._dsinit import dsinit
from astroprop.sgp4._propagation import sgp4_propagate
from astroprop.sgp4._types import (
    Branch,
    DpperMode,
    LongPeriodElements,
    NearEarthTerms,
    OrbitalElements,
    PropagationError,
    SatelliteRecord,
)
from astroprop.time import gstime

logger = logging.getLogger(__name__)

OPSMODES = ("a", "i")


class InitlResult(NamedTuple):
    """Auxiliary epoch quantities computed by :func:`initl`."""

    no_unkozai: float
    ao: float
    con41: float
    con42: float
    cosio: float
    cosio2: float
    eccsq: float
    omeosq: float
    posq: float
    rp: float
    rteosq: float
    sinio: float
    gsto: float


def sidereal_time_afspc(epoch: float) -> float:
    """Greenwich sidereal time from the 1970-based AFSPC series.

    Args:
        epoch: Days since 1949 December 31 00:00 UT.

    Returns:
        float: Sidereal time in ``[0, 2pi)`` [rad].
    """
    ts70 = epoch - 7305.0
    ds70 = floor(ts70 + 1.0e-8)
    tfrac = ts70 - ds70
    c1 = 1.72027916940703639e-2
    thgr70 = 1.7321343856509374
    fk5r = 5.07551419432269442e-15
    c1p2p = c1 + TWOPI
    gsto = (thgr70 + c1 * ds70 + c1p2p * tfrac + ts70 * ts70 * fk5r) % TWOPI
    if gsto < 0.0:
        gsto = gsto + TWOPI
    return gsto


def initl(
    gravity: EarthGravity,
    ecco: float,
    epoch: float,
    inclo: float,
    no_kozai: float,
    opsmode: str = "i",
) -> InitlResult:
    """Recover the un-Kozai mean motion and epoch geometry.

    The Brouwer mean motion is recovered from the Kozai value with exactly
    two fixed-point passes.

    Args:
        gravity: Gravity model.
        ecco: Eccentricity.
        epoch: Days since 1949 December 31 00:00 UT.
        inclo: Inclination [rad].
        no_kozai: Kozai mean motion [rad/min].
        opsmode: ``'a'`` uses the AFSPC sidereal time series, ``'i'`` the
            IAU-82 GMST.

    Returns:
        InitlResult: Un-Kozai mean motion, semi-major axis and derived terms.
    """
    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = sqrt(omeosq)
    cosio = cos(inclo)
    cosio2 = cosio * cosio

    ak = (gravity.xke / no_kozai) ** X2O3
    d1 = 0.75 * gravity.j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
    del_ = d1 / (ak * ak)
    adel = ak * (1.0 - del_ * del_ - del_ * (1.0 / 3.0 + 134.0 * del_ * del_ / 81.0))
    del_ = d1 / (adel * adel)
    no_unkozai = no_kozai / (1.0 + del_)

    ao = (gravity.xke / no_unkozai) ** X2O3
    po = ao * omeosq
    con42 = 1.0 - 5.0 * cosio2

    if opsmode == "a":
        gsto = sidereal_time_afspc(epoch)
    else:
        gsto = gstime(epoch + JD_SGP4_EPOCH_BASE)

    return InitlResult(
        no_unkozai=no_unkozai,
        ao=ao,
        con41=-con42 - cosio2 - cosio2,
        con42=con42,
        cosio=cosio,
        cosio2=cosio2,
        eccsq=eccsq,
        omeosq=omeosq,
        posq=po * po,
        rp=ao * (1.0 - ecco),
        rteosq=rteosq,
        sinio=sin(inclo),
        gsto=gsto,
    )


def _as_arrays(group):
    dtype = get_dtype()
    return type(group)(*(jnp.asarray(value, dtype=dtype) for value in group))


def sgp4_init(
    elements: OrbitalElements,
    gravity: str | EarthGravity = WGS72,
    opsmode: str = "i",
) -> SatelliteRecord:
    """Initialize a propagator record from mean orbital elements.

    Never raises for physically inconsistent elements; a record that cannot
    be propagated reports the failure from :func:`sgp4_propagate`.

    Args:
        elements: Mean orbital elements.
        gravity: Gravity model or its name. Default: WGS72.
        opsmode: ``'i'`` (improved, default) or ``'a'`` (AFSPC compatibility).

    Returns:
        SatelliteRecord: Initialized record, already propagated to epoch.

    Raises:
        ValueError: If ``opsmode`` is not ``'a'`` or ``'i'``.
        KeyError: If ``gravity`` names an unknown model.

    Examples:
        ```python
        from astroprop.sgp4 import OrbitalElements, sgp4_init, sgp4_propagate
        el = OrbitalElements(
            satnum=25544, epoch_year=8, epoch_days=264.51782528,
            mean_motion=15.72125391, eccentricity=0.0006703,
            inclination=51.6416, raan=247.4627, arg_perigee=130.5360,
            mean_anomaly=325.0288, ndot=-0.00002182, bstar=-0.11606e-4,
        )
        record = sgp4_init(el)
        state = sgp4_propagate(record, 60.0)
        ```
    """
    if opsmode not in OPSMODES:
        raise ValueError(f"opsmode must be one of {OPSMODES}, got {opsmode!r}")
    gravity = get_gravity_model(gravity)

    el = elements.to_epoch_elements()
    jdsatepoch, jdsatepochF = elements.epoch_jd
    epoch = jdsatepoch + jdsatepochF - JD_SGP4_EPOCH_BASE

    re = gravity.radiusearthkm
    j2 = gravity.j2
    j3oj2 = gravity.j3oj2
    ecco = el.ecco
    bstar = el.bstar

    # Atmospheric density parameters
    ss = 78.0 / re + 1.0
    qzms2t = ((120.0 - 78.0) / re) ** 4

    init = initl(gravity, ecco, epoch, el.inclo, el.no_kozai, opsmode)
    no = init.no_unkozai
    ao = init.ao
    cosio = init.cosio
    cosio2 = init.cosio2
    sinio = init.sinio
    omeosq = init.omeosq
    rteosq = init.rteosq
    con41 = init.con41
    el = el._replace(no_unkozai=no)

    a = (no * gravity.tumin) ** (-X2O3)

    isimp = 0
    if init.rp < 220.0 / re + 1.0:
        isimp = 1

    # Perigees below 156 km use a modified density altitude
    sfour = ss
    qzms24 = qzms2t
    perige = (init.rp - 1.0) * re
    if perige < 156.0:
        sfour = perige - 78.0
        if perige < 98.0:
            sfour = 20.0
        qzms24 = ((120.0 - sfour) / re) ** 4
        sfour = sfour / re + 1.0

    pinvsq = 1.0 / init.posq
    tsi = 1.0 / (ao - sfour)
    eta = ao * ecco * tsi
    etasq = eta * eta
    eeta = ecco * eta
    psisq = fabs(1.0 - etasq)
    coef = qzms24 * tsi**4
    coef1 = coef / psisq**3.5
    cc2 = (
        coef1
        * no
        * (
            ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.375 * j2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
    )
    cc1 = bstar * cc2
    cc3 = 0.0
    if ecco > 1.0e-4:
        cc3 = -2.0 * coef * tsi * j3oj2 * no * sinio / ecco
    x1mth2 = 1.0 - cosio2
    cc4 = (
        2.0
        * no
        * coef1
        * ao
        * omeosq
        * (
            eta * (2.0 + 0.5 * etasq)
            + ecco * (0.5 + 2.0 * etasq)
            - j2
            * tsi
            / (ao * psisq)
            * (
                -3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * cos(2.0 * el.argpo)
            )
        )
    )
    cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

    # Secular rates from J2 and J4
    cosio4 = cosio2 * cosio2
    temp1 = 1.5 * j2 * pinvsq * no
    temp2 = 0.5 * temp1 * j2 * pinvsq
    temp3 = -0.46875 * gravity.j4 * pinvsq * pinvsq * no
    mdot = (
        no
        + 0.5 * temp1 * rteosq * con41
        + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
    )
    argpdot = (
        -0.5 * temp1 * init.con42
        + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
        + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
    )
    xhdot1 = -temp1 * cosio
    nodedot = xhdot1 + (
        0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)
    ) * cosio
    xpidot = argpdot + nodedot

    omgcof = bstar * cc3 * cos(el.argpo)
    xmcof = 0.0
    if ecco > 1.0e-4:
        xmcof = -X2O3 * coef * bstar / eeta
    nodecf = 3.5 * omeosq * xhdot1 * cc1
    t2cof = 1.5 * cc1

    # 1 + cos(i) vanishes at 180 deg inclination
    if fabs(cosio + 1.0) > 1.5e-12:
        xlcof = -0.25 * j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    else:
        xlcof = -0.25 * j3oj2 * sinio * (3.0 + 5.0 * cosio) / TEMP4
    aycof = -0.5 * j3oj2 * sinio

    delmotemp = 1.0 + eta * cos(el.mo)
    delmo = delmotemp * delmotemp * delmotemp
    sinmao = sin(el.mo)
    x7thm1 = 7.0 * cosio2 - 1.0

    branch = Branch.NEAR_EARTH
    lunar_solar = resonance = integrator = None
    if TWOPI / no >= DEEP_SPACE_PERIOD_MIN:
        branch = Branch.DEEP_SPACE
        isimp = 1

    d2 = d3 = d4 = 0.0
    t3cof = t4cof = t5cof = 0.0
    if isimp != 1:
        cc1sq = cc1 * cc1
        d2 = 4.0 * ao * tsi * cc1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * ao + sfour) * temp
        d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
        t3cof = d2 + 2.0 * cc1sq
        t4cof = 0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * cc1sq))
        t5cof = 0.2 * (
            3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2 + 15.0 * cc1sq * (2.0 * d2 + cc1sq)
        )

    near = NearEarthTerms(
        isimp=float(isimp),
        con41=con41,
        x1mth2=x1mth2,
        x7thm1=x7thm1,
        cc1=cc1,
        cc4=cc4,
        cc5=cc5,
        d2=d2,
        d3=d3,
        d4=d4,
        delmo=delmo,
        eta=eta,
        mdot=mdot,
        argpdot=argpdot,
        nodedot=nodedot,
        omgcof=omgcof,
        sinmao=sinmao,
        t2cof=t2cof,
        t3cof=t3cof,
        t4cof=t4cof,
        t5cof=t5cof,
        xlcof=xlcof,
        xmcof=xmcof,
        nodecf=nodecf,
        aycof=aycof,
    )

    if branch is Branch.DEEP_SPACE:
        ds = dscom(epoch, ecco, el.argpo, 0.0, el.inclo, el.nodeo, no)
        lunar_solar = ds.lunar_solar
        dpper(
            lunar_solar,
            0.0,
            LongPeriodElements(ecco, el.inclo, el.nodeo, el.argpo, el.mo),
            mode=DpperMode.INIT,
            opsmode=opsmode,
        )
        resonance, integrator = dsinit(
            gravity.xke, ds, el, near, init.gsto, xpidot, init.eccsq, el.inclo
        )

    logger.debug(
        "Initialized satellite %s: branch=%s isimp=%d period=%.3f min perigee=%.3f km",
        elements.satnum,
        branch.name,
        isimp,
        TWOPI / no,
        perige,
    )

    record = SatelliteRecord(
        satnum=elements.satnum,
        jdsatepoch=jdsatepoch,
        jdsatepochF=jdsatepochF,
        epoch=epoch,
        gravity=gravity,
        opsmode=opsmode,
        branch=branch,
        elements=_as_arrays(el),
        near=_as_arrays(near),
        gsto=init.gsto,
        a=a,
        alta=a * (1.0 + ecco) - 1.0,
        altp=a * (1.0 - ecco) - 1.0,
        lunar_solar=None if lunar_solar is None else _as_arrays(lunar_solar),
        resonance=None if resonance is None else _as_arrays(resonance),
        integrator=None if integrator is None else _as_arrays(integrator),
    )

    result = sgp4_propagate(record, 0.0)
    if isinstance(result, PropagationError):
        logger.debug("Satellite %s fails at epoch: %s", elements.satnum, result.message)
    return record


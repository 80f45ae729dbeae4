"""
SGP4/SDP4 propagation.

:func:`sgp4_step` is the pure array-level kernel: given a record's
coefficient groups and a time since epoch it returns position, velocity, an
integer error code, the mean elements, the Kepler solve outcome and the
resonance integrator's continuation token. It is jitted with the gravity
model and ``opsmode`` as static arguments; near-earth records pass ``None``
for the deep-space groups and get their own trace.

The record-level API wraps the kernel:

- :func:`sgp4_propagate` returns a :class:`StateVector` or a
  :class:`PropagationError` and stores the new continuation token on the
  record.
- :func:`sgp4_propagate_array` vmaps the kernel over an array of times and
  leaves the record untouched.
- :func:`propagate_catalog` propagates many records, skipping failures.

Failures are never raised. In the array API they are integer codes with NaN
position and velocity.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from functools import partial

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.config import get_dtype
from astroprop.constants import MINUTES_PER_DAY
from astroprop.sgp4._constants import TEMP4, TWOPI, WGS72, X2O3, EarthGravity
from astroprop.sgp4._dpper import dpper
from astroprop.sgp4._dspace import dspace
from astroprop.sgp4._kepler import solve_kepler
from astroprop.sgp4._types import (
    DpperMode,
    EpochElements,
    IntegratorState,
    LongPeriodElements,
    LunarSolarTerms,
    MeanElements,
    NearEarthTerms,
    PropagationError,
    ResonanceTerms,
    SatelliteRecord,
    StateVector,
    StepResult,
)
from astroprop.time import julian_date_parts

logger = logging.getLogger(__name__)


@partial(jax.jit, static_argnames=("gravity", "opsmode"))
def sgp4_step(
    elements: EpochElements,
    near: NearEarthTerms,
    tsince: ArrayLike,
    lunar_solar: LunarSolarTerms | None = None,
    resonance: ResonanceTerms | None = None,
    integrator: IntegratorState | None = None,
    gravity: EarthGravity = WGS72,
    opsmode: str = "i",
) -> StepResult:
    """Advance initialized elements to ``tsince`` minutes from epoch.

    Args:
        elements: Mean elements at epoch.
        near: Secular-rate and drag coefficients.
        tsince: Time since epoch [min].
        lunar_solar: Lunar/solar periodic terms; ``None`` for near-earth.
        resonance: Resonance terms; ``None`` for near-earth.
        integrator: Integrator continuation token; ``None`` for near-earth.
        gravity: Gravity model (static).
        opsmode: ``'a'`` or ``'i'`` (static).

    Returns:
        StepResult: TEME position [km] and velocity [km/s], error code
        (0 on success, otherwise a :class:`PropagationError` value), mean
        elements, Kepler outcome and the updated continuation token.
    """
    el = elements
    ne = near
    deep = resonance is not None
    t = jnp.asarray(tsince, dtype=get_dtype())
    xke = gravity.xke

    # Secular gravity and atmospheric drag
    xmdf = el.mo + ne.mdot * t
    argpdf = el.argpo + ne.argpdot * t
    nodedf = el.nodeo + ne.nodedot * t
    t2 = t * t
    nodem = nodedf + ne.nodecf * t2
    tempa = 1.0 - ne.cc1 * t
    tempe = el.bstar * ne.cc4 * t
    templ = ne.t2cof * t2

    # Higher-order drag, only when the full model applies
    delmtemp = 1.0 + ne.eta * jnp.cos(xmdf)
    delm = ne.xmcof * (delmtemp * delmtemp * delmtemp - ne.delmo)
    temp = ne.omgcof * t + delm
    mm_full = xmdf + temp
    t3 = t2 * t
    t4 = t3 * t
    full_drag = ne.isimp != 1.0
    mm = jnp.where(full_drag, mm_full, xmdf)
    argpm = jnp.where(full_drag, argpdf - temp, argpdf)
    tempa = jnp.where(full_drag, tempa - ne.d2 * t2 - ne.d3 * t3 - ne.d4 * t4, tempa)
    tempe = jnp.where(
        full_drag, tempe + el.bstar * ne.cc5 * (jnp.sin(mm_full) - ne.sinmao), tempe
    )
    templ = jnp.where(full_drag, templ + ne.t3cof * t3 + t4 * (ne.t4cof + t * ne.t5cof), templ)

    nm = el.no_unkozai
    em = el.ecco
    inclm = el.inclo
    if deep:
        ds, integrator = dspace(
            resonance, el.argpo, el.no_unkozai, ne.argpdot, t,
            em, argpm, inclm, mm, nodem, nm, integrator,
        )
        em, argpm, inclm, mm, nodem, nm = ds.em, ds.argpm, ds.inclm, ds.mm, ds.nodem, ds.nm

    mean_motion_bad = nm <= 0.0

    am = (xke / nm) ** X2O3 * tempa * tempa
    nm = xke / am**1.5
    em = em - tempe

    mean_ecc_bad = (em >= 1.0) | (em < -0.001)
    em = jnp.maximum(em, 1.0e-6)

    mm = mm + el.no_unkozai * templ
    xlm = mm + argpm + nodem
    nodem = jnp.fmod(nodem, TWOPI)
    argpm = argpm % TWOPI
    xlm = xlm % TWOPI
    mm = (xlm - argpm - nodem) % TWOPI

    mean = MeanElements(am=am, em=em, inclm=inclm, nodem=nodem, argpm=argpm, mm=mm, nm=nm)

    if deep:
        ep, xincp, nodep, argpp, mp = dpper(
            lunar_solar,
            t,
            LongPeriodElements(em, inclm, nodem, argpm, mm),
            mode=DpperMode.UPDATE,
            opsmode=opsmode,
        )
        flip = xincp < 0.0
        xincp = jnp.where(flip, -xincp, xincp)
        nodep = jnp.where(flip, nodep + jnp.pi, nodep)
        argpp = jnp.where(flip, argpp - jnp.pi, argpp)
        perturbed_ecc_bad = (ep < 0.0) | (ep > 1.0)

        sinip = jnp.sin(xincp)
        cosip = jnp.cos(xincp)
        aycof = -0.5 * gravity.j3oj2 * sinip
        xlcof_den = jnp.where(jnp.abs(cosip + 1.0) > 1.5e-12, 1.0 + cosip, TEMP4)
        xlcof = -0.25 * gravity.j3oj2 * sinip * (3.0 + 5.0 * cosip) / xlcof_den
        cosisq = cosip * cosip
        con41 = 3.0 * cosisq - 1.0
        x1mth2 = 1.0 - cosisq
        x7thm1 = 7.0 * cosisq - 1.0
    else:
        ep, xincp, nodep, argpp, mp = em, inclm, nodem, argpm, mm
        perturbed_ecc_bad = jnp.zeros((), dtype=bool)
        sinip = jnp.sin(xincp)
        cosip = jnp.cos(xincp)
        aycof, xlcof = ne.aycof, ne.xlcof
        con41, x1mth2, x7thm1 = ne.con41, ne.x1mth2, ne.x7thm1

    # Long-period periodics
    axnl = ep * jnp.cos(argpp)
    temp = 1.0 / (am * (1.0 - ep * ep))
    aynl = ep * jnp.sin(argpp) + temp * aycof
    xl = mp + argpp + nodep + temp * xlcof * axnl

    u = (xl - nodep) % TWOPI
    kepler = solve_kepler(u, axnl, aynl)
    sineo1 = kepler.sin_eo1
    coseo1 = kepler.cos_eo1

    # Short-period preliminary quantities
    ecose = axnl * coseo1 + aynl * sineo1
    esine = axnl * sineo1 - aynl * coseo1
    el2 = axnl * axnl + aynl * aynl
    pl = am * (1.0 - el2)
    semi_latus_bad = pl < 0.0

    rl = am * (1.0 - ecose)
    rdotl = jnp.sqrt(am) * esine / rl
    rvdotl = jnp.sqrt(pl) / rl
    betal = jnp.sqrt(1.0 - el2)
    temp = esine / (1.0 + betal)
    sinu = am / rl * (sineo1 - aynl - axnl * temp)
    cosu = am / rl * (coseo1 - axnl + aynl * temp)
    su = jnp.arctan2(sinu, cosu)
    sin2u = (cosu + cosu) * sinu
    cos2u = 1.0 - 2.0 * sinu * sinu
    temp = 1.0 / pl
    temp1 = 0.5 * gravity.j2 * temp
    temp2 = temp1 * temp

    # Short-period periodics
    mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
    su = su - 0.25 * temp2 * x7thm1 * sin2u
    xnode = nodep + 1.5 * temp2 * cosip * sin2u
    xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
    mvt = rdotl - nm * temp1 * x1mth2 * sin2u / xke
    rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / xke
    decayed = mrt < 1.0

    # Orientation vectors
    sinsu = jnp.sin(su)
    cossu = jnp.cos(su)
    snod = jnp.sin(xnode)
    cnod = jnp.cos(xnode)
    sini = jnp.sin(xinc)
    cosi = jnp.cos(xinc)
    xmx = -snod * cosi
    xmy = cnod * cosi
    uvec = jnp.array([xmx * sinsu + cnod * cossu, xmy * sinsu + snod * cossu, sini * sinsu])
    vvec = jnp.array([xmx * cossu - cnod * sinsu, xmy * cossu - snod * sinsu, sini * cossu])

    r = mrt * gravity.radiusearthkm * uvec
    v = (mvt * uvec + rvdot * vvec) * gravity.vkmpersec

    error = jnp.select(
        [mean_motion_bad, mean_ecc_bad, perturbed_ecc_bad, semi_latus_bad, decayed],
        [
            jnp.int32(PropagationError.MEAN_MOTION_BELOW_ZERO),
            jnp.int32(PropagationError.MEAN_ECCENTRICITY_OUT_OF_RANGE),
            jnp.int32(PropagationError.PERTURBED_ECCENTRICITY_OUT_OF_RANGE),
            jnp.int32(PropagationError.SEMI_LATUS_RECTUM_BELOW_ZERO),
            jnp.int32(PropagationError.DECAYED),
        ],
        default=jnp.int32(0),
    )

    failed = error != 0
    r = jnp.where(failed, jnp.nan, r)
    v = jnp.where(failed, jnp.nan, v)

    return StepResult(
        position=r,
        velocity=v,
        error=error,
        mean=mean,
        kepler=kepler,
        integrator=integrator,
    )


def _step(record: SatelliteRecord, tsince: ArrayLike) -> StepResult:
    return sgp4_step(
        record.elements,
        record.near,
        tsince,
        lunar_solar=record.lunar_solar,
        resonance=record.resonance,
        integrator=record.integrator,
        gravity=record.gravity,
        opsmode=record.opsmode,
    )


def sgp4_propagate(record: SatelliteRecord, tsince: float) -> StateVector | PropagationError:
    """Propagate a record to ``tsince`` minutes from its epoch.

    For deep-space records the resonance integrator's continuation token on
    ``record`` is replaced, whether or not the step succeeds.

    Args:
        record: Record from :func:`~astroprop.sgp4.sgp4_init`.
        tsince: Time since epoch [min]; negative values propagate backward.

    Returns:
        StateVector | PropagationError: TEME state in km and km/s, or the
        reason propagation failed.

    Examples:
        ```python
        from astroprop.sgp4 import PropagationError, sgp4_propagate
        result = sgp4_propagate(record, 1440.0)
        if isinstance(result, PropagationError):
            print(result.message)
        else:
            r_km, v_kms = result.position, result.velocity
        ```
    """
    result = _step(record, tsince)
    if record.integrator is not None:
        record.integrator = result.integrator

    code = int(result.error)
    if code != 0:
        error = PropagationError(code)
        logger.debug(
            "Propagation of satellite %s to %.3f min failed: %s",
            record.satnum,
            float(tsince),
            error.message,
        )
        return error

    return StateVector(
        tsince=float(tsince),
        position=result.position,
        velocity=result.velocity,
        mean=result.mean,
    )


def sgp4_propagate_array(
    record: SatelliteRecord, tsince: ArrayLike
) -> tuple[Array, Array, Array]:
    """Propagate a record to many times at once.

    The kernel is vmapped over ``tsince``. Each time is integrated from the
    record's current continuation token, and the record is not modified.

    Args:
        record: Record from :func:`~astroprop.sgp4.sgp4_init`.
        tsince: Times since epoch [min], scalar or 1-D.

    Returns:
        tuple: ``(r, v, error)`` with shapes ``(N, 3)``, ``(N, 3)`` and
        ``(N,)``. Failed rows hold NaN and a non-zero error code.
    """
    tsince = jnp.atleast_1d(jnp.asarray(tsince, dtype=get_dtype()))

    def _one(t):
        result = _step(record, t)
        return result.position, result.velocity, result.error

    return jax.vmap(_one)(tsince)


def minutes_since_epoch(record: SatelliteRecord, dt: datetime) -> float:
    """Return the minutes from a record's epoch to ``dt``.

    Naive datetimes are interpreted as UTC.

    Args:
        record: Initialized record.
        dt: Instant of interest.

    Returns:
        float: Minutes since epoch (negative before epoch).
    """
    jd, fr = julian_date_parts(dt)
    return ((jd - record.jdsatepoch) + (fr - record.jdsatepochF)) * MINUTES_PER_DAY


def sgp4_propagate_datetime(
    record: SatelliteRecord, dt: datetime
) -> StateVector | PropagationError:
    """Propagate a record to an absolute time.

    Args:
        record: Initialized record.
        dt: Instant of interest; naive datetimes are UTC.

    Returns:
        StateVector | PropagationError: As :func:`sgp4_propagate`.
    """
    return sgp4_propagate(record, minutes_since_epoch(record, dt))


def propagate_catalog(
    records: Iterable[SatelliteRecord],
    when: float | datetime,
) -> dict[int, StateVector | PropagationError]:
    """Propagate a catalog of records, continuing past failures.

    Args:
        records: Initialized records.
        when: Minutes since each record's own epoch, or an absolute time
            shared by all records.

    Returns:
        dict: Catalog number to state or failure, in input order. When a
        catalog number repeats, the last record wins and a warning is
        logged.
    """
    results: dict[int, StateVector | PropagationError] = {}
    total = 0
    failures = 0
    for record in records:
        total += 1
        if record.satnum in results:
            logger.warning("Duplicate satellite %s in catalog; keeping the last record", record.satnum)
        if isinstance(when, datetime):
            result = sgp4_propagate_datetime(record, when)
        else:
            result = sgp4_propagate(record, when)
        if isinstance(result, PropagationError):
            failures += 1
            logger.warning("Skipping satellite %s: %s", record.satnum, result.message)
        results[record.satnum] = result

    if failures:
        logger.warning("%d of %d satellites failed to propagate", failures, total)
    return results

"""
Data types for the SGP4/SDP4 propagator.

The per-satellite constants computed at initialization are grouped into
``NamedTuple`` sub-structures. NamedTuples are JAX pytrees, so each group can
be passed straight into a jitted or vmapped kernel. ``SatelliteRecord`` is the
plain mutable container that owns these groups for one object.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from astroprop.constants import DEG2RAD, JD_SGP4_EPOCH_BASE, MINUTES_PER_DAY, XPDOTP
from astroprop.sgp4._constants import EarthGravity
from astroprop.time import tle_epoch_to_jd


@dataclass(frozen=True)
class OrbitalElements:
    """Mean orbital elements as delivered by an element-set parser.

    Angles are in degrees and mean motion in revolutions per day, the units
    the element-set format carries. The propagator converts them to radians
    and radians/minute internally.

    Attributes:
        satnum: Satellite catalog number.
        epoch_year: Two-digit epoch year (0-99). Years below 57 are 20xx.
        epoch_days: Day of year with fraction (1.0 is January 1 00:00 UTC).
        mean_motion: Mean motion [rev/day].
        eccentricity: Eccentricity, in ``[0, 1)``.
        inclination: Inclination [deg], in ``[0, 180]``.
        raan: Right ascension of the ascending node [deg].
        arg_perigee: Argument of perigee [deg].
        mean_anomaly: Mean anomaly [deg].
        ndot: First derivative of mean motion divided by 2 [rev/day^2].
        nddot: Second derivative of mean motion divided by 6 [rev/day^3].
        bstar: B* drag coefficient [1/earth radii].
        ephemeris_type: Ephemeris type (0 for SGP4 element sets).
        element_number: Element set number.

    Raises:
        ValueError: If eccentricity, inclination or mean motion is out of
            range.
    """

    satnum: int
    epoch_year: int
    epoch_days: float
    mean_motion: float
    eccentricity: float
    inclination: float
    raan: float
    arg_perigee: float
    mean_anomaly: float
    ndot: float = 0.0
    nddot: float = 0.0
    bstar: float = 0.0
    ephemeris_type: int = 0
    element_number: int = 0

    def __post_init__(self) -> None:
        if not 0.0 <= self.eccentricity < 1.0:
            raise ValueError(f"eccentricity must be in [0, 1), got {self.eccentricity}")
        if not 0.0 <= self.inclination <= 180.0:
            raise ValueError(f"inclination must be in [0, 180] deg, got {self.inclination}")
        if not self.mean_motion > 0.0:
            raise ValueError(f"mean motion must be positive, got {self.mean_motion}")
        if not 0 <= self.epoch_year <= 99:
            raise ValueError(f"epoch_year must be a two-digit year, got {self.epoch_year}")

    @property
    def epoch_jd(self) -> tuple[float, float]:
        """Epoch as a Julian date split into ``(whole, fraction)``."""
        return tle_epoch_to_jd(self.epoch_year, self.epoch_days)

    @property
    def epoch_since_1950(self) -> float:
        """Epoch in days since 1949 December 31 00:00 UT."""
        jd, fr = self.epoch_jd
        return jd + fr - JD_SGP4_EPOCH_BASE

    def to_epoch_elements(self) -> EpochElements:
        """Convert to the internal radian / radian-per-minute element set.

        The un-Kozai mean motion is not known until initialization, so
        ``no_unkozai`` is set equal to ``no_kozai`` here.
        """
        no_kozai = self.mean_motion / XPDOTP
        return EpochElements(
            ecco=self.eccentricity,
            inclo=self.inclination * DEG2RAD,
            nodeo=self.raan * DEG2RAD,
            argpo=self.arg_perigee * DEG2RAD,
            mo=self.mean_anomaly * DEG2RAD,
            no_kozai=no_kozai,
            no_unkozai=no_kozai,
            bstar=self.bstar,
            ndot=self.ndot / (XPDOTP * MINUTES_PER_DAY),
            nddot=self.nddot / (XPDOTP * MINUTES_PER_DAY * MINUTES_PER_DAY),
        )


class EpochElements(NamedTuple):
    """Mean elements at epoch in propagator units.

    Angles in radians, mean motions in radians/minute, ``ndot`` and ``nddot``
    in radians/minute^2 and radians/minute^3.
    """

    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    no_kozai: float
    no_unkozai: float
    bstar: float
    ndot: float
    nddot: float


class NearEarthTerms(NamedTuple):
    """Secular-rate and drag coefficients shared by both branches.

    ``isimp`` is 1.0 when the simplified drag model applies (perigee below
    220 km, or any deep-space orbit); the higher-order drag terms
    ``d2..d4`` and ``t3cof..t5cof`` are zero in that case.
    """

    isimp: float
    con41: float
    x1mth2: float
    x7thm1: float
    cc1: float
    cc4: float
    cc5: float
    d2: float
    d3: float
    d4: float
    delmo: float
    eta: float
    mdot: float
    argpdot: float
    nodedot: float
    omgcof: float
    sinmao: float
    t2cof: float
    t3cof: float
    t4cof: float
    t5cof: float
    xlcof: float
    xmcof: float
    nodecf: float
    aycof: float


class LunarSolarTerms(NamedTuple):
    """Long-period lunar and solar periodic amplitudes (deep space only)."""

    # solar
    se2: float
    se3: float
    si2: float
    si3: float
    sl2: float
    sl3: float
    sl4: float
    sgh2: float
    sgh3: float
    sgh4: float
    sh2: float
    sh3: float
    # lunar
    ee2: float
    e3: float
    xi2: float
    xi3: float
    xl2: float
    xl3: float
    xl4: float
    xgh2: float
    xgh3: float
    xgh4: float
    xh2: float
    xh3: float
    # mean anomalies of the Moon and Sun at epoch
    zmol: float
    zmos: float
    # periodic offsets at epoch
    peo: float
    pinco: float
    plo: float
    pgho: float
    pho: float


class ResonanceTerms(NamedTuple):
    """Deep-space secular rates and resonance coefficients.

    ``irez`` is 0.0 (no resonance), 1.0 (synchronous, ~1 rev/day) or 2.0
    (half-day, ~2 rev/day and eccentric).
    """

    irez: float
    d2201: float
    d2211: float
    d3210: float
    d3222: float
    d4410: float
    d4422: float
    d5220: float
    d5232: float
    d5421: float
    d5433: float
    del1: float
    del2: float
    del3: float
    dedt: float
    didt: float
    dmdt: float
    dnodt: float
    domdt: float
    xfact: float
    xlamo: float
    gsto: float


class IntegratorState(NamedTuple):
    """Continuation token of the resonance integrator.

    Attributes:
        atime: Time the integrator last stopped at [min since epoch].
        xli: Integrated resonance longitude [rad].
        xni: Integrated mean motion [rad/min].
    """

    atime: float
    xli: float
    xni: float


class DscomResult(NamedTuple):
    """Lunar/solar geometry computed by ``dscom``.

    Carries the periodic amplitudes plus the intermediate ``s``/``ss`` and
    ``z``/``sz`` coefficients the resonance initializer needs.
    """

    lunar_solar: LunarSolarTerms
    sinim: float
    cosim: float
    emsq: float
    s1: float
    s2: float
    s3: float
    s4: float
    s5: float
    ss1: float
    ss2: float
    ss3: float
    ss4: float
    ss5: float
    z1: float
    z3: float
    z11: float
    z13: float
    z21: float
    z23: float
    z31: float
    z33: float
    sz1: float
    sz3: float
    sz11: float
    sz13: float
    sz21: float
    sz23: float
    sz31: float
    sz33: float


class DpperMode(enum.Enum):
    """Evaluation mode of the lunar/solar long-period periodics."""

    INIT = "y"
    UPDATE = "n"


class LongPeriodElements(NamedTuple):
    """Elements passed through the lunar/solar long-period periodics."""

    ep: Array
    inclp: Array
    nodep: Array
    argpp: Array
    mp: Array


class DspaceResult(NamedTuple):
    """Mean elements after deep-space secular and resonance effects."""

    em: Array
    argpm: Array
    inclm: Array
    mm: Array
    nodem: Array
    nm: Array
    dndt: Array


class KeplerSolution(NamedTuple):
    """Outcome of the bounded Newton solve of Kepler's equation.

    Attributes:
        eo1: Eccentric longitude after the last iteration [rad].
        sin_eo1: Sine of the iterate the last correction was computed at.
        cos_eo1: Cosine of the iterate the last correction was computed at.
        converged: Whether the last correction fell below the tolerance.
        iterations: Number of Newton steps taken.
    """

    eo1: Array
    sin_eo1: Array
    cos_eo1: Array
    converged: Array
    iterations: Array


class MeanElements(NamedTuple):
    """Singly averaged mean elements at the propagation time.

    Attributes:
        am: Semi-major axis [earth radii].
        em: Eccentricity.
        inclm: Inclination [rad].
        nodem: Right ascension of the ascending node [rad].
        argpm: Argument of perigee [rad].
        mm: Mean anomaly [rad].
        nm: Mean motion [rad/min].
    """

    am: Array
    em: Array
    inclm: Array
    nodem: Array
    argpm: Array
    mm: Array
    nm: Array


class StepResult(NamedTuple):
    """Array-level output of one propagation step.

    ``position`` and ``velocity`` are NaN when ``error`` is non-zero.
    """

    position: Array
    velocity: Array
    error: Array
    mean: MeanElements
    kepler: KeplerSolution
    integrator: IntegratorState | None


class PropagationError(enum.IntEnum):
    """Typed propagation failure.

    Values follow the error numbering of the reference SGP4 code.
    """

    MEAN_ECCENTRICITY_OUT_OF_RANGE = 1
    MEAN_MOTION_BELOW_ZERO = 2
    PERTURBED_ECCENTRICITY_OUT_OF_RANGE = 3
    SEMI_LATUS_RECTUM_BELOW_ZERO = 4
    DECAYED = 6

    @property
    def message(self) -> str:
        """Human-readable description of the failure."""
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    PropagationError.MEAN_ECCENTRICITY_OUT_OF_RANGE: (
        "mean eccentricity is outside the range 0 <= e < 1"
    ),
    PropagationError.MEAN_MOTION_BELOW_ZERO: "mean motion has fallen below zero",
    PropagationError.PERTURBED_ECCENTRICITY_OUT_OF_RANGE: (
        "perturbed eccentricity is outside the range 0 <= e <= 1"
    ),
    PropagationError.SEMI_LATUS_RECTUM_BELOW_ZERO: "semi-latus rectum is below zero",
    PropagationError.DECAYED: "orbit radius is below one earth radius; the satellite has decayed",
}


class Branch(enum.Enum):
    """Propagation branch chosen at initialization."""

    NEAR_EARTH = "n"
    DEEP_SPACE = "d"


@dataclass(frozen=True)
class StateVector:
    """Successful propagation result in the TEME frame.

    Attributes:
        tsince: Time since epoch [min].
        position: Position ``[x, y, z]`` [km].
        velocity: Velocity ``[vx, vy, vz]`` [km/s].
        mean: Mean elements the state was computed from.
    """

    tsince: float
    position: Array
    velocity: Array
    mean: MeanElements

    @property
    def state(self) -> Array:
        """6-element state ``[x, y, z, vx, vy, vz]`` [km, km/s]."""
        return jnp.concatenate([self.position, self.velocity])


@dataclass
class SatelliteRecord:
    """Initialized propagator state for one satellite.

    Created by :func:`~astroprop.sgp4.sgp4_init`. Every field is fixed after
    initialization except ``integrator``, which :func:`sgp4_propagate`
    replaces on each call for deep-space records. Propagating the same record
    from several threads at once is not supported; distinct records are
    independent.

    Attributes:
        satnum: Satellite catalog number.
        jdsatepoch: Epoch Julian date, whole part.
        jdsatepochF: Epoch Julian date, fractional part.
        epoch: Epoch in days since 1949 December 31 00:00 UT.
        gravity: Gravity model used.
        opsmode: ``'i'`` (improved) or ``'a'`` (AFSPC compatibility).
        branch: Near-earth (SGP4) or deep-space (SDP4).
        elements: Mean elements at epoch.
        near: Secular-rate and drag coefficients.
        gsto: Greenwich sidereal time at epoch [rad].
        a: Semi-major axis [earth radii].
        alta: Apogee altitude [earth radii].
        altp: Perigee altitude [earth radii].
        lunar_solar: Lunar/solar periodic terms, deep space only.
        resonance: Resonance terms, deep space only.
        integrator: Resonance integrator continuation token, deep space only.
    """

    satnum: int
    jdsatepoch: float
    jdsatepochF: float
    epoch: float
    gravity: EarthGravity
    opsmode: str
    branch: Branch
    elements: EpochElements
    near: NearEarthTerms
    gsto: float
    a: float
    alta: float
    altp: float
    lunar_solar: LunarSolarTerms | None = None
    resonance: ResonanceTerms | None = None
    integrator: IntegratorState | None = None

    @property
    def is_deep_space(self) -> bool:
        """Whether the record propagates with the deep-space branch."""
        return self.branch is Branch.DEEP_SPACE

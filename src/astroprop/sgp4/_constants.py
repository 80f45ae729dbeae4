"""
Earth gravity models and fixed numerical constants of the SGP4/SDP4 theory.

Three gravity models are provided: WGS72OLD, WGS72 (the standard model the
published element sets are fitted against) and WGS84. Each is derived from
the gravitational parameter, equatorial radius and the J2..J4 zonal
harmonics; ``xke`` is the square root of GM in earth radii per minute.
"""

from __future__ import annotations

from math import pi, sqrt
from typing import NamedTuple


class EarthGravity(NamedTuple):
    """Earth gravity model constants for SGP4 propagation.

    Instances are hashable, so they can be passed to jitted functions as
    static arguments.

    Attributes:
        name: Model name (``'wgs72'``, ``'wgs72old'`` or ``'wgs84'``).
        tumin: Minutes per SGP4 time unit (1/xke).
        mu: Gravitational parameter [km^3/s^2].
        radiusearthkm: Earth equatorial radius [km].
        xke: sqrt(GM) in earth radii^1.5 per minute.
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        j3oj2: Ratio j3/j2.
    """

    name: str
    tumin: float
    mu: float
    radiusearthkm: float
    xke: float
    j2: float
    j3: float
    j4: float
    j3oj2: float

    @property
    def vkmpersec(self) -> float:
        """Velocity unit: one earth radius per SGP4 time unit, in km/s."""
        return self.radiusearthkm * self.xke / 60.0


def _gravity_model(
    name: str,
    mu: float,
    radiusearthkm: float,
    j2: float,
    j3: float,
    j4: float,
    xke: float | None = None,
) -> EarthGravity:
    if xke is None:
        xke = 60.0 / sqrt(radiusearthkm**3 / mu)
    return EarthGravity(
        name=name,
        tumin=1.0 / xke,
        mu=mu,
        radiusearthkm=radiusearthkm,
        xke=xke,
        j2=j2,
        j3=j3,
        j4=j4,
        j3oj2=j3 / j2,
    )


WGS72OLD = _gravity_model(
    "wgs72old",
    mu=398600.79964,
    radiusearthkm=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    xke=0.0743669161,
)
"""WGS 72 Old gravity model (legacy, fixed xke)."""

WGS72 = _gravity_model(
    "wgs72",
    mu=398600.8,
    radiusearthkm=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
)
"""WGS 72 gravity model (standard for SGP4)."""

WGS84 = _gravity_model(
    "wgs84",
    mu=398600.5,
    radiusearthkm=6378.137,
    j2=0.00108262998905,
    j3=-0.00000253215306,
    j4=-0.00000161098761,
)
"""WGS 84 gravity model."""

GRAVITY_MODELS = {model.name: model for model in (WGS72OLD, WGS72, WGS84)}
"""Mapping of lower-case gravity model names to ``EarthGravity`` instances."""


def get_gravity_model(gravity: str | EarthGravity) -> EarthGravity:
    """Resolve a gravity model given by name or instance.

    Args:
        gravity: Model name (case-insensitive) or an :class:`EarthGravity`.

    Returns:
        EarthGravity: The resolved model.

    Raises:
        KeyError: If the name is not one of ``GRAVITY_MODELS``.
    """
    if isinstance(gravity, EarthGravity):
        return gravity
    return GRAVITY_MODELS[gravity.lower()]


# Theory constants shared by the init and propagation code
TWOPI = 2.0 * pi
X2O3 = 2.0 / 3.0
TEMP4 = 1.5e-12  # guard for 1 + cos(i) near 180 deg inclination

DEEP_SPACE_PERIOD_MIN = 225.0  # orbits at or above this period use SDP4

# Solar and lunar mean motions [rad/min] and orbit eccentricities
ZNS = 1.19459e-5
ZES = 0.01675
ZNL = 1.5835218e-4
ZEL = 0.05490

RPTIM = 4.37526908801129966e-3  # Earth rotation [rad/min]

# Resonance integrator step [min] and half its square
STEPP = 720.0
STEP2 = 259200.0

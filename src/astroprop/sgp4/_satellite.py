"""High-level satellite class for SGP4/SDP4 propagation.

Provides :class:`Satellite`, a convenience wrapper that combines
initialization, propagation and the time/frame utilities into a single
object with user-friendly properties and methods.
"""

from __future__ import annotations

from datetime import datetime

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.constants import TWO_PI
from astroprop.coordinates import (
    doppler_factor,
    look_angles,
    position_ecef_to_geodetic,
    position_geodetic_to_ecef,
)
from astroprop.frames import rotation_teme_to_ecef, state_teme_to_ecef
from astroprop.sgp4._constants import WGS72, EarthGravity
from astroprop.sgp4._initialization import sgp4_init
from astroprop.sgp4._propagation import (
    minutes_since_epoch,
    sgp4_propagate,
    sgp4_propagate_array,
    sgp4_propagate_datetime,
)
from astroprop.sgp4._types import (
    Branch,
    OrbitalElements,
    PropagationError,
    SatelliteRecord,
    StateVector,
)
from astroprop.time import gmst, invjday, julian_date


class Satellite:
    """Orbital elements with SGP4/SDP4 propagation and frame transforms.

    The ``propagate`` methods return TEME output in km and km/s, or a
    :class:`PropagationError`. The ``*_at`` methods take an absolute time and
    return Earth-fixed, geodetic or topocentric quantities; they return
    ``None`` when propagation fails.

    Examples:
        ```python
        from datetime import datetime, timezone
        from astroprop.sgp4 import OrbitalElements, Satellite

        el = OrbitalElements(
            satnum=25544, epoch_year=8, epoch_days=264.51782528,
            mean_motion=15.72125391, eccentricity=0.0006703,
            inclination=51.6416, raan=247.4627, arg_perigee=130.5360,
            mean_anomaly=325.0288, ndot=-0.00002182, bstar=-0.11606e-4,
        )
        sat = Satellite(el)

        sat.period              # minutes
        state = sat.propagate(90.0)
        lon, lat, alt = sat.geodetic_at(datetime(2008, 9, 21, 12, tzinfo=timezone.utc))
        ```

    Args:
        elements: Mean orbital elements.
        gravity: Gravity model name or :class:`EarthGravity` instance.
        opsmode: ``'i'`` (improved) or ``'a'`` (AFSPC compatibility).
    """

    def __init__(
        self,
        elements: OrbitalElements,
        gravity: str | EarthGravity = WGS72,
        opsmode: str = "i",
    ) -> None:
        self._elements = elements
        self._record: SatelliteRecord = sgp4_init(elements, gravity, opsmode)

    # ------------------------------------------------------------------
    # Properties (user-friendly units)
    # ------------------------------------------------------------------

    @property
    def elements(self) -> OrbitalElements:
        """Mean orbital elements the satellite was created from."""
        return self._elements

    @property
    def record(self) -> SatelliteRecord:
        """Underlying propagator record (for advanced use)."""
        return self._record

    @property
    def satnum(self) -> int:
        """Catalog number."""
        return self._elements.satnum

    @property
    def epoch(self) -> datetime:
        """Element epoch as a UTC datetime."""
        return invjday(self._record.jdsatepoch, self._record.jdsatepochF)

    @property
    def branch(self) -> Branch:
        """Propagation branch chosen at initialization."""
        return self._record.branch

    @property
    def period(self) -> float:
        """Orbital period from the un-Kozai mean motion [min]."""
        return TWO_PI / float(self._record.elements.no_unkozai)

    @property
    def semi_major_axis(self) -> float:
        """Mean semi-major axis [km]."""
        return self._record.a * self._record.gravity.radiusearthkm

    @property
    def apogee_altitude(self) -> float:
        """Apogee altitude above the equatorial radius [km]."""
        return self._record.alta * self._record.gravity.radiusearthkm

    @property
    def perigee_altitude(self) -> float:
        """Perigee altitude above the equatorial radius [km]."""
        return self._record.altp * self._record.gravity.radiusearthkm

    # ------------------------------------------------------------------
    # TEME output (km, km/s)
    # ------------------------------------------------------------------

    def propagate(self, tsince: float) -> StateVector | PropagationError:
        """Propagate to ``tsince`` minutes from epoch.

        Args:
            tsince: Time since epoch [min].

        Returns:
            StateVector | PropagationError: TEME state or the failure.
        """
        return sgp4_propagate(self._record, tsince)

    def propagate_array(self, tsince: ArrayLike) -> tuple[Array, Array, Array]:
        """Propagate to many times at once; see :func:`sgp4_propagate_array`."""
        return sgp4_propagate_array(self._record, tsince)

    def minutes_since_epoch(self, dt: datetime) -> float:
        """Minutes from the element epoch to ``dt``."""
        return minutes_since_epoch(self._record, dt)

    def state_at(self, dt: datetime) -> StateVector | PropagationError:
        """Propagate to an absolute time.

        Args:
            dt: Instant of interest; naive datetimes are UTC.

        Returns:
            StateVector | PropagationError: TEME state or the failure.
        """
        return sgp4_propagate_datetime(self._record, dt)

    # ------------------------------------------------------------------
    # Earth-fixed and observer-relative output
    # ------------------------------------------------------------------

    def _teme_and_gmst(self, dt: datetime) -> tuple[StateVector, Array] | None:
        result = self.state_at(dt)
        if isinstance(result, PropagationError):
            return None
        return result, gmst(julian_date(dt))

    def state_ecef_at(self, dt: datetime) -> Array | None:
        """Earth-fixed state ``[x, y, z, vx, vy, vz]`` [km, km/s] at ``dt``."""
        found = self._teme_and_gmst(dt)
        if found is None:
            return None
        state, theta = found
        return state_teme_to_ecef(state.state, theta)

    def geodetic_at(self, dt: datetime) -> Array | None:
        """Sub-satellite point ``[lon, lat, alt]`` [deg, deg, km] at ``dt``."""
        x_ecef = self.state_ecef_at(dt)
        if x_ecef is None:
            return None
        return position_ecef_to_geodetic(x_ecef[:3])

    def look_angles_at(self, observer_geod: ArrayLike, dt: datetime) -> Array | None:
        """Azimuth, elevation and range from a ground observer.

        Args:
            observer_geod: Observer ``[lon, lat, alt]`` [deg, deg, km].
            dt: Instant of interest.

        Returns:
            ``[az, el, range]`` [deg, deg, km], or ``None`` if propagation
            fails.
        """
        x_ecef = self.state_ecef_at(dt)
        if x_ecef is None:
            return None
        return look_angles(observer_geod, x_ecef[:3])

    def doppler_factor_at(self, observer_geod: ArrayLike, dt: datetime) -> Array | None:
        """Doppler factor seen by a ground observer at ``dt``.

        Args:
            observer_geod: Observer ``[lon, lat, alt]`` [deg, deg, km].
            dt: Instant of interest.

        Returns:
            Received-to-transmitted frequency ratio, or ``None`` if
            propagation fails.
        """
        found = self._teme_and_gmst(dt)
        if found is None:
            return None
        state, theta = found
        rot = rotation_teme_to_ecef(theta)
        observer_ecef = position_geodetic_to_ecef(jnp.asarray(observer_geod))
        return doppler_factor(observer_ecef, rot @ state.position, rot @ state.velocity)

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Satellite(satnum={self.satnum}, epoch={self.epoch.isoformat()}, "
            f"n={self._elements.mean_motion:.8f} rev/day, branch={self.branch.name})"
        )

"""South-East-Zenith (SEZ) topocentric geometry for ground observers.

Converts a target's Earth-fixed position into azimuth, elevation and range
as seen by an observer on the WGS84 ellipsoid, and provides the range-rate
and Doppler factor needed for pass prediction and radio link budgets.

The SEZ frame is a right-handed coordinate system at the observer:

- **South** (S): tangent to the surface, pointing geographic south
- **East** (E): tangent to the surface, pointing geographic east
- **Zenith** (Z): normal to the surface, pointing outward

Azimuth is measured clockwise from north in ``[0, 360)`` deg.  Distances
are in kilometres and speeds in kilometres/second.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.config import get_dtype
from astroprop.constants import C_LIGHT, OMEGA_EARTH, TWO_PI
from astroprop.coordinates.geodetic import position_geodetic_to_ecef


def rotation_ecef_to_sez(
    observer_geod: ArrayLike,
    use_degrees: bool = True,
) -> Array:
    """Compute the rotation matrix from Earth-fixed to South-East-Zenith.

    Args:
        observer_geod: Observer geodetic coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *deg* (or *rad* if ``use_degrees=False``),
            altitude in *km*.  Only the angles are used.
        use_degrees: If ``True`` (default), interpret angles as degrees.

    Returns:
        3x3 rotation matrix (ECEF -> SEZ).
    """
    observer_geod = jnp.asarray(observer_geod, dtype=get_dtype())

    lon = observer_geod[0]
    lat = observer_geod[1]

    if use_degrees:
        lon = jnp.deg2rad(lon)
        lat = jnp.deg2rad(lat)

    sin_lon = jnp.sin(lon)
    cos_lon = jnp.cos(lon)
    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    # Rows are S, E, Z basis vectors expressed in ECEF
    return jnp.array([
        [sin_lat * cos_lon, sin_lat * sin_lon, -cos_lat],     # South
        [-sin_lon, cos_lon, 0.0],                             # East
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],      # Zenith
    ])


def relative_position_ecef_to_sez(
    observer_geod: ArrayLike,
    target_ecef: ArrayLike,
    use_degrees: bool = True,
) -> Array:
    """Express the observer-to-target vector in the observer's SEZ frame.

    Args:
        observer_geod: Observer geodetic coordinates ``[lon, lat, alt]``
            (*deg*/*km*, or *rad*/*km* if ``use_degrees=False``).
        target_ecef: Target Earth-fixed position ``[x, y, z]`` in *km*.
        use_degrees: If ``True`` (default), interpret observer angles as
            degrees.

    Returns:
        jax.Array: Relative position ``[s, e, z]`` in *km*.
    """
    target_ecef = jnp.asarray(target_ecef, dtype=get_dtype())
    observer_ecef = position_geodetic_to_ecef(observer_geod, use_degrees)
    rot = rotation_ecef_to_sez(observer_geod, use_degrees)
    return rot @ (target_ecef - observer_ecef)


def look_angles(
    observer_geod: ArrayLike,
    target_ecef: ArrayLike,
    use_degrees: bool = True,
) -> Array:
    """Compute azimuth, elevation and range of a target from an observer.

    Args:
        observer_geod: Observer geodetic coordinates ``[lon, lat, alt]``
            (*deg*/*km*, or *rad*/*km* if ``use_degrees=False``).
        target_ecef: Target Earth-fixed position ``[x, y, z]`` in *km*.
        use_degrees: If ``True`` (default), angles in and out are degrees.

    Returns:
        jax.Array: ``[azimuth, elevation, range]``.  Azimuth clockwise from
            north in ``[0, 360)`` deg, elevation in ``[-90, 90]`` deg, range
            in *km*.

    Examples:
        ```python
        import jax.numpy as jnp
        from astroprop.coordinates import look_angles, position_geodetic_to_ecef
        observer = jnp.array([0.0, 0.0, 0.0])
        overhead = position_geodetic_to_ecef(jnp.array([0.0, 0.0, 500.0]))
        az, el, rng = look_angles(observer, overhead)
        # el ≈ 90.0, rng ≈ 500.0
        ```
    """
    sez = relative_position_ecef_to_sez(observer_geod, target_ecef, use_degrees)
    top_s = sez[0]
    top_e = sez[1]
    top_z = sez[2]

    rng = jnp.linalg.norm(sez)
    el = jnp.arcsin(jnp.clip(top_z / rng, -1.0, 1.0))
    az = (jnp.arctan2(-top_e, top_s) + jnp.pi) % TWO_PI

    if use_degrees:
        az = jnp.rad2deg(az)
        el = jnp.rad2deg(el)

    return jnp.array([az, el, rng])


def range_rate(
    observer_ecef: ArrayLike,
    target_ecef: ArrayLike,
    target_vel_ecef: ArrayLike,
) -> Array:
    """Rate of change of observer-to-target distance.

    The observer is fixed to the rotating Earth, so ``target_vel_ecef`` must
    be the velocity relative to the Earth-fixed frame (as returned by
    :func:`~astroprop.frames.state_teme_to_ecef`).

    Args:
        observer_ecef: Observer Earth-fixed position [km].
        target_ecef: Target Earth-fixed position [km].
        target_vel_ecef: Target Earth-fixed velocity [km/s].

    Returns:
        Range rate [km/s]; positive when the target is receding.
    """
    dtype = get_dtype()
    observer_ecef = jnp.asarray(observer_ecef, dtype=dtype)
    target_ecef = jnp.asarray(target_ecef, dtype=dtype)
    target_vel_ecef = jnp.asarray(target_vel_ecef, dtype=dtype)

    rho = target_ecef - observer_ecef
    return jnp.dot(rho, target_vel_ecef) / jnp.linalg.norm(rho)


def doppler_factor(
    observer_ecef: ArrayLike,
    position: ArrayLike,
    velocity: ArrayLike,
) -> Array:
    """Doppler factor for a signal received by a ground observer.

    ``velocity`` is the target's inertial velocity expressed in Earth-fixed
    axes (the TEME velocity rotated by GMST, without the ``omega x r``
    correction).  The observer's own velocity from Earth rotation is
    removed before projecting onto the line of sight, which gives the same
    range rate as :func:`range_rate` with a fully transformed state.

    The received frequency is ``f_rx = doppler_factor * f_tx``.

    Args:
        observer_ecef: Observer Earth-fixed position [km].
        position: Target Earth-fixed position [km].
        velocity: Target inertial velocity in Earth-fixed axes [km/s].

    Returns:
        Dimensionless factor ``1 - range_rate / c``; above one while the
        target approaches.
    """
    dtype = get_dtype()
    observer_ecef = jnp.asarray(observer_ecef, dtype=dtype)
    position = jnp.asarray(position, dtype=dtype)
    velocity = jnp.asarray(velocity, dtype=dtype)

    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)
    observer_vel = jnp.cross(omega, observer_ecef)

    rho = position - observer_ecef
    rdot = jnp.dot(rho, velocity - observer_vel) / jnp.linalg.norm(rho)
    return 1.0 - rdot / C_LIGHT

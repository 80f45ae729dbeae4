"""Geodetic (WGS84 ellipsoid) coordinate transformations.

Converts between geodetic coordinates ``[longitude, latitude, altitude]``
and Earth-fixed Cartesian coordinates ``[x, y, z]``.

The forward transformation is closed-form; the inverse uses Bowring's
iterative method implemented with ``jax.lax.while_loop`` for JAX
traceability.

Distances are in kilometres.  Angles are in degrees unless
``use_degrees=False`` is passed, in which case radians are used.

References:
    1. NIMA Technical Report TR8350.2, *Department of Defense World Geodetic
       System 1984*.
    2. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, Springer, 2012, Sec. 5.3.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.config import get_dtype
from astroprop.constants import WGS84_a, WGS84_e2
from astroprop.frames.teme import position_teme_to_ecef

_MAX_ITERATIONS = 10


def position_geodetic_to_ecef(
    x_geod: ArrayLike,
    use_degrees: bool = True,
) -> Array:
    """Convert geodetic position to Earth-fixed Cartesian coordinates.

    Uses the WGS84 prime vertical radius of curvature:

    .. math::

        N = \\frac{a}{\\sqrt{1 - e^2 \\sin^2 \\phi}}

    Args:
        x_geod: Geodetic coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *deg* (or *rad* if ``use_degrees=False``),
            altitude in *km* above the WGS84 ellipsoid.
        use_degrees: If ``True`` (default), interpret longitude and latitude
            as degrees.

    Returns:
        jax.Array: Earth-fixed position ``[x, y, z]`` in *km*.

    Example:
        >>> import jax.numpy as jnp
        >>> from astroprop.coordinates import position_geodetic_to_ecef
        >>> x_ecef = position_geodetic_to_ecef(jnp.array([0.0, 0.0, 0.0]))
        >>> float(x_ecef[0])  # WGS84_a on the equator
        6378.137
    """
    x_geod = jnp.asarray(x_geod, dtype=get_dtype())

    lon = x_geod[0]
    lat = x_geod[1]
    alt = x_geod[2]

    if use_degrees:
        lon = jnp.deg2rad(lon)
        lat = jnp.deg2rad(lat)

    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    N = WGS84_a / jnp.sqrt(1.0 - WGS84_e2 * sin_lat * sin_lat)

    x = (N + alt) * cos_lat * jnp.cos(lon)
    y = (N + alt) * cos_lat * jnp.sin(lon)
    z = ((1.0 - WGS84_e2) * N + alt) * sin_lat

    return jnp.array([x, y, z])


def position_ecef_to_geodetic(
    x_ecef: ArrayLike,
    use_degrees: bool = True,
) -> Array:
    """Convert Earth-fixed Cartesian coordinates to geodetic position.

    Uses Bowring's iterative method with convergence controlled by
    ``jax.lax.while_loop`` (at most 10 iterations).  The convergence
    threshold scales with the machine epsilon of the configured dtype.

    Args:
        x_ecef: Earth-fixed position ``[x, y, z]`` in *km*.
        use_degrees: If ``True`` (default), return longitude and latitude
            in degrees.

    Returns:
        jax.Array: Geodetic coordinates ``[lon, lat, alt]``.
            Longitude in ``[-180, 180]`` and latitude in ``[-90, 90]`` *deg*
            (or *rad*), altitude in *km* above the WGS84 ellipsoid.

    Example:
        >>> import jax.numpy as jnp
        >>> from astroprop.coordinates import position_ecef_to_geodetic
        >>> geod = position_ecef_to_geodetic(jnp.array([6378.137, 0.0, 0.0]))
        >>> round(float(geod[2]), 9)  # altitude ≈ 0
        0.0
    """
    dtype = get_dtype()
    x_ecef = jnp.asarray(x_ecef, dtype=dtype)

    x = x_ecef[0]
    y = x_ecef[1]
    z = x_ecef[2]

    eps = 1.0e-3 * WGS84_a * jnp.finfo(dtype).eps
    rho2 = x * x + y * y

    # State: (dz, dz_prev, iteration_count)
    dz0 = WGS84_e2 * z

    def cond(state):
        dz, dz_prev, i = state
        return (jnp.abs(dz - dz_prev) > eps) & (i < _MAX_ITERATIONS)

    def body(state):
        dz, _, i = state
        zdz = z + dz
        Nh = jnp.sqrt(rho2 + zdz * zdz)
        sinphi = zdz / Nh
        N = WGS84_a / jnp.sqrt(1.0 - WGS84_e2 * sinphi * sinphi)
        dz_new = N * WGS84_e2 * sinphi
        return (dz_new, dz, i + 1)

    # Force a first iteration by starting dz_prev far from dz0
    init_state = (dz0, dz0 + 1e10, jnp.int32(0))
    dz_final, _, _ = jax.lax.while_loop(cond, body, init_state)

    zdz = z + dz_final
    lon = jnp.arctan2(y, x)
    lat = jnp.arctan2(zdz, jnp.sqrt(rho2))

    sinphi = zdz / jnp.sqrt(rho2 + zdz * zdz)
    N = WGS84_a / jnp.sqrt(1.0 - WGS84_e2 * sinphi * sinphi)
    alt = jnp.sqrt(rho2 + zdz * zdz) - N

    if use_degrees:
        lon = jnp.rad2deg(lon)
        lat = jnp.rad2deg(lat)

    return jnp.array([lon, lat, alt])


def position_teme_to_geodetic(
    r_teme: ArrayLike,
    gmst: ArrayLike,
    use_degrees: bool = True,
) -> Array:
    """Convert a TEME position straight to geodetic coordinates.

    Convenience composition of :func:`~astroprop.frames.position_teme_to_ecef`
    and :func:`position_ecef_to_geodetic`; this is the sub-satellite point
    used for ground tracks.

    Args:
        r_teme: TEME position ``[x, y, z]`` in *km*.
        gmst: Greenwich mean sidereal time [rad].
        use_degrees: If ``True`` (default), return angles in degrees.

    Returns:
        jax.Array: Geodetic coordinates ``[lon, lat, alt]``.
    """
    return position_ecef_to_geodetic(position_teme_to_ecef(r_teme, gmst), use_degrees)

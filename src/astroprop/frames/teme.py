"""TEME <-> Earth-fixed frame transformations for SGP4 output.

TEME (True Equator, Mean Equinox) is the native output frame of the SGP4/SDP4
propagator.  Rotating TEME by Greenwich mean sidereal time about the z-axis
gives the pseudo Earth-fixed (PEF) frame, which is what SGP4 consumers treat
as Earth-fixed (ECEF) for look angles, ground tracks and Doppler.  Polar
motion is neglected; it is well below the accuracy of the theory.

All inputs and outputs use kilometres and kilometres/second. ``gmst`` is in
radians (see :func:`astroprop.time.gmst`).
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astroprop.config import get_dtype
from astroprop.constants import OMEGA_EARTH


def rotation_teme_to_ecef(gmst: ArrayLike) -> Array:
    """Compute the 3x3 rotation matrix from TEME to Earth-fixed.

    Applies ``Rz(GMST)``: a passive rotation of the reference axes about
    the z-axis by the sidereal angle.

    Args:
        gmst: Greenwich mean sidereal time [rad].

    Returns:
        3x3 rotation matrix (TEME -> ECEF).
    """
    gmst = jnp.asarray(gmst, dtype=get_dtype())
    c = jnp.cos(gmst)
    s = jnp.sin(gmst)
    return jnp.array([[+c, +s, 0.0],
                      [-s, +c, 0.0],
                      [0.0, 0.0, 1.0]])


def position_teme_to_ecef(r_teme: ArrayLike, gmst: ArrayLike) -> Array:
    """Rotate a TEME position into the Earth-fixed frame.

    Args:
        r_teme: TEME position ``[x, y, z]`` [km].
        gmst: Greenwich mean sidereal time [rad].

    Returns:
        Earth-fixed position ``[x, y, z]`` [km].

    Examples:
        ```python
        import jax.numpy as jnp
        from astroprop.frames import position_teme_to_ecef
        r_ecef = position_teme_to_ecef(jnp.array([7000.0, 0.0, 0.0]), jnp.pi / 2)
        # r_ecef ≈ [0.0, -7000.0, 0.0]
        ```
    """
    r_teme = jnp.asarray(r_teme, dtype=get_dtype())
    return rotation_teme_to_ecef(gmst) @ r_teme


def position_ecef_to_teme(r_ecef: ArrayLike, gmst: ArrayLike) -> Array:
    """Rotate an Earth-fixed position into TEME.

    Inverse of :func:`position_teme_to_ecef`.

    Args:
        r_ecef: Earth-fixed position ``[x, y, z]`` [km].
        gmst: Greenwich mean sidereal time [rad].

    Returns:
        TEME position ``[x, y, z]`` [km].
    """
    r_ecef = jnp.asarray(r_ecef, dtype=get_dtype())
    return rotation_teme_to_ecef(gmst).T @ r_ecef


def state_teme_to_ecef(x_teme: ArrayLike, gmst: ArrayLike) -> Array:
    """Transform a 6-element state vector from TEME to Earth-fixed.

    Velocity includes the Earth-rotation correction:
    ``v_ecef = R @ v_teme - omega_earth x r_ecef``

    Args:
        x_teme: TEME state ``[x, y, z, vx, vy, vz]`` [km, km/s].
        gmst: Greenwich mean sidereal time [rad].

    Returns:
        Earth-fixed state ``[x, y, z, vx, vy, vz]`` [km, km/s].
    """
    dtype = get_dtype()
    x_teme = jnp.asarray(x_teme, dtype=dtype)

    R = rotation_teme_to_ecef(gmst)
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)

    r_ecef = R @ x_teme[:3]
    v_ecef = R @ x_teme[3:6] - jnp.cross(omega, r_ecef)

    return jnp.concatenate([r_ecef, v_ecef])


def state_ecef_to_teme(x_ecef: ArrayLike, gmst: ArrayLike) -> Array:
    """Transform a 6-element state vector from Earth-fixed to TEME.

    Inverse of :func:`state_teme_to_ecef`.

    Args:
        x_ecef: Earth-fixed state ``[x, y, z, vx, vy, vz]`` [km, km/s].
        gmst: Greenwich mean sidereal time [rad].

    Returns:
        TEME state ``[x, y, z, vx, vy, vz]`` [km, km/s].
    """
    dtype = get_dtype()
    x_ecef = jnp.asarray(x_ecef, dtype=dtype)

    R = rotation_teme_to_ecef(gmst)
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)

    r_ecef = x_ecef[:3]
    v_ecef = x_ecef[3:6]

    r_teme = R.T @ r_ecef
    v_teme = R.T @ (v_ecef + jnp.cross(omega, r_ecef))

    return jnp.concatenate([r_teme, v_teme])

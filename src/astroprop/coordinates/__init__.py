"""Coordinate transformations for propagator consumers.

- **Geodetic**: WGS84 ellipsoid model ``[lon, lat, alt]`` <-> Earth-fixed,
  plus TEME -> geodetic for ground tracks
- **Topocentric (SEZ)**: South-East-Zenith local horizontal frame for
  look angles, range rate and Doppler factor
"""

from .geodetic import (
    position_ecef_to_geodetic,
    position_geodetic_to_ecef,
    position_teme_to_geodetic,
)
from .topocentric import (
    doppler_factor,
    look_angles,
    range_rate,
    relative_position_ecef_to_sez,
    rotation_ecef_to_sez,
)

__all__ = [
    "position_geodetic_to_ecef",
    "position_ecef_to_geodetic",
    "position_teme_to_geodetic",
    "rotation_ecef_to_sez",
    "relative_position_ecef_to_sez",
    "look_angles",
    "range_rate",
    "doppler_factor",
]

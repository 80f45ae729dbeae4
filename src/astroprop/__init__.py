"""
astroprop is an SGP4/SDP4 satellite propagator with time and frame utilities, implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    TWO_PI,
    MINUTES_PER_DAY,
    SECONDS_PER_DAY,
    XPDOTP,
    JD_SGP4_EPOCH_BASE,
    JD2000,
    C_LIGHT,
    WGS84_a,
    WGS84_f,
    WGS84_e2,
    OMEGA_EARTH,
)

from .config import set_dtype, get_dtype

from .time import (
    jday,
    days2mdhms,
    tle_epoch_to_jd,
    julian_date,
    julian_date_parts,
    invjday,
    gmst,
    gstime,
)

from .frames import (
    rotation_teme_to_ecef,
    position_teme_to_ecef,
    position_ecef_to_teme,
    state_teme_to_ecef,
    state_ecef_to_teme,
)

from .coordinates import (
    position_geodetic_to_ecef,
    position_ecef_to_geodetic,
    position_teme_to_geodetic,
    rotation_ecef_to_sez,
    relative_position_ecef_to_sez,
    look_angles,
    range_rate,
    doppler_factor,
)

from .sgp4 import (
    OrbitalElements,
    SatelliteRecord,
    StateVector,
    PropagationError,
    Satellite,
    WGS72OLD,
    WGS72,
    WGS84,
    sgp4_init,
    sgp4_propagate,
    sgp4_propagate_array,
    sgp4_propagate_datetime,
    propagate_catalog,
)

__all__ = [
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "TWO_PI",
    "MINUTES_PER_DAY",
    "SECONDS_PER_DAY",
    "XPDOTP",
    "JD_SGP4_EPOCH_BASE",
    "JD2000",
    "C_LIGHT",
    "WGS84_a",
    "WGS84_f",
    "WGS84_e2",
    "OMEGA_EARTH",
    # Config
    "set_dtype",
    "get_dtype",
    # Time
    "jday",
    "days2mdhms",
    "tle_epoch_to_jd",
    "julian_date",
    "julian_date_parts",
    "invjday",
    "gmst",
    "gstime",
    # Frames
    "rotation_teme_to_ecef",
    "position_teme_to_ecef",
    "position_ecef_to_teme",
    "state_teme_to_ecef",
    "state_ecef_to_teme",
    # Coordinates
    "position_geodetic_to_ecef",
    "position_ecef_to_geodetic",
    "position_teme_to_geodetic",
    "rotation_ecef_to_sez",
    "relative_position_ecef_to_sez",
    "look_angles",
    "range_rate",
    "doppler_factor",
    # SGP4
    "OrbitalElements",
    "SatelliteRecord",
    "StateVector",
    "PropagationError",
    "Satellite",
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "sgp4_init",
    "sgp4_propagate",
    "sgp4_propagate_array",
    "sgp4_propagate_datetime",
    "propagate_catalog",
]

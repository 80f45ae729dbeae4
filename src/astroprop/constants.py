"""
The `constants` module defines the mathematical, time and physical constants
shared by the propagator and its time/frame utilities.

Distances are in kilometres and times in seconds unless noted otherwise,
matching the native units of SGP4 output.
"""

from math import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Full revolution in radians.
"""
TWO_PI = 2.0 * PI

# Time Constants

"""
Minutes per day. Units: *min/day*
"""
MINUTES_PER_DAY = 1440.0

"""
Seconds per day. Units: *s/day*
"""
SECONDS_PER_DAY = 86400.0

"""
Conversion from mean motion in rev/day to rad/min. Equal to 1440/2pi. Units:
*(rev/day) / (rad/min)*
"""
XPDOTP = MINUTES_PER_DAY / TWO_PI

"""
Julian Date of the SGP4 epoch base, 1949 December 31 00:00 UT. Epochs used
by the propagator are counted in days from this instant. Units: *days*
"""
JD_SGP4_EPOCH_BASE = 2433281.5

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00). Units: *days*
"""
JD2000 = 2451545.0

# Physical Constants
"""
Speed of light in vacuum. Units: *km/s*

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, 2010
"""
C_LIGHT = 299792.458  # [km/s] Exact definition

# Earth Constants
"""
Earth's semi-major axis as defined by the WGS84 geodetic system. [km]

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378.137  # WGS-84 semi-major axis

"""
Earth's ellipsoidal flattening.  WGS84 Value.

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_f = 1.0 / 298.257223563  # WGS-84 flattening

"""
Earth's first eccentricity squared. WGS84 Value. [dimensionless]
"""
WGS84_e2 = WGS84_f * (2.0 - WGS84_f)

"""
Earth axial rotation rate. [rad/s]

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, p. 222, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5  # [rad/s] Taken from Vallado 4th Ed page 222

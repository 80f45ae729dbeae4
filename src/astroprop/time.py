"""Time utilities for the propagator and its consumers.

Converts between calendar dates, ``datetime`` objects and Julian dates using
the same algorithms as the SGP4 reference code, so that epochs computed here
agree with those baked into published verification vectors. Julian dates are
carried as a whole/fraction pair where precision matters (TLE epochs) and as
a single float elsewhere.

All calendar times are UTC; UT1-UTC is neglected, as it is throughout the
SGP4 theory.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from math import floor

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from .config import get_dtype
from .constants import DEG2RAD, JD2000, SECONDS_PER_DAY, TWO_PI

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_J2000_DATETIME = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def jday(
    year: int,
    mon: int,
    day: int,
    hr: int = 0,
    minute: int = 0,
    sec: float = 0.0,
) -> tuple[float, float]:
    """Convert a calendar date to a Julian date split into whole and fraction.

    Valid for years 1900 through 2100.

    Args:
        year (int): Four-digit year.
        mon (int): Month, 1-12.
        day (int): Day of month, 1-31.
        hr (int): Hour, 0-23. Default: ``0``
        minute (int): Minute, 0-59. Default: ``0``
        sec (float): Seconds including fraction. Default: ``0.0``

    Returns:
        tuple[float, float]: ``(jd, fr)`` where ``jd`` ends in ``.5`` (midnight)
        and ``fr`` is the fraction of the day elapsed since then.

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, Algorithm 14.
    """
    jd = (
        367.0 * year
        - floor((7 * (year + floor((mon + 9) / 12.0))) * 0.25)
        + floor(275 * mon / 9.0)
        + day
        + 1721013.5
    )
    fr = (sec + minute * 60.0 + hr * 3600.0) / SECONDS_PER_DAY
    if abs(fr) > 1.0:
        whole = floor(fr)
        jd += whole
        fr -= whole
    return jd, fr


def days2mdhms(year: int, days: float) -> tuple[int, int, int, int, float]:
    """Convert a fractional day-of-year into month, day, hour, minute, second.

    Args:
        year (int): Four-digit year, used for the leap-year test.
        days (float): Day of year with fraction, ``1.0`` being January 1 00:00.

    Returns:
        tuple: ``(month, day, hour, minute, second)``.
    """
    lengths = list(_MONTH_LENGTHS)
    if year % 4 == 0:
        lengths[1] = 29

    dayofyr = int(floor(days))
    month = 1
    elapsed = 0
    while dayofyr > elapsed + lengths[month - 1] and month < 12:
        elapsed += lengths[month - 1]
        month += 1
    day = dayofyr - elapsed

    temp = (days - dayofyr) * 24.0
    hr = int(floor(temp))
    temp = (temp - hr) * 60.0
    minute = int(floor(temp))
    sec = (temp - minute) * 60.0
    return month, day, hr, minute, sec


def tle_epoch_to_jd(epoch_year: int, epoch_days: float) -> tuple[float, float]:
    """Convert a two-digit element-set epoch to a split Julian date.

    Two-digit years below 57 are taken to be in the 2000s, the rest in the
    1900s (the first artificial satellite launched in 1957).

    Args:
        epoch_year (int): Two-digit year, 0-99.
        epoch_days (float): Fractional day of year.

    Returns:
        tuple[float, float]: ``(jd, fr)`` as returned by :func:`jday`.
    """
    year = 2000 + epoch_year if epoch_year < 57 else 1900 + epoch_year
    mon, day, hr, minute, sec = days2mdhms(year, epoch_days)
    return jday(year, mon, day, hr, minute, sec)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def julian_date_parts(dt: datetime) -> tuple[float, float]:
    """Return the Julian date of a ``datetime`` split into whole and fraction.

    Naive datetimes are interpreted as UTC; aware datetimes are converted
    to UTC first.

    Args:
        dt (datetime): Instant to convert.

    Returns:
        tuple[float, float]: ``(jd, fr)`` as returned by :func:`jday`.
    """
    dt = _as_utc(dt)
    return jday(
        dt.year,
        dt.month,
        dt.day,
        dt.hour,
        dt.minute,
        dt.second + dt.microsecond * 1e-6,
    )


def julian_date(dt: datetime) -> float:
    """Return the Julian date of a ``datetime``.

    Naive datetimes are interpreted as UTC; aware datetimes are converted
    to UTC first.

    Args:
        dt (datetime): Instant to convert.

    Returns:
        float: Julian date.

    Examples:
        ```python
        from datetime import datetime
        from astroprop.time import julian_date
        julian_date(datetime(2000, 1, 1, 12))  # 2451545.0
        ```
    """
    jd, fr = julian_date_parts(dt)
    return jd + fr


def invjday(jd: float, fr: float = 0.0) -> datetime:
    """Convert a (split) Julian date back to a timezone-aware UTC ``datetime``.

    The result is rounded to the nearest microsecond.

    Args:
        jd (float): Julian date, or its whole-day part.
        fr (float): Optional fractional part. Default: ``0.0``

    Returns:
        datetime: UTC datetime.
    """
    days = (jd - JD2000) + fr
    return _J2000_DATETIME + timedelta(microseconds=round(days * SECONDS_PER_DAY * 1e6))


def gstime(jd_ut1: float) -> float:
    """Greenwich mean sidereal time in radians from a Python float Julian date.

    Evaluated in double precision regardless of the configured dtype; used
    for the epoch sidereal angle during initialization.
    """
    tut1 = (jd_ut1 - JD2000) / 36525.0
    seconds = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    theta = (seconds * DEG2RAD / 240.0) % TWO_PI
    if theta < 0.0:
        theta += TWO_PI
    return theta


def gmst(jd_ut1: ArrayLike, use_degrees: bool = False) -> jax.Array:
    """Compute Greenwich Mean Sidereal Time (IAU-82 model).

    This is the sidereal time used by SGP4 to relate its TEME output to an
    Earth-fixed frame.

    Args:
        jd_ut1 (ArrayLike): Julian date (UT1), scalar or array.
        use_degrees (bool): Return degrees instead of radians. Default: ``False``

    Returns:
        GMST in ``[0, 2pi)`` rad, or ``[0, 360)`` deg.

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, Eq. 3-47.
    """
    # A full Julian date needs float64 to resolve seconds; cast on return
    jd_ut1 = jnp.asarray(jd_ut1, dtype=jnp.float64)
    tut1 = (jd_ut1 - JD2000) / 36525.0
    seconds = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    # 360 deg per 86400 s is 1/240 deg per second of time
    theta = (seconds * DEG2RAD / 240.0) % TWO_PI
    theta = jnp.where(theta < 0.0, theta + TWO_PI, theta)

    if use_degrees:
        theta = jnp.rad2deg(theta)
    return theta.astype(get_dtype())

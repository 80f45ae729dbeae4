from datetime import datetime, timedelta, timezone
from math import pi

import jax
import jax.numpy as jnp
import pytest

from astroprop.time import (
    days2mdhms,
    gmst,
    gstime,
    invjday,
    jday,
    julian_date,
    julian_date_parts,
    tle_epoch_to_jd,
)


def test_jday_j2000():
    jd, fr = jday(2000, 1, 1, 12, 0, 0.0)
    assert jd == 2451544.5
    assert fr == pytest.approx(0.5, abs=1e-15)


def test_jday_midnight():
    jd, fr = jday(2000, 1, 1)
    assert jd == 2451544.5
    assert fr == 0.0


def test_jday_vallado_example():
    # Vallado Example 3-4: 1996 Oct 26 14:20:00 UT
    jd, fr = jday(1996, 10, 26, 14, 20, 0.0)
    assert jd + fr == pytest.approx(2450383.09722222, abs=1e-8)


def test_days2mdhms_leap_year():
    mon, day, hr, minute, sec = days2mdhms(2008, 264.51782528)
    assert (mon, day, hr, minute) == (9, 20, 12, 25)
    assert sec == pytest.approx(40.104192, abs=1e-5)


def test_days2mdhms_non_leap_year():
    mon, day, *_ = days2mdhms(2006, 60.0)
    assert (mon, day) == (3, 1)


def test_days2mdhms_leap_day():
    mon, day, *_ = days2mdhms(2008, 60.0)
    assert (mon, day) == (2, 29)


def test_tle_epoch_century():
    jd_2000s, _ = tle_epoch_to_jd(8, 1.0)
    jd_1900s, _ = tle_epoch_to_jd(98, 1.0)
    assert jd_2000s == jday(2008, 1, 1)[0]
    assert jd_1900s == jday(1998, 1, 1)[0]


def test_tle_epoch_boundary_year():
    assert tle_epoch_to_jd(56, 1.0)[0] == jday(2056, 1, 1)[0]
    assert tle_epoch_to_jd(57, 1.0)[0] == jday(1957, 1, 1)[0]


def test_julian_date_naive_is_utc():
    assert julian_date(datetime(2000, 1, 1, 12)) == 2451545.0


def test_julian_date_converts_timezone():
    est = timezone(timedelta(hours=-5))
    assert julian_date(datetime(2000, 1, 1, 7, tzinfo=est)) == 2451545.0


def test_julian_date_parts_keeps_fraction():
    jd, fr = julian_date_parts(datetime(2008, 9, 20, 12, 25, 40, 104192))
    assert jd == 2454729.5
    assert fr == pytest.approx((12 * 3600 + 25 * 60 + 40.104192) / 86400.0, abs=1e-15)


def test_invjday_roundtrip():
    dt = datetime(2008, 9, 20, 12, 25, 40, 104192, tzinfo=timezone.utc)
    assert invjday(*julian_date_parts(dt)) == dt


def test_invjday_is_utc():
    dt = invjday(2451545.0)
    assert dt == datetime(2000, 1, 1, 12, tzinfo=timezone.utc)
    assert dt.tzinfo is timezone.utc


def test_gmst_vallado_example():
    # Vallado Example 3-5: 1992 Aug 20 12:14:00 UT1, GMST = 152.578787810 deg
    theta = gmst(julian_date(datetime(1992, 8, 20, 12, 14)), use_degrees=True)
    assert float(theta) == pytest.approx(152.578787810, abs=1e-6)


def test_gstime_vallado_example():
    theta = gstime(julian_date(datetime(1992, 8, 20, 12, 14)))
    assert theta == pytest.approx(152.578787810 * pi / 180.0, abs=1e-8)


def test_gstime_matches_gmst():
    jd = 2454729.5 + 0.51782528
    assert isinstance(gstime(jd), float)
    assert gstime(jd) == pytest.approx(float(gmst(jd)), abs=1e-12)


def test_gmst_range():
    jd = 2451545.0 + jnp.linspace(-3650.0, 3650.0, 101)
    theta = gmst(jd)
    assert jnp.all(theta >= 0.0)
    assert jnp.all(theta < 2.0 * jnp.pi)


def test_gmst_advances_one_sidereal_day():
    # One solar day adds ~0.9856 deg of sidereal rotation
    a = gmst(2451545.0, use_degrees=True)
    b = gmst(2451546.0, use_degrees=True)
    assert float((b - a) % 360.0) == pytest.approx(0.98565, abs=1e-4)


def test_gmst_jit():
    theta = jax.jit(gmst)(2451545.0)
    assert float(theta) == pytest.approx(float(gmst(2451545.0)))

"""Tests for the astroprop.config module."""

import jax
import jax.numpy as jnp
import pytest

from astroprop.config import get_dtype, get_position_tolerance, set_dtype
from astroprop.coordinates import position_ecef_to_geodetic
from astroprop.sgp4 import sgp4_init, sgp4_propagate, sgp4_propagate_array
from astroprop.time import gmst
from sgp4_reference import GEO, ISS, elements_from_tle, reference_satrec, reference_state


@pytest.fixture(autouse=True)
def reset_dtype():
    """Start each test in float32 and restore the float64 default afterwards."""
    set_dtype(jnp.float32)
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_set_float32(self):
        assert get_dtype() == jnp.float32

    def test_set_float64(self):
        set_dtype(jnp.float64)
        assert get_dtype() == jnp.float64

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_float16_rejected(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.float16)

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestPositionTolerance:
    def test_float32_tolerance(self):
        assert get_position_tolerance() == 1e-1

    def test_float64_tolerance(self):
        set_dtype(jnp.float64)
        assert get_position_tolerance() == 1e-6


class TestDtypeSwitchingOutputs:
    """Output dtypes follow the configured dtype."""

    def test_gmst_dtype(self):
        assert gmst(2451545.0).dtype == jnp.float32
        set_dtype(jnp.float64)
        assert gmst(2451545.0).dtype == jnp.float64

    def test_gmst_resolves_full_julian_date(self):
        """A full Julian date is not rounded to single precision before use."""
        jd = 2453911.96683397
        theta32 = float(gmst(jd))
        set_dtype(jnp.float64)
        assert theta32 == pytest.approx(float(gmst(jd)), abs=1e-6)

    def test_geodetic_dtype(self):
        geod = position_ecef_to_geodetic(jnp.array([7000.0, 0.0, 0.0]))
        assert geod.dtype == jnp.float32

    def test_epoch_sidereal_time_is_double_precision(self):
        record32 = sgp4_init(elements_from_tle(GEO))
        set_dtype(jnp.float64)
        record64 = sgp4_init(elements_from_tle(GEO))
        assert record32.gsto == pytest.approx(record64.gsto, abs=1e-12)
        # resonance longitude is built from the epoch sidereal time
        assert float(record32.resonance.xlamo) == pytest.approx(float(record64.resonance.xlamo), abs=1e-5)

    def test_record_dtype(self):
        record = sgp4_init(elements_from_tle(ISS))
        assert record.near.cc1.dtype == jnp.float32

    def test_propagation_dtype(self):
        record = sgp4_init(elements_from_tle(ISS))
        r, v, _ = sgp4_propagate_array(record, jnp.array([0.0, 60.0]))
        assert r.dtype == jnp.float32
        assert v.dtype == jnp.float32


class TestFloat32Accuracy:
    def test_near_earth_within_tolerance(self):
        """Single precision stays within the dtype tolerance for a near-earth orbit."""
        record = sgp4_init(elements_from_tle(ISS))
        state = sgp4_propagate(record, 60.0)
        _, r_ref, _ = reference_state(reference_satrec(ISS), 60.0)
        assert jnp.allclose(state.position, jnp.array(r_ref, dtype=jnp.float32), atol=get_position_tolerance() * 10)

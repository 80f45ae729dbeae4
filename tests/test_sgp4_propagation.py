"""Tests for SGP4/SDP4 propagation against the reference python-sgp4 library."""

from datetime import datetime, timedelta, timezone

import jax.numpy as jnp
import numpy as np
import pytest

from astroprop.sgp4 import (
    WGS72,
    PropagationError,
    StateVector,
    minutes_since_epoch,
    propagate_catalog,
    sgp4_init,
    sgp4_propagate,
    sgp4_propagate_array,
    sgp4_propagate_datetime,
    sgp4_step,
)
from sgp4_reference import (
    DECAYING,
    GEO,
    GPS,
    ISS,
    LOW_PERIGEE,
    MOLNIYA,
    MOLNIYA_2,
    VANGUARD,
    elements_from_tle,
    reference_satrec,
    reference_state,
)

NEAR_EARTH_TIMES = [0.0, 60.0, 360.0, 720.0, 1440.0, -60.0, -1440.0, 4320.0]
DEEP_SPACE_TIMES = [0.0, 120.0, 1440.0, 2880.0, 10080.0, -1440.0, -4320.0]


def _assert_matches_reference(tle, tsince, gravity="wgs72", opsmode="i", pos_tol=1e-6, vel_tol=1e-9):
    record = sgp4_init(elements_from_tle(tle), gravity, opsmode)
    result = sgp4_propagate(record, tsince)

    e_ref, r_ref, v_ref = reference_state(reference_satrec(tle, gravity, opsmode), tsince)
    assert e_ref == 0
    assert isinstance(result, StateVector), f"propagation failed: {result}"

    np.testing.assert_allclose(np.asarray(result.position), r_ref, rtol=0.0, atol=pos_tol)
    np.testing.assert_allclose(np.asarray(result.velocity), v_ref, rtol=0.0, atol=vel_tol)


class TestNearEarth:
    """Near-earth (SGP4) branch against the reference."""

    @pytest.mark.parametrize("tsince", NEAR_EARTH_TIMES)
    def test_iss(self, tsince) -> None:
        _assert_matches_reference(ISS, tsince)

    @pytest.mark.parametrize("tsince", NEAR_EARTH_TIMES)
    def test_vanguard(self, tsince) -> None:
        """Eccentric near-earth orbit with the full drag model."""
        _assert_matches_reference(VANGUARD, tsince)

    @pytest.mark.parametrize("tsince", [0.0, 60.0, 240.0, 720.0, -720.0])
    def test_low_perigee(self, tsince) -> None:
        """Perigee below 156 km and 220 km: adjusted s4 and simplified drag."""
        _assert_matches_reference(LOW_PERIGEE, tsince)

    def test_vanguard_reference_vector(self) -> None:
        """Epoch state of satellite 00005 from the Vallado verification output."""
        record = sgp4_init(elements_from_tle(VANGUARD))
        state = sgp4_propagate(record, 0.0)
        np.testing.assert_allclose(
            np.asarray(state.position),
            [7022.46529266, -1400.08296755, 0.03995155],
            atol=1e-6,
        )
        np.testing.assert_allclose(
            np.asarray(state.velocity),
            [1.893841015, 6.405893759, 4.534807250],
            atol=1e-8,
        )


class TestDeepSpace:
    """Deep-space (SDP4) branch against the reference."""

    @pytest.mark.parametrize("tsince", DEEP_SPACE_TIMES)
    def test_molniya_half_day_resonance(self, tsince) -> None:
        _assert_matches_reference(MOLNIYA, tsince, pos_tol=1e-5, vel_tol=1e-8)

    @pytest.mark.parametrize("tsince", DEEP_SPACE_TIMES)
    def test_second_molniya(self, tsince) -> None:
        _assert_matches_reference(MOLNIYA_2, tsince, pos_tol=1e-5, vel_tol=1e-8)

    @pytest.mark.parametrize("tsince", DEEP_SPACE_TIMES)
    def test_gps_non_resonant(self, tsince) -> None:
        _assert_matches_reference(GPS, tsince, pos_tol=1e-5, vel_tol=1e-8)

    @pytest.mark.parametrize("tsince", DEEP_SPACE_TIMES)
    def test_geo_synchronous_resonance(self, tsince) -> None:
        """Near-zero inclination also exercises the Lyddane periodics."""
        _assert_matches_reference(GEO, tsince, pos_tol=1e-5, vel_tol=1e-8)

    def test_sequential_calls_match_fresh_records(self) -> None:
        """Continuing the resonance integrator gives the same result as restarting it."""
        elements = elements_from_tle(MOLNIYA)
        continued = sgp4_init(elements)
        for tsince in [720.0, 1440.0, 5000.0, 2000.0, -3000.0, 8000.0]:
            fresh = sgp4_propagate(sgp4_init(elements), tsince)
            step = sgp4_propagate(continued, tsince)
            np.testing.assert_allclose(
                np.asarray(step.position), np.asarray(fresh.position), atol=1e-8
            )


class TestOpsModeAndGravity:
    """AFSPC compatibility mode and alternative gravity models."""

    @pytest.mark.parametrize("tle", [ISS, VANGUARD, MOLNIYA, GEO])
    def test_afspc_mode(self, tle) -> None:
        _assert_matches_reference(tle, 1440.0, opsmode="a", pos_tol=1e-5, vel_tol=1e-8)

    @pytest.mark.parametrize("gravity", ["wgs72old", "wgs84"])
    def test_gravity_models_near_earth(self, gravity) -> None:
        _assert_matches_reference(ISS, 720.0, gravity=gravity)

    @pytest.mark.parametrize("gravity", ["wgs72old", "wgs84"])
    def test_gravity_models_deep_space(self, gravity) -> None:
        _assert_matches_reference(MOLNIYA, 720.0, gravity=gravity, pos_tol=1e-5, vel_tol=1e-8)

    def test_gravity_changes_result(self) -> None:
        elements = elements_from_tle(ISS)
        r72 = sgp4_propagate(sgp4_init(elements, "wgs72"), 720.0).position
        r84 = sgp4_propagate(sgp4_init(elements, "wgs84"), 720.0).position
        assert float(jnp.linalg.norm(r72 - r84)) > 1e-4


class TestErrors:
    """Failure reporting: errors are returned, never raised."""

    def test_decay_matches_reference_error_codes(self) -> None:
        record = sgp4_init(elements_from_tle(DECAYING))
        ref = reference_satrec(DECAYING)
        seen_failure = False
        for tsince in np.arange(0.0, 1480.0, 40.0):
            e_ref, _, _ = reference_state(ref, float(tsince))
            result = sgp4_propagate(record, float(tsince))
            if e_ref == 0:
                assert isinstance(result, StateVector)
            else:
                seen_failure = True
                assert result == PropagationError(e_ref)
        assert seen_failure

    def test_error_has_message(self) -> None:
        assert "decayed" in PropagationError.DECAYED.message
        assert PropagationError.MEAN_MOTION_BELOW_ZERO == 2

    def test_failed_rows_are_nan(self) -> None:
        record = sgp4_init(elements_from_tle(DECAYING))
        r, v, error = sgp4_propagate_array(record, jnp.array([0.0, 1440.0]))
        assert int(error[0]) == 0
        assert int(error[1]) != 0
        assert jnp.all(jnp.isfinite(r[0]))
        assert jnp.all(jnp.isnan(r[1]))
        assert jnp.all(jnp.isnan(v[1]))


class TestArrayPropagation:
    """Vectorized propagation over time arrays."""

    def test_matches_scalar_calls(self) -> None:
        record = sgp4_init(elements_from_tle(ISS))
        times = jnp.linspace(-720.0, 1440.0, 13)
        r, v, error = sgp4_propagate_array(record, times)

        assert r.shape == (13, 3)
        assert v.shape == (13, 3)
        assert jnp.all(error == 0)
        for i, t in enumerate(times):
            state = sgp4_propagate(record, float(t))
            np.testing.assert_allclose(np.asarray(r[i]), np.asarray(state.position), atol=1e-9)
            np.testing.assert_allclose(np.asarray(v[i]), np.asarray(state.velocity), atol=1e-12)

    def test_deep_space_matches_reference(self) -> None:
        record = sgp4_init(elements_from_tle(MOLNIYA))
        ref = reference_satrec(MOLNIYA)
        times = [0.0, 360.0, 1440.0, 2880.0, -720.0]
        r, _, error = sgp4_propagate_array(record, jnp.array(times))
        assert jnp.all(error == 0)
        for i, t in enumerate(times):
            _, r_ref, _ = reference_state(ref, t)
            np.testing.assert_allclose(np.asarray(r[i]), r_ref, atol=1e-5)

    def test_does_not_modify_record(self) -> None:
        record = sgp4_init(elements_from_tle(MOLNIYA))
        before = record.integrator
        sgp4_propagate_array(record, jnp.array([1440.0, 2880.0]))
        assert record.integrator is before

    def test_starts_from_current_token(self) -> None:
        """Each time integrates on from the record's current continuation token."""
        record = sgp4_init(elements_from_tle(MOLNIYA))
        sgp4_propagate(record, 1440.0)
        token = record.integrator
        assert float(token.atime) == 1440.0

        times = [2880.0, 720.0]
        r, _, error = sgp4_propagate_array(record, jnp.array(times))
        assert jnp.all(error == 0)
        assert record.integrator is token
        for i, t in enumerate(times):
            fresh = sgp4_propagate(sgp4_init(elements_from_tle(MOLNIYA)), t)
            np.testing.assert_allclose(np.asarray(r[i]), np.asarray(fresh.position), atol=1e-8)

    def test_scalar_input(self) -> None:
        record = sgp4_init(elements_from_tle(ISS))
        r, _, error = sgp4_propagate_array(record, 60.0)
        assert r.shape == (1, 3)
        assert error.shape == (1,)


class TestStepKernel:
    """Direct calls to the jitted kernel."""

    def test_reports_mean_elements_and_kepler(self) -> None:
        record = sgp4_init(elements_from_tle(ISS))
        result = sgp4_step(record.elements, record.near, 90.0, gravity=WGS72)
        assert int(result.error) == 0
        assert bool(result.kepler.converged)
        assert 0 < int(result.kepler.iterations) <= 10
        assert float(result.mean.em) > 0.0
        assert result.integrator is None

    def test_matches_propagate(self) -> None:
        record = sgp4_init(elements_from_tle(VANGUARD))
        result = sgp4_step(record.elements, record.near, 360.0, gravity=record.gravity)
        state = sgp4_propagate(record, 360.0)
        np.testing.assert_allclose(np.asarray(result.position), np.asarray(state.position))


class TestAbsoluteTime:
    """Propagation to calendar times."""

    def test_minutes_since_epoch(self) -> None:
        record = sgp4_init(elements_from_tle(ISS))
        epoch = datetime(2008, 9, 20, 12, 25, 40, 104192, tzinfo=timezone.utc)
        assert minutes_since_epoch(record, epoch) == pytest.approx(0.0, abs=1e-6)
        later = epoch + timedelta(minutes=90)
        assert minutes_since_epoch(record, later) == pytest.approx(90.0, abs=1e-6)

    def test_naive_datetime_is_utc(self) -> None:
        record = sgp4_init(elements_from_tle(ISS))
        aware = datetime(2008, 9, 21, 0, 0, 0, tzinfo=timezone.utc)
        naive = datetime(2008, 9, 21, 0, 0, 0)
        assert minutes_since_epoch(record, naive) == minutes_since_epoch(record, aware)

    def test_propagate_datetime(self) -> None:
        record = sgp4_init(elements_from_tle(ISS))
        dt = datetime(2008, 9, 21, 0, 0, 0, tzinfo=timezone.utc)
        state = sgp4_propagate_datetime(record, dt)
        expected = sgp4_propagate(record, minutes_since_epoch(record, dt))
        np.testing.assert_allclose(np.asarray(state.position), np.asarray(expected.position))


class TestCatalog:
    """Propagating many records with failure isolation."""

    def test_skips_failures(self, caplog) -> None:
        records = [
            sgp4_init(elements_from_tle(ISS)),
            sgp4_init(elements_from_tle(DECAYING)),
            sgp4_init(elements_from_tle(MOLNIYA)),
        ]
        with caplog.at_level("WARNING", logger="astroprop.sgp4._propagation"):
            results = propagate_catalog(records, 1440.0)

        assert list(results) == [25544, 29141, 8195]
        assert isinstance(results[25544], StateVector)
        assert isinstance(results[29141], PropagationError)
        assert isinstance(results[8195], StateVector)
        assert "29141" in caplog.text
        assert "1 of 3 satellites failed" in caplog.text

    def test_duplicate_catalog_numbers(self, caplog) -> None:
        """Repeated catalog numbers keep the last record and are counted once each."""
        records = [
            sgp4_init(elements_from_tle(DECAYING)),
            sgp4_init(elements_from_tle(DECAYING)),
            sgp4_init(elements_from_tle(ISS)),
        ]
        with caplog.at_level("WARNING", logger="astroprop.sgp4._propagation"):
            results = propagate_catalog(records, 1440.0)

        assert list(results) == [29141, 25544]
        assert "Duplicate satellite 29141" in caplog.text
        assert "2 of 3 satellites failed" in caplog.text

    def test_absolute_time(self) -> None:
        records = [sgp4_init(elements_from_tle(ISS)), sgp4_init(elements_from_tle(LOW_PERIGEE))]
        dt = datetime(2008, 9, 21, tzinfo=timezone.utc)
        results = propagate_catalog(records, dt)
        assert isinstance(results[25544], StateVector)
        for record in records:
            expected = sgp4_propagate_datetime(record, dt)
            assert type(results[record.satnum]) is type(expected)

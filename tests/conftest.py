import jax.numpy as jnp
import pytest

from astroprop.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that need a different precision override it with their own
    autouse fixture (e.g. test_config.py switches to float32).
    """
    set_dtype(jnp.float64)

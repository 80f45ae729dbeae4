"""
SGP4/SDP4 orbit propagator implemented in JAX.

Initialization (:func:`sgp4_init`) runs at Python time and produces a
:class:`SatelliteRecord` whose coefficient groups are JAX pytrees. The
propagation kernel (:func:`sgp4_step`) is jitted and can be vmapped over
time arrays; :func:`sgp4_propagate` wraps it with a typed result
(:class:`StateVector` or :class:`PropagationError`).
"""

from astroprop.sgp4._constants import (
    GRAVITY_MODELS,
    WGS72,
    WGS72OLD,
    WGS84,
    EarthGravity,
    get_gravity_model,
)
from astroprop.sgp4._dpper import dpper
from astroprop.sgp4._dscom import dscom
from astroprop.sgp4._dsinit import classify_resonance, dsinit
from astroprop.sgp4._dspace import dspace
from astroprop.sgp4._initialization import initl, sgp4_init
from astroprop.sgp4._kepler import solve_kepler
from astroprop.sgp4._propagation import (
    minutes_since_epoch,
    propagate_catalog,
    sgp4_propagate,
    sgp4_propagate_array,
    sgp4_propagate_datetime,
    sgp4_step,
)
from astroprop.sgp4._satellite import Satellite
from astroprop.sgp4._types import (
    Branch,
    DpperMode,
    EpochElements,
    IntegratorState,
    KeplerSolution,
    LongPeriodElements,
    LunarSolarTerms,
    MeanElements,
    NearEarthTerms,
    OrbitalElements,
    PropagationError,
    ResonanceTerms,
    SatelliteRecord,
    StateVector,
    StepResult,
)

__all__ = [
    # Types
    "OrbitalElements",
    "EpochElements",
    "NearEarthTerms",
    "LunarSolarTerms",
    "ResonanceTerms",
    "IntegratorState",
    "SatelliteRecord",
    "MeanElements",
    "StateVector",
    "StepResult",
    "KeplerSolution",
    "LongPeriodElements",
    "PropagationError",
    "Branch",
    "DpperMode",
    "EarthGravity",
    "Satellite",
    # Gravity models
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "GRAVITY_MODELS",
    "get_gravity_model",
    # Initialization
    "initl",
    "sgp4_init",
    "dscom",
    "dsinit",
    "classify_resonance",
    # Propagation
    "sgp4_step",
    "sgp4_propagate",
    "sgp4_propagate_array",
    "sgp4_propagate_datetime",
    "minutes_since_epoch",
    "propagate_catalog",
    "dpper",
    "dspace",
    "solve_kepler",
]

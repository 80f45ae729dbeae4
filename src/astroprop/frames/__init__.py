"""Reference frame transformations for SGP4 output.

- **TEME <-> ECEF**: GMST rotation about the z-axis, with the Earth-rotation
  velocity correction for full states.
"""

from .teme import (
    position_ecef_to_teme,
    position_teme_to_ecef,
    rotation_teme_to_ecef,
    state_ecef_to_teme,
    state_teme_to_ecef,
)

__all__ = [
    "rotation_teme_to_ecef",
    "position_teme_to_ecef",
    "position_ecef_to_teme",
    "state_teme_to_ecef",
    "state_ecef_to_teme",
]

"""
Application Constants
=====================
This module serves as the central registry for global constants and default
simulation parameters.

Why is this file needed?
------------------------
1. Defaults: The input form, the configuration store and the tests all start
   from the same parameter set.
2. Tuning: Frame rate and time-step refinement limits live in one place
   instead of being scattered through the controller and the engine.

Exports:
    DEFAULT_CONFIG (dict): Default simulation parameters.
    FRAME_INTERVAL_MS (int): Delay between two animation frames.
    DEFAULT_STRIDE (int): Samples advanced per animation frame.
"""
from typing import Final

# Charge-to-mass ratio of the simulated particle
Q_M: Final[float] = 1.0

# Initial time step is DT_FACTOR * b0 * Q_M
DT_FACTOR: Final[float] = 0.08

# A step is resolved when dt * Q_M * |B| stays below this value
RESOLUTION_LIMIT: Final[float] = 0.1

# How many times the engine may halve dt before giving up
MAX_DT_REFINEMENTS: Final[int] = 40

DEFAULT_CONFIG: Final[dict[str, float | int]] = {
    "b0": 1.0,
    "length_scale": 1.0,
    "vel_perp": 0.5,
    "vel_par": 0.5,
    "n_steps": 1000,
}

DEFAULT_STRIDE: Final[int] = 10

# ~60 Hz, the usual display refresh rate
FRAME_INTERVAL_MS: Final[int] = 16

VISIBLE_APP_NAME: Final[str] = "Magnetic Mirror"
ORG_ID: Final[str] = "magneticmirror"
APP_ID: Final[str] = "magnetic-mirror-viewer"

"""
Trajectory Cache
================
Keeps the trajectory built for the last explicitly requested configuration.

Building is synchronous and only happens on request ("Generate trajectory"),
never on every configuration edit.
"""
from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING, Callable, Optional

from magneticmirror.physics.engine import Trajectory, build_trajectory

if TYPE_CHECKING:
    from magneticmirror.model.state import MirrorConfig

logger = logging.getLogger(__name__)


def sanitize_step_count(n_steps: int | float) -> int:
    """Step count usable by the engine: NaN, infinite or non-positive values map to 0."""
    if isinstance(n_steps, bool):
        return 0
    try:
        number = float(n_steps)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return int(number)


class TrajectoryCache:
    """Owns the current Trajectory and the configuration snapshot that produced it."""

    def __init__(self, builder: Callable[..., Trajectory] = build_trajectory) -> None:
        self._builder = builder
        self._trajectory: Optional[Trajectory] = None
        self._config: Optional[MirrorConfig] = None

    @property
    def trajectory(self) -> Optional[Trajectory]:
        return self._trajectory

    @property
    def config(self) -> Optional[MirrorConfig]:
        return self._config

    def build(self, config: MirrorConfig) -> Trajectory:
        """
        Replace the cached trajectory with a new one for config.

        A degenerate step count (<= 0 or unparseable) gives a single-sample
        trajectory instead of an error.
        """
        n_steps = sanitize_step_count(config.n_steps)
        if n_steps != config.n_steps:
            logger.warning(f"Step count {config.n_steps!r} is not a positive integer; building {n_steps} steps.")

        logger.info(f"Building trajectory: {config.as_dict()}")
        t0 = time.perf_counter()
        trajectory = self._builder(config, n_steps=n_steps)
        elapsed = time.perf_counter() - t0

        self._trajectory = trajectory
        self._config = config
        logger.info(f"Trajectory ready: {len(trajectory)} samples, dt = {trajectory.dt:.4g} ({elapsed:.3f} s)")
        return trajectory

    def invalidate(self) -> None:
        """Drop the cached trajectory."""
        self._trajectory = None
        self._config = None

"""Shared fixtures: a hand-cranked frame scheduler and a renderer that records calls."""
from typing import Callable, Optional

import numpy as np
import pytest

from magneticmirror.model.state import MirrorConfig
from magneticmirror.physics.engine import Trajectory


class ManualScheduler:
    """FrameScheduler whose frames only fire when the test calls tick()."""

    def __init__(self) -> None:
        self.pending: Optional[Callable[[], None]] = None
        self.requests = 0

    def request(self, callback: Callable[[], None]) -> None:
        self.pending = callback
        self.requests += 1

    def cancel(self) -> None:
        self.pending = None

    def tick(self) -> bool:
        callback, self.pending = self.pending, None
        if callback is None:
            return False
        callback()
        return True

    def run_until_idle(self, max_frames: int = 100_000) -> int:
        frames = 0
        while self.tick():
            frames += 1
            assert frames < max_frames, "frame chain did not terminate"
        return frames


class RecordingRenderer:
    def __init__(self) -> None:
        self.static_draws: list[Trajectory] = []
        self.frames: list[tuple[float, float, float]] = []

    def draw_static(self, trajectory: Trajectory) -> None:
        self.static_draws.append(trajectory)

    def draw_frame(self, position) -> None:
        self.frames.append(tuple(position))


def make_trajectory(length: int) -> Trajectory:
    """Straight-line trajectory whose x coordinate equals the sample index."""
    idx = np.arange(length, dtype=np.float64)
    positions = np.column_stack([idx, np.zeros(length), np.zeros(length)])
    velocities = np.tile([0.0, 0.5, 0.5], (length, 1))
    return Trajectory(
        times=0.1 * idx,
        positions=positions,
        velocities=velocities,
        field_mags=np.ones(length),
        dt=0.1,
    )


def collect(signal) -> list:
    out: list = []
    signal.connect(lambda value: out.append(value))
    return out


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def config() -> MirrorConfig:
    return MirrorConfig(b0=1.0, length_scale=1.0, vel_perp=0.5, vel_par=0.5, n_steps=1000)

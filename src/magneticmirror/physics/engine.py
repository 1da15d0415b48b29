"""
Trajectory Engine
=================
Integrates the motion of a charged particle in a magnetic mirror.

Why is this file needed?
------------------------
1. Physics: It turns a MirrorConfig into the sequence of particle states the
   viewer plays back.
2. Time-Stepping: It picks a time step that resolves the gyration and halves
   it until every step satisfies the resolution criterion.
3. Derived Quantities: Samples know their energy, magnetic moment and
   perpendicular velocity; the adiabatic invariant needs the configuration.

Note: This module should be pure Python/NumPy and should NOT import PySide6.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

import numpy as np

from magneticmirror.config import DT_FACTOR, MAX_DT_REFINEMENTS, Q_M, RESOLUTION_LIMIT
from magneticmirror.physics.kernels import mirror_field_xyz, push_particle

if TYPE_CHECKING:
    import numpy.typing as npt

    from magneticmirror.model.state import MirrorConfig

logger = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class Sample:
    """One recorded state of the particle (unit mass)."""
    pos: Vector3
    vel: Vector3
    t: float
    field_mag: float

    @property
    def x(self) -> float:
        return self.pos[0]

    @property
    def y(self) -> float:
        return self.pos[1]

    @property
    def z(self) -> float:
        return self.pos[2]

    def position(self) -> Vector3:
        return self.pos

    def energy(self) -> float:
        """Kinetic energy 0.5 |v|^2."""
        vx, vy, vz = self.vel
        return 0.5 * (vx * vx + vy * vy + vz * vz)

    def magnetic_moment(self) -> float:
        """mu = 0.5 v_perp^2 / |B|. Infinite (or NaN) where the field vanishes."""
        vx, vy, _ = self.vel
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(0.5 * (vx * vx + vy * vy)) / np.float64(self.field_mag))

    def perpendicular_velocity(self) -> float:
        """Speed across the mirror axis (z)."""
        vx, vy, _ = self.vel
        return math.hypot(vx, vy)


class Trajectory(Sequence[Sample]):
    """
    Fixed-length, read-only sequence of Samples.

    The state is kept in numpy arrays; Samples are materialized on access.
    """

    def __init__(
        self,
        times: npt.NDArray[np.float64],
        positions: npt.NDArray[np.float64],
        velocities: npt.NDArray[np.float64],
        field_mags: npt.NDArray[np.float64],
        dt: float,
    ) -> None:
        n = len(times)
        if positions.shape != (n, 3) or velocities.shape != (n, 3) or field_mags.shape != (n,):
            raise ValueError("Trajectory arrays have inconsistent shapes.")
        if n == 0:
            raise ValueError("A trajectory needs at least one sample.")

        self._times = self._frozen(times)
        self._positions = self._frozen(positions)
        self._velocities = self._frozen(velocities)
        self._field_mags = self._frozen(field_mags)
        self.dt = dt

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(length={len(self)}, dt={self.dt})"

    def __len__(self) -> int:
        return len(self._times)

    @overload
    def __getitem__(self, index: int) -> Sample: ...

    @overload
    def __getitem__(self, index: slice) -> list[Sample]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        index = self._check_index(index)
        p = self._positions[index]
        v = self._velocities[index]
        return Sample(
            pos=(float(p[0]), float(p[1]), float(p[2])),
            vel=(float(v[0]), float(v[1]), float(v[2])),
            t=float(self._times[index]),
            field_mag=float(self._field_mags[index]),
        )

    def __iter__(self) -> Iterator[Sample]:
        for i in range(len(self)):
            yield self[i]

    def position(self, index: int) -> Vector3:
        p = self._positions[self._check_index(index)]
        return float(p[0]), float(p[1]), float(p[2])

    @property
    def times(self) -> npt.NDArray[np.float64]:
        return self._times

    @property
    def positions(self) -> npt.NDArray[np.float64]:
        return self._positions

    @property
    def velocities(self) -> npt.NDArray[np.float64]:
        return self._velocities

    @property
    def field_mags(self) -> npt.NDArray[np.float64]:
        return self._field_mags

    def _check_index(self, index: int) -> int:
        """Normalize a negative index; raise IndexError outside the trajectory."""
        n = len(self)
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError(f"Sample index {index} out of range for trajectory of length {n}.")
        return index

    @staticmethod
    def _frozen(array: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        out = np.array(array, dtype=np.float64, copy=True)
        out.setflags(write=False)
        return out


def mirror_field(pos: Sequence[float], b0: float, length_scale: float) -> npt.NDArray[np.float64]:
    """Magnetic field of the mirror at pos."""
    return mirror_field_xyz(float(pos[0]), float(pos[1]), float(pos[2]), float(b0), float(length_scale))


def adiabatic_invariant(sample: Sample, config: MirrorConfig) -> float:
    """
    Flux through the gyro-orbit, psi = b0 (x^2 + y^2)(1 + z^2 / L^2).

    Expected to stay nearly constant while the mirror confines the particle.
    """
    x, y, z = sample.pos
    with np.errstate(divide="ignore", invalid="ignore"):
        l2 = np.float64(config.length_scale) ** 2
        return float(config.b0 * (x * x + y * y) * (1.0 + np.float64(z * z) / l2))


def build_trajectory(config: MirrorConfig, n_steps: int | None = None) -> Trajectory:
    """
    Integrate the particle orbit for the given configuration.

    Args:
        config: Mirror parameters. NaN entries propagate into NaN samples.
        n_steps: Number of steps; defaults to config.n_steps. Must be a
            non-negative integer, the result has n_steps + 1 samples.

    Returns:
        The trajectory, starting on the gyro-orbit around the z-axis.
    """
    steps = config.n_steps if n_steps is None else n_steps
    if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)) or steps < 0:
        raise ValueError(f"n_steps must be a non-negative integer, got {steps!r}.")
    steps = int(steps)

    b0 = float(config.b0)
    length_scale = float(config.length_scale)
    vel_perp = float(config.vel_perp)
    vel_par = float(config.vel_par)

    with np.errstate(divide="ignore", invalid="ignore"):
        start_x = float(np.float64(-vel_perp) / np.float64(Q_M * b0))
    pos0 = np.array([start_x, 0.0, 0.0], dtype=np.float64)
    vel0 = np.array([0.0, vel_perp, vel_par], dtype=np.float64)

    dt = DT_FACTOR * b0 * Q_M
    for attempt in range(MAX_DT_REFINEMENTS + 1):
        logger.debug(f"Pushing particle: dt = {dt}, n = {steps}")
        positions, velocities, field_mags, resolved = push_particle(
            pos0, vel0, dt, b0, length_scale, Q_M, steps, RESOLUTION_LIMIT
        )
        if resolved:
            break
        if attempt == MAX_DT_REFINEMENTS:
            logger.warning(
                f"Time step still unresolved after {MAX_DT_REFINEMENTS} refinements (dt = {dt}); "
                "using the partial result."
            )
            break
        dt /= 2.0

    times = dt * np.arange(steps + 1, dtype=np.float64)
    return Trajectory(times, positions, velocities, field_mags, dt)

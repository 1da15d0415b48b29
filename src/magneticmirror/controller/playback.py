"""
Trajectory Playback Controller
==============================
Steps a cursor through a built trajectory and drives the moving marker.

Why is this file needed?
------------------------
1. State Machine: Idle -> Ready -> Running <-> Stopped, with a fixed
   end-of-sequence policy (halt and snap the marker back to sample 0).
2. Responsiveness: Each frame does one unit of work and asks the scheduler
   for the next one, so the Qt event loop is never blocked.
3. Readouts: Derived physical quantities of the current sample are published
   through a Qt Signal for the output fields.

Classes:
    PlaybackPhase: Controller phase.
    PlaybackState: Cursor, stride and running flag.
    SampleReadout: Quantities published per frame.
    PlaybackController: The controller itself.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Optional, Protocol

from PySide6.QtCore import QObject, Signal

from magneticmirror.config import DEFAULT_STRIDE
from magneticmirror.controller.scheduling import FrameScheduler, QtFrameScheduler
from magneticmirror.physics.engine import adiabatic_invariant
from magneticmirror.utils import is_positive_int, parse_int

if TYPE_CHECKING:
    from magneticmirror.model.state import MirrorConfig
    from magneticmirror.physics.engine import Sample, Trajectory, Vector3

logger = logging.getLogger(__name__)


class TrajectoryRenderer(Protocol):
    def draw_static(self, trajectory: Trajectory) -> None: ...

    def draw_frame(self, position: Vector3) -> None: ...


class PlaybackPhase(StrEnum):
    IDLE = "idle"
    READY = "ready"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class PlaybackState:
    cursor: int = 0
    stride: int = DEFAULT_STRIDE
    running: bool = False


@dataclass(frozen=True)
class SampleReadout:
    """Physical quantities of the sample under the cursor."""
    index: int
    time: float
    magnetic_moment: float
    energy: float
    perpendicular_velocity: float
    field_magnitude: float
    adiabatic_invariant: float

    @classmethod
    def from_sample(cls, index: int, sample: Sample, config: MirrorConfig) -> SampleReadout:
        return cls(
            index=index,
            time=sample.t,
            magnetic_moment=sample.magnetic_moment(),
            energy=sample.energy(),
            perpendicular_velocity=sample.perpendicular_velocity(),
            field_magnitude=sample.field_mag,
            adiabatic_invariant=adiabatic_invariant(sample, config),
        )


class PlaybackController(QObject):
    """
    Plays a trajectory back by advancing `stride` samples per frame.

    Only this object mutates the cursor and the running flag. Stopping is
    cooperative: stop() clears the flag and the pending frame, if any, sees it
    and ends the chain after at most one more redraw.
    """
    readout_published = Signal(object)  # SampleReadout
    frame_rendered = Signal(int)  # index the marker was drawn at
    phase_changed = Signal(object)  # PlaybackPhase

    def __init__(
        self,
        renderer: TrajectoryRenderer,
        scheduler: Optional[FrameScheduler] = None,
        stride: int = DEFAULT_STRIDE,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if not is_positive_int(stride):
            raise ValueError(f"Stride must be a positive integer, got {stride!r}.")

        self._renderer = renderer
        self._scheduler: FrameScheduler = scheduler if scheduler is not None else QtFrameScheduler(parent=self)
        self._state = PlaybackState(stride=int(stride))
        self._phase = PlaybackPhase.IDLE

        self._trajectory: Optional[Trajectory] = None
        self._config: Optional[MirrorConfig] = None

    # ------------------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------------------

    @property
    def phase(self) -> PlaybackPhase:
        return self._phase

    @property
    def state(self) -> PlaybackState:
        """A copy of the playback state."""
        return dataclasses.replace(self._state)

    @property
    def trajectory(self) -> Optional[Trajectory]:
        return self._trajectory

    @property
    def is_running(self) -> bool:
        return self._state.running

    @property
    def stride(self) -> int:
        return self._state.stride

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def load(self, trajectory: Trajectory, config: MirrorConfig) -> None:
        """
        Take over a freshly built trajectory (any phase -> Ready).

        Any frame still scheduled for the previous trajectory is cancelled.
        The stride is kept.
        """
        self._scheduler.cancel()
        self._trajectory = trajectory
        self._config = config
        self._state.cursor = 0
        self._state.running = False

        self._renderer.draw_static(trajectory)
        logger.info(f"Playback loaded trajectory with {len(trajectory)} samples.")
        self._set_phase(PlaybackPhase.READY)

    def start(self) -> None:
        """Ready/Stopped -> Running. No-op while running or before a trajectory exists."""
        if self._trajectory is None:
            logger.debug("Start ignored: no trajectory.")
            return
        if self._state.running:
            logger.debug("Start ignored: already running.")
            return

        self._state.running = True
        self._set_phase(PlaybackPhase.RUNNING)
        self._scheduler.request(self._frame_step)

    def stop(self) -> None:
        """Running -> Stopped. Takes effect at the next frame boundary."""
        if not self._state.running:
            return
        self._state.running = False
        self._set_phase(PlaybackPhase.STOPPED)
        logger.debug(f"Playback stopped at sample {self._state.cursor}.")

    def shutdown(self) -> None:
        """Stop immediately and drop the pending frame (used when the window closes)."""
        self._scheduler.cancel()
        self.stop()

    def set_stride(self, value: object) -> bool:
        """
        Set the number of samples advanced per frame.

        Args:
            value: Text or number. Non-positive or unparseable values are ignored.

        Returns:
            True if the stride was changed.
        """
        stride = parse_int(value) if isinstance(value, str) else value
        if not is_positive_int(stride):
            logger.warning(f"Ignoring invalid animation stride {value!r}; keeping {self._state.stride}.")
            return False
        self._state.stride = int(stride)
        return True

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _frame_step(self) -> None:
        """Draw the marker, then advance and reschedule or finish the run."""
        trajectory = self._trajectory
        if trajectory is None:
            return

        cursor = self._state.cursor
        self._draw_marker(cursor)

        if not self._state.running:
            return

        stride = self._state.stride
        if cursor + stride < len(trajectory):
            self._publish(cursor)
            self._state.cursor = cursor + stride
            self._scheduler.request(self._frame_step)
        else:
            # End of sequence: halt and put the marker back at the start
            self._state.running = False
            self._state.cursor = 0
            self._draw_marker(0)
            logger.debug("Playback reached the end of the trajectory.")
            self._set_phase(PlaybackPhase.STOPPED)

    def _draw_marker(self, index: int) -> None:
        self._renderer.draw_frame(self._trajectory.position(index))
        self.frame_rendered.emit(index)

    def _publish(self, index: int) -> None:
        readout = SampleReadout.from_sample(index, self._trajectory[index], self._config)
        self.readout_published.emit(readout)

    def _set_phase(self, phase: PlaybackPhase) -> None:
        if phase != self._phase:
            self._phase = phase
            self.phase_changed.emit(phase)

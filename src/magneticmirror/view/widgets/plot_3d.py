"""
3D Visualization Widget (PyVista Wrapper) - Trajectory Playback
"""

from __future__ import annotations

from typing import Optional, Tuple
from dataclasses import dataclass

import logging
import numpy as np
import numpy.typing as npt

from PySide6.QtWidgets import QWidget, QVBoxLayout

from pyvistaqt import QtInteractor
import pyvista as pv

from magneticmirror.physics.engine import Trajectory, Vector3

logger = logging.getLogger(__name__)

# --- DATA CLASSES FOR VISUALIZATION ---

@dataclass
class TraceStyle:
    """Look of the static trajectory line and the moving particle marker."""
    cmap: str = "turbo"
    line_width: float = 2.0
    opacity: float = 0.7
    marker_color: str | Tuple[float, float, float] = "#1f77b4"
    marker_size: float = 12.0

# --- WIDGET CLASS ---

class TrajectoryPlotWidget(QWidget):
    """
    Renders a trajectory as a 3D polyline plus a single-point marker.

    draw_static() submits the full line once; draw_frame() only moves the
    marker, so per-frame cost does not grow with the trajectory length.
    """
    def __init__(self, parent: Optional[QWidget] = None, style: Optional[TraceStyle] = None) -> None:
        super().__init__(parent)
        self.trace_style = style or TraceStyle()

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        # --- Actors state ---
        self._line_actor: Optional[pv.Actor] = None
        self._marker_actor: Optional[pv.Actor] = None

        # Marker dataset, updated in place every frame
        self._marker_mesh: Optional[pv.PolyData] = None

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def draw_static(self, trajectory: Trajectory) -> None:
        """Replace the scene with the full trajectory and a marker at sample 0."""
        self.clear(render=False)

        points = self._finite_points(trajectory.positions)
        if len(points) >= 2:
            line = pv.lines_from_points(np.array(points, dtype=np.float64))
            line.point_data["time"] = np.array(trajectory.times[:len(points)], dtype=np.float64)
            self._line_actor = self.plotter.add_mesh(
                line,
                scalars="time",
                cmap=self.trace_style.cmap,
                line_width=self.trace_style.line_width,
                opacity=self.trace_style.opacity,
                show_scalar_bar=False,
                pickable=False,
            )
        else:
            logger.warning("Trajectory has fewer than two finite points; drawing the marker only.")

        self._marker_mesh = pv.PolyData(np.asarray([trajectory.position(0)], dtype=np.float64))
        self._marker_actor = self.plotter.add_mesh(
            self._marker_mesh,
            color=self.trace_style.marker_color,
            point_size=self.trace_style.marker_size,
            render_points_as_spheres=True,
            pickable=False,
        )

        self.plotter.reset_camera()
        self.plotter.render()

    def draw_frame(self, position: Vector3) -> None:
        """Move the marker to position."""
        if self._marker_mesh is None:
            return
        # Assigning points marks the dataset modified; the line actor is untouched
        self._marker_mesh.points = np.asarray([position], dtype=np.float64)
        self.plotter.render()

    def clear(self, render: bool = True) -> None:
        """Removes the trajectory and marker actors."""
        if self._line_actor is not None:
            self.plotter.remove_actor(self._line_actor)
            self._line_actor = None
        if self._marker_actor is not None:
            self.plotter.remove_actor(self._marker_actor)
            self._marker_actor = None
        self._marker_mesh = None
        if render:
            self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background("white")
        self.plotter.show_axes()

    @staticmethod
    def _finite_points(positions: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """VTK cannot draw NaN vertices; keep the leading finite run."""
        finite = np.all(np.isfinite(positions), axis=1)
        if finite.all():
            return positions
        n_ok = int(np.argmin(finite))
        return positions[:n_ok]


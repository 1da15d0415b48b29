"""
Trajectory Control Panel
"""
import logging
import math

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QPushButton, QGroupBox, QFormLayout, QLineEdit, QHBoxLayout, QStyle
)
from PySide6.QtCore import Signal, Qt

from magneticmirror.controller.playback import PlaybackController, PlaybackPhase, SampleReadout
from magneticmirror.model.state import ConfigurationStore
from magneticmirror.physics.engine import Trajectory

logger = logging.getLogger(__name__)

# (form label, MirrorConfig field)
INPUT_FIELDS: list[tuple[str, str]] = [
    ("B0:", "b0"),
    ("L:", "length_scale"),
    ("v⊥:", "vel_perp"),
    ("v∥:", "vel_par"),
    ("Steps:", "n_steps"),
]

# (SampleReadout attribute, form label)
OUTPUT_FIELDS: list[tuple[str, str]] = [
    ("time", "Time:"),
    ("magnetic_moment", "Magnetic moment:"),
    ("energy", "Energy:"),
    ("perpendicular_velocity", "v⊥:"),
    ("field_magnitude", "|B|:"),
    ("adiabatic_invariant", "Adiabatic invariant ψ:"),
]


def format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return f"{value:.6g}"


class TrajectoryControlPanel(QWidget):
    # Emitted when the user asks for a new trajectory
    generate_requested = Signal()

    def __init__(self, store: ConfigurationStore, controller: PlaybackController) -> None:
        super().__init__()
        self.store = store
        self.controller = controller

        layout = QVBoxLayout(self)

        # --- Simulation Settings ---
        grp_settings = QGroupBox("Mirror parameters")
        form_settings = QFormLayout(grp_settings)

        self.inputs: dict[str, QLineEdit] = {}
        config = self.store.get()
        for label, field in INPUT_FIELDS:
            edit = QLineEdit(str(getattr(config, field)))
            # default args pin the loop variables
            edit.editingFinished.connect(lambda f=field, e=edit: self.store.set(f, e.text()))
            form_settings.addRow(label, edit)
            self.inputs[field] = edit

        layout.addWidget(grp_settings)

        # --- Trajectory ---
        self.btn_generate = QPushButton("Generate trajectory")
        self.btn_generate.setMinimumHeight(40)
        self.btn_generate.clicked.connect(lambda: self.generate_requested.emit())
        layout.addWidget(self.btn_generate)

        self.lbl_status = QLabel("No trajectory generated.")
        self.lbl_status.setAlignment(Qt.AlignCenter)
        self.lbl_status.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_status)

        # --- Animation ---
        grp_anim = QGroupBox("Animation")
        l_anim = QVBoxLayout(grp_anim)

        form_anim = QFormLayout()
        self.edit_stride = QLineEdit(str(self.controller.stride))
        self.edit_stride.setToolTip("Samples advanced per frame")
        self.edit_stride.editingFinished.connect(self.on_stride_edited)
        form_anim.addRow("Steps per frame:", self.edit_stride)
        l_anim.addLayout(form_anim)

        hbox_play = QHBoxLayout()
        self.btn_run = QPushButton("Run")
        self.btn_run.setIcon(self.style().standardIcon(QStyle.SP_MediaPlay))
        self.btn_run.clicked.connect(self.controller.start)
        hbox_play.addWidget(self.btn_run)

        self.btn_stop = QPushButton("Stop")
        self.btn_stop.setIcon(self.style().standardIcon(QStyle.SP_MediaStop))
        self.btn_stop.clicked.connect(self.controller.stop)
        hbox_play.addWidget(self.btn_stop)
        l_anim.addLayout(hbox_play)

        layout.addWidget(grp_anim)

        # --- Readouts ---
        grp_out = QGroupBox("Particle")
        form_out = QFormLayout(grp_out)

        self.outputs: dict[str, QLineEdit] = {}
        for attr, label in OUTPUT_FIELDS:
            edit = QLineEdit()
            edit.setReadOnly(True)
            form_out.addRow(label, edit)
            self.outputs[attr] = edit

        layout.addWidget(grp_out)
        layout.addStretch()

        # --- Controller Signals ---
        self.controller.readout_published.connect(self.show_readout)
        self.controller.phase_changed.connect(self.on_phase_changed)
        self.on_phase_changed(self.controller.phase)

    # --- SLOTS ---

    def on_stride_edited(self) -> None:
        if not self.controller.set_stride(self.edit_stride.text()):
            # Show the stride that is actually in use
            self.edit_stride.setText(str(self.controller.stride))

    def show_readout(self, readout: SampleReadout) -> None:
        for attr, edit in self.outputs.items():
            edit.setText(format_value(getattr(readout, attr)))

    def on_phase_changed(self, phase: PlaybackPhase) -> None:
        self.btn_run.setEnabled(phase in (PlaybackPhase.READY, PlaybackPhase.STOPPED))
        self.btn_stop.setEnabled(phase == PlaybackPhase.RUNNING)

    def show_trajectory_info(self, trajectory: Trajectory) -> None:
        self.lbl_status.setText(f"{len(trajectory)} samples, dt = {format_value(trajectory.dt)}")

    def load_from_state(self) -> None:
        """Syncs the input fields from the ConfigurationStore."""
        config = self.store.get()
        for field, edit in self.inputs.items():
            edit.blockSignals(True)
            edit.setText(str(getattr(config, field)))
            edit.blockSignals(False)
        for edit in self.outputs.values():
            edit.clear()

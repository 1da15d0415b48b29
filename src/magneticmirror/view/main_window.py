"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the control panel and the
3D view.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the "Generate trajectory" request to the
   TrajectoryCache and hands the result to the PlaybackController.
"""
import logging

from PySide6.QtWidgets import QMainWindow, QSplitter, QMessageBox
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from magneticmirror.config import VISIBLE_APP_NAME
from magneticmirror.controller.playback import PlaybackController
from magneticmirror.model.state import ConfigurationStore
from magneticmirror.model.trajectory_cache import TrajectoryCache
from magneticmirror.view.panels.trajectory_panel import TrajectoryControlPanel
from magneticmirror.view.widgets.plot_3d import TrajectoryPlotWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, store: ConfigurationStore, cache: TrajectoryCache) -> None:
        super().__init__()
        self.store = store
        self.cache = cache

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- RIGHT SIDE: 3D Visualization ---
        self.visualizer = TrajectoryPlotWidget()

        # --- Playback ---
        self.controller = PlaybackController(renderer=self.visualizer, parent=self)

        # --- LEFT SIDE: Control Panel ---
        self.panel = TrajectoryControlPanel(self.store, self.controller)

        splitter.addWidget(self.panel)
        splitter.addWidget(self.visualizer)

        # Set initial proportions (1 part sidebar : 4 parts 3D view)
        splitter.setSizes([350, 1050])

        # --- SIGNAL CONNECTIONS ---
        self.panel.generate_requested.connect(self.on_generate_requested)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

    def _create_actions(self) -> None:
        self.act_reset = QAction("Reset Parameters", self)
        self.act_reset.triggered.connect(self.on_reset_parameters)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_generate = QAction("Generate Trajectory", self)
        self.act_generate.setShortcut("Ctrl+G")
        self.act_generate.triggered.connect(self.on_generate_requested)

        self.act_run = QAction("Run / Stop", self)
        self.act_run.setShortcut("Ctrl+R")
        self.act_run.triggered.connect(self.on_toggle_run)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_reset)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        sim_menu = menu_bar.addMenu("&Simulation")
        sim_menu.addAction(self.act_generate)
        sim_menu.addAction(self.act_run)

    # --- SLOTS ---

    def on_generate_requested(self) -> None:
        """Build a trajectory from the current parameters and restart playback on it."""
        config = self.store.get()
        try:
            trajectory = self.cache.build(config)
        except Exception as e:
            logger.exception("Trajectory generation failed")
            QMessageBox.critical(self, "Trajectory Error", f"Could not generate the trajectory:\n{e}")
            return

        self.controller.load(trajectory, config)
        self.panel.show_trajectory_info(trajectory)

    def on_toggle_run(self) -> None:
        if self.controller.is_running:
            self.controller.stop()
        else:
            self.controller.start()

    def on_reset_parameters(self) -> None:
        self.store.reset()
        self.panel.load_from_state()

    def closeEvent(self, event, /) -> None:
        """Stop playback and release the plotter before closing."""
        self.controller.shutdown()

        if self.visualizer and self.visualizer.plotter:
            self.visualizer.plotter.close()

        event.accept()

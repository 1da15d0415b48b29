"""
Application Initialization
==========================
This module constructs the Model-View-Controller objects and starts the Qt
Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the Data Model (ConfigurationStore, TrajectoryCache).
2. Instantiates the Main Window (View), which owns the PlaybackController.
3. Passes the Model into the View so they can communicate.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication

from magneticmirror.config import APP_ID, ORG_ID, VISIBLE_APP_NAME
from magneticmirror.logging_config import setup_logging
from magneticmirror.model.state import ConfigurationStore
from magneticmirror.model.trajectory_cache import TrajectoryCache
from magneticmirror.view.main_window import MainWindow


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="magneticmirror",
        description="Interactive 3D playback of a charged particle in a magnetic mirror.",
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return parser.parse_args(argv)


def create_app() -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)

    # Command-line options are ours, Qt only gets the program name
    app = QApplication(sys.argv[:1])
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the Data Model
    store = ConfigurationStore()
    cache = TrajectoryCache()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(store, cache)
    window.show()

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

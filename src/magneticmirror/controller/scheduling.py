"""
Frame Scheduling
================
Single-flight "call me on the next frame" primitive for the playback loop.

A scheduler keeps at most one pending callback. Requesting again before the
pending one fires replaces it, so there can never be two frame chains.
"""
from __future__ import annotations

from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, QTimer

from magneticmirror.config import FRAME_INTERVAL_MS


class FrameScheduler(Protocol):
    def request(self, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class QtFrameScheduler(QObject):
    """FrameScheduler on a single-shot QTimer running in the Qt event loop."""

    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    def request(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        # start() on an active timer restarts it
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()

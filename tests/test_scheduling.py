"""Tests for the QTimer-backed frame scheduler, driven by a real Qt event loop."""
import os
import time

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication, QEventLoop

from magneticmirror.controller.playback import PlaybackController, PlaybackPhase
from magneticmirror.controller.scheduling import QtFrameScheduler

from conftest import collect, make_trajectory


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def spin(ms: int, until=None) -> bool:
    """Process Qt events for up to ms milliseconds, or until the predicate holds."""
    deadline = time.monotonic() + ms / 1000.0
    while time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 5)
        if until is not None and until():
            return True
        time.sleep(0.001)
    return bool(until()) if until is not None else True


class TestQtFrameScheduler:
    def test_fires_requested_callback_once(self, qt_app):
        scheduler = QtFrameScheduler(interval_ms=1)
        calls = []
        scheduler.request(lambda: calls.append("frame"))

        assert spin(2000, until=lambda: calls)
        spin(50)
        assert calls == ["frame"]

    def test_new_request_replaces_pending_one(self, qt_app):
        scheduler = QtFrameScheduler(interval_ms=1)
        calls = []
        scheduler.request(lambda: calls.append("first"))
        scheduler.request(lambda: calls.append("second"))

        assert spin(2000, until=lambda: calls)
        spin(50)
        assert calls == ["second"]

    def test_cancel_drops_pending_frame(self, qt_app):
        scheduler = QtFrameScheduler(interval_ms=1)
        calls = []
        scheduler.request(lambda: calls.append("frame"))
        scheduler.cancel()

        spin(100)
        assert calls == []


class TestPlaybackOnQtTimer:
    def test_double_start_plays_a_single_chain(self, qt_app, renderer, config):
        controller = PlaybackController(renderer=renderer, scheduler=QtFrameScheduler(interval_ms=1), stride=2)
        rendered = collect(controller.frame_rendered)
        controller.load(make_trajectory(11), config)

        controller.start()
        controller.start()

        assert spin(5000, until=lambda: controller.phase == PlaybackPhase.STOPPED)
        spin(50)
        assert rendered == [0, 2, 4, 6, 8, 10, 0]
        assert controller.state.cursor == 0

    def test_rebuild_mid_run_leaves_no_frame_scheduled(self, qt_app, renderer, config):
        controller = PlaybackController(renderer=renderer, scheduler=QtFrameScheduler(interval_ms=1), stride=1)
        rendered = collect(controller.frame_rendered)
        controller.load(make_trajectory(1000), config)
        controller.start()

        assert spin(2000, until=lambda: len(rendered) >= 3)
        controller.load(make_trajectory(5), config)
        frames_at_rebuild = len(rendered)

        spin(200)
        assert len(rendered) == frames_at_rebuild
        assert controller.phase == PlaybackPhase.READY
        assert controller.state.cursor == 0

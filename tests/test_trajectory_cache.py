"""Tests for the trajectory cache."""
import math

import pytest

from magneticmirror.model.state import ConfigurationStore, MirrorConfig
from magneticmirror.model.trajectory_cache import TrajectoryCache, sanitize_step_count

from conftest import make_trajectory


class TestSanitizeStepCount:
    @pytest.mark.parametrize("value, expected", [
        (10, 10),
        (0, 0),
        (-5, 0),
        (math.nan, 0),
        (math.inf, 0),
        (7.9, 7),
        (True, 0),
    ])
    def test_values(self, value, expected):
        assert sanitize_step_count(value) == expected


class TestTrajectoryCache:
    def test_empty_until_built(self):
        cache = TrajectoryCache()
        assert cache.trajectory is None
        assert cache.config is None

    def test_build_length(self):
        cache = TrajectoryCache()
        trajectory = cache.build(MirrorConfig(n_steps=25))
        assert len(trajectory) == 26
        assert cache.trajectory is trajectory

    @pytest.mark.parametrize("n_steps", [0, -3, math.nan])
    def test_degenerate_step_count_gives_single_sample(self, n_steps):
        trajectory = TrajectoryCache().build(MirrorConfig(n_steps=n_steps))
        assert len(trajectory) == 1

    def test_malformed_input_does_not_raise(self):
        store = ConfigurationStore()
        store.set("b0", "oops")
        store.set("n_steps", "10")
        trajectory = TrajectoryCache().build(store.get())
        assert len(trajectory) == 11

    def test_keeps_the_snapshot_it_was_built_from(self):
        store = ConfigurationStore()
        store.set("n_steps", 5)
        cache = TrajectoryCache()
        cache.build(store.get())
        store.set("n_steps", 50)
        assert cache.config.n_steps == 5
        assert len(cache.trajectory) == 6

    def test_rebuild_replaces_trajectory(self):
        cache = TrajectoryCache()
        first = cache.build(MirrorConfig(n_steps=3))
        second = cache.build(MirrorConfig(n_steps=4))
        assert cache.trajectory is second
        assert first is not second
        assert len(first) == 4

    def test_passes_sanitized_step_count_to_builder(self):
        calls = []

        def builder(config, n_steps):
            calls.append(n_steps)
            return make_trajectory(n_steps + 1)

        TrajectoryCache(builder=builder).build(MirrorConfig(n_steps=math.nan))
        assert calls == [0]

    def test_invalidate(self):
        cache = TrajectoryCache()
        cache.build(MirrorConfig(n_steps=2))
        cache.invalidate()
        assert cache.trajectory is None
        assert cache.config is None

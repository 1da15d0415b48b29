"""Tests for the configuration store and input parsing."""
import math

import pytest

from magneticmirror.config import DEFAULT_CONFIG
from magneticmirror.model.state import ConfigurationStore, MirrorConfig
from magneticmirror.utils import is_positive_int, parse_float, parse_int

from conftest import collect


class TestParsing:
    def test_parse_float_accepts_text_and_numbers(self):
        assert parse_float(" 2.5 ") == 2.5
        assert parse_float(3) == 3.0

    def test_parse_float_malformed_is_nan(self):
        assert math.isnan(parse_float("abc"))
        assert math.isnan(parse_float(""))
        assert math.isnan(parse_float(None))

    def test_parse_int_truncates(self):
        assert parse_int("12") == 12
        assert parse_int("12.7") == 12
        assert parse_int(-3) == -3

    def test_parse_int_malformed_is_nan(self):
        assert math.isnan(parse_int("twelve"))
        assert math.isnan(parse_int("inf"))

    def test_is_positive_int(self):
        assert is_positive_int(1)
        assert is_positive_int(4.0)
        assert not is_positive_int(0)
        assert not is_positive_int(-2)
        assert not is_positive_int(2.5)
        assert not is_positive_int(math.nan)
        assert not is_positive_int(True)
        assert not is_positive_int("3")


class TestConfigurationStore:
    def test_defaults(self):
        config = ConfigurationStore().get()
        assert config.as_dict() == DEFAULT_CONFIG

    def test_set_updates_field(self):
        store = ConfigurationStore()
        store.set("b0", "2.0")
        store.set("n_steps", "50")
        assert store.get().b0 == 2.0
        assert store.get().n_steps == 50

    def test_malformed_input_becomes_nan(self):
        store = ConfigurationStore()
        store.set("vel_perp", "fast")
        store.set("n_steps", "many")
        assert math.isnan(store.get().vel_perp)
        assert math.isnan(store.get().n_steps)

    def test_unknown_field_raises(self):
        with pytest.raises(ValueError):
            ConfigurationStore().set("charge", 1.0)

    def test_snapshot_is_not_affected_by_later_edits(self):
        store = ConfigurationStore()
        snapshot = store.get()
        store.set("length_scale", 5.0)
        assert snapshot.length_scale == 1.0
        assert store.get().length_scale == 5.0

    def test_snapshot_is_frozen(self):
        snapshot = ConfigurationStore().get()
        with pytest.raises(AttributeError):
            snapshot.b0 = 3.0

    def test_change_signal(self):
        store = ConfigurationStore()
        changes = collect(store.config_changed)
        store.set("vel_par", 0.25)
        assert len(changes) == 1
        assert isinstance(changes[0], MirrorConfig)
        assert changes[0].vel_par == 0.25

    def test_reset(self):
        store = ConfigurationStore()
        store.set("b0", 9.0)
        store.reset()
        assert store.get() == MirrorConfig()

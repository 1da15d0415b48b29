"""
Configuration State (Data Model)
================================
This module defines the simulation parameters edited by the user.

Why is this file needed?
------------------------
1. State Management: It holds the current mirror parameters in one place.
2. Snapshots: Builders read an immutable MirrorConfig, so later edits in the
   form never leak into a trajectory that was already built.
3. Decoupling: Views write text into the store; the store owns the parsing.

Classes:
    MirrorConfig: Immutable parameter record.
    ConfigurationStore: Mutable holder with a change signal.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable

from PySide6.QtCore import QObject, Signal

from magneticmirror.config import DEFAULT_CONFIG
from magneticmirror.utils import parse_float, parse_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MirrorConfig:
    """
    Parameters of one trajectory.

    Any field may be NaN when the user typed something unparseable.
    """
    b0: float = DEFAULT_CONFIG["b0"]
    length_scale: float = DEFAULT_CONFIG["length_scale"]
    vel_perp: float = DEFAULT_CONFIG["vel_perp"]
    vel_par: float = DEFAULT_CONFIG["vel_par"]
    n_steps: int | float = DEFAULT_CONFIG["n_steps"]

    def as_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


# Field name -> parser for values coming from the form
_PARSERS: dict[str, Callable[[object], float | int]] = {
    "b0": parse_float,
    "length_scale": parse_float,
    "vel_perp": parse_float,
    "vel_par": parse_float,
    "n_steps": parse_int,
}


class ConfigurationStore(QObject):
    """Holds the current MirrorConfig and notifies listeners on every edit."""
    config_changed = Signal(object)

    def __init__(self, config: MirrorConfig | None = None) -> None:
        super().__init__()
        self._config = config or MirrorConfig()

    def get(self) -> MirrorConfig:
        """Return a snapshot of the current configuration."""
        return self._config

    def set(self, field: str, value: object) -> None:
        """
        Update one field from user input.

        Args:
            field: Name of a MirrorConfig field.
            value: Text or number; anything unparseable is stored as NaN.
        """
        parser = _PARSERS.get(field)
        if parser is None:
            raise ValueError(f"Unknown configuration field '{field}'.")

        parsed = parser(value)
        self._config = dataclasses.replace(self._config, **{field: parsed})
        logger.debug(f"Configuration '{field}' set to {parsed!r} (input {value!r}).")
        self.config_changed.emit(self._config)

    def reset(self) -> None:
        """Restore the default parameters."""
        self._config = MirrorConfig()
        self.config_changed.emit(self._config)
        logger.info("Configuration has been reset.")

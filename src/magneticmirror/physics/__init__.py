"""
Physics Engine
==============
Produces the particle trajectory for a given mirror configuration.

Note: This package should be pure Python/NumPy/numba and should NOT import PySide6.
"""
from magneticmirror.physics.engine import Sample, Trajectory, adiabatic_invariant, build_trajectory, mirror_field

__all__ = ["Sample", "Trajectory", "adiabatic_invariant", "build_trajectory", "mirror_field"]

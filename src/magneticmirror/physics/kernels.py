# kernels.py
from __future__ import annotations

import numpy as np
import numpy.typing as npt
import numba as nb

# ---- JIT'd field and particle push kernels ----
# error_model="numpy": division by zero yields inf/NaN instead of raising.
# No fastmath, NaN inputs have to survive the arithmetic.

@nb.njit(cache=True, error_model="numpy")
def mirror_field_xyz(x: float, y: float, z: float, b0: float, length_scale: float) -> npt.NDArray[np.float64]:
    """Model mirror field B = b0 * (-x z / L^2, -y z / L^2, 1 + z^2 / L^2)."""
    l2 = length_scale * length_scale
    out = np.empty(3, dtype=np.float64)
    out[0] = -b0 * x * z / l2
    out[1] = -b0 * y * z / l2
    out[2] = b0 * (1.0 + z * z / l2)
    return out


@nb.njit(cache=True, error_model="numpy")
def boris_rotate(v: npt.NDArray[np.float64], dt: float, q_m: float, field: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Rotate the velocity in a pure magnetic field (Boris scheme).

    Returns the new velocity; |v| is preserved up to round-off.
    """
    b = 0.5 * q_m * dt * field
    b2 = b[0] * b[0] + b[1] * b[1] + b[2] * b[2]
    vb = v[0] * b[0] + v[1] * b[1] + v[2] * b[2]

    vxb = np.empty(3, dtype=np.float64)
    vxb[0] = v[1] * b[2] - b[1] * v[2]
    vxb[1] = v[2] * b[0] - b[2] * v[0]
    vxb[2] = v[0] * b[1] - b[0] * v[1]

    return 2.0 / (1.0 + b2) * (v + vxb + vb * b) - v


@nb.njit(cache=True, error_model="numpy")
def push_particle(
    pos0: npt.NDArray[np.float64],
    vel0: npt.NDArray[np.float64],
    dt: float,
    b0: float,
    length_scale: float,
    q_m: float,
    n_steps: int,
    resolution_limit: float,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64], bool]:
    """
    Integrate n_steps Boris steps from (pos0, vel0).

    Returns:
        positions (n_steps + 1, 3), velocities (n_steps + 1, 3),
        field magnitudes at each position (n_steps + 1,), and a flag that is
        False when some step violated dt * q_m * |B| <= resolution_limit.
        On failure the entries after the offending step stay NaN.
    """
    positions = np.full((n_steps + 1, 3), np.nan)
    velocities = np.full((n_steps + 1, 3), np.nan)
    field_mags = np.full(n_steps + 1, np.nan)

    positions[0] = pos0
    velocities[0] = vel0

    for i in range(n_steps):
        p = positions[i]
        field = mirror_field_xyz(p[0], p[1], p[2], b0, length_scale)
        field_mag = np.sqrt(field[0] * field[0] + field[1] * field[1] + field[2] * field[2])
        field_mags[i] = field_mag

        if dt * q_m * field_mag > resolution_limit:
            return positions, velocities, field_mags, False

        v = boris_rotate(velocities[i], dt, q_m, field)
        velocities[i + 1] = v
        positions[i + 1] = p + dt * v

    p = positions[n_steps]
    field = mirror_field_xyz(p[0], p[1], p[2], b0, length_scale)
    field_mags[n_steps] = np.sqrt(field[0] * field[0] + field[1] * field[1] + field[2] * field[2])

    return positions, velocities, field_mags, True

"""
World Position Mapper

Converts normalized tracker coordinates into the renderer's world-space
convention:

    world_x = 0.5 - x
    world_y = 0.5 - y
    world_z = (0.5 + z) - 1.0

Usage:
    from handpose.render.world_mapper import to_world

    wx, wy, wz = to_world(0.2, 0.3, 0.1)   # (0.3, 0.2, -0.4)
"""

from typing import Tuple

import numpy as np

_CENTER = 0.5
_DEPTH_OFFSET = 1.0


def to_world(x: float, y: float, z: float) -> Tuple[float, float, float]:
    """
    Map one normalized position into world space.

    Args:
        x: Normalized X in [0, 1]
        y: Normalized Y in [0, 1]
        z: Tracker depth

    Returns:
        (x, y, z) in world coordinates
    """
    return (
        _CENTER - x,
        _CENTER - y,
        (_CENTER + z) - _DEPTH_OFFSET,
    )


def map_positions(positions: np.ndarray) -> np.ndarray:
    """
    Map an array of normalized positions into world space.

    Args:
        positions: Shape (N, 3)

    Returns:
        Array of shape (N, 3)
    """
    positions = np.asarray(positions, dtype=np.float64)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"Expected positions with shape (N, 3), got {positions.shape}")

    result = np.empty_like(positions)
    result[:, 0] = _CENTER - positions[:, 0]
    result[:, 1] = _CENTER - positions[:, 1]
    result[:, 2] = (_CENTER + positions[:, 2]) - _DEPTH_OFFSET
    return result

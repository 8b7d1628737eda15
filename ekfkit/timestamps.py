"""Conversions of message stamps, vectors and flat matrices to numeric forms."""

from __future__ import annotations

from typing import Protocol, Sequence

import numpy as np

NSEC_TO_SEC = 1e-9
"""Seconds per nanosecond."""
MM_TO_M = 1e-3
"""Metres per millimetre."""


class _Vector3Like(Protocol):
    x: float
    y: float
    z: float


def header_to_time(sec: int, nanosec: int) -> float:
    """Time in seconds from a stamp split into whole seconds and nanoseconds."""
    return sec + nanosec * NSEC_TO_SEC


def vector3_to_array(msg: _Vector3Like) -> np.ndarray:
    """Array ``(x, y, z)`` of any object with ``x``, ``y`` and ``z`` attributes."""
    return np.array([msg.x, msg.y, msg.z], dtype=float)


def matrix3_from_array(values: Sequence[float]) -> np.ndarray:
    """3x3 matrix from nine values in row-major order."""
    flat = np.asarray(values, dtype=float).ravel()
    if flat.size != 9:
        raise ValueError(f"expected 9 values, got {flat.size}")
    return flat.reshape(3, 3)
"""Tolerance comparisons for matrices and quaternions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ekfkit.rotations import Quaternion


@dataclass(frozen=True)
class Comparison:
    """Outcome of a comparison; true when the values agree."""

    passed: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.passed


def _as_matrix(values: Sequence) -> np.ndarray:
    mat = np.asarray(values, dtype=float)
    if mat.ndim == 1:
        mat = mat.reshape(-1, 1)
    return mat


def matrices_near(mat1: Sequence, mat2: Sequence, precision: float) -> Comparison:
    """Compare two matrices (or vectors) element by element within ``precision``."""
    a = _as_matrix(mat1)
    b = _as_matrix(mat2)
    if a.shape != b.shape:
        raise ValueError(f"shapes differ: {a.shape} and {b.shape}")
    diff = np.abs(a - b)
    offending = np.argwhere(diff > precision)
    if len(offending):
        i, j = (int(k) for k in offending[0])
        return Comparison(
            False,
            f"mat1[{i},{j}] ({a[i, j]:g}) != mat2[{i},{j}] ({b[i, j]:g}) "
            f"Diff:{diff[i, j]:g}",
        )
    return Comparison(True)


def quaternions_near(quat1: Quaternion, quat2: Quaternion, precision: float) -> Comparison:
    """Compare two quaternions by the angle of the rotation between them."""
    delta = quat1.inverse() * quat2
    angle = math.atan2(float(np.linalg.norm(delta.vec())), delta.w)
    if angle > precision:
        return Comparison(
            False,
            f"quat1 ({quat1.w:g}, {quat1.x:g}, {quat1.y:g}, {quat1.z:g}) != "
            f"quat2 ({quat2.w:g}, {quat2.x:g}, {quat2.y:g}, {quat2.z:g}) Diff:{angle:g}",
        )
    return Comparison(True)
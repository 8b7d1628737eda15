"""Quaternions, rotation vectors and conversions between rotation forms."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

_SMALL_ANGLE = 1e-9
_DBL_EPSILON = float(np.finfo(float).eps)


@dataclass(frozen=True)
class Quaternion:
    """Quaternion ``w + xi + yj + zk`` with the scalar part first."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __mul__(self, other: object) -> Quaternion:
        if not isinstance(other, Quaternion):
            return NotImplemented
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def inverse(self) -> Quaternion:
        """Multiplicative inverse; the zero quaternion maps to zero."""
        n2 = self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z
        if n2 > 0.0:
            return Quaternion(self.w / n2, -self.x / n2, -self.y / n2, -self.z / n2)
        return Quaternion(0.0, 0.0, 0.0, 0.0)

    def norm(self) -> float:
        """Euclidean norm of the four coefficients."""
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Quaternion:
        """Unit quaternion with the same direction; zero stays zero."""
        n = self.norm()
        if n > 0.0:
            return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)
        return self

    def vec(self) -> np.ndarray:
        """Vector part ``(x, y, z)``."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def rotate(self, vector: Sequence[float]) -> np.ndarray:
        """Rotate a 3-vector by this (unit) quaternion."""
        return self.to_rotation_matrix() @ to_vector(vector)

    def to_rotation_matrix(self) -> np.ndarray:
        """3x3 rotation matrix; assumes a unit quaternion."""
        tx, ty, tz = 2.0 * self.x, 2.0 * self.y, 2.0 * self.z
        twx, twy, twz = tx * self.w, ty * self.w, tz * self.w
        txx, txy, txz = tx * self.x, ty * self.x, tz * self.x
        tyy, tyz, tzz = ty * self.y, tz * self.y, tz * self.z
        return np.array(
            [
                [1.0 - (tyy + tzz), txy - twz, txz + twy],
                [txy + twz, 1.0 - (txx + tzz), tyz - twx],
                [txz - twy, tyz + twx, 1.0 - (txx + tyy)],
            ]
        )

    @classmethod
    def from_rotation_matrix(cls, matrix: Sequence[Sequence[float]]) -> Quaternion:
        """Quaternion of a 3x3 rotation matrix."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (3, 3):
            raise ValueError(f"expected a 3x3 matrix, got shape {m.shape}")
        trace = m[0, 0] + m[1, 1] + m[2, 2]
        if trace > 0.0:
            t = math.sqrt(trace + 1.0)
            w = 0.5 * t
            t = 0.5 / t
            return cls(
                w,
                (m[2, 1] - m[1, 2]) * t,
                (m[0, 2] - m[2, 0]) * t,
                (m[1, 0] - m[0, 1]) * t,
            )
        i = 0
        if m[1, 1] > m[0, 0]:
            i = 1
        if m[2, 2] > m[i, i]:
            i = 2
        j = (i + 1) % 3
        k = (j + 1) % 3
        t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
        q = [0.0, 0.0, 0.0]
        q[i] = 0.5 * t
        t = 0.5 / t
        w = (m[k, j] - m[j, k]) * t
        q[j] = (m[j, i] + m[i, j]) * t
        q[k] = (m[k, i] + m[i, k]) * t
        return cls(w, q[0], q[1], q[2])

    @classmethod
    def from_angle_axis(cls, angle: float, axis: Sequence[float]) -> Quaternion:
        """Rotation of ``angle`` radians about a unit ``axis``."""
        ax = to_vector(axis)
        s = math.sin(0.5 * angle)
        return cls(math.cos(0.5 * angle), s * ax[0], s * ax[1], s * ax[2])

    @classmethod
    def identity(cls) -> Quaternion:
        """The identity rotation."""
        return cls(1.0, 0.0, 0.0, 0.0)


def to_vector(values: Iterable[float]) -> np.ndarray:
    """Float array from any sequence of numbers."""
    return np.array(list(values), dtype=float)


def to_quaternion(values: Iterable[float]) -> Quaternion:
    """Normalized quaternion from ``(w, x, y, z)``; identity for any other length."""
    coeffs = [float(v) for v in values]
    if len(coeffs) == 4:
        return Quaternion(*coeffs).normalized()
    return Quaternion.identity()


def rot_vec_to_quat(rot_vec: Sequence[float]) -> Quaternion:
    """Quaternion of a rotation vector (axis times angle)."""
    vec = to_vector(rot_vec)
    angle = float(np.linalg.norm(vec))
    if angle > _SMALL_ANGLE:
        return Quaternion.from_angle_axis(angle, vec / angle)
    return Quaternion.identity()


def quat_to_rot_vec(quat: Quaternion) -> np.ndarray:
    """Rotation vector (axis times angle, angle in [0, pi]) of a quaternion."""
    vec = quat.vec()
    n = float(np.linalg.norm(vec))
    if n == 0.0:
        return np.zeros(3)
    angle = 2.0 * math.atan2(n, abs(quat.w))
    axis = -vec / n if quat.w < 0.0 else vec / n
    return axis * angle


def euler_to_quat(euler_angles: Sequence[float]) -> Quaternion:
    """Quaternion of roll, pitch, yaw applied as Rz(yaw) * Ry(pitch) * Rx(roll)."""
    roll, pitch, yaw = to_vector(euler_angles)
    return (
        Quaternion.from_angle_axis(yaw, (0.0, 0.0, 1.0))
        * Quaternion.from_angle_axis(pitch, (0.0, 1.0, 0.0))
        * Quaternion.from_angle_axis(roll, (1.0, 0.0, 0.0))
    )


def quat_to_rodrigues(quat: Quaternion) -> np.ndarray:
    """Rodrigues rotation vector of a quaternion, taken through its rotation matrix."""
    matrix = quat.normalized().to_rotation_matrix()
    return quat_to_rot_vec(Quaternion.from_rotation_matrix(matrix))


def _skew(vec: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [0.0, -vec[2], vec[1]],
            [vec[2], 0.0, -vec[0]],
            [-vec[1], vec[0], 0.0],
        ]
    )


def rodrigues_to_quat(rodrigues_vector: Sequence[float]) -> Quaternion:
    """Quaternion of a Rodrigues rotation vector, taken through its rotation matrix."""
    vec = to_vector(rodrigues_vector)
    theta = float(np.linalg.norm(vec))
    if theta < _DBL_EPSILON:
        matrix = np.eye(3)
    else:
        axis = vec / theta
        c, s = math.cos(theta), math.sin(theta)
        matrix = c * np.eye(3) + (1.0 - c) * np.outer(axis, axis) + s * _skew(axis)
    return Quaternion.from_rotation_matrix(matrix)


def subtract_from_each(
    vectors: Iterable[Sequence[float]], vector: Sequence[float]
) -> list[np.ndarray]:
    """Subtract one vector from every vector of a list."""
    offset = to_vector(vector)
    return [to_vector(v) - offset for v in vectors]
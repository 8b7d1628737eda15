"""Matrix helpers for filter updates: block edits, nullspace projection,
measurement compression, averaging and in-plane point-set registration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterable, Sequence

import numpy as np

from ekfkit.rotations import Quaternion, quat_to_rot_vec, to_vector

_ZERO_TOLERANCE = 1e-9
_MIN_ROTATION_NORM = 1e-9
_MIN_KABSCH_POINTS = 4


@dataclass(frozen=True, eq=False)
class RigidTransform:
    """Rotation followed by translation: ``p -> rotation @ p + translation``."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def apply(self, point: Sequence[float]) -> np.ndarray:
        """Transform a 3-vector."""
        return self.rotation @ to_vector(point) + self.translation

    @classmethod
    def identity(cls) -> RigidTransform:
        """The transform that leaves every point in place."""
        return cls(np.eye(3), np.zeros(3))


@dataclass(frozen=True, eq=False)
class KabschResult:
    """In-plane registration with its position and angle spread.

    ``ang_stddev`` is 0.0 when no point was far enough from the centroid
    to contribute an angular error.
    """

    transform: RigidTransform
    pos_stddev: float
    ang_stddev: float


def skew_symmetric(vec: Sequence[float]) -> np.ndarray:
    """Cross-product matrix ``[v]x`` such that ``[v]x @ u == v x u``."""
    x, y, z = to_vector(vec)
    return np.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )


def min_bound_vector(vec: Iterable[float], min_bound: float) -> np.ndarray:
    """Copy of ``vec`` with every element below ``min_bound`` raised to it."""
    return np.maximum(to_vector(vec), float(min_bound))


def _as_matrix(values: Sequence) -> np.ndarray:
    mat = np.asarray(values, dtype=float)
    if mat.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got {mat.ndim} dimension(s)")
    return mat


def insert_in_matrix(sub_mat: Sequence, in_mat: Sequence, row: int, col: int) -> np.ndarray:
    """Grow ``in_mat`` by inserting ``sub_mat`` as a block at ``(row, col)``.

    Rows and columns of ``in_mat`` from the insertion point onwards are
    shifted past the new block; the new off-diagonal areas are zero.
    """
    sub = _as_matrix(sub_mat)
    base = _as_matrix(in_mat)
    in_rows, in_cols = base.shape
    sub_rows, sub_cols = sub.shape
    if not (0 <= row <= in_rows and 0 <= col <= in_cols):
        raise ValueError(f"insertion point ({row}, {col}) outside a {in_rows}x{in_cols} matrix")

    out = np.zeros((in_rows + sub_rows, in_cols + sub_cols))
    out[:row, :col] = base[:row, :col]
    out[:row, col + sub_cols:] = base[:row, col:]
    out[row + sub_rows:, :col] = base[row:, :col]
    out[row + sub_rows:, col + sub_cols:] = base[row:, col:]
    out[row:row + sub_rows, col:col + sub_cols] = sub
    return out


def remove_from_matrix(in_mat: Sequence, row: int, col: int, size: int) -> np.ndarray:
    """Remove ``size`` rows starting at ``row`` and ``size`` columns starting at ``col``."""
    base = _as_matrix(in_mat)
    in_rows, in_cols = base.shape
    if row < 0 or col < 0 or size < 0 or row + size > in_rows or col + size > in_cols:
        raise ValueError(
            f"cannot remove {size} rows/columns at ({row}, {col}) "
            f"from a {in_rows}x{in_cols} matrix"
        )
    out = np.delete(base, np.arange(row, row + size), axis=0)
    return np.delete(out, np.arange(col, col + size), axis=1)


def apply_left_nullspace(
    h_f: Sequence, h_x: Sequence, res: Iterable[float]
) -> tuple[np.ndarray, np.ndarray]:
    """Project the track Jacobian and residual with the trailing rows of ``Q``
    from the Householder QR of the feature Jacobian.

    Returns the projected ``(h_x, res)``.
    """
    feature_jac = _as_matrix(h_f)
    track_jac = _as_matrix(h_x)
    residual = to_vector(res)
    rows, cols = feature_jac.shape
    if cols > rows:
        raise ValueError("feature Jacobian has more columns than rows")
    q, _ = np.linalg.qr(feature_jac, mode="complete")
    q_null = q[cols:, :]
    return q_null @ track_jac, q_null @ residual


def _givens(p: float, q: float) -> tuple[float, float]:
    """Cosine and sine of the plane rotation that zeroes ``q`` against ``p``."""
    if q == 0.0:
        return (-1.0 if p < 0.0 else 1.0), 0.0
    if p == 0.0:
        return 0.0, (1.0 if q < 0.0 else -1.0)
    if abs(p) > abs(q):
        t = q / p
        u = math.sqrt(1.0 + t * t)
        if p < 0.0:
            u = -u
        c = 1.0 / u
        return c, -t * c
    t = p / q
    u = math.sqrt(1.0 + t * t)
    if q < 0.0:
        u = -u
    s = -1.0 / u
    return -t * s, s


def compress_measurements(
    jacobian: Sequence, residual: Iterable[float]
) -> tuple[np.ndarray, np.ndarray]:
    """Compress a tall measurement system with Givens rotations.

    Returns the reduced ``(jacobian, residual)`` keeping as many leading rows
    as there are rows with a non-negligible entry. Fat systems (fewer rows
    than columns) come back unchanged.
    """
    jac = _as_matrix(jacobian).copy()
    res = to_vector(residual)
    m, n = jac.shape
    if m < n:
        return jac, res

    for j in range(n):
        for i in range(m - 1, j, -1):
            c, s = _givens(jac[i - 1, j], jac[i, j])
            upper = jac[i - 1, j:].copy()
            lower = jac[i, j:].copy()
            jac[i - 1, j:] = c * upper - s * lower
            jac[i, j:] = s * upper + c * lower
            r_upper, r_lower = res[i - 1], res[i]
            res[i - 1] = c * r_upper - s * r_lower
            res[i] = s * r_upper + c * r_lower

    kept = int(np.count_nonzero(np.any(np.abs(jac) > _ZERO_TOLERANCE, axis=1)))
    return jac[:kept, :].copy(), res[:kept].copy()


def average_vectors(
    vectors: Sequence[Sequence[float]], weights: Sequence[float] | None = None
) -> np.ndarray:
    """Weighted mean of 3-vectors; equal weights when none are given."""
    stacked = np.array([to_vector(v) for v in vectors], dtype=float).reshape(-1, 3)
    if weights is None:
        w = np.ones(len(stacked))
    else:
        w = to_vector(weights)
        if len(w) != len(stacked):
            raise ValueError(f"{len(stacked)} vectors but {len(w)} weights")
    with np.errstate(invalid="ignore", divide="ignore"):
        return (w @ stacked) / w.sum()


def quaternion_jacobian(quat: Quaternion) -> np.ndarray:
    """Right Jacobian of the rotation vector of ``quat``."""
    rot_vec = quat_to_rot_vec(quat)
    skew_mat = skew_symmetric(rot_vec)
    vec_norm = max(float(np.linalg.norm(rot_vec)), _MIN_ROTATION_NORM)
    coeff_one = (1.0 - math.cos(vec_norm)) / vec_norm**2
    coeff_two = (vec_norm - math.sin(vec_norm)) / vec_norm**3
    return np.eye(3) - coeff_one * skew_mat + coeff_two * (skew_mat @ skew_mat)


def sign(val: float) -> float:
    """1.0 for positive, -1.0 for negative, 0.0 for zero."""
    return float((val > 0.0) - (val < 0.0))


def matrix2d_from_vectors3d(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """2xN matrix of the x and y components of N vectors."""
    out = np.zeros((2, len(vectors)))
    for column, vec in enumerate(vectors):
        out[0, column] = vec[0]
        out[1, column] = vec[1]
    return out


def affine_angle(transform: RigidTransform) -> float:
    """Rotation angle of a transform, from the sum of its rotation's diagonal."""
    diagonal_sum = float(np.sum(np.diag(transform.rotation)))
    cosine = (diagonal_sum - 1.0) / 2.0
    return math.acos(min(1.0, max(-1.0, cosine)))


def mean_standard_deviation(vectors: Sequence[Sequence[float]]) -> float:
    """Root of the summed squared distances from the mean, divided by the count."""
    mean = average_vectors(vectors)
    total = sum(float(np.linalg.norm(to_vector(v) - mean)) ** 2 for v in vectors)
    return math.sqrt(total) / len(vectors)


def kabsch_2d(
    points_tgt: Sequence[Sequence[float]], points_src: Sequence[Sequence[float]]
) -> KabschResult:
    """Rotation about z plus translation taking source points onto target points.

    Needs equally many points in both sets, at least four.
    """
    if len(points_tgt) != len(points_src):
        raise ValueError(f"{len(points_tgt)} target points but {len(points_src)} source points")
    if len(points_tgt) < _MIN_KABSCH_POINTS:
        raise ValueError(f"at least {_MIN_KABSCH_POINTS} point pairs are needed")

    tgt = [to_vector(p) for p in points_tgt]
    src = [to_vector(p) for p in points_src]
    centroid_src = average_vectors(src)
    centroid_tgt = average_vectors(tgt)

    mat_src = matrix2d_from_vectors3d([p - centroid_src for p in src])
    mat_tgt = matrix2d_from_vectors3d([p - centroid_tgt for p in tgt])

    u, _, vh = np.linalg.svd(mat_src @ mat_tgt.T)
    v = vh.T
    correction = np.eye(2)
    correction[1, 1] = sign(float(np.linalg.det(v @ u.T)))
    rotation_3d = np.eye(3)
    rotation_3d[:2, :2] = v @ correction @ u.T

    transform = RigidTransform(rotation_3d, centroid_tgt - rotation_3d @ centroid_src)

    pos_errors = []
    sum_square_slopes = 0.0
    slope_count = 0
    for target, source in zip(tgt, src):
        pos_error = target - transform.apply(source)
        error_norm = float(np.linalg.norm(pos_error))
        baseline = float(np.linalg.norm(target - centroid_src))
        pos_errors.append(pos_error)
        if baseline > error_norm:
            sum_square_slopes += (error_norm / baseline) ** 2
            slope_count += 1

    ang_stddev = math.sqrt(sum_square_slopes) / slope_count if slope_count else 0.0
    return KabschResult(transform, mean_standard_deviation(pos_errors), ang_stddev)


def _cross(o: tuple[int, int], a: tuple[int, int], b: tuple[int, int]) -> int:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _convex_hull(points: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    ordered = sorted(set(points))
    if len(ordered) <= 2:
        return ordered
    lower: list[tuple[int, int]] = []
    for p in ordered:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)
    upper: list[tuple[int, int]] = []
    for p in reversed(ordered):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)
    return lower[:-1] + upper[:-1]


def maximum_distance(points: Sequence[Sequence[float]]) -> float:
    """Largest in-plane distance between any two points.

    Coordinates are truncated to whole numbers before the distance is taken.
    """
    grid_points = [(math.trunc(p[0]), math.trunc(p[1])) for p in points]
    hull = _convex_hull(grid_points)
    return max((math.dist(a, b) for a, b in combinations(hull, 2)), default=0.0)


def qr_r(a: Sequence, b: Sequence) -> np.ndarray:
    """Upper-triangular ``R`` of the QR decomposition of ``a`` stacked over ``b``."""
    top = _as_matrix(a)
    bottom = _as_matrix(b)
    if top.shape[1] != bottom.shape[1]:
        raise ValueError("matrices to stack must have the same number of columns")
    stacked = np.vstack([top, bottom])
    cols = top.shape[1]
    if stacked.shape[0] < cols:
        raise ValueError("stacked matrix has fewer rows than columns")
    r = np.linalg.qr(stacked, mode="r")
    return np.triu(r[:cols, :cols])
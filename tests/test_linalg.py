import math

import numpy as np
import pytest

from ekfkit.assertions import matrices_near
from ekfkit.linalg import (
    KabschResult,
    RigidTransform,
    affine_angle,
    apply_left_nullspace,
    average_vectors,
    compress_measurements,
    insert_in_matrix,
    kabsch_2d,
    matrix2d_from_vectors3d,
    maximum_distance,
    mean_standard_deviation,
    min_bound_vector,
    qr_r,
    quaternion_jacobian,
    remove_from_matrix,
    sign,
    skew_symmetric,
)
from ekfkit.rotations import Quaternion

MATRIX_4X4 = np.arange(1, 17, dtype=float).reshape(4, 4)


def test_skew_symmetric():
    vec = [1.0, 2.0, 3.0]
    out = skew_symmetric(vec)
    assert out[0, 0] == 0.0
    assert out[0, 1] == -vec[2]
    assert out[0, 2] == vec[1]
    assert out[1, 2] == -vec[0]
    assert out[1, 1] == 0.0
    assert out[1, 0] == vec[2]
    assert out[2, 0] == -vec[1]
    assert out[2, 1] == vec[0]
    assert out[2, 2] == 0.0


def test_skew_symmetric_is_cross_product():
    a = np.array([1.0, -2.0, 0.5])
    b = np.array([0.3, 4.0, -1.0])
    assert np.allclose(skew_symmetric(a) @ b, np.cross(a, b))


def test_min_bound_vector():
    assert np.array_equal(min_bound_vector(np.ones(2), 1), np.ones(2))
    assert np.array_equal(min_bound_vector(np.zeros(3), 1), np.ones(3))
    assert np.array_equal(min_bound_vector(np.zeros(4), 1), np.ones(4))


@pytest.mark.parametrize(
    "row, col, expected",
    [
        (1, 1, [[1, 4], [13, 16]]),
        (0, 0, [[11, 12], [15, 16]]),
        (0, 2, [[9, 10], [13, 14]]),
        (2, 0, [[3, 4], [7, 8]]),
        (2, 2, [[1, 2], [5, 6]]),
    ],
)
def test_remove_from_matrix(row, col, expected):
    out = remove_from_matrix(MATRIX_4X4, row, col, 2)
    assert np.array_equal(out, np.array(expected, dtype=float))


def test_remove_from_matrix_out_of_range():
    with pytest.raises(ValueError):
        remove_from_matrix(MATRIX_4X4, 3, 3, 2)


def test_apply_left_nullspace_shapes():
    h_f = np.array(
        [
            [1, 0, -1],
            [0, 1, -1],
            [1, 0, -2],
            [0, 1, -3],
            [1, 0, -4],
            [0, 1, -5],
        ],
        dtype=float,
    )
    h_x = np.vstack([np.eye(5), np.ones((1, 5))])
    res = [1, 2, 3, 4, 5, 6]
    new_h_x, new_res = apply_left_nullspace(h_f, h_x, res)
    assert new_res.shape == (3,)
    assert new_h_x.shape == (3, 5)


def test_compress_measurements_two_rows():
    jacobian = np.array([[1, 0], [1, 0], [0, 1], [0, 1]], dtype=float)
    residual = [1, 1, 1, 1]
    jac, res = compress_measurements(jacobian, residual)
    assert jac.shape == (2, 2)
    assert res.shape == (2,)
    assert jac[0, 1] == 0.0
    assert jac[1, 0] == 0.0
    assert jac[0, 0] == pytest.approx(1.414214, abs=1e-6)
    assert jac[1, 1] == pytest.approx(1.414214, abs=1e-6)
    assert res[0] == pytest.approx(1.414214, abs=1e-6)
    assert res[1] == pytest.approx(1.414214, abs=1e-6)


def test_compress_measurements_one_row():
    jacobian = np.array([[1, 0], [1, 0], [1, 0], [1, 0]], dtype=float)
    jac, res = compress_measurements(jacobian, [1, 1, 1, 1])
    assert jac.shape == (1, 2)
    assert res.shape == (1,)
    assert jac[0, 0] == pytest.approx(2.0, abs=1e-6)
    assert jac[0, 1] == pytest.approx(0.0, abs=1e-6)
    assert res[0] == pytest.approx(2.0, abs=1e-6)


def test_compress_measurements_leaves_fat_matrix():
    jacobian = np.array([[1.0, 2.0, 3.0]])
    jac, res = compress_measurements(jacobian, [5.0])
    assert np.array_equal(jac, jacobian)
    assert np.array_equal(res, np.array([5.0]))


def test_average_vectors_equal_weights():
    vectors = [(9.0, 0.0, 0.0), (0.0, 6.0, 0.0), (0.0, 0.0, 3.0)]
    out = average_vectors(vectors, [1.0, 1.0, 1.0])
    assert list(out) == [3.0, 2.0, 1.0]


def test_average_vectors_weighted():
    vectors = [(6.0, 0.0, 0.0), (0.0, 6.0, 0.0), (0.0, 0.0, 6.0)]
    out = average_vectors(vectors, [1.0, 2.0, 3.0])
    assert list(out) == [1.0, 2.0, 3.0]


def test_average_vectors_default_weights_match_ones():
    vectors = [(1.0, 5.0, -2.0), (3.0, 1.0, 4.0)]
    assert np.array_equal(average_vectors(vectors), average_vectors(vectors, [1.0, 1.0]))


def test_average_vectors_weight_count_mismatch():
    with pytest.raises(ValueError):
        average_vectors([(1.0, 0.0, 0.0)], [1.0, 2.0])


def test_quaternion_jacobian_identity():
    jac = quaternion_jacobian(Quaternion(1, 0, 0, 0))
    assert matrices_near(jac, np.eye(3), 1e-6)


@pytest.mark.parametrize("val, expected", [(2.5, 1.0), (-0.1, -1.0), (0.0, 0.0)])
def test_sign(val, expected):
    assert sign(val) == expected


def test_kabsch_2d():
    points_src = [
        (0, 0, 0),
        (1, 1, 1),
        (0, 1, 0),
        (1, 0, 1),
        (1, 0, 0),
        (0, 1, 0),
        (0, 0, 1),
    ]
    points_tgt = [
        (1.0000, 2.0000, 3.0000),
        (0.6340, 3.3660, 4.0000),
        (0.1340, 2.5000, 3.0000),
        (1.5000, 2.8660, 4.0000),
        (1.5000, 2.8660, 3.0000),
        (0.1340, 2.5000, 3.0000),
        (1.0000, 2.0000, 4.0000),
    ]
    result = kabsch_2d(points_tgt, points_src)
    assert isinstance(result, KabschResult)
    translation = result.transform.translation
    rotation = result.transform.rotation

    assert translation[0] == pytest.approx(1.0, abs=1e-3)
    assert translation[1] == pytest.approx(2.0, abs=1e-3)
    assert translation[2] == pytest.approx(3.0, abs=1e-3)

    assert rotation[0, 0] == pytest.approx(0.5, abs=1e-3)
    assert rotation[1, 1] == pytest.approx(0.5, abs=1e-3)
    assert rotation[0, 1] == pytest.approx(-0.8660, abs=1e-3)
    assert rotation[1, 0] == pytest.approx(0.8660, abs=1e-3)
    assert rotation[2, 2] == pytest.approx(1.0, abs=1e-3)

    assert affine_angle(result.transform) == pytest.approx(math.pi / 3.0, abs=1e-3)
    assert result.pos_stddev < 1e-3


def test_kabsch_2d_too_few_points():
    points = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
    with pytest.raises(ValueError):
        kabsch_2d(points, points)


def test_kabsch_2d_mismatched_sizes():
    with pytest.raises(ValueError):
        kabsch_2d([(0, 0, 0)] * 4, [(0, 0, 0)] * 5)


def test_rigid_transform_identity_keeps_point():
    assert np.array_equal(RigidTransform.identity().apply([1.0, -2.0, 3.0]), [1.0, -2.0, 3.0])
    assert affine_angle(RigidTransform.identity()) == 0.0


def test_maximum_distance():
    points = [(0, 0, 0), (1, 1, 0), (1, 0, 0), (1, -1, 0), (4, 0, 0)]
    assert maximum_distance(points) == 4.0


def test_maximum_distance_single_point():
    assert maximum_distance([(2.0, 3.0, 0.0)]) == 0.0


def test_mean_standard_deviation_identical_vectors():
    assert mean_standard_deviation([(1.0, 2.0, 3.0)] * 5) == 0.0


def test_insert_in_matrix():
    in_mat = np.array([[1, 2], [3, 4]], dtype=float)
    sub_mat = np.array([[1, 2], [3, 4]], dtype=float)
    out = insert_in_matrix(sub_mat, in_mat, 1, 1)
    assert out.shape == (4, 4)
    assert out[0, 0] == 1
    assert out[0, 3] == 2
    assert out[3, 0] == 3
    assert out[3, 3] == 4
    assert out[1, 1] == 1
    assert out[1, 2] == 2
    assert out[2, 1] == 3
    assert out[2, 2] == 4


def test_insert_then_remove_round_trip():
    sub_mat = np.full((2, 2), 7.0)
    grown = insert_in_matrix(sub_mat, MATRIX_4X4, 2, 2)
    assert np.array_equal(remove_from_matrix(grown, 2, 2, 2), MATRIX_4X4)


def test_insert_in_matrix_out_of_range():
    with pytest.raises(ValueError):
        insert_in_matrix(np.eye(2), np.eye(2), 3, 0)


def test_matrix2d_from_vectors3d():
    out = matrix2d_from_vectors3d([(0, 0, 0), (1, 1, 1), (2, 2, 2), (3, 3, 3)])
    assert out.shape == (2, 4)
    assert list(out[0]) == [0, 1, 2, 3]
    assert list(out[1]) == [0, 1, 2, 3]


def test_qr_r_reproduces_gram_matrix():
    a = np.array([[2.0, 1.0], [0.5, 3.0]])
    b = np.array([[1.0, -1.0], [4.0, 0.0], [0.0, 2.0]])
    r = qr_r(a, b)
    assert r.shape == (2, 2)
    assert r[1, 0] == 0.0
    assert np.allclose(r.T @ r, a.T @ a + b.T @ b)


def test_qr_r_column_mismatch():
    with pytest.raises(ValueError):
        qr_r(np.eye(2), np.eye(3))
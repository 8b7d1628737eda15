from dataclasses import dataclass

import numpy as np
import pytest

from ekfkit.timestamps import (
    MM_TO_M,
    NSEC_TO_SEC,
    header_to_time,
    matrix3_from_array,
    vector3_to_array,
)


@dataclass
class _Vector3:
    x: float
    y: float
    z: float


def test_header_to_time():
    out = header_to_time(123456789, 987654321)
    assert out == 123456789.987654321


def test_header_to_time_whole_seconds():
    assert header_to_time(5, 0) == 5.0
    assert header_to_time(0, 500000000) == pytest.approx(0.5)


def test_vector3_to_array():
    msg = _Vector3(1.0, 2.0, 3.0)
    out = vector3_to_array(msg)
    assert out[0] == msg.x
    assert out[1] == msg.y
    assert out[2] == msg.z


def test_matrix3_from_array():
    values = [1, 2, 3, 4, 5, 6, 7, 8, 9]
    out = matrix3_from_array(values)
    assert out.shape == (3, 3)
    assert out[0, 0] == values[0]
    assert out[0, 1] == values[1]
    assert out[0, 2] == values[2]
    assert out[1, 0] == values[3]
    assert out[1, 1] == values[4]
    assert out[1, 2] == values[5]
    assert out[2, 0] == values[6]
    assert out[2, 1] == values[7]
    assert out[2, 2] == values[8]


def test_matrix3_from_array_wrong_length():
    with pytest.raises(ValueError):
        matrix3_from_array([1, 2, 3])


def test_unit_conversions():
    assert header_to_time(0, 1) == NSEC_TO_SEC
    assert np.isclose(1500 * MM_TO_M, 1.5)
"""Comma-separated formatting of vectors and quaternions for data logs."""

from __future__ import annotations

from typing import Iterable

from ekfkit.rotations import Quaternion

_DEFAULT_PRECISION = 6


def _format(value: float, precision: int = _DEFAULT_PRECISION) -> str:
    return format(float(value), f".{precision}g")


def enumerate_header(name: str, size: int) -> str:
    """Header text ``,name_0,name_1,...`` with ``size`` entries."""
    return "".join(f",{name}_{i}" for i in range(size))


def vector_to_comma_string(vec: Iterable[float], precision: int | None = None) -> str:
    """Each value preceded by a comma, with ``precision`` significant digits (default 6)."""
    digits = _DEFAULT_PRECISION if precision is None else precision
    return "".join(f",{_format(v, digits)}" for v in vec)


def quaternion_to_comma_string(quat: Quaternion) -> str:
    """Quaternion as ``,w,x,y,z``."""
    return "".join(f",{_format(v)}" for v in (quat.w, quat.x, quat.y, quat.z))
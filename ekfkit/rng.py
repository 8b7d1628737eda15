"""Seedable random numbers for simulation.

The generator is a 64-bit Mersenne Twister. Normal numbers come from the
Marsaglia polar method and uniform numbers from 53-bit canonical doubles,
so a given seed always yields the same sequence. The generator is shared
by every ``SimRNG`` instance.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ekfkit.rotations import Quaternion, rot_vec_to_quat, to_vector

_MASK64 = (1 << 64) - 1
_DEFAULT_SEED = 5489
_MAX_ANGLE_ERROR = math.pi / 2.0


class _MersenneTwister64:
    """MT19937-64 pseudo-random generator of 64-bit unsigned integers."""

    _N = 312
    _M = 156
    _MATRIX_A = 0xB5026F5AA96619E9
    _UPPER_MASK = _MASK64 ^ ((1 << 31) - 1)
    _LOWER_MASK = (1 << 31) - 1

    def __init__(self, seed: int = _DEFAULT_SEED) -> None:
        self._state = [0] * self._N
        self._index = self._N
        self.seed(seed)

    def seed(self, seed: int) -> None:
        state = self._state
        state[0] = seed & _MASK64
        for i in range(1, self._N):
            prev = state[i - 1]
            state[i] = (6364136223846793005 * (prev ^ (prev >> 62)) + i) & _MASK64
        self._index = self._N

    def _twist(self) -> None:
        state = self._state
        n, m = self._N, self._M
        for i in range(n):
            x = (state[i] & self._UPPER_MASK) | (state[(i + 1) % n] & self._LOWER_MASK)
            x_a = x >> 1
            if x & 1:
                x_a ^= self._MATRIX_A
            state[i] = state[(i + m) % n] ^ x_a
        self._index = 0

    def next_u64(self) -> int:
        if self._index >= self._N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= (y >> 29) & 0x5555555555555555
        y ^= (y << 17) & 0x71D67FFFEDA60000
        y ^= (y << 37) & 0xFFF7EEE000000000
        y ^= y >> 43
        return y & _MASK64

    def canonical(self) -> float:
        """Double in [0, 1) from one 64-bit draw."""
        value = float(self.next_u64()) / 18446744073709551616.0
        if value >= 1.0:
            value = math.nextafter(1.0, 0.0)
        return value


class SimRNG:
    """Simulation random number generator."""

    _generator = _MersenneTwister64()

    def set_seed(self, seed: float) -> None:
        """Reseed the shared generator; fractional seeds are truncated."""
        SimRNG._generator.seed(int(seed))

    def norm_rand(self, mean: float, std_dev: float) -> float:
        """Normal random number with the given mean and standard deviation."""
        gen = SimRNG._generator
        while True:
            x = 2.0 * gen.canonical() - 1.0
            y = 2.0 * gen.canonical() - 1.0
            r2 = x * x + y * y
            if r2 <= 1.0 and r2 != 0.0:
                break
        mult = math.sqrt(-2.0 * math.log(r2) / r2)
        return y * mult * std_dev + mean

    def uni_rand(self, min_value: float, max_value: float) -> float:
        """Uniform random number in ``[min_value, max_value)``."""
        return (max_value - min_value) * SimRNG._generator.canonical() + min_value

    def vec_norm_rand(self, mean: Sequence[float], std_dev: Sequence[float]) -> np.ndarray:
        """3-vector with each component drawn from its own normal distribution."""
        means = to_vector(mean)
        devs = to_vector(std_dev)
        return np.array([self.norm_rand(m, s) for m, s in zip(means[:3], devs[:3])])

    def quat_norm_rand(self, mean: Quaternion, std_dev: Sequence[float]) -> Quaternion:
        """Perturb ``mean`` by a random rotation vector, each angle capped at pi/2."""
        devs = to_vector(std_dev)
        errors = [min(self.norm_rand(0.0, s), _MAX_ANGLE_ERROR) for s in devs[:3]]
        return rot_vec_to_quat(errors) * mean
"""Numerical helpers for extended Kalman filter calibration: rotations,
linear algebra, comparisons, log formatting, timestamps and simulation noise."""

__version__ = "0.1.0"

__all__ = ["assertions", "linalg", "rng", "rotations", "strings", "timestamps"]
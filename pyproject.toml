[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ekfkit"
version = "0.1.0"
description = "Numerical helpers for extended Kalman filter calibration: rotations, linear algebra, log formatting and simulation noise."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "kalman",
    "ekf",
    "quaternion",
    "rotation",
    "kabsch",
    "givens",
    "sensor-calibration",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ekfkit"]

[tool.hatch.build.targets.sdist]
include = ["ekfkit", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

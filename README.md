# ekfkit

Numerical building blocks for extended Kalman filter sensor calibration,
built on NumPy.

## Installation

```
pip install ekfkit
```

For the test suite:

```
pip install "ekfkit[test]"
pytest
```

## Modules

- `ekfkit.rotations`: the frozen `Quaternion` dataclass (`w`, `x`, `y`, `z`)
  with `*` (Hamilton product), `inverse`, `norm`, `normalized`, `vec`,
  `rotate`, `to_rotation_matrix`, and the constructors `identity`,
  `from_angle_axis` and `from_rotation_matrix`. Conversions between forms:
  `rot_vec_to_quat`, `quat_to_rot_vec`, `euler_to_quat` (roll, pitch, yaw
  applied as Rz * Ry * Rx), `quat_to_rodrigues`, `rodrigues_to_quat`, plus
  `to_vector`, `to_quaternion` (normalized from four values, identity for any
  other length) and `subtract_from_each`.
- `ekfkit.assertions`: tolerance comparisons `matrices_near` (element by
  element) and `quaternions_near` (by the angle between the rotations). Both
  return a `Comparison` that is truthy when the values agree and carries a
  message describing the first mismatch otherwise. `matrices_near` raises
  `ValueError` when the shapes differ.
- `ekfkit.strings`: comma-separated text for CSV logs: `enumerate_header`
  (`,name_0,name_1,...`), `vector_to_comma_string` (six significant digits
  unless `precision` is given) and `quaternion_to_comma_string` (`,w,x,y,z`).
- `ekfkit.linalg`: `skew_symmetric`, `min_bound_vector`, block insertion and
  removal in covariance matrices (`insert_in_matrix`, `remove_from_matrix`),
  `apply_left_nullspace`, Givens-rotation `compress_measurements`,
  `average_vectors` (optionally weighted), `quaternion_jacobian`, `sign`,
  `matrix2d_from_vectors3d`, `affine_angle`, a planar Kabsch fit
  (`kabsch_2d`, returning a `KabschResult` with a `RigidTransform` and
  position and angle spreads), `maximum_distance` over the convex hull of
  points truncated to whole coordinates, `mean_standard_deviation` and
  `qr_r`. Functions that in-place editing would suggest return new arrays
  instead.
- `ekfkit.rng`: `SimRNG`, a seeded 64-bit Mersenne Twister shared by all
  instances, giving normal (`norm_rand`) and uniform (`uni_rand`) samples,
  normal 3-vectors (`vec_norm_rand`) and randomly perturbed quaternions
  (`quat_norm_rand`, each angle error capped at pi/2). The same seed always
  yields the same sequence.
- `ekfkit.timestamps`: `header_to_time` (whole seconds plus nanoseconds to
  seconds), `vector3_to_array` (any object with `x`, `y`, `z` attributes) and
  `matrix3_from_array` (nine row-major values to a 3x3 matrix), with the
  constants `NSEC_TO_SEC` and `MM_TO_M`.

## Example

```python
import numpy as np

from ekfkit.linalg import kabsch_2d
from ekfkit.rng import SimRNG
from ekfkit.rotations import quat_to_rot_vec, rot_vec_to_quat

quat = rot_vec_to_quat(np.array([1.0, 0.0, 0.0]))
rot_vec = quat_to_rot_vec(quat)  # back to [1.0, 0.0, 0.0]

src = [np.array(p, dtype=float) for p in ([0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0])]
tgt = [p + np.array([1.0, 2.0, 3.0]) for p in src]
result = kabsch_2d(tgt, src)
print(result.transform.translation)  # about [1, 2, 3]

rng = SimRNG()
rng.set_seed(42)
noisy = rng.vec_norm_rand([0.0, 0.0, 0.0], [1.0, 1.0, 1.0])
```

## Errors

`kabsch_2d` raises `ValueError` when the point lists differ in length or
hold fewer than four points. `insert_in_matrix`, `remove_from_matrix`,
`apply_left_nullspace`, `average_vectors`, `qr_r` and `matrix3_from_array`
raise `ValueError` for inputs of the wrong shape or size.

## What the package does not do

There are no geographic coordinate conversions: nothing here turns
latitude, longitude and altitude into Earth-centred or east-north-up
coordinates or back. The package also has no filter, no trackers and no
command-line program; it provides only the numerical helpers listed above.
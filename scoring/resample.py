from __future__ import annotations

import numpy as np

from core.config import DEFAULT_N_ANGLES
from core.errors import InsufficientData
from core.geometry import polar_angles, radii, uniform_angles, wrap_angle


def resample_radius_profile(xy: np.ndarray, n_angles: int = DEFAULT_N_ANGLES) -> np.ndarray:
    """Nearest-angle lookup of the drawn radius on a uniform angular grid.

    Pen sampling density follows drawing speed, so the raw points are uneven in
    angle. For each of ``n_angles`` reference angles this takes the radius of
    the point whose polar angle is closest on the circle; ties go to the point
    that comes first in ``xy``.

    Direct comparison of every angle against every point, no spatial index:
    a few thousand points against 360 angles.
    """
    if n_angles < 1:
        raise ValueError(f"n_angles must be >= 1, got {n_angles}")
    if xy.shape[0] == 0:
        raise InsufficientData(0, 1)

    reference = uniform_angles(n_angles)
    thetas = polar_angles(xy)
    distances = np.abs(wrap_angle(thetas[np.newaxis, :] - reference[:, np.newaxis]))
    # argmin returns the first minimum, which gives the input-order tie break
    nearest = np.argmin(distances, axis=1)
    return radii(xy)[nearest]

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

TWO_PI = 2.0 * math.pi


def as_xy(points: Iterable) -> np.ndarray:
    """Coerce sample points or ``(x, y)`` pairs into an ``(n, 2)`` float array."""
    rows = []
    for p in points:
        if hasattr(p, "x") and hasattr(p, "y"):
            rows.append((float(p.x), float(p.y)))
        else:
            rows.append((float(p[0]), float(p[1])))
    if not rows:
        return np.zeros((0, 2), dtype=float)
    return np.asarray(rows, dtype=float)


def centroid(xy: np.ndarray) -> np.ndarray:
    return xy.mean(axis=0)


def radii(xy: np.ndarray) -> np.ndarray:
    return np.hypot(xy[:, 0], xy[:, 1])


def polar_angles(xy: np.ndarray) -> np.ndarray:
    return np.arctan2(xy[:, 1], xy[:, 0])


def wrap_angle(angle):
    """Map angles into (-pi, pi]; -pi itself wraps to +pi."""
    wrapped = math.pi - np.mod(math.pi - np.asarray(angle, dtype=float), TWO_PI)
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped


def uniform_angles(n: int) -> np.ndarray:
    # 0 on +x, counter-clockwise, same convention as atan2
    return np.arange(n, dtype=float) * TWO_PI / n

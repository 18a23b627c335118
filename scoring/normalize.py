from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from core.config import DEFAULT_TARGET_RADIUS
from core.errors import DegenerateShape, InsufficientData
from core.geometry import as_xy, centroid, radii

MIN_POINTS = 3


def normalize_shape(points: Iterable, target_radius: float = DEFAULT_TARGET_RADIUS) -> np.ndarray:
    """Center a point cloud on its centroid and rescale it to ``target_radius``.

    The centroid stands in for the circle center; hand-drawn circles are close
    enough to symmetric that this holds. After rescaling, the mean distance of
    the points from the origin equals ``target_radius``.

    Coincidence is decided on the raw coordinates, not on the centered ones,
    so a small shape far from the origin scores the same as near it; only the
    float precision available at that offset limits the result.

    Raises:
        InsufficientData: fewer than three points.
        DegenerateShape: every point coincides, so there is no radius to scale by.
    """
    if not (math.isfinite(target_radius) and target_radius > 0):
        raise ValueError(f"target_radius must be positive and finite, got {target_radius}")
    xy = points if isinstance(points, np.ndarray) else as_xy(points)
    if xy.shape[0] < MIN_POINTS:
        raise InsufficientData(xy.shape[0], MIN_POINTS)
    if not np.isfinite(xy).all():
        raise DegenerateShape("non-finite coordinates")
    if not np.ptp(xy, axis=0).any():
        raise DegenerateShape()

    centered = xy - centroid(xy)
    mean_radius = float(radii(centered).mean())
    scale = target_radius / mean_radius if mean_radius > 0 else math.inf
    if not math.isfinite(scale):
        raise DegenerateShape(f"mean radius {mean_radius!r} after centering")

    return centered * scale

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from core.models import Drawing, SamplePoint


def synthetic_circle(
    radius: float = 250.0,
    center: Tuple[float, float] = (384.0, 512.0),
    n_points: int = 240,
    ovality: float = 0.0,
    tremor: float = 0.0,
    tremor_cycles: int = 9,
    noise: float = 0.0,
    n_strokes: int = 1,
    duration_s: float = 1.5,
    rotation: float = 0.0,
    seed: Optional[int] = None,
) -> Drawing:
    """Hand-drawn-looking circle for demos and tests.

    Samples are spaced unevenly in angle the way a pen slows and speeds up.
    ``ovality`` stretches x against y, ``tremor`` adds a radial wobble with
    ``tremor_cycles`` bumps per turn and ``noise`` is isotropic jitter; all
    three are fractions of ``radius``.
    """
    if n_points < 1:
        return Drawing()
    rng = np.random.default_rng(seed)
    steps = rng.uniform(0.3, 1.7, size=n_points)
    phase = 2.0 * math.pi * np.concatenate(([0.0], np.cumsum(steps[:-1]))) / steps.sum()

    r = radius * (1.0 + tremor * np.sin(tremor_cycles * phase))
    x = r * (1.0 + ovality) * np.cos(phase)
    y = r * (1.0 - ovality) * np.sin(phase)
    if rotation:
        cos_a, sin_a = math.cos(rotation), math.sin(rotation)
        x, y = x * cos_a - y * sin_a, x * sin_a + y * cos_a
    if noise:
        x = x + rng.normal(0.0, noise * radius, size=n_points)
        y = y + rng.normal(0.0, noise * radius, size=n_points)
    x = x + center[0]
    y = y + center[1]

    bounds = np.linspace(0, n_points, max(n_strokes, 1) + 1).astype(int)
    strokes = []
    for start, stop in zip(bounds[:-1], bounds[1:]):
        count = stop - start
        if count == 0:
            continue
        times = np.linspace(0.0, duration_s * count / n_points, count)
        strokes.append(
            [SamplePoint(x=float(x[i]), y=float(y[i]), t=float(times[i - start])) for i in range(start, stop)]
        )
    return Drawing(strokes=strokes)

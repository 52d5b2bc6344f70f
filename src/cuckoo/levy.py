"""Multidimensional Lévy-flight step sampling."""
from __future__ import annotations

import math

import numpy as np

from .space import ParameterSpace

#: Calibrates the step-length distribution so its mode equals the requested step.
MODE_CALIBRATION = 3.0

_MIN_MAGNITUDE = 1e-12


def levy_sample(space: ParameterSpace, step: float, rng: np.random.Generator) -> np.ndarray:
    """Draw one displacement vector whose length follows a Lévy-like walk.

    A standard-normal direction is normalised and rescaled by
    ``step * 3 / sqrt(|n|)`` where ``n`` is one more standard-normal draw. The
    heavy tail of ``1 / sqrt(|n|)`` yields many short steps and occasional long
    flights. Each component is finally multiplied by its dimension's range so
    wider axes take proportionally larger steps.
    """

    step = float(step)
    if not math.isfinite(step) or step < 0:
        raise ValueError("step must be a finite, non-negative number")

    dimensions = space.dimensions
    if step == 0.0:
        return np.zeros(dimensions, dtype=float)

    while True:
        direction = rng.standard_normal(dimensions)
        magnitude = float(np.sqrt(np.dot(direction, direction)))
        n = float(rng.standard_normal())
        divisor = math.sqrt(abs(n)) * magnitude
        if divisor > _MIN_MAGNITUDE:
            break

    scale = step * MODE_CALIBRATION / divisor
    return direction * scale * space.ranges


__all__ = ["MODE_CALIBRATION", "levy_sample"]

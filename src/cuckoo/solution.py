"""Candidate solutions and boundary-respecting mutation."""
from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from .levy import levy_sample
from .space import ParameterSpace

Objective = Callable[[np.ndarray], float]
"""Vector objective maximised by the search."""

DEFAULT_MAX_RESAMPLE_ATTEMPTS = 1000


class NonFiniteQualityError(ValueError):
    """Raised when an objective returns NaN/Inf under the ``error`` policy."""


class QualityNaNPolicy(str, Enum):
    """Policies for handling NaN/Inf objective values."""

    ERROR = "error"
    COERCE_TO_WORST = "coerce_to_worst"


@dataclass(frozen=True, eq=False)
class Candidate:
    """A point in parameter space together with its cached quality."""

    point: np.ndarray
    quality: float

    def worse_than(self, other: "Candidate") -> bool:
        return ranking_key(self) < ranking_key(other)


def ranking_key(candidate: Candidate) -> float:
    """Sort key that ranks NaN below every other quality."""

    return quality_rank(candidate.quality)


def quality_rank(quality: float) -> float:
    if math.isnan(quality):
        return -math.inf
    return quality


def coerce_nan_policy(candidate: QualityNaNPolicy | str | None) -> QualityNaNPolicy:
    if candidate is None:
        return QualityNaNPolicy.COERCE_TO_WORST
    if isinstance(candidate, QualityNaNPolicy):
        return candidate
    try:
        return QualityNaNPolicy(str(candidate).lower().strip())
    except ValueError as exc:
        raise ValueError(f"Unknown nan_policy: {candidate!r}") from exc


def evaluate(
    objective: Objective,
    point: np.ndarray,
    nan_policy: QualityNaNPolicy = QualityNaNPolicy.COERCE_TO_WORST,
) -> float:
    """Evaluate ``objective`` at ``point`` and apply the non-finite policy."""

    quality = float(objective(point))
    if math.isfinite(quality):
        return quality
    if nan_policy is QualityNaNPolicy.ERROR:
        raise NonFiniteQualityError(
            f"Objective returned a non-finite value ({quality}) at {point.tolist()}"
        )
    return -math.inf


def generate(
    space: ParameterSpace,
    objective: Objective,
    rng: np.random.Generator,
    nan_policy: QualityNaNPolicy = QualityNaNPolicy.COERCE_TO_WORST,
) -> Candidate:
    """Sample a candidate uniformly within the space and evaluate it."""

    offsets = rng.random(space.dimensions) * space.ranges
    point = space.minimums + offsets
    # Guard against rounding pushing ``minimum + offset`` past the maximum.
    point = np.minimum(point, space.maximums)
    return Candidate(point=point, quality=evaluate(objective, point, nan_policy))


def random_step(
    candidate: Candidate,
    space: ParameterSpace,
    step: float,
    rng: np.random.Generator,
    *,
    max_attempts: int = DEFAULT_MAX_RESAMPLE_ATTEMPTS,
) -> np.ndarray:
    """Perturb ``candidate`` by a Lévy step, resampling until it stays in bounds.

    Out-of-bounds proposals are rejected rather than clamped. When
    ``max_attempts`` proposals in a row are rejected the zero step is used and a
    :class:`RuntimeWarning` is emitted, returning a copy of the current point.
    """

    if max_attempts <= 0:
        raise ValueError("max_attempts must be a positive integer")

    minimums = space.minimums
    maximums = space.maximums
    for _ in range(max_attempts):
        proposal = candidate.point + levy_sample(space, step, rng)
        if np.all(proposal >= minimums) and np.all(proposal <= maximums):
            return proposal

    warnings.warn(
        f"Lévy step rejected {max_attempts} times; keeping the current point.",
        RuntimeWarning,
        stacklevel=2,
    )
    return candidate.point.copy()


__all__ = [
    "Candidate",
    "DEFAULT_MAX_RESAMPLE_ATTEMPTS",
    "NonFiniteQualityError",
    "Objective",
    "QualityNaNPolicy",
    "coerce_nan_policy",
    "evaluate",
    "generate",
    "quality_rank",
    "random_step",
    "ranking_key",
]

"""N-dimensional Rastrigin benchmark."""
from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from .base import BaseEvaluator, GracefulNaNPolicy


def rastrigin(point: Sequence[float] | np.ndarray, amplitude: float = 10.0) -> float:
    values = np.asarray(point, dtype=float)
    return float(
        amplitude * values.size
        + np.sum(values**2 - amplitude * np.cos(2.0 * math.pi * values))
    )


@dataclass
class RastriginEvaluator(BaseEvaluator):
    """Rastrigin evaluated over an ordered list of named variables."""

    variables: Sequence[str] = ("x0", "x1")
    amplitude: float = 10.0
    max_retries: int = 0
    graceful_nan_policy: GracefulNaNPolicy = GracefulNaNPolicy.MARK_FAILURE

    REQUIRED_METRICS = ("f",)

    def _evaluate_impl(
        self,
        params: Mapping[str, float],
        seed: int | None = None,
    ) -> Mapping[str, Any]:
        start = time.perf_counter()
        vector = [params[name] for name in self.variables]
        return {
            "f": rastrigin(vector, self.amplitude),
            "elapsed_seconds": time.perf_counter() - start,
        }


def create_rastrigin_evaluator(config: Mapping[str, Any]) -> RastriginEvaluator:
    """Factory helper used by YAML configs."""

    variables_cfg = config.get("variables")
    if variables_cfg is None:
        dimensions = int(config.get("dimensions", 2))
        if dimensions <= 0:
            raise ValueError("rastrigin evaluator requires a positive dimension count")
        variables = tuple(f"x{idx}" for idx in range(dimensions))
    elif isinstance(variables_cfg, Sequence) and not isinstance(variables_cfg, (bytes, bytearray, str)):
        variables = tuple(str(entry) for entry in variables_cfg)
        if not variables:
            raise ValueError("rastrigin evaluator requires at least one variable name")
    else:
        raise TypeError("evaluator.variables must be a sequence of names")

    amplitude = float(config.get("amplitude", 10.0))
    return RastriginEvaluator(variables=variables, amplitude=amplitude)

"""Himmelblau's function, a 2-D benchmark with four global minima."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .base import BaseEvaluator

#: The four points where the function reaches its global minimum of zero.
HIMMELBLAU_MINIMA = (
    (3.0, 2.0),
    (-2.805118, 3.131312),
    (-3.779310, -3.283186),
    (3.584428, -1.848126),
)


def himmelblau(point: Sequence[float]) -> float:
    """Evaluate ``(x^2 + y - 11)^2 + (x + y^2 - 7)^2``."""

    x, y = float(point[0]), float(point[1])
    a = x * x + y - 11.0
    b = x + y * y - 7.0
    return a * a + b * b


@dataclass
class HimmelblauEvaluator(BaseEvaluator):
    """Named-parameter evaluator emitting the metric ``f``."""

    x_name: str = "x"
    y_name: str = "y"
    max_retries: int = 0

    REQUIRED_METRICS = ("f",)

    def _evaluate_impl(
        self,
        params: Mapping[str, float],
        seed: int | None = None,
    ) -> Mapping[str, Any]:
        start = time.perf_counter()
        value = himmelblau((params[self.x_name], params[self.y_name]))
        return {
            "f": value,
            "status": "ok",
            "elapsed_seconds": time.perf_counter() - start,
        }


def create_himmelblau_evaluator(config: Mapping[str, Any]) -> HimmelblauEvaluator:
    """Factory helper used by YAML configs."""

    variables = config.get("variables") or ("x", "y")
    if isinstance(variables, (str, bytes)) or len(variables) != 2:
        raise ValueError("himmelblau evaluator requires exactly two variable names")
    return HimmelblauEvaluator(x_name=str(variables[0]), y_name=str(variables[1]))

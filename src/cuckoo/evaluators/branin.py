"""Branin-Hoo benchmark function."""
from __future__ import annotations

import math
import time
from typing import Any, Dict, Mapping, Optional, Sequence

# f(x1, x2) = a (x2 - b x1^2 + c x1 - r)^2 + s (1 - t) cos(x1) + s
_A = 1.0
_B = 5.1 / (4.0 * math.pi**2)
_C = 5.0 / math.pi
_R = 6.0
_S = 10.0
_T = 1.0 / (8.0 * math.pi)

#: Global minimum value, reached at (-pi, 12.275), (pi, 2.275) and (9.42478, 2.475).
BRANIN_MINIMUM = 0.397887


def branin(point: Sequence[float]) -> float:
    x1, x2 = float(point[0]), float(point[1])
    return _A * (x2 - _B * x1**2 + _C * x1 - _R) ** 2 + _S * (1.0 - _T) * math.cos(x1) + _S


def branin_objective(
    params: Mapping[str, float],
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Evaluate Branin on parameters named ``x1`` and ``x2``.

    Called by the runner as ``evaluator(params, seed)``.
    """

    start = time.perf_counter()
    x1 = float(params["x1"])
    x2 = float(params["x2"])
    y = branin((x1, x2))

    return {
        "f": float(y),
        "x1": x1,
        "x2": x2,
        "status": "ok",
        "elapsed_seconds": time.perf_counter() - start,
    }

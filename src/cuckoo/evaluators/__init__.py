"""Evaluator package exports."""

from .base import (
    BaseEvaluator,
    EvaluationPayload,
    EvaluationRequest,
    EvaluatorResult,
    GracefulNaNPolicy,
    MetricValue,
)
from .branin import BRANIN_MINIMUM, branin, branin_objective
from .himmelblau import (
    HIMMELBLAU_MINIMA,
    HimmelblauEvaluator,
    create_himmelblau_evaluator,
    himmelblau,
)
from .rastrigin import RastriginEvaluator, create_rastrigin_evaluator, rastrigin

__all__ = [
    "BaseEvaluator",
    "EvaluationPayload",
    "EvaluationRequest",
    "EvaluatorResult",
    "GracefulNaNPolicy",
    "MetricValue",
    "BRANIN_MINIMUM",
    "HIMMELBLAU_MINIMA",
    "HimmelblauEvaluator",
    "RastriginEvaluator",
    "branin",
    "branin_objective",
    "create_himmelblau_evaluator",
    "create_rastrigin_evaluator",
    "himmelblau",
    "rastrigin",
]

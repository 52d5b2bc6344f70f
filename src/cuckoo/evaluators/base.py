"""Shared machinery for named-parameter benchmark evaluators.

An evaluator maps ``{name: value}`` to a metric payload. :class:`BaseEvaluator`
wraps a subclass hook with retries, float coercion of the required metrics and
a policy for non-finite values, so the runner always receives a payload with a
``status`` it can rank.
"""
from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


MetricValue = float | int | str | bool | None
"""Value types allowed in a metric payload."""


EvaluatorResult = Dict[str, MetricValue]


class GracefulNaNPolicy(str, Enum):
    """What an evaluator does when a required metric is NaN or infinite."""

    ERROR = "error"
    COERCE_TO_INF = "coerce_to_inf"
    MARK_FAILURE = "mark_failure"


class EvaluationRequest(BaseModel):
    """Parameters and seed handed to :meth:`BaseEvaluator._evaluate_impl`."""

    params: Dict[str, float]
    seed: int | None = Field(default=None)


class EvaluationPayload(BaseModel):
    """Schema every finished payload must satisfy."""

    model_config = ConfigDict(extra="allow")

    status: str
    elapsed_seconds: float | None = Field(default=None, ge=0)
    reason: str | None = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        if value not in BaseEvaluator.VALID_STATUSES:
            allowed = ", ".join(BaseEvaluator.VALID_STATUSES)
            raise ValueError(f"status must be one of {allowed}, got {value!r}")
        return value


class BaseEvaluator(ABC):
    """Base class for evaluators scored by the Cuckoo Search runner.

    Subclasses implement :meth:`_evaluate_impl` and list the metrics they
    always produce in :attr:`REQUIRED_METRICS`. Instances may set
    ``max_retries`` and ``graceful_nan_policy`` attributes; keyword arguments
    to :meth:`evaluate` take precedence over both.
    """

    REQUIRED_METRICS: Sequence[str] = ()
    VALID_STATUSES: Sequence[str] = ("ok", "error")
    DEFAULT_NAN_POLICY: GracefulNaNPolicy = GracefulNaNPolicy.ERROR

    def evaluate(
        self,
        params: Mapping[str, Any],
        seed: int | None = None,
        *,
        max_retries: int | None = None,
        graceful_nan_policy: GracefulNaNPolicy | str | None = None,
    ) -> EvaluatorResult:
        """Score ``params``, retrying when the hook raises.

        Once the retries are used up the last exception is reported as an
        ``error`` payload instead of propagating.
        """

        request = EvaluationRequest.model_validate({"params": dict(params), "seed": seed})
        retries = self._retries(max_retries)
        policy = self._nan_policy(graceful_nan_policy)

        for attempt in range(retries + 1):
            started = time.perf_counter()
            try:
                raw = self._evaluate_impl(request.params, request.seed)
            except Exception as exc:  # noqa: BLE001 - reported as an error payload
                if attempt < retries:
                    continue
                return self._failure_payload(
                    {},
                    reason=f"exception:{type(exc).__name__}",
                    elapsed=time.perf_counter() - started,
                )
            return self._normalise(raw, elapsed=time.perf_counter() - started, policy=policy)

        raise RuntimeError("retry loop ended without a result")

    @abstractmethod
    def _evaluate_impl(
        self,
        params: Mapping[str, float],
        seed: int | None = None,
    ) -> Mapping[str, Any]:
        """Return the raw metric mapping for ``params``."""

    def __call__(
        self,
        params: Mapping[str, Any],
        seed: int | None = None,
        *,
        max_retries: int | None = None,
        graceful_nan_policy: GracefulNaNPolicy | str | None = None,
    ) -> EvaluatorResult:
        return self.evaluate(
            params,
            seed,
            max_retries=max_retries,
            graceful_nan_policy=graceful_nan_policy,
        )

    def _retries(self, override: int | None) -> int:
        value = override if override is not None else getattr(self, "max_retries", 0)
        return max(0, int(value or 0))

    def _nan_policy(self, override: GracefulNaNPolicy | str | None) -> GracefulNaNPolicy:
        value = override
        if value is None:
            value = getattr(self, "graceful_nan_policy", None) or self.DEFAULT_NAN_POLICY
        if isinstance(value, GracefulNaNPolicy):
            return value
        try:
            return GracefulNaNPolicy(str(value))
        except ValueError as exc:
            raise ValueError(f"Unknown graceful_nan_policy: {value!r}") from exc

    def _normalise(
        self,
        raw: Mapping[str, Any],
        *,
        elapsed: float,
        policy: GracefulNaNPolicy,
    ) -> EvaluatorResult:
        payload: Dict[str, Any] = dict(raw)

        absent = [name for name in self.REQUIRED_METRICS if name not in payload]
        if absent:
            raise ValueError(f"{type(self).__name__} did not report metrics: {', '.join(absent)}")

        non_finite: List[str] = []
        for name in self.REQUIRED_METRICS:
            try:
                payload[name] = float(payload[name])
            except (TypeError, ValueError) as exc:
                raise TypeError(f"metric {name!r} is not numeric: {payload[name]!r}") from exc
            if not math.isfinite(payload[name]):
                non_finite.append(name)

        if non_finite:
            if policy is GracefulNaNPolicy.ERROR:
                raise ValueError(f"non-finite values for metrics: {', '.join(non_finite)}")
            if policy is GracefulNaNPolicy.COERCE_TO_INF:
                payload.update({name: math.inf for name in non_finite})
            reason = payload.get("reason") or f"invalid_metric:{','.join(sorted(non_finite))}"
            return self._failure_payload(payload, reason=str(reason), elapsed=elapsed)

        payload.setdefault("status", "ok")
        if not isinstance(payload["status"], str):
            raise TypeError(f"status must be a string, got {type(payload['status']).__name__}")
        if payload.get("elapsed_seconds") is None:
            payload["elapsed_seconds"] = elapsed
        payload["elapsed_seconds"] = float(payload["elapsed_seconds"])
        if payload.get("reason") is not None:
            payload["reason"] = str(payload["reason"])

        try:
            return EvaluationPayload.model_validate(payload).model_dump()
        except ValidationError as exc:
            raise ValueError(f"invalid payload from {type(self).__name__}: {exc}") from exc

    def _failure_payload(
        self,
        payload: Mapping[str, Any],
        *,
        reason: str,
        elapsed: float,
    ) -> EvaluatorResult:
        """Mark ``payload`` as failed with every unusable required metric set to ``inf``."""

        result: Dict[str, Any] = dict(payload)
        for name in self.REQUIRED_METRICS:
            value = result.get(name)
            if not isinstance(value, float) or math.isnan(value):
                result[name] = math.inf
        result.update(status="error", reason=reason, elapsed_seconds=float(elapsed))
        return EvaluationPayload.model_validate(result).model_dump()


__all__ = [
    "BaseEvaluator",
    "EvaluationPayload",
    "EvaluationRequest",
    "EvaluatorResult",
    "GracefulNaNPolicy",
    "MetricValue",
]

"""Configuration schema and validation."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
    model_validator,
)

from .solution import DEFAULT_MAX_RESAMPLE_ATTEMPTS, QualityNaNPolicy


class MetadataConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str

    @model_validator(mode="after")
    def validate_strings(self) -> "MetadataConfig":
        if not self.name.strip():
            raise ValueError("metadata.name must be a non-empty string")
        if not self.description.strip():
            raise ValueError("metadata.description must be a non-empty string")
        return self


class SearchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    population_size: int = 25
    abandon_count: int = 5
    generation_count: int
    base_step_size: float = 0.03
    metric: str
    direction: str = "maximize"
    max_resample_attempts: int = DEFAULT_MAX_RESAMPLE_ATTEMPTS
    nan_policy: str = QualityNaNPolicy.COERCE_TO_WORST.value

    @field_validator("direction", "nan_policy", mode="before")
    @classmethod
    def normalise_keyword(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower().strip()
        return value

    @model_validator(mode="after")
    def validate_search(self) -> "SearchConfig":
        if self.population_size <= 0:
            raise ValueError("search.population_size must be a positive integer")
        if self.abandon_count < 0:
            raise ValueError("search.abandon_count must be non-negative")
        if self.population_size < self.abandon_count:
            raise ValueError(
                "search.population_size must be greater than or equal to search.abandon_count"
            )
        if self.generation_count <= 0:
            raise ValueError("search.generation_count must be a positive integer")
        if not math.isfinite(self.base_step_size) or self.base_step_size < 0:
            raise ValueError("search.base_step_size must be a finite, non-negative number")
        if self.max_resample_attempts <= 0:
            raise ValueError("search.max_resample_attempts must be a positive integer")

        metric = self.metric.strip()
        if not metric:
            raise ValueError("search.metric must be a non-empty string")
        self.metric = metric

        if self.direction not in {"minimize", "maximize"}:
            raise ValueError("search.direction must be 'minimize' or 'maximize'")

        allowed_policies = {policy.value for policy in QualityNaNPolicy}
        if self.nan_policy not in allowed_policies:
            raise ValueError(
                "search.nan_policy must be one of " + ", ".join(sorted(allowed_policies))
            )
        return self


class ReportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    output_dir: str = "reports"
    filename: str | None = None
    metrics: List[str]

    @model_validator(mode="after")
    def validate_metrics(self) -> "ReportConfig":
        if not self.metrics:
            raise ValueError("report.metrics must contain at least one metric name")
        lower_seen: set[str] = set()
        for metric in self.metrics:
            if not metric.strip():
                raise ValueError("report.metrics entries must be non-empty strings")
            metric_lc = metric.lower()
            if metric_lc in lower_seen:
                raise ValueError("report.metrics entries must be unique (case-insensitive)")
            lower_seen.add(metric_lc)
        if not self.output_dir.strip():
            raise ValueError("report.output_dir must be a non-empty string")
        if self.filename is not None and not self.filename.strip():
            raise ValueError("report.filename must be a non-empty string when provided")
        return self


class ArtifactsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_file: str = "runs/log.csv"

    @model_validator(mode="after")
    def validate_paths(self) -> "ArtifactsConfig":
        if not self.log_file.strip():
            raise ValueError("artifacts.log_file must be a non-empty string")
        return self


class EvaluatorConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    module: str
    callable: str

    @model_validator(mode="after")
    def validate_strings(self) -> "EvaluatorConfig":
        if not self.module.strip():
            raise ValueError("evaluator.module must be a non-empty string")
        if not self.callable.strip():
            raise ValueError("evaluator.callable must be a non-empty string")
        return self


class FloatParam(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    low: float
    high: float

    @model_validator(mode="after")
    def validate_float(self) -> "FloatParam":
        if self.type.lower() != "float":
            raise ValueError("Search space entry type must be 'float'")
        if not (math.isfinite(self.low) and math.isfinite(self.high)):
            raise ValueError("float parameter bounds must be finite")
        if self.low > self.high:
            raise ValueError("float parameter requires low <= high")
        self.type = "float"
        return self


PARAMETER_MODELS = {
    "float": FloatParam,
}


class OptimizationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    metadata: MetadataConfig
    seed: int | None = None
    search: SearchConfig
    search_space: Dict[str, Dict[str, Any]]
    evaluator: EvaluatorConfig
    report: ReportConfig
    artifacts: ArtifactsConfig | None = None

    @model_validator(mode="after")
    def validate_all(self) -> "OptimizationConfig":
        if not self.search_space:
            raise ValueError("search_space must define at least one parameter")

        normalised_space: Dict[str, Dict[str, Any]] = {}
        for name, spec in self.search_space.items():
            if not isinstance(name, str) or not name.strip():
                raise ValueError("search_space parameter names must be non-empty strings")
            if not isinstance(spec, Mapping):
                raise ValueError(f"search_space.{name} must be a mapping")
            param_type = str(spec.get("type", "")).lower()
            model_cls = PARAMETER_MODELS.get(param_type)
            if model_cls is None:
                raise ValueError(f"search_space.{name}.type '{param_type}' is not supported")
            normalised_space[name] = model_cls.model_validate(dict(spec)).model_dump()

        self.search_space = normalised_space

        metric_names = {metric.lower() for metric in self.report.metrics}
        if self.search.metric.lower() not in metric_names:
            raise ValueError("search.metric must be included in report.metrics")

        if self.artifacts is None:
            self.artifacts = ArtifactsConfig()

        return self


__all__ = [
    "ArtifactsConfig",
    "EvaluatorConfig",
    "FloatParam",
    "MetadataConfig",
    "OptimizationConfig",
    "ReportConfig",
    "SearchConfig",
    "ValidationError",
]

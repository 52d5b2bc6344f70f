"""Config-driven optimization runner built on the Cuckoo Search core."""
from __future__ import annotations

import csv
import importlib
import inspect
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping

import numpy as np

from .evaluators import BaseEvaluator, EvaluatorResult, MetricValue
from .search import ProgressEvent, SearchResult, search
from .solution import quality_rank
from .space import ParameterSpace

Evaluator = Callable[[Dict[str, Any], int | None], EvaluatorResult]


@dataclass
class OptimizationResult:
    """Container for summarising the optimization run."""

    generations: int
    replacements: int
    evaluations: int
    best_params: Dict[str, float]
    best_metrics: Dict[str, MetricValue]
    best_value: float
    step_size: float
    report_path: Path | None = None
    log_path: Path | None = None


class EvaluatorObjective:
    """Adapt a named-parameter evaluator into a maximised vector objective.

    ``minimize`` metrics are negated. Failed evaluations (status other than
    ``ok``) score ``-inf``. Only the metrics of the best point evaluated so far
    are kept for reporting; other points are re-evaluated on request.
    """

    def __init__(
        self,
        evaluator: Evaluator,
        space: ParameterSpace,
        *,
        metric: str,
        direction: str = "maximize",
        seed: int | None = None,
    ) -> None:
        self.evaluator = evaluator
        self.space = space
        self.metric = metric
        self.sign = 1.0 if direction == "maximize" else -1.0
        self.seed = seed
        self.calls = 0
        self._best_quality: float | None = None
        self._metrics: Dict[tuple[float, ...], Dict[str, MetricValue]] = {}

    def __call__(self, point: np.ndarray) -> float:
        params = self.space.to_params(point)
        metrics = dict(self.evaluator(params, self.seed))
        self.calls += 1
        if _trial_failed(metrics):
            quality = -math.inf
        else:
            value = _resolve_metric_value(metrics, self.metric)
            if value is None:
                raise RuntimeError(f"Evaluator did not return required metric: {self.metric}.")
            quality = self.sign * float(value)  # type: ignore[arg-type]

        if self._best_quality is None or quality_rank(quality) > quality_rank(self._best_quality):
            self._best_quality = quality
            self._metrics = {tuple(params.values()): metrics}
        return quality

    def metrics_for(self, point: np.ndarray) -> Dict[str, MetricValue]:
        key = tuple(float(value) for value in point)
        cached = self._metrics.get(key)
        if cached is None:
            cached = dict(self.evaluator(self.space.to_params(point), self.seed))
        return dict(cached)

    def metric_value(self, quality: float) -> float:
        """Map a search quality back to the metric's own scale."""

        return self.sign * quality


def run_optimization(config: Mapping[str, Any]) -> OptimizationResult:
    """Execute Cuckoo Search using the provided (validated) configuration."""

    ensure_directories(config)
    seed = config.get("seed")
    search_cfg: Dict[str, Any] = dict(config["search"])
    space = ParameterSpace.from_search_space(config["search_space"])
    evaluator = load_evaluator(config["evaluator"])
    metric = str(search_cfg["metric"])
    direction = str(search_cfg.get("direction", "maximize"))

    objective = EvaluatorObjective(
        evaluator,
        space,
        metric=metric,
        direction=direction,
        seed=seed,
    )

    report_metrics = list(config.get("report", {}).get("metrics") or [metric])
    log_path = Path((config.get("artifacts") or {}).get("log_file", "runs/log.csv"))

    with ProgressLogger(log_path, space.names, report_metrics, objective) as logger:
        result = search(
            space,
            objective,
            population_size=int(search_cfg["population_size"]),
            abandon_count=int(search_cfg["abandon_count"]),
            generation_count=int(search_cfg["generation_count"]),
            base_step_size=float(search_cfg["base_step_size"]),
            rng=seed,
            progress=logger,
            max_resample_attempts=int(search_cfg.get("max_resample_attempts", 1000)),
            nan_policy=search_cfg.get("nan_policy"),
        )

    best_params = space.to_params(result.point)
    best_metrics = objective.metrics_for(result.point)
    best_value = objective.metric_value(result.quality)
    report_path = build_report(
        config,
        result,
        best_params=best_params,
        best_metrics=best_metrics,
        best_value=best_value,
        log_path=log_path,
    )

    return OptimizationResult(
        generations=result.generations,
        replacements=result.replacements,
        evaluations=result.evaluations,
        best_params=best_params,
        best_metrics=best_metrics,
        best_value=best_value,
        step_size=result.step_size,
        report_path=report_path,
        log_path=log_path,
    )


def _trial_failed(metrics: Mapping[str, MetricValue]) -> bool:
    status = metrics.get("status")
    return isinstance(status, str) and status != "ok"


def _resolve_metric_value(metrics: Mapping[str, MetricValue], name: str) -> MetricValue | None:
    if name in metrics:
        return metrics[name]
    prefixed = f"metric_{name}"
    if prefixed in metrics:
        return metrics[prefixed]
    return None


def ensure_directories(config: Mapping[str, Any]) -> None:
    artifacts = config.get("artifacts") or {}
    report = config.get("report") or {}

    log_path = Path(artifacts.get("log_file", "runs/log.csv"))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    report_dir = Path(report.get("output_dir", "reports"))
    report_dir.mkdir(parents=True, exist_ok=True)


def load_evaluator(config: Mapping[str, Any]) -> Evaluator:
    module = importlib.import_module(config["module"])
    target = getattr(module, config["callable"])

    evaluator_obj: Any
    if isinstance(target, BaseEvaluator):
        evaluator_obj = target
    elif isinstance(target, type) and issubclass(target, BaseEvaluator):
        evaluator_obj = target()  # type: ignore[call-arg]
    elif callable(target):
        signature = inspect.signature(target)
        if len(signature.parameters) <= 1:
            evaluator_obj = target(config)
        else:
            evaluator_obj = target
    else:
        raise TypeError(
            "Evaluator callable must be a function, factory, or BaseEvaluator instance."
        )

    if isinstance(evaluator_obj, BaseEvaluator):
        return evaluator_obj.evaluate
    if callable(evaluator_obj):
        return evaluator_obj
    raise TypeError("Evaluator factory did not return a callable or BaseEvaluator instance.")


class ProgressLogger:
    """Progress callback writing one CSV row per successful replacement.

    The log is truncated on open so each run starts from a fresh file.
    """

    def __init__(
        self,
        path: Path,
        param_names: Iterable[str],
        metric_names: Iterable[str],
        objective: EvaluatorObjective | None = None,
    ) -> None:
        self.path = path
        self.param_names = list(param_names)
        self.metric_names = [str(name) for name in metric_names]
        self.objective = objective
        self.events = 0

        self._fh = path.open("w", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(
            self._fh,
            fieldnames=[
                "generation",
                "replacement",
                "quality",
                *[f"param_{name}" for name in self.param_names],
                *[f"metric_{name}" for name in self.metric_names],
            ],
        )
        self._writer.writeheader()

    def __call__(self, event: ProgressEvent) -> None:
        best = event.best
        row: Dict[str, Any] = {
            "generation": event.generation,
            "replacement": event.replacements,
            "quality": best.quality,
        }
        for name, value in zip(self.param_names, best.point):
            row[f"param_{name}"] = float(value)
        metrics = self.objective.metrics_for(best.point) if self.objective is not None else {}
        for name in self.metric_names:
            row[f"metric_{name}"] = _resolve_metric_value(metrics, name)
        self._writer.writerow(row)
        self._fh.flush()
        self.events += 1

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> "ProgressLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_report(
    config: Mapping[str, Any],
    result: SearchResult,
    *,
    best_params: Mapping[str, float],
    best_metrics: Mapping[str, MetricValue],
    best_value: float,
    log_path: Path,
) -> Path:
    report_cfg = config.get("report", {})
    report_dir = Path(report_cfg.get("output_dir", "reports"))
    filename = report_cfg.get("filename") or f"{config['metadata']['name']}.md"
    report_path = report_dir / filename
    search_cfg = config["search"]

    lines: List[str] = [
        f"# Experiment Report  {config['metadata']['name']}",
        "",
        f"Description: {config['metadata'].get('description', '')}",
        "",
        f"Objective: {search_cfg['metric']} ({search_cfg.get('direction', 'maximize')})",
        f"Generations executed: {result.generations}",
        f"Replacements: {result.replacements}",
        f"Objective evaluations: {result.evaluations}",
        f"Population size: {search_cfg['population_size']}"
        f" (abandon {search_cfg['abandon_count']})",
        f"Normalised step size: {_format_metric_value(result.step_size)}",
        f"Best value: {_format_metric_value(best_value)}",
        "",
        "## Best Parameters",
    ]
    lines.extend([f"- **{name}**: {_format_metric_value(value)}" for name, value in best_params.items()])
    lines.append("")
    lines.append("## Best Metrics")
    lines.extend([f"- **{name}**: {_format_metric_value(value)}" for name, value in best_metrics.items()])
    lines.extend(["", f"Progress log: `{log_path}`"])

    report_path.write_text("\n".join(lines), encoding="utf-8")
    return report_path


def _format_metric_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        number = float(value)
        if math.isnan(number):
            return "nan"
        if math.isinf(number):
            return "inf" if number > 0 else "-inf"
        return f"{number:.6g}"
    return str(value)

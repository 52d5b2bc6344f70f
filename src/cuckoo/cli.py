"""Command line interface for running Cuckoo Search experiments."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Sequence

import yaml
from pydantic import ValidationError

from .config import OptimizationConfig
from .visualization import ObjectiveSpec, VisualizationError, plot_history

if TYPE_CHECKING:
    from .optimization import OptimizationResult


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a Cuckoo Search experiment or inspect its configuration."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/himmelblau.yaml"),
        help="Path to the experiment configuration YAML file.",
    )
    parser.add_argument(
        "--as-json",
        action="store_true",
        help="Print the validated configuration as JSON for downstream tooling.",
    )
    parser.add_argument(
        "--summarize",
        action="store_true",
        help="Only print a summary of the configuration without running the search.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Override the seed from the configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command")
    _configure_visualize_subcommand(subparsers)
    return parser.parse_args(argv)


def _configure_visualize_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser] | None,
) -> None:
    if subparsers is None:
        return

    visualize_parser = subparsers.add_parser(
        "visualize",
        help="Render the best-value history of a progress log.",
        description="Render the best-value history of a progress log.",
    )
    visualize_parser.add_argument(
        "--log",
        type=Path,
        help="Progress log CSV (default: artifacts.log_file from --config).",
    )
    visualize_parser.add_argument(
        "--metric",
        action="append",
        dest="metrics",
        metavar="NAME",
        help="Metric name to include (repeatable, default: search.metric from --config).",
    )
    visualize_parser.add_argument(
        "--direction",
        choices=("minimize", "maximize"),
        help="Direction used for the running best (default: search.direction from --config).",
    )
    visualize_parser.add_argument(
        "--output",
        type=Path,
        help="Optional output path for the rendered image (default: next to the log).",
    )
    visualize_parser.add_argument(
        "--title",
        help="Optional title override for the generated plot.",
    )


def load_config(path: Path) -> OptimizationConfig:
    if not path.exists():
        raise SystemExit(f"Configuration file not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict):
        raise SystemExit("Configuration root must be a mapping (YAML dictionary).")

    try:
        validated = OptimizationConfig.model_validate(data)
    except ValidationError as exc:
        details = []
        for error in exc.errors(include_url=False):
            location = ".".join(str(loc) for loc in error["loc"])
            details.append(f"- {location or '<root>'}: {error['msg']}")
        message = "Configuration validation failed:\n" + "\n".join(details)
        raise SystemExit(message) from exc

    return validated


def summarize_config(config: Dict[str, Any]) -> str:
    metadata = config.get("metadata", {})
    search = config.get("search", {})
    report = config.get("report", {})
    space = config.get("search_space", {})

    lines = [
        f"Experiment name : {metadata.get('name', 'N/A')}",
        f"Description    : {metadata.get('description', 'N/A')}",
        f"Seed           : {config.get('seed', 'N/A')}",
        "",
        "[Search]",
        f"  Population   : {search.get('population_size', 'N/A')}",
        f"  Abandon      : {search.get('abandon_count', 'N/A')}",
        f"  Generations  : {search.get('generation_count', 'N/A')}",
        f"  Base step    : {search.get('base_step_size', 'N/A')}",
        f"  Metric       : {search.get('metric', 'N/A')} ({search.get('direction', 'maximize')})",
        f"  NaN policy   : {search.get('nan_policy', 'N/A')}",
        "",
        "[Search space]",
    ]
    lines.extend(
        f"  {name:<12} : [{spec.get('low')}, {spec.get('high')}]" for name, spec in space.items()
    )
    lines.extend(
        [
            "",
            "[Report]",
            f"  metrics      : {', '.join(report.get('metrics', [])) or 'N/A'}",
            f"  output_dir   : {report.get('output_dir', 'reports')}",
        ]
    )
    return "\n".join(lines)


def format_result(result: "OptimizationResult") -> str:
    lines = [
        "Optimization finished.",
        f"Generations     : {result.generations}",
        f"Replacements    : {result.replacements}",
        f"Evaluations     : {result.evaluations}",
        f"Best value      : {result.best_value}",
        "Best parameters :",
    ]
    lines.extend([f"  - {name}: {value}" for name, value in result.best_params.items()])
    lines.append("Best metrics    :")
    lines.extend([f"  - {name}: {value}" for name, value in result.best_metrics.items()])
    if result.report_path is not None:
        lines.append(f"Report          : {result.report_path}")
    return "\n".join(lines)


def _handle_visualize_command(args: argparse.Namespace) -> None:
    config: Mapping[str, Any] | None = None
    if args.config.exists():
        config = load_config(args.config).model_dump(mode="python")

    log_path = args.log
    if log_path is None:
        if config is None:
            raise SystemExit("--log is required when no configuration file is available.")
        log_path = Path((config.get("artifacts") or {}).get("log_file", "runs/log.csv"))

    search = (config or {}).get("search", {})
    metrics: Sequence[str] = args.metrics or ([search["metric"]] if "metric" in search else [])
    if not metrics:
        raise SystemExit("No metric given; pass --metric or a configuration file.")
    direction = args.direction or search.get("direction", "maximize")
    objectives = [ObjectiveSpec(name, direction) for name in metrics]

    try:
        result_path = plot_history(
            log_path,
            objectives,
            title=args.title,
            output_path=args.output,
        )
    except VisualizationError as exc:
        raise SystemExit(str(exc)) from exc

    print(f"Visualization written to {result_path}")


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    if getattr(args, "command", None) == "visualize":
        _handle_visualize_command(args)
        return

    config_model = load_config(args.config)
    config = config_model.model_dump(mode="python")
    if args.seed is not None:
        config["seed"] = args.seed

    if args.as_json:
        print(json.dumps(config, indent=2, ensure_ascii=False))
        return

    if args.summarize:
        print(summarize_config(config))
        return

    from .optimization import run_optimization

    result = run_optimization(config)
    print(format_result(result))


if __name__ == "__main__":
    main()

"""Static plots generated from progress logs."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib

# Force a non-interactive backend to support headless environments (tests/CI).
matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pandas as pd


@dataclass(frozen=True)
class ObjectiveSpec:
    """Description of a logged objective."""

    name: str
    direction: str = "maximize"

    @property
    def column(self) -> str:
        return f"metric_{self.name}"

    @property
    def label(self) -> str:
        direction = "min" if self.direction == "minimize" else "max"
        return f"{self.name} ({direction})"


class VisualizationError(RuntimeError):
    """Raised when a visualization cannot be generated."""


def plot_history(
    log_path: Path | str,
    objectives: Sequence[ObjectiveSpec],
    *,
    title: str | None = None,
    output_path: Path | str | None = None,
) -> Path:
    """Plot the running best value of each objective against the generation."""

    if not objectives:
        raise VisualizationError("At least one objective must be provided to plot history.")

    log_path = Path(log_path)
    df = _read_log(log_path)
    if "generation" in df.columns:
        df = df.sort_values("generation", kind="stable")
    else:
        df = df.reset_index(drop=False).rename(columns={"index": "generation"})

    fig, ax = plt.subplots(figsize=(6, 4))
    x_values = df["generation"].to_list()

    for objective in objectives:
        if objective.column not in df.columns:
            plt.close(fig)
            raise VisualizationError(
                f"Log file {log_path} does not contain required metric column: {objective.column}"
            )
        series = pd.to_numeric(df[objective.column], errors="coerce")
        running_best = _running_best(series, objective.direction)
        ax.step(x_values, running_best, where="post", label=objective.label)

    ax.set_xlabel("Generation")
    ax.set_ylabel("Best value")
    ax.set_title(title or "Best value history")
    ax.grid(True, linestyle=":", linewidth=0.5)
    ax.legend()
    fig.tight_layout()

    output = _resolve_output_path(log_path, output_path, suffix="history")
    fig.savefig(output)
    plt.close(fig)
    return output


def _read_log(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise VisualizationError(f"Log file not found: {path}")
    try:
        df = pd.read_csv(path)
    except pd.errors.EmptyDataError as exc:
        raise VisualizationError(f"Log file is empty: {path}") from exc
    if df.empty:
        raise VisualizationError(f"Log file does not contain any progress rows: {path}")
    return df


def _running_best(series: pd.Series, direction: str) -> list[float]:
    values: list[float] = []
    best: float | None = None
    maximize = direction == "maximize"
    for value in series:
        if pd.isna(value):
            values.append(float("nan") if best is None else best)
            continue
        if best is None:
            best = float(value)
        else:
            best = max(best, float(value)) if maximize else min(best, float(value))
        values.append(best)
    return values


def _resolve_output_path(log_path: Path, output_path: Path | str | None, *, suffix: str) -> Path:
    if output_path is not None:
        return Path(output_path)
    return log_path.parent / f"{log_path.stem}_{suffix}.png"


__all__ = ["ObjectiveSpec", "VisualizationError", "plot_history"]

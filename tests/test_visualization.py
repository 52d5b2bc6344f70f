from pathlib import Path

import pytest

from cuckoo.visualization import ObjectiveSpec, VisualizationError, plot_history


def _write_log(path: Path, header: str, rows: list[str]) -> None:
    contents = [header, *rows]
    path.write_text("\n".join(contents), encoding="utf-8")


def test_plot_history_tracks_best_values(tmp_path: Path) -> None:
    log_path = tmp_path / "log.csv"
    _write_log(
        log_path,
        "generation,replacement,quality,param_x,param_y,metric_f",
        [
            "3,1,-12.0,1.0,1.0,12.0",
            "10,2,-4.5,2.5,1.5,4.5",
            "42,3,-0.2,3.0,2.1,0.2",
        ],
    )
    output = tmp_path / "history.png"
    result = plot_history(log_path, [ObjectiveSpec("f", "minimize")], output_path=output)

    assert result == output
    assert output.exists()


def test_plot_history_defaults_next_to_log(tmp_path: Path) -> None:
    log_path = tmp_path / "progress.csv"
    _write_log(log_path, "generation,metric_score", ["0,0.1", "5,0.4"])

    result = plot_history(log_path, [ObjectiveSpec("score")], title="Score")

    assert result == tmp_path / "progress_history.png"
    assert result.exists()


def test_plot_history_requires_metric_column(tmp_path: Path) -> None:
    log_path = tmp_path / "log.csv"
    _write_log(log_path, "generation,metric_f", ["0,1.0"])

    with pytest.raises(VisualizationError):
        plot_history(log_path, [ObjectiveSpec("g")])


def test_plot_history_rejects_missing_or_empty_logs(tmp_path: Path) -> None:
    with pytest.raises(VisualizationError):
        plot_history(tmp_path / "absent.csv", [ObjectiveSpec("f")])

    header_only = tmp_path / "header.csv"
    _write_log(header_only, "generation,metric_f", [])
    with pytest.raises(VisualizationError):
        plot_history(header_only, [ObjectiveSpec("f")])

    with pytest.raises(VisualizationError):
        plot_history(header_only, [])

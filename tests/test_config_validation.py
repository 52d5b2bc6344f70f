from __future__ import annotations

import unittest

from cuckoo.config import OptimizationConfig, ValidationError


def make_base_config() -> dict:
    return {
        "metadata": {
            "name": "experiment",
            "description": "example",
        },
        "seed": 123,
        "search": {
            "population_size": 50,
            "abandon_count": 20,
            "generation_count": 300,
            "base_step_size": 0.03,
            "metric": "f",
            "direction": "minimize",
        },
        "search_space": {
            "x": {"type": "float", "low": -6.0, "high": 6.0},
            "y": {"type": "float", "low": -6.0, "high": 6.0},
        },
        "evaluator": {
            "module": "cuckoo.evaluators.himmelblau",
            "callable": "create_himmelblau_evaluator",
        },
        "report": {
            "metrics": ["f"],
        },
    }


class OptimizationConfigValidationTests(unittest.TestCase):
    def test_valid_configuration_passes(self) -> None:
        config = OptimizationConfig.model_validate(make_base_config())
        self.assertEqual(config.search.metric, "f")
        self.assertEqual(config.search.direction, "minimize")
        self.assertEqual(config.search.nan_policy, "coerce_to_worst")
        self.assertEqual(config.artifacts.log_file, "runs/log.csv")

    def test_population_must_cover_abandon_count(self) -> None:
        data = make_base_config()
        data["search"]["abandon_count"] = 60
        with self.assertRaises(ValidationError) as ctx:
            OptimizationConfig.model_validate(data)
        self.assertIn("abandon_count", str(ctx.exception))

    def test_abandon_count_may_equal_population(self) -> None:
        data = make_base_config()
        data["search"]["abandon_count"] = 50
        config = OptimizationConfig.model_validate(data)
        self.assertEqual(config.search.abandon_count, 50)

    def test_non_positive_counts_rejected(self) -> None:
        for field, value in (
            ("population_size", 0),
            ("generation_count", 0),
            ("abandon_count", -1),
            ("base_step_size", -0.5),
            ("max_resample_attempts", 0),
        ):
            with self.subTest(field=field):
                data = make_base_config()
                data["search"][field] = value
                with self.assertRaises(ValidationError):
                    OptimizationConfig.model_validate(data)

    def test_direction_and_policy_are_normalised(self) -> None:
        data = make_base_config()
        data["search"]["direction"] = " MAXIMIZE "
        data["search"]["nan_policy"] = "Error"
        config = OptimizationConfig.model_validate(data)
        self.assertEqual(config.search.direction, "maximize")
        self.assertEqual(config.search.nan_policy, "error")

    def test_unknown_direction_rejected(self) -> None:
        data = make_base_config()
        data["search"]["direction"] = "sideways"
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_unknown_nan_policy_rejected(self) -> None:
        data = make_base_config()
        data["search"]["nan_policy"] = "ignore"
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_metric_must_be_in_report_metrics(self) -> None:
        data = make_base_config()
        data["report"]["metrics"] = ["g"]
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_search_space_requires_entries(self) -> None:
        data = make_base_config()
        data["search_space"] = {}
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_only_float_parameters_supported(self) -> None:
        data = make_base_config()
        data["search_space"]["n"] = {"type": "int", "low": 0, "high": 3}
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_zero_width_dimension_allowed(self) -> None:
        data = make_base_config()
        data["search_space"]["z"] = {"type": "FLOAT", "low": 1.0, "high": 1.0}
        config = OptimizationConfig.model_validate(data)
        self.assertEqual(config.search_space["z"], {"type": "float", "low": 1.0, "high": 1.0})

    def test_inverted_bounds_rejected(self) -> None:
        data = make_base_config()
        data["search_space"]["x"] = {"type": "float", "low": 1.0, "high": -1.0}
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_extra_fields_forbidden(self) -> None:
        data = make_base_config()
        data["search"]["sampler"] = "tpe"
        with self.assertRaises(ValidationError):
            OptimizationConfig.model_validate(data)

    def test_evaluator_allows_extra_options(self) -> None:
        data = make_base_config()
        data["evaluator"]["variables"] = ["x", "y"]
        config = OptimizationConfig.model_validate(data)
        self.assertEqual(config.model_dump()["evaluator"]["variables"], ["x", "y"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

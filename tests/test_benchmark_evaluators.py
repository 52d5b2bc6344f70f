from __future__ import annotations

import math
import unittest

from cuckoo.evaluators import (
    BRANIN_MINIMUM,
    HIMMELBLAU_MINIMA,
    HimmelblauEvaluator,
    RastriginEvaluator,
    branin,
    branin_objective,
    create_himmelblau_evaluator,
    create_rastrigin_evaluator,
    himmelblau,
    rastrigin,
)


class HimmelblauTests(unittest.TestCase):
    def test_known_minima_are_zero(self) -> None:
        for point in HIMMELBLAU_MINIMA:
            self.assertAlmostEqual(himmelblau(point), 0.0, places=4)

    def test_origin_value(self) -> None:
        self.assertEqual(himmelblau((0.0, 0.0)), 170.0)

    def test_evaluator_returns_metric(self) -> None:
        metrics = HimmelblauEvaluator()({"x": 3.0, "y": 2.0})
        self.assertEqual(metrics["f"], 0.0)
        self.assertEqual(metrics["status"], "ok")

    def test_factory_accepts_custom_variables(self) -> None:
        evaluator = create_himmelblau_evaluator({"variables": ["a", "b"]})
        metrics = evaluator({"a": 0.0, "b": 0.0})
        self.assertEqual(metrics["f"], 170.0)

    def test_factory_rejects_wrong_arity(self) -> None:
        with self.assertRaises(ValueError):
            create_himmelblau_evaluator({"variables": ["a"]})


class BraninTests(unittest.TestCase):
    def test_global_minima(self) -> None:
        for point in ((-math.pi, 12.275), (math.pi, 2.275), (9.42478, 2.475)):
            self.assertAlmostEqual(branin(point), BRANIN_MINIMUM, places=4)

    def test_objective_payload(self) -> None:
        metrics = branin_objective({"x1": math.pi, "x2": 2.275}, seed=0)
        self.assertAlmostEqual(metrics["f"], BRANIN_MINIMUM, places=4)
        self.assertEqual(metrics["x1"], math.pi)
        self.assertEqual(metrics["status"], "ok")


class RastriginTests(unittest.TestCase):
    def test_origin_is_global_minimum(self) -> None:
        self.assertEqual(rastrigin([0.0, 0.0, 0.0]), 0.0)
        self.assertGreater(rastrigin([0.5, 0.0]), 0.0)

    def test_factory_builds_named_dimensions(self) -> None:
        evaluator = create_rastrigin_evaluator({"dimensions": 3})
        self.assertEqual(tuple(evaluator.variables), ("x0", "x1", "x2"))
        metrics = evaluator({"x0": 0.0, "x1": 0.0, "x2": 0.0})
        self.assertEqual(metrics["f"], 0.0)

    def test_factory_validates_variables(self) -> None:
        with self.assertRaises(TypeError):
            create_rastrigin_evaluator({"variables": "x0"})
        with self.assertRaises(ValueError):
            create_rastrigin_evaluator({"dimensions": 0})

    def test_missing_parameter_marks_failure(self) -> None:
        metrics = RastriginEvaluator(variables=("x0", "x1"))({"x0": 0.0})
        self.assertEqual(metrics["status"], "error")
        self.assertEqual(metrics["reason"], "exception:KeyError")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

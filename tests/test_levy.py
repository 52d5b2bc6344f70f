"""Unit tests for the Lévy-flight step sampler."""
from __future__ import annotations

import unittest
from collections import deque

import numpy as np

from cuckoo.levy import MODE_CALIBRATION, levy_sample
from cuckoo.space import ParameterSpace


class _ScriptedGenerator:
    """Stand-in generator replaying fixed standard-normal draws."""

    def __init__(self, draws: list[float]) -> None:
        self._draws = deque(draws)
        self.calls = 0

    def standard_normal(self, size: int | None = None):
        self.calls += 1
        if size is None:
            return self._draws.popleft()
        return np.array([self._draws.popleft() for _ in range(size)])


class LevySampleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.space = ParameterSpace.from_intervals([(-6.0, 6.0), (-6.0, 6.0)])

    def test_shape_matches_dimensions(self) -> None:
        rng = np.random.default_rng(0)
        sample = levy_sample(self.space, 0.1, rng)
        self.assertEqual(sample.shape, (2,))
        self.assertTrue(np.all(np.isfinite(sample)))

    def test_zero_step_returns_zero_vector(self) -> None:
        rng = _ScriptedGenerator([])
        sample = levy_sample(self.space, 0.0, rng)
        np.testing.assert_array_equal(sample, np.zeros(2))
        self.assertEqual(rng.calls, 0)

    def test_negative_or_non_finite_step_rejected(self) -> None:
        rng = np.random.default_rng(0)
        with self.assertRaises(ValueError):
            levy_sample(self.space, -0.1, rng)
        with self.assertRaises(ValueError):
            levy_sample(self.space, float("nan"), rng)

    def test_scale_formula(self) -> None:
        # direction (3, 4) has magnitude 5; n = -4 gives sqrt(|n|) = 2
        rng = _ScriptedGenerator([3.0, 4.0, -4.0])
        sample = levy_sample(self.space, 0.5, rng)
        scale = 0.5 * MODE_CALIBRATION / (2.0 * 5.0)
        np.testing.assert_allclose(sample, np.array([3.0, 4.0]) * scale * 12.0)

    def test_zero_magnitude_direction_is_redrawn(self) -> None:
        rng = _ScriptedGenerator([0.0, 0.0, 1.0, 3.0, 4.0, 1.0])
        sample = levy_sample(self.space, 1.0, rng)
        self.assertTrue(np.all(np.isfinite(sample)))
        np.testing.assert_allclose(sample, np.array([3.0, 4.0]) * (3.0 / 5.0) * 12.0)

    def test_zero_normal_divisor_is_redrawn(self) -> None:
        rng = _ScriptedGenerator([3.0, 4.0, 0.0, 3.0, 4.0, 1.0])
        sample = levy_sample(self.space, 1.0, rng)
        self.assertTrue(np.all(np.isfinite(sample)))

    def test_components_scale_with_dimension_range(self) -> None:
        space = ParameterSpace.from_intervals([(0.0, 1.0), (0.0, 10.0), (5.0, 5.0)])
        rng = _ScriptedGenerator([1.0, 1.0, 1.0, 1.0])
        sample = levy_sample(space, 0.2, rng)
        self.assertAlmostEqual(sample[1], sample[0] * 10.0)
        self.assertEqual(sample[2], 0.0)

    def test_displacement_is_linear_in_step(self) -> None:
        small = levy_sample(self.space, 0.01, np.random.default_rng(42))
        large = levy_sample(self.space, 0.04, np.random.default_rng(42))
        np.testing.assert_allclose(large, small * 4.0)

    def test_heavy_tail_produces_occasional_long_flights(self) -> None:
        rng = np.random.default_rng(1234)
        space = ParameterSpace.from_intervals([(0.0, 1.0)] * 3)
        lengths = np.array(
            [np.linalg.norm(levy_sample(space, 0.01, rng)) for _ in range(4000)]
        )
        median = float(np.median(lengths))
        self.assertGreater(float(lengths.max()), 10.0 * median)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

"""Population-based Cuckoo Search loop."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

import numpy as np

from .solution import (
    DEFAULT_MAX_RESAMPLE_ATTEMPTS,
    Candidate,
    Objective,
    QualityNaNPolicy,
    coerce_nan_policy,
    evaluate,
    generate,
    quality_rank,
    random_step,
    ranking_key,
)
from .space import DimensionBound, ParameterSpace, as_parameter_space


class SearchConfigError(ValueError):
    """Raised when the search is configured inconsistently."""


class PopulationSmallerThanAbandonCountError(SearchConfigError):
    """Raised when more candidates would be abandoned than the population holds."""

    def __init__(self, population_size: int, abandon_count: int) -> None:
        super().__init__(
            f"population_size ({population_size}) must be greater than or equal to "
            f"abandon_count ({abandon_count})"
        )
        self.population_size = population_size
        self.abandon_count = abandon_count


@dataclass(frozen=True)
class ProgressEvent:
    """Snapshot emitted after every successful replacement."""

    generation: int
    replacements: int
    best: Candidate


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass
class SearchResult:
    """Container summarising a finished search."""

    best: Candidate
    population: List[Candidate]
    step_size: float
    generations: int
    replacements: int
    evaluations: int

    @property
    def point(self) -> np.ndarray:
        return self.best.point

    @property
    def quality(self) -> float:
        return self.best.quality


def normalised_step_size(base_step_size: float, dimensions: int, generation_count: int) -> float:
    """Shrink the nominal step as dimensionality or generation budget grows."""

    if generation_count <= 0:
        return float(base_step_size)
    return float(base_step_size) / math.sqrt(dimensions * generation_count)


def validate_search_settings(
    *,
    population_size: int,
    abandon_count: int,
    generation_count: int,
    base_step_size: float,
    max_resample_attempts: int = DEFAULT_MAX_RESAMPLE_ATTEMPTS,
) -> None:
    if population_size < abandon_count:
        raise PopulationSmallerThanAbandonCountError(population_size, abandon_count)
    if population_size <= 0:
        raise SearchConfigError("population_size must be a positive integer")
    if abandon_count < 0:
        raise SearchConfigError("abandon_count must be non-negative")
    if generation_count < 0:
        raise SearchConfigError("generation_count must be non-negative")
    if not math.isfinite(base_step_size) or base_step_size < 0:
        raise SearchConfigError("base_step_size must be a finite, non-negative number")
    if max_resample_attempts <= 0:
        raise SearchConfigError("max_resample_attempts must be a positive integer")


def search(
    space: ParameterSpace | Iterable[DimensionBound | Tuple[float, float]],
    objective: Objective,
    *,
    population_size: int,
    abandon_count: int,
    generation_count: int,
    base_step_size: float,
    rng: np.random.Generator | int | None = None,
    progress: ProgressCallback | None = None,
    max_resample_attempts: int = DEFAULT_MAX_RESAMPLE_ATTEMPTS,
    nan_policy: QualityNaNPolicy | str | None = None,
) -> SearchResult:
    """Maximise ``objective`` over ``space`` with Cuckoo Search.

    Parameters
    ----------
    space:
        Parameter space, or a sequence of :class:`DimensionBound` / ``(low, high)``.
    objective:
        Callable mapping a point (1-D numpy array) to a real quality.
    population_size:
        Number of nests kept for the whole run.
    abandon_count:
        Number of worst nests regenerated after every successful replacement.
    generation_count:
        Number of perturb/replace iterations.
    base_step_size:
        Nominal Lévy step, normalised by ``sqrt(dimensions * generation_count)``.
    rng:
        Seed or :class:`numpy.random.Generator`; consumed sequentially.
    progress:
        Optional callback receiving a :class:`ProgressEvent` per replacement.
    max_resample_attempts:
        Cap on rejected out-of-bounds proposals per mutation.
    nan_policy:
        ``coerce_to_worst`` (default) ranks non-finite qualities last,
        ``error`` raises :class:`~cuckoo.solution.NonFiniteQualityError`.
    """

    validate_search_settings(
        population_size=population_size,
        abandon_count=abandon_count,
        generation_count=generation_count,
        base_step_size=base_step_size,
        max_resample_attempts=max_resample_attempts,
    )
    space = as_parameter_space(space)
    policy = coerce_nan_policy(nan_policy)
    generator = np.random.default_rng(rng)

    step_size = normalised_step_size(base_step_size, space.dimensions, generation_count)

    population = [
        generate(space, objective, generator, policy) for _ in range(population_size)
    ]
    evaluations = population_size
    replacements = 0

    for generation in range(generation_count):
        # Pick a cuckoo and a host nest
        i = int(generator.integers(population_size))
        j = int(generator.integers(population_size))

        mod_point = random_step(
            population[i],
            space,
            step_size,
            generator,
            max_attempts=max_resample_attempts,
        )
        mod_quality = evaluate(objective, mod_point, policy)
        evaluations += 1

        if quality_rank(mod_quality) <= ranking_key(population[j]):
            continue

        population[j] = Candidate(point=mod_point, quality=mod_quality)
        replacements += 1

        # Abandon the worst nests
        population.sort(key=ranking_key)
        for slot in range(abandon_count):
            population[slot] = generate(space, objective, generator, policy)
        evaluations += abandon_count

        if progress is not None:
            progress(
                ProgressEvent(
                    generation=generation,
                    replacements=replacements,
                    best=max(population, key=ranking_key),
                )
            )

    population.sort(key=ranking_key)
    return SearchResult(
        best=population[-1],
        population=population,
        step_size=step_size,
        generations=generation_count,
        replacements=replacements,
        evaluations=evaluations,
    )


__all__ = [
    "PopulationSmallerThanAbandonCountError",
    "ProgressCallback",
    "ProgressEvent",
    "SearchConfigError",
    "SearchResult",
    "normalised_step_size",
    "search",
    "validate_search_settings",
]

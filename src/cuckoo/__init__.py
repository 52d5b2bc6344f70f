"""Cuckoo Search optimisation with Lévy-flight perturbations."""

from .levy import levy_sample
from .search import (
    PopulationSmallerThanAbandonCountError,
    ProgressEvent,
    SearchConfigError,
    SearchResult,
    normalised_step_size,
    search,
)
from .solution import Candidate, NonFiniteQualityError, QualityNaNPolicy, generate, random_step
from .space import DimensionBound, ParameterSpace

__all__ = [
    "Candidate",
    "DimensionBound",
    "NonFiniteQualityError",
    "ParameterSpace",
    "PopulationSmallerThanAbandonCountError",
    "ProgressEvent",
    "QualityNaNPolicy",
    "SearchConfigError",
    "SearchResult",
    "generate",
    "levy_sample",
    "normalised_step_size",
    "random_step",
    "search",
]

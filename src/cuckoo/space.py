"""Box-constrained parameter spaces."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class DimensionBound:
    """Closed interval ``[minimum, minimum + range]`` for one axis."""

    minimum: float
    range: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.minimum) or not math.isfinite(self.range):
            raise ValueError("dimension bounds must be finite")
        if self.range < 0:
            raise ValueError("dimension range must be non-negative")

    @classmethod
    def from_interval(cls, low: float, high: float) -> "DimensionBound":
        return cls(minimum=float(low), range=float(high) - float(low))

    @property
    def maximum(self) -> float:
        return self.minimum + self.range

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True)
class ParameterSpace:
    """Ordered, immutable collection of dimension bounds.

    The number of bounds fixes the dimensionality of every point sampled from
    the space. Optional names map vector coordinates back to named parameters
    for evaluators and reports.
    """

    bounds: Tuple[DimensionBound, ...]
    names: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        bounds = tuple(self.bounds)
        if not bounds:
            raise ValueError("parameter space requires at least one dimension")
        names = tuple(self.names) or tuple(f"x{idx}" for idx in range(len(bounds)))
        if len(names) != len(bounds):
            raise ValueError("parameter names must match the number of dimensions")
        if len(set(names)) != len(names):
            raise ValueError("parameter names must be unique")
        object.__setattr__(self, "bounds", bounds)
        object.__setattr__(self, "names", names)

    @classmethod
    def from_intervals(
        cls,
        intervals: Iterable[Tuple[float, float]],
        names: Sequence[str] | None = None,
    ) -> "ParameterSpace":
        bounds = tuple(DimensionBound.from_interval(low, high) for low, high in intervals)
        return cls(bounds=bounds, names=tuple(names or ()))

    @classmethod
    def from_search_space(cls, search_space: Mapping[str, Mapping[str, Any]]) -> "ParameterSpace":
        """Build a space from a validated ``search_space`` config mapping."""

        names: list[str] = []
        bounds: list[DimensionBound] = []
        for name, spec in search_space.items():
            param_type = str(spec.get("type", "float")).lower()
            if param_type != "float":
                raise ValueError(f"search_space.{name}: only float parameters are supported")
            names.append(str(name))
            bounds.append(DimensionBound.from_interval(spec["low"], spec["high"]))
        return cls(bounds=tuple(bounds), names=tuple(names))

    def __len__(self) -> int:
        return len(self.bounds)

    @property
    def dimensions(self) -> int:
        return len(self.bounds)

    @property
    def minimums(self) -> np.ndarray:
        return np.array([bound.minimum for bound in self.bounds], dtype=float)

    @property
    def ranges(self) -> np.ndarray:
        return np.array([bound.range for bound in self.bounds], dtype=float)

    @property
    def maximums(self) -> np.ndarray:
        return np.array([bound.maximum for bound in self.bounds], dtype=float)

    def contains(self, point: Sequence[float] | np.ndarray) -> bool:
        values = np.asarray(point, dtype=float)
        if values.shape != (self.dimensions,):
            return False
        return bool(np.all(values >= self.minimums) and np.all(values <= self.maximums))

    def to_params(self, point: Sequence[float] | np.ndarray) -> Dict[str, float]:
        values = np.asarray(point, dtype=float)
        if values.shape != (self.dimensions,):
            raise ValueError(
                f"point has shape {values.shape}, expected ({self.dimensions},)"
            )
        return {name: float(value) for name, value in zip(self.names, values)}


def as_parameter_space(
    space: ParameterSpace | Iterable[DimensionBound | Tuple[float, float]],
) -> ParameterSpace:
    """Coerce bounds or ``(low, high)`` pairs into a :class:`ParameterSpace`."""

    if isinstance(space, ParameterSpace):
        return space
    bounds: list[DimensionBound] = []
    for entry in space:
        if isinstance(entry, DimensionBound):
            bounds.append(entry)
        else:
            low, high = entry
            bounds.append(DimensionBound.from_interval(low, high))
    return ParameterSpace(bounds=tuple(bounds))


__all__ = ["DimensionBound", "ParameterSpace", "as_parameter_space"]

"""Continuous distributions, paired data curves and an inline histogram."""

from __future__ import annotations

import math
from bisect import bisect_left
from dataclasses import dataclass, field
from statistics import NormalDist
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class NormalDistribution:
    """A normal distribution described by its mean and standard deviation."""

    mean: float
    standard_deviation: float

    def inv_cdf(self, probability: float) -> float:
        if self.standard_deviation <= 0.0:
            return self.mean
        if probability <= 0.0:
            return -math.inf
        if probability >= 1.0:
            return math.inf
        return NormalDist(self.mean, self.standard_deviation).inv_cdf(probability)

    def central_tendency(self) -> float:
        return self.mean

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "normal",
            "mean": self.mean,
            "standard_deviation": self.standard_deviation,
        }


@dataclass(frozen=True)
class TriangularDistribution:
    """A triangular distribution with a minimum, a mode and a maximum."""

    minimum: float
    most_likely: float
    maximum: float

    def __post_init__(self) -> None:
        if not self.minimum <= self.most_likely <= self.maximum:
            raise ValueError("triangular distribution needs minimum <= most_likely <= maximum")

    def inv_cdf(self, probability: float) -> float:
        low, mode, high = self.minimum, self.most_likely, self.maximum
        span = high - low
        if span == 0.0:
            return low
        probability = min(max(probability, 0.0), 1.0)
        split = (mode - low) / span
        if probability < split:
            return low + math.sqrt(probability * span * (mode - low))
        return high - math.sqrt((1.0 - probability) * span * (high - mode))

    def central_tendency(self) -> float:
        return self.most_likely

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "triangular",
            "min": self.minimum,
            "most_likely": self.most_likely,
            "max": self.maximum,
        }


@dataclass(frozen=True)
class DeterministicDistribution:
    """A distribution that always yields the same value."""

    value: float

    def inv_cdf(self, probability: float) -> float:
        return self.value

    def central_tendency(self) -> float:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"type": "deterministic", "value": self.value}


ContinuousDistribution = Union[NormalDistribution, TriangularDistribution, DeterministicDistribution]


def distribution_from_dict(data: Mapping[str, Any]) -> ContinuousDistribution:
    """Build a distribution from the mapping produced by its ``to_dict``."""
    kind = data.get("type")
    try:
        if kind == "normal":
            return NormalDistribution(float(data["mean"]), float(data["standard_deviation"]))
        if kind == "triangular":
            return TriangularDistribution(
                float(data["min"]), float(data["most_likely"]), float(data["max"])
            )
        if kind == "deterministic":
            return DeterministicDistribution(float(data["value"]))
    except KeyError as exc:
        raise ValueError(f"distribution of type {kind!r} is missing field {exc}") from None
    raise ValueError(f"unknown distribution type {kind!r}")


@dataclass(frozen=True)
class PairedData:
    """A piecewise linear curve given by ascending x values and their y values."""

    xvals: tuple[float, ...]
    yvals: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "xvals", tuple(float(x) for x in self.xvals))
        object.__setattr__(self, "yvals", tuple(float(y) for y in self.yvals))
        if len(self.xvals) != len(self.yvals):
            raise ValueError("paired data needs as many y values as x values")

    def sample_value(self, x: float) -> float:
        """Interpolate at ``x``; zero below the curve, the last y above it."""
        if not self.xvals:
            raise ValueError("cannot sample empty paired data")
        if x < self.xvals[0]:
            return 0.0
        if x >= self.xvals[-1]:
            return self.yvals[-1]
        upper = bisect_left(self.xvals, x)
        if x == self.xvals[upper]:
            return self.yvals[upper]
        lower = upper - 1
        slope = (self.yvals[upper] - self.yvals[lower]) / (self.xvals[upper] - self.xvals[lower])
        return self.yvals[lower] + (x - self.xvals[lower]) * slope

    def force_monotonic_in_range(self, minimum: float, maximum: float) -> PairedData:
        """Return a copy whose y values never decrease and stay within the range."""
        adjusted = []
        previous = minimum
        for y in self.yvals:
            y = min(max(y, previous), maximum)
            adjusted.append(y)
            previous = y
        return PairedData(self.xvals, tuple(adjusted))

    def to_dict(self) -> dict[str, Any]:
        return {"xvalues": list(self.xvals), "yvalues": list(self.yvals)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PairedData:
        return cls(tuple(data.get("xvalues", ())), tuple(data.get("yvalues", ())))


@dataclass(frozen=True)
class UncertaintyPairedData:
    """A curve whose y values are distributions."""

    xvals: tuple[float, ...]
    yvals: tuple[ContinuousDistribution, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "xvals", tuple(float(x) for x in self.xvals))
        object.__setattr__(self, "yvals", tuple(self.yvals))
        if len(self.xvals) != len(self.yvals):
            raise ValueError("paired data needs as many y values as x values")

    def sample_value_sampler(self, probability: float) -> PairedData:
        return PairedData(self.xvals, tuple(d.inv_cdf(probability) for d in self.yvals))

    def central_tendency(self) -> PairedData:
        return PairedData(self.xvals, tuple(d.central_tendency() for d in self.yvals))

    def to_dict(self) -> dict[str, Any]:
        return {"xvalues": list(self.xvals), "yvalues": [d.to_dict() for d in self.yvals]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UncertaintyPairedData:
        return cls(
            tuple(data.get("xvalues", ())),
            tuple(distribution_from_dict(d) for d in data.get("yvalues", ())),
        )


@dataclass
class InlineHistogram:
    """A fixed-width histogram that accepts observations outside its starting range."""

    bin_width: float
    minimum: float
    maximum: float
    _bins: dict[int, int] = field(default_factory=dict, init=False, repr=False)
    _count: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.bin_width <= 0:
            raise ValueError("bin width must be positive")
        if self.maximum < self.minimum:
            raise ValueError("histogram maximum is below its minimum")

    @property
    def count(self) -> int:
        return self._count

    def add_observation(self, value: float) -> None:
        index = math.floor((value - self.minimum) / self.bin_width)
        self._bins[index] = self._bins.get(index, 0) + 1
        self._count += 1
        self.maximum = max(self.maximum, value)

    def string_sparse(self) -> str:
        """One line per non-empty bin, in ascending order."""
        lines = []
        for index in sorted(self._bins):
            lower = self.minimum + index * self.bin_width
            upper = lower + self.bin_width
            lines.append(f"{lower}, {upper}, {self._bins[index]}\n")
        return "".join(lines)
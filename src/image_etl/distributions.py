"""Tagged random distributions bound to configuration fields.

Each distribution is a small frozen pydantic model with a ``kind`` tag and a
pure ``sample(rng)`` method.  All randomness comes from the
``numpy.random.Generator`` passed in, so a seeded generator reproduces the
same draws for the same call sequence.

Configuration documents may give any distribution as a two-element
sequence, e.g. ``"angle": [-20, 20]`` or ``"lighting": [0.0, 0.1]``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal

import numpy as np
from pydantic import BaseModel, model_validator


def _pair_to_mapping(data: Any, first: str, second: str) -> Any:
    """Accept ``[a, b]`` as shorthand for ``{first: a, second: b}``."""
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if len(data) != 2:
            raise ValueError(
                f"expected a [{first}, {second}] pair, got {len(data)} value(s)"
            )
        return {first: data[0], second: data[1]}
    return data


class Uniform(BaseModel, frozen=True, extra="forbid"):
    """Continuous uniform distribution over ``[low, high]``."""

    kind: Literal["uniform"] = "uniform"
    low: float = 0.0
    high: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        return _pair_to_mapping(data, "low", "high")

    @model_validator(mode="after")
    def _ordered(self) -> Uniform:
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must be <= high ({self.high})")
        return self

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(self.low, self.high))


class UniformInt(BaseModel, frozen=True, extra="forbid"):
    """Discrete uniform distribution over ``[low, high]``, both inclusive."""

    kind: Literal["uniform_int"] = "uniform_int"
    low: int = 0
    high: int = 0

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        return _pair_to_mapping(data, "low", "high")

    @model_validator(mode="after")
    def _ordered(self) -> UniformInt:
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must be <= high ({self.high})")
        return self

    def sample(self, rng: np.random.Generator) -> int:
        return int(rng.integers(self.low, self.high, endpoint=True))


class Normal(BaseModel, frozen=True, extra="forbid"):
    """Gaussian distribution; ``stddev == 0`` always yields ``mean``."""

    kind: Literal["normal"] = "normal"
    mean: float = 0.0
    stddev: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        return _pair_to_mapping(data, "mean", "stddev")

    @model_validator(mode="after")
    def _non_negative(self) -> Normal:
        if self.stddev < 0.0:
            raise ValueError(f"stddev must be >= 0, got {self.stddev}")
        return self

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.normal(self.mean, self.stddev))


class Bernoulli(BaseModel, frozen=True, extra="forbid"):
    """Coin flip that returns ``True`` with probability ``p``."""

    kind: Literal["bernoulli"] = "bernoulli"
    p: float = 0.0

    @model_validator(mode="after")
    def _probability(self) -> Bernoulli:
        if not 0.0 <= self.p <= 1.0:
            raise ValueError(f"p must be in [0, 1], got {self.p}")
        return self

    def sample(self, rng: np.random.Generator) -> bool:
        return bool(rng.random() < self.p)


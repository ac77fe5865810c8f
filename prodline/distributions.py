"""Random variate sources for the production line engine."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import itertools
import math
import random
from typing import Any, Dict, Iterator, Optional, Sequence

from .errors import ConfigurationError


class VariateSource(ABC):
    """Base interface: produces exponential durations for a given mean."""

    description = "VariateSource"

    @abstractmethod
    def exponential(self, mean: float) -> float:
        """Return a non-negative duration drawn for ``mean``."""


class RandomVariates(VariateSource):
    """Inverse-transform exponential sampler backed by ``random.Random``."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
        self.description = f"Random(seed={seed})"

    def uniform(self) -> float:
        # random() is in [0, 1); flipping it gives (0, 1] so log() never sees 0.
        return 1.0 - self._rng.random()

    def exponential(self, mean: float) -> float:
        return -mean * math.log(self.uniform())


class ConstantVariates(VariateSource):
    """Deterministic source: every duration equals its mean."""

    description = "Constant"

    def exponential(self, mean: float) -> float:
        return mean


class SequenceVariates(VariateSource):
    """Deterministic source replaying a fixed list of durations, cycling at the end.

    The mean passed by the caller is ignored; durations are handed out in call
    order, so a test can script the exact event sequence of a run.
    """

    def __init__(self, values: Sequence[float]) -> None:
        if not values:
            raise ConfigurationError("Sequence variates require at least one value.")
        if any(not math.isfinite(value) or value <= 0 for value in values):
            raise ConfigurationError("Sequence variates must all be positive and finite.")
        self.values = tuple(float(value) for value in values)
        self._cycle: Iterator[float] = itertools.cycle(self.values)
        self.description = f"Sequence({len(self.values)} values)"

    def exponential(self, mean: float) -> float:
        return next(self._cycle)


@dataclass
class VariateConfig:
    """User friendly specification of a variate source."""

    type: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        items = ", ".join(f"{k}={v}" for k, v in self.parameters.items())
        return f"{self.type.title()}({items})"


class VariateFactory:
    """Factory for constructing variate sources from configuration dictionaries."""

    SUPPORTED_TYPES = {"random", "constant", "sequence"}

    @staticmethod
    def from_config(config: VariateConfig) -> VariateSource:
        source_type = config.type.lower().strip()
        if source_type not in VariateFactory.SUPPORTED_TYPES:
            raise ConfigurationError(
                f"Unsupported variate source type '{config.type}'; "
                f"expected one of {', '.join(sorted(VariateFactory.SUPPORTED_TYPES))}."
            )
        params = config.parameters
        if source_type == "random":
            seed = params.get("seed")
            return RandomVariates(seed=None if seed is None else int(seed))
        if source_type == "constant":
            return ConstantVariates()
        values = params.get("values")
        if not values:
            raise ConfigurationError("Sequence source requires a non-empty 'values' list.")
        return SequenceVariates(values)

    @staticmethod
    def from_dict(definition: Dict[str, Any]) -> VariateSource:
        source_type = definition.get("type")
        if not source_type:
            raise ConfigurationError("Variate source definition requires a 'type' field.")
        params = {k: v for k, v in definition.items() if k != "type"}
        return VariateFactory.from_config(VariateConfig(type=source_type, parameters=params))

"""Core data structures for the two-stage production line."""
from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Any, Dict, Optional

from .errors import ConfigurationError

DEFAULT_HORIZON = 1000.0


@dataclass
class Item:
    """A unit of work moving through the line."""

    arrival_time: float
    station1_exit_time: Optional[float] = None
    station2_exit_time: Optional[float] = None

    @property
    def sojourn_time(self) -> Optional[float]:
        if self.station2_exit_time is None:
            return None
        return self.station2_exit_time - self.arrival_time


@dataclass(frozen=True)
class LineConfig:
    """Immutable configuration of a single simulation run."""

    mean_arrival_time: float
    mean_service_time1: float
    mean_service_time2: float
    buffer1_capacity: int
    buffer2_capacity: int

    def __post_init__(self) -> None:
        for name in ("mean_arrival_time", "mean_service_time1", "mean_service_time2"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}.")
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be positive and finite, got {value!r}.")
        for name in ("buffer1_capacity", "buffer2_capacity"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
            if value < 0:
                raise ConfigurationError(f"{name} must not be negative, got {value}.")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineConfig":
        missing = [key for key in cls.__dataclass_fields__ if key not in data]
        if missing:
            raise ConfigurationError(f"Line configuration is missing: {', '.join(missing)}.")
        return cls(
            mean_arrival_time=data["mean_arrival_time"],
            mean_service_time1=data["mean_service_time1"],
            mean_service_time2=data["mean_service_time2"],
            buffer1_capacity=data["buffer1_capacity"],
            buffer2_capacity=data["buffer2_capacity"],
        )

    def capacity(self, index: int) -> int:
        if index == 0:
            return self.buffer1_capacity
        if index == 1:
            return self.buffer2_capacity
        raise IndexError("Buffer index out of range.")

    def with_buffer_override(self, index: int, capacity: int) -> "LineConfig":
        if index == 0:
            return replace(self, buffer1_capacity=capacity)
        if index == 1:
            return replace(self, buffer2_capacity=capacity)
        raise IndexError("Buffer index out of range.")

    def describe(self) -> str:
        return (
            f"Arrivals(mean={self.mean_arrival_time:g}) -> [B1:{self.buffer1_capacity}] -> "
            f"Station 1(mean={self.mean_service_time1:g}) -> [B2:{self.buffer2_capacity}] -> "
            f"Station 2(mean={self.mean_service_time2:g})"
        )


DEFAULT_CONFIG = LineConfig(
    mean_arrival_time=0.4,
    mean_service_time1=1.25,
    mean_service_time2=0.5,
    buffer1_capacity=4,
    buffer2_capacity=2,
)

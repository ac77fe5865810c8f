"""Monte Carlo utilities for repeated runs and buffer capacity studies."""
from __future__ import annotations

from dataclasses import dataclass
import logging
from statistics import mean, pstdev
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .entities import LineConfig
from .errors import ConfigurationError
from .simulation import SimulationResult, simulate_line

logger = logging.getLogger(__name__)


@dataclass
class ReplicationResult:
    """Stores the collection of independent runs for one configuration."""

    config: LineConfig
    horizon: float
    runs: List[SimulationResult]

    def metric_series(self, accessor: Callable[[SimulationResult], float]) -> List[float]:
        return [accessor(run) for run in self.runs]


def _mean_std(values: List[float]) -> Tuple[float, float]:
    value_mean = mean(values) if values else 0.0
    value_std = pstdev(values) if len(values) > 1 else 0.0
    return value_mean, value_std


@dataclass
class ReplicationSummary:
    """Aggregated replication statistics (mean and population standard deviation)."""

    config: LineConfig
    replications: int
    throughput_mean: float
    throughput_std: float
    sojourn_time_mean: float
    sojourn_time_std: float
    station1_utilization: float
    station2_utilization: float
    station1_blocked: float
    items_lost_mean: float

    @classmethod
    def from_result(cls, result: ReplicationResult) -> "ReplicationSummary":
        throughput_mean, throughput_std = _mean_std(result.metric_series(lambda run: run.throughput))
        sojourn_mean, sojourn_std = _mean_std(result.metric_series(lambda run: run.average_sojourn_time))
        return cls(
            config=result.config,
            replications=len(result.runs),
            throughput_mean=throughput_mean,
            throughput_std=throughput_std,
            sojourn_time_mean=sojourn_mean,
            sojourn_time_std=sojourn_std,
            station1_utilization=_mean_std(result.metric_series(lambda run: run.station1_utilization))[0],
            station2_utilization=_mean_std(result.metric_series(lambda run: run.station2_utilization))[0],
            station1_blocked=_mean_std(result.metric_series(lambda run: run.station1_blocked_ratio))[0],
            items_lost_mean=_mean_std(result.metric_series(lambda run: run.items_lost))[0],
        )


def run_replications(
    config: LineConfig,
    horizon: float,
    replications: int,
    base_seed: Optional[int] = None,
) -> ReplicationResult:
    if replications < 1:
        raise ConfigurationError("At least one replication is required.")
    runs: List[SimulationResult] = []
    for i in range(replications):
        seed = None if base_seed is None else base_seed + i
        runs.append(simulate_line(config, horizon, seed=seed))
    return ReplicationResult(config=config, horizon=horizon, runs=runs)


def summarize_results(results: Iterable[ReplicationResult]) -> List[ReplicationSummary]:
    return [ReplicationSummary.from_result(result) for result in results]


def sweep_buffer(
    config: LineConfig,
    index: int,
    capacities: Sequence[int],
    horizon: float,
    replications: int = 1,
    base_seed: Optional[int] = None,
) -> List[ReplicationSummary]:
    """Evaluate the line once per capacity of buffer ``index`` (0 or 1)."""
    summaries: List[ReplicationSummary] = []
    for capacity in capacities:
        modified = config.with_buffer_override(index, capacity)
        summary = ReplicationSummary.from_result(run_replications(modified, horizon, replications, base_seed))
        logger.info(
            "Buffer %d capacity %d: throughput %.4f (std %.4f)",
            index + 1,
            capacity,
            summary.throughput_mean,
            summary.throughput_std,
        )
        summaries.append(summary)
    return summaries


def best_capacity(summaries: Sequence[ReplicationSummary], index: int = 1) -> Optional[int]:
    """Capacity with the highest mean throughput; the smallest one wins ties."""
    if not summaries:
        return None
    best = max(summaries, key=lambda s: (s.throughput_mean, -s.config.capacity(index)))
    return best.config.capacity(index)

"""Discrete event simulation engine for the two-stage production line."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import logging
import math
from typing import Deque, List, Optional, Tuple

from .distributions import RandomVariates, VariateSource
from .entities import DEFAULT_CONFIG, Item, LineConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ARRIVAL = "arrival"
STATION1_COMPLETION = "station1_completion"
STATION2_COMPLETION = "station2_completion"


@dataclass(frozen=True)
class SimulationResult:
    """Output of a single finite-horizon run."""

    config: LineConfig
    horizon: float
    items_arrived: int
    items_processed: int
    items_lost: int
    items_in_system: int
    average_sojourn_time: float
    station1_busy_time: float
    station2_busy_time: float
    station1_blocked_time: float
    station1_utilization: float
    station2_utilization: float

    @property
    def buffer1_capacity(self) -> int:
        return self.config.buffer1_capacity

    @property
    def buffer2_capacity(self) -> int:
        return self.config.buffer2_capacity

    @property
    def throughput(self) -> float:
        return self.items_processed / self.horizon if self.horizon else 0.0

    @property
    def station1_blocked_ratio(self) -> float:
        return self.station1_blocked_time / self.horizon if self.horizon else 0.0


@dataclass(frozen=True)
class TraceEntry:
    """Snapshot of the line taken right after an event was handled."""

    time: float
    kind: str
    buffer1: int
    buffer2: int
    station1_busy: bool
    station2_busy: bool
    station1_blocked: bool


@dataclass
class EventClock:
    """Current time plus the three pending event times; ``None`` means nothing is pending."""

    current_time: float = 0.0
    next_arrival: Optional[float] = None
    station1_completion: Optional[float] = None
    station2_completion: Optional[float] = None

    def next_event(self) -> Tuple[Optional[str], Optional[float]]:
        # Strict comparison keeps the earlier kind on ties:
        # arrival, then station 1, then station 2.
        best_kind: Optional[str] = None
        best_time: Optional[float] = None
        for kind, time in (
            (ARRIVAL, self.next_arrival),
            (STATION1_COMPLETION, self.station1_completion),
            (STATION2_COMPLETION, self.station2_completion),
        ):
            if time is None:
                continue
            if best_time is None or time < best_time:
                best_kind, best_time = kind, time
        return best_kind, best_time


@dataclass
class LineState:
    buffer1: Deque[Item] = field(default_factory=deque)
    buffer2: Deque[Item] = field(default_factory=deque)
    station1_item: Optional[Item] = None
    station2_item: Optional[Item] = None
    station1_blocked: bool = False

    def items_in_system(self) -> int:
        occupied = sum(1 for item in (self.station1_item, self.station2_item) if item is not None)
        return len(self.buffer1) + len(self.buffer2) + occupied


@dataclass
class LineStatistics:
    items_arrived: int = 0
    items_processed: int = 0
    items_lost: int = 0
    total_sojourn_time: float = 0.0
    station1_busy_time: float = 0.0
    station2_busy_time: float = 0.0
    station1_blocked_time: float = 0.0


class ProductionLine:
    """Two stations in series with finite buffers, blocking after service.

    Items arrive with exponential inter-arrival times and are admitted to
    buffer 1 only when it has room and station 1 is not blocked; otherwise they
    are lost. A station 1 item that finds buffer 2 full stays on station 1,
    which is then blocked until a station 2 completion frees a slot. On
    unblocking, the held item gets a freshly drawn station 1 service time.
    """

    def __init__(
        self,
        config: LineConfig = DEFAULT_CONFIG,
        variates: Optional[VariateSource] = None,
        seed: Optional[int] = None,
        trace: bool = False,
    ) -> None:
        if not isinstance(config, LineConfig):
            raise ConfigurationError(f"Expected a LineConfig, got {type(config).__name__}.")
        self.config = config
        self.variates = variates if variates is not None else RandomVariates(seed)
        self.record_trace = trace
        self.clock = EventClock()
        self.state = LineState()
        self.stats = LineStatistics()
        self.trace: List[TraceEntry] = []

    @classmethod
    def from_parameters(
        cls,
        mean_arrival_time: float,
        mean_service_time1: float,
        mean_service_time2: float,
        buffer1_capacity: int,
        buffer2_capacity: int,
        variates: Optional[VariateSource] = None,
    ) -> "ProductionLine":
        config = LineConfig(
            mean_arrival_time=mean_arrival_time,
            mean_service_time1=mean_service_time1,
            mean_service_time2=mean_service_time2,
            buffer1_capacity=buffer1_capacity,
            buffer2_capacity=buffer2_capacity,
        )
        return cls(config, variates=variates)

    def reset(self) -> None:
        """Clear line state, statistics and trace. The variate stream is left untouched."""
        self.clock = EventClock()
        self.state = LineState()
        self.stats = LineStatistics()
        self.trace = []

    def run(self, horizon: float) -> SimulationResult:
        if isinstance(horizon, bool) or not isinstance(horizon, (int, float)):
            raise ConfigurationError(f"Horizon must be a number, got {horizon!r}.")
        if not math.isfinite(horizon) or horizon < 0:
            raise ConfigurationError(f"Horizon must be finite and non-negative, got {horizon!r}.")
        horizon = float(horizon)

        self.reset()
        logger.info(
            "Starting run: horizon=%s, line=%s, variates=%s",
            horizon,
            self.config.describe(),
            self.variates.description,
        )
        self.clock.next_arrival = self._draw(self.config.mean_arrival_time)

        debug = logger.isEnabledFor(logging.DEBUG)
        while True:
            kind, event_time = self.clock.next_event()
            assert kind is not None and event_time is not None, "no arrival scheduled"
            self._integrate(min(event_time, horizon))
            if event_time >= horizon:
                self.clock.current_time = horizon
                break
            self.clock.current_time = event_time

            if kind == ARRIVAL:
                self._handle_arrival()
            elif kind == STATION1_COMPLETION:
                self._handle_station1_completion()
            else:
                self._handle_station2_completion()

            if debug:
                logger.debug(
                    "t=%.6f %s b1=%d b2=%d s1=%s s2=%s blocked=%s",
                    event_time,
                    kind,
                    len(self.state.buffer1),
                    len(self.state.buffer2),
                    self.state.station1_item is not None,
                    self.state.station2_item is not None,
                    self.state.station1_blocked,
                )
            if self.record_trace:
                self.trace.append(self._snapshot(kind))

        result = self._build_result(horizon)
        logger.info(
            "Run complete: arrived=%d processed=%d lost=%d util1=%.4f util2=%.4f",
            result.items_arrived,
            result.items_processed,
            result.items_lost,
            result.station1_utilization,
            result.station2_utilization,
        )
        return result

    # ------------------------------------------------------------------
    # Time advance
    # ------------------------------------------------------------------
    def _draw(self, mean: float) -> float:
        return self.clock.current_time + self.variates.exponential(mean)

    def _integrate(self, until: float) -> None:
        elapsed = until - self.clock.current_time
        if elapsed <= 0:
            return
        if self.state.station1_item is not None:
            self.stats.station1_busy_time += elapsed
            if self.state.station1_blocked:
                self.stats.station1_blocked_time += elapsed
        if self.state.station2_item is not None:
            self.stats.station2_busy_time += elapsed

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _start_station1(self) -> None:
        self.state.station1_item = self.state.buffer1.popleft()
        self.clock.station1_completion = self._draw(self.config.mean_service_time1)

    def _start_station2(self) -> None:
        self.state.station2_item = self.state.buffer2.popleft()
        self.clock.station2_completion = self._draw(self.config.mean_service_time2)

    def _handle_arrival(self) -> None:
        state = self.state
        self.stats.items_arrived += 1
        item = Item(arrival_time=self.clock.current_time)
        if len(state.buffer1) < self.config.buffer1_capacity and not state.station1_blocked:
            state.buffer1.append(item)
            if state.station1_item is None and state.buffer1:
                self._start_station1()
        else:
            self.stats.items_lost += 1
        self.clock.next_arrival = self._draw(self.config.mean_arrival_time)

    def _handle_station1_completion(self) -> None:
        state = self.state
        item = state.station1_item
        assert item is not None, "station 1 completion with an empty station"
        assert not state.station1_blocked, "station 1 completion while blocked"
        now = self.clock.current_time
        item.station1_exit_time = now

        if len(state.buffer2) < self.config.buffer2_capacity:
            state.buffer2.append(item)
            state.station1_item = None
            if state.station2_item is None:
                self._start_station2()
            state.station1_blocked = False
            if state.buffer1:
                self._start_station1()
            else:
                self.clock.station1_completion = None
        else:
            state.station1_blocked = True
            self.clock.station1_completion = None
            logger.debug("t=%.6f station 1 blocked, buffer 2 full", now)

    def _handle_station2_completion(self) -> None:
        state = self.state
        item = state.station2_item
        assert item is not None, "station 2 completion with an empty station"
        now = self.clock.current_time
        item.station2_exit_time = now
        self.stats.items_processed += 1
        self.stats.total_sojourn_time += item.sojourn_time
        state.station2_item = None

        if state.buffer2:
            self._start_station2()
        else:
            self.clock.station2_completion = None

        if state.station1_blocked and len(state.buffer2) < self.config.buffer2_capacity:
            state.station1_blocked = False
            logger.debug("t=%.6f station 1 unblocked", now)
            if state.station1_item is not None:
                # The held item is served again rather than moved into buffer 2.
                self.clock.station1_completion = self._draw(self.config.mean_service_time1)
            elif state.buffer1:
                self._start_station1()

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def _snapshot(self, kind: str) -> TraceEntry:
        return TraceEntry(
            time=self.clock.current_time,
            kind=kind,
            buffer1=len(self.state.buffer1),
            buffer2=len(self.state.buffer2),
            station1_busy=self.state.station1_item is not None,
            station2_busy=self.state.station2_item is not None,
            station1_blocked=self.state.station1_blocked,
        )

    def _build_result(self, horizon: float) -> SimulationResult:
        stats = self.stats
        average_sojourn = stats.total_sojourn_time / stats.items_processed if stats.items_processed else 0.0
        return SimulationResult(
            config=self.config,
            horizon=horizon,
            items_arrived=stats.items_arrived,
            items_processed=stats.items_processed,
            items_lost=stats.items_lost,
            items_in_system=self.state.items_in_system(),
            average_sojourn_time=average_sojourn,
            station1_busy_time=stats.station1_busy_time,
            station2_busy_time=stats.station2_busy_time,
            station1_blocked_time=stats.station1_blocked_time,
            station1_utilization=stats.station1_busy_time / horizon if horizon else 0.0,
            station2_utilization=stats.station2_busy_time / horizon if horizon else 0.0,
        )


def simulate_line(config: LineConfig, horizon: float, seed: Optional[int] = None) -> SimulationResult:
    """Run one fresh, independently seeded engine."""
    return ProductionLine(config, seed=seed).run(horizon)

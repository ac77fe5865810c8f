"""Two-stage production line simulation package."""

import logging

from .distributions import ConstantVariates, RandomVariates, SequenceVariates, VariateConfig, VariateFactory, VariateSource
from .entities import DEFAULT_CONFIG, DEFAULT_HORIZON, Item, LineConfig
from .errors import ConfigurationError
from .monte_carlo import ReplicationResult, ReplicationSummary, run_replications, sweep_buffer
from .simulation import ProductionLine, SimulationResult, TraceEntry, simulate_line

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "ConstantVariates",
    "DEFAULT_CONFIG",
    "DEFAULT_HORIZON",
    "Item",
    "LineConfig",
    "ProductionLine",
    "RandomVariates",
    "ReplicationResult",
    "ReplicationSummary",
    "SequenceVariates",
    "SimulationResult",
    "TraceEntry",
    "VariateConfig",
    "VariateFactory",
    "VariateSource",
    "run_replications",
    "simulate_line",
    "sweep_buffer",
]

"""Shared fixtures for prodline tests."""

import pytest

from prodline import ConstantVariates, LineConfig, ProductionLine
from prodline.logging_config import disable_logging


@pytest.fixture
def smooth_config() -> LineConfig:
    """Line with no contention when every duration equals its mean."""
    return LineConfig(
        mean_arrival_time=1.0,
        mean_service_time1=0.5,
        mean_service_time2=0.25,
        buffer1_capacity=2,
        buffer2_capacity=2,
    )


@pytest.fixture
def blocking_config() -> LineConfig:
    """Slow station 2 behind a single-slot buffer: station 1 blocks repeatedly."""
    return LineConfig(
        mean_arrival_time=1.0,
        mean_service_time1=0.5,
        mean_service_time2=3.0,
        buffer1_capacity=5,
        buffer2_capacity=1,
    )


@pytest.fixture
def constant_engine_factory():
    """Build an engine driven by durations equal to their means."""

    def factory(config: LineConfig, trace: bool = False) -> ProductionLine:
        return ProductionLine(config, variates=ConstantVariates(), trace=trace)

    return factory


@pytest.fixture
def reset_logging():
    yield
    disable_logging()

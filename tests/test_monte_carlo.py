"""Tests for replications and buffer sweeps."""

import pytest

from prodline import DEFAULT_CONFIG, ConfigurationError
from prodline.monte_carlo import (
    ReplicationResult,
    ReplicationSummary,
    best_capacity,
    run_replications,
    summarize_results,
    sweep_buffer,
)
from prodline.simulation import simulate_line


class TestReplications:
    def test_seeds_are_consecutive(self):
        result = run_replications(DEFAULT_CONFIG, 100.0, 3, base_seed=10)
        assert len(result.runs) == 3
        for offset, run in enumerate(result.runs):
            assert run == simulate_line(DEFAULT_CONFIG, 100.0, seed=10 + offset)

    def test_requires_a_replication(self):
        with pytest.raises(ConfigurationError):
            run_replications(DEFAULT_CONFIG, 100.0, 0)

    def test_summary_of_single_run_has_zero_spread(self):
        result = run_replications(DEFAULT_CONFIG, 100.0, 1, base_seed=4)
        summary = ReplicationSummary.from_result(result)
        run = result.runs[0]
        assert summary.replications == 1
        assert summary.throughput_mean == run.throughput
        assert summary.throughput_std == 0.0
        assert summary.sojourn_time_std == 0.0
        assert summary.station1_utilization == run.station1_utilization
        assert summary.items_lost_mean == run.items_lost

    def test_summary_averages_runs(self):
        result = run_replications(DEFAULT_CONFIG, 200.0, 4, base_seed=1)
        summary = ReplicationSummary.from_result(result)
        expected = sum(run.station2_utilization for run in result.runs) / 4
        assert summary.station2_utilization == pytest.approx(expected)
        assert summary.throughput_std >= 0.0

    def test_summarize_results(self):
        results = [run_replications(DEFAULT_CONFIG, 50.0, 2, base_seed=seed) for seed in (1, 2)]
        assert len(summarize_results(results)) == 2

    def test_empty_result_summary(self):
        summary = ReplicationSummary.from_result(ReplicationResult(config=DEFAULT_CONFIG, horizon=10.0, runs=[]))
        assert summary.throughput_mean == 0.0
        assert summary.replications == 0


class TestBufferSweep:
    def test_sweep_keeps_capacity_order(self):
        summaries = sweep_buffer(DEFAULT_CONFIG, 1, [0, 1, 3], horizon=100.0, replications=2, base_seed=5)
        assert [summary.config.buffer2_capacity for summary in summaries] == [0, 1, 3]
        assert all(summary.config.buffer1_capacity == DEFAULT_CONFIG.buffer1_capacity for summary in summaries)

    def test_zero_buffer2_processes_nothing(self):
        (summary,) = sweep_buffer(DEFAULT_CONFIG, 1, [0], horizon=100.0, replications=2, base_seed=5)
        assert summary.throughput_mean == 0.0
        assert summary.station2_utilization == 0.0

    def test_best_capacity(self):
        summaries = sweep_buffer(DEFAULT_CONFIG, 1, [0, 2], horizon=300.0, replications=2, base_seed=8)
        assert best_capacity(summaries) == 2

    def test_best_capacity_prefers_smallest_on_tie(self):
        summaries = sweep_buffer(DEFAULT_CONFIG, 1, [0, 0], horizon=10.0, base_seed=1)
        summaries[1].config = DEFAULT_CONFIG.with_buffer_override(1, 5)
        assert best_capacity(summaries) == 0

    def test_best_capacity_empty(self):
        assert best_capacity([]) is None

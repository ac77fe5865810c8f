"""Command-line application for the two-stage production line simulator."""
from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional, Sequence

from .entities import DEFAULT_CONFIG, DEFAULT_HORIZON, LineConfig
from .errors import ConfigurationError
from .logging_config import configure_from_env, enable_console_logging
from .monte_carlo import ReplicationSummary, best_capacity, run_replications, sweep_buffer
from .simulation import SimulationResult, simulate_line

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prodline",
        description="Simulate a two-station production line with finite buffers and blocking.",
    )
    parser.add_argument("--arrival", type=float, default=DEFAULT_CONFIG.mean_arrival_time, help="Mean inter-arrival time")
    parser.add_argument("--service1", type=float, default=DEFAULT_CONFIG.mean_service_time1, help="Mean service time at station 1")
    parser.add_argument("--service2", type=float, default=DEFAULT_CONFIG.mean_service_time2, help="Mean service time at station 2")
    parser.add_argument("--buffer1", type=int, default=DEFAULT_CONFIG.buffer1_capacity, help="Buffer 1 capacity")
    parser.add_argument("--buffer2", type=int, default=DEFAULT_CONFIG.buffer2_capacity, help="Buffer 2 capacity")
    parser.add_argument("--horizon", type=float, default=DEFAULT_HORIZON, help="Simulated time per run")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed (blank for random)")
    parser.add_argument("--replications", type=int, default=1, help="Independent runs per configuration")
    parser.add_argument(
        "--sweep",
        type=int,
        nargs=2,
        metavar=("MIN", "MAX"),
        default=None,
        help="Sweep buffer 2 capacity over the inclusive range MIN..MAX",
    )
    parser.add_argument("--plot", default=None, metavar="PATH", help="Write a sweep chart to PATH (requires --sweep)")
    parser.add_argument("--log-level", default=None, help="Enable console logging at this level")
    return parser


def _format_value(value: float, unit: str = "") -> str:
    if math.isnan(value) or math.isinf(value):
        return "-"
    return f"{value:8.3f}{unit}"


def format_run(result: SimulationResult) -> str:
    lines = [
        "=== Simulation results ===",
        f"Line: {result.config.describe()}",
        f"Horizon:              {_format_value(result.horizon)}",
        f"Items arrived:        {result.items_arrived:8d}",
        f"Items processed:      {result.items_processed:8d}",
        f"Items lost:           {result.items_lost:8d}",
        f"Items in system:      {result.items_in_system:8d}",
        f"Avg sojourn time:     {_format_value(result.average_sojourn_time)}",
        f"Throughput:           {_format_value(result.throughput)}",
    ]
    header = f"{'Station':<20}{'Util%':>10}{'Blocked%':>12}"
    lines += [header, "-" * len(header)]
    lines.append(f"{'Station 1':<20}{result.station1_utilization * 100:10.1f}{result.station1_blocked_ratio * 100:12.1f}")
    lines.append(f"{'Station 2':<20}{result.station2_utilization * 100:10.1f}{0.0:12.1f}")
    return "\n".join(lines)


def format_summary(summary: ReplicationSummary) -> str:
    lines = [
        f"=== {summary.replications} replications ===",
        f"Line: {summary.config.describe()}",
        f"Throughput:       {_format_value(summary.throughput_mean)} ± {_format_value(summary.throughput_std)}",
        f"Avg sojourn time: {_format_value(summary.sojourn_time_mean)} ± {_format_value(summary.sojourn_time_std)}",
        f"Items lost (avg): {_format_value(summary.items_lost_mean)}",
    ]
    header = f"{'Station':<20}{'Util%':>10}{'Blocked%':>12}"
    lines += [header, "-" * len(header)]
    lines.append(f"{'Station 1':<20}{summary.station1_utilization * 100:10.1f}{summary.station1_blocked * 100:12.1f}")
    lines.append(f"{'Station 2':<20}{summary.station2_utilization * 100:10.1f}{0.0:12.1f}")
    return "\n".join(lines)


def format_sweep(summaries: Sequence[ReplicationSummary]) -> str:
    header = f"{'B2 cap':>8}{'Throughput':>14}{'Std':>10}{'Sojourn':>10}{'Util1%':>9}{'Util2%':>9}{'Blocked%':>10}"
    lines = ["=== Buffer 2 capacity sweep ===", header, "-" * len(header)]
    for summary in summaries:
        lines.append(
            f"{summary.config.buffer2_capacity:8d}{summary.throughput_mean:14.4f}{summary.throughput_std:10.4f}"
            f"{summary.sojourn_time_mean:10.3f}{summary.station1_utilization * 100:9.1f}"
            f"{summary.station2_utilization * 100:9.1f}{summary.station1_blocked * 100:10.1f}"
        )
    best = best_capacity(summaries)
    if best is not None:
        lines.append(f"Suggested buffer 2 capacity: {best}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.plot and not args.sweep:
        parser.error("--plot requires --sweep")

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    try:
        config = LineConfig(
            mean_arrival_time=args.arrival,
            mean_service_time1=args.service1,
            mean_service_time2=args.service2,
            buffer1_capacity=args.buffer1,
            buffer2_capacity=args.buffer2,
        )
        if args.replications < 1:
            raise ConfigurationError("At least one replication is required.")
        if args.sweep:
            low, high = args.sweep
            if low < 0 or high < low:
                raise ConfigurationError(f"Invalid sweep range {low}..{high}.")
            summaries = sweep_buffer(
                config,
                index=1,
                capacities=range(low, high + 1),
                horizon=args.horizon,
                replications=args.replications,
                base_seed=args.seed,
            )
            print(format_sweep(summaries))
            if args.plot:
                from .charts import plot_sweep

                plot_sweep(summaries, index=1, path=args.plot)
                print(f"Chart written to {args.plot}")
        elif args.replications > 1:
            result = run_replications(config, args.horizon, args.replications, base_seed=args.seed)
            print(format_summary(ReplicationSummary.from_result(result)))
        else:
            print(format_run(simulate_line(config, args.horizon, seed=args.seed)))
    except ConfigurationError as exc:
        logger.debug("Rejected configuration: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Matplotlib charts for buffer capacity studies."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from .monte_carlo import ReplicationSummary


def plot_sweep(
    summaries: Sequence[ReplicationSummary],
    index: int = 1,
    path: Optional[Union[str, Path]] = None,
) -> Figure:
    """Throughput bars per buffer capacity, with station utilizations on a second axis."""
    figure = Figure(figsize=(6.5, 4.0), dpi=100)
    FigureCanvasAgg(figure)
    throughput_ax = figure.add_subplot(111)
    throughput_ax.set_xlabel(f"Buffer {index + 1} capacity")
    throughput_ax.set_ylabel("Throughput (items/time unit)")

    if summaries:
        capacities = [summary.config.capacity(index) for summary in summaries]
        values = [summary.throughput_mean for summary in summaries]
        errors = [summary.throughput_std for summary in summaries]
        positions = range(len(capacities))
        bars = throughput_ax.bar(positions, values, yerr=errors, capsize=6, color="#4C78A8", label="Throughput")
        throughput_ax.set_xticks(list(positions))
        throughput_ax.set_xticklabels([str(capacity) for capacity in capacities])
        throughput_ax.yaxis.set_major_locator(MaxNLocator(5))
        for bar, value in zip(bars, values):
            throughput_ax.annotate(
                f"{value:.2f}",
                xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                xytext=(0, 6),
                textcoords="offset points",
                ha="center",
                va="bottom",
                fontsize=9,
            )

        utilization_ax = throughput_ax.twinx()
        utilization_ax.plot(
            list(positions),
            [summary.station1_utilization * 100 for summary in summaries],
            marker="o",
            color="#F58518",
            label="Station 1 util%",
        )
        utilization_ax.plot(
            list(positions),
            [summary.station2_utilization * 100 for summary in summaries],
            marker="s",
            color="#54A24B",
            label="Station 2 util%",
        )
        utilization_ax.set_ylim(0, 105)
        utilization_ax.set_ylabel("Utilization (%)")
        utilization_ax.legend(loc="lower right", fontsize=8)
    else:
        throughput_ax.text(0.5, 0.5, "No sweep results to display", ha="center", va="center")

    throughput_ax.margins(x=0.05)
    figure.tight_layout()
    if path is not None:
        figure.savefig(str(path))
    return figure

"""Visualization utilities for simulation results."""

from pathlib import Path
from typing import Dict

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from ..statistics.time_based_metric import TimeBasedMetric

sns.set_style("whitegrid")
sns.set_palette("husl")


def plot_results(summary: Dict, metrics: Dict[str, TimeBasedMetric], output_dir: Path) -> None:
    """Generate all visualization plots.

    Args:
        summary: Summary dictionary of a run
        metrics: Named time-based metrics to plot
        output_dir: Directory to save plots
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    for name, metric in metrics.items():
        if metric.is_history_enabled:
            plot_occupancy_timeline(metric, output_dir / f"{name}_timeline.png", title=name)
        plot_count_histogram(metric, output_dir / f"{name}_histogram.png", title=name)

    if summary:
        plot_summary(summary, output_dir / "summary.png")


def plot_occupancy_timeline(metric: TimeBasedMetric, output_path: Path, title: str = "Occupancy") -> None:
    """Plot a metric's recorded history as a step line.

    Args:
        metric: Metric with history enabled
        output_path: Output file path
        title: Plot title
    """
    frame = metric.history_frame()

    fig, ax = plt.subplots(figsize=(12, 4))
    if not frame.empty:
        ax.step(frame['time'], frame['count'], where='post', color='steelblue')
        ax.axhline(metric.average_count, color='darkorange', linestyle='--',
                   label=f"Time average {metric.average_count:.2f}")
        ax.legend()
    ax.set_xlabel('Simulation time')
    ax.set_ylabel('Count')
    ax.set_title(f'{title} over time')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def plot_count_histogram(metric: TimeBasedMetric, output_path: Path, width: float = 1.0,
                         title: str = "Occupancy") -> None:
    """Plot the share of time spent at each count level.

    Args:
        metric: Metric to summarize
        output_path: Output file path
        width: Count interval width
        title: Plot title
    """
    bins = metric.generate_histogram(width)

    fig, ax = plt.subplots(figsize=(8, 5))
    if bins:
        ax.bar([b.count_lower_bound for b in bins], [b.probability for b in bins],
               width=width * 0.9, align='edge', color='steelblue')
        ax2 = ax.twinx()
        ax2.plot([b.count_lower_bound + width / 2 for b in bins],
                 [b.cumulative_probability for b in bins], color='darkorange', marker='o')
        ax2.set_ylim(0, 1.05)
        ax2.set_ylabel('Cumulative probability')
    ax.set_xlabel('Count')
    ax.set_ylabel('Share of time')
    ax.set_title(f'{title} distribution by time')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def plot_summary(summary: Dict, output_path: Path) -> None:
    """Bar chart of the numeric counters in a run summary."""
    counters = {k: v for k, v in summary.items()
                if k in ('generated', 'entered', 'balked', 'lost', 'completed')}

    fig, ax = plt.subplots(figsize=(8, 5))
    sns.barplot(x=list(counters.keys()), y=list(counters.values()), ax=ax)
    ax.set_ylabel('Loads')
    ax.set_title('Load counts')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

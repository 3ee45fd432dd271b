"""Bar charts of what left the belt."""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Union

from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from .monte_carlo import MonteCarloSummary

COMPONENT_COLOR = "#4C78A8"
PRODUCT_COLOR = "#F58518"


def build_counts_figure(summaries: Sequence[MonteCarloSummary]) -> Figure:
    """One bar per line and kind: mean exit count with a standard deviation whisker."""
    figure = Figure(figsize=(5.5, 3.8), dpi=100)
    ax = figure.add_subplot(111)
    names: List[str] = []
    values: List[float] = []
    errors: List[float] = []
    colors: List[str] = []
    for summary in summaries:
        prefix = f"{summary.line_name}: " if len(summaries) > 1 else ""
        for kind, value in summary.count_mean.items():
            names.append(f"{prefix}{kind}")
            values.append(value)
            errors.append(summary.count_std.get(kind, 0.0))
            colors.append(PRODUCT_COLOR if kind in summary.product_names else COMPONENT_COLOR)

    if names:
        indices = range(len(names))
        bars = ax.bar(indices, values, yerr=errors, capsize=6, color=colors)
        ax.set_xticks(indices)
        ax.set_xticklabels(names, rotation=15, ha="right")
        ax.set_ylabel("Items off the belt")
        ax.yaxis.set_major_locator(MaxNLocator(5, integer=True))
        for bar, value in zip(bars, values):
            height = bar.get_height()
            ax.annotate(
                f"{value:.1f}",
                xy=(bar.get_x() + bar.get_width() / 2, height),
                xytext=(0, 6),
                textcoords="offset points",
                ha="center",
                va="bottom",
                fontsize=9,
            )
    else:
        ax.text(0.5, 0.5, "Run a simulation to view results", ha="center", va="center")
    ax.margins(x=0.05)
    figure.tight_layout()
    return figure


def save_counts_chart(summaries: Sequence[MonteCarloSummary], path: Union[str, Path]) -> Path:
    target = Path(path)
    build_counts_figure(summaries).savefig(target)
    return target

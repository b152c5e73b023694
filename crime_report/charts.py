"""
Charts for the crime report (matplotlib).
Monthly totals, type totals, and monthly lines for low/high frequency type subsets.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt

from .crime_table import MONTH_LABELS, CrimeTable

logger = logging.getLogger(__name__)

BAR_COLOR = "lightblue"
LABEL_COLOR = "#666666"  # grey40


def _apply_theme(ax, grid_axis: str = "y"):
    """White background, no panel border or ticks, major grid on one axis only."""
    for spine in ax.spines.values():
        spine.set_visible(False)
    ax.tick_params(length=0)
    ax.grid(False)
    ax.grid(True, axis=grid_axis, which="major", linewidth=0.5, color="#d9d9d9")
    ax.set_axisbelow(True)
    ax.xaxis.label.set_color(LABEL_COLOR)
    ax.yaxis.label.set_color(LABEL_COLOR)
    ax.title.set_y(1.02)


def plot_monthly_totals(table: CrimeTable, title: str = "Incidents by Month"):
    counts = (
        table.tally_by_month()
        .assign(monthRC=lambda d: d["monthRC"].astype(str))
        .set_index("monthRC")["count"]
        .reindex(MONTH_LABELS, fill_value=0)
    )
    fig, ax = plt.subplots(figsize=(9, 4.5))
    ax.bar(counts.index, counts.values, color=BAR_COLOR, width=0.75)
    ax.set_xlabel("Month")
    ax.set_ylabel("Incidents")
    ax.set_title(title)
    _apply_theme(ax, grid_axis="y")
    fig.tight_layout()
    return fig


def plot_type_totals(table: CrimeTable, title: str = "Incidents by Type"):
    """Horizontal bars in level order, so the most frequent type sits at the top."""
    if not table.has_type_levels:
        table = table.recode_type()
    tally = table.tally_by_type()
    counts = (
        tally.assign(type=tally["type"].astype(str))
        .set_index("type")["count"]
        .reindex(table.type_levels, fill_value=0)
    )
    fig, ax = plt.subplots(figsize=(9, 4.5))
    ax.barh(counts.index, counts.values, color=BAR_COLOR)
    ax.set_xlabel("Incidents")
    ax.set_ylabel("Type")
    ax.set_title(title)
    _apply_theme(ax, grid_axis="x")
    fig.tight_layout()
    return fig


def plot_monthly_by_type(table: CrimeTable, title: str = "Monthly Incidents by Type"):
    """One line per type across Jan..Dec."""
    pivot = table.monthly_counts_by_type()
    fig, ax = plt.subplots(figsize=(10, 4.5))
    for crime_type in pivot.columns:
        ax.plot(pivot.index, pivot[crime_type].values, label=crime_type, linewidth=2)
    ax.set_xlabel("Month")
    ax.set_ylabel("Incidents")
    ax.set_title(title)
    if len(pivot.columns):
        ax.legend(title="Type", loc="center left", bbox_to_anchor=(1.0, 0.5), frameon=False)
    _apply_theme(ax, grid_axis="y")
    fig.tight_layout()
    return fig


def save_report_charts(
    table: CrimeTable, fig_dir: Path | str, split: Optional[int] = None
) -> List[Path]:
    """Render the four report charts as PNGs into fig_dir; returns the written paths."""
    fig_dir = Path(fig_dir)
    fig_dir.mkdir(parents=True, exist_ok=True)
    if not table.has_type_levels:
        table = table.recode_type()
    low, high = table.split_by_type_rank(split)

    charts = [
        ("01_monthly_totals.png", plot_monthly_totals(table)),
        ("02_type_totals.png", plot_type_totals(table)),
        ("03_low_frequency_types.png",
         plot_monthly_by_type(low, title="Monthly Incidents: Less Frequent Types")),
        ("04_high_frequency_types.png",
         plot_monthly_by_type(high, title="Monthly Incidents: More Frequent Types")),
    ]

    paths = []
    for name, fig in charts:
        path = fig_dir / name
        fig.savefig(path, dpi=160, bbox_inches="tight")
        plt.close(fig)
        logger.info("Saved chart: %s", path)
        paths.append(path)
    return paths


__all__ = [
    "plot_monthly_totals",
    "plot_type_totals",
    "plot_monthly_by_type",
    "save_report_charts",
]

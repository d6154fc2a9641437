"""Reporting nodes: ranked impact tables → horizontal bar charts.

The figures are returned to Kedro, which saves them through the catalog
(``matplotlib.MatplotlibWriter``), so these nodes never touch the disk.
"""

from __future__ import annotations

import logging

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from storm_impact.pipelines.impact_ranking.nodes import category_labels

matplotlib.use("Agg")  # non-interactive backend for CI / headless runs

logger = logging.getLogger(__name__)

_HEALTH_SERIES: dict[str, str] = {
    "mean_fatalities": "Fatalities",
    "mean_injuries": "Injuries",
}

_ECONOMIC_SERIES: dict[str, str] = {
    "mean_property_damage": "Property damage",
    "mean_crop_damage": "Crop damage",
}


def _grouped_barh(
    ranked: pd.DataFrame,
    series: dict[str, str],
    title: str,
    xlabel: str,
    figsize: list[float],
) -> plt.Figure:
    """Grouped horizontal bars, top-ranked category at the top."""
    labels = category_labels(ranked)
    # Rows in label order: reversed ranking
    rows = ranked.iloc[::-1]

    fig, ax = plt.subplots(figsize=tuple(figsize))
    if ranked.empty:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
    else:
        positions = np.arange(len(labels))
        bar_height = 0.8 / len(series)
        for i, (column, legend) in enumerate(series.items()):
            ax.barh(
                positions + i * bar_height,
                rows[column].to_numpy(),
                height=bar_height,
                label=legend,
            )
        ax.set_yticks(positions + bar_height * (len(series) - 1) / 2)
        ax.set_yticklabels(labels)
        ax.legend(loc="lower right")

    ax.set_xlabel(xlabel)
    ax.set_title(title)
    fig.tight_layout()
    return fig


# ── Node 1 ───────────────────────────────────────────────────────
def select_top_categories(ranked_impact: pd.DataFrame, top_n: int | None) -> pd.DataFrame:
    """Keep the ``top_n`` highest-ranked categories (all if ``top_n`` is None)."""
    if top_n is None:
        return ranked_impact.copy()
    if top_n < 1:
        raise ValueError(f"top_n must be at least 1, got {top_n}")
    return ranked_impact.head(top_n).reset_index(drop=True)


# ── Node 2 ───────────────────────────────────────────────────────
def plot_health_impact(health_impact_top: pd.DataFrame, figsize: list[float]) -> plt.Figure:
    """Mean fatalities and injuries per event, by category."""
    fig = _grouped_barh(
        health_impact_top,
        _HEALTH_SERIES,
        title="Mean casualties per event by event type",
        xlabel="People per event",
        figsize=figsize,
    )
    logger.info("Health chart drawn for %d categories", len(health_impact_top))
    return fig


# ── Node 3 ───────────────────────────────────────────────────────
def plot_economic_impact(economic_impact_top: pd.DataFrame, figsize: list[float]) -> plt.Figure:
    """Mean property and crop damage per event, by category."""
    fig = _grouped_barh(
        economic_impact_top,
        _ECONOMIC_SERIES,
        title="Mean economic damage per event by event type",
        xlabel="Damage per event (USD)",
        figsize=figsize,
    )
    logger.info("Economic chart drawn for %d categories", len(economic_impact_top))
    return fig

"""Aggregation and ranking nodes for per-category impact tables.

Two independent tables come out of the classified events:

    health   → mean fatalities and mean injuries per category
    economic → mean property and mean crop damage per category

Only categories with at least one event appear; there are no zero-filled
rows.  Each table is then put into presentation order, and the reverse of
that order is exposed as the label sequence a horizontal bar chart needs
to show the most severe category at the top.
"""

from __future__ import annotations

import logging

import pandas as pd

from storm_impact.models import ECONOMIC_COLUMNS, HEALTH_COLUMNS

logger = logging.getLogger(__name__)


def _mean_by_category(
    classified: pd.DataFrame,
    columns: list[str],
    metrics: dict[str, str],
) -> pd.DataFrame:
    """Mean of each source column per category, named per ``metrics``."""
    if classified.empty:
        return pd.DataFrame(
            {col: pd.Series(dtype="object" if col == "category" else "float64")
             for col in columns}
        )

    values = classified[["category", *metrics.values()]].copy()
    values[list(metrics.values())] = values[list(metrics.values())].astype(float)

    aggregated = values.groupby("category", as_index=False).agg(
        **{name: (source, "mean") for name, source in metrics.items()}
    )
    return aggregated[columns]


# ── Node 1 ───────────────────────────────────────────────────────
def aggregate_health_impact(storm_events_classified: pd.DataFrame) -> pd.DataFrame:
    """Mean fatalities and injuries per category.

    Args:
        storm_events_classified: One row per (event, category).

    Returns:
        Health table with HEALTH_COLUMNS, one row per category present,
        sorted by category name.
    """
    health = _mean_by_category(
        storm_events_classified,
        HEALTH_COLUMNS,
        {"mean_fatalities": "fatalities", "mean_injuries": "injuries"},
    )
    logger.info("Health table: %d categories", len(health))
    return health


# ── Node 2 ───────────────────────────────────────────────────────
def aggregate_economic_impact(storm_events_classified: pd.DataFrame) -> pd.DataFrame:
    """Mean property and crop damage (dollars) per category.

    Args:
        storm_events_classified: One row per (event, category).

    Returns:
        Economic table with ECONOMIC_COLUMNS, one row per category present,
        sorted by category name.
    """
    economic = _mean_by_category(
        storm_events_classified,
        ECONOMIC_COLUMNS,
        {
            "mean_property_damage": "property_damage",
            "mean_crop_damage": "crop_damage",
        },
    )
    logger.info("Economic table: %d categories", len(economic))
    return economic


# ── Node 3 ───────────────────────────────────────────────────────
def rank_health_impact(health_impact: pd.DataFrame) -> pd.DataFrame:
    """Order by mean fatalities, then mean injuries, both descending.

    Categories equal on both keep their incoming order (stable sort).
    """
    ranked = health_impact.sort_values(
        ["mean_fatalities", "mean_injuries"],
        ascending=False,
        kind="mergesort",
    ).reset_index(drop=True)

    if not ranked.empty:
        logger.info(
            "Most harmful to health: %s (%.3f deaths, %.3f injuries per event)",
            ranked.loc[0, "category"],
            ranked.loc[0, "mean_fatalities"],
            ranked.loc[0, "mean_injuries"],
        )
    return ranked


# ── Node 4 ───────────────────────────────────────────────────────
def rank_economic_impact(economic_impact: pd.DataFrame) -> pd.DataFrame:
    """Order by mean property + mean crop damage, descending.

    The combined damage is only a sort key; the output keeps the two
    separate mean columns.
    """
    total = economic_impact["mean_property_damage"] + economic_impact["mean_crop_damage"]
    order = total.sort_values(ascending=False, kind="mergesort").index
    ranked = economic_impact.loc[order].reset_index(drop=True)

    if not ranked.empty:
        logger.info(
            "Most costly per event: %s ($%s property, $%s crops)",
            ranked.loc[0, "category"],
            f"{ranked.loc[0, 'mean_property_damage']:,.0f}",
            f"{ranked.loc[0, 'mean_crop_damage']:,.0f}",
        )
    return ranked


# ── Node 5 ───────────────────────────────────────────────────────
def category_labels(ranked_impact: pd.DataFrame) -> list[str]:
    """Category labels in reverse ranking order.

    matplotlib's barh draws the first label at the bottom, so reversing
    puts the top-ranked category at the top of the chart.
    """
    return ranked_impact["category"].tolist()[::-1]

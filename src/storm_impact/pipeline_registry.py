"""Project pipelines."""

from __future__ import annotations

from kedro.pipeline import Pipeline

from storm_impact.pipelines import (
    data_processing,
    event_classification,
    impact_ranking,
    reporting,
)


def register_pipelines() -> dict[str, Pipeline]:
    """Register the project's pipelines.

    ``__default__`` runs everything: raw CSV → normalized events →
    categorized events → ranked tables → charts.

    Returns:
        A mapping from pipeline names to ``Pipeline`` objects.
    """
    pipelines = {
        "data_processing": data_processing.create_pipeline(),
        "event_classification": event_classification.create_pipeline(),
        "impact_ranking": impact_ranking.create_pipeline(),
        "reporting": reporting.create_pipeline(),
    }
    pipelines["__default__"] = sum(pipelines.values(), Pipeline([]))
    return pipelines

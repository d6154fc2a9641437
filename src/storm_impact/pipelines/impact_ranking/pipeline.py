"""Impact ranking pipeline — categorized events → ranked mean-impact tables.

Node dependency graph:
    storm_events_classified -> [aggregate_health_impact]   -> health_impact
    storm_events_classified -> [aggregate_economic_impact] -> economic_impact
    health_impact   -> [rank_health_impact]   -> health_impact_ranked
    economic_impact -> [rank_economic_impact] -> economic_impact_ranked
    *_ranked -> [category_labels] -> *_category_labels

The health and economic branches are independent of each other.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    aggregate_economic_impact,
    aggregate_health_impact,
    category_labels,
    rank_economic_impact,
    rank_health_impact,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the impact_ranking pipeline."""
    return pipeline(
        [
            node(
                func=aggregate_health_impact,
                inputs="storm_events_classified",
                outputs="health_impact",
                name="aggregate_health_impact",
            ),
            node(
                func=aggregate_economic_impact,
                inputs="storm_events_classified",
                outputs="economic_impact",
                name="aggregate_economic_impact",
            ),
            node(
                func=rank_health_impact,
                inputs="health_impact",
                outputs="health_impact_ranked",
                name="rank_health_impact",
            ),
            node(
                func=rank_economic_impact,
                inputs="economic_impact",
                outputs="economic_impact_ranked",
                name="rank_economic_impact",
            ),
            node(
                func=category_labels,
                inputs="health_impact_ranked",
                outputs="health_category_labels",
                name="label_health_categories",
            ),
            node(
                func=category_labels,
                inputs="economic_impact_ranked",
                outputs="economic_category_labels",
                name="label_economic_categories",
            ),
        ]
    )

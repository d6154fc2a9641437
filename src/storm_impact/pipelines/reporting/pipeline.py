"""Reporting pipeline — ranked impact tables → PNG charts.

Node chain (per table):
    *_impact_ranked → [select_top_categories] → *_impact_top
    *_impact_top → [plot_*_impact] → *_impact_chart
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import plot_economic_impact, plot_health_impact, select_top_categories


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the reporting pipeline."""
    return pipeline(
        [
            node(
                func=select_top_categories,
                inputs=["health_impact_ranked", "params:reporting.top_n"],
                outputs="health_impact_top",
                name="select_top_health_categories",
            ),
            node(
                func=select_top_categories,
                inputs=["economic_impact_ranked", "params:reporting.top_n"],
                outputs="economic_impact_top",
                name="select_top_economic_categories",
            ),
            node(
                func=plot_health_impact,
                inputs=["health_impact_top", "params:reporting.figsize"],
                outputs="health_impact_chart",
                name="plot_health_impact",
            ),
            node(
                func=plot_economic_impact,
                inputs=["economic_impact_top", "params:reporting.figsize"],
                outputs="economic_impact_chart",
                name="plot_economic_impact",
            ),
        ]
    )

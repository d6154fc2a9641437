"""Classification pipeline — normalized events → categorized events.

Node dependency graph:
    params:event_taxonomy -> [build_event_taxonomy] -> event_taxonomy
    storm_events_normalized, event_taxonomy
        -> [classify_events] -> storm_events_classified, classification_report
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import build_event_taxonomy, classify_events


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the event_classification pipeline."""
    return pipeline(
        [
            node(
                func=build_event_taxonomy,
                inputs="params:event_taxonomy",
                outputs="event_taxonomy",
                name="build_event_taxonomy",
            ),
            node(
                func=classify_events,
                inputs=["storm_events_normalized", "event_taxonomy"],
                outputs=["storm_events_classified", "classification_report"],
                name="classify_events",
            ),
        ]
    )

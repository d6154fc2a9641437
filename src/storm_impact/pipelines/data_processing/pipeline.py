"""Raw → normalized pipeline for NOAA storm data.

This pipeline reads the raw storm-data CSV, applies four sequential
cleaning nodes, and outputs one row per usable event with damage in
dollars, plus a JSON report of what was excluded and why.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    build_normalization_report,
    drop_summary_records,
    normalize_text_fields,
    resolve_damage_units,
    select_raw_columns,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the data_processing pipeline.

    Node chain:
        raw CSV → select columns → normalize text → drop summaries
        → resolve damage units → normalized parquet (+ report)
    """
    return pipeline(
        [
            node(
                func=select_raw_columns,
                inputs="storm_data_raw",
                outputs="storm_data_selected",
                name="select_raw_columns",
            ),
            node(
                func=normalize_text_fields,
                inputs="storm_data_selected",
                outputs="storm_data_text_normalized",
                name="normalize_text_fields",
            ),
            node(
                func=drop_summary_records,
                inputs="storm_data_text_normalized",
                outputs=["storm_data_events_only", "summary_excluded"],
                name="drop_summary_records",
            ),
            node(
                func=resolve_damage_units,
                inputs="storm_data_events_only",
                outputs=["storm_events_normalized", "unit_exclusions"],
                name="resolve_damage_units",
            ),
            node(
                func=build_normalization_report,
                inputs=[
                    "storm_data_selected",
                    "summary_excluded",
                    "unit_exclusions",
                    "storm_events_normalized",
                ],
                outputs="normalization_report",
                name="build_normalization_report",
            ),
        ]
    )

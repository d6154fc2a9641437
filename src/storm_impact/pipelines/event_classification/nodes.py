"""Classification nodes: normalized events → (event, category) rows.

Every event description is tested against every taxonomy rule.  An event
that matches K rules comes out as K rows, one per category; an event that
matches nothing is left out of the analysis.  Duplicating multi-category
events does not bias any category because downstream we only compute
per-category means.

The taxonomy is always passed in explicitly (built from parameters.yml by
``build_event_taxonomy``), never read from module state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pandas as pd

from storm_impact.models import (
    CLASSIFIED_COLUMNS,
    ClassifiedRecord,
    NormalizedRecord,
)
from storm_impact.taxonomy import Taxonomy, build_taxonomy, category_names

logger = logging.getLogger(__name__)

# How many unmatched descriptions to show in the log
_UNMATCHED_SAMPLE_SIZE = 10


def classify_record(
    record: NormalizedRecord,
    taxonomy: Taxonomy,
) -> Iterator[ClassifiedRecord]:
    """Yield one ClassifiedRecord per taxonomy rule the record matches.

    Rules are tried in taxonomy order; nothing is yielded for an event the
    taxonomy does not cover.
    """
    for rule in taxonomy:
        if rule.matches(record.event):
            yield ClassifiedRecord(record=record, category=rule.name)


# ── Node 1 ───────────────────────────────────────────────────────
def build_event_taxonomy(rules: Any) -> Taxonomy:
    """Turn the ``event_taxonomy`` parameter into an immutable taxonomy."""
    taxonomy = build_taxonomy(rules)
    logger.info(
        "Event taxonomy loaded: %d categories (%s)",
        len(taxonomy),
        ", ".join(category_names(taxonomy)),
    )
    return taxonomy


# ── Node 2 ───────────────────────────────────────────────────────
def classify_events(
    storm_events_normalized: pd.DataFrame,
    event_taxonomy: Taxonomy,
) -> tuple[pd.DataFrame, dict[str, Any]]:
    """Fan each normalized event out into one row per matching category.

    Output rows are ordered by input row, then by taxonomy order, so the
    result is reproducible for a given input and taxonomy.

    Args:
        storm_events_normalized: Normalized events (NORMALIZED_COLUMNS).
        event_taxonomy: Rules to test every event against.

    Returns:
        DataFrame with CLASSIFIED_COLUMNS, and a classification report with
        per-category match counts and the number of unmatched events.
    """
    events = storm_events_normalized.reset_index(drop=True)

    pieces: list[pd.DataFrame] = []
    match_counts: dict[str, int] = {}
    matched_any = pd.Series(False, index=events.index)
    n_matches = pd.Series(0, index=events.index)

    for rule_position, rule in enumerate(event_taxonomy):
        mask = events["event"].str.contains(rule.pattern, case=False, regex=True)
        match_counts[rule.name] = int(mask.sum())
        matched_any |= mask
        n_matches += mask.astype(int)

        piece = events.loc[mask].copy()
        piece["category"] = rule.name
        piece["_row"] = piece.index
        piece["_rule"] = rule_position
        pieces.append(piece)

    if pieces:
        classified = pd.concat(pieces, ignore_index=True)
        classified = classified.sort_values(["_row", "_rule"], kind="mergesort")
        classified = classified[CLASSIFIED_COLUMNS].reset_index(drop=True)
    else:
        classified = pd.DataFrame(columns=CLASSIFIED_COLUMNS)

    unmatched = events.loc[~matched_any, "event"]
    if len(unmatched) > 0:
        top_unmatched = unmatched.value_counts().head(_UNMATCHED_SAMPLE_SIZE)
        logger.warning(
            "%s of %s events matched no category and were left out. "
            "Most common: %s",
            f"{len(unmatched):,}",
            f"{len(events):,}",
            top_unmatched.to_dict(),
        )

    report = {
        "records_in": len(events),
        "records_unmatched": int(len(unmatched)),
        "records_multi_category": int((n_matches > 1).sum()),
        "rows_out": len(classified),
        "matches_per_category": match_counts,
    }

    logger.info(
        "Classified %s events into %s (event, category) rows "
        "(%s in more than one category)",
        f"{len(events):,}",
        f"{len(classified):,}",
        f"{report['records_multi_category']:,}",
    )
    return classified, report

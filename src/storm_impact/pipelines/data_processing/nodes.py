"""Raw → normalized transformation nodes for NOAA storm data.

Each function is a Kedro node: pure input → output, no side effects.
Together they form the data_processing pipeline that takes the raw
storm-data CSV and produces one clean row per usable event, with damage
expressed in dollars and no unit tokens left over.

Rows are dropped, never raised on, when their content is unusable:
    - EVTYPE contains "summary" (period summaries, not events)
    - a damage unit token outside {"", "k", "m", "b"}
    - a positive damage magnitude with no unit (cannot be scaled)

A missing column is a different matter — that is a broken input file, and
``select_raw_columns`` raises.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

import numpy as np
import pandas as pd

from storm_impact.models import (
    NORMALIZED_COLUMNS,
    RAW_COLUMNS,
    NormalizedRecord,
    RawRecord,
)

logger = logging.getLogger(__name__)

# ── Damage unit tokens (already lowercased) ─────────────────────
_UNIT_MULTIPLIERS: dict[str, float] = {
    "k": 1_000.0,
    "m": 1_000_000.0,
    "b": 1_000_000_000.0,
}

_SUMMARY_MARKER = "summary"

# (magnitude column, unit column, output column)
_DAMAGE_FIELDS: list[tuple[str, str, str]] = [
    ("propdmg", "propdmgexp", "property_damage"),
    ("cropdmg", "cropdmgexp", "crop_damage"),
]


class UnitStatus(enum.Enum):
    """Outcome of looking up a damage unit token."""

    RECOGNIZED = "recognized"
    EMPTY = "empty"
    INVALID = "invalid"


def resolve_unit(token: str) -> tuple[UnitStatus, float]:
    """Map a unit token to its status and dollar multiplier.

    The token is case-folded and stripped first, so "K", " k" and "k" are
    the same unit.

    Examples:
        "K" → (RECOGNIZED, 1000.0)
        ""  → (EMPTY, 0.0)
        "+" → (INVALID, 0.0)
    """
    text = str(token).strip().lower()
    if text == "":
        return UnitStatus.EMPTY, 0.0
    if text in _UNIT_MULTIPLIERS:
        return UnitStatus.RECOGNIZED, _UNIT_MULTIPLIERS[text]
    return UnitStatus.INVALID, 0.0


def _scale_damage(magnitude: float, token: str) -> float | None:
    """Dollar damage for one magnitude/unit pair, or None if unusable."""
    status, multiplier = resolve_unit(token)
    if status is UnitStatus.INVALID:
        return None
    if status is UnitStatus.EMPTY and magnitude > 0:
        return None
    return magnitude * multiplier


def normalize_record(raw: RawRecord) -> NormalizedRecord | None:
    """Normalize a single raw record, or return None if it must be excluded.

    This is the record-at-a-time version of the pipeline below; both apply
    exactly the same rules.
    """
    event = raw.evtype.strip().lower()
    if _SUMMARY_MARKER in event:
        return None

    property_damage = _scale_damage(raw.propdmg, raw.propdmgexp)
    crop_damage = _scale_damage(raw.cropdmg, raw.cropdmgexp)
    if property_damage is None or crop_damage is None:
        return None

    return NormalizedRecord(
        event=event,
        fatalities=raw.fatalities,
        injuries=raw.injuries,
        property_damage=property_damage,
        crop_damage=crop_damage,
    )


# ── Node 1 ───────────────────────────────────────────────────────
def select_raw_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep only the seven columns the analysis uses.

    The raw file has 37 columns (dates, locations, remarks ...). Column
    names are lowercased first so "EVTYPE" and "evtype" are both accepted.
    Missing unit tokens (read by pandas as NaN) become empty strings.

    Args:
        df: Raw storm data as loaded from the catalog.

    Returns:
        DataFrame with exactly the columns in RAW_COLUMNS.

    Raises:
        KeyError: if any of the required columns is absent.
    """
    df = df.copy()
    df.columns = df.columns.str.strip().str.lower()

    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise KeyError(f"Expected columns not found in data: {missing}")

    before_cols = len(df.columns)
    selected = df[RAW_COLUMNS].copy()

    selected["evtype"] = selected["evtype"].fillna("").astype(str)
    for _, unit_col, _ in _DAMAGE_FIELDS:
        selected[unit_col] = selected[unit_col].fillna("").astype(str)

    logger.info(
        "Column selection: kept %d of %d columns across %s rows",
        len(RAW_COLUMNS),
        before_cols,
        f"{len(selected):,}",
    )
    return selected


# ── Node 2 ───────────────────────────────────────────────────────
def normalize_text_fields(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase and trim the event description and both unit tokens.

    The event description is renamed from ``evtype`` to ``event``.
    Running this twice gives the same result as running it once.

    Args:
        df: DataFrame after column selection.

    Returns:
        DataFrame with normalized text columns.
    """
    df = df.copy()

    if "evtype" in df.columns:
        df = df.rename(columns={"evtype": "event"})
    df["event"] = df["event"].str.strip().str.lower()
    for _, unit_col, _ in _DAMAGE_FIELDS:
        df[unit_col] = df[unit_col].str.strip().str.lower()

    logger.info(
        "Text normalized: %s distinct event descriptions",
        f"{df['event'].nunique():,}",
    )
    return df


# ── Node 3 ───────────────────────────────────────────────────────
def drop_summary_records(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """Drop administrative period-summary rows.

    Rows like "Summary of May 12" or "RIVER FLOOD SUMMARY" describe a
    reporting period, not one event, and would distort per-event means.

    Args:
        df: DataFrame with a lowercase ``event`` column.

    Returns:
        The DataFrame without summary rows, and the number of rows dropped.
    """
    summary_mask = df["event"].str.contains(_SUMMARY_MARKER, regex=False)
    n_summary = int(summary_mask.sum())
    kept = df[~summary_mask].copy()

    logger.info(
        "Summary filter: kept %s of %s rows (dropped %s)",
        f"{len(kept):,}",
        f"{len(df):,}",
        f"{n_summary:,}",
    )
    return kept, n_summary


# ── Node 4 ───────────────────────────────────────────────────────
def resolve_damage_units(df: pd.DataFrame) -> tuple[pd.DataFrame, dict[str, int]]:
    """Scale damage magnitudes to dollars and drop unresolvable rows.

    NOAA stores damage as a magnitude plus a unit token:
    - 25,  "k" → 25,000.0
    - 1.5, "m" → 1,500,000.0
    - 0,   ""  → 0.0
    - 5,   ""  → dropped (magnitude without a unit)
    - 5,   "+" → dropped (unknown unit)

    A row is dropped if either its property or its crop damage fails.

    Args:
        df: DataFrame with normalized unit tokens.

    Returns:
        DataFrame with NORMALIZED_COLUMNS, and a dict counting dropped rows
        per reason (``invalid_unit``, ``missing_unit``).
    """
    df = df.copy()
    invalid = pd.Series(False, index=df.index)
    missing = pd.Series(False, index=df.index)

    for magnitude_col, unit_col, new_col in _DAMAGE_FIELDS:
        resolved = {token: resolve_unit(token) for token in df[unit_col].unique()}
        status = df[unit_col].map(lambda t: resolved[t][0])
        multiplier = df[unit_col].map(lambda t: resolved[t][1]).astype(float)

        col_invalid = status == UnitStatus.INVALID
        col_missing = (status == UnitStatus.EMPTY) & (df[magnitude_col] > 0)

        if col_invalid.any():
            bad_samples = df.loc[col_invalid, unit_col].unique()[:10]
            logger.warning(
                "%s: %s rows have an unrecognized unit token. Samples: %s",
                unit_col,
                f"{int(col_invalid.sum()):,}",
                list(bad_samples),
            )
        if col_missing.any():
            logger.warning(
                "%s: %s rows have a positive magnitude but no unit",
                unit_col,
                f"{int(col_missing.sum()):,}",
            )

        invalid |= col_invalid
        missing |= col_missing
        df[new_col] = np.where(
            col_invalid | col_missing,
            np.nan,
            df[magnitude_col].astype(float) * multiplier,
        )

    # A row with both problems is counted once, as invalid
    missing &= ~invalid
    keep = ~(invalid | missing)
    resolved_df = df.loc[keep, NORMALIZED_COLUMNS].copy()
    exclusions = {
        "invalid_unit": int(invalid.sum()),
        "missing_unit": int(missing.sum()),
    }

    logger.info(
        "Unit resolution: kept %s of %s rows (invalid unit: %s, missing unit: %s)",
        f"{len(resolved_df):,}",
        f"{len(df):,}",
        f"{exclusions['invalid_unit']:,}",
        f"{exclusions['missing_unit']:,}",
    )
    return resolved_df, exclusions


# ── Node 5 ───────────────────────────────────────────────────────
def build_normalization_report(
    storm_data_selected: pd.DataFrame,
    summary_excluded: int,
    unit_exclusions: dict[str, int],
    storm_events_normalized: pd.DataFrame,
) -> dict[str, Any]:
    """Summarize how many rows each cleaning rule removed.

    Persisted as JSON next to the charts so every run documents what it
    threw away.
    """
    rows_in = len(storm_data_selected)
    rows_out = len(storm_events_normalized)
    report = {
        "rows_in": rows_in,
        "rows_out": rows_out,
        "excluded": {
            "summary": int(summary_excluded),
            "invalid_unit": int(unit_exclusions.get("invalid_unit", 0)),
            "missing_unit": int(unit_exclusions.get("missing_unit", 0)),
        },
    }
    pct_kept = (rows_out / rows_in * 100) if rows_in > 0 else 0.0
    logger.info(
        "Normalization complete: %s of %s rows kept (%.1f%%)",
        f"{rows_out:,}",
        f"{rows_in:,}",
        pct_kept,
    )
    return report

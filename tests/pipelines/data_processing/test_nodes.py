"""Tests for the data_processing (field normalizer) nodes."""

import pandas as pd
import pytest

from storm_impact.models import NORMALIZED_COLUMNS, RAW_COLUMNS, NormalizedRecord, RawRecord
from storm_impact.pipelines.data_processing.nodes import (
    UnitStatus,
    build_normalization_report,
    drop_summary_records,
    normalize_record,
    normalize_text_fields,
    resolve_damage_units,
    resolve_unit,
    select_raw_columns,
)


@pytest.fixture()
def raw_df():
    """Raw rows covering every keep/drop rule, with NOAA's column names."""
    return pd.DataFrame(
        {
            "STATE__": [1, 1, 1, 1, 1, 1, 1],
            "EVTYPE": [
                "HEAVY SNOW",
                "TSTM WIND",
                "FLOOD",
                "HAIL",
                "RIVER FLOOD SUMMARY",
                "FOG",
                " Tornado ",
            ],
            "FATALITIES": [1, 0, 0, 0, 99, 0, 5],
            "INJURIES": [0, 2, 0, 0, 99, 0, 100],
            "PROPDMG": [5.0, 1.5, 3.0, 2.0, 1.0, 0.0, 0.0],
            "PROPDMGEXP": ["K", "m", None, "+", "B", "k", None],
            "CROPDMG": [0.0, 10.0, 0.0, 0.0, 0.0, 0.0, 0.0],
            "CROPDMGEXP": [None, "k", None, None, None, "?", None],
        }
    )


def _raw(evtype="HEAVY SNOW", propdmg=0.0, propdmgexp="", cropdmg=0.0, cropdmgexp=""):
    return RawRecord(
        evtype=evtype,
        fatalities=1,
        injuries=0,
        propdmg=propdmg,
        propdmgexp=propdmgexp,
        cropdmg=cropdmg,
        cropdmgexp=cropdmgexp,
    )


# ── Unit resolution ──────────────────────────────────────────────
class TestResolveUnit:
    @pytest.mark.parametrize(
        ("token", "multiplier"),
        [("k", 1e3), ("K", 1e3), ("m", 1e6), (" M ", 1e6), ("b", 1e9), ("B", 1e9)],
    )
    def test_recognized_units(self, token, multiplier):
        assert resolve_unit(token) == (UnitStatus.RECOGNIZED, multiplier)

    @pytest.mark.parametrize("token", ["", "  "])
    def test_empty_unit(self, token):
        assert resolve_unit(token) == (UnitStatus.EMPTY, 0.0)

    @pytest.mark.parametrize("token", ["+", "-", "?", "h", "5", "0", "kb"])
    def test_invalid_units(self, token):
        status, _ = resolve_unit(token)
        assert status is UnitStatus.INVALID


# ── Record-level normalizer ──────────────────────────────────────
class TestNormalizeRecord:
    def test_scales_and_lowercases(self):
        record = normalize_record(_raw(evtype="  HEAVY SNOW ", propdmg=5, propdmgexp="K"))

        assert record == NormalizedRecord(
            event="heavy snow",
            fatalities=1,
            injuries=0,
            property_damage=5000.0,
            crop_damage=0.0,
        )

    def test_summary_record_is_excluded(self):
        assert normalize_record(_raw(evtype="RIVER FLOOD SUMMARY", propdmg=1, propdmgexp="B")) is None
        assert normalize_record(_raw(evtype="Summary of May 12")) is None

    def test_positive_magnitude_without_unit_is_excluded(self):
        assert normalize_record(_raw(propdmg=3, propdmgexp="")) is None
        assert normalize_record(_raw(cropdmg=0.5, cropdmgexp="  ")) is None

    def test_unknown_unit_is_excluded(self):
        assert normalize_record(_raw(propdmg=3, propdmgexp="+")) is None
        # Even with zero magnitude an unknown token makes the row ambiguous
        assert normalize_record(_raw(cropdmg=0, cropdmgexp="?")) is None

    def test_zero_magnitude_with_unit_is_accepted(self):
        record = normalize_record(_raw(propdmg=0, propdmgexp="k", cropdmg=0, cropdmgexp="M"))

        assert record is not None
        assert record.property_damage == 0.0
        assert record.crop_damage == 0.0

    def test_renormalizing_output_is_a_no_op(self):
        """Only zero-damage output round-trips: with its unit dropped, a positive
        scaled damage is a magnitude without a unit and is rejected."""
        first = normalize_record(_raw(evtype="Dense Fog"))
        again = normalize_record(
            RawRecord(
                evtype=first.event,
                fatalities=first.fatalities,
                injuries=first.injuries,
                propdmg=first.property_damage,
                propdmgexp="",
                cropdmg=first.crop_damage,
                cropdmgexp="",
            )
        )

        assert again == first


# ── Node 1 ───────────────────────────────────────────────────────
class TestSelectRawColumns:
    def test_keeps_only_raw_columns(self, raw_df):
        selected = select_raw_columns(raw_df)

        assert list(selected.columns) == RAW_COLUMNS
        assert len(selected) == len(raw_df)

    def test_missing_unit_tokens_become_empty_strings(self, raw_df):
        selected = select_raw_columns(raw_df)

        assert selected.loc[2, "propdmgexp"] == ""
        assert selected["cropdmgexp"].isna().sum() == 0

    def test_missing_column_raises(self, raw_df):
        with pytest.raises(KeyError, match="cropdmgexp"):
            select_raw_columns(raw_df.drop(columns=["CROPDMGEXP"]))


# ── Node 2 ───────────────────────────────────────────────────────
class TestNormalizeTextFields:
    def test_lowercases_and_trims(self, raw_df):
        normalized = normalize_text_fields(select_raw_columns(raw_df))

        assert "evtype" not in normalized.columns
        assert normalized.loc[6, "event"] == "tornado"
        assert normalized.loc[0, "propdmgexp"] == "k"
        assert normalized.loc[1, "propdmgexp"] == "m"

    def test_is_idempotent(self, raw_df):
        once = normalize_text_fields(select_raw_columns(raw_df))
        twice = normalize_text_fields(once)

        pd.testing.assert_frame_equal(once, twice)


# ── Node 3 ───────────────────────────────────────────────────────
class TestDropSummaryRecords:
    def test_drops_summary_rows(self, raw_df):
        text = normalize_text_fields(select_raw_columns(raw_df))
        kept, n_summary = drop_summary_records(text)

        assert n_summary == 1
        assert not kept["event"].str.contains("summary").any()
        assert len(kept) == len(raw_df) - 1


# ── Node 4 ───────────────────────────────────────────────────────
class TestResolveDamageUnits:
    @pytest.fixture()
    def resolved(self, raw_df):
        text = normalize_text_fields(select_raw_columns(raw_df))
        events, _ = drop_summary_records(text)
        return resolve_damage_units(events)

    def test_output_schema(self, resolved):
        df, _ = resolved
        assert list(df.columns) == NORMALIZED_COLUMNS

    def test_keeps_only_resolvable_rows(self, resolved):
        df, _ = resolved
        assert df["event"].tolist() == ["heavy snow", "tstm wind", "tornado"]

    def test_damage_is_scaled_to_dollars(self, resolved):
        df, _ = resolved
        by_event = df.set_index("event")

        assert by_event.loc["heavy snow", "property_damage"] == 5_000.0
        assert by_event.loc["tstm wind", "property_damage"] == 1_500_000.0
        assert by_event.loc["tstm wind", "crop_damage"] == 10_000.0
        assert by_event.loc["tornado", "property_damage"] == 0.0

    def test_casualties_unchanged(self, resolved):
        df, _ = resolved
        by_event = df.set_index("event")

        assert by_event.loc["tornado", "fatalities"] == 5
        assert by_event.loc["tornado", "injuries"] == 100

    def test_exclusion_counts(self, resolved):
        _, exclusions = resolved
        # hail ("+") and fog ("?") are invalid, flood has no unit
        assert exclusions == {"invalid_unit": 2, "missing_unit": 1}

    def test_row_with_both_problems_counted_once(self):
        df = pd.DataFrame(
            {
                "event": ["flood"],
                "fatalities": [0],
                "injuries": [0],
                "propdmg": [3.0],
                "propdmgexp": [""],
                "cropdmg": [1.0],
                "cropdmgexp": ["x"],
            }
        )
        resolved, exclusions = resolve_damage_units(df)

        assert resolved.empty
        assert exclusions == {"invalid_unit": 1, "missing_unit": 0}


# ── Node 5 ───────────────────────────────────────────────────────
def test_normalization_report(raw_df):
    selected = select_raw_columns(raw_df)
    events, n_summary = drop_summary_records(normalize_text_fields(selected))
    normalized, exclusions = resolve_damage_units(events)

    report = build_normalization_report(selected, n_summary, exclusions, normalized)

    assert report == {
        "rows_in": 7,
        "rows_out": 3,
        "excluded": {"summary": 1, "invalid_unit": 2, "missing_unit": 1},
    }


# ── Record-level and DataFrame normalizers agree ─────────────────
@pytest.mark.parametrize("row", range(7))
def test_record_and_frame_normalizers_agree(raw_df, row):
    selected = select_raw_columns(raw_df)
    events, _ = drop_summary_records(normalize_text_fields(selected))
    frame, _ = resolve_damage_units(events)

    record = normalize_record(RawRecord(**selected.loc[row, RAW_COLUMNS].to_dict()))

    if record is None:
        assert row not in frame.index
    else:
        assert NormalizedRecord(**frame.loc[row, NORMALIZED_COLUMNS].to_dict()) == record

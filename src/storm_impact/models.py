"""Record model for storm events as they move through the pipeline.

Each stage has its own immutable record type (``frozen=True``) so a stage
can never modify what an earlier stage produced:

    RawRecord  → NormalizedRecord → ClassifiedRecord

The Kedro nodes work on DataFrames for speed; the column lists below are
the DataFrame view of the same records, and the record-level helpers in the
pipelines operate on these dataclasses directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ── DataFrame schemas ────────────────────────────────────────────
RAW_COLUMNS: list[str] = [
    "evtype",
    "fatalities",
    "injuries",
    "propdmg",
    "propdmgexp",
    "cropdmg",
    "cropdmgexp",
]

NORMALIZED_COLUMNS: list[str] = [
    "event",
    "fatalities",
    "injuries",
    "property_damage",
    "crop_damage",
]

CLASSIFIED_COLUMNS: list[str] = NORMALIZED_COLUMNS + ["category"]

HEALTH_COLUMNS: list[str] = ["category", "mean_fatalities", "mean_injuries"]

ECONOMIC_COLUMNS: list[str] = [
    "category",
    "mean_property_damage",
    "mean_crop_damage",
]


@dataclass(frozen=True)
class RawRecord:
    """One storm event exactly as read from the raw dataset."""

    evtype: str
    fatalities: float
    injuries: float
    propdmg: float
    propdmgexp: str
    cropdmg: float
    cropdmgexp: str


@dataclass(frozen=True)
class NormalizedRecord:
    """A cleaned event: lowercase description, damage in dollars."""

    event: str
    fatalities: float
    injuries: float
    property_damage: float
    crop_damage: float


@dataclass(frozen=True)
class ClassifiedRecord:
    """A normalized event tagged with a single general category."""

    record: NormalizedRecord
    category: str


@dataclass(frozen=True)
class CategoryRule:
    """A general event category and the pattern that selects it."""

    name: str
    pattern: str

    def matches(self, text: str) -> bool:
        """Case-insensitive search for the pattern anywhere in ``text``."""
        return re.search(self.pattern, text, flags=re.IGNORECASE) is not None

"""General event-type taxonomy.

NOAA's raw EVTYPE field holds close to a thousand spellings of a few dozen
phenomena ("TSTM WIND", "THUNDERSTORM WINDS/HAIL", "HEAVY SNOW/ICE" ...).
The taxonomy collapses them into 22 general categories, each selected by a
case-insensitive regular-expression search over the event description.

Patterns are deliberately NOT mutually exclusive: "thunderstorm winds"
belongs to both ``thunderstorm`` and ``wind``.  The order of the rules only
matters for presentation.

The rule set lives in ``conf/base/parameters.yml`` under ``event_taxonomy``
and is turned into an immutable tuple by ``build_taxonomy`` once per run.
``DEFAULT_TAXONOMY`` is the same table for use outside Kedro (API, tests).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from storm_impact.models import CategoryRule

Taxonomy = tuple[CategoryRule, ...]

# ── Canonical rule table (mirrors parameters.yml) ───────────────
_DEFAULT_RULES: list[tuple[str, str]] = [
    ("hurricane/typhoon", "hurricane|typhoon"),
    ("tornado", "tornado"),
    ("thunderstorm", "tstm|thunderstorm|lightning"),
    ("tropical storm", "tropical storm"),
    ("wind", "wind"),
    ("storm surge", "surge"),
    ("low tide", "low tide"),
    ("high tide", "high tide|high surf|high swells|high waves|heavy surf|rough surf|rough seas"),
    ("flood", "flood|fld"),
    ("snow/sleet", "snow|sleet|blizzard"),
    ("rain", "rain|precip|shower"),
    ("hail", "hail"),
    ("cold/wintry weather", "cold|chill|wint|freez|frost|low temp|record low|hypothermia"),
    ("ice", "ice|icy|glaze"),
    ("drought", "drought|dry(?! microburst)"),
    ("heat", "heat|warm|hot|record high|high temp"),
    ("wildfires", "fire"),
    ("dust storm/devil", "dust"),
    ("erosion", "erosion"),
    ("volcanic eruption/ash", "volcan"),
    ("mudslide", "mud|slide"),
    ("fog", "fog"),
]


def build_taxonomy(
    rules: Mapping[str, str] | Iterable[Mapping[str, str] | tuple[str, str]],
) -> Taxonomy:
    """Validate a rule configuration and freeze it into a taxonomy.

    Accepts either a ``{name: pattern}`` mapping or a sequence of
    ``{"name": ..., "pattern": ...}`` dicts / ``(name, pattern)`` pairs,
    which is what parameters.yml provides.

    Raises:
        ValueError: if the rule set is empty, a name is blank or repeated,
            or a pattern is not a valid regular expression.
    """
    if isinstance(rules, Mapping):
        pairs = list(rules.items())
    else:
        pairs = [
            (rule["name"], rule["pattern"]) if isinstance(rule, Mapping) else tuple(rule)
            for rule in rules
        ]

    if not pairs:
        raise ValueError("Event taxonomy must contain at least one rule")

    seen: set[str] = set()
    taxonomy: list[CategoryRule] = []
    for name, pattern in pairs:
        name = str(name).strip().lower()
        if not name:
            raise ValueError("Event taxonomy contains a rule with a blank name")
        if name in seen:
            raise ValueError(f"Duplicate category in event taxonomy: {name!r}")
        if not pattern:
            raise ValueError(f"Category {name!r} has an empty pattern")
        try:
            re.compile(pattern, flags=re.IGNORECASE)
        except re.error as exc:
            raise ValueError(
                f"Category {name!r} has an invalid pattern {pattern!r}: {exc}"
            ) from exc
        seen.add(name)
        taxonomy.append(CategoryRule(name=name, pattern=pattern))

    return tuple(taxonomy)


DEFAULT_TAXONOMY: Taxonomy = build_taxonomy(_DEFAULT_RULES)


def category_names(taxonomy: Taxonomy) -> list[str]:
    """Category names in presentation order."""
    return [rule.name for rule in taxonomy]

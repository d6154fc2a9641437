"""FastAPI application serving the ranked storm-impact tables.

This is the read-only serving path.  The Kedro pipelines write the ranked
health and economic tables to parquet; the API loads them once at startup
and returns them as JSON, in ranking order.

Run locally:
    uvicorn storm_impact.api:app --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import pandas as pd
from fastapi import FastAPI, Query

from storm_impact import __version__
from storm_impact.pipelines.impact_ranking.nodes import category_labels
from storm_impact.taxonomy import DEFAULT_TAXONOMY

logger = logging.getLogger(__name__)

# ── Configuration ────────────────────────────────────────────────
# Paths are relative to the project root (where uvicorn is launched)
# and match the filepaths in conf/base/catalog.yml.
HEALTH_PATH = Path("data/07_model_output/health_impact_ranked.parquet")
ECONOMIC_PATH = Path("data/07_model_output/economic_impact_ranked.parquet")

# Module-level state populated at startup, read at request time.
_state: dict = {}


# ── Helpers ──────────────────────────────────────────────────────
def _table_payload(ranked: pd.DataFrame, limit: int | None) -> dict:
    """Ranked rows (optionally the first ``limit``) plus chart labels."""
    rows = ranked if limit is None else ranked.head(limit)
    return {
        "count": len(rows),
        "rows": rows.to_dict(orient="records"),
        "labels": category_labels(rows),
    }


# ── Lifespan (startup / shutdown) ────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the ranked tables into memory once at startup."""
    for key, path in (("health", HEALTH_PATH), ("economic", ECONOMIC_PATH)):
        if not path.exists():
            raise FileNotFoundError(
                f"{path} not found — run `kedro run` to build the ranked tables"
            )
        logger.info("Loading %s table from %s", key, path)
        _state[key] = pd.read_parquet(path)

    logger.info(
        "API ready — %d health categories, %d economic categories",
        len(_state["health"]),
        len(_state["economic"]),
    )

    yield

    logger.info("Shutting down API")
    _state.clear()


# ── App ──────────────────────────────────────────────────────────
app = FastAPI(
    title="Storm Impact",
    description=(
        "Mean casualties and economic damage per storm event, by general "
        "event type, ranked from most to least harmful."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ── Endpoints ────────────────────────────────────────────────────
@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "healthy"}


@app.get("/impact/health")
async def health_impact(
    limit: int | None = Query(default=None, ge=1, description="Return only the top N categories"),
):
    """Categories ranked by mean fatalities, then mean injuries."""
    return _table_payload(_state["health"], limit)


@app.get("/impact/economic")
async def economic_impact(
    limit: int | None = Query(default=None, ge=1, description="Return only the top N categories"),
):
    """Categories ranked by mean property plus crop damage."""
    return _table_payload(_state["economic"], limit)


@app.get("/categories")
async def categories():
    """The general event categories and the patterns that select them."""
    return {
        "count": len(DEFAULT_TAXONOMY),
        "categories": [
            {"name": rule.name, "pattern": rule.pattern} for rule in DEFAULT_TAXONOMY
        ],
    }

"""
main.py — FastAPI application entry point for the district lookup service.

Exposes:
    GET  /                       — health check (root)
    GET  /health                 — detailed health info
    GET  /api/v1/lookup          — districts containing one lat/lon
    POST /api/v1/lookup/batch    — districts for a list of points
    GET  /api/v1/districts       — list all loaded district names

Run with ``python -m civicsearch.main`` or the ``civicsearch`` console script.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from civicsearch import config
from civicsearch.loader import DataStore, load_all_data
from civicsearch.models import MatchResult, QueryPoint
from civicsearch.services import district_names, find_districts, match_all

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

# ── Application-level data store (loaded once at startup) ─────────────────────
data_store: DataStore | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the boundary archive before accepting requests."""
    global data_store
    data_store = load_all_data()
    logger.info("Loaded %d districts", len(data_store.districts))
    yield
    logger.info("Shutting down — releasing data store.")


# ── FastAPI app ───────────────────────────────────────────────────────────────
app = FastAPI(
    title="civicsearch",
    description=(
        "Find the legislative district(s) containing a coordinate, "
        "using TIGER/Line boundary shapefiles."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# Allow a browser frontend on any origin to query the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ── Request bodies ────────────────────────────────────────────────────────────

class PointIn(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class BatchLookupRequest(BaseModel):
    points: list[PointIn]


def _serialise(result: MatchResult) -> dict:
    return {
        "latitude": result.point.lat,
        "longitude": result.point.lon,
        "status": result.status.value,
        "districts": result.districts,
    }


def _require_store() -> DataStore:
    if data_store is None:
        raise HTTPException(status_code=503, detail="Data store not initialised.")
    return data_store


# ── Routes ────────────────────────────────────────────────────────────────────

@app.get("/", tags=["health"])
def root():
    """Root health-check endpoint."""
    return {"status": "ok", "message": "civicsearch API is running."}


@app.get("/health", tags=["health"])
def health():
    """Detailed health check: returns the loaded district count."""
    if data_store is None:
        raise HTTPException(status_code=503, detail="Data not yet loaded.")
    return {
        "status": "ok",
        "districts_loaded": len(data_store.districts),
    }


@app.get("/api/v1/lookup", tags=["lookup"])
def lookup(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
):
    """
    Return every district containing the supplied coordinate.

    A point on a shared boundary is reported in both districts.

    Raises:
        HTTPException 404: If the point falls outside all known boundaries.
        HTTPException 503: If the data store has not been initialised.
    """
    store = _require_store()
    result = find_districts(lat=lat, lon=lon, store=store)

    if not result.districts:
        logger.warning("No districts found for (%.6f, %.6f)", lat, lon)
        raise HTTPException(
            status_code=404,
            detail=f"No matching districts found for coordinates ({lat}, {lon}).",
        )

    logger.info("Lookup (%.4f, %.4f) → %s", lat, lon, ", ".join(result.districts))
    return _serialise(result)


@app.post("/api/v1/lookup/batch", tags=["lookup"])
def lookup_batch(request: BatchLookupRequest):
    """
    Match a list of points in one call.

    Results come back in request order; points with no match get
    status "none" rather than an error.
    """
    store = _require_store()
    points = [QueryPoint(lon=p.lon, lat=p.lat) for p in request.points]
    results = match_all(points, store.districts)
    return {"results": [_serialise(result) for result in results]}


@app.get("/api/v1/districts", tags=["metadata"])
def list_districts():
    """Return the sorted names of all loaded districts."""
    store = _require_store()
    return {"districts": district_names(store)}


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "civicsearch.main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

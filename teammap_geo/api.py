"""
FastAPI service exposing location resolution and map aggregation.

Endpoints:
  GET  /health       - Gazetteer status and cache counters
  POST /resolve      - Resolve a list of location strings
  POST /map          - Filter, resolve and group directory records into pins
  POST /cache/clear  - Drop all cached geocode results
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from teammap_geo.config import get_settings
from teammap_geo.filters import PersonFilter
from teammap_geo.gazetteer import get_gazetteer
from teammap_geo.geocode import BatchResolver, LocationResolver
from teammap_geo.models import (
    HealthResponse,
    LocationMap,
    MapRequest,
    ResolveRequest,
    ResolveResponse,
)
from teammap_geo.pipeline import build_location_map, parse_people

logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load the gazetteer once and create the shared resolver."""
    logger.info("Starting up API server...")
    gazetteer = get_gazetteer()
    if gazetteer is None:
        logger.warning("Serving without a gazetteer; every location will be unresolved")
    app.state.resolver = BatchResolver(LocationResolver(gazetteer))
    yield
    app.state.resolver.clear_cache()
    logger.info("API server shut down.")


# ── App ───────────────────────────────────────────────────────────────

app = FastAPI(
    title="Team Map Geo API",
    description="Resolve directory locations and aggregate people into map pins",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten in production
    allow_methods=["*"],
    allow_headers=["*"],
)


def _resolver(request: Request) -> BatchResolver:
    return request.app.state.resolver


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

@app.get("/health", response_model=HealthResponse)
async def health(request: Request):
    resolver = _resolver(request)
    gazetteer = resolver.resolver.gazetteer
    stats = resolver.cache.stats()
    return HealthResponse(
        status="ok" if gazetteer is not None else "degraded",
        gazetteer_loaded=gazetteer is not None,
        gazetteer_entries=len(gazetteer) if gazetteer is not None else 0,
        cache_size=stats["size"],
        cache_hits=stats["hits"],
        cache_misses=stats["misses"],
    )


@app.post("/resolve", response_model=ResolveResponse)
async def resolve_locations(body: ResolveRequest, request: Request):
    resolved = _resolver(request).resolve_batch(body.locations)
    unresolved = [loc for loc in dict.fromkeys(body.locations) if loc not in resolved]
    return ResolveResponse(resolved=resolved, unresolved=unresolved)


@app.post("/map", response_model=LocationMap)
async def location_map(body: MapRequest, request: Request):
    max_people = get_settings().api.max_people
    if len(body.people) > max_people:
        raise HTTPException(
            status_code=413,
            detail=f"Too many people ({len(body.people)}); limit is {max_people}",
        )

    people = parse_people(body.people)
    person_filter = PersonFilter(
        name=body.filters.name,
        job_title=body.filters.job_title,
        department=body.filters.department,
        division=body.filters.division,
    )
    return build_location_map(people, _resolver(request), person_filter=person_filter)


@app.post("/cache/clear", response_model=HealthResponse)
async def clear_cache(request: Request):
    _resolver(request).clear_cache()
    return await health(request)

# main.py
# FastAPI app exposing the meetup planning pipeline:
# address suggestions, dual geocoding + midpoint, venue recommendations, itinerary

import json
import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from geocoding import resolve_candidate, search_addresses
from geomath import midpoint as compute_midpoint
from itinerary import generate_itinerary
from models import (
    AddressCandidate,
    Itinerary,
    ItineraryRequest,
    LocationsRequest,
    LocationsResponse,
    PlanRecord,
    PlanRequest,
    PlanningState,
    ResolveRequest,
    ResolveResponse,
    VenuesRequest,
    VenuesResponse,
)
from recommendations import is_fallback, recommend_venues
from session import (
    PlanningInputError,
    add_experience,
    build_itinerary,
    plan_record,
    resolve_parties,
    select_activities,
    set_locations,
)
from utils import TTLCache

app = FastAPI(title="Middle Meetup Planner API", version="0.1.0")

origins = [config.FRONTEND_LOCAL]
if config.FRONTEND_PROD:
    origins.append(config.FRONTEND_PROD)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("middle-meetup")

# per process cache for venue batches
cache = TTLCache(ttl_seconds=config.CACHE_TTL_S)


# global JSON error handling
# - HTTPException -> { "error": <detail> }
# - PlanningInputError -> 400 { "error": <message> }
# - any other exception -> { "error": "Server error" }
@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    log.warning("HTTP %s: %s", exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(PlanningInputError)
async def input_error_handler(request: Request, exc: PlanningInputError):
    log.info("input error: %s", exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # log stack once. do not leak details to client
    log.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "Server error"})


@app.get("/addresses/suggest", response_model=List[AddressCandidate])
async def suggest_addresses(
    q: str = Query("", description="partial address"),
    limit: int = Query(5, ge=1, le=10),
    session_token: Optional[str] = None,
):
    return await search_addresses(q, limit, session_token=session_token)


@app.post("/addresses/resolve", response_model=ResolveResponse)
async def resolve_address(req: ResolveRequest):
    coords = await resolve_candidate(req.candidate, req.session_token)
    return ResolveResponse(coordinates=coords)


@app.post("/locations", response_model=LocationsResponse)
async def set_party_locations(req: LocationsRequest):
    """Geocode both parties (jointly) and return them with their midpoint."""
    party1, party2 = await resolve_parties(
        req.party1.name, req.party1.address, req.party2.name, req.party2.address)
    state = set_locations(PlanningState(), party1, party2)
    return LocationsResponse(party1=party1, party2=party2, midpoint=state.midpoint)


@app.post("/venues", response_model=VenuesResponse)
async def find_venues(req: VenuesRequest):
    """
    Venues near the midpoint for the requested activities, fairest first.
    An empty list is a normal answer ("no venues found").
    """
    if not req.activities:
        raise HTTPException(status_code=400, detail="Select at least one activity.")

    cache_key = json.dumps(req.model_dump(mode="json"), sort_keys=True)
    hit = cache.get(cache_key)
    if hit:
        return VenuesResponse(**hit)

    mid = req.midpoint or compute_midpoint(req.party1.coordinates, req.party2.coordinates)
    venues = await recommend_venues(
        req.party1.coordinates, req.party2.coordinates, mid, req.activities, req.radius_km)
    log.info("venues: %d for %s", len(venues), ",".join(req.activities))

    resp = VenuesResponse(midpoint=mid, venues=venues).model_dump(mode="json")
    # static venues stand in for one failed call only; the next request retries the provider
    if venues and not is_fallback(venues):
        cache.set(cache_key, resp)
    return resp


@app.post("/itinerary", response_model=Itinerary)
async def create_itinerary(req: ItineraryRequest):
    if not req.experiences:
        raise HTTPException(status_code=400, detail="Pick at least one venue.")
    ordered = sorted(req.experiences, key=lambda e: e.order)
    mid = req.midpoint or compute_midpoint(req.party1.coordinates, req.party2.coordinates)
    return generate_itinerary(req.party1, req.party2, ordered, midpoint=mid, now=req.start)


@app.post("/plans", response_model=PlanRecord)
async def finalize_plan(req: PlanRequest):
    """
    Build the record a persistence store would keep. Nothing is stored here.
    """
    state = set_locations(PlanningState(), req.party1, req.party2)
    state = select_activities(state, req.activities)
    for exp in sorted(req.experiences, key=lambda e: e.order):
        state = add_experience(state, exp.venue, exp.estimated_duration)
    state = build_itinerary(state, now=req.start)
    return plan_record(state)


@app.get("/health")
def health():
    return {"ok": True}

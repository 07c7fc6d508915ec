# providers/mapbox.py
# Mapbox Search Box: suggest (no coords) + retrieve (coords), forward geocoding.
# Every call raises on transport errors, non-2xx or malformed bodies.

from __future__ import annotations

from typing import List, Optional

import httpx

import config
from models import AddressCandidate, Coordinate
from providers.http import open_client

HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# higher score for more specific features
FEATURE_TYPE_SCORES = {
    "address": 1.0,
    "poi": 0.9,
    "place": 0.8,
    "locality": 0.7,
    "neighborhood": 0.6,
    "region": 0.4,
    "country": 0.2,
}


def importance(suggestion: dict) -> float:
    score = 0.5
    score += FEATURE_TYPE_SCORES.get(suggestion.get("feature_type"), 0.5)
    if suggestion.get("poi_category"):
        score += 0.2
    if suggestion.get("distance") is not None:
        score += 0.1
    # round away float drift (0.5 + 0.2 + 0.2 + 0.1 != 1.0) before capping
    return min(round(score, 4), 1.0)


def _first_feature_coords(js: dict) -> Optional[Coordinate]:
    features = js.get("features")
    if not isinstance(features, list):
        raise ValueError("mapbox response has no features list")
    if not features:
        return None
    lng, lat = features[0]["geometry"]["coordinates"][:2]
    return Coordinate(lat=float(lat), lng=float(lng))


async def suggest(q: str, limit: int, session_token: str, token: str,
                  client: Optional[httpx.AsyncClient] = None) -> List[AddressCandidate]:
    params = {
        "q": q.strip(),
        "limit": min(limit, 10),
        "language": "en",
        "session_token": session_token,
        "access_token": token,
    }
    async with open_client(client) as c:
        r = await c.get(f"{config.MAPBOX_BASE_URL}/suggest", params=params, headers=HEADERS)
        r.raise_for_status()
        js = r.json()

    suggestions = js.get("suggestions")
    if not isinstance(suggestions, list):
        raise ValueError("mapbox response has no suggestions list")

    out: List[AddressCandidate] = []
    for s in suggestions:
        out.append(AddressCandidate(
            display_name=s.get("full_address") or s["name"],
            # filled in by retrieve once the user picks it
            source_id=s.get("mapbox_id"),
            type=s.get("feature_type") or "location",
            importance=importance(s),
            address=s.get("address"),
            full_address=s.get("full_address"),
            place_formatted=s.get("place_formatted"),
            feature_type=s.get("feature_type"),
            poi_category=s.get("poi_category"),
            maki=s.get("maki"),
            distance=s.get("distance"),
        ))
    return out


async def retrieve(mapbox_id: str, session_token: str, token: str,
                   client: Optional[httpx.AsyncClient] = None) -> Optional[Coordinate]:
    params = {"session_token": session_token, "access_token": token}
    async with open_client(client) as c:
        r = await c.get(f"{config.MAPBOX_BASE_URL}/retrieve/{mapbox_id}", params=params, headers=HEADERS)
        r.raise_for_status()
        return _first_feature_coords(r.json())


async def forward(q: str, token: str, client: Optional[httpx.AsyncClient] = None) -> Optional[Coordinate]:
    params = {"q": q, "limit": 1, "language": "en", "access_token": token}
    async with open_client(client) as c:
        r = await c.get(f"{config.MAPBOX_BASE_URL}/forward", params=params, headers=HEADERS)
        r.raise_for_status()
        return _first_feature_coords(r.json())

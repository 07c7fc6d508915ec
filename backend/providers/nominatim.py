# providers/nominatim.py
# nominatim geocoding (read-only, no key). secondary tier behind mapbox

from __future__ import annotations

from typing import List, Optional

import httpx

import config
from models import AddressCandidate, Coordinate
from providers.http import open_client


def _headers() -> dict:
    # nominatim usage policy requires an identifying user agent
    return {
        "User-Agent": config.NOMINATIM_USER_AGENT,
        "Accept-Language": "en",
        "Accept": "application/json",
    }


async def _query(params: dict, client: Optional[httpx.AsyncClient]) -> list:
    async with open_client(client) as c:
        r = await c.get(config.NOMINATIM_URL, params=params, headers=_headers())
        r.raise_for_status()
        data = r.json()
    if not isinstance(data, list):
        raise ValueError("nominatim response is not a list")
    return data


async def search(q: str, limit: int, client: Optional[httpx.AsyncClient] = None) -> List[AddressCandidate]:
    params = {"format": "json", "q": q.strip(), "limit": limit, "addressdetails": 1, "extratags": 1}
    out: List[AddressCandidate] = []
    for row in await _query(params, client):
        name = row["display_name"]
        kind = row.get("type") or "location"
        out.append(AddressCandidate(
            display_name=name,
            coordinates=Coordinate(lat=float(row["lat"]), lng=float(row["lon"])),
            type=kind,
            importance=float(row.get("importance") or 0),
            address=name,
            full_address=name,
            place_formatted=name,
            feature_type=kind,
        ))
    return out


async def geocode(q: str, client: Optional[httpx.AsyncClient] = None) -> Optional[Coordinate]:
    params = {"format": "json", "q": q, "limit": 1, "addressdetails": 1}
    data = await _query(params, client)
    if not data:
        return None
    return Coordinate(lat=float(data[0]["lat"]), lng=float(data[0]["lon"]))

# geocoding.py
# address resolution: mapbox -> nominatim -> static city table.
# every tier failure is logged and swallowed; callers get [] or None, never an exception

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

import httpx

import config
import fallback_data
from models import AddressCandidate, Coordinate
from providers import mapbox, nominatim
from utils import run_with_timeout

log = logging.getLogger(__name__)

MIN_QUERY_LEN = 2


def new_session_token() -> str:
    """Correlation id tying a suggest call to its later retrieve call."""
    return str(uuid.uuid4())


def _by_importance(candidates: List[AddressCandidate], limit: int) -> List[AddressCandidate]:
    return sorted(candidates, key=lambda c: c.importance, reverse=True)[:limit]


async def search_addresses(query: str, limit: int = 5, session_token: Optional[str] = None,
                           client: Optional[httpx.AsyncClient] = None) -> List[AddressCandidate]:
    """
    Autocomplete suggestions for partial input, best first.
    Mapbox suggestions come back unresolved (see resolve_candidate).
    """
    q = query.strip()
    if len(q) < MIN_QUERY_LEN:
        return []

    token = config.MAPBOX_ACCESS_TOKEN
    if token:
        results, err = await run_with_timeout(
            mapbox.suggest(q, limit, session_token or new_session_token(), token, client=client),
            config.GEOCODE_TIMEOUT_S, "mapbox suggest")
        if not err:
            return _by_importance(results, limit)
        log.info("falling back to nominatim for %r", q)

    results, err = await run_with_timeout(
        nominatim.search(q, limit, client=client),
        config.GEOCODE_TIMEOUT_S, "nominatim search", default=[])
    if results:
        return _by_importance(results, limit)

    log.info("using static city table for %r", q)
    return fallback_data.search_cities(q, limit)


async def resolve_candidate(candidate: AddressCandidate, session_token: Optional[str] = None,
                            client: Optional[httpx.AsyncClient] = None) -> Optional[Coordinate]:
    """Coordinates for a picked suggestion, fetching them if the suggestion had none."""
    if candidate.is_resolved:
        return candidate.coordinates
    if not candidate.source_id:
        log.warning("suggestion %r has neither coordinates nor a place id", candidate.display_name)
        return None

    token = config.MAPBOX_ACCESS_TOKEN
    if not token:
        return None
    coords, err = await run_with_timeout(
        mapbox.retrieve(candidate.source_id, session_token or new_session_token(), token, client=client),
        config.GEOCODE_TIMEOUT_S, "mapbox retrieve")
    return None if err else coords


async def geocode_address(address: str, client: Optional[httpx.AsyncClient] = None) -> Optional[Coordinate]:
    """Single-shot resolution of a complete address."""
    if not address or not address.strip():
        return None

    token = config.MAPBOX_ACCESS_TOKEN
    if token:
        coords, _ = await run_with_timeout(
            mapbox.forward(address, token, client=client),
            config.GEOCODE_TIMEOUT_S, "mapbox forward")
        if coords:
            return coords

    coords, _ = await run_with_timeout(
        nominatim.geocode(address, client=client),
        config.GEOCODE_TIMEOUT_S, "nominatim geocode")
    if coords:
        return coords

    coords = fallback_data.city_coordinates(address)
    if coords is None:
        log.warning("could not geocode %r with any provider", address)
    return coords

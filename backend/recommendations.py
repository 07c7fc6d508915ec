# recommendations.py
# venue recommendations near the midpoint: gemini first, static venues on any failure

from __future__ import annotations

import json
import logging
import re
import uuid
from typing import Awaitable, Callable, List, Optional

from pydantic import TypeAdapter, ValidationError

import config
import fallback_data
from geomath import distance_km
from models import Coordinate, Venue, VenueSuggestion
from providers.gemini import generate_text
from utils import dedupe, rank, run_with_timeout

log = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = "/placeholder.svg?height=200&width=300"
FALLBACK_ID_PREFIX = "fallback-"

# greedy: from the first "[" to the last "]", prose around it is ignored
_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)
_SUGGESTIONS = TypeAdapter(List[VenueSuggestion])


class VenueResponseError(ValueError):
    """The provider answered, but not with a usable venue list."""


def maps_link(c: Coordinate) -> str:
    return f"https://maps.google.com/?q={c.lat},{c.lng}"


def build_prompt(party1: Coordinate, party2: Coordinate, midpoint: Coordinate,
                 activities: List[str], radius_km: float) -> str:
    requested = ", ".join(activities)
    kinds = "|".join(activities) or "dining"
    return f"""
You are a local expert helping two friends find the perfect meetup locations. Here's the context:

**User Locations:**
- User A: Latitude {party1.lat}, Longitude {party1.lng}
- User B: Latitude {party2.lat}, Longitude {party2.lng}
- Midpoint: Latitude {midpoint.lat}, Longitude {midpoint.lng}

**Requested Activities:** {requested}
**Search Radius:** {radius_km} km from midpoint

**Instructions:**
1. Find 6-8 real, specific venues near the midpoint coordinates that match the selected activities
2. Focus on places that are accessible to both users and well-reviewed
3. Include a variety of options (different price points, ambiance, etc.)
4. Make sure coordinates are accurate for real places

**Required Response Format (JSON only, no other text):**
[
  {{
    "name": "Venue Name",
    "address": "Full street address",
    "coordinates": {{"lat": 40.1234, "lng": -74.5678}},
    "rating": 4.5,
    "type": "{kinds}",
    "description": "Brief description of the venue and why it's good for meetups",
    "googleMapsLink": "https://maps.google.com/?q=latitude,longitude"
  }}
]

**Important:**
- Only return valid JSON array
- Use real coordinates for actual places
- Rating should be a number between 1-5 (omit if unknown)
- Type must match one of the activity categories
- Keep descriptions concise but helpful
- Include Google Maps links with actual coordinates
"""


def parse_venue_response(text: str) -> List[VenueSuggestion]:
    """Pull the JSON array out of free-form model output and validate it."""
    m = _JSON_ARRAY.search(text or "")
    if not m:
        raise VenueResponseError("no JSON array in response")
    try:
        raw = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise VenueResponseError(f"invalid JSON: {e}") from e
    try:
        return _SUGGESTIONS.validate_python(raw)
    except ValidationError as e:
        raise VenueResponseError(f"schema mismatch: {e.error_count()} error(s)") from e


def annotate(venue: Venue, party1: Coordinate, party2: Coordinate) -> Venue:
    return venue.model_copy(update={
        "distance_from_party1": distance_km(party1, venue.coordinates),
        "distance_from_party2": distance_km(party2, venue.coordinates),
    })


def to_venues(suggestions: List[VenueSuggestion], party1: Coordinate, party2: Coordinate) -> List[Venue]:
    batch = uuid.uuid4().hex[:8]
    venues = [
        annotate(Venue(
            id=f"gemini-{batch}-{i}",
            name=s.name,
            address=s.address,
            coordinates=s.coordinates,
            rating=s.rating,
            type=s.type,
            description=s.description,
            image_url=PLACEHOLDER_IMAGE,
            maps_link=s.googleMapsLink or maps_link(s.coordinates),
        ), party1, party2)
        for i, s in enumerate(suggestions)
    ]
    return rank(dedupe(venues))


def fallback_venues(midpoint: Coordinate, activities: List[str],
                    party1: Coordinate, party2: Coordinate) -> List[Venue]:
    """Generic venues around the midpoint, only for the requested activities. May be empty."""
    out: List[Venue] = []
    for vid, name, address, dlat, dlng, rating, kind, description in fallback_data.GENERIC_VENUES:
        if kind not in activities:
            continue
        at = Coordinate(lat=max(-90.0, min(90.0, midpoint.lat + dlat)),
                        lng=max(-180.0, min(180.0, midpoint.lng + dlng)))
        out.append(annotate(Venue(
            id=vid,
            name=name,
            address=address,
            coordinates=at,
            rating=rating,
            type=kind,
            description=description,
            image_url=PLACEHOLDER_IMAGE,
            maps_link=maps_link(at),
        ), party1, party2))
    return out


def is_fallback(venues: List[Venue]) -> bool:
    """True when the batch came from the static set rather than the provider."""
    return any(v.id.startswith(FALLBACK_ID_PREFIX) for v in venues)


async def recommend_venues(party1: Coordinate, party2: Coordinate, midpoint: Coordinate,
                           activities: List[str], radius_km: float = 10,
                           generate: Optional[Callable[[str], Awaitable[str]]] = None) -> List[Venue]:
    """
    Ranked venues (fairest average distance first). Never raises: any
    provider, parse or schema failure yields the filtered fallback set.
    """
    generate = generate or generate_text
    prompt = build_prompt(party1, party2, midpoint, activities, radius_km)

    text, err = await run_with_timeout(generate(prompt), config.PROVIDER_TIMEOUT_S, "gemini")
    if not err:
        try:
            suggestions = parse_venue_response(text)
        except VenueResponseError as e:
            log.warning("unusable venue response: %s", e)
            log.debug("raw response: %s", text)
        else:
            return to_venues(suggestions, party1, party2)

    venues = fallback_venues(midpoint, activities, party1, party2)
    log.info("using %d fallback venue(s) for %s", len(venues), ",".join(activities))
    return venues

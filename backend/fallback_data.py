# fallback_data.py
# static last-resort data: city table for geocoding, generic venues near a midpoint

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from models import AddressCandidate, Coordinate

# (display name, lat, lng, type, importance)
CITIES: List[Tuple[str, float, float, str, float]] = [
    ("New York, NY, United States", 40.7128, -74.006, "city", 0.9),
    ("New York City, NY, United States", 40.7128, -74.006, "city", 0.95),
    ("Manhattan, New York, NY, United States", 40.7831, -73.9712, "district", 0.8),
    ("Brooklyn, New York, NY, United States", 40.6782, -73.9442, "district", 0.8),
    ("Los Angeles, CA, United States", 34.0522, -118.2437, "city", 0.9),
    ("LA, California, United States", 34.0522, -118.2437, "city", 0.85),
    ("Chicago, IL, United States", 41.8781, -87.6298, "city", 0.9),
    ("Houston, TX, United States", 29.7604, -95.3698, "city", 0.9),
    ("Phoenix, AZ, United States", 33.4484, -112.074, "city", 0.9),
    ("Philadelphia, PA, United States", 39.9526, -75.1652, "city", 0.9),
    ("San Antonio, TX, United States", 29.4241, -98.4936, "city", 0.85),
    ("San Diego, CA, United States", 32.7157, -117.1611, "city", 0.85),
    ("Dallas, TX, United States", 32.7767, -96.797, "city", 0.9),
    ("San Jose, CA, United States", 37.3382, -121.8863, "city", 0.85),
    ("San Francisco, CA, United States", 37.7749, -122.4194, "city", 0.9),
    ("Seattle, WA, United States", 47.6062, -122.3321, "city", 0.9),
    ("Boston, MA, United States", 42.3601, -71.0589, "city", 0.9),
    ("Miami, FL, United States", 25.7617, -80.1918, "city", 0.85),
    ("Denver, CO, United States", 39.7392, -104.9903, "city", 0.85),
    ("London, United Kingdom", 51.5074, -0.1278, "city", 0.95),
    ("Paris, France", 48.8566, 2.3522, "city", 0.95),
    ("Tokyo, Japan", 35.6762, 139.6503, "city", 0.95),
    ("Sydney, Australia", -33.8688, 151.2093, "city", 0.9),
    ("Toronto, ON, Canada", 43.6532, -79.3832, "city", 0.9),
    ("Vancouver, BC, Canada", 49.2827, -123.1207, "city", 0.85),
]

# lowercase keys for single-shot geocoding, includes common short forms
CITY_COORDINATES: Dict[str, Tuple[float, float]] = {
    "new york": (40.7128, -74.006),
    "new york city": (40.7128, -74.006),
    "nyc": (40.7128, -74.006),
    "manhattan": (40.7831, -73.9712),
    "brooklyn": (40.6782, -73.9442),
    "los angeles": (34.0522, -118.2437),
    "la": (34.0522, -118.2437),
    "chicago": (41.8781, -87.6298),
    "houston": (29.7604, -95.3698),
    "phoenix": (33.4484, -112.074),
    "philadelphia": (39.9526, -75.1652),
    "san antonio": (29.4241, -98.4936),
    "san diego": (32.7157, -117.1611),
    "dallas": (32.7767, -96.797),
    "san jose": (37.3382, -121.8863),
    "san francisco": (37.7749, -122.4194),
    "seattle": (47.6062, -122.3321),
    "boston": (42.3601, -71.0589),
    "miami": (25.7617, -80.1918),
    "denver": (39.7392, -104.9903),
    "london": (51.5074, -0.1278),
    "paris": (48.8566, 2.3522),
    "tokyo": (35.6762, 139.6503),
    "sydney": (-33.8688, 151.2093),
    "toronto": (43.6532, -79.3832),
    "vancouver": (49.2827, -123.1207),
}


def search_cities(query: str, limit: int) -> List[AddressCandidate]:
    """Case-insensitive substring match, highest importance first."""
    q = query.lower().strip()
    matches = [
        AddressCandidate(
            display_name=name,
            coordinates=Coordinate(lat=lat, lng=lng),
            type=kind,
            importance=imp,
        )
        for name, lat, lng, kind, imp in CITIES
        if q in name.lower()
    ]
    matches.sort(key=lambda c: c.importance, reverse=True)
    return matches[:limit]


def _contains_words(haystack: str, needle: str) -> bool:
    return re.search(rf"\b{re.escape(needle)}\b", haystack) is not None


def city_coordinates(address: str) -> Optional[Coordinate]:
    """
    Exact key first, then whole-word containment either way, longest key
    first. "la" matches "LA, CA" but not "Atlanta" or "Dallas".
    """
    key = address.lower().strip()
    if not key:
        return None
    if key in CITY_COORDINATES:
        lat, lng = CITY_COORDINATES[key]
        return Coordinate(lat=lat, lng=lng)
    for name in sorted(CITY_COORDINATES, key=len, reverse=True):
        lat, lng = CITY_COORDINATES[name]
        if _contains_words(key, name) or _contains_words(name, key):
            return Coordinate(lat=lat, lng=lng)
    return None


# (id, name, address, dlat, dlng, rating, type, description)
GENERIC_VENUES = [
    ("fallback-1", "Central Park Cafe", "123 Park Ave, New York, NY", 0.01, 0.01, 4.5, "dining",
     "Cozy cafe with outdoor seating - perfect for casual meetups"),
    ("fallback-2", "Art Gallery Downtown", "456 Main St, New York, NY", -0.01, -0.01, 4.2, "cultural",
     "Contemporary art gallery with rotating exhibitions"),
    ("fallback-3", "Riverside Park", "789 River Rd, New York, NY", 0.005, -0.005, 4.7, "outdoor",
     "Beautiful park with walking trails and scenic views"),
]

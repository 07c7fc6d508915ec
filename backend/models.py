# models.py
# typed planning entities plus request/response models for the API

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PlanningStep = Literal["location", "activities", "venues", "itinerary"]

ACTIVITY_CATEGORIES = {
    "dining": "Dining & Food",
    "entertainment": "Entertainment",
    "outdoor": "Outdoor Activities",
    "cultural": "Cultural & Arts",
    "shopping": "Shopping",
    "nightlife": "Nightlife",
    "sports": "Sports & Fitness",
    "wellness": "Wellness & Spa",
}


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# suggestions that still need a retrieve call carry (0, 0)
UNRESOLVED = Coordinate(lat=0, lng=0)


class Party(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    coordinates: Coordinate


class AddressCandidate(BaseModel):
    display_name: str
    coordinates: Coordinate = UNRESOLVED
    # provider place id for two-phase resolution (mapbox_id)
    source_id: Optional[str] = None
    type: str = "location"
    importance: float = 0.0
    address: Optional[str] = None
    full_address: Optional[str] = None
    place_formatted: Optional[str] = None
    feature_type: Optional[str] = None
    poi_category: Optional[List[str]] = None
    maki: Optional[str] = None
    distance: Optional[float] = None

    @property
    def is_resolved(self) -> bool:
        return self.coordinates != UNRESOLVED


class VenueSuggestion(BaseModel):
    """One venue as the recommendation provider is asked to return it."""

    name: str
    address: str
    coordinates: Coordinate
    rating: Optional[float] = None
    type: str
    description: str = ""
    googleMapsLink: Optional[str] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _drop_bad_rating(cls, v):
        # "omit if unknown": anything outside 1..5 is treated as unknown
        if v is None:
            return None
        try:
            r = float(v)
        except (TypeError, ValueError):
            return None
        return r if 1 <= r <= 5 else None


class Venue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    address: str
    coordinates: Coordinate
    rating: Optional[float] = None
    type: str
    description: str = ""
    image_url: Optional[str] = None
    maps_link: Optional[str] = None
    distance_from_party1: float = 0.0
    distance_from_party2: float = 0.0

    @property
    def average_distance(self) -> float:
        return (self.distance_from_party1 + self.distance_from_party2) / 2


class Experience(BaseModel):
    id: str
    venue: Venue
    activities: List[str] = Field(default_factory=list)
    order: int
    estimated_duration: int = 120


class ItineraryStep(BaseModel):
    id: str
    time: datetime
    activity: str
    location: str
    duration: int
    description: str = ""
    coordinates: Coordinate
    venue: Optional[Venue] = None

    @property
    def display_time(self) -> str:
        return self.time.strftime("%I:%M %p")


class Itinerary(BaseModel):
    steps: List[ItineraryStep] = Field(default_factory=list)
    total_duration: int = 0
    max_distance_km: float = 0.0


class PlanningState(BaseModel):
    """Everything one planning session owns. Stages return new copies."""

    step: PlanningStep = "location"
    party1: Optional[Party] = None
    party2: Optional[Party] = None
    midpoint: Optional[Coordinate] = None
    activities: List[str] = Field(default_factory=list)
    venues: List[Venue] = Field(default_factory=list)
    experiences: List[Experience] = Field(default_factory=list)
    itinerary: Optional[Itinerary] = None
    # bumped on navigation; results tagged with an older value are stale
    generation: int = 0


class PlanRecord(BaseModel):
    parties: List[Party]
    activities: List[str]
    venues: List[Venue]
    itinerary: List[ItineraryStep]


class MapView(BaseModel):
    parties: List[Party]
    midpoint: Optional[Coordinate] = None
    venues: List[Venue]
    highlighted_venue_id: Optional[str] = None
    show_routes: bool = False


# ---- API payloads ----

class PartyInput(BaseModel):
    name: str = ""
    address: str


class LocationsRequest(BaseModel):
    party1: PartyInput
    party2: PartyInput


class LocationsResponse(BaseModel):
    party1: Party
    party2: Party
    midpoint: Coordinate


class ResolveRequest(BaseModel):
    candidate: AddressCandidate
    session_token: Optional[str] = None


class ResolveResponse(BaseModel):
    coordinates: Optional[Coordinate] = None


class VenuesRequest(BaseModel):
    party1: Party
    party2: Party
    midpoint: Optional[Coordinate] = None
    activities: List[str]
    radius_km: float = Field(10, gt=0)


class VenuesResponse(BaseModel):
    midpoint: Coordinate
    venues: List[Venue]


class ItineraryRequest(BaseModel):
    party1: Party
    party2: Party
    midpoint: Optional[Coordinate] = None
    experiences: List[Experience]
    start: Optional[datetime] = None


class PlanRequest(BaseModel):
    party1: Party
    party2: Party
    activities: List[str]
    experiences: List[Experience]
    start: Optional[datetime] = None

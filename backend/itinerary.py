# itinerary.py
# timed meetup plan from an ordered list of experiences

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

import config
from geomath import distance_km, travel_time_minutes
from models import Coordinate, Experience, Itinerary, ItineraryStep, Party

ACTIVITY_NAMES = {
    "dining": "Dining Experience",
    "entertainment": "Entertainment",
    "outdoor": "Outdoor Activity",
    "cultural": "Cultural Experience",
    "shopping": "Shopping",
    "nightlife": "Nightlife",
    "sports": "Sports Activity",
    "wellness": "Wellness Activity",
}


@dataclass(frozen=True)
class ItineraryPolicy:
    """Speed and buffers (minutes). Defaults come from config."""

    speed_kmh: float = config.AVERAGE_SPEED_KMH
    departure_buffer: int = config.DEPARTURE_BUFFER_MIN
    meeting_buffer: int = config.MEETING_BUFFER_MIN
    transition_buffer: int = config.TRANSITION_BUFFER_MIN
    wrap_up: int = config.WRAP_UP_MIN


def activity_name(venue_type: str) -> str:
    return ACTIVITY_NAMES.get(venue_type, "Experience")


def max_distance_km(party1: Party, party2: Party, experiences: List[Experience]) -> float:
    """Farthest either party has to go to reach any venue."""
    return max(
        (max(distance_km(party1.coordinates, e.venue.coordinates),
             distance_km(party2.coordinates, e.venue.coordinates)) for e in experiences),
        default=0.0,
    )


def generate_itinerary(party1: Party, party2: Party, experiences: List[Experience],
                       midpoint: Optional[Coordinate] = None, now: Optional[datetime] = None,
                       policy: ItineraryPolicy = ItineraryPolicy()) -> Itinerary:
    """
    Regenerate the whole plan. Same inputs and same `now` give the same steps.
    Experiences are taken in list order (the session keeps them sorted).
    """
    if not experiences:
        return Itinerary()

    def travel(a: Coordinate, b: Coordinate) -> int:
        return travel_time_minutes(a, b, policy.speed_kmh)

    now = now or datetime.now()
    clock = now + timedelta(minutes=policy.departure_buffer)
    first, last = experiences[0].venue, experiences[-1].venue
    steps: List[ItineraryStep] = [ItineraryStep(
        id="departure",
        time=clock,
        activity="Departure",
        location="Your locations",
        duration=0,
        description=f"{party1.name} and {party2.name} start their journey",
        coordinates=midpoint or first.coordinates,
    )]

    for i, exp in enumerate(experiences):
        venue = exp.venue
        if i == 0:
            # the meetup starts when the slower party gets there
            clock += timedelta(minutes=max(travel(party1.coordinates, venue.coordinates),
                                           travel(party2.coordinates, venue.coordinates)))
            steps.append(ItineraryStep(
                id=f"travel-{i}",
                time=clock,
                activity="Arrival",
                location=venue.name,
                duration=policy.meeting_buffer,
                description=f"Meet at {venue.name}",
                coordinates=venue.coordinates,
                venue=venue,
            ))

        clock += timedelta(minutes=policy.meeting_buffer if i == 0 else policy.transition_buffer)
        steps.append(ItineraryStep(
            id=f"experience-{i}",
            time=clock,
            activity=activity_name(venue.type),
            location=venue.name,
            duration=exp.estimated_duration,
            description=f"Experience {i + 1}: {venue.description or f'Enjoy your time at {venue.name}'}",
            coordinates=venue.coordinates,
            venue=venue,
        ))
        clock += timedelta(minutes=exp.estimated_duration)

        if i < len(experiences) - 1:
            nxt = experiences[i + 1].venue
            steps.append(ItineraryStep(
                id=f"transition-{i}",
                time=clock,
                activity="Travel",
                location=f"To {nxt.name}",
                duration=travel(venue.coordinates, nxt.coordinates),
                description=f"Travel from {venue.name} to {nxt.name}",
                coordinates=nxt.coordinates,
            ))

    steps.append(ItineraryStep(
        id="wrap-up",
        time=clock,
        activity="Wrap Up",
        location=last.name,
        duration=policy.wrap_up,
        description="Say goodbye and prepare for departure",
        coordinates=last.coordinates,
    ))
    clock += timedelta(minutes=policy.wrap_up)

    back = max(travel(last.coordinates, party1.coordinates),
               travel(last.coordinates, party2.coordinates))
    steps.append(ItineraryStep(
        id="return",
        time=clock,
        activity="Return Journey",
        location="Back to your locations",
        duration=back,
        description=f"Travel back home (Est. {back} minutes)",
        coordinates=midpoint or party1.coordinates,
    ))

    return Itinerary(
        steps=steps,
        total_duration=sum(s.duration for s in steps),
        max_distance_km=max_distance_km(party1, party2, experiences),
    )

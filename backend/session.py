# session.py
# planning session stages. each stage is (state, input) -> new state; nothing is mutated in place

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Tuple

import config
from geocoding import geocode_address
from geomath import midpoint as compute_midpoint
from itinerary import ItineraryPolicy, generate_itinerary
from models import (
    Coordinate,
    Experience,
    MapView,
    Party,
    PlanningState,
    PlanningStep,
    PlanRecord,
    Venue,
)
from recommendations import recommend_venues

log = logging.getLogger(__name__)

STEPS: List[PlanningStep] = ["location", "activities", "venues", "itinerary"]

GeocodeFn = Callable[[str], Awaitable[Optional[Coordinate]]]


class PlanningInputError(ValueError):
    """Bad user input; shown to the user, nothing was attempted."""


class LocationNotFoundError(PlanningInputError):
    pass


# ---- locations ----

async def resolve_parties(name1: str, address1: str, name2: str, address2: str,
                          geocode: Optional[GeocodeFn] = None) -> Tuple[Party, Party]:
    """
    Geocode both addresses concurrently. Both must resolve: a midpoint is
    never computed from half a pair.
    """
    if not address1.strip() or not address2.strip():
        raise PlanningInputError("Please enter a location for both people.")

    geocode = geocode or geocode_address
    c1, c2 = await asyncio.gather(geocode(address1), geocode(address2))
    if not c1 or not c2:
        raise LocationNotFoundError("Could not find one or both locations. Please try different addresses.")

    return (
        Party(name=name1.strip() or "Person 1", address=address1, coordinates=c1),
        Party(name=name2.strip() or "Person 2", address=address2, coordinates=c2),
    )


def set_locations(state: PlanningState, party1: Party, party2: Party) -> PlanningState:
    return state.model_copy(update={
        "party1": party1,
        "party2": party2,
        "midpoint": compute_midpoint(party1.coordinates, party2.coordinates),
        "step": "activities",
        "generation": state.generation + 1,
    })


# ---- activities ----

def select_activities(state: PlanningState, activities: List[str]) -> PlanningState:
    tags = list(dict.fromkeys(a for a in activities if a))
    if not tags:
        raise PlanningInputError("Select at least one activity.")
    return state.model_copy(update={
        "activities": tags,
        "step": "venues",
        "generation": state.generation + 1,
    })


# ---- venues ----

async def load_venues(state: PlanningState, radius_km: float = 10, **kwargs) -> List[Venue]:
    if not (state.party1 and state.party2 and state.midpoint):
        raise PlanningInputError("Set both locations first.")
    if not state.activities:
        raise PlanningInputError("Select at least one activity.")
    return await recommend_venues(state.party1.coordinates, state.party2.coordinates,
                                  state.midpoint, state.activities, radius_km, **kwargs)


def apply_venues(state: PlanningState, venues: List[Venue], generation: int) -> PlanningState:
    """Store a venue batch unless the user navigated away while it loaded."""
    if generation != state.generation:
        log.debug("dropping venues for generation %d (now %d)", generation, state.generation)
        return state
    return state.model_copy(update={"venues": list(venues)})


def is_venue_selected(state: PlanningState, venue_id: str) -> bool:
    return any(e.venue.id == venue_id for e in state.experiences)


def add_experience(state: PlanningState, venue: Venue,
                   estimated_duration: int = config.DEFAULT_EXPERIENCE_MIN) -> PlanningState:
    exp = Experience(
        id=f"exp-{uuid.uuid4().hex[:12]}",
        venue=venue,
        activities=list(state.activities),
        order=len(state.experiences) + 1,
        estimated_duration=estimated_duration,
    )
    return state.model_copy(update={"experiences": [*state.experiences, exp]})


def remove_experience(state: PlanningState, experience_id: str) -> PlanningState:
    """Drop one experience and renumber the rest 1..N, keeping their order."""
    kept = [e for e in state.experiences if e.id != experience_id]
    renumbered = [e.model_copy(update={"order": i}) for i, e in enumerate(kept, 1)]
    return state.model_copy(update={"experiences": renumbered})


# ---- itinerary ----

def build_itinerary(state: PlanningState, now: Optional[datetime] = None,
                    policy: ItineraryPolicy = ItineraryPolicy()) -> PlanningState:
    if not (state.party1 and state.party2):
        raise PlanningInputError("Set both locations first.")
    if not state.experiences:
        raise PlanningInputError("Pick at least one venue.")
    ordered = sorted(state.experiences, key=lambda e: e.order)
    itinerary = generate_itinerary(state.party1, state.party2, ordered,
                                   midpoint=state.midpoint, now=now, policy=policy)
    return state.model_copy(update={"itinerary": itinerary, "step": "itinerary"})


# ---- navigation ----

def is_step_completed(state: PlanningState, step: PlanningStep) -> bool:
    if step == "location":
        return bool(state.party1 and state.party2 and state.midpoint)
    if step == "activities":
        return bool(state.activities)
    if step == "venues":
        return bool(state.experiences)
    return False


def navigate(state: PlanningState, step: PlanningStep) -> PlanningState:
    """
    Move to an earlier step, or to any completed one. Bumps the generation so
    responses still in flight for the step being left are ignored.
    """
    if STEPS.index(step) > STEPS.index(state.step) and not is_step_completed(state, step):
        return state
    return state.model_copy(update={"step": step, "generation": state.generation + 1})


def go_back(state: PlanningState) -> PlanningState:
    i = STEPS.index(state.step)
    return navigate(state, STEPS[i - 1]) if i > 0 else state


def reset(state: PlanningState) -> PlanningState:
    # a fresh session, but the generation keeps counting up
    return PlanningState(generation=state.generation + 1)


# ---- outputs for collaborators ----

def plan_record(state: PlanningState) -> PlanRecord:
    """The finalized plan handed to the persistence store."""
    if not (state.party1 and state.party2):
        raise PlanningInputError("Set both locations first.")
    return PlanRecord(
        parties=[state.party1, state.party2],
        activities=list(state.activities),
        venues=[e.venue for e in sorted(state.experiences, key=lambda e: e.order)],
        itinerary=list(state.itinerary.steps) if state.itinerary else [],
    )


def map_view(state: PlanningState, highlighted: Optional[str] = None, show_routes: bool = False) -> MapView:
    """What the map surface needs: markers, midpoint, selected venue."""
    parties = [p for p in (state.party1, state.party2) if p]
    venues = [e.venue for e in state.experiences] if state.step == "itinerary" else list(state.venues)
    return MapView(
        parties=parties,
        midpoint=state.midpoint,
        venues=venues,
        highlighted_venue_id=highlighted,
        show_routes=show_routes,
    )

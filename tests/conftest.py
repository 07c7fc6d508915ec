import asyncio

import httpx
import pytest

import config
from models import Coordinate, Experience, Party, Venue

NYC = Coordinate(lat=40.7128, lng=-74.0060)
LA = Coordinate(lat=34.0522, lng=-118.2437)
BROOKLYN = Coordinate(lat=40.6782, lng=-73.9442)
HOBOKEN = Coordinate(lat=40.7440, lng=-74.0324)


def run(coro):
    return asyncio.run(coro)


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_venue(vid="v1", kind="dining", at=NYC, d1=0.0, d2=0.0, name=None, description=""):
    return Venue(
        id=vid,
        name=name or f"Venue {vid}",
        address="1 Main St",
        coordinates=at,
        type=kind,
        description=description,
        distance_from_party1=d1,
        distance_from_party2=d2,
    )


def make_experience(venue, order, duration=120):
    return Experience(id=f"exp-{venue.id}", venue=venue, activities=[venue.type],
                      order=order, estimated_duration=duration)


@pytest.fixture
def party1():
    return Party(name="Ana", address="Brooklyn", coordinates=BROOKLYN)


@pytest.fixture
def party2():
    return Party(name="Ben", address="Hoboken", coordinates=HOBOKEN)


@pytest.fixture
def mapbox_token(monkeypatch):
    monkeypatch.setattr(config, "MAPBOX_ACCESS_TOKEN", "pk.test")
    return "pk.test"


@pytest.fixture
def no_mapbox(monkeypatch):
    monkeypatch.setattr(config, "MAPBOX_ACCESS_TOKEN", "")

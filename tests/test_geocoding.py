import httpx
import pytest

from conftest import mock_client, run
from fallback_data import city_coordinates
from geocoding import geocode_address, new_session_token, resolve_candidate, search_addresses
from models import AddressCandidate, Coordinate, UNRESOLVED
from providers import mapbox

NOMINATIM_ROWS = [
    {"display_name": "Paris, Ile-de-France, France", "lat": "48.8566", "lon": "2.3522",
     "type": "city", "importance": 0.7},
    {"display_name": "Paris, Texas, United States", "lat": "33.6609", "lon": "-95.5555",
     "type": "town", "importance": 0.9},
]

MAPBOX_SUGGESTIONS = {"suggestions": [
    {"name": "France", "mapbox_id": "c1", "feature_type": "country"},
    {"name": "Cafe de Paris", "mapbox_id": "p1", "feature_type": "poi",
     "full_address": "1 Rue X, Paris", "poi_category": ["cafe"]},
    {"name": "Ile-de-France", "mapbox_id": "r1", "feature_type": "region"},
]}


class Recorder:
    """MockTransport handler that routes by host and remembers every request."""

    def __init__(self, mapbox=None, nominatim=None):
        self.mapbox = mapbox
        self.nominatim = nominatim
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.mapbox if request.url.host == "api.mapbox.com" else self.nominatim
        if route is None:
            return httpx.Response(503)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def hosts(self):
        return [r.url.host for r in self.requests]


def search(handler, query, limit=5, session_token=None):
    async def go():
        async with mock_client(handler) as client:
            return await search_addresses(query, limit, session_token=session_token, client=client)
    return run(go())


def test_short_query_makes_no_call(mapbox_token):
    rec = Recorder(mapbox=MAPBOX_SUGGESTIONS, nominatim=NOMINATIM_ROWS)
    assert search(rec, "p") == []
    assert search(rec, "  p ") == []
    assert rec.requests == []


def test_mapbox_suggestions_are_unresolved_and_ranked(mapbox_token):
    rec = Recorder(mapbox=MAPBOX_SUGGESTIONS)
    results = search(rec, "paris", session_token="tok-1")

    assert [r.source_id for r in results] == ["p1", "r1", "c1"]
    assert all(r.coordinates == UNRESOLVED and not r.is_resolved for r in results)
    assert results[0].display_name == "1 Rue X, Paris"
    assert rec.hosts() == ["api.mapbox.com"]
    params = rec.requests[0].url.params
    assert params["session_token"] == "tok-1"
    assert params["language"] == "en"


def test_mapbox_limit_is_capped(mapbox_token):
    rec = Recorder(mapbox={"suggestions": []})
    search(rec, "paris", limit=25)
    assert rec.requests[0].url.params["limit"] == "10"


def test_mapbox_failure_falls_back_to_nominatim(mapbox_token):
    rec = Recorder(mapbox=None, nominatim=NOMINATIM_ROWS)
    results = search(rec, "paris")

    assert rec.hosts() == ["api.mapbox.com", "nominatim.openstreetmap.org"]
    assert [r.display_name for r in results] == ["Paris, Texas, United States", "Paris, Ile-de-France, France"]
    assert results[0].coordinates == Coordinate(lat=33.6609, lng=-95.5555)
    assert results[0].source_id is None


def test_malformed_mapbox_body_falls_back(mapbox_token):
    rec = Recorder(mapbox={"unexpected": True}, nominatim=NOMINATIM_ROWS)
    results = search(rec, "paris")
    assert len(results) == 2
    assert "nominatim.openstreetmap.org" in rec.hosts()


def test_network_error_falls_back(mapbox_token):
    rec = Recorder(mapbox=httpx.ConnectError("down"), nominatim=NOMINATIM_ROWS)
    assert len(search(rec, "paris")) == 2


def test_without_token_goes_straight_to_nominatim(no_mapbox):
    rec = Recorder(mapbox=MAPBOX_SUGGESTIONS, nominatim=NOMINATIM_ROWS)
    search(rec, "paris")
    assert rec.hosts() == ["nominatim.openstreetmap.org"]
    assert rec.requests[0].headers["User-Agent"].startswith("MiddleMeetup")


def test_everything_down_uses_city_table(mapbox_token):
    rec = Recorder()
    results = search(rec, "SAN", limit=2)
    assert [r.display_name for r in results] == [
        "San Francisco, CA, United States",
        "San Antonio, TX, United States",
    ]
    assert all(r.is_resolved for r in results)


def test_empty_nominatim_uses_city_table(no_mapbox):
    rec = Recorder(nominatim=[])
    results = search(rec, "tokyo")
    assert [r.display_name for r in results] == ["Tokyo, Japan"]


def test_no_match_anywhere_is_empty(no_mapbox):
    assert search(Recorder(nominatim=[]), "atlantis") == []


def resolve(handler, candidate, token):
    async def go():
        async with mock_client(handler) as client:
            return await resolve_candidate(candidate, token, client=client)
    return run(go())


def test_resolved_candidate_needs_no_call(mapbox_token):
    rec = Recorder()
    c = AddressCandidate(display_name="Paris", coordinates=Coordinate(lat=48.85, lng=2.35))
    assert resolve(rec, c, "tok") == Coordinate(lat=48.85, lng=2.35)
    assert rec.requests == []


def test_two_phase_resolution_reuses_session_token(mapbox_token):
    rec = Recorder(mapbox={"features": [{"geometry": {"coordinates": [2.35, 48.85]}}]})
    c = AddressCandidate(display_name="Cafe de Paris", source_id="p1")
    assert resolve(rec, c, "tok-9") == Coordinate(lat=48.85, lng=2.35)

    req = rec.requests[0]
    assert req.url.path.endswith("/retrieve/p1")
    assert req.url.params["session_token"] == "tok-9"


def test_failed_retrieve_is_none(mapbox_token):
    c = AddressCandidate(display_name="Cafe de Paris", source_id="p1")
    assert resolve(Recorder(), c, "tok") is None


def test_unresolved_without_id_is_none(mapbox_token):
    rec = Recorder()
    assert resolve(rec, AddressCandidate(display_name="?"), "tok") is None
    assert rec.requests == []


def geocode(handler, address):
    async def go():
        async with mock_client(handler) as client:
            return await geocode_address(address, client=client)
    return run(go())


def test_geocode_mapbox_forward_swaps_lng_lat(mapbox_token):
    rec = Recorder(mapbox={"features": [{"geometry": {"coordinates": [-74.006, 40.7128]}}]})
    assert geocode(rec, "New York") == Coordinate(lat=40.7128, lng=-74.006)
    assert rec.requests[0].url.params["limit"] == "1"


def test_geocode_mapbox_no_features_tries_nominatim(mapbox_token):
    rec = Recorder(mapbox={"features": []}, nominatim=NOMINATIM_ROWS[:1])
    assert geocode(rec, "Paris") == Coordinate(lat=48.8566, lng=2.3522)
    assert rec.hosts() == ["api.mapbox.com", "nominatim.openstreetmap.org"]


def test_geocode_static_table_last(mapbox_token):
    assert geocode(Recorder(), "Chicago, IL") == Coordinate(lat=41.8781, lng=-87.6298)
    assert geocode(Recorder(), "Dallas TX") == Coordinate(lat=32.7767, lng=-96.797)


def test_geocode_total_failure_is_none(no_mapbox):
    assert geocode(Recorder(nominatim=[]), "Atlantis") is None
    assert geocode(Recorder(), "   ") is None


@pytest.mark.parametrize("address", ["Atlanta, GA", "Cleveland", "Orlando FL", "Salamanca"])
def test_city_table_matches_whole_words_only(address):
    assert city_coordinates(address) is None


def test_city_table_short_forms():
    la = Coordinate(lat=34.0522, lng=-118.2437)
    assert city_coordinates("LA") == la
    assert city_coordinates("LA, California") == la
    assert city_coordinates("downtown la") == la
    assert city_coordinates("new") == Coordinate(lat=40.7128, lng=-74.006)


def test_importance_scores():
    assert mapbox.importance({"feature_type": "country"}) == pytest.approx(0.7)
    assert mapbox.importance({"feature_type": "region"}) == pytest.approx(0.9)
    assert mapbox.importance({"feature_type": "address"}) == 1.0
    assert mapbox.importance({"feature_type": "country", "poi_category": ["x"], "distance": 3}) == 1.0


def test_session_tokens_are_unique():
    assert new_session_token() != new_session_token()

import math

import pytest

from conftest import BROOKLYN, HOBOKEN, LA, NYC
from geomath import distance_km, midpoint, travel_time_minutes
from models import Coordinate

POINTS = [
    NYC, LA, BROOKLYN, HOBOKEN,
    Coordinate(lat=51.5074, lng=-0.1278),
    Coordinate(lat=-33.8688, lng=151.2093),
    Coordinate(lat=35.6762, lng=139.6503),
    Coordinate(lat=0, lng=0),
    Coordinate(lat=10, lng=179),
    Coordinate(lat=10, lng=-179),
]
PAIRS = [(a, b) for a in POINTS for b in POINTS]


def test_ny_la_distance():
    assert distance_km(NYC, LA) == pytest.approx(3936, abs=5)


def test_ny_la_midpoint_is_not_naive_average():
    m = midpoint(NYC, LA)
    assert m.lat == pytest.approx(39.5, abs=0.3)
    assert m.lng == pytest.approx(-97.0, abs=0.3)
    # the naive average would be (37.38, -96.12)
    assert m.lat > (NYC.lat + LA.lat) / 2 + 1


@pytest.mark.parametrize("a,b", PAIRS)
def test_midpoint_symmetric(a, b):
    m1, m2 = midpoint(a, b), midpoint(b, a)
    assert m1.lat == pytest.approx(m2.lat, abs=1e-9)
    assert m1.lng == pytest.approx(m2.lng, abs=1e-9)


@pytest.mark.parametrize("a", POINTS)
def test_midpoint_of_same_point(a):
    assert midpoint(a, a) == a
    assert distance_km(a, a) == 0
    assert travel_time_minutes(a, a) == 0


@pytest.mark.parametrize("a,b", PAIRS)
def test_distance_symmetric_non_negative(a, b):
    assert distance_km(a, b) == pytest.approx(distance_km(b, a))
    assert distance_km(a, b) >= 0


def test_midpoint_is_halfway():
    m = midpoint(NYC, LA)
    assert distance_km(NYC, m) == pytest.approx(distance_km(m, LA), rel=1e-6)


def test_triangle_inequality():
    via = distance_km(NYC, HOBOKEN) + distance_km(HOBOKEN, BROOKLYN)
    assert distance_km(NYC, BROOKLYN) <= via + 1e-9


def test_midpoint_across_dateline_stays_in_range():
    m = midpoint(Coordinate(lat=10, lng=179), Coordinate(lat=10, lng=-179))
    assert -180 <= m.lng < 180
    assert m.lng == pytest.approx(-180, abs=1e-6)
    assert m.lat == pytest.approx(10, abs=0.01)


def test_midpoint_across_dateline_is_order_independent():
    east, west = Coordinate(lat=10, lng=179), Coordinate(lat=10, lng=-179)
    assert midpoint(east, west) == midpoint(west, east)


@pytest.mark.parametrize("a,b", PAIRS)
def test_travel_time_formula(a, b):
    assert travel_time_minutes(a, b) == math.ceil(distance_km(a, b) / 50 * 60)
    assert travel_time_minutes(a, b) >= 0


def test_travel_time_speed_is_configurable():
    slow = travel_time_minutes(NYC, LA, speed_kmh=50)
    fast = travel_time_minutes(NYC, LA, speed_kmh=100)
    assert fast == math.ceil(distance_km(NYC, LA) / 100 * 60)
    assert fast < slow

import numpy as np
import pytest

from eatc_airlines.geodesy import Direction, bearing, bearings, direction
from eatc_airlines.model import Location


def test_cardinal_bearings(places):
    assert bearing(places.home, places.north) == pytest.approx(0.0, abs=1e-9)
    assert bearing(places.home, places.east) == pytest.approx(90.0)
    assert bearing(places.home, places.south) == pytest.approx(180.0)
    assert bearing(places.home, places.west) == pytest.approx(270.0)


def test_great_circle_bearing_london_to_new_york():
    heathrow = Location("EGLL", 51.4700, -0.4543)
    kennedy = Location("KJFK", 40.6413, -73.7781)
    assert heathrow.bearing(kennedy) == pytest.approx(288.0, abs=1.0)


def test_vectorised_bearings_stay_in_range():
    lat = np.array([0.0, 0.0, 10.0])
    lon = np.array([0.0, 0.0, 10.0])
    result = bearings(lat, lon, lat[::-1], lon[::-1] - 20)
    assert result.shape == (3,)
    assert ((result >= 0) & (result < 360)).all()


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, Direction.N),
        (44.99, Direction.N),
        (45, Direction.E),
        (134.99, Direction.E),
        (135, Direction.S),
        (225, Direction.W),
        (314.99, Direction.W),
        (315, Direction.N),
        (359.99, Direction.N),
        (-90, Direction.W),
    ],
)
def test_direction_buckets_are_half_open(value, expected):
    assert Direction.from_bearing(value) is expected


def test_direction_between_locations(places):
    assert direction(places.home, places.east) is Direction.E
    assert places.home.direction(places.south) is Direction.S

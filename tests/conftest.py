from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from eatc_airlines.config import resolve_config
from eatc_airlines.model import Airline, Bound, Flight, Location
from eatc_airlines.reference import load_reference_data

HOME = Location("HOME", 0.0, 0.0)
NORTH = Location("NRTH", 10.0, 0.0)
EAST = Location("EAST", 0.0, 10.0)
SOUTH = Location("STH", -10.0, 0.0)
WEST = Location("WEST", 0.0, -10.0)


@pytest.fixture
def places():
    """Airport at the origin and one point ten degrees away on each compass heading."""

    return SimpleNamespace(home=HOME, north=NORTH, east=EAST, south=SOUTH, west=WEST)


@pytest.fixture
def config():
    return resolve_config()


@pytest.fixture
def reference(config):
    return load_reference_data(config)


@pytest.fixture
def make_flight():
    def _make(
        id=1,
        airline=None,
        type="A320",
        tail=None,
        callsign=None,
        origin=EAST,
        destination=HOME,
        bound=None,
        time=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
    ):
        return Flight(
            id=id,
            time=time,
            tail=tail,
            type=type,
            airline=Airline.from_json(airline),
            callsign=callsign,
            destination=destination,
            origin=origin,
            bound=Bound(bound) if bound else None,
        )

    return _make

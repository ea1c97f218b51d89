"""Great-circle bearing and coarse compass direction between two points.

Bearings use the forward-azimuth formula on a spherical Earth. The vectorised
:func:`bearings` accepts numpy arrays (or pandas columns) so a whole flight
table can be bucketed at once; :func:`bearing` is the scalar convenience.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

import numpy as np


class HasLatLon(Protocol):
    lat: float
    lon: float


class Direction(str, Enum):
    """Coarse compass bucket of a bearing."""

    N = "N"
    E = "E"
    S = "S"
    W = "W"

    @classmethod
    def from_bearing(cls, bearing: float) -> "Direction":
        """Bucket a bearing in decimal degrees; anything outside E/S/W is north."""

        normalised = (bearing + 360) % 360
        if 225 <= normalised < 315:
            return cls.W
        if 135 <= normalised < 225:
            return cls.S
        if 45 <= normalised < 135:
            return cls.E
        return cls.N

    def __str__(self) -> str:
        return self.value


def bearings(lat1, lon1, lat2, lon2) -> np.ndarray:
    """Initial bearings in [0, 360) from (lat1, lon1) to (lat2, lon2), in decimal degrees."""

    phi1 = np.radians(np.asarray(lat1, dtype=float))
    phi2 = np.radians(np.asarray(lat2, dtype=float))
    delta_lambda = np.radians(np.asarray(lon2, dtype=float) - np.asarray(lon1, dtype=float))

    y = np.sin(delta_lambda) * np.cos(phi2)
    x = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(delta_lambda)
    theta = np.arctan2(y, x)

    return (np.degrees(theta) + 360) % 360


def bearing(origin: HasLatLon, destination: HasLatLon) -> float:
    """Initial bearing from ``origin`` to ``destination`` in decimal degrees."""

    return float(bearings(origin.lat, origin.lon, destination.lat, destination.lon))


def direction(origin: HasLatLon, destination: HasLatLon) -> Direction:
    """Compass bucket of the initial bearing from ``origin`` to ``destination``."""

    return Direction.from_bearing(bearing(origin, destination))

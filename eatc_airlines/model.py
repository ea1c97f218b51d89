"""Flight data model.

A :class:`Flight` is built once from provider JSON or from a stored file and
never mutated. Corrections made during normalisation produce a new value via
:meth:`Flight.replace`, which the owning collection stores under the same id.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from .geodesy import Direction, bearing, direction

UNASSIGNED_MARKER = "{PVT}"
SYNTHESIZED_SUFFIX = "-"


def is_synthesized_code(code: Optional[str]) -> bool:
    """True for codes derived from a registration-style callsign (trailing dash)."""

    return bool(code) and code.endswith(SYNTHESIZED_SUFFIX)


@dataclass(frozen=True)
class Location:
    """A named point (usually an airport) in decimal degrees."""

    name: str
    lat: float
    lon: float

    def bearing(self, to: "Location") -> float:
        return bearing(self, to)

    def direction(self, to: "Location") -> Direction:
        return direction(self, to)

    def to_json(self) -> Dict[str, Any]:
        return {"name": self.name, "lat": self.lat, "lon": self.lon}

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "Location":
        return cls(str(raw["name"]), float(raw["lat"]), float(raw["lon"]))


class AirlineState(Enum):
    KNOWN = "known"
    UNASSIGNED = "unassigned"
    UNSET = "unset"


@dataclass(frozen=True)
class Airline:
    """Operator attached to a flight.

    The feed mixes three meanings in one field: a real (or synthesized) code,
    the ``{PVT}`` "no assigned operator" marker, and nothing at all. They are
    kept apart here so every branch of the inference rules is explicit.
    """

    state: AirlineState
    code: Optional[str] = None

    @classmethod
    def known(cls, code: str) -> "Airline":
        return cls(AirlineState.KNOWN, code)

    @classmethod
    def unassigned(cls) -> "Airline":
        return cls(AirlineState.UNASSIGNED)

    @classmethod
    def unset(cls) -> "Airline":
        return cls(AirlineState.UNSET)

    @classmethod
    def from_json(cls, raw: Optional[str]) -> "Airline":
        if raw is None or raw == "":
            return cls.unset()
        if raw == UNASSIGNED_MARKER:
            return cls.unassigned()
        return cls.known(str(raw))

    def to_json(self) -> Optional[str]:
        if self.state is AirlineState.UNASSIGNED:
            return UNASSIGNED_MARKER
        return self.code

    @property
    def is_known(self) -> bool:
        return self.state is AirlineState.KNOWN

    @property
    def is_synthesized(self) -> bool:
        return self.is_known and is_synthesized_code(self.code)

    def __str__(self) -> str:
        return self.code if self.is_known else self.state.value


class Bound(str, Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"

    @classmethod
    def infer(cls, origin: Location, destination: Location, airport: str) -> Optional["Bound"]:
        """Return whether the flight arrives at or departs from ``airport``, if either."""

        if destination.name == airport:
            return cls.ARRIVAL
        if origin.name == airport:
            return cls.DEPARTURE
        return None


def parse_time(value: Any) -> datetime:
    """Parse epoch milliseconds or an ISO-8601 string into an aware UTC datetime."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        stamp = pd.to_datetime(value, unit="ms", utc=True)
    else:
        stamp = pd.to_datetime(value, utc=True)
    if pd.isna(stamp):
        raise ValueError(f"invalid flight time: {value!r}")
    return stamp.to_pydatetime()


def _optional_text(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} must be a string or null, got {value!r}")
    return value


@dataclass(frozen=True)
class Flight:
    """A single arrival or departure as reported by the tracking feed."""

    # fmt: off
    id:          int
    time:        datetime
    tail:        Optional[str]
    type:        str
    airline:     Airline
    callsign:    Optional[str]
    destination: Location
    origin:      Location
    bound:       Optional[Bound] = None
    # fmt: on

    def replace(self, **changes: Any) -> "Flight":
        """Return a corrected copy of this flight; the id never changes."""

        changes.pop("id", None)
        return dataclasses.replace(self, **changes)

    def direction(self) -> Direction:
        """Direction of the far end of the flight as seen from the queried airport."""

        if self.bound is Bound.DEPARTURE:
            return self.origin.direction(self.destination)
        return self.destination.direction(self.origin)

    def to_json(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {
            "id": self.id,
            "time": round(self.time.timestamp() * 1000),
            "tail": self.tail,
            "type": self.type,
            "airline": self.airline.to_json(),
            "callsign": self.callsign,
            "to": self.destination.to_json(),
            "from": self.origin.to_json(),
        }
        if self.bound is not None:
            raw["bound"] = self.bound.value
        return raw

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "Flight":
        """Build a flight from its stored JSON shape; raises KeyError/ValueError when malformed."""

        aircraft_type = raw["type"]
        if not isinstance(aircraft_type, str) or not aircraft_type:
            raise ValueError(f"aircraft type must be a non-empty string, got {aircraft_type!r}")

        bound = raw.get("bound")
        return cls(
            id=int(raw["id"]),
            time=parse_time(raw["time"]),
            tail=_optional_text(raw, "tail"),
            type=aircraft_type,
            airline=Airline.from_json(_optional_text(raw, "airline")),
            callsign=_optional_text(raw, "callsign"),
            destination=Location.from_json(raw["to"]),
            origin=Location.from_json(raw["from"]),
            bound=Bound(bound) if bound else None,
        )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

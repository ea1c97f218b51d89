"""Client for the remote flight tracking feed and the bulk history fetch."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

import requests

from .model import Airline, Bound, Flight, Location, utc_now

TIME_FIELDS = ("arrau", "arreu", "arrsu", "arrsts")  # actual, estimated, scheduled
CALLSIGN_FIELDS = ("cs", "fnic", "ectlcs")
GROUND_TYPE = "GRND"


class FeedError(RuntimeError):
    """The feed answered with an error status or an unreadable body."""


@dataclass
class FeedPage:
    flights: List[Flight]
    more: bool
    oldest: datetime


def _first_present(record: Mapping[str, Any], keys: tuple) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_str(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _location(record: Mapping[str, Any], prefix: str) -> Optional[Location]:
    name, lat, lon = record.get(f"{prefix}ic"), record.get(f"{prefix}la"), record.get(f"{prefix}lo")
    if not isinstance(name, str) or not _is_number(lat) or not _is_number(lon):
        return None
    return Location(name, float(lat), float(lon))


def parse_record(record: Mapping[str, Any], airport: str) -> Optional[Flight]:
    """Build a flight from one feed record; None when the record is unusable."""

    flight_id = record.get("fid")
    stamp = _first_present(record, TIME_FIELDS)
    tail = record.get("acr")
    aircraft_type = record.get("act")
    airline = record.get("csalic")
    callsign = _first_present(record, CALLSIGN_FIELDS)

    if not _is_number(flight_id) or not _is_number(stamp):
        return None
    if not _optional_str(tail) or not _optional_str(airline) or not _optional_str(callsign):
        return None
    if not isinstance(aircraft_type, str) or aircraft_type == GROUND_TYPE:
        return None

    destination = _location(record, "apdst")
    origin = _location(record, "aporg")
    if destination is None or origin is None or destination.name == origin.name:
        return None

    return Flight(
        id=int(flight_id),
        time=datetime.fromtimestamp(stamp, tz=timezone.utc),
        tail=tail,
        type=aircraft_type,
        airline=Airline.from_json(airline),
        callsign=callsign,
        destination=destination,
        origin=origin,
        bound=Bound.infer(origin, destination, airport),
    )


class FeedClient:
    """Fetch pages of an airport's flight board, newest first."""

    def __init__(self, base_url: str, key: str, timeout: float = 30) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.key = key
        self.timeout = timeout
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_page(self, icao: str, before: datetime) -> FeedPage:
        """Return flights of ``icao`` at or before ``before``."""

        url = self.base_url + icao
        params = {"key": self.key, "max": f"{before.timestamp():.0f}"}
        resp = self.session.get(url, params=params, timeout=self.timeout)
        if not resp.ok:
            raise FeedError(f"API returned {resp.status_code} ({resp.reason}) for {resp.url}")

        try:
            body = resp.json()
            records = body["list"]
            more = bool(body["hasEarlier"])
        except (ValueError, KeyError, TypeError) as exc:
            raise FeedError(f"{icao}: failed to parse response: {exc}") from exc

        flights: List[Flight] = []
        oldest = before
        for record in records:
            if not isinstance(record, Mapping):
                continue
            flight = parse_record(record, icao)
            if flight is None:
                continue
            flights.append(flight)
            oldest = min(oldest, flight.time)

        logging.debug("%s before %s: %d flights (more=%s)", icao, before.isoformat(), len(flights), more)
        return FeedPage(flights=flights, more=more, oldest=oldest)


def fetch_history(
    client: FeedClient,
    icao: str,
    concurrency: int = 5,
    step: timedelta = timedelta(seconds=2700),
    now: Optional[datetime] = None,
) -> Dict[int, Flight]:
    """Walk the feed back in time until it reports no earlier data.

    Each round issues ``concurrency`` requests in parallel, every one ``step``
    further in the past. A failed request abandons the walk; the flights
    fetched so far are still returned.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    flights: Dict[int, Flight] = {}
    now = now or utc_now()

    try:
        initial = client.get_page(icao, now + timedelta(days=1))
    except (requests.RequestException, FeedError) as exc:
        logging.warning("Fetching %s failed: %s", icao, exc)
        return flights

    for flight in initial.flights:
        flights[flight.id] = flight
    more = initial.more
    cursor = initial.oldest + step

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        while more:
            windows = [cursor - step * i for i in range(concurrency)]
            cursor -= step * concurrency
            try:
                pages = list(pool.map(lambda before: client.get_page(icao, before), windows))
            except (requests.RequestException, FeedError) as exc:
                logging.warning("Stopped fetching %s after %d flights: %s", icao, len(flights), exc)
                break

            for page in pages:
                for flight in page.flights:
                    flights[flight.id] = flight
            more = all(page.more for page in pages)

            oldest = min(flight.time for flight in flights.values()) if flights else None
            logging.info(
                "Fetched %d flights for %s (oldest %s)",
                len(flights),
                icao,
                oldest.isoformat() if oldest else "n/a",
            )

    return flights

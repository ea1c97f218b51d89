"""Input/output helpers for stored flight collections.

Covers loading JSON/NDJSON files, directory trees and standard input into an
id-keyed, insertion-ordered collection, writing collections back to JSON, and
building a pandas table for the statistics code.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, TextIO

import pandas as pd

from .model import Flight

LINE_DELIMITED_SUFFIXES = {".ndjson", ".jsonl"}


class FlightDataError(ValueError):
    """Stored flight data could not be read or parsed."""


def _parse_records(text: str, source: str, line_delimited: bool) -> List[Any]:
    try:
        if line_delimited:
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        records = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FlightDataError(f"{source}: {exc}") from exc
    if not isinstance(records, list):
        raise FlightDataError(f"{source}: expected a JSON array of flights")
    return records


def parse_flights(text: str, source: str, line_delimited: bool = False) -> List[Flight]:
    """Parse the stored JSON shape of a list of flights."""

    flights: List[Flight] = []
    for position, record in enumerate(_parse_records(text, source, line_delimited)):
        try:
            flights.append(Flight.from_json(record))
        except (KeyError, TypeError, ValueError) as exc:
            raise FlightDataError(f"{source}: flight #{position} is malformed: {exc!r}") from exc
    return flights


def load_flights_from_fs(path: Path, max_depth: int = 5, _depth: int = 0) -> List[Flight]:
    """Load a file, or every file below a directory up to ``max_depth`` levels deep."""

    if path.is_dir():
        if _depth > max_depth:
            raise FlightDataError(f"{path}: maximum sub-directory depth reached")
        flights: List[Flight] = []
        for child in sorted(path.iterdir()):
            flights.extend(load_flights_from_fs(child, max_depth, _depth + 1))
        return flights

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FlightDataError(f"{path}: {exc.strerror or exc}") from exc

    flights = parse_flights(text, str(path), path.suffix.lower() in LINE_DELIMITED_SUFFIXES)
    logging.info("Read %d flights from %s", len(flights), path)
    return flights


def load_flights(paths: Iterable[str], max_depth: int = 5, stdin: TextIO | None = None) -> Dict[int, Flight]:
    """Load and de-duplicate flights by id from files, directories and ``-`` (stdin)."""

    flights: Dict[int, Flight] = {}
    for path in dict.fromkeys(paths):
        if path == "-":
            loaded = parse_flights((stdin or sys.stdin).read(), "stdin")
        else:
            loaded = load_flights_from_fs(Path(path), max_depth)
        for flight in loaded:
            flights[flight.id] = flight

    logging.info("Loaded %d unique flights", len(flights))
    return flights


def dump_flights(flights: Iterable[Flight]) -> str:
    return json.dumps([flight.to_json() for flight in flights], separators=(",", ":"))


def save_flights(flights: Iterable[Flight], path: str | Path, stdout: TextIO | None = None) -> None:
    """Persist flights as a JSON array; ``-`` writes to standard output."""

    payload = dump_flights(flights)
    if str(path) == "-":
        (stdout or sys.stdout).write(payload)
        return

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")
    logging.info("Saved flights to %s", path)


def flights_to_frame(flights: Iterable[Flight]) -> pd.DataFrame:
    """Tabulate flights, one row per flight, keeping collection order."""

    rows = [
        {
            "id": flight.id,
            "time": flight.time,
            "tail": flight.tail,
            "type": flight.type,
            "airline": flight.airline.to_json(),
            "callsign": flight.callsign,
            "to": flight.destination.name,
            "from": flight.origin.name,
            "bound": flight.bound.value if flight.bound is not None else None,
        }
        for flight in flights
    ]
    columns = ["id", "time", "tail", "type", "airline", "callsign", "to", "from", "bound"]
    df = pd.DataFrame(rows, columns=columns)
    df["time"] = pd.to_datetime(df["time"], utc=True, errors="coerce")
    return df

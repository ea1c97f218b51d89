"""Heuristics that repair or discard raw flight records before aggregation."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .base import PipelineComponent
from .model import Airline, AirlineState, Flight
from .reference import ReferenceData
from .registration import classify, is_registration_callsign

AIRLINE_CALLSIGN = re.compile(r"[A-Z]{3}\d[A-Z\d]{0,3}", re.IGNORECASE)
LEADING_LETTERS = re.compile(r"[A-Z]{4,}")
NON_ALNUM = re.compile(r"[^A-Z0-9]")

# Discard reasons, reported in NormalizationReport.discarded.
HELICOPTER = "helicopter"
UNIDENTIFIED = "no airline or callsign"
NO_TAIL = "no airline or tail"
UNKNOWN_REGISTRATION = "unknown registration prefix"
UNEXPLAINED_CALLSIGN = "unexplained callsign"


@dataclass
class NormalizationReport:
    kept: int = 0
    repaired: int = 0
    discarded: Counter = field(default_factory=Counter)

    @property
    def total_discarded(self) -> int:
        return sum(self.discarded.values())


def normalize_flight(flight: Flight, reference: ReferenceData) -> Tuple[Optional[Flight], Optional[str]]:
    """Apply the inference rules to one flight.

    Returns ``(flight, None)`` when the record passes (possibly corrected) and
    ``(None, reason)`` when it must be dropped. Never raises for odd records.
    """

    airline = flight.airline
    unset = airline.state is AirlineState.UNSET

    if flight.type.upper() in reference.helicopters:
        return None, HELICOPTER
    if unset and flight.callsign is None:
        return None, UNIDENTIFIED
    if unset and flight.tail is None:
        return None, NO_TAIL

    callsign = flight.callsign

    # Private aircraft squawking its own registration.
    if flight.tail is not None and is_registration_callsign(flight.tail, callsign):
        code = classify(flight.tail, callsign, reference.region_rules, reference.prefixes)
        if code is None:
            return None, UNKNOWN_REGISTRATION
        return flight.replace(airline=Airline.known(code)), None

    if callsign is not None and airline.state in (AirlineState.UNSET, AirlineState.UNASSIGNED):
        if AIRLINE_CALLSIGN.fullmatch(callsign) is None:
            return None, UNEXPLAINED_CALLSIGN
        return flight.replace(airline=Airline.known(callsign[:3].upper())), None

    if callsign is not None and LEADING_LETTERS.match(callsign.upper()):
        code = NON_ALNUM.sub("", callsign.upper()) + "-"
        return flight.replace(airline=Airline.known(code)), None

    return flight, None


class RecordNormalizer(PipelineComponent):
    """Repair, discard or pass through every loaded flight, in collection order."""

    def normalize(self, flights: Dict[int, Flight]) -> NormalizationReport:
        """Normalise ``flights`` in place and return what happened to them.

        Corrected flights replace the original under the same id so the
        collection keeps its insertion order.
        """

        report = NormalizationReport()
        for flight_id, flight in list(flights.items()):
            result, reason = normalize_flight(flight, self.reference)
            if result is None:
                del flights[flight_id]
                report.discarded[reason] += 1
                self.logger.debug("Discarded flight %s (%s): %s", flight_id, flight.callsign, reason)
            elif result is flight:
                report.kept += 1
            else:
                flights[flight_id] = result
                report.repaired += 1
                self.logger.debug("Flight %s airline %s -> %s", flight_id, flight.airline, result.airline)

        self.logger.info(
            "Normalised flights: %d kept, %d repaired, %d discarded %s",
            report.kept,
            report.repaired,
            report.total_discarded,
            dict(report.discarded),
        )
        return report

"""Derive airline presence tables for a simulated-airspace traffic generator.

Raw arrival/departure records are repaired or discarded by the
:class:`RecordNormalizer`, then grouped by airline, aircraft type and
direction, scored and pronounced by the :class:`Aggregator`.
"""

__version__ = "0.1.0"

from .aggregator import AggregationResult, Aggregator, Cluster, ListingEntry, PronunciationWarning, format_listing
from .config import AirlinesConfig, load_config, resolve_config
from .geodesy import Direction, bearing, direction
from .model import Airline, AirlineState, Bound, Flight, Location
from .normalizer import RecordNormalizer, normalize_flight
from .pipeline import AirlinesPipeline
from .reference import ReferenceData, load_reference_data

__all__ = [
    "AggregationResult",
    "Aggregator",
    "Airline",
    "AirlineState",
    "AirlinesConfig",
    "AirlinesPipeline",
    "Bound",
    "Cluster",
    "Direction",
    "Flight",
    "ListingEntry",
    "Location",
    "PronunciationWarning",
    "RecordNormalizer",
    "ReferenceData",
    "bearing",
    "direction",
    "format_listing",
    "load_config",
    "load_reference_data",
    "normalize_flight",
    "resolve_config",
]

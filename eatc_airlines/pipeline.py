"""High-level orchestration of the airline configuration generator."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from .aggregator import AggregationResult, Aggregator
from .config import AirlinesConfig
from .io import load_flights
from .model import Flight
from .normalizer import RecordNormalizer
from .reference import ReferenceData, load_reference_data


class AirlinesPipeline:
    """Coordinate loading, normalisation and aggregation of stored flights."""

    def __init__(self, config: AirlinesConfig, reference: Optional[ReferenceData] = None) -> None:
        """Initialise helpers using the provided configuration."""

        self.config: AirlinesConfig = config
        self.reference: ReferenceData = reference if reference is not None else load_reference_data(config)
        self.normalizer = RecordNormalizer(config, self.reference)
        self.aggregator = Aggregator(config, self.reference)

    def process(self, flights: Dict[int, Flight]) -> AggregationResult:
        """Normalise ``flights`` in place and aggregate the survivors."""

        self.normalizer.normalize(flights)
        return self.aggregator.aggregate(flights)

    def run(self, paths: Iterable[str]) -> AggregationResult:
        flights: Dict[int, Flight] = load_flights(paths, max_depth=self.config.max_depth)
        return self.process(flights)

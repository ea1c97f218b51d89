"""Group normalised flights into airline presence clusters and score them.

Matching is a first-fit linear scan over clusters in creation order: a flight
joins the first cluster of the same airline whose type set and direction set
already contain the flight's type and direction. Clusters therefore live in an
ordered list rather than a dict keyed by (airline, type, direction).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Set, Tuple, Union

from .base import PipelineComponent
from .geodesy import Direction
from .model import Flight, is_synthesized_code
from .pronunciation import pronounce


@dataclass
class Cluster:
    """Accumulator for one airline/type/direction group."""

    airline: str
    types: Set[str]
    directions: Set[Direction]
    flights: List[Flight] = field(default_factory=list)
    pronunciation: Optional[str] = None
    score: float = math.nan
    raw_score: float = math.nan

    def accepts(self, airline: str, aircraft_type: str, direction: Direction) -> bool:
        return self.airline == airline and aircraft_type in self.types and direction in self.directions

    def add(self, flight: Flight, direction: Direction) -> None:
        self.flights.append(flight)
        self.types.add(flight.type)
        self.directions.add(direction)


@dataclass(frozen=True)
class ListingEntry:
    airline: str
    score: float
    types: Tuple[str, ...]
    pronunciation: Optional[str]
    directions: Tuple[Direction, ...]

    @classmethod
    def from_cluster(cls, cluster: Cluster) -> "ListingEntry":
        return cls(
            airline=cluster.airline,
            score=cluster.score,
            types=tuple(sorted(cluster.types, key=str.lower)),
            pronunciation=cluster.pronunciation,
            directions=tuple(sorted(cluster.directions, key=lambda d: d.value)),
        )

    def format(self) -> str:
        types = "/".join(self.types).lower()
        directions = "".join(d.value for d in self.directions).lower()
        pronunciation = "0" if self.pronunciation is None else self.pronunciation
        return f"\t{self.airline}, {self.score:.2f}, {types}, {pronunciation}, {directions}"


@dataclass(frozen=True)
class PronunciationWarning:
    """Low-traffic airline whose pronunciation had to be guessed."""

    airline: str
    pronunciation: str
    score: float

    def __str__(self) -> str:
        return f"{self.airline}: no pronunciation available"


@dataclass
class AggregationResult:
    clusters: List[Cluster]
    entries: List[ListingEntry]
    warnings: List[PronunciationWarning]

    def listing(self) -> str:
        return format_listing(self.entries)


def format_listing(entries: Iterable[ListingEntry]) -> str:
    lines = [entry.format() for entry in entries]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def score_clusters(clusters: List[Cluster]) -> None:
    """Score every cluster relative to the busiest one (which scores 10.00)."""

    if not clusters:
        return
    max_count = max(len(cluster.flights) for cluster in clusters)
    for cluster in clusters:
        count = len(cluster.flights)
        cluster.raw_score = count * 10 / max_count
        cluster.score = round_half_up(count * 1000 / max_count) / 100


def apply_cutoff(clusters: Iterable[Cluster], cutoff: float) -> List[Cluster]:
    return [cluster for cluster in clusters if cluster.score >= cutoff]


def rank(clusters: Iterable[Cluster]) -> List[Cluster]:
    """Order by score descending, ties by airline code ascending."""

    by_airline = sorted(clusters, key=lambda cluster: cluster.airline)
    return sorted(by_airline, key=lambda cluster: cluster.score, reverse=True)


class Aggregator(PipelineComponent):
    """Fold normalised flights into scored, ranked airline clusters."""

    def cluster(self, flights: Iterable[Flight]) -> List[Cluster]:
        clusters: List[Cluster] = []
        skipped = 0
        for flight in flights:
            if not flight.airline.is_known:
                skipped += 1
                continue

            airline = flight.airline.code
            direction = flight.direction()
            index = next(
                (i for i, cluster in enumerate(clusters) if cluster.accepts(airline, flight.type, direction)),
                None,
            )
            if index is not None:
                clusters[index].add(flight, direction)
                continue

            clusters.append(
                Cluster(
                    airline=airline,
                    types={flight.type},
                    directions={direction},
                    flights=[flight],
                    pronunciation=pronounce(airline, self.reference.pronunciations),
                )
            )

        if skipped:
            self.logger.info("Skipped %d flights without a resolvable airline.", skipped)
        return clusters

    def warnings_for(self, clusters: Iterable[Cluster]) -> List[PronunciationWarning]:
        """Low-traffic clusters whose pronunciation is not a confirmed dictionary value."""

        confirmed = set(self.reference.pronunciations.values())
        warnings = []
        for cluster in clusters:
            if cluster.pronunciation is None or is_synthesized_code(cluster.airline):
                continue
            if not 0 < cluster.raw_score <= self.config.warning_ceiling:
                continue
            if cluster.pronunciation in confirmed:
                continue
            warnings.append(PronunciationWarning(cluster.airline, cluster.pronunciation, cluster.score))
        return warnings

    def aggregate(self, flights: Union[Mapping[int, Flight], Iterable[Flight]]) -> AggregationResult:
        if isinstance(flights, Mapping):
            flights = flights.values()

        clusters = self.cluster(flights)
        score_clusters(clusters)
        warnings = self.warnings_for(clusters)
        ranked = rank(apply_cutoff(clusters, self.config.score_cutoff))
        entries = [ListingEntry.from_cluster(cluster) for cluster in ranked]

        self.logger.info(
            "Aggregated %d clusters, %d listed, %d pronunciation warnings.",
            len(clusters),
            len(entries),
            len(warnings),
        )
        return AggregationResult(clusters=clusters, entries=entries, warnings=warnings)

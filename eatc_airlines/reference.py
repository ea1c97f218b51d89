"""Static reference tables consumed by the normaliser and aggregator."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Tuple

import yaml

from .config import AirlinesConfig


@dataclass(frozen=True)
class RegionRule:
    """Registration format of a country whose nationality mark is not simply dash-separated."""

    region: str
    pattern: re.Pattern
    prefix_length: int

    def matches(self, registration: str) -> bool:
        return self.pattern.fullmatch(registration) is not None


@dataclass(frozen=True)
class ReferenceData:
    helicopters: FrozenSet[str] = frozenset()
    prefixes: Tuple[str, ...] = ()
    region_rules: Tuple[RegionRule, ...] = ()
    pronunciations: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        helicopters: Iterable[str] = (),
        prefixes: Iterable[str] = (),
        region_rules: Iterable[Mapping[str, Any]] = (),
        pronunciations: Mapping[str, str] | None = None,
    ) -> "ReferenceData":
        """Normalise raw tables: upper-case keys and compile the region patterns."""

        rules = tuple(
            RegionRule(
                region=str(rule.get("region", "")),
                pattern=re.compile(str(rule["pattern"])),
                prefix_length=int(rule["prefix_length"]),
            )
            for rule in region_rules
        )
        return cls(
            helicopters=frozenset(str(code).upper() for code in helicopters),
            prefixes=tuple(str(prefix).upper() for prefix in prefixes),
            region_rules=rules,
            pronunciations={str(k).upper(): str(v) for k, v in (pronunciations or {}).items()},
        )


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _read_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or []


def load_reference_data(config: AirlinesConfig) -> ReferenceData:
    """Load every reference table named by the configuration.

    Missing or malformed files raise; they are a systemic failure rather than a
    per-flight one and the caller decides how to surface them.
    """

    helicopters = _read_json(config.helicopters_path)
    prefixes = _read_json(config.prefixes_path)
    regions = _read_yaml(config.regions_path)
    callsigns: Dict[str, str] = _read_json(config.callsigns_path)

    if not isinstance(helicopters, list) or not isinstance(prefixes, list):
        raise ValueError("helicopter and prefix tables must be JSON arrays")
    if not isinstance(regions, list):
        raise ValueError(f"{config.regions_path}: region rules must be a list")
    if not isinstance(callsigns, dict):
        raise ValueError(f"{config.callsigns_path}: pronunciations must be a JSON object")

    reference = ReferenceData.build(helicopters, prefixes, regions, callsigns)
    logging.info(
        "Loaded reference data: %d helicopter types, %d prefixes, %d region rules, %d pronunciations",
        len(reference.helicopters),
        len(reference.prefixes),
        len(reference.region_rules),
        len(reference.pronunciations),
    )
    return reference

"""Configuration helpers for the airline presence pipeline.

Provides YAML loading, nested lookups with defaults, and the strongly-typed
:class:`AirlinesConfig` consumed by every pipeline component.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DATA_DIR: Path = Path(__file__).resolve().parent / "data"

DEFAULT_FEED_URL = "https://www.airnavradar.com/data/airports/search/"
DEFAULT_FEED_KEY = "mrgapdstic"


@dataclass
class AirlinesConfig:
    """Strongly-typed configuration for loading, inference and aggregation."""

    helicopters_path: Path
    prefixes_path: Path
    regions_path: Path
    callsigns_path: Path
    score_cutoff: float
    warning_ceiling: float
    max_depth: int
    feed_url: str
    feed_key: str
    concurrency: int
    step_seconds: float
    timeout: float
    log_level: int


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load a YAML configuration file."""

    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def get_nested(config: Mapping[str, Any], keys: list[str], default: Any) -> Any:
    """Retrieve a nested value from a config dict with a default."""

    current: Any = config
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def _path(config: Mapping[str, Any], name: str, filename: str) -> Path:
    value: Optional[str] = get_nested(config, ["reference", name], None)
    return Path(value).expanduser().resolve() if value else DATA_DIR / filename


def resolve_config(config: Optional[Mapping[str, Any]] = None) -> AirlinesConfig:
    """Build an :class:`AirlinesConfig` from a parsed YAML mapping.

    Missing sections fall back to the bundled reference data and the
    empirically chosen thresholds (0.005 score cutoff, 45 minute pagination
    step, five sub-directory levels).
    """

    config = config or {}
    level_name = str(get_nested(config, ["logging", "level"], "INFO")).upper()

    return AirlinesConfig(
        helicopters_path=_path(config, "helicopters", "helicopters.json"),
        prefixes_path=_path(config, "prefixes", "prefixes.json"),
        regions_path=_path(config, "regions", "regions.yaml"),
        callsigns_path=_path(config, "callsigns", "callsigns.json"),
        score_cutoff=float(get_nested(config, ["aggregation", "score_cutoff"], 0.005)),
        warning_ceiling=float(get_nested(config, ["aggregation", "warning_ceiling"], 0.005)),
        max_depth=int(get_nested(config, ["loading", "max_depth"], 5)),
        feed_url=str(get_nested(config, ["fetch", "base_url"], DEFAULT_FEED_URL)),
        feed_key=str(get_nested(config, ["fetch", "key"], DEFAULT_FEED_KEY)),
        concurrency=int(get_nested(config, ["fetch", "concurrency"], 5)),
        step_seconds=float(get_nested(config, ["fetch", "step_seconds"], 2700)),
        timeout=float(get_nested(config, ["fetch", "timeout"], 30)),
        log_level=getattr(logging, level_name, logging.INFO),
    )

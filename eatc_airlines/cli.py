"""Command line entry point.

``gen`` turns stored flights into airline configuration lines, ``flow``
summarises the hourly traffic flow and ``fetch`` downloads an airport's flight
history from the tracking feed.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from . import __version__
from .config import AirlinesConfig, get_nested, load_config, resolve_config
from .fetch import FeedClient, FeedError, fetch_history
from .flow import compute_flow, render_flow
from .io import FlightDataError, load_flights, save_flights
from .pipeline import AirlinesPipeline
from .reference import load_reference_data


def configure_logging(log_cfg: Dict[str, object], level: Optional[int] = None) -> None:
    """Configure root logger with a stderr handler and, if a directory is set, a file handler."""

    if level is None:
        level_name = str(log_cfg.get("level", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s - %(levelname)s - %(message)s"
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(stream_handler)

    log_dir = log_cfg.get("dir")
    if log_dir:
        log_path = Path(str(log_dir)) / str(log_cfg.get("filename", "eatc-airlines.log"))
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(file_handler)
        root.info("Logging to %s (level=%s)", log_path, logging.getLevelName(level))


def run_gen(args: argparse.Namespace, config: AirlinesConfig) -> int:
    pipeline = AirlinesPipeline(config)
    result = pipeline.run(args.paths)

    for warning in result.warnings:
        logging.warning("%s", warning)
    sys.stdout.write(result.listing())
    return 0


def run_flow(args: argparse.Namespace, config: AirlinesConfig) -> int:
    reference = load_reference_data(config)
    flights = load_flights(args.paths, max_depth=config.max_depth)
    report = compute_flow(flights.values(), reference.helicopters)
    sys.stdout.write(render_flow(report, colour=not args.no_colour))

    if args.plot:
        from .plots import plot_flow

        plot_flow(report, Path(args.plot))
        logging.info("Saved flow chart to %s", args.plot)
    return 0


def run_fetch(args: argparse.Namespace, config: AirlinesConfig) -> int:
    concurrency = args.concurrency if args.concurrency is not None else config.concurrency
    if concurrency < 1:
        logging.error("concurrency must be a positive integer")
        return 1
    if args.silent:
        logging.getLogger().setLevel(logging.WARNING)

    location = args.path or f"{args.icao}-{time.time():.0f}.json"
    logging.info("Fetching flights for %s", args.icao)

    with FeedClient(config.feed_url, config.feed_key, config.timeout) as client:
        flights = fetch_history(
            client,
            args.icao,
            concurrency=concurrency,
            step=timedelta(seconds=config.step_seconds),
        )
    logging.info("Fetched %d flights", len(flights))
    save_flights(flights.values(), location)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eatc-airlines",
        description="Generate airline traffic configuration from recorded arrivals and departures.",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to YAML config file.")
    parser.add_argument("--log-level", help="Override the configured log level (e.g. DEBUG).")
    commands = parser.add_subparsers(dest="command", required=True)

    paths_help = "Paths to JSON files or directories containing JSON files. Use a dash ('-') to read from standard input."

    gen = commands.add_parser("gen", help="Generate airlines configuration.")
    gen.add_argument("paths", nargs="+", help=paths_help)
    gen.set_defaults(handler=run_gen)

    flow = commands.add_parser("flow", help="Calculate the flow of arrivals of an airport.")
    flow.add_argument("paths", nargs="+", help=paths_help)
    flow.add_argument("--no-colour", action="store_true", help="Disable ANSI colours.")
    flow.add_argument("--plot", help="Also save the flow as a PNG chart to this path.")
    flow.set_defaults(handler=run_flow)

    fetch = commands.add_parser("fetch", help="Fetch flights from the tracking feed.")
    fetch.add_argument("icao", help="ICAO code of the airport.")
    fetch.add_argument(
        "path",
        nargs="?",
        help="Path where the retrieved data will be saved in JSON format. Use a dash ('-') to write to standard output.",
    )
    fetch.add_argument("-c", "--concurrency", type=int, help="Number of requests to send in parallel.")
    fetch.add_argument("-s", "--silent", action="store_true", help="Silent mode (no progress logging).")
    fetch.set_defaults(handler=run_fetch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else {}
    except (OSError, yaml.YAMLError) as exc:
        configure_logging({})
        logging.error("Cannot read config %s: %s", args.config, exc)
        return 1

    log_cfg = get_nested(cfg, ["logging"], {}) or {}
    level = getattr(logging, args.log_level.upper(), None) if args.log_level else None
    configure_logging(log_cfg, level)
    config = resolve_config(cfg)

    try:
        return args.handler(args, config)
    except (FlightDataError, FeedError) as exc:
        logging.error("%s", exc)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        # Reference tables or output files.
        logging.error("%s: %s", type(exc).__name__, exc)
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""Hourly traffic flow statistics for an airport.

Counts flights per (UTC day, UTC hour) bucket and derives the overall hourly
average/peak/low, the hourly average per weekday and the average per hour of
day. Only buckets that saw traffic take part in the averages.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Collection, Iterable, List, Tuple

import pandas as pd

from .io import FlightDataError, flights_to_frame
from .model import Flight

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

ACCENT = "\x1b[38;2;0;188;125m"
BOLD = "\x1b[1m"
DIM = "\x1b[38;5;250m"
RESET = "\x1b[0m"

BAR_CHAR = "▇"
THIN_BAR = "▏"
BAR_WIDTH = 50


@dataclass(frozen=True)
class FlowReport:
    first_day: date
    last_day: date
    average: float
    highest: int
    lowest: int
    # (label, average, share of the busiest row)
    weekdays: List[Tuple[str, float, float]]
    hourly: List[Tuple[int, float, float]]


def hourly_counts(flights: Iterable[Flight], helicopters: Collection[str] = ()) -> pd.Series:
    """Flights per (day, hour) bucket, helicopters and undated flights excluded."""

    df = flights_to_frame(flights)
    df = df[df["time"].notna()]
    if helicopters:
        df = df[~df["type"].astype(str).str.upper().isin(set(helicopters))]
    if df.empty:
        raise FlightDataError("No flights were loaded.")

    df = df.assign(day=df["time"].dt.date, hour=df["time"].dt.hour)
    return df.groupby(["day", "hour"]).size()


def compute_flow(flights: Iterable[Flight], helicopters: Collection[str] = ()) -> FlowReport:
    counts = hourly_counts(flights, helicopters)
    days = counts.index.get_level_values("day")

    per_day = pd.DataFrame(
        {
            "flights": counts.groupby(level="day").sum(),
            "buckets": counts.groupby(level="day").size(),
        }
    )
    per_day["weekday"] = [day.weekday() for day in per_day.index]
    per_weekday = per_day.groupby("weekday")[["flights", "buckets"]].sum().sort_index()
    weekday_max = per_weekday["flights"].max()
    weekdays = [
        (WEEKDAYS[weekday], float(row.flights / row.buckets), float(row.flights / weekday_max))
        for weekday, row in per_weekday.iterrows()
    ]

    n_days = len(per_day)
    per_hour = counts.groupby(level="hour").sum().reindex(range(24), fill_value=0) / n_days
    hour_max = per_hour.max()
    hourly = [
        (int(hour), float(value), float(value / hour_max) if hour_max else 0.0)
        for hour, value in per_hour.items()
    ]

    return FlowReport(
        first_day=min(days),
        last_day=max(days),
        average=float(counts.mean()),
        highest=int(counts.max()),
        lowest=int(counts.min()),
        weekdays=weekdays,
        hourly=hourly,
    )


def render_bar(label: str, value: str, share: float, colour: bool = True) -> str:
    if share == 0:
        bar = ""
    elif share < 0.02:
        bar = THIN_BAR
    else:
        bar = BAR_CHAR * round(BAR_WIDTH * share)
    if colour:
        return f"{label}{DIM}:{RESET} {ACCENT}{bar}{RESET} {value}"
    return f"{label}: {bar} {value}"


def render_flow(report: FlowReport, colour: bool = True) -> str:
    dim, bold, reset = (DIM, BOLD, RESET) if colour else ("", "", "")

    def heading(title: str, suffix: str = "") -> str:
        return f"{dim}#{reset} {bold}{title}{reset}{suffix}"

    span = report.first_day.isoformat()
    if report.last_day != report.first_day:
        span += f" to {report.last_day.isoformat()}"

    lines = [
        heading("Hourly Flow", f" {dim}({span}){reset}"),
        "",
        f"\taverage\t{dim}={reset} {report.average:.2f}",
        f"\thighest\t{dim}={reset} {report.highest}",
        f"\tlowest\t{dim}={reset} {report.lowest}",
        "",
        "",
        heading("Hourly Average per Weekday"),
        "",
    ]
    lines += [render_bar(label, f"{avg:.2f}", share, colour) for label, avg, share in report.weekdays]
    lines += ["", "", heading("Average per Hour"), ""]
    lines += [render_bar(f"{hour:02d}:00Z", f"{avg:.2f}", share, colour) for hour, avg, share in report.hourly]
    return "\n".join(lines) + "\n"

"""Optional matplotlib export of the flow report."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .flow import FlowReport


def plot_flow(report: FlowReport, output_path: Path) -> None:
    """Plot the weekday and hour-of-day averages side by side."""

    fig, (ax_week, ax_hour) = plt.subplots(1, 2, figsize=(12, 4))

    labels = [label for label, _, _ in report.weekdays]
    ax_week.bar(labels, [avg for _, avg, _ in report.weekdays], color="#00bc7d")
    ax_week.set_xlabel("Weekday")
    ax_week.set_ylabel("Flights per hour")
    ax_week.set_title("Hourly average per weekday")

    hours = [hour for hour, _, _ in report.hourly]
    ax_hour.bar(hours, [avg for _, avg, _ in report.hourly], color="#00bc7d")
    ax_hour.set_xticks(range(0, 24, 3))
    ax_hour.set_xlabel("Hour (UTC)")
    ax_hour.set_ylabel("Flights")
    ax_hour.set_title("Average per hour")

    span = report.first_day.isoformat()
    if report.last_day != report.first_day:
        span += f" to {report.last_day.isoformat()}"
    fig.suptitle(f"Hourly flow ({span})")
    fig.tight_layout()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

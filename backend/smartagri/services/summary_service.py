"""Sensor summary computation: groups readings and computes per-type statistics.

Pure functions, no database access. Input readings are ordered newest-first.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from smartagri.schemas.sensor import SensorStatistics, Trend

__all__ = ["calculate_trend", "summarize_readings", "summary_snapshot"]

# Trend looks at this many of the most recent readings
TREND_WINDOW = 5
# Percent change beyond which a trend is reported
TREND_THRESHOLD_PERCENT = 5.0


class ReadingLike(Protocol):
    sensor_type: str
    value: float
    unit: str


def calculate_trend(values: Sequence[float]) -> Trend:
    """
    Classify short-term movement of values ordered newest-first.

    Compares the newest value against the oldest of the TREND_WINDOW most
    recent ones. A zero baseline has no percent change; the sign of the
    newest value decides instead.
    """
    if len(values) < 2:
        return "stable"

    recent = [float(v) for v in values[:TREND_WINDOW]]
    first = recent[-1]  # oldest in the slice
    last = recent[0]  # newest

    if first == 0:
        if last > 0:
            return "increasing"
        if last < 0:
            return "decreasing"
        return "stable"

    change = (last - first) / first * 100

    if change > TREND_THRESHOLD_PERCENT:
        return "increasing"
    if change < -TREND_THRESHOLD_PERCENT:
        return "decreasing"
    return "stable"


def summarize_readings(readings: Iterable[ReadingLike]) -> dict[str, SensorStatistics]:
    """Group newest-first readings by sensor type and compute statistics per group."""
    groups: dict[str, list[ReadingLike]] = {}
    for reading in readings:
        groups.setdefault(reading.sensor_type, []).append(reading)

    summary: dict[str, SensorStatistics] = {}
    for sensor_type, group in groups.items():
        values = [float(r.value) for r in group]
        latest = group[0]

        summary[sensor_type] = SensorStatistics(
            current=float(latest.value),
            unit=latest.unit,
            average=sum(values) / len(values),
            min=min(values),
            max=max(values),
            readings_count=len(values),
            trend=calculate_trend(values),
        )

    return summary


def summary_snapshot(summary: dict[str, SensorStatistics]) -> dict[str, dict]:
    """JSON-ready copy of a summary, as stored on recommendations."""
    return {sensor_type: stats.model_dump(mode="json") for sensor_type, stats in summary.items()}

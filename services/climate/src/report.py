"""
Report generation

Derives per-state metrics from the registry's running sums and renders
the climate summary report.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

from .registry import RegionAggregate, RegionRegistry

logger = logging.getLogger(__name__)


UNKNOWN_TIME = "<unknown time>"


@dataclass(frozen=True)
class RegionSummary:
    """Derived metrics for one state"""
    code: str
    record_count: int
    average_humidity: float
    average_temperature: float  # Fahrenheit
    max_temperature: float  # Fahrenheit
    max_temperature_timestamp: int  # ms since epoch
    max_temperature_time: str
    min_temperature: float  # Fahrenheit
    min_temperature_timestamp: int  # ms since epoch
    min_temperature_time: str
    lightning_count: int
    snow_count: int
    average_cloud_cover: float
    average_pressure: float  # Pa


def kelvin_to_fahrenheit(kelvin: float) -> float:
    """Convert kelvin to degrees Fahrenheit"""
    return kelvin * 1.8 - 459.67


def format_timestamp(timestamp_ms: int, use_utc: bool = False) -> str:
    """
    Format a millisecond timestamp like ctime(), e.g. 'Mon Aug  3 11:00:00 2015'

    Milliseconds are truncated to whole seconds. Local time unless use_utc.
    Timestamps outside the platform's datetime range render as UNKNOWN_TIME.
    """
    seconds = timestamp_ms // 1000
    tz = timezone.utc if use_utc else None
    try:
        return datetime.fromtimestamp(seconds, tz=tz).ctime()
    except (ValueError, OverflowError, OSError) as e:
        logger.warning(f"Cannot format timestamp {timestamp_ms}: {e}")
        return UNKNOWN_TIME


def summarize(aggregate: RegionAggregate, use_utc: bool = False) -> RegionSummary:
    """
    Derive averages and converted extremes for one aggregate

    Args:
        aggregate: Aggregate with at least one record applied
        use_utc: Format extreme timestamps in UTC

    Returns:
        RegionSummary for the aggregate's state
    """
    count = aggregate.record_count
    if count < 1:
        raise ValueError(f"State {aggregate.code} has no records to summarize")

    return RegionSummary(
        code=aggregate.code,
        record_count=count,
        average_humidity=aggregate.humidity_sum / count,
        average_temperature=kelvin_to_fahrenheit(aggregate.temperature_sum / count),
        max_temperature=kelvin_to_fahrenheit(aggregate.max_temperature),
        max_temperature_timestamp=aggregate.max_temperature_timestamp,
        max_temperature_time=format_timestamp(aggregate.max_temperature_timestamp, use_utc),
        min_temperature=kelvin_to_fahrenheit(aggregate.min_temperature),
        min_temperature_timestamp=aggregate.min_temperature_timestamp,
        min_temperature_time=format_timestamp(aggregate.min_temperature_timestamp, use_utc),
        lightning_count=aggregate.lightning_count,
        snow_count=aggregate.snow_count,
        average_cloud_cover=aggregate.cloud_sum / count,
        average_pressure=aggregate.pressure_sum / count,
    )


def build_summaries(registry: RegionRegistry, use_utc: bool = False) -> List[RegionSummary]:
    """Summaries for every state, in registry insertion order"""
    summaries = [summarize(aggregate, use_utc) for aggregate in registry.iterate()]
    logger.info(f"Built summaries for {len(summaries)} states")
    return summaries


def format_summary(summary: RegionSummary) -> List[str]:
    """Report block for one state"""
    return [
        f"-- State: {summary.code} --",
        f"Number of Records: {summary.record_count}",
        f"Average Humidity: {summary.average_humidity:.1f}%",
        f"Average Temperature: {summary.average_temperature:.1f}F",
        f"Max Temperature: {summary.max_temperature:.1f}F on {summary.max_temperature_time}",
        f"Min Temperature: {summary.min_temperature:.1f}F on {summary.min_temperature_time}",
        f"Lightning Strikes: {summary.lightning_count}",
        f"Records with Snow Cover: {summary.snow_count}",
        f"Average Cloud Cover: {summary.average_cloud_cover:.1f}%",
    ]


def format_report(summaries: List[RegionSummary]) -> str:
    """
    Render the text report

    One 'States found:' header line listing codes in order,
    then one block per state in the same order.
    """
    lines = ["States found: " + " ".join(s.code for s in summaries)]
    for summary in summaries:
        lines.extend(format_summary(summary))
    return "\n".join(lines) + "\n"


def summaries_to_dict(summaries: List[RegionSummary]) -> Dict[str, Any]:
    """JSON-serializable form of the summaries, preserving order"""
    return {
        "regions_found": [s.code for s in summaries],
        "regions": {s.code: asdict(s) for s in summaries},
    }

"""
Streaming aggregation of observations into state aggregates.

Lines are parsed one at a time, resolved to their state's aggregate
in the registry and applied before the next line is read.
"""
import logging
from typing import Dict, Iterable, Optional, Union

from .parser import Observation, RecordParseError, RecordParser, create_parser, is_blank
from .registry import DEFAULT_MAX_REGIONS, RegionAggregate, RegionRegistry

logger = logging.getLogger(__name__)


def apply_observation(aggregate: RegionAggregate, observation: Observation) -> None:
    """
    Fold one observation into an aggregate.

    Min and max are checked independently; ties keep the earlier reading.
    """
    aggregate.record_count += 1
    aggregate.humidity_sum += observation.humidity
    aggregate.cloud_sum += observation.cloud_cover
    aggregate.pressure_sum += observation.pressure
    aggregate.temperature_sum += observation.temperature
    aggregate.snow_count += int(observation.snow)
    aggregate.lightning_count += int(observation.lightning)

    if observation.temperature < aggregate.min_temperature:
        aggregate.min_temperature = observation.temperature
        aggregate.min_temperature_timestamp = observation.timestamp

    if observation.temperature > aggregate.max_temperature:
        aggregate.max_temperature = observation.temperature
        aggregate.max_temperature_timestamp = observation.timestamp


class ClimateAggregator:
    """Drives parse -> resolve -> apply over streams of raw lines"""

    def __init__(
        self,
        registry: Optional[RegionRegistry] = None,
        parser: Optional[RecordParser] = None,
    ):
        """
        Initialize aggregator

        Args:
            registry: Registry receiving the aggregates (new one if omitted)
            parser: Line parser (tab-delimited if omitted)
        """
        self.registry = registry if registry is not None else RegionRegistry()
        self.parser = parser if parser is not None else RecordParser()

    def apply(self, observation: Observation) -> RegionAggregate:
        """Resolve the observation's state and fold it in"""
        aggregate = self.registry.resolve(observation.code)
        apply_observation(aggregate, observation)
        return aggregate

    def ingest_lines(
        self,
        lines: Iterable[Union[str, bytes]],
        source: str = "<stream>"
    ) -> Dict[str, int]:
        """
        Consume a sequence of raw lines

        Malformed lines are logged and skipped. A capacity overflow in
        the registry propagates and aborts the run.

        Args:
            lines: Raw text or byte lines in file order; bytes are decoded
                per line so a bad line is skipped like any malformed record
            source: Name used when reporting malformed lines

        Returns:
            Ingest statistics for this source
        """
        stats = {
            "lines_read": 0,
            "records_applied": 0,
            "records_skipped": 0,
            "new_regions": 0,
        }
        regions_before = len(self.registry)

        for line_number, line in enumerate(lines, start=1):
            stats["lines_read"] += 1

            if is_blank(line):
                continue

            try:
                observation = self.parser.parse_line(line, source, line_number)
            except RecordParseError as e:
                logger.warning(f"Skipping malformed record: {e}")
                stats["records_skipped"] += 1
                continue

            self.apply(observation)
            stats["records_applied"] += 1

        stats["new_regions"] = len(self.registry) - regions_before

        logger.info(
            f"Ingested {source}: {stats['records_applied']} records, "
            f"{stats['records_skipped']} skipped, "
            f"{stats['new_regions']} new states"
        )

        return stats


def create_aggregator(
    max_regions: int = DEFAULT_MAX_REGIONS,
    delimiter: str = "\t",
    encoding: str = "utf-8"
) -> ClimateAggregator:
    """
    Factory function to create an aggregator with a fresh registry

    Args:
        max_regions: Registry capacity
        delimiter: Field separator of input lines
        encoding: Encoding of raw byte lines

    Returns:
        ClimateAggregator instance
    """
    return ClimateAggregator(RegionRegistry(max_regions), create_parser(delimiter, encoding))

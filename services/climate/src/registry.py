"""
Region registry

Insertion-ordered mapping from state code to its running aggregate.
The registry owns every aggregate it creates; aggregates are looked up
by code and handed out for in-place mutation.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List

logger = logging.getLogger(__name__)


DEFAULT_MAX_REGIONS = 50


class RegionCapacityExceeded(RuntimeError):
    """Raised when more distinct codes arrive than the registry allows"""

    def __init__(self, code: str, max_regions: int):
        self.code = code
        self.max_regions = max_regions
        super().__init__(
            f"Too many states: {code!r} would be state #{max_regions + 1}, "
            f"limit is {max_regions}"
        )


@dataclass
class RegionAggregate:
    """Running statistics for one state"""
    code: str
    record_count: int = 0
    humidity_sum: float = 0.0
    cloud_sum: float = 0.0
    temperature_sum: float = 0.0
    pressure_sum: float = 0.0
    lightning_count: int = 0
    snow_count: int = 0
    # Sentinels lose to any real reading
    min_temperature: float = math.inf
    min_temperature_timestamp: int = 0
    max_temperature: float = -math.inf
    max_temperature_timestamp: int = 0


class RegionRegistry:
    """
    Ordered registry of state aggregates.

    Iteration yields aggregates in first-seen order of their codes.
    At most one aggregate exists per code.
    """

    def __init__(self, max_regions: int = DEFAULT_MAX_REGIONS):
        """
        Initialize registry

        Args:
            max_regions: Maximum number of distinct codes accepted
        """
        if max_regions < 1:
            raise ValueError(f"max_regions must be at least 1, got {max_regions}")
        self.max_regions = max_regions
        # dict preserves insertion order
        self._aggregates: Dict[str, RegionAggregate] = {}

    def resolve(self, code: str) -> RegionAggregate:
        """
        Find the aggregate for a code, creating it on first sighting

        Args:
            code: Two-letter state code

        Returns:
            The registry's aggregate for code, mutable in place

        Raises:
            RegionCapacityExceeded: code is new and the registry is full
        """
        aggregate = self._aggregates.get(code)
        if aggregate is not None:
            return aggregate

        if len(self._aggregates) >= self.max_regions:
            logger.error(
                f"Too many states (already {len(self._aggregates)}), "
                f"cannot add {code}"
            )
            raise RegionCapacityExceeded(code, self.max_regions)

        aggregate = RegionAggregate(code=code)
        self._aggregates[code] = aggregate
        logger.debug(f"Registered state {code} (#{len(self._aggregates)})")
        return aggregate

    def get(self, code: str) -> RegionAggregate:
        """Look up an existing aggregate; raises KeyError if unknown"""
        return self._aggregates[code]

    def codes(self) -> List[str]:
        """State codes in insertion order"""
        return list(self._aggregates)

    def iterate(self) -> Iterator[RegionAggregate]:
        """Aggregates in insertion order"""
        return iter(list(self._aggregates.values()))

    def __iter__(self) -> Iterator[RegionAggregate]:
        return self.iterate()

    def __len__(self) -> int:
        return len(self._aggregates)

    def __contains__(self, code: str) -> bool:
        return code in self._aggregates

"""
NOAA observation record parser

Splits tab-delimited observation lines into typed Observation records.
Each line carries nine fields:

    state code, timestamp (ms since epoch), geolocation (geohash),
    humidity (%), snow (0/1), cloud cover (%), lightning (0/1),
    pressure (Pa), surface temperature (K)
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


# Field order of a TDV observation line
FIELD_NAMES: Tuple[str, ...] = (
    "code",
    "timestamp",
    "geolocation",
    "humidity",
    "snow",
    "cloud_cover",
    "lightning",
    "pressure",
    "temperature",
)


@dataclass(frozen=True)
class Observation:
    """A single parsed observation. The geolocation token is dropped."""
    code: str
    timestamp: int
    humidity: float
    snow: bool
    cloud_cover: float
    lightning: bool
    pressure: float
    temperature: float


class RecordParseError(ValueError):
    """Raised when a line cannot be turned into an Observation"""

    def __init__(
        self,
        message: str,
        line: str,
        source: str = "<stream>",
        line_number: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.line = line
        self.source = source
        self.line_number = line_number
        self.field = field
        location = source if line_number is None else f"{source}:{line_number}"
        super().__init__(f"{location}: {message}")


# Timestamps must fall before 9999-12-30 UTC so local time still formats
MAX_TIMESTAMP_MS = 253402128000000 - 1


def _to_number(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value}")
    return number


def _to_flag(value: str) -> bool:
    # The dataset writes flags as 0.0/1.0 as often as 0/1
    return _to_number(value) != 0


def _to_timestamp(value: str) -> int:
    timestamp = int(value)
    if timestamp < 0:
        raise ValueError(f"negative timestamp {timestamp}")
    if timestamp > MAX_TIMESTAMP_MS:
        raise ValueError(f"timestamp {timestamp} is past year 9999")
    return timestamp


# Converters for every field that feeds the aggregate
CONVERTERS: Dict[str, object] = {
    "timestamp": _to_timestamp,
    "humidity": _to_number,
    "snow": _to_flag,
    "cloud_cover": _to_number,
    "lightning": _to_flag,
    "pressure": _to_number,
    "temperature": _to_number,
}


class RecordParser:
    """Parser for tab-delimited observation lines"""

    def __init__(self, delimiter: str = "\t", encoding: str = "utf-8"):
        """
        Initialize parser

        Args:
            delimiter: Single character separating fields
            encoding: Encoding of raw byte lines
        """
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be one character, got {delimiter!r}")
        self.delimiter = delimiter
        self.encoding = encoding

    def decode(
        self,
        line: Union[str, bytes],
        source: str = "<stream>",
        line_number: Optional[int] = None,
    ) -> str:
        """Decode a raw byte line; text lines pass through unchanged"""
        if isinstance(line, str):
            return line
        try:
            return line.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise RecordParseError(
                f"undecodable {self.encoding} bytes ({e.reason})",
                line=line.decode(self.encoding, errors="replace"),
                source=source,
                line_number=line_number,
            ) from e

    def split(self, line: str) -> List[str]:
        """Strip the line terminator and split into stripped fields"""
        return [field.strip() for field in line.rstrip("\r\n").split(self.delimiter)]

    def parse_line(
        self,
        line: Union[str, bytes],
        source: str = "<stream>",
        line_number: Optional[int] = None,
    ) -> Observation:
        """
        Parse a single observation line

        Args:
            line: Raw text or byte line, with or without its terminator
            source: Name of the file the line came from (for errors)
            line_number: 1-based line number within source (for errors)

        Returns:
            Parsed Observation

        Raises:
            RecordParseError: Undecodable bytes, wrong field count or a
                non-numeric value
        """
        line = self.decode(line, source, line_number)
        fields = self.split(line)

        if len(fields) != len(FIELD_NAMES):
            raise RecordParseError(
                f"expected {len(FIELD_NAMES)} fields, found {len(fields)}",
                line=line,
                source=source,
                line_number=line_number,
            )

        raw = dict(zip(FIELD_NAMES, fields))

        if not raw["code"]:
            raise RecordParseError(
                "empty state code",
                line=line,
                source=source,
                line_number=line_number,
                field="code",
            )

        values = {}
        for name, convert in CONVERTERS.items():
            try:
                values[name] = convert(raw[name])
            except ValueError as e:
                raise RecordParseError(
                    f"invalid {name} value {raw[name]!r} ({e})",
                    line=line,
                    source=source,
                    line_number=line_number,
                    field=name,
                ) from e

        return Observation(code=raw["code"], **values)


def is_blank(line: Union[str, bytes]) -> bool:
    """True for lines holding nothing but whitespace"""
    return not line.strip()


def create_parser(delimiter: str = "\t", encoding: str = "utf-8") -> RecordParser:
    """
    Factory function to create a parser instance

    Args:
        delimiter: Field separator
        encoding: Encoding of raw byte lines

    Returns:
        RecordParser instance
    """
    return RecordParser(delimiter, encoding)

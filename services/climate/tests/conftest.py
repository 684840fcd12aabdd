"""
Pytest configuration and fixtures for climate service tests.
"""
import pytest

from climate.src.aggregator import ClimateAggregator
from climate.src.parser import RecordParser
from climate.src.registry import RegionRegistry


def _make_line(
    code="CA",
    timestamp=1428300000000,
    geolocation="9prcjqk3yc80",
    humidity=93.0,
    snow=0.0,
    cloud=100.0,
    lightning=0.0,
    pressure=95644.0,
    temperature=277.58716,
):
    """Build one tab-delimited observation line"""
    fields = [code, timestamp, geolocation, humidity, snow, cloud, lightning, pressure, temperature]
    return "\t".join(str(f) for f in fields) + "\n"


@pytest.fixture
def make_line():
    """Factory for tab-delimited observation lines"""
    return _make_line


@pytest.fixture
def parser():
    """Tab-delimited record parser"""
    return RecordParser()


@pytest.fixture
def registry():
    """Empty registry with default capacity"""
    return RegionRegistry()


@pytest.fixture
def aggregator(registry, parser):
    """Aggregator wired to the registry fixture"""
    return ClimateAggregator(registry, parser)


@pytest.fixture
def example_lines():
    """Two CA observations with known aggregate results"""
    return [
        "CA\t1000\thashA\t50\t0\t10\t0\t1000\t300.0\n",
        "CA\t2000\thashB\t60\t1\t20\t1\t1000\t310.0\n",
    ]


@pytest.fixture
def sample_tdv_lines():
    """Rows taken from a NOAA TDV extract"""
    return [
        "CA\t1428300000000\t9prcjqk3yc80\t93.0\t0.0\t100.0\t0.0\t95644.0\t277.58716\n",
        "CA\t1430308800000\t9prc9sgwvw80\t4.0\t0.0\t100.0\t0.0\t99226.0\t282.63037\n",
        "CA\t1428559200000\t9prrremmdqxb\t61.0\t0.0\t0.0\t0.0\t102112.0\t285.07513\n",
        "CA\t1428192000000\t9prkzkcdypgz\t57.0\t0.0\t100.0\t0.0\t101765.0\t285.21332\n",
        "CA\t1428170400000\t9prdd41tbzeb\t73.0\t0.0\t22.0\t0.0\t102074.0\t285.10425\n",
        "CA\t1429768800000\t9pr60tz83r2p\t38.0\t0.0\t0.0\t0.0\t101679.0\t283.9342\n",
        "CA\t1428127200000\t9prj93myxe80\t98.0\t0.0\t100.0\t0.0\t102343.0\t285.75\n",
        "CA\t1428408000000\t9pr49b49zs7z\t93.0\t0.0\t100.0\t0.0\t100645.0\t285.82413\n",
    ]


@pytest.fixture
def write_tdv(tmp_path):
    """Write lines to a TDV file under tmp_path and return its path"""
    def _write(name, lines):
        path = tmp_path / name
        path.write_text("".join(lines))
        return str(path)
    return _write

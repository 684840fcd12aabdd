"""
Pytest fixtures for end-to-end tests.

Provides fixtures for:
- Running the climate CLI as a subprocess
- Generating TDV input files
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest


PROJECT_ROOT = Path(__file__).parent.parent.parent
SERVICES_DIR = PROJECT_ROOT / "services"


@pytest.fixture
def run_cli():
    """Run the climate CLI with the given arguments and capture its output."""
    def _run(args: List[str], extra_env=None) -> subprocess.CompletedProcess:
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in [str(SERVICES_DIR), env.get("PYTHONPATH", "")] if p
        )
        env["TZ"] = "UTC"
        if extra_env:
            env.update(extra_env)
        return subprocess.run(
            [sys.executable, "-m", "climate.src.orchestrator", *args],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            env=env,
            timeout=60,
        )
    return _run


@pytest.fixture
def tdv_factory(tmp_path):
    """Write rows of fields to a tab-delimited file."""
    def _write(name: str, rows: List[List]) -> str:
        path = tmp_path / name
        path.write_text("".join("\t".join(str(f) for f in row) + "\n" for row in rows))
        return str(path)
    return _write


@pytest.fixture
def tn_rows():
    """Tennessee observations spanning a hot and a cold reading."""
    return [
        ["TN", 1424404800000, "dn6m7fq2v5tg", 80.0, 1, 90.0, 0, 101325.0, 249.15],
        ["TN", 1438599600000, "dn6m7fq2v5tg", 40.0, 0, 20.0, 1, 100900.0, 316.65],
        ["TN", 1430000000000, "dn6m7fq2v5tg", 60.0, 0, 50.0, 0, 101000.0, 290.0],
    ]


@pytest.fixture
def wa_rows():
    """Washington observations."""
    return [
        ["WA", 1435510800000, "c22yzv5b5fcd", 30.0, 0, 10.0, 0, 100500.0, 325.2],
        ["WA", 1451448000000, "c22yzv5b5fcd", 90.0, 1, 100.0, 0, 99800.0, 245.2],
    ]

"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jmeter_influx.lib.config import BackendListenerContext  # noqa: E402
from jmeter_influx.lib.models import SampleResult  # noqa: E402


@pytest.fixture
def make_result():
    """Factory for SampleResult objects with sensible defaults."""

    def _make(label="login", response_code="200", elapsed=150, all_threads=4, **kwargs):
        return SampleResult(
            label=label,
            response_code=response_code,
            elapsed=elapsed,
            all_threads=all_threads,
            **kwargs,
        )

    return _make


@pytest.fixture
def memory_context():
    """Listener parameters that route output to the in-memory sender."""
    return BackendListenerContext(
        {
            "metricsSenderImplementation": "memory",
            "endpointUrl": "memory://test",
            "application": "shop",
            "measurement": "jmeter",
            "samplersRegex": ".*",
            "testTitle": "Checkout",
        }
    )


@pytest.fixture
def sample_jtl(tmp_path):
    """A small CSV JTL file with four samples."""
    path = tmp_path / "results.jtl"
    path.write_text(
        "timeStamp,elapsed,label,responseCode,responseMessage,threadName,success,allThreads\n"
        "1700000000000,120,login,200,OK,tg 1-1,true,2\n"
        "1700000000100,340,checkout,200,OK,tg 1-2,true,4\n"
        "1700000000200,95,search,404,Not Found,tg 1-1,false,4\n"
        "1700000000300,210,checkout,500,Error,tg 1-3,false,6\n",
        encoding="utf-8",
    )
    return path

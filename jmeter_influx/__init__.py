"""JMeter results to InfluxDB line-protocol exporter.

This package provides a backend listener that turns sample results into
InfluxDB points, with start/end annotations and pluggable senders.

Usage:
    python -m jmeter_influx replay results.jtl --config listener.yaml
"""

from jmeter_influx.lib.config import BackendListenerContext, RunConfiguration
from jmeter_influx.lib.listener import InfluxBackendListenerClient
from jmeter_influx.lib.models import EncodedMetric, SampleResult

__version__ = "1.0.0"

__all__ = [
    "BackendListenerContext",
    "RunConfiguration",
    "InfluxBackendListenerClient",
    "EncodedMetric",
    "SampleResult",
]

"""Exporter library modules.

This package contains the encoding, mapping and lifecycle pieces of the
backend listener, plus the senders that deliver its output.
"""

from jmeter_influx.lib.aggregate import UserMetric
from jmeter_influx.lib.annotations import build_annotation
from jmeter_influx.lib.config import (
    BackendListenerContext,
    RESERVED_PARAMETERS,
    RunConfiguration,
    default_parameters,
)
from jmeter_influx.lib.config_loader import context_from_mapping, load_listener_context
from jmeter_influx.lib.encoding import encode_field_value, encode_tag_value
from jmeter_influx.lib.errors import (
    ConfigurationError,
    ConnectionError,
    ExporterError,
    LifecycleError,
    TransportError,
)
from jmeter_influx.lib.listener import (
    AbstractBackendListenerClient,
    InfluxBackendListenerClient,
    ListenerState,
)
from jmeter_influx.lib.mapper import map_result, map_results
from jmeter_influx.lib.models import ANNOTATION_MEASUREMENT, EncodedMetric, SampleResult
from jmeter_influx.lib.replay import ReplaySummary, run_replay
from jmeter_influx.lib.results import iter_batches, read_jtl
from jmeter_influx.lib.sample_filter import SampleFilter
from jmeter_influx.lib.senders import (
    HttpMetricsSender,
    MemoryMetricsSender,
    MetricsSender,
    UdpMetricsSender,
    create_sender,
    list_sender_types,
    register_sender,
)
from jmeter_influx.lib.user_tags import build_user_tag_string, extract_user_tags

__all__ = [
    "UserMetric",
    "build_annotation",
    "BackendListenerContext",
    "RESERVED_PARAMETERS",
    "RunConfiguration",
    "default_parameters",
    "context_from_mapping",
    "load_listener_context",
    "encode_field_value",
    "encode_tag_value",
    "ConfigurationError",
    "ConnectionError",
    "ExporterError",
    "LifecycleError",
    "TransportError",
    "AbstractBackendListenerClient",
    "InfluxBackendListenerClient",
    "ListenerState",
    "map_result",
    "map_results",
    "ANNOTATION_MEASUREMENT",
    "EncodedMetric",
    "SampleResult",
    "ReplaySummary",
    "run_replay",
    "iter_batches",
    "read_jtl",
    "SampleFilter",
    "HttpMetricsSender",
    "MemoryMetricsSender",
    "MetricsSender",
    "UdpMetricsSender",
    "create_sender",
    "list_sender_types",
    "register_sender",
    "build_user_tag_string",
    "extract_user_tags",
]

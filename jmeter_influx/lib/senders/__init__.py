"""Metrics senders: the sinks that deliver encoded points.

Senders are selected by the ``metricsSenderImplementation`` parameter:

    from jmeter_influx.lib.senders import create_sender

    sender = create_sender("http")
    sender.setup("http://influx:8086/write?db=jmeter")

Importing this package registers the built-in senders (http, udp, memory).
"""

from jmeter_influx.lib.senders.base import MetricsSender, MetricTuple
from jmeter_influx.lib.senders.registry import (
    SENDER_REGISTRY,
    create_sender,
    get_sender_class,
    list_sender_types,
    register_sender,
)
from jmeter_influx.lib.senders.http import HttpMetricsSender, HttpSenderConfig
from jmeter_influx.lib.senders.udp import UdpMetricsSender
from jmeter_influx.lib.senders.memory import MemoryMetricsSender

__all__ = [
    "MetricsSender",
    "MetricTuple",
    "SENDER_REGISTRY",
    "create_sender",
    "get_sender_class",
    "list_sender_types",
    "register_sender",
    "HttpMetricsSender",
    "HttpSenderConfig",
    "UdpMetricsSender",
    "MemoryMetricsSender",
]

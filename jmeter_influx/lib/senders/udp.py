"""UDP sender for InfluxDB's UDP listener."""

from __future__ import annotations

import logging
import socket
from typing import Optional, Tuple
from urllib.parse import urlparse

from jmeter_influx.lib.errors import ConnectionError, TransportError
from jmeter_influx.lib.senders.base import MetricsSender
from jmeter_influx.lib.senders.registry import register_sender

logger = logging.getLogger(__name__)

__all__ = ["UdpMetricsSender", "parse_udp_endpoint"]


def parse_udp_endpoint(endpoint: str) -> Tuple[str, int]:
    """Parse ``udp://host:port`` or ``host:port`` into (host, port).

    Raises:
        ValueError: If host or port is missing or the port is not a number
    """
    target = endpoint if "://" in endpoint else f"udp://{endpoint}"
    parsed = urlparse(target)
    if parsed.scheme != "udp":
        raise ValueError(f"unsupported scheme '{parsed.scheme}'")
    if not parsed.hostname or parsed.port is None:
        raise ValueError("expected host:port")
    return parsed.hostname, parsed.port


@register_sender("udp")
class UdpMetricsSender(MetricsSender):
    """Sends each flush as a single datagram of newline-separated lines."""

    def __init__(self, token: Optional[str] = None) -> None:
        super().__init__(token)
        self._address: Optional[Tuple[str, int]] = None
        self._socket: Optional[socket.socket] = None

    def _connect(self, endpoint: str) -> None:
        try:
            self._address = parse_udp_endpoint(endpoint or "")
        except ValueError as e:
            raise ConnectionError(
                f"Invalid UDP endpoint '{endpoint}': {e}",
                sender=self.name,
                endpoint=endpoint,
            ) from e
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def _send(self, body: str, count: int) -> None:
        if self._socket is None or self._address is None:
            raise TransportError("Sender used before setup", sender=self.name, endpoint=self.endpoint)
        try:
            self._socket.sendto(body.encode("utf-8"), self._address)
        except OSError as e:
            logger.error("Failed sending %d metrics over UDP: %s", count, e)
            raise TransportError(
                f"Could not send {count} metrics",
                sender=self.name,
                endpoint=self.endpoint,
                cause=e,
            ) from e

    def _close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
